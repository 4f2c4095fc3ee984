"""Reverse index from port identifier to the site that owns it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from sdxmap.logging import get_logger
from sdxmap.model.topology import LatLng, Site

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PortLocation:
    """Where a port lives on the map.

    Attributes:
        region: Region code of the owning site.
        latitude: Site latitude.
        longitude: Site longitude.
    """

    region: str
    latitude: float
    longitude: float

    @property
    def coordinates(self) -> LatLng:
        return (self.latitude, self.longitude)


class PortIndex:
    """Hash index of port id -> :class:`PortLocation`.

    Built in a single pass over sites, sub-nodes and ports in their stored
    order. When a port id appears more than once the first occurrence wins;
    later ones are counted in ``duplicates`` and otherwise ignored.
    """

    def __init__(self) -> None:
        self._locations: Dict[str, PortLocation] = {}
        self.duplicates: int = 0

    @classmethod
    def build(
        cls, sites: Mapping[str, Site], logger: Optional[logging.Logger] = None
    ) -> "PortIndex":
        """Index every identified port of every site.

        Args:
            sites: Region code -> site, as produced by ``aggregate_locations``.
            logger: Diagnostics sink; defaults to this module's logger.

        Returns:
            A populated index.
        """
        log = logger or LOGGER
        index = cls()
        for region, site in sites.items():
            location = PortLocation(region, site.latitude, site.longitude)
            for sub_node, port in site.iter_ports():
                if not port.id:
                    continue
                owner = index._locations.get(port.id)
                if owner is None:
                    index._locations[port.id] = location
                    continue
                index.duplicates += 1
                log.debug(
                    "Port '%s' on '%s' already indexed under site '%s'; keeping first",
                    port.id,
                    sub_node.id,
                    owner.region,
                )
        return index

    def lookup(self, port_id: str) -> Optional[PortLocation]:
        """Return the owning site's location, or None if the port is unknown."""
        if not port_id:
            return None
        return self._locations.get(port_id)

    def __contains__(self, port_id: object) -> bool:
        return port_id in self._locations

    def __len__(self) -> int:
        return len(self._locations)
