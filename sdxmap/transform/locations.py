"""Grouping of nodes into per-region sites."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from sdxmap.logging import get_logger
from sdxmap.model.snapshot import RawNode
from sdxmap.model.topology import Site, SubNode

LOGGER = get_logger(__name__)


def aggregate_locations(
    nodes: Iterable[RawNode], logger: Optional[logging.Logger] = None
) -> Dict[str, Site]:
    """Group nodes into sites keyed by region code.

    Nodes without a location or with an empty region code are skipped. The
    first node seen for a region fixes the site's coordinates; later nodes in
    the same region only add a sub-node. Ports are attached as-is.

    Args:
        nodes: Domain-filtered nodes.
        logger: Diagnostics sink; defaults to this module's logger.

    Returns:
        Region code -> site, in first-seen order.
    """
    log = logger or LOGGER
    sites: Dict[str, Site] = {}

    for node in nodes:
        if node.location is None or not node.location.region:
            log.debug("Skipping node '%s': no region code", node.id)
            continue

        location = node.location
        site = sites.get(location.region)
        if site is None:
            site = Site(
                region=location.region,
                latitude=location.latitude,
                longitude=location.longitude,
            )
            sites[location.region] = site

        site.sub_nodes.append(
            SubNode(label=location.address, name=node.name, id=node.id, ports=node.ports)
        )

    return sites
