"""Location-keyed topology produced by the transformation pipeline.

``ProcessedTopology`` is what the map renderer consumes: sites keyed by region
code and edges keyed by the directional ``"<regionA>-<regionB>"`` string. All
containers are plain insertion-ordered dicts and lists, rebuilt from scratch
on every run.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Tuple

from sdxmap.model.snapshot import RawLink, RawPort

# (latitude, longitude)
LatLng = Tuple[float, float]


@dataclass
class SubNode:
    """One device inside a site.

    Attributes:
        label: Display label (the device's location address).
        name: Device display name.
        id: Device identifier.
        ports: The device's ports, carried over unmodified.
    """

    label: str
    name: str = ""
    id: str = ""
    ports: List[RawPort] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "name": self.name,
            "id": self.id,
            "ports": [port.to_dict() for port in self.ports],
        }


@dataclass
class Site:
    """Devices sharing one region code, drawn as a single map marker.

    Attributes:
        region: Region code; the site's key.
        latitude: Latitude of the first device assigned to the region.
        longitude: Longitude of the first device assigned to the region.
        sub_nodes: Devices in assignment order.
    """

    region: str
    latitude: float = 0.0
    longitude: float = 0.0
    sub_nodes: List[SubNode] = field(default_factory=list)

    @property
    def coordinates(self) -> LatLng:
        return (self.latitude, self.longitude)

    def iter_ports(self):
        """Yield ``(sub_node, port)`` for every port in the site."""
        for sub_node in self.sub_nodes:
            for port in sub_node.ports:
                yield sub_node, port

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "sub_nodes": [sub.to_dict() for sub in self.sub_nodes],
        }


@dataclass(frozen=True)
class EdgeSegment:
    """A drawable polyline for one physical link.

    Attributes:
        link_id: Identifier of the link this segment represents.
        points: Endpoint coordinates in link port order.
    """

    link_id: str
    points: Tuple[LatLng, LatLng]


@dataclass
class Edge:
    """All links between one ordered pair of sites.

    Attributes:
        key: ``"<source>-<target>"``; not order-normalized.
        source: Region code of the site owning the link's first port.
        target: Region code of the site owning the link's second port.
        member_links: Contributing links in input order.
        segments: One segment per contributing link, same order.
    """

    key: str
    source: str
    target: str
    member_links: List[RawLink] = field(default_factory=list)
    segments: List[EdgeSegment] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        # Deferred: sdxmap.transform imports this module
        from sdxmap.transform.status import is_edge_degraded

        return is_edge_degraded(self.member_links)

    @property
    def coordinate_pairs(self) -> List[Tuple[LatLng, LatLng]]:
        return [segment.points for segment in self.segments]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "member_links": [link.to_dict() for link in self.member_links],
            "coordinate_pairs": [
                [list(a), list(b)] for a, b in self.coordinate_pairs
            ],
            "link_ids": [segment.link_id for segment in self.segments],
            "degraded": self.degraded,
        }


@dataclass
class ProcessingStats:
    """Diagnostic counters for one pipeline run.

    Nothing here changes the output; the counters let operators see why a map
    shows fewer sites or edges than expected.
    """

    nodes_in: int = 0
    nodes_after_domain_filter: int = 0
    nodes_without_region: int = 0
    sites: int = 0
    indexed_ports: int = 0
    duplicate_ports: int = 0
    links_in: int = 0
    links_without_ports: int = 0
    links_unresolved: int = 0
    links_resolved: int = 0
    edges: int = 0
    malformed: bool = False
    issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProcessedTopology:
    """Pipeline output handed to the map renderer.

    Attributes:
        sites: Region code -> site, in first-seen order.
        edges_by_key: Edge key -> edge, in first-seen order.
        stats: Diagnostic counters for the run.
    """

    sites: Dict[str, Site] = field(default_factory=dict)
    edges_by_key: Dict[str, Edge] = field(default_factory=dict)
    stats: ProcessingStats = field(default_factory=ProcessingStats)

    def to_dict(self, include_stats: bool = True) -> Dict[str, Any]:
        """Return JSON-safe primitives."""
        data: Dict[str, Any] = {
            "sites": {region: site.to_dict() for region, site in self.sites.items()},
            "edges_by_key": {
                key: edge.to_dict() for key, edge in self.edges_by_key.items()
            },
        }
        if include_stats:
            data["stats"] = self.stats.to_dict()
        return data
