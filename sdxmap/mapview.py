"""Renderer-facing view of a processed topology.

Turns sites into markers and edge segments into connections, and provides the
free-text search used by the per-site port and per-edge link drill-downs.
Nothing here draws; a map front end consumes these records as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional, Tuple

from sdxmap.model.topology import LatLng, ProcessedTopology, Site, SubNode
from sdxmap.transform.status import count_ports_down

ConnectionStatus = Literal["active", "down"]

UNKNOWN_CITY = "Unknown"
CONNECTION_TYPE = "L2VPN"


@dataclass
class MapMarker:
    """One site marker.

    Attributes:
        id: Region code.
        name: Region code (markers are labelled by region).
        city: Label of the first device in the site, or ``"Unknown"``.
        coordinates: Site coordinates.
        status: Always ``"active"``; port health is reported via ``ports_down``.
        connections: Number of devices in the site.
        ports_down: Number of down ports across the site.
        sub_nodes: Devices for the port drill-down.
    """

    id: str
    name: str
    city: str
    coordinates: LatLng
    status: str = "active"
    connections: int = 0
    ports_down: int = 0
    sub_nodes: List[SubNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "coordinates": list(self.coordinates),
            "status": self.status,
            "connections": self.connections,
            "ports_down": self.ports_down,
            "labels": [sub.label for sub in self.sub_nodes],
        }


@dataclass
class MapConnection:
    """One polyline, drawn per physical link.

    Attributes:
        id: Link identifier (targets tooltips and popups).
        name: Edge key the link belongs to.
        source: Source region code.
        target: Target region code.
        type: Connection type label.
        status: ``"down"`` if the whole edge is degraded, else ``"active"``.
        path: Endpoint coordinates.
    """

    id: str
    name: str
    source: str
    target: str
    type: str
    status: ConnectionStatus
    path: Tuple[LatLng, LatLng]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "status": self.status,
            "path": [list(point) for point in self.path],
        }


@dataclass
class MapView:
    markers: List[MapMarker] = field(default_factory=list)
    connections: List[MapConnection] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "markers": [marker.to_dict() for marker in self.markers],
            "connections": [conn.to_dict() for conn in self.connections],
        }


def site_marker(site: Site) -> MapMarker:
    city = site.sub_nodes[0].label if site.sub_nodes else ""
    return MapMarker(
        id=site.region,
        name=site.region,
        city=city or UNKNOWN_CITY,
        coordinates=site.coordinates,
        connections=len(site.sub_nodes),
        ports_down=count_ports_down(site),
        sub_nodes=site.sub_nodes,
    )


def to_map_view(topology: ProcessedTopology) -> MapView:
    """Convert a processed topology into markers and connections.

    Connection endpoints come from the edge itself. Region codes such as
    ``US-FL`` contain the key separator, so the key is never split.
    """
    view = MapView()
    for site in topology.sites.values():
        view.markers.append(site_marker(site))

    for edge in topology.edges_by_key.values():
        status: ConnectionStatus = "down" if edge.degraded else "active"
        for segment in edge.segments:
            view.connections.append(
                MapConnection(
                    id=segment.link_id,
                    name=edge.key,
                    source=edge.source,
                    target=edge.target,
                    type=CONNECTION_TYPE,
                    status=status,
                    path=segment.points,
                )
            )
    return view


@dataclass
class PortRow:
    """A port as listed in a site's drill-down, tagged with its device label."""

    location: str
    port: Any


def _search_text(*values: Any) -> str:
    return " ".join("" if value is None else str(value) for value in values).lower()


def _get(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def filter_ports(site: Site, term: Optional[str] = None) -> List[PortRow]:
    """List the site's ports matching a case-insensitive search term.

    The term is matched against the device label and the port's id, name,
    node, type, status and state. An empty term returns every port.
    """
    needle = (term or "").lower()
    rows: List[PortRow] = []
    for sub_node, port in site.iter_ports():
        text = _search_text(
            sub_node.label,
            _get(port, "id"),
            _get(port, "name"),
            _get(port, "node"),
            _get(port, "type"),
            _get(port, "status"),
            _get(port, "state"),
        )
        if needle in text:
            rows.append(PortRow(location=sub_node.label, port=port))
    return rows


def filter_links(links: Iterable[Any], term: Optional[str] = None) -> List[Any]:
    """Return links whose id, name, bandwidth, type, status or state match."""
    needle = (term or "").lower()
    matched = []
    for link in links:
        link_type = _get(link, "type")
        if link_type is None:
            attrs = _get(link, "attrs") or {}
            link_type = attrs.get("type")
        text = _search_text(
            _get(link, "id"),
            _get(link, "name"),
            _get(link, "bandwidth"),
            link_type,
            _get(link, "status"),
            _get(link, "state"),
        )
        if needle in text:
            matched.append(link)
    return matched
