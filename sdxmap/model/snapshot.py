"""Raw topology snapshot records and the input boundary normalizer.

The topology source hands over loosely shaped JSON: optional location
records, optional port lists, measurements that may be missing or strings.
``normalize_snapshot`` resolves all of that once, at the edge, into the typed
records below. Downstream stages only read non-optional fields.

Each record keeps the mapping it was built from in ``attrs`` so that the
renderer and the detail tables see exactly what the source sent.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sdxmap.logging import get_logger

LOGGER = get_logger(__name__)

# Envelope keys produced by the backend proxy around the raw snapshot
ENVELOPE_KEYS = {"success", "data"}


def _as_str(value: Any) -> str:
    """Return ``value`` as a string; ``None`` and containers become ``""``."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        try:
            return str(value)
        except ValueError:
            # int beyond the interpreter's digit limit for str()
            return ""
    return ""


def _as_float(value: Any, default: Optional[float]) -> Optional[float]:
    """Coerce a JSON scalar to a finite float, falling back to ``default``."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


@dataclass
class Location:
    """Physical placement of a node.

    Attributes:
        latitude: Latitude in degrees (0.0 when the source omitted it).
        longitude: Longitude in degrees (0.0 when the source omitted it).
        address: Postal address text, used as the sub-node label.
        region: ISO 3166-2 subdivision code; empty when absent.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    address: str = ""
    region: str = ""


@dataclass
class RawPort:
    """An addressable interface on a device.

    Attributes:
        id: Port identifier, unique across the whole snapshot.
        name: Display name.
        node: Identifier of the owning node as reported by the source.
        type: Free-form type tag.
        status: Operational status ("up" or anything else).
        state: Administrative state ("enabled"/"disabled").
        entities: Owning organizations.
        attrs: The source mapping, unmodified.
    """

    id: str
    name: str = ""
    node: str = ""
    type: str = ""
    status: str = ""
    state: str = ""
    entities: List[Any] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        """A port without an id can never be referenced by a link."""
        return not self.id

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "node": self.node,
            "type": self.type,
            "status": self.status,
            "state": self.state,
            "entities": list(self.entities),
        }
        data.update(self.attrs)
        return data


@dataclass
class RawNode:
    """A device as reported by the topology source.

    Attributes:
        id: Domain-qualified identifier (e.g. ``urn:sdx:node:ampath.net:1``).
        name: Display name.
        location: Placement record, or ``None`` when the source sent none.
        ports: Ports in source order.
        attrs: The source mapping, unmodified.
    """

    id: str
    name: str = ""
    location: Optional[Location] = None
    ports: List[RawPort] = field(default_factory=list)
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def region(self) -> str:
        return self.location.region if self.location is not None else ""

    @property
    def label(self) -> str:
        return self.location.address if self.location is not None else ""

    @property
    def partial(self) -> bool:
        """True when the node cannot be placed on the map."""
        return not self.region


@dataclass
class RawLink:
    """A physical link between two ports.

    Attributes:
        id: Link identifier.
        name: Optional display name.
        ports: Port identifiers in source order; only the first two matter.
        bandwidth: Nominal bandwidth, if reported.
        residual_bandwidth: Unused bandwidth, if reported.
        latency: Latency, if reported.
        packet_loss: Packet loss, if reported.
        availability: Availability, if reported.
        status: Operational status ("up" or anything else).
        state: Administrative state.
        attrs: The source mapping, unmodified.
    """

    id: str
    name: str = ""
    ports: List[str] = field(default_factory=list)
    bandwidth: Optional[float] = None
    residual_bandwidth: Optional[float] = None
    latency: Optional[float] = None
    packet_loss: Optional[float] = None
    availability: Optional[float] = None
    status: str = ""
    state: str = ""
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return len(self.ports) < 2

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "ports": list(self.ports),
            "bandwidth": self.bandwidth,
            "residual_bandwidth": self.residual_bandwidth,
            "latency": self.latency,
            "packet_loss": self.packet_loss,
            "availability": self.availability,
            "status": self.status,
            "state": self.state,
        }
        data.update(self.attrs)
        return data


@dataclass
class Snapshot:
    """Normalized topology snapshot.

    Attributes:
        nodes: Nodes that were mappings in the source.
        links: Links that were mappings in the source.
        malformed: True when the top-level value was not a mapping at all.
        issues: Human-readable notes about every repair made at the boundary.
    """

    nodes: List[RawNode] = field(default_factory=list)
    links: List[RawLink] = field(default_factory=list)
    malformed: bool = False
    issues: List[str] = field(default_factory=list)


def unwrap_envelope(payload: Any) -> Any:
    """Return the snapshot inside a ``{success, data, timestamp}`` envelope.

    Payloads that are not wrapped are returned unchanged.
    """
    if isinstance(payload, Mapping) and ENVELOPE_KEYS.issubset(payload.keys()):
        return payload["data"]
    return payload


def normalize_location(data: Any) -> Optional[Location]:
    if not isinstance(data, Mapping):
        return None
    region = data.get("iso3166_2_lvl4")
    return Location(
        latitude=_as_float(data.get("latitude"), 0.0),
        longitude=_as_float(data.get("longitude"), 0.0),
        address=_as_str(data.get("address")),
        region=region if isinstance(region, str) else "",
    )


def normalize_port(data: Mapping[str, Any]) -> RawPort:
    entities = data.get("entities")
    return RawPort(
        id=_as_str(data.get("id")),
        name=_as_str(data.get("name")),
        node=_as_str(data.get("node")),
        type=_as_str(data.get("type")),
        status=_as_str(data.get("status")),
        state=_as_str(data.get("state")),
        entities=list(entities) if isinstance(entities, list) else [],
        attrs=dict(data),
    )


def normalize_node(data: Mapping[str, Any], issues: List[str]) -> RawNode:
    node_id = _as_str(data.get("id"))
    ports: List[RawPort] = []
    raw_ports = data.get("ports")
    if isinstance(raw_ports, list):
        for idx, entry in enumerate(raw_ports):
            if not isinstance(entry, Mapping):
                issues.append(f"node '{node_id}': port #{idx} is not a mapping")
                continue
            port = normalize_port(entry)
            if port.partial:
                issues.append(f"node '{node_id}': port #{idx} has no id")
            ports.append(port)
    elif raw_ports is not None:
        issues.append(f"node '{node_id}': 'ports' is not a list")

    return RawNode(
        id=node_id,
        name=_as_str(data.get("name")),
        location=normalize_location(data.get("location")),
        ports=ports,
        attrs=dict(data),
    )


def normalize_link(data: Mapping[str, Any], issues: List[str]) -> RawLink:
    link_id = _as_str(data.get("id"))
    raw_ports = data.get("ports")
    if isinstance(raw_ports, (list, tuple)):
        # Unusable references become "" so that positions stay meaningful
        ports = [_as_str(ref) for ref in raw_ports]
    else:
        if raw_ports is not None:
            issues.append(f"link '{link_id}': 'ports' is not a list")
        ports = []

    return RawLink(
        id=link_id,
        name=_as_str(data.get("name")),
        ports=ports,
        bandwidth=_as_float(data.get("bandwidth"), None),
        residual_bandwidth=_as_float(data.get("residual_bandwidth"), None),
        latency=_as_float(data.get("latency"), None),
        packet_loss=_as_float(data.get("packet_loss"), None),
        availability=_as_float(data.get("availability"), None),
        status=_as_str(data.get("status")),
        state=_as_str(data.get("state")),
        attrs=dict(data),
    )


def _entries(data: Mapping[str, Any], key: str, issues: List[str]) -> List[Mapping]:
    value = data.get(key)
    if value is None:
        issues.append(f"'{key}' is missing; treated as empty")
        return []
    if not isinstance(value, list):
        issues.append(
            f"'{key}' is {type(value).__name__}, expected a list; treated as empty"
        )
        return []
    entries: List[Mapping] = []
    for idx, entry in enumerate(value):
        if isinstance(entry, Mapping):
            entries.append(entry)
        else:
            issues.append(f"{key}[{idx}] is not a mapping; dropped")
    return entries


def normalize_snapshot(
    data: Any, logger: Optional[logging.Logger] = None
) -> Snapshot:
    """Validate a raw snapshot once and return typed records.

    Never raises. A value that is not a mapping yields an empty snapshot
    flagged ``malformed``; missing or mistyped ``nodes``/``links`` containers
    become empty lists. Every repair is recorded in ``Snapshot.issues``.

    Args:
        data: Parsed JSON from the topology source, or a ``Snapshot``.
        logger: Diagnostics sink; defaults to this module's logger.

    Returns:
        Normalized snapshot.
    """
    log = logger or LOGGER
    if isinstance(data, Snapshot):
        return data

    if not isinstance(data, Mapping):
        issue = f"snapshot is {type(data).__name__}, expected a mapping"
        log.debug("Malformed snapshot: %s", issue)
        return Snapshot(malformed=True, issues=[issue])

    issues: List[str] = []
    nodes = [normalize_node(entry, issues) for entry in _entries(data, "nodes", issues)]
    links = [normalize_link(entry, issues) for entry in _entries(data, "links", issues)]

    if issues:
        log.debug("Snapshot normalized with %d issue(s)", len(issues))
    return Snapshot(nodes=nodes, links=links, issues=issues)
