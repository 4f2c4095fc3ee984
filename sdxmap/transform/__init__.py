"""Transformation pipeline from raw snapshot to map topology."""

from __future__ import annotations

from sdxmap.transform.domain_filter import filter_nodes_by_domain, normalize_domains
from sdxmap.transform.links import (
    EdgeDescriptor,
    aggregate_links,
    edge_key,
    resolve_links,
)
from sdxmap.transform.locations import aggregate_locations
from sdxmap.transform.port_index import PortIndex, PortLocation
from sdxmap.transform.process import process_topology
from sdxmap.transform.status import (
    count_ports_down,
    is_edge_degraded,
    is_link_down,
    is_port_down,
)

__all__ = [
    "filter_nodes_by_domain",
    "normalize_domains",
    "aggregate_locations",
    "PortIndex",
    "PortLocation",
    "EdgeDescriptor",
    "edge_key",
    "resolve_links",
    "aggregate_links",
    "process_topology",
    "is_port_down",
    "is_link_down",
    "is_edge_degraded",
    "count_ports_down",
]
