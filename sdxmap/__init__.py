"""sdxmap: network topology snapshots as geographic site maps.

sdxmap turns a flat topology snapshot (devices, their ports and the links
between them, addressed only by port identifiers) into a location-keyed graph:
sites grouped by region code and edges aggregated per ordered site pair, with
port and link health derived for drill-down views.

Primary API:
    process_topology() - Run the full transformation pipeline
    ProcessedTopology - Sites, edges and per-run diagnostics
    to_map_view() - Markers and connections for a map renderer
    TopologyClient - Fetch a snapshot from the topology API
    MapConfig, load_config() - Configuration

Example:
    from sdxmap import process_topology, to_map_view

    topology = process_topology(snapshot, ["ampath.net"])
    for key, edge in topology.edges_by_key.items():
        print(key, len(edge.member_links), edge.degraded)
    view = to_map_view(topology)
"""

from __future__ import annotations

from sdxmap import cli, logging
from sdxmap._version import __version__
from sdxmap.config import MapConfig, load_config
from sdxmap.errors import ConfigError, SdxMapError, TopologySourceError
from sdxmap.graph import to_networkx
from sdxmap.io import dumps_geojson, dumps_topology, to_geojson
from sdxmap.mapview import (
    MapConnection,
    MapMarker,
    MapView,
    filter_links,
    filter_ports,
    to_map_view,
)
from sdxmap.model.snapshot import (
    RawLink,
    RawNode,
    RawPort,
    Snapshot,
    normalize_snapshot,
    unwrap_envelope,
)
from sdxmap.model.topology import Edge, ProcessedTopology, Site, SubNode
from sdxmap.schema import validate_snapshot
from sdxmap.source import TopologyClient, load_snapshot_file
from sdxmap.transform import (
    PortIndex,
    is_edge_degraded,
    is_link_down,
    is_port_down,
    process_topology,
)

__all__ = [
    # Version
    "__version__",
    # Pipeline
    "process_topology",
    "PortIndex",
    "is_port_down",
    "is_link_down",
    "is_edge_degraded",
    # Model
    "RawNode",
    "RawPort",
    "RawLink",
    "Snapshot",
    "normalize_snapshot",
    "unwrap_envelope",
    "Site",
    "SubNode",
    "Edge",
    "ProcessedTopology",
    # Renderer-facing views and exports
    "MapView",
    "MapMarker",
    "MapConnection",
    "to_map_view",
    "filter_ports",
    "filter_links",
    "to_networkx",
    "to_geojson",
    "dumps_geojson",
    "dumps_topology",
    # Topology source and configuration
    "TopologyClient",
    "load_snapshot_file",
    "validate_snapshot",
    "MapConfig",
    "load_config",
    # Errors
    "SdxMapError",
    "ConfigError",
    "TopologySourceError",
    # Utilities
    "cli",
    "logging",
]
