"""NetworkX export of a processed topology.

Sites become nodes and every member link becomes its own keyed edge, so
parallel links between two sites stay distinguishable. The graph is directed
because edge keys are: a link listed ``(portA, portB)`` and one listed
``(portB, portA)`` end up on opposite arcs.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import networkx as nx

from sdxmap.model.snapshot import RawLink
from sdxmap.model.topology import Edge, ProcessedTopology
from sdxmap.transform.status import count_ports_down, is_link_down


def _default_link_attrs(edge: Edge, link: RawLink) -> Dict[str, Any]:
    return {
        "edge_key": edge.key,
        "name": link.name,
        "bandwidth": link.bandwidth,
        "residual_bandwidth": link.residual_bandwidth,
        "latency": link.latency,
        "packet_loss": link.packet_loss,
        "availability": link.availability,
        "status": link.status,
        "state": link.state,
        "down": is_link_down(link),
    }


def to_networkx(
    topology: ProcessedTopology,
    link_func: Optional[Callable[[Edge, RawLink], Dict[str, Any]]] = None,
) -> nx.MultiDiGraph:
    """Convert a processed topology to a NetworkX MultiDiGraph.

    Args:
        topology: Output of ``process_topology``.
        link_func: Optional callable ``(edge, link) -> attrs`` computing edge
            attributes; defaults to the link's measurements and status.

    Returns:
        Graph with one node per site (attributes ``latitude``, ``longitude``,
        ``devices``, ``ports_down``) and one edge per link keyed by link id.
    """
    attrs_for = link_func or _default_link_attrs
    graph = nx.MultiDiGraph()

    for region, site in topology.sites.items():
        graph.add_node(
            region,
            latitude=site.latitude,
            longitude=site.longitude,
            devices=[sub.id for sub in site.sub_nodes],
            ports_down=count_ports_down(site),
        )

    for edge in topology.edges_by_key.values():
        for link in edge.member_links:
            graph.add_edge(edge.source, edge.target, key=link.id, **attrs_for(edge, link))
    return graph
