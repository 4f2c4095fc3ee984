"""End-to-end transformation of a raw snapshot into a map topology.

Stages run strictly forward::

    normalize -> domain filter -> location aggregation -> port index
              -> link resolution -> link aggregation

Every call allocates fresh output and mutates nothing it was given, so the
function is safe to call repeatedly (manual refresh, periodic poll). Callers
should swap in the returned topology only after the call completes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sdxmap.logging import get_logger
from sdxmap.model.snapshot import normalize_snapshot
from sdxmap.model.topology import ProcessedTopology, ProcessingStats
from sdxmap.transform.domain_filter import filter_nodes_by_domain, normalize_domains
from sdxmap.transform.links import ResolveStats, aggregate_links, resolve_links
from sdxmap.transform.locations import aggregate_locations
from sdxmap.transform.port_index import PortIndex

LOGGER = get_logger(__name__)


def process_topology(
    snapshot: Any,
    allowed_domains: Optional[Sequence[str]] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> ProcessedTopology:
    """Build sites and edges from a raw topology snapshot.

    Data problems never raise. Nodes without a region code and links whose
    ports do not both resolve are omitted; missing coordinates default to 0; a
    snapshot that is not a mapping produces an empty topology with
    ``stats.malformed`` set and an error logged.

    Args:
        snapshot: Parsed JSON ``{"nodes": [...], "links": [...]}`` or a
            normalized ``Snapshot``.
        allowed_domains: Domain substrings to keep; empty or None keeps all.
        logger: Diagnostics sink; defaults to the ``sdxmap.transform`` logger.

    Returns:
        The processed topology with per-run diagnostic counters.
    """
    log = logger or LOGGER
    stats = ProcessingStats()

    normalized = normalize_snapshot(snapshot, logger=log)
    stats.issues = list(normalized.issues)
    if normalized.malformed:
        stats.malformed = True
        log.error("Invalid topology snapshot: %s", "; ".join(normalized.issues))
        return ProcessedTopology(stats=stats)
    for issue in normalized.issues:
        log.warning("Topology snapshot: %s", issue)

    domains = normalize_domains(allowed_domains, logger=log)

    stats.nodes_in = len(normalized.nodes)
    nodes = filter_nodes_by_domain(normalized.nodes, domains, logger=log)
    stats.nodes_after_domain_filter = len(nodes)

    sites = aggregate_locations(nodes, logger=log)
    stats.nodes_without_region = sum(1 for node in nodes if node.partial)
    stats.sites = len(sites)

    index = PortIndex.build(sites, logger=log)
    stats.indexed_ports = len(index)
    stats.duplicate_ports = index.duplicates

    resolve_stats = ResolveStats()
    stats.links_in = len(normalized.links)
    edges = aggregate_links(
        resolve_links(normalized.links, index, stats=resolve_stats, logger=log)
    )
    stats.links_without_ports = resolve_stats.without_ports
    stats.links_unresolved = resolve_stats.unresolved
    stats.links_resolved = resolve_stats.resolved
    stats.edges = len(edges)

    if stats.nodes_without_region:
        log.info(
            "%d node(s) without region code omitted from the map",
            stats.nodes_without_region,
        )
    if stats.duplicate_ports:
        log.warning(
            "%d duplicate port id(s); first occurrence kept", stats.duplicate_ports
        )
    if stats.links_unresolved or stats.links_without_ports:
        log.info(
            "%d link(s) omitted: %d unresolved, %d with fewer than two ports",
            stats.links_unresolved + stats.links_without_ports,
            stats.links_unresolved,
            stats.links_without_ports,
        )
    log.debug(
        "Processed topology: %d/%d nodes, %d sites, %d/%d links, %d edges",
        stats.nodes_after_domain_filter,
        stats.nodes_in,
        stats.sites,
        stats.links_resolved,
        stats.links_in,
        stats.edges,
    )

    return ProcessedTopology(sites=sites, edges_by_key=edges, stats=stats)
