"""Resolution of raw links onto sites and grouping into map edges."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from sdxmap.logging import get_logger
from sdxmap.model.snapshot import RawLink
from sdxmap.model.topology import Edge, EdgeSegment, LatLng
from sdxmap.transform.port_index import PortIndex

LOGGER = get_logger(__name__)


def edge_key(source: str, target: str) -> str:
    """Return the canonical key for a site pair, in the order given."""
    return f"{source}-{target}"


@dataclass(frozen=True)
class EdgeDescriptor:
    """A link whose two endpoints both resolved to sites.

    Attributes:
        key: ``edge_key(source, target)``.
        source: Region owning ``link.ports[0]``.
        target: Region owning ``link.ports[1]``.
        points: Coordinates of source and target sites.
        link: The original link record.
    """

    key: str
    source: str
    target: str
    points: Tuple[LatLng, LatLng]
    link: RawLink


@dataclass
class ResolveStats:
    without_ports: int = 0
    unresolved: int = 0
    resolved: int = 0


def resolve_links(
    links: Iterable[RawLink],
    index: PortIndex,
    stats: Optional[ResolveStats] = None,
    logger: Optional[logging.Logger] = None,
) -> Iterator[EdgeDescriptor]:
    """Yield an edge descriptor for every link whose endpoints both resolve.

    Only the first two port references are considered. Links with fewer than
    two references, or with a reference that is not in ``index``, are dropped.

    Args:
        links: Links in source order.
        index: Port index built from the current run's sites.
        stats: Optional counters updated while iterating.
        logger: Diagnostics sink; defaults to this module's logger.
    """
    log = logger or LOGGER
    stats = stats if stats is not None else ResolveStats()

    for link in links:
        if len(link.ports) < 2:
            stats.without_ports += 1
            log.debug("Skipping link '%s': fewer than two ports", link.id)
            continue

        first = index.lookup(link.ports[0])
        second = index.lookup(link.ports[1])
        if first is None or second is None:
            stats.unresolved += 1
            missing = [ref for ref in link.ports[:2] if index.lookup(ref) is None]
            log.debug("Dropping link '%s': unresolved port(s) %s", link.id, missing)
            continue

        stats.resolved += 1
        yield EdgeDescriptor(
            key=edge_key(first.region, second.region),
            source=first.region,
            target=second.region,
            points=(first.coordinates, second.coordinates),
            link=link,
        )


def aggregate_links(descriptors: Iterable[EdgeDescriptor]) -> Dict[str, Edge]:
    """Group edge descriptors by key.

    A new key creates an edge; a repeated key appends the link and its segment
    to the existing edge. Nothing is ever overwritten.

    Returns:
        Edge key -> edge, in first-seen order.
    """
    edges: Dict[str, Edge] = {}
    for descriptor in descriptors:
        edge = edges.get(descriptor.key)
        if edge is None:
            edge = Edge(
                key=descriptor.key, source=descriptor.source, target=descriptor.target
            )
            edges[descriptor.key] = edge
        edge.member_links.append(descriptor.link)
        edge.segments.append(EdgeSegment(descriptor.link.id, descriptor.points))
    return edges
