"""Snapshot and topology data model."""

from __future__ import annotations

from sdxmap.model.snapshot import (
    Location,
    RawLink,
    RawNode,
    RawPort,
    Snapshot,
    normalize_snapshot,
    unwrap_envelope,
)
from sdxmap.model.topology import (
    Edge,
    EdgeSegment,
    ProcessedTopology,
    ProcessingStats,
    Site,
    SubNode,
)

__all__ = [
    "Location",
    "RawPort",
    "RawNode",
    "RawLink",
    "Snapshot",
    "normalize_snapshot",
    "unwrap_envelope",
    "SubNode",
    "Site",
    "EdgeSegment",
    "Edge",
    "ProcessingStats",
    "ProcessedTopology",
]
