"""Utilities for building CLI artifact output paths.

Paths are built from an optional output directory, a prefix (derived from the
snapshot file, or ``topology`` for fetched snapshots), and a per-artifact
suffix.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

FETCH_PREFIX = "topology"

RESULTS_SUFFIX = ".topology.json"
GEOJSON_SUFFIX = ".geojson"
SNAPSHOT_SUFFIX = ".snapshot.json"


def snapshot_prefix_from_path(snapshot_path: Optional[Path]) -> str:
    """Return the filename stem of a snapshot file, or ``topology``.

    Args:
        snapshot_path: The snapshot JSON path; None for fetched snapshots.

    Returns:
        The prefix used for derived artifacts.
    """
    if snapshot_path is None:
        return FETCH_PREFIX
    return snapshot_path.stem


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory exists for a file path."""
    path.parent.mkdir(parents=True, exist_ok=True)


def build_artifact_path(output_dir: Optional[Path], prefix: str, suffix: str) -> Path:
    """Compose an artifact path as output_dir / (prefix + suffix).

    If ``output_dir`` is None, the path is relative to the current working
    directory.
    """
    base = output_dir if output_dir is not None else Path.cwd()
    return base / f"{prefix}{suffix}"


def resolve_override_path(
    override: Optional[Path], output_dir: Optional[Path]
) -> Optional[Path]:
    """Resolve an override path with respect to an optional output directory.

    - Absolute override paths are returned as-is.
    - Relative override paths are interpreted as relative to ``output_dir``
      when provided; otherwise relative to the current working directory.
    """
    if override is None:
        return None
    if override.is_absolute():
        return override
    if output_dir is not None:
        return (output_dir / override).resolve()
    return override


def artifact_path_for_run(
    snapshot_path: Optional[Path],
    output_dir: Optional[Path],
    override: Optional[Path],
    suffix: str,
) -> Path:
    """Determine where a run artifact should be written.

    Behavior:
    - If ``override`` is provided, return it (resolved relative to
      ``output_dir`` when that is specified, otherwise as-is).
    - Else if ``output_dir`` is provided, return ``output_dir/<prefix><suffix>``.
    - Else, return ``<prefix><suffix>`` in the current working directory.

    Args:
        snapshot_path: Snapshot file the run read, or None for a fetch.
        output_dir: Optional base output directory.
        override: Optional explicit file path.
        suffix: Artifact suffix including the dot.

    Returns:
        The path where the artifact should be written.
    """
    resolved_override = resolve_override_path(override, output_dir)
    if resolved_override is not None:
        return resolved_override

    prefix = snapshot_prefix_from_path(snapshot_path)
    if output_dir is not None:
        return build_artifact_path(output_dir, prefix, suffix)
    return Path(f"{prefix}{suffix}")
