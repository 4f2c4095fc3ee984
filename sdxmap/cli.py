"""Command-line interface for sdxmap."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from sdxmap.config import MapConfig, load_config
from sdxmap.errors import SdxMapError
from sdxmap.io import dumps_geojson, dumps_topology
from sdxmap.logging import configure_cli_logging, get_logger
from sdxmap.mapview import site_marker
from sdxmap.model.topology import ProcessedTopology
from sdxmap.schema import validate_snapshot
from sdxmap.source import TopologyClient, load_snapshot_file
from sdxmap.tables import link_table, port_table
from sdxmap.transform import process_topology
from sdxmap.utils.output_paths import (
    GEOJSON_SUFFIX,
    RESULTS_SUFFIX,
    SNAPSHOT_SUFFIX,
    artifact_path_for_run,
    ensure_parent_dir,
)

logger = get_logger(__name__)

# Lint messages shown before "... and N more"
MAX_LINT_LINES = 20


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 6,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width
        max_col_width: Clip cells longer than this, using an ASCII ellipsis

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = []
    for col_idx in range(len(clipped_headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in clipped_rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return grammatically correct unit for count n."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _load_effective_config(path: Optional[Path]) -> MapConfig:
    config = load_config(path) if path is not None else MapConfig()
    return config.apply_env()


def _resolve_domains(args: argparse.Namespace, config: MapConfig) -> List[str]:
    """Command-line domains override the config; ``--all-domains`` disables."""
    if getattr(args, "all_domains", False):
        return []
    if getattr(args, "domain", None):
        return list(args.domain)
    return list(config.allowed_domains)


def _overview_rows(topology: ProcessedTopology) -> List[List[str]]:
    stats = topology.stats
    degraded = sum(1 for edge in topology.edges_by_key.values() if edge.degraded)
    omitted_links = stats.links_unresolved + stats.links_without_ports
    return [
        ["Nodes", f"{stats.nodes_after_domain_filter:,} of {stats.nodes_in:,} in allowed domains"],
        ["Sites", f"{stats.sites:,} ({stats.nodes_without_region:,} nodes without region)"],
        ["Ports", f"{stats.indexed_ports:,} indexed ({stats.duplicate_ports:,} duplicate ids)"],
        ["Links", f"{stats.links_resolved:,} drawn, {omitted_links:,} omitted"],
        ["Edges", f"{stats.edges:,} ({degraded:,} degraded)"],
    ]


def _print_overview(topology: ProcessedTopology) -> None:
    print("\nOVERVIEW")
    print("-" * 30)
    print(_format_table(["Metric", "Value"], _overview_rows(topology), max_col_width=64))


def _print_sites(topology: ProcessedTopology, detail: bool) -> None:
    print("\nSITES")
    print("-" * 30)
    if not topology.sites:
        print("   (none)")
        return
    rows = []
    for site in topology.sites.values():
        marker = site_marker(site)
        ports = sum(1 for _ in site.iter_ports())
        rows.append(
            [
                site.region,
                marker.city,
                str(marker.connections),
                str(ports),
                str(marker.ports_down),
                f"{site.latitude:.4f}, {site.longitude:.4f}",
            ]
        )
    print(
        _format_table(
            ["Region", "City", "Devices", "Ports", "Down", "Coordinates"],
            rows,
            max_col_width=40,
        )
    )
    if detail:
        for region, site in topology.sites.items():
            table = port_table(site)
            if table.empty:
                continue
            print(f"\n   Ports at {region}:")
            print("\n".join(f"      {line}" for line in table.to_string(index=False).split("\n")))


def _print_edges(topology: ProcessedTopology, detail: bool) -> None:
    print("\nEDGES")
    print("-" * 30)
    if not topology.edges_by_key:
        print("   (none)")
        return
    rows = []
    for key, edge in topology.edges_by_key.items():
        count = len(edge.member_links)
        rows.append(
            [
                key,
                f"{count} {_plural(count, 'link')}",
                "DEGRADED" if edge.degraded else "up",
            ]
        )
    print(_format_table(["Edge", "Links", "Status"], rows))
    if detail:
        for key, edge in topology.edges_by_key.items():
            print(f"\n   Links on {key}:")
            table = link_table(edge)
            print("\n".join(f"      {line}" for line in table.to_string(index=False).split("\n")))


def _write_artifacts(
    topology: ProcessedTopology,
    snapshot_path: Optional[Path],
    results_override: Optional[Path],
    geojson: Optional[Path],
    no_results: bool,
    stdout: bool,
    output_dir: Optional[Path],
) -> None:
    """Write results JSON (default on) and GeoJSON (when requested)."""
    json_str = dumps_topology(topology)

    if not no_results:
        results_path = artifact_path_for_run(
            snapshot_path, output_dir, results_override, RESULTS_SUFFIX
        )
        ensure_parent_dir(results_path)
        logger.info(f"Writing results to: {results_path}")
        results_path.write_text(json_str)
        print(f"✅ Results written to: {results_path}")

    if geojson is not None:
        override = None if str(geojson) == "-" else geojson
        geojson_path = artifact_path_for_run(
            snapshot_path, output_dir, override, GEOJSON_SUFFIX
        )
        ensure_parent_dir(geojson_path)
        logger.info(f"Writing GeoJSON to: {geojson_path}")
        geojson_path.write_text(dumps_geojson(topology))
        print(f"✅ GeoJSON written to: {geojson_path}")

    if stdout:
        print(json_str)


def _process_snapshot(
    path: Path,
    config_path: Optional[Path],
    args: argparse.Namespace,
) -> None:
    """Process a snapshot file and export the resulting topology."""
    logger.info(f"Loading snapshot from: {path}")
    _start_time = perf_counter()

    try:
        config = _load_effective_config(config_path)
        snapshot = load_snapshot_file(path)
        topology = process_topology(snapshot, _resolve_domains(args, config))
        if topology.stats.malformed:
            print("⚠️  WARNING: snapshot is not a topology record; output is empty")

        _write_artifacts(
            topology,
            snapshot_path=path,
            results_override=args.results,
            geojson=args.geojson,
            no_results=args.no_results,
            stdout=args.stdout,
            output_dir=args.output,
        )

        _elapsed = perf_counter() - _start_time
        logger.info(f"Snapshot processed successfully in {_format_duration(_elapsed)}")

    except FileNotFoundError:
        logger.error(f"Snapshot file not found: {path}")
        print(f"❌ ERROR: Snapshot file not found: {path}")
        sys.exit(1)
    except (SdxMapError, ValueError, OSError) as e:
        logger.error(f"Failed to process snapshot: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to process snapshot: {type(e).__name__}: {e}")
        sys.exit(1)


def _fetch_topology(config_path: Optional[Path], args: argparse.Namespace) -> None:
    """Fetch a snapshot from the topology API, process and export it."""
    _start_time = perf_counter()

    try:
        config = _load_effective_config(config_path)
        if args.base_url:
            config.api_base_url = args.base_url
        if args.token:
            config.token = args.token

        client = TopologyClient.from_config(config)
        snapshot = client.fetch()

        if args.save_snapshot is not None:
            snapshot_path = artifact_path_for_run(
                None, args.output, args.save_snapshot, SNAPSHOT_SUFFIX
            )
            ensure_parent_dir(snapshot_path)
            snapshot_path.write_text(json.dumps(snapshot, indent=2))
            logger.info(f"Raw snapshot saved to: {snapshot_path}")

        topology = process_topology(snapshot, _resolve_domains(args, config))
        _print_overview(topology)

        _write_artifacts(
            topology,
            snapshot_path=None,
            results_override=args.results,
            geojson=args.geojson,
            no_results=args.no_results,
            stdout=args.stdout,
            output_dir=args.output,
        )

        _elapsed = perf_counter() - _start_time
        logger.info(f"Topology fetched and processed in {_format_duration(_elapsed)}")

    except (SdxMapError, ValueError, OSError) as e:
        logger.error(f"Failed to fetch topology: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to fetch topology: {type(e).__name__}: {e}")
        sys.exit(1)


def _inspect_snapshot(
    path: Path,
    config_path: Optional[Path],
    args: argparse.Namespace,
) -> None:
    """Lint a snapshot file and show what the map would contain.

    Args:
        path: Snapshot JSON file.
        config_path: Optional configuration file supplying allowed domains.
        args: Parsed arguments (domains, ``--detail``).
    """
    logger.info(f"Inspecting snapshot from: {path}")
    _start_time = perf_counter()

    try:
        config = _load_effective_config(config_path)
        snapshot = load_snapshot_file(path)
        domains = _resolve_domains(args, config)

        print("\n" + "=" * 60)
        print("SDXMAP SNAPSHOT INSPECTION")
        print("=" * 60)

        print("\nSCHEMA")
        print("-" * 30)
        problems = validate_snapshot(snapshot)
        if not problems:
            print("   ✓ Snapshot matches the topology schema")
        else:
            print(f"   {len(problems)} schema {_plural(len(problems), 'issue')}:")
            for message in problems[:MAX_LINT_LINES]:
                print(f"     - {message}")
            if len(problems) > MAX_LINT_LINES:
                print(f"     ... and {len(problems) - MAX_LINT_LINES} more")

        print(f"\n   Allowed domains: {', '.join(domains) if domains else '(all)'}")

        topology = process_topology(snapshot, domains)
        _print_overview(topology)
        _print_sites(topology, args.detail)
        _print_edges(topology, args.detail)

        _elapsed = perf_counter() - _start_time
        logger.info(
            f"Snapshot inspection completed successfully in {_format_duration(_elapsed)}"
        )

    except FileNotFoundError:
        print(f"❌ ERROR: Snapshot file not found: {path}")
        sys.exit(1)
    except (SdxMapError, ValueError, OSError) as e:
        logger.error(f"Failed to inspect snapshot: {e}")
        print("❌ ERROR: Failed to inspect snapshot")
        print(f"  {type(e).__name__}: {e}")
        sys.exit(1)


def _add_domain_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML configuration file (API settings and allowed domains)",
    )
    group = p.add_mutually_exclusive_group()
    group.add_argument(
        "--domain",
        "-D",
        action="append",
        default=None,
        help="Allowed domain substring; repeat to allow several (overrides config)",
    )
    group.add_argument(
        "--all-domains",
        action="store_true",
        help="Disable domain filtering",
    )


def _add_export_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help=(
            "Export topology to JSON file (default: <prefix>.topology.json;"
            " placed under --output when provided)"
        ),
    )
    p.add_argument(
        "--no-results",
        action="store_true",
        help="Disable results file generation",
    )
    p.add_argument(
        "--geojson",
        type=Path,
        nargs="?",
        const=Path("-"),
        default=None,
        help="Also export GeoJSON (optionally to the given path)",
    )
    p.add_argument(
        "--stdout",
        action="store_true",
        help="Print topology JSON to stdout",
    )
    p.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output directory for generated artifacts",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``sdxmap`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="sdxmap",
        description="Turn network topology snapshots into site maps.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress console output (logs only)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{process,fetch,inspect}",
        help="Available commands",
    )

    process_parser = subparsers.add_parser(
        "process", help="Process a snapshot JSON file"
    )
    process_parser.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    _add_domain_args(process_parser)
    _add_export_args(process_parser)

    fetch_parser = subparsers.add_parser(
        "fetch", help="Fetch a snapshot from the topology API and process it"
    )
    _add_domain_args(fetch_parser)
    fetch_parser.add_argument(
        "--base-url", default=None, help="Topology API base URL (overrides config)"
    )
    fetch_parser.add_argument(
        "--token", default=None, help="Bearer token (overrides config and env)"
    )
    fetch_parser.add_argument(
        "--save-snapshot",
        type=Path,
        default=None,
        help="Also save the raw snapshot JSON to this path",
    )
    _add_export_args(fetch_parser)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Lint a snapshot and summarize its sites and edges"
    )
    inspect_parser.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    _add_domain_args(inspect_parser)
    inspect_parser.add_argument(
        "--detail",
        "-d",
        action="store_true",
        help="Show per-site port tables and per-edge link tables",
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if configure_cli_logging(args.verbose, args.quiet) == logging.DEBUG:
        logger.debug("Debug logging enabled")

    if args.command == "process":
        _process_snapshot(args.snapshot, args.config, args)
    elif args.command == "fetch":
        _fetch_topology(args.config, args)
    elif args.command == "inspect":
        _inspect_snapshot(args.snapshot, args.config, args)


if __name__ == "__main__":
    main()
