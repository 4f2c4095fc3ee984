import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from sdxmap import cli


@pytest.fixture
def snapshot_file(tmp_path: Path, multi_domain_snapshot) -> Path:
    path = tmp_path / "live.json"
    path.write_text(json.dumps(multi_domain_snapshot))
    return path


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch) -> None:
    monkeypatch.delenv("SDXMAP_API_BASE", raising=False)
    monkeypatch.delenv("SDXMAP_TOKEN", raising=False)


# process


def test_process_writes_default_results_file(
    snapshot_file: Path, tmp_path: Path, monkeypatch, capsys
) -> None:
    monkeypatch.chdir(tmp_path)
    cli.main(["process", str(snapshot_file), "-D", "ampath.net", "-D", "sax.net"])

    results = tmp_path / "live.topology.json"
    assert results.exists()
    data = json.loads(results.read_text())
    assert list(data["sites"]) == ["US-FL", "BR-SP"]
    assert list(data["edges_by_key"]) == ["US-FL-BR-SP", "BR-SP-US-FL"]
    assert data["edges_by_key"]["US-FL-BR-SP"]["degraded"] is True
    assert "Results written to" in capsys.readouterr().out


def test_process_uses_config_domains(snapshot_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "sdxmap.yaml"
    config.write_text("allowed_domains:\n  - sax.net\n")
    results = tmp_path / "out" / "res.json"

    cli.main(
        ["process", str(snapshot_file), "--config", str(config), "--results", str(results)]
    )

    data = json.loads(results.read_text())
    assert list(data["sites"]) == ["BR-SP"]
    assert data["edges_by_key"] == {}


def test_process_all_domains_to_stdout(snapshot_file: Path, capsys) -> None:
    cli.main(["process", str(snapshot_file), "--all-domains", "--no-results", "--stdout"])
    payload = json.loads(capsys.readouterr().out)
    assert list(payload["sites"]) == ["US-FL", "BR-SP", "ZA-WC"]
    assert payload["stats"]["nodes_in"] == 4


def test_process_geojson_default_path(snapshot_file: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "artifacts"
    cli.main(
        ["process", str(snapshot_file), "--geojson", "--no-results", "--output", str(out_dir)]
    )
    collection = json.loads((out_dir / "live.geojson").read_text())
    assert collection["type"] == "FeatureCollection"
    assert not (out_dir / "live.topology.json").exists()


def test_process_malformed_snapshot_warns_and_writes_empty(
    tmp_path: Path, capsys
) -> None:
    path = tmp_path / "bad.json"
    path.write_text("[1, 2, 3]")
    results = tmp_path / "bad.out.json"

    cli.main(["process", str(path), "--results", str(results)])

    assert "WARNING" in capsys.readouterr().out
    data = json.loads(results.read_text())
    assert data["sites"] == {}
    assert data["stats"]["malformed"] is True


def test_process_missing_file_exits(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["process", str(tmp_path / "missing.json")])
    assert exc_info.value.code == 1
    assert "not found" in capsys.readouterr().out


def test_process_invalid_json_exits(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["process", str(path)])
    assert exc_info.value.code == 1
    assert "Failed to process snapshot" in capsys.readouterr().out


def test_process_invalid_config_exits(snapshot_file: Path, tmp_path: Path, capsys) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("colour: blue\n")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["process", str(snapshot_file), "--config", str(config)])
    assert exc_info.value.code == 1
    assert "ConfigError" in capsys.readouterr().out


def test_domain_and_all_domains_are_exclusive(snapshot_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["process", str(snapshot_file), "-D", "x", "--all-domains"])
    assert exc_info.value.code == 2


# inspect


def test_inspect_prints_sections(snapshot_file: Path, capsys) -> None:
    cli.main(["inspect", str(snapshot_file), "-D", "ampath.net", "-D", "sax.net"])
    out = capsys.readouterr().out
    assert "SDXMAP SNAPSHOT INSPECTION" in out
    assert "Snapshot matches the topology schema" in out
    assert "SITES" in out and "US-FL" in out and "Miami" in out
    assert "EDGES" in out and "US-FL-BR-SP" in out and "DEGRADED" in out
    assert "ZA-WC" not in out


def test_inspect_detail_shows_tables(snapshot_file: Path, capsys) -> None:
    cli.main(["inspect", str(snapshot_file), "--all-domains", "--detail"])
    out = capsys.readouterr().out
    assert "Ports at US-FL:" in out
    assert "Links on US-FL-BR-SP:" in out
    assert "L-a3-s2" in out


def test_inspect_reports_schema_issues(tmp_path: Path, capsys) -> None:
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"nodes": [{"id": "n1"}]}))
    cli.main(["inspect", str(path)])
    out = capsys.readouterr().out
    assert "schema issue" in out
    assert "(none)" in out


def test_inspect_missing_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["inspect", str(tmp_path / "missing.json")])
    assert exc_info.value.code == 1


# fetch


def test_fetch_processes_and_saves(
    sample_snapshot, tmp_path: Path, monkeypatch, capsys
) -> None:
    monkeypatch.chdir(tmp_path)
    with patch.object(cli.TopologyClient, "fetch", return_value=sample_snapshot):
        cli.main(
            [
                "fetch",
                "--base-url",
                "https://sdx.example.org/api",
                "--save-snapshot",
                "raw.json",
                "--geojson",
            ]
        )

    assert json.loads((tmp_path / "raw.json").read_text()) == sample_snapshot
    data = json.loads((tmp_path / "topology.topology.json").read_text())
    assert list(data["edges_by_key"]) == ["US-FL-US-GA"]
    assert (tmp_path / "topology.geojson").exists()
    assert "OVERVIEW" in capsys.readouterr().out


def test_fetch_requires_base_url(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["fetch", "--no-results"])
    assert exc_info.value.code == 1
    assert "base URL" in capsys.readouterr().out


def test_fetch_source_error_exits(capsys) -> None:
    from sdxmap.errors import TopologySourceError

    with patch.object(
        cli.TopologyClient,
        "fetch",
        side_effect=TopologySourceError("Token expired", status_code=401),
    ):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["fetch", "--base-url", "https://h/api", "--no-results"])
    assert exc_info.value.code == 1
    assert "Token expired" in capsys.readouterr().out


# argument handling


def test_no_args_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: sdxmap" in capsys.readouterr().out


def test_verbose_and_quiet_switch_levels(snapshot_file: Path, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="sdxmap"):
        cli.main(["--verbose", "process", str(snapshot_file), "--no-results"])
    assert any("Debug logging enabled" in r.message for r in caplog.records)

    caplog.clear()
    with caplog.at_level(logging.INFO, logger="sdxmap"):
        cli.main(["--quiet", "process", str(snapshot_file), "--no-results"])
    assert not any(r.levelno == logging.INFO for r in caplog.records)
