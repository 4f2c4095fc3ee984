"""End-to-end tests for process_topology."""

import copy
import logging

import pytest

from sdxmap.model.snapshot import normalize_snapshot
from sdxmap.transform.process import process_topology

DOMAINS = ["ampath.net", "sax.net"]


def test_two_sites_one_edge(sample_snapshot):
    topo = process_topology(sample_snapshot, ["ampath.net"])

    assert list(topo.sites) == ["US-FL", "US-GA"]
    assert topo.sites["US-FL"].coordinates == (25.7, -80.2)
    assert [sub.label for sub in topo.sites["US-FL"].sub_nodes] == ["Miami"]

    assert list(topo.edges_by_key) == ["US-FL-US-GA"]
    edge = topo.edges_by_key["US-FL-US-GA"]
    assert [link.id for link in edge.member_links] == ["L1"]
    assert edge.coordinate_pairs == [((25.7, -80.2), (33.7, -84.3))]
    assert edge.degraded is False


def test_unresolved_link_produces_no_edge(sample_snapshot):
    sample_snapshot["links"] = [{"id": "L2", "ports": ["p1", "p9"], "status": "up"}]
    topo = process_topology(sample_snapshot, ["ampath.net"])
    assert len(topo.sites) == 2
    assert topo.edges_by_key == {}
    assert topo.stats.links_unresolved == 1


def test_empty_snapshot():
    topo = process_topology({"nodes": [], "links": []}, [])
    assert topo.sites == {}
    assert topo.edges_by_key == {}
    assert topo.stats.malformed is False
    assert topo.stats.issues == []


def test_domain_filter_excludes_everything(sample_snapshot):
    topo = process_topology(sample_snapshot, ["sax.net"])
    assert topo.sites == {}
    assert topo.edges_by_key == {}
    assert topo.stats.nodes_in == 2
    assert topo.stats.nodes_after_domain_filter == 0
    assert topo.stats.links_unresolved == 1


def test_links_to_filtered_out_domain_are_dropped(multi_domain_snapshot):
    topo = process_topology(multi_domain_snapshot, DOMAINS)

    assert list(topo.sites) == ["US-FL", "BR-SP"]
    assert list(topo.edges_by_key) == ["US-FL-BR-SP", "BR-SP-US-FL"]
    all_ids = {
        link.id for edge in topo.edges_by_key.values() for link in edge.member_links
    }
    assert "L-a1-o1" not in all_ids


def test_parallel_links_aggregate_and_degrade(multi_domain_snapshot):
    topo = process_topology(multi_domain_snapshot, DOMAINS)

    forward = topo.edges_by_key["US-FL-BR-SP"]
    assert [link.id for link in forward.member_links] == ["L-a1-s1", "L-a3-s2"]
    assert len(forward.segments) == 2
    assert forward.degraded is True

    reverse = topo.edges_by_key["BR-SP-US-FL"]
    assert [link.id for link in reverse.member_links] == ["L-s1-a2"]
    assert reverse.degraded is False


def test_shared_region_keeps_first_node_coordinates(multi_domain_snapshot):
    topo = process_topology(multi_domain_snapshot, DOMAINS)
    florida = topo.sites["US-FL"]
    assert florida.coordinates == (25.75, -80.37)
    assert [sub.label for sub in florida.sub_nodes] == ["Miami", "Boca Raton"]
    # Both Florida endpoints draw from the site coordinates, not the node's
    forward = topo.edges_by_key["US-FL-BR-SP"]
    assert forward.coordinate_pairs[1][0] == (25.75, -80.37)


def test_empty_allow_list_keeps_all_domains(multi_domain_snapshot):
    topo = process_topology(multi_domain_snapshot, [])
    assert list(topo.sites) == ["US-FL", "BR-SP", "ZA-WC"]
    assert "US-FL-ZA-WC" in topo.edges_by_key
    assert process_topology(multi_domain_snapshot).to_dict() == topo.to_dict()


def test_node_without_region_is_omitted(sample_snapshot, caplog):
    caplog.set_level(logging.INFO, logger="sdxmap")
    sample_snapshot["nodes"].append(
        {"id": "urn:sdx:node:ampath.net:3", "ports": [{"id": "p3"}]}
    )
    sample_snapshot["links"].append({"id": "L3", "ports": ["p1", "p3"], "status": "up"})

    topo = process_topology(sample_snapshot, ["ampath.net"])

    assert list(topo.sites) == ["US-FL", "US-GA"]
    assert list(topo.edges_by_key) == ["US-FL-US-GA"]
    assert topo.stats.nodes_without_region == 1
    assert "without region code" in caplog.text


def test_duplicate_port_ids_first_site_wins(sample_snapshot, caplog):
    caplog.set_level(logging.WARNING, logger="sdxmap")
    sample_snapshot["nodes"][1]["ports"].append({"id": "p1", "status": "up"})
    sample_snapshot["links"].append({"id": "L-dup", "ports": ["p2", "p1"], "status": "up"})

    topo = process_topology(sample_snapshot, [])

    assert topo.stats.duplicate_ports == 1
    assert topo.edges_by_key["US-GA-US-FL"].source == "US-GA"
    assert "duplicate port" in caplog.text


def test_missing_coordinates_default_to_zero(sample_snapshot):
    del sample_snapshot["nodes"][1]["location"]["latitude"]
    sample_snapshot["nodes"][1]["location"]["longitude"] = None
    topo = process_topology(sample_snapshot, [])
    assert topo.sites["US-GA"].coordinates == (0.0, 0.0)
    assert topo.edges_by_key["US-FL-US-GA"].coordinate_pairs == [
        ((25.7, -80.2), (0.0, 0.0))
    ]


@pytest.mark.parametrize("value", [None, [], "topology", 3])
def test_malformed_snapshot_is_reported_not_raised(value, caplog):
    caplog.set_level(logging.ERROR, logger="sdxmap")
    topo = process_topology(value, DOMAINS)
    assert topo.sites == {}
    assert topo.edges_by_key == {}
    assert topo.stats.malformed is True
    assert "Invalid topology snapshot" in caplog.text


def test_partial_containers_log_warnings(caplog):
    caplog.set_level(logging.WARNING, logger="sdxmap")
    topo = process_topology({"nodes": "oops"}, [])
    assert topo.sites == {}
    assert topo.stats.malformed is False
    assert len(topo.stats.issues) == 2
    assert "'links' is missing" in caplog.text


def test_custom_logger_receives_diagnostics(sample_snapshot, caplog):
    caplog.set_level(logging.DEBUG, logger="sdxmap.test.custom")
    logger = logging.getLogger("sdxmap.test.custom")
    process_topology(sample_snapshot, [], logger=logger)
    assert any(r.name == "sdxmap.test.custom" for r in caplog.records)


def test_repeated_calls_are_equal_and_do_not_mutate_input(multi_domain_snapshot):
    before = copy.deepcopy(multi_domain_snapshot)
    first = process_topology(multi_domain_snapshot, DOMAINS)
    second = process_topology(multi_domain_snapshot, DOMAINS)

    assert multi_domain_snapshot == before
    assert first.to_dict() == second.to_dict()
    assert first.sites is not second.sites
    assert first.edges_by_key is not second.edges_by_key


def test_accepts_normalized_snapshot(sample_snapshot):
    snap = normalize_snapshot(sample_snapshot)
    assert (
        process_topology(snap, []).to_dict() == process_topology(sample_snapshot, []).to_dict()
    )


def test_stats_counters(multi_domain_snapshot):
    multi_domain_snapshot["links"].append({"id": "L-short", "ports": ["a1"]})
    stats = process_topology(multi_domain_snapshot, DOMAINS).stats
    assert stats.nodes_in == 4
    assert stats.nodes_after_domain_filter == 3
    assert stats.sites == 2
    assert stats.indexed_ports == 5
    assert stats.links_in == 5
    assert stats.links_without_ports == 1
    assert stats.links_unresolved == 1
    assert stats.links_resolved == 3
    assert stats.edges == 2


def test_injected_logger_receives_every_stage(caplog, sample_snapshot):
    caplog.set_level(logging.DEBUG, logger="sdxmap")
    log = logging.getLogger("sdxmap.test.run")
    sample_snapshot["nodes"].append("junk")

    process_topology(sample_snapshot, ["ampath.net", 3], logger=log)
    process_topology(42, [], logger=log)

    assert {r.name for r in caplog.records} == {"sdxmap.test.run"}
    messages = [r.getMessage() for r in caplog.records]
    assert any("non-string allowed domain" in m for m in messages)
    assert any(m.startswith("Domain filter kept") for m in messages)
    assert any(m.startswith("Snapshot normalized with 1 issue") for m in messages)
    assert any(m.startswith("Malformed snapshot") for m in messages)
