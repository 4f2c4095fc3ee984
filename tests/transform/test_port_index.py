"""Tests for the port id -> site index."""

import logging

from sdxmap.model.snapshot import RawPort
from sdxmap.model.topology import Site, SubNode
from sdxmap.transform.port_index import PortIndex, PortLocation


def _sites():
    return {
        "US-FL": Site(
            "US-FL",
            25.7,
            -80.2,
            [
                SubNode("Miami", id="n1", ports=[RawPort("p1"), RawPort("")]),
                SubNode("Boca", id="n2", ports=[RawPort("p2")]),
            ],
        ),
        "US-GA": Site(
            "US-GA",
            33.7,
            -84.3,
            [SubNode("Atlanta", id="n3", ports=[RawPort("p3"), RawPort("p1")])],
        ),
    }


def test_lookup_returns_owning_site_location():
    index = PortIndex.build(_sites())
    assert index.lookup("p2") == PortLocation("US-FL", 25.7, -80.2)
    assert index.lookup("p3").coordinates == (33.7, -84.3)
    assert len(index) == 3
    assert "p3" in index


def test_unknown_and_empty_ids_resolve_to_none():
    index = PortIndex.build(_sites())
    assert index.lookup("p9") is None
    assert index.lookup("") is None
    assert "" not in index


def test_duplicate_port_first_occurrence_wins(caplog):
    caplog.set_level(logging.DEBUG, logger="sdxmap")
    index = PortIndex.build(_sites())
    assert index.lookup("p1").region == "US-FL"
    assert index.duplicates == 1
    assert "keeping first" in caplog.text


def test_empty_sites():
    index = PortIndex.build({})
    assert len(index) == 0
    assert index.duplicates == 0
