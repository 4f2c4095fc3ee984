"""Global pytest configuration and shared topology fixtures."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

SAMPLE_SNAPSHOT: Dict[str, Any] = {
    "nodes": [
        {
            "id": "urn:sdx:node:ampath.net:1",
            "name": "Ampath-Miami",
            "location": {
                "iso3166_2_lvl4": "US-FL",
                "latitude": 25.7,
                "longitude": -80.2,
                "address": "Miami",
            },
            "ports": [{"id": "p1", "status": "up", "state": "enabled"}],
        },
        {
            "id": "urn:sdx:node:ampath.net:2",
            "name": "Ampath-Atlanta",
            "location": {
                "iso3166_2_lvl4": "US-GA",
                "latitude": 33.7,
                "longitude": -84.3,
                "address": "Atlanta",
            },
            "ports": [{"id": "p2", "status": "up", "state": "enabled"}],
        },
    ],
    "links": [{"id": "L1", "ports": ["p1", "p2"], "status": "up"}],
}


@pytest.fixture
def sample_snapshot() -> Dict[str, Any]:
    """Two ampath.net nodes in US-FL and US-GA joined by one up link."""
    return copy.deepcopy(SAMPLE_SNAPSHOT)


@pytest.fixture
def multi_domain_snapshot() -> Dict[str, Any]:
    """Snapshot spanning three domains, shared regions and parallel links."""
    return {
        "nodes": [
            {
                "id": "urn:sdx:node:ampath.net:Ampath1",
                "name": "Ampath1",
                "location": {
                    "iso3166_2_lvl4": "US-FL",
                    "latitude": 25.75,
                    "longitude": -80.37,
                    "address": "Miami",
                },
                "ports": [
                    {"id": "a1", "name": "a1/1", "status": "up", "state": "enabled"},
                    {"id": "a2", "name": "a1/2", "status": "down", "state": "enabled"},
                ],
            },
            {
                "id": "urn:sdx:node:ampath.net:Ampath2",
                "name": "Ampath2",
                "location": {
                    "iso3166_2_lvl4": "US-FL",
                    "latitude": 26.0,
                    "longitude": -80.0,
                    "address": "Boca Raton",
                },
                "ports": [
                    {"id": "a3", "status": "up", "state": "disabled"},
                ],
            },
            {
                "id": "urn:sdx:node:sax.net:Sax01",
                "name": "Sax01",
                "location": {
                    "iso3166_2_lvl4": "BR-SP",
                    "latitude": -23.5,
                    "longitude": -46.6,
                    "address": "Sao Paulo",
                },
                "ports": [
                    {"id": "s1", "status": "up", "state": "enabled"},
                    {"id": "s2", "status": "up", "state": "enabled"},
                ],
            },
            {
                "id": "urn:sdx:node:other.net:X",
                "name": "Other",
                "location": {
                    "iso3166_2_lvl4": "ZA-WC",
                    "latitude": -33.9,
                    "longitude": 18.4,
                    "address": "Cape Town",
                },
                "ports": [{"id": "o1", "status": "up", "state": "enabled"}],
            },
        ],
        "links": [
            {"id": "L-a1-s1", "ports": ["a1", "s1"], "status": "up", "bandwidth": 100},
            {"id": "L-a3-s2", "ports": ["a3", "s2"], "status": "down", "bandwidth": 10},
            {"id": "L-s1-a2", "ports": ["s1", "a2"], "status": "up"},
            {"id": "L-a1-o1", "ports": ["a1", "o1"], "status": "up"},
        ],
    }
