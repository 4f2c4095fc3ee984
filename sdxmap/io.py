"""Serialization of processed topologies to JSON and GeoJSON."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from sdxmap.model.topology import ProcessedTopology
from sdxmap.transform.status import count_ports_down


def dumps_topology(topology: ProcessedTopology, include_stats: bool = True) -> str:
    """Return the topology as an indented JSON document."""
    return json.dumps(
        topology.to_dict(include_stats=include_stats), indent=2, default=str
    )


def to_geojson(topology: ProcessedTopology) -> Dict[str, Any]:
    """
    Return a GeoJSON FeatureCollection for the topology.

    Sites become ``Point`` features, each edge segment a ``LineString``.
    GeoJSON positions are ``[longitude, latitude]``.
    """
    features: List[Dict[str, Any]] = []

    for region, site in topology.sites.items():
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [site.longitude, site.latitude],
                },
                "properties": {
                    "kind": "site",
                    "region": region,
                    "labels": [sub.label for sub in site.sub_nodes],
                    "devices": len(site.sub_nodes),
                    "ports_down": count_ports_down(site),
                },
            }
        )

    for key, edge in topology.edges_by_key.items():
        degraded = edge.degraded
        for segment in edge.segments:
            (lat1, lng1), (lat2, lng2) = segment.points
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "LineString",
                        "coordinates": [[lng1, lat1], [lng2, lat2]],
                    },
                    "properties": {
                        "kind": "link",
                        "edge_key": key,
                        "link_id": segment.link_id,
                        "source": edge.source,
                        "target": edge.target,
                        "degraded": degraded,
                    },
                }
            )

    return {"type": "FeatureCollection", "features": features}


def dumps_geojson(topology: ProcessedTopology) -> str:
    return json.dumps(to_geojson(topology), indent=2)
