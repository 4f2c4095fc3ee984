"""Tabular detail views for the site and edge drill-downs."""

from __future__ import annotations

from typing import Optional

import pandas as pd

from sdxmap.mapview import filter_links, filter_ports
from sdxmap.model.topology import Edge, Site
from sdxmap.transform.status import is_link_down, is_port_down

PORT_COLUMNS = ["location", "id", "name", "node", "type", "status", "state", "entities", "down"]
LINK_COLUMNS = [
    "id",
    "name",
    "bandwidth",
    "residual_bandwidth",
    "latency",
    "packet_loss",
    "availability",
    "status",
    "state",
    "down",
]


def port_table(site: Site, term: Optional[str] = None) -> pd.DataFrame:
    """Return one row per port in the site, optionally filtered by ``term``.

    Args:
        site: Site to list.
        term: Case-insensitive search term (see ``filter_ports``).

    Returns:
        DataFrame with ``PORT_COLUMNS``; ``entities`` is a comma-joined string.
    """
    records = []
    for row in filter_ports(site, term):
        port = row.port
        records.append(
            {
                "location": row.location,
                "id": port.id,
                "name": port.name,
                "node": port.node,
                "type": port.type,
                "status": port.status,
                "state": port.state,
                "entities": ", ".join(str(entity) for entity in port.entities),
                "down": is_port_down(port),
            }
        )
    return pd.DataFrame.from_records(records, columns=PORT_COLUMNS)


def link_table(edge: Edge, term: Optional[str] = None) -> pd.DataFrame:
    """Return one row per member link of the edge, optionally filtered."""
    records = []
    for link in filter_links(edge.member_links, term):
        records.append(
            {
                "id": link.id,
                "name": link.name,
                "bandwidth": link.bandwidth,
                "residual_bandwidth": link.residual_bandwidth,
                "latency": link.latency,
                "packet_loss": link.packet_loss,
                "availability": link.availability,
                "status": link.status,
                "state": link.state,
                "down": is_link_down(link),
            }
        )
    return pd.DataFrame.from_records(records, columns=LINK_COLUMNS)
