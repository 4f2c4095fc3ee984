"""Operational status predicates for ports, links and aggregated edges.

These are the only business-rule branches in the pipeline. They accept the
typed snapshot records as well as plain mappings, so renderers holding raw
JSON can reuse them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from sdxmap.model.topology import Site


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def is_port_down(port: Any) -> bool:
    """Return True if the port counts as down.

    A port is down when it is enabled but not operationally up, or when it is
    administratively disabled regardless of its operational status.
    """
    status = _field(port, "status")
    state = _field(port, "state")
    return (status != "up" and state == "enabled") or state == "disabled"


def is_link_down(link: Any) -> bool:
    """Return True unless the link's status is exactly ``"up"``."""
    return _field(link, "status") != "up"


def is_edge_degraded(members: Iterable[Any]) -> bool:
    """Return True if at least one member link is not up.

    An edge with no members is not degraded.
    """
    return any(is_link_down(link) for link in members)


def count_ports_down(site: Site) -> int:
    """Count down ports across every device in a site."""
    return sum(1 for _, port in site.iter_ports() if is_port_down(port))
