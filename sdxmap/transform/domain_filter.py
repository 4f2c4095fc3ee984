"""Administrator allow-list filtering of nodes by network domain."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from sdxmap.logging import get_logger
from sdxmap.model.snapshot import RawNode

LOGGER = get_logger(__name__)


def normalize_domains(value: Any, logger: Optional[logging.Logger] = None) -> List[str]:
    """Coerce an allow-list into a list of strings.

    ``None``, a bare string and other non-sequences are malformed and become an
    empty list. Non-string entries are ignored.
    """
    log = logger or LOGGER
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        log.warning(
            "Allowed domains must be a list of strings, got %s; filtering disabled",
            type(value).__name__,
        )
        return []
    domains = [entry for entry in value if isinstance(entry, str)]
    if len(domains) != len(value):
        log.warning(
            "Ignoring %d non-string allowed domain entr(y/ies)",
            len(value) - len(domains),
        )
    return domains


def filter_nodes_by_domain(
    nodes: Sequence[RawNode],
    allowed_domains: Sequence[str],
    logger: Optional[logging.Logger] = None,
) -> List[RawNode]:
    """Keep nodes whose id contains any allowed domain.

    Matching is a case-sensitive literal substring test over the whole node
    identifier. An empty allow-list keeps every node.

    Args:
        nodes: Nodes in source order.
        allowed_domains: Domain substrings; may be empty.
        logger: Diagnostics sink; defaults to this module's logger.

    Returns:
        Kept nodes in source order.
    """
    log = logger or LOGGER
    domains = normalize_domains(allowed_domains, logger=log)
    if not domains:
        return list(nodes)

    kept = [node for node in nodes if any(domain in node.id for domain in domains)]
    log.debug(
        "Domain filter kept %d of %d node(s) for %s", len(kept), len(nodes), domains
    )
    return kept
