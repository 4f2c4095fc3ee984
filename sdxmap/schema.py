"""JSON-schema checks against the packaged snapshot and config schemas.

Snapshot checks are advisory: they report what the source got wrong but never
stop processing, which tolerates every shape problem on its own.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List

import jsonschema


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    """Load a packaged schema (``topology.json`` or ``config.json``)."""
    with (
        resources.files("sdxmap.schemas").joinpath(name).open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def _format_error(error: jsonschema.ValidationError) -> str:
    path = "/".join(str(part) for part in error.absolute_path)
    return f"{path or '<root>'}: {error.message}"


def schema_errors(data: Any, schema_name: str) -> List[str]:
    """Return readable messages for every violation of the named schema."""
    schema = load_schema(schema_name)
    validator = jsonschema.validators.validator_for(schema)(schema)
    errors = sorted(
        validator.iter_errors(data),
        key=lambda e: tuple(str(part) for part in e.absolute_path),
    )
    return [_format_error(error) for error in errors]


def validate_snapshot(data: Any) -> List[str]:
    """Lint a raw topology snapshot.

    Args:
        data: Parsed JSON snapshot (already unwrapped from any envelope).

    Returns:
        One message per schema violation; empty when the snapshot is clean.
    """
    return schema_errors(data, "topology.json")
