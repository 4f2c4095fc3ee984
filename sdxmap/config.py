"""Configuration for the topology source and the domain allow-list."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from sdxmap.errors import ConfigError
from sdxmap.schema import schema_errors

DEFAULT_ALLOWED_DOMAINS = ["ampath.net", "sax.net", "tenet.ac.za", "amlight.net"]

ENV_API_BASE = "SDXMAP_API_BASE"
ENV_TOKEN = "SDXMAP_TOKEN"


@dataclass
class MapConfig:
    """Settings for fetching and filtering a topology snapshot.

    Attributes:
        api_base_url: Base URL of the topology API (e.g. ``https://host/api``).
        topology_endpoint: Path appended to the base URL.
        token: Bearer credential supplied by the authentication subsystem.
        timeout: HTTP timeout in seconds.
        verify_ssl: TLS verification flag, or a path to a CA bundle.
        allowed_domains: Domain substrings kept on the map; empty keeps all.
    """

    api_base_url: Optional[str] = None
    topology_endpoint: str = "/topology"
    token: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: Union[bool, str] = True
    allowed_domains: List[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_DOMAINS)
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MapConfig":
        """Build a config from a mapping, validating it against the schema.

        Raises:
            ConfigError: If the mapping violates ``config.json``.
        """
        errors = schema_errors(dict(data), "config.json")
        if errors:
            raise ConfigError("Invalid configuration: " + "; ".join(errors))

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        verify = values.get("verify_ssl")
        if isinstance(verify, str) and verify.lower() in ("true", "false"):
            values["verify_ssl"] = verify.lower() == "true"
        if "allowed_domains" in values:
            values["allowed_domains"] = list(values["allowed_domains"])
        return cls(**values)

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "MapConfig":
        """Return a copy with ``SDXMAP_API_BASE``/``SDXMAP_TOKEN`` applied."""
        env = os.environ if environ is None else environ
        updates: Dict[str, Any] = {}
        if env.get(ENV_API_BASE):
            updates["api_base_url"] = env[ENV_API_BASE]
        if env.get(ENV_TOKEN):
            updates["token"] = env[ENV_TOKEN]
        return replace(self, **updates) if updates else self


def load_config(path: Union[str, Path]) -> MapConfig:
    """Load a YAML configuration file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, does not map to
            a dictionary, or violates the configuration schema.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: configuration must map to a dictionary at top-level")
    return MapConfig.from_dict(data)
