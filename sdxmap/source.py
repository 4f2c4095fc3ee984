"""Topology source: fetches the raw snapshot over HTTP or from disk.

The client only transports and unwraps; all shape tolerance lives in
``sdxmap.model.snapshot.normalize_snapshot``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

import requests

from sdxmap.config import MapConfig
from sdxmap.errors import TopologySourceError
from sdxmap.logging import get_logger
from sdxmap.model.snapshot import unwrap_envelope

logger = get_logger(__name__)


class TopologyClient:
    """HTTP client for the topology endpoint.

    Args:
        base_url: API base URL, e.g. ``https://host:3000/api``.
        token: Bearer credential; omitted from the request when empty.
        endpoint: Path of the topology resource.
        timeout: Request timeout in seconds.
        verify: TLS verification flag or CA bundle path.
        session: Optional preconfigured ``requests.Session``.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        endpoint: str = "/topology",
        timeout: float = 30.0,
        verify: Union[bool, str] = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("Topology API base URL is required")
        self.base_url = base_url.rstrip("/")
        self.endpoint = endpoint
        self.timeout = timeout

        self._session = session or requests.Session()
        self._session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.verify = verify

    @classmethod
    def from_config(
        cls, config: MapConfig, session: Optional[requests.Session] = None
    ) -> "TopologyClient":
        if not config.api_base_url:
            raise ValueError(
                "Topology API base URL not set; use api_base_url or SDXMAP_API_BASE"
            )
        return cls(
            base_url=config.api_base_url,
            token=config.token,
            endpoint=config.topology_endpoint,
            timeout=config.timeout,
            verify=config.verify_ssl,
            session=session,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.endpoint}"

    def fetch(self) -> Any:
        """GET the topology and return the snapshot.

        Returns:
            The parsed JSON snapshot, unwrapped from the backend envelope.

        Raises:
            TopologySourceError: On transport errors, non-2xx responses, or a
                body that is not JSON.
        """
        logger.info(f"Fetching topology from: {self.url}")
        try:
            resp = self._session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error(f"Topology request failed: {exc}")
            raise TopologySourceError(f"Topology request failed: {exc}") from exc

        if not resp.ok:
            message = _error_message(resp)
            logger.error(f"Topology API error: {message}")
            raise TopologySourceError(message, status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TopologySourceError(
                f"Topology response is not JSON: {exc}", status_code=resp.status_code
            ) from exc

        snapshot = unwrap_envelope(payload)
        if isinstance(snapshot, dict):
            logger.debug(
                "Topology received: nodes=%s, links=%s",
                _count(snapshot.get("nodes")),
                _count(snapshot.get("links")),
            )
        return snapshot


def _count(value: Any) -> str:
    return str(len(value)) if isinstance(value, list) else "n/a"


def _error_message(resp: requests.Response) -> str:
    """Prefer the body's ``message``/``error`` over the bare status line."""
    default = f"HTTP {resp.status_code}: {resp.reason}"
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or default)
    return default


def load_snapshot_file(path: Union[str, Path]) -> Any:
    """Read a JSON snapshot from disk, unwrapping a backend envelope.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not JSON.
    """
    text = Path(path).read_text(encoding="utf-8")
    return unwrap_envelope(json.loads(text))
