"""Exception types raised by sdxmap collaborators.

The transformation core never raises for data problems; these exceptions
belong to the configuration loader and the topology source client.
"""

from __future__ import annotations

from typing import Optional


class SdxMapError(Exception):
    """Base class for sdxmap errors."""


class ConfigError(SdxMapError):
    """Configuration file is missing, unreadable or invalid."""


class TopologySourceError(SdxMapError):
    """Fetching the topology snapshot failed.

    Attributes:
        status_code: HTTP status of the failed response, or ``None`` for
            transport-level failures (DNS, connection, timeout, bad JSON).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
