"""Logging for sdxmap.

All modules log under the ``sdxmap`` logger, which owns the only handler. The
handler writes to stderr so that JSON printed by ``sdxmap process --stdout``
stays machine-readable. Pipeline functions additionally accept a ``logger``
argument; a caller-supplied logger receives that run's diagnostics instead of
the module logger.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "sdxmap"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
    force: bool = False,
) -> logging.Logger:
    """Install the single handler on the ``sdxmap`` logger.

    Later calls are no-ops unless ``force`` is set, in which case the existing
    handler is replaced.

    Args:
        level: Level for the ``sdxmap`` logger.
        format_string: Record format; defaults to ``DEFAULT_FORMAT``.
        handler: Handler to install; defaults to a stderr stream handler.
        force: Reconfigure even if already configured.

    Returns:
        The ``sdxmap`` logger.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _configured and not force:
        return root

    for old in list(root.handlers):
        root.removeHandler(old)

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    # pytest's caplog listens on the Python root logger
    root.propagate = True

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under ``sdxmap``.

    Module loggers carry no level of their own, so ``set_global_log_level``
    governs every one of them.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the ``sdxmap`` logger and its handlers."""
    root = setup_root_logger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def cli_log_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI's ``--verbose``/``--quiet`` flags to a level.

    ``--verbose`` wins when both are given.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_cli_logging(verbose: bool = False, quiet: bool = False) -> int:
    """Apply the level selected by the CLI flags and return it."""
    level = cli_log_level(verbose, quiet)
    set_global_log_level(level)
    return level


setup_root_logger()
