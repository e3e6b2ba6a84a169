"""Log output for ``statement_categorizer``.

Every module logs through a child of the ``"statement_categorizer"`` logger
obtained with :func:`get_logger`. Nothing is printed until an entrypoint calls
:func:`configure_logging`; the CLI does so before running a command, and a host
application embedding the processing API can do the same or wire the package
logger into its own handlers instead.

Events worth knowing about: per-file and per-batch summaries at INFO, total
mismatches at WARNING, unmatched merchants at DEBUG, and each failing file of
a batch at ERROR.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_categorizer"
_LEVEL_ENV_VAR = "STATEMENT_CATEGORIZER_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _level_from_value(level: int | str | None) -> int | None:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = getattr(logging, name, None)
        if isinstance(numeric, int):
            return numeric
    return None


def _parse_level(level: int | str | None) -> int:
    """Explicit level, then ``STATEMENT_CATEGORIZER_LOG_LEVEL``, then INFO."""

    for candidate in (level, os.getenv(_LEVEL_ENV_VAR)):
        resolved = _level_from_value(candidate)
        if resolved is not None:
            return resolved
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send package log records to ``stream``.

    Only the first call has an effect. Records stop propagating to the root
    logger so a host's own root configuration does not print them twice.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for placeholder in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(placeholder)

    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a ``statement_categorizer.<module>`` name."""

    if not _CONFIGURED:
        pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
        if not pkg_logger.handlers:
            pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
