"""Package logger wiring for ``transactions_view``.

Every module logs through a child of the ``transactions_view`` logger obtained
with :func:`get_logger`. Nothing is printed until an entry point calls
:func:`configure_logging`; the CLI does so in its root callback with the level
from ``--log-level`` or ``Settings.log_level``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

PACKAGE_LOGGER = "transactions_view"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_package_logger = logging.getLogger(PACKAGE_LOGGER)
_package_logger.addHandler(logging.NullHandler())

# Handler installed by the last configure_logging() call.
_handler: logging.Handler | None = None


def resolve_level(level: int | str) -> int:
    """Turn ``"debug"``, ``"WARNING"``, ``"10"`` or ``10`` into a level number.

    Raises ``ValueError`` for names the ``logging`` module does not know.
    """

    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(level: int | str = logging.INFO, *, stream: IO[str] | None = None) -> logging.Handler:
    """Send package records at ``level`` or above to ``stream`` (stderr by default).

    A repeated call swaps out the handler from the previous one, so records
    are never emitted twice. Returns the installed handler.
    """

    global _handler
    resolved = resolve_level(level)
    if _handler is not None:
        _package_logger.removeHandler(_handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _package_logger.addHandler(handler)
    _package_logger.setLevel(resolved)
    _package_logger.propagate = False
    _handler = handler
    return handler


def get_logger(name: str) -> logging.Logger:
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        raise ValueError(f"{name!r} is not a {PACKAGE_LOGGER} logger")
    return logging.getLogger(name)


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "configure_logging", "get_logger", "resolve_level"]
