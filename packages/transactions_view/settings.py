"""Environment-backed settings.

Entry points load a local ``.env`` (via ``python-dotenv``) before calling
:func:`load_settings`; library code only reads the resulting ``Settings``.

Variables
---------
``TXVIEW_API_URL``
    Transactions endpoint (any URL ``urllib`` can open).
``TXVIEW_PAGE_SIZE``
    Initial rows per page. Non-positive or non-numeric values fall back to the
    default.
``TXVIEW_DEMO_EXPAND``
    ``1/true/yes`` pads small datasets with synthetic rows after each fetch.
``TXVIEW_HTTP_TIMEOUT``
    Socket timeout in seconds for the fetch (default 30). A cancelled fetch
    still holds its worker thread until this expires.
``TXVIEW_LOG_LEVEL``
    Level name or number for the package logger (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .api import API_URL_ENV, DEFAULT_HTTP_TIMEOUT, resolve_api_url
from .logging_setup import get_logger, resolve_level
from .state import DEFAULT_PAGE_SIZE

PAGE_SIZE_ENV = "TXVIEW_PAGE_SIZE"
DEMO_EXPAND_ENV = "TXVIEW_DEMO_EXPAND"
HTTP_TIMEOUT_ENV = "TXVIEW_HTTP_TIMEOUT"
LOG_LEVEL_ENV = "TXVIEW_LOG_LEVEL"

_logger = get_logger("transactions_view.settings")


@dataclass(frozen=True, slots=True)
class Settings:
    api_url: str
    page_size: int = DEFAULT_PAGE_SIZE
    demo_expand: bool = False
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: int = logging.INFO


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off", ""}:
        return False
    _logger.warning("Ignoring unrecognized boolean %s=%r", name, raw)
    return default


def _env_page_size() -> int:
    raw = os.getenv(PAGE_SIZE_ENV)
    if not raw:
        return DEFAULT_PAGE_SIZE
    try:
        size = int(raw)
    except ValueError:
        size = 0
    if size < 1:
        _logger.warning("Ignoring invalid %s=%r", PAGE_SIZE_ENV, raw)
        return DEFAULT_PAGE_SIZE
    return size


def _env_timeout() -> float:
    raw = os.getenv(HTTP_TIMEOUT_ENV)
    if not raw or not raw.strip():
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        _logger.warning("Ignoring invalid %s=%r", HTTP_TIMEOUT_ENV, raw)
        return DEFAULT_HTTP_TIMEOUT
    return timeout


def _env_log_level() -> int:
    raw = os.getenv(LOG_LEVEL_ENV)
    if not raw or not raw.strip():
        return logging.INFO
    try:
        return resolve_level(raw)
    except ValueError:
        _logger.warning("Ignoring invalid %s=%r", LOG_LEVEL_ENV, raw)
        return logging.INFO


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""

    return Settings(
        api_url=resolve_api_url(),
        page_size=_env_page_size(),
        demo_expand=_env_bool(DEMO_EXPAND_ENV),
        http_timeout=_env_timeout(),
        log_level=_env_log_level(),
    )


__all__ = [
    "API_URL_ENV",
    "DEMO_EXPAND_ENV",
    "HTTP_TIMEOUT_ENV",
    "LOG_LEVEL_ENV",
    "PAGE_SIZE_ENV",
    "Settings",
    "load_settings",
]
