"""Pytest configuration for test isolation.

Puts the workspace ``packages/`` dir on ``sys.path`` so ``transactions_view``
imports without an install, and clears every ``TXVIEW_*`` environment variable
per test so a developer's shell or ``.env`` cannot leak into assertions about
defaults.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in list(os.environ):
        if name.startswith("TXVIEW_"):
            monkeypatch.delenv(name, raising=False)
    # The CLI loads ./.env; run from an empty directory.
    monkeypatch.chdir(tmp_path)
