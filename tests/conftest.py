"""Shared fixtures; makes ``browser_harness`` and the test fakes importable."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
for _path in (_ROOT, _ROOT / "tests"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

import browser_harness.browser as browser_module  # noqa: E402
from browser_harness import HarnessConfig  # noqa: E402
from fakes import MockPlaywrightManager  # noqa: E402


@pytest.fixture
def playwright_manager(monkeypatch: pytest.MonkeyPatch) -> MockPlaywrightManager:
    """Swap the Playwright entry point for a fake that launches fake engines."""
    manager = MockPlaywrightManager()
    monkeypatch.setattr(browser_module, "async_playwright", manager)
    return manager


@pytest.fixture
def config() -> HarnessConfig:
    return HarnessConfig(base_url="http://localhost:3333", navigation_timeout_ms=5000)
