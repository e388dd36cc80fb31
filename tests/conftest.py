"""Shared fixtures for uireplay unit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from uireplay.browser.session import SessionDriver


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    """Clear the settings LRU cache and profile selection between tests."""
    from uireplay.settings.config import get_settings

    monkeypatch.delenv("UIREPLAY_ENV", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings(tmp_path: Path):
    """Settings with fast timeouts and screenshots going to a temp dir (disabled)."""
    from uireplay.settings.config import Settings

    return Settings(
        env="test",
        playback={"async_requests_timeout_sec": 1, "ui_check_interval_ms": 10, "ui_shown_timeout_sec": 1},
        screenshots={"enabled": False, "directory": str(tmp_path / "shots")},
    )


@pytest.fixture()
def with_scripts():
    """Return a helper that copies settings with the given hook script ids set."""

    def _apply(settings: Any, **scripts: str) -> Any:
        return settings.model_copy(
            update={"scripts": settings.scripts.model_copy(update=scripts)}
        )

    return _apply


# ---------------------------------------------------------------------------
# Session driver
# ---------------------------------------------------------------------------


class FakeSessionDriver(SessionDriver):
    """In-memory ``SessionDriver`` that records every call.

    Sessions are pooled per ``tabUuid`` like the real driver; ``live`` holds
    the sessions not yet closed by ``close_all_sessions``.
    """

    def __init__(self, *, no_session: bool = False) -> None:
        self.no_session = no_session
        self.calls: list[tuple[str, Any]] = []
        self.live: dict[str, MagicMock] = {}
        self.acquired = 0
        self.released = 0
        self.closed_all = 0
        self.screenshots: list[Path] = []
        self.open_url_error: Exception | None = None

    def acquire_session(self, step, browser_type, executable_path, proxy_host, proxy_port):
        self.calls.append(("acquire", step.get("eventId")))
        if self.no_session:
            return None
        key = str(step.get("tabUuid") or "default")
        session = self.live.get(key)
        if session is None:
            session = MagicMock(name=f"session-{key}")
            self.live[key] = session
        self.acquired += 1
        return session

    def open_url(self, session, step):
        self.calls.append(("open_url", step.get("url")))
        if self.open_url_error is not None:
            raise self.open_url_error

    def wait_for_idle(self, session, step):
        self.calls.append(("wait_for_idle", step.get("eventId")))
        return True

    def switch_context(self, session, step):
        self.calls.append(("switch_context", step.get("eventId")))

    def process_scroll(self, session, step, target):
        self.calls.append(("process_scroll", target))

    def capture_artifact(self, session, destination):
        self.screenshots.append(destination)
        return True

    def release_session(self, session, step):
        self.calls.append(("release", step.get("eventId")))
        self.released += 1

    def close_all_sessions(self):
        self.calls.append(("close_all", None))
        self.closed_all += 1
        self.live.clear()

    def describe(self, session):
        return "fake"


@pytest.fixture()
def fake_driver() -> FakeSessionDriver:
    return FakeSessionDriver()


@pytest.fixture()
def null_driver() -> FakeSessionDriver:
    """Driver that never hands out a session."""
    return FakeSessionDriver(no_session=True)


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


@pytest.fixture()
def evaluator():
    """Empty ``CallableScriptEvaluator``; tests register the hooks they need."""
    from uireplay.hooks.evaluators import CallableScriptEvaluator

    return CallableScriptEvaluator()


@pytest.fixture()
def hooks(evaluator):
    from uireplay.hooks.processor import HookProcessor

    return HookProcessor(evaluator)


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that require a real browser")
