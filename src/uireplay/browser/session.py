"""Automation session facade: what the playback engine needs from a browser.

``SessionDriver`` is the narrow interface between the engine and a live
browser automation backend. ``PlaywrightSessionDriver`` is the concrete
implementation; tests substitute a fake.
"""

from __future__ import annotations

import abc
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from uireplay.scenario.models import Step

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "default"


@dataclass
class BrowserSession:
    """A live browser tab the engine replays steps against.

    ``frame`` is the working frame selected for the current step;
    ``None`` means the top-level page.
    """

    key: str
    browser: Any
    context: Any
    page: Any
    browser_type: str = "chromium"
    frame: Any = None
    in_use: bool = False
    steps_replayed: int = 0

    @property
    def scope(self) -> Any:
        """Page or frame that element lookups should run in."""
        return self.frame if self.frame is not None else self.page


class SessionDriver(abc.ABC):
    """Operations the playback engine requires from a browser automation backend."""

    @abc.abstractmethod
    def acquire_session(
        self,
        step: Step,
        browser_type: str,
        executable_path: str,
        proxy_host: str,
        proxy_port: int,
    ) -> Any | None:
        """Return the session the step should run in, or ``None`` if none can be had."""

    @abc.abstractmethod
    def open_url(self, session: Any, step: Step) -> None:
        """Bring the session to the step URL."""

    @abc.abstractmethod
    def wait_for_idle(self, session: Any, step: Step) -> bool:
        """Wait until asynchronous page activity settles and the UI is shown, or the timeouts elapse.

        Returns:
            ``True`` if the page settled, ``False`` on timeout. Never raises on timeout.
        """

    @abc.abstractmethod
    def switch_context(self, session: Any, step: Step) -> None:
        """Select the frame the step was recorded in (no-op when the step names none)."""

    @abc.abstractmethod
    def process_scroll(self, session: Any, step: Step, target: str | None) -> None:
        """Replay a scroll emulation step."""

    @abc.abstractmethod
    def capture_artifact(self, session: Any, destination: Path) -> bool:
        """Save a screenshot to *destination*. Failures are logged, never raised."""

    @abc.abstractmethod
    def release_session(self, session: Any, step: Step) -> None:
        """Give the session back after a step."""

    @abc.abstractmethod
    def close_all_sessions(self) -> None:
        """Close every session this driver has opened."""

    def describe(self, session: Any) -> str:
        """Short human-readable description of a session for logs."""
        return repr(session)


def poll_until(
    predicate: Callable[[], bool],
    *,
    timeout_sec: float,
    interval_ms: int,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> bool:
    """Evaluate *predicate* every *interval_ms* until it is true or *timeout_sec* passes.

    The predicate is always evaluated at least once. Exceptions from the
    predicate propagate.

    Returns:
        ``True`` if the predicate became true, ``False`` on timeout.
    """
    deadline = clock() + timeout_sec
    while True:
        if predicate():
            return True
        if clock() >= deadline:
            return False
        sleep(interval_ms / 1000)
