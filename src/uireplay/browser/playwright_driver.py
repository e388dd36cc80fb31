"""Playwright-backed automation session driver.

Sessions are pooled per recorded browser tab (the step's ``tabUuid``), so
consecutive steps of the same tab share one page and its in-page state.
A released session stays open for the next step of its tab;
``close_all_sessions`` tears everything down, including Playwright itself.

Requires ``playwright install <browser>`` to have been run at least once.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout, sync_playwright

from uireplay.browser.elements import find_element
from uireplay.browser.frames import switch_to_working_frame
from uireplay.browser.navigation import goto_step_url
from uireplay.browser.session import DEFAULT_SESSION_KEY, BrowserSession, SessionDriver, poll_until
from uireplay.hooks.processor import HookProcessor
from uireplay.scenario.models import Step, StepField
from uireplay.settings.config import Settings

logger = logging.getLogger(__name__)


def session_key(step: Step) -> str:
    """Pool key for the browser tab a step was recorded in."""
    return str(step.get(StepField.TAB_UUID) or DEFAULT_SESSION_KEY)


class PlaywrightSessionDriver(SessionDriver):
    """``SessionDriver`` built on the Playwright sync API.

    Args:
        settings: Run configuration; timeouts and hook ids are read on every call.
        hooks: Hook processor used for the async-idle predicate.
        playwright_factory: Callable returning a Playwright context manager
            (defaults to ``sync_playwright``).
    """

    def __init__(
        self,
        settings: Settings,
        hooks: HookProcessor,
        playwright_factory: Callable[[], Any] = sync_playwright,
    ) -> None:
        self._settings = settings
        self._hooks = hooks
        self._factory = playwright_factory
        self._playwright: Any = None
        self._sessions: dict[str, BrowserSession] = {}
        self._active: BrowserSession | None = None

    @property
    def open_sessions(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def acquire_session(
        self,
        step: Step,
        browser_type: str,
        executable_path: str,
        proxy_host: str,
        proxy_port: int,
    ) -> BrowserSession | None:
        if self._active is not None:
            logger.warning("Session %s was not released before the next step", self._active.key)
            self._active.in_use = False
            self._active = None

        key = session_key(step)
        session = self._sessions.get(key)
        if session is not None and session.page.is_closed():
            logger.info("Page for session %s was closed, reopening", key)
            self._close_session(self._sessions.pop(key))
            session = None

        if session is None:
            try:
                session = self._launch(key, browser_type, executable_path, proxy_host, proxy_port)
            except PlaywrightError as e:
                logger.error("Cannot start %s for session %s: %s", browser_type, key, e)
                return None
            self._sessions[key] = session

        session.in_use = True
        self._active = session
        return session

    def _launch(
        self,
        key: str,
        browser_type: str,
        executable_path: str,
        proxy_host: str,
        proxy_port: int,
    ) -> BrowserSession:
        if self._playwright is None:
            self._playwright = self._factory().start()

        launch_args: dict[str, Any] = {"headless": self._settings.browser.headless}
        if executable_path:
            launch_args["executable_path"] = executable_path
        if proxy_host:
            server = f"http://{proxy_host}:{proxy_port}" if proxy_port else f"http://{proxy_host}"
            launch_args["proxy"] = {"server": server}

        engine = getattr(self._playwright, browser_type)
        browser = engine.launch(**launch_args)
        context = browser.new_context()
        page = context.new_page()
        logger.info("Started %s session %s (proxy=%s)", browser_type, key, launch_args.get("proxy"))
        return BrowserSession(key=key, browser=browser, context=context, page=page, browser_type=browser_type)

    def release_session(self, session: BrowserSession, step: Step) -> None:
        session.in_use = False
        session.steps_replayed += 1
        if self._active is session:
            self._active = None

    def close_all_sessions(self) -> None:
        for session in self._sessions.values():
            self._close_session(session)
        closed = len(self._sessions)
        self._sessions.clear()
        self._active = None
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except PlaywrightError as e:
                logger.warning("Stopping Playwright failed: %s", e)
            self._playwright = None
        logger.info("Closed %d browser session(s)", closed)

    @staticmethod
    def _close_session(session: BrowserSession) -> None:
        try:
            session.context.close()
            session.browser.close()
        except PlaywrightError as e:
            logger.warning("Closing session %s failed: %s", session.key, e)

    # ------------------------------------------------------------------
    # Step operations
    # ------------------------------------------------------------------

    def open_url(self, session: BrowserSession, step: Step) -> None:
        response = goto_step_url(
            session.page,
            step.get(StepField.URL, ""),
            timeout_ms=self._settings.browser.navigation_timeout_ms,
        )
        if response is not None:
            session.frame = None
            logger.debug("Opened %s (status %s)", session.page.url, response.status)

    def wait_for_idle(self, session: BrowserSession, step: Step) -> bool:
        settled = self._wait_for_async_requests(session, step)
        return self._wait_for_ui_shown(session, step) and settled

    def _wait_for_async_requests(self, session: BrowserSession, step: Step) -> bool:
        playback = self._settings.playback
        script_id = self._settings.scripts.is_async_requests_completed

        if not script_id:
            try:
                session.page.wait_for_load_state(
                    "networkidle", timeout=playback.async_requests_timeout_sec * 1000
                )
                return True
            except PlaywrightTimeout:
                logger.warning(
                    "Page did not reach networkidle in %ds, continuing", playback.async_requests_timeout_sec
                )
                return False

        settled = poll_until(
            lambda: self._hooks.is_async_requests_completed(script_id, session, step),
            timeout_sec=playback.async_requests_timeout_sec,
            interval_ms=playback.ui_check_interval_ms,
        )
        if not settled:
            logger.warning(
                "Async requests still running after %ds (eventId=%s), continuing",
                playback.async_requests_timeout_sec,
                step.get(StepField.EVENT_ID),
            )
        return settled

    def _wait_for_ui_shown(self, session: BrowserSession, step: Step) -> bool:
        script_id = self._settings.scripts.is_ui_shown
        if not script_id:
            return True
        playback = self._settings.playback
        shown = poll_until(
            lambda: self._hooks.is_ui_shown(script_id, session, step),
            timeout_sec=playback.ui_shown_timeout_sec,
            interval_ms=playback.ui_check_interval_ms,
        )
        if not shown:
            logger.warning(
                "UI not shown after %ds (eventId=%s), continuing",
                playback.ui_shown_timeout_sec,
                step.get(StepField.EVENT_ID),
            )
        return shown

    def switch_context(self, session: BrowserSession, step: Step) -> None:
        switch_to_working_frame(
            session, step, timeout_ms=self._settings.playback.ui_shown_timeout_sec * 1000
        )

    def process_scroll(self, session: BrowserSession, step: Step, target: str | None) -> None:
        if target:
            script_id = self._settings.scripts.element_lookup
            lookup = functools.partial(self._hooks.lookup_element, script_id, session, step) if script_id else None
            element = find_element(
                session.scope,
                step,
                timeout_ms=self._settings.playback.ui_shown_timeout_sec * 1000,
                lookup=lookup,
            )
            element.scroll_into_view_if_needed()
            return
        x = int(step.get("scrollX") or 0)
        y = int(step.get("scrollY") or 0)
        session.scope.evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])

    def capture_artifact(self, session: BrowserSession, destination: Path) -> bool:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            session.page.screenshot(path=str(destination), full_page=True)
        except (PlaywrightError, OSError) as e:
            logger.error("Screenshot to %s failed: %s", destination, e)
            return False
        logger.debug("Screenshot saved to %s", destination)
        return True

    def describe(self, session: BrowserSession) -> str:
        return f"{session.browser_type} tab={session.key} url={session.page.url}"
