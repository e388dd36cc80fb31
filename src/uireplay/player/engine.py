"""Playback engine: replay a recorded scenario step by step.

Per step the engine resolves the URL and templates, decides whether the
step is replayable at all, and only then takes a browser session,
dispatches the step to its handler, waits for the page to settle, and
checks the page for application errors.

Failure policy:

* **Skips** (unresolved URL template, duplicate, ignored, bad step) log
  and return before any session is touched.
* **Recoverable** failures (handler errors, detected page errors) are
  logged; the step is still finalized and playback continues.
* **Fatal** failures (no session, hook errors, navigation errors, anything
  outside the handler block) abort the run with ``PlaybackAbortedError``.
  When ``playback.close_sessions_on_error`` is set, every browser session
  is closed before the error reaches the caller.

A step that took a session always releases it exactly once, on every exit
path.
"""

from __future__ import annotations

import copy
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from uireplay.browser.session import SessionDriver
from uireplay.exceptions import NullSessionError, PageErrorDetected, PlaybackAbortedError
from uireplay.handlers.registry import HandlerRegistry
from uireplay.hooks.processor import HookProcessor
from uireplay.hooks.templating import has_unresolved_placeholder
from uireplay.scenario.models import (
    EventType,
    PlaybackResult,
    Step,
    StepField,
    StepOutcome,
    StepResult,
)
from uireplay.scenario.scenario import Scenario

logger = logging.getLogger(__name__)


class ScenarioPlayer:
    """Replays a ``Scenario`` through a ``SessionDriver``.

    Args:
        scenario: The scenario to play; its settings drive the run.
        driver: Browser automation backend.
        hooks: Hook processor. Defaults to built-in hook behaviour only.
        registry: Handler registry. Defaults to the built-in handlers.
    """

    def __init__(
        self,
        scenario: Scenario,
        driver: SessionDriver,
        hooks: HookProcessor | None = None,
        registry: HandlerRegistry | None = None,
    ) -> None:
        self.scenario = scenario
        self.driver = driver
        self.hooks = hooks or HookProcessor()
        self.registry = registry or HandlerRegistry(self.hooks, scenario.settings, driver)
        self.last_result: PlaybackResult | None = None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def play(self, start: int = 0, finish: int = 0) -> PlaybackResult:
        """Replay steps ``[start, min(finish, steps_count))``; ``finish <= 0`` means to the end.

        Returns:
            A ``PlaybackResult`` with one ``StepResult`` per processed step.

        Raises:
            PlaybackAbortedError: When a step fails fatally.
        """
        steps_count = self.scenario.get_steps_count()
        start = min(max(start, 0), steps_count)
        max_position = min(finish, steps_count) if finish > 0 else steps_count

        result = PlaybackResult(scenario_name=self.scenario.name, start=start, finish=max_position)
        self.last_result = result
        begin = time.monotonic()

        if start > 0:
            logger.info("Skipping first %d events.", start)
        logger.info(
            "Playing scenario %s. Start step: %d, finish step: %d. Steps count: %d",
            self.scenario.name,
            start,
            max_position,
            max(0, max_position - start),
        )
        self.scenario.set_position(start)

        failed = False
        try:
            while self.scenario.get_position() < max_position:
                position = self.scenario.get_position()
                logger.info("Step %d", position)
                result.step_results.append(self.apply_step(position))
                self.scenario.move_to_next_step()
        except BaseException as e:
            failed = True
            result.aborted = True
            result.error = str(e)
            if isinstance(e, PlaybackAbortedError):
                result.step_results.append(
                    StepResult(
                        position=e.position,
                        event_id=e.event_id,
                        outcome=StepOutcome.FATAL,
                        error=str(e.__cause__ or e),
                    )
                )
            logger.exception("Playing interrupted by unhandled exception")
            raise
        finally:
            result.duration_sec = time.monotonic() - begin
            result.completed_at = datetime.now(timezone.utc)
            if failed and self.scenario.settings.playback.close_sessions_on_error:
                self.driver.close_all_sessions()

        logger.info(
            "Done(%.1fs): playing %s, %d step(s) %s",
            result.duration_sec,
            self.scenario.name,
            result.processed_steps,
            result.outcome_counts(),
        )
        return result

    # ------------------------------------------------------------------
    # Single step
    # ------------------------------------------------------------------

    def apply_step(self, position: int) -> StepResult:
        """Replay the step at *position*.

        Raises:
            PlaybackAbortedError: When the step fails fatally.
        """
        began = time.monotonic()
        scenario = self.scenario
        settings = scenario.settings
        scripts = settings.scripts

        step = copy.deepcopy(scenario.get_step_at(position))
        scenario.context.current_step = step
        event_id = step.get(StepField.EVENT_ID)

        session: Any = None
        fatal = False
        step_failed = False
        outcome = StepOutcome.COMPLETED
        error_text = ""

        def finished(final: StepOutcome, error: str = "") -> StepResult:
            return StepResult(
                position=position,
                event_id=event_id,
                event_type=str(step.get(StepField.TYPE, "")),
                url=str(step.get(StepField.URL) or ""),
                outcome=final,
                error=error,
                duration_sec=time.monotonic() - began,
            )

        try:
            step[StepField.URL] = self.hooks.replace_url(scripts.url_replacement, step, scenario)
            event_type = step.get(StepField.TYPE)
            logger.info("Event type: %s", event_type)

            self.hooks.run_step_pre_post(scripts.step_pre_post, step, position, True, scenario)
            step = self.hooks.apply_templating(scripts.templating, step, scenario)
            scenario.context.current_step = step
            event_id = step.get(StepField.EVENT_ID)

            url = step.get(StepField.URL)
            if has_unresolved_placeholder(url):
                logger.error(
                    "Event at position %d cannot be processed due to url contains unprocessed templates. "
                    "EventId: %s URL: %s",
                    position,
                    event_id,
                    url,
                )
                return finished(StepOutcome.SKIPPED_TEMPLATE)

            logger.info("Current step eventId %s URL: %s", event_id, url)

            if scenario.is_step_duplicates(self.hooks, scripts.duplicate_handler, step):
                logger.warning("Event %d (eventId=%s) duplicates previous", position, event_id)
                return finished(StepOutcome.SKIPPED_DUPLICATE)

            ignored = Scenario.is_event_ignored(step)
            if ignored or Scenario.is_event_bad(step):
                logger.warning(
                    "Event %d (eventId=%s) is %s. Type: %s%s",
                    position,
                    event_id,
                    "ignored" if ignored else "bad",
                    step.get(StepField.TYPE),
                    Scenario.describe_targets(step),
                )
                return finished(StepOutcome.SKIPPED_IGNORED if ignored else StepOutcome.SKIPPED_BAD)

            if EventType.from_tag(event_type) == EventType.SCRIPT:
                self.hooks.execute_script_event(scripts.script_event_handler, step, scenario)
                return finished(StepOutcome.SCRIPT)

            browser = settings.browser
            session = self.driver.acquire_session(
                step, browser.browser_type, browser.executable_path, browser.proxy_host, browser.proxy_port
            )
            if session is None:
                raise NullSessionError(position, event_id)

            self.driver.open_url(session, step)
            logger.info("Event %d. Display %s", position, self.driver.describe(session))
            self.driver.wait_for_idle(session, step)
            self.driver.switch_context(session, step)

            try:
                handler = self.registry.get_handler(event_type)
                handler.handle_event(session, step)

                self.driver.wait_for_idle(session, step)
                self.hooks.wait_after_event(scripts.wait_after_event, session, step, scenario, self.driver)

                if self.hooks.has_page_error(scripts.is_browser_have_error, session):
                    raise PageErrorDetected(position)
            except Exception as e:
                step_failed = True
                outcome = StepOutcome.PAGE_ERROR if isinstance(e, PageErrorDetected) else StepOutcome.HANDLER_FAILED
                error_text = str(e)
                self.process_step_exception(position, step, e)
        except Exception as e:
            fatal = True
            raise PlaybackAbortedError(position, event_id, f"{type(e).__name__}: {e}") from e
        except BaseException:
            fatal = True
            raise
        finally:
            if session is not None:
                self._finalize(position, step, session, fatal=fatal, step_failed=step_failed)

        return finished(outcome, error_text)

    def process_step_exception(self, position: int, step: Step, exc: Exception) -> None:
        """Handle a recoverable step failure. Logs by default; re-raise to make it fatal."""
        logger.error(
            "Failed to process step %d (eventId=%s, url=%s):%s %s",
            position,
            step.get(StepField.EVENT_ID),
            step.get(StepField.URL),
            Scenario.describe_targets(step),
            exc,
            exc_info=exc,
        )

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def _finalize(self, position: int, step: Step, session: Any, *, fatal: bool, step_failed: bool) -> None:
        post_error: Exception | None = None
        if not fatal:
            try:
                self.scenario.update_event(step)
                self.hooks.run_step_pre_post(
                    self.scenario.settings.scripts.step_pre_post, step, position, False, self.scenario
                )
            except Exception as e:
                post_error = e

        try:
            self._make_shot(session, position, fatal or step_failed or post_error is not None)
        finally:
            self.driver.release_session(session, step)

        if post_error is not None:
            raise PlaybackAbortedError(
                position, step.get(StepField.EVENT_ID), f"{type(post_error).__name__}: {post_error}"
            ) from post_error

    def screenshot_path(self, position: int, is_error: bool) -> Path:
        """Where the screenshot for *position* goes; error shots get an ``_error_`` prefix."""
        directory = Path(self.scenario.settings.screenshots.directory) / self.scenario.name
        prefix = "_error_" if is_error else ""
        return directory / f"{prefix}{position:05d}.png"

    def _make_shot(self, session: Any, position: int, is_error: bool) -> None:
        if not self.scenario.settings.screenshots.enabled:
            return
        destination = self.screenshot_path(position, is_error)
        logger.info("Making screenshot %s", destination.name)
        try:
            self.driver.capture_artifact(session, destination)
        except Exception:
            logger.exception("Screenshot for step %d failed", position)
