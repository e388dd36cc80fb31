"""Mouse interactions: clicks, wheel, and scroll emulation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from uireplay.browser.elements import element_selector
from uireplay.handlers.base import BaseEventHandler
from uireplay.scenario.models import Step, StepField
from uireplay.scenario.scenario import Scenario

if TYPE_CHECKING:
    from uireplay.browser.session import BrowserSession, SessionDriver
    from uireplay.hooks.processor import HookProcessor
    from uireplay.settings.config import PlaybackSettings

logger = logging.getLogger(__name__)

# DOM MouseEvent.button -> Playwright button name
_BUTTONS = {0: "left", 1: "middle", 2: "right"}


class MouseClickEventHandler(BaseEventHandler):
    """Replay ``mousedown`` and ``click`` steps.

    ``<select>``-like targets (as decided by the select-element hook) are
    driven through ``select_option`` when the step recorded a ``value``.
    Otherwise they are clicked, and when ``SELECT_XPATH`` is set the handler
    waits for the popup it names to open.
    """

    IS_SELECT_ELEMENT_SCRIPT = "isSelectElementScript"
    SELECT_XPATH = "selectXpath"

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        element = self.find_element(session, step)
        timeout_ms = self.playback.ui_shown_timeout_sec * 1000

        script_id = self.properties.get(self.IS_SELECT_ELEMENT_SCRIPT, "")
        is_select = self.hooks.is_select_element(script_id, session, step, element)
        if is_select and step.get("value") is not None:
            element.select_option(str(step["value"]), timeout=timeout_ms)
            logger.debug("Selected %r (eventId=%s)", step["value"], step.get(StepField.EVENT_ID))
            return

        button = _BUTTONS.get(step.get("button", 0), "left")
        element.scroll_into_view_if_needed(timeout=timeout_ms)
        element.click(button=button, timeout=timeout_ms)

        popup_xpath = self.properties.get(self.SELECT_XPATH, "")
        if is_select and popup_xpath:
            session.scope.locator(element_selector(popup_xpath)).first.wait_for(state="visible", timeout=timeout_ms)
            logger.debug("Popup %s opened (eventId=%s)", popup_xpath, step.get(StepField.EVENT_ID))


class MouseWheelEventHandler(BaseEventHandler):
    """Replay ``mousewheel`` steps by ``deltaX`` / ``deltaY``."""

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        if Scenario.get_target_for_event(step):
            self.find_element(session, step).hover()
        delta_x = float(step.get("deltaX") or 0)
        delta_y = float(step.get("deltaY") or 0)
        session.page.mouse.wheel(delta_x, delta_y)


class ScrollEmulationEventHandler(BaseEventHandler):
    """Replay ``scroll_emulation`` steps through the session driver."""

    def __init__(self, hooks: HookProcessor, playback: PlaybackSettings, driver: SessionDriver) -> None:
        super().__init__(hooks, playback)
        self.driver = driver

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        self.driver.process_scroll(session, step, Scenario.get_target_for_event(step))
