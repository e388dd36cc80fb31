"""Switch a session into the frame a step was recorded in.

The step's ``iframe`` field names the frame element: an XPath or CSS
reference, nested frames given as a list or joined with `` > ``.
"""

from __future__ import annotations

import logging
from typing import Any

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from uireplay.browser.elements import element_selector
from uireplay.browser.session import BrowserSession
from uireplay.exceptions import FrameNotFoundError
from uireplay.scenario.models import Step, StepField

logger = logging.getLogger(__name__)


def frame_path(step: Step) -> list[str]:
    """Frame references from outermost to innermost; empty for the top-level page."""
    value: Any = step.get(StepField.IFRAME)
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(" > ")
    return [str(part).strip() for part in value if str(part).strip()]


def switch_to_working_frame(session: BrowserSession, step: Step, *, timeout_ms: int = 10_000) -> None:
    """Point ``session.frame`` at the step's frame, or back at the top-level page.

    Raises:
        FrameNotFoundError: If a frame element is missing or has no content frame.
    """
    session.frame = None
    path = frame_path(step)
    if not path:
        return

    scope = session.page
    for reference in path:
        try:
            handle = scope.locator(element_selector(reference)).first.element_handle(timeout=timeout_ms)
        except PlaywrightTimeout as e:
            raise FrameNotFoundError(reference) from e
        frame = handle.content_frame() if handle is not None else None
        if frame is None:
            raise FrameNotFoundError(reference)
        scope = frame

    logger.debug("Switched to frame %s", " > ".join(path))
    session.frame = scope
