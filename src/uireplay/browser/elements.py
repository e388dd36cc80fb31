"""Element lookup for recorded target references.

Recorded targets are usually XPath expressions; anything that does not
look like XPath is handed to Playwright as a CSS selector.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from uireplay.exceptions import ElementNotFoundError
from uireplay.scenario.models import Step, StepField
from uireplay.scenario.scenario import Scenario

if TYPE_CHECKING:
    from playwright.sync_api import Locator

logger = logging.getLogger(__name__)


def element_selector(reference: str) -> str:
    """Turn a recorded element reference into a Playwright selector."""
    reference = reference.strip()
    if reference.startswith(("xpath=", "css=")):
        return reference
    if reference.startswith(("/", "(")):
        return f"xpath={reference}"
    return reference


def find_element(
    scope: Any,
    step: Step,
    *,
    timeout_ms: int,
    lookup: Callable[[str], Any] | None = None,
) -> Locator:
    """Return the first visible element among the step's target references.

    Args:
        scope: Playwright ``Page`` or ``Frame`` to search in.
        step: The step whose ``target`` / ``firstTarget`` / ``secondTarget`` are tried in order.
        timeout_ms: How long to wait for each candidate to become visible.
        lookup: Scripted finder used instead of the selector lookup. It gets
            one target reference and returns the element or ``None``.

    Raises:
        ElementNotFoundError: If no candidate becomes visible in time.
    """
    targets = Scenario.get_targets_for_event(step)
    for reference in targets:
        if lookup is not None:
            element = lookup(reference)
            if element is not None:
                return element
            logger.debug("Lookup script found nothing for %s", reference)
            continue

        locator = scope.locator(element_selector(reference)).first
        try:
            locator.wait_for(state="visible", timeout=timeout_ms)
            return locator
        except PlaywrightTimeout:
            logger.debug("Target %s not visible after %dms", reference, timeout_ms)
    raise ElementNotFoundError(step.get(StepField.EVENT_ID), targets)
