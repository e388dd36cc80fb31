"""Base class for step interaction handlers."""

from __future__ import annotations

import abc
import functools
import logging
from typing import TYPE_CHECKING, Any

from uireplay.browser.elements import find_element
from uireplay.scenario.models import Step, StepField

if TYPE_CHECKING:
    from playwright.sync_api import Locator

    from uireplay.browser.session import BrowserSession
    from uireplay.hooks.processor import HookProcessor
    from uireplay.settings.config import PlaybackSettings

logger = logging.getLogger(__name__)


class BaseEventHandler(abc.ABC):
    """Replays one kind of recorded interaction against a session.

    Handlers are created per step by the registry, which also supplies the
    named extra properties (hook script ids, flags) they consult.

    Args:
        hooks: Hook processor for auxiliary predicates.
        playback: Playback timing settings.
    """

    ELEMENT_LOOKUP_SCRIPT = "elementLookupScript"

    def __init__(self, hooks: HookProcessor, playback: PlaybackSettings) -> None:
        self.hooks = hooks
        self.playback = playback
        self.properties: dict[str, Any] = {}

    def add_additional_property(self, name: str, value: Any) -> None:
        self.properties[name] = value

    @abc.abstractmethod
    def handle_event(self, session: BrowserSession, step: Step) -> None:
        """Perform the interaction recorded in *step*."""

    def find_element(self, session: BrowserSession, step: Step) -> Locator:
        script_id = self.properties.get(self.ELEMENT_LOOKUP_SCRIPT, "")
        lookup = functools.partial(self.hooks.lookup_element, script_id, session, step) if script_id else None
        return find_element(
            session.scope, step, timeout_ms=self.playback.ui_shown_timeout_sec * 1000, lookup=lookup
        )


class DummyEventHandler(BaseEventHandler):
    """Fallback for step types nothing knows how to replay."""

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        logger.info(
            "No interaction replayed for type %r (eventId=%s)",
            step.get(StepField.TYPE),
            step.get(StepField.EVENT_ID),
        )
