"""Handler registry: maps a step's type tag to the handler that replays it.

Lookup is case-insensitive. Unknown tags resolve to ``DummyEventHandler``
with a warning rather than an error. Handlers are built per dispatch so
the extra properties they receive always reflect the current settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from uireplay.handlers.base import BaseEventHandler, DummyEventHandler
from uireplay.handlers.keyboard import KeyPressEventHandler, KeyUpDownEventHandler
from uireplay.handlers.mouse import (
    MouseClickEventHandler,
    MouseWheelEventHandler,
    ScrollEmulationEventHandler,
)
from uireplay.scenario.models import EventType

if TYPE_CHECKING:
    from uireplay.browser.session import SessionDriver
    from uireplay.hooks.processor import HookProcessor
    from uireplay.settings.config import Settings

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], BaseEventHandler]


class HandlerRegistry:
    """Type tag → handler lookup.

    Args:
        hooks: Hook processor handed to every handler.
        settings: Run configuration supplying hook ids and flags.
        driver: Session driver, for handlers that delegate to it.
    """

    def __init__(self, hooks: HookProcessor, settings: Settings, driver: SessionDriver) -> None:
        self._hooks = hooks
        self._settings = settings
        self._driver = driver
        self._factories: dict[str, HandlerFactory] = {}

        self.register(EventType.CLICK, self._mouse_click)
        self.register(EventType.MOUSE_DOWN, self._mouse_click)
        self.register(EventType.MOUSE_WHEEL, self._mouse_wheel)
        self.register(EventType.SCROLL_EMULATION, self._scroll_emulation)
        self.register(EventType.KEY_UP, self._key_up_down)
        self.register(EventType.KEY_DOWN, self._key_up_down)
        self.register(EventType.KEY_PRESS, self._key_press)

    @staticmethod
    def _normalize(tag: EventType | str) -> str:
        value = tag.value if isinstance(tag, EventType) else str(tag)
        return value.strip().lower()

    def register(self, tag: EventType | str, factory: HandlerFactory) -> None:
        """Register (or replace) the handler factory for *tag*."""
        self._factories[self._normalize(tag)] = factory

    def is_registered(self, tag: EventType | str) -> bool:
        return self._normalize(tag) in self._factories

    def get_handler(self, tag: EventType | str | None) -> BaseEventHandler:
        """Build the handler for *tag*, falling back to ``DummyEventHandler``."""
        factory = self._factories.get(self._normalize(tag or ""))
        if factory is None:
            logger.warning("Unknown event type: %s", tag)
            handler: BaseEventHandler = DummyEventHandler(self._hooks, self._settings.playback)
        else:
            handler = factory()
        handler.add_additional_property(
            BaseEventHandler.ELEMENT_LOOKUP_SCRIPT, self._settings.scripts.element_lookup
        )
        return handler

    # ------------------------------------------------------------------
    # Built-in factories
    # ------------------------------------------------------------------

    def _mouse_click(self) -> BaseEventHandler:
        handler = MouseClickEventHandler(self._hooks, self._settings.playback)
        handler.add_additional_property(
            MouseClickEventHandler.IS_SELECT_ELEMENT_SCRIPT, self._settings.scripts.is_select_element
        )
        handler.add_additional_property(
            MouseClickEventHandler.SELECT_XPATH, self._settings.playback.form_or_dialog_xpath
        )
        return handler

    def _mouse_wheel(self) -> BaseEventHandler:
        return MouseWheelEventHandler(self._hooks, self._settings.playback)

    def _scroll_emulation(self) -> BaseEventHandler:
        return ScrollEmulationEventHandler(self._hooks, self._settings.playback, self._driver)

    def _key_up_down(self) -> BaseEventHandler:
        handler = KeyUpDownEventHandler(self._hooks, self._settings.playback)
        handler.add_additional_property(
            KeyUpDownEventHandler.SHOULD_SKIP_KEYBOARD_SCRIPT, self._settings.scripts.should_skip_keyboard
        )
        return handler

    def _key_press(self) -> BaseEventHandler:
        handler = KeyPressEventHandler(self._hooks, self._settings.playback)
        handler.add_additional_property(
            KeyPressEventHandler.SHOULD_SKIP_KEYBOARD_SCRIPT, self._settings.scripts.should_skip_keyboard
        )
        handler.add_additional_property(
            KeyPressEventHandler.USE_RANDOM_CHARS, self._settings.playback.use_random_chars
        )
        return handler
