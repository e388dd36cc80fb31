"""Keyboard interactions.

``keydown`` / ``keyup`` steps only replay non-printable keys (Enter, Tab,
arrows, ...); printable characters arrive as ``keypress`` steps and are
typed from there, so nothing is entered twice.
"""

from __future__ import annotations

import logging
import random
import string
from typing import TYPE_CHECKING, Any

from uireplay.handlers.base import BaseEventHandler
from uireplay.scenario.models import EventType, Step, StepField

if TYPE_CHECKING:
    from uireplay.browser.session import BrowserSession

logger = logging.getLogger(__name__)

# DOM keyCode -> Playwright key name, for keys that do not produce text.
SPECIAL_KEYS: dict[int, str] = {
    8: "Backspace",
    9: "Tab",
    13: "Enter",
    16: "Shift",
    17: "Control",
    18: "Alt",
    27: "Escape",
    33: "PageUp",
    34: "PageDown",
    35: "End",
    36: "Home",
    37: "ArrowLeft",
    38: "ArrowUp",
    39: "ArrowRight",
    40: "ArrowDown",
    46: "Delete",
}

_RANDOM_ALPHABET = string.ascii_letters + string.digits


def special_key(step: Step) -> str | None:
    """Playwright name of the non-printable key in *step*, if it has one."""
    code = _as_int(step.get("keyCode"))
    if code in SPECIAL_KEYS:
        return SPECIAL_KEYS[code]
    key = step.get("key")
    if isinstance(key, str) and key in SPECIAL_KEYS.values():
        return key
    return None


def typed_char(step: Step) -> str | None:
    """The character a ``keypress`` step produced, if any.

    Control characters (Enter, Tab, Backspace, ...) are replayed by the
    ``keydown`` / ``keyup`` steps recorded around the keypress.
    """
    code = _as_int(step.get("charCode"))
    if code is not None and 0 < code < 0x110000:
        char = chr(code)
    else:
        char = step.get("key")
        if not isinstance(char, str) or len(char) != 1:
            return None
    return char if char.isprintable() else None


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class KeyboardEventHandler(BaseEventHandler):
    """Shared skip-keyboard check for keyboard handlers."""

    SHOULD_SKIP_KEYBOARD_SCRIPT = "shouldSkipKeyboardScript"

    def should_skip(self, session: BrowserSession, step: Step) -> bool:
        script_id = self.properties.get(self.SHOULD_SKIP_KEYBOARD_SCRIPT, "")
        if self.hooks.should_skip_keyboard(script_id, session, step):
            logger.info("Keyboard step eventId=%s skipped by hook", step.get(StepField.EVENT_ID))
            return True
        return False


class KeyUpDownEventHandler(KeyboardEventHandler):
    """Replay ``keydown`` / ``keyup`` of non-printable keys."""

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        if self.should_skip(session, step):
            return
        key = special_key(step)
        if key is None:
            return

        self.find_element(session, step).focus()
        if EventType.from_tag(step.get(StepField.TYPE)) == EventType.KEY_DOWN:
            session.page.keyboard.down(key)
        else:
            session.page.keyboard.up(key)


class KeyPressEventHandler(KeyboardEventHandler):
    """Type the character of a ``keypress`` step into its target."""

    USE_RANDOM_CHARS = "useRandomChars"

    def handle_event(self, session: BrowserSession, step: Step) -> None:
        if self.should_skip(session, step):
            return
        char = typed_char(step)
        if char is None:
            logger.debug("keypress eventId=%s carries no character", step.get(StepField.EVENT_ID))
            return

        if self.properties.get(self.USE_RANDOM_CHARS):
            char = random.choice(_RANDOM_ALPHABET)
        self.find_element(session, step).press_sequentially(char)
