"""Interaction handlers: replay one recorded step type each.

Modules:

* ``base``: ``BaseEventHandler`` and the ``DummyEventHandler`` fallback.
* ``mouse``: click, wheel, and scroll emulation.
* ``keyboard``: key up/down and key press.
* ``registry``: ``HandlerRegistry``, case-insensitive type tag lookup.
"""

from uireplay.handlers.base import BaseEventHandler, DummyEventHandler
from uireplay.handlers.registry import HandlerRegistry

__all__ = ["BaseEventHandler", "DummyEventHandler", "HandlerRegistry"]
