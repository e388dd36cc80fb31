"""Python-callable script evaluator.

Hook scripts are plain Python callables taking the binding mapping::

    def is_idle(binding):
        page = binding["session"].page
        return page.evaluate("() => window.jQuery ? jQuery.active === 0 : true")

Identifiers either name a callable registered on the evaluator or point at
an importable attribute, ``package.module:function`` or
``package.module.function``.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping

from uireplay.hooks.base import ScriptEvaluator

logger = logging.getLogger(__name__)

HookCallable = Callable[[Mapping[str, Any]], Any]


class CallableScriptEvaluator(ScriptEvaluator):
    """Evaluate hook scripts implemented as Python callables.

    Args:
        scripts: Initial ``script_id -> callable`` registrations.
    """

    def __init__(self, scripts: Mapping[str, HookCallable] | None = None) -> None:
        self._scripts: dict[str, HookCallable] = dict(scripts or {})

    def register(self, script_id: str, func: HookCallable) -> None:
        """Register (or replace) the callable behind *script_id*."""
        self._scripts[script_id] = func

    def evaluate(self, script_id: str, binding: Mapping[str, Any]) -> Any:
        func = self.resolve(script_id)
        return func(binding)

    def resolve(self, script_id: str) -> HookCallable:
        """Return the callable behind *script_id*, importing it on first use.

        Raises:
            LookupError: If the identifier is neither registered nor importable.
        """
        func = self._scripts.get(script_id)
        if func is not None:
            return func

        func = _import_callable(script_id)
        self._scripts[script_id] = func
        logger.debug("Resolved hook script %s", script_id)
        return func


def _import_callable(path: str) -> HookCallable:
    """Import ``module:attr`` or ``module.attr`` and return the callable.

    Raises:
        LookupError: If the path cannot be imported or is not callable.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise LookupError(f"Unknown hook script {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise LookupError(f"Cannot import hook module {module_name!r}: {e}") from e

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise LookupError(f"Hook {path!r}: {module_name} has no attribute {attr!r}") from e

    if not callable(target):
        raise LookupError(f"Hook {path!r} is not callable")
    return target
