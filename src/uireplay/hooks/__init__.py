"""Script hooks: the decision and transform points invoked during playback.

Modules:

* ``base``: ``ScriptEvaluator`` interface and ``Binding`` names.
* ``evaluators``: ``CallableScriptEvaluator`` for Python-callable hooks.
* ``templating``: Built-in ``${name}`` step templating (Jinja2).
* ``processor``: ``HookProcessor``, typed adapters used by the engine.
"""

from uireplay.hooks.base import Binding, ScriptEvaluator
from uireplay.hooks.evaluators import CallableScriptEvaluator
from uireplay.hooks.processor import HookProcessor
from uireplay.hooks.templating import StepTemplater, has_unresolved_placeholder

__all__ = [
    "Binding",
    "CallableScriptEvaluator",
    "HookProcessor",
    "ScriptEvaluator",
    "StepTemplater",
    "has_unresolved_placeholder",
]
