"""Abstract script evaluator interface for playback hooks."""

from __future__ import annotations

import abc
from typing import Any, Mapping


class Binding:
    """Names of the values a hook binding may carry."""

    STEP = "step"
    PREVIOUS = "previous"
    POSITION = "position"
    PRE = "pre"
    URL = "url"
    SCENARIO = "scenario"
    CONTEXT = "context"
    SESSION = "session"
    DRIVER = "driver"
    ELEMENT = "element"
    TARGET = "target"


class ScriptEvaluator(abc.ABC):
    """Evaluates a named hook script against a binding of named inputs."""

    @abc.abstractmethod
    def evaluate(self, script_id: str, binding: Mapping[str, Any]) -> Any:
        """Run the script identified by *script_id* and return its result.

        Args:
            script_id: Configured identifier of the hook script.
            binding: Named inputs (step, session, scenario context, ...).

        Returns:
            Whatever the script produces. Type checking is done by the caller.
        """

    def close(self) -> None:
        """Release evaluator resources. Override if needed."""
