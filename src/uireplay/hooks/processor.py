"""Typed adapters over the script hook boundary.

``HookProcessor`` is the only place the playback code talks to hook
scripts. Each method builds the binding for one hook, evaluates it, and
checks the result type. Any exception raised by a script surfaces as a
``HookError`` carrying the script identifier; hooks are never retried.

An empty script identifier selects the built-in behaviour for that hook.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from uireplay.exceptions import HookError, HookResultError
from uireplay.hooks.base import Binding, ScriptEvaluator
from uireplay.hooks.evaluators import CallableScriptEvaluator
from uireplay.hooks.templating import StepTemplater
from uireplay.scenario.models import Step, StepField

if TYPE_CHECKING:
    from uireplay.scenario.scenario import Scenario

logger = logging.getLogger(__name__)

_NO_CHECK = object()


class HookProcessor:
    """Invoke playback hooks through a ``ScriptEvaluator``.

    Args:
        evaluator: Script evaluator. Defaults to a ``CallableScriptEvaluator``.
        templater: Built-in templater used when no templating script is set.
    """

    def __init__(
        self,
        evaluator: ScriptEvaluator | None = None,
        templater: StepTemplater | None = None,
    ) -> None:
        self.evaluator = evaluator or CallableScriptEvaluator()
        self.templater = templater or StepTemplater()

    def _evaluate(self, script_id: str, binding: dict[str, Any], expected: Any = _NO_CHECK) -> Any:
        try:
            result = self.evaluator.evaluate(script_id, binding)
        except HookError:
            raise
        except Exception as e:
            raise HookError(script_id, f"{type(e).__name__}: {e}") from e

        if expected is not _NO_CHECK and not isinstance(result, expected):
            raise HookResultError(script_id, expected, result)
        return result

    @staticmethod
    def _scenario_binding(scenario: Scenario, **values: Any) -> dict[str, Any]:
        binding = {Binding.SCENARIO: scenario, Binding.CONTEXT: scenario.context}
        binding.update(values)
        return binding

    # ------------------------------------------------------------------
    # Per-step hooks, in call order
    # ------------------------------------------------------------------

    def replace_url(self, script_id: str, step: Step, scenario: Scenario) -> str:
        """Return the URL the step should be replayed against."""
        url = step.get(StepField.URL, "")
        if not script_id:
            return url
        binding = self._scenario_binding(scenario, **{Binding.STEP: step, Binding.URL: url})
        return self._evaluate(script_id, binding, str)

    def run_step_pre_post(
        self,
        script_id: str,
        step: Step,
        position: int,
        pre: bool,
        scenario: Scenario,
    ) -> Any:
        """Run the pre-step (``pre=True``) or post-step hook. The result is only logged."""
        if not script_id:
            return None
        binding = self._scenario_binding(
            scenario,
            **{Binding.STEP: step, Binding.POSITION: position, Binding.PRE: pre},
        )
        result = self._evaluate(script_id, binding)
        logger.debug("%s-step hook at %d returned %r", "Pre" if pre else "Post", position, result)
        return result

    def apply_templating(self, script_id: str, step: Step, scenario: Scenario) -> Step:
        """Return the step with placeholder fields resolved."""
        if not script_id:
            return self.templater.render_step(step, scenario.context.variables)
        binding = self._scenario_binding(scenario, **{Binding.STEP: step})
        return self._evaluate(script_id, binding, dict)

    def is_duplicate(self, script_id: str, step: Step, previous: Step, scenario: Scenario) -> bool:
        """True when *step* repeats *previous* and should not be replayed."""
        if not script_id:
            return False
        binding = self._scenario_binding(scenario, **{Binding.STEP: step, Binding.PREVIOUS: previous})
        return self._evaluate(script_id, binding, bool)

    def execute_script_event(self, script_id: str, step: Step, scenario: Scenario) -> Any:
        """Execute a recorded ``script`` step."""
        if not script_id:
            logger.warning(
                "Script step eventId=%s skipped: no script event handler configured",
                step.get(StepField.EVENT_ID),
            )
            return None
        binding = self._scenario_binding(scenario, **{Binding.STEP: step})
        return self._evaluate(script_id, binding)

    # ------------------------------------------------------------------
    # Session hooks
    # ------------------------------------------------------------------

    def is_async_requests_completed(self, script_id: str, session: Any, step: Step) -> bool:
        """True once the page has no pending asynchronous activity."""
        if not script_id:
            return True
        return self._evaluate(script_id, {Binding.SESSION: session, Binding.STEP: step}, bool)

    def has_page_error(self, script_id: str, session: Any) -> bool:
        """True when the page shows an application error."""
        if not script_id:
            return False
        return self._evaluate(script_id, {Binding.SESSION: session}, bool)

    def wait_after_event(
        self,
        script_id: str,
        session: Any,
        step: Step,
        scenario: Scenario,
        driver: Any = None,
    ) -> None:
        """Cooperative delay point after a step has been dispatched."""
        if not script_id:
            return
        binding = self._scenario_binding(
            scenario,
            **{Binding.SESSION: session, Binding.STEP: step, Binding.DRIVER: driver},
        )
        self._evaluate(script_id, binding)

    def is_select_element(self, script_id: str, session: Any, step: Step, element: Any) -> bool:
        """True when the click target is a ``<select>``-like element."""
        if not script_id:
            return False
        binding = {Binding.SESSION: session, Binding.STEP: step, Binding.ELEMENT: element}
        return self._evaluate(script_id, binding, bool)

    def should_skip_keyboard(self, script_id: str, session: Any, step: Step) -> bool:
        """True when a keyboard step should not be replayed."""
        if not script_id:
            return False
        return self._evaluate(script_id, {Binding.SESSION: session, Binding.STEP: step}, bool)

    def lookup_element(self, script_id: str, session: Any, step: Step, target: str) -> Any:
        """Locate *target* with a scripted finder. ``None`` means not found."""
        binding = {Binding.SESSION: session, Binding.STEP: step, Binding.TARGET: target}
        return self._evaluate(script_id, binding)

    def is_ui_shown(self, script_id: str, session: Any, step: Step) -> bool:
        """True once the page UI is ready for the step to be dispatched."""
        if not script_id:
            return True
        return self._evaluate(script_id, {Binding.SESSION: session, Binding.STEP: step}, bool)
