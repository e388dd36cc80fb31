"""Unit tests for the hook layer: evaluator, templating, and the typed processor."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from uireplay.exceptions import HookError, HookResultError
from uireplay.hooks import Binding, CallableScriptEvaluator, HookProcessor, StepTemplater
from uireplay.hooks.templating import has_unresolved_placeholder
from uireplay.scenario import Scenario


# ===================================================================
# CallableScriptEvaluator
# ===================================================================


class TestCallableScriptEvaluator:
    """Script id resolution."""

    def test_registered_callable(self) -> None:
        evaluator = CallableScriptEvaluator({"double": lambda b: b["x"] * 2})
        assert evaluator.evaluate("double", {"x": 21}) == 42

    def test_register_replaces(self) -> None:
        evaluator = CallableScriptEvaluator({"hook": lambda b: 1})
        evaluator.register("hook", lambda b: 2)
        assert evaluator.evaluate("hook", {}) == 2

    @pytest.mark.parametrize("script_id", ["json:dumps", "json.dumps"])
    def test_import_path(self, script_id: str) -> None:
        """Both ``module:attr`` and ``module.attr`` resolve."""
        evaluator = CallableScriptEvaluator()
        assert evaluator.evaluate(script_id, {"a": 1}) == '{"a": 1}'

    def test_nested_attribute(self) -> None:
        evaluator = CallableScriptEvaluator()
        assert evaluator.evaluate("os:path.basename", "/tmp/file.txt") == "file.txt"

    @pytest.mark.parametrize(
        "script_id",
        ["nohooks", "no_such_module_xyz:func", "json:no_such_attr", "json:__doc__"],
    )
    def test_unknown_script(self, script_id: str) -> None:
        evaluator = CallableScriptEvaluator()
        with pytest.raises(LookupError):
            evaluator.evaluate(script_id, {})


# ===================================================================
# Templating
# ===================================================================


class TestStepTemplater:
    """Built-in ``${name}`` templating."""

    def test_renders_known_variable(self) -> None:
        templater = StepTemplater()
        assert templater.render_value("https://${host}/login", {"host": "app.test"}) == "https://app.test/login"

    def test_keeps_unknown_placeholder(self) -> None:
        templater = StepTemplater()
        rendered = templater.render_value("https://${host}/${path}", {"host": "app.test"})
        assert rendered == "https://app.test/${path}"
        assert has_unresolved_placeholder(rendered)

    def test_plain_braces_stay_literal(self) -> None:
        templater = StepTemplater()
        assert templater.render_value("{{ not a template }}", {"x": 1}) == "{{ not a template }}"

    def test_broken_template_returned_unchanged(self) -> None:
        templater = StepTemplater()
        assert templater.render_value("${ 1 + }", {}) == "${ 1 + }"

    def test_render_step_nested(self) -> None:
        templater = StepTemplater()
        step = {"url": "${base}/x", "eventId": 3, "extra": {"values": ["${user}", 5]}}
        rendered = templater.render_step(step, {"base": "https://a.test", "user": "bob"})
        assert rendered == {"url": "https://a.test/x", "eventId": 3, "extra": {"values": ["bob", 5]}}
        assert step["url"] == "${base}/x"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("https://${x}/", True), ("https://a/", False), ("$x{y}", False), (None, False), (12, False)],
    )
    def test_has_unresolved_placeholder(self, value, expected) -> None:
        assert has_unresolved_placeholder(value) is expected


# ===================================================================
# HookProcessor
# ===================================================================


class TestHookProcessorDefaults:
    """Empty script ids select the built-in behaviour without evaluating anything."""

    @pytest.fixture()
    def processor(self) -> HookProcessor:
        evaluator = MagicMock(spec=CallableScriptEvaluator)
        return HookProcessor(evaluator)

    def test_defaults(self, processor: HookProcessor, settings) -> None:
        scenario = Scenario([], settings)
        step = {"type": "click", "url": "https://a.test/"}

        assert processor.replace_url("", step, scenario) == "https://a.test/"
        assert processor.run_step_pre_post("", step, 0, True, scenario) is None
        assert processor.is_duplicate("", step, step, scenario) is False
        assert processor.execute_script_event("", step, scenario) is None
        assert processor.is_async_requests_completed("", MagicMock(), step) is True
        assert processor.has_page_error("", MagicMock()) is False
        assert processor.wait_after_event("", MagicMock(), step, scenario) is None
        assert processor.is_select_element("", MagicMock(), step, MagicMock()) is False
        assert processor.should_skip_keyboard("", MagicMock(), step) is False
        assert processor.is_ui_shown("", MagicMock(), step) is True
        processor.evaluator.evaluate.assert_not_called()

    def test_builtin_templating_uses_context_variables(self, processor: HookProcessor, settings) -> None:
        scenario = Scenario([], settings)
        scenario.context.variables["host"] = "shop.test"
        step = processor.apply_templating("", {"url": "https://${host}/"}, scenario)
        assert step["url"] == "https://shop.test/"


class TestHookProcessorScripts:
    """Configured hooks: bindings, result types, and error wrapping."""

    def test_replace_url_binding(self, evaluator, hooks, settings) -> None:
        seen = {}

        def rewrite(binding):
            seen.update(binding)
            return binding[Binding.URL].replace("prod", "staging")

        evaluator.register("rewrite", rewrite)
        scenario = Scenario([], settings)
        step = {"url": "https://prod.test/"}

        assert hooks.replace_url("rewrite", step, scenario) == "https://staging.test/"
        assert seen[Binding.STEP] is step
        assert seen[Binding.SCENARIO] is scenario
        assert seen[Binding.CONTEXT] is scenario.context

    def test_pre_post_binding(self, evaluator, hooks, settings) -> None:
        calls = []
        evaluator.register("prepost", lambda b: calls.append((b[Binding.POSITION], b[Binding.PRE])))
        scenario = Scenario([], settings)

        hooks.run_step_pre_post("prepost", {}, 4, True, scenario)
        hooks.run_step_pre_post("prepost", {}, 4, False, scenario)
        assert calls == [(4, True), (4, False)]

    def test_wrong_result_type(self, evaluator, hooks) -> None:
        evaluator.register("idle", lambda b: "yes")
        with pytest.raises(HookResultError) as exc_info:
            hooks.is_async_requests_completed("idle", MagicMock(), {})
        assert exc_info.value.script_id == "idle"
        assert exc_info.value.expected is bool

    def test_templating_must_return_mapping(self, evaluator, hooks, settings) -> None:
        evaluator.register("tpl", lambda b: None)
        with pytest.raises(HookResultError):
            hooks.apply_templating("tpl", {"url": ""}, Scenario([], settings))

    def test_script_exception_wrapped(self, evaluator, hooks) -> None:
        def broken(binding):
            raise RuntimeError("boom")

        evaluator.register("err", broken)
        with pytest.raises(HookError, match="boom") as exc_info:
            hooks.has_page_error("err", MagicMock())
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_unknown_script_is_hook_error(self, hooks) -> None:
        with pytest.raises(HookError, match="no_such_hook_module"):
            hooks.should_skip_keyboard("no_such_hook_module:skip", MagicMock(), {})

    def test_wait_after_event_gets_driver(self, evaluator, hooks, settings) -> None:
        seen = {}
        evaluator.register("wait", lambda b: seen.update(b))
        driver = MagicMock()
        hooks.wait_after_event("wait", "session", {}, Scenario([], settings), driver)
        assert seen[Binding.DRIVER] is driver
        assert seen[Binding.SESSION] == "session"

    def test_select_element_binding(self, evaluator, hooks) -> None:
        element = MagicMock()
        evaluator.register("sel", lambda b: b[Binding.ELEMENT] is element)
        assert hooks.is_select_element("sel", MagicMock(), {}, element) is True

    def test_lookup_element_binding(self, evaluator, hooks) -> None:
        element = MagicMock()
        evaluator.register("find", lambda b: element if b[Binding.TARGET] == "#ok" else None)
        assert hooks.lookup_element("find", MagicMock(), {}, "#ok") is element
        assert hooks.lookup_element("find", MagicMock(), {}, "#gone") is None

    def test_ui_shown_must_be_bool(self, evaluator, hooks) -> None:
        evaluator.register("shown", lambda b: "yes")
        with pytest.raises(HookResultError):
            hooks.is_ui_shown("shown", MagicMock(), {})
