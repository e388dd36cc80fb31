"""Factory for wiring a ready-to-run ``ScenarioPlayer`` from settings."""

from __future__ import annotations

import logging

from uireplay.browser.playwright_driver import PlaywrightSessionDriver
from uireplay.hooks.base import ScriptEvaluator
from uireplay.hooks.processor import HookProcessor
from uireplay.player.engine import ScenarioPlayer
from uireplay.scenario.scenario import Scenario

logger = logging.getLogger(__name__)


def create_player(scenario: Scenario, evaluator: ScriptEvaluator | None = None) -> ScenarioPlayer:
    """Create a player backed by Playwright for *scenario*.

    Args:
        scenario: The loaded scenario; its settings configure browser and hooks.
        evaluator: Hook script evaluator. Defaults to ``CallableScriptEvaluator``,
            which resolves ``module:function`` script identifiers.

    Returns:
        A ``ScenarioPlayer``. The caller owns ``player.driver`` and
        ``player.hooks.evaluator`` and should call
        ``close_all_sessions()`` and ``close()`` on them when done.
    """
    hooks = HookProcessor(evaluator)
    driver = PlaywrightSessionDriver(scenario.settings, hooks)
    logger.info(
        "Created player for %s: browser=%s headless=%s",
        scenario.name,
        scenario.settings.browser.browser_type,
        scenario.settings.browser.headless,
    )
    return ScenarioPlayer(scenario, driver, hooks=hooks)
