"""Built-in step templating with ``${name}`` placeholders.

String fields of a step are rendered with Jinja2 against the player
context variables, using ``${`` / ``}`` as variable delimiters so that
ordinary ``{{ }}`` text in recorded values stays literal. Placeholders
that cannot be resolved are written back verbatim, which lets the
playback engine detect and skip steps whose URL is still templated.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from jinja2 import ChainableUndefined, Environment, TemplateError

from uireplay.scenario.models import Step

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\$\{.*\}", re.DOTALL)


def has_unresolved_placeholder(value: Any) -> bool:
    """True when *value* is a string still containing ``${...}`` syntax."""
    return isinstance(value, str) and PLACEHOLDER_RE.search(value) is not None


class _KeepPlaceholder(ChainableUndefined):
    """Render an undefined variable back as its own placeholder."""

    def __str__(self) -> str:
        # Attribute chains only remember the last missing name.
        return "${%s}" % (self._undefined_name or "")


class StepTemplater:
    """Render ``${...}`` placeholders in every string field of a step."""

    def __init__(self) -> None:
        self._env = Environment(
            variable_start_string="${",
            variable_end_string="}",
            block_start_string="${%",
            block_end_string="%}",
            comment_start_string="${#",
            comment_end_string="#}",
            undefined=_KeepPlaceholder,
            autoescape=False,
            keep_trailing_newline=True,
        )

    def render_value(self, value: str, variables: Mapping[str, Any]) -> str:
        """Render a single string; returns it unchanged if it cannot be parsed."""
        if "${" not in value:
            return value
        try:
            return self._env.from_string(value).render(**variables)
        except TemplateError as e:
            logger.warning("Cannot render template %r: %s", value[:80], e)
            return value

    def render_step(self, step: Step, variables: Mapping[str, Any]) -> Step:
        """Return a copy of *step* with all nested string fields rendered."""
        return self._render(step, variables)

    def _render(self, value: Any, variables: Mapping[str, Any]) -> Any:
        if isinstance(value, str):
            return self.render_value(value, variables)
        if isinstance(value, dict):
            return {k: self._render(v, variables) for k, v in value.items()}
        if isinstance(value, list):
            return [self._render(v, variables) for v in value]
        return value
