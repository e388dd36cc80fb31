"""Scenario: an ordered sequence of recorded steps with a position cursor.

The cursor is owned by the scenario and only moves through
``set_position`` / ``move_to_next_step``. The recorded steps are never
mutated by playback: post-dispatch updates are kept in a separate view
and merged on export.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Sequence

from uireplay.exceptions import StepIndexError
from uireplay.scenario.models import EventType, PlayerContext, Step, StepField

if TYPE_CHECKING:
    from uireplay.hooks.processor import HookProcessor
    from uireplay.settings.config import Settings

logger = logging.getLogger(__name__)

# Event types that are recorded for reference but never replayed.
_IGNORED_TYPES = frozenset({EventType.XHR, EventType.HASH_CHANGE})

# Event types that cannot be replayed without a UI element to act on.
# A wheel step without a target scrolls the page under the mouse.
_TARGETED_TYPES = frozenset({
    EventType.CLICK,
    EventType.MOUSE_DOWN,
    EventType.KEY_UP,
    EventType.KEY_DOWN,
    EventType.KEY_PRESS,
})

_MALFORMED_TARGETS = frozenset({"", "null", "undefined"})


def _usable_target(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() not in _MALFORMED_TARGETS


class Scenario:
    """A recorded user scenario prepared for playback.

    Args:
        steps: Recorded step records, in capture order.
        settings: Run configuration (read-only during playback).
        name: Scenario name, used for screenshot folders and reports.
        context: Optional pre-populated player context.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        settings: Settings,
        *,
        name: str = "scenario",
        context: PlayerContext | None = None,
    ) -> None:
        self._steps: list[Step] = list(steps)
        self._updated: dict[int, Step] = {}
        self._position = 0
        self.settings = settings
        self.name = name
        self.context = context or PlayerContext()

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def get_steps_count(self) -> int:
        return len(self._steps)

    def get_position(self) -> int:
        return self._position

    def set_position(self, position: int) -> None:
        if position < 0 or position > len(self._steps):
            raise StepIndexError(position, len(self._steps))
        self._position = position

    def move_to_next_step(self) -> None:
        self._position += 1

    def get_step_at(self, position: int) -> Step:
        """Return the recorded step at *position*.

        Raises:
            StepIndexError: If *position* is outside ``[0, steps_count)``.
        """
        if position < 0 or position >= len(self._steps):
            raise StepIndexError(position, len(self._steps))
        return self._steps[position]

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def get_prev_step(self, position: int) -> Step | None:
        """Return the step before *position*, preferring its replayed version."""
        if position <= 0 or position > len(self._steps):
            return None
        return self._updated.get(position - 1, self._steps[position - 1])

    def is_step_duplicates(self, hooks: HookProcessor, script_id: str, step: Step) -> bool:
        """Ask the duplicate-detection hook whether *step* repeats the previous one.

        The first step of a scenario never counts as a duplicate.
        """
        previous = self.get_prev_step(self._position)
        if previous is None:
            return False
        return hooks.is_duplicate(script_id, step, previous, self)

    @staticmethod
    def is_event_ignored(step: Step) -> bool:
        """True for steps explicitly flagged for skipping or of a never-replayed type."""
        if step.get(StepField.IGNORE):
            return True
        return EventType.from_tag(step.get(StepField.TYPE)) in _IGNORED_TYPES

    @staticmethod
    def is_event_bad(step: Step) -> bool:
        """True for malformed steps: no type tag, broken target references, or missing target."""
        if not isinstance(step.get(StepField.TYPE), str):
            return True
        for name in StepField.TARGETS:
            if name in step and step[name] is not None and not isinstance(step[name], str):
                return True
        if EventType.from_tag(step[StepField.TYPE]) in _TARGETED_TYPES:
            return not any(_usable_target(step.get(name)) for name in StepField.TARGETS)
        return False

    @staticmethod
    def get_targets_for_event(step: Step) -> list[str]:
        """Usable element references, in lookup order: target, firstTarget, secondTarget."""
        return [step[name] for name in StepField.TARGETS if _usable_target(step.get(name))]

    @staticmethod
    def get_target_for_event(step: Step) -> str | None:
        targets = Scenario.get_targets_for_event(step)
        return targets[0] if targets else None

    @staticmethod
    def describe_targets(step: Step) -> str:
        """Render the target fields of *step* for log messages."""
        labels = {
            StepField.TARGET: "Target",
            StepField.FIRST_TARGET: "First Target",
            StepField.SECOND_TARGET: "Second Target",
        }
        return "".join(
            f" {label}: '{step[name]}';" for name, label in labels.items() if name in step
        )

    # ------------------------------------------------------------------
    # Replayed view
    # ------------------------------------------------------------------

    def update_event(self, step: Step) -> None:
        """Record the replayed form of the step at the current position."""
        self._updated[self._position] = copy.deepcopy(step)

    def export_steps(self) -> list[Step]:
        """Steps with replayed updates merged over the recorded records."""
        return [self._updated.get(i, step) for i, step in enumerate(self._steps)]

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Scenario(name={self.name!r}, steps={len(self._steps)}, position={self._position})"
