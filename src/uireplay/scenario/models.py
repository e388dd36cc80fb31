"""Scenario data models: recorded steps, playback context, and results.

A recorded step is kept as a plain ``dict``: the engine reads and writes a
handful of named fields (see ``StepField``) and passes everything else
through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

Step = dict[str, Any]


class StepField:
    """Names of the step fields the engine reads or writes."""

    TYPE = "type"
    URL = "url"
    EVENT_ID = "eventId"
    TARGET = "target"
    FIRST_TARGET = "firstTarget"
    SECOND_TARGET = "secondTarget"
    TAB_UUID = "tabUuid"
    IFRAME = "iframe"
    IGNORE = "ignoredByPlayer"

    TARGETS = (TARGET, FIRST_TARGET, SECOND_TARGET)


class EventType(str, Enum):
    """Interaction kinds found in recorded captures."""

    MOUSE_DOWN = "mousedown"
    CLICK = "click"
    MOUSE_WHEEL = "mousewheel"
    KEY_UP = "keyup"
    KEY_DOWN = "keydown"
    KEY_PRESS = "keypress"
    SCROLL_EMULATION = "scroll_emulation"
    SCRIPT = "script"
    XHR = "xhr"
    HASH_CHANGE = "hashchange"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: Any) -> "EventType":
        """Case-insensitive lookup; unrecognised tags map to ``UNKNOWN``."""
        if not isinstance(tag, str):
            return cls.UNKNOWN
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class StepOutcome(str, Enum):
    """Terminal outcome of processing one step."""

    COMPLETED = "completed"
    SCRIPT = "script"
    SKIPPED_TEMPLATE = "skipped_template"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_IGNORED = "skipped_ignored"
    SKIPPED_BAD = "skipped_bad"
    HANDLER_FAILED = "handler_failed"
    PAGE_ERROR = "page_error"
    FATAL = "fatal"

    @property
    def skipped(self) -> bool:
        return self.value.startswith("skipped_")


@dataclass
class PlayerContext:
    """Mutable per-run context shared with hooks.

    ``variables`` feed the built-in templating; ``store`` is free-form
    state hooks may use between steps (counters, captured values).
    """

    current_step: Step | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    store: dict[str, Any] = field(default_factory=dict)


class StepResult(BaseModel):
    """Outcome of processing a single scenario step."""

    position: int
    event_id: Any = None
    event_type: str = ""
    url: str = ""
    outcome: StepOutcome
    error: str = ""
    duration_sec: float = 0.0


class PlaybackResult(BaseModel):
    """Structured outcome of a playback run."""

    scenario_name: str
    start: int = 0
    finish: int = 0
    step_results: list[StepResult] = Field(default_factory=list)
    aborted: bool = False
    error: str = ""
    duration_sec: float = 0.0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def processed_steps(self) -> int:
        return len(self.step_results)

    def count(self, outcome: StepOutcome) -> int:
        """Number of steps that ended with *outcome*."""
        return sum(1 for r in self.step_results if r.outcome == outcome)

    def outcome_counts(self) -> dict[str, int]:
        """Per-outcome counts, omitting outcomes that never occurred."""
        counts: dict[str, int] = {}
        for r in self.step_results:
            counts[r.outcome.value] = counts.get(r.outcome.value, 0) + 1
        return counts
