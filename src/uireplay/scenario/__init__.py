"""Recorded scenarios: step records, the position cursor, and capture I/O.

Modules:

* ``models``: ``Step``, ``StepField``, ``EventType``, ``PlayerContext`` and result models.
* ``scenario``: ``Scenario`` cursor and static step classification.
* ``loader``: Load captures from JSON / JSON Lines and save the replayed view.
"""

from uireplay.scenario.loader import load_scenario, save_scenario
from uireplay.scenario.models import (
    EventType,
    PlaybackResult,
    PlayerContext,
    Step,
    StepField,
    StepOutcome,
    StepResult,
)
from uireplay.scenario.scenario import Scenario

__all__ = [
    "EventType",
    "PlaybackResult",
    "PlayerContext",
    "Scenario",
    "Step",
    "StepField",
    "StepOutcome",
    "StepResult",
    "load_scenario",
    "save_scenario",
]
