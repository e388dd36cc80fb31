"""Playback engine: drives a recorded scenario through a browser session.

* ``engine``: ``ScenarioPlayer``: the per-step control loop and failure policy.
* ``factory``: ``create_player`` wires hooks, the Playwright driver and handlers.
"""

from uireplay.player.engine import ScenarioPlayer
from uireplay.player.factory import create_player

__all__ = ["ScenarioPlayer", "create_player"]
