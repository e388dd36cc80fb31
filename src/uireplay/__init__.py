"""UI Replay: deterministic playback of recorded browser interaction scenarios."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("uireplay")
except Exception:
    __version__ = "0.0.0"
