"""uireplay exception hierarchy."""

from __future__ import annotations

from typing import Any


class UIReplayError(Exception):
    """Base exception for all uireplay-specific errors."""


class ScenarioLoadError(UIReplayError):
    """Raised when a capture file cannot be turned into step records."""

    def __init__(self, path: Any, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load scenario from {path}: {reason}")


class StepIndexError(UIReplayError, IndexError):
    """Raised when a step is requested outside ``[0, steps_count)``.

    Attributes:
        position: The requested position.
        steps_count: Number of steps in the scenario.
    """

    def __init__(self, position: int, steps_count: int) -> None:
        self.position = position
        self.steps_count = steps_count
        super().__init__(f"Step position {position} out of range [0, {steps_count})")


class HookError(UIReplayError):
    """Raised when a script hook fails during evaluation.

    Attributes:
        script_id: Identifier of the hook script that failed.
    """

    def __init__(self, script_id: str, reason: str) -> None:
        self.script_id = script_id
        super().__init__(f"Hook {script_id!r} failed: {reason}")


class HookResultError(HookError):
    """Raised when a hook returns a value of an unexpected type."""

    def __init__(self, script_id: str, expected: type, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            script_id,
            f"expected {expected.__name__}, got {type(actual).__name__}",
        )


class NullSessionError(UIReplayError):
    """Raised when no automation session could be associated with a step."""

    def __init__(self, position: int, event_id: Any = None) -> None:
        self.position = position
        self.event_id = event_id
        super().__init__(f"No browser session for step {position} (eventId={event_id})")


class PageErrorDetected(UIReplayError):
    """Raised when the error-detection hook reports an error on the page."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Browser contains an error after processing step {position}")


class NavigationError(UIReplayError):
    """Raised when navigation fails with a non-retryable error (DNS, refused, TLS).

    Attributes:
        url: The URL that could not be reached.
        reason: Short human-readable reason.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class PlaybackAbortedError(UIReplayError):
    """Raised when a fatal error at one step aborts the whole playback run.

    The original exception is chained as ``__cause__``.

    Attributes:
        position: Position of the step that aborted the run.
        event_id: ``eventId`` of that step, if known.
    """

    def __init__(self, position: int, event_id: Any, reason: str) -> None:
        self.position = position
        self.event_id = event_id
        super().__init__(f"Playback aborted at step {position} (eventId={event_id}): {reason}")


class ElementNotFoundError(UIReplayError):
    """Raised when none of a step's target references matches a visible element."""

    def __init__(self, event_id: Any, targets: list[str]) -> None:
        self.event_id = event_id
        self.targets = targets
        super().__init__(f"No visible element for eventId={event_id}; tried {targets}")


class FrameNotFoundError(UIReplayError):
    """Raised when the frame a step was recorded in cannot be entered."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Frame {reference!r} not found")
