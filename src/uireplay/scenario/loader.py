"""Scenario loader: read captured step records from disk and write them back.

Accepted capture layouts:

* a JSON array of step objects,
* a JSON object with a ``steps`` array (other top-level keys are ignored),
* JSON Lines, one step object per line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from uireplay.exceptions import ScenarioLoadError
from uireplay.scenario.models import Step
from uireplay.scenario.scenario import Scenario
from uireplay.settings.config import Settings

logger = logging.getLogger(__name__)


def load_steps(path: Path | str) -> list[Step]:
    """Parse the step records of a capture file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ScenarioLoadError: If the content is not a recognised capture layout.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = _parse_json_lines(path, text)

    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise ScenarioLoadError(path, "expected a list of steps")

    for idx, step in enumerate(data):
        if not isinstance(step, dict):
            raise ScenarioLoadError(path, f"step {idx} is {type(step).__name__}, not an object")
    return data


def _parse_json_lines(path: Path, text: str) -> list[Step]:
    steps: list[Step] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            steps.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ScenarioLoadError(path, f"line {lineno}: {e.msg}") from e
    return steps


def load_scenario(path: Path | str, settings: Settings) -> Scenario:
    """Load a capture file into a ``Scenario`` named after the file."""
    path = Path(path)
    steps = load_steps(path)
    logger.info("Loaded %d steps from %s", len(steps), path.name)
    return Scenario(steps, settings, name=path.stem)


def save_scenario(scenario: Scenario, path: Path | str) -> Path:
    """Write the scenario's replayed view as a JSON array."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(scenario.export_steps(), indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    logger.info("Saved %d steps to %s", scenario.get_steps_count(), path)
    return path
