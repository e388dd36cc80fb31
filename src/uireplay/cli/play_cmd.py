"""CLI command for replaying a recorded scenario."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def play_scenario(
    scenario_file: Path = typer.Argument(..., help="Captured scenario (JSON array, {'steps': [...]}, or JSON Lines)."),
    start: int = typer.Option(0, "--start", "-s", min=0, help="First step to replay."),
    finish: int = typer.Option(0, "--finish", "-f", min=0, help="Stop before this step (0 = play to the end)."),
    var: List[str] = typer.Option([], "--var", help="Template variable as key=value. Repeatable."),
    vars_file: Optional[Path] = typer.Option(None, "--vars-file", help="JSON object of template variables."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the replayed steps to this file."),
    browser: Optional[str] = typer.Option(None, "--browser", "-b", help="chromium, firefox or webkit."),
    headless: Optional[bool] = typer.Option(None, "--headless/--no-headless", help="Run the browser headless."),
    screenshots: Optional[Path] = typer.Option(None, "--screenshots", help="Enable screenshots into this directory."),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level (default from settings)."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines on stderr."),
) -> None:
    """Replay a recorded scenario against a live browser."""
    from uireplay.cli.logging_setup import configure_logging
    from uireplay.exceptions import PlaybackAbortedError, ScenarioLoadError
    from uireplay.player import create_player
    from uireplay.scenario import load_scenario, save_scenario
    from uireplay.settings import get_settings

    settings = _apply_overrides(get_settings(), browser=browser, headless=headless, screenshots=screenshots)
    configure_logging(log_level or settings.log_level, json_format=json_logs)

    if not scenario_file.exists():
        console.print(f"[red]File not found:[/red] {scenario_file}")
        raise typer.Exit(code=1)

    try:
        scenario = load_scenario(scenario_file, settings)
    except ScenarioLoadError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1)

    scenario.context.variables.update(_load_variables(var, vars_file))

    console.print(
        Panel(
            f"[bold]Replaying:[/bold] {scenario.name} ({scenario.get_steps_count()} steps)",
            title="uireplay",
            border_style="blue",
        )
    )

    player = create_player(scenario)
    aborted: PlaybackAbortedError | None = None
    try:
        player.play(start, finish)
    except PlaybackAbortedError as e:
        aborted = e
    finally:
        player.driver.close_all_sessions()
        player.hooks.evaluator.close()

    if player.last_result is not None:
        _print_summary(player.last_result)

    if output:
        save_scenario(scenario, output)
        console.print(f"  Replayed steps saved to: {output}")

    if aborted is not None:
        console.print(f"\n[red]✗[/red] {aborted}")
        raise typer.Exit(code=1)
    console.print("\n[green]✓[/green] Playback complete")


def _apply_overrides(settings: Any, *, browser: str | None, headless: bool | None, screenshots: Path | None) -> Any:
    """Return a copy of *settings* with CLI flags applied."""
    from uireplay.settings.config import BrowserSettings, ScreenshotSettings

    browser_update: dict[str, Any] = {}
    if browser is not None:
        browser_update["browser_type"] = browser
    if headless is not None:
        browser_update["headless"] = headless

    update: dict[str, Any] = {}
    if browser_update:
        update["browser"] = BrowserSettings.model_validate({**settings.browser.model_dump(), **browser_update})
    if screenshots is not None:
        update["screenshots"] = ScreenshotSettings.model_validate(
            {"enabled": True, "directory": str(screenshots.resolve())}
        )
    return settings.model_copy(update=update) if update else settings


def _load_variables(pairs: list[str], vars_file: Path | None) -> dict[str, Any]:
    variables: dict[str, Any] = {}
    if vars_file is not None:
        try:
            data = json.loads(vars_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise typer.BadParameter(f"cannot read JSON: {e}", param_hint="--vars-file") from e
        if not isinstance(data, dict):
            raise typer.BadParameter("must contain a JSON object", param_hint="--vars-file")
        variables.update(data)
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--var")
        variables[key.strip()] = value
    return variables


def _print_summary(result: Any) -> None:
    table = Table(title=f"Playback of {result.scenario_name}")
    table.add_column("Outcome")
    table.add_column("Steps", justify="right")
    for outcome, count in sorted(result.outcome_counts().items()):
        table.add_row(outcome, str(count))
    table.add_row("[bold]total[/bold]", str(result.processed_steps))
    console.print(table)

    failures = [r for r in result.step_results if r.error]
    for r in failures[:20]:
        console.print(f"  [yellow]⚠[/yellow] step {r.position} ({r.event_type}, eventId={r.event_id}): {r.error}")
    console.print(f"  Duration: {result.duration_sec:.1f}s")
