"""CLI commands for inspecting captured scenarios without a browser."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

scenario_app = typer.Typer(help="Inspect captured scenarios.")
console = Console()


@scenario_app.command("inspect")
def inspect_scenario(
    scenario_file: Path = typer.Argument(..., help="Captured scenario file."),
) -> None:
    """Show step counts per type and how many steps would be skipped as ignored or bad."""
    from uireplay.exceptions import ScenarioLoadError
    from uireplay.scenario import Scenario, StepField, load_scenario
    from uireplay.settings import get_settings

    if not scenario_file.exists():
        console.print(f"[red]File not found:[/red] {scenario_file}")
        raise typer.Exit(code=1)

    try:
        scenario = load_scenario(scenario_file, get_settings())
    except ScenarioLoadError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1)

    steps = scenario.export_steps()
    types = Counter(str(step.get(StepField.TYPE, "<none>")).lower() for step in steps)
    ignored = sum(1 for step in steps if Scenario.is_event_ignored(step))
    bad = sum(1 for step in steps if not Scenario.is_event_ignored(step) and Scenario.is_event_bad(step))

    table = Table(title=f"{scenario.name}: {len(steps)} steps")
    table.add_column("Type")
    table.add_column("Steps", justify="right")
    for event_type, count in types.most_common():
        table.add_row(event_type, str(count))
    console.print(table)
    console.print(f"  Ignored: {ignored}")
    console.print(f"  Bad: {bad}")
