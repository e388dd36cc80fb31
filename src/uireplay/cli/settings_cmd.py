"""CLI commands for inspecting and validating uireplay settings."""

from __future__ import annotations

import json
from typing import Optional

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate uireplay configuration.")
console = Console()

_SECTIONS = ("browser", "playback", "screenshots", "scripts")


@settings_app.command("show")
def show_settings(
    section: Optional[str] = typer.Option(None, "--section", help=f"Only show one of: {', '.join(_SECTIONS)}."),
) -> None:
    """Print the resolved settings as JSON."""
    from uireplay.settings import get_settings

    data = get_settings().model_dump(mode="json")
    if section is not None:
        if section not in _SECTIONS:
            console.print(f"[red]Unknown section:[/red] {section}")
            raise typer.Exit(code=1)
        data = data[section]
    console.print_json(json.dumps(data, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Load the settings and check that every configured hook script can be imported."""
    from uireplay.hooks.evaluators import CallableScriptEvaluator
    from uireplay.settings import get_settings

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)

    configured = {name: script_id for name, script_id in settings.scripts.model_dump().items() if script_id}
    evaluator = CallableScriptEvaluator()
    broken: list[str] = []
    for name, script_id in configured.items():
        try:
            evaluator.resolve(script_id)
        except LookupError as e:
            broken.append(f"{name}: {e}")

    console.print(f"  Profile: {settings.env}")
    console.print(f"  Browser: {settings.browser.browser_type} (headless={settings.browser.headless})")
    console.print(f"  Screenshots: {settings.screenshots.directory if settings.screenshots.enabled else 'off'}")
    console.print(f"  Hook scripts: {', '.join(configured) if configured else 'built-in defaults'}")

    if broken:
        for line in broken:
            console.print(f"  [red]✗[/red] {line}")
        raise typer.Exit(code=1)
    console.print("[green]✓[/green] Settings are valid.")
