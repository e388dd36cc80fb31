"""Unified CLI entry point for uireplay.

Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> env vars (UIREPLAY_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

import typer

from uireplay.cli.play_cmd import play_scenario
from uireplay.cli.scenario_cmd import scenario_app
from uireplay.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("uireplay")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "uireplay: replay recorded browser scenarios for regression and load testing. "
    "Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> "
    "env vars (UIREPLAY_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.command("play")(play_scenario)
app.add_typer(scenario_app, name="scenario")
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context, version: bool = typer.Option(False, "--version", help="Show version and exit.")) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"uireplay {VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
