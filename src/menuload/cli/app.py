"""Main Typer application, the entry point for the ``menuload`` CLI."""

from __future__ import annotations

import typer

from menuload import __version__
from menuload.cli.probe import list_cmd, probe_cmd

app = typer.Typer(
    name="menuload",
    help="Scripted HTTP load scenarios for the menu service.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("probe", help="Run one iteration of a scenario and show each step.")(probe_cmd)
app.command("list", help="List the built-in scenarios.")(list_cmd)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"menuload {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """menuload: scripted HTTP load scenarios for the menu service."""
