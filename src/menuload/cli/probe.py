"""``menuload probe`` and ``menuload list``: one-iteration smoke checks."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from menuload._internal.config import load_config
from menuload._internal.errors import MenuLoadError
from menuload._internal.logging import setup_logging
from menuload.dsl.catalog import get_scenario
from menuload.dsl.loader import load_scenario
from menuload.dsl.scenario import registry
from menuload.engine.executor import RequestExecutor
from menuload.engine.runner import run_iteration
from menuload.engine.target import resolve

if TYPE_CHECKING:
    from menuload._internal.config import HarnessConfig
    from menuload.dsl.scenario import Scenario
    from menuload.engine.result import ExecutionResult
    from menuload.engine.target import Target

console = Console(stderr=True)


def _select_scenario(ref: str, name: str | None = None) -> Scenario:
    """Resolve a catalog name or a path to a ``.py`` scenario file."""
    if ref.endswith(".py") or Path(ref).is_file():
        return load_scenario(ref, name)
    return get_scenario(ref)


def _results_table(scenario: Scenario, results: list[ExecutionResult]) -> Table:
    table = Table(
        title=f"Scenario: {scenario.name}",
        show_header=True,
        header_style="bold cyan",
        expand=True,
    )
    table.add_column("#", justify="right")
    table.add_column("Step", style="bold", no_wrap=True)
    table.add_column("Method")
    table.add_column("Status")
    table.add_column("HTTP", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("Error")

    for index, result in enumerate(results, start=1):
        status = "[green]success[/green]" if result.ok else "[red]failure[/red]"
        code = "-" if result.http_status_code is None else str(result.http_status_code)
        table.add_row(
            str(index),
            result.step_name,
            result.method,
            status,
            code,
            f"{result.latency * 1000:.1f}ms",
            result.error or "",
        )
    return table


async def _probe(config: HarnessConfig, target: Target, scenario: Scenario) -> list[ExecutionResult]:
    async with RequestExecutor.from_config(config) as executor:
        return await run_iteration(target, scenario, executor=executor)


def probe_cmd(
    scenario_ref: str = typer.Argument(
        ...,
        metavar="SCENARIO",
        help="Built-in scenario name or path to a .py file defining a Scenario.",
    ),
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Scenario to pick when the file defines several.",
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Base URL of the menu service (default: $MENULOAD_BASE_URL or the public host).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-request timeout in seconds.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as one-line JSON objects.",
    ),
) -> None:
    """Run one iteration of a scenario and print each step's outcome."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, json_format=json_logs)

    try:
        config = load_config({"base_url": base_url, "request_timeout": timeout})
        target = resolve(config)
        scenario = _select_scenario(scenario_ref, name)
    except MenuLoadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        Panel(
            f"[bold]Scenario:[/bold] {scenario.name}\n"
            f"[bold]Target:[/bold]   {target.base_url}\n"
            f"[bold]Steps:[/bold]    {len(scenario)}",
            title="menuload probe",
            border_style="cyan",
        )
    )

    results = asyncio.run(_probe(config, target, scenario))
    console.print(_results_table(scenario, results))

    failures = [r for r in results if not r.ok]
    if failures:
        console.print(f"[red]FAIL:[/red] {len(failures)} of {len(results)} steps failed")
        raise typer.Exit(code=1)

    console.print("[green]All steps received a response.[/green]")


def list_cmd() -> None:
    """Print the built-in scenarios and their steps."""
    table = Table(title="Scenarios", show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Steps")

    for scenario in sorted(registry.get_all(), key=lambda s: s.name):
        steps = ", ".join(
            f"{step.name} (+{step.delay_after:g}s)" if step.delay_after else step.name
            for step in scenario.steps()
        )
        table.add_row(scenario.name, steps)

    console.print(table)
