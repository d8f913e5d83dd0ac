from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import OutcomeKind, RunResult


def print_results(result: RunResult, base_url: str, console: Optional[Console] = None) -> None:
    console = console or Console()

    # Header
    console.print(
        Panel.fit(
            "leakprobe - published file detector",
            style="bold cyan",
            border_style="cyan",
        )
    )

    counts = result.counts()
    summary = Table.grid(expand=False)
    summary.add_column(justify="left")
    summary.add_column(justify="right")
    summary.add_row("Base URL", base_url)
    summary.add_row("Paths", str(len(result.outcomes)))
    summary.add_row("Published", f"[red]{counts[OutcomeKind.LEAKED]}[/red]")
    summary.add_row("Not published", f"[green]{counts[OutcomeKind.NOT_LEAKED]}[/green]")
    summary.add_row("Skipped", f"[yellow]{counts[OutcomeKind.SKIPPED_ERROR]}[/yellow]")
    summary.add_row("Fatal", f"[magenta]{counts[OutcomeKind.FATAL_ERROR]}[/magenta]")

    console.print(Panel(summary, title="Summary", border_style="blue", box=box.ROUNDED))

    if result.fatal is not None:
        console.print(f"[bold red]Run failed:[/bold red] {result.fatal.path}: {result.fatal.message}")

    leaked = result.leaked
    if not leaked:
        console.print("[green]No published files found.[/green]")
        return

    table = Table(
        title="Published files",
        expand=True,
        box=box.SIMPLE_HEAVY,
        show_lines=False,
        header_style="bold",
    )
    table.add_column("Status", no_wrap=True)
    table.add_column("Path", overflow="fold")
    table.add_column("URL", overflow="fold")

    for o in leaked:
        table.add_row(str(o.status_code or ""), o.path, o.url or "")

    console.print(table)


def write_json(result: RunResult, path: Union[str, Path]) -> Path:
    """Write every outcome, in input order, as a JSON array."""
    out_path = Path(path)
    with out_path.open("w", encoding="utf-8") as f:
        json.dump(
            [
                {
                    "path": o.path,
                    "url": o.url,
                    "outcome": o.kind.value,
                    "status_code": o.status_code,
                    "message": o.message,
                }
                for o in result.outcomes
            ],
            f,
            indent=2,
            ensure_ascii=False,
        )
    return out_path
