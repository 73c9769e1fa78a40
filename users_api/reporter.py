from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from users_api.domain.models import AgeDistribution
from users_api.ingest.importer import ImportResult

_STATUS_STYLES = {"imported": "green", "skipped": "yellow", "failed": "bold red"}


def print_import_result(result: ImportResult, console: Optional[Console] = None) -> None:
    """
    Render an import outcome as a two-column table.
    """
    console = console or Console()
    status = result.get("status", "unknown")
    style = _STATUS_STYLES.get(status, "white")

    table = Table(title="User Import", box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")

    table.add_row("Status", f"[{style}]{status}[/{style}]")
    table.add_row("Rows read", f"{result.get('rows_read', 0):,}")
    table.add_row("Rows discarded", f"{result.get('rows_discarded', 0):,}")
    table.add_row("Inserted", f"{result.get('inserted', 0):,}")
    table.add_row("Duration (s)", f"{result.get('duration_seconds', 0.0):.3f}")
    if result.get("error"):
        table.add_row("Error", f"[red]{result['error']}[/red]")

    console.print(table)


def print_distribution(distribution: AgeDistribution, console: Optional[Console] = None) -> None:
    """
    Render the age distribution, one row per bracket in bracket order.
    """
    console = console or Console()

    if distribution.total == 0:
        console.print("[yellow]No users stored; all brackets report 0%.[/yellow]")

    table = Table(
        title="Age Distribution",
        box=box.ROUNDED,
        caption=f"Total users: {distribution.total:,}",
    )
    table.add_column("Bracket", style="cyan", no_wrap=True)
    table.add_column("Share (%)", justify="right", style="bold green")

    for label, pct in distribution.distribution.items():
        table.add_row(label, f"{pct:.2f}")

    console.print(table)


__all__ = ["print_distribution", "print_import_result"]
