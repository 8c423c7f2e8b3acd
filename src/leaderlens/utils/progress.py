"""Console progress reporting with Rich.

Progress goes to stderr so tables and JSON on stdout stay clean.
"""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)

ICONS = {
    "success": "[green]✓[/green]",
    "warning": "[yellow]⚠[/yellow]",
    "error": "[red]✗[/red]",
}


def set_quiet(quiet: bool) -> None:
    """Silence progress output; errors are still shown."""
    console.quiet = quiet


def plural(count: int, noun: str, suffix: str = "s") -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}{suffix}"


def _stamp() -> str:
    return f"[dim]\\[{datetime.now().strftime('%H:%M:%S')}][/dim]"


def log(message: str, *, style: str = "bold") -> None:
    """Log a timestamped message."""
    console.print(f"{_stamp()} {message}", style=style, highlight=False)


def log_step(step: str, message: str) -> None:
    """Log a step of a longer operation, e.g. ``Annotate`` or ``Topics``."""
    console.print(f"{_stamp()} [bold cyan]{step}[/bold cyan] {message}", highlight=False)


def log_success(message: str) -> None:
    log(f"{ICONS['success']} {message}", style="")


def log_warning(message: str) -> None:
    log(f"{ICONS['warning']} {message}", style="")


def log_error(message: str) -> None:
    quiet = console.quiet
    console.quiet = False
    try:
        log(f"{ICONS['error']} {message}", style="")
    finally:
        console.quiet = quiet


def show_summary(title: str, details: dict) -> None:
    """Key/value panel closing a command's output."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for key, value in details.items():
        table.add_row(key, str(value))
    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))
