"""Shared console helpers for the Service Starter front end.

All user-facing output goes through one Rich ``Console`` so that tests can
swap it out and so colours stay consistent.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from service_starter.scaffolder.models import FileEntry

console = Console()


def print_page_header(step: int, total: int, title: str) -> None:
    """Print a full-width rule naming the wizard step."""
    console.print()
    console.print(
        Rule(f"[bold bright_cyan] Step {step} of {total}: {title} [/bold bright_cyan]",
             style="bright_cyan")
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_file_table(files: Iterable[FileEntry], title: str = "Files") -> None:
    """Print generated paths with their sizes in bytes."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Path", no_wrap=True)
    table.add_column("Bytes", justify="right")

    for entry in files:
        table.add_row(entry.path, str(len(entry.data)))

    console.print(table)


def print_url(url: str) -> None:
    """Print the shareable URL for the current wizard state."""
    console.print(f"[dim]{url}[/dim]")


def print_status(message: str, style: str) -> None:
    """Print a one-line status message in bold *style* (a Rich colour)."""
    console.print(f"[bold {style}]{message}[/bold {style}]")


def print_success(message: str) -> None:
    print_status(message, "green")


def print_error(message: str) -> None:
    print_status(message, "red")


def print_warning(message: str) -> None:
    print_status(message, "yellow")
