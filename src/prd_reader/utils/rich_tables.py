# ABOUTME: Rich table utilities for the CLI: document metadata, key points and logging status
# ABOUTME: Provides pre-configured table generators with consistent styling

from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two column Field/Value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, no_wrap=False)
    table.add_column("Value", style=value_style, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_document_table(document: Any, platform: str) -> Table:
    """Create a metadata table for a normalized document.

    Args:
        document: NormalizedDocument to describe
        platform: Platform label the document was read from

    Returns:
        Styled metadata table
    """
    blocks = [block for block in document.content.split("\n\n") if block]

    document_data = {
        "🏷️ Platform": platform,
        "🆔 ID": document.id,
        "📛 Title": document.title,
        "🌐 URL": document.url,
        "🧱 Blocks": str(len(blocks)),
        "📄 Content Length": f"{len(document.content):,} chars",
    }

    return create_key_value_table(
        title="📘 Document",
        data=document_data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def create_key_points_table(points: list[str], title: str) -> Table:
    """Create a numbered table of key points."""
    table = Table(
        title=f"[bold green]🎯 Key Points: {title}[/bold green]",
        box=SIMPLE,
        show_header=True,
        header_style="bold magenta",
        title_justify="left",
        row_styles=["", "dim"],
        expand=True,
    )
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Point", style="white")

    for index, point in enumerate(points, start=1):
        table.add_row(str(index), point)

    return table


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()
    console.print(table)
    console.print()
