"""Console rendering helpers for superbed CLI."""
from __future__ import annotations

from typing import Any, Dict, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import OutputItem

console = Console()


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]superbed-up[/bold green]",
        subtitle="[dim]superbed uploader CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_results(items: Sequence[OutputItem]) -> None:
    """Render file -> URL table after an upload."""
    table = Table(title="Upload results", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("URL")

    for index, item in enumerate(items, start=1):
        url = item.img_url or "[red]not uploaded[/red]"
        table.add_row(str(index), item.file_name, url)

    console.print(table)
