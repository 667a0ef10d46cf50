"""Console rendering for the iagon-mcp CLI."""
from __future__ import annotations

from typing import Any, Dict

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .constants import format_bytes
from .models import Page, StorageInfo
from .orchestrator import BatchSummary, Failed, Skipped, Succeeded

console = Console()
err_console = Console(stderr=True)

_STATUS_STYLES = {
    Succeeded: ("green", "uploaded"),
    Failed: ("red", "failed"),
    Skipped: ("yellow", "skipped"),
}


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary (to stderr, stdout may be the MCP channel)."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, escape(rendered))

    panel = Panel(
        table,
        title="[bold green]iagon-mcp[/bold green]",
        subtitle="[dim]Iagon storage[/dim]",
        border_style="blue",
    )
    err_console.print(panel)


def render_batch_summary(summary: BatchSummary) -> None:
    if summary.total == 0:
        console.print(f"[dim]{escape(summary.note or 'Nothing to upload')}[/dim]")
        return

    table = Table(title="Upload results", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Status")
    table.add_column("Details")
    table.add_column("ID", style="dim")

    for outcome in summary.outcomes:
        style, label = _STATUS_STYLES[type(outcome)]
        remote_id = outcome.remote_id if isinstance(outcome, Succeeded) else None
        table.add_row(
            escape(outcome.path.name),
            f"[{style}]{label}[/{style}]",
            escape(outcome.message),
            escape(remote_id or ""),
        )

    console.print(table)
    console.print(
        f"[green]{summary.successful} successful[/green], "
        f"[red]{summary.failed} failed[/red], "
        f"[yellow]{summary.skipped} skipped[/yellow] "
        f"of {summary.total}"
    )


def render_files_page(page: Page, title: str = "Files") -> None:
    table = Table(title=f"{escape(title)} ({page.count} of {page.total}, offset {page.offset})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Size", justify="right")
    table.add_column("Created")

    for file in page.items:
        table.add_row(
            escape(file.id),
            escape(file.name),
            format_bytes(file.size),
            escape(file.created_at or "-"),
        )

    console.print(table)
    if page.has_more:
        console.print(f"[dim]More available: --offset {page.next_offset}[/dim]")


def render_storage_info(info: StorageInfo) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column()
    table.add_row("Used", f"{format_bytes(info.used)} ({info.usage_percent:.1f}%)")
    table.add_row("Available", format_bytes(info.available))
    table.add_row("Total", format_bytes(info.total))
    table.add_row("Files", str(info.file_count))
    table.add_row("Folders", str(info.folder_count))
    console.print(Panel(table, title="[bold]Iagon storage[/bold]", border_style="blue"))
