"""Rich output helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from backitup.batch import BatchResult
    from backitup.utils.io import WriteResult


def print_batch_summary(result: BatchResult, console: Console | None = None) -> None:
    """Print a coloured summary of a batch run."""
    con = console or Console()

    n_paths = len(result.path_results)
    n_failed = len(result.failures)
    verb = "planned" if result.dry_run else "backed up"

    header = f"Backup complete: {n_paths - n_failed}/{n_paths} path{'s' if n_paths != 1 else ''} {verb}"
    if n_failed:
        header += f", [red]{n_failed} error{'s' if n_failed != 1 else ''}[/red]"
    else:
        header += ", 0 errors"

    con.print()
    con.print(header)

    table = Table(show_header=True, show_edge=False, pad_edge=False, box=None)
    table.add_column("Path", style="cyan", min_width=14)
    table.add_column("Status", min_width=6)
    table.add_column("Backup")

    for pr in result.path_results:
        if pr.success:
            mark = "[green]\u2713[/green]"
            detail = escape(str(pr.backup_path))
        else:
            mark = "[red]\u2717[/red]"
            detail = escape(pr.error or "failed")
        table.add_row(escape(pr.source), mark, detail)

    con.print(table)

    if result.log_file is not None:
        con.print(f"Log: {escape(str(result.log_file))}")

    if result.dry_run:
        con.print()
        con.print("[yellow]DRY RUN \u2014 nothing was renamed[/yellow]")


def print_write_result(wr: WriteResult, console: Console | None = None) -> None:
    """Print the outcome of a single back-up-then-write."""
    con = console or Console()

    if wr.backup_path is not None:
        con.print(f"  Backup:  {escape(str(wr.backup_path))}")
    mark = "[green]\u2713[/green]" if wr.written else "[yellow]-[/yellow]"
    con.print(f"  {mark} {escape(wr.message)}")
