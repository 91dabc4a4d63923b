"""Console rendering helpers for the bulk-up CLI."""
from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table


console = Console()
err_console = Console(stderr=True)


def _echo(message: str, *, error: bool = False) -> None:
    """Print a plain line; paths are printed verbatim and never wrapped."""
    target = err_console if error else console
    target.print(message, markup=False, highlight=False, emoji=False, soft_wrap=True)


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
        title="[bold green]bulk-up[/bold green]",
        subtitle="[dim]directory uploader[/dim]",
        border_style="blue",
    )
    console.print(panel)


class BatchUploadDisplay:
    """
    Event-based console output for a batch upload run.

    Per-file lines are printed above an overall progress bar. Files are
    discovered lazily, so the bar's total grows by each batch's size when
    the batch starts.
    """

    def __init__(self, progress_console: Optional[Console] = None):
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold cyan]{task.description}", justify="left"),
            BarColumn(bar_width=42),
            MofNCompleteColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=progress_console or console,
            transient=True,
        )
        self._task_id: Optional[TaskID] = None

    @property
    def progress(self) -> Progress:
        return self._progress

    def _ensure_started(self) -> TaskID:
        if self._task_id is None:
            self._progress.start()
            self._task_id = self._progress.add_task("Uploading", total=0)
        return self._task_id

    def on_batch_start(self, index: int, size: int) -> None:
        task_id = self._ensure_started()
        total = self._progress.tasks[0].total or 0
        self._progress.update(task_id, total=total + size, description=f"Batch {index}")

    def on_file_complete(self, outcome: Any) -> None:
        self._progress.console.print(
            f"{outcome.status_code} -> {outcome.file_path}",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        self._advance()

    def on_file_fail(self, outcome: Any) -> None:
        _echo(f"Failed {outcome.file_path}: {outcome.error}", error=True)
        self._advance()

    def on_batch_complete(self, batch: Any) -> None:
        if self._task_id is not None:
            self._progress.update(
                self._task_id,
                description=f"Batch {batch.index} done ({batch.settled}/{batch.size})",
            )

    def _advance(self) -> None:
        if self._task_id is not None:
            self._progress.advance(self._task_id)

    def close(self) -> None:
        """Stop the live bar; safe to call more than once."""
        if self._task_id is not None:
            self._progress.stop()

    def on_finish(self, summary: Any) -> None:
        self.close()
        if summary.total_files == 0:
            _echo("No files to upload.")
        _echo(
            f"Uploaded {summary.uploaded_files}/{summary.total_files} files "
            f"({summary.failed_files} failed) in {summary.batches} batches"
        )
        _echo("Done!")
        _echo(f"Failures: {summary.error_log_path}")
