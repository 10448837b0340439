"""Rich console reporter used by the command line."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skeletor.models.results import Action, CreationResult, Failure, SnapshotResult, TaskOutcome
from skeletor.reporting.reporter import Reporter

PREVIEW_LIMIT = 20

_ACTION_STYLES = {
    Action.CREATE_DIR: ("mkdir", "cyan"),
    Action.DIR_EXISTS: ("exists", "dim"),
    Action.CREATE: ("create", "green"),
    Action.SKIP: ("skip", "yellow"),
    Action.OVERWRITE: ("overwrite", "magenta"),
    Action.FAILED: ("failed", "red"),
}


class RichReporter(Reporter):
    """Renders engine events with ``rich``.

    Per-task and per-path events are only shown with ``verbose``; warnings,
    previews and summaries are always shown.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False):
        self.console = console or Console(stderr=True)
        self.verbose = verbose

    def operation_start(self, operation: str, details: str) -> None:
        self.console.print(f"\n[bold blue]Skeletor[/] — {operation}: {escape(details)}\n")

    def progress(self, current: int, total: int, message: str) -> None:
        self.console.print(f"  [yellow]progress:[/] {current}/{total} {escape(message)}")

    def task_created(self, path: str, is_dir: bool) -> None:
        if self.verbose:
            kind = "dir " if is_dir else "file"
            self.console.print(f"  [green]+[/] {kind} {escape(path)}")

    def task_skipped(self, path: str) -> None:
        if self.verbose:
            self.console.print(f"  [yellow]=[/] skip {escape(path)} (exists)")

    def task_overwritten(self, path: str) -> None:
        if self.verbose:
            self.console.print(f"  [magenta]~[/] overwrite {escape(path)}")

    def task_failed(self, failure: Failure) -> None:
        self.console.print(f"  [red]x[/] {escape(str(failure))}")

    def path_ignored(self, path: str, is_dir: bool) -> None:
        if self.verbose:
            suffix = "/" if is_dir else ""
            self.console.print(f"  [dim]- ignored {escape(path)}{suffix}[/]")

    def binary_detected(self, path: str) -> None:
        if self.verbose:
            self.console.print(f"  [yellow]![/] binary {escape(path)} (contents omitted)")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]warning:[/] {escape(message)}")

    def tip(self, message: str) -> None:
        self.console.print(f"[cyan]tip:[/] {escape(message)}")

    def dry_run_preview(
        self,
        outcomes: Sequence[TaskOutcome],
        verb: str,
        binary_files: Sequence[str] = (),
        ignore_patterns: Sequence[str] = (),
    ) -> None:
        limit = None if self.verbose else PREVIEW_LIMIT
        shown = list(outcomes if limit is None else outcomes[:limit])

        table = Table(title=f"Dry run: {len(outcomes)} operation(s) would be {verb}")
        table.add_column("Action", width=10)
        table.add_column("Path", style="cyan")
        for outcome in shown:
            label, style = _ACTION_STYLES.get(outcome.action, (outcome.action, "white"))
            table.add_row(f"[{style}]{label}[/]", escape(outcome.path))
        self.console.print(table)

        hidden = len(outcomes) - len(shown)
        if hidden > 0:
            self.console.print(f"  [dim]... and {hidden} more (use --verbose to list all)[/]")
        if binary_files:
            self.console.print(f"  [yellow]Binary files (contents omitted):[/] {len(binary_files)}")
            for path in binary_files if self.verbose else binary_files[:PREVIEW_LIMIT]:
                self.console.print(f"    - {escape(path)}")
        if ignore_patterns:
            self.console.print(f"  [dim]Ignore patterns:[/] {escape(', '.join(ignore_patterns))}")

    def apply_complete(self, result: CreationResult) -> None:
        lines = [
            f"Directories created: {result.dirs_created}",
            f"Files created:       {result.files_created}",
            f"Files skipped:       {result.files_skipped}",
            f"Files overwritten:   {result.files_overwritten}",
            f"Tasks:               {result.tasks_total}",
            f"Duration:            {result.duration * 1000:.2f}ms",
        ]
        if result.failures:
            lines.append(f"Failures:            {len(result.failures)}")
        style = "green" if result.ok else "yellow"
        self.console.print(Panel("\n".join(lines), title="Apply Result", border_style=style))
        if result.files_skipped and self.verbose:
            for path in result.paths_with(Action.SKIP):
                self.console.print(f"  [yellow]=[/] {escape(path)}")
        if result.files_skipped and not self.verbose:
            self.tip("Use --overwrite to replace existing files")

    def snapshot_complete(self, result: SnapshotResult, output: str | None = None) -> None:
        meta = result.metadata
        lines = [
            f"Files:      {meta.stats.files}",
            f"Dirs:       {meta.stats.dirs}",
            f"Binary:     {len(meta.binary_files)}",
            f"Ignored:    {len(meta.ignored_paths)}",
            f"Duration:   {result.duration * 1000:.2f}ms",
        ]
        if output:
            lines.append(f"Written to: {escape(output)}")
        if meta.failures:
            lines.append(f"Failures:   {len(meta.failures)}")
        style = "green" if not meta.failures else "yellow"
        self.console.print(Panel("\n".join(lines), title="Snapshot Result", border_style=style))
