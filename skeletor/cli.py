"""Skeletor CLI — the main entry point for scaffolding and snapshotting trees."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from skeletor import DEFAULT_CONFIG_FILE, __version__
from skeletor.errors import SkeletorError
from skeletor.reporting.console import RichReporter

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fail(error: SkeletorError) -> None:
    console.print(f"[red]error:[/] {escape(error.message)}")
    if error.tip:
        console.print(f"[cyan]tip:[/] {escape(error.tip)}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """Skeletor — scaffold directory trees from YAML and snapshot them back.

    'apply' creates the files and directories described in a document;
    'snapshot' captures an existing directory as such a document.
    """


# ── Apply ────────────────────────────────────────────────────────────


@main.command()
@click.option(
    "--input", "-i", "input_path", default=DEFAULT_CONFIG_FILE, show_default=True,
    help="Document describing the tree to create",
)
@click.option("--target", "-t", default=".", show_default=True, help="Directory to create the tree in")
@click.option("--overwrite", is_flag=True, help="Replace files that already exist")
@click.option("--dry-run", is_flag=True, help="Show what would be created without writing")
@click.option("--verbose", "-v", is_flag=True, help="List every operation")
def apply(input_path: str, target: str, overwrite: bool, dry_run: bool, verbose: bool):
    """Create the directory tree described in a document."""
    from skeletor.engine.apply import apply_file

    _configure_logging(verbose)
    reporter = RichReporter(console=console, verbose=verbose)

    try:
        result = apply_file(input_path, target, dry_run=dry_run, overwrite=overwrite, reporter=reporter)
    except SkeletorError as e:
        _fail(e)
        return

    if not result.ok:
        sys.exit(1)


# ── Snapshot ─────────────────────────────────────────────────────────


@main.command()
@click.argument("source", type=click.Path())
@click.option("--output", "-o", default=None, help="File to write the document to (stdout if omitted)")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the document instead of writing a file")
@click.option("--exclude-contents", is_flag=True, help="Record files with empty contents")
@click.option(
    "--ignore", "-I", "ignore", multiple=True,
    help="Ignore pattern, or a file of patterns (repeatable)",
)
@click.option("--ignore-file", "ignore_files", multiple=True, help="File of ignore patterns (repeatable)")
@click.option("--note", "-n", "notes", multiple=True, help="Note to record in the document (repeatable)")
@click.option("--dry-run", is_flag=True, help="Show what would be captured without writing")
@click.option("--verbose", "-v", is_flag=True, help="List every captured path")
def snapshot(
    source: str,
    output: str | None,
    to_stdout: bool,
    exclude_contents: bool,
    ignore: tuple[str, ...],
    ignore_files: tuple[str, ...],
    notes: tuple[str, ...],
    dry_run: bool,
    verbose: bool,
):
    """Capture the SOURCE directory as a document."""
    from skeletor.snapshot.capture import render_snapshot, snapshot as take_snapshot, write_snapshot
    from skeletor.snapshot.ignore import collect_ignore_rules

    _configure_logging(verbose)
    reporter = RichReporter(console=console, verbose=verbose)
    write_to_file = output is not None and not to_stdout

    try:
        rules = collect_ignore_rules(ignore, ignore_files, reporter)
        result = take_snapshot(
            source,
            ignore_rules=rules,
            include_contents=not exclude_contents,
            dry_run=dry_run,
            reporter=reporter,
            notes=notes,
            previous=output if write_to_file else None,
        )
        if dry_run:
            reporter.snapshot_complete(result, None)
            return
        if write_to_file:
            write_snapshot(result, output)
        else:
            click.echo(render_snapshot(result), nl=False)
    except SkeletorError as e:
        _fail(e)
        return

    reporter.snapshot_complete(result, output if write_to_file else None)


# ── Info ─────────────────────────────────────────────────────────────


@main.command()
@click.option(
    "--input", "-i", "input_path", default=DEFAULT_CONFIG_FILE, show_default=True,
    help="Document to describe",
)
def info(input_path: str):
    """Show the metadata recorded in a document."""
    from skeletor.info import summarize_document

    try:
        summary = summarize_document(input_path)
    except SkeletorError as e:
        _fail(e)
        return

    table = Table(title=f"Information from {escape(summary.path)}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Created", summary.created or "[dim]not recorded[/]")
    table.add_row("Updated", summary.updated or "[dim]not recorded[/]")
    if summary.stats is not None:
        table.add_row("Stats", f"{summary.stats.files} files, {summary.stats.dirs} directories")
    else:
        table.add_row("Stats", "[dim]not recorded[/]")
    table.add_row("Tree", f"{summary.tree_files} files, {summary.tree_dirs} directories")
    table.add_row("Notes", escape("\n".join(summary.notes)) or "[dim]none[/]")
    table.add_row("Generated comments", escape("\n".join(summary.generated_comments)) or "[dim]none[/]")
    table.add_row("Blacklist patterns", escape(", ".join(summary.blacklist)) or "[dim]none[/]")
    if summary.ignore_patterns:
        table.add_row("Ignore patterns", escape(", ".join(summary.ignore_patterns)))
    Console().print(table)

    if not summary.stats_match:
        console.print("[yellow]warning:[/] recorded stats differ from the tree contents")


if __name__ == "__main__":
    main()
