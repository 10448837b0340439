"""Snapshot operation — capture a directory as a declarative document."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from skeletor.document import dump_document, load_document
from skeletor.errors import FilesystemError, SkeletorError
from skeletor.models.results import (
    Action,
    SnapshotMetadata,
    SnapshotResult,
    SnapshotStats,
    TaskOutcome,
)
from skeletor.models.tree import Directory
from skeletor.reporting.reporter import Reporter, SilentReporter
from skeletor.snapshot.ignore import IgnoreRuleSet
from skeletor.snapshot.walker import walk_directory

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as an RFC 3339 UTC timestamp with second precision."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def snapshot(
    source_root: str | Path,
    ignore_rules: IgnoreRuleSet | None = None,
    include_contents: bool = True,
    dry_run: bool = False,
    reporter: Reporter | None = None,
    notes: Iterable[str] = (),
    previous: str | Path | None = None,
) -> SnapshotResult:
    """Walk ``source_root`` into a tree and collect its metadata.

    ``previous`` names an earlier snapshot document; when it can be read, its
    ``created`` timestamp is carried over. Nothing is written here; see
    ``write_snapshot``.

    Raises:
        FilesystemError: if ``source_root`` is missing or not a directory.
    """
    reporter = reporter or SilentReporter()
    rules = ignore_rules or IgnoreRuleSet()
    root = Path(source_root)
    if not root.exists():
        raise FilesystemError.directory_not_found(root)
    if not root.is_dir():
        raise FilesystemError.not_a_directory(root)

    logger.info("Snapshot of %s (%d ignore rule(s))", root, len(rules))
    reporter.operation_start("Snapshot", str(root))
    start = time.monotonic()

    walked = walk_directory(root, rules, include_contents=include_contents, reporter=reporter)
    files, dirs = walked.tree.count()

    now = utc_timestamp()
    metadata = SnapshotMetadata(
        created=_previous_created(previous, reporter) or now,
        updated=now,
        source=str(root),
        notes=tuple(notes),
        stats=SnapshotStats(files=files, dirs=dirs),
        blacklist=rules.patterns,
        generated_comments=tuple(f"{path} detected as binary" for path in walked.binary_files),
        binary_files=tuple(walked.binary_files),
        ignored_paths=tuple(walked.ignored_paths),
        failures=tuple(walked.failures),
    )
    result = SnapshotResult(
        tree=walked.tree,
        metadata=metadata,
        duration=time.monotonic() - start,
        dry_run=dry_run,
    )
    logger.info("Snapshot complete: %s", result.summary())

    if dry_run:
        outcomes = [
            TaskOutcome(path.as_posix(), Action.CREATE_DIR if isinstance(entry, Directory) else Action.CREATE)
            for path, entry in walked.tree.walk(order="breadth")
        ]
        reporter.dry_run_preview(outcomes, "captured", metadata.binary_files, metadata.blacklist)
    return result


def _previous_created(previous: str | Path | None, reporter: Reporter) -> str | None:
    if previous is None or not Path(previous).is_file():
        return None
    try:
        return load_document(previous).created
    except SkeletorError as e:
        logger.debug("Could not read previous snapshot %s: %s", previous, e.message)
        reporter.warning(f"Ignoring unreadable previous snapshot '{previous}': {e.message}")
        return None


def render_snapshot(result: SnapshotResult) -> str:
    """Serialize a snapshot result to document text."""
    return dump_document(result.tree, result.metadata)


def write_snapshot(result: SnapshotResult, output_path: str | Path) -> Path:
    """Write a snapshot document to ``output_path``.

    Raises:
        FilesystemError: if the file cannot be written.
    """
    path = Path(output_path)
    text = render_snapshot(result)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise FilesystemError.from_os_error(e, path) from e
    logger.info("Snapshot written to %s", path)
    return path
