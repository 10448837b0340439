"""Apply operation — materialize a tree (or a document file) under a target directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from skeletor.document import load_document
from skeletor.engine.executor import DEFAULT_PROGRESS_EVERY, ApplyOptions, execute_tasks
from skeletor.engine.planner import CreateDir, filter_ignored, plan_tasks
from skeletor.errors import FilesystemError
from skeletor.models.results import CreationResult
from skeletor.models.tree import ConfigTree
from skeletor.reporting.reporter import Reporter, SilentReporter
from skeletor.snapshot.ignore import IgnoreRuleSet, PatternOrigin, PatternSpec, compile_rules

logger = logging.getLogger(__name__)


def apply(
    tree: ConfigTree,
    target_root: str | Path,
    dry_run: bool = False,
    overwrite: bool = False,
    reporter: Reporter | None = None,
    ignore_rules: IgnoreRuleSet | None = None,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
    binary_files: Sequence[str] = (),
) -> CreationResult:
    """Create ``tree`` below ``target_root``.

    Existing files are skipped unless ``overwrite`` is set. With ``dry_run``
    nothing is written and the result reports what a real run would do.
    ``binary_files`` is only used to annotate the dry-run preview.

    Raises:
        FilesystemError: if ``target_root`` is missing or not a directory.
        ValidationError: if a planned path would escape ``target_root``.
    """
    reporter = reporter or SilentReporter()
    root = Path(target_root)
    if not root.exists():
        raise FilesystemError.directory_not_found(root)
    if not root.is_dir():
        raise FilesystemError.not_a_directory(root)

    reporter.operation_start("Apply", str(root))
    tasks = plan_tasks(tree)
    if ignore_rules:
        tasks, dropped = filter_ignored(tasks, ignore_rules)
        for task in dropped:
            reporter.path_ignored(task.path.as_posix(), is_dir=isinstance(task, CreateDir))

    logger.info("Applying %d task(s) to %s%s", len(tasks), root, " (dry run)" if dry_run else "")
    options = ApplyOptions(dry_run=dry_run, overwrite=overwrite, progress_every=progress_every)
    result = execute_tasks(tasks, root, options, reporter)

    if dry_run:
        patterns = ignore_rules.patterns if ignore_rules else ()
        reporter.dry_run_preview(result.outcomes, "applied", tuple(binary_files), patterns)
    logger.info("Apply complete: %s", result.summary())
    reporter.apply_complete(result)
    return result


def apply_file(
    config_path: str | Path,
    target_root: str | Path,
    dry_run: bool = False,
    overwrite: bool = False,
    reporter: Reporter | None = None,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
) -> CreationResult:
    """Load a document and apply its tree.

    The document's ``ignore_patterns`` are compiled like lines of a pattern
    file: invalid ones are reported and skipped.
    """
    reporter = reporter or SilentReporter()
    document = load_document(config_path)
    specs = [
        PatternSpec(pattern, PatternOrigin.FROM_FILE, source=str(config_path))
        for pattern in document.ignore_patterns
    ]
    rules = compile_rules(specs, reporter) if specs else None
    return apply(
        document.tree,
        target_root,
        dry_run=dry_run,
        overwrite=overwrite,
        reporter=reporter,
        ignore_rules=rules,
        progress_every=progress_every,
        binary_files=document.binary_files,
    )
