"""Apply executor — perform or preview a planned task sequence.

Each task is classified against the target's current state (``create``,
``skip``, ``overwrite``, ...) and then performed unless running dry. Dry runs
simulate directory creation so that files planned under a new directory
classify exactly as they would in a real run.

A failing task is recorded and execution continues with the rest of the
sequence; only a structurally invalid task raises.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Sequence

from skeletor.engine.planner import CreateDir, Task, task_label
from skeletor.models.results import Action, CreationResult, Failure, TaskOutcome
from skeletor.models.tree import validate_relative_path
from skeletor.reporting.reporter import Reporter, SilentReporter

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_EVERY = 1000


@dataclass
class ApplyOptions:
    """Run configuration for the executor."""

    dry_run: bool = False
    overwrite: bool = False
    progress_every: int = DEFAULT_PROGRESS_EVERY


class _Classifier:
    """Decides what a task would do, tracking directories created or failed so far."""

    def __init__(self, target_root: Path, overwrite: bool):
        self.target_root = target_root
        self.overwrite = overwrite
        self.new_dirs: set[PurePosixPath] = set()
        self.failed_dirs: set[PurePosixPath] = set()

    def classify(self, task: Task) -> tuple[str, str]:
        """Return ``(action, reason)``; ``reason`` is only set for failures."""
        parents = task.path.parents
        if any(p in self.failed_dirs for p in parents):
            return Action.FAILED, "parent directory could not be created"
        if any(p in self.new_dirs for p in parents):
            return (Action.CREATE_DIR if isinstance(task, CreateDir) else Action.CREATE), ""

        dest = self.target_root / task.path
        try:
            if self._crosses_symlink(task.path):
                return Action.FAILED, "symlink in target path"
            exists = dest.exists()
            is_dir = exists and dest.is_dir()
        except OSError as e:
            return Action.FAILED, e.strerror or str(e)

        if isinstance(task, CreateDir):
            if not exists:
                return Action.CREATE_DIR, ""
            if is_dir:
                return Action.DIR_EXISTS, ""
            return Action.FAILED, "path exists and is not a directory"

        if not exists:
            return Action.CREATE, ""
        if is_dir:
            return Action.FAILED, "path exists and is a directory"
        return (Action.OVERWRITE if self.overwrite else Action.SKIP), ""

    def _crosses_symlink(self, path: PurePosixPath) -> bool:
        """True when ``path`` or one of its ancestors below the root is a symlink."""
        for part in (path, *path.parents):
            if part != PurePosixPath(".") and (self.target_root / part).is_symlink():
                return True
        return False

    def record(self, task: Task, action: str) -> None:
        if not isinstance(task, CreateDir):
            return
        if action == Action.CREATE_DIR:
            self.new_dirs.add(task.path)
        elif action == Action.FAILED:
            self.failed_dirs.add(task.path)


def classify_tasks(
    tasks: Sequence[Task], target_root: str | Path, overwrite: bool = False
) -> list[TaskOutcome]:
    """Classify every task against the current state of ``target_root`` without writing."""
    classifier = _Classifier(Path(target_root), overwrite)
    outcomes = []
    for task in tasks:
        validate_relative_path(task.path)
        action, _reason = classifier.classify(task)
        classifier.record(task, action)
        outcomes.append(TaskOutcome(task.path.as_posix(), action))
    return outcomes


def _perform(task: Task, dest: Path, action: str) -> None:
    if action == Action.CREATE_DIR:
        dest.mkdir(parents=True, exist_ok=True)
    elif action in (Action.CREATE, Action.OVERWRITE):
        with open(dest, "w", encoding="utf-8", newline="") as f:
            f.write(task.content)


def execute_tasks(
    tasks: Sequence[Task],
    target_root: str | Path,
    options: ApplyOptions | None = None,
    reporter: Reporter | None = None,
) -> CreationResult:
    """Run (or preview) ``tasks`` below ``target_root``.

    The caller guarantees that ``target_root`` exists. Per-task ``OSError`` is
    recorded as a ``Failure``; the sequence always runs to the end.

    Raises:
        ValidationError: if a task path is absolute or escapes the target root.
    """
    options = options or ApplyOptions()
    reporter = reporter or SilentReporter()
    root = Path(target_root)
    classifier = _Classifier(root, options.overwrite)
    total = len(tasks)
    every = max(1, options.progress_every)

    counts = {Action.CREATE_DIR: 0, Action.CREATE: 0, Action.SKIP: 0, Action.OVERWRITE: 0}
    outcomes: list[TaskOutcome] = []
    failures: list[Failure] = []
    start = time.monotonic()

    for index, task in enumerate(tasks, start=1):
        validate_relative_path(task.path)
        rel = task.path.as_posix()
        operation = "create_dir" if isinstance(task, CreateDir) else "create_file"
        action, reason = classifier.classify(task)

        if action != Action.FAILED and not options.dry_run:
            try:
                _perform(task, root / task.path, action)
            except OSError as e:
                action, reason = Action.FAILED, e.strerror or str(e)

        classifier.record(task, action)
        outcomes.append(TaskOutcome(rel, action))

        if action == Action.FAILED:
            failure = Failure(rel, operation, reason)
            failures.append(failure)
            logger.warning("Failed to %s %s: %s", operation.replace("_", " "), rel, reason)
            reporter.task_failed(failure)
        else:
            if action in counts:
                counts[action] += 1
            logger.debug("%s %s%s", action, rel, " (dry run)" if options.dry_run else "")
            if not options.dry_run:
                _report(reporter, action, rel)

        if index % every == 0 and index < total:
            reporter.progress(index, total, task_label(task))

    if total:
        reporter.progress(total, total, "done")

    return CreationResult(
        dirs_created=counts[Action.CREATE_DIR],
        files_created=counts[Action.CREATE],
        files_skipped=counts[Action.SKIP],
        files_overwritten=counts[Action.OVERWRITE],
        tasks_total=total,
        duration=time.monotonic() - start,
        dry_run=options.dry_run,
        outcomes=tuple(outcomes),
        failures=tuple(failures),
    )


def _report(reporter: Reporter, action: str, rel: str) -> None:
    if action == Action.CREATE_DIR:
        reporter.task_created(rel, is_dir=True)
    elif action == Action.CREATE:
        reporter.task_created(rel, is_dir=False)
    elif action == Action.SKIP:
        reporter.task_skipped(rel)
    elif action == Action.OVERWRITE:
        reporter.task_overwritten(rel)
