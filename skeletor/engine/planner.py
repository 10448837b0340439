"""Task planner — flatten a tree into an ordered list of filesystem operations.

Planning is breadth-first: every entry at depth *d* is emitted, in sibling
insertion order, before any entry at depth *d + 1*. A ``CreateDir`` therefore
always precedes every task beneath it, and whole directory levels are created
before the files inside them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Union

from skeletor.models.tree import ConfigTree, Directory, validate_relative_path

if TYPE_CHECKING:
    from skeletor.snapshot.ignore import IgnoreRuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateDir:
    path: PurePosixPath


@dataclass(frozen=True)
class CreateFile:
    path: PurePosixPath
    content: str = ""


Task = Union[CreateDir, CreateFile]


def plan_tasks(tree: ConfigTree) -> list[Task]:
    """Return the breadth-first task sequence for ``tree``."""
    tasks: list[Task] = []
    for path, entry in tree.walk(order="breadth"):
        validate_relative_path(path)
        if isinstance(entry, Directory):
            tasks.append(CreateDir(path))
        else:
            tasks.append(CreateFile(path, entry.text))
    logger.debug("Planned %d task(s)", len(tasks))
    return tasks


def filter_ignored(tasks: list[Task], rules: IgnoreRuleSet) -> tuple[list[Task], list[Task]]:
    """Split ``tasks`` into ``(kept, dropped)`` using ignore rules.

    A task is dropped when its own path matches or when any ancestor directory
    was dropped, so nothing is ever planned inside an excluded directory.
    """
    kept: list[Task] = []
    dropped: list[Task] = []
    dropped_dirs: set[PurePosixPath] = set()
    for task in tasks:
        is_dir = isinstance(task, CreateDir)
        under_dropped = any(parent in dropped_dirs for parent in task.path.parents)
        if under_dropped or rules.matches(task.path.as_posix(), is_dir=is_dir):
            dropped.append(task)
            if is_dir:
                dropped_dirs.add(task.path)
        else:
            kept.append(task)
    if dropped:
        logger.info("Ignored %d task(s) via ignore patterns", len(dropped))
    return kept, dropped


def task_label(task: Task) -> str:
    """Short printable description of a task."""
    if isinstance(task, CreateDir):
        return f"Dir: {task.path.as_posix()}"
    return f"File: {task.path.as_posix()}"
