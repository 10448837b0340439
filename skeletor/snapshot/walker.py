"""Snapshot walker — turn a real directory into a tree.

The walk is iterative and visits every directory before its descendants.
Siblings are processed in lexical order of their names, so two snapshots of an
unchanged directory serialize identically. Ignored directories are pruned
without being opened; symbolic links are never followed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from skeletor.errors import ValidationError
from skeletor.models.results import Failure
from skeletor.models.tree import ConfigTree, validate_entry_name
from skeletor.reporting.reporter import Reporter, SilentReporter
from skeletor.snapshot.binary import decode_text, is_binary
from skeletor.snapshot.ignore import IgnoreRuleSet

logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    tree: ConfigTree
    binary_files: list[str] = field(default_factory=list)
    ignored_paths: list[str] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)


def walk_directory(
    root: str | Path,
    ignore_rules: IgnoreRuleSet | None = None,
    include_contents: bool = True,
    reporter: Reporter | None = None,
) -> WalkResult:
    """Capture ``root`` (which must be an existing directory) as a tree.

    Per-entry I/O errors become ``Failure`` records and the walk continues.
    """
    root = Path(root)
    rules = ignore_rules or IgnoreRuleSet()
    reporter = reporter or SilentReporter()
    result = WalkResult(tree=ConfigTree())

    stack: list[tuple[Path, PurePosixPath | None, ConfigTree]] = [(root, None, result.tree)]
    while stack:
        directory, prefix, tree = stack.pop()
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            _record(result, reporter, Failure(_label(prefix), "list", e.strerror or str(e)))
            continue

        subdirs = []
        for child in children:
            rel = prefix / child.name if prefix else PurePosixPath(child.name)
            rel_str = rel.as_posix()
            try:
                is_link = child.is_symlink()
                is_dir = not is_link and child.is_dir()
            except OSError as e:
                _record(result, reporter, Failure(rel_str, "walk", e.strerror or str(e)))
                continue

            if rules.matches(rel_str, is_dir=is_dir):
                logger.debug("Ignored %s", rel_str)
                result.ignored_paths.append(rel_str + "/" if is_dir else rel_str)
                reporter.path_ignored(rel_str, is_dir)
                continue
            if is_link:
                _record(result, reporter, Failure(rel_str, "walk", "symlink skipped"))
                continue
            try:
                validate_entry_name(child.name)
            except ValidationError as e:
                _record(result, reporter, Failure(rel_str, "walk", e.message))
                continue

            if is_dir:
                subdirs.append((child, rel, tree.add_dir(child.name)))
                continue
            if not include_contents:
                tree.add_file(child.name, "")
                continue
            try:
                data = child.read_bytes()
            except OSError as e:
                _record(result, reporter, Failure(rel_str, "read", e.strerror or str(e)))
                continue
            tree.add_file(child.name, _capture_text(data, rel_str, result, reporter))

        # Reversed so that popping visits subdirectories in lexical order
        stack.extend(reversed(subdirs))

    logger.debug(
        "Walked %s: %d binary, %d ignored, %d failure(s)",
        root,
        len(result.binary_files),
        len(result.ignored_paths),
        len(result.failures),
    )
    return result


def _capture_text(data: bytes, rel_str: str, result: WalkResult, reporter: Reporter) -> str:
    if not is_binary(data):
        try:
            return decode_text(data)
        except UnicodeDecodeError:
            pass  # Invalid bytes past the sample window
    logger.debug("Binary content in %s", rel_str)
    result.binary_files.append(rel_str)
    reporter.binary_detected(rel_str)
    return ""


def _record(result: WalkResult, reporter: Reporter, failure: Failure) -> None:
    logger.warning("Snapshot: %s", failure)
    result.failures.append(failure)
    reporter.task_failed(failure)


def _label(prefix: PurePosixPath | None) -> str:
    return prefix.as_posix() if prefix else "."
