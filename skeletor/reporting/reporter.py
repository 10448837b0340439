"""Reporter interface — the event sink shared by apply and snapshot.

The engine never prints. Everything a user might see is emitted as a call on a
``Reporter``; the CLI plugs in ``RichReporter``, library callers get
``SilentReporter`` by default, and tests use ``RecordingReporter``.
"""

from __future__ import annotations

from typing import Sequence

from skeletor.models.results import CreationResult, Failure, SnapshotResult, TaskOutcome


class Reporter:
    """Base sink. Every event is a no-op; subclasses override what they render."""

    def operation_start(self, operation: str, details: str) -> None:
        pass

    def progress(self, current: int, total: int, message: str) -> None:
        pass

    def task_created(self, path: str, is_dir: bool) -> None:
        pass

    def task_skipped(self, path: str) -> None:
        pass

    def task_overwritten(self, path: str) -> None:
        pass

    def task_failed(self, failure: Failure) -> None:
        pass

    def path_ignored(self, path: str, is_dir: bool) -> None:
        pass

    def binary_detected(self, path: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def tip(self, message: str) -> None:
        pass

    def dry_run_preview(
        self,
        outcomes: Sequence[TaskOutcome],
        verb: str,
        binary_files: Sequence[str] = (),
        ignore_patterns: Sequence[str] = (),
    ) -> None:
        pass

    def apply_complete(self, result: CreationResult) -> None:
        pass

    def snapshot_complete(self, result: SnapshotResult, output: str | None = None) -> None:
        pass


class SilentReporter(Reporter):
    """Discards every event."""


class RecordingReporter(Reporter):
    """Keeps every event as ``(name, args)`` for later inspection."""

    def __init__(self) -> None:
        self.events: list[tuple[str, tuple]] = []

    def names(self) -> list[str]:
        return [name for name, _args in self.events]

    def of(self, name: str) -> list[tuple]:
        return [args for event, args in self.events if event == name]

    def operation_start(self, operation, details):
        self.events.append(("operation_start", (operation, details)))

    def progress(self, current, total, message):
        self.events.append(("progress", (current, total, message)))

    def task_created(self, path, is_dir):
        self.events.append(("task_created", (path, is_dir)))

    def task_skipped(self, path):
        self.events.append(("task_skipped", (path,)))

    def task_overwritten(self, path):
        self.events.append(("task_overwritten", (path,)))

    def task_failed(self, failure):
        self.events.append(("task_failed", (failure,)))

    def path_ignored(self, path, is_dir):
        self.events.append(("path_ignored", (path, is_dir)))

    def binary_detected(self, path):
        self.events.append(("binary_detected", (path,)))

    def warning(self, message):
        self.events.append(("warning", (message,)))

    def tip(self, message):
        self.events.append(("tip", (message,)))

    def dry_run_preview(self, outcomes, verb, binary_files=(), ignore_patterns=()):
        self.events.append(
            ("dry_run_preview", (tuple(outcomes), verb, tuple(binary_files), tuple(ignore_patterns)))
        )

    def apply_complete(self, result):
        self.events.append(("apply_complete", (result,)))

    def snapshot_complete(self, result, output=None):
        self.events.append(("snapshot_complete", (result, output)))
