"""Run results — what an apply or snapshot invocation hands back to its caller.

All records are frozen once returned; the executor and walker accumulate into
private builders and freeze at the end of the run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from skeletor.models.tree import ConfigTree


class Action:
    """Classification of a planned task against the target's starting state."""

    CREATE_DIR = "create_dir"  # Directory will be / was created
    DIR_EXISTS = "dir_exists"  # Directory already present, nothing to do
    CREATE = "create"  # File will be / was created
    SKIP = "skip"  # File exists and overwrite is off
    OVERWRITE = "overwrite"  # File exists and will be / was replaced
    FAILED = "failed"  # Task could not be performed


@dataclass(frozen=True)
class Failure:
    """A per-entry I/O failure recorded instead of raised."""

    path: str
    operation: str  # create_dir | create_file | read | list | walk
    message: str

    def __str__(self) -> str:
        return f"{self.operation} {self.path}: {self.message}"


@dataclass(frozen=True)
class TaskOutcome:
    """How a single task was classified (and, outside dry run, performed)."""

    path: str
    action: str


@dataclass(frozen=True)
class CreationResult:
    """Aggregate result of executing (or previewing) an apply task sequence."""

    dirs_created: int = 0
    files_created: int = 0
    files_skipped: int = 0
    files_overwritten: int = 0
    tasks_total: int = 0
    duration: float = 0.0  # seconds
    dry_run: bool = False
    outcomes: tuple[TaskOutcome, ...] = ()
    failures: tuple[Failure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def paths_with(self, action: str) -> list[str]:
        return [o.path for o in self.outcomes if o.action == action]

    def summary(self) -> str:
        prefix = "[dry run] " if self.dry_run else ""
        parts = [
            f"{self.dirs_created} dir(s) created",
            f"{self.files_created} file(s) created",
            f"{self.files_skipped} skipped",
            f"{self.files_overwritten} overwritten",
        ]
        if self.failures:
            parts.append(f"{len(self.failures)} failed")
        return f"{prefix}{', '.join(parts)} in {self.duration * 1000:.2f}ms"


@dataclass(frozen=True)
class SnapshotStats:
    files: int = 0
    dirs: int = 0


@dataclass(frozen=True)
class SnapshotMetadata:
    """Capture metadata written alongside a snapshot tree."""

    created: str
    updated: str
    source: str = ""
    notes: tuple[str, ...] = ()
    stats: SnapshotStats = field(default_factory=SnapshotStats)
    blacklist: tuple[str, ...] = ()  # Active ignore patterns
    generated_comments: tuple[str, ...] = ()
    binary_files: tuple[str, ...] = ()
    ignored_paths: tuple[str, ...] = ()
    failures: tuple[Failure, ...] = ()


@dataclass(frozen=True)
class SnapshotResult:
    """A captured tree plus its metadata."""

    tree: ConfigTree
    metadata: SnapshotMetadata
    duration: float = 0.0  # seconds
    dry_run: bool = False

    def summary(self) -> str:
        stats = self.metadata.stats
        prefix = "[dry run] " if self.dry_run else ""
        line = (
            f"{prefix}{stats.files} file(s), {stats.dirs} dir(s) captured, "
            f"{len(self.metadata.binary_files)} binary"
        )
        if self.metadata.ignored_paths:
            line += f", {len(self.metadata.ignored_paths)} ignored"
        if self.metadata.failures:
            line += f", {len(self.metadata.failures)} failed"
        return f"{line} in {self.duration * 1000:.2f}ms"
