"""Tree model — the canonical in-memory representation of a scaffold.

A ``ConfigTree`` is an ordered mapping from entry name to ``Entry``, where an
entry is either a ``Directory`` (owning a nested tree) or a ``File`` (owning
optional text content). Names are validated on insertion so that a tree can
never describe a path outside its root.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterator, Union

from skeletor.errors import ConfigError, ValidationError

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def validate_entry_name(name: object) -> str:
    """Return ``name`` if it is a legal single path component.

    Raises:
        ValidationError: if the name is empty, contains a separator or NUL,
            or is one of the relative components ``.`` / ``..``.
    """
    if not isinstance(name, str):
        raise ValidationError(f"entry name must be a string, got {type(name).__name__}: {name!r}")
    if not name:
        raise ValidationError("entry name must not be empty")
    if name in (".", ".."):
        raise ValidationError(f"entry name '{name}' would resolve outside its parent")
    for char in _FORBIDDEN_CHARS:
        if char in name:
            raise ValidationError(f"entry name {name!r} contains forbidden character {char!r}")
    return name


def validate_relative_path(path: PurePosixPath) -> PurePosixPath:
    """Check that every component of a relative path is a legal entry name."""
    if path.is_absolute() or not path.parts:
        raise ValidationError(f"path '{path}' is not a relative path below the target root")
    for part in path.parts:
        validate_entry_name(part)
    return path


@dataclass(frozen=True)
class File:
    """A file entry. ``None`` or ``""`` content means empty or uncaptured."""

    content: str | None = None

    @property
    def text(self) -> str:
        return self.content or ""


@dataclass
class Directory:
    """A directory entry owning a nested tree."""

    tree: ConfigTree = field(default_factory=lambda: ConfigTree())


Entry = Union[Directory, File]


class ConfigTree:
    """Ordered, name-validated mapping of entries."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __setitem__(self, name: str, entry: Entry) -> None:
        validate_entry_name(name)
        if not isinstance(entry, (Directory, File)):
            raise TypeError(f"tree entries must be Directory or File, got {type(entry).__name__}")
        self._entries[name] = entry

    def __getitem__(self, name: str) -> Entry:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigTree):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"ConfigTree({self.to_mapping()!r})"

    def items(self):
        return self._entries.items()

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def add_dir(self, name: str) -> ConfigTree:
        """Add (or fetch) a sub-directory and return its tree."""
        existing = self._entries.get(name)
        if isinstance(existing, Directory):
            return existing.tree
        directory = Directory()
        self[name] = directory
        return directory.tree

    def add_file(self, name: str, content: str | None = "") -> File:
        entry = File(content)
        self[name] = entry
        return entry

    @classmethod
    def from_mapping(cls, mapping: dict, _parent: PurePosixPath | None = None) -> ConfigTree:
        """Build a tree from nested dicts: dict → directory, str/None → file."""
        tree = cls()
        for name, value in mapping.items():
            if not isinstance(name, str):
                where = f" under '{_parent}'" if _parent else ""
                raise ConfigError(
                    f"entry name {name!r}{where} must be a string",
                    tip="Quote names that YAML would read as numbers, booleans or dates",
                )
            path = _parent / name if _parent else PurePosixPath(name)
            if isinstance(value, dict):
                validate_entry_name(name)
                tree[name] = Directory(cls.from_mapping(value, path))
            elif value is None or isinstance(value, str):
                tree.add_file(name, value)
            else:
                raise ConfigError(
                    f"entry '{path}' has unsupported value of type {type(value).__name__}",
                    tip="Use a mapping for directories and a string (or empty) for files",
                )
        return tree

    def to_mapping(self) -> dict:
        """Convert back to plain nested dicts; file content ``None`` becomes ``""``."""
        result: dict = {}
        for name, entry in self._entries.items():
            if isinstance(entry, Directory):
                result[name] = entry.tree.to_mapping()
            else:
                result[name] = entry.text
        return result

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(self, order: str = "depth") -> Iterator[tuple[PurePosixPath, Entry]]:
        """Yield ``(relative_path, entry)`` pairs.

        ``order="depth"`` is a pre-order depth-first walk (a directory, then its
        whole subtree, then its next sibling). ``order="breadth"`` yields every
        entry at depth *d* before any entry at depth *d + 1*. Both preserve
        sibling insertion order.
        """
        if order == "depth":
            yield from self._walk_depth(None)
            return
        if order == "breadth":
            queue: deque[tuple[PurePosixPath | None, ConfigTree]] = deque([(None, self)])
            while queue:
                prefix, tree = queue.popleft()
                for name, entry in tree._entries.items():
                    path = prefix / name if prefix else PurePosixPath(name)
                    yield path, entry
                    if isinstance(entry, Directory):
                        queue.append((path, entry.tree))
            return
        raise ValueError(f"unknown traversal order: {order!r}")

    def _walk_depth(self, prefix: PurePosixPath | None) -> Iterator[tuple[PurePosixPath, Entry]]:
        for name, entry in self._entries.items():
            path = prefix / name if prefix else PurePosixPath(name)
            yield path, entry
            if isinstance(entry, Directory):
                yield from entry.tree._walk_depth(path)

    def count(self) -> tuple[int, int]:
        """Return ``(files, dirs)`` over the whole tree."""
        files = dirs = 0
        for _path, entry in self.walk():
            if isinstance(entry, Directory):
                dirs += 1
            else:
                files += 1
        return files, dirs
