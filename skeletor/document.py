"""Declarative document codec — YAML text to tree plus metadata, and back.

A document is a YAML mapping whose mandatory ``directories`` key holds the
tree: nested mappings are directories, strings (or nothing) are file
contents. Everything else is optional metadata written by ``snapshot``::

    created: '2024-05-01T09:30:00Z'
    updated: '2024-05-02T10:00:00Z'
    notes:
    - initial import
    stats:
      files: 2
      dirs: 1
    blacklist:
    - '*.log'
    generated_comments:
    - assets/logo.png detected as binary
    binary_files:
    - assets/logo.png
    directories:
      src:
        main.py: |
          print("hello")
      README.md: ''

An ``ignore_patterns`` list is honoured by ``apply`` to leave entries out.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skeletor.errors import ConfigError, FilesystemError
from skeletor.models.results import SnapshotMetadata, SnapshotStats
from skeletor.models.tree import ConfigTree

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """A parsed declarative document."""

    tree: ConfigTree
    created: str | None = None
    updated: str | None = None
    notes: list[str] = field(default_factory=list)
    stats: SnapshotStats | None = None
    blacklist: list[str] = field(default_factory=list)
    generated_comments: list[str] = field(default_factory=list)
    binary_files: list[str] = field(default_factory=list)
    ignore_patterns: list[str] = field(default_factory=list)


# ── Reading ──────────────────────────────────────────────────────────


def parse_document(text: str, source: str = "<string>") -> Document:
    """Parse YAML text into a ``Document``.

    Raises:
        ConfigError: on invalid YAML, a missing or non-mapping ``directories``
            key, or tree values that are neither mappings nor strings.
        ValidationError: on entry names that are not single path components.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError.invalid_yaml(f"{source}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")
    if "directories" not in data:
        raise ConfigError.missing_key("directories")
    directories = data["directories"]
    if not isinstance(directories, dict):
        raise ConfigError(
            f"{source}: 'directories' must be a mapping, got {type(directories).__name__}",
        )

    return Document(
        tree=ConfigTree.from_mapping(directories),
        created=_timestamp(data.get("created")),
        updated=_timestamp(data.get("updated")),
        notes=_string_list(data, "notes"),
        stats=_stats(data.get("stats")),
        blacklist=_string_list(data, "blacklist"),
        generated_comments=_string_list(data, "generated_comments"),
        binary_files=_string_list(data, "binary_files"),
        ignore_patterns=_string_list(data, "ignore_patterns"),
    )


def load_document(path: str | Path) -> Document:
    """Read and parse a document file.

    Raises:
        FilesystemError: if the file cannot be read.
        ConfigError: if it cannot be parsed (see ``parse_document``).
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FilesystemError.file_not_found(path) from e
    except OSError as e:
        raise FilesystemError.from_os_error(e, path) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 text ({e.reason})") from e
    logger.debug("Loaded document %s (%d bytes)", path, len(text))
    return parse_document(text, source=str(path))


def _timestamp(value: object) -> str | None:
    # Unquoted timestamps are loaded as datetime objects
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.isoformat() + "Z"
        return value.isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    if value is None:
        return None
    return str(value)


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    raise ConfigError(f"'{key}' must be a string or a list of strings")


def _stats(value: object) -> SnapshotStats | None:
    if not isinstance(value, dict):
        return None
    files = value.get("files", 0)
    dirs = value.get("dirs", value.get("directories", 0))
    if not isinstance(files, int) or not isinstance(dirs, int):
        raise ConfigError("'stats' counts must be integers")
    return SnapshotStats(files=files, dirs=dirs)


# ── Writing ──────────────────────────────────────────────────────────


class _DocumentDumper(yaml.SafeDumper):
    """Safe dumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, value: str):
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_DocumentDumper.add_representer(str, _represent_str)


def build_document(
    tree: ConfigTree,
    metadata: SnapshotMetadata | None = None,
    ignore_patterns: list[str] | tuple[str, ...] = (),
) -> dict:
    """Assemble the plain mapping that ``dump_document`` serializes.

    Metadata comes first and the tree last; empty optional lists are left out.
    """
    data: dict = {}
    if metadata is not None:
        data["created"] = metadata.created
        data["updated"] = metadata.updated
        if metadata.notes:
            data["notes"] = list(metadata.notes)
        data["stats"] = {"files": metadata.stats.files, "dirs": metadata.stats.dirs}
        if metadata.blacklist:
            data["blacklist"] = list(metadata.blacklist)
        if metadata.generated_comments:
            data["generated_comments"] = list(metadata.generated_comments)
        if metadata.binary_files:
            data["binary_files"] = list(metadata.binary_files)
    if ignore_patterns:
        data["ignore_patterns"] = list(ignore_patterns)
    data["directories"] = tree.to_mapping()
    return data


def dump_document(
    tree: ConfigTree,
    metadata: SnapshotMetadata | None = None,
    ignore_patterns: list[str] | tuple[str, ...] = (),
) -> str:
    """Serialize a tree (and optional metadata) to YAML text."""
    return yaml.dump(
        build_document(tree, metadata, ignore_patterns),
        Dumper=_DocumentDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=4096,
    )
