"""Info — summarize the metadata recorded in a document."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from skeletor.document import load_document
from skeletor.models.results import SnapshotStats


@dataclass
class DocumentInfo:
    path: str
    created: str | None = None
    updated: str | None = None
    notes: list[str] = field(default_factory=list)
    generated_comments: list[str] = field(default_factory=list)
    stats: SnapshotStats | None = None  # As recorded in the document
    tree_files: int = 0  # As counted from the tree itself
    tree_dirs: int = 0
    blacklist: list[str] = field(default_factory=list)
    binary_files: list[str] = field(default_factory=list)
    ignore_patterns: list[str] = field(default_factory=list)

    @property
    def stats_match(self) -> bool:
        """True when recorded stats agree with the tree (or none were recorded)."""
        if self.stats is None:
            return True
        return (self.stats.files, self.stats.dirs) == (self.tree_files, self.tree_dirs)


def summarize_document(path: str | Path) -> DocumentInfo:
    """Load ``path`` and collect its metadata.

    Raises:
        FilesystemError: if the file cannot be read.
        ConfigError: if the document is malformed.
    """
    document = load_document(path)
    files, dirs = document.tree.count()
    return DocumentInfo(
        path=str(path),
        created=document.created,
        updated=document.updated,
        notes=list(document.notes),
        generated_comments=list(document.generated_comments),
        stats=document.stats,
        tree_files=files,
        tree_dirs=dirs,
        blacklist=list(document.blacklist),
        binary_files=list(document.binary_files),
        ignore_patterns=list(document.ignore_patterns),
    )
