"""
Domain Entities - Watched files and the pair they form.

A FileSnapshot is the in-memory copy of one watched file. It is mutated
only by the propagation loop: after re-reading a changed file, or after
the transformation step has overwritten it.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..exceptions import SnapshotReadError, SnapshotWriteError


ENCODING = "utf-8"


@dataclass
class FileSnapshot:
    """
    Last-known state of one watched file.

    Attributes:
        path: File location, fixed for the snapshot's lifetime.
        content: Last text read from or written to ``path`` by this process.
        last_modified: Wall-clock time of the last mutation (diagnostics only).
    """

    path: Path
    content: str = ""
    last_modified: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @classmethod
    def read(cls, path: str | Path) -> FileSnapshot:
        """
        Create a snapshot from the file currently on disk.

        Raises:
            FileNotFoundError: If the file does not exist.
            SnapshotReadError: If the file exists but cannot be read.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        snapshot = cls(path=path)
        snapshot.content = snapshot.read_disk()
        return snapshot

    @property
    def name(self) -> str:
        """Base name of the file."""
        return self.path.name

    @property
    def has_content(self) -> bool:
        """True if the content is non-empty after stripping whitespace."""
        return bool(self.content.strip())

    def read_disk(self) -> str:
        """Read the file's current text without touching the snapshot."""
        try:
            with open(self.path, encoding=ENCODING, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotReadError(f"Cannot read {self.path}", path=str(self.path), cause=e) from e

    def write_disk(self, content: str) -> None:
        """
        Replace the file with ``content`` without touching the snapshot.

        The text goes to a temporary file beside the target, which is then
        renamed over it, so a failed write leaves the old file in place.

        Raises:
            SnapshotWriteError: If the content cannot be encoded or written.
        """
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=ENCODING,
                newline="",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(content)
            if self.path.exists():
                shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except (OSError, UnicodeError) as e:
            raise SnapshotWriteError(
                f"Cannot write {self.path}", path=str(self.path), cause=e
            ) from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()

    def update(self, content: str) -> None:
        """Record new content and bump the timestamp."""
        self.content = content
        self.last_modified = time.time()

    def matches(self, path: str | Path) -> bool:
        """Check whether ``path`` refers to this snapshot's file."""
        return Path(path).resolve() == self.path.resolve()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for diagnostics."""
        return {
            "path": str(self.path),
            "name": self.name,
            "length": len(self.content),
            "has_content": self.has_content,
            "last_modified": self.last_modified,
        }


@dataclass
class FilePair:
    """
    The two snapshots kept in sync.

    The relationship is direction-agnostic: either file can be the source
    of a transformation, depending only on which one changed.
    """

    first: FileSnapshot
    second: FileSnapshot

    @classmethod
    def read(cls, first: str | Path, second: str | Path) -> FilePair:
        """Read both files from disk. Missing files raise FileNotFoundError."""
        return cls(first=FileSnapshot.read(first), second=FileSnapshot.read(second))

    @property
    def snapshots(self) -> tuple[FileSnapshot, FileSnapshot]:
        return (self.first, self.second)

    def other(self, snapshot: FileSnapshot) -> FileSnapshot:
        """Return the counterpart of ``snapshot``."""
        if snapshot is self.first:
            return self.second
        if snapshot is self.second:
            return self.first
        raise ValueError(f"{snapshot.path} is not part of this pair")

    def snapshot_for(self, path: str | Path) -> FileSnapshot | None:
        """Resolve a filesystem path to its snapshot, or None."""
        for snapshot in self.snapshots:
            if snapshot.matches(path):
                return snapshot
        return None

    def bootstrap_direction(self) -> tuple[FileSnapshot, FileSnapshot] | None:
        """
        Direction for startup auto-sync.

        Returns:
            (source, target) when exactly one file has content, else None.
        """
        if self.first.has_content and not self.second.has_content:
            return (self.first, self.second)
        if self.second.has_content and not self.first.has_content:
            return (self.second, self.first)
        return None

    def __str__(self) -> str:
        return f"{self.first.name} <-> {self.second.name}"
