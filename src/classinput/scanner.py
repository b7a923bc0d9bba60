"""Directory scanner producing file entries for an input data set."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from .errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """Metadata for a filesystem path.  Identity is the path alone."""

    path: Path
    size: int = field(default=0, compare=False)
    mtime: float = field(default=-1.0, compare=False)
    is_dir: bool = field(default=False, compare=False)
    readable: bool = field(default=True, compare=False)

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: Path) -> FileEntry:
        """Stat *path* into an entry.  Raises ``OSError`` if it vanished."""
        st = path.stat()
        return cls(
            path=path,
            size=st.st_size,
            mtime=st.st_mtime,
            is_dir=stat.S_ISDIR(st.st_mode),
            readable=os.access(path, os.R_OK),
        )


def file_handle(name: str | Path) -> FileEntry:
    """Resolve *name* to a :class:`FileEntry`.

    Raises :class:`NotFoundError` if the path does not exist or cannot be read.
    """
    path = Path(str(name).strip()).expanduser().resolve()
    try:
        entry = FileEntry.from_path(path)
    except OSError as exc:
        raise NotFoundError(str(name)) from exc
    if not entry.readable:
        raise NotFoundError(str(name))
    return entry


def scan_directory(root: str | Path, recursive: bool) -> list[FileEntry]:
    """List the files under *root*.

    Children that are readable directories are descended into when
    *recursive* is set; every other child is returned as-is, whatever its
    type.  A *root* that is not a directory yields an empty list.  No filtering
    by file type happens here.

    Raises :class:`NotFoundError` if *root* cannot be read.
    """
    directory = file_handle(root)
    results: list[FileEntry] = []
    if not directory.is_dir:
        logger.debug("Not a directory, nothing to scan: %s", directory.path)
        return results

    seen: set[Path] = set()
    _collect(directory, recursive, seen, results)
    results.sort(key=lambda e: e.path)
    logger.debug("Scanned %d entries under %s", len(results), directory.path)
    return results


def _collect(
    directory: FileEntry,
    recursive: bool,
    seen: set[Path],
    results: list[FileEntry],
) -> None:
    for child in directory.path.iterdir():
        try:
            entry = FileEntry.from_path(child)
        except OSError:
            # Removed (or a dangling link) between listing and stat
            logger.debug("'%s' vanished during scan", child)
            continue

        if entry.is_dir and entry.readable and recursive:
            _collect(entry, recursive, seen, results)
            continue

        if entry.path in seen:
            continue
        seen.add(entry.path)
        results.append(entry)
