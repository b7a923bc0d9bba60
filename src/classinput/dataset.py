"""Input data set: class files and archives exposed as one stream sequence."""

from __future__ import annotations

import enum
import logging
import zipfile
from pathlib import Path
from typing import IO, NamedTuple

from .archive import ArchiveEntryIterator, SkipCallback, open_archive, report_skip
from .errors import InvalidStateError, UnsupportedOperationError
from .names import is_archive, is_class_file
from .scanner import FileEntry, file_handle, scan_directory

logger = logging.getLogger(__name__)


class InputDataSet:
    """A set of ``.class`` files and ``.jar``/``.zip`` archives.

    Only files whose names classify as a class file or an archive are kept;
    anything else handed to :meth:`add` is ignored.  Entries are unique by
    path and kept in insertion order.

    Iterating the set yields a binary stream per class file, expanding each
    archive into its class entries.  ``last_modified`` tracks the newest
    modification time seen while iterating (epoch seconds, ``-1`` until
    something has been read); read it after iteration for a stable value.

    A cursor closes each stream when the next one is pulled, so consume a
    stream inside the loop.  Every stream but the last one returned by
    ``list(data_set)`` is already closed.

    Parameters
    ----------
    on_skip:
        Called with a :class:`~classinput.errors.SkipEvent` whenever a file or
        archive entry cannot be opened during iteration.
    """

    def __init__(self, *, on_skip: SkipCallback | None = None) -> None:
        self._files: dict[Path, FileEntry] = {}
        self._size_in_bytes = 0
        self._on_skip = on_skip
        self.last_modified: float = -1.0

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        recursive: bool = False,
        *,
        on_skip: SkipCallback | None = None,
    ) -> InputDataSet:
        """Build a data set from a directory or a single file."""
        data_set = cls(on_skip=on_skip)
        if file_handle(path).is_dir:
            data_set.add_directory(path, recursive)
        else:
            data_set.add_path(path)
        return data_set

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add(self, entry: FileEntry | None) -> bool:
        """Add *entry* if it is a class file or archive.

        Returns ``True`` only when the entry was newly accepted.
        """
        if entry is None:
            return False
        if not (is_class_file(entry.name) or is_archive(entry.name)):
            return False
        if entry.path in self._files:
            return False

        self._files[entry.path] = entry
        self._size_in_bytes += entry.size
        logger.debug("Added %s (%d bytes)", entry.path, entry.size)
        return True

    def add_path(self, name: str | Path) -> bool:
        """Resolve *name* and :meth:`add` it.  Raises ``NotFoundError``."""
        return self.add(file_handle(name))

    def add_directory(self, name: str | Path, recursive: bool) -> int:
        """Add every file under *name*.  Returns the number newly accepted."""
        added = sum(1 for entry in scan_directory(name, recursive) if self.add(entry))
        logger.debug("Accepted %d files from %s", added, name)
        return added

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def size(self) -> int:
        return len(self._files)

    def size_in_bytes(self) -> int:
        return self._size_in_bytes

    @property
    def files(self) -> list[FileEntry]:
        return list(self._files.values())

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, path: object) -> bool:
        return path in self._files

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iterate(self) -> DataSetCursor:
        """Start a new single-pass cursor.

        Raises :class:`InvalidStateError` if the set is empty; check
        :meth:`size` first or use :meth:`try_iterate`.
        """
        return DataSetCursor(self)

    def try_iterate(self) -> DataSetCursor | None:
        """Like :meth:`iterate` but returns ``None`` for an empty set."""
        if not self._files:
            return None
        return DataSetCursor(self)

    def __iter__(self) -> DataSetCursor:
        return self.iterate()

    def _observe(self, mtime: float) -> None:
        if mtime > self.last_modified:
            self.last_modified = mtime


class CursorState(enum.Enum):
    TOP_LEVEL = "top-level"
    INSIDE_ARCHIVE = "inside-archive"
    EXHAUSTED = "exhausted"


class _Opened(NamedTuple):
    stream: IO[bytes]
    mtime: float
    source: Path


class DataSetCursor:
    """Single-pass cursor over the class streams of an :class:`InputDataSet`.

    The cursor looks one position ahead (the next plain class file, or an
    archive with class entries left) without opening any stream, so
    :meth:`has_next` has no side effects.  Streams are opened by ``next()``.
    Files and archive entries that fail to open are reported through the data
    set's ``on_skip`` callback and ``next()`` moves on to the following one;
    it only raises :class:`StopIteration` after :meth:`has_next` said ``True``
    when every remaining entry failed to open.

    The cursor holds at most one open stream: the one it handed out last.
    That stream stays valid until the following ``next()`` call (or
    :meth:`close`), at which point the cursor closes it, so read each stream
    before pulling the next one.  At most one archive is open at a time.
    """

    def __init__(self, data_set: InputDataSet) -> None:
        if not data_set.size():
            raise InvalidStateError("Cannot iterate an empty input data set")

        self._data_set = data_set
        self._files = iter(data_set.files)
        self._state = CursorState.TOP_LEVEL
        self._archive: ArchiveEntryIterator | None = None
        self._next_file: FileEntry | None = None
        self._active: IO[bytes] | None = None
        self.source: Path | None = None
        self._position()

    @property
    def state(self) -> CursorState:
        return self._state

    def has_next(self) -> bool:
        if self._next_file is not None:
            return True
        return self._archive is not None and self._archive.has_next()

    def __iter__(self) -> DataSetCursor:
        return self

    def __next__(self) -> IO[bytes]:
        self._release_active()

        while self.has_next():
            opened = self._open_current()
            self._position()
            if opened is None:
                continue

            self._active = opened.stream
            self.source = opened.source
            self._data_set._observe(opened.mtime)
            return opened.stream

        raise StopIteration

    def remove(self) -> None:
        raise UnsupportedOperationError("Cannot remove files from an input data set")

    def _open_current(self) -> _Opened | None:
        """Open the stream at the current position, or report why it failed."""
        entry = self._next_file
        if entry is not None:
            self._next_file = None
            try:
                stream = open(entry.path, "rb")
            except OSError as exc:
                report_skip(self._data_set._on_skip, entry.path, None, exc)
                return None
            return _Opened(stream, entry.mtime, entry.path)

        archive = self._archive
        if archive is None:
            return None
        stream = next(archive, None)
        if stream is None:
            return None
        return _Opened(stream, archive.last_modified, archive.source)

    def _position(self) -> None:
        """Move to the next place a stream can come from.

        Archives are opened here; plain files and archive entries are not.
        """
        on_skip = self._data_set._on_skip

        while True:
            if self._state is CursorState.INSIDE_ARCHIVE and self._archive is not None:
                if self._archive.has_next():
                    return

                # Exhausted archives have already closed themselves
                self._data_set._observe(self._archive.last_modified)
                self._archive = None
                self._state = CursorState.TOP_LEVEL

            if self._state is CursorState.EXHAUSTED:
                return

            entry = next(self._files, None)
            if entry is None:
                self._state = CursorState.EXHAUSTED
                return

            if is_archive(entry.name):
                try:
                    self._archive = ArchiveEntryIterator(
                        open_archive(entry.path), on_skip=on_skip
                    )
                except (OSError, zipfile.BadZipFile) as exc:
                    report_skip(on_skip, entry.path, None, exc)
                    continue
                self._state = CursorState.INSIDE_ARCHIVE
                continue

            self._next_file = entry
            return

    def _release_active(self) -> None:
        if self._active is not None:
            self._active.close()
            self._active = None

    def close(self) -> None:
        """Release the stream and archive held by the cursor."""
        self._release_active()
        self._next_file = None
        if self._archive is not None:
            self._archive.close()
            self._archive = None
        self._state = CursorState.EXHAUSTED

    def __enter__(self) -> DataSetCursor:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
