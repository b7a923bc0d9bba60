"""Lazy iteration over the class entries of a zip/jar archive."""

from __future__ import annotations

import logging
import time
import zipfile
from pathlib import Path
from typing import IO, Callable

from .errors import EntryOpenError, SkipEvent, UnsupportedOperationError
from .names import is_class_file
from .scanner import file_handle

logger = logging.getLogger(__name__)

SkipCallback = Callable[[SkipEvent], None]

# What ZipFile.open() raises for a damaged, encrypted or oddly compressed entry
ENTRY_OPEN_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    EOFError,
    zipfile.BadZipFile,
    NotImplementedError,
    RuntimeError,
)


def open_archive(path: str | Path) -> zipfile.ZipFile:
    """Open the archive at *path* for reading.

    Raises :class:`~classinput.errors.NotFoundError` if the path is unreadable
    and :class:`zipfile.BadZipFile` if it is not a zip container.
    """
    entry = file_handle(path)
    archive = zipfile.ZipFile(entry.path)
    logger.debug("Opened archive %s (%d entries)", entry.path, len(archive.infolist()))
    return archive


def entry_mtime(info: zipfile.ZipInfo) -> float:
    """Modification time of an archive entry in epoch seconds, or -1."""
    try:
        return time.mktime(info.date_time + (0, 0, -1))
    except (OverflowError, ValueError):
        return -1.0


def report_skip(
    on_skip: SkipCallback | None,
    source: Path,
    entry: str | None,
    exc: BaseException,
) -> SkipEvent:
    """Log a skipped entry and hand it to *on_skip*."""
    error = EntryOpenError(f"{type(exc).__name__}: {exc}")
    error.__cause__ = exc
    event = SkipEvent(source=source, entry=entry, error=error)
    logger.warning("Skipping %s", event)
    if on_skip is not None:
        on_skip(event)
    return event


class ArchiveEntryIterator:
    """Yield a readable stream for each ``.class`` entry of an archive.

    Entries are visited in the archive's own order.  The iterator looks one
    class entry ahead (without opening it), so :meth:`has_next` never
    consumes anything.  Streams are opened only by ``next()``.
    ``last_modified`` is the newest modification time of every entry visited
    so far, class or not.

    An entry that fails to open is reported and passed over; if every
    remaining entry fails, ``next()`` raises :class:`StopIteration` even
    though :meth:`has_next` was true.

    The archive is closed as soon as the look-ahead runs off the end.  Streams
    already handed out remain readable after that.

    Parameters
    ----------
    archive:
        An open :class:`zipfile.ZipFile`.  The iterator takes ownership.
    on_skip:
        Called with a :class:`SkipEvent` for each entry that failed to open.
    """

    def __init__(
        self,
        archive: zipfile.ZipFile,
        *,
        on_skip: SkipCallback | None = None,
    ) -> None:
        self._archive: zipfile.ZipFile | None = archive
        self._source = Path(archive.filename or "<archive>")
        self._entries = iter(archive.infolist())
        self._on_skip = on_skip
        self.last_modified: float = -1.0
        self._pending: zipfile.ZipInfo | None = self._find_next()

    @property
    def source(self) -> Path:
        return self._source

    @property
    def closed(self) -> bool:
        return self._archive is None

    def has_next(self) -> bool:
        return self._pending is not None

    def __iter__(self) -> ArchiveEntryIterator:
        return self

    def __next__(self) -> IO[bytes]:
        while self._pending is not None and self._archive is not None:
            info = self._pending
            try:
                stream = self._archive.open(info)
            except ENTRY_OPEN_ERRORS as exc:
                report_skip(self._on_skip, self._source, info.filename, exc)
                stream = None
            # Opened streams hold their own reference; the archive may close now
            self._pending = self._find_next()
            if stream is not None:
                return stream
        raise StopIteration

    def remove(self) -> None:
        raise UnsupportedOperationError("Cannot remove elements from an archive")

    def _find_next(self) -> zipfile.ZipInfo | None:
        if self._archive is None:
            return None

        for info in self._entries:
            mtime = entry_mtime(info)
            if mtime > -1 and mtime > self.last_modified:
                self.last_modified = mtime

            if is_class_file(info.filename):
                return info

        self.close()
        return None

    def close(self) -> None:
        """Release the archive."""
        self._pending = None
        if self._archive is not None:
            self._archive.close()
            self._archive = None
            logger.debug("Closed archive %s", self._source)

    def __enter__(self) -> ArchiveEntryIterator:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
