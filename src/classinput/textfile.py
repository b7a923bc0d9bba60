"""Line-by-line iteration through a text file."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from .errors import NotFoundError, UnsupportedOperationError


class TextFile:
    """Iterable over the lines of a file, without line terminators.

    Each ``iter()`` opens a fresh :class:`LineCursor`.
    """

    def __init__(
        self, path: str | Path, *, encoding: str = "utf-8", errors: str = "replace"
    ) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.errors = errors

    def __iter__(self) -> LineCursor:
        return LineCursor(self.path, encoding=self.encoding, errors=self.errors)


class LineCursor:
    """Reads one line ahead so :meth:`has_next` is free of side effects.

    The file is closed as soon as the look-ahead reaches end of input.  Bytes
    that do not decode are replaced with U+FFFD unless *errors* says otherwise.
    """

    def __init__(
        self, path: str | Path, *, encoding: str = "utf-8", errors: str = "replace"
    ) -> None:
        try:
            self._file: TextIO | None = open(
                path, encoding=encoding, errors=errors, newline=None
            )
        except OSError as exc:
            raise NotFoundError(str(path)) from exc
        self._next_line: str | None = None
        self._next_line = self._read()

    def has_next(self) -> bool:
        return self._next_line is not None

    def __iter__(self) -> LineCursor:
        return self

    def __next__(self) -> str:
        line = self._next_line
        if line is None:
            raise StopIteration
        self._next_line = self._read()
        return line

    def remove(self) -> None:
        raise UnsupportedOperationError("Cannot remove lines from a text file")

    def _read(self) -> str | None:
        if self._file is None:
            return None
        line = self._file.readline()
        if not line:
            self.close()
            return None
        return line.rstrip("\n")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> LineCursor:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
