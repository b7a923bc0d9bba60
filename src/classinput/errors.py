"""Error types and skip diagnostics for input data sets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class InputDataError(Exception):
    """Base class for all classinput errors."""


class NotFoundError(InputDataError, FileNotFoundError):
    """A path does not resolve to a readable file or directory."""


class InvalidStateError(InputDataError, RuntimeError):
    """An operation was attempted in a state that does not allow it."""


class EntryOpenError(InputDataError):
    """An entry could not be opened and was skipped.

    Never raised out of an iteration; it is only carried by a
    :class:`SkipEvent`.
    """


class UnsupportedOperationError(InputDataError, TypeError):
    """Iteration sequences are read-only views."""


@dataclass(frozen=True)
class SkipEvent:
    """An entry that produced no stream.

    ``source`` is the top-level path; ``entry`` is the name inside an archive,
    or ``None`` when the top-level file itself failed.
    """

    source: Path
    entry: str | None
    error: EntryOpenError

    def __str__(self) -> str:
        where = f"{self.source}!{self.entry}" if self.entry else str(self.source)
        return f"{where}: {self.error}"
