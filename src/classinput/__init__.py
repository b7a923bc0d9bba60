"""classinput — stream compiled classes out of files, directories and archives."""

from .archive import ArchiveEntryIterator, open_archive
from .dataset import CursorState, DataSetCursor, InputDataSet
from .errors import (
    EntryOpenError,
    InputDataError,
    InvalidStateError,
    NotFoundError,
    SkipEvent,
    UnsupportedOperationError,
)
from .names import is_archive, is_class_file, is_inner_class_file, outer_class_name
from .scanner import FileEntry, file_handle, scan_directory
from .textfile import LineCursor, TextFile

__all__ = [
    "ArchiveEntryIterator",
    "CursorState",
    "DataSetCursor",
    "EntryOpenError",
    "FileEntry",
    "InputDataError",
    "InputDataSet",
    "InvalidStateError",
    "LineCursor",
    "NotFoundError",
    "SkipEvent",
    "TextFile",
    "UnsupportedOperationError",
    "file_handle",
    "is_archive",
    "is_class_file",
    "is_inner_class_file",
    "open_archive",
    "outer_class_name",
    "scan_directory",
]
