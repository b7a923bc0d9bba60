"""Shared fixtures: building class files and archives on the fly."""

from __future__ import annotations

import os
import time
import zipfile
from pathlib import Path

import pytest

CLASS_MAGIC = b"\xca\xfe\xba\xbe"
DEFAULT_DATE = (2020, 1, 1, 12, 0, 0)


def zip_time(date_time: tuple[int, int, int, int, int, int]) -> float:
    """Epoch seconds for a zip entry timestamp (local time)."""
    return time.mktime(date_time + (0, 0, -1))


def write_class(path: Path, body: bytes = b"", mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(CLASS_MAGIC + body)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def write_archive(path: Path, entries: dict[str, bytes | tuple[bytes, tuple]]) -> Path:
    """Write a zip/jar whose entries keep the given order and dates."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, value in entries.items():
            data, date_time = value if isinstance(value, tuple) else (value, DEFAULT_DATE)
            zf.writestr(zipfile.ZipInfo(name, date_time=date_time), data)
    return path


@pytest.fixture
def make_class():
    return write_class


@pytest.fixture
def make_archive():
    return write_archive
