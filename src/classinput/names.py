"""Filename predicates for compiled classes and archives."""

from __future__ import annotations

ARCHIVE_EXTENSIONS: tuple[str, ...] = (".jar", ".zip")
CLASS_EXTENSION = ".class"


def is_archive(name: str | None) -> bool:
    """True if *name* ends with ``.jar`` or ``.zip``."""
    if name is None:
        return False
    return name.endswith(ARCHIVE_EXTENSIONS)


def is_class_file(name: str | None) -> bool:
    """True if *name* ends with ``.class``."""
    if name is None:
        return False
    return name.endswith(CLASS_EXTENSION)


def is_inner_class_file(name: str | None) -> bool:
    """True if *name* has a ``$`` after its first character.

    A leading ``$`` does not mark an inner class.
    """
    if name is None:
        return False
    return name.find("$") > 0


def outer_class_name(name: str) -> str | None:
    """Return the part of *name* before the first ``$``.

    ``None`` when there is no ``$`` or it is the first character.
    """
    index = name.find("$")
    if index <= 0:
        return None
    return name[:index]
