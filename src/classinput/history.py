"""Version history listing: which builds make up a system's history.

A history file is plain text next to the builds it lists::

    # comment
    @ https://project.example.org
    %name = Example Project
    >includePackage: org.example
    >excludePackage: org.example.test
    1, 1.0.0, example-1.0.0.jar
    2, 1.1.0, example-1.1.0/

Version paths are relative to the history file's directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .archive import SkipCallback
from .dataset import InputDataSet
from .textfile import TextFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionInput:
    """One build in the history."""

    rsn: int  # release sequence number
    version_id: str
    path: Path

    def data_set(self, *, on_skip: SkipCallback | None = None) -> InputDataSet:
        """Wrap this build in an :class:`InputDataSet`.

        Directories are taken without recursion, as builds are laid out flat.
        Package filters are not applied here: a class's package is only known
        once its bytecode is parsed, so the history's ``include_packages`` and
        ``exclude_packages`` are passed through for the consumer to apply.
        """
        return InputDataSet.from_path(self.path, recursive=False, on_skip=on_skip)


@dataclass
class History:
    """A parsed history file.

    ``include_packages`` and ``exclude_packages`` are collected for the
    consumer of the class streams; nothing in this package filters on them.
    """

    source: Path
    versions: list[VersionInput] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    include_packages: set[str] = field(default_factory=set)
    exclude_packages: set[str] = field(default_factory=set)

    @property
    def short_name(self) -> str:
        """First word of the ``name`` metadata, or the file's stem."""
        name = self.metadata.get("name", "").strip()
        if not name:
            return self.source.stem
        return name.split(" ")[0].strip()


def parse_history_file(path: str | Path) -> History:
    """Parse a history file into a :class:`History`.

    Raises :class:`~classinput.errors.NotFoundError` if the file is unreadable.
    """
    path = Path(path)
    history = History(source=path)
    base = path.parent

    for lineno, raw in enumerate(TextFile(path), start=1):
        line = raw.strip()
        if not line or line.startswith(("#", "@")):
            continue

        if line.startswith("%"):
            key, sep, value = line[1:].partition("=")
            if not sep:
                logger.warning("%s:%d: metadata without '=': %r", path, lineno, raw)
                continue
            history.metadata[key.strip()] = value.strip()
            continue

        if line.startswith(">"):
            key, _, value = line[1:].partition(":")
            directive = key.strip().lower()
            if directive == "includepackage":
                history.include_packages.add(value.strip())
            elif directive == "excludepackage":
                history.exclude_packages.add(value.strip())
            else:
                logger.warning("%s:%d: unknown directive %r", path, lineno, key.strip())
            continue

        cols = [c.strip() for c in line.split(",")]
        if len(cols) != 3:
            logger.warning("%s:%d: expected 'rsn, id, path', got %r", path, lineno, raw)
            continue
        try:
            rsn = int(cols[0])
        except ValueError:
            logger.warning("%s:%d: bad release sequence number %r", path, lineno, cols[0])
            continue

        history.versions.append(VersionInput(rsn=rsn, version_id=cols[1], path=base / cols[2]))

    history.versions.sort(key=lambda v: v.rsn)
    logger.debug("Parsed %d versions from %s", len(history.versions), path)
    return history
