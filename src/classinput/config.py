"""Properties-file configuration."""

from __future__ import annotations

import itertools
import logging
import os
from configparser import ConfigParser
from pathlib import Path

from .errors import NotFoundError
from .textfile import TextFile

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CLASSINPUT_CONFIG"
DEFAULT_CONFIG_FILE = "classinput.properties"

# Properties files have no sections; everything is read into this one
SECTION = "classinput"

BUILDS_DIRECTORY = "buildsDirectory"
RECURSIVE = "recursive"
LOG_LEVEL = "logLevel"

DEFAULTS: dict[str, str] = {
    BUILDS_DIRECTORY: ".",
    RECURSIVE: "true",
    LOG_LEVEL: "WARNING",
}


def _new_parser() -> ConfigParser:
    parser = ConfigParser(
        allow_no_value=True,
        strict=False,
        comment_prefixes=("#", "!"),
        interpolation=None,
    )
    # Property keys are case sensitive
    parser.optionxform = str
    parser.read_dict({parser.default_section: DEFAULTS})
    parser.add_section(SECTION)
    return parser


class Config:
    """Configuration for classinput, falling back to :data:`DEFAULTS`."""

    def __init__(
        self,
        properties: dict[str, str] | None = None,
        source: Path | None = None,
        *,
        parser: ConfigParser | None = None,
    ) -> None:
        self._config = parser or _new_parser()
        if properties:
            self._config.read_dict({SECTION: properties})
        self.source = source

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Read a properties file.  Raises ``NotFoundError`` if unreadable."""
        parser = _new_parser()
        lines = itertools.chain([f"[{SECTION}]"], TextFile(path))
        parser.read_file(lines, source=str(path))
        return cls(source=Path(path), parser=parser)

    def get_str(self, key: str, fallback: str | None = None) -> str | None:
        return self._config.get(SECTION, key, fallback=fallback)

    def get_int(self, key: str, fallback: int | None = None) -> int | None:
        return self._config.getint(SECTION, key, fallback=fallback)

    def get_float(self, key: str, fallback: float | None = None) -> float | None:
        return self._config.getfloat(SECTION, key, fallback=fallback)

    def get_bool(self, key: str, fallback: bool | None = None) -> bool | None:
        return self._config.getboolean(SECTION, key, fallback=fallback)

    @property
    def builds_directory(self) -> str:
        return self._config.get(SECTION, BUILDS_DIRECTORY, fallback=None) or "."

    @property
    def recursive(self) -> bool:
        return self._config.getboolean(SECTION, RECURSIVE, fallback=True)

    @property
    def log_level(self) -> str:
        return (self._config.get(SECTION, LOG_LEVEL, fallback=None) or "WARNING").upper()


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from *path*, ``$CLASSINPUT_CONFIG`` or the default file.

    A missing file gives an all-defaults configuration.
    """
    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)
    try:
        config = Config.from_file(config_path)
    except NotFoundError:
        logger.debug("No config at %s, using defaults", config_path)
        return Config()
    logger.debug("Loaded config from %s", config_path)
    return config
