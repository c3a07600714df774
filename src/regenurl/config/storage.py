"""Catalog database location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "regenurl"
DEFAULT_DB_FILENAME: Final[str] = "catalog.db"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local directory holding the fallback SQLite catalog."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def sqlite_path(self, *, create_dir: bool = True) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if create_dir:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _user_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = optional_env_var("REGENURL_DATA_DIR")
    if override is not None:
        return StorageConfig(data_dir=Path(override))
    return StorageConfig(data_dir=_user_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Use ``DATABASE_URI`` when set, else a SQLite file in the data directory."""

    echo = (optional_env_var("REGENURL_DATABASE_ECHO") or "").lower() in _TRUTHY
    uri = optional_env_var("DATABASE_URI")
    if uri is None:
        path = (storage or get_storage_config()).sqlite_path()
        uri = f"sqlite+pysqlite:///{path}"
    return DatabaseConfig(uri=uri, echo=echo)
