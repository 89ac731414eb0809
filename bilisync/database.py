"""Location of and connections to the SQLite database."""

from __future__ import annotations

import os
import sqlite3
import sys
from pathlib import Path

from bilisync.migrations import apply_migrations

_APP_DIR = "bili-sync"
_DATABASE_FILE = "data.sqlite"
_ACQUIRE_TIMEOUT = 90.0


def _default_config_dir() -> Path:
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
    return root / _APP_DIR


def database_path(config_dir: str | os.PathLike[str] | None = None) -> Path:
    """Path of the database file inside ``config_dir``."""
    directory = Path(config_dir) if config_dir is not None else _default_config_dir()
    return directory / _DATABASE_FILE


def database_connection(config_dir: str | os.PathLike[str] | None = None) -> sqlite3.Connection:
    """Open the database, creating the file when it does not exist yet.

    Rows come back as :class:`sqlite3.Row`, so they can be handed straight to
    the ``from_row`` constructors of the entities.
    """
    path = database_path(config_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(path, timeout=_ACQUIRE_TIMEOUT)
    connection.row_factory = sqlite3.Row
    return connection


def migrate_database(config_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Bring the schema up to date and return the migrations applied."""
    connection = database_connection(config_dir)
    try:
        return apply_migrations(connection)
    finally:
        connection.close()