import sqlite3

from bilisync.database import database_connection, database_path, migrate_database
from bilisync.migrations import MIGRATIONS, applied_migrations


def test_database_path_is_inside_config_dir(tmp_path):
    assert database_path(tmp_path) == tmp_path / "data.sqlite"


def test_database_path_accepts_strings(tmp_path):
    assert database_path(str(tmp_path)) == database_path(tmp_path)


def test_connection_creates_file_and_directories(tmp_path):
    config_dir = tmp_path / "nested" / "config"
    connection = database_connection(config_dir)
    try:
        connection.execute("CREATE TABLE t (x integer)")
        connection.commit()
    finally:
        connection.close()
    assert database_path(config_dir).is_file()


def test_connection_returns_rows_by_name(tmp_path):
    connection = database_connection(tmp_path)
    try:
        row = connection.execute("SELECT 7 AS value").fetchone()
    finally:
        connection.close()
    assert isinstance(row, sqlite3.Row)
    assert row["value"] == 7


def test_migrate_database_applies_all_migrations(tmp_path):
    applied = migrate_database(tmp_path)
    assert applied == [migration.name for migration in MIGRATIONS]
    connection = database_connection(tmp_path)
    try:
        tables = {
            row["name"]
            for row in connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert applied_migrations(connection) == applied
    finally:
        connection.close()
    assert {"favorite", "video", "page", "collection", "watch_later", "submission"} <= tables


def test_migrate_database_is_idempotent(tmp_path):
    migrate_database(tmp_path)
    assert migrate_database(tmp_path) == []