"""Schema migrations for the SQLite database.

Migrations are applied in order, each inside its own transaction, and their
names are recorded in the ``seaql_migrations`` table so that every one runs
exactly once.
"""

from __future__ import annotations

import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

MIGRATION_TABLE = "seaql_migrations"


class MigrationError(RuntimeError):
    """The recorded migrations do not match the known ones."""


@dataclass(frozen=True)
class Migration:
    """One named schema change together with the statements that undo it."""

    name: str
    up_statements: tuple[str, ...]
    down_statements: tuple[str, ...]

    def up(self, connection: sqlite3.Connection) -> None:
        """Apply the schema change."""
        for statement in self.up_statements:
            connection.execute(statement)

    def down(self, connection: sqlite3.Connection) -> None:
        """Revert the schema change."""
        for statement in self.down_statements:
            connection.execute(statement)


_CREATED_AT = '"created_at" timestamp_text DEFAULT CURRENT_TIMESTAMP NOT NULL'
_ID = '"id" integer NOT NULL PRIMARY KEY AUTOINCREMENT'

_CREATE_TABLE = Migration(
    name="m20240322_000001_create_table",
    up_statements=(
        f"""CREATE TABLE IF NOT EXISTS "favorite" (
            {_ID},
            "f_id" integer NOT NULL UNIQUE,
            "name" text NOT NULL,
            "path" text NOT NULL,
            {_CREATED_AT}
        )""",
        f"""CREATE TABLE IF NOT EXISTS "video" (
            {_ID},
            "favorite_id" integer NOT NULL,
            "upper_id" integer NOT NULL,
            "upper_name" text NOT NULL,
            "upper_face" text NOT NULL,
            "name" text NOT NULL,
            "path" text NOT NULL,
            "category" integer NOT NULL,
            "bvid" text NOT NULL,
            "intro" text NOT NULL,
            "cover" text NOT NULL,
            "ctime" timestamp_text NOT NULL,
            "pubtime" timestamp_text NOT NULL,
            "favtime" timestamp_text NOT NULL,
            "download_status" integer NOT NULL,
            "valid" boolean NOT NULL,
            "tags" json_text,
            "single_page" boolean,
            {_CREATED_AT}
        )""",
        f"""CREATE TABLE IF NOT EXISTS "page" (
            {_ID},
            "video_id" integer NOT NULL,
            "cid" integer NOT NULL,
            "pid" integer NOT NULL,
            "name" text NOT NULL,
            "width" integer,
            "height" integer,
            "duration" integer NOT NULL,
            "path" text,
            "image" text,
            "download_status" integer NOT NULL,
            {_CREATED_AT}
        )""",
        'CREATE UNIQUE INDEX "idx_video_favorite_id_bvid" ON "video" ("favorite_id", "bvid")',
        'CREATE UNIQUE INDEX "idx_page_video_id_pid" ON "page" ("video_id", "pid")',
    ),
    down_statements=(
        'DROP TABLE "favorite"',
        'DROP TABLE "video"',
        'DROP TABLE "page"',
    ),
)

_ADD_COLLECTION = Migration(
    name="m20240505_130850_add_collection",
    up_statements=(
        f"""CREATE TABLE IF NOT EXISTS "collection" (
            {_ID},
            "s_id" integer NOT NULL,
            "m_id" integer NOT NULL,
            "name" text NOT NULL,
            "type" integer NOT NULL,
            "path" text NOT NULL,
            {_CREATED_AT}
        )""",
        'CREATE UNIQUE INDEX "idx_collection_sid_mid_type" ON "collection" ("s_id", "m_id", "type")',
        'DROP INDEX "idx_video_favorite_id_bvid"',
        'ALTER TABLE "video" ADD COLUMN "collection_id" integer NULL',
        'ALTER TABLE "video" ADD COLUMN "temp_favorite_id" integer NULL',
        "UPDATE video SET temp_favorite_id = favorite_id",
        'ALTER TABLE "video" DROP COLUMN "favorite_id"',
        'ALTER TABLE "video" RENAME COLUMN "temp_favorite_id" TO "favorite_id"',
        # NULL never equals NULL in a unique index, hence ifnull.
        "CREATE UNIQUE INDEX `idx_video_cid_fid_bvid` ON `video` "
        "(ifnull(`collection_id`, -1), ifnull(`favorite_id`, -1), `bvid`)",
    ),
    down_statements=(
        'DROP INDEX "idx_video_cid_fid_bvid"',
        "DELETE FROM video WHERE favorite_id IS NULL",
        'ALTER TABLE "video" ADD COLUMN "temp_favorite_id" integer NOT NULL DEFAULT 0',
        "UPDATE video SET temp_favorite_id = favorite_id",
        'ALTER TABLE "video" DROP COLUMN "favorite_id"',
        'ALTER TABLE "video" RENAME COLUMN "temp_favorite_id" TO "favorite_id"',
        'ALTER TABLE "video" DROP COLUMN "collection_id"',
        'CREATE UNIQUE INDEX "idx_video_favorite_id_bvid" ON "video" ("favorite_id", "bvid")',
        'DROP TABLE "collection"',
    ),
)

_WATCH_LATER = Migration(
    name="m20240709_130914_watch_later",
    up_statements=(
        f"""CREATE TABLE IF NOT EXISTS "watch_later" (
            {_ID},
            "path" text NOT NULL,
            {_CREATED_AT}
        )""",
        'DROP INDEX "idx_video_cid_fid_bvid"',
        'ALTER TABLE "video" ADD COLUMN "watch_later_id" integer NULL',
        "CREATE UNIQUE INDEX `idx_video_unique` ON `video` "
        "(ifnull(`collection_id`, -1), ifnull(`favorite_id`, -1), "
        "ifnull(`watch_later_id`, -1), `bvid`)",
    ),
    down_statements=(
        'DROP INDEX "idx_video_unique"',
        "DELETE FROM video WHERE watch_later_id IS NOT NULL",
        'ALTER TABLE "video" DROP COLUMN "watch_later_id"',
        "CREATE UNIQUE INDEX `idx_video_cid_fid_bvid` ON `video` "
        "(ifnull(`collection_id`, -1), ifnull(`favorite_id`, -1), `bvid`)",
        'DROP TABLE "watch_later"',
    ),
)

_SUBMISSION = Migration(
    name="m20240724_161008_submission",
    up_statements=(
        f"""CREATE TABLE IF NOT EXISTS "submission" (
            {_ID},
            "upper_id" integer NOT NULL UNIQUE,
            "upper_name" text NOT NULL,
            "path" text NOT NULL,
            {_CREATED_AT}
        )""",
        'DROP INDEX "idx_video_unique"',
        'ALTER TABLE "video" ADD COLUMN "submission_id" integer NULL',
        "CREATE UNIQUE INDEX `idx_video_unique` ON `video` "
        "(ifnull(`collection_id`, -1), ifnull(`favorite_id`, -1), "
        "ifnull(`watch_later_id`, -1), ifnull(`submission_id`, -1), `bvid`)",
    ),
    down_statements=(
        'DROP INDEX "idx_video_unique"',
        "DELETE FROM video WHERE submission_id IS NOT NULL",
        'ALTER TABLE "video" DROP COLUMN "submission_id"',
        "CREATE UNIQUE INDEX `idx_video_unique` ON `video` "
        "(ifnull(`collection_id`, -1), ifnull(`favorite_id`, -1), "
        "ifnull(`watch_later_id`, -1), `bvid`)",
        'DROP TABLE "submission"',
    ),
)

MIGRATIONS: tuple[Migration, ...] = (_CREATE_TABLE, _ADD_COLLECTION, _WATCH_LATER, _SUBMISSION)


@contextmanager
def _transaction(connection: sqlite3.Connection) -> Iterator[None]:
    if connection.in_transaction:
        connection.commit()
    connection.execute("BEGIN")
    try:
        yield
    except BaseException:
        connection.rollback()
        raise
    else:
        connection.commit()


def _has_migration_table(connection: sqlite3.Connection) -> bool:
    row = connection.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
        (MIGRATION_TABLE,),
    ).fetchone()
    return row is not None


def _ensure_migration_table(connection: sqlite3.Connection) -> None:
    connection.execute(
        f'CREATE TABLE IF NOT EXISTS "{MIGRATION_TABLE}" '
        '("version" text NOT NULL PRIMARY KEY, "applied_at" integer NOT NULL)'
    )
    connection.commit()


def applied_migrations(connection: sqlite3.Connection) -> list[str]:
    """Names of the migrations already applied, oldest first."""
    if not _has_migration_table(connection):
        return []
    rows = connection.execute(
        f'SELECT "version" FROM "{MIGRATION_TABLE}" ORDER BY "version"'
    ).fetchall()
    applied = [row[0] for row in rows]
    known = {migration.name for migration in MIGRATIONS}
    missing = [name for name in applied if name not in known]
    if missing:
        raise MigrationError(f"Migration file of version '{missing[0]}' is missing")
    return applied


def apply_migrations(connection: sqlite3.Connection) -> list[str]:
    """Apply every pending migration and return the names applied."""
    _ensure_migration_table(connection)
    done = set(applied_migrations(connection))
    applied: list[str] = []
    for migration in MIGRATIONS:
        if migration.name in done:
            continue
        with _transaction(connection):
            migration.up(connection)
            connection.execute(
                f'INSERT INTO "{MIGRATION_TABLE}" ("version", "applied_at") VALUES (?, ?)',
                (migration.name, int(time.time())),
            )
        applied.append(migration.name)
    return applied


def rollback_migrations(connection: sqlite3.Connection, steps: int | None = None) -> list[str]:
    """Revert the newest ``steps`` migrations (all when ``None``).

    Returns the names reverted, newest first.
    """
    if steps is not None and steps < 0:
        raise ValueError(f"steps must not be negative, got {steps}")
    done = set(applied_migrations(connection))
    pending = [migration for migration in reversed(MIGRATIONS) if migration.name in done]
    if steps is not None:
        pending = pending[:steps]
    reverted: list[str] = []
    for migration in pending:
        with _transaction(connection):
            migration.down(connection)
            connection.execute(
                f'DELETE FROM "{MIGRATION_TABLE}" WHERE "version" = ?',
                (migration.name,),
            )
        reverted.append(migration.name)
    return reverted