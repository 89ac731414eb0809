"""Write download progress of videos and pages back to the database."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable
from dataclasses import fields
from datetime import datetime
from typing import Any

from bilisync.entities import Page, Video


def _format_datetime(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}"
    return text


def _sql_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == "tags":
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, bool):
        return int(value)
    return value


def _columns(record: Video | Page) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for item in fields(record):
        value = getattr(record, item.name)
        # Unset identifiers and creation times are left to the database.
        if item.name == "id" and not value:
            continue
        if item.name == "created_at" and not value:
            continue
        values[item.name] = _sql_value(item.name, value)
    return values


def _upsert(
    connection: sqlite3.Connection,
    table: str,
    records: Iterable[Video | Page],
    update_columns: tuple[str, ...],
) -> None:
    rows = [_columns(record) for record in records]
    if not rows:
        return
    updates = ", ".join(f'"{column}" = excluded."{column}"' for column in update_columns)
    with connection:
        for row in rows:
            names = ", ".join(f'"{name}"' for name in row)
            placeholders = ", ".join("?" for _ in row)
            connection.execute(
                f'INSERT INTO "{table}" ({names}) VALUES ({placeholders}) '
                f'ON CONFLICT("id") DO UPDATE SET {updates}',
                tuple(row.values()),
            )


def update_videos_status(connection: sqlite3.Connection, videos: Iterable[Video]) -> None:
    """Store the download status of each video, inserting unknown ones."""
    _upsert(connection, "video", videos, ("download_status",))


def update_pages_status(connection: sqlite3.Connection, pages: Iterable[Page]) -> None:
    """Store the download status and file path of each page, inserting unknown ones."""
    _upsert(connection, "page", pages, ("download_status", "path"))