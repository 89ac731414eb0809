"""Records stored in the database."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

_EPOCH = datetime(1970, 1, 1)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, bytes):
        value = value.decode()
    return datetime.fromisoformat(str(value).replace("T", " "))


def _parse_json(value: Any) -> Any:
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return json.loads(value)
    return value


def _optional_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _known_columns(cls: type, row: Any) -> dict[str, Any]:
    data = dict(row) if not isinstance(row, Mapping) else row
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class Collection:
    id: int
    s_id: int
    m_id: int
    name: str
    type: int
    path: str
    created_at: str


@dataclass
class Favorite:
    id: int
    f_id: int
    name: str
    path: str
    created_at: str


@dataclass
class Submission:
    id: int
    upper_id: int
    upper_name: str
    path: str
    created_at: str


@dataclass
class WatchLater:
    id: int
    path: str
    created_at: str


@dataclass
class Video:
    id: int = 0
    collection_id: int | None = None
    favorite_id: int | None = None
    watch_later_id: int | None = None
    submission_id: int | None = None
    upper_id: int = 0
    upper_name: str = ""
    upper_face: str = ""
    name: str = ""
    path: str = ""
    category: int = 0
    bvid: str = ""
    intro: str = ""
    cover: str = ""
    ctime: datetime = field(default=_EPOCH)
    pubtime: datetime = field(default=_EPOCH)
    favtime: datetime = field(default=_EPOCH)
    download_status: int = 0
    valid: bool = False
    tags: Any = None
    single_page: bool | None = None
    created_at: str = ""

    @classmethod
    def from_row(cls, row: Any) -> Video:
        """Build a video from a database row or mapping of column names."""
        data = dict(_known_columns(cls, row))
        for key in ("ctime", "pubtime", "favtime"):
            if data.get(key) is not None:
                data[key] = _parse_datetime(data[key])
        if "valid" in data:
            data["valid"] = bool(data["valid"])
        if "single_page" in data:
            data["single_page"] = _optional_bool(data["single_page"])
        if data.get("tags") is not None:
            data["tags"] = _parse_json(data["tags"])
        return cls(**data)


@dataclass
class Page:
    id: int = 0
    video_id: int = 0
    cid: int = 0
    pid: int = 0
    name: str = ""
    width: int | None = None
    height: int | None = None
    duration: int = 0
    path: str | None = None
    image: str | None = None
    download_status: int = 0
    created_at: str = ""

    @classmethod
    def from_row(cls, row: Any) -> Page:
        """Build a page from a database row or mapping of column names."""
        return cls(**_known_columns(cls, row))