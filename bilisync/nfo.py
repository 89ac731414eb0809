"""NFO metadata files for media servers such as Kodi, Jellyfin and Emby."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from bilisync.config_items import NFOTimeType
from bilisync.entities import Page, Video

_HEADER = '<?xml version="1.0" encoding="utf-8" standalone="yes"?>\n'
_INDENT = "    "

_TEXT_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        "'": "&apos;",
        '"': "&quot;",
    }
)


class NFOMode(Enum):
    """Kind of NFO document to produce."""

    MOVIE = "movie"
    TVSHOW = "tvshow"
    EPISODE = "episode"
    UPPER = "upper"


def _text(tag: str, value: str, attributes: str = "") -> list[str]:
    return [f"<{tag}{attributes}>{value.translate(_TEXT_ESCAPES)}</{tag}>"]


def _empty(tag: str) -> list[str]:
    return [f"<{tag}/>"]


def _cdata(tag: str, value: str) -> list[str]:
    # "]]>" cannot appear inside a CDATA section, so it is split across two.
    body = value.replace("]]>", "]]]]><![CDATA[>")
    return [f"<{tag}><![CDATA[{body}]]></{tag}>"]


def _element(tag: str, children: list[list[str]]) -> list[str]:
    inner = [_INDENT + line for child in children for line in child]
    return [f"<{tag}>", *inner, f"</{tag}>"]


def _date(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _tags(video: Video) -> list[str]:
    if video.tags is None:
        return []
    if not isinstance(video.tags, list) or not all(isinstance(t, str) for t in video.tags):
        raise ValueError(f"video tags must be a list of strings, got {video.tags!r}")
    return video.tags


@dataclass(frozen=True)
class NFOSerializer:
    """Pairs a video or page with the kind of NFO document to write for it."""

    model: Union[Video, Page]
    mode: NFOMode

    def generate_nfo(self, nfo_time_type: NFOTimeType) -> str:
        """Return the complete NFO document as a string."""
        model, mode = self.model, self.mode
        if isinstance(model, Video) and mode in (NFOMode.MOVIE, NFOMode.TVSHOW):
            body = self._show(model, mode, nfo_time_type)
        elif isinstance(model, Video) and mode is NFOMode.UPPER:
            body = self._upper(model)
        elif isinstance(model, Page) and mode is NFOMode.EPISODE:
            body = self._episode(model)
        else:
            raise ValueError(
                f"cannot build a {mode.name} NFO from {type(model).__name__}"
            )
        return _HEADER + "\n".join(body)

    @staticmethod
    def _show(video: Video, mode: NFOMode, nfo_time_type: NFOTimeType) -> list[str]:
        moment = video.favtime if nfo_time_type is NFOTimeType.FAV_TIME else video.pubtime
        children = [
            _cdata("plot", video.intro),
            _empty("outline"),
            _text("title", video.name),
            _element(
                "actor",
                [_text("name", str(video.upper_id)), _text("role", video.upper_name)],
            ),
            _text("year", f"{moment.year:04d}"),
            *(_text("genre", tag) for tag in _tags(video)),
            _text("uniqueid", video.bvid, ' type="bilibili"'),
            _text("aired", _date(moment)),
        ]
        root = "movie" if mode is NFOMode.MOVIE else "tvshow"
        return _element(root, children)

    @staticmethod
    def _upper(video: Video) -> list[str]:
        added = f"{_date(video.pubtime)} {video.pubtime:%H:%M:%S}"
        return _element(
            "person",
            [
                _empty("plot"),
                _empty("outline"),
                _text("lockdata", "false"),
                _text("dateadded", added),
                _text("title", str(video.upper_id)),
                _text("sorttitle", str(video.upper_id)),
            ],
        )

    @staticmethod
    def _episode(page: Page) -> list[str]:
        return _element(
            "episodedetails",
            [
                _empty("plot"),
                _empty("outline"),
                _text("title", page.name),
                _text("season", "1"),
                _text("episode", str(page.pid)),
            ],
        )