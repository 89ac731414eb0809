"""Building blocks of the configuration file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

_U64_MAX = 2**64 - 1


def _unsigned(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _require(data: Any, key: str, owner: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{owner} must be a table, got {data!r}")
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}` in {owner}") from None


@dataclass(frozen=True)
class FixedDelay:
    """Wait a fixed number of milliseconds."""

    millis: int


@dataclass(frozen=True)
class RandomDelay:
    """Wait a random number of milliseconds between ``min`` and ``max`` inclusive."""

    min: int
    max: int


Delay = Union[FixedDelay, RandomDelay]


def parse_delay(value: Any) -> Delay:
    """Parse a delay given either as ``{"min": .., "max": ..}`` or as an integer."""
    if isinstance(value, Mapping):
        if "min" not in value or "max" not in value:
            raise ValueError("data did not match any variant of Delay")
        return RandomDelay(_unsigned(value["min"], "min"), _unsigned(value["max"], "max"))
    try:
        return FixedDelay(_unsigned(value, "delay"))
    except ValueError:
        raise ValueError("data did not match any variant of Delay") from None


def delay_to_value(delay: Delay) -> Any:
    """Turn a delay back into its configuration representation."""
    if isinstance(delay, RandomDelay):
        return {"min": delay.min, "max": delay.max}
    if isinstance(delay, FixedDelay):
        return delay.millis
    raise TypeError(f"not a delay: {delay!r}")


@dataclass
class WatchLaterConfig:
    """Settings for the watch-later list."""

    enabled: bool = False
    path: Path = field(default_factory=Path)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WatchLaterConfig:
        enabled = _require(data, "enabled", "watch_later")
        path = _require(data, "path", "watch_later")
        if not isinstance(enabled, bool):
            raise ValueError(f"watch_later.enabled must be a boolean, got {enabled!r}")
        if not isinstance(path, str):
            raise ValueError(f"watch_later.path must be a string, got {path!r}")
        return cls(enabled=enabled, path=Path(path))

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "path": str(self.path)}


_DELAY_KEYS = ("refresh_video_list", "fetch_video_detail", "download_video", "download_page")


@dataclass
class DelayConfig:
    """Optional pauses taken after each kind of operation."""

    refresh_video_list: Delay | None = None
    fetch_video_detail: Delay | None = None
    download_video: Delay | None = None
    download_page: Delay | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DelayConfig:
        if not isinstance(data, Mapping):
            raise ValueError(f"delay must be a table, got {data!r}")
        return cls(
            **{
                key: None if data.get(key) is None else parse_delay(data[key])
                for key in _DELAY_KEYS
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            key: delay_to_value(value)
            for key, value in self._items()
            if value is not None
        }

    def is_valid(self) -> bool:
        """False if any random delay has a minimum not below its maximum."""
        return all(
            value.min < value.max
            for _, value in self._items()
            if isinstance(value, RandomDelay)
        )

    def _items(self) -> list[tuple[str, Delay | None]]:
        return [(key, getattr(self, key)) for key in _DELAY_KEYS]


class NFOTimeType(Enum):
    """Which timestamp NFO files use; favourite time is the default."""

    FAV_TIME = "favtime"
    PUB_TIME = "pubtime"


@dataclass
class ConcurrentLimit:
    """Limits on concurrent downloads and the pauses between them."""

    video: int = 3
    page: int = 2
    delay: DelayConfig = field(default_factory=DelayConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConcurrentLimit:
        video = _unsigned(_require(data, "video", "concurrent_limit"), "video")
        page = _unsigned(_require(data, "page", "concurrent_limit"), "page")
        delay = DelayConfig.from_dict(_require(data, "delay", "concurrent_limit"))
        return cls(video=video, page=page, delay=delay)

    def to_dict(self) -> dict[str, Any]:
        return {"video": self.video, "page": self.page, "delay": self.delay.to_dict()}