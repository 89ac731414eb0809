"""Logging setup, video keys and configurable pauses."""

from __future__ import annotations

import asyncio
import logging
import math
import random
from datetime import datetime, timezone

from bilisync.config_items import Delay, FixedDelay, RandomDelay

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}
_OFF = _LEVELS["off"]

_handler: logging.Handler | None = None
_targets: list[str] = []


def init_logger(log_level: str) -> None:
    """Configure logging from a filter such as ``"warn,bilisync=info"``.

    A bare level sets the default, ``target=level`` sets the level of one
    logger and a bare name enables that logger fully. Directives that cannot
    be understood are ignored. Calling again replaces the earlier setup.
    """
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    for name in _targets:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _targets.clear()

    default_level = _OFF
    for directive in (part.strip() for part in log_level.split(",")):
        if not directive:
            continue
        target, sep, level_name = directive.partition("=")
        if not sep:
            level = _LEVELS.get(directive.lower())
            if level is not None:
                default_level = level
            else:
                logging.getLogger(directive).setLevel(logging.DEBUG)
                _targets.append(directive)
            continue
        level = _LEVELS.get(level_name.strip().lower())
        target = target.strip()
        if level is None or not target:
            continue
        logging.getLogger(target).setLevel(level)
        _targets.append(target)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s.%(msecs)03d %(levelname)5s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(default_level)
    _handler = handler


def id_time_key(bvid: str, time: datetime) -> str:
    """Unique key of a video: its bvid and a UTC timestamp in whole seconds."""
    if time.tzinfo is None:
        time = time.replace(tzinfo=timezone.utc)
    return f"{bvid}-{math.floor(time.timestamp())}"


async def delay(delay: Delay | None) -> None:
    """Sleep for the configured number of milliseconds, if any."""
    if delay is None:
        return
    if isinstance(delay, RandomDelay):
        millis = random.randint(delay.min, delay.max)
    elif isinstance(delay, FixedDelay):
        millis = delay.millis
    else:
        raise TypeError(f"not a delay: {delay!r}")
    await asyncio.sleep(millis / 1000)