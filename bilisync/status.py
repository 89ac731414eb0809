"""Download status bookkeeping packed into a single 32-bit integer.

Starting from the lowest bits, every three bits hold the state of one task.
A task starts at ``0b000`` and is incremented on each failure up to
``0b100`` (four attempts); on success its bits are set to ``0b111``. Once
every task has either succeeded or exhausted its retries, the highest bit is
set and the item is never processed again.

Task outcomes are given as a sequence in which an exception instance marks a
failure and any other value marks a success, which matches what
``asyncio.gather(..., return_exceptions=True)`` returns.
"""

from __future__ import annotations

from collections.abc import Iterable

_MAX_RETRY = 0b100
_OK = 0b111
_HANDLED = 1 << 31
_MASK = 0xFFFFFFFF


def _is_failure(outcome: object) -> bool:
    return isinstance(outcome, BaseException)


class Status:
    """A generic packed status for any number of tasks."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        self._value = int(value) & _MASK

    @staticmethod
    def handled() -> int:
        """Threshold value: a status at or above it needs no more work."""
        return _HANDLED

    def should_run(self, size: int) -> list[bool]:
        """For each of the first ``size`` tasks, whether it should be attempted."""
        return [self._check_continue(offset) for offset in range(size)]

    def update_status(self, results: Iterable[object]) -> None:
        """Record the outcome of each task and set the handled flag when done."""
        outcomes = list(results)
        for offset, outcome in enumerate(outcomes):
            self._set_result(outcome, offset)
        if not any(self.should_run(len(outcomes))):
            self._value |= _HANDLED

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value:#034b})"

    def _check_continue(self, offset: int) -> bool:
        return self._get_status(offset) < _MAX_RETRY

    def _set_result(self, outcome: object, offset: int) -> None:
        if _is_failure(outcome):
            self._value = (self._value + (1 << (3 * offset))) & _MASK
        elif self._get_status(offset) < _MAX_RETRY:
            # A task that already hit the retry limit is skipped and reports
            # success; its state must stay as it is.
            self._value |= _OK << (3 * offset)

    def _get_status(self, offset: int) -> int:
        return (self._value >> (3 * offset)) & 0b111


class VideoStatus:
    """Status of a video: poster, video nfo, upper face, upper nfo, pages."""

    TASKS = 5

    __slots__ = ("_status",)

    def __init__(self, value: int = 0) -> None:
        self._status = Status(value)

    def should_run(self) -> list[bool]:
        return self._status.should_run(self.TASKS)

    def update_status(self, results: Iterable[object]) -> None:
        outcomes = list(results)
        if len(outcomes) != self.TASKS:
            raise ValueError(f"VideoStatus should have {self.TASKS} status")
        self._status.update_status(outcomes)

    def __int__(self) -> int:
        return int(self._status)

    def __repr__(self) -> str:
        return f"VideoStatus({int(self):#034b})"


class PageStatus:
    """Status of a page: poster, video, nfo, danmaku."""

    TASKS = 4

    __slots__ = ("_status",)

    def __init__(self, value: int = 0) -> None:
        self._status = Status(value)

    def should_run(self) -> list[bool]:
        return self._status.should_run(self.TASKS)

    def update_status(self, results: Iterable[object]) -> None:
        outcomes = list(results)
        if len(outcomes) != self.TASKS:
            raise ValueError(f"PageStatus should have {self.TASKS} status")
        self._status.update_status(outcomes)

    def __int__(self) -> int:
        return int(self._status)

    def __repr__(self) -> str:
        return f"PageStatus({int(self):#034b})"