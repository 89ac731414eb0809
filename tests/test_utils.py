import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from bilisync.config_items import FixedDelay, RandomDelay
from bilisync.utils import delay, id_time_key, init_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    for name in ("bilisync", "bilisync.workflow", "somename"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_init_logger_target_levels(restore_logging):
    result = init_logger("None,bilisync=info,bilisync.workflow=debug")
    assert result is None
    assert logging.getLogger("bilisync").level == logging.INFO
    assert logging.getLogger("bilisync.workflow").level == logging.DEBUG
    assert restore_logging.level > logging.CRITICAL


def test_init_logger_default_level(restore_logging):
    result = init_logger("warn")
    assert result is None
    assert restore_logging.level == logging.WARNING


def test_init_logger_ignores_bad_directives(restore_logging):
    result = init_logger("error,bilisync=loud,=info")
    assert result is None
    assert restore_logging.level == logging.ERROR
    assert logging.getLogger("bilisync").level == logging.NOTSET


def test_init_logger_bare_name_enables_logger(restore_logging):
    result = init_logger("somename")
    assert result is None
    assert logging.getLogger("somename").isEnabledFor(logging.DEBUG)


def test_init_logger_replaces_previous_setup(restore_logging):
    before = len(restore_logging.handlers)
    first = init_logger("bilisync=info")
    second = init_logger("info")
    assert first is None and second is None
    assert len(restore_logging.handlers) == before + 1
    assert logging.getLogger("bilisync").level == logging.NOTSET


def test_id_time_key_epoch():
    assert id_time_key("BV1", datetime(1970, 1, 1, tzinfo=timezone.utc)) == "BV1-0"


def test_id_time_key_naive_is_utc():
    aware = datetime(2024, 7, 24, 16, 10, 8, tzinfo=timezone.utc)
    assert id_time_key("BVx", aware) == id_time_key("BVx", aware.replace(tzinfo=None))


def test_id_time_key_same_instant_other_zone():
    aware = datetime(2024, 3, 22, 12, 0, tzinfo=timezone.utc)
    shifted = aware.astimezone(timezone(timedelta(hours=8)))
    assert id_time_key("BVy", aware) == id_time_key("BVy", shifted)


def test_id_time_key_drops_fraction():
    whole = datetime(2024, 5, 5, 13, 8, 50, tzinfo=timezone.utc)
    assert id_time_key("BVz", whole.replace(microsecond=900000)) == id_time_key("BVz", whole)
    assert id_time_key("BVz", whole).startswith("BVz-")


@pytest.mark.asyncio
async def test_delay_none_does_not_sleep():
    with patch("bilisync.utils.asyncio.sleep", new_callable=AsyncMock) as sleep:
        result = await delay(None)
    assert result is None
    assert sleep.await_count == 0


@pytest.mark.asyncio
async def test_fixed_delay_sleeps_milliseconds():
    with patch("bilisync.utils.asyncio.sleep", new_callable=AsyncMock) as sleep:
        result = await delay(FixedDelay(1500))
    assert result is None
    assert [call.args[0] for call in sleep.await_args_list] == [1.5]


@pytest.mark.asyncio
async def test_random_delay_within_bounds():
    with patch("bilisync.utils.asyncio.sleep", new_callable=AsyncMock) as sleep:
        results = [await delay(RandomDelay(10, 20)) for _ in range(20)]
    assert results == [None] * 20
    assert sleep.await_count == 20
    assert all(0.010 <= call.args[0] <= 0.020 for call in sleep.await_args_list)


@pytest.mark.asyncio
async def test_random_delay_equal_bounds():
    with patch("bilisync.utils.asyncio.sleep", new_callable=AsyncMock) as sleep:
        result = await delay(RandomDelay(5, 5))
    assert result is None
    assert [call.args[0] for call in sleep.await_args_list] == [0.005]


@pytest.mark.asyncio
async def test_random_delay_inverted_bounds():
    with pytest.raises(ValueError):
        await delay(RandomDelay(9, 1))