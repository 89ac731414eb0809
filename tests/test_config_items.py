from pathlib import Path

import pytest

from bilisync.config_items import (
    ConcurrentLimit,
    DelayConfig,
    FixedDelay,
    NFOTimeType,
    RandomDelay,
    WatchLaterConfig,
    delay_to_value,
    parse_delay,
)


def test_parse_fixed_delay():
    assert parse_delay(250) == FixedDelay(250)


def test_parse_random_delay():
    assert parse_delay({"min": 100, "max": 200}) == RandomDelay(100, 200)


@pytest.mark.parametrize("value", [250, 0, {"min": 1, "max": 9}, {"min": 7, "max": 7}])
def test_delay_round_trip(value):
    assert delay_to_value(parse_delay(value)) == value


@pytest.mark.parametrize("value", [-1, True, "100", 1.5, {"min": 1}, {"max": 2}, None])
def test_parse_delay_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_delay(value)


def test_delay_to_value_rejects_other_types():
    with pytest.raises(TypeError):
        delay_to_value(5)


def test_delay_config_defaults_to_empty():
    config = DelayConfig.from_dict({})
    assert config == DelayConfig()
    assert config.to_dict() == {}


def test_delay_config_round_trip_skips_missing():
    data = {"refresh_video_list": 500, "download_page": {"min": 10, "max": 20}}
    config = DelayConfig.from_dict(data)
    assert config.refresh_video_list == FixedDelay(500)
    assert config.fetch_video_detail is None
    assert config.download_page == RandomDelay(10, 20)
    assert config.to_dict() == data


def test_delay_config_validity():
    assert DelayConfig(download_video=RandomDelay(1, 2), download_page=FixedDelay(9)).is_valid()
    assert not DelayConfig(download_video=RandomDelay(2, 2)).is_valid()
    assert not DelayConfig(refresh_video_list=RandomDelay(5, 1)).is_valid()


def test_delay_config_requires_table():
    with pytest.raises(ValueError):
        DelayConfig.from_dict([1, 2])


def test_concurrent_limit_defaults():
    limit = ConcurrentLimit()
    assert (limit.video, limit.page) == (3, 2)
    assert limit.delay == DelayConfig()


def test_concurrent_limit_round_trip():
    limit = ConcurrentLimit(video=5, page=1, delay=DelayConfig(download_video=FixedDelay(30)))
    assert ConcurrentLimit.from_dict(limit.to_dict()) == limit


@pytest.mark.parametrize(
    "data",
    [
        {"page": 2, "delay": {}},
        {"video": 3, "delay": {}},
        {"video": 3, "page": 2},
        {"video": -3, "page": 2, "delay": {}},
    ],
)
def test_concurrent_limit_rejects_incomplete(data):
    with pytest.raises(ValueError):
        ConcurrentLimit.from_dict(data)


def test_watch_later_round_trip():
    config = WatchLaterConfig(enabled=True, path=Path("/data/watch_later"))
    restored = WatchLaterConfig.from_dict(config.to_dict())
    assert restored == config
    assert restored.path.is_absolute()


def test_watch_later_default_disabled():
    assert WatchLaterConfig().enabled is False


@pytest.mark.parametrize(
    "data",
    [{"enabled": True}, {"path": "/x"}, {"enabled": "yes", "path": "/x"}, {"enabled": True, "path": 1}],
)
def test_watch_later_rejects_invalid(data):
    with pytest.raises(ValueError):
        WatchLaterConfig.from_dict(data)


def test_nfo_time_type_values():
    assert NFOTimeType("favtime") is NFOTimeType.FAV_TIME
    assert NFOTimeType("pubtime") is NFOTimeType.PUB_TIME
    with pytest.raises(ValueError):
        NFOTimeType("ctime")