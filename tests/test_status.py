import pytest

from bilisync.status import PageStatus, Status, VideoStatus


def test_status():
    status = Status(0)
    assert status.should_run(3) == [True, True, True]
    for count in range(1, 4):
        status.update_status([Exception(""), None, None])
        assert status.should_run(3) == [True, False, False]
        assert int(status) == 0b111_111_000 + count
    status.update_status([Exception(""), None, None])
    assert status.should_run(3) == [False, False, False]
    assert int(status) == 0b111_111_100 | Status.handled()


def test_handled_is_highest_bit():
    assert Status.handled() == 1 << 31


def test_status_after_handled_is_not_below_threshold():
    status = Status(0)
    status.update_status([None, None])
    assert int(status) >= Status.handled()
    assert status.should_run(2) == [False, False]


def test_exhausted_task_stays_unchanged_on_success():
    status = Status(0b100)
    status.update_status([None])
    assert int(status) == 0b100 | Status.handled()


def test_video_status_tasks():
    status = VideoStatus(0)
    assert status.should_run() == [True] * 5
    status.update_status([None, None, None, None, RuntimeError("x")])
    assert status.should_run() == [False, False, False, False, True]
    assert int(status) < Status.handled()


def test_video_status_all_ok_is_handled():
    status = VideoStatus(0)
    status.update_status([None] * 5)
    assert int(status) == 0b111_111_111_111_111 | Status.handled()


def test_page_status_tasks():
    status = PageStatus(0)
    assert status.should_run() == [True] * 4
    status.update_status([None] * 4)
    assert int(status) == 0b111_111_111_111 | Status.handled()


def test_video_status_wrong_length():
    with pytest.raises(ValueError):
        VideoStatus(0).update_status([None] * 4)


def test_page_status_wrong_length():
    with pytest.raises(ValueError):
        PageStatus(0).update_status([None] * 5)