import pytest

from models.queue import NO_SELECTION, TrackQueue
from tests.conftest import make_entry


def test_new_queue_has_no_selection(entries):
    queue = TrackQueue(entries)
    assert queue.current_index == NO_SELECTION
    assert queue.current() is None
    assert len(queue) == 3


def test_next_wraps_to_first(entries):
    queue = TrackQueue(entries)
    queue.current_index = 2
    assert queue.next_index() == 0


def test_previous_wraps_to_last(entries):
    queue = TrackQueue(entries)
    queue.current_index = 0
    assert queue.previous_index() == 2


def test_previous_without_selection_is_last(entries):
    assert TrackQueue(entries).previous_index() == 2


def test_next_without_selection_is_first(entries):
    assert TrackQueue(entries).next_index() == 0


def test_empty_queue_has_no_neighbours():
    queue = TrackQueue()
    assert queue.is_empty()
    assert queue.next_index() == NO_SELECTION
    assert queue.previous_index() == NO_SELECTION


def test_out_of_range_selection_rejected(entries):
    queue = TrackQueue(entries)
    with pytest.raises(IndexError):
        queue.current_index = 3


def test_rebuild_reports_and_clears_selection(entries):
    queue = TrackQueue(entries)
    assert not queue.rebuild(entries)

    queue.current_index = 1
    assert queue.rebuild([make_entry("solo.mp3")])
    assert queue.current_index == NO_SELECTION
    assert [entry.display_name for entry in queue] == ["solo.mp3"]


def test_index_of(entries):
    queue = TrackQueue(entries)
    assert queue.index_of("/music/Beta - Two.ogg") == 1
    assert queue.index_of("/music/missing.mp3") == NO_SELECTION
