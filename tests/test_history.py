import pytest

from canvas_sync.core.history import HistoryView
from canvas_sync.models.records import FileRecord

COURSE = "80071"


@pytest.fixture
def seeded_store(record_store):
    record_store.save(
        COURSE,
        {
            1: FileRecord(id=1, name="Lecture 02.pdf", time=200.0),
            2: FileRecord(id=2, name="Homework 1.pdf", time=100.0),
            3: FileRecord(id=3, name="lecture 01.pdf", time=50.0),
            4: FileRecord(id=4, name="Syllabus.docx", time=300.0),
        },
    )
    return record_store


def test_records_sorted_oldest_first(seeded_store):
    view = HistoryView(seeded_store, COURSE)

    assert [r.id for r in view.visible()] == [3, 2, 1, 4]


def test_filter_is_case_insensitive_substring(seeded_store):
    view = HistoryView(seeded_store, COURSE, filter_text="LECTURE")

    assert [r.id for r in view.visible()] == [3, 1]

    view.set_filter("work")
    assert [r.id for r in view.visible()] == [2]


def test_select_all_only_touches_visible_entries(seeded_store):
    view = HistoryView(seeded_store, COURSE, filter_text="lecture")

    view.select_all(True)
    assert view.selected == {1, 3}
    assert view.all_selected()

    view.set_filter("")
    assert not view.all_selected()

    view.select_all(False)
    assert view.selected == set()


def test_toggle(seeded_store):
    view = HistoryView(seeded_store, COURSE)

    assert view.toggle(2) is True
    assert view.is_selected(2)
    assert view.toggle(2) is False
    with pytest.raises(KeyError):
        view.toggle(42)


def test_delete_selected_removes_exactly_that_entry(seeded_store):
    view = HistoryView(seeded_store, COURSE)
    view.toggle(2)

    removed = view.delete_selected()

    assert removed == [2]
    assert [r.id for r in view.visible()] == [3, 1, 4]
    assert set(seeded_store.load(COURSE)) == {1, 3, 4}
    assert view.selected == set()


def test_delete_respects_current_filter(seeded_store):
    view = HistoryView(seeded_store, COURSE)
    view.toggle(2)
    view.toggle(4)
    view.set_filter("syllabus")

    assert view.delete_selected() == [4]
    assert set(seeded_store.load(COURSE)) == {1, 2, 3}
    assert view.selected == {2}


def test_delete_with_nothing_selected(seeded_store):
    view = HistoryView(seeded_store, COURSE)

    assert view.delete_selected() == []
    assert view.total == 4
