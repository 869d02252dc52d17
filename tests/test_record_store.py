import json

import pytest

from canvas_sync.models.records import FileRecord
from canvas_sync.storage.record_store import RecordStore, storage_key


def test_save_and_load(record_store):
    records = {
        3: FileRecord(id=3, name="Week 1/notes.pdf", time=1712345678.5),
        4: FileRecord(id=4, name="讲义.pdf", time=1712345680.0),
    }
    record_store.save("80071", records)

    assert record_store.load("80071") == records


def test_serialized_shape(record_store, kv_store):
    record_store.save("1", {9: FileRecord(id=9, name="a.pdf", time=2.0)})

    assert json.loads(kv_store.get("canvas_downloaded_file_ids_1")) == {
        "9": {"name": "a.pdf", "time": 2.0}
    }


def test_unknown_course_is_empty(record_store):
    assert record_store.load("404") == {}


def test_legacy_id_list_is_read_as_records(record_store, kv_store):
    kv_store.set(storage_key("80071"), "[101, 102]")

    records = record_store.load("80071")

    assert records == {101: FileRecord(id=101), 102: FileRecord(id=102)}


def test_corrupt_value_is_ignored(record_store, kv_store):
    kv_store.set(storage_key("80071"), "{not json")

    assert record_store.load("80071") == {}


@pytest.mark.parametrize(
    "raw", ["5", '"text"', '{"1": 3}', '{"abc": {}}', '["x"]', '{"1": {"time": "soon"}}']
)
def test_unexpected_shape_is_ignored(record_store, kv_store, raw):
    kv_store.set(storage_key("80071"), raw)

    assert record_store.load("80071") == {}
    assert record_store.courses() == ["80071"]


def test_reset_only_clears_one_course(record_store):
    record_store.save("1", {1: FileRecord(id=1, name="a", time=1.0)})
    record_store.save("2", {2: FileRecord(id=2, name="b", time=1.0)})

    assert record_store.reset("1") is True
    assert record_store.load("1") == {}
    assert record_store.load("2") == {2: FileRecord(id=2, name="b", time=1.0)}
    assert record_store.reset("1") is False


def test_delete_removes_only_given_ids(record_store):
    record_store.save(
        "1",
        {i: FileRecord(id=i, name=f"f{i}", time=float(i)) for i in (1, 2, 3)},
    )

    removed = record_store.delete("1", {2, 99})

    assert removed == [2]
    assert set(record_store.load("1")) == {1, 3}


def test_courses_lists_stored_histories(record_store):
    record_store.save("200", {1: FileRecord(id=1)})
    record_store.save("100", {1: FileRecord(id=1)})
    record_store.kv_store.set("unrelated", "x")

    assert record_store.courses() == ["100", "200"]


def test_history_survives_reopening(tmp_path):
    from canvas_sync.storage.kv_store import KeyValueStore

    RecordStore(KeyValueStore(tmp_path)).save("5", {8: FileRecord(id=8, name="x")})

    assert RecordStore(KeyValueStore(tmp_path)).load("5") == {8: FileRecord(id=8, name="x")}
