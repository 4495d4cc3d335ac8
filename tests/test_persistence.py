import json

import pytest

import fieldmemo.logger as fm_logger
from fieldmemo import paths
from fieldmemo.exceptions import StorageError
from fieldmemo.models import Category, DayData, RecurrenceRule, TimeBlock
from fieldmemo.persistence import LocalStore, MemoryStore
from fieldmemo.serialization import calendar_to_dict, dict_to_calendar


STORED_BLOB = {
    "2024-0": {
        "15": {
            "note": "Planning day",
            "dots": [1, 7],
            "dayColor": 7,
            "timeBlocks": [
                {
                    "id": "abc1234",
                    "startTime": "09:00",
                    "endTime": "10:00",
                    "title": "Standup",
                    "category": "focus",
                    "startDate": "2024-01-15",
                    "recurrence": {"frequency": "weekly", "interval": 1, "daysOfWeek": [1, 3]},
                },
                {"id": "old", "startTime": "12:00", "endTime": "13:00", "title": "Lunch", "category": "work"},
            ],
            "contentBlocks": [{"id": "c1", "type": "text", "content": "hello"}],
        }
    }
}


@pytest.fixture(autouse=True)
def _logs_in_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(fm_logger, "LOGS_DIR", tmp_path / "logs")


def test_dict_to_calendar_reads_stored_format():
    data = dict_to_calendar(STORED_BLOB)
    day = data["2024-0"]["15"]

    assert day.note == "Planning day"
    assert day.dots == [1, 7]
    assert day.day_color == 7
    assert day.content_blocks == [{"id": "c1", "type": "text", "content": "hello"}]

    standup, lunch = day.time_blocks
    assert standup.recurrence == RecurrenceRule(frequency="weekly", interval=1, days_of_week=[1, 3])
    assert standup.start_date == "2024-01-15"
    assert lunch.category is Category.UNKNOWN
    assert lunch.start_date is None


def test_missing_fields_get_empty_values():
    data = dict_to_calendar({"2024-1": {"3": {"note": "only a note"}, "4": "junk"}, "2024-2": []})
    assert data == {"2024-1": {"3": DayData(note="only a note")}}


def test_calendar_serializes_with_camel_case_keys():
    block = TimeBlock(id="x", start_time="08:00", end_time="08:30", title="Run", category=Category.HEALTH,
                      start_date="2024-03-01", recurrence=RecurrenceRule(frequency="daily", interval=2,
                                                                         end_date="2024-03-31"))
    payload = calendar_to_dict({"2024-2": {"1": DayData(time_blocks=[block], day_color=3)}})

    assert payload == {
        "2024-2": {
            "1": {
                "note": "",
                "dots": [],
                "dayColor": 3,
                "timeBlocks": [
                    {
                        "id": "x",
                        "startTime": "08:00",
                        "endTime": "08:30",
                        "title": "Run",
                        "category": "health",
                        "startDate": "2024-03-01",
                        "recurrence": {"frequency": "daily", "interval": 2, "endDate": "2024-03-31"},
                    }
                ],
            }
        }
    }


def test_local_store_missing_file_loads_empty(tmp_path):
    assert LocalStore(path=tmp_path / "none.json").load() == {}


def test_local_store_saves_and_loads(tmp_path):
    path = tmp_path / "nested" / "calendar.json"
    store = LocalStore(path=path)
    data = dict_to_calendar(STORED_BLOB)

    assert store.save(data) is True
    assert json.loads(path.read_text(encoding="utf-8"))["2024-0"]["15"]["note"] == "Planning day"
    assert LocalStore(path=path).load() == data


def test_local_store_uses_storage_key_in_data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "DATA_DIR", tmp_path)
    assert LocalStore(key="field-memo-data").path == tmp_path / "field-memo-data.json"


def test_corrupt_file_loads_empty_and_is_dumped(tmp_path):
    path = tmp_path / "calendar.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalStore(path=path).load() == {}
    dump = (tmp_path / "logs" / "corruption_dump.log").read_text(encoding="utf-8")
    assert "{not json" in dump


def test_invalid_utf8_loads_empty_and_is_dumped(tmp_path):
    path = tmp_path / "calendar.json"
    path.write_bytes(b'{"2024-0": {"1": {"note": "\xff\xfe"}}}')

    assert LocalStore(path=path).load() == {}
    dump = (tmp_path / "logs" / "corruption_dump.log").read_text(encoding="utf-8")
    assert "utf-8" in dump
    assert '"2024-0"' in dump


def test_non_object_payload_loads_empty(tmp_path):
    path = tmp_path / "calendar.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert LocalStore(path=path).load() == {}


def test_save_failure_is_reported_not_raised(tmp_path, monkeypatch):
    store = LocalStore(path=tmp_path / "calendar.json")

    def refuse(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("builtins.open", refuse)
    assert store.save({"2024-0": {"1": DayData(note="x")}}) is False


def test_directory_path_is_a_storage_error(tmp_path):
    with pytest.raises(StorageError):
        LocalStore(path=tmp_path)


def test_memory_store_round_trip():
    store = MemoryStore()
    data = dict_to_calendar(STORED_BLOB)
    assert store.save(data) is True
    assert MemoryStore(store.blob).load() == data
    assert MemoryStore("garbage").load() == {}
