from datetime import date

import pytest

from fieldmemo.calendar_service import CalendarService
from fieldmemo.exceptions import BlockNotFoundError, ValidationError
from fieldmemo.history import HistoryManager
from fieldmemo.models import Category, DayData, Marker, RecurrenceRule
from fieldmemo.persistence import LocalStore

MONDAY = date(2024, 1, 1)


def test_day_defaults_to_empty(service):
    assert service.day(MONDAY) == DayData()


def test_note_dot_and_color_edits_are_undoable(service):
    service.set_note(MONDAY, "new year")
    service.toggle_dot(MONDAY, Marker.JOY)
    service.set_day_color(MONDAY, Marker.REST)

    day = service.day(MONDAY)
    assert (day.note, day.dots, day.day_color) == ("new year", [2], 4)

    assert service.undo()
    assert service.day(MONDAY).day_color is None
    assert service.undo()
    assert service.day(MONDAY).dots == []
    assert service.undo()
    assert service.day(MONDAY) == DayData()
    assert not service.can_undo()

    assert service.redo()
    assert service.day(MONDAY).note == "new year"
    assert service.can_redo()


def test_add_block_uses_next_free_slot_and_default_duration(service):
    first = service.add_block(MONDAY, "Deep work")
    second = service.add_block(MONDAY, "Email", category=Category.REVIEW)

    assert (first.start_time, first.end_time) == ("09:00", "10:00")
    assert (second.start_time, second.end_time) == ("10:00", "11:00")
    assert first.start_date == "2024-01-01"
    assert first.category is Category.FOCUS
    assert [o.block.id for o in service.blocks_for(MONDAY)] == [first.id, second.id]


def test_recurring_block_shows_on_later_days(service):
    rule = service.build_recurrence("weekly", days_of_week=[1, 3, 5], start_date=MONDAY)
    block = service.add_block(MONDAY, "Gym", start_time="07:00", end_time="08:00",
                              category=Category.HEALTH, recurrence=rule)

    wednesday = [o.occurrence_id for o in service.blocks_for(date(2024, 1, 3))]
    assert wednesday == [f"{block.id}-2024-01-03"]
    assert service.blocks_for(date(2024, 1, 2)) == []

    week = service.week(date(2024, 1, 10))
    assert [len(v) for v in week.values()] == [0, 1, 0, 1, 0, 1, 0]


def test_day_summary(service):
    service.add_block(MONDAY, "Write", start_time="09:00", end_time="11:00")
    service.add_block(MONDAY, "Walk", start_time="12:00", end_time="12:30", category=Category.HEALTH)

    per_category, total = service.day_summary(MONDAY)
    assert per_category == {Category.FOCUS: 120, Category.HEALTH: 30}
    assert total == 150


def test_update_and_delete_block(service):
    block = service.add_block(MONDAY, "Read", start_time="20:00", end_time="21:00")

    updated = service.update_block(MONDAY, block.id, title="Read fiction", end_time="21:30")
    assert (updated.title, updated.end_time) == ("Read fiction", "21:30")

    service.delete_block(MONDAY, block.id)
    assert service.day(MONDAY).time_blocks == []
    service.undo()
    assert service.day(MONDAY).time_blocks[0].title == "Read fiction"


def test_unknown_block_raises_without_recording_history(service):
    with pytest.raises(BlockNotFoundError):
        service.delete_block(MONDAY, "missing")
    with pytest.raises(BlockNotFoundError):
        service.update_block(MONDAY, "missing", title="x")
    assert not service.can_undo()


@pytest.mark.parametrize(
    "start,end",
    [("10:00", "09:00"), ("10:00", "10:00"), ("24:00", "25:00"), ("9am", "10:00")],
)
def test_invalid_times_are_rejected(service, start, end):
    with pytest.raises(ValidationError):
        service.add_block(MONDAY, "Bad", start_time=start, end_time=end)
    assert not service.can_undo()


def test_block_fields_that_cannot_change(service):
    block = service.add_block(MONDAY, "Plan")
    with pytest.raises(ValidationError):
        service.update_block(MONDAY, block.id, start_date="2024-02-01")


@pytest.mark.parametrize(
    "rule",
    [
        RecurrenceRule("hourly"),
        RecurrenceRule("daily", interval=0),
        RecurrenceRule("weekly", days_of_week=[1, 9]),
        RecurrenceRule("daily", end_date="soon"),
        RecurrenceRule("daily", end_date="2023-12-31"),
    ],
)
def test_add_block_rejects_rules_that_never_resolve(service, rule):
    with pytest.raises(ValidationError):
        service.add_block(MONDAY, "x", start_time="09:00", end_time="10:00", recurrence=rule)
    assert not service.can_undo()
    assert service.day(MONDAY).time_blocks == []


def test_update_block_rejects_invalid_rule_without_recording(service):
    block = service.add_block(MONDAY, "Swim", start_time="07:00", end_time="08:00")
    depth = service.history.undo_depth

    with pytest.raises(ValidationError):
        service.update_block(MONDAY, block.id, recurrence=RecurrenceRule("daily", interval=-2))
    with pytest.raises(ValidationError):
        service.update_block(MONDAY, block.id, recurrence=RecurrenceRule("weekly", end_date="2023-06-01"))

    assert service.history.undo_depth == depth
    assert service.day(MONDAY).time_blocks[0].recurrence is None

    service.update_block(MONDAY, block.id, recurrence=RecurrenceRule("weekly", days_of_week=[1]))
    assert [o.block.id for o in service.blocks_for(date(2024, 1, 8))] == [block.id]


def test_block_times_are_stored_zero_padded_and_in_clock_order(service):
    service.add_block(MONDAY, "late", start_time="10:00", end_time="11:00")
    early = service.add_block(MONDAY, "early", start_time="9:30", end_time="9:45")

    assert (early.start_time, early.end_time) == ("09:30", "09:45")
    assert [b.title for b in service.day(MONDAY).time_blocks] == ["early", "late"]

    updated = service.update_block(MONDAY, early.id, start_time="8:00")
    assert updated.start_time == "08:00"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"frequency": "hourly"},
        {"frequency": "daily", "interval": 0},
        {"frequency": "weekly", "days_of_week": [7]},
        {"frequency": "daily", "end_date": "not-a-date"},
        {"frequency": "daily", "end_date": "2023-12-01", "start_date": MONDAY},
    ],
)
def test_build_recurrence_validation(kwargs):
    with pytest.raises(ValidationError):
        CalendarService.build_recurrence(**kwargs)


def test_edits_are_persisted(tmp_path):
    path = tmp_path / "calendar.json"
    first = CalendarService(HistoryManager(LocalStore(path=path)))
    first.set_note(MONDAY, "persisted")
    first.add_block(MONDAY, "Saved block", start_time="15:00", end_time="16:00")

    second = CalendarService(HistoryManager(LocalStore(path=path)))
    assert second.day(MONDAY).note == "persisted"
    assert [o.block.title for o in second.blocks_for(MONDAY)] == ["Saved block"]
    # history does not survive a restart
    assert not second.can_undo()
