"""
Calendar Service: the store object handed to the view layer.

Reads resolve against the current calendar; every edit is computed as a new
calendar and recorded through the HistoryManager, so it can be undone.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from fieldmemo.config_manager import config
from fieldmemo.dates import (
    add_minutes_to_time,
    format_date_string,
    format_minutes,
    parse_date_string,
    parse_time,
    week_dates,
)
from fieldmemo.exceptions import BlockNotFoundError, ValidationError
from fieldmemo.history import HistoryManager
from fieldmemo import store as calendar_store
from fieldmemo.logger import get_logger
from fieldmemo.models import (
    BlockOccurrence,
    Category,
    DayData,
    Marker,
    RecurrenceFrequency,
    RecurrenceRule,
    TimeBlock,
)
from fieldmemo.persistence import LocalStore
from fieldmemo.recurrence import anchor_date, category_minutes, resolve_blocks_for_date, resolve_blocks_for_range

logger = get_logger("calendar_service")

EDITABLE_BLOCK_FIELDS = {"title", "start_time", "end_time", "category", "recurrence"}


class CalendarService:
    """Read accessors and undoable edits over one calendar."""

    def __init__(self, history: Optional[HistoryManager] = None):
        self.history = history if history is not None else HistoryManager(LocalStore())

    # --- Validation ---

    @staticmethod
    def validate_times(start_time: str, end_time: str) -> Tuple[str, str]:
        """Check a start/end pair and return it as zero-padded HH:MM."""
        try:
            start = parse_time(start_time)
        except ValueError as e:
            raise ValidationError(str(e), field="start_time") from e
        try:
            end = parse_time(end_time)
        except ValueError as e:
            raise ValidationError(str(e), field="end_time") from e
        if end <= start:
            raise ValidationError(
                f"End time {end_time} must be later than start time {start_time}",
                field="end_time",
            )
        return format_minutes(start), format_minutes(end)

    @staticmethod
    def validate_recurrence(rule: RecurrenceRule, start_date: Optional[date] = None) -> None:
        """
        Reject rules the resolver could never place.

        Raises:
            ValidationError: unknown frequency, interval below 1, weekdays
                outside 0..6, or an end date that is malformed or before
                start_date.
        """
        try:
            RecurrenceFrequency(rule.frequency)
        except ValueError as e:
            raise ValidationError(f"Unknown repeat frequency: {rule.frequency!r}", field="frequency") from e
        if isinstance(rule.interval, bool) or not isinstance(rule.interval, int) or rule.interval < 1:
            raise ValidationError(f"Interval must be a positive integer, got {rule.interval!r}", field="interval")

        days = rule.days_of_week or []
        if any(isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6 for d in days):
            raise ValidationError(f"Weekdays must be 0 (Sunday) to 6 (Saturday), got {days}", field="days_of_week")

        if rule.end_date is not None:
            try:
                until = parse_date_string(rule.end_date)
            except (ValueError, TypeError) as e:
                raise ValidationError(f"Invalid end date: {rule.end_date!r}", field="end_date") from e
            if start_date is not None and until < start_date:
                raise ValidationError(f"End date {rule.end_date} is before the first occurrence", field="end_date")

    @classmethod
    def build_recurrence(
        cls,
        frequency: str,
        interval: int = 1,
        days_of_week: Iterable[int] = (),
        end_date: Optional[str] = None,
        start_date: Optional[date] = None,
    ) -> RecurrenceRule:
        rule = RecurrenceRule(
            frequency=frequency,
            interval=interval,
            days_of_week=list(days_of_week),
            end_date=end_date,
        )
        cls.validate_recurrence(rule, start_date)
        rule.days_of_week = sorted(set(rule.days_of_week))
        return rule

    # --- Reads ---

    def day(self, value: date) -> DayData:
        return calendar_store.day_data_for(self.history.current, value)

    def blocks_for(self, value: date) -> List[BlockOccurrence]:
        return resolve_blocks_for_date(value, self.history.current)

    def week(self, value: date) -> Dict[date, List[BlockOccurrence]]:
        days = week_dates(value)
        return resolve_blocks_for_range(days[0], days[-1], self.history.current)

    def day_summary(self, value: date) -> Tuple[Dict[Category, int], int]:
        return category_minutes(self.blocks_for(value))

    # --- Edits ---

    def _edit_day(self, value: date, edit) -> DayData:
        def transform(current):
            day = calendar_store.day_data_for(current, value)
            return calendar_store.with_day_data(current, value, edit(day))

        updated = self.history.update(transform)
        return calendar_store.day_data_for(updated, value)

    def set_note(self, value: date, note: str) -> DayData:
        return self._edit_day(value, lambda day: calendar_store.set_note(day, note))

    def toggle_dot(self, value: date, marker: Marker) -> DayData:
        return self._edit_day(value, lambda day: calendar_store.toggle_dot(day, marker))

    def add_dot(self, value: date, marker: Marker) -> DayData:
        return self._edit_day(value, lambda day: calendar_store.add_dot(day, marker))

    def set_day_color(self, value: date, marker: Optional[Marker]) -> DayData:
        return self._edit_day(value, lambda day: calendar_store.set_day_color(day, marker))

    def set_content_blocks(self, value: date, blocks: List[Dict[str, Any]]) -> DayData:
        return self._edit_day(value, lambda day: calendar_store.set_content_blocks(day, blocks))

    def add_block(
        self,
        value: date,
        title: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        category: Optional[Category] = None,
        recurrence: Optional[RecurrenceRule] = None,
    ) -> TimeBlock:
        """
        Add a block anchored on value.

        Missing start defaults to the next free slot of the day, missing end to
        DEFAULT_DURATION_MINUTES later.
        """
        if not title.strip():
            raise ValidationError("Time block title is empty", field="title")

        if start_time is None:
            start_time = calendar_store.next_available_time(self.day(value).time_blocks)
        if end_time is None:
            try:
                end_time = add_minutes_to_time(start_time, config.DEFAULT_DURATION_MINUTES)
            except ValueError as e:
                raise ValidationError(str(e), field="start_time") from e
        start_time, end_time = self.validate_times(start_time, end_time)
        if recurrence is not None:
            self.validate_recurrence(recurrence, value)

        block = TimeBlock(
            id=uuid4().hex[:8],
            start_time=start_time,
            end_time=end_time,
            title=title.strip(),
            category=category or Category.parse(config.DEFAULT_CATEGORY),
            start_date=format_date_string(value),
            recurrence=recurrence,
        )
        self._edit_day(value, lambda day: calendar_store.add_time_block(day, block))
        logger.info("Added block %s on %s", block.id, value)
        return block

    def update_block(self, value: date, block_id: str, **changes: Any) -> TimeBlock:
        """
        Change fields of a block stored on value.

        Accepts TimeBlock field names (title, start_time, end_time, category,
        recurrence); id and start_date cannot be changed.
        """
        existing = calendar_store.find_time_block(self.day(value), block_id)
        if existing is None:
            raise BlockNotFoundError(block_id, format_date_string(value))

        forbidden = sorted(set(changes) - EDITABLE_BLOCK_FIELDS)
        if forbidden:
            raise ValidationError(f"Cannot change {', '.join(forbidden)} of a block", field=forbidden[0])

        changes = dict(changes)
        changes["start_time"], changes["end_time"] = self.validate_times(
            changes.get("start_time", existing.start_time),
            changes.get("end_time", existing.end_time),
        )
        if changes.get("recurrence") is not None:
            self.validate_recurrence(changes["recurrence"], self._anchor_of(existing, value))
        self._edit_day(value, lambda day: calendar_store.update_time_block(day, block_id, **changes))
        return calendar_store.find_time_block(self.day(value), block_id)

    @staticmethod
    def _anchor_of(block: TimeBlock, stored_on: date) -> Optional[date]:
        try:
            return anchor_date(block, stored_on)
        except (ValueError, TypeError):
            return None

    def delete_block(self, value: date, block_id: str) -> None:
        if calendar_store.find_time_block(self.day(value), block_id) is None:
            raise BlockNotFoundError(block_id, format_date_string(value))
        self._edit_day(value, lambda day: calendar_store.delete_time_block(day, block_id))
        logger.info("Deleted block %s on %s", block_id, value)

    # --- History ---

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()
