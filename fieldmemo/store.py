"""
Calendar store access and day-level edits.

The store itself is a plain nested mapping (see models.CalendarData). Every
helper here is copy-on-write: it returns new DayData / CalendarData values
and never modifies its arguments, so the history manager can keep the
previous store as a snapshot.
"""
import copy
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Iterator, List, Optional, Tuple

from fieldmemo.config_manager import config
from fieldmemo.dates import format_minutes, parse_time
from fieldmemo.models import CalendarData, DayData, Marker, TimeBlock


def month_key(year: int, month0: int) -> str:
    """Month key with a zero-based month index: (2024, 0) -> "2024-0"."""
    return f"{year}-{month0}"


def day_key(day: int) -> str:
    return str(day)


def keys_for(value: date) -> Tuple[str, str]:
    return month_key(value.year, value.month - 1), day_key(value.day)


def date_from_keys(mkey: str, dkey: str) -> date:
    """Inverse of keys_for. Raises ValueError (OverflowError for huge numbers) on malformed keys."""
    year, month0 = mkey.split("-")
    return date(int(year), int(month0) + 1, int(dkey))


def get_day_data(store: CalendarData, year: int, month0: int, day: int) -> DayData:
    """
    Day record for (year, zero-based month, day).

    Missing entries come back as an empty DayData; the result is a copy.
    """
    found = store.get(month_key(year, month0), {}).get(day_key(day))
    if found is None:
        return DayData()
    return copy.deepcopy(found)


def day_data_for(store: CalendarData, value: date) -> DayData:
    return get_day_data(store, value.year, value.month - 1, value.day)


def with_day_data(store: CalendarData, value: date, day: DayData) -> CalendarData:
    """Return a new store with one day replaced. Empty days are dropped."""
    mkey, dkey = keys_for(value)
    new_store = dict(store)
    month = dict(new_store.get(mkey, {}))
    if day.is_empty():
        month.pop(dkey, None)
    else:
        month[dkey] = copy.deepcopy(day)

    if month:
        new_store[mkey] = month
    else:
        new_store.pop(mkey, None)
    return new_store


def iter_time_blocks(store: CalendarData) -> Iterator[Tuple[date, TimeBlock]]:
    """
    Yield (storage date, block) for every stored block in storage order.

    Entries whose keys do not form a real date are skipped.
    """
    for mkey, days in store.items():
        for dkey, day in days.items():
            try:
                stored_on = date_from_keys(mkey, dkey)
            except (ValueError, OverflowError):
                continue
            for block in day.time_blocks:
                yield stored_on, block


# --- Day edits ---

def set_note(day: DayData, note: str) -> DayData:
    return replace(day, note=note)


def toggle_dot(day: DayData, marker: Marker) -> DayData:
    """Remove every copy of the marker if present, otherwise append it."""
    code = int(marker)
    if code in day.dots:
        return replace(day, dots=[d for d in day.dots if d != code])
    return replace(day, dots=list(day.dots) + [code])


def add_dot(day: DayData, marker: Marker) -> DayData:
    code = int(marker)
    if code in day.dots:
        return day
    return replace(day, dots=list(day.dots) + [code])


def set_day_color(day: DayData, marker: Optional[Marker]) -> DayData:
    return replace(day, day_color=int(marker) if marker is not None else None)


def set_content_blocks(day: DayData, blocks: List[Dict[str, Any]]) -> DayData:
    return replace(day, content_blocks=copy.deepcopy(blocks))


def _start_sort_key(block: TimeBlock) -> Tuple[int, int]:
    # Unparseable start times go last, in their current order
    try:
        return 0, parse_time(block.start_time)
    except ValueError:
        return 1, 0


def add_time_block(day: DayData, block: TimeBlock) -> DayData:
    blocks = sorted(list(day.time_blocks) + [block], key=_start_sort_key)
    return replace(day, time_blocks=blocks)


def find_time_block(day: DayData, block_id: str) -> Optional[TimeBlock]:
    for block in day.time_blocks:
        if block.id == block_id:
            return block
    return None


def update_time_block(day: DayData, block_id: str, **changes: Any) -> DayData:
    """Apply field changes to one block. Unknown ids leave the day unchanged."""
    blocks = [
        replace(b, **changes) if b.id == block_id else b
        for b in day.time_blocks
    ]
    return replace(day, time_blocks=sorted(blocks, key=_start_sort_key))


def delete_time_block(day: DayData, block_id: str) -> DayData:
    return replace(day, time_blocks=[b for b in day.time_blocks if b.id != block_id])


def next_available_time(blocks: List[TimeBlock]) -> str:
    """
    Suggested start for a new block: the latest end time of the day.

    Falls back to DEFAULT_START_TIME when the day is empty or already runs
    to LATEST_AUTO_START or later.
    """
    ends = []
    for block in blocks:
        try:
            ends.append(parse_time(block.end_time))
        except ValueError:
            continue
    if not ends:
        return config.DEFAULT_START_TIME

    last_end = max(ends)
    if last_end >= parse_time(config.LATEST_AUTO_START):
        return config.DEFAULT_START_TIME
    return format_minutes(last_end)
