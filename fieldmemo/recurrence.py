"""
Recurring time-block resolution.

Given a date and the whole calendar store, work out which time blocks show on
that date: plain blocks anchored on it, plus occurrences of recurring blocks
anchored anywhere else. Everything here is a pure function of its inputs and
safe to call on every render.

Rules, with interval N and anchor date A (block.start_date, or the day the
block is stored under):
- daily:   days since A is a multiple of N
- weekly:  weekday in days_of_week (empty list -> A's weekday) and the number
           of Sunday-based weeks between A and the date is a multiple of N
- monthly: same day-of-month as A (no clamping) every N months
- yearly:  same month and day as A every N years
No occurrence falls before A or after the rule's end_date.
"""
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from fieldmemo.dates import months_between, parse_date_string, parse_time, week_start, weekday_index
from fieldmemo.logger import get_logger
from fieldmemo.models import BlockOccurrence, CalendarData, Category, RecurrenceFrequency, TimeBlock
from fieldmemo.store import iter_time_blocks

logger = get_logger("recurrence")


def _interval(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Invalid recurrence interval: {value!r}")
    return value


def anchor_date(block: TimeBlock, stored_on: date) -> date:
    """Origin of a block (and of its series). Raises ValueError/TypeError if unparseable."""
    if block.start_date is None:
        return stored_on
    return parse_date_string(block.start_date)


def does_recur_on(block: TimeBlock, target: date, anchor: Optional[date] = None) -> bool:
    """
    Whether a recurring block has an occurrence on target.

    Returns False for blocks without a recurrence rule. Raises ValueError or
    TypeError when the rule or the anchor cannot be parsed.
    """
    rule = block.recurrence
    if rule is None:
        return False

    origin = anchor if anchor is not None else parse_date_string(block.start_date)
    frequency = rule.freq
    interval = _interval(rule.interval)

    if target < origin:
        return False
    if rule.end_date and target > parse_date_string(rule.end_date):
        return False

    if frequency == RecurrenceFrequency.DAILY:
        return (target - origin).days % interval == 0

    if frequency == RecurrenceFrequency.WEEKLY:
        weeks = (week_start(target) - week_start(origin)).days // 7
        if weeks % interval != 0:
            return False
        if rule.days_of_week:
            return weekday_index(target) in rule.days_of_week
        return weekday_index(target) == weekday_index(origin)

    if frequency == RecurrenceFrequency.MONTHLY:
        return target.day == origin.day and months_between(origin, target) % interval == 0

    if frequency == RecurrenceFrequency.YEARLY:
        return (
            target.month == origin.month
            and target.day == origin.day
            and (target.year - origin.year) % interval == 0
        )

    return False


def occurs_on(block: TimeBlock, stored_on: date, target: date) -> bool:
    """Plain or recurring: does the block show on target? Raises on malformed data."""
    origin = anchor_date(block, stored_on)
    # Times must be usable too, otherwise the block cannot be placed
    parse_time(block.start_time)
    parse_time(block.end_time)

    if block.recurrence is None:
        return origin == target
    return does_recur_on(block, target, anchor=origin)


def _sort_key(occurrence: BlockOccurrence) -> int:
    return parse_time(occurrence.block.start_time)


def resolve_blocks_for_date(target: date, store: CalendarData) -> List[BlockOccurrence]:
    """
    All blocks showing on target, ordered by start time.

    Ties keep storage order. Blocks whose dates, times or rules do not parse
    are left out; this never raises for bad stored data.
    """
    found: List[BlockOccurrence] = []
    for stored_on, block in iter_time_blocks(store):
        try:
            if occurs_on(block, stored_on, target):
                found.append(BlockOccurrence(block=block, occurrence_date=target, source_date=stored_on))
        except (ValueError, TypeError) as e:
            logger.debug("Skipping block %r stored on %s: %s", block.id, stored_on, e)
            continue

    found.sort(key=_sort_key)
    return found


def resolve_blocks_for_range(start: date, end: date, store: CalendarData) -> Dict[date, List[BlockOccurrence]]:
    """Resolved blocks for every date from start to end inclusive (week view)."""
    result: Dict[date, List[BlockOccurrence]] = OrderedDict()
    current = start
    while current <= end:
        result[current] = resolve_blocks_for_date(current, store)
        current += timedelta(days=1)
    return result


def block_minutes(block: TimeBlock) -> int:
    """Scheduled length in minutes; 0 for unusable times."""
    try:
        return max(parse_time(block.end_time) - parse_time(block.start_time), 0)
    except ValueError:
        return 0


def category_minutes(occurrences: Iterable[BlockOccurrence]) -> Tuple[Dict[Category, int], int]:
    """
    Per-category scheduled minutes for a day, plus the total.

    Categories with no time are omitted.
    """
    per_category: Dict[Category, int] = {}
    total = 0
    for occurrence in occurrences:
        minutes = block_minutes(occurrence.block)
        if minutes <= 0:
            continue
        per_category[occurrence.block.category] = per_category.get(occurrence.block.category, 0) + minutes
        total += minutes
    return per_category, total
