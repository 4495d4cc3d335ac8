"""
CalendarData <-> JSON-compatible dicts.

The on-disk blob keeps the camelCase field names of the stored format
(startTime, timeBlocks, dayColor, ...). Reading is lenient: records that are
not mappings are skipped, missing fields get their empty values, and block
fields are kept as stored strings so the resolver decides what is usable.
"""
from typing import Any, Dict, Optional

from fieldmemo.logger import get_logger
from fieldmemo.models import CalendarData, Category, DayData, RecurrenceRule, TimeBlock

logger = get_logger("serialization")


def _recurrence_to_dict(rule: RecurrenceRule) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "frequency": rule.frequency,
        "interval": rule.interval,
    }
    if rule.days_of_week:
        d["daysOfWeek"] = list(rule.days_of_week)
    if rule.end_date:
        d["endDate"] = rule.end_date
    return d


def _dict_to_recurrence(d: Dict[str, Any]) -> RecurrenceRule:
    days = d.get("daysOfWeek") or []
    return RecurrenceRule(
        frequency=d.get("frequency", ""),
        interval=d.get("interval", 1),
        days_of_week=list(days) if isinstance(days, list) else [],
        end_date=d.get("endDate") or None,
    )


def block_to_dict(block: TimeBlock) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": block.id,
        "startTime": block.start_time,
        "endTime": block.end_time,
        "title": block.title,
        "category": block.category.value,
    }
    if block.start_date:
        d["startDate"] = block.start_date
    if block.recurrence is not None:
        d["recurrence"] = _recurrence_to_dict(block.recurrence)
    return d


def dict_to_block(d: Dict[str, Any]) -> TimeBlock:
    recurrence = d.get("recurrence")
    return TimeBlock(
        id=str(d.get("id", "")),
        start_time=d.get("startTime", ""),
        end_time=d.get("endTime", ""),
        title=d.get("title") or "",
        category=Category.parse(d.get("category", "")),
        start_date=d.get("startDate") or None,
        recurrence=_dict_to_recurrence(recurrence) if isinstance(recurrence, dict) else None,
    )


def day_to_dict(day: DayData) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "note": day.note,
        "dots": list(day.dots),
    }
    if day.time_blocks:
        d["timeBlocks"] = [block_to_dict(b) for b in day.time_blocks]
    if day.content_blocks:
        d["contentBlocks"] = list(day.content_blocks)
    if day.day_color is not None:
        d["dayColor"] = day.day_color
    return d


def dict_to_day(d: Dict[str, Any]) -> DayData:
    dots = d.get("dots") or []
    blocks = d.get("timeBlocks") or []
    content = d.get("contentBlocks") or []
    return DayData(
        note=d.get("note") or "",
        dots=[x for x in dots if isinstance(x, int)] if isinstance(dots, list) else [],
        time_blocks=[dict_to_block(b) for b in blocks if isinstance(b, dict)] if isinstance(blocks, list) else [],
        content_blocks=[c for c in content if isinstance(c, dict)] if isinstance(content, list) else [],
        day_color=d.get("dayColor") if isinstance(d.get("dayColor"), int) else None,
    )


def calendar_to_dict(data: CalendarData) -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        month_key: {day_key: day_to_dict(day) for day_key, day in days.items()}
        for month_key, days in data.items()
    }


def dict_to_calendar(raw: Optional[Dict[str, Any]]) -> CalendarData:
    data: CalendarData = {}
    if not isinstance(raw, dict):
        return data

    for month_key, days in raw.items():
        if not isinstance(days, dict):
            logger.debug("Skipping month %s: not a mapping", month_key)
            continue
        month: Dict[str, DayData] = {}
        for day_key, day in days.items():
            if not isinstance(day, dict):
                logger.debug("Skipping day %s/%s: not a mapping", month_key, day_key)
                continue
            month[str(day_key)] = dict_to_day(day)
        data[str(month_key)] = month
    return data
