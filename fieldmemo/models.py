"""
Core data models for Field Memo.

Calendar data is nested: month key -> day key -> DayData. Time blocks are
owned by the day they are stored under; recurring occurrences on other days
are computed by fieldmemo.recurrence, never stored.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List, NamedTuple, Optional

from fieldmemo.dates import format_date_string


class Marker(IntEnum):
    """Seven-color system shared by day markers, day themes and block categories."""
    FOCUS = 1
    JOY = 2
    HEALTH = 3
    REST = 4
    SOCIAL = 5
    CREATE = 6
    REVIEW = 7

    @classmethod
    def parse(cls, value: Any) -> "Marker":
        """Accept a code (3, "3") or a name ("health")."""
        if isinstance(value, str) and not value.strip().isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown marker: {value!r}") from None
        return cls(int(value))


class Category(str, Enum):
    FOCUS = "focus"
    JOY = "joy"
    HEALTH = "health"
    REST = "rest"
    SOCIAL = "social"
    CREATE = "create"
    REVIEW = "review"
    UNKNOWN = "unknown"  # legacy values outside the known set

    @classmethod
    def parse(cls, value: Any) -> "Category":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def info(self) -> "CategoryInfo":
        return CATEGORY_INFO[self]

    @property
    def marker(self) -> Optional[Marker]:
        return self.info.marker


class CategoryInfo(NamedTuple):
    label: str
    marker: Optional[Marker]
    description: str


CATEGORY_INFO: Dict[Category, CategoryInfo] = {
    Category.FOCUS: CategoryInfo("Focus", Marker.FOCUS, "Deep work, important projects"),
    Category.JOY: CategoryInfo("Joy", Marker.JOY, "Celebrations, fun, special moments"),
    Category.HEALTH: CategoryInfo("Health", Marker.HEALTH, "Workouts, recovery, wellness"),
    Category.REST: CategoryInfo("Rest", Marker.REST, "Vacation, downtime, recharge"),
    Category.SOCIAL: CategoryInfo("Social", Marker.SOCIAL, "Family, friends, relationships"),
    Category.CREATE: CategoryInfo("Create", Marker.CREATE, "Making, building, creative work"),
    Category.REVIEW: CategoryInfo("Review", Marker.REVIEW, "Planning, reflection, admin"),
    # Neutral styling, no color code
    Category.UNKNOWN: CategoryInfo("Other", None, "Uncategorized legacy block"),
}


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass
class RecurrenceRule:
    """
    Repeat rule attached to a time block.

    frequency and end_date keep the stored strings; they are checked when the
    rule is evaluated so malformed rules survive a load/save round trip.
    """
    frequency: str
    interval: int = 1
    days_of_week: List[int] = field(default_factory=list)  # 0=Sunday .. 6=Saturday
    end_date: Optional[str] = None  # inclusive, YYYY-MM-DD

    @property
    def freq(self) -> RecurrenceFrequency:
        return RecurrenceFrequency(self.frequency)


@dataclass
class TimeBlock:
    id: str
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    title: str = ""
    category: Category = Category.FOCUS
    start_date: Optional[str] = None  # anchor date; None means the day it is stored under
    recurrence: Optional[RecurrenceRule] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


@dataclass
class DayData:
    note: str = ""
    dots: List[int] = field(default_factory=list)
    time_blocks: List[TimeBlock] = field(default_factory=list)
    content_blocks: List[Dict[str, Any]] = field(default_factory=list)  # rich note content, passed through
    day_color: Optional[int] = None

    def is_empty(self) -> bool:
        return self == DayData()


# "{year}-{month0}" -> "{day}" -> DayData
CalendarData = Dict[str, Dict[str, DayData]]


@dataclass(frozen=True)
class BlockOccurrence:
    """A stored block as it appears on one concrete date."""
    block: TimeBlock
    occurrence_date: date
    source_date: date  # the day the block is stored under

    @property
    def occurrence_id(self) -> str:
        if self.block.start_date == format_date_string(self.occurrence_date) or (
            self.block.start_date is None and self.source_date == self.occurrence_date
        ):
            return self.block.id
        return f"{self.block.id}-{format_date_string(self.occurrence_date)}"

    @property
    def is_materialized(self) -> bool:
        """True when this occurrence comes from a recurrence on another day."""
        return self.occurrence_id != self.block.id
