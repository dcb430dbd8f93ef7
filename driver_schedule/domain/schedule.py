from __future__ import annotations

from typing import Protocol

HOUR_MIN = 1
HOUR_MAX = 24
DAY_MIN = 1
DAY_MAX = 7
WEEK_MIN = 1
WEEK_MAX = 52

# 1 = Sunday
DAY_NAMES: dict[int, str] = {
    1: "Sunday",
    2: "Monday",
    3: "Tuesday",
    4: "Wednesday",
    5: "Thursday",
    6: "Friday",
    7: "Saturday",
}


class Slot(Protocol):
    start: int
    end: int


def overlaps(a: Slot, b: Slot) -> bool:
    """Half-open interval overlap: touching boundaries do not overlap."""
    return a.start < b.end and b.start < a.end


def hour_in_range(value: int) -> bool:
    return HOUR_MIN <= value <= HOUR_MAX


def day_in_range(value: int) -> bool:
    return DAY_MIN <= value <= DAY_MAX


def week_in_range(value: int) -> bool:
    return WEEK_MIN <= value <= WEEK_MAX


def shift_week(week: int, offset: int) -> int:
    span = WEEK_MAX - WEEK_MIN + 1
    return ((week - WEEK_MIN + offset) % span) + WEEK_MIN


def hours_to_time_string(hour: int) -> str:
    return f"{hour:02d}:00"


def day_name(day: int) -> str:
    return DAY_NAMES.get(day, "")
