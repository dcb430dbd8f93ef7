from __future__ import annotations

from types import SimpleNamespace

from driver_schedule.domain.schedule import (
    day_name,
    hours_to_time_string,
    overlaps,
    shift_week,
)


def _slot(start: int, end: int) -> SimpleNamespace:
    return SimpleNamespace(start=start, end=end)


def test_overlap_is_symmetric() -> None:
    for a_start in range(1, 24):
        for a_end in range(a_start + 1, 25):
            for b_start, b_end in [(1, 3), (5, 9), (9, 12), (11, 14), (12, 14), (20, 24)]:
                a = _slot(a_start, a_end)
                b = _slot(b_start, b_end)
                assert overlaps(a, b) == overlaps(b, a)


def test_touching_slots_do_not_overlap() -> None:
    assert not overlaps(_slot(9, 12), _slot(12, 14))
    assert not overlaps(_slot(12, 14), _slot(9, 12))
    assert overlaps(_slot(9, 12), _slot(11, 14))
    assert overlaps(_slot(9, 12), _slot(10, 11))
    assert overlaps(_slot(9, 12), _slot(9, 12))


def test_shift_week_wraps_around_the_year() -> None:
    assert shift_week(1, -1) == 52
    assert shift_week(52, 1) == 1
    assert shift_week(10, 1) == 11
    assert shift_week(10, -1) == 9
    assert shift_week(3, 104) == 3


def test_hour_labels_and_day_names() -> None:
    assert hours_to_time_string(1) == "01:00"
    assert hours_to_time_string(24) == "24:00"
    assert day_name(1) == "Sunday"
    assert day_name(7) == "Saturday"
    assert day_name(8) == ""
