"""Business-day counts for capacity planning."""

from __future__ import annotations

import calendar
from typing import Mapping

# Statutory holidays observed in 2026, by 0-indexed month.
CANADIAN_HOLIDAYS_2026: dict[int, list[int]] = {
    0: [1],
    1: [16],
    3: [3],
    4: [18],
    6: [1],
    7: [3],
    8: [7, 30],
    9: [12],
    10: [11],
    11: [25, 28],
}


def canadian_working_days(
    year: int, month: int, holidays: Mapping[int, list[int]] | None = None
) -> int:
    """Weekdays in a month that are not holidays. ``month`` is 0-indexed."""
    if holidays is None:
        holidays = CANADIAN_HOLIDAYS_2026
    month_holidays = set(holidays.get(month, []))
    _, days_in_month = calendar.monthrange(year, month + 1)

    count = 0
    for day in range(1, days_in_month + 1):
        if calendar.weekday(year, month + 1, day) >= 5:
            continue
        if day in month_holidays:
            continue
        count += 1
    return count
