"""Month axis and date positioning for the calendar view."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .dates import last_day_of_month, parse_date
from .exceptions import MalformedDateError
from .models import Feature


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


def _next_month(value: date) -> date:
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def timeline_months(
    features: Iterable[Feature], range_override: DateRange | None = None
) -> list[date]:
    """First-of-month anchors covering the range, both ends inclusive.

    Without an override the range spans every feature date. An empty
    feature list gives an empty timeline.
    """
    if range_override is not None:
        lo, hi = range_override.start, range_override.end
    else:
        dates = []
        for f in features:
            for text in (f.start_date, f.end_date):
                try:
                    dates.append(parse_date(text))
                except MalformedDateError:
                    continue
        if not dates:
            return []
        lo, hi = min(dates), max(dates)

    months = []
    current = lo.replace(day=1)
    limit = hi.replace(day=1)
    while current <= limit:
        months.append(current)
        current = _next_month(current)
    return months


def date_position(
    date_str: str, months: list[date], range_override: DateRange | None = None
) -> float:
    """Percentage offset of a date along the timeline, clamped to [0, 100]."""
    if not months:
        return 0.0
    try:
        value = parse_date(date_str)
    except MalformedDateError:
        return 0.0

    if range_override is not None:
        lo, hi = range_override.start, range_override.end
    else:
        lo, hi = months[0], last_day_of_month(months[-1])

    span = (hi - lo).days
    if span <= 0:
        return 0.0
    position = (value - lo).days / span * 100
    return max(0.0, min(100.0, position))


def date_range_presets(today: date) -> dict[str, DateRange]:
    """Current month, quarter, and year around today."""
    quarter_start = date(today.year, (today.month - 1) // 3 * 3 + 1, 1)
    quarter_end = last_day_of_month(date(today.year, quarter_start.month + 2, 1))
    return {
        "month": DateRange(today.replace(day=1), last_day_of_month(today)),
        "quarter": DateRange(quarter_start, quarter_end),
        "year": DateRange(date(today.year, 1, 1), date(today.year, 12, 31)),
    }


def features_in_range(features: Iterable[Feature], date_range: DateRange) -> list[Feature]:
    """Features whose span touches the range."""
    visible = []
    for f in features:
        try:
            start, end = parse_date(f.start_date), parse_date(f.end_date)
        except MalformedDateError:
            continue
        if end < date_range.start or start > date_range.end:
            continue
        visible.append(f)
    return visible
