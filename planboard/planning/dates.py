"""YYYY-MM-DD date contract shared by every planning entity."""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import date, timedelta
from typing import TypeVar

from .exceptions import MalformedDateError
from .models import Sprint

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

T = TypeVar("T")


def parse_date(text: object) -> date:
    """Parse a YYYY-MM-DD string. Raises MalformedDateError otherwise."""
    if not isinstance(text, str) or not _ISO_DATE.match(text):
        raise MalformedDateError(text)
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise MalformedDateError(text) from None


def is_iso_date(text: object) -> bool:
    try:
        parse_date(text)
    except MalformedDateError:
        return False
    return True


def format_date(value: date) -> str:
    return value.isoformat()


def month_key(value: date) -> str:
    """Sortable YYYY-MM key for the month containing value."""
    return f"{value.year}-{value.month:02d}"


def month_label(key: str) -> str:
    """Short label like 'Jan 26' for a YYYY-MM key."""
    year, month = key.split("-")
    return date(int(year), int(month), 1).strftime("%b %y")


def last_day_of_month(value: date) -> date:
    first_of_next = (value.replace(day=1) + timedelta(days=32)).replace(day=1)
    return first_of_next - timedelta(days=1)


def commit_date_input(entity: T, field_name: str, text: str) -> T:
    """Apply a typed date only once it satisfies the date contract.

    Partial input ("2026-0") leaves the entity as it was.
    """
    if not is_iso_date(text):
        return entity
    return replace(entity, **{field_name: text})


def apply_sprint_start(sprint: Sprint, text: str, length_days: int = 14) -> Sprint:
    """Commit a new sprint start date and move the end date with it."""
    if not is_iso_date(text):
        return sprint
    end = parse_date(text) + timedelta(days=length_days)
    return replace(sprint, start_date=text, end_date=format_date(end))
