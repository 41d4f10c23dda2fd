"""Building complete records from partial or blank input.

Suggested features arrive from an external model with any field possibly
missing. ``feature_from_suggestion`` is the one place those gaps are filled.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from .dates import format_date
from .models import GLOBAL, Feature, Priority, Sprint, Status, System, new_id

logger = logging.getLogger(__name__)

SUGGESTION_DEFAULTS: dict[str, Any] = {
    "name": "New Feature",
    "description": "",
    "priority": Priority.MEDIUM,
    "status": Status.BACKLOG,
    "estimated_cost": 5000,
    "points": 5,
    "owner": "Unassigned",
    "programs": ["New Program"],
    "jira_number": "TBD",
}
SUGGESTION_DURATION_DAYS = 14

# Keys used by the suggestion payload, mapped to Feature attributes.
_PAYLOAD_KEYS = {
    "name": "name",
    "description": "description",
    "priority": "priority",
    "estimatedCost": "estimated_cost",
    "estimated_cost": "estimated_cost",
    "points": "points",
    "owner": "owner",
    "programs": "programs",
    "system": "system",
    "jiraNumber": "jira_number",
    "jira_number": "jira_number",
}


def resolve_system(active_system: System | str) -> System:
    """System for new records created under the active filter."""
    if active_system == GLOBAL:
        return System.TOM
    return System(active_system)


def _enum_or_default(enum_cls, raw, default):
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning("Unknown %s %r in suggestion; using %s", enum_cls.__name__, raw, default)
        return default


def _number_or_default(kind, raw, default, field_name):
    if raw is None:
        return default
    try:
        if isinstance(raw, bool):
            raise TypeError(raw)
        return kind(raw)
    except (TypeError, ValueError):
        logger.warning("Non-numeric %s %r in suggestion; using %s", field_name, raw, default)
        return default


def _programs_or_default(raw, default):
    if raw is None:
        return list(default)
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        programs = [str(p) for p in raw if p not in (None, "")]
        return programs or list(default)
    logger.warning("Unusable programs %r in suggestion; using %s", raw, default)
    return list(default)


def feature_from_suggestion(
    record: dict[str, Any], active_system: System | str, today: date
) -> Feature:
    """Admit a partial feature record, filling every gap with its default.

    The result always has a fresh id, Backlog status and no allocations.
    """
    values = {}
    for key, attr in _PAYLOAD_KEYS.items():
        if key in record and record[key] not in (None, "", []):
            values[attr] = record[key]

    return Feature(
        id=new_id(),
        name=str(values.get("name", SUGGESTION_DEFAULTS["name"])),
        description=values.get("description", SUGGESTION_DEFAULTS["description"]),
        priority=_enum_or_default(Priority, values.get("priority"), SUGGESTION_DEFAULTS["priority"]),
        status=SUGGESTION_DEFAULTS["status"],
        start_date=format_date(today),
        end_date=format_date(today + timedelta(days=SUGGESTION_DURATION_DAYS)),
        estimated_cost=_number_or_default(
            float, values.get("estimated_cost"), SUGGESTION_DEFAULTS["estimated_cost"], "estimated_cost"
        ),
        points=_number_or_default(int, values.get("points"), SUGGESTION_DEFAULTS["points"], "points"),
        owner=str(values.get("owner", SUGGESTION_DEFAULTS["owner"])),
        programs=_programs_or_default(values.get("programs"), SUGGESTION_DEFAULTS["programs"]),
        system=_enum_or_default(System, values.get("system"), resolve_system(active_system)),
        jira_number=str(values.get("jira_number", SUGGESTION_DEFAULTS["jira_number"])),
        sprint_allocations=[],
    )


def new_feature(active_system: System | str, today: date, duration_days: int = 7) -> Feature:
    """Blank backlog entry ready for editing."""
    return Feature(
        id=new_id(),
        name="Untitled Feature",
        priority=Priority.MEDIUM,
        status=Status.BACKLOG,
        start_date=format_date(today),
        end_date=format_date(today + timedelta(days=duration_days)),
        estimated_cost=1000,
        points=1,
        system=resolve_system(active_system),
    )


def new_sprint(
    index: int,
    active_system: System | str,
    start: date,
    length_days: int = 14,
    capacity: int = 40,
) -> Sprint:
    """Open sprint named after its position, deploying the day after it ends."""
    end = start + timedelta(days=length_days - 1)
    return Sprint(
        id=new_id(),
        name=f"Sprint {index}",
        start_date=format_date(start),
        end_date=format_date(end),
        target_deployment_date=format_date(end + timedelta(days=1)),
        capacity=capacity,
        system=resolve_system(active_system),
        is_closed=False,
    )
