"""Audit log entries and change descriptions."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from .models import LogEntry, LogKind, new_id

NO_CHANGES = "No identifiable changes"

_SKIPPED_FIELDS = {"id", "sprint_allocations"}


def _display(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple)):
        return ",".join(_display(v) for v in value)
    return str(value)


def diff_description(old, new) -> str:
    """Describe field-level changes between two versions of an entity.

    Allocation lists are reported with a single generic line rather than
    itemized. Returns NO_CHANGES when nothing differs.
    """
    changes = []
    for f in fields(new):
        if f.name in _SKIPPED_FIELDS:
            continue
        before = getattr(old, f.name, None)
        after = getattr(new, f.name)
        if before != after:
            changes.append(f'Changed {f.name} from "{_display(before)}" to "{_display(after)}"')

    if hasattr(new, "sprint_allocations"):
        if getattr(old, "sprint_allocations", None) != new.sprint_allocations:
            changes.append("Updated sprint allocations")

    return "; ".join(changes) if changes else NO_CHANGES


def new_log_entry(
    kind: LogKind,
    entity_id: str,
    entity_name: str,
    action: str,
    details: str,
    now: datetime | None = None,
) -> LogEntry:
    now = now or datetime.now(timezone.utc)
    return LogEntry(
        id=new_id(),
        timestamp=now.isoformat(),
        kind=kind,
        entity_id=entity_id,
        entity_name=entity_name,
        action=action,
        details=details,
    )


def filter_logs(
    logs: Iterable[LogEntry], query: str = "", kind: LogKind | str = "All"
) -> list[LogEntry]:
    """Search logs by text and entity kind, newest first."""
    if isinstance(kind, str) and kind != "All":
        kind = LogKind(kind.lower())
    needle = query.lower()
    matches = []
    for log in logs:
        if kind != "All" and log.kind is not kind:
            continue
        haystacks = (log.entity_name, log.action, log.details)
        if any(needle in h.lower() for h in haystacks):
            matches.append(log)
    return sorted(matches, key=lambda log: log.timestamp, reverse=True)
