"""Plain-dict codecs for planning entities."""

from __future__ import annotations

from typing import Any

from ..planning.models import (
    Feature,
    LogEntry,
    LogKind,
    Priority,
    RunRateTable,
    Sprint,
    SprintAllocation,
    Status,
    System,
)


def feature_to_dict(feature: Feature) -> dict[str, Any]:
    return {
        "id": feature.id,
        "name": feature.name,
        "description": feature.description,
        "priority": feature.priority.value,
        "status": feature.status.value,
        "start_date": feature.start_date,
        "end_date": feature.end_date,
        "estimated_cost": feature.estimated_cost,
        "points": feature.points,
        "owner": feature.owner,
        "programs": list(feature.programs),
        "system": feature.system.value,
        "jira_number": feature.jira_number,
        "sprint_allocations": [
            {"sprint_id": a.sprint_id, "points": a.points}
            for a in feature.sprint_allocations
        ],
    }


def feature_from_dict(data: dict[str, Any]) -> Feature:
    return Feature(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description", ""),
        priority=Priority(data.get("priority", Priority.MEDIUM.value)),
        status=Status(data.get("status", Status.BACKLOG.value)),
        start_date=str(data.get("start_date", "")),
        end_date=str(data.get("end_date", "")),
        estimated_cost=data.get("estimated_cost", 0),
        points=data.get("points", 0),
        owner=data.get("owner", ""),
        programs=list(data.get("programs") or []),
        system=System(data.get("system", System.TOM.value)),
        jira_number=data.get("jira_number", ""),
        sprint_allocations=[
            SprintAllocation(sprint_id=str(a["sprint_id"]), points=a["points"])
            for a in data.get("sprint_allocations") or []
        ],
    )


def sprint_to_dict(sprint: Sprint) -> dict[str, Any]:
    return {
        "id": sprint.id,
        "name": sprint.name,
        "start_date": sprint.start_date,
        "end_date": sprint.end_date,
        "target_deployment_date": sprint.target_deployment_date,
        "capacity": sprint.capacity,
        "system": sprint.system.value,
        "is_closed": sprint.is_closed,
    }


def sprint_from_dict(data: dict[str, Any]) -> Sprint:
    return Sprint(
        id=str(data["id"]),
        name=data["name"],
        start_date=str(data["start_date"]),
        end_date=str(data["end_date"]),
        target_deployment_date=str(data.get("target_deployment_date", "")),
        capacity=data.get("capacity", 0),
        system=System(data.get("system", System.TOM.value)),
        is_closed=bool(data.get("is_closed", False)),
    )


def run_rates_to_dict(table: RunRateTable) -> dict[int, dict[int, dict[str, float]]]:
    return {
        year: {
            month: {system.value: amount for system, amount in cells.items()}
            for month, cells in months.items()
        }
        for year, months in table.rates.items()
    }


def run_rates_from_dict(data: dict | None) -> RunRateTable:
    rates: dict[int, dict[int, dict[System, float]]] = {}
    for year, months in (data or {}).items():
        for month, cells in (months or {}).items():
            rates.setdefault(int(year), {})[int(month)] = {
                System(system): amount for system, amount in (cells or {}).items()
            }
    return RunRateTable(rates=rates)


def log_to_dict(entry: LogEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "timestamp": entry.timestamp,
        "kind": entry.kind.value,
        "entity_id": entry.entity_id,
        "entity_name": entry.entity_name,
        "action": entry.action,
        "details": entry.details,
    }


def log_from_dict(data: dict[str, Any]) -> LogEntry:
    return LogEntry(
        id=str(data["id"]),
        timestamp=str(data["timestamp"]),
        kind=LogKind(data["kind"]),
        entity_id=str(data["entity_id"]),
        entity_name=data.get("entity_name", ""),
        action=data.get("action", ""),
        details=data.get("details", ""),
    )
