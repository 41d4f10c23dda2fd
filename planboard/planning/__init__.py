from .exceptions import (
    DateOrderError,
    MalformedDateError,
    OverAllocationError,
    PlanningError,
    SprintClosedError,
    SprintOverlapError,
)
from .models import (
    GLOBAL,
    Feature,
    LogEntry,
    LogKind,
    PlanningState,
    Priority,
    RunRateTable,
    Sprint,
    SprintAllocation,
    Status,
    System,
)

__all__ = [
    "Feature",
    "Sprint",
    "SprintAllocation",
    "RunRateTable",
    "LogEntry",
    "LogKind",
    "PlanningState",
    "Priority",
    "Status",
    "System",
    "GLOBAL",
    "PlanningError",
    "OverAllocationError",
    "SprintOverlapError",
    "DateOrderError",
    "MalformedDateError",
    "SprintClosedError",
]
