"""Domain models for feature and sprint planning."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum


class Priority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class Status(Enum):
    BACKLOG = "Backlog"
    READY = "Ready"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class System(Enum):
    TOM = "TOM"
    EOM = "EOM"
    C3 = "C3"


class LogKind(Enum):
    FEATURE = "feature"
    SPRINT = "sprint"


# Filter value meaning "every system".
GLOBAL = "global"


def new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class SprintAllocation:
    sprint_id: str
    points: int


@dataclass
class Feature:
    id: str
    name: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    status: Status = Status.BACKLOG
    start_date: str = ""
    end_date: str = ""
    estimated_cost: float = 0
    points: int = 0
    owner: str = ""
    programs: list[str] = field(default_factory=list)
    system: System = System.TOM
    jira_number: str = ""
    sprint_allocations: list[SprintAllocation] = field(default_factory=list)


@dataclass
class Sprint:
    id: str
    name: str
    start_date: str
    end_date: str
    target_deployment_date: str = ""
    capacity: int = 0
    system: System = System.TOM
    is_closed: bool = False


@dataclass
class RunRateTable:
    """Monthly run-rate spend keyed year -> month (0-11) -> system.

    Sparse: any cell that was never written reads as zero.
    """

    rates: dict[int, dict[int, dict[System, float]]] = field(default_factory=dict)

    def years(self) -> list[int]:
        return sorted(self.rates)

    def amount(self, year: int, month: int, system: System) -> float:
        return self.rates.get(year, {}).get(month, {}).get(system, 0)

    def total(self, year: int, month: int) -> float:
        return sum(self.amount(year, month, s) for s in System)

    def with_amount(
        self, year: int, month: int, system: System, amount: float
    ) -> RunRateTable:
        if not 0 <= month <= 11:
            raise ValueError(f"Month index out of range: {month}")
        rates = {y: {m: dict(cells) for m, cells in months.items()} for y, months in self.rates.items()}
        month_cells = rates.setdefault(year, {}).setdefault(month, {s: 0 for s in System})
        month_cells[system] = amount
        return RunRateTable(rates=rates)


@dataclass(frozen=True)
class LogEntry:
    id: str
    timestamp: str
    kind: LogKind
    entity_id: str
    entity_name: str
    action: str
    details: str


@dataclass
class PlanningState:
    features: list[Feature] = field(default_factory=list)
    sprints: list[Sprint] = field(default_factory=list)
    run_rates: RunRateTable = field(default_factory=RunRateTable)
    logs: list[LogEntry] = field(default_factory=list)  # newest first

    def get_feature(self, feature_id: str) -> Feature:
        for f in self.features:
            if f.id == feature_id:
                return f
        raise KeyError(f"Feature not found: {feature_id}")

    def get_sprint(self, sprint_id: str) -> Sprint:
        for s in self.sprints:
            if s.id == sprint_id:
                return s
        raise KeyError(f"Sprint not found: {sprint_id}")

    def evolve(self, **changes) -> PlanningState:
        return replace(self, **changes)
