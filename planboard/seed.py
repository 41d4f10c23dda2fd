"""Sample planning data for new workspaces and demos."""

from __future__ import annotations

from .planning.allocation import rederive_feature_dates
from .planning.models import (
    Feature,
    PlanningState,
    Priority,
    RunRateTable,
    Sprint,
    SprintAllocation,
    Status,
    System,
)

_QUARTERLY_RATES = [
    # (months, EOM, TOM, C3)
    ((0, 1), 25000, 30000, 15000),
    ((2, 3), 28000, 32000, 18000),
    ((4, 5, 6, 7), 30000, 35000, 20000),
    ((8, 9), 32000, 38000, 22000),
    ((10, 11), 35000, 40000, 25000),
]


def sample_sprints() -> list[Sprint]:
    return [
        Sprint(
            id="s1",
            name="Sprint 1: Foundation",
            start_date="2026-03-01",
            end_date="2026-03-14",
            target_deployment_date="2026-03-15",
            capacity=40,
            system=System.TOM,
        ),
        Sprint(
            id="s2",
            name="Sprint 2: Core Auth",
            start_date="2026-03-15",
            end_date="2026-03-28",
            target_deployment_date="2026-03-29",
            capacity=45,
            system=System.TOM,
        ),
    ]


def sample_features() -> list[Feature]:
    return [
        Feature(
            id="f1",
            name="Authentication System",
            description="Implement OAuth2 and multi-factor authentication.",
            priority=Priority.CRITICAL,
            status=Status.IN_PROGRESS,
            start_date="2026-03-01",
            end_date="2026-04-15",
            estimated_cost=15000,
            points=8,
            owner="Alex Chen",
            programs=["Security Foundation"],
            system=System.TOM,
            jira_number="SEC-101",
            sprint_allocations=[SprintAllocation("s1", 4), SprintAllocation("s2", 4)],
        ),
        Feature(
            id="f2",
            name="Dashboard UI Revamp",
            description="Modernize the main user interface with responsive layouts.",
            priority=Priority.HIGH,
            status=Status.BACKLOG,
            start_date="2026-04-16",
            end_date="2026-05-30",
            estimated_cost=8000,
            points=5,
            owner="Sarah Miller",
            programs=["User Experience"],
            system=System.EOM,
            jira_number="UX-442",
        ),
        Feature(
            id="f3",
            name="Payment Gateway Integration",
            description="Support for Stripe, PayPal and Apple Pay.",
            priority=Priority.HIGH,
            status=Status.COMPLETED,
            start_date="2026-01-05",
            end_date="2026-02-15",
            estimated_cost=12000,
            points=13,
            owner="James Wilson",
            programs=["Commerce Platform"],
            system=System.C3,
            jira_number="BILL-89",
        ),
        Feature(
            id="f4",
            name="AI Content Assistant",
            description="Leverage LLMs for automated content generation.",
            priority=Priority.MEDIUM,
            status=Status.ON_HOLD,
            start_date="2026-07-01",
            end_date="2026-08-31",
            estimated_cost=25000,
            points=21,
            owner="Elena Rodriguez",
            programs=["Intelligence Hub"],
            system=System.TOM,
            jira_number="AI-22",
        ),
    ]


def sample_run_rates(year: int = 2026) -> RunRateTable:
    table = RunRateTable()
    for months, eom, tom, c3 in _QUARTERLY_RATES:
        for month in months:
            table = table.with_amount(year, month, System.EOM, eom)
            table = table.with_amount(year, month, System.TOM, tom)
            table = table.with_amount(year, month, System.C3, c3)
    return table


def sample_state() -> PlanningState:
    sprints = sample_sprints()
    return PlanningState(
        features=rederive_feature_dates(sample_features(), sprints),
        sprints=sprints,
        run_rates=sample_run_rates(),
    )
