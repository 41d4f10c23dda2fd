"""Shared test configuration."""

from __future__ import annotations

import pytest

from planboard.planning.models import (
    Feature,
    Priority,
    Sprint,
    SprintAllocation,
    Status,
    System,
)


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run slow SDK tests"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_feature(id: str = "f1", **overrides) -> Feature:
    values = dict(
        name=f"Task {id}",
        description="Desc",
        priority=Priority.LOW,
        status=Status.BACKLOG,
        start_date="2026-01-01",
        end_date="2026-01-31",
        estimated_cost=1000,
        points=10,
        owner="John Doe",
        programs=["Prog A"],
        system=System.TOM,
        jira_number="J-1",
        sprint_allocations=[],
    )
    values.update(overrides)
    return Feature(id=id, **values)


def make_sprint(id: str, start: str, end: str, **overrides) -> Sprint:
    values = dict(
        name=f"Sprint {id}",
        target_deployment_date=end,
        capacity=40,
        system=System.TOM,
    )
    values.update(overrides)
    return Sprint(id=id, start_date=start, end_date=end, **values)


def alloc(sprint_id: str, points: int) -> SprintAllocation:
    return SprintAllocation(sprint_id, points)


@pytest.fixture
def two_features():
    """A January feature and a February feature."""
    return [
        make_feature("f1"),
        make_feature(
            "f2",
            name="Task 2",
            priority=Priority.CRITICAL,
            status=Status.COMPLETED,
            start_date="2026-02-01",
            end_date="2026-02-28",
            estimated_cost=5000,
            points=5,
            owner="Jane Smith",
            programs=["Prog B"],
            system=System.EOM,
        ),
    ]


@pytest.fixture
def march_april_sprints():
    return [
        make_sprint("s1", "2026-03-01", "2026-03-14"),
        make_sprint("s2", "2026-04-01", "2026-04-14"),
    ]
