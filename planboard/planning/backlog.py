"""Backlog ordering and filtering."""

from __future__ import annotations

from typing import Iterable, TypeVar

from .models import GLOBAL, Feature, Priority, Status, System

T = TypeVar("T")

PRIORITY_SCORES: dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

ALL = "All"


def priority_score(priority: Priority) -> int:
    return PRIORITY_SCORES[priority]


def sort_by_priority(features: Iterable[Feature]) -> list[Feature]:
    """Critical first; ties keep their backlog order."""
    return sorted(features, key=lambda f: priority_score(f.priority))


def reorder_list(items: list[T], from_index: int, to_index: int) -> list[T]:
    """Move one item to a new position, returning a new list."""
    result = list(items)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result


def filter_features(
    features: Iterable[Feature],
    status: Status | str = ALL,
    owner_query: str = "",
    system: System | str = ALL,
) -> list[Feature]:
    """Filter by status, owner substring (case-insensitive), and system."""
    needle = owner_query.lower()
    result = []
    for f in features:
        if status != ALL and f.status is not Status(status):
            continue
        if needle not in f.owner.lower():
            continue
        if system not in (ALL, GLOBAL) and f.system is not System(system):
            continue
        result.append(f)
    return result
