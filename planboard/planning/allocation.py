"""Feature-to-sprint allocation rules.

Every function here is pure: features and sprints are never mutated in
place, a changed copy is returned instead. A feature with allocations
derives its start/end dates from its sprints, so callers re-run
``recompute_dates_from_sprints`` after any change to allocation membership,
points, or sprint dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Protocol

from .dates import format_date, parse_date
from .exceptions import (
    DateOrderError,
    MalformedDateError,
    OverAllocationError,
    SprintClosedError,
    SprintOverlapError,
)
from .models import Feature, Sprint, SprintAllocation

logger = logging.getLogger(__name__)


class DateSpan(Protocol):
    start_date: str
    end_date: str


@dataclass
class SprintLoad:
    used_points: int
    capacity: int
    utilization: float


def allocated_points(feature: Feature) -> int:
    """Total points committed across all of a feature's sprints."""
    return sum(a.points for a in feature.sprint_allocations)


def add_allocation(
    feature: Feature, sprint_id: str, points: int | None = None
) -> Feature:
    """Allocate the feature into a sprint.

    Already-allocated sprints are left alone. Without explicit points the new
    allocation takes whatever headroom the feature has left.
    """
    if any(a.sprint_id == sprint_id for a in feature.sprint_allocations):
        return feature
    if points is None:
        points = max(0, feature.points - allocated_points(feature))
    allocations = [*feature.sprint_allocations, SprintAllocation(sprint_id, points)]
    return replace(feature, sprint_allocations=allocations)


def remove_allocation(feature: Feature, sprint_id: str) -> Feature:
    allocations = [a for a in feature.sprint_allocations if a.sprint_id != sprint_id]
    if len(allocations) == len(feature.sprint_allocations):
        return feature
    return replace(feature, sprint_allocations=allocations)


def set_allocation_points(feature: Feature, sprint_id: str, new_points: int) -> Feature:
    """Change the points committed to one sprint.

    Raises OverAllocationError, leaving the feature untouched, when the new
    total across all sprints would exceed the feature's points.
    """
    other = sum(a.points for a in feature.sprint_allocations if a.sprint_id != sprint_id)
    if new_points + other > feature.points:
        logger.debug(
            "Rejected %s pts for %s in sprint %s (other=%s, limit=%s)",
            new_points, feature.id, sprint_id, other, feature.points,
        )
        raise OverAllocationError(feature.name, feature.points, new_points)

    value = max(0, new_points)
    allocations = [
        SprintAllocation(a.sprint_id, value) if a.sprint_id == sprint_id else a
        for a in feature.sprint_allocations
    ]
    return replace(feature, sprint_allocations=allocations)


def recompute_dates_from_sprints(feature: Feature, all_sprints: Iterable[Sprint]) -> Feature:
    """Derive the feature's date range from the sprints it is allocated to.

    Allocations pointing at sprints that no longer exist are ignored. With no
    allocations, or none that resolve, the feature's own dates stand.
    """
    if not feature.sprint_allocations:
        return feature

    allocated_ids = {a.sprint_id for a in feature.sprint_allocations}
    starts = []
    ends = []
    for sprint in all_sprints:
        if sprint.id not in allocated_ids:
            continue
        try:
            starts.append(parse_date(sprint.start_date))
            ends.append(parse_date(sprint.end_date))
        except MalformedDateError:
            logger.warning("Skipping sprint %s with malformed dates", sprint.id)
            continue

    if not starts:
        return feature

    return replace(
        feature,
        start_date=format_date(min(starts)),
        end_date=format_date(max(ends)),
    )


def sprints_overlap(a: DateSpan, b: DateSpan) -> bool:
    """Closed-interval intersection of two date ranges.

    Malformed or inverted ranges never overlap anything.
    """
    try:
        start_a, end_a = parse_date(a.start_date), parse_date(a.end_date)
        start_b, end_b = parse_date(b.start_date), parse_date(b.end_date)
    except MalformedDateError:
        return False
    if start_a > end_a or start_b > end_b:
        return False
    return start_a <= end_b and start_b <= end_a


def validate_sprint_save(draft: Sprint, other_sprints: Iterable[Sprint]) -> None:
    """Check a sprint edit before it is persisted.

    Raises SprintOverlapError, DateOrderError, or MalformedDateError.
    The draft itself is excluded from other_sprints by id.
    """
    conflicts = [
        s.id for s in other_sprints
        if s.id != draft.id and sprints_overlap(draft, s)
    ]
    if conflicts:
        raise SprintOverlapError(draft.id, conflicts)

    if parse_date(draft.start_date) > parse_date(draft.end_date):
        raise DateOrderError(draft.id, draft.start_date, draft.end_date)


def validate_feature_dates(feature: Feature) -> None:
    """Reject an inverted authored date range on a feature."""
    if parse_date(feature.start_date) > parse_date(feature.end_date):
        raise DateOrderError(feature.id, feature.start_date, feature.end_date)


def ensure_sprint_open(sprint: Sprint) -> None:
    if sprint.is_closed:
        raise SprintClosedError(sprint.id)


def cascade_delete_sprint(
    sprint_id: str, all_features: list[Feature], all_sprints: list[Sprint]
) -> list[Feature]:
    """Drop a sprint from every feature allocated to it.

    Affected features have their dates re-derived from the sprints that
    remain. The full feature list is returned in its original order.
    """
    remaining = [s for s in all_sprints if s.id != sprint_id]
    result = []
    for feature in all_features:
        if any(a.sprint_id == sprint_id for a in feature.sprint_allocations):
            feature = recompute_dates_from_sprints(
                remove_allocation(feature, sprint_id), remaining
            )
        result.append(feature)
    return result


def rederive_feature_dates(features: list[Feature], sprints: list[Sprint]) -> list[Feature]:
    """Re-derive dates on every allocated feature, e.g. after a sprint moved."""
    return [recompute_dates_from_sprints(f, sprints) for f in features]


def features_in_sprint(sprint_id: str, features: Iterable[Feature]) -> list[Feature]:
    return [f for f in features if any(a.sprint_id == sprint_id for a in f.sprint_allocations)]


def features_available_for_sprint(sprint_id: str, features: Iterable[Feature]) -> list[Feature]:
    return [f for f in features if not any(a.sprint_id == sprint_id for a in f.sprint_allocations)]


def sprint_load(sprint: Sprint, features: Iterable[Feature]) -> SprintLoad:
    """Points committed to a sprint against its capacity."""
    used = 0
    for f in features:
        for a in f.sprint_allocations:
            if a.sprint_id == sprint.id:
                used += a.points
    utilization = used / sprint.capacity * 100 if sprint.capacity > 0 else 0.0
    return SprintLoad(used_points=used, capacity=sprint.capacity, utilization=utilization)
