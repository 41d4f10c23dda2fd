"""Planning state mutations.

Each function takes the current PlanningState and returns a new one; the
input state is never modified. Validation failures raise before any new
state is built, so a rejected edit leaves the caller holding exactly what it
had. Mutations that change a feature or sprint also prepend an audit entry.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable

from . import allocation
from .audit import NO_CHANGES, diff_description, new_log_entry
from .backlog import reorder_list
from .exceptions import OverAllocationError
from .models import Feature, LogKind, PlanningState, Sprint, System
from .suggestions import feature_from_suggestion

logger = logging.getLogger(__name__)


def _log(
    state: PlanningState,
    kind: LogKind,
    entity_id: str,
    entity_name: str,
    action: str,
    details: str,
    now: datetime | None,
) -> list:
    entry = new_log_entry(kind, entity_id, entity_name, action, details, now)
    return [entry, *state.logs]


def _checked_feature(feature: Feature, sprints: list[Sprint]) -> Feature:
    """Enforce feature invariants, deriving dates when allocated."""
    total = allocation.allocated_points(feature)
    if total > feature.points:
        raise OverAllocationError(feature.name, feature.points, total)
    if feature.sprint_allocations:
        return allocation.recompute_dates_from_sprints(feature, sprints)
    allocation.validate_feature_dates(feature)
    return feature


def _changed_sprint_ids(original: Feature, updated: Feature) -> set[str]:
    """Sprints whose allocation was added, removed, or repointed by an edit."""
    before = {a.sprint_id: a.points for a in original.sprint_allocations}
    after = {a.sprint_id: a.points for a in updated.sprint_allocations}
    return {sid for sid in before.keys() | after.keys() if before.get(sid) != after.get(sid)}


def _ensure_allocation_edits_open(
    original: Feature, updated: Feature, sprints: list[Sprint]
) -> None:
    changed = _changed_sprint_ids(original, updated)
    for sprint in sprints:
        if sprint.id in changed:
            allocation.ensure_sprint_open(sprint)


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


def add_feature(
    state: PlanningState, feature: Feature, now: datetime | None = None
) -> PlanningState:
    if any(f.id == feature.id for f in state.features):
        raise ValueError(f"Feature already exists: {feature.id}")
    feature = _checked_feature(feature, state.sprints)
    logger.info("Added feature %s (%s)", feature.id, feature.name)
    return state.evolve(
        features=[*state.features, feature],
        logs=_log(state, LogKind.FEATURE, feature.id, feature.name,
                  "Added Feature", "New feature created.", now),
    )


def update_feature(
    state: PlanningState, updated: Feature, now: datetime | None = None
) -> PlanningState:
    """Replace a feature with an edited copy, logging what changed."""
    original = state.get_feature(updated.id)
    _ensure_allocation_edits_open(original, updated, state.sprints)
    updated = _checked_feature(updated, state.sprints)

    details = diff_description(original, updated)
    logs = state.logs
    if details != NO_CHANGES:
        logger.info("Updated feature %s: %s", updated.id, details)
        logs = _log(state, LogKind.FEATURE, updated.id, updated.name,
                    "Updated Feature", details, now)
    return state.evolve(
        features=[updated if f.id == updated.id else f for f in state.features],
        logs=logs,
    )


def delete_feature(
    state: PlanningState, feature_id: str, now: datetime | None = None
) -> PlanningState:
    original = state.get_feature(feature_id)
    logger.info("Deleted feature %s", feature_id)
    return state.evolve(
        features=[f for f in state.features if f.id != feature_id],
        logs=_log(state, LogKind.FEATURE, feature_id, original.name,
                  "Deleted Feature", "Feature removed from backlog.", now),
    )


def reorder_features(state: PlanningState, from_index: int, to_index: int) -> PlanningState:
    return state.evolve(features=reorder_list(state.features, from_index, to_index))


# ---------------------------------------------------------------------------
# Allocations
# ---------------------------------------------------------------------------


def allocate(
    state: PlanningState,
    feature_id: str,
    sprint_id: str,
    points: int | None = None,
    now: datetime | None = None,
) -> PlanningState:
    """Allocate a feature into an open sprint and re-derive its dates."""
    feature = state.get_feature(feature_id)
    allocation.ensure_sprint_open(state.get_sprint(sprint_id))
    updated = allocation.add_allocation(feature, sprint_id, points)
    return update_feature(state, updated, now)


def deallocate(
    state: PlanningState, feature_id: str, sprint_id: str, now: datetime | None = None
) -> PlanningState:
    feature = state.get_feature(feature_id)
    try:
        sprint = state.get_sprint(sprint_id)
    except KeyError:
        sprint = None  # dangling reference; removing it is always allowed
    if sprint is not None:
        allocation.ensure_sprint_open(sprint)
    updated = allocation.remove_allocation(feature, sprint_id)
    return update_feature(state, updated, now)


def set_points(
    state: PlanningState,
    feature_id: str,
    sprint_id: str,
    points: int,
    now: datetime | None = None,
) -> PlanningState:
    feature = state.get_feature(feature_id)
    allocation.ensure_sprint_open(state.get_sprint(sprint_id))
    updated = allocation.set_allocation_points(feature, sprint_id, points)
    return update_feature(state, updated, now)


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------


def _scope(sprints: Iterable[Sprint], system: System, exclude_id: str) -> list[Sprint]:
    """Sprints sharing a planning scope (system) with the given one."""
    return [s for s in sprints if s.system is system and s.id != exclude_id]


def add_sprint(
    state: PlanningState, sprint: Sprint, now: datetime | None = None
) -> PlanningState:
    if any(s.id == sprint.id for s in state.sprints):
        raise ValueError(f"Sprint already exists: {sprint.id}")
    allocation.validate_sprint_save(sprint, _scope(state.sprints, sprint.system, sprint.id))
    logger.info("Added sprint %s (%s)", sprint.id, sprint.name)
    return state.evolve(
        sprints=[*state.sprints, sprint],
        logs=_log(state, LogKind.SPRINT, sprint.id, sprint.name,
                  "Added Sprint", "New sprint created.", now),
    )


def save_sprint(
    state: PlanningState, draft: Sprint, now: datetime | None = None
) -> PlanningState:
    """Persist an edited sprint after overlap and date-order checks.

    Features allocated to the sprint have their dates re-derived, since the
    sprint's range may have moved.
    """
    original = state.get_sprint(draft.id)
    allocation.validate_sprint_save(draft, _scope(state.sprints, draft.system, draft.id))

    sprints = [draft if s.id == draft.id else s for s in state.sprints]
    affected = {f.id for f in allocation.features_in_sprint(draft.id, state.features)}
    features = [
        allocation.recompute_dates_from_sprints(f, sprints) if f.id in affected else f
        for f in state.features
    ]

    details = diff_description(original, draft)
    logs = state.logs
    if details != NO_CHANGES:
        logger.info("Updated sprint %s: %s", draft.id, details)
        logs = _log(state, LogKind.SPRINT, draft.id, draft.name,
                    "Updated Sprint", details, now)
    return state.evolve(sprints=sprints, features=features, logs=logs)


def toggle_sprint_closed(
    state: PlanningState, sprint_id: str, now: datetime | None = None
) -> PlanningState:
    """Open or close a sprint. Stored allocations are kept either way."""
    sprint = state.get_sprint(sprint_id)
    toggled = replace(sprint, is_closed=not sprint.is_closed)
    action = "Closed Sprint" if toggled.is_closed else "Reopened Sprint"
    logger.info("%s %s", action, sprint_id)
    return state.evolve(
        sprints=[toggled if s.id == sprint_id else s for s in state.sprints],
        logs=_log(state, LogKind.SPRINT, sprint_id, sprint.name, action,
                  diff_description(sprint, toggled), now),
    )


def delete_sprint(
    state: PlanningState, sprint_id: str, now: datetime | None = None
) -> PlanningState:
    """Remove a sprint and every allocation that references it, as one batch."""
    original = state.get_sprint(sprint_id)
    features = allocation.cascade_delete_sprint(sprint_id, state.features, state.sprints)
    logger.info("Deleted sprint %s", sprint_id)
    return state.evolve(
        sprints=[s for s in state.sprints if s.id != sprint_id],
        features=features,
        logs=_log(state, LogKind.SPRINT, sprint_id, original.name,
                  "Deleted Sprint", "Sprint removed.", now),
    )


# ---------------------------------------------------------------------------
# Reference data and suggestions
# ---------------------------------------------------------------------------


def set_run_rate(
    state: PlanningState, year: int, month: int, system: System, amount: float
) -> PlanningState:
    return state.evolve(run_rates=state.run_rates.with_amount(year, month, system, amount))


def admit_suggestions(
    state: PlanningState,
    records: Iterable[dict[str, Any]],
    active_system: System | str,
    today: date,
    now: datetime | None = None,
) -> PlanningState:
    """Add suggested features to the backlog with documented defaults."""
    for record in records:
        state = add_feature(state, feature_from_suggestion(record, active_system, today), now)
    return state
