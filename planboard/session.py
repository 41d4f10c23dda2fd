"""Planning session: the single owner of the current state.

Loads once from a store, then every mutation computes a new state with the
pure functions in ``planning.state`` and saves it wholesale. A mutation that
raises never reaches the store.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Iterable

from .adapters.interface import PlanningStore
from .planning import state as mutations
from .planning.dates import apply_sprint_start, commit_date_input
from .planning.exceptions import MalformedDateError
from .planning.models import GLOBAL, Feature, PlanningState, Sprint, System
from .planning.suggestions import new_feature, new_sprint

_FEATURE_DATE_FIELDS = ("start_date", "end_date")


class PlanningSession:
    def __init__(
        self,
        store: PlanningStore,
        active_system: System | str = GLOBAL,
        sprint_length_days: int = 14,
        sprint_capacity: int = 40,
    ):
        self._store = store
        self._state = store.load()
        self.active_system = active_system
        self.sprint_length_days = sprint_length_days
        self.sprint_capacity = sprint_capacity

    @property
    def state(self) -> PlanningState:
        return self._state

    def _commit(self, new_state: PlanningState) -> PlanningState:
        self._store.save(new_state)
        self._state = new_state
        return new_state

    # Filtered views

    def visible_features(self) -> list[Feature]:
        if self.active_system == GLOBAL:
            return list(self._state.features)
        system = System(self.active_system)
        return [f for f in self._state.features if f.system is system]

    def visible_sprints(self) -> list[Sprint]:
        if self.active_system == GLOBAL:
            return list(self._state.sprints)
        system = System(self.active_system)
        return [s for s in self._state.sprints if s.system is system]

    # Features

    def add_feature(self, feature: Feature) -> PlanningState:
        return self._commit(mutations.add_feature(self._state, feature))

    def update_feature(self, feature: Feature) -> PlanningState:
        return self._commit(mutations.update_feature(self._state, feature))

    def delete_feature(self, feature_id: str) -> PlanningState:
        return self._commit(mutations.delete_feature(self._state, feature_id))

    def reorder_features(self, from_index: int, to_index: int) -> PlanningState:
        return self._commit(mutations.reorder_features(self._state, from_index, to_index))

    # Allocations

    def allocate(self, feature_id: str, sprint_id: str, points: int | None = None) -> PlanningState:
        return self._commit(mutations.allocate(self._state, feature_id, sprint_id, points))

    def deallocate(self, feature_id: str, sprint_id: str) -> PlanningState:
        return self._commit(mutations.deallocate(self._state, feature_id, sprint_id))

    def set_points(self, feature_id: str, sprint_id: str, points: int) -> PlanningState:
        return self._commit(mutations.set_points(self._state, feature_id, sprint_id, points))

    # Sprints

    def add_sprint(self, sprint: Sprint) -> PlanningState:
        return self._commit(mutations.add_sprint(self._state, sprint))

    def save_sprint(self, draft: Sprint) -> PlanningState:
        return self._commit(mutations.save_sprint(self._state, draft))

    def toggle_sprint_closed(self, sprint_id: str) -> PlanningState:
        return self._commit(mutations.toggle_sprint_closed(self._state, sprint_id))

    def delete_sprint(self, sprint_id: str) -> PlanningState:
        return self._commit(mutations.delete_sprint(self._state, sprint_id))

    # Reference data

    def set_run_rate(self, year: int, month: int, system: System, amount: float) -> PlanningState:
        return self._commit(mutations.set_run_rate(self._state, year, month, system, amount))

    def admit_suggestions(
        self, records: Iterable[dict[str, Any]], today: date | None = None
    ) -> PlanningState:
        return self._commit(
            mutations.admit_suggestions(
                self._state, records, self.active_system, today or date.today()
            )
        )

    # Drafting

    def add_blank_feature(self, today: date | None = None, name: str | None = None) -> Feature:
        """Add an editable placeholder feature to the end of the backlog."""
        feature = new_feature(self.active_system, today or date.today())
        if name:
            feature = replace(feature, name=name)
        self.add_feature(feature)
        return feature

    def add_blank_sprint(self, start: date | None = None) -> Sprint:
        """Add an open sprint of the configured length and capacity."""
        sprint = new_sprint(
            len(self.visible_sprints()) + 1,
            self.active_system,
            start or date.today(),
            self.sprint_length_days,
            self.sprint_capacity,
        )
        self.add_sprint(sprint)
        return sprint

    def set_sprint_start(self, sprint_id: str, text: str) -> Sprint:
        """Move a sprint to a new start date, keeping the configured length."""
        sprint = self._state.get_sprint(sprint_id)
        moved = apply_sprint_start(sprint, text, self.sprint_length_days)
        if moved is sprint:
            raise MalformedDateError(text)
        self.save_sprint(moved)
        return moved

    def set_feature_date(self, feature_id: str, field_name: str, text: str) -> Feature:
        if field_name not in _FEATURE_DATE_FIELDS:
            raise ValueError(f"Not a feature date field: {field_name}")
        feature = self._state.get_feature(feature_id)
        edited = commit_date_input(feature, field_name, text)
        if edited is feature:
            raise MalformedDateError(text)
        return self.update_feature(edited).get_feature(feature_id)
