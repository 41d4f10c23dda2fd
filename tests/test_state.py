"""Tests for planning state mutations and their audit trail."""

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from conftest import alloc, make_feature, make_sprint
from planboard.planning import state as mutations
from planboard.planning.exceptions import (
    DateOrderError,
    OverAllocationError,
    SprintClosedError,
    SprintOverlapError,
)
from planboard.planning.models import LogKind, PlanningState, System

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def state(march_april_sprints):
    return PlanningState(features=[make_feature("f1")], sprints=march_april_sprints)


class TestFeatureMutations:
    def test_add_feature_logs(self, state):
        new = mutations.add_feature(state, make_feature("f2"), NOW)
        assert [f.id for f in new.features] == ["f1", "f2"]
        entry = new.logs[0]
        assert entry.kind is LogKind.FEATURE
        assert entry.action == "Added Feature"
        assert entry.details == "New feature created."
        assert entry.timestamp == NOW.isoformat()

    def test_add_duplicate_rejected(self, state):
        with pytest.raises(ValueError, match="already exists"):
            mutations.add_feature(state, make_feature("f1"))

    def test_add_inverted_dates_rejected(self, state):
        bad = make_feature("f2", start_date="2026-05-01", end_date="2026-04-01")
        with pytest.raises(DateOrderError):
            mutations.add_feature(state, bad)

    def test_update_logs_diff(self, state):
        edited = replace(state.get_feature("f1"), name="Renamed", points=12)
        new = mutations.update_feature(state, edited)
        assert new.get_feature("f1").name == "Renamed"
        assert new.logs[0].action == "Updated Feature"
        assert "Changed name" in new.logs[0].details
        assert "Changed points" in new.logs[0].details

    def test_update_without_changes_not_logged(self, state):
        new = mutations.update_feature(state, replace(state.get_feature("f1")))
        assert new.logs == []

    def test_update_leaves_input_state(self, state):
        mutations.update_feature(state, replace(state.get_feature("f1"), name="Renamed"))
        assert state.get_feature("f1").name == "Task f1"
        assert state.logs == []

    def test_lowering_points_below_allocations_rejected(self, state):
        state = mutations.allocate(state, "f1", "s1", 6)
        with pytest.raises(OverAllocationError):
            mutations.update_feature(state, replace(state.get_feature("f1"), points=5))

    def test_delete_feature(self, state):
        new = mutations.delete_feature(state, "f1")
        assert new.features == []
        assert new.logs[0].action == "Deleted Feature"
        assert new.logs[0].entity_name == "Task f1"

    def test_reorder(self, state):
        state = mutations.add_feature(state, make_feature("f2"))
        state = mutations.add_feature(state, make_feature("f3"))
        new = mutations.reorder_features(state, 0, 2)
        assert [f.id for f in new.features] == ["f2", "f3", "f1"]


class TestAllocationMutations:
    def test_allocate_derives_dates(self, state):
        new = mutations.allocate(state, "f1", "s1")
        f = new.get_feature("f1")
        assert f.sprint_allocations == [alloc("s1", 10)]
        assert (f.start_date, f.end_date) == ("2026-03-01", "2026-03-14")
        assert "Updated sprint allocations" in new.logs[0].details

    def test_allocate_across_two_sprints(self, state):
        state = mutations.allocate(state, "f1", "s1", 4)
        state = mutations.allocate(state, "f1", "s2")
        f = state.get_feature("f1")
        assert f.sprint_allocations == [alloc("s1", 4), alloc("s2", 6)]
        assert (f.start_date, f.end_date) == ("2026-03-01", "2026-04-14")

    def test_allocate_unknown_sprint(self, state):
        with pytest.raises(KeyError, match="Sprint not found"):
            mutations.allocate(state, "f1", "nope")

    def test_over_allocation_leaves_state_untouched(self, state):
        state = mutations.allocate(state, "f1", "s1", 4)
        state = mutations.allocate(state, "f1", "s2", 4)
        with pytest.raises(OverAllocationError) as exc_info:
            mutations.set_points(state, "f1", "s2", 8)
        assert exc_info.value.limit == 10
        assert state.get_feature("f1").sprint_allocations == [alloc("s1", 4), alloc("s2", 4)]

    def test_set_points(self, state):
        state = mutations.allocate(state, "f1", "s1", 4)
        new = mutations.set_points(state, "f1", "s1", 9)
        assert new.get_feature("f1").sprint_allocations == [alloc("s1", 9)]

    def test_deallocate_keeps_last_dates(self, state):
        state = mutations.allocate(state, "f1", "s1")
        new = mutations.deallocate(state, "f1", "s1")
        f = new.get_feature("f1")
        assert f.sprint_allocations == []
        assert (f.start_date, f.end_date) == ("2026-03-01", "2026-03-14")

    def test_deallocate_dangling_reference(self, state):
        dangling = replace(state.get_feature("f1"), sprint_allocations=[alloc("gone", 2)])
        state = state.evolve(features=[dangling])
        new = mutations.deallocate(state, "f1", "gone")
        assert new.get_feature("f1").sprint_allocations == []


class TestClosedSprints:
    def test_toggle_logs(self, state):
        new = mutations.toggle_sprint_closed(state, "s1", NOW)
        assert new.get_sprint("s1").is_closed is True
        assert new.logs[0].action == "Closed Sprint"
        reopened = mutations.toggle_sprint_closed(new, "s1")
        assert reopened.get_sprint("s1").is_closed is False
        assert reopened.logs[0].action == "Reopened Sprint"

    def test_allocations_kept_when_closed(self, state):
        state = mutations.allocate(state, "f1", "s1", 3)
        new = mutations.toggle_sprint_closed(state, "s1")
        assert new.get_feature("f1").sprint_allocations == [alloc("s1", 3)]

    def test_closed_sprint_rejects_changes(self, state):
        state = mutations.allocate(state, "f1", "s1", 3)
        state = mutations.toggle_sprint_closed(state, "s1")
        with pytest.raises(SprintClosedError):
            mutations.set_points(state, "f1", "s1", 4)
        with pytest.raises(SprintClosedError):
            mutations.deallocate(state, "f1", "s1")
        with pytest.raises(SprintClosedError):
            mutations.allocate(state, "f1", "s1")

    def test_edited_feature_cannot_join_closed_sprint(self, state):
        state = mutations.toggle_sprint_closed(state, "s1")
        with pytest.raises(SprintClosedError):
            mutations.update_feature(state, make_feature("f1", sprint_allocations=[alloc("s1", 5)]))
        assert state.get_feature("f1").sprint_allocations == []

    def test_edited_feature_cannot_repoint_closed_sprint(self, state):
        state = mutations.allocate(state, "f1", "s1", 3)
        state = mutations.toggle_sprint_closed(state, "s1")
        edited = replace(state.get_feature("f1"), sprint_allocations=[alloc("s1", 6)])
        with pytest.raises(SprintClosedError):
            mutations.update_feature(state, edited)

    def test_edited_feature_cannot_leave_closed_sprint(self, state):
        state = mutations.allocate(state, "f1", "s1", 3)
        state = mutations.toggle_sprint_closed(state, "s1")
        edited = replace(state.get_feature("f1"), sprint_allocations=[])
        with pytest.raises(SprintClosedError):
            mutations.update_feature(state, edited)

    def test_other_edits_allowed_while_closed(self, state):
        state = mutations.allocate(state, "f1", "s1", 3)
        state = mutations.allocate(state, "f1", "s2", 2)
        state = mutations.toggle_sprint_closed(state, "s1")
        edited = replace(
            state.get_feature("f1"),
            name="Renamed",
            sprint_allocations=[alloc("s1", 3), alloc("s2", 4)],
        )
        new = mutations.update_feature(state, edited)
        assert new.get_feature("f1").name == "Renamed"
        assert new.get_feature("f1").sprint_allocations == [alloc("s1", 3), alloc("s2", 4)]


class TestSprintMutations:
    def test_add_sprint(self, state):
        new = mutations.add_sprint(state, make_sprint("s3", "2026-05-01", "2026-05-14"))
        assert [s.id for s in new.sprints] == ["s1", "s2", "s3"]
        assert new.logs[0].kind is LogKind.SPRINT
        assert new.logs[0].action == "Added Sprint"

    def test_add_overlapping_sprint_rejected(self, state):
        with pytest.raises(SprintOverlapError) as exc_info:
            mutations.add_sprint(state, make_sprint("s3", "2026-03-14", "2026-03-20"))
        assert exc_info.value.conflicting_ids == ["s1"]

    def test_overlap_only_within_system(self, state):
        other = make_sprint("s3", "2026-03-05", "2026-03-10", system=System.EOM)
        new = mutations.add_sprint(state, other)
        assert len(new.sprints) == 3

    def test_save_sprint_rederives_feature_dates(self, state):
        state = mutations.allocate(state, "f1", "s1")
        moved = replace(state.get_sprint("s1"), start_date="2026-02-15", end_date="2026-02-28")
        new = mutations.save_sprint(state, moved)
        f = new.get_feature("f1")
        assert (f.start_date, f.end_date) == ("2026-02-15", "2026-02-28")
        assert new.logs[0].action == "Updated Sprint"
        assert "Changed start_date" in new.logs[0].details

    def test_save_sprint_overlap_rejected(self, state):
        moved = replace(state.get_sprint("s2"), start_date="2026-03-10")
        with pytest.raises(SprintOverlapError):
            mutations.save_sprint(state, moved)

    def test_save_sprint_inverted_dates(self, state):
        draft = replace(state.get_sprint("s2"), start_date="2026-04-20", end_date="2026-04-15")
        with pytest.raises(DateOrderError):
            mutations.save_sprint(state, draft)

    def test_save_sprint_keeps_its_own_range(self, state):
        draft = replace(state.get_sprint("s1"), name="Renamed")
        new = mutations.save_sprint(state, draft)
        assert new.get_sprint("s1").name == "Renamed"

    def test_delete_cascades(self, state):
        state = mutations.add_feature(state, make_feature("f2"))
        state = mutations.allocate(state, "f1", "s1", 4)
        state = mutations.allocate(state, "f1", "s2", 4)
        state = mutations.allocate(state, "f2", "s1", 2)

        new = mutations.delete_sprint(state, "s1")

        assert [s.id for s in new.sprints] == ["s2"]
        f1 = new.get_feature("f1")
        assert f1.sprint_allocations == [alloc("s2", 4)]
        assert (f1.start_date, f1.end_date) == ("2026-04-01", "2026-04-14")
        f2 = new.get_feature("f2")
        assert f2.sprint_allocations == []
        assert (f2.start_date, f2.end_date) == ("2026-03-01", "2026-03-14")
        assert new.logs[0].action == "Deleted Sprint"


class TestReferenceData:
    def test_set_run_rate(self, state):
        new = mutations.set_run_rate(state, 2026, 0, System.TOM, 2500)
        assert new.run_rates.amount(2026, 0, System.TOM) == 2500
        assert state.run_rates.amount(2026, 0, System.TOM) == 0

    def test_admit_suggestions(self, state):
        records = [{"name": "SSO", "points": 8}, {}]
        new = mutations.admit_suggestions(state, records, System.EOM, date(2026, 3, 2))
        added = new.features[1:]
        assert [f.name for f in added] == ["SSO", "New Feature"]
        assert all(f.system is System.EOM for f in added)
        assert [log.action for log in new.logs] == ["Added Feature", "Added Feature"]
