"""Unit tests for planning domain models."""

import pytest

from conftest import make_feature, make_sprint
from planboard.planning.models import (
    Feature,
    LogKind,
    PlanningState,
    Priority,
    RunRateTable,
    Sprint,
    Status,
    System,
    new_id,
)


class TestEnums:
    def test_priority_values(self):
        assert [p.value for p in Priority] == ["Low", "Medium", "High", "Critical"]

    def test_status_values(self):
        assert Status("In Progress") is Status.IN_PROGRESS
        assert Status("On Hold") is Status.ON_HOLD

    def test_system_values(self):
        assert {s.value for s in System} == {"TOM", "EOM", "C3"}

    def test_log_kind_values(self):
        assert LogKind("feature") is LogKind.FEATURE
        assert LogKind("sprint") is LogKind.SPRINT


class TestDefaults:
    def test_feature_defaults(self):
        f = Feature(id="f1", name="Thing")
        assert f.priority is Priority.MEDIUM
        assert f.status is Status.BACKLOG
        assert f.programs == []
        assert f.sprint_allocations == []

    def test_feature_lists_not_shared(self):
        a = Feature(id="a", name="A")
        b = Feature(id="b", name="B")
        a.programs.append("X")
        assert b.programs == []

    def test_sprint_defaults(self):
        s = Sprint(id="s1", name="S", start_date="2026-01-01", end_date="2026-01-14")
        assert s.is_closed is False
        assert s.system is System.TOM

    def test_new_id_unique(self):
        ids = {new_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(len(i) == 9 for i in ids)


class TestRunRateTable:
    def test_absent_cells_read_zero(self):
        table = RunRateTable()
        assert table.amount(2026, 0, System.TOM) == 0
        assert table.total(2026, 0) == 0
        assert table.years() == []

    def test_with_amount_copies(self):
        table = RunRateTable()
        updated = table.with_amount(2026, 3, System.EOM, 500)
        assert table.amount(2026, 3, System.EOM) == 0
        assert updated.amount(2026, 3, System.EOM) == 500

    def test_new_month_zero_initialized(self):
        table = RunRateTable().with_amount(2026, 3, System.EOM, 500)
        assert table.rates[2026][3] == {System.TOM: 0, System.EOM: 500, System.C3: 0}

    def test_total_sums_systems(self):
        table = (
            RunRateTable()
            .with_amount(2027, 11, System.TOM, 10)
            .with_amount(2027, 11, System.C3, 5)
        )
        assert table.total(2027, 11) == 15
        assert table.years() == [2027]

    @pytest.mark.parametrize("month", [-1, 12])
    def test_month_out_of_range(self, month):
        with pytest.raises(ValueError, match="Month index"):
            RunRateTable().with_amount(2026, month, System.TOM, 1)


class TestPlanningState:
    def test_lookup(self):
        state = PlanningState(
            features=[make_feature("f1")],
            sprints=[make_sprint("s1", "2026-03-01", "2026-03-14")],
        )
        assert state.get_feature("f1").name == "Task f1"
        assert state.get_sprint("s1").name == "Sprint s1"

    def test_missing_feature(self):
        with pytest.raises(KeyError, match="Feature not found"):
            PlanningState().get_feature("nope")

    def test_missing_sprint(self):
        with pytest.raises(KeyError, match="Sprint not found"):
            PlanningState().get_sprint("nope")

    def test_evolve_leaves_original(self):
        state = PlanningState(features=[make_feature("f1")])
        evolved = state.evolve(features=[])
        assert len(state.features) == 1
        assert evolved.features == []
