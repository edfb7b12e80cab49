from __future__ import annotations

from datetime import date

import pytest

from staffing_core.constraints import (
    DOUBLE_BOOKED,
    OUTSIDE_WORK_ITEM_RANGE,
    UNKNOWN_WORK_ITEM,
    validate_allocation,
    validate_state,
)
from staffing_core.io import load_dataset
from staffing_core.models import Allocation, Consultant, Project, StaffingState


@pytest.fixture
def state() -> StaffingState:
    return StaffingState(
        consultants=[Consultant(id="C001", name="A", role="Consultant", service_line="Strategy", expertise="")],
        projects=[
            Project(
                id="P001",
                name="Bank",
                client_name="Global Bank Inc.",
                start_date=date(2023, 1, 10),
                end_date=date(2023, 6, 30),
                resources_needed=5,
            )
        ],
    )


def _alloc(aid: str, start: date, end: date, pct: float = 1.0, project: str = "P001") -> Allocation:
    return Allocation(aid, "C001", project, start, end, pct)


class TestValidateAllocation:
    def test_clean_allocation(self, state):
        allocation = _alloc("A001", date(2023, 2, 1), date(2023, 3, 1))
        state.allocations.append(allocation)
        assert validate_allocation(state, allocation) == []

    def test_outside_work_item_range(self, state):
        allocation = _alloc("A001", date(2023, 1, 1), date(2023, 2, 1))
        state.allocations.append(allocation)
        [violation] = validate_allocation(state, allocation)
        assert violation["violation"] == OUTSIDE_WORK_ITEM_RANGE
        assert violation["allocation_id"] == "A001"
        assert "2023-01-10" in violation["detail"]

    def test_double_booked_over_full_time(self, state):
        first = _alloc("A001", date(2023, 2, 1), date(2023, 3, 1), 0.5)
        second = _alloc("A002", date(2023, 2, 15), date(2023, 4, 1), 0.8)
        state.allocations.extend([first, second])
        [violation] = validate_allocation(state, second)
        assert violation["violation"] == DOUBLE_BOOKED
        assert "A001" in violation["detail"]
        assert "130%" in violation["detail"]

    def test_overlap_within_capacity_is_fine(self, state):
        first = _alloc("A001", date(2023, 2, 1), date(2023, 3, 1), 0.5)
        second = _alloc("A002", date(2023, 2, 15), date(2023, 4, 1), 0.5)
        state.allocations.extend([first, second])
        assert validate_allocation(state, second) == []

    def test_unknown_work_item(self, state):
        allocation = _alloc("A001", date(2023, 2, 1), date(2023, 3, 1), project="P404")
        state.allocations.append(allocation)
        assert [v["violation"] for v in validate_allocation(state, allocation)] == [UNKNOWN_WORK_ITEM]


class TestValidateState:
    def test_reports_both_sides_of_double_booking(self, state):
        state.allocations.extend(
            [
                _alloc("A001", date(2023, 2, 1), date(2023, 3, 1)),
                _alloc("A002", date(2023, 2, 15), date(2023, 4, 1)),
            ]
        )
        assert [v["allocation_id"] for v in validate_state(state)] == ["A001", "A002"]

    def test_mock_dataset_is_clean(self):
        assert validate_state(load_dataset()) == []
