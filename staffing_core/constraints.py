"""Advisory validation for allocations.

Allocation mutations stay permissive: an allocation may extend past its work
item's dates and a consultant may be booked above 100%. These checks report
such cases so callers can surface them; they never block a mutation.
"""

from __future__ import annotations

from typing import Any

from .models import Allocation, StaffingState
from .time_utils import ranges_overlap

OUTSIDE_WORK_ITEM_RANGE = "outside_work_item_range"
DOUBLE_BOOKED = "double_booked"
UNKNOWN_WORK_ITEM = "unknown_work_item"

VIOLATIONS = frozenset({OUTSIDE_WORK_ITEM_RANGE, DOUBLE_BOOKED, UNKNOWN_WORK_ITEM})


def _violation(allocation: Allocation, violation: str, detail: str) -> dict[str, Any]:
    return {
        "allocation_id": allocation.id,
        "consultant_id": allocation.consultant_id,
        "project_id": allocation.project_id,
        "violation": violation,
        "detail": detail,
    }


def validate_allocation(state: StaffingState, allocation: Allocation) -> list[dict[str, Any]]:
    """Return one violation dict per advisory rule the allocation breaks."""
    violations: list[dict[str, Any]] = []

    work_item = state.find_work_item(allocation.project_id)
    if work_item is None:
        violations.append(
            _violation(allocation, UNKNOWN_WORK_ITEM, f"no project or opportunity {allocation.project_id}")
        )
    elif allocation.start_date < work_item.start_date or allocation.end_date > work_item.end_date:
        violations.append(
            _violation(
                allocation,
                OUTSIDE_WORK_ITEM_RANGE,
                f"{allocation.start_date.isoformat()}..{allocation.end_date.isoformat()} is outside "
                f"{work_item.start_date.isoformat()}..{work_item.end_date.isoformat()}",
            )
        )

    overlapping = [
        other
        for other in state.allocations_for_consultant(allocation.consultant_id)
        if other.id != allocation.id
        and ranges_overlap(allocation.start_date, allocation.end_date, other.start_date, other.end_date)
    ]
    load = allocation.percentage + sum(o.percentage for o in overlapping)
    if overlapping and load > 1.0:
        others = ", ".join(o.id for o in overlapping)
        violations.append(
            _violation(allocation, DOUBLE_BOOKED, f"overlaps {others} for a combined {round(load * 100)}%")
        )

    return violations


def validate_state(state: StaffingState) -> list[dict[str, Any]]:
    violations: list[dict[str, Any]] = []
    for allocation in state.allocations:
        violations.extend(validate_allocation(state, allocation))
    return violations
