from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .models import (
    ALLOCATED,
    BENCHED,
    NEEDS_RESOURCES,
    Allocation,
    Consultant,
    Notice,
    PipelineOpportunity,
    Project,
    StaffingState,
    WorkItem,
    is_pipeline,
    next_id,
    parse_date,
)

logger = logging.getLogger(__name__)


@dataclass
class AutoAllocationResult:
    created: list[Allocation] = field(default_factory=list)
    notice: Notice | None = None
    ok: bool = True

    @property
    def count(self) -> int:
        return len(self.created)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "count": self.count,
            "created": [a.to_dict() for a in self.created],
            "notice": self.notice.to_dict() if self.notice else None,
        }


def benched_consultants(state: StaffingState) -> list[Consultant]:
    return [c for c in state.consultants if c.status == BENCHED]


def work_items_needing_resources(state: StaffingState) -> list[WorkItem]:
    """Under-staffed projects first, then pipeline opportunities with open needs."""
    projects: list[WorkItem] = [p for p in state.projects if p.staffing_status == NEEDS_RESOURCES]
    pipeline: list[WorkItem] = [o for o in state.pipeline if o.resources_needed > 0]
    return projects + pipeline


def _next_allocation_id(state: StaffingState) -> str:
    # Released allocations leave gaps; count past the highest id still in use.
    highest = max((int(a.id[1:]) for a in state.allocations if a.id[1:].isdigit()), default=0)
    return next_id("A", highest)


def _assign(
    state: StaffingState,
    consultant: Consultant,
    work_item: WorkItem,
    *,
    start_date: date,
    end_date: date,
    percentage: float,
) -> Allocation:
    allocation = Allocation(
        id=_next_allocation_id(state),
        consultant_id=consultant.id,
        project_id=work_item.id,
        start_date=start_date,
        end_date=end_date,
        percentage=percentage,
    )
    consultant.status = ALLOCATED
    consultant.current_project = work_item.id

    if is_pipeline(work_item):
        work_item.resources_needed = max(0, work_item.resources_needed - 1)
    else:
        work_item.resources_assigned += 1
        work_item.refresh_staffing_status()

    state.allocations.append(allocation)
    return allocation


def auto_allocate(state: StaffingState) -> AutoAllocationResult:
    """Pair benched consultants with under-staffed work items by list position.

    Element ``i`` of the bench goes to element ``i`` of the work items, up to
    the shorter of the two lists. Every pair is committed as it is made.
    """
    resources = benched_consultants(state)
    work_items = work_items_needing_resources(state)

    if not resources or not work_items:
        logger.info(
            "auto-allocation skipped: %d benched, %d work items needing resources",
            len(resources),
            len(work_items),
        )
        return AutoAllocationResult(
            ok=False,
            notice=Notice(
                title="Auto-allocation Failed",
                description="No consultants on bench or no projects needing resources.",
                variant="destructive",
            ),
        )

    created = []
    for consultant, work_item in zip(resources, work_items):
        created.append(
            _assign(
                state,
                consultant,
                work_item,
                start_date=work_item.start_date,
                end_date=work_item.end_date,
                percentage=1.0,
            )
        )

    logger.info("auto-allocation created %d allocations", len(created))
    return AutoAllocationResult(
        created=created,
        notice=Notice(
            title="Auto-allocation Complete",
            description=f"Successfully allocated {len(created)} consultants to projects.",
        ),
    )


def allocate_consultant(
    state: StaffingState,
    consultant_id: str,
    project_id: str,
    *,
    start_date: date | str,
    end_date: date | str,
    percentage: float = 1.0,
) -> Allocation:
    """Allocate one consultant to a project or pipeline opportunity."""
    consultant = state.consultant(consultant_id)
    work_item = state.work_item(project_id)

    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None:
        raise ValueError("start_date and end_date are required")
    if start > end:
        raise ValueError("start date is after end date")
    if not 0 <= percentage <= 1:
        raise ValueError(f"percentage must be within [0, 1], got {percentage}")

    return _assign(state, consultant, work_item, start_date=start, end_date=end, percentage=percentage)


def release_allocation(state: StaffingState, allocation_id: str) -> Allocation:
    """Remove an allocation and bench the consultant once nothing references them."""
    allocation = next((a for a in state.allocations if a.id == allocation_id), None)
    if allocation is None:
        raise KeyError(f"allocation not found: {allocation_id}")
    state.allocations.remove(allocation)

    work_item = state.find_work_item(allocation.project_id)
    if work_item is not None:
        if is_pipeline(work_item):
            work_item.resources_needed += 1
        else:
            work_item.resources_assigned = max(0, work_item.resources_assigned - 1)
            work_item.refresh_staffing_status()

    consultant = state.consultant(allocation.consultant_id)
    remaining = state.allocations_for_consultant(consultant.id)
    if remaining:
        consultant.current_project = remaining[-1].project_id
    else:
        consultant.status = BENCHED
        consultant.current_project = None
    return allocation


def add_consultant(state: StaffingState, **fields: Any) -> Consultant:
    fields.setdefault("status", BENCHED)
    consultant = Consultant.from_dict({**fields, "id": next_id("C", len(state.consultants))})
    state.consultants.append(consultant)
    return consultant


def add_project(state: StaffingState, **fields: Any) -> Project:
    project = Project.from_dict({**fields, "id": next_id("P", len(state.projects))})
    state.projects.append(project)
    return project


def add_pipeline_opportunity(state: StaffingState, **fields: Any) -> PipelineOpportunity:
    opportunity = PipelineOpportunity.from_dict({**fields, "id": next_id("PL", len(state.pipeline))})
    state.pipeline.append(opportunity)
    return opportunity
