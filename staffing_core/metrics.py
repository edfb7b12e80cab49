"""Dashboard KPIs computed from a staffing state.

All functions are pure state-in / dict-out.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from .models import ALLOCATED, BENCHED, NEEDS_RESOURCES, Consultant, StaffingState


def chargeability(consultants: list[Consultant]) -> int:
    """Share of allocated consultants as a whole percentage."""
    if not consultants:
        return 0
    allocated = sum(1 for c in consultants if c.status == ALLOCATED)
    return round(allocated / len(consultants) * 100)


def dashboard_metrics(state: StaffingState) -> dict[str, Any]:
    return {
        "total_consultants": len(state.consultants),
        "allocated_consultants": sum(1 for c in state.consultants if c.status == ALLOCATED),
        "benched_consultants": sum(1 for c in state.consultants if c.status == BENCHED),
        "chargeability": chargeability(state.consultants),
        "active_projects": sum(1 for p in state.projects if p.status == "Active"),
        "pipeline_projects": len(state.pipeline),
        "projects_needing_resources": sum(1 for p in state.projects if p.staffing_status == NEEDS_RESOURCES),
    }


def allocation_kpis(state: StaffingState) -> dict[str, int]:
    """Bench, fully and partially allocated counts from summed allocation percentages."""
    load: dict[str, float] = defaultdict(float)
    for a in state.allocations:
        load[a.consultant_id] += a.percentage

    fully = partially = 0
    for c in state.consultants:
        total = load.get(c.id, 0.0)
        if total >= 1.0:
            fully += 1
        elif total > 0:
            partially += 1

    return {
        "total_consultants": len(state.consultants),
        "available_consultants": sum(1 for c in state.consultants if c.status == BENCHED),
        "fully_allocated": fully,
        "partially_allocated": partially,
    }


def quick_views(state: StaffingState) -> dict[str, list[dict[str, Any]]]:
    projects = [
        {
            "id": p.id,
            "title": p.name,
            "subtitle": f"Client: {p.client_name}",
            "needed": p.resources_needed - p.resources_assigned,
            "status": NEEDS_RESOURCES,
        }
        for p in state.projects
        if p.staffing_status == NEEDS_RESOURCES
    ]
    bench = [
        {
            "id": c.id,
            "title": c.name,
            "subtitle": f"{c.role}, {c.expertise}",
            "status": BENCHED,
        }
        for c in state.consultants
        if c.status == BENCHED
    ]
    return {"projects_needing_resources": projects, "consultants_on_bench": bench}
