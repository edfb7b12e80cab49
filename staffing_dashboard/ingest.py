from __future__ import annotations

from datetime import date
from typing import Any

from staffing_core.models import (
    ALLOCATED,
    BENCHED,
    Consultant,
    PipelineOpportunity,
    Project,
    StaffingState,
    WorkItem,
    staffing_status,
)

from .utils import iso_date

# Fields the backend does not provide yet.
PLACEHOLDER_CLIENT = "Client"
PLACEHOLDER_SECTOR = "Unknown"
PLACEHOLDER_WIN_PERCENTAGE = 50
PLACEHOLDER_DELIVERABLES = "Project deliverables"


def _float_or_none(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def normalize_consultant(raw: dict[str, Any], *, today: date | None = None) -> Consultant:
    allocations = raw.get("allocations") or []
    current_project = None
    if allocations and isinstance(allocations[0], dict) and allocations[0].get("project_id") is not None:
        current_project = str(allocations[0]["project_id"])

    return Consultant(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        role=str(raw.get("role") or ""),
        service_line=str(raw.get("service_line") or ""),
        expertise=str(raw.get("expertise") or ""),
        status=ALLOCATED if len(allocations) > 0 else BENCHED,
        current_project=current_project,
        rate=_float_or_none(raw.get("revenue_rate")),
        preferred_sector=raw.get("preferred_sector") or None,
        location=raw.get("location") or None,
        start_date=today or date.today(),
        end_date=None,
    )


def normalize_work_item(raw: dict[str, Any]) -> WorkItem:
    base = {
        "id": str(raw["id"]),
        "name": str(raw.get("name") or ""),
        "client_name": PLACEHOLDER_CLIENT,
        "start_date": date.fromisoformat(iso_date(raw["start_date"])),
        "end_date": date.fromisoformat(iso_date(raw["end_date"])),
        "resources_needed": int(raw.get("resources_needed") or 0),
    }

    if raw.get("is_pipeline"):
        return PipelineOpportunity(
            **base,
            status="Opportunity",
            win_percentage=PLACEHOLDER_WIN_PERCENTAGE,
            estimated_value=_float_or_none(raw.get("value")),
            sector=PLACEHOLDER_SECTOR,
        )

    assigned = len(raw.get("assigned_resources") or [])
    return Project(
        **base,
        status="Active",
        resources_assigned=assigned,
        staffing_status=staffing_status(base["resources_needed"], assigned),
        sector=PLACEHOLDER_SECTOR,
        deliverables=PLACEHOLDER_DELIVERABLES,
        budget=_float_or_none(raw.get("value")),
    )


def build_state(payload: dict[str, Any], *, today: date | None = None) -> StaffingState:
    """Assemble a StaffingState from raw ``/consultants`` and ``/projects`` rows.

    The backend exposes no allocation records, so the allocation list stays empty.
    """
    consultants = [
        normalize_consultant(row, today=today)
        for row in payload.get("consultants", [])
        if row.get("id") is not None
    ]

    projects: list[Project] = []
    pipeline: list[PipelineOpportunity] = []
    for row in payload.get("projects", []):
        if row.get("id") is None:
            continue
        item = normalize_work_item(row)
        if isinstance(item, PipelineOpportunity):
            pipeline.append(item)
        else:
            projects.append(item)

    return StaffingState(consultants=consultants, projects=projects, pipeline=pipeline, allocations=[])
