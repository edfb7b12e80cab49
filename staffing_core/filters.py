"""List filtering for consultant and project tables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .models import NEEDS_RESOURCES, Consultant, StaffingState, WorkItem, is_pipeline
from .roles import ALL, matches_seniority

ANY = "All"


def _contains(haystack: str | None, needle: str) -> bool:
    return needle in str(haystack or "").lower()


def filter_consultants(
    consultants: Iterable[Consultant],
    *,
    search: str = "",
    status: str = ANY,
    role: str = ANY,
    service_line: str = ANY,
    seniority: str = ALL,
) -> list[Consultant]:
    term = search.strip().lower()
    out = []
    for c in consultants:
        if term and not any(_contains(v, term) for v in (c.name, c.id, c.role, c.expertise)):
            continue
        if status != ANY and c.status != status:
            continue
        if role != ANY and c.role != role:
            continue
        if service_line != ANY and c.service_line != service_line:
            continue
        if not matches_seniority(c.role, seniority):
            continue
        out.append(c)
    return out


def filter_projects(
    items: Iterable[WorkItem],
    *,
    search: str = "",
    status: str = ANY,
    client: str = ANY,
) -> list[WorkItem]:
    term = search.strip().lower()
    out = []
    for item in items:
        if term and not any(_contains(v, term) for v in (item.name, item.id, item.client_name)):
            continue
        if status != ANY and item.status != status:
            continue
        if client != ANY and item.client_name != client:
            continue
        out.append(item)
    return out


def distinct_values(records: Sequence[Any], attr: str) -> list[str]:
    """Sorted, de-duplicated values for a filter dropdown."""
    return sorted({str(getattr(r, attr)) for r in records if getattr(r, attr, None)})


def projects_needing_staffing(state: StaffingState) -> list[dict[str, Any]]:
    """Confirmed projects and pipeline opportunities with open needs, earliest start first."""
    rows: list[dict[str, Any]] = []
    for p in state.projects:
        if p.staffing_status == NEEDS_RESOURCES:
            rows.append({**p.to_dict(), "type": "confirmed", "probability": 100})
    for o in state.pipeline:
        if o.resources_needed > 0:
            rows.append({**o.to_dict(), "type": "pipeline", "probability": o.win_percentage})
    rows.sort(key=lambda row: row["start_date"])
    return rows


def work_item_kind(item: WorkItem) -> str:
    return "pipeline" if is_pipeline(item) else "confirmed"
