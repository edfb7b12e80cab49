"""Value records for consultants, work items and allocations."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any, Union

ALLOCATED = "Allocated"
BENCHED = "Benched"

FULLY_STAFFED = "Fully Staffed"
NEEDS_RESOURCES = "Needs Resources"

PROJECT_STATUSES = ("Active", "Completed", "On Hold")


def staffing_status(resources_needed: int, resources_assigned: int) -> str:
    return FULLY_STAFFED if resources_needed <= resources_assigned else NEEDS_RESOURCES


def next_id(prefix: str, existing_count: int, *, width: int = 3) -> str:
    """Return the next zero-padded counter id, e.g. ``next_id("A", 4) == "A005"``."""
    return f"{prefix}{existing_count + 1:0{width}d}"


def parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _record_from_dict(cls, row: dict[str, Any]):
    names = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in row.items() if k in names}
    for key in ("start_date", "end_date"):
        if key in kwargs:
            kwargs[key] = parse_date(kwargs[key])
    return cls(**kwargs)


def _record_to_dict(record) -> dict[str, Any]:
    out = asdict(record)
    for key in ("start_date", "end_date"):
        if key in out:
            out[key] = _iso(out[key])
    return out


@dataclass
class Consultant:
    id: str
    name: str
    role: str
    service_line: str
    expertise: str
    status: str = BENCHED
    start_date: date | None = None
    current_project: str | None = None
    rate: float | None = None
    preferred_sector: str | None = None
    location: str | None = None
    end_date: date | None = None

    def expertise_tags(self) -> list[str]:
        if not self.expertise:
            return []
        return [t.strip() for t in self.expertise.split(",") if t.strip()]

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> Consultant:
        return _record_from_dict(cls, row)

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass
class Project:
    id: str
    name: str
    client_name: str
    start_date: date
    end_date: date
    resources_needed: int
    resources_assigned: int = 0
    status: str = "Active"
    staffing_status: str = ""
    sector: str | None = None
    deliverables: str | None = None
    budget: float | None = None

    def __post_init__(self) -> None:
        if not self.staffing_status:
            self.refresh_staffing_status()

    def refresh_staffing_status(self) -> None:
        self.staffing_status = staffing_status(self.resources_needed, self.resources_assigned)

    @property
    def open_positions(self) -> int:
        return max(0, self.resources_needed - self.resources_assigned)

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> Project:
        return _record_from_dict(cls, row)

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass
class PipelineOpportunity:
    id: str
    name: str
    client_name: str
    start_date: date
    end_date: date
    resources_needed: int
    win_percentage: int = 50
    status: str = "Opportunity"
    sector: str | None = None
    estimated_value: float | None = None

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> PipelineOpportunity:
        return _record_from_dict(cls, row)

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


WorkItem = Union[Project, PipelineOpportunity]


def is_pipeline(item: WorkItem) -> bool:
    """Pipeline opportunities are the work items without a staffing status."""
    return not hasattr(item, "staffing_status")


@dataclass
class Allocation:
    id: str
    consultant_id: str
    project_id: str
    start_date: date
    end_date: date
    percentage: float = 1.0

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> Allocation:
        return _record_from_dict(cls, row)

    def to_dict(self) -> dict[str, Any]:
        return _record_to_dict(self)


@dataclass(frozen=True)
class Notice:
    """User-facing toast message."""

    title: str
    description: str
    variant: str = "default"

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description, "variant": self.variant}


@dataclass
class StaffingState:
    consultants: list[Consultant] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    pipeline: list[PipelineOpportunity] = field(default_factory=list)
    allocations: list[Allocation] = field(default_factory=list)

    def consultant(self, consultant_id: str) -> Consultant:
        for c in self.consultants:
            if c.id == consultant_id:
                return c
        raise KeyError(f"consultant not found: {consultant_id}")

    def work_item(self, item_id: str) -> WorkItem:
        for p in self.projects:
            if p.id == item_id:
                return p
        for o in self.pipeline:
            if o.id == item_id:
                return o
        raise KeyError(f"project not found: {item_id}")

    def find_work_item(self, item_id: str) -> WorkItem | None:
        try:
            return self.work_item(item_id)
        except KeyError:
            return None

    def allocations_for_consultant(self, consultant_id: str) -> list[Allocation]:
        return [a for a in self.allocations if a.consultant_id == consultant_id]

    def allocations_for_project(self, project_id: str) -> list[Allocation]:
        return [a for a in self.allocations if a.project_id == project_id]

    def consultants_for_project(self, project_id: str) -> list[Consultant]:
        ids = {a.consultant_id for a in self.allocations_for_project(project_id)}
        return [c for c in self.consultants if c.id in ids]

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StaffingState:
        return cls(
            consultants=[Consultant.from_dict(r) for r in payload.get("consultants", [])],
            projects=[Project.from_dict(r) for r in payload.get("projects", [])],
            pipeline=[PipelineOpportunity.from_dict(r) for r in payload.get("pipeline", [])],
            allocations=[Allocation.from_dict(r) for r in payload.get("allocations", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "consultants": [c.to_dict() for c in self.consultants],
            "projects": [p.to_dict() for p in self.projects],
            "pipeline": [o.to_dict() for o in self.pipeline],
            "allocations": [a.to_dict() for a in self.allocations],
        }
