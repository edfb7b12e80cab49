"""Read a CSV dataset directory into a StaffingState."""

from __future__ import annotations

import csv
from pathlib import Path

from staffing_core.models import (
    Allocation,
    Consultant,
    PipelineOpportunity,
    Project,
    StaffingState,
    parse_date,
)

from .schemas import to_float, to_float_or_none, to_int, to_str_or_none

MOCK_DATASET_DIR = Path(__file__).resolve().parent.parent / "data" / "mock"


def load_dataset(directory: Path | str | None = None) -> StaffingState:
    """Read consultants/projects/pipeline/allocations CSVs -> StaffingState.

    ``None`` reads the bundled mock dataset.
    Raises FileNotFoundError if required files are missing.
    """
    d = Path(directory) if directory is not None else MOCK_DATASET_DIR

    # -- consultants.csv ------------------------------------------------------
    consultants = []
    for row in _read_csv(d / "consultants.csv"):
        consultants.append(
            Consultant(
                id=row["id"],
                name=row["name"],
                role=row["role"],
                service_line=row["service_line"],
                expertise=row["expertise"],
                status=row["status"],
                current_project=to_str_or_none(row.get("current_project")),
                rate=to_float_or_none(row.get("rate")),
                preferred_sector=to_str_or_none(row.get("preferred_sector")),
                location=to_str_or_none(row.get("location")),
                start_date=parse_date(row.get("start_date")),
                end_date=parse_date(row.get("end_date")),
            )
        )

    # -- projects.csv ---------------------------------------------------------
    projects = []
    for row in _read_csv(d / "projects.csv"):
        projects.append(
            Project(
                id=row["id"],
                name=row["name"],
                client_name=row["client_name"],
                status=row["status"],
                start_date=parse_date(row["start_date"]),
                end_date=parse_date(row["end_date"]),
                resources_needed=to_int(row.get("resources_needed")),
                resources_assigned=to_int(row.get("resources_assigned")),
                staffing_status=row.get("staffing_status") or "",
                sector=to_str_or_none(row.get("sector")),
                deliverables=to_str_or_none(row.get("deliverables")),
                budget=to_float_or_none(row.get("budget")),
            )
        )

    # -- pipeline.csv ---------------------------------------------------------
    pipeline = []
    for row in _read_csv(d / "pipeline.csv"):
        pipeline.append(
            PipelineOpportunity(
                id=row["id"],
                name=row["name"],
                client_name=row["client_name"],
                status=row["status"],
                win_percentage=to_int(row.get("win_percentage")),
                start_date=parse_date(row["start_date"]),
                end_date=parse_date(row["end_date"]),
                resources_needed=to_int(row.get("resources_needed")),
                sector=to_str_or_none(row.get("sector")),
                estimated_value=to_float_or_none(row.get("estimated_value")),
            )
        )

    # -- allocations.csv ------------------------------------------------------
    allocations = []
    for row in _read_csv(d / "allocations.csv"):
        allocations.append(
            Allocation(
                id=row["id"],
                consultant_id=row["consultant_id"],
                project_id=row["project_id"],
                start_date=parse_date(row["start_date"]),
                end_date=parse_date(row["end_date"]),
                percentage=to_float(row.get("percentage"), default=1.0),
            )
        )

    return StaffingState(
        consultants=consultants,
        projects=projects,
        pipeline=pipeline,
        allocations=allocations,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_csv(path: Path) -> list[dict[str, str]]:
    """Read a CSV file into a list of dicts via csv.DictReader."""
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))
