"""Column constants and type coercion for dataset CSV I/O."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Dataset CSV column names
# ---------------------------------------------------------------------------

CONSULTANTS_COLS = [
    "id",
    "name",
    "role",
    "service_line",
    "expertise",
    "status",
    "current_project",
    "rate",
    "preferred_sector",
    "location",
    "start_date",
    "end_date",
]

PROJECTS_COLS = [
    "id",
    "name",
    "client_name",
    "status",
    "start_date",
    "end_date",
    "resources_needed",
    "resources_assigned",
    "staffing_status",
    "sector",
    "deliverables",
    "budget",
]

PIPELINE_COLS = [
    "id",
    "name",
    "client_name",
    "status",
    "win_percentage",
    "start_date",
    "end_date",
    "resources_needed",
    "sector",
    "estimated_value",
]

ALLOCATIONS_COLS = [
    "id",
    "consultant_id",
    "project_id",
    "start_date",
    "end_date",
    "percentage",
]

DATASET_FILES = {
    "consultants.csv": CONSULTANTS_COLS,
    "projects.csv": PROJECTS_COLS,
    "pipeline.csv": PIPELINE_COLS,
    "allocations.csv": ALLOCATIONS_COLS,
}

# ---------------------------------------------------------------------------
# Type coercion helpers for reading CSV values
# ---------------------------------------------------------------------------


def to_float(value: str | None, default: float = 0.0) -> float:
    """Coerce a CSV string to float. Empty/None -> default."""
    if value is None or str(value).strip() == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def to_float_or_none(value: str | None) -> float | None:
    """Coerce a CSV string to float, returning None for empty values."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def to_int(value: str | None, default: int = 0) -> int:
    """Coerce a CSV string to int. Empty/None -> default."""
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return default


def to_str_or_none(value: str | None) -> str | None:
    if value is None or str(value).strip() == "":
        return None
    return str(value).strip()


def fmt_value(value) -> str:
    """Format a value for CSV output. None -> empty string, whole floats without decimals."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
