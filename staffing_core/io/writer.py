"""Write a StaffingState back out as a CSV dataset directory."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

from staffing_core.models import StaffingState

from .schemas import ALLOCATIONS_COLS, CONSULTANTS_COLS, PIPELINE_COLS, PROJECTS_COLS, fmt_value


def write_dataset(state: StaffingState, directory: Path | str) -> dict[str, Path]:
    """Write the four dataset CSVs. Returns ``{filename: path}``."""
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)

    tables: list[tuple[str, list[str], list[dict[str, Any]]]] = [
        ("consultants.csv", CONSULTANTS_COLS, [c.to_dict() for c in state.consultants]),
        ("projects.csv", PROJECTS_COLS, [p.to_dict() for p in state.projects]),
        ("pipeline.csv", PIPELINE_COLS, [o.to_dict() for o in state.pipeline]),
        ("allocations.csv", ALLOCATIONS_COLS, [a.to_dict() for a in state.allocations]),
    ]

    paths: dict[str, Path] = {}
    for filename, columns, rows in tables:
        path = out / filename
        _write_csv(path, columns, rows)
        paths[filename] = path
    return paths


def _write_csv(path: Path, columns: list[str], rows: list[dict[str, Any]]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({col: fmt_value(row.get(col)) for col in columns})
