"""Map calendar dates onto a percentage grid for allocation timeline bars.

A timeline is a list of period boundaries (week or month starts). Each
boundary starts one period; the last period's end is synthesized by adding
one nominal period length (7 days for weeks, 30 for months). A date's
position is its fractional period index scaled to ``[0, 100]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Sequence

from .models import Allocation, StaffingState, WorkItem, is_pipeline
from .time_utils import add_months, months_in_range, weeks_in_range

logger = logging.getLogger(__name__)

WEEKS = "weeks"
MONTHS = "months"
GRANULARITIES = (WEEKS, MONTHS)

PERIOD_DAYS = {WEEKS: 7, MONTHS: 30}

COLOR_DEFAULT = "#9b87f5"
COLOR_ACTIVE = "#4ade80"
COLOR_PIPELINE_HIGH = "#f97316"
COLOR_PIPELINE_LOW = "#60a5fa"
HIGH_PROBABILITY_THRESHOLD = 70


class PositionNotFound(LookupError):
    """No timeline period contains the target date."""


@dataclass(frozen=True)
class TimelineView:
    start: date
    end: date
    granularity: str = WEEKS

    def __post_init__(self) -> None:
        if self.granularity not in GRANULARITIES:
            raise ValueError(f"Unknown granularity: {self.granularity!r}. Choose from {GRANULARITIES}")


@dataclass(frozen=True)
class TimelineBar:
    allocation_id: str
    project_id: str
    label: str
    left: float
    width: float
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "allocation_id": self.allocation_id,
            "project_id": self.project_id,
            "label": self.label,
            "left": round(self.left, 4),
            "width": round(self.width, 4),
            "color": self.color,
        }


def default_view(today: date | None = None) -> TimelineView:
    today = today or date.today()
    return TimelineView(start=today, end=add_months(today, 6), granularity=WEEKS)


def period_length(granularity: str) -> timedelta:
    return timedelta(days=PERIOD_DAYS[granularity])


def build_time_units(view: TimelineView) -> list[date]:
    if view.granularity == WEEKS:
        return weeks_in_range(view.start, view.end)
    return months_in_range(view.start, view.end)


def _next_boundary(units: Sequence[date], index: int, granularity: str) -> date:
    if index < len(units) - 1:
        return units[index + 1]
    return units[index] + period_length(granularity)


def locate_period(units: Sequence[date], target: date, granularity: str) -> tuple[int, float]:
    """Return ``(index, unit_fraction)`` of the period containing ``target``.

    Raises PositionNotFound when no half-open period ``[units[i], next)``
    contains the date.
    """
    for i, current in enumerate(units):
        nxt = _next_boundary(units, i, granularity)
        if current <= target < nxt:
            span = (nxt - current).days
            return i, (target - current).days / span
    raise PositionNotFound(f"no period contains {target.isoformat()}")


def date_position(units: Sequence[date], target: date, granularity: str) -> float:
    if not units:
        raise ValueError("timeline has no periods")
    if target < units[0]:
        return 0.0
    if target >= _next_boundary(units, len(units) - 1, granularity):
        return 100.0

    timeline_span = max(len(units) - 1, 1)
    try:
        index, fraction = locate_period(units, target, granularity)
    except PositionNotFound:
        fallback = 0.0 if target < units[-1] else 100.0
        logger.warning("No period contains %s, clamping to %s", target.isoformat(), fallback)
        return fallback
    return min(100.0, max(0.0, (index + fraction) / timeline_span * 100))


def overlaps_view(start: date, end: date, view: TimelineView) -> bool:
    return not (start > view.end or end < view.start)


def bar_color(work_item: WorkItem | None) -> str:
    if work_item is None:
        return COLOR_DEFAULT
    if is_pipeline(work_item):
        if work_item.win_percentage >= HIGH_PROBABILITY_THRESHOLD:
            return COLOR_PIPELINE_HIGH
        return COLOR_PIPELINE_LOW
    if work_item.status == "Active":
        return COLOR_ACTIVE
    return COLOR_DEFAULT


def bar_for_allocation(
    allocation: Allocation,
    work_item: WorkItem | None,
    units: Sequence[date],
    view: TimelineView,
) -> TimelineBar | None:
    """Bar geometry for one allocation, or None when it lies outside the view."""
    if not units or not overlaps_view(allocation.start_date, allocation.end_date, view):
        return None

    if allocation.start_date < view.start:
        left = 0.0
    else:
        left = date_position(units, allocation.start_date, view.granularity)

    right = 100.0
    if allocation.end_date < view.end:
        right = date_position(units, allocation.end_date, view.granularity)

    return TimelineBar(
        allocation_id=allocation.id,
        project_id=allocation.project_id,
        label=work_item.name if work_item is not None else "Unknown",
        left=left,
        width=max(0.0, right - left),
        color=bar_color(work_item),
    )


def today_marker(units: Sequence[date], view: TimelineView, today: date | None = None) -> float | None:
    today = today or date.today()
    if not units or today < view.start or today > view.end:
        return None
    try:
        index, fraction = locate_period(units, today, view.granularity)
    except PositionNotFound:
        return None
    return (index + fraction) / max(len(units) - 1, 1) * 100


def time_slot(units: Sequence[date], index: int, granularity: str) -> tuple[date, date]:
    """Start and end of the clicked period."""
    if index < 0 or index >= len(units):
        raise IndexError(f"time unit index out of range: {index}")
    return units[index], _next_boundary(units, index, granularity)


def shift_view(view: TimelineView, direction: int) -> TimelineView:
    """Step the view backwards (``-1``) or forwards (``1``)."""
    if view.granularity == WEEKS:
        delta = timedelta(days=28 * direction)
        return TimelineView(view.start + delta, view.end + delta, view.granularity)
    return TimelineView(
        add_months(view.start, 2 * direction),
        add_months(view.end, 2 * direction),
        view.granularity,
    )


def zoom(view: TimelineView, granularity: str) -> TimelineView:
    return TimelineView(view.start, view.end, granularity)


def unit_label(unit: date, granularity: str) -> str:
    if granularity == WEEKS:
        return f"{unit.strftime('%b')} {unit.day}"
    return unit.strftime("%b %Y")


def build_timeline(state: StaffingState, view: TimelineView, *, today: date | None = None) -> dict[str, Any]:
    """Render-ready timeline: column labels, one row of bars per consultant, today marker."""
    units = build_time_units(view)
    rows = []
    for consultant in state.consultants:
        bars = []
        for allocation in state.allocations_for_consultant(consultant.id):
            work_item = state.find_work_item(allocation.project_id)
            if work_item is None:
                continue
            bar = bar_for_allocation(allocation, work_item, units, view)
            if bar is not None:
                bars.append(bar.to_dict())
        rows.append(
            {
                "consultant_id": consultant.id,
                "name": consultant.name,
                "role": consultant.role,
                "bars": bars,
            }
        )

    return {
        "view": {
            "start": view.start.isoformat(),
            "end": view.end.isoformat(),
            "granularity": view.granularity,
        },
        "units": [{"start": u.isoformat(), "label": unit_label(u, view.granularity)} for u in units],
        "today": today_marker(units, view, today),
        "rows": rows,
    }
