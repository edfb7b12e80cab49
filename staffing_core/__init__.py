"""Shared staffing allocation logic: timeline positions, auto-allocation, match scoring."""

from .allocator import allocate_consultant, auto_allocate, release_allocation
from .constraints import validate_allocation, validate_state
from .matching import is_available_for, match_score, suggest_consultants
from .metrics import allocation_kpis, chargeability, dashboard_metrics
from .models import Allocation, Consultant, Notice, PipelineOpportunity, Project, StaffingState
from .timeline import PositionNotFound, TimelineView, bar_for_allocation, build_time_units, date_position

from .io import load_dataset, write_dataset

__all__ = [
    "Allocation",
    "Consultant",
    "Notice",
    "PipelineOpportunity",
    "PositionNotFound",
    "Project",
    "StaffingState",
    "TimelineView",
    "allocate_consultant",
    "allocation_kpis",
    "auto_allocate",
    "bar_for_allocation",
    "build_time_units",
    "chargeability",
    "dashboard_metrics",
    "date_position",
    "is_available_for",
    "load_dataset",
    "match_score",
    "release_allocation",
    "suggest_consultants",
    "validate_allocation",
    "validate_state",
    "write_dataset",
]
