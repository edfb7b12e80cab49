"""Tests for timeline position mapping and bar geometry."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from staffing_core import timeline
from staffing_core.models import Allocation, Consultant, PipelineOpportunity, Project, StaffingState
from staffing_core.timeline import (
    COLOR_ACTIVE,
    COLOR_DEFAULT,
    COLOR_PIPELINE_HIGH,
    COLOR_PIPELINE_LOW,
    MONTHS,
    WEEKS,
    PositionNotFound,
    TimelineView,
    bar_color,
    bar_for_allocation,
    build_time_units,
    build_timeline,
    date_position,
    default_view,
    locate_period,
    shift_view,
    time_slot,
    today_marker,
    unit_label,
    zoom,
)

# 2023-01-01 is a Sunday.
WEEKLY = [date(2023, 1, 1), date(2023, 1, 8), date(2023, 1, 15), date(2023, 1, 22)]
VIEW = TimelineView(date(2023, 1, 1), date(2023, 1, 28), WEEKS)


def _project(**overrides) -> Project:
    fields = dict(
        id="P001",
        name="Bank Digital Transformation",
        client_name="Global Bank Inc.",
        start_date=date(2023, 1, 1),
        end_date=date(2023, 6, 30),
        resources_needed=5,
        resources_assigned=3,
    )
    fields.update(overrides)
    return Project(**fields)


def _opportunity(win: int) -> PipelineOpportunity:
    return PipelineOpportunity(
        id="PL001",
        name="Claims Transformation",
        client_name="SecureInsurance Group",
        start_date=date(2023, 6, 1),
        end_date=date(2023, 11, 30),
        resources_needed=4,
        win_percentage=win,
    )


def _allocation(start: date, end: date) -> Allocation:
    return Allocation(id="A001", consultant_id="C001", project_id="P001", start_date=start, end_date=end)


class TestBuildTimeUnits:
    def test_weekly_buckets_start_on_sunday(self):
        view = TimelineView(date(2023, 1, 3), date(2023, 1, 25), WEEKS)
        assert build_time_units(view) == WEEKLY

    def test_monthly_buckets_step_from_view_start(self):
        view = TimelineView(date(2023, 1, 15), date(2023, 4, 1), MONTHS)
        assert build_time_units(view) == [
            date(2023, 1, 15),
            date(2023, 2, 15),
            date(2023, 3, 15),
            date(2023, 4, 15),
        ]

    def test_monthly_buckets_clamp_short_months(self):
        view = TimelineView(date(2023, 1, 31), date(2023, 3, 31), MONTHS)
        assert build_time_units(view) == [date(2023, 1, 31), date(2023, 2, 28), date(2023, 3, 28)]

    def test_monthly_clamped_day_carries_forward(self):
        view = TimelineView(date(2024, 1, 31), date(2024, 4, 30), MONTHS)
        assert build_time_units(view) == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 29),
            date(2024, 4, 29),
        ]

    def test_unknown_granularity_rejected(self):
        with pytest.raises(ValueError, match="granularity"):
            TimelineView(date(2023, 1, 1), date(2023, 2, 1), "days")

    def test_default_view_covers_six_months(self):
        view = default_view(date(2023, 1, 10))
        assert view.start == date(2023, 1, 10)
        assert view.end == date(2023, 7, 10)
        assert view.granularity == WEEKS


class TestDatePosition:
    def test_mid_period_example(self):
        assert date_position(WEEKLY, date(2023, 1, 10), WEEKS) == pytest.approx(42.857, abs=0.001)

    def test_boundaries_map_to_even_steps(self):
        for i, boundary in enumerate(WEEKLY):
            assert date_position(WEEKLY, boundary, WEEKS) == pytest.approx(i / 3 * 100)

    def test_before_first_boundary_is_zero(self):
        assert date_position(WEEKLY, date(2022, 12, 31), WEEKS) == 0.0
        assert date_position(WEEKLY, date(2020, 1, 1), WEEKS) == 0.0

    def test_at_synthesized_end_is_hundred(self):
        assert date_position(WEEKLY, date(2023, 1, 29), WEEKS) == 100.0
        assert date_position(WEEKLY, date(2024, 1, 1), WEEKS) == 100.0

    def test_inside_last_period_is_clamped(self):
        assert date_position(WEEKLY, date(2023, 1, 28), WEEKS) == 100.0

    def test_single_bucket_uses_one_period_span(self):
        units = [date(2023, 1, 1)]
        assert date_position(units, date(2023, 1, 4), WEEKS) == pytest.approx(3 / 7 * 100)

    def test_monthly_last_period_is_thirty_days(self):
        units = [date(2023, 1, 1), date(2023, 2, 1)]
        assert locate_period(units, date(2023, 3, 2), MONTHS) == (1, pytest.approx(29 / 30))
        with pytest.raises(PositionNotFound):
            locate_period(units, date(2023, 3, 3), MONTHS)
        assert date_position(units, date(2023, 3, 3), MONTHS) == 100.0

    def test_monotonic_over_range(self):
        positions = [date_position(WEEKLY, date(2023, 1, d), WEEKS) for d in range(1, 29)]
        assert positions == sorted(positions)
        assert all(0.0 <= p <= 100.0 for p in positions)

    def test_no_units_rejected(self):
        with pytest.raises(ValueError):
            date_position([], date(2023, 1, 1), WEEKS)


class TestLocatePeriod:
    def test_returns_index_and_fraction(self):
        index, fraction = locate_period(WEEKLY, date(2023, 1, 10), WEEKS)
        assert index == 1
        assert fraction == pytest.approx(2 / 7)

    def test_raises_past_synthesized_end(self):
        with pytest.raises(PositionNotFound):
            locate_period(WEEKLY, date(2023, 1, 29), WEEKS)

    def test_fallback_when_no_period_found(self, monkeypatch, caplog):
        def _missing(units, target, granularity):
            raise PositionNotFound(target.isoformat())

        monkeypatch.setattr(timeline, "locate_period", _missing)
        with caplog.at_level(logging.WARNING, logger="staffing_core.timeline"):
            assert date_position(WEEKLY, date(2023, 1, 10), WEEKS) == 0.0
            assert date_position(WEEKLY, date(2023, 1, 25), WEEKS) == 100.0
        assert "No period contains" in caplog.text


class TestBarColor:
    def test_active_project(self):
        assert bar_color(_project()) == COLOR_ACTIVE

    def test_inactive_project(self):
        assert bar_color(_project(status="On Hold")) == COLOR_DEFAULT

    def test_pipeline_by_probability(self):
        assert bar_color(_opportunity(70)) == COLOR_PIPELINE_HIGH
        assert bar_color(_opportunity(69)) == COLOR_PIPELINE_LOW

    def test_missing_work_item(self):
        assert bar_color(None) == COLOR_DEFAULT


class TestBarForAllocation:
    def test_runs_to_right_edge_when_ending_after_view(self):
        bar = bar_for_allocation(_allocation(date(2023, 1, 10), date(2023, 3, 1)), _project(), WEEKLY, VIEW)
        assert bar.left == pytest.approx(42.857, abs=0.001)
        assert bar.left + bar.width == pytest.approx(100.0)
        assert bar.color == COLOR_ACTIVE
        assert bar.label == "Bank Digital Transformation"

    def test_starts_at_zero_when_beginning_before_view(self):
        bar = bar_for_allocation(_allocation(date(2022, 12, 1), date(2023, 1, 10)), _project(), WEEKLY, VIEW)
        assert bar.left == 0.0
        assert bar.width == pytest.approx(42.857, abs=0.001)

    def test_outside_view_is_hidden(self):
        assert bar_for_allocation(_allocation(date(2023, 2, 5), date(2023, 2, 20)), _project(), WEEKLY, VIEW) is None
        assert bar_for_allocation(_allocation(date(2022, 11, 1), date(2022, 12, 20)), _project(), WEEKLY, VIEW) is None

    def test_unknown_work_item_uses_default_color(self):
        bar = bar_for_allocation(_allocation(date(2023, 1, 8), date(2023, 1, 15)), None, WEEKLY, VIEW)
        assert bar.label == "Unknown"
        assert bar.color == COLOR_DEFAULT

    def test_to_dict_rounds(self):
        bar = bar_for_allocation(_allocation(date(2023, 1, 10), date(2023, 3, 1)), _project(), WEEKLY, VIEW)
        assert bar.to_dict()["left"] == 42.8571


class TestNavigation:
    def test_today_marker_inside_view(self):
        assert today_marker(WEEKLY, VIEW, date(2023, 1, 10)) == pytest.approx(42.857, abs=0.001)

    def test_today_marker_outside_view(self):
        assert today_marker(WEEKLY, VIEW, date(2023, 2, 10)) is None

    def test_time_slot(self):
        assert time_slot(WEEKLY, 1, WEEKS) == (date(2023, 1, 8), date(2023, 1, 15))
        assert time_slot(WEEKLY, 3, WEEKS) == (date(2023, 1, 22), date(2023, 1, 29))

    def test_time_slot_out_of_range(self):
        with pytest.raises(IndexError):
            time_slot(WEEKLY, 4, WEEKS)

    def test_shift_weekly_moves_28_days(self):
        shifted = shift_view(VIEW, 1)
        assert shifted.start == date(2023, 1, 29)
        assert shifted.end == date(2023, 2, 25)

    def test_shift_monthly_moves_two_months(self):
        view = TimelineView(date(2023, 3, 1), date(2023, 6, 30), MONTHS)
        shifted = shift_view(view, -1)
        assert shifted.start == date(2023, 1, 1)
        assert shifted.end == date(2023, 4, 30)

    def test_zoom_keeps_range(self):
        zoomed = zoom(VIEW, MONTHS)
        assert (zoomed.start, zoomed.end, zoomed.granularity) == (VIEW.start, VIEW.end, MONTHS)

    def test_unit_labels(self):
        assert unit_label(date(2023, 1, 8), WEEKS) == "Jan 8"
        assert unit_label(date(2023, 1, 8), MONTHS) == "Jan 2023"


class TestBuildTimeline:
    def test_rows_per_consultant(self):
        state = StaffingState(
            consultants=[
                Consultant(id="C001", name="John Smith", role="Senior Consultant", service_line="Strategy", expertise=""),
                Consultant(id="C002", name="Sarah Johnson", role="Consultant", service_line="Technology", expertise=""),
            ],
            projects=[_project()],
            allocations=[_allocation(date(2023, 1, 10), date(2023, 3, 1))],
        )
        result = build_timeline(state, VIEW, today=date(2023, 1, 10))

        assert [u["label"] for u in result["units"]] == ["Jan 1", "Jan 8", "Jan 15", "Jan 22"]
        assert [row["consultant_id"] for row in result["rows"]] == ["C001", "C002"]
        assert len(result["rows"][0]["bars"]) == 1
        assert result["rows"][1]["bars"] == []
        assert result["today"] == pytest.approx(42.857, abs=0.001)
        assert result["view"]["granularity"] == WEEKS

    def test_skips_allocations_for_unknown_work_items(self):
        state = StaffingState(
            consultants=[
                Consultant(id="C001", name="John Smith", role="Consultant", service_line="Strategy", expertise=""),
            ],
            allocations=[_allocation(date(2023, 1, 10), date(2023, 3, 1))],
        )
        result = build_timeline(state, VIEW, today=date(2023, 1, 10))
        assert result["rows"][0]["bars"] == []
