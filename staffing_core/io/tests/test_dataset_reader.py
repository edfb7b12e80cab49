"""Tests for loading the bundled mock dataset and custom dataset directories."""

from __future__ import annotations

import shutil
from datetime import date

import pytest

from staffing_core.io import MOCK_DATASET_DIR, load_dataset
from staffing_core.models import BENCHED, FULLY_STAFFED, NEEDS_RESOURCES


@pytest.fixture(scope="module")
def state():
    return load_dataset()


class TestMockDataset:
    def test_counts(self, state):
        assert len(state.consultants) == 6
        assert len(state.projects) == 5
        assert len(state.pipeline) == 3
        assert len(state.allocations) == 4

    def test_consultant_fields(self, state):
        john = state.consultant("C001")
        assert john.name == "John Smith"
        assert john.role == "Senior Consultant"
        assert john.rate == 1200.0
        assert john.preferred_sector == "Financial Services"
        assert john.current_project == "P001"
        assert john.start_date == date(2022, 1, 15)
        assert john.end_date is None

    def test_benched_have_no_project(self, state):
        benched = [c for c in state.consultants if c.status == BENCHED]
        assert [c.id for c in benched] == ["C003", "C005"]
        assert all(c.current_project is None for c in benched)

    def test_project_fields(self, state):
        p002 = state.work_item("P002")
        assert (p002.resources_needed, p002.resources_assigned) == (4, 4)
        assert p002.staffing_status == FULLY_STAFFED
        assert p002.budget == 950000.0
        assert p002.deliverables.startswith("Data Architecture")
        assert state.work_item("P005").staffing_status == NEEDS_RESOURCES

    def test_pipeline_fields(self, state):
        pl001 = state.work_item("PL001")
        assert pl001.win_percentage == 70
        assert pl001.status == "Proposal"
        assert pl001.start_date == date(2023, 7, 15)
        assert pl001.estimated_value == 1800000.0

    def test_partial_allocation(self, state):
        a003 = next(a for a in state.allocations if a.id == "A003")
        assert a003.percentage == 0.8
        assert (a003.consultant_id, a003.project_id) == ("C004", "P003")


class TestCustomDirectory:
    def test_reads_copy(self, tmp_path):
        target = tmp_path / "dataset"
        shutil.copytree(MOCK_DATASET_DIR, target)
        assert len(load_dataset(target).consultants) == 6

    def test_missing_file_raises(self, tmp_path):
        target = tmp_path / "dataset"
        shutil.copytree(MOCK_DATASET_DIR, target)
        (target / "pipeline.csv").unlink()
        with pytest.raises(FileNotFoundError, match="pipeline.csv"):
            load_dataset(target)

    def test_missing_percentage_defaults_to_full_time(self, tmp_path):
        target = tmp_path / "dataset"
        shutil.copytree(MOCK_DATASET_DIR, target)
        (target / "allocations.csv").write_text(
            "id,consultant_id,project_id,start_date,end_date,percentage\n"
            "A001,C001,P001,2023-01-10,2023-06-30,\n",
            encoding="utf-8",
        )
        [allocation] = load_dataset(target).allocations
        assert allocation.percentage == 1.0
