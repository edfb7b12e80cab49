"""Data-source selection between the bundled mock dataset and the REST backend.

The active source is passed in explicitly. A persisted preference, when
present, overrides the environment default. API failures fall back to the
last successfully loaded state, or to the mock dataset, and produce a
user-facing notice instead of an exception.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import httpx

from staffing_core.io import load_dataset
from staffing_core.models import Notice, StaffingState

from .api_client import StaffingApiClient
from .config import API, MOCK, RuntimeConfig, validate_data_source
from .ingest import build_state
from .storage import load_preferences, save_preferences

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    state: StaffingState
    source: str
    notice: Notice | None = None
    fell_back: bool = False
    # Where the returned data came from; differs from ``source`` after a fallback.
    origin: str = ""

    def __post_init__(self) -> None:
        if not self.origin:
            self.origin = self.source

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "fell_back": self.fell_back,
            "origin": self.origin,
            "notice": self.notice.to_dict() if self.notice else None,
            "counts": {
                "consultants": len(self.state.consultants),
                "projects": len(self.state.projects),
                "pipeline": len(self.state.pipeline),
                "allocations": len(self.state.allocations),
            },
        }


class DataSourceLoader:
    def __init__(
        self,
        *,
        source: str,
        client: StaffingApiClient | None = None,
        artifact_root: Path | None = None,
        mock_dir: Path | None = None,
    ):
        self.source = validate_data_source(source)
        self.client = client
        self.artifact_root = artifact_root
        self.mock_dir = mock_dir
        self.last_known: StaffingState | None = None
        self.last_known_origin: str | None = None

    @classmethod
    def from_config(cls, cfg: RuntimeConfig, *, client: StaffingApiClient | None = None) -> DataSourceLoader:
        source = cfg.data_source
        preferred = load_preferences(cfg.artifact_root).get("data_source")
        if preferred:
            source = validate_data_source(preferred)
        if client is None:
            client = StaffingApiClient(
                base_url=cfg.api_base_url,
                timeout_s=cfg.api_timeout_s,
                retries=cfg.api_retries,
            )
        return cls(source=source, client=client, artifact_root=cfg.artifact_root, mock_dir=cfg.mock_dir)

    def _persist_preference(self) -> None:
        if self.artifact_root is None:
            return
        prefs = load_preferences(self.artifact_root)
        prefs["data_source"] = self.source
        save_preferences(self.artifact_root, prefs)

    def set_source(self, source: str) -> Notice:
        self.source = validate_data_source(source)
        self._persist_preference()
        label = "mock data" if self.source == MOCK else "API data"
        return Notice(title="Data Source Changed", description=f"Now using {label}.")

    def toggle(self) -> Notice:
        return self.set_source(API if self.source == MOCK else MOCK)

    def _remember(self, state: StaffingState, origin: str) -> None:
        self.last_known = copy.deepcopy(state)
        self.last_known_origin = origin

    def _load_mock(self) -> StaffingState:
        return load_dataset(self.mock_dir)

    def load(self, *, today: date | None = None) -> LoadResult:
        if self.source == MOCK:
            state = self._load_mock()
            self._remember(state, MOCK)
            return LoadResult(state=state, source=MOCK)

        if self.client is None:
            raise RuntimeError("API data source selected but no API client configured")

        try:
            payload = self.client.fetch_payload()
            state = build_state(payload, today=today)
        except (httpx.HTTPError, KeyError, TypeError, ValueError):
            logger.exception("Loading data from the staffing API failed")
            if self.last_known is not None:
                fallback, description = copy.deepcopy(self.last_known), "Showing previously loaded data."
                origin = self.last_known_origin or MOCK
            else:
                fallback, description = self._load_mock(), "Showing mock data instead."
                origin = MOCK
            return LoadResult(
                state=fallback,
                source=API,
                origin=origin,
                fell_back=True,
                notice=Notice(
                    title="Error Loading Data",
                    description=f"Could not load data from the API. {description}",
                    variant="destructive",
                ),
            )

        self._remember(state, API)
        return LoadResult(state=state, source=API)

    def ranking_for(
        self,
        project_id: str,
        *,
        team_structure: str = "balanced",
        allocation_strategy: str = "new",
        n: int = 50,
    ) -> list[dict[str, Any]]:
        """External ranking for a work item; empty outside API mode or on failure."""
        if self.source != API or self.client is None:
            return []
        try:
            return self.client.fetch_consultant_ranking(
                project_id=project_id,
                allocation_strategy=allocation_strategy,
                team_structure=team_structure,
                n=n,
            )
        except httpx.HTTPError:
            logger.exception("Fetching consultant ranking for %s failed", project_id)
            return []
