from __future__ import annotations

import logging
from dataclasses import dataclass
from time import sleep
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiOperation:
    method: str
    path: str


ALLOWED_OPERATIONS: dict[str, ApiOperation] = {
    "consultants": ApiOperation("GET", "/consultants"),
    "projects": ApiOperation("GET", "/projects"),
    "ranking": ApiOperation("POST", "/ranking"),
}


class StaffingApiClient:
    """REST client for the staffing backend.

    Only the operation names listed in ALLOWED_OPERATIONS are executable.
    Any unknown operation is rejected before any network request is sent.
    Each call is sent once unless ``retries`` is raised above 1.
    """

    def __init__(self, *, base_url: str, timeout_s: float = 30.0, retries: int = 1):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.retries = max(1, retries)

    def _request(
        self,
        *,
        operation: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        op = ALLOWED_OPERATIONS.get(operation)
        if op is None:
            raise ValueError(f"Operation '{operation}' is not allowed")

        url = f"{self.base_url}{op.path}"

        last_exc: Exception | None = None
        for attempt in range(self.retries):
            try:
                resp = httpx.request(
                    op.method,
                    url,
                    headers={"Accept": "application/json"},
                    params=params,
                    json=json_body,
                    timeout=self.timeout_s,
                )
                if resp.status_code >= 500 and attempt < self.retries - 1:
                    logger.warning("%s %s returned %s, retrying", op.method, url, resp.status_code)
                    sleep(2**attempt)
                    continue
                resp.raise_for_status()
                return resp
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                last_exc = exc
                if attempt < self.retries - 1:
                    logger.warning("%s %s failed (%s), retrying", op.method, url, exc)
                    sleep(2**attempt)
                    continue
                raise
        if last_exc:
            raise last_exc
        raise RuntimeError("request failed without an explicit exception")

    def fetch_consultants(self) -> list[dict[str, Any]]:
        resp = self._request(operation="consultants")
        data = resp.json()
        return data if isinstance(data, list) else []

    def fetch_projects(self) -> list[dict[str, Any]]:
        resp = self._request(operation="projects")
        data = resp.json()
        return data if isinstance(data, list) else []

    def fetch_consultant_ranking(
        self,
        *,
        project_id: str,
        allocation_strategy: str = "new",
        team_structure: str = "balanced",
        n: int = 50,
    ) -> list[dict[str, Any]]:
        body = {
            "allocation_strategy": allocation_strategy,
            "team_structure": team_structure,
            "project_id": project_id,
            "n": n,
        }
        resp = self._request(operation="ranking", json_body=body)
        payload = resp.json() or {}
        ranking = payload.get("ranking", []) if isinstance(payload, dict) else []
        return ranking if isinstance(ranking, list) else []

    def fetch_payload(self) -> dict[str, Any]:
        return {
            "consultants": self.fetch_consultants(),
            "projects": self.fetch_projects(),
        }
