"""staffing-dashboard MCP server.

Exposes tools for loading staffing data (mock dataset or REST backend),
consultant and project listings, dashboard KPIs, match suggestions,
allocation changes, greedy auto-allocation, and the resource timeline.
"""
from __future__ import annotations

import argparse
import logging
import os
from datetime import date
from typing import Any
from uuid import uuid4

from mcp.server.fastmcp import FastMCP

from staffing_core.allocator import (
    add_consultant as _add_consultant,
    add_pipeline_opportunity as _add_pipeline_opportunity,
    add_project as _add_project,
    allocate_consultant as _allocate_consultant,
    auto_allocate as _auto_allocate,
    release_allocation as _release_allocation,
)
from staffing_core.constraints import validate_allocation, validate_state
from staffing_core.filters import (
    ANY,
    distinct_values,
    filter_consultants,
    filter_projects,
    projects_needing_staffing as _projects_needing_staffing,
    work_item_kind,
)
from staffing_core.io import write_dataset
from staffing_core.matching import apply_ranking, suggest_consultants as _suggest_consultants
from staffing_core.metrics import allocation_kpis, dashboard_metrics, quick_views
from staffing_core.models import StaffingState
from staffing_core.roles import ALL
from staffing_core.timeline import TimelineView, build_timeline, default_view, shift_view

from .config import load_env, runtime_config
from .data_source import DataSourceLoader
from .storage import (
    list_states as _list_states,
    load_state as _load_state,
    save_state as _save_state,
)
from .utils import now_utc_iso

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "staffing-dashboard",
    host=os.getenv("HOST", "127.0.0.1"),
    port=int(os.getenv("PORT", "8000")),
    instructions=(
        "Staffing allocation dashboard for a consulting firm. "
        "Loads consultants, projects and pipeline opportunities from mock data "
        "or the staffing API, suggests matching consultants, records allocations, "
        "runs greedy auto-allocation, and renders the resource timeline."
    ),
)

_ENV_FILE: str | None = None
_LOADER: DataSourceLoader | None = None
_STATE: StaffingState | None = None
_STATE_ID: str | None = None
_STATE_ORIGIN: str | None = None


def _configure():
    load_env(_ENV_FILE or os.getenv("STAFFING_ENV_FILE"))
    return runtime_config()


def _loader() -> DataSourceLoader:
    global _LOADER
    if _LOADER is None:
        _LOADER = DataSourceLoader.from_config(_configure())
    return _LOADER


def _artifact_root():
    return _configure().artifact_root


def _persist(state: StaffingState, *, source: str) -> str:
    global _STATE_ID
    state_id = f"{source}-{uuid4().hex[:12]}"
    _save_state(
        _artifact_root(),
        {
            "state_id": state_id,
            "source": source,
            "generated_at": now_utc_iso(),
            "state": state.to_dict(),
        },
    )
    _STATE_ID = state_id
    return state_id


def _state() -> StaffingState:
    global _STATE, _STATE_ORIGIN
    if _STATE is None:
        result = _loader().load()
        if result.notice is not None:
            logger.warning("%s: %s", result.notice.title, result.notice.description)
        _STATE, _STATE_ORIGIN = result.state, result.origin
    return _STATE


def _origin() -> str:
    """Source the working state was actually loaded from."""
    return _STATE_ORIGIN or _loader().source


def _consultant_row(consultant, score: int | None = None) -> dict[str, Any]:
    row = consultant.to_dict()
    if score is not None:
        row["match_score"] = score
    return row


# -- Data source --

@mcp.tool()
def get_data_source() -> dict[str, Any]:
    """Return the active data source ("mock" or "api")."""
    loader = _loader()
    return {"source": loader.source, "state_id": _STATE_ID}


@mcp.tool()
def toggle_data_source() -> dict[str, Any]:
    """Switch between mock and API data, persist the choice, and reload."""
    global _STATE, _STATE_ORIGIN
    loader = _loader()
    notice = loader.toggle()
    result = loader.load()
    _STATE, _STATE_ORIGIN = result.state, result.origin
    state_id = _persist(_STATE, source=result.origin)
    return {
        "source": loader.source,
        "state_id": state_id,
        "notice": notice.to_dict(),
        "load": result.to_dict(),
    }


@mcp.tool()
def load_data(state_id: str | None = None) -> dict[str, Any]:
    """Reload the working state from the active data source.

    When state_id is given, the stored state with that ID is restored instead.
    """
    global _STATE, _STATE_ID, _STATE_ORIGIN
    if state_id:
        doc = _load_state(_artifact_root(), state_id=state_id)
        _STATE = StaffingState.from_dict(doc["state"])
        _STATE_ID = doc["state_id"]
        _STATE_ORIGIN = doc.get("source")
        return {"state_id": _STATE_ID, "source": doc.get("source"), "restored": True}

    result = _loader().load()
    _STATE, _STATE_ORIGIN = result.state, result.origin
    sid = _persist(_STATE, source=result.origin)
    return {"state_id": sid, **result.to_dict()}


@mcp.tool()
def list_states(limit: int = 20) -> list[dict[str, Any]]:
    """List stored working-state manifests, newest first."""
    return _list_states(_artifact_root(), limit=limit)


@mcp.tool()
def export_dataset(directory: str | None = None) -> dict[str, Any]:
    """Write the working state as CSV files (consultants, projects, pipeline, allocations)."""
    target = directory or str(_artifact_root() / "exports" / (_STATE_ID or "current"))
    written = write_dataset(_state(), target)
    return {name: str(path) for name, path in written.items()}


# -- Listings --

@mcp.tool()
def list_consultants(
    search: str = "",
    status: str = ANY,
    role: str = ANY,
    service_line: str = ANY,
    seniority: str = ALL,
) -> dict[str, Any]:
    """Filtered consultant list plus the values available for each filter."""
    state = _state()
    rows = filter_consultants(
        state.consultants,
        search=search,
        status=status,
        role=role,
        service_line=service_line,
        seniority=seniority,
    )
    return {
        "consultants": [_consultant_row(c) for c in rows],
        "filters": {
            "status": distinct_values(state.consultants, "status"),
            "role": distinct_values(state.consultants, "role"),
            "service_line": distinct_values(state.consultants, "service_line"),
        },
    }


@mcp.tool()
def list_projects(
    search: str = "",
    status: str = ANY,
    client: str = ANY,
    include_pipeline: bool = True,
) -> dict[str, Any]:
    """Filtered projects and pipeline opportunities."""
    state = _state()
    items = list(state.projects) + (list(state.pipeline) if include_pipeline else [])
    rows = filter_projects(items, search=search, status=status, client=client)
    return {
        "projects": [{**item.to_dict(), "type": work_item_kind(item)} for item in rows],
        "filters": {
            "status": distinct_values(items, "status"),
            "client": distinct_values(items, "client_name"),
        },
    }


@mcp.tool()
def dashboard() -> dict[str, Any]:
    """Headline KPIs, allocation breakdown and quick views."""
    state = _state()
    return {
        "metrics": dashboard_metrics(state),
        "allocation": allocation_kpis(state),
        "quick_views": quick_views(state),
    }


@mcp.tool()
def projects_needing_staffing() -> list[dict[str, Any]]:
    """Confirmed projects and pipeline opportunities that still need resources."""
    return _projects_needing_staffing(_state())


# -- Matching --

@mcp.tool()
def suggest_consultants(project_id: str | None = None) -> list[dict[str, Any]]:
    """Benched consultants; scored and ordered by match when project_id is given."""
    state = _state()
    work_item = state.work_item(project_id) if project_id else None
    return [_consultant_row(c, score) for c, score in _suggest_consultants(state.consultants, work_item)]


@mcp.tool()
def rank_consultants(project_id: str, team_structure: str = "balanced", n: int = 50) -> dict[str, Any]:
    """Consultants ordered by the backend ranking service (API mode only).

    Falls back to the local match-score order when no ranking is available.
    """
    state = _state()
    work_item = state.work_item(project_id)
    ranking = _loader().ranking_for(project_id, team_structure=team_structure, n=n)
    if ranking:
        ranked = apply_ranking(state.consultants, ranking)
        return {"source": "api", "consultants": [_consultant_row(c) for c in ranked]}
    scored = _suggest_consultants(state.consultants, work_item)
    return {"source": "local", "consultants": [_consultant_row(c, score) for c, score in scored]}


# -- Allocation --

@mcp.tool()
def allocate_consultant(
    consultant_id: str,
    project_id: str,
    start_date: str,
    end_date: str,
    percentage: float = 1.0,
) -> dict[str, Any]:
    """Allocate a consultant to a project or opportunity.

    Returns the allocation and any advisory violations (date range, double booking).
    """
    state = _state()
    allocation = _allocate_consultant(
        state,
        consultant_id,
        project_id,
        start_date=start_date,
        end_date=end_date,
        percentage=percentage,
    )
    state_id = _persist(state, source=_origin())
    return {
        "allocation": allocation.to_dict(),
        "warnings": validate_allocation(state, allocation),
        "state_id": state_id,
    }


@mcp.tool()
def release_allocation(allocation_id: str) -> dict[str, Any]:
    """Remove an allocation; the consultant is benched when nothing else references them."""
    state = _state()
    allocation = _release_allocation(state, allocation_id)
    state_id = _persist(state, source=_origin())
    return {
        "released": allocation.to_dict(),
        "consultant": state.consultant(allocation.consultant_id).to_dict(),
        "state_id": state_id,
    }


@mcp.tool()
def auto_allocate() -> dict[str, Any]:
    """Pair benched consultants with work items needing resources, in list order."""
    state = _state()
    result = _auto_allocate(state)
    out = result.to_dict()
    if result.ok:
        out["state_id"] = _persist(state, source=_origin())
    return out


@mcp.tool()
def validate_allocations() -> list[dict[str, Any]]:
    """Advisory checks over every allocation in the working state."""
    return validate_state(_state())


# -- Timeline --

@mcp.tool()
def timeline(
    start: str | None = None,
    end: str | None = None,
    granularity: str = "weeks",
    shift: int = 0,
    today: str | None = None,
) -> dict[str, Any]:
    """Resource timeline: period columns, per-consultant bars in percent, today marker.

    Without start/end the view runs from today to six months ahead.
    shift moves the view by whole steps (4 weeks or 2 months) back or forward.
    """
    today_date = date.fromisoformat(today) if today else date.today()
    if start and end:
        view = TimelineView(date.fromisoformat(start), date.fromisoformat(end), granularity)
    else:
        base = default_view(today_date)
        view = TimelineView(base.start, base.end, granularity)
    if shift:
        view = shift_view(view, shift)
    return build_timeline(_state(), view, today=today_date)


# -- Creation --

@mcp.tool()
def add_consultant(
    name: str,
    role: str,
    service_line: str,
    expertise: str = "",
    rate: float | None = None,
    preferred_sector: str | None = None,
    location: str | None = None,
    start_date: str | None = None,
) -> dict[str, Any]:
    """Add a benched consultant with the next C-prefixed ID."""
    state = _state()
    consultant = _add_consultant(
        state,
        name=name,
        role=role,
        service_line=service_line,
        expertise=expertise,
        rate=rate,
        preferred_sector=preferred_sector,
        location=location,
        start_date=start_date or date.today().isoformat(),
    )
    state_id = _persist(state, source=_origin())
    return {"consultant": consultant.to_dict(), "state_id": state_id}


@mcp.tool()
def add_project(
    name: str,
    client_name: str,
    start_date: str,
    end_date: str,
    resources_needed: int,
    pipeline: bool = False,
    win_percentage: int = 50,
    sector: str | None = None,
) -> dict[str, Any]:
    """Add a confirmed project, or a pipeline opportunity when pipeline is true."""
    if date.fromisoformat(start_date) > date.fromisoformat(end_date):
        raise ValueError("start date is after end date")

    state = _state()
    fields = {
        "name": name,
        "client_name": client_name,
        "start_date": start_date,
        "end_date": end_date,
        "resources_needed": resources_needed,
        "sector": sector,
    }
    if pipeline:
        item = _add_pipeline_opportunity(state, win_percentage=win_percentage, **fields)
    else:
        item = _add_project(state, **fields)
    state_id = _persist(state, source=_origin())
    return {"project": {**item.to_dict(), "type": work_item_kind(item)}, "state_id": state_id}


# -- Server entrypoints --

async def _run_http() -> None:
    import uvicorn
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.responses import JSONResponse, PlainTextResponse
    from starlette.routing import Route

    api_key = os.getenv("MCP_API_KEY")

    class BearerAuth(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            if request.url.path == "/health":
                return await call_next(request)
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[7:] != api_key:
                return JSONResponse({"error": "unauthorized"}, status_code=401)
            return await call_next(request)

    starlette_app = mcp.streamable_http_app()

    if api_key:
        starlette_app.add_middleware(BearerAuth)

    starlette_app.routes.append(
        Route("/health", lambda r: PlainTextResponse("ok"))
    )

    config = uvicorn.Config(
        starlette_app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    global _ENV_FILE

    parser = argparse.ArgumentParser(description="Run staffing-dashboard MCP server")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http when PORT is set, else stdio)",
    )
    args = parser.parse_args()
    _ENV_FILE = args.env_file

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    transport = args.transport
    if transport is None:
        transport = "streamable-http" if os.getenv("PORT") else "stdio"

    if transport == "streamable-http":
        import anyio
        anyio.run(_run_http)
    else:
        mcp.run(transport=transport)


if __name__ == "__main__":
    main()
