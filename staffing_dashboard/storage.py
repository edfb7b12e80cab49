from __future__ import annotations

import json
from pathlib import Path
from typing import Any

PREFERENCES_FILE = "preferences.json"


def _json_dump(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def _json_load(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def state_root(artifact_root: Path) -> Path:
    path = artifact_root / "states"
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_state(artifact_root: Path, state_doc: dict[str, Any]) -> Path:
    """Persist a state document (``state_id``, ``source``, ``generated_at``, ``state``)."""
    root = state_root(artifact_root)
    sid = state_doc["state_id"]
    target = root / sid
    target.mkdir(parents=True, exist_ok=True)
    _json_dump(target / "state.json", state_doc)

    payload = state_doc.get("state", {})
    manifest = {
        "state_id": sid,
        "source": state_doc.get("source"),
        "generated_at": state_doc.get("generated_at"),
        "counts": {key: len(payload.get(key, [])) for key in ("consultants", "projects", "pipeline", "allocations")},
        "path": str(target.resolve()),
    }
    _json_dump(target / "manifest.json", manifest)
    _json_dump(root / "latest.json", manifest)
    return target


def list_states(artifact_root: Path, limit: int = 20) -> list[dict[str, Any]]:
    root = state_root(artifact_root)
    manifests: list[dict[str, Any]] = []
    for child in root.iterdir():
        if not child.is_dir():
            continue
        manifest_file = child / "manifest.json"
        if not manifest_file.exists():
            continue
        try:
            manifests.append(_json_load(manifest_file))
        except json.JSONDecodeError:
            continue
    manifests.sort(key=lambda row: row.get("generated_at", ""), reverse=True)
    return manifests[:limit]


def load_state(artifact_root: Path, state_id: str | None = None) -> dict[str, Any]:
    root = state_root(artifact_root)
    if state_id:
        manifest_path = root / state_id / "manifest.json"
    else:
        manifest_path = root / "latest.json"
    if not manifest_path.exists():
        raise FileNotFoundError("state manifest not found")
    manifest = _json_load(manifest_path)
    sid = manifest["state_id"]
    path = root / sid / "state.json"
    if not path.exists():
        raise FileNotFoundError(f"state payload not found: {sid}")
    return _json_load(path)


def load_preferences(artifact_root: Path) -> dict[str, Any]:
    path = artifact_root / PREFERENCES_FILE
    if not path.exists():
        return {}
    return _json_load(path)


def save_preferences(artifact_root: Path, preferences: dict[str, Any]) -> Path:
    path = artifact_root / PREFERENCES_FILE
    _json_dump(path, preferences)
    return path
