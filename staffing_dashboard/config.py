from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

MOCK = "mock"
API = "api"
DATA_SOURCES = (MOCK, API)


@dataclass(frozen=True)
class RuntimeConfig:
    api_base_url: str
    data_source: str
    artifact_root: Path
    api_timeout_s: float
    api_retries: int
    mock_dir: Path | None


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def validate_data_source(value: str) -> str:
    source = (value or "").strip().lower()
    if source not in DATA_SOURCES:
        raise ValueError(f"Unknown data source: {value!r}. Choose from {DATA_SOURCES}")
    return source


def runtime_config() -> RuntimeConfig:
    api_base_url = os.getenv("STAFFING_API_BASE_URL", "http://localhost:5000/api").rstrip("/")
    data_source = validate_data_source(os.getenv("STAFFING_DATA_SOURCE", MOCK))
    artifact_root = Path(os.getenv("STAFFING_ARTIFACT_DIR", "./artifacts")).expanduser().resolve()
    api_timeout_s = float(os.getenv("STAFFING_API_TIMEOUT_S", "30"))
    api_retries = int(os.getenv("STAFFING_API_RETRIES", "1"))
    mock_dir_raw = os.getenv("STAFFING_MOCK_DIR", "").strip()
    mock_dir = Path(mock_dir_raw).expanduser().resolve() if mock_dir_raw else None
    artifact_root.mkdir(parents=True, exist_ok=True)
    return RuntimeConfig(
        api_base_url=api_base_url,
        data_source=data_source,
        artifact_root=artifact_root,
        api_timeout_s=api_timeout_s,
        api_retries=api_retries,
        mock_dir=mock_dir,
    )
