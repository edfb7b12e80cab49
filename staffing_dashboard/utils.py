from __future__ import annotations

from datetime import date, datetime, timezone

UTC = timezone.utc


def iso_date(value) -> str:
    """Normalize an ISO date or datetime string to ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value or "").strip()
    if not text:
        raise ValueError("empty date value")
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
