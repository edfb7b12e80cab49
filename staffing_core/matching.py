"""Consultant-to-work-item match scoring and suggestion ranking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .models import BENCHED, Consultant, WorkItem

SCORING = {
    "base": 60,
    "sector_bonus": 20,
    "expertise_bonus": 10,
    "rate_bonus": 10,
    "max": 100,
}

EXPERTISE_KEYWORDS = ("Digital", "Data")
RATE_THRESHOLD = 1000


def _expertise_overlap(consultant: Consultant, work_item: WorkItem) -> bool:
    if not consultant.expertise:
        return False
    for keyword in EXPERTISE_KEYWORDS:
        if keyword in consultant.expertise and keyword in work_item.name:
            return True
    return False


def match_score(consultant: Consultant, work_item: WorkItem) -> int:
    score = SCORING["base"]

    sector = getattr(work_item, "sector", None)
    if consultant.preferred_sector and sector == consultant.preferred_sector:
        score += SCORING["sector_bonus"]

    if _expertise_overlap(consultant, work_item):
        score += SCORING["expertise_bonus"]

    if consultant.rate and consultant.rate > RATE_THRESHOLD:
        score += SCORING["rate_bonus"]

    return min(score, SCORING["max"])


def is_available_for(consultant: Consultant, work_item: WorkItem) -> bool:
    if consultant.end_date is not None and consultant.end_date < work_item.start_date:
        return False
    if consultant.start_date is not None and consultant.start_date > work_item.end_date:
        return False
    return True


def suggest_consultants(
    consultants: Iterable[Consultant],
    work_item: WorkItem | None = None,
) -> list[tuple[Consultant, int | None]]:
    """Benched consultants, best matches first when a work item is selected.

    Ties keep the input order.
    """
    available = [c for c in consultants if c.status == BENCHED]
    if work_item is None:
        return [(c, None) for c in available]

    scored = [(c, match_score(c, work_item)) for c in available if is_available_for(c, work_item)]
    scored.sort(key=lambda pair: -pair[1])
    return scored


def apply_ranking(consultants: Sequence[Consultant], ranking: Iterable[dict[str, Any] | str | int]) -> list[Consultant]:
    """Order consultants by an external ranking, dropping ids that are not known locally."""
    by_id = {c.id: c for c in consultants}
    out: list[Consultant] = []
    for entry in ranking:
        rid = entry.get("id") if isinstance(entry, dict) else entry
        consultant = by_id.get(str(rid))
        if consultant is not None and consultant not in out:
            out.append(consultant)
    return out
