"""Role-to-seniority classification helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

ALL = "all"
LEADERSHIP = "leadership"
INDIVIDUAL = "individual"
SENIORITY_FILTERS = (ALL, LEADERSHIP, INDIVIDUAL)

SENIORITY_ROLES: dict[str, tuple[str, ...]] = {
    LEADERSHIP: ("Senior Partner", "Partner", "Associate Partner", "Principal"),
    INDIVIDUAL: ("Consultant", "Senior Consultant", "Associate"),
}


def seniority_of(
    role: str | None,
    *,
    role_map: Mapping[str, Sequence[str]] = SENIORITY_ROLES,
) -> str | None:
    """Return the first seniority band whose titles occur in ``role``."""
    role_norm = str(role or "").lower().strip()
    if not role_norm:
        return None
    for band, titles in role_map.items():
        if any(t.lower() in role_norm for t in titles):
            return band
    return None


def matches_seniority(role: str | None, seniority: str) -> bool:
    if seniority not in SENIORITY_FILTERS:
        raise ValueError(f"Unknown seniority filter: {seniority!r}. Choose from {SENIORITY_FILTERS}")
    if seniority == ALL:
        return True
    role_norm = str(role or "").lower()
    return any(t.lower() in role_norm for t in SENIORITY_ROLES[seniority])
