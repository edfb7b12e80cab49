"""Shared calendar utilities used by timeline and availability logic."""

from __future__ import annotations

import calendar
from datetime import date, timedelta


def week_start(value: date) -> date:
    """Return the Sunday that starts the week containing ``value``."""
    return value - timedelta(days=(value.weekday() + 1) % 7)


def add_months(value: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def weeks_in_range(start: date, end: date) -> list[date]:
    """Week starts of every week intersecting ``[start, end]``."""
    if end < start:
        return []
    out: list[date] = []
    current = week_start(start)
    while current <= end:
        out.append(current)
        current += timedelta(days=7)
    return out


def months_in_range(start: date, end: date) -> list[date]:
    """Monthly steps from ``start`` while before ``end`` or in the same month as ``end``.

    Each step is taken from the previous bucket, so a day clamped in a short
    month stays clamped (2024-01-31 -> 2024-02-29 -> 2024-03-29).
    """
    out: list[date] = []
    current = start
    while current < end or same_month(current, end):
        out.append(current)
        current = add_months(current, 1)
    return out


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive overlap check for two date ranges."""
    return start_a <= end_b and start_b <= end_a
