"""Month labels ("enero 2024") used to bucket contractual documents."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def month_label(d: date) -> str:
    """Full Spanish month name plus year, lowercase."""
    return f"{MONTH_NAMES[d.month - 1]} {d.year}"


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_years(d: date, years: int) -> date:
    return add_months(d, years * 12)


def months_between(start: date, end: date) -> list[str]:
    """Labels for every calendar month from ``start`` through ``end``, inclusive.

    Stepping starts at the first of ``start``'s month, so a range that begins
    mid-month still yields that month. ``start > end`` yields an empty list;
    callers validate ordering beforehand.
    """
    if start > end:
        return []

    labels = []
    cursor = start.replace(day=1)
    while cursor <= end:
        labels.append(month_label(cursor))
        cursor = add_months(cursor, 1)
    return labels


def new_months(start: date, end: date, existing: Iterable[str | None]) -> list[str]:
    """Months in ``[start, end]`` not already present in ``existing``, in order."""
    present = {label for label in existing if label}
    return [label for label in months_between(start, end) if label not in present]


def parse_month_label(label: str) -> tuple[int, int] | None:
    """Return ``(year, month)`` for a label, or None when it is not one of ours."""
    parts = label.strip().lower().split()
    if len(parts) != 2 or parts[0] not in MONTH_NAMES or not parts[1].isdigit():
        return None
    return int(parts[1]), MONTH_NAMES.index(parts[0]) + 1


def month_label_sort_key(label: str | None) -> tuple[int, int, int, str]:
    """Chronological ordering for labels; unknown or missing labels sort last."""
    if not label:
        return (1, 0, 0, "")
    parsed = parse_month_label(label)
    if parsed is None:
        return (1, 0, 0, label)
    year, month = parsed
    return (0, year, month, "")
