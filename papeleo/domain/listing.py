"""Search and pagination over lists that are already loaded in memory."""

from __future__ import annotations

import math
from typing import Callable, Iterable, Sequence, TypeVar

T = TypeVar("T")


def filter_by_substring(
    items: Iterable[T],
    term: str | None,
    selectors: Sequence[Callable[[T], str | None]],
) -> list[T]:
    """Keep items where any selected field contains ``term``, ignoring case.

    A blank term returns a copy of the input. Input order is preserved.
    """
    items = list(items)
    if term is None or not term.strip():
        return items

    needle = term.strip().lower()
    matched = []
    for item in items:
        for select in selectors:
            value = select(item)
            if value and needle in value.lower():
                matched.append(item)
                break
    return matched


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """1-based page slice; an out-of-range page is an empty list, not an error."""
    if page < 1 or page_size < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_count(total: int, page_size: int) -> int:
    if page_size < 1:
        return 0
    return math.ceil(total / page_size)
