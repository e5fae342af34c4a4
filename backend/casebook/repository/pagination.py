"""Recency ordering and the cursor / offset pagination protocols.

Cursor protocol:
- items are ordered newest first by ``created_at``; ties fall back to
  insertion order, newest insert first
- an empty cursor starts at the beginning
- a cursor is the ID of the last item of the previous page; scanning resumes
  strictly after it
- an unknown cursor (item since deleted) restarts from the beginning
- ``next_cursor`` is "" once the final page has been returned
- ``limit <= 0`` falls back to ``settings.default_page_size``
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from operator import attrgetter
from typing import Any, TypeVar

from casebook.config import settings

T = TypeVar("T")

_by_created_at = attrgetter("created_at")
_by_id = attrgetter("id")


def newest_first(
    items_in_insertion_order: Sequence[T],
    created_at: Callable[[T], datetime] = _by_created_at,
) -> list[T]:
    """Sort by ``created_at`` descending, breaking ties by reverse insertion."""
    return sorted(reversed(items_in_insertion_order), key=created_at, reverse=True)


def resolve_limit(limit: int) -> int:
    return limit if limit > 0 else settings.default_page_size


def paginate(
    ordered: Sequence[T],
    limit: int,
    cursor: str = "",
    key: Callable[[T], Any] = _by_id,
) -> tuple[list[T], str]:
    """Slice one page out of an already-ordered sequence.

    Returns:
        (page, next_cursor) where next_cursor is "" on the last page.
    """
    limit = resolve_limit(limit)

    start = 0
    if cursor:
        for index, item in enumerate(ordered):
            if str(key(item)) == cursor:
                start = index + 1
                break

    page = list(ordered[start:start + limit])
    has_more = start + limit < len(ordered)
    next_cursor = str(key(page[-1])) if page and has_more else ""
    return page, next_cursor


def page_by_offset(ordered: Sequence[T], limit: int, offset: int) -> tuple[list[T], int]:
    """Offset pagination. Returns (page, total count)."""
    limit = resolve_limit(limit)
    offset = max(offset, 0)
    total = len(ordered)
    if offset >= total:
        return [], total
    return list(ordered[offset:offset + limit]), total


def within_window(created_at: datetime, start: datetime | None, end: datetime | None) -> bool:
    """Inclusive ``[start, end]`` check; a None bound is open."""
    if start is not None and created_at < start:
        return False
    if end is not None and created_at > end:
        return False
    return True
