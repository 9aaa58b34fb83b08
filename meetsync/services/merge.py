from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, List, Optional

from ..models.meeting import Category, Meeting

# Sort key for meetings whose date/time cannot be read; keeps them last
_LOWEST = datetime.min


def parse_meeting_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_meeting_time(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


def meeting_timestamp(meeting: Meeting) -> datetime:
    """Composite ``meeting_date`` + ``meeting_start_time``; lowest possible when unreadable."""
    day = parse_meeting_date(meeting.meeting_date)
    start = parse_meeting_time(meeting.meeting_start_time)
    if day is None or start is None:
        return _LOWEST
    # Offsets are dropped so every key stays comparable
    return datetime.combine(day, start.replace(tzinfo=None))


def flatten(collections: Optional[Iterable[Category]]) -> List[Meeting]:
    meetings: List[Meeting] = []
    for category in collections or []:
        if category.meetings:
            meetings.extend(category.meetings)
    return meetings


def merge_and_sort(
    categorized: Optional[Iterable[Category]],
    uncategorized: Optional[Iterable[Category]],
) -> List[Meeting]:
    """Union both result sets and order newest first.

    Duplicates (same ``event_id`` in both inputs) are kept; use
    :func:`dedupe_by_event_id` afterwards to collapse them. ``sorted`` is
    stable with ``reverse=True`` too, so equal timestamps keep input order.
    """
    meetings = flatten(categorized) + flatten(uncategorized)
    return sorted(meetings, key=meeting_timestamp, reverse=True)


def dedupe_by_event_id(meetings: Iterable[Meeting]) -> List[Meeting]:
    """Keep the first (highest-sorted) meeting per ``event_id``."""
    seen = set()
    out: List[Meeting] = []
    for m in meetings:
        if m.key in seen:
            continue
        seen.add(m.key)
        out.append(m)
    return out


def most_recent(meetings: List[Meeting], limit: int = 10) -> List[Meeting]:
    return meetings[: max(0, limit)]


def search_meetings(meetings: Iterable[Meeting], query: Optional[str]) -> List[Meeting]:
    """Case-insensitive title filter; an empty query keeps everything."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(meetings)
    return [m for m in meetings if needle in (m.meeting_title or "").lower()]
