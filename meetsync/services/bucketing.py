from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from ..models.meeting import GroupedMeeting, Meeting
from .merge import parse_meeting_date

TODAY = "Today"
THIS_MONTH_PREFIX = "This Month - "
UNKNOWN_DATE = "Unknown date"


def format_day(day: date) -> str:
    return day.strftime("%b %d, %Y")


def bucket_key(meeting_date: Optional[str], today: date) -> str:
    day = parse_meeting_date(meeting_date)
    if day is None:
        return UNKNOWN_DATE
    if day == today:
        return TODAY
    if day.year == today.year and day.month == today.month:
        return f"{THIS_MONTH_PREFIX}{format_day(day)}"
    return format_day(day)


def bucket_by_date(ordered_meetings: Iterable[Meeting], now: Optional[datetime] = None) -> List[GroupedMeeting]:
    """Group already time-sorted meetings under date labels.

    Groups come out in first-seen order and meetings keep their input order;
    the labels are never sorted.
    """
    today = (now or datetime.now()).date()
    grouped: Dict[str, List[Meeting]] = {}
    for meeting in ordered_meetings:
        grouped.setdefault(bucket_key(meeting.meeting_date, today), []).append(meeting)
    return [GroupedMeeting(date=label, meetings=meetings) for label, meetings in grouped.items()]
