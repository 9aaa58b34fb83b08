from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..models.meeting import Meeting
from .merge import parse_meeting_date, parse_meeting_time


def display_title(meeting: Meeting) -> str:
    return meeting.meeting_title or f"Recording {meeting.id}"


def format_meeting_datetime(meeting_date: Optional[str], start_time: Optional[str] = None) -> str:
    """``Mar 04, 2025 • 09:30 AM`` style label for a card header."""
    if not meeting_date:
        return "Unknown date"
    day = parse_meeting_date(meeting_date)
    start = parse_meeting_time(start_time) if start_time else None
    if day is None or (start_time and start is None):
        return "Invalid date"
    moment = datetime.combine(day, start.replace(tzinfo=None)) if start else datetime.combine(day, datetime.min.time())
    return moment.strftime("%b %d, %Y • %I:%M %p")


def format_time(start_time: Optional[str]) -> str:
    if not start_time:
        return "Unknown time"
    start = parse_meeting_time(start_time)
    if start is None:
        return "Invalid time"
    return start.strftime("%I:%M %p")


def greeting(username: Optional[str], now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        part = "Good morning"
    elif hour < 17:
        part = "Good afternoon"
    else:
        part = "Good evening"
    return f"{part}, {username}" if username else part


def today_label(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%A, %B %d, %Y")


def initials(username: Optional[str]) -> str:
    return username[:2].upper() if username else "US"


def list_key(prefix: str, meeting: Meeting, index: int) -> str:
    return f"{prefix}-{meeting.id}-{meeting.event_id}-{index}"


def detail_path(meeting: Meeting) -> str:
    return f"/recordingview?eventID={meeting.event_id}"
