from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class Meeting(BaseModel):
    """One meeting as returned by the list endpoints.

    Date and time stay as the strings the API sent; parsing happens where they
    are used so a malformed value never rejects the whole payload.
    """

    id: Optional[int] = None
    event_id: str
    category_id: Optional[int] = Field(None, alias="categoryId")
    meeting_title: Optional[str] = None
    meeting_date: Optional[str] = None
    meeting_start_time: Optional[str] = None
    meeting_end_time: Optional[str] = None
    meet_url: Optional[str] = None
    meeting_admin_id: Optional[int] = None
    meeting_code: Optional[str] = None
    organizer_email: Optional[str] = None
    source: Optional[str] = None
    bot_id: Optional[int] = None

    class Config:
        populate_by_name = True

    @property
    def key(self) -> str:
        """Identity of the underlying recording, shared across source lists."""
        return self.event_id


class Category(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    meetings: Optional[List[Meeting]] = None


class GroupedMeeting(BaseModel):
    date: str
    meetings: List[Meeting] = []


class MeetingCard(BaseModel):
    key: str
    event_id: str
    title: str
    when: str
    path: str
    meeting: Meeting


class CardGroup(BaseModel):
    date: str
    cards: List[MeetingCard] = []


class ListingResponse(BaseModel):
    status: str = Field(..., description="loading|error|success")
    sync_in_progress: bool = False
    error: Optional[str] = None
    greeting: Optional[str] = None
    today: Optional[str] = None
    initials: Optional[str] = None
    recordings: Optional[List[MeetingCard]] = None
    groups: Optional[List[CardGroup]] = None
