from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel

from .meeting import Meeting


class _Item(BaseModel):
    class Config:
        extra = "ignore"


class ActionPoint(_Item):
    id: Optional[int] = None
    item_text: Optional[str] = None


class Topic(_Item):
    id: Optional[int] = None
    item_text: Optional[str] = None
    description: Optional[str] = None


class KeyTakeaway(_Item):
    id: Optional[int] = None
    item_text: Optional[str] = None


class SuggestedMessage(_Item):
    id: Optional[int] = None
    item_text: Optional[str] = None


class Participant(_Item):
    # name doubles as the render key of a participant row
    name: str
    avatar: Optional[str] = None


class RecordingDetail(Meeting):
    is_public: bool = False
    summary: Optional[str] = None
    error_message: Optional[str] = None
    action_points: List[ActionPoint] = []
    topics: List[Topic] = []
    key_takeaways: List[KeyTakeaway] = []
    questions: List[SuggestedMessage] = []
    participants: List[Participant] = []

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def has_participants(self) -> bool:
        return self.participant_count > 0


class RecordingDetailResponse(BaseModel):
    recording: RecordingDetail
    action_point_texts: List[str]
    topic_texts: List[str]
    key_takeaway_texts: List[str]
    question_texts: List[str]
    participant_count: int
    has_participants: bool
