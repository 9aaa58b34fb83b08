from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from meetsync.app import create_app
from meetsync.config import Settings
from meetsync.db import RecordingStore
from meetsync.errors import RemoteFetchError
from meetsync.models.meeting import Category


def meeting(event_id: str, day: str, start: str = "09:00:00", **extra: Any) -> Dict[str, Any]:
    data = {
        "id": extra.pop("id", 1),
        "event_id": event_id,
        "categoryId": extra.pop("categoryId", 1),
        "meeting_title": extra.pop("meeting_title", f"Meeting {event_id}"),
        "meeting_date": day,
        "meeting_start_time": start,
        "meeting_end_time": extra.pop("meeting_end_time", "10:00:00"),
        "meet_url": "https://meet.example.com/abc",
        "meeting_admin_id": 7,
        "meeting_code": None,
        "organizer_email": "owner@example.com",
        "source": "google",
        "bot_id": 3,
    }
    data.update(extra)
    return data


class FakeRemote:
    """Stands in for RemoteClient; counts calls and can be told to fail."""

    def __init__(
        self,
        categorized: Optional[List[Dict[str, Any]]] = None,
        uncategorized: Optional[List[Dict[str, Any]]] = None,
        recordings: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.categorized = categorized or []
        self.uncategorized = uncategorized or []
        self.recordings = recordings or []
        self.fail_categorized = False
        self.fail_uncategorized = False
        self.fail_recordings = False
        self.calls: Counter = Counter()
        self.release: Optional[asyncio.Event] = None

    async def fetch_categorized_meetings(self, limit: int = 100) -> List[Category]:
        self.calls["categorized"] += 1
        if self.fail_categorized:
            raise RemoteFetchError("HTTP 500 from /categories-with-meetings/")
        return [Category(**c) for c in self.categorized]

    async def fetch_uncategorized_meetings(self, limit: int = 100) -> List[Category]:
        self.calls["uncategorized"] += 1
        if self.fail_uncategorized:
            raise RemoteFetchError("HTTP 500 from /uncategorized-meetings/")
        return [Category(**c) for c in self.uncategorized]

    async def fetch_user_recordings(self, user_id: str) -> List[Dict[str, Any]]:
        self.calls["recordings"] += 1
        if self.release is not None:
            await self.release.wait()
        if self.fail_recordings:
            raise RemoteFetchError("request to /recordings/ failed")
        return list(self.recordings)

    async def aclose(self) -> None:
        pass


@pytest.fixture
def store(tmp_path) -> RecordingStore:
    s = RecordingStore(tmp_path / "cache.db")
    s.initialize()
    return s


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=tmp_path / "app.db", api_base_url="http://remote.test/api")


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote(
        categorized=[
            {
                "id": 1,
                "name": "Sales",
                "meetings": [
                    meeting("evt-a", "2024-03-01", "09:00:00"),
                    meeting("evt-b", "2024-03-03", "14:30:00"),
                ],
            },
            {"id": 2, "name": "Empty", "meetings": []},
        ],
        uncategorized=[
            {"id": 0, "name": "Uncategorized", "meetings": [meeting("evt-c", "2024-03-02", "08:00:00")]},
        ],
        recordings=[
            meeting(
                "evt-a",
                "2024-03-01",
                "09:00:00",
                is_public=True,
                summary="Quarterly numbers",
                action_points='[{"id": 1, "item_text": "Send deck"}]',
                topics=[{"item_text": "Revenue", "description": "Up 5%"}],
                key_takeaways="[]",
                questions='[{"item_text": "What about Q3?"}]',
                participants='[{"name": "Ana"}, {"name": "Bo", "avatar": "bo.png"}]',
            ),
            meeting("evt-b", "2024-03-03", "14:30:00", topics="{not json"),
        ],
    )


@pytest.fixture
def app(settings, remote):
    return create_app(settings=settings, remote=remote)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
