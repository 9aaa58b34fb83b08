from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from ..models.meeting import CardGroup, Category, GroupedMeeting, ListingResponse, Meeting, MeetingCard
from .bucketing import bucket_by_date
from .display import detail_path, display_title, format_meeting_datetime, greeting, initials, list_key, today_label
from .merge import dedupe_by_event_id, merge_and_sort, most_recent, search_meetings
from .queries import ERROR, LOADING, SUCCESS, MeetingQuery
from .remote import RemoteClient


class RecordingListing:
    """Recording list: two remote queries, merged into one ordered view.

    The listing is "active" while its consumer is showing it. Queries settling
    while it is inactive still store their data, but the derived meeting list
    is only recomputed for an active listing.
    """

    def __init__(
        self,
        remote: RemoteClient,
        num_meetings: int = 100,
        recent_limit: int = 10,
        dedupe: bool = False,
    ) -> None:
        self.categorized: MeetingQuery[Category] = MeetingQuery(
            "categoriesWithMeetings", lambda: remote.fetch_categorized_meetings(num_meetings)
        )
        self.uncategorized: MeetingQuery[Category] = MeetingQuery(
            "uncategorizedMeetings", lambda: remote.fetch_uncategorized_meetings(num_meetings)
        )
        self.recent_limit = recent_limit
        self.dedupe = dedupe
        self.active = False
        self.meetings: List[Meeting] = []
        self.logger = logging.getLogger("app.listing")

    @property
    def queries(self) -> List[MeetingQuery[Category]]:
        return [self.categorized, self.uncategorized]

    @property
    def status(self) -> str:
        # idle counts as loading: nothing to show yet
        if not all(q.settled for q in self.queries):
            return LOADING
        # uncategorized failures degrade to an empty set
        if self.categorized.is_error:
            return ERROR
        return SUCCESS

    def focus(self) -> None:
        self.active = True
        self.apply()

    def blur(self) -> None:
        self.active = False

    def apply(self) -> None:
        """Recompute the merged list from whatever the queries currently hold."""
        if not self.active:
            return
        merged = merge_and_sort(self.categorized.data_or_empty(), self.uncategorized.data_or_empty())
        if self.dedupe:
            merged = dedupe_by_event_id(merged)
        self.meetings = merged
        self.logger.debug(f"listing holds {len(merged)} meeting(s)")

    async def _run(self, queries: List[MeetingQuery[Category]]) -> None:
        if queries:
            await asyncio.gather(*(q.run() for q in queries))
        self.apply()

    async def load(self) -> None:
        """Run queries that have never run."""
        await self._run([q for q in self.queries if q.runs == 0])

    async def refetch(self) -> None:
        await self._run(self.queries)

    async def retry(self) -> None:
        """Re-run failed queries (all of them if none failed)."""
        failed = [q for q in self.queries if q.is_error]
        await self._run(failed or self.queries)

    def recent(self, search: Optional[str] = None) -> List[Meeting]:
        return most_recent(search_meetings(self.meetings, search), self.recent_limit)

    def groups(self, search: Optional[str] = None, now: Optional[datetime] = None) -> List[GroupedMeeting]:
        return bucket_by_date(search_meetings(self.meetings, search), now=now)

    def snapshot(
        self,
        view: str = "recent",
        search: Optional[str] = None,
        sync_in_progress: bool = False,
        username: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ListingResponse:
        status = self.status
        resp = ListingResponse(status=status, sync_in_progress=sync_in_progress)
        if status == ERROR:
            resp.error = self.categorized.error
            return resp
        if status == LOADING:
            return resp
        resp.greeting = greeting(username, now)
        resp.today = today_label(now)
        resp.initials = initials(username)
        if view == "all":
            resp.groups = [
                CardGroup(date=g.date, cards=[_card("vertical", m, i) for i, m in enumerate(g.meetings)])
                for g in self.groups(search, now=now)
            ]
        else:
            resp.recordings = [_card("recent", m, i) for i, m in enumerate(self.recent(search))]
        return resp


def _card(prefix: str, meeting: Meeting, index: int) -> MeetingCard:
    return MeetingCard(
        key=list_key(prefix, meeting, index),
        event_id=meeting.event_id,
        title=display_title(meeting),
        when=format_meeting_datetime(meeting.meeting_date, meeting.meeting_start_time),
        path=detail_path(meeting),
        meeting=meeting,
    )
