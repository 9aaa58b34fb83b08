from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..db import RecordingStore
from ..errors import MeetsyncError
from .remote import RemoteClient

Dependent = Callable[[], Awaitable[None]]


class SyncOrchestrator:
    """Refreshes the local recording cache from the meetings API.

    Only one refresh runs at a time. The in-flight task is the gate: callers
    arriving while it is set get ``False`` back and nothing else happens; the
    running refresh still re-runs the dependent queries when it finishes.
    """

    def __init__(
        self,
        remote: RemoteClient,
        store: RecordingStore,
        dependents: Optional[List[Dependent]] = None,
    ) -> None:
        self.remote = remote
        self.store = store
        self.dependents: List[Dependent] = list(dependents or [])
        self.logger = logging.getLogger("app.sync")
        self._task: Optional[asyncio.Task] = None
        self.last_error: Optional[str] = None
        self.last_written = 0

    def add_dependent(self, dependent: Dependent) -> None:
        self.dependents.append(dependent)

    def is_refresh_in_progress(self) -> bool:
        return self._task is not None

    async def refresh_if_needed(self, user_id: Optional[str], active: bool = True) -> bool:
        if not active:
            return False
        return await self.trigger_refresh(user_id)

    async def trigger_refresh(self, user_id: Optional[str]) -> bool:
        """Run one refresh for ``user_id``; returns False when nothing was started."""
        if not user_id:
            return False
        if self._task is not None:
            self.logger.info("refresh already in progress; skipping")
            return False
        # Claimed before the first await, so no second caller can slip in.
        # Shielded: a cancelled caller does not cancel the refresh itself.
        self._task = asyncio.ensure_future(self._run(str(user_id)))
        await asyncio.shield(self._task)
        return True

    async def _run(self, user_id: str) -> None:
        try:
            await self._refresh(user_id)
        finally:
            self._task = None
        await self._notify_dependents()

    async def _refresh(self, user_id: str) -> None:
        self.last_error = None
        self.last_written = 0
        try:
            rows = await self.remote.fetch_user_recordings(user_id)
        except MeetsyncError as e:
            self.logger.warning(f"sync fetch failed for user {user_id}: {e}")
            self.last_error = str(e)
            return
        for row in rows:
            event_id = row.get("event_id")
            if not event_id:
                self.logger.warning(f"skipping recording without event_id (id={row.get('id')})")
                continue
            try:
                await asyncio.to_thread(self.store.upsert, str(event_id), row)
            except MeetsyncError as e:
                self.logger.warning(f"sync write failed for {event_id}: {e}")
                self.last_error = str(e)
                continue
            self.last_written += 1
        self.logger.info(f"synced {self.last_written}/{len(rows)} recording(s) for user {user_id}")

    async def _notify_dependents(self) -> None:
        for dependent in self.dependents:
            try:
                await dependent()
            except MeetsyncError as e:
                self.logger.warning(f"dependent refetch failed: {e}")

    def status(self) -> Dict[str, Any]:
        return {
            "in_progress": self.is_refresh_in_progress(),
            "last_error": self.last_error,
            "last_written": self.last_written,
        }
