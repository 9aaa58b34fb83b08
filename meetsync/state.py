from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from .config import Settings
from .db import RecordingStore
from .services.listing import RecordingListing
from .services.remote import RemoteClient
from .services.sync import SyncOrchestrator


@dataclass
class State:
    """Collaborators shared across requests.

    Built once per app and attached to FastAPI's app.state instead of living
    in module-level globals.
    """

    store: RecordingStore
    remote: RemoteClient
    listing: RecordingListing
    sync: SyncOrchestrator

    @classmethod
    def build(cls, settings: Settings, store: RecordingStore, remote: RemoteClient) -> "State":
        listing = RecordingListing(
            remote,
            num_meetings=settings.num_meetings,
            recent_limit=settings.recent_limit,
            dedupe=settings.dedupe_meetings,
        )
        sync = SyncOrchestrator(remote, store)
        # a finished refresh re-runs both list queries
        sync.add_dependent(listing.refetch)
        return cls(store=store, remote=remote, listing=listing, sync=sync)


def get_state(request: Request) -> State:  # FastAPI dependency helper
    return request.app.state.state
