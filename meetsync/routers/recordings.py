from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from ..models.meeting import ListingResponse
from ..models.recording import RecordingDetailResponse
from ..services.normalizer import detail_texts, normalize_detail_fields
from ..state import State, get_state

router = APIRouter(tags=["recordings"])


@router.get("/recordings", response_model=ListingResponse)
async def v1_list_recordings(
    background: BackgroundTasks,
    view: str = Query("recent", description="'recent' (latest slice) or 'all' (grouped by date)"),
    search: Optional[str] = Query(None, description="Case-insensitive title filter"),
    user_id: Optional[str] = Query(None, description="When set, a cache sync is scheduled"),
    username: Optional[str] = Query(None, description="Shown in the greeting"),
    state: State = Depends(get_state),
) -> ListingResponse:
    if view not in {"recent", "all"}:
        raise HTTPException(status_code=400, detail="Invalid view")
    listing = state.listing
    listing.focus()
    await listing.load()
    if user_id and not state.sync.is_refresh_in_progress():
        background.add_task(state.sync.refresh_if_needed, user_id, listing.active)
    return listing.snapshot(
        view=view,
        search=search,
        sync_in_progress=state.sync.is_refresh_in_progress(),
        username=username,
    )


@router.post("/recordings/retry", response_model=ListingResponse)
async def v1_retry_recordings(view: str = "recent", state: State = Depends(get_state)) -> ListingResponse:
    await state.listing.retry()
    return state.listing.snapshot(view=view, sync_in_progress=state.sync.is_refresh_in_progress())


@router.post("/recordings/blur")
def v1_blur_recordings(state: State = Depends(get_state)) -> Dict[str, Any]:
    state.listing.blur()
    return {"ok": True, "active": state.listing.active}


@router.get("/recordings/{event_id}", response_model=RecordingDetailResponse)
async def v1_recording_detail(event_id: str, state: State = Depends(get_state)) -> RecordingDetailResponse:
    row = await asyncio.to_thread(state.store.get_by_event_id, event_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Recording {event_id} not found")
    detail = normalize_detail_fields(row)
    return RecordingDetailResponse(recording=detail, **detail_texts(detail))


@router.post("/sync")
async def v1_sync(user_id: str = Query(..., min_length=1), state: State = Depends(get_state)) -> Dict[str, Any]:
    started = await state.sync.trigger_refresh(user_id)
    return {"ok": True, "started": started, **state.sync.status()}


@router.get("/sync/status")
def v1_sync_status(state: State = Depends(get_state)) -> Dict[str, Any]:
    return state.sync.status()
