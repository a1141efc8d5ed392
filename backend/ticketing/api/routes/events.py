"""
Event catalog endpoints. Listings are cached in Redis.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.core.logging import get_logger
from ticketing.db.session import get_db
from ticketing.schemas.event import (
    EventCreate,
    EventDeleteResponse,
    EventListResponse,
    EventResponse,
    EventStatus,
    EventSummary,
    EventUpdate,
)
from ticketing.services.cache_service import (
    get_cached_events,
    invalidate_event_cache,
    make_event_list_key,
    set_cached_events,
)
from ticketing.services.event_service import (
    create_event,
    delete_event,
    get_event,
    list_events,
    update_event,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(event_data: EventCreate, db: AsyncSession = Depends(get_db)):
    event = await create_event(db, event_data)
    await invalidate_event_cache()
    return event


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    creator_id: Optional[str] = Query(None, alias="creatorId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    db: AsyncSession = Depends(get_db),
):
    """
    List events, newest first.
    Cached until the next purchase or catalog change, or the TTL.
    """
    cache_key = make_event_list_key(page, page_size, status_filter, creator_id)
    cached = await get_cached_events(cache_key)
    if cached:
        logger.info("events_list_cache_hit", page=page)
        cached["cached"] = True
        return EventListResponse(**cached)

    events, total = await list_events(db, page, page_size, status_filter, creator_id)

    response_data = {
        "events": [EventSummary.model_validate(e).model_dump() for e in events],
        "total": total,
        "page": page,
        "page_size": page_size,
        "cached": False,
    }
    await set_cached_events(cache_key, response_data)

    return EventListResponse(**response_data)


@router.get("/{event_id}", response_model=EventSummary)
async def get_event_endpoint(event_id: str, db: AsyncSession = Depends(get_db)):
    """Single event, read straight from the database for a live sold count. No stream URL."""
    return await get_event(db, event_id)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: str,
    changes: EventUpdate,
    db: AsyncSession = Depends(get_db),
):
    event = await update_event(db, event_id, changes)
    await invalidate_event_cache()
    return event


@router.delete("/{event_id}", response_model=EventDeleteResponse)
async def delete_event_endpoint(event_id: str, db: AsyncSession = Depends(get_db)):
    await delete_event(db, event_id)
    await invalidate_event_cache()
    return EventDeleteResponse(message="Event deleted successfully", id=event_id)
