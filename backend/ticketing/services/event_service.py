"""
Event catalog: create, read, update and delete events.

The sold counter is never written here; only the purchase service moves it.
"""

from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.core.errors import EventNotFoundError, InvalidInputError
from ticketing.core.logging import get_logger
from ticketing.models import Event, Ticket
from ticketing.schemas.event import EventCreate, EventUpdate

logger = get_logger(__name__)


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    """Create a new event with nothing sold yet."""
    event = Event(
        **event_data.model_dump(),
        sold_tickets=0,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)
    await db.commit()

    logger.info(
        "event_created",
        event_id=event.id,
        title=event.title,
        total_tickets=event.total_tickets,
        creator_id=event.creator_id,
    )
    return event


async def get_event(db: AsyncSession, event_id: str) -> Event:
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise EventNotFoundError(event_id)
    return event


async def list_events(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    status: Optional[str] = None,
    creator_id: Optional[str] = None,
) -> tuple[list[Event], int]:
    """List events newest first, optionally filtered by status or creator."""
    query = select(Event)

    if status:
        query = query.where(Event.status == status)
    if creator_id:
        query = query.where(Event.creator_id == creator_id)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    events_query = (
        query
        .order_by(Event.created_at.desc(), Event.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(events_query)
    events = list(result.scalars().all())
    await db.commit()

    return events, total


async def update_event(db: AsyncSession, event_id: str, changes: EventUpdate) -> Event:
    """
    Apply a partial update to an event's catalog fields.

    Capacity may grow freely but may not drop below what has already been sold.
    """
    event = await get_event(db, event_id)
    values = changes.model_dump(exclude_unset=True)
    fields = sorted(values)

    new_total = values.pop("total_tickets", None)
    if new_total is not None:
        # Checked against the sold count at write time, not the one read above
        result = await db.execute(
            update(Event)
            .where(Event.id == event_id, Event.sold_tickets <= new_total)
            .values(total_tickets=new_total)
        )
        if result.rowcount != 1:
            sold = (
                await db.execute(select(Event.sold_tickets).where(Event.id == event_id))
            ).scalar_one_or_none()
            await db.rollback()
            if sold is None:
                raise EventNotFoundError(event_id)
            raise InvalidInputError(f"totalTickets cannot be lower than tickets already sold ({sold})")

    for field, value in values.items():
        if value is None and field in ("title", "price", "status", "is_public"):
            continue
        setattr(event, field, value)

    await db.flush()
    await db.refresh(event)
    await db.commit()

    logger.info("event_updated", event_id=event.id, fields=fields)
    return event


async def delete_event(db: AsyncSession, event_id: str) -> None:
    """Delete an event that has never had a ticket issued."""
    event = await get_event(db, event_id)

    issued = (
        await db.execute(select(func.count()).select_from(Ticket).where(Ticket.event_id == event_id))
    ).scalar()
    if issued:
        await db.rollback()
        raise InvalidInputError("Event has issued tickets and cannot be deleted")

    await db.execute(delete(Event).where(Event.id == event.id))
    await db.commit()

    logger.info("event_deleted", event_id=event_id)
