"""
Ticket purchase and stream access endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.db.session import get_db
from ticketing.schemas.ticket import AccessResponse, StreamEvent, TicketPurchase, TicketResponse
from ticketing.services.access_service import check_access
from ticketing.services.cache_service import invalidate_event_cache
from ticketing.services.purchase_service import purchase_ticket

router = APIRouter(prefix="/events", tags=["Tickets"])


@router.post(
    "/{event_id}/tickets",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
)
async def purchase_ticket_endpoint(
    event_id: str,
    purchase: TicketPurchase,
    db: AsyncSession = Depends(get_db),
):
    """
    Buy one ticket.

    400 SOLD_OUT when capacity is exhausted, 400 DUPLICATE_PURCHASE when the
    user already holds an active ticket, 404 for an unknown event.
    """
    ticket = await purchase_ticket(
        db,
        event_id=event_id,
        user_id=purchase.user_id,
        claimed_price=purchase.price,
        claimed_title=purchase.event_title,
    )
    # Sold count changed
    await invalidate_event_cache()
    return ticket


@router.get("/{event_id}/access/{user_id}", response_model=AccessResponse)
async def check_access_endpoint(
    event_id: str,
    user_id: str,
    db: AsyncSession = Depends(get_db),
):
    decision = await check_access(db, user_id, event_id)

    event = StreamEvent.model_validate(decision.event, from_attributes=True)
    event.stream_url = decision.stream_url
    return AccessResponse(
        has_access=decision.granted,
        ticket=TicketResponse.model_validate(decision.ticket) if decision.granted else None,
        event=event,
    )
