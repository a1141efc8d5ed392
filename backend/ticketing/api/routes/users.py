"""
Per-user ticket history.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.db.session import get_db
from ticketing.schemas.ticket import TicketResponse
from ticketing.services.purchase_service import get_user_tickets

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}/tickets", response_model=list[TicketResponse])
async def list_user_tickets(user_id: str, db: AsyncSession = Depends(get_db)):
    """All tickets of a user, newest first."""
    return await get_user_tickets(db, user_id)
