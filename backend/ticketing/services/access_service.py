"""
Stream access check: does this user hold an active ticket for this event?

Read-only. The gated stream URL is only returned to ticket holders.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.core.errors import EventNotFoundError, InvalidInputError, UnavailableError
from ticketing.core.logging import get_logger
from ticketing.core.metrics import record_access_check
from ticketing.models import Event, Ticket
from ticketing.services.purchase_service import find_active_ticket

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    granted: bool
    event: Event
    ticket: Optional[Ticket] = None

    @property
    def stream_url(self) -> Optional[str]:
        return self.event.stream_url if self.granted else None


async def check_access(db: AsyncSession, user_id: str, event_id: str) -> AccessDecision:
    if not user_id or not user_id.strip():
        raise InvalidInputError("userId is required")

    try:
        event = (await db.execute(select(Event).where(Event.id == event_id))).scalar_one_or_none()
        if event is None:
            raise EventNotFoundError(event_id)
        ticket = await find_active_ticket(db, user_id, event_id)
        # Nothing was written; commit only ends the read transaction
        await db.commit()
    except (OperationalError, InterfaceError) as e:
        logger.error("access_store_unavailable", event_id=event_id, error=str(e.orig or e))
        raise UnavailableError() from e

    granted = ticket is not None
    record_access_check(granted)
    logger.info("access_checked", event_id=event_id, user_id=user_id, granted=granted)
    return AccessDecision(granted=granted, event=event, ticket=ticket)
