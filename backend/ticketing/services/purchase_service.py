"""
Ticket purchase with inventory consistency.

CONCURRENCY STRATEGY: Conditional Increment + Partial Unique Index
==================================================================

Problem 1, overselling:
  Two users try to buy the last ticket at the same time. Both read
  sold_tickets=9 of 10, both insert a ticket, the counter ends at 11.

  Fix: the counter moves only through

    UPDATE events SET sold_tickets = sold_tickets + 1
    WHERE id = :event_id AND sold_tickets < total_tickets

  The predicate is evaluated by the database against the row as it stands
  at write time, not against the value we read during validation. The
  loser of the race updates zero rows and gets SoldOut. The CHECK
  constraint sold_tickets <= total_tickets backs this up.

Problem 2, duplicate active tickets:
  The same user double-clicks "buy". Both requests see no active ticket.

  Fix: a partial unique index on tickets(user_id, event_id) WHERE
  status = 'active'. The second insert raises IntegrityError, we roll the
  whole transaction back (including its increment) and report
  DuplicatePurchase.

Both writes happen in one transaction, so there is never a ticket without
an increment or an increment without a ticket.

The ticket's price and title come from the event row. What the client
claims it is paying is only compared and logged.
"""

import math
import time
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketing.core.errors import (
    DuplicatePurchaseError,
    EventNotFoundError,
    InvalidInputError,
    SoldOutError,
    TicketingError,
    UnavailableError,
)
from ticketing.core.logging import get_logger
from ticketing.core.metrics import purchase_latency, record_purchase_attempt
from ticketing.models import Event, Ticket
from ticketing.models.ticket import ACTIVE_TICKET_INDEX

logger = get_logger(__name__)

_OUTCOMES = {
    EventNotFoundError: "not_found",
    InvalidInputError: "invalid",
    DuplicatePurchaseError: "duplicate",
    SoldOutError: "sold_out",
    UnavailableError: "unavailable",
}


_SQLITE_ACTIVE_TICKET_CONFLICT = "UNIQUE constraint failed: tickets.user_id, tickets.event_id"


def _is_active_ticket_conflict(error: IntegrityError) -> bool:
    """True only when the violated constraint is the one-active-ticket index."""
    # asyncpg puts the constraint name on the wrapped exception
    constraint = getattr(error.orig.__cause__, "constraint_name", None)
    if constraint is not None:
        return constraint == ACTIVE_TICKET_INDEX
    message = str(error.orig)
    return ACTIVE_TICKET_INDEX in message or _SQLITE_ACTIVE_TICKET_CONFLICT in message


def _validate_purchase_input(user_id: Optional[str], claimed_price) -> None:
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidInputError("userId is required")
    if claimed_price is None or isinstance(claimed_price, bool):
        raise InvalidInputError("price is required")
    try:
        price = float(claimed_price)
    except (TypeError, ValueError):
        raise InvalidInputError("price must be a number")
    if not math.isfinite(price) or price < 0:
        raise InvalidInputError("price must be a non-negative number")


async def find_active_ticket(db: AsyncSession, user_id: str, event_id: str) -> Optional[Ticket]:
    result = await db.execute(
        select(Ticket).where(
            Ticket.user_id == user_id,
            Ticket.event_id == event_id,
            Ticket.status == "active",
        )
    )
    return result.scalar_one_or_none()


async def _reserve_seat(db: AsyncSession, event_id: str) -> bool:
    """Conditionally bump the sold counter. False if the event is full."""
    result = await db.execute(
        update(Event)
        .where(
            Event.id == event_id,
            Event.sold_tickets < Event.total_tickets,
        )
        .values(sold_tickets=Event.sold_tickets + 1)
    )
    return result.rowcount == 1


async def _issue_ticket(db: AsyncSession, event: Event, user_id: str) -> Ticket:
    ticket = Ticket(
        user_id=user_id,
        event_id=event.id,
        event_title=event.title,
        price=event.price,
        status="active",
    )
    db.add(ticket)
    await db.flush()
    return ticket


async def purchase_ticket(
    db: AsyncSession,
    event_id: str,
    user_id: str,
    claimed_price: float,
    claimed_title: Optional[str] = None,
) -> Ticket:
    """
    Buy one ticket for `user_id` to `event_id`.

    Checks run in order and fail before anything is written: unknown event,
    malformed input, existing active ticket, no capacity left. The
    increment and insert then commit together or not at all.

    Raises EventNotFoundError, InvalidInputError, DuplicatePurchaseError,
    SoldOutError or UnavailableError. Anything else is re-raised after
    rollback.
    """
    start = time.perf_counter()
    try:
        ticket = await _purchase(db, event_id, user_id, claimed_price, claimed_title)
    except TicketingError as e:
        await db.rollback()
        record_purchase_attempt(_OUTCOMES.get(type(e), "error"))
        logger.warning(
            "purchase_rejected",
            event_id=event_id,
            user_id=user_id,
            code=e.code.value,
            reason=e.message,
        )
        raise
    except Exception:
        await db.rollback()
        record_purchase_attempt("error")
        logger.exception("purchase_failed", event_id=event_id, user_id=user_id)
        raise
    finally:
        purchase_latency.observe(time.perf_counter() - start)

    record_purchase_attempt("success")
    return ticket


async def _purchase(
    db: AsyncSession,
    event_id: str,
    user_id: str,
    claimed_price: float,
    claimed_title: Optional[str],
) -> Ticket:
    try:
        event = (await db.execute(select(Event).where(Event.id == event_id))).scalar_one_or_none()
        if event is None:
            raise EventNotFoundError(event_id)

        _validate_purchase_input(user_id, claimed_price)

        if await find_active_ticket(db, user_id, event_id) is not None:
            raise DuplicatePurchaseError(user_id, event_id)

        if event.sold_tickets >= event.total_tickets:
            raise SoldOutError(event_id)

        if float(claimed_price) != float(event.price) or (
            claimed_title is not None and claimed_title != event.title
        ):
            logger.warning(
                "purchase_price_mismatch",
                event_id=event_id,
                user_id=user_id,
                claimed_price=claimed_price,
                event_price=event.price,
                claimed_title=claimed_title,
            )

        if not await _reserve_seat(db, event_id):
            # Either the last ticket went between our read and our write,
            # or the event itself was deleted in that gap
            still_there = (
                await db.execute(select(Event.id).where(Event.id == event_id))
            ).scalar_one_or_none()
            if still_there is None:
                raise EventNotFoundError(event_id)
            raise SoldOutError(event_id)

        try:
            ticket = await _issue_ticket(db, event, user_id)
            await db.commit()
        except IntegrityError as e:
            if not _is_active_ticket_conflict(e):
                raise
            # Partial unique index: a concurrent purchase by this user won
            raise DuplicatePurchaseError(user_id, event_id)
    except (OperationalError, InterfaceError) as e:
        logger.error("purchase_store_unavailable", event_id=event_id, error=str(e.orig or e))
        raise UnavailableError() from e

    logger.info(
        "ticket_purchased",
        ticket_id=ticket.id,
        event_id=event_id,
        user_id=user_id,
        price=ticket.price,
    )
    return ticket


async def get_user_tickets(db: AsyncSession, user_id: str) -> list[Ticket]:
    result = await db.execute(
        select(Ticket)
        .where(Ticket.user_id == user_id)
        .order_by(Ticket.purchase_date.desc())
    )
    tickets = list(result.scalars().all())
    await db.commit()
    return tickets
