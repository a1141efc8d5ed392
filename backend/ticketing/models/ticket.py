"""
Ticket model: proof that one user bought access to one event.

Key design decisions:
- Partial unique index on (user_id, event_id) WHERE status = 'active'.
  A user may hold any number of used/expired tickets for an event but only
  one active one; a second concurrent insert fails at commit.
- `event_title` and `price` are copied from the event at purchase time and
  are not kept in sync with later edits to the event.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, text
from sqlalchemy.orm import relationship

from ticketing.db.base import Base, TimestampMixin

TICKET_STATUSES = ("active", "used", "expired")
ACTIVE_TICKET_INDEX = "uq_tickets_user_event_active"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ticket(Base, TimestampMixin):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(128), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    event_title = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    purchase_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    status = Column(String(20), nullable=False, default="active")

    event = relationship("Event", back_populates="tickets", lazy="raise")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        CheckConstraint("status IN ('active', 'used', 'expired')", name="check_ticket_status"),
        Index(
            ACTIVE_TICKET_INDEX,
            "user_id",
            "event_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
