"""
Event model with ticket inventory tracking.

Key design decisions:
- `sold_tickets` is a denormalized counter so availability is an O(1) read.
  It is only ever changed by the conditional increment in the purchase
  service, inside the same transaction that inserts the ticket.
- CHECK constraints make the capacity invariant hold at the database level
  even if application code is wrong.
- `date` and `time` are display strings set by the creator, not timestamps.
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ticketing.db.base import Base, TimestampMixin

EVENT_STATUSES = ("upcoming", "live", "past", "cancelled")


def _new_id() -> str:
    return str(uuid.uuid4())


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(String(50), nullable=True)
    time = Column(String(50), nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    total_tickets = Column(Integer, nullable=False)
    sold_tickets = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="upcoming")
    creator_id = Column(String(128), nullable=True, index=True)
    category = Column(String(100), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    # Gated: only disclosed to holders of an active ticket
    stream_url = Column(String(1000), nullable=True)

    tickets = relationship("Ticket", back_populates="event", lazy="raise")

    __table_args__ = (
        CheckConstraint("total_tickets > 0", name="check_total_tickets_positive"),
        CheckConstraint("sold_tickets >= 0", name="check_sold_tickets_non_negative"),
        CheckConstraint("sold_tickets <= total_tickets", name="check_sold_lte_total"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint(
            "status IN ('upcoming', 'live', 'past', 'cancelled')",
            name="check_event_status",
        ),
        Index("ix_events_status_created", "status", "created_at"),
    )

    @property
    def available_tickets(self) -> int:
        return self.total_tickets - self.sold_tickets

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, sold={self.sold_tickets}/{self.total_tickets})>"
