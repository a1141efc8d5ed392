"""
Pydantic schemas for ticket purchase and stream access.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ticketing.schemas.event import EventSummary


class TicketPurchase(BaseModel):
    """
    Body of POST /events/{eventId}/tickets.

    `price` and `eventTitle` are what the client believes it is paying for.
    The stored ticket always takes both from the event itself.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    user_id: str = Field(..., min_length=1, max_length=128)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    event_title: Optional[str] = Field(None, max_length=255)


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    event_id: str
    event_title: str
    price: float
    purchase_date: datetime
    status: str


class StreamEvent(EventSummary):
    stream_url: Optional[str] = None


class AccessResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_access: bool
    ticket: Optional[TicketResponse] = None
    event: StreamEvent
