"""
Pydantic schemas for event-related request/response validation.
Field names are camelCase on the wire.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EventStatus = Literal["upcoming", "live", "past", "cancelled"]

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    date: Optional[str] = Field(None, max_length=50)
    time: Optional[str] = Field(None, max_length=50)
    price: float = Field(0, ge=0, allow_inf_nan=False)
    total_tickets: int = Field(..., gt=0, le=1_000_000)
    status: EventStatus = "upcoming"
    creator_id: Optional[str] = Field(None, max_length=128)
    category: Optional[str] = Field(None, max_length=100)
    is_public: bool = True
    stream_url: Optional[str] = Field(None, max_length=1000)


class EventUpdate(BaseModel):
    """Partial update. The sold counter is deliberately absent."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    date: Optional[str] = Field(None, max_length=50)
    time: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    total_tickets: Optional[int] = Field(None, gt=0, le=1_000_000)
    status: Optional[EventStatus] = None
    category: Optional[str] = Field(None, max_length=100)
    is_public: Optional[bool] = None
    stream_url: Optional[str] = Field(None, max_length=1000)


class EventSummary(BaseModel):
    """Public view of an event. Never includes the stream URL."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    price: float
    total_tickets: int
    sold_tickets: int
    available_tickets: int
    status: str
    creator_id: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = True


class EventResponse(EventSummary):
    """Catalog view, as returned to the event's creator and admins."""

    stream_url: Optional[str] = None
    created_at: Optional[datetime] = None


class EventListResponse(BaseModel):
    model_config = _camel

    events: list[EventSummary]
    total: int
    page: int
    page_size: int
    cached: bool = False


class EventDeleteResponse(BaseModel):
    message: str
    id: str
