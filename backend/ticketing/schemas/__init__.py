from ticketing.schemas.event import (
    EventCreate,
    EventDeleteResponse,
    EventListResponse,
    EventResponse,
    EventSummary,
    EventUpdate,
)
from ticketing.schemas.ticket import AccessResponse, StreamEvent, TicketPurchase, TicketResponse

__all__ = [
    "EventCreate", "EventUpdate", "EventSummary", "EventResponse",
    "EventListResponse", "EventDeleteResponse",
    "TicketPurchase", "TicketResponse", "StreamEvent", "AccessResponse",
]
