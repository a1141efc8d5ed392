from ticketing.models.event import Event
from ticketing.models.ticket import Ticket

__all__ = ["Event", "Ticket"]
