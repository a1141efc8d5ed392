"""
Error taxonomy shared by the purchase and access services.

Services raise these; the API layer renders them. Each kind carries a
stable machine-readable code, the HTTP status it maps to, and whether the
caller may safely retry the same request.
"""

from enum import Enum


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_PURCHASE = "DUPLICATE_PURCHASE"
    SOLD_OUT = "SOLD_OUT"
    UNAVAILABLE = "UNAVAILABLE"
    INTERNAL = "INTERNAL"


class TicketingError(Exception):
    """Base error with code, HTTP status and a user-safe message."""

    code: ErrorCode = ErrorCode.INTERNAL
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(TicketingError):
    """Missing or malformed request fields."""

    code = ErrorCode.INVALID_INPUT
    status_code = 400


class NotFoundError(TicketingError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class DuplicatePurchaseError(TicketingError):
    """The user already holds an active ticket for the event."""

    code = ErrorCode.DUPLICATE_PURCHASE
    status_code = 400

    def __init__(self, user_id: str, event_id: str) -> None:
        super().__init__("You already have an active ticket for this event")
        self.user_id = user_id
        self.event_id = event_id


class SoldOutError(TicketingError):
    code = ErrorCode.SOLD_OUT
    status_code = 400

    def __init__(self, event_id: str) -> None:
        super().__init__("Sold out")
        self.event_id = event_id


class UnavailableError(TicketingError):
    """Transient storage failure. Safe to retry with backoff."""

    code = ErrorCode.UNAVAILABLE
    status_code = 503
    retryable = True

    def __init__(self, message: str = "Service temporarily unavailable, please retry") -> None:
        super().__init__(message)


class InternalError(TicketingError):
    """Unexpected failure. Details stay in the logs."""

    def __init__(self) -> None:
        super().__init__("Internal server error")
