"""
Exception handlers that turn the error taxonomy into JSON responses.

Body shape for every error: {"error": <message>, "code": <ERROR_CODE>}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from ticketing.core.config import get_settings
from ticketing.core.errors import ErrorCode, InternalError, TicketingError, UnavailableError
from ticketing.core.logging import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, code: ErrorCode, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code.value},
        headers=headers,
    )


async def ticketing_error_handler(request: Request, exc: TicketingError) -> JSONResponse:
    headers = None
    if exc.retryable:
        headers = {"Retry-After": str(get_settings().UNAVAILABLE_RETRY_AFTER)}
    if exc.status_code >= 500:
        logger.error("request_error", code=exc.code.value, error=exc.message)
    return _error_response(exc.status_code, exc.code, exc.message, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    logger.info("request_invalid", errors=problems)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.INVALID_INPUT,
        "; ".join(problems) or "Invalid request",
    )


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("store_unavailable", error=str(exc))
    return await ticketing_error_handler(request, UnavailableError())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error_type=type(exc).__name__)
    error = InternalError()
    return _error_response(error.status_code, error.code, error.message)


EXCEPTION_HANDLERS = {
    TicketingError: ticketing_error_handler,
    RequestValidationError: validation_error_handler,
    OperationalError: store_unavailable_handler,
    InterfaceError: store_unavailable_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
