# barbershop/errors.py

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for errors surfaced to API clients as ``{"detail": ...}``."""

    status_code = 400
    detail = "Bad request"
    headers = None

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidPayload(BookingError):
    status_code = 400
    detail = "Invalid payload"


class Unauthorized(BookingError):
    status_code = 401
    detail = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class ServiceUnavailable(BookingError):
    status_code = 400
    detail = "Service not available"


class BarberUnavailable(BookingError):
    status_code = 400
    detail = "Barber not available"


class NotFound(BookingError):
    status_code = 404
    detail = "Not found"


class SlotConflict(BookingError):
    status_code = 409
    detail = "Slot is no longer available"


class AlreadyCancelled(BookingError):
    status_code = 409
    detail = "Appointment already canceled"


class BarberInUse(BookingError):
    status_code = 409
    detail = "Barber still has appointments"


class PersistenceFailure(BookingError):
    status_code = 500
    detail = "Unexpected persistence failure"


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("rejected payload on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InvalidPayload.status_code,
        content={"detail": InvalidPayload.detail, "errors": jsonable_encoder(exc.errors())},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
