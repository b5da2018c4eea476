"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from obytkem.domain.errors import (
    BookingError,
    CollaboratorUnavailable,
    ConflictError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from obytkem.observability.correlation import (
    CORRELATION_ID_HEADER,
    bind_correlation_id,
    new_correlation_id,
    unbind_correlation_id,
)
from obytkem.observability.logging import get_logger

from .routes import admin, admin_reservations, auth, bookings, health, vehicles

logger = get_logger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[BookingError], int], ...] = (
    (ValidationError, 422),
    (ConflictError, 409),
    (PreconditionError, 409),
    (NotFoundError, 404),
    (CollaboratorUnavailable, 503),
)


def status_for(exc: BookingError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def create_app() -> FastAPI:
    """Create the FastAPI app with public, booking and admin routes."""
    app = FastAPI(
        title="obytkem",
        docs_url=None,
        redoc_url=None,
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or new_correlation_id()
        token = bind_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            unbind_correlation_id(token)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error(
                "collaborator unavailable",
                extra={"extra_fields": {"path": request.url.path, "reason_code": exc.reason_code}},
            )
        return JSONResponse(
            status_code=status,
            content={"detail": exc.reason_code, "message": str(exc), "meta": exc.meta},
        )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(vehicles.router)
    app.include_router(bookings.router)
    app.include_router(admin_reservations.router)
    app.include_router(admin.router)

    return app
