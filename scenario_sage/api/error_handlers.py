# This file maps scenario API failures onto one JSON error payload.
# Upload limits, scenario input problems, and forecast-service outages all surface
# as {error_code, message, details, request_id, timestamp} so clients branch on error_code.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from scenario_sage.forecast_service.client import ForecastServiceUnavailableError

LOGGER = logging.getLogger("api")

HTTP_ERROR_CODES: dict[int, str] = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


class APIError(Exception):
    """Error raised by routers with a status code and a stable `error_code`."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def _json_error(
    request: Request,
    *,
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": jsonable_encoder(details),
            "request_id": str(getattr(request.state, "request_id", "unknown")),
            "timestamp": datetime.now(tz=UTC).isoformat(),
        },
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    # Location tuples look like ("body", "csv_text"); keep them readable for upload forms.
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": str(error.get("msg", "")),
        }
        for error in exc.errors()
    ]


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    return _json_error(
        request,
        status_code=exc.status_code,
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _json_error(
        request,
        status_code=422,
        error_code="VALIDATION_ERROR",
        message="Request body does not match the expected schema.",
        details=_field_errors(exc),
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return _json_error(
        request,
        status_code=exc.status_code,
        error_code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=str(exc.detail),
    )


async def handle_forecast_service_unavailable(
    request: Request, exc: ForecastServiceUnavailableError
) -> JSONResponse:
    LOGGER.warning(
        "Forecast service unavailable for request_id=%s: %s",
        getattr(request.state, "request_id", "unknown"),
        exc,
    )
    return _json_error(
        request,
        status_code=503,
        error_code="FORECAST_SERVICE_UNAVAILABLE",
        message=str(exc) or "The forecast service could not be reached.",
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error(
        "Unhandled error for request_id=%s",
        getattr(request.state, "request_id", "unknown"),
        exc_info=exc,
    )
    return _json_error(
        request,
        status_code=500,
        error_code="INTERNAL_SERVER_ERROR",
        message="The server encountered an unexpected error.",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the scenario API error handlers to `app`."""

    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(ForecastServiceUnavailableError, handle_forecast_service_unavailable)
    app.add_exception_handler(Exception, handle_unexpected_error)
