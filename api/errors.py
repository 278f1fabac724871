"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from api.middleware import get_request_id
from core.exceptions import GatewayNotReadyError, PricingUnavailableError

logger = logging.getLogger(__name__)


def _json(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, get_request_id(request)).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(PricingUnavailableError)
    async def pricing_unavailable_handler(request: Request, exc: PricingUnavailableError):
        return _json(request, 400, ErrorCodes.PRICING_UNAVAILABLE, str(exc))

    @app.exception_handler(GatewayNotReadyError)
    async def gateway_not_ready_handler(request: Request, exc: GatewayNotReadyError):
        return _json(request, 503, ErrorCodes.GATEWAY_NOT_READY, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _json(request, 404, ErrorCodes.NOT_FOUND, message)
        return _json(request, 400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return _json(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
