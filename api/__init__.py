"""Checkout-facing HTTP API: pricing, gateway settings and charge intents."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    success_response,
    error_response,
    ErrorCodes,
)
