"""GET /api/gateways/* — public payment gateway settings."""

from fastapi import APIRouter, Request

from api.base import success_response
from api.middleware import get_request_id


def create_gateways_router(services: dict) -> APIRouter:
    router = APIRouter()

    gateways = services["gateways"]

    @router.get("/gateways/midtrans")
    async def midtrans_settings(request: Request):
        settings = gateways.get_midtrans_settings()
        return success_response(
            settings.model_dump(mode="json"), get_request_id(request)
        ).model_dump(mode="json")

    @router.get("/gateways/paypal")
    async def paypal_settings(request: Request):
        settings = gateways.get_paypal_settings()
        return success_response(
            settings.model_dump(mode="json"), get_request_id(request)
        ).model_dump(mode="json")

    return router
