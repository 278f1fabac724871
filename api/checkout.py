"""POST /api/checkout/charge-intent — hand a priced order to a payment gateway."""

from fastapi import APIRouter, Request

from api.base import success_response
from api.middleware import get_request_id
from api.pricing import QuoteRequest, run_quote
from core.models import GatewayProvider, OrderDetails


class ChargeIntentRequest(QuoteRequest):
    """Quote selections plus the order fields the gateway needs."""

    provider: GatewayProvider
    order: OrderDetails


def create_checkout_router(services: dict) -> APIRouter:
    router = APIRouter()

    catalog = services["catalog"]
    engine = services["engine"]
    checkout = services["checkout"]

    @router.post("/checkout/charge-intent")
    async def create_charge_intent(request: Request, body: ChargeIntentRequest):
        # Priced against the domain being ordered, not whatever the picker last showed
        result = run_quote(catalog, engine, body, domain=body.order.domain)
        intent = checkout.build_charge_intent(result, body.order, body.provider)
        return success_response(
            intent.model_dump(mode="json"), get_request_id(request)
        ).model_dump(mode="json")

    return router
