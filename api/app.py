"""FastAPI application wiring."""

from fastapi import FastAPI

from api.checkout import create_checkout_router
from api.errors import register_error_handlers
from api.gateways import create_gateways_router
from api.middleware import RequestIDMiddleware
from api.pricing import create_pricing_router
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.config import PricingConfig
from core.pricing import PricingEngine
from core.services.add_on_service import AddOnService
from core.services.checkout_service import CheckoutService
from core.services.duration_service import DurationService
from core.services.gateway_settings_service import GatewaySettingsService
from core.services.pricing_catalog_service import PricingCatalogService
from core.services.promo_service import PromoService


def build_services(postgres: PostgresClient, config: PricingConfig | None = None) -> dict:
    """Service registry shared by the routers."""
    audit = AuditLogger(postgres)
    promo = PromoService(postgres)
    gateways = GatewaySettingsService(postgres)

    return {
        "audit": audit,
        "catalog": PricingCatalogService(postgres, promo),
        "promo": promo,
        "durations": DurationService(postgres, audit),
        "add_ons": AddOnService(postgres, audit),
        "gateways": gateways,
        "checkout": CheckoutService(gateways),
        "engine": PricingEngine(config),
    }


def create_app(services: dict) -> FastAPI:
    """App with request ids, error handlers and the checkout-facing routes."""
    app = FastAPI(title="orderdesk")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_pricing_router(services), prefix="/api")
    app.include_router(create_gateways_router(services), prefix="/api")
    app.include_router(create_checkout_router(services), prefix="/api")

    return app
