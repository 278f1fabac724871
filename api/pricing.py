"""Pricing endpoints: duration options, order quotes and promo checks.

Every request reloads the catalog and recomputes from scratch. Nothing the
client sends back (subtotals, discounts) is trusted as an amount.
"""

from decimal import Decimal

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field, model_validator

from api.base import success_response
from api.middleware import get_request_id
from core.config import PricingConfig
from core.models import OrderPricingResult, PromoResult
from core.pricing import OrderSelection, PricingEngine, format_amount


class QuoteRequest(BaseModel):
    """What the customer has picked so far."""

    package_id: str | None = None
    domain: str | None = Field(None, max_length=253)
    months: int | None = Field(None, ge=1, le=1200)
    years: int | None = Field(None, ge=1, le=100)
    selected_add_ons: dict[str, bool] = {}
    add_on_quantities: dict[str, Decimal] = {}
    promo_code: str | None = Field(None, max_length=64)

    @model_validator(mode="after")
    def validate_duration(self) -> "QuoteRequest":
        if self.months is not None and self.years is not None:
            raise ValueError("Send either months or years, not both")
        return self

    def selection(self, with_promo: bool = True) -> OrderSelection:
        months = self.months if self.months is not None else (self.years or 1) * 12
        return OrderSelection(
            months=months,
            selected_add_ons=dict(self.selected_add_ons),
            add_on_quantities=dict(self.add_on_quantities),
            promo_code=self.promo_code if with_promo else None,
        )


class PromoCheckRequest(QuoteRequest):
    promo_code: str = Field(..., max_length=64)


def resolve_package_id(catalog, package_id: str | None) -> str | None:
    """Requested package, falling back to the configured default."""
    if package_id:
        return package_id
    return catalog.get_default_package_id()


def run_quote(
    catalog,
    engine: PricingEngine,
    body: QuoteRequest,
    domain: str | None = None,
    with_promo: bool = True,
) -> OrderPricingResult:
    """Load a fresh snapshot and price the request against it."""
    selection = body.selection(with_promo)
    package_id = resolve_package_id(catalog, body.package_id)
    if package_id is None:
        return engine.no_package(selection)

    snapshot = catalog.load_snapshot(
        package_id,
        domain if domain is not None else body.domain,
        selection.promo_code,
    )
    return engine.quote(snapshot, selection)


def format_result(result: OrderPricingResult, config: PricingConfig) -> dict:
    """Result fields plus locale-formatted amounts for the order summary."""
    def base(amount):
        return format_amount(amount, config.base_currency, config.base_locale)

    data = result.model_dump(mode="json")
    data["is_available"] = result.is_available
    data["formatted"] = {
        "subtotal": base(result.subtotal_base),
        "add_ons": base(result.add_ons_base),
        "discount": base(result.discount_applied),
        "total_base": base(result.total_base),
        "total_display": format_amount(
            result.total_display,
            config.display_currency,
            config.locale,
            config.display_fraction_digits,
        ),
    }
    return data


def format_promo(promo: PromoResult, config: PricingConfig) -> dict:
    data = promo.model_dump(mode="json")
    data["formatted"] = {
        "discount": format_amount(promo.discount_base, config.base_currency, config.base_locale),
        "final_total": format_amount(
            promo.final_total_base, config.base_currency, config.base_locale
        ),
    }
    return data


def create_pricing_router(services: dict) -> APIRouter:
    router = APIRouter()

    catalog = services["catalog"]
    promo_svc = services["promo"]
    engine: PricingEngine = services["engine"]
    config = engine.config

    @router.get("/pricing/options")
    async def duration_options(
        request: Request,
        package_id: str | None = Query(None),
        domain: str | None = Query(None, max_length=253),
    ):
        resolved = resolve_package_id(catalog, package_id)
        if resolved is None:
            raise ValueError("No package selected and no default package configured")

        snapshot = catalog.load_snapshot(resolved, domain)
        options = []
        for option in engine.duration_options(snapshot):
            data = option.model_dump(mode="json")
            data["formatted_total"] = format_amount(
                option.total_display,
                config.display_currency,
                config.locale,
                config.display_fraction_digits,
            )
            options.append(data)

        return success_response(options, get_request_id(request)).model_dump(mode="json")

    @router.post("/pricing/quote")
    async def quote(request: Request, body: QuoteRequest):
        result = run_quote(catalog, engine, body)
        return success_response(
            format_result(result, config), get_request_id(request)
        ).model_dump(mode="json")

    @router.post("/pricing/promo")
    async def check_promo(request: Request, body: PromoCheckRequest):
        # The promo applies to subscription + add-ons, so price those first
        result = run_quote(catalog, engine, body, with_promo=False)
        promo = promo_svc.check(body.promo_code, result.pre_promo_total_base)
        return success_response(
            format_promo(promo, config), get_request_id(request)
        ).model_dump(mode="json")

    return router
