"""API test fixtures: the real app over mocked catalog and gateway services."""

from decimal import Decimal
from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from core.models import (
    DurationDiscountRow, FlatAddOn, GatewayEnvironment, MidtransSettings,
    PaypalSettings, SubscriptionPlan,
)
from core.pricing import PricingEngine, PricingSnapshot
from core.services.checkout_service import CheckoutService
from core.services.gateway_settings_service import GatewaySettingsService
from core.services.pricing_catalog_service import PricingCatalogService
from core.services.promo_service import PromoService


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


@pytest.fixture
def api_snapshot(package_id, price_config) -> PricingSnapshot:
    """100/year package with a 10% two-year discount and one flat add-on."""
    return PricingSnapshot(
        package_id=package_id,
        price=price_config,
        duration_rows=(
            DurationDiscountRow(package_id=package_id, duration_months=12),
            DurationDiscountRow(
                package_id=package_id, duration_months=24, discount_percent=Decimal("10"),
            ),
        ),
        plans=(
            SubscriptionPlan(years=1, label="1 Tahun", sort_order=0),
            SubscriptionPlan(years=2, label="2 Tahun", sort_order=1),
        ),
        flat_add_ons=(
            FlatAddOn(id="ssl", label="SSL", price_base=Decimal("12.5")),
        ),
    )


@pytest.fixture
def catalog(api_snapshot, package_id):
    mock = Mock(spec=PricingCatalogService)
    mock.get_default_package_id.return_value = package_id
    mock.load_snapshot.return_value = api_snapshot
    return mock


@pytest.fixture
def promo_service(db):
    """Real PromoService over the mocked database."""
    return PromoService(db)


@pytest.fixture
def gateways():
    mock = Mock(spec=GatewaySettingsService)
    mock.get_midtrans_settings.return_value = MidtransSettings(
        env=GatewayEnvironment.SANDBOX,
        merchant_id="G123",
        client_key="SB-Mid-client",
        ready=True,
    )
    mock.get_paypal_settings.return_value = PaypalSettings(
        env=GatewayEnvironment.SANDBOX,
        client_id=None,
        ready=False,
    )
    return mock


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def services(catalog, promo_service, gateways, pricing_config):
    return {
        "catalog": catalog,
        "promo": promo_service,
        "gateways": gateways,
        "checkout": CheckoutService(gateways),
        "engine": PricingEngine(pricing_config),
    }


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    return create_app(services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
