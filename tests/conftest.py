"""Shared test fixtures for the orderdesk test suite."""

from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock
from uuid import UUID

import pytest
from dotenv import load_dotenv

# Load .env before anything reads env vars. Missing .env is fine: the suite
# never needs a live database or Vault.
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from clients.postgres_client import PostgresClient
from core.config import PricingConfig
from core.models import PriceConfiguration
from core.pricing import PricingSnapshot
from utils.user_context import user_context, clear_current_user_id


# =============================================================================
# TEST USER CONSTANTS
# =============================================================================

TEST_ADMIN_ID = UUID("00000000-0000-0000-0000-000000000001")
TEST_PACKAGE_ID = "pkg-basic"


# =============================================================================
# USER CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean user context before and after each test."""
    clear_current_user_id()
    yield
    clear_current_user_id()


@pytest.fixture
def test_admin_id() -> UUID:
    return TEST_ADMIN_ID


@pytest.fixture
def as_admin(test_admin_id):
    """Run the test as the admin editing the catalog."""
    with user_context(test_admin_id):
        yield test_admin_id


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def db():
    """PostgresClient mock; tests set execute/execute_single return values."""
    mock = Mock(spec=PostgresClient)
    mock.execute.return_value = []
    mock.execute_single.return_value = None
    mock.execute_returning.return_value = []
    return mock


# =============================================================================
# PRICING FIXTURES
# =============================================================================


@pytest.fixture
def pricing_config() -> PricingConfig:
    return PricingConfig()


@pytest.fixture
def package_id() -> str:
    return TEST_PACKAGE_ID


@pytest.fixture
def price_config(package_id) -> PriceConfiguration:
    """Domain 20 + package 80 = 100 per year in the base currency."""
    return PriceConfiguration(
        package_id=package_id,
        domain="example.com",
        tld="com",
        domain_price_base=Decimal("20"),
        package_price_base=Decimal("80"),
    )


@pytest.fixture
def snapshot(package_id, price_config) -> PricingSnapshot:
    """Snapshot with prices only: linear mode, no add-ons or promos."""
    return PricingSnapshot(package_id=package_id, price=price_config)
