"""Payment gateway settings and charge intent models.

Settings here are the public half only (merchant id, client keys, readiness).
Server keys never leave the settings store.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class GatewayEnvironment(str, Enum):
    """Gateway account environment."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


class GatewayProvider(str, Enum):
    """Payment gateways the checkout can hand a charge to."""

    MIDTRANS = "midtrans"
    PAYPAL = "paypal"


class MidtransSettings(BaseModel):
    """Public Midtrans settings for the card payment form."""

    env: GatewayEnvironment
    merchant_id: str | None = None
    client_key: str | None = None
    ready: bool


class PaypalSettings(BaseModel):
    """Public PayPal settings for the wallet buttons."""

    env: GatewayEnvironment
    client_id: str | None = None
    ready: bool


class OrderDetails(BaseModel):
    """Non-price order fields that travel with a charge."""

    domain: str = Field(..., min_length=1, max_length=253)
    selected_template_id: str | None = None
    selected_template_name: str | None = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(..., min_length=3, max_length=320)


class ChargeIntent(BaseModel):
    """
    Amount and order context handed to a payment gateway collaborator.

    amount_base is the engine's total_base, passed through unchanged.
    """

    provider: GatewayProvider
    amount_base: Decimal
    base_currency: str
    amount_display: Decimal
    display_currency: str
    subscription_months: int
    promo_code: str | None = None
    order: OrderDetails
