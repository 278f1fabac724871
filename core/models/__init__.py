"""Core domain models."""

from core.models.package import PriceConfiguration
from core.models.duration import (
    DurationDiscountRow, DurationDiscountRowCreate, DurationDiscountRowUpdate,
    StoredDurationDiscountRow,
)
from core.models.subscription_plan import SubscriptionPlan
from core.models.add_on import (
    AddOnKind, FlatAddOn, PerUnitAddOn, PerUnitAddOnCreate, PerUnitAddOnUpdate,
    StoredPerUnitAddOn,
)
from core.models.promo import (
    PromoCode, PromoDiscountType, PromoRejection, PromoResult, AppliedPromo,
)
from core.models.pricing import (
    PricingMode, UnavailableReason, AddOnLine, OrderPricingResult, DurationOption,
)
from core.models.gateway import (
    GatewayEnvironment, GatewayProvider, MidtransSettings, PaypalSettings,
    OrderDetails, ChargeIntent,
)

__all__ = [
    # Package pricing
    "PriceConfiguration",
    # Duration discounts
    "DurationDiscountRow", "DurationDiscountRowCreate", "DurationDiscountRowUpdate",
    "StoredDurationDiscountRow",
    # Legacy plans
    "SubscriptionPlan",
    # Add-ons
    "AddOnKind", "FlatAddOn", "PerUnitAddOn", "PerUnitAddOnCreate", "PerUnitAddOnUpdate",
    "StoredPerUnitAddOn",
    # Promo
    "PromoCode", "PromoDiscountType", "PromoRejection", "PromoResult", "AppliedPromo",
    # Results
    "PricingMode", "UnavailableReason", "AddOnLine", "OrderPricingResult", "DurationOption",
    # Gateways
    "GatewayEnvironment", "GatewayProvider", "MidtransSettings", "PaypalSettings",
    "OrderDetails", "ChargeIntent",
]
