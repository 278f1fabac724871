"""
Checkout service.

Turns a priced order into the gateway-agnostic charge a payment collaborator
receives. The amount is the engine's total, never recomputed here.
"""

import logging

from core.exceptions import GatewayNotReadyError, PricingUnavailableError
from core.models import ChargeIntent, GatewayProvider, OrderDetails, OrderPricingResult
from core.services.gateway_settings_service import GatewaySettingsService

logger = logging.getLogger(__name__)


class CheckoutService:
    """Service for building charge intents."""

    def __init__(self, gateways: GatewaySettingsService):
        self.gateways = gateways

    def _ensure_gateway_ready(self, provider: GatewayProvider) -> None:
        if provider == GatewayProvider.MIDTRANS:
            settings = self.gateways.get_midtrans_settings()
        elif provider == GatewayProvider.PAYPAL:
            settings = self.gateways.get_paypal_settings()
        else:
            raise ValueError(f"Unsupported payment gateway {provider.value}")

        if not settings.ready:
            raise GatewayNotReadyError(provider.value, settings.env.value)

    def build_charge_intent(
        self,
        result: OrderPricingResult,
        order: OrderDetails,
        provider: GatewayProvider,
    ) -> ChargeIntent:
        """
        Build the charge for a priced order.

        Args:
            result: Engine result the customer saw
            order: Domain, template and customer fields
            provider: Gateway that will take the payment

        Returns:
            ChargeIntent carrying result.total_base unchanged

        Raises:
            PricingUnavailableError: If the total is unavailable
            GatewayNotReadyError: If the gateway is not configured
        """
        if not result.is_available or result.total_display is None:
            reason = result.unavailable_reason.value if result.unavailable_reason else "unknown"
            logger.warning(f"Refusing charge for {order.domain}: total unavailable ({reason})")
            raise PricingUnavailableError(reason)

        self._ensure_gateway_ready(provider)

        promo_code = None
        if result.promo is not None and result.promo.ok:
            promo_code = result.promo.code

        return ChargeIntent(
            provider=provider,
            amount_base=result.total_base,
            base_currency=result.base_currency,
            amount_display=result.total_display,
            display_currency=result.display_currency,
            subscription_months=result.months,
            promo_code=promo_code,
            order=order,
        )
