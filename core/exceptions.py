"""Typed exceptions for checkout failures.

Both subclass ValueError so callers that only know about ValueError still
catch them.
"""


class PricingUnavailableError(ValueError):
    """The order total could not be computed, so nothing may be charged."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Order total is unavailable ({reason})")


class GatewayNotReadyError(ValueError):
    """The selected payment gateway is not configured for its active environment."""

    def __init__(self, provider: str, env: str):
        self.provider = provider
        self.env = env
        super().__init__(f"Payment gateway {provider} is not ready ({env})")
