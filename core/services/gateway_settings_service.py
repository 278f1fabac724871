"""
Payment gateway settings service.

Exposes the public half of each gateway account (merchant id, client key or
client id, environment, readiness) to the checkout. Server keys are only
checked for presence; their values are never read out of the store.
"""

import logging

from clients.postgres_client import PostgresClient
from core.models import GatewayEnvironment, GatewayProvider, MidtransSettings, PaypalSettings

logger = logging.getLogger(__name__)

MIDTRANS_MERCHANT_ID_KEY = "midtrans_merchant_id"
MIDTRANS_CLIENT_KEY_KEYS = {
    GatewayEnvironment.SANDBOX: "midtrans_client_key_sandbox",
    GatewayEnvironment.PRODUCTION: "midtrans_client_key_production",
}
MIDTRANS_ACTIVE_ENV_KEY = "midtrans_active_env"
MIDTRANS_SERVER_KEY_NAMES = {
    GatewayEnvironment.SANDBOX: "server_key_sandbox",
    GatewayEnvironment.PRODUCTION: "server_key_production",
}

PAYPAL_CLIENT_ID_KEYS = {
    GatewayEnvironment.SANDBOX: "paypal_client_id_sandbox",
    GatewayEnvironment.PRODUCTION: "paypal_client_id_production",
}
PAYPAL_ACTIVE_ENV_KEY = "paypal_active_env"
PAYPAL_SECRET_NAMES = {
    GatewayEnvironment.SANDBOX: "client_secret_sandbox",
    GatewayEnvironment.PRODUCTION: "client_secret_production",
}

# Secrets stored unencrypted by the admin console are tagged with this iv
PLAIN_SECRET_IV = "plain"


def resolve_environment(
    active_setting: str | None,
    production_ready: bool,
) -> GatewayEnvironment:
    """
    Pick the gateway environment for checkout.

    An admin-selected environment always wins. Without one, production is
    used when it is ready and sandbox otherwise.
    """
    if active_setting:
        try:
            return GatewayEnvironment(active_setting.strip().lower())
        except ValueError:
            logger.warning(f"Ignoring unknown gateway environment setting {active_setting!r}")

    if production_ready:
        return GatewayEnvironment.PRODUCTION
    return GatewayEnvironment.SANDBOX


class GatewaySettingsService:
    """Service for reading public payment gateway settings."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def _get_setting(self, key: str) -> str | None:
        row = self.postgres.execute_single(
            "SELECT value FROM website_settings WHERE key = %s",
            (key,)
        )
        if row is None:
            return None

        value = row["value"]
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def has_plain_secret(self, provider: GatewayProvider, name: str) -> bool:
        """Whether a non-empty, unencrypted secret is stored for provider/name."""
        row = self.postgres.execute_single(
            """
            SELECT ciphertext, iv FROM integration_secrets
            WHERE provider = %s AND name = %s
            """,
            (provider.value, name)
        )
        if row is None:
            return False

        return (
            str(row.get("iv") or "") == PLAIN_SECRET_IV
            and bool(str(row.get("ciphertext") or "").strip())
        )

    def get_midtrans_settings(self) -> MidtransSettings:
        """
        Midtrans settings for the card payment form.

        An environment is ready when its client key is set and its server
        key is stored.
        """
        client_keys = {
            env: self._get_setting(key) for env, key in MIDTRANS_CLIENT_KEY_KEYS.items()
        }
        ready = {
            env: bool(client_keys[env]) and self.has_plain_secret(
                GatewayProvider.MIDTRANS, MIDTRANS_SERVER_KEY_NAMES[env]
            )
            for env in GatewayEnvironment
        }

        env = resolve_environment(
            self._get_setting(MIDTRANS_ACTIVE_ENV_KEY),
            ready[GatewayEnvironment.PRODUCTION],
        )
        if not ready[env]:
            logger.info(f"Midtrans {env.value} environment is not ready")

        return MidtransSettings(
            env=env,
            merchant_id=self._get_setting(MIDTRANS_MERCHANT_ID_KEY),
            client_key=client_keys[env],
            ready=ready[env],
        )

    def get_paypal_settings(self) -> PaypalSettings:
        """PayPal settings for the wallet buttons. Never ready without a client id."""
        client_ids = {
            env: self._get_setting(key) for env, key in PAYPAL_CLIENT_ID_KEYS.items()
        }
        ready = {
            env: bool(client_ids[env]) and self.has_plain_secret(
                GatewayProvider.PAYPAL, PAYPAL_SECRET_NAMES[env]
            )
            for env in GatewayEnvironment
        }

        env = resolve_environment(
            self._get_setting(PAYPAL_ACTIVE_ENV_KEY),
            ready[GatewayEnvironment.PRODUCTION],
        )

        return PaypalSettings(
            env=env,
            client_id=client_ids[env],
            ready=ready[env] and bool(client_ids[env]),
        )
