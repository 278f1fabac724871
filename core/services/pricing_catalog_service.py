"""
Pricing catalog service.

Read side of the settings store: loads everything the pricing engine needs
for one package into an immutable PricingSnapshot. Reads are anonymous
(checkout visitors have no user context) and never write.
"""

import json
import logging

from clients.postgres_client import PostgresClient
from core.models import (
    DurationDiscountRow, FlatAddOn, PerUnitAddOn, PriceConfiguration, PromoCode,
    SubscriptionPlan,
)
from core.pricing import PricingSnapshot
from core.services.promo_service import PromoService

logger = logging.getLogger(__name__)

SETTINGS_SUBSCRIPTION_PLANS_KEY = "order_subscription_plans"
SETTINGS_DEFAULT_PACKAGE_KEY = "order_default_package_id"


def normalize_tld(value: str | None) -> str:
    """
    Normalise a TLD to its stored form.

    Lower-cased, leading dots stripped, inner dots replaced by dashes so
    multi-part TLDs like "co.id" are stored as "co-id".
    """
    return (value or "").strip().lower().lstrip(".").replace(".", "-")


def tld_candidates(domain: str | None) -> list[str]:
    """
    TLD keys to try for a domain, most specific first.

    "shop.example.co.id" -> ["example-co-id", "co-id", "id"]
    """
    name = (domain or "").strip().lower().strip(".")
    labels = [label for label in name.split(".") if label]
    if len(labels) < 2:
        return []
    return [normalize_tld(".".join(labels[i:])) for i in range(1, len(labels))]


class PricingCatalogService:
    """Service for reading pricing configuration."""

    def __init__(self, postgres: PostgresClient, promos: PromoService | None = None):
        self.postgres = postgres
        self.promos = promos or PromoService(postgres)

    def _get_setting(self, key: str):
        row = self.postgres.execute_single(
            "SELECT value FROM website_settings WHERE key = %s",
            (key,)
        )
        if row is None:
            return None

        value = row["value"]
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return None
            try:
                return json.loads(stripped)
            except json.JSONDecodeError:
                return stripped
        return value

    def get_default_package_id(self) -> str | None:
        """Package preselected when the visitor has not picked one."""
        value = self._get_setting(SETTINGS_DEFAULT_PACKAGE_KEY)
        if value is None:
            return None
        return str(value)

    def get_price_configuration(self, package_id: str, domain: str | None) -> PriceConfiguration:
        """
        Annual domain and package prices for a package.

        Args:
            package_id: Selected package
            domain: Domain being ordered; its TLD selects the domain price

        Returns:
            PriceConfiguration. Prices not configured are None, never 0.
        """
        package = self.postgres.execute_single(
            """
            SELECT price_base FROM packages
            WHERE id = %s AND is_active = true AND deleted_at IS NULL
            """,
            (package_id,)
        )
        package_price = package["price_base"] if package else None

        domain_price = None
        matched_tld = None
        for tld in tld_candidates(domain):
            row = self.postgres.execute_single(
                """
                SELECT price_base FROM domain_tld_prices
                WHERE package_id = %s AND tld = %s
                """,
                (package_id, tld)
            )
            if row is not None:
                domain_price = row["price_base"]
                matched_tld = tld
                break

        if package_price is None or domain_price is None:
            logger.info(
                f"Incomplete price configuration for package {package_id} "
                f"(domain={domain!r}, tld={matched_tld!r})"
            )

        return PriceConfiguration(
            package_id=package_id,
            domain=domain,
            tld=matched_tld,
            domain_price_base=domain_price,
            package_price_base=package_price,
        )

    def list_duration_rows(self, package_id: str) -> list[DurationDiscountRow]:
        """
        Duration discount rows for a package in scan order.

        Inactive rows are included; the engine filters them.
        """
        rows = self.postgres.execute(
            """
            SELECT package_id, duration_months, discount_percent, is_active
            FROM package_durations
            WHERE package_id = %s AND deleted_at IS NULL
            ORDER BY duration_months ASC, updated_at ASC
            """,
            (package_id,)
        )
        return [
            DurationDiscountRow.model_validate({**row, "package_id": str(row["package_id"])})
            for row in rows
        ]

    def list_subscription_plans(self) -> list[SubscriptionPlan]:
        """
        Legacy subscription plans from the website settings store.

        Malformed entries are skipped with a warning so one bad row cannot
        hide every plan.
        """
        value = self._get_setting(SETTINGS_SUBSCRIPTION_PLANS_KEY)
        if not isinstance(value, list):
            return []

        plans = []
        for entry in value:
            if not isinstance(entry, dict):
                logger.warning(f"Ignoring non-object subscription plan entry: {entry!r}")
                continue

            data = dict(entry)
            if "price_base_override" not in data and "price_usd" in data:
                data["price_base_override"] = data.pop("price_usd")

            try:
                plans.append(SubscriptionPlan.model_validate(data))
            except ValueError as e:
                logger.warning(f"Ignoring invalid subscription plan {entry!r}: {e}")

        return sorted(plans, key=lambda p: (p.sort_order, p.years))

    def list_flat_add_ons(self, package_id: str) -> list[FlatAddOn]:
        """Active flat add-ons for a package, by sort order."""
        rows = self.postgres.execute(
            """
            SELECT id, label, description, price_base, is_active, sort_order
            FROM subscription_add_ons
            WHERE package_id = %s AND is_active = true AND deleted_at IS NULL
            ORDER BY sort_order ASC
            """,
            (package_id,)
        )
        return [FlatAddOn.model_validate({**row, "id": str(row["id"])}) for row in rows]

    def list_per_unit_add_ons(self, package_id: str) -> list[PerUnitAddOn]:
        """Active per-unit add-ons for a package, by sort order. Built-ins not included."""
        rows = self.postgres.execute(
            """
            SELECT id, label, price_per_unit, unit, unit_step, max_quantity, sort_order
            FROM package_add_ons
            WHERE package_id = %s AND is_active = true AND deleted_at IS NULL
            ORDER BY sort_order ASC
            """,
            (package_id,)
        )
        return [PerUnitAddOn.model_validate({**row, "id": str(row["id"])}) for row in rows]

    def list_promo_codes(self, code: str | None) -> list[PromoCode]:
        """Active promo records whose normalized code matches."""
        return self.promos.list_matching(code)

    def load_snapshot(
        self,
        package_id: str,
        domain: str | None,
        promo_code: str | None = None,
    ) -> PricingSnapshot:
        """
        Capture all pricing configuration for a package.

        Args:
            package_id: Selected package
            domain: Domain being ordered
            promo_code: Code typed by the customer, if any

        Returns:
            Immutable snapshot for PricingEngine
        """
        return PricingSnapshot(
            package_id=package_id,
            price=self.get_price_configuration(package_id, domain),
            duration_rows=tuple(self.list_duration_rows(package_id)),
            plans=tuple(self.list_subscription_plans()),
            flat_add_ons=tuple(self.list_flat_add_ons(package_id)),
            per_unit_add_ons=tuple(self.list_per_unit_add_ons(package_id)),
            promo_codes=tuple(self.list_promo_codes(promo_code)) if promo_code else (),
        )
