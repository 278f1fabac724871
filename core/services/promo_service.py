"""
Promo code service.

Looks promo records up in the settings store and hands the arithmetic to
core.pricing.apply_promo, which owns the clamp.
"""

import logging
from datetime import datetime

from clients.postgres_client import PostgresClient
from core.models import PromoCode, PromoResult
from core.pricing import CODE_PADDING, apply_promo, find_promo, normalize_code

logger = logging.getLogger(__name__)


class PromoService:
    """Service for promo code checks."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def list_matching(self, code: str | None) -> list[PromoCode]:
        """Active promo records whose trimmed, lower-cased code matches."""
        normalized = normalize_code(code)
        if not normalized:
            return []

        rows = self.postgres.execute(
            """
            SELECT id, code, promo_name, is_active, discount_type, discount_value,
                   max_discount_base, valid_from, valid_until
            FROM promo_codes
            WHERE lower(btrim(code, %s)) = %s AND is_active = true AND deleted_at IS NULL
            ORDER BY created_at ASC
            """,
            (CODE_PADDING, normalized)
        )
        return [PromoCode.model_validate({**row, "id": str(row["id"])}) for row in rows]

    def find_active(self, code: str | None, at: datetime | None = None) -> PromoCode | None:
        """Currently valid promo for a code, None if there is none."""
        return find_promo(code, self.list_matching(code), at)

    def check(self, code: str | None, subtotal_base, at: datetime | None = None) -> PromoResult:
        """
        Check a code against a pre-promo subtotal.

        Args:
            code: Code as typed
            subtotal_base: Pre-promo subtotal, None while it is unavailable
            at: Instant for validity windows (defaults to now)

        Returns:
            PromoResult; rejections are returned, not raised.
        """
        result = apply_promo(code, subtotal_base, self.list_matching(code), at)
        if not result.ok:
            logger.info(f"Promo code {normalize_code(code)!r} rejected: {result.reason.value}")
        return result
