"""Tests for PricingCatalogService (read side of the settings store)."""

import logging
from decimal import Decimal
from unittest.mock import Mock
from uuid import uuid4

import pytest

from core.models import PromoCode, PromoDiscountType
from core.services.pricing_catalog_service import (
    PricingCatalogService,
    normalize_tld,
    tld_candidates,
)
from core.services.promo_service import PromoService


@pytest.fixture
def catalog(db):
    return PricingCatalogService(db)


class TestNormalizeTld:

    @pytest.mark.parametrize("value, expected", [
        (".com", "com"), ("CO.ID", "co-id"), ("..my.id", "my-id"), (None, ""),
    ])
    def test_normalizes(self, value, expected):
        assert normalize_tld(value) == expected


class TestTldCandidates:

    def test_most_specific_first(self):
        assert tld_candidates("shop.example.co.id") == ["example-co-id", "co-id", "id"]

    def test_simple_domain(self):
        assert tld_candidates("Example.COM") == ["com"]

    def test_no_tld(self):
        assert tld_candidates("localhost") == []
        assert tld_candidates(None) == []


class TestGetPriceConfiguration:

    def test_both_prices(self, db, catalog):
        db.execute_single.side_effect = [
            {"price_base": Decimal("80")},
            None,                           # "example-co-id"
            {"price_base": Decimal("15")},  # "co-id"
        ]

        config = catalog.get_price_configuration("pkg", "shop.example.co.id")

        assert config.package_price_base == Decimal("80")
        assert config.domain_price_base == Decimal("15")
        assert config.tld == "co-id"

    def test_unknown_tld_leaves_domain_price_missing(self, db, catalog, caplog):
        caplog.set_level(logging.INFO)
        db.execute_single.side_effect = [{"price_base": Decimal("80")}, None]

        config = catalog.get_price_configuration("pkg", "example.xyz")

        assert config.domain_price_base is None
        assert config.tld is None
        assert "Incomplete price configuration" in caplog.text

    def test_missing_package(self, db, catalog):
        db.execute_single.return_value = None
        config = catalog.get_price_configuration("pkg", None)
        assert config.package_price_base is None


class TestGetDefaultPackageId:

    def test_json_string_value(self, db, catalog):
        db.execute_single.return_value = {"value": '"pkg-basic"'}
        assert catalog.get_default_package_id() == "pkg-basic"

    def test_plain_string_value(self, db, catalog):
        db.execute_single.return_value = {"value": "pkg-basic"}
        assert catalog.get_default_package_id() == "pkg-basic"

    def test_not_configured(self, db, catalog):
        assert catalog.get_default_package_id() is None

    def test_blank(self, db, catalog):
        db.execute_single.return_value = {"value": "   "}
        assert catalog.get_default_package_id() is None


class TestListSubscriptionPlans:

    def test_legacy_price_usd_mapped(self, db, catalog):
        db.execute_single.return_value = {"value": [
            {"years": 2, "label": "2 Tahun", "price_usd": 180, "is_active": True, "sort_order": 1},
            {"years": 1, "label": "1 Tahun", "sort_order": 0},
        ]}

        plans = catalog.list_subscription_plans()

        assert [p.years for p in plans] == [1, 2]
        assert plans[1].price_base_override == Decimal("180")
        assert plans[0].price_base_override is None

    def test_invalid_entries_skipped(self, db, catalog, caplog):
        db.execute_single.return_value = {"value": [
            "nonsense",
            {"years": 0},
            {"years": 1},
        ]}

        plans = catalog.list_subscription_plans()

        assert [p.years for p in plans] == [1]
        assert "Ignoring non-object" in caplog.text
        assert "Ignoring invalid subscription plan" in caplog.text

    def test_not_a_list(self, db, catalog):
        db.execute_single.return_value = {"value": {"years": 1}}
        assert catalog.list_subscription_plans() == []


class TestListAddOns:

    def test_flat_ids_stringified(self, db, catalog):
        row_id = uuid4()
        db.execute.return_value = [{
            "id": row_id, "label": "SSL", "description": None,
            "price_base": Decimal("12"), "is_active": True, "sort_order": 0,
        }]

        [item] = catalog.list_flat_add_ons("pkg")

        assert item.id == str(row_id)
        assert item.price_base == Decimal("12")

    def test_per_unit(self, db, catalog):
        db.execute.return_value = [{
            "id": uuid4(), "label": "Pages", "price_per_unit": Decimal("5"), "unit": "page",
            "unit_step": Decimal("1"), "max_quantity": Decimal("3"), "sort_order": 2,
        }]

        [item] = catalog.list_per_unit_add_ons("pkg")

        assert item.max_quantity == Decimal("3")


class TestListDurationRows:

    def test_rows(self, db, catalog):
        db.execute.return_value = [
            {"package_id": "pkg", "duration_months": 12, "discount_percent": Decimal("10"),
             "is_active": True},
        ]
        [row] = catalog.list_duration_rows("pkg")
        assert row.duration_months == 12


class TestLoadSnapshot:

    def test_promo_codes_only_loaded_for_typed_code(self, db):
        promos = Mock(spec=PromoService)
        promos.list_matching.return_value = [PromoCode(
            id="p", code="HEMAT", discount_type=PromoDiscountType.FLAT, discount_value=Decimal("5"),
        )]
        catalog = PricingCatalogService(db, promos)

        without = catalog.load_snapshot("pkg", "example.com")
        with_code = catalog.load_snapshot("pkg", "example.com", "hemat")

        assert without.promo_codes == ()
        assert [p.code for p in with_code.promo_codes] == ["HEMAT"]
        promos.list_matching.assert_called_once_with("hemat")

    def test_snapshot_contents(self, db, catalog):
        snapshot = catalog.load_snapshot("pkg", None)
        assert snapshot.package_id == "pkg"
        assert snapshot.price.package_id == "pkg"
        assert snapshot.duration_rows == ()
        assert snapshot.plans == ()
