"""Tests for /api/checkout endpoints."""

from dataclasses import replace

import pytest


@pytest.fixture
def charge_body():
    return {
        "years": 1,
        "selected_add_ons": {"ssl": True},
        "provider": "midtrans",
        "order": {
            "domain": "tokobudi.com",
            "selected_template_id": "tpl-7",
            "customer_name": "Budi Santoso",
            "customer_email": "budi@example.com",
        },
    }


class TestChargeIntent:

    def test_amount_matches_quote(self, client, charge_body):
        quote = client.post("/api/pricing/quote", json={
            "years": 1, "selected_add_ons": {"ssl": True},
        }).json()["data"]

        response = client.post("/api/checkout/charge-intent", json=charge_body)

        assert response.status_code == 200
        intent = response.json()["data"]
        assert intent["amount_base"] == quote["total_base"]
        assert intent["amount_display"] == quote["total_display"]
        assert intent["subscription_months"] == 12
        assert intent["order"]["selected_template_id"] == "tpl-7"

    def test_priced_for_ordered_domain(self, client, catalog, package_id, charge_body):
        charge_body["domain"] = "picker.example"

        client.post("/api/checkout/charge-intent", json=charge_body)

        catalog.load_snapshot.assert_called_once_with(package_id, "tokobudi.com", None)

    def test_unavailable_total_refused(self, client, catalog, api_snapshot, charge_body):
        catalog.load_snapshot.return_value = replace(api_snapshot, price=None)

        response = client.post("/api/checkout/charge-intent", json=charge_body)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "PRICING_UNAVAILABLE"

    def test_gateway_not_ready(self, client, charge_body):
        charge_body["provider"] = "paypal"

        response = client.post("/api/checkout/charge-intent", json=charge_body)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "GATEWAY_NOT_READY"

    @pytest.mark.parametrize("provider", ["cash", "xendit"])
    def test_unsupported_provider(self, client, charge_body, provider):
        charge_body["provider"] = provider
        response = client.post("/api/checkout/charge-intent", json=charge_body)
        assert response.status_code == 422

    def test_missing_customer(self, client, charge_body):
        del charge_body["order"]["customer_email"]
        response = client.post("/api/checkout/charge-intent", json=charge_body)
        assert response.status_code == 422
