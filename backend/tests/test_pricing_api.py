"""API tests for pricing preview and validation endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

HYBRID_RULES = {
    "type": "hybrid",
    "soloPrice": 100,
    "groupPrice": 80,
    "groupMinSize": 2,
    "flatRateThreshold": 8,
    "flatRatePrice": 500,
}


async def test_preview_single_party_size(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={"pricingRules": HYBRID_RULES, "partySize": 6},
    )
    assert response.status_code == 200
    payload = response.json()
    assert "preview" not in payload
    pricing = payload["pricing"]
    assert pricing["totalPrice"] == 480
    assert pricing["pricePerPerson"] == 80
    assert pricing["appliedRule"]
    assert "savings" not in pricing


async def test_preview_range_of_sizes(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={"pricingRules": HYBRID_RULES, "maxSize": 10},
    )
    assert response.status_code == 200
    rows = response.json()["preview"]
    assert [row["partySize"] for row in rows] == list(range(1, 11))
    assert rows[0]["calculation"]["totalPrice"] == 100
    assert rows[9]["calculation"]["totalPrice"] == 500


async def test_preview_without_rules_uses_fallback_price(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={"partySize": 4, "fallbackPrice": 200},
    )
    assert response.status_code == 200
    pricing = response.json()["pricing"]
    assert pricing["totalPrice"] == 200
    assert pricing["pricePerPerson"] == 50


async def test_preview_reports_discount_savings(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={
            "pricingRules": {
                "type": "discount",
                "basePrice": 100,
                "discounts": [{"minSize": 2, "discountPercent": 20}],
            },
            "partySize": 3,
        },
    )
    assert response.status_code == 200
    assert response.json()["pricing"]["savings"] == 60


@pytest.mark.parametrize(
    "body",
    [
        {"pricingRules": HYBRID_RULES},
        {"pricingRules": HYBRID_RULES, "partySize": 2, "maxSize": 5},
    ],
)
async def test_preview_requires_exactly_one_size(
    client: AsyncClient, body: dict[str, object]
) -> None:
    response = await client.post("/api/v1/pricing/preview", json=body)
    assert response.status_code == 400


async def test_preview_caps_range(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={"pricingRules": HYBRID_RULES, "maxSize": 51},
    )
    assert response.status_code == 400
    assert "50" in response.json()["detail"]


async def test_preview_rejects_unknown_policy_type(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={"pricingRules": {"type": "seasonal"}, "partySize": 2},
    )
    assert response.status_code == 422


async def test_preview_refuses_rules_that_fail_validation(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/preview",
        json={
            "pricingRules": {
                "type": "discount",
                "basePrice": 100,
                "discounts": [{"minSize": 2, "discountPercent": 150}],
            },
            "partySize": 3,
        },
    )
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["message"] == "Invalid pricing rules"
    assert detail["errors"] == [
        "Discount 1: discountPercent must be between 0 and 100"
    ]


async def test_validate_reports_errors(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/pricing/validate",
        json={"pricingRules": {"type": "flat", "totalPrice": 300, "maxCapacity": 0}},
    )
    assert response.status_code == 200
    assert response.json() == {
        "valid": False,
        "errors": ["maxCapacity must be at least 1"],
    }

    ok = await client.post(
        "/api/v1/pricing/validate", json={"pricingRules": HYBRID_RULES}
    )
    assert ok.json() == {"valid": True, "errors": []}


async def test_default_rules_for_each_model(client: AsyncClient) -> None:
    response = await client.get("/api/v1/pricing/defaults/step-based")
    assert response.status_code == 200
    assert response.json() == {
        "type": "step-based",
        "soloPrice": 100.0,
        "dropRatePercent": 10.0,
        "minPricePerPerson": 50.0,
        "minSessionEarnings": 100.0,
    }

    tiered = await client.get("/api/v1/pricing/defaults/tiered")
    assert tiered.json()["tiers"][0] == {
        "minSize": 1,
        "maxSize": 1,
        "pricePerPerson": 100.0,
    }

    missing = await client.get("/api/v1/pricing/defaults/seasonal")
    assert missing.status_code == 422


async def test_session_pricing_table_endpoints(client: AsyncClient) -> None:
    table = await client.get("/api/v1/pricing/table/default", params={"base_rate": 80})
    assert table.status_code == 200
    assert table.json()["individual_60"] == 80
    assert table.json()["group_90"] == 216

    check = await client.post(
        "/api/v1/pricing/table/validate",
        json={"individual_60": 80, "duo_60": 120},
    )
    assert check.status_code == 200
    assert check.json()["valid"] is False
    assert check.json()["errors"] == [
        'Invalid pricing key format: duo_60. Use format like "individual_60"'
    ]


async def test_preview_refuses_oversized_amounts_and_parties(client: AsyncClient) -> None:
    huge = await client.post(
        "/api/v1/pricing/preview",
        json={
            "pricingRules": {
                "type": "hybrid",
                "soloPrice": 1e308,
                "groupPrice": 80,
                "groupMinSize": 2,
            },
            "partySize": 2,
        },
    )
    assert huge.status_code == 422
    assert huge.json()["detail"]["errors"] == ["soloPrice must not exceed 1000000"]

    crowd = await client.post(
        "/api/v1/pricing/preview",
        json={"pricingRules": HYBRID_RULES, "partySize": 10_001},
    )
    assert crowd.status_code == 422


async def test_session_pricing_table_quote(client: AsyncClient) -> None:
    table = {"individual_60": 100, "couple_30": 75, "couple_90": 200}

    exact = await client.post(
        "/api/v1/pricing/table/quote",
        json={
            "pricingTable": table,
            "partySize": 1,
            "startTime": "09:00",
            "endTime": "10:00",
        },
    )
    assert exact.status_code == 200
    body = exact.json()
    assert body["sessionType"] == "individual"
    assert body["duration"] == 60
    assert body["price"] == 100
    assert body["exactMatch"] is True
    assert [option["label"] for option in body["options"]] == [
        "1 Person - 60 min",
        "Couple (2 people) - 30 min",
        "Couple (2 people) - 90 min",
    ]

    closest = await client.post(
        "/api/v1/pricing/table/quote",
        json={
            "pricingTable": table,
            "partySize": 2,
            "startTime": "14:00",
            "endTime": "15:15",
        },
    )
    assert closest.json()["price"] == 200
    assert closest.json()["exactMatch"] is False

    missing = await client.post(
        "/api/v1/pricing/table/quote",
        json={
            "pricingTable": table,
            "partySize": 4,
            "startTime": "09:00",
            "endTime": "10:00",
        },
    )
    assert "price" not in missing.json()
    assert missing.json()["sessionType"] == "group"

    backwards = await client.post(
        "/api/v1/pricing/table/quote",
        json={
            "pricingTable": table,
            "partySize": 1,
            "startTime": "10:00",
            "endTime": "09:00",
        },
    )
    assert backwards.status_code == 400

    invalid = await client.post(
        "/api/v1/pricing/table/quote",
        json={
            "pricingTable": {"solo_60": 90},
            "partySize": 1,
            "startTime": "09:00",
            "endTime": "10:00",
        },
    )
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["message"] == "Invalid pricing table"
