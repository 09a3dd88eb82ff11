"""Tests for the group pricing calculator and preview generator."""

from __future__ import annotations

import pytest

from app.schemas.pricing import (
    DiscountPricing,
    FlatPricing,
    GroupDiscount,
    HybridPricing,
    PricingModelType,
    PricingTier,
    SimplePricing,
    StepBasedPricing,
    TieredPricing,
    parse_pricing_policy,
)
from app.services import pricing_service
from app.services.pricing_service import STEP_SIZE, calculate_price, pricing_preview


def _tiered() -> TieredPricing:
    return TieredPricing(
        tiers=(
            PricingTier(min_size=1, max_size=1, price_per_person=100),
            PricingTier(min_size=2, max_size=5, price_per_person=80),
        )
    )


def _hybrid() -> HybridPricing:
    return HybridPricing(
        solo_price=100,
        group_price=80,
        group_min_size=2,
        flat_rate_threshold=8,
        flat_rate_price=500,
    )


def _step_based() -> StepBasedPricing:
    return StepBasedPricing(
        solo_price=100,
        drop_rate_percent=10,
        min_price_per_person=50,
        min_session_earnings=100,
    )


def test_no_policy_uses_fallback_as_party_total() -> None:
    result = calculate_price(3, None, 90)
    assert result.total_price == 90
    assert result.price_per_person == 30
    assert result.savings is None


def test_no_policy_without_fallback_is_free() -> None:
    result = calculate_price(4, None)
    assert result.total_price == 0
    assert result.price_per_person == 0


def test_simple_multiplies_rate_by_party() -> None:
    result = calculate_price(4, SimplePricing(price_per_person=25))
    assert result.total_price == 100
    assert result.price_per_person == 25
    assert result.breakdown == "4 × $25.00"
    assert result.savings is None


def test_tiered_selects_matching_range() -> None:
    policy = _tiered()
    assert calculate_price(1, policy).total_price == 100
    three = calculate_price(3, policy)
    assert three.total_price == 240
    assert three.price_per_person == 80
    assert "2-5" in three.applied_rule


def test_tiered_tier_boundaries_are_inclusive() -> None:
    policy = _tiered()
    assert calculate_price(2, policy).price_per_person == 80
    assert calculate_price(5, policy).price_per_person == 80


def test_tiered_outside_all_tiers_falls_back_to_total_amount() -> None:
    result = calculate_price(6, _tiered(), 300)
    assert result.total_price == 300
    assert result.price_per_person == 50
    assert result.applied_rule == "No matching tier"


def test_tiered_outside_all_tiers_without_fallback_is_zero() -> None:
    result = calculate_price(9, _tiered())
    assert result.total_price == 0
    assert result.price_per_person == 0


def test_tiered_overlapping_ranges_use_first_listed_tier() -> None:
    policy = TieredPricing(
        tiers=(
            PricingTier(min_size=1, max_size=4, price_per_person=60),
            PricingTier(min_size=3, max_size=6, price_per_person=40),
        )
    )
    assert calculate_price(3, policy).price_per_person == 60


def test_discount_applies_percentage_and_reports_savings() -> None:
    policy = DiscountPricing(
        base_price=100, discounts=(GroupDiscount(min_size=2, discount_percent=20),)
    )
    result = calculate_price(3, policy)
    assert result.price_per_person == 80
    assert result.total_price == 240
    assert result.savings == 60


def test_discount_picks_largest_qualifying_min_size() -> None:
    policy = DiscountPricing(
        base_price=100,
        discounts=(
            GroupDiscount(min_size=5, discount_percent=25),
            GroupDiscount(min_size=2, discount_percent=10),
        ),
    )
    assert calculate_price(4, policy).price_per_person == 90
    assert calculate_price(5, policy).price_per_person == 75
    assert calculate_price(8, policy).price_per_person == 75


def test_discount_below_every_threshold_charges_base_price() -> None:
    policy = DiscountPricing(
        base_price=100, discounts=(GroupDiscount(min_size=3, discount_percent=20),)
    )
    result = calculate_price(2, policy)
    assert result.price_per_person == 100
    assert result.total_price == 200
    assert result.savings is None


def test_discount_per_person_price_never_increases_with_party_size() -> None:
    policy = DiscountPricing(
        base_price=120,
        discounts=(
            GroupDiscount(min_size=2, discount_percent=5),
            GroupDiscount(min_size=4, discount_percent=15),
            GroupDiscount(min_size=8, discount_percent=30),
        ),
    )
    rates = [calculate_price(size, policy).price_per_person for size in range(1, 12)]
    assert rates == sorted(rates, reverse=True)


def test_flat_total_ignores_party_size() -> None:
    policy = FlatPricing(total_price=500, max_capacity=10)
    for size in (1, 4, 10):
        result = calculate_price(size, policy)
        assert result.total_price == 500
        assert result.price_per_person == pytest.approx(500 / size)


def test_flat_above_capacity_keeps_flat_total() -> None:
    result = calculate_price(12, FlatPricing(total_price=600, max_capacity=10))
    assert result.total_price == 600
    assert result.price_per_person == 50


def test_hybrid_solo_group_and_flat_rate() -> None:
    policy = _hybrid()
    solo = calculate_price(1, policy)
    assert solo.total_price == 100
    assert solo.applied_rule == "Solo rate"

    group = calculate_price(6, policy)
    assert group.total_price == 480
    assert group.price_per_person == 80

    flat = calculate_price(10, policy)
    assert flat.total_price == 500
    assert flat.price_per_person == 50

    assert calculate_price(8, policy).total_price == 500


def test_hybrid_below_group_minimum_uses_group_rate() -> None:
    policy = HybridPricing(solo_price=100, group_price=70, group_min_size=4)
    result = calculate_price(3, policy)
    assert result.price_per_person == 70
    assert result.total_price == 210


def test_hybrid_threshold_without_flat_price_stays_on_group_rate() -> None:
    policy = HybridPricing(
        solo_price=100, group_price=80, group_min_size=2, flat_rate_threshold=5
    )
    assert calculate_price(6, policy).total_price == 480


def test_step_size_is_two() -> None:
    assert STEP_SIZE == 2


def test_step_based_decays_per_step() -> None:
    policy = _step_based()
    solo = calculate_price(1, policy)
    assert solo.price_per_person == 100
    assert solo.total_price == 100

    assert calculate_price(2, policy).price_per_person == 100

    three = calculate_price(3, policy)
    assert three.price_per_person == 90
    assert three.total_price == 270


def test_step_based_rounds_to_whole_units() -> None:
    # step 5: 100 * 0.9 ** 5 = 59.049
    result = calculate_price(11, _step_based())
    assert result.price_per_person == 59
    assert result.total_price == 649


def test_step_based_applies_price_floor() -> None:
    policy = StepBasedPricing(
        solo_price=100,
        drop_rate_percent=50,
        min_price_per_person=40,
        min_session_earnings=0,
    )
    result = calculate_price(5, policy)
    assert result.price_per_person == 40
    assert result.total_price == 200


def test_step_based_session_minimum_overrides_floor() -> None:
    policy = StepBasedPricing(
        solo_price=100,
        drop_rate_percent=50,
        min_price_per_person=10,
        min_session_earnings=100,
    )
    # step 2 at 5 people: 25 * 5 = 125, already above the session minimum
    assert calculate_price(5, policy).total_price == 125

    steep = StepBasedPricing(
        solo_price=100,
        drop_rate_percent=90,
        min_price_per_person=5,
        min_session_earnings=100,
    )
    # step 1: raw 10, 3 people = 30 < 100 -> 100 / 3 = 33.33 rounded to 33
    result = calculate_price(3, steep)
    assert result.price_per_person == 33
    assert result.total_price == 99


def test_step_based_totals_match_rounded_rate() -> None:
    policy = _step_based()
    for size in range(1, 20):
        result = calculate_price(size, policy)
        assert result.price_per_person == round(result.price_per_person)
        assert result.total_price == result.price_per_person * size


@pytest.mark.parametrize(
    "policy",
    [
        SimplePricing(price_per_person=33.3),
        _tiered(),
        DiscountPricing(
            base_price=99.99, discounts=(GroupDiscount(min_size=2, discount_percent=12.5),)
        ),
        FlatPricing(total_price=250, max_capacity=20),
        _hybrid(),
    ],
)
def test_per_person_times_party_matches_total(policy) -> None:
    for size in range(1, 6):
        result = calculate_price(size, policy)
        assert result.price_per_person * size == pytest.approx(result.total_price)
        assert result.total_price >= 0


def test_repeated_calls_are_identical() -> None:
    policy = _step_based()
    assert calculate_price(7, policy, 50) == calculate_price(7, policy, 50)


def test_party_size_below_one_is_rejected() -> None:
    with pytest.raises(ValueError):
        calculate_price(0, SimplePricing(price_per_person=10))


def test_preview_matches_direct_calculation() -> None:
    policy = _hybrid()
    rows = pricing_preview(policy, 10, 75)
    assert [row.party_size for row in rows] == list(range(1, 11))
    for row in rows:
        assert row.calculation == calculate_price(row.party_size, policy, 75)


def test_preview_without_policy_spreads_fallback() -> None:
    rows = pricing_preview(None, 3, 60)
    assert [row.calculation.price_per_person for row in rows] == [60, 30, 20]


def test_preview_rejects_empty_range() -> None:
    with pytest.raises(ValueError):
        pricing_preview(_tiered(), 0)


def test_calculates_from_stored_json() -> None:
    policy = parse_pricing_policy(
        '{"type": "discount", "basePrice": 100,'
        ' "discounts": [{"minSize": 2, "discountPercent": 20}]}'
    )
    assert calculate_price(3, policy).total_price == 240


@pytest.mark.parametrize("model_type", list(PricingModelType))
def test_default_policies_price_a_solo_party(model_type: PricingModelType) -> None:
    policy = pricing_service.default_policy(model_type)
    assert policy.type == model_type.value
    assert calculate_price(1, policy).total_price > 0
