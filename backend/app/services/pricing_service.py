"""Group pricing engine for bookings.

Every function here is pure: a party size and a pricing policy go in, a
``PricingResult`` comes out. Amounts are plain floats; only the step-based
model rounds to whole currency units.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from app.schemas.pricing import (
    DiscountPricing,
    FlatPricing,
    GroupDiscount,
    HybridPricing,
    PricingModelType,
    PricingPolicy,
    PricingPreviewRow,
    PricingResult,
    PricingTier,
    SimplePricing,
    StepBasedPricing,
    TieredPricing,
)

MONEY_PLACES = Decimal("0.01")
WHOLE_UNIT = Decimal("1")

# Platform-wide: step-based prices drop once for every STEP_SIZE extra people.
STEP_SIZE = 2


def _format_money(value: float) -> str:
    return f"${Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP):,.2f}"


def _format_percent(value: float) -> str:
    return f"{value:g}%"


def _round_whole(value: float) -> float:
    return float(Decimal(value).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP))


def _people(count: int) -> str:
    return "person" if count == 1 else "people"


def _fallback_result(
    party_size: int,
    fallback_amount: float | None,
    *,
    applied_rule: str = "No pricing rules",
) -> PricingResult:
    # The fallback amount prices the whole party, it is not a per-person rate.
    total = max(fallback_amount or 0.0, 0.0)
    if total:
        breakdown = f"{_format_money(total)} total for {party_size} {_people(party_size)}"
    else:
        breakdown = "No price configured"
    return PricingResult(
        total_price=total,
        price_per_person=total / party_size,
        breakdown=breakdown,
        applied_rule=applied_rule,
    )


def _price_simple(
    party_size: int, policy: SimplePricing, fallback_amount: float | None
) -> PricingResult:
    rate = policy.price_per_person
    return PricingResult(
        total_price=rate * party_size,
        price_per_person=rate,
        breakdown=f"{party_size} × {_format_money(rate)}",
        applied_rule="Simple per-person pricing",
    )


def _matching_tier(tiers: tuple[PricingTier, ...], party_size: int) -> PricingTier | None:
    for tier in tiers:
        if tier.min_size <= party_size <= tier.max_size:
            return tier
    return None


def _price_tiered(
    party_size: int, policy: TieredPricing, fallback_amount: float | None
) -> PricingResult:
    tier = _matching_tier(policy.tiers, party_size)
    if tier is None:
        return _fallback_result(
            party_size, fallback_amount, applied_rule="No matching tier"
        )
    size_range = f"{tier.min_size}-{tier.max_size}"
    rate = tier.price_per_person
    return PricingResult(
        total_price=rate * party_size,
        price_per_person=rate,
        breakdown=f"{party_size} × {_format_money(rate)} ({size_range} people tier)",
        applied_rule=f"Tiered pricing ({size_range} people)",
    )


def _best_discount(
    discounts: tuple[GroupDiscount, ...], party_size: int
) -> GroupDiscount | None:
    best: GroupDiscount | None = None
    for discount in discounts:
        if discount.min_size > party_size:
            continue
        if best is None or discount.min_size > best.min_size:
            best = discount
    return best


def _price_discount(
    party_size: int, policy: DiscountPricing, fallback_amount: float | None
) -> PricingResult:
    base = policy.base_price
    discount = _best_discount(policy.discounts, party_size)
    percent = discount.discount_percent if discount is not None else 0.0
    rate = base * (1 - percent / 100)
    savings = (base - rate) * party_size
    if discount is None or not percent:
        return PricingResult(
            total_price=rate * party_size,
            price_per_person=rate,
            breakdown=f"{party_size} × {_format_money(rate)}",
            applied_rule="Base price",
        )
    return PricingResult(
        total_price=rate * party_size,
        price_per_person=rate,
        breakdown=(
            f"{party_size} × {_format_money(rate)} "
            f"({_format_percent(percent)} off {_format_money(base)})"
        ),
        applied_rule=(
            f"{_format_percent(percent)} group discount "
            f"({discount.min_size}+ people)"
        ),
        savings=savings if savings > 0 else None,
    )


def _price_flat(
    party_size: int, policy: FlatPricing, fallback_amount: float | None
) -> PricingResult:
    # Parties above max_capacity are rejected by the booking workflow, not here.
    total = policy.total_price
    return PricingResult(
        total_price=total,
        price_per_person=total / party_size,
        breakdown=(
            f"{_format_money(total)} flat rate for up to "
            f"{policy.max_capacity} {_people(policy.max_capacity)}"
        ),
        applied_rule="Flat rate",
    )


def _price_hybrid(
    party_size: int, policy: HybridPricing, fallback_amount: float | None
) -> PricingResult:
    if party_size == 1:
        return PricingResult(
            total_price=policy.solo_price,
            price_per_person=policy.solo_price,
            breakdown=f"1 × {_format_money(policy.solo_price)} (solo rate)",
            applied_rule="Solo rate",
        )
    threshold = policy.flat_rate_threshold
    if (
        threshold is not None
        and policy.flat_rate_price is not None
        and party_size >= threshold
    ):
        total = policy.flat_rate_price
        return PricingResult(
            total_price=total,
            price_per_person=total / party_size,
            breakdown=f"{_format_money(total)} flat rate ({threshold}+ people)",
            applied_rule="Flat rate",
        )
    rate = policy.group_price
    return PricingResult(
        total_price=rate * party_size,
        price_per_person=rate,
        breakdown=f"{party_size} × {_format_money(rate)} (group rate)",
        applied_rule="Group rate",
    )


def _price_step_based(
    party_size: int, policy: StepBasedPricing, fallback_amount: float | None
) -> PricingResult:
    step_index = (party_size - 1) // STEP_SIZE
    raw_rate = policy.solo_price * (1 - policy.drop_rate_percent / 100) ** step_index
    rate = max(raw_rate, policy.min_price_per_person)
    total = rate * party_size
    note = f"step {step_index}"
    if raw_rate < policy.min_price_per_person:
        note = f"step {step_index}, minimum price per person"

    # The session minimum overrides the per-person floor.
    if total < policy.min_session_earnings:
        rate = policy.min_session_earnings / party_size
        note = f"session minimum {_format_money(policy.min_session_earnings)}"

    rate = _round_whole(rate)
    return PricingResult(
        total_price=rate * party_size,
        price_per_person=rate,
        breakdown=f"{party_size} × {_format_money(rate)} ({note})",
        applied_rule=(
            f"Step-based pricing ({_format_percent(policy.drop_rate_percent)} "
            f"drop every {STEP_SIZE} people)"
        ),
    )


_HANDLERS: dict[PricingModelType, Callable[[int, Any, float | None], PricingResult]] = {
    PricingModelType.SIMPLE: _price_simple,
    PricingModelType.TIERED: _price_tiered,
    PricingModelType.DISCOUNT: _price_discount,
    PricingModelType.FLAT: _price_flat,
    PricingModelType.HYBRID: _price_hybrid,
    PricingModelType.STEP_BASED: _price_step_based,
}


def calculate_price(
    party_size: int,
    policy: PricingPolicy | None,
    fallback_amount: float | None = None,
) -> PricingResult:
    """Price a party of ``party_size`` people.

    Without a policy, ``fallback_amount`` is the total for the whole party.
    """
    if party_size < 1:
        raise ValueError("Party size must be at least 1")
    if policy is None:
        return _fallback_result(party_size, fallback_amount)
    handler = _HANDLERS[PricingModelType(policy.type)]
    return handler(party_size, policy, fallback_amount)


def pricing_preview(
    policy: PricingPolicy | None,
    max_size: int,
    fallback_amount: float | None = None,
) -> list[PricingPreviewRow]:
    """Return calculations for every party size from 1 to ``max_size``."""
    if max_size < 1:
        raise ValueError("Preview size must be at least 1")
    return [
        PricingPreviewRow(
            party_size=size,
            calculation=calculate_price(size, policy, fallback_amount),
        )
        for size in range(1, max_size + 1)
    ]


def default_policy(model_type: PricingModelType) -> PricingPolicy:
    """Starter policy offered when a provider switches pricing model."""
    defaults: dict[PricingModelType, PricingPolicy] = {
        PricingModelType.SIMPLE: SimplePricing(price_per_person=100),
        PricingModelType.TIERED: TieredPricing(
            tiers=(
                PricingTier(min_size=1, max_size=1, price_per_person=100),
                PricingTier(min_size=2, max_size=4, price_per_person=90),
            )
        ),
        PricingModelType.DISCOUNT: DiscountPricing(
            base_price=100,
            discounts=(GroupDiscount(min_size=2, discount_percent=10),),
        ),
        PricingModelType.FLAT: FlatPricing(total_price=500, max_capacity=10),
        PricingModelType.HYBRID: HybridPricing(
            solo_price=100, group_price=80, group_min_size=2
        ),
        PricingModelType.STEP_BASED: StepBasedPricing(
            solo_price=100,
            drop_rate_percent=10,
            min_price_per_person=50,
            min_session_earnings=100,
        ),
    }
    return defaults[model_type]
