"""Consistency checks for pricing policies before they are saved."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from app.schemas.pricing import (
    DiscountPricing,
    FlatPricing,
    HybridPricing,
    PricingModelType,
    PricingPolicy,
    SimplePricing,
    StepBasedPricing,
    TieredPricing,
    parse_pricing_policy,
)

_POLICY_TAGS = {model_type.value for model_type in PricingModelType}

# Upper bound for any single amount so party totals stay finite.
MAX_AMOUNT = 1_000_000

_AMOUNT_FIELDS = (
    "price_per_person",
    "base_price",
    "total_price",
    "solo_price",
    "group_price",
    "flat_rate_price",
    "min_price_per_person",
    "min_session_earnings",
)


@dataclass(slots=True)
class PolicyValidation:
    """Outcome of validating a pricing policy."""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _check_simple(policy: SimplePricing) -> list[str]:
    if policy.price_per_person <= 0:
        return ["pricePerPerson must be greater than 0"]
    return []


def _check_tiered(policy: TieredPricing) -> list[str]:
    if not policy.tiers:
        return ["At least one tier is required"]
    errors: list[str] = []
    for index, tier in enumerate(policy.tiers, start=1):
        if tier.min_size < 1:
            errors.append(f"Tier {index}: minSize must be at least 1")
        if tier.max_size < tier.min_size:
            errors.append(f"Tier {index}: maxSize must be greater than or equal to minSize")
        if tier.price_per_person <= 0:
            errors.append(f"Tier {index}: pricePerPerson must be greater than 0")
    return errors


def _check_discount(policy: DiscountPricing) -> list[str]:
    errors: list[str] = []
    if policy.base_price <= 0:
        errors.append("basePrice must be greater than 0")
    if not policy.discounts:
        errors.append("At least one discount is required")
    for index, discount in enumerate(policy.discounts, start=1):
        if discount.min_size < 2:
            errors.append(f"Discount {index}: minSize must be at least 2")
        if not 0 <= discount.discount_percent <= 100:
            errors.append(f"Discount {index}: discountPercent must be between 0 and 100")
    return errors


def _check_flat(policy: FlatPricing) -> list[str]:
    errors: list[str] = []
    if policy.total_price <= 0:
        errors.append("totalPrice must be greater than 0")
    if policy.max_capacity < 1:
        errors.append("maxCapacity must be at least 1")
    return errors


def _check_hybrid(policy: HybridPricing) -> list[str]:
    errors: list[str] = []
    if policy.solo_price <= 0:
        errors.append("soloPrice must be greater than 0")
    if policy.group_price <= 0:
        errors.append("groupPrice must be greater than 0")
    if policy.group_min_size < 2:
        errors.append("groupMinSize must be at least 2")
    if policy.flat_rate_threshold is not None:
        if policy.flat_rate_price is None:
            errors.append("flatRatePrice is required when flatRateThreshold is set")
        elif policy.flat_rate_price <= 0:
            errors.append("flatRatePrice must be greater than 0")
        if policy.flat_rate_threshold < policy.group_min_size:
            errors.append(
                "flatRateThreshold must be greater than or equal to groupMinSize"
            )
    return errors


def _check_step_based(policy: StepBasedPricing) -> list[str]:
    errors: list[str] = []
    if policy.solo_price <= 0:
        errors.append("soloPrice must be greater than 0")
    if not 0 <= policy.drop_rate_percent <= 100:
        errors.append("dropRatePercent must be between 0 and 100")
    if policy.min_price_per_person <= 0:
        errors.append("minPricePerPerson must be greater than 0")
    if policy.min_session_earnings < 0:
        errors.append("minSessionEarnings must not be negative")
    if policy.min_price_per_person > policy.solo_price:
        errors.append("minPricePerPerson must not exceed soloPrice")
    if policy.min_session_earnings > policy.solo_price:
        errors.append("minSessionEarnings must not exceed soloPrice")
    return errors


_CHECKS: dict[PricingModelType, Callable[[Any], list[str]]] = {
    PricingModelType.SIMPLE: _check_simple,
    PricingModelType.TIERED: _check_tiered,
    PricingModelType.DISCOUNT: _check_discount,
    PricingModelType.FLAT: _check_flat,
    PricingModelType.HYBRID: _check_hybrid,
    PricingModelType.STEP_BASED: _check_step_based,
}


def _check_amount_limits(policy: PricingPolicy) -> list[str]:
    errors: list[str] = []
    for name in _AMOUNT_FIELDS:
        value = getattr(policy, name, None)
        if value is not None and value > MAX_AMOUNT:
            errors.append(f"{to_camel(name)} must not exceed {MAX_AMOUNT}")
    if isinstance(policy, TieredPricing):
        for index, tier in enumerate(policy.tiers, start=1):
            if tier.price_per_person > MAX_AMOUNT:
                errors.append(
                    f"Tier {index}: pricePerPerson must not exceed {MAX_AMOUNT}"
                )
    return errors


def validate_pricing_policy(policy: PricingPolicy | None) -> PolicyValidation:
    """Check a policy for internal consistency without modifying it."""
    if policy is None:
        return PolicyValidation(errors=["Pricing rules are required"])
    check = _CHECKS[PricingModelType(policy.type)]
    return PolicyValidation(errors=check(policy) + _check_amount_limits(policy))


def _describe_shape_error(error: Mapping[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ())]
    if location and location[0] in _POLICY_TAGS:
        location = location[1:]
    message = str(error.get("msg", "Invalid value"))
    if not location:
        return message
    return f"{'.'.join(location)}: {message}"


def validate_policy_payload(data: str | bytes | Mapping[str, Any]) -> PolicyValidation:
    """Decode raw policy JSON (or a mapping) and validate it.

    Shape problems such as an unknown ``type`` or a missing field are folded
    into the error list.
    """
    try:
        policy = parse_pricing_policy(data)
    except ValidationError as exc:
        return PolicyValidation(
            errors=[_describe_shape_error(error) for error in exc.errors()]
        )
    return validate_pricing_policy(policy)
