"""Pricing policy and pricing result schema definitions.

Policies are stored and exchanged as camelCase JSON with a ``type``
discriminator, e.g. ``{"type": "simple", "pricePerPerson": 25}``. The models
here only check the *shape* of a policy; numeric constraints are reported by
``app.services.pricing_validation`` as a list of messages.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class PricingModelType(str, enum.Enum):
    """Enumerates the supported pricing policy shapes."""

    SIMPLE = "simple"
    TIERED = "tiered"
    DISCOUNT = "discount"
    FLAT = "flat"
    HYBRID = "hybrid"
    STEP_BASED = "step-based"


# Largest party a quote or preview accepts.
MAX_PARTY_SIZE = 10_000


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class SimplePricing(_CamelModel):
    """Single price per person."""

    type: Literal["simple"] = "simple"
    price_per_person: float


class PricingTier(_CamelModel):
    """Party-size range mapped to a per-person rate."""

    min_size: int
    max_size: int
    price_per_person: float


class TieredPricing(_CamelModel):
    """Per-person rate chosen by which size range the party falls into."""

    type: Literal["tiered"] = "tiered"
    tiers: tuple[PricingTier, ...]


class GroupDiscount(_CamelModel):
    """Percentage off the base price from a minimum party size."""

    min_size: int
    discount_percent: float


class DiscountPricing(_CamelModel):
    """Base per-person price with percentage discounts for groups."""

    type: Literal["discount"] = "discount"
    base_price: float
    discounts: tuple[GroupDiscount, ...]


class FlatPricing(_CamelModel):
    """One price for the whole booking regardless of size."""

    type: Literal["flat"] = "flat"
    total_price: float
    max_capacity: int


class HybridPricing(_CamelModel):
    """Solo rate, per-person group rate and an optional flat-rate cutoff."""

    type: Literal["hybrid"] = "hybrid"
    solo_price: float
    group_price: float
    group_min_size: int
    flat_rate_threshold: int | None = None
    flat_rate_price: float | None = None


class StepBasedPricing(_CamelModel):
    """Per-person price dropping geometrically every step of people."""

    type: Literal["step-based"] = "step-based"
    solo_price: float
    drop_rate_percent: float
    min_price_per_person: float
    min_session_earnings: float


PricingPolicy = Annotated[
    Union[
        SimplePricing,
        TieredPricing,
        DiscountPricing,
        FlatPricing,
        HybridPricing,
        StepBasedPricing,
    ],
    Field(discriminator="type"),
]

POLICY_ADAPTER: TypeAdapter[PricingPolicy] = TypeAdapter(PricingPolicy)


def parse_pricing_policy(data: str | bytes | Mapping[str, Any]) -> PricingPolicy:
    """Decode a policy from stored JSON or a plain mapping.

    Raises ``pydantic.ValidationError`` for unparseable JSON, an unknown
    ``type`` or a missing field.
    """
    if isinstance(data, (str, bytes)):
        return POLICY_ADAPTER.validate_json(data)
    return POLICY_ADAPTER.validate_python(data)


def dump_pricing_policy(policy: PricingPolicy) -> str:
    """Serialize a policy to its stored camelCase JSON form."""
    return policy.model_dump_json(by_alias=True, exclude_none=True)


class PricingResult(_CamelModel):
    """Outcome of pricing one party against a policy."""

    total_price: float
    price_per_person: float
    breakdown: str
    applied_rule: str
    savings: float | None = None


class PricingPreviewRow(_CamelModel):
    """Calculation for a single party size within a preview table."""

    party_size: int
    calculation: PricingResult


class PricingPreviewRequest(_CamelModel):
    """Payload for the pricing preview endpoint."""

    pricing_rules: PricingPolicy | None = None
    party_size: int | None = Field(default=None, ge=1, le=MAX_PARTY_SIZE)
    max_size: int | None = Field(default=None, ge=1)
    fallback_price: float | None = None


class PricingPreviewResponse(_CamelModel):
    """Either a single calculation or a preview table."""

    pricing: PricingResult | None = None
    preview: list[PricingPreviewRow] | None = None


class PolicyValidationRequest(_CamelModel):
    """Raw policy payload to check before saving."""

    pricing_rules: dict[str, Any]


class PolicyValidationRead(_CamelModel):
    """Validation verdict with human-readable errors."""

    valid: bool
    errors: list[str]


class PricingRulesUpdate(_CamelModel):
    """Replacement policy for a slot or provider; ``null`` clears it."""

    pricing_rules: dict[str, Any] | None = None


class PricingRulesRead(_CamelModel):
    """Currently stored policy for a slot or provider."""

    pricing_rules: PricingPolicy | None = None
    fallback_price: float | None = None


class PricingTableQuoteRequest(_CamelModel):
    """Session to price against a provider's session pricing table."""

    pricing_table: dict[str, float]
    party_size: int = Field(ge=1, le=MAX_PARTY_SIZE)
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")


class PricingTableOptionRead(_CamelModel):
    session_type: str
    duration: int
    price: float
    label: str


class PricingTableQuoteRead(_CamelModel):
    """Best table price for a session, plus every priced option."""

    session_type: str
    duration: int
    price: float | None = None
    exact_match: bool
    options: list[PricingTableOptionRead]
