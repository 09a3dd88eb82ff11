"""Schema exports."""

from app.schemas.booking import BookingCreate, BookingRead
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

__all__ = [
    "BookingCreate",
    "BookingRead",
    "DiscountPricing",
    "FlatPricing",
    "GroupDiscount",
    "HybridPricing",
    "PricingModelType",
    "PricingPolicy",
    "PricingPreviewRow",
    "PricingResult",
    "PricingTier",
    "SimplePricing",
    "StepBasedPricing",
    "TieredPricing",
]
