"""Booking creation and the pricing snapshot captured on each booking."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.availability import Availability
from app.models.booking import Booking, BookingStatus
from app.models.provider import Provider
from app.schemas.pricing import FlatPricing, PricingPolicy, PricingResult
from app.services import availability_service
from app.services.pricing_service import calculate_price

logger = logging.getLogger(__name__)


class BookingError(ValueError):
    """Base error for booking workflow failures."""


class BookingNotFoundError(BookingError):
    """The requested slot or booking does not exist for the tenant."""


class BookingCapacityError(BookingError):
    """The party does not fit in the slot or the pricing policy."""


@dataclass(slots=True, frozen=True)
class PricingSource:
    """Policy and fallback amount that apply to a slot."""

    policy: PricingPolicy | None
    fallback_amount: float | None
    origin: str


def resolve_pricing_source(
    availability: Availability, provider: Provider | None
) -> PricingSource:
    """Pick the pricing that applies to a slot.

    Order: the slot's own policy, the slot's flat price, the provider's
    default policy, then the provider's hourly rate as a flat amount.
    """
    provider_rate = provider.default_hourly_rate if provider is not None else None
    fallback = availability.price if availability.price is not None else provider_rate

    slot_policy = availability_service.get_slot_policy(availability)
    if slot_policy is not None:
        return PricingSource(slot_policy, fallback, "availability")
    if availability.price is not None:
        return PricingSource(None, availability.price, "availability_price")

    if provider is not None:
        provider_policy = availability_service.decode_stored_policy(
            provider.default_pricing_rules, source=f"provider {provider.id}"
        )
        if provider_policy is not None:
            return PricingSource(provider_policy, provider_rate, "provider")
    if provider_rate is not None:
        return PricingSource(None, provider_rate, "provider_rate")
    return PricingSource(None, None, "unpriced")


def price_booking(
    availability: Availability, provider: Provider | None, party_size: int
) -> PricingResult:
    source = resolve_pricing_source(availability, provider)
    return calculate_price(party_size, source.policy, source.fallback_amount)


def _ensure_policy_capacity(policy: PricingPolicy | None, party_size: int) -> None:
    if isinstance(policy, FlatPricing) and party_size > policy.max_capacity:
        raise BookingCapacityError(
            f"Party size {party_size} exceeds the flat rate capacity of "
            f"{policy.max_capacity}"
        )


def _spots_message(spots_left: int) -> str:
    return f"Not enough spots available. Only {spots_left} spot(s) remaining"


async def create_booking(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
    party_size: int,
    client_name: str,
    client_email: str,
    client_phone: str | None = None,
    notes: str | None = None,
    open_to_sharing: bool = False,
) -> Booking:
    """Book a slot and store the computed price on the new booking."""
    if party_size < 1:
        raise ValueError("Party size must be at least 1")

    availability = await availability_service.get_availability(
        session, tenant_id=tenant_id, availability_id=availability_id
    )
    if availability is None or not availability.is_active:
        raise BookingNotFoundError("Availability slot not found")
    if party_size > availability.spots_left:
        raise BookingCapacityError(_spots_message(availability.spots_left))

    source = resolve_pricing_source(availability, availability.provider)
    _ensure_policy_capacity(source.policy, party_size)
    pricing = calculate_price(party_size, source.policy, source.fallback_amount)

    # Conditional increment so concurrent bookings cannot overfill the slot.
    claimed = await session.execute(
        update(Availability)
        .where(
            and_(
                Availability.id == availability.id,
                Availability.current_bookings + party_size
                <= Availability.max_capacity,
            )
        )
        .values(current_bookings=Availability.current_bookings + party_size)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        await session.rollback()
        await session.refresh(availability)
        raise BookingCapacityError(_spots_message(availability.spots_left))

    booking = Booking(
        tenant_id=tenant_id,
        availability_id=availability.id,
        provider_id=availability.provider_id,
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        notes=notes,
        party_size=party_size,
        open_to_sharing=open_to_sharing,
        price_per_person=pricing.price_per_person,
        total_price=pricing.total_price,
        status=BookingStatus.CONFIRMED,
    )
    session.add(booking)
    await session.commit()
    await session.refresh(availability, attribute_names=["current_bookings"])
    logger.info(
        "Created booking %s for availability %s (party=%s, total=%s, pricing=%s)",
        booking.id,
        availability.id,
        party_size,
        pricing.total_price,
        source.origin,
    )
    return booking


async def get_booking(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    booking_id: uuid.UUID,
) -> Booking | None:
    stmt = select(Booking).where(
        and_(Booking.id == booking_id, Booking.tenant_id == tenant_id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
