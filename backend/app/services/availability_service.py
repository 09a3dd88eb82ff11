"""Pricing policy storage for availability slots and providers."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.availability import Availability
from app.models.provider import Provider
from app.schemas.pricing import PricingPolicy, parse_pricing_policy
from app.services.pricing_validation import validate_policy_payload

logger = logging.getLogger(__name__)

PolicyPayload = str | bytes | Mapping[str, Any]


class PolicyValidationError(ValueError):
    """Raised when a pricing policy fails validation and cannot be saved."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid pricing rules")
        self.errors = errors


def decode_stored_policy(raw: str | None, *, source: str) -> PricingPolicy | None:
    """Decode policy JSON read from the database.

    Unparseable JSON or an unknown ``type`` is a data problem: it is logged
    and treated as if no policy were configured.
    """
    if not raw:
        return None
    try:
        return parse_pricing_policy(raw)
    except ValidationError as exc:
        logger.warning(
            "Ignoring malformed pricing rules on %s: %s", source, exc.errors()[:1]
        )
        return None


async def get_availability(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
) -> Availability | None:
    """Load a slot with its provider, scoped to the tenant."""
    stmt = (
        select(Availability)
        .join(Provider, Availability.provider_id == Provider.id)
        .options(selectinload(Availability.provider))
        .where(
            and_(
                Availability.id == availability_id,
                Provider.tenant_id == tenant_id,
            )
        )
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def get_provider(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    provider_id: uuid.UUID,
) -> Provider | None:
    provider = await session.get(Provider, provider_id)
    if provider is None or provider.tenant_id != tenant_id:
        return None
    return provider


def _serialize_valid_policy(payload: PolicyPayload | None) -> str | None:
    """Validate a policy and return the exact text to store.

    JSON text is stored verbatim; a mapping is dumped compactly in the key
    order it was received, with its numbers and extra keys untouched.
    """
    if payload is None:
        return None
    validation = validate_policy_payload(payload)
    if not validation.valid:
        raise PolicyValidationError(validation.errors)
    if isinstance(payload, bytes):
        return payload.decode("utf-8")
    if isinstance(payload, str):
        return payload
    return json.dumps(dict(payload), separators=(",", ":"), ensure_ascii=False)


async def assign_slot_policy(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
    pricing_rules: PolicyPayload | None,
) -> Availability:
    """Validate and store the slot policy; ``None`` clears it.

    Existing bookings keep the price captured when they were created.
    """
    availability = await get_availability(
        session, tenant_id=tenant_id, availability_id=availability_id
    )
    if availability is None:
        raise LookupError("Availability slot not found")
    availability.pricing_rules = _serialize_valid_policy(pricing_rules)
    await session.commit()
    logger.info(
        "Updated pricing rules for availability %s (cleared=%s)",
        availability.id,
        pricing_rules is None,
    )
    return availability


async def assign_provider_default_policy(
    session: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    provider_id: uuid.UUID,
    pricing_rules: PolicyPayload | None,
) -> Provider:
    """Validate and store a provider's default policy; ``None`` clears it."""
    provider = await get_provider(session, tenant_id=tenant_id, provider_id=provider_id)
    if provider is None:
        raise LookupError("Provider not found")
    provider.default_pricing_rules = _serialize_valid_policy(pricing_rules)
    await session.commit()
    logger.info("Updated default pricing rules for provider %s", provider.id)
    return provider


def get_slot_policy(availability: Availability) -> PricingPolicy | None:
    return decode_stored_policy(
        availability.pricing_rules, source=f"availability {availability.id}"
    )
