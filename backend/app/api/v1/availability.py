"""Availability slot pricing endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.pricing import (
    MAX_PARTY_SIZE,
    PricingResult,
    PricingRulesRead,
    PricingRulesUpdate,
)
from app.services import availability_service, booking_service

router = APIRouter()


async def _get_availability_or_404(
    session: AsyncSession, tenant_id: uuid.UUID, availability_id: uuid.UUID
):
    availability = await availability_service.get_availability(
        session, tenant_id=tenant_id, availability_id=availability_id
    )
    if availability is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Availability slot not found",
        )
    return availability


@router.get(
    "/{availability_id}/pricing",
    response_model=PricingRulesRead,
    response_model_exclude_none=True,
    summary="Get slot pricing rules",
)
async def get_slot_pricing(
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PricingRulesRead:
    availability = await _get_availability_or_404(session, tenant_id, availability_id)
    return PricingRulesRead(
        pricing_rules=availability_service.get_slot_policy(availability),
        fallback_price=availability.price,
    )


@router.put(
    "/{availability_id}/pricing",
    response_model=PricingRulesRead,
    response_model_exclude_none=True,
    summary="Replace slot pricing rules",
)
async def update_slot_pricing(
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
    payload: PricingRulesUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PricingRulesRead:
    try:
        availability = await availability_service.assign_slot_policy(
            session,
            tenant_id=tenant_id,
            availability_id=availability_id,
            pricing_rules=payload.pricing_rules,
        )
    except LookupError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except availability_service.PolicyValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Invalid pricing rules", "errors": exc.errors},
        ) from exc
    return PricingRulesRead(
        pricing_rules=availability_service.get_slot_policy(availability),
        fallback_price=availability.price,
    )


@router.get(
    "/{availability_id}/quote",
    response_model=PricingResult,
    response_model_exclude_none=True,
    summary="Quote a party size against the slot's pricing",
)
async def quote_slot(
    tenant_id: uuid.UUID,
    availability_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    party_size: Annotated[
        int, Query(ge=1, le=MAX_PARTY_SIZE, alias="partySize")
    ] = 1,
) -> PricingResult:
    availability = await _get_availability_or_404(session, tenant_id, availability_id)
    return booking_service.price_booking(
        availability, availability.provider, party_size
    )
