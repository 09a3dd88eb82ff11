"""Provider default pricing endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.pricing import PricingRulesRead, PricingRulesUpdate
from app.services import availability_service

router = APIRouter()


@router.put(
    "/{provider_id}/pricing",
    response_model=PricingRulesRead,
    response_model_exclude_none=True,
    summary="Replace provider default pricing rules",
)
async def update_provider_pricing(
    tenant_id: uuid.UUID,
    provider_id: uuid.UUID,
    payload: PricingRulesUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> PricingRulesRead:
    try:
        provider = await availability_service.assign_provider_default_policy(
            session,
            tenant_id=tenant_id,
            provider_id=provider_id,
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
        pricing_rules=availability_service.decode_stored_policy(
            provider.default_pricing_rules, source=f"provider {provider.id}"
        ),
        fallback_price=provider.default_hourly_rate,
    )
