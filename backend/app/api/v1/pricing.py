"""Pricing preview and policy validation endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException, Query, status

from app.api import deps
from app.core.config import get_settings
from app.schemas.pricing import (
    PolicyValidationRead,
    PolicyValidationRequest,
    PricingModelType,
    PricingPreviewRequest,
    PricingPreviewResponse,
    PricingTableOptionRead,
    PricingTableQuoteRead,
    PricingTableQuoteRequest,
)
from app.services import pricing_table_service
from app.services.pricing_service import calculate_price, default_policy, pricing_preview
from app.services.pricing_validation import (
    validate_policy_payload,
    validate_pricing_policy,
)

router = APIRouter(prefix="/pricing")

settings = get_settings()


@router.post(
    "/preview",
    response_model=PricingPreviewResponse,
    response_model_exclude_none=True,
    summary="Preview pricing for a party size or a range of sizes",
    dependencies=[deps.rate_limit(settings.rate_limit_preview)],
)
async def preview_pricing(payload: PricingPreviewRequest) -> PricingPreviewResponse:
    if (payload.party_size is None) == (payload.max_size is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either partySize or maxSize is required, but not both",
        )
    if payload.pricing_rules is not None:
        validation = validate_pricing_policy(payload.pricing_rules)
        if not validation.valid:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Invalid pricing rules", "errors": validation.errors},
            )
    if payload.party_size is not None:
        return PricingPreviewResponse(
            pricing=calculate_price(
                payload.party_size, payload.pricing_rules, payload.fallback_price
            )
        )

    max_allowed = get_settings().pricing_preview_max_size
    if payload.max_size > max_allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"maxSize must not exceed {max_allowed}",
        )
    return PricingPreviewResponse(
        preview=pricing_preview(
            payload.pricing_rules, payload.max_size, payload.fallback_price
        )
    )


@router.post(
    "/validate",
    response_model=PolicyValidationRead,
    summary="Validate pricing rules before saving",
)
async def validate_pricing_rules(
    payload: PolicyValidationRequest,
) -> PolicyValidationRead:
    validation = validate_policy_payload(payload.pricing_rules)
    return PolicyValidationRead(valid=validation.valid, errors=validation.errors)


@router.get("/defaults/{model_type}", summary="Starter pricing rules for a model")
async def get_default_pricing_rules(model_type: PricingModelType) -> dict[str, Any]:
    return default_policy(model_type).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


@router.get("/table/default", summary="Starter session pricing table")
async def get_default_pricing_table(
    base_rate: Annotated[float, Query(gt=0)] = 100,
) -> dict[str, float]:
    return pricing_table_service.create_default_pricing_table(base_rate)


@router.post(
    "/table/validate",
    response_model=PolicyValidationRead,
    summary="Validate a session pricing table",
)
async def validate_pricing_table(
    table: Annotated[dict[str, Any], Body()],
) -> PolicyValidationRead:
    valid, errors = pricing_table_service.validate_pricing_table(table)
    return PolicyValidationRead(valid=valid, errors=errors)


@router.post(
    "/table/quote",
    response_model=PricingTableQuoteRead,
    response_model_exclude_none=True,
    summary="Price a session from a session pricing table",
)
async def quote_from_pricing_table(
    payload: PricingTableQuoteRequest,
) -> PricingTableQuoteRead:
    valid, errors = pricing_table_service.validate_pricing_table(payload.pricing_table)
    if not valid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Invalid pricing table", "errors": errors},
        )
    duration = pricing_table_service.calculate_duration(
        payload.start_time, payload.end_time
    )
    if duration <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="endTime must be after startTime",
        )

    session_type = pricing_table_service.session_type_for_party_size(payload.party_size)
    match = pricing_table_service.find_best_price(
        payload.pricing_table, session_type, duration
    )
    return PricingTableQuoteRead(
        session_type=session_type.value,
        duration=duration,
        price=match.price,
        exact_match=match.exact_match,
        options=[
            PricingTableOptionRead(
                session_type=option.session_type.value,
                duration=option.duration,
                price=option.price,
                label=option.label,
            )
            for option in pricing_table_service.get_pricing_options(
                payload.pricing_table
            )
        ],
    )
