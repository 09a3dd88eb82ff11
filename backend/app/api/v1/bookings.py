"""Booking endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import get_settings
from app.schemas.booking import BookingCreate, BookingRead
from app.services import booking_service

router = APIRouter()

settings = get_settings()


@router.post(
    "",
    response_model=BookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book an availability slot",
    dependencies=[deps.rate_limit(settings.rate_limit_default)],
)
async def create_booking(
    tenant_id: uuid.UUID,
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BookingRead:
    try:
        booking = await booking_service.create_booking(
            session,
            tenant_id=tenant_id,
            **payload.model_dump(),
        )
    except booking_service.BookingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return BookingRead.model_validate(booking)


@router.get("/{booking_id}", response_model=BookingRead, summary="Get booking")
async def get_booking(
    tenant_id: uuid.UUID,
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> BookingRead:
    booking = await booking_service.get_booking(
        session, tenant_id=tenant_id, booking_id=booking_id
    )
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found"
        )
    return BookingRead.model_validate(booking)
