"""Pydantic schemas for bookings."""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.booking import BookingStatus


class BookingCreate(BaseModel):
    """Payload for booking an availability slot."""

    availability_id: uuid.UUID
    client_name: str = Field(min_length=1, max_length=255)
    client_email: EmailStr
    client_phone: str | None = Field(default=None, max_length=32)
    notes: str | None = None
    party_size: int = Field(default=1, ge=1)
    open_to_sharing: bool = False


class BookingRead(BaseModel):
    """Serialized booking with its captured price."""

    id: uuid.UUID
    tenant_id: uuid.UUID
    availability_id: uuid.UUID
    provider_id: uuid.UUID
    client_name: str
    client_email: str
    client_phone: str | None = None
    notes: str | None = None
    party_size: int
    open_to_sharing: bool
    price_per_person: float | None = None
    total_price: float | None = None
    status: BookingStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
