"""Booking of an availability slot by a client party."""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from app.models.availability import Availability
    from app.models.provider import Provider
    from app.models.tenant import Tenant


class BookingStatus(str, enum.Enum):
    """Lifecycle states for a booking."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(TimestampMixin, Base):
    """A party's reservation of a slot with its priced snapshot."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    availability_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("availability.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), nullable=False
    )
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str] = mapped_column(String(255), nullable=False)
    client_phone: Mapped[str | None] = mapped_column(String(32))
    notes: Mapped[str | None] = mapped_column(Text())
    party_size: Mapped[int] = mapped_column(Integer(), default=1, nullable=False)
    open_to_sharing: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    # Frozen copy of the computed price; never recomputed after creation.
    price_per_person: Mapped[float | None] = mapped_column(Float())
    total_price: Mapped[float | None] = mapped_column(Float())
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False
    )

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="bookings")
    availability: Mapped["Availability"] = relationship(
        "Availability", back_populates="bookings"
    )
    provider: Mapped["Provider"] = relationship("Provider")
