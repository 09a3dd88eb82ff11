"""Bookable availability slot."""

from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from app.models.booking import Booking
    from app.models.provider import Provider


class Availability(TimestampMixin, Base):
    """A dated time window a provider can be booked for."""

    __tablename__ = "availability"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(Date(), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_group_session: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    max_capacity: Mapped[int] = mapped_column(Integer(), default=1, nullable=False)
    current_bookings: Mapped[int] = mapped_column(
        Integer(), default=0, nullable=False
    )
    # Legacy flat price for the whole slot; used as the fallback amount.
    price: Mapped[float | None] = mapped_column(Float())
    pricing_rules: Mapped[str | None] = mapped_column(Text())
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    provider: Mapped["Provider"] = relationship(
        "Provider", back_populates="availability"
    )
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="availability"
    )

    @property
    def spots_left(self) -> int:
        return max(self.max_capacity - self.current_bookings, 0)
