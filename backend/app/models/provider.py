"""Service provider offering bookable availability."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from app.models.availability import Availability
    from app.models.tenant import Tenant


class Provider(TimestampMixin, Base):
    """Provider with optional default pricing applied to their slots."""

    __tablename__ = "providers"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    default_hourly_rate: Mapped[float | None] = mapped_column(Float())
    # Serialized pricing policy JSON, see app.schemas.pricing.
    default_pricing_rules: Mapped[str | None] = mapped_column(Text())

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="providers")
    availability: Mapped[list["Availability"]] = relationship(
        "Availability", back_populates="provider", cascade="all, delete-orphan"
    )
