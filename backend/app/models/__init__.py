"""ORM models package export."""

from app.models.availability import Availability
from app.models.booking import Booking, BookingStatus
from app.models.provider import Provider
from app.models.tenant import Tenant

__all__ = [
    "Availability",
    "Booking",
    "BookingStatus",
    "Provider",
    "Tenant",
]
