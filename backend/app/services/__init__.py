"""Service layer exports."""
from app.services import (
    availability_service,
    booking_service,
    pricing_service,
    pricing_table_service,
    pricing_validation,
)

__all__ = [
    "availability_service",
    "booking_service",
    "pricing_service",
    "pricing_table_service",
    "pricing_validation",
]
