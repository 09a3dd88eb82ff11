"""Versioned API router."""

from fastapi import APIRouter

from . import availability, bookings, health, pricing, providers

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(pricing.router, tags=["pricing"])
router.include_router(
    availability.router,
    prefix="/tenants/{tenant_id}/availability",
    tags=["availability"],
)
router.include_router(
    providers.router, prefix="/tenants/{tenant_id}/providers", tags=["providers"]
)
router.include_router(
    bookings.router, prefix="/tenants/{tenant_id}/bookings", tags=["bookings"]
)
