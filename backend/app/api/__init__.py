"""HTTP routers for the booking pricing API."""

from fastapi import APIRouter

from app.core.config import get_settings

from .v1 import router as v1_router

api_router = APIRouter(
    responses={404: {"description": "Tenant, slot, provider or booking not found"}},
)
api_router.include_router(v1_router, prefix=get_settings().api_v1_prefix)

__all__ = ["api_router"]
