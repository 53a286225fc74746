"""API router initialization."""

# Hey future me, this collects the sub-routers that main.py mounts under the api
# prefix (settings.api_prefix, "/api" by default). Health is mounted separately at
# /health so container probes don't depend on the prefix.

from fastapi import APIRouter

from mljboard.api.routers import accounts, health, scrobbles

api_router = APIRouter()

api_router.include_router(accounts.router)
api_router.include_router(scrobbles.router)

__all__ = ["api_router", "health"]
