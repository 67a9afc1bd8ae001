"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from philgen.api import compose, health, layers

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(layers.router)
api_router.include_router(compose.router)
