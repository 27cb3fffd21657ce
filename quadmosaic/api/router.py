"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from quadmosaic.api import health, refine, sources

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(sources.router)
api_router.include_router(refine.router)
