"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from quadmosaic import __version__
from quadmosaic.dependencies import get_switch
from quadmosaic.engine.sources import ImageSourceSwitch
from quadmosaic.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(switch: ImageSourceSwitch = Depends(get_switch)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        source=switch.selected,
        fragment_count=switch.engine.count,
    )
