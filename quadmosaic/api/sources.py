"""GET /api/sources, POST /api/sources/select — image source switching."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from quadmosaic.dependencies import get_switch
from quadmosaic.engine.errors import EngineError, UnknownSource
from quadmosaic.engine.sources import ImageSourceSwitch
from quadmosaic.models.requests import SelectSourceRequest
from quadmosaic.models.responses import SnapshotResponse, SourcesResponse

router = APIRouter(prefix="/sources")


@router.get("", response_model=SourcesResponse)
async def list_sources(switch: ImageSourceSwitch = Depends(get_switch)) -> SourcesResponse:
    return SourcesResponse(sources=switch.catalog.ids(), selected=switch.selected)


@router.post("/select", response_model=SnapshotResponse)
def select_source(
    req: SelectSourceRequest,
    switch: ImageSourceSwitch = Depends(get_switch),
) -> SnapshotResponse:
    try:
        snapshot = switch.select_source(req.source)
    except UnknownSource as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (EngineError, OSError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return SnapshotResponse.from_snapshot(snapshot, switch.selected, switch.engine.config)
