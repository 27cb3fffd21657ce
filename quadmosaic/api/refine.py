"""Refinement endpoints — snapshot, batched steps and a paced SSE stream."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from quadmosaic.config import Settings
from quadmosaic.dependencies import get_settings, get_switch
from quadmosaic.engine.errors import EngineError
from quadmosaic.engine.sources import ImageSourceSwitch
from quadmosaic.models.requests import StepRequest
from quadmosaic.models.responses import (
    DeltaModel,
    FragmentModel,
    SnapshotResponse,
    StepResponse,
)

router = APIRouter()


@router.get("/fragments", response_model=SnapshotResponse)
def fragments(
    boxes: bool = Query(default=False, description="Attach box layout"),
    switch: ImageSourceSwitch = Depends(get_switch),
) -> SnapshotResponse:
    return SnapshotResponse.from_snapshot(
        switch.snapshot(), switch.selected, switch.engine.config, include_boxes=boxes
    )


@router.get("/fragments/{fragment_id}", response_model=FragmentModel)
def fragment(
    fragment_id: int,
    boxes: bool = Query(default=False, description="Attach box layout"),
    switch: ImageSourceSwitch = Depends(get_switch),
) -> FragmentModel:
    try:
        found, size = switch.fragment(fragment_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"No active fragment {fragment_id}") from e
    return FragmentModel.from_fragment(found, size if boxes else None, switch.engine.config)


@router.post("/refine/step", response_model=StepResponse)
def step(
    req: StepRequest,
    switch: ImageSourceSwitch = Depends(get_switch),
) -> StepResponse:
    try:
        progress = switch.run(req.steps)
    except EngineError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    config = switch.engine.config
    size = progress.size if req.include_boxes else None
    return StepResponse(
        steps_taken=len(progress.results),
        count=progress.count,
        saturated=progress.saturated,
        deltas=[DeltaModel.from_step(r, size, config) for r in progress.results],
    )


async def _stream_refine(
    switch: ImageSourceSwitch,
    ticks: int,
    interval_s: float,
) -> AsyncGenerator[str, None]:
    """Tick the pacer in a worker thread, yielding one SSE event per split."""
    loop = asyncio.get_running_loop()
    config = switch.engine.config
    count = 0

    for _ in range(ticks):
        # Lock wait and pixel work stay off the event loop
        try:
            progress = await loop.run_in_executor(None, switch.tick)
        except EngineError as e:
            data = json.dumps({"type": "error", "message": str(e)})
            yield f"event: error\ndata: {data}\n\n"
            return

        count = progress.count
        for result in progress.results:
            delta = DeltaModel.from_step(result, config=config)
            yield f"event: progress\ndata: {delta.model_dump_json()}\n\n"
        if not progress.progressed and progress.exhausted:
            break

        if interval_s > 0:
            await asyncio.sleep(interval_s)

    done = {"type": "done", "count": count}
    yield f"event: done\ndata: {json.dumps(done)}\n\n"


@router.get("/refine/stream")
async def stream(
    ticks: int = Query(default=600, ge=1, le=100_000),
    switch: ImageSourceSwitch = Depends(get_switch),
    cfg: Settings = Depends(get_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_refine(switch, ticks, cfg.stream_tick_ms / 1000),
        media_type="text/event-stream",
    )
