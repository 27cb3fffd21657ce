"""Adaptive region-subdivision engine."""

from quadmosaic.engine.buffer import PixelBuffer, load_pixel_buffer
from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.errors import EmptyRegion, EngineError, InvalidBuffer, UnknownSource
from quadmosaic.engine.quadrants import split
from quadmosaic.engine.region import Region
from quadmosaic.engine.scheduler import (
    ActiveFragment,
    Pacer,
    RefinementEngine,
    Snapshot,
    StepResult,
)
from quadmosaic.engine.sources import ImageSourceSwitch, SourceCatalog, SourceId, SwitchProgress
from quadmosaic.engine.stats import RegionStats, compute_stats

__all__ = [
    "ActiveFragment",
    "EmptyRegion",
    "EngineConfig",
    "EngineError",
    "ImageSourceSwitch",
    "SwitchProgress",
    "InvalidBuffer",
    "Pacer",
    "PixelBuffer",
    "RefinementEngine",
    "Region",
    "RegionStats",
    "Snapshot",
    "SourceCatalog",
    "SourceId",
    "StepResult",
    "UnknownSource",
    "compute_stats",
    "load_pixel_buffer",
    "split",
]
