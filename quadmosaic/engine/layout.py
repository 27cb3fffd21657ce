"""Place a fragment as an extruded box over a unit square.

The image maps onto a 1×1 square centered at the origin with y pointing up.
Each fragment becomes a box whose footprint is its region (shrunk by a small
gap so neighbours stay visually separate) and whose height is its mean
lightness. Colors are converted from sRGB to linear light for shading.
"""

from __future__ import annotations

from dataclasses import dataclass

from quadmosaic.engine.config import EngineConfig
from quadmosaic.engine.scheduler import ActiveFragment

# IEC 61966-2-1 sRGB transfer function constants
_SRGB_LINEAR_CUTOFF = 0.04045
_SRGB_LINEAR_SLOPE = 12.92
_SRGB_OFFSET = 0.055
_SRGB_GAMMA = 2.4


@dataclass(frozen=True)
class FragmentBox:
    fragment_id: int
    position: tuple[float, float, float]
    scale: tuple[float, float, float]
    color: tuple[float, float, float]


def srgb_to_linear(channel: float) -> float:
    if channel < _SRGB_LINEAR_CUTOFF:
        return channel / _SRGB_LINEAR_SLOPE
    return ((channel + _SRGB_OFFSET) / (1 + _SRGB_OFFSET)) ** _SRGB_GAMMA


def fragment_box(
    fragment: ActiveFragment,
    width: int,
    height: int,
    config: EngineConfig | None = None,
) -> FragmentBox:
    cfg = config or EngineConfig()
    region = fragment.region
    cx, cy = region.center
    depth = fragment.stats.lightness * cfg.depth_scale

    return FragmentBox(
        fragment_id=fragment.id,
        position=(cx / width - 0.5, 0.5 - cy / height, depth / 2),
        scale=(
            max(region.width / width - cfg.box_gap, 0.0),
            max(region.height / height - cfg.box_gap, 0.0),
            depth,
        ),
        color=tuple(srgb_to_linear(c) for c in fragment.avg_color),  # type: ignore[arg-type]
    )
