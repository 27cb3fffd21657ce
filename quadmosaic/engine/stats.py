"""Per-region mean color and non-uniformity score.

score = Σ_channels population std-dev of the channel over the region's pixels.
A flat-color approximation of the region is perfect iff score == 0.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from quadmosaic.engine.buffer import PixelBuffer
from quadmosaic.engine.errors import EmptyRegion
from quadmosaic.engine.region import Region

RGB = tuple[float, float, float]


@dataclass(frozen=True)
class RegionStats:
    avg_color: RGB
    score: float

    @property
    def lightness(self) -> float:
        r, g, b = self.avg_color
        return (r + g + b) / 3


def region_pixels(buffer: PixelBuffer, region: Region) -> np.ndarray:
    """N×3 view of the pixels a region encloses (ceil rule on every edge)."""
    c0, r0, c1, r1 = region.pixel_bounds()
    block = buffer.pixels[r0:r1, c0:c1]
    return block.reshape(-1, 3)


def compute_stats(buffer: PixelBuffer, region: Region) -> RegionStats:
    """Mean color and summed per-channel population std-dev of ``region``.

    Two passes: mean first, then deviation from it. Raises ``EmptyRegion``
    rather than returning NaN when nothing falls inside the rectangle.
    """
    flat = region_pixels(buffer, region)
    if flat.shape[0] == 0:
        raise EmptyRegion(region)

    first = flat[0]
    if (flat == first).all():
        # Summation drift would otherwise leave a tiny non-zero score.
        return RegionStats(avg_color=_as_rgb(first), score=0.0)

    mean = flat.mean(axis=0)
    std = np.sqrt(((flat - mean) ** 2).mean(axis=0))
    return RegionStats(avg_color=_as_rgb(mean), score=float(std.sum()))


def _as_rgb(values: np.ndarray) -> RGB:
    return (float(values[0]), float(values[1]), float(values[2]))
