"""Shared test fixtures and buffer builders."""

from __future__ import annotations

import numpy as np
import pytest

from quadmosaic.engine.buffer import PixelBuffer

WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)
GRAY = (0.5, 0.5, 0.5)


def uniform_buffer(width: int, height: int, color=GRAY) -> PixelBuffer:
    pixels = np.empty((height, width, 3), dtype=np.float64)
    pixels[:, :] = color
    return PixelBuffer(pixels)


def checker_buffer(size: int) -> PixelBuffer:
    """1-pixel black/white checkerboard; every even-sized block scores 1.5."""
    yy, xx = np.mgrid[0:size, 0:size]
    on = ((xx + yy) % 2).astype(np.float64)
    return PixelBuffer(np.repeat(on[:, :, None], 3, axis=2))


def noisy_buffer(width: int, height: int, seed: int = 0) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_uint8(rng.integers(0, 256, size=(height, width, 3)))


def assert_partition(fragments, width: int, height: int, pairwise: bool = True) -> None:
    """Every pixel in exactly one fragment; areas tile the image; no overlaps."""
    coverage = np.zeros((height, width), dtype=np.int64)
    total_area = 0.0
    for f in fragments:
        c0, r0, c1, r1 = f.region.pixel_bounds()
        coverage[r0:r1, c0:c1] += 1
        total_area += f.region.area
        assert f.region.within(width, height)
    assert (coverage == 1).all()
    assert total_area == pytest.approx(width * height)
    if pairwise:
        regions = [f.region for f in fragments]
        for i, a in enumerate(regions):
            for b in regions[i + 1:]:
                assert not a.overlaps(b)


@pytest.fixture
def diagonal_2x2() -> PixelBuffer:
    """White, black / black, white."""
    return PixelBuffer(np.array([[WHITE, BLACK], [BLACK, WHITE]], dtype=np.float64))


@pytest.fixture
def checker8() -> PixelBuffer:
    return checker_buffer(8)


@pytest.fixture
def noisy64() -> PixelBuffer:
    return noisy_buffer(64, 64)
