"""Immutable RGB pixel grid with channels normalized to [0, 1]."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

# 8-bit channel maximum; decoded samples are divided by this.
_CHANNEL_MAX = 255.0


class PixelBuffer:
    """Read-only ``height × width × 3`` float64 array.

    The backing array is copied on construction and flagged non-writeable, so a
    buffer can be shared freely between readers.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: NDArray) -> None:
        arr = np.array(pixels, dtype=np.float64, copy=True)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected an H×W×3 array, got shape {arr.shape}")
        arr.setflags(write=False)
        self._pixels = arr

    @classmethod
    def from_uint8(cls, pixels: NDArray) -> PixelBuffer:
        return cls(np.asarray(pixels, dtype=np.float64) / _CHANNEL_MAX)

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Decode a PIL image (any mode) into a normalized RGB buffer."""
        return cls.from_uint8(np.asarray(image.convert("RGB"), dtype=np.uint8))

    @property
    def pixels(self) -> NDArray[np.float64]:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def load_pixel_buffer(path: str | Path) -> PixelBuffer:
    """Open an image file with PIL and return its normalized buffer."""
    with Image.open(path) as img:
        return PixelBuffer.from_image(img)
