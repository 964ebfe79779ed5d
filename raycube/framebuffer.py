"""An in-memory 32-bit pixel buffer the renderer draws into."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

WIDTH = 1000
HEIGHT = 1000
_MASK32 = 0xFFFFFFFF


class FrameBuffer:
    """A width x height grid of 0xAARRGGBB pixels."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint32)

    def _drawable(self, x: int, y: int) -> bool:
        return 0 < x < self.width and 0 < y < self.height

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; the first row and column and anything outside are ignored."""
        if self._drawable(x, y):
            self.pixels[y, x] = color & _MASK32

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return int(self.pixels[y, x])

    def clear(self) -> None:
        """Paint the whole buffer black."""
        self.pixels.fill(0)

    def blit_masked(
        self,
        pixels: Sequence[int],
        width: int,
        height: int,
        offset_x: int,
        offset_y: int,
        mask_color: int,
    ) -> None:
        """Copy a row-major image, skipping pixels equal to ``mask_color``."""
        source = np.asarray(pixels, dtype=np.int64).reshape(height, width) & _MASK32
        x0, x1 = max(offset_x, 1), min(offset_x + width, self.width)
        y0, y1 = max(offset_y, 1), min(offset_y + height, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        region = source[y0 - offset_y:y1 - offset_y, x0 - offset_x:x1 - offset_x]
        np.copyto(
            self.pixels[y0:y1, x0:x1],
            region.astype(np.uint32),
            where=region != (mask_color & _MASK32),
        )

    def draw_crosshair(self, color: int, radius: int) -> None:
        """Draw a circle of ``radius`` around the centre of the buffer."""
        cx, cy = self.width // 2, self.height // 2
        angle = 0.0
        while angle < 2 * math.pi:
            x = cx + int(radius * math.cos(angle))
            y = cy + int(radius * math.sin(angle))
            self.put_pixel(x, y, color)
            angle += 0.01