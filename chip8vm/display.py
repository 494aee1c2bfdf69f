"""
64x32 monochrome framebuffer with XOR sprite drawing
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from .constants import DISPLAY_HEIGHT, DISPLAY_WIDTH

SPRITE_WIDTH = 8


@dataclass
class DrawResult:
    collision: bool
    pixels_drawn: int
    pixels_erased: int


class Display:
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)
        # Bumped on every mutation so presenters can skip unchanged frames
        self.version = 0

    def clear(self):
        self.pixels.fill(0)
        self.version += 1

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> DrawResult:
        """
        XOR an 8-pixel-wide sprite onto the display.

        The origin wraps around the screen. Rows falling past the bottom
        edge are dropped; columns falling past the right edge wrap to the
        left edge. Returns whether any lit pixel was switched off.
        """
        x0 = x % self.width
        y0 = y % self.height
        collision = False
        drawn = 0
        erased = 0

        for row, sprite_byte in enumerate(rows):
            pixel_y = y0 + row
            if pixel_y >= self.height:
                break

            for col in range(SPRITE_WIDTH):
                if not sprite_byte & (0x80 >> col):
                    continue
                pixel_x = (x0 + col) % self.width
                if self.pixels[pixel_y, pixel_x]:
                    collision = True
                    erased += 1
                else:
                    drawn += 1
                self.pixels[pixel_y, pixel_x] ^= 1

        self.version += 1
        return DrawResult(collision, drawn, erased)

    def get_pixel(self, x: int, y: int) -> int:
        return int(self.pixels[y, x])

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the framebuffer, shape (height, width)"""
        frame = self.pixels.copy()
        frame.flags.writeable = False
        return frame

    @property
    def lit_pixels(self) -> int:
        return int(np.count_nonzero(self.pixels))
