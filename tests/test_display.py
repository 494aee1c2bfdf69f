"""
Display buffer: XOR drawing, clipping, wrapping, collisions
"""

import numpy as np
import pytest

from chip8vm.constants import CHIP8_FONT
from chip8vm.display import Display

GLYPH_ZERO = [int(b) for b in CHIP8_FONT[0:5]]


class TestDrawSprite:
    def test_glyph_bits_land_on_screen(self):
        display = Display()
        result = display.draw_sprite(0, 0, GLYPH_ZERO)
        assert not result.collision
        expected = np.array([[(row >> (7 - c)) & 1 for c in range(8)] for row in GLYPH_ZERO])
        assert np.array_equal(display.pixels[0:5, 0:8], expected)
        assert display.lit_pixels == 14

    def test_rows_clipped_at_bottom(self):
        display = Display()
        display.draw_sprite(60, 30, GLYPH_ZERO)
        # Only glyph rows 0 and 1 fit on y=30 and y=31
        assert display.pixels[30, 60:64].tolist() == [1, 1, 1, 1]
        assert display.pixels[31, 60:64].tolist() == [1, 0, 0, 1]
        assert display.pixels[0:3].sum() == 0
        assert display.lit_pixels == 6

    def test_columns_wrap_at_right_edge(self):
        display = Display()
        display.draw_sprite(60, 0, [0xFF])
        assert display.pixels[0, 60:64].tolist() == [1, 1, 1, 1]
        assert display.pixels[0, 0:4].tolist() == [1, 1, 1, 1]
        assert display.lit_pixels == 8

    def test_origin_wraps(self):
        display = Display()
        display.draw_sprite(64 + 2, 32 + 1, [0x80])
        assert display.get_pixel(2, 1) == 1

    def test_draw_twice_cancels_and_collides(self):
        display = Display()
        first = display.draw_sprite(60, 30, GLYPH_ZERO)
        second = display.draw_sprite(60, 30, GLYPH_ZERO)
        assert not first.collision
        assert second.collision
        assert second.pixels_erased == 6
        assert display.lit_pixels == 0

    def test_partial_overlap_collides(self):
        display = Display()
        display.draw_sprite(0, 0, [0x80])
        result = display.draw_sprite(0, 0, [0xC0])
        assert result.collision
        assert display.pixels[0, 0:2].tolist() == [0, 1]


class TestSnapshot:
    def test_snapshot_is_read_only_copy(self):
        display = Display()
        display.draw_sprite(0, 0, [0x80])
        frame = display.snapshot()
        with pytest.raises(ValueError):
            frame[0, 0] = 0
        display.clear()
        assert frame[0, 0] == 1
        assert display.lit_pixels == 0

    def test_version_bumps_on_mutation(self):
        display = Display()
        v0 = display.version
        display.draw_sprite(0, 0, [])
        display.clear()
        assert display.version == v0 + 2
