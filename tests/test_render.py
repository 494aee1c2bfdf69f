import numpy as np
import pytest
from PIL import Image

from chip8vm.display import Display
from chip8vm.render import display_to_image, display_to_text, save_display_png


@pytest.fixture
def frame():
    display = Display()
    display.draw_sprite(0, 0, [0xC0, 0x80])
    return display.snapshot()


def test_text_rendering(frame):
    lines = display_to_text(frame, on='#', off='.').splitlines()
    assert len(lines) == 32
    assert lines[0].startswith('##..')
    assert lines[1].startswith('#...')
    assert len(lines[0]) == 64


def test_image_scaling(frame):
    img = display_to_image(frame, scale=4)
    assert img.size == (256, 128)
    assert img.mode == 'L'
    pixels = np.asarray(img)
    assert pixels[0, 0] == 255
    assert pixels[3, 7] == 255
    assert pixels[0, 8] == 0


def test_bad_scale(frame):
    with pytest.raises(ValueError):
        display_to_image(frame, scale=0)


def test_save_png(frame, tmp_path):
    path = save_display_png(frame, tmp_path / "shots" / "frame.png", scale=2)
    with Image.open(path) as img:
        assert img.size == (128, 64)
