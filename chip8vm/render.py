"""
Display presentation helpers: terminal text and PNG screenshots
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


def display_to_text(frame: np.ndarray, on: str = '██', off: str = '  ') -> str:
    """Render a (height, width) frame as block characters, one line per row"""
    return '\n'.join(''.join(on if pixel else off for pixel in row) for row in frame)


def display_to_image(frame: np.ndarray, scale: int = 8) -> Image.Image:
    """Scale a frame up into an 8-bit grayscale image"""
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")
    display_img = (np.asarray(frame) > 0).astype(np.uint8) * 255
    scaled_img = np.repeat(np.repeat(display_img, scale, axis=0), scale, axis=1)
    return Image.fromarray(scaled_img)


def save_display_png(frame: np.ndarray, path: Union[str, Path], scale: int = 8) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    display_to_image(frame, scale).save(path)
    return path
