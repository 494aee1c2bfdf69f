"""
16-key hexadecimal keypad latch and the host keyboard mapping

CHIP-8 keypad:     Modern keyboard mapping:
1 2 3 C            1 2 3 4
4 5 6 D    <=      Q W E R
7 8 9 E            A S D F
A 0 B F            Z X C V
"""

from typing import Callable, Dict, List, Optional

import numpy as np

from .constants import KEYPAD_SIZE
from .errors import InvalidKey

QWERTY_KEYMAP: Dict[str, int] = {
    '1': 0x1, '2': 0x2, '3': 0x3, '4': 0xC,
    'q': 0x4, 'w': 0x5, 'e': 0x6, 'r': 0xD,
    'a': 0x7, 's': 0x8, 'd': 0x9, 'f': 0xE,
    'z': 0xA, 'x': 0x0, 'c': 0xB, 'v': 0xF,
}

PressListener = Callable[[int], None]


def translate_key(name: str, keymap: Optional[Dict[str, int]] = None) -> Optional[int]:
    """Map a host key name to a keypad code, or None if unmapped"""
    keymap = QWERTY_KEYMAP if keymap is None else keymap
    return keymap.get(name.lower())


class InputLatch:
    def __init__(self):
        self.keys = np.zeros(KEYPAD_SIZE, dtype=np.uint8)
        self._listeners: List[PressListener] = []

    @staticmethod
    def _validate(code: int):
        if not isinstance(code, (int, np.integer)) or not 0 <= code < KEYPAD_SIZE:
            raise InvalidKey(code)

    def add_press_listener(self, callback: PressListener):
        """Call `callback(code)` whenever a key goes from released to pressed"""
        self._listeners.append(callback)

    def remove_press_listener(self, callback: PressListener):
        self._listeners.remove(callback)

    def set_key(self, code: int, pressed: bool):
        self._validate(code)
        was_pressed = bool(self.keys[code])
        self.keys[code] = 1 if pressed else 0

        if pressed and not was_pressed:
            for callback in list(self._listeners):
                callback(int(code))

    def is_pressed(self, code: int) -> bool:
        self._validate(code)
        return bool(self.keys[code])

    def pressed_keys(self) -> List[int]:
        return [int(k) for k in np.flatnonzero(self.keys)]

    def release_all(self):
        self.keys.fill(0)
