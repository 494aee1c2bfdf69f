"""
CHIP-8 system constants and the built-in hexadecimal font
"""

import numpy as np

# =============================================================================
# CHIP-8 System Constants
# =============================================================================

MEMORY_SIZE = 4096
MAX_MEMORY_SIZE = 0x10000
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_PIXELS = DISPLAY_WIDTH * DISPLAY_HEIGHT
REGISTER_COUNT = 16
MIN_STACK_SIZE = 12      # Guaranteed nesting depth for subroutine calls
STACK_SIZE = MIN_STACK_SIZE
KEYPAD_SIZE = 16
PROGRAM_START = 0x200
FONT_START = 0x50
GLYPH_HEIGHT = 5
FONT_SIZE = 80

TIMER_HZ = 60
INSTRUCTIONS_PER_SECOND = 700

FLAG_REGISTER = 0xF
INDEX_MASK = 0xFFFF      # I is a 16-bit register
ADDRESS_MASK = 0x0FFF    # ...but only the low 12 bits address memory

# =============================================================================
# CHIP-8 Font Set (0-F, 4x5 pixels per glyph)
# =============================================================================

CHIP8_FONT = np.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
], dtype=np.uint8)
CHIP8_FONT.flags.writeable = False
