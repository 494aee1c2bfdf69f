"""
CHIP-8 memory: flat byte-addressable RAM

Layout:
    0x000-0x1FF  interpreter area, font glyphs at font_base (default 0x50)
    0x200-...    program image
"""

import logging
from typing import Union

import numpy as np

from .constants import CHIP8_FONT, FONT_SIZE, FONT_START, MEMORY_SIZE, PROGRAM_START
from .errors import ConfigurationError, OutOfBounds, ProgramTooLarge, ReadOnlyMemory

logger = logging.getLogger(__name__)

ProgramImage = Union[bytes, bytearray, np.ndarray]


class Memory:
    def __init__(self, size: int = MEMORY_SIZE, font_base: int = FONT_START):
        self.size = size
        self.font_base = font_base
        self.data = np.zeros(size, dtype=np.uint8)
        self.program_size = 0
        self._font_loaded = False

    @property
    def program_capacity(self) -> int:
        return self.size - PROGRAM_START

    def _check(self, addr: int):
        if addr < 0 or addr >= self.size:
            raise OutOfBounds(addr, self.size)

    def _in_font(self, addr: int) -> bool:
        return self._font_loaded and self.font_base <= addr < self.font_base + FONT_SIZE

    def load_font(self):
        """Copy the glyph table into the reserved low region (once)"""
        if self._font_loaded:
            raise ConfigurationError("Font already loaded")
        if self.font_base + FONT_SIZE > PROGRAM_START:
            raise ConfigurationError(
                f"Font at 0x{self.font_base:X} would overlap program area at 0x{PROGRAM_START:X}")
        self.data[self.font_base:self.font_base + FONT_SIZE] = CHIP8_FONT
        self._font_loaded = True

    def load_program(self, rom: ProgramImage):
        """Copy a program image into memory starting at 0x200"""
        if isinstance(rom, np.ndarray):
            rom_bytes = rom.astype(np.uint8).tobytes()
        else:
            rom_bytes = bytes(rom)

        if len(rom_bytes) > self.program_capacity:
            raise ProgramTooLarge(len(rom_bytes), self.program_capacity)

        # Clear leftovers from a previous, larger image
        self.data[PROGRAM_START:] = 0
        self.data[PROGRAM_START:PROGRAM_START + len(rom_bytes)] = np.frombuffer(rom_bytes, dtype=np.uint8)
        self.program_size = len(rom_bytes)
        logger.info("Loaded ROM: %d bytes", len(rom_bytes))

    def read_byte(self, addr: int) -> int:
        self._check(addr)
        return int(self.data[addr])

    def write_byte(self, addr: int, value: int):
        self._check(addr)
        if self._in_font(addr):
            raise ReadOnlyMemory(addr)
        self.data[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Big-endian 16-bit read, used for instruction fetch"""
        self._check(addr)
        self._check(addr + 1)
        return (int(self.data[addr]) << 8) | int(self.data[addr + 1])

    def read_block(self, addr: int, length: int) -> np.ndarray:
        """Copy of memory[addr:addr+length]"""
        if length <= 0:
            return np.zeros(0, dtype=np.uint8)
        self._check(addr)
        self._check(addr + length - 1)
        return self.data[addr:addr + length].copy()
