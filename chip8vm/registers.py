"""
CHIP-8 register file and call stack
"""

from typing import List

import numpy as np

from .constants import FLAG_REGISTER, INDEX_MASK, PROGRAM_START, REGISTER_COUNT, STACK_SIZE
from .errors import StackOverflow, StackUnderflow


class RegisterFile:
    """V0-VF, the index register I and the program counter"""

    def __init__(self):
        self.v = np.zeros(REGISTER_COUNT, dtype=np.uint8)
        self._index = 0
        self.pc = PROGRAM_START

    def __getitem__(self, reg: int) -> int:
        # Plain ints keep arithmetic out of numpy's uint8 overflow rules
        return int(self.v[reg])

    def __setitem__(self, reg: int, value: int):
        self.v[reg] = value & 0xFF

    @property
    def index(self) -> int:
        return self._index

    @index.setter
    def index(self, value: int):
        self._index = value & INDEX_MASK

    @property
    def flag(self) -> int:
        return int(self.v[FLAG_REGISTER])

    @flag.setter
    def flag(self, value: int):
        self.v[FLAG_REGISTER] = 1 if value else 0

    def as_list(self) -> List[int]:
        return [int(r) for r in self.v]


class Stack:
    """Bounded LIFO of return addresses"""

    def __init__(self, capacity: int = STACK_SIZE):
        self.capacity = capacity
        self._frames: List[int] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, addr: int):
        if len(self._frames) >= self.capacity:
            raise StackOverflow(self.capacity)
        self._frames.append(addr)

    def pop(self) -> int:
        if not self._frames:
            raise StackUnderflow()
        return self._frames.pop()

    def peek(self) -> int:
        if not self._frames:
            raise StackUnderflow()
        return self._frames[-1]

    def clear(self):
        self._frames.clear()

    def as_list(self) -> List[int]:
        """Return addresses, oldest first"""
        return list(self._frames)
