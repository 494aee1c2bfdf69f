import struct

import numpy as np
import pytest

from chip8vm.config import InterpreterConfig
from chip8vm.interpreter import Chip8Interpreter


def assemble(*words: int) -> bytes:
    """Pack instruction words big-endian, the way they sit in a ROM"""
    return struct.pack(f">{len(words)}H", *words)


@pytest.fixture
def make_vm():
    """Factory: interpreter loaded with the given instruction words"""
    def _make(*words, config=None, rng=None, data=b""):
        vm = Chip8Interpreter(config or InterpreterConfig(seed=1234), rng=rng)
        vm.load_program(assemble(*words) + data)
        return vm
    return _make


@pytest.fixture
def run_steps():
    def _run(vm, count):
        for _ in range(count):
            vm.step()
        return vm
    return _run


class FixedRng:
    """Stand-in generator that always yields the same byte"""

    def __init__(self, value):
        self.value = value

    def integers(self, low, high):
        return np.int64(self.value)


@pytest.fixture
def fixed_rng():
    return FixedRng
