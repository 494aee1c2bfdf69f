"""
chip8vm: headless CHIP-8 interpreter core
"""

from .clock import Runner, RunResult, StopReason
from .config import InterpreterConfig, Quirks
from .decoder import Opcode, UnknownInstruction, decode
from .display import Display
from .errors import (
    Chip8Error,
    ConfigurationError,
    InterpreterHalted,
    InvalidKey,
    OutOfBounds,
    ProgramTooLarge,
    ReadOnlyMemory,
    StackOverflow,
    StackUnderflow,
    UnknownInstructionError,
)
from .interpreter import Chip8Interpreter, ExecState
from .keypad import QWERTY_KEYMAP, InputLatch, translate_key
from .memory import Memory
from .registers import RegisterFile, Stack
from .timers import TimerUnit

__version__ = "0.1.0"
