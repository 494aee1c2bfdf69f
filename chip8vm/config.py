"""
Interpreter configuration

Plain dataclasses that can be loaded from a JSON file, e.g.:

    {
        "instructions_per_second": 1000,
        "on_unknown": "skip",
        "quirks": {"logic_resets_vf": true}
    }
"""

import json
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import (
    FONT_SIZE,
    FONT_START,
    INSTRUCTIONS_PER_SECOND,
    MAX_MEMORY_SIZE,
    MEMORY_SIZE,
    MIN_STACK_SIZE,
    PROGRAM_START,
    STACK_SIZE,
    TIMER_HZ,
)
from .errors import ConfigurationError

UNKNOWN_POLICIES = ("halt", "skip")


@dataclass
class Quirks:
    """
    CHIP-8 compatibility quirks. All off means classic COSMAC VIP semantics.
    """
    shift_uses_vy: bool = False        # 8xy6/8xyE shift vY into vX
    logic_resets_vf: bool = False      # 8xy1/8xy2/8xy3 reset vF to 0
    memory_increments_i: bool = False  # Fx55/Fx65 leave I = I + x + 1
    jump_uses_vx: bool = False         # Bxnn jumps to xnn + vX instead of v0
    sys_is_noop: bool = False          # 0nnn is executed as a no-op instead of unknown

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quirks":
        _reject_unknown_keys(cls, data, "quirk")
        return cls(**{k: bool(v) for k, v in data.items()})


@dataclass
class InterpreterConfig:
    memory_size: int = MEMORY_SIZE
    font_base: int = FONT_START
    stack_capacity: int = STACK_SIZE
    instructions_per_second: int = INSTRUCTIONS_PER_SECOND
    timer_hz: int = TIMER_HZ
    on_unknown: str = "halt"
    trace: bool = False
    seed: Optional[int] = None
    quirks: Quirks = field(default_factory=Quirks)

    @property
    def instructions_per_frame(self) -> int:
        """Instruction steps run between two timer ticks (at least one)"""
        return max(1, round(self.instructions_per_second / self.timer_hz))

    def validate(self) -> "InterpreterConfig":
        """Raise ConfigurationError on inconsistent settings, return self otherwise"""
        if not MEMORY_SIZE <= self.memory_size <= MAX_MEMORY_SIZE:
            raise ConfigurationError(
                f"memory_size must be between {MEMORY_SIZE} and {MAX_MEMORY_SIZE}, "
                f"got {self.memory_size}")
        # The font table has to sit entirely in the interpreter area below 0x200
        if self.font_base < 0 or self.font_base + FONT_SIZE > PROGRAM_START:
            raise ConfigurationError(
                f"font_base 0x{self.font_base:X} leaves no room for the {FONT_SIZE}-byte "
                f"font below 0x{PROGRAM_START:X}")
        if self.stack_capacity < MIN_STACK_SIZE:
            raise ConfigurationError(
                f"stack_capacity must be at least {MIN_STACK_SIZE}, got {self.stack_capacity}")
        if self.instructions_per_second <= 0 or self.timer_hz <= 0:
            raise ConfigurationError("instructions_per_second and timer_hz must be positive")
        if self.on_unknown not in UNKNOWN_POLICIES:
            raise ConfigurationError(
                f"on_unknown must be one of {UNKNOWN_POLICIES}, got {self.on_unknown!r}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterpreterConfig":
        _reject_unknown_keys(cls, data, "config")
        values = dict(data)
        if "quirks" in values:
            values["quirks"] = Quirks.from_dict(values["quirks"] or {})
        return cls(**values).validate()

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InterpreterConfig":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a JSON object")
        return cls.from_dict(data)


def _reject_unknown_keys(cls, data: Dict[str, Any], what: str):
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {what} keys: {', '.join(unknown)}")
