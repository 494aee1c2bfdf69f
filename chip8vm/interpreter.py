"""
CHIP-8 interpreter core

Single-instance, headless interpreter. Owns memory, registers, stack,
timers, display and keypad, and retires one instruction per step():

    fetch word at PC -> PC += 2 -> decode -> execute

The key-wait instruction (Fx0A) parks the state machine in AWAITING_KEY
until the keypad reports a key-press edge; step() is a no-op meanwhile.
Timer ticking belongs to the caller (see clock.Runner).
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import numpy as np

from . import decoder as ops
from .config import InterpreterConfig
from .constants import ADDRESS_MASK, GLYPH_HEIGHT, PROGRAM_START
from .decoder import Opcode, decode
from .display import Display
from .errors import Chip8Error, InterpreterHalted, UnknownInstructionError
from .keypad import InputLatch
from .memory import Memory, ProgramImage
from .registers import RegisterFile, Stack
from .timers import TimerUnit

logger = logging.getLogger(__name__)

STAT_KEYS = (
    'instructions_executed',
    'display_writes',
    'display_clears',
    'sprite_collisions',
    'pixels_drawn',
    'pixels_erased',
    'memory_reads',
    'memory_writes',
    'timer_sets',
    'sound_activations',
    'key_checks',
    'blocking_key_waits',
    'jumps_taken',
    'subroutine_calls',
    'returns',
    'random_generations',
    'unknown_instructions',
    'sys_calls',
    'frames',
)


class ExecState(Enum):
    READY = "ready"
    AWAITING_KEY = "awaiting_key"
    HALTED = "halted"


class Chip8Interpreter:
    def __init__(self, config: Optional[InterpreterConfig] = None, rng: Optional[np.random.Generator] = None):
        self.config = (config or InterpreterConfig()).validate()
        self._injected_rng = rng
        self._program: Optional[bytes] = None
        self._handlers: Dict[type, Callable[[Any], None]] = self._build_dispatch()
        self.keypad = InputLatch()
        self.keypad.add_press_listener(self._on_key_press)
        self.reset()

    def reset(self):
        """Reset to power-on state, reloading the current program if any"""
        cfg = self.config
        self.memory = Memory(cfg.memory_size, cfg.font_base)
        self.memory.load_font()
        self.registers = RegisterFile()
        self.stack = Stack(cfg.stack_capacity)
        self.timers = TimerUnit()
        self.display = Display()
        # Same latch object across resets; hosts keep a reference to it
        self.keypad.release_all()
        self.rng = self._injected_rng if self._injected_rng is not None else np.random.default_rng(cfg.seed)

        self.state = ExecState.READY
        self.key_register: Optional[int] = None
        self.last_error: Optional[Chip8Error] = None
        self.stats = {key: 0 for key in STAT_KEYS}

        if self._program is not None:
            self.memory.load_program(self._program)

    def load_program(self, rom: ProgramImage):
        """Load a program image at 0x200 (raises ProgramTooLarge)"""
        self.memory.load_program(rom)
        self._program = self.memory.read_block(PROGRAM_START, self.memory.program_size).tobytes()

    @property
    def halted(self) -> bool:
        return self.state is ExecState.HALTED

    @property
    def waiting_for_key(self) -> bool:
        return self.state is ExecState.AWAITING_KEY

    # =========================================================================
    # Fetch / decode / execute
    # =========================================================================

    def step(self) -> Optional[Opcode]:
        """
        Execute one instruction.

        Returns the executed opcode, or None while waiting for a key.
        Errors move the interpreter to HALTED and propagate to the caller.
        """
        if self.state is ExecState.HALTED:
            raise InterpreterHalted(f"Interpreter halted: {self.last_error}")
        if self.state is ExecState.AWAITING_KEY:
            return None

        address = self.registers.pc
        try:
            word = self.memory.read_word(address)
            self.registers.pc = address + 2
            opcode = decode(word, self.config.quirks.sys_is_noop)
            if self.config.trace:
                logger.debug("PC=0x%03X  %04X  %-18s I=0x%03X V=%s",
                             address, word, opcode.mnemonic(), self.registers.index,
                             self.registers.as_list())
            self._execute(opcode, address)
        except Chip8Error as e:
            self._halt(e)
            raise

        self.stats['instructions_executed'] += 1
        return opcode

    def _execute(self, opcode: Opcode, address: int):
        if isinstance(opcode, ops.UnknownInstruction):
            self._unknown(opcode, address)
            return
        self._handlers[type(opcode)](opcode)

    def _halt(self, error: Chip8Error):
        self.state = ExecState.HALTED
        self.last_error = error
        logger.error("Interpreter halted: %s", error)

    def _unknown(self, opcode: Opcode, address: int):
        self.stats['unknown_instructions'] += 1
        error = UnknownInstructionError(opcode.word, address)
        if self.config.on_unknown == "skip":
            logger.warning("%s (skipped)", error)
            self.last_error = error
            return
        raise error

    def _on_key_press(self, code: int):
        if self.state is ExecState.AWAITING_KEY:
            self.registers[self.key_register] = code
            self.key_register = None
            self.state = ExecState.READY

    def _index_address(self, offset: int = 0) -> int:
        return (self.registers.index & ADDRESS_MASK) + offset

    def _set_with_flag(self, x: int, value: int, flag: int):
        # Flag written last so VF as destination ends up holding the flag
        self.registers[x] = value
        self.registers.flag = flag

    def _build_dispatch(self) -> Dict[type, Callable[[Any], None]]:
        return {
            ops.SysCall: self._op_sys,
            ops.ClearScreen: self._op_cls,
            ops.Return: self._op_ret,
            ops.Jump: self._op_jp,
            ops.Call: self._op_call,
            ops.SkipEqualImm: self._op_se_imm,
            ops.SkipNotEqualImm: self._op_sne_imm,
            ops.SkipEqualReg: self._op_se_reg,
            ops.LoadImm: self._op_ld_imm,
            ops.AddImm: self._op_add_imm,
            ops.LoadReg: self._op_ld_reg,
            ops.Or: self._op_or,
            ops.And: self._op_and,
            ops.Xor: self._op_xor,
            ops.AddReg: self._op_add_reg,
            ops.SubReg: self._op_sub,
            ops.ShiftRight: self._op_shr,
            ops.SubReversed: self._op_subn,
            ops.ShiftLeft: self._op_shl,
            ops.SkipNotEqualReg: self._op_sne_reg,
            ops.LoadIndex: self._op_ld_i,
            ops.JumpOffset: self._op_jp_offset,
            ops.Random: self._op_rnd,
            ops.Draw: self._op_drw,
            ops.SkipKeyPressed: self._op_skp,
            ops.SkipKeyNotPressed: self._op_sknp,
            ops.GetDelay: self._op_ld_vx_dt,
            ops.WaitKey: self._op_ld_vx_k,
            ops.SetDelay: self._op_ld_dt,
            ops.SetSound: self._op_ld_st,
            ops.AddIndex: self._op_add_i,
            ops.FontChar: self._op_ld_f,
            ops.StoreBCD: self._op_ld_b,
            ops.StoreRegs: self._op_store_regs,
            ops.LoadRegs: self._op_load_regs,
        }

    # =========================================================================
    # Flow control
    # =========================================================================

    def _op_sys(self, op):
        # Only reachable with the sys_is_noop quirk
        self.stats['sys_calls'] += 1
        logger.debug("Ignoring SYS 0x%03X", op.nnn)

    def _op_cls(self, op):
        self.display.clear()
        self.stats['display_clears'] += 1

    def _op_ret(self, op):
        self.registers.pc = self.stack.pop()
        self.stats['returns'] += 1

    def _op_jp(self, op):
        self.registers.pc = op.nnn
        self.stats['jumps_taken'] += 1

    def _op_call(self, op):
        self.stack.push(self.registers.pc)
        self.registers.pc = op.nnn
        self.stats['subroutine_calls'] += 1

    def _skip_if(self, condition: bool):
        if condition:
            self.registers.pc += 2

    def _op_se_imm(self, op):
        self._skip_if(self.registers[op.x] == op.nn)

    def _op_sne_imm(self, op):
        self._skip_if(self.registers[op.x] != op.nn)

    def _op_se_reg(self, op):
        self._skip_if(self.registers[op.x] == self.registers[op.y])

    def _op_sne_reg(self, op):
        self._skip_if(self.registers[op.x] != self.registers[op.y])

    def _op_jp_offset(self, op):
        if self.config.quirks.jump_uses_vx:
            base = self.registers[(op.nnn >> 8) & 0xF]
        else:
            base = self.registers[0]
        self.registers.pc = op.nnn + base
        self.stats['jumps_taken'] += 1

    # =========================================================================
    # Register arithmetic
    # =========================================================================

    def _op_ld_imm(self, op):
        self.registers[op.x] = op.nn

    def _op_add_imm(self, op):
        # No carry flag for the immediate form
        self.registers[op.x] = self.registers[op.x] + op.nn

    def _op_ld_reg(self, op):
        self.registers[op.x] = self.registers[op.y]

    def _logic(self, x: int, value: int):
        self.registers[x] = value
        if self.config.quirks.logic_resets_vf:
            self.registers.flag = 0

    def _op_or(self, op):
        self._logic(op.x, self.registers[op.x] | self.registers[op.y])

    def _op_and(self, op):
        self._logic(op.x, self.registers[op.x] & self.registers[op.y])

    def _op_xor(self, op):
        self._logic(op.x, self.registers[op.x] ^ self.registers[op.y])

    def _op_add_reg(self, op):
        result = self.registers[op.x] + self.registers[op.y]
        self._set_with_flag(op.x, result, result > 0xFF)

    def _op_sub(self, op):
        vx, vy = self.registers[op.x], self.registers[op.y]
        self._set_with_flag(op.x, vx - vy, vx >= vy)

    def _op_subn(self, op):
        vx, vy = self.registers[op.x], self.registers[op.y]
        self._set_with_flag(op.x, vy - vx, vy >= vx)

    def _shift_source(self, op) -> int:
        return self.registers[op.y if self.config.quirks.shift_uses_vy else op.x]

    def _op_shr(self, op):
        value = self._shift_source(op)
        self._set_with_flag(op.x, value >> 1, value & 0x1)

    def _op_shl(self, op):
        value = self._shift_source(op)
        self._set_with_flag(op.x, value << 1, value & 0x80)

    def _op_rnd(self, op):
        self.registers[op.x] = int(self.rng.integers(0, 256)) & op.nn
        self.stats['random_generations'] += 1

    # =========================================================================
    # Index register, drawing and memory
    # =========================================================================

    def _op_ld_i(self, op):
        self.registers.index = op.nnn

    def _op_add_i(self, op):
        self.registers.index = self.registers.index + self.registers[op.x]

    def _op_ld_f(self, op):
        digit = self.registers[op.x] & 0xF
        self.registers.index = self.config.font_base + digit * GLYPH_HEIGHT

    def _op_drw(self, op):
        vy = self.registers[op.y] % self.display.height
        # Only rows that land on screen are fetched; the rest are clipped
        visible = min(op.n, self.display.height - vy)
        rows = [self.memory.read_byte(self._index_address(r)) for r in range(visible)]
        self.stats['memory_reads'] += visible

        result = self.display.draw_sprite(self.registers[op.x], vy, rows)
        self.registers.flag = result.collision
        self.stats['display_writes'] += 1
        self.stats['pixels_drawn'] += result.pixels_drawn
        self.stats['pixels_erased'] += result.pixels_erased
        if result.collision:
            self.stats['sprite_collisions'] += 1

    def _op_ld_b(self, op):
        value = self.registers[op.x]
        digits = (value // 100, (value // 10) % 10, value % 10)
        for offset, digit in enumerate(digits):
            self.memory.write_byte(self._index_address(offset), digit)
        self.stats['memory_writes'] += 3

    def _op_store_regs(self, op):
        for i in range(op.x + 1):
            self.memory.write_byte(self._index_address(i), self.registers[i])
        self.stats['memory_writes'] += op.x + 1
        if self.config.quirks.memory_increments_i:
            self.registers.index = self.registers.index + op.x + 1

    def _op_load_regs(self, op):
        for i in range(op.x + 1):
            self.registers[i] = self.memory.read_byte(self._index_address(i))
        self.stats['memory_reads'] += op.x + 1
        if self.config.quirks.memory_increments_i:
            self.registers.index = self.registers.index + op.x + 1

    # =========================================================================
    # Keypad and timers
    # =========================================================================

    def _op_skp(self, op):
        self.stats['key_checks'] += 1
        self._skip_if(self.keypad.is_pressed(self.registers[op.x] & 0xF))

    def _op_sknp(self, op):
        self.stats['key_checks'] += 1
        self._skip_if(not self.keypad.is_pressed(self.registers[op.x] & 0xF))

    def _op_ld_vx_k(self, op):
        self.key_register = op.x
        self.state = ExecState.AWAITING_KEY
        self.stats['blocking_key_waits'] += 1

    def _op_ld_vx_dt(self, op):
        self.registers[op.x] = self.timers.delay

    def _op_ld_dt(self, op):
        self.timers.set_delay(self.registers[op.x])
        self.stats['timer_sets'] += 1

    def _op_ld_st(self, op):
        value = self.registers[op.x]
        self.timers.set_sound(value)
        self.stats['timer_sets'] += 1
        if value > 0:
            self.stats['sound_activations'] += 1

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_stats(self) -> Dict[str, int]:
        """Get current instrumentation statistics"""
        return self.stats.copy()

    def state_summary(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'pc': self.registers.pc,
            'index': self.registers.index,
            'registers': self.registers.as_list(),
            'stack': self.stack.as_list(),
            'delay_timer': self.timers.delay,
            'sound_timer': self.timers.sound,
            'error': str(self.last_error) if self.last_error else None,
        }
