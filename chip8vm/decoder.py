"""
CHIP-8 instruction decoder

decode() turns a 16-bit instruction word into one of 35 opcode variants
(frozen dataclasses), or UnknownInstruction when a multiplexed family
(0nnn, 5xy?, 8xy?, 9xy?, Ex??, Fx??) has no matching sub-pattern.
"""

from dataclasses import dataclass, fields
from typing import Dict, Type


@dataclass(frozen=True)
class Opcode:
    word: int

    TEMPLATE = "???"

    def operands(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def mnemonic(self) -> str:
        """Assembly-style rendering, e.g. 'DRW V0, V1, #5'"""
        return self.TEMPLATE.format(**self.operands())


@dataclass(frozen=True)
class AddressOpcode(Opcode):
    nnn: int


@dataclass(frozen=True)
class RegOpcode(Opcode):
    x: int


@dataclass(frozen=True)
class RegImmOpcode(Opcode):
    x: int
    nn: int


@dataclass(frozen=True)
class RegRegOpcode(Opcode):
    x: int
    y: int


# =============================================================================
# 0nnn family
# =============================================================================

class SysCall(AddressOpcode):
    TEMPLATE = "SYS ${nnn:03X}"


class ClearScreen(Opcode):
    TEMPLATE = "CLS"


class Return(Opcode):
    TEMPLATE = "RET"


# =============================================================================
# Flow control and immediates
# =============================================================================

class Jump(AddressOpcode):
    TEMPLATE = "JP ${nnn:03X}"


class Call(AddressOpcode):
    TEMPLATE = "CALL ${nnn:03X}"


class SkipEqualImm(RegImmOpcode):
    TEMPLATE = "SE V{x:X}, #{nn:02X}"


class SkipNotEqualImm(RegImmOpcode):
    TEMPLATE = "SNE V{x:X}, #{nn:02X}"


class SkipEqualReg(RegRegOpcode):
    TEMPLATE = "SE V{x:X}, V{y:X}"


class LoadImm(RegImmOpcode):
    TEMPLATE = "LD V{x:X}, #{nn:02X}"


class AddImm(RegImmOpcode):
    TEMPLATE = "ADD V{x:X}, #{nn:02X}"


# =============================================================================
# 8xy? register operations
# =============================================================================

class LoadReg(RegRegOpcode):
    TEMPLATE = "LD V{x:X}, V{y:X}"


class Or(RegRegOpcode):
    TEMPLATE = "OR V{x:X}, V{y:X}"


class And(RegRegOpcode):
    TEMPLATE = "AND V{x:X}, V{y:X}"


class Xor(RegRegOpcode):
    TEMPLATE = "XOR V{x:X}, V{y:X}"


class AddReg(RegRegOpcode):
    TEMPLATE = "ADD V{x:X}, V{y:X}"


class SubReg(RegRegOpcode):
    TEMPLATE = "SUB V{x:X}, V{y:X}"


class ShiftRight(RegRegOpcode):
    TEMPLATE = "SHR V{x:X}"


class SubReversed(RegRegOpcode):
    TEMPLATE = "SUBN V{x:X}, V{y:X}"


class ShiftLeft(RegRegOpcode):
    TEMPLATE = "SHL V{x:X}"


class SkipNotEqualReg(RegRegOpcode):
    TEMPLATE = "SNE V{x:X}, V{y:X}"


# =============================================================================
# Index, random and drawing
# =============================================================================

class LoadIndex(AddressOpcode):
    TEMPLATE = "LD I, ${nnn:03X}"


class JumpOffset(AddressOpcode):
    TEMPLATE = "JP V0, ${nnn:03X}"


class Random(RegImmOpcode):
    TEMPLATE = "RND V{x:X}, #{nn:02X}"


@dataclass(frozen=True)
class Draw(Opcode):
    x: int
    y: int
    n: int

    TEMPLATE = "DRW V{x:X}, V{y:X}, #{n:X}"


# =============================================================================
# Ex?? keypad and Fx?? timers / memory
# =============================================================================

class SkipKeyPressed(RegOpcode):
    TEMPLATE = "SKP V{x:X}"


class SkipKeyNotPressed(RegOpcode):
    TEMPLATE = "SKNP V{x:X}"


class GetDelay(RegOpcode):
    TEMPLATE = "LD V{x:X}, DT"


class WaitKey(RegOpcode):
    TEMPLATE = "LD V{x:X}, K"


class SetDelay(RegOpcode):
    TEMPLATE = "LD DT, V{x:X}"


class SetSound(RegOpcode):
    TEMPLATE = "LD ST, V{x:X}"


class AddIndex(RegOpcode):
    TEMPLATE = "ADD I, V{x:X}"


class FontChar(RegOpcode):
    TEMPLATE = "LD F, V{x:X}"


class StoreBCD(RegOpcode):
    TEMPLATE = "LD B, V{x:X}"


class StoreRegs(RegOpcode):
    TEMPLATE = "LD [I], V{x:X}"


class LoadRegs(RegOpcode):
    TEMPLATE = "LD V{x:X}, [I]"


class UnknownInstruction(Opcode):
    TEMPLATE = "UNKNOWN ${word:04X}"


# Sub-pattern tables for the multiplexed families
ALU_OPS: Dict[int, Type[RegRegOpcode]] = {
    0x0: LoadReg,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: AddReg,
    0x5: SubReg,
    0x6: ShiftRight,
    0x7: SubReversed,
    0xE: ShiftLeft,
}

KEY_OPS: Dict[int, Type[RegOpcode]] = {
    0x9E: SkipKeyPressed,
    0xA1: SkipKeyNotPressed,
}

MISC_OPS: Dict[int, Type[RegOpcode]] = {
    0x07: GetDelay,
    0x0A: WaitKey,
    0x15: SetDelay,
    0x18: SetSound,
    0x1E: AddIndex,
    0x29: FontChar,
    0x33: StoreBCD,
    0x55: StoreRegs,
    0x65: LoadRegs,
}


def decode(word: int, sys_is_noop: bool = False) -> Opcode:
    """
    Decode a 16-bit instruction word.

    0nnn words other than CLS and RET are unknown unless sys_is_noop is
    set, in which case they decode to SysCall.
    """
    word &= 0xFFFF
    op = word & 0xF000
    x = (word & 0x0F00) >> 8
    y = (word & 0x00F0) >> 4
    n = word & 0x000F
    nn = word & 0x00FF
    nnn = word & 0x0FFF

    if op == 0x0000:
        if word == 0x00E0:
            return ClearScreen(word)
        if word == 0x00EE:
            return Return(word)
        return SysCall(word, nnn) if sys_is_noop else UnknownInstruction(word)
    if op == 0x1000:
        return Jump(word, nnn)
    if op == 0x2000:
        return Call(word, nnn)
    if op == 0x3000:
        return SkipEqualImm(word, x, nn)
    if op == 0x4000:
        return SkipNotEqualImm(word, x, nn)
    if op == 0x5000:
        return SkipEqualReg(word, x, y) if n == 0 else UnknownInstruction(word)
    if op == 0x6000:
        return LoadImm(word, x, nn)
    if op == 0x7000:
        return AddImm(word, x, nn)
    if op == 0x8000:
        alu_op = ALU_OPS.get(n)
        return alu_op(word, x, y) if alu_op else UnknownInstruction(word)
    if op == 0x9000:
        return SkipNotEqualReg(word, x, y) if n == 0 else UnknownInstruction(word)
    if op == 0xA000:
        return LoadIndex(word, nnn)
    if op == 0xB000:
        return JumpOffset(word, nnn)
    if op == 0xC000:
        return Random(word, x, nn)
    if op == 0xD000:
        return Draw(word, x, y, n)
    if op == 0xE000:
        key_op = KEY_OPS.get(nn)
        return key_op(word, x) if key_op else UnknownInstruction(word)

    misc_op = MISC_OPS.get(nn)
    return misc_op(word, x) if misc_op else UnknownInstruction(word)
