"""
Error types raised by the CHIP-8 interpreter core

Every error is terminal for the current run but never for the host process:
the interpreter raises, the runner records, and the caller decides.
"""


class Chip8Error(Exception):
    """Base class for all interpreter errors"""


class OutOfBounds(Chip8Error):
    """Memory access outside the addressable range"""

    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(f"Address 0x{address:04X} outside memory of {size} bytes")


class ReadOnlyMemory(Chip8Error):
    """Write into the protected font region"""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Address 0x{address:04X} is in the read-only font region")


class ProgramTooLarge(Chip8Error):
    """Program image does not fit starting at 0x200"""

    def __init__(self, length: int, capacity: int):
        self.length = length
        self.capacity = capacity
        super().__init__(f"ROM too large: {length} bytes, max {capacity}")


class StackOverflow(Chip8Error):
    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Stack overflow: more than {capacity} nested calls")


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Stack underflow: return with empty stack")


class UnknownInstructionError(Chip8Error):
    """Instruction word that matches no known opcode"""

    def __init__(self, word: int, address: int):
        self.word = word
        self.address = address
        super().__init__(f"Unknown instruction 0x{word:04X} at PC=0x{address:03X}")


class InterpreterHalted(Chip8Error):
    """step() called after the interpreter stopped on an error"""


class InvalidKey(Chip8Error, ValueError):
    def __init__(self, code):
        self.code = code
        super().__init__(f"Key code {code!r} outside 0x0-0xF")


class ConfigurationError(Chip8Error, ValueError):
    """Invalid interpreter configuration"""
