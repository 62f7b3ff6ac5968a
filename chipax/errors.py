"""CHIP-8 error codes and exceptions.

Inside jitted code errors travel as an :class:`ErrorCode` stored on the
emulator state. The :class:`~chipax.interpreter.Interpreter` turns those codes
into the exceptions below.
"""

from enum import IntEnum
from typing import Optional

from chex import dataclass


class ErrorCode(IntEnum):
    """Error raised by the last executed cycle."""
    NONE = 0
    UNKNOWN_OPCODE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    OUT_OF_BOUNDS = 4


FATAL_ERRORS = (ErrorCode.STACK_OVERFLOW, ErrorCode.STACK_UNDERFLOW, ErrorCode.OUT_OF_BOUNDS)


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class LoadError(Chip8Error):
    """Program image could not be loaded."""


class OutOfMemory(LoadError):
    """Program image does not fit in memory."""

    def __init__(self, size: int, base: int, capacity: int):
        super().__init__(
            f"Program of {size} bytes does not fit at 0x{base:03X} "
            f"({capacity} bytes available)"
        )
        self.size = size
        self.base = base
        self.capacity = capacity


class MachineFault(Chip8Error):
    """Fatal execution error. The machine halts and stays halted."""

    code = ErrorCode.NONE
    description = "machine fault"

    def __init__(self, pc: int, opcode: Optional[int] = None):
        opcode_str = f"{opcode:04X}" if opcode is not None else "----"
        super().__init__(f"{self.description} at 0x{pc:03X} (opcode {opcode_str})")
        self.pc = pc
        self.opcode = opcode


class StackOverflow(MachineFault):
    code = ErrorCode.STACK_OVERFLOW
    description = "stack overflow"


class StackUnderflow(MachineFault):
    code = ErrorCode.STACK_UNDERFLOW
    description = "stack underflow"


class OutOfBoundsAccess(MachineFault):
    code = ErrorCode.OUT_OF_BOUNDS
    description = "out of bounds memory access"


FAULTS = {fault.code: fault for fault in (StackOverflow, StackUnderflow, OutOfBoundsAccess)}


@dataclass(frozen=True)
class UnknownOpcode:
    """Non-fatal decode error reported by a single cycle."""
    address: int
    opcode: int

    def __str__(self) -> str:
        return f"unknown opcode {self.opcode:04X} at 0x{self.address:03X}"
