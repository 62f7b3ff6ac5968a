"""CHIP-8 emulator package."""

from chipax.state import EmulatorState, create_state
from chipax.emulator import execute, fetch, step, run_cycles, run_frames, tick_timers, sound_active, load_program, load_rom
from chipax.decode import DecodedInstruction, Op, decode
from chipax.constants import *
from chipax.errors import (
    ErrorCode, Chip8Error, LoadError, OutOfMemory, MachineFault,
    StackOverflow, StackUnderflow, OutOfBoundsAccess, UnknownOpcode
)
from chipax.interpreter import Interpreter
from chipax.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "run_cycles",
    "run_frames",
    "tick_timers",
    "sound_active",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "Interpreter",
    "ErrorCode",
    "Chip8Error",
    "LoadError",
    "OutOfMemory",
    "MachineFault",
    "StackOverflow",
    "StackUnderflow",
    "OutOfBoundsAccess",
    "UnknownOpcode",
    "PROGRAM_START",
    "ETI660_PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
