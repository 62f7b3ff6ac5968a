"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode handler."""

import jax.numpy as jnp
from chipax.state import EmulatorState, flag_error
from chipax.decode import DecodedInstruction
from chipax.errors import ErrorCode
from chipax.stack import pop


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, ignored."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, ok = pop(state.stack)
    state = state.replace(stack=stack, pc=address)
    return flag_error(state, ~ok, ErrorCode.STACK_UNDERFLOW)


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unknown opcode: report it and carry on with the next instruction."""
    return flag_error(state, True, ErrorCode.UNKNOWN_OPCODE)
