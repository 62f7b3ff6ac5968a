"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_error, set_register
from chipax.decode import DecodedInstruction
from chipax.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chipax.errors import ErrorCode


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return set_register(state, instruction.x, state.delay_timer)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits. VF is left alone."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=new_i)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Never blocks: with no key down the PC is rewound so the same instruction
    runs again on the next cycle. The lowest pressed key wins.
    """
    def key_pressed_action(state):
        pressed_key = jnp.argmax(state.keypad)
        return set_register(state, instruction.x, pressed_key)

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    state = state.replace(memory=new_memory)
    return flag_error(state, indices[-1] >= MEMORY_SIZE, ErrorCode.OUT_OF_BOUNDS)


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    """Addresses I..I+15 paired with the mask of registers V0..VX."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    out_of_bounds = jnp.astype(state.I, jnp.int32) + instruction.x >= MEMORY_SIZE
    return register_mask, indices, out_of_bounds


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask, indices, out_of_bounds = _register_window(state, instruction)
    # Addresses past VX are pointed off the end so the scatter drops them.
    targets = jnp.where(register_mask, indices, MEMORY_SIZE)
    new_memory = state.memory.at[targets].set(state.V, mode="drop")
    state = state.replace(memory=new_memory)
    return flag_error(state, out_of_bounds, ErrorCode.OUT_OF_BOUNDS)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask, indices, out_of_bounds = _register_window(state, instruction)
    memory_values = state.memory[jnp.clip(indices, 0, MEMORY_SIZE - 1)]
    new_V = jnp.where(register_mask, memory_values, state.V)
    state = state.replace(V=new_V)
    return flag_error(state, out_of_bounds, ErrorCode.OUT_OF_BOUNDS)
