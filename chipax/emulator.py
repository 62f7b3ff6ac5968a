"""Main CHIP-8 emulator execution engine."""

from functools import partial
from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState, flag_error, is_fatal
from chipax.decode import Op, decode
from chipax.constants import MEMORY_SIZE
from chipax.errors import ErrorCode, OutOfMemory
from chipax.logging import scan_with_progress
from chipax.instructions.system import no_op, execute_clear_screen, execute_return, execute_unknown
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipax.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.SYS: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
}


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Expects ``state.pc`` to already point past ``instruction``, as left by
    :func:`fetch`.
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.op,
        [HANDLERS[op] for op in Op],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def _cycle(state: EmulatorState) -> EmulatorState:
    """Fetch, decode and execute one instruction.

    A fatal error rolls every field back to its value before the cycle and
    only keeps the error code.
    """
    state = state.replace(error=jnp.zeros((), dtype=jnp.uint8))
    fetch_out_of_bounds = jnp.astype(state.pc, jnp.int32) + 1 >= MEMORY_SIZE

    fetched, instruction = fetch(state)
    executed = execute(fetched, instruction)
    executed = flag_error(executed, fetch_out_of_bounds, ErrorCode.OUT_OF_BOUNDS)

    fatal = is_fatal(executed.error)
    rolled_back = jax.tree_util.tree_map(lambda old, new: jnp.where(fatal, old, new), state, executed)
    return rolled_back.replace(error=executed.error)


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Run one cycle. A halted machine (fatal error latched) is left as is."""
    return jax.lax.cond(is_fatal(state.error), lambda s: s, _cycle, state)


def _run_cycle(state, _):
    state = step(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles in a single compiled loop."""
    state, _ = jax.lax.scan(_run_cycle, state, length=n)
    return state


@jax.jit
def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers once (60 Hz tick), stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def sound_active(state: EmulatorState) -> bool:
    """Whether the buzzer should currently sound."""
    return bool(state.sound_timer > 0)


def load_program(state: EmulatorState, data: bytes, base: Optional[int] = None) -> EmulatorState:
    """Copy a program image verbatim into memory starting at ``base``.

    ``base`` defaults to the state's program start. Raises
    :class:`~chipax.errors.OutOfMemory` if the image does not fit.
    """
    if base is None:
        base = state.program_start
    capacity = MEMORY_SIZE - base
    if len(data) > capacity:
        raise OutOfMemory(len(data), base, capacity)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[base:base + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load a ROM file into CHIP-8 memory at the state's program start."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def run_frames(
    state: EmulatorState, num_frames: int, ipf: int, progress: bool = False
) -> EmulatorState:
    """Run ``num_frames`` 60 Hz frames of ``ipf`` cycles each, ticking the timers every frame.

    With ``progress`` a tqdm bar reports frames as they complete.
    """
    def _run_frame(state, _):
        state = run_cycles(tick_timers(state), ipf)
        return state, None

    if progress:
        _run_frame = scan_with_progress(num_frames, desc=f"Emulating ({num_frames:,} frames)", unit="frame")(_run_frame)

    state, _ = jax.lax.scan(_run_frame, state, jnp.arange(num_frames))
    return state
