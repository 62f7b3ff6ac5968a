"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS
)
from chipax.errors import ErrorCode


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``[x, y]``. ``error`` holds the :class:`ErrorCode`
    of the last cycle; fatal codes stay latched until a fresh state is built.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    error: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    program_start: int = field(pytree_node=False, default=PROGRAM_START)


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    program_start: int = PROGRAM_START,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, pc=jnp.astype(program_start, jnp.uint16), program_start=program_start)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def set_register(state: EmulatorState, index: int, value) -> EmulatorState:
    """Return ``state`` with ``V[index]`` set to ``value`` truncated to a byte."""
    return state.replace(V=state.V.at[index].set(jnp.astype(value, jnp.uint8)))


def is_fatal(error: jnp.ndarray) -> jnp.ndarray:
    """Whether ``error`` is a fatal error code. Works on traced values."""
    return error >= int(ErrorCode.STACK_OVERFLOW)


def flag_error(state: EmulatorState, condition, code: int) -> EmulatorState:
    """Return ``state`` with ``error`` set to ``code`` where ``condition`` holds."""
    error = jnp.where(condition, jnp.astype(int(code), jnp.uint8), state.error)
    return state.replace(error=error)
