"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.state import EmulatorState, flag_error
from chipax.decode import DecodedInstruction
from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER
from chipax.errors import ErrorCode

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprite pixels wrap around both screen edges. Every screen pixel is
    covered by at most one sprite bit because the sprite is narrower and
    shorter than the screen, so the draw is a single XOR over the grid.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)
    base = jnp.astype(state.I, jnp.int32)

    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < instruction.n)

    addresses = jnp.where(in_sprite, base + row_offset, 0)
    sprite_bytes = jnp.astype(state.memory[jnp.clip(addresses, 0, MEMORY_SIZE - 1)], jnp.int32)
    shift = jnp.where(in_sprite, 7 - col_offset, 0)
    sprite = (((sprite_bytes >> shift) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    state = state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )
    out_of_bounds = (instruction.n > 0) & (base + instruction.n > MEMORY_SIZE)
    return flag_error(state, out_of_bounds, ErrorCode.OUT_OF_BOUNDS)
