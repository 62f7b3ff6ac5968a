"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from chipax import create_state, Interpreter


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def interpreter():
    """Provide a fresh interpreter with a fixed random key."""
    return Interpreter(rng=jax.random.PRNGKey(0))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*instructions):
    """Assemble 16-bit instructions into a big-endian program image."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)
