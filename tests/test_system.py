"""Tests for system instructions (0xxx)."""

import jax.numpy as jnp
from chipax import execute, ErrorCode


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[63, 31].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.draw_flag


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0
    assert int(state.error) == ErrorCode.NONE


def test_execute_return_on_empty_stack(fresh_state):
    """00EE with nothing to return to is a stack underflow."""
    state = execute(fresh_state, 0x00EE)
    assert int(state.error) == ErrorCode.STACK_UNDERFLOW


def test_execute_call_on_full_stack(fresh_state):
    """2NNN with 16 return addresses already pushed is a stack overflow."""
    state = fresh_state
    for _ in range(16):
        state = execute(state, 0x2300)
    assert int(state.error) == ErrorCode.NONE
    assert state.stack.pointer == 16

    state = execute(state, 0x2300)
    assert int(state.error) == ErrorCode.STACK_OVERFLOW


def test_machine_code_routine_ignored(fresh_state):
    """0NNN - Ignored, no state change."""
    state = execute(fresh_state, 0x0123)

    assert state.pc == fresh_state.pc
    assert int(state.error) == ErrorCode.NONE
    assert jnp.array_equal(state.V, fresh_state.V)
