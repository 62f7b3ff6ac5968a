"""CHIP-8 stack operations.

Overflow and underflow are reported through the returned ``ok`` flag; the
caller decides what to do with the (then meaningless) stack.
"""

import jax.numpy as jnp
from chipax.constants import STACK_SIZE
from chipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack."""
    ok = stack.pointer < STACK_SIZE
    address = jnp.astype(address, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(address, mode="drop")
    return stack.replace(data=new_data, pointer=stack.pointer + 1), ok


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack."""
    ok = stack.pointer > 0
    new_pointer = stack.pointer - 1
    popped_address = stack.data[jnp.clip(new_pointer, 0, STACK_SIZE - 1)]
    new_data = stack.data.at[new_pointer].set(0, mode="drop")
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, ok
