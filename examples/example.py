import time

import jax

from chipax import create_state, load_program, run_frames
from chipax.rendering import display_to_text


def hex_digits_program() -> bytes:
    """Draw the 16 built-in hex glyphs in two rows, then spin."""
    instructions = [0x6000, 0x6101, 0x6202]  # V0 = digit, V1 = x, V2 = y
    instructions += [
        0xF029,  # I = glyph for V0
        0xD125,  # draw it at (V1, V2)
        0x7001,  # next digit
        0x7108,  # next column
        0x3008,  # after 8 digits ...
        0x1216,
        0x6101,  # ... start the second row
        0x6209,
        0x3010,  # stop after 16 digits
        0x1206,
        0x121A,  # spin
    ]
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)


if __name__ == "__main__":
    state = load_program(create_state(jax.random.PRNGKey(0)), hex_digits_program())

    # Measure compilation time
    start_compile = time.time()
    compiled = jax.jit(run_frames, static_argnums=(1, 2)).lower(state, 60, 10).compile()
    end_compile = time.time()
    print("Compilation time (s):", end_compile - start_compile)

    # Measure execution time
    start_exec = time.time()
    final_state = jax.block_until_ready(compiled(state))
    end_exec = time.time()
    print("Execution time (s):", end_exec - start_exec)

    print(display_to_text(final_state.display))
