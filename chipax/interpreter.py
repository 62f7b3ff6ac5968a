"""Imperative interpreter facade over the functional emulator core.

The core functions in :mod:`chipax.emulator` map one immutable
:class:`~chipax.state.EmulatorState` to the next. :class:`Interpreter` owns a
single state value and exposes the usual stateful machine API to front-ends:
load a program, step, tick the timers, press keys and read the screen.

It is not thread-safe; callers that drive it from several threads must
serialize every call.
"""

from typing import Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chipax.constants import PROGRAM_START, MEMORY_SIZE, NUM_KEYS
from chipax.emulator import step, tick_timers, load_program, sound_active
from chipax.errors import ErrorCode, FAULTS, MachineFault, UnknownOpcode
from chipax.logging import ConsoleLogger
from chipax.state import EmulatorState, create_state


class Interpreter:
    """A CHIP-8 machine driven one cycle at a time.

    Args:
        rng: JAX random key feeding ``CXNN``. Pass a fixed key for
            reproducible runs.
        program_start: Load address and initial PC (``0x200``, or ``0x600``
            for ETI 660 programs).
        logger: Logger for loads, unknown opcodes and faults.
    """

    def __init__(
        self,
        rng: Optional[jax.random.PRNGKey] = None,
        program_start: int = PROGRAM_START,
        logger: Optional[ConsoleLogger] = None,
    ):
        if rng is None:
            rng = jax.random.PRNGKey(0)
        self.logger = logger or ConsoleLogger(name="chipax", log_level="WARNING")
        self.state = create_state(rng, program_start=program_start)
        self._fault: Optional[MachineFault] = None

    @property
    def halted(self) -> bool:
        """Whether a fatal error stopped the machine."""
        return self._fault is not None

    @property
    def sound_active(self) -> bool:
        return sound_active(self.state)

    def load(self, data: bytes, base: Optional[int] = None):
        """Copy a program image into memory. See :func:`~chipax.emulator.load_program`."""
        if base is None:
            base = self.state.program_start
        self.state = load_program(self.state, bytes(data), base)
        self.logger.info(f"Loaded {len(data)} bytes at 0x{base:03X}")

    def step(self) -> Optional[UnknownOpcode]:
        """Execute exactly one instruction.

        Returns:
            An :class:`UnknownOpcode` record if the instruction could not be
            decoded, otherwise ``None``.

        Raises:
            MachineFault: on stack overflow/underflow or an out-of-bounds
                memory access. The machine stays halted and every later call
                raises the same fault.
        """
        if self._fault is not None:
            raise self._fault

        pc = int(self.state.pc)
        self.state = step(self.state)
        error = ErrorCode(int(self.state.error))

        if error == ErrorCode.NONE:
            return None
        if error == ErrorCode.UNKNOWN_OPCODE:
            signal = UnknownOpcode(address=pc, opcode=self._peek_opcode(pc))
            self.logger.warning(str(signal))
            return signal

        self._fault = FAULTS[error](pc, self._peek_opcode(pc) if pc + 1 < MEMORY_SIZE else None)
        self.logger.error(f"Machine halted: {self._fault}")
        raise self._fault

    def tick_timers(self):
        """Decrement the delay and sound timers; call at 60 Hz."""
        self.state = tick_timers(self.state)

    def set_key(self, index: int, pressed: bool):
        """Set the state of one key of the hex keypad."""
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in [0, {NUM_KEYS}), got {index}")
        self.state = self.state.replace(keypad=self.state.keypad.at[index].set(bool(pressed)))

    def set_keys(self, pressed: Sequence[bool]):
        """Replace the whole keypad state with a 16-entry vector."""
        keypad = jnp.asarray(pressed, dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self.state = self.state.replace(keypad=keypad)

    def framebuffer(self) -> np.ndarray:
        """Copy of the screen as a ``(32, 64)`` boolean array, indexed ``[y, x]``."""
        return np.array(self.state.display, dtype=np.bool_).T.copy()

    def take_redraw_flag(self) -> bool:
        """Return whether the screen changed since the last call, and clear the flag."""
        redraw = bool(self.state.draw_flag)
        if redraw:
            self.state = self.state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))
        return redraw

    def _peek_opcode(self, address: int) -> int:
        memory = self.state.memory
        return (int(memory[address]) << 8) | int(memory[address + 1])
