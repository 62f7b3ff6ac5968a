"""Console logging utilities for the emulator and its front-ends.

Provides a small level-filtered console logger and a real-time tqdm progress
bar for long compiled runs, driven from inside ``jax.lax.scan`` through
``io_callback``.
"""

import time
import sys
from typing import Callable
import jax
from jax.experimental import io_callback

from tqdm import tqdm


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConsoleLogger:
    """Console logger with level filtering, timestamps and colors."""

    def __init__(
        self,
        name: str = "chipax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in LEVELS + ("RESET",)}
        )

        self.level_order = {level: order for order, level in enumerate(LEVELS)}

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


def scan_with_progress(n: int, desc: str, unit: str) -> Callable:
    """Decorator that drives a tqdm bar from inside a ``jax.lax.scan`` body.

    The scanned function must receive the iteration number as ``x``. The bar
    is opened on the first iteration, advanced in strides of up to 50
    iterations, and closed after the last one.
    """
    stride = max(1, min(n // 20, 50))
    bars = {}

    def _open():
        bars[0] = tqdm(total=n, desc=desc, unit=unit)

    def _advance(steps):
        bars[0].update(int(steps))

    def _close(steps):
        bars[0].update(int(steps))
        bars.pop(0).close()

    def _callback_when(condition, callback, *args):
        jax.lax.cond(
            condition,
            lambda: io_callback(callback, None, *args, ordered=True),
            lambda: None,
        )

    def _scan_progress_decorator(func):
        def wrapper_with_progress(carry, x):
            _callback_when(x == 0, _open)
            result = func(carry, x)
            _callback_when((x + 1) % stride == 0, _advance, stride)
            _callback_when(x == n - 1, _close, n % stride)
            return result

        return wrapper_with_progress

    return _scan_progress_decorator
