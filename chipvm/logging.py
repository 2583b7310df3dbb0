"""Console logging utilities for the CHIP-8 core.

This module provides a small levelled console logger plus formatters for
interpreter state and a tqdm progress bar for long headless runs.
"""

import time
import sys
from typing import List, Optional

from tqdm import tqdm

from chipvm.state import EmulatorState
from chipvm.stack import addresses


class ConsoleLogger:
    """Flexible console logger with level filtering and colours."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
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
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def is_enabled_for(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order[self.log_level]

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
        if self.is_enabled_for(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

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


def format_registers(state: EmulatorState) -> List[str]:
    """Format the register file as four lines of four registers."""
    lines = []
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4)))
    return lines


def format_state(state: EmulatorState) -> List[str]:
    """Multi-line dump of the machine state for fault reports."""
    stack = ", ".join(f"0x{a:03X}" for a in addresses(state.stack)) or "empty"
    return [
        f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):03X}",
        f"Delay: {int(state.delay_timer)}  Sound: {int(state.sound_timer)}",
        f"Stack: {stack}",
        *format_registers(state),
    ]


def cycle_progress(total: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting instruction cycles."""
    if desc is None:
        desc = f"Running ({total:,} cycles)"
    return tqdm(total=total, desc=desc, unit="cycle", **kwargs)
