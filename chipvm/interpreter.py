"""Stateful CHIP-8 interpreter driven by a host loop."""

import os
from typing import Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np

from chipvm.constants import NUM_KEYS, STACK_SIZE
from chipvm.decode import decode, format_instruction
from chipvm.directive import DirectiveKind
from chipvm.emulator import (
    apply_directive, consume_draw_flag, consume_sound_request, decrement_timers,
    execute_decoded, fetch, load_image, peek, read_image,
)
from chipvm.errors import MachineFault
from chipvm.logging import ConsoleLogger, cycle_progress, format_state
from chipvm.stack import addresses
from chipvm.state import EmulatorState, blank_state

ImageSource = Union[bytes, bytearray, memoryview, str, os.PathLike]


class Interpreter:
    """CHIP-8 virtual machine owned by a single host.

    The host feeds key snapshots, calls ``step`` at its chosen instruction
    rate and ``decrement_timers`` at 60 Hz, then reads the display buffer and
    the sound and draw requests. A fault halts the machine: the state stays
    as it was before the faulting instruction and every further ``step``
    raises the same fault until ``reset`` or ``load_image``.
    """

    def __init__(
        self,
        seed: int = 0,
        rng: Optional[jax.Array] = None,
        stack_size: int = STACK_SIZE,
        log_level: str = "WARNING",
        trace: bool = False,
        logger: Optional[ConsoleLogger] = None,
    ):
        """Create a zeroed machine with the program counter at 0x200.

        Args:
            seed: Seed for the random opcode when no rng key is given
            rng: Explicit JAX PRNG key for the random opcode
            stack_size: Maximum call depth before StackOverflow
            log_level: Level for the default console logger
            trace: Log every executed instruction at DEBUG level
            logger: Logger to use instead of the default console logger
        """
        self.rng = rng if rng is not None else jax.random.PRNGKey(seed)
        self.stack_size = stack_size
        self.trace = trace
        self.logger = logger or ConsoleLogger(log_level=log_level)

        self.image: Optional[bytes] = None
        self.cycles = 0
        self.fault: Optional[MachineFault] = None
        self.state: EmulatorState = blank_state(self.rng, stack_size)

    def load_image(self, image: ImageSource) -> None:
        """Load a program image from bytes or a file path into a fresh machine.

        Raises:
            ImageLoadError: If the file cannot be read
            ImageTooLarge: If the image does not fit in memory
        """
        if isinstance(image, (str, os.PathLike)):
            data = read_image(image)
            source = os.fspath(image)
        else:
            data = bytes(image)
            source = "<bytes>"

        state = load_image(blank_state(self.rng, self.stack_size), data)
        self.image = data
        self.state = state
        self.cycles = 0
        self.fault = None
        self.logger.info(f"Loaded {len(data)}-byte image from {source}")

    def reset(self) -> None:
        """Restart from a fresh state with the last loaded image."""
        if self.image is None:
            self.state = blank_state(self.rng, self.stack_size)
        else:
            self.state = load_image(blank_state(self.rng, self.stack_size), self.image)
        self.cycles = 0
        self.fault = None
        self.logger.info("Interpreter reset")

    @property
    def halted(self) -> bool:
        return self.fault is not None

    def step(self) -> None:
        """Execute exactly one instruction cycle.

        Raises:
            MachineFault: On stack underflow/overflow, unknown opcodes or
                out-of-range memory access; the interpreter stays halted.
        """
        if self.fault is not None:
            raise self.fault

        try:
            pc = int(self.state.pc)
            instruction = decode(fetch(self.state), pc)
            if self.trace and self.logger.is_enabled_for("DEBUG"):
                self.logger.debug(f"0x{pc:03X}: {instruction.raw:04X}  {format_instruction(instruction)}")
            state, directive = execute_decoded(self.state, instruction)
        except MachineFault as fault:
            self.fault = fault
            self.logger.error(f"Halted: {fault}")
            for line in format_state(self.state):
                self.logger.error(f"  {line}")
            raise

        self.state = apply_directive(state, directive)
        self.cycles += 1
        if directive.kind == DirectiveKind.BLOCK and self.trace:
            self.logger.debug(f"Waiting for key at 0x{pc:03X}")

    def run(self, cycles: int, progress: bool = False) -> None:
        """Execute a number of cycles back to back, for headless tooling."""
        bar = cycle_progress(cycles) if progress else None
        try:
            for _ in range(cycles):
                self.step()
                if bar is not None:
                    bar.update(1)
        finally:
            if bar is not None:
                bar.close()

    def decrement_timers(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick."""
        self.state = decrement_timers(self.state)

    def consume_sound_request(self) -> bool:
        """True once for the tick on which the sound timer ran out."""
        self.state, requested = consume_sound_request(self.state)
        return requested

    def consume_draw_flag(self) -> bool:
        """True once after each change to the display buffer."""
        self.state, changed = consume_draw_flag(self.state)
        return changed

    def set_keys(self, keys: Sequence[bool]) -> None:
        """Replace the whole keypad with a 16-entry pressed/released snapshot."""
        keypad = jnp.asarray(keys, dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self.state = self.state.replace(keypad=keypad)

    def press_key(self, key: int) -> None:
        self._set_key(key, True)

    def release_key(self, key: int) -> None:
        self._set_key(key, False)

    def _set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in 0..{NUM_KEYS - 1}, got {key}")
        self.state = self.state.replace(keypad=self.state.keypad.at[key].set(pressed))

    @property
    def display(self) -> np.ndarray:
        """Read-only (32, 64) boolean view of the display buffer."""
        pixels = np.array(self.state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        return pixels

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> list[int]:
        return [int(v) for v in self.state.V]

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def stack(self) -> list[int]:
        return addresses(self.state.stack)

    def read_memory(self, address: int, length: int = 1) -> bytes:
        return peek(self.state, address, length)
