"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
)


@dataclass(frozen=True)
class StackState:
    """Fixed-capacity call stack with explicit top pointer."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0

    @property
    def capacity(self) -> int:
        return self.data.shape[0]


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    sound_request: bool = False
    draw_flag: bool = False


def blank_state(rng: jax.Array = None, stack_size: int = STACK_SIZE) -> EmulatorState:
    """Create a zeroed state: empty memory, pc at PROGRAM_START."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    if stack_size < 1:
        raise ValueError(f"stack_size must be positive, got {stack_size}")
    return EmulatorState(rng, stack=StackState(data=jnp.zeros(stack_size, dtype=jnp.uint16)))


def load_font(state: EmulatorState) -> EmulatorState:
    """Write the built-in hexadecimal glyphs at FONT_START."""
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def create_state(rng: jax.Array = None, stack_size: int = STACK_SIZE) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    return load_font(blank_state(rng, stack_size))
