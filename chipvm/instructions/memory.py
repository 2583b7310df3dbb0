"""CHIP-8 memory and register operations."""

from typing import Optional

import jax
import jax.numpy as jnp
from chipvm.constants import MEMORY_SIZE
from chipvm.errors import MemoryAccessError
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, NEXT


def check_address_range(start: int, length: int, pc: Optional[int] = None) -> None:
    """Raise MemoryAccessError unless [start, start + length) lies in memory."""
    if length == 0:
        return
    if start < 0 or start >= MEMORY_SIZE:
        raise MemoryAccessError(start, pc)
    if start + length > MEMORY_SIZE:
        raise MemoryAccessError(MEMORY_SIZE, pc)


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.nn)), NEXT


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """7XNN - Add NN to VX, wrapping, VF untouched."""
    value = (int(state.V[instruction.x]) + instruction.nn) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(value)), NEXT


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)), NEXT


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))
    return state.replace(V=state.V.at[instruction.x].set(random_value & instruction.nn), rng=key), NEXT
