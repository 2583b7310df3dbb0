"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.constants import FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, NEXT
from chipvm.instructions.memory import check_address_range

# Bit masks for the eight columns of a sprite row, leftmost pixel first
_COLUMN_BITS = jnp.arange(7, -1, -1, dtype=jnp.uint8)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Every pixel coordinate wraps around the screen edges.
    """
    index = int(state.I)
    height = instruction.n
    check_address_range(index, height, int(state.pc))

    sprite_x = int(state.V[instruction.x])
    sprite_y = int(state.V[instruction.y])
    rows = (sprite_y + jnp.arange(height)) % SCREEN_HEIGHT
    cols = (sprite_x + jnp.arange(8)) % SCREEN_WIDTH

    sprite_bytes = state.memory[index:index + height]
    sprite = ((sprite_bytes[:, None] >> _COLUMN_BITS[None, :]) & 1).astype(jnp.bool_)

    region = state.display[rows[:, None], cols[None, :]]
    collision = bool(jnp.any(region & sprite))
    display = state.display.at[rows[:, None], cols[None, :]].set(region ^ sprite)

    return state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
        draw_flag=True,
    ), NEXT
