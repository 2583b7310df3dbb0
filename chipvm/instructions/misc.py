"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.constants import FONT_START, FONT_CHAR_SIZE, INDEX_MASK
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, NEXT, BLOCK
from chipvm.instructions.memory import check_address_range


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer)), NEXT


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x]), NEXT


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x]), NEXT


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX1E - Add VX to I register, wrapping, VF untouched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & INDEX_MASK
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16)), NEXT


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX0A - Wait for key press (blocking)."""
    if not bool(jnp.any(state.keypad)):
        return state, BLOCK
    # argmax returns the first maximum, i.e. the lowest pressed key
    pressed_key = int(jnp.argmax(state.keypad.astype(jnp.int32)))
    return state.replace(V=state.V.at[instruction.x].set(pressed_key)), NEXT


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    font_address = FONT_START + digit * FONT_CHAR_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16)), NEXT


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    index = int(state.I)
    check_address_range(index, 3, int(state.pc))

    value = int(state.V[instruction.x])
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[index:index + 3].set(digits)), NEXT


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX55 - Store V0 through VX in memory starting at I."""
    index = int(state.I)
    count = instruction.x + 1
    check_address_range(index, count, int(state.pc))
    new_memory = state.memory.at[index:index + count].set(state.V[:count])
    return state.replace(memory=new_memory), NEXT


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """FX65 - Load V0 through VX from memory starting at I."""
    index = int(state.I)
    count = instruction.x + 1
    check_address_range(index, count, int(state.pc))
    new_V = state.V.at[:count].set(state.memory[index:index + count])
    return state.replace(V=new_V), NEXT
