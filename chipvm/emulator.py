"""Main CHIP-8 emulator execution engine."""

import os
from typing import Union

import jax.numpy as jnp
from chipvm.state import EmulatorState, load_font
from chipvm.decode import DecodedInstruction, Op, decode
from chipvm.directive import Directive, DirectiveKind
from chipvm.constants import MAX_IMAGE_SIZE, MEMORY_SIZE, PROGRAM_START
from chipvm.errors import ImageLoadError, ImageTooLarge, MemoryAccessError
from chipvm.instructions.system import execute_clear_screen, execute_return
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LD_REG: execute_alu_operation,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_REG: execute_alu_operation,
    Op.SUB: execute_alu_operation,
    Op.SHR: execute_alu_operation,
    Op.SUBN: execute_alu_operation,
    Op.SHL: execute_alu_operation,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
}


def execute_decoded(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """Execute an already decoded instruction."""
    return HANDLERS[instruction.op](state, instruction)


def execute(state: EmulatorState, instruction: int) -> tuple[EmulatorState, Directive]:
    """Execute single CHIP-8 instruction.

    The program counter is left untouched; the returned directive says how
    it should move.
    """
    return execute_decoded(state, decode(instruction, int(state.pc)))


def apply_directive(state: EmulatorState, directive: Directive) -> EmulatorState:
    """Move the program counter as the directive requests."""
    if directive.kind == DirectiveKind.BLOCK:
        return state
    if directive.kind == DirectiveKind.JUMP:
        new_pc = directive.address
    elif directive.kind == DirectiveKind.SKIP:
        new_pc = int(state.pc) + 4
    else:
        new_pc = int(state.pc) + 2
    return state.replace(pc=jnp.asarray(new_pc & 0xFFFF, dtype=jnp.uint16))


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> int:
    """Fetch the big-endian instruction at the program counter."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise MemoryAccessError(pc, pc)
    return _pack_u16(int(state.memory[pc]), int(state.memory[pc + 1]))


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch/decode/execute cycle."""
    state, _ = step_with_directive(state)
    return state


def step_with_directive(state: EmulatorState) -> tuple[EmulatorState, Directive]:
    """Run one cycle and also return the directive that was applied."""
    instruction = fetch(state)
    state, directive = execute(state, instruction)
    return apply_directive(state, directive), directive


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Advance both timers by one 60 Hz tick.

    A tick that takes the sound timer from 1 to 0 raises the sound request.
    """
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    sound_request = state.sound_request or sound == 1
    return state.replace(
        delay_timer=jnp.asarray(max(delay - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(sound - 1, 0), dtype=jnp.uint8),
        sound_request=sound_request,
    )


def consume_sound_request(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Return and clear the pending sound request."""
    return state.replace(sound_request=False), bool(state.sound_request)


def consume_draw_flag(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Return and clear the flag set whenever the display changes."""
    return state.replace(draw_flag=False), bool(state.draw_flag)


def load_image(state: EmulatorState, image: Union[bytes, bytearray, memoryview]) -> EmulatorState:
    """Load program data into CHIP-8 memory starting at 0x200 and write the font."""
    image = bytes(image)
    if len(image) > MAX_IMAGE_SIZE:
        raise ImageTooLarge(len(image), MAX_IMAGE_SIZE)
    if image:
        rom_array = jnp.array(list(image), dtype=jnp.uint8)
        state = state.replace(memory=state.memory.at[PROGRAM_START:PROGRAM_START + len(image)].set(rom_array))
    return load_font(state)


def read_image(filename: Union[str, os.PathLike]) -> bytes:
    """Read a program image from disk."""
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as e:
        raise ImageLoadError(f"Could not read image {os.fspath(filename)!r}: {e}") from e


def load_rom(state: EmulatorState, filename: Union[str, os.PathLike]) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_image(state, read_image(filename))


def peek(state: EmulatorState, address: int, length: int = 1) -> bytes:
    """Read a slice of emulated memory for inspection."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessError(address)
    return bytes(int(b) for b in state.memory[address:address + length])
