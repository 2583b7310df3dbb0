"""CHIP-8 virtual machine core."""

from chipvm.state import EmulatorState, StackState, create_state, blank_state
from chipvm.emulator import (
    execute, execute_decoded, apply_directive, fetch, step, step_with_directive,
    load_image, load_rom, decrement_timers, consume_sound_request, consume_draw_flag,
)
from chipvm.decode import DecodedInstruction, Op, decode, format_instruction
from chipvm.directive import Directive, DirectiveKind
from chipvm.constants import *
from chipvm.errors import (
    Chip8Error, LoadError, ImageLoadError, ImageTooLarge, MachineFault,
    StackUnderflow, StackOverflow, UnknownOpcode, MemoryAccessError,
)
from chipvm.interpreter import Interpreter
from chipvm.rendering import display_to_text

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "blank_state",
    "fetch",
    "execute",
    "execute_decoded",
    "apply_directive",
    "step",
    "step_with_directive",
    "load_image",
    "load_rom",
    "decrement_timers",
    "consume_sound_request",
    "consume_draw_flag",
    "DecodedInstruction",
    "Op",
    "decode",
    "format_instruction",
    "Directive",
    "DirectiveKind",
    "Chip8Error",
    "LoadError",
    "ImageLoadError",
    "ImageTooLarge",
    "MachineFault",
    "StackUnderflow",
    "StackOverflow",
    "UnknownOpcode",
    "MemoryAccessError",
    "Interpreter",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_text",
]
