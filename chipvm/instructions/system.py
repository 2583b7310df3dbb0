"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, NEXT, jump
from chipvm.stack import pop


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), draw_flag=True), NEXT


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """00EE - Return from subroutine.

    The stack holds the address of the calling instruction, so execution
    resumes at the one after it.
    """
    stack, address = pop(state.stack, int(state.pc))
    return state.replace(stack=stack), jump(address + 2)
