"""CHIP-8 control flow instructions."""

from chipvm.constants import NUM_KEYS
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.directive import Directive, jump, skip_if
from chipvm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """1NNN - Jump to address NNN."""
    return state, jump(instruction.nnn)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """2NNN - Call subroutine at NNN."""
    pc = int(state.pc)
    state = state.replace(stack=push(state.stack, pc, pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
        return state, skip_if(condition_fn(state, instruction))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """BNNN - Jump to address NNN + V0."""
    return state, jump(instruction.nnn + int(state.V[0]))


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> bool:
    key_index = int(state.V[instruction.x]) % NUM_KEYS
    return bool(state.keypad[key_index])


execute_skip_if_key = make_skip_instruction(_key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not _key_pressed(state, inst)
)
