"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from chipvm.constants import FLAG_REGISTER
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction, Op
from chipvm.directive import Directive, NEXT


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, flag is 1 when there is no borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, flag is 1 when there is no borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1.

    The flag takes the least significant bit, not the bit shifted out.
    """
    return (vx << 1) & 0xFF, vx & 1


ALU_OPERATIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


# Shifts act on VX in place after the flag write, so 8FY6 and 8FYE shift the flag
_IN_PLACE_SHIFTS = (Op.SHR, Op.SHL)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> tuple[EmulatorState, Directive]:
    """8XYN - ALU operations dispatcher.

    VF is written before the result, so with VF as destination it ends up
    holding the result rather than the flag.
    """
    operation = ALU_OPERATIONS[instruction.op]
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    result, vf = operation(vx, vy)

    new_V = state.V
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf)
        if instruction.op in _IN_PLACE_SHIFTS:
            result, _ = operation(int(new_V[instruction.x]), vy)
    new_V = new_V.at[instruction.x].set(result)
    return state.replace(V=new_V), NEXT
