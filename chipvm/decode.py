"""CHIP-8 instruction decoding."""

import enum
from typing import Optional

from chex import dataclass

from chipvm.errors import UnknownOpcode


class Op(enum.Enum):
    """Every operation the core understands."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_IMM = "3XNN"
    SNE_IMM = "4XNN"
    SE_REG = "5XY0"
    LD_IMM = "6XNN"
    ADD_IMM = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    LD_B = "FX33"
    LD_MEM_VX = "FX55"
    LD_VX_MEM = "FX65"


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    op: Op
    raw: int
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Top nibbles that map to exactly one operation
_SINGLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x5: Op.SE_REG,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM_OPS = {0xE0: Op.CLS, 0xEE: Op.RET}

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


def _lookup_op(instruction: int) -> Optional[Op]:
    top = (instruction & 0xF000) >> 12
    if top in _SINGLE_OPS:
        return _SINGLE_OPS[top]
    if top == 0x0:
        return _SYSTEM_OPS.get(instruction & 0x00FF)
    if top == 0x8:
        return _ALU_OPS.get(instruction & 0x000F)
    if top == 0xE:
        return _KEY_OPS.get(instruction & 0x00FF)
    return _MISC_OPS.get(instruction & 0x00FF)


def decode(instruction: int, pc: Optional[int] = None) -> DecodedInstruction:
    """Decode 16-bit instruction into an operation tag and its operands.

    Args:
        instruction: Raw big-endian instruction word
        pc: Address the instruction was fetched from, used in error reports

    Raises:
        UnknownOpcode: If the word matches no known operation
    """
    instruction = int(instruction) & 0xFFFF
    op = _lookup_op(instruction)
    if op is None:
        raise UnknownOpcode(instruction, pc)
    return DecodedInstruction(
        op=op,
        raw=instruction,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )


_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_IMM: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_IMM: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_IMM: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I: "ADD I, V{x:X}",
    Op.LD_F: "LD F, V{x:X}",
    Op.LD_B: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
}


def format_instruction(instruction: DecodedInstruction) -> str:
    """Render a decoded instruction as assembler-style text."""
    return _MNEMONICS[instruction.op].format(
        x=instruction.x, y=instruction.y, n=instruction.n, nn=instruction.nn, nnn=instruction.nnn
    )
