"""Exceptions raised by the CHIP-8 core."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by the core."""


class LoadError(Chip8Error):
    """Program image could not be loaded."""


class ImageLoadError(LoadError):
    """Image source could not be read."""


class ImageTooLarge(LoadError):
    """Image does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Image is {size} bytes, at most {limit} bytes fit in memory")


class MachineFault(Chip8Error):
    """Unrecoverable fault raised while executing an instruction."""

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"{message} (pc=0x{pc:03X})"
        super().__init__(message)


class StackUnderflow(MachineFault):
    """Return executed with an empty call stack."""

    def __init__(self, pc: Optional[int] = None):
        super().__init__("Return with empty call stack", pc)


class StackOverflow(MachineFault):
    """Call executed with a full call stack."""

    def __init__(self, capacity: int, pc: Optional[int] = None):
        self.capacity = capacity
        super().__init__(f"Call stack exceeded {capacity} entries", pc)


class UnknownOpcode(MachineFault):
    """Instruction does not decode to any known operation."""

    def __init__(self, instruction: int, pc: Optional[int] = None):
        self.instruction = instruction
        super().__init__(f"Unknown opcode 0x{instruction:04X}", pc)


class MemoryAccessError(MachineFault):
    """Instruction touched an address outside emulated memory."""

    def __init__(self, address: int, pc: Optional[int] = None):
        self.address = address
        super().__init__(f"Memory access out of range at 0x{address:04X}", pc)
