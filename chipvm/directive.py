"""Program counter update directives returned by instruction handlers."""

import enum

from chex import dataclass


class DirectiveKind(enum.Enum):
    NEXT = "next"
    SKIP = "skip"
    JUMP = "jump"
    BLOCK = "block"


@dataclass(frozen=True)
class Directive:
    """How the program counter moves after one instruction."""
    kind: DirectiveKind
    address: int = 0


NEXT = Directive(kind=DirectiveKind.NEXT)
SKIP = Directive(kind=DirectiveKind.SKIP)
BLOCK = Directive(kind=DirectiveKind.BLOCK)


def jump(address: int) -> Directive:
    """Directive that sets the program counter to address."""
    return Directive(kind=DirectiveKind.JUMP, address=int(address))


def skip_if(condition) -> Directive:
    """SKIP when condition holds, NEXT otherwise."""
    return SKIP if bool(condition) else NEXT
