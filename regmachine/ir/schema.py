"""
regmachine/ir/schema.py

Operand addressing schema for the instruction set.

Key types:
- OperandKind: REGISTER (read the register at this index), IMMEDIATE (use the
  literal), or UNUSED (ignored by the operation)
- Signature: how an opcode reads A and B, and whether C is a destination
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OperandKind(Enum):
    """How a source operand is interpreted."""
    REGISTER = 1    # value of the register at this index
    IMMEDIATE = 2   # the literal itself
    UNUSED = 3      # ignored


@dataclass(frozen=True)
class Signature:
    """
    Addressing signature of an opcode.

    The opcode alone determines addressing; there is no separate mode bit.

    Attributes:
        a: Kind of operand A
        b: Kind of operand B
        writes: True if C names a destination register (ALU operations)
    """
    a: OperandKind
    b: OperandKind
    writes: bool = True

    def register_operands(self, a: int, b: int) -> tuple:
        """Return the operands of (a, b) that are read as register indices."""
        regs = []
        if self.a is OperandKind.REGISTER:
            regs.append(a)
        if self.b is OperandKind.REGISTER:
            regs.append(b)
        return tuple(regs)


RR = Signature(OperandKind.REGISTER, OperandKind.REGISTER)
RI = Signature(OperandKind.REGISTER, OperandKind.IMMEDIATE)
IR = Signature(OperandKind.IMMEDIATE, OperandKind.REGISTER)
R_ = Signature(OperandKind.REGISTER, OperandKind.UNUSED)
I_ = Signature(OperandKind.IMMEDIATE, OperandKind.UNUSED)
CONTROL = Signature(OperandKind.REGISTER, OperandKind.UNUSED, writes=False)
