"""
IR module: Opcodes, instructions, and programs.
"""

from regmachine.ir.schema import OperandKind, Signature
from regmachine.ir.ops import (
    BASE_OPCODES,
    OpCode,
    Instruction,
    Program,
    RegID,
    Address,
)

__all__ = [
    "OperandKind",
    "Signature",
    "BASE_OPCODES",
    "OpCode",
    "Instruction",
    "Program",
    "RegID",
    "Address",
]
