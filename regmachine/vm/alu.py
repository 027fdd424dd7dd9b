"""
regmachine/vm/alu.py

Arithmetic/logic unit: executes one ALU opcode against a register file.

The ALU treats every register alike; the register bound to the instruction
pointer gets no special handling here.
"""

from __future__ import annotations

import operator
from typing import Callable, Dict

from regmachine.ir.ops import Instruction, OpCode
from regmachine.ir.schema import OperandKind
from regmachine.vm.memory import RegisterBank


def _div(x: int, y: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(x) // abs(y)
    return q if (x >= 0) == (y >= 0) else -q


def _gt(x: int, y: int) -> int:
    return 1 if x > y else 0


def _eq(x: int, y: int) -> int:
    return 1 if x == y else 0


def _first(x: int, _y: int) -> int:
    return x


# Combining function per ALU opcode; control opcodes are absent on purpose
KERNELS: Dict[OpCode, Callable[[int, int], int]] = {
    OpCode.ADDR: operator.add, OpCode.ADDI: operator.add,
    OpCode.MULR: operator.mul, OpCode.MULI: operator.mul,
    OpCode.BANR: operator.and_, OpCode.BANI: operator.and_,
    OpCode.BORR: operator.or_, OpCode.BORI: operator.or_,
    OpCode.DIVR: _div, OpCode.DIVI: _div,
    OpCode.SETR: _first, OpCode.SETI: _first,
    OpCode.GTIR: _gt, OpCode.GTRI: _gt, OpCode.GTRR: _gt,
    OpCode.EQIR: _eq, OpCode.EQRI: _eq, OpCode.EQRR: _eq,
}


def operand_value(registers: RegisterBank, kind: OperandKind, x: int) -> int:
    """V(x): the register at index x, the literal x, or 0 when unused."""
    if kind is OperandKind.REGISTER:
        return registers[x]
    if kind is OperandKind.IMMEDIATE:
        return x
    return 0


def apply(registers: RegisterBank, op: OpCode, a: int, b: int, c: int) -> None:
    """
    Execute one ALU operation, writing only register c.

    Args:
        registers: Register file, mutated in place
        op: ALU opcode
        a, b: Source operands, read per the opcode's signature
        c: Destination register

    Raises:
        ValueError: If op is a control opcode
        IndexError: If a register index is outside the register file
    """
    kernel = KERNELS.get(op)
    if kernel is None:
        raise ValueError(f"{op.name} is not an ALU operation")
    sig = op.signature
    x = operand_value(registers, sig.a, a)
    y = operand_value(registers, sig.b, b)
    registers[c] = kernel(x, y)


def apply_instruction(registers: RegisterBank, ins: Instruction) -> None:
    apply(registers, ins.op, ins.a, ins.b, ins.c)
