"""
regmachine/vm/toggle.py

Self-modification support: the TGL instruction rewrites the opcode of another
instruction according to a pairing table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Tuple

from regmachine.ir.ops import Address, OpCode, Program


@dataclass(frozen=True)
class ToggleTable:
    """
    Opcode bijection applied by TGL.

    The table must be an involution: toggling twice restores the original
    opcode. Opcodes absent from the table are left unchanged.

    Attributes:
        pairs: Map from opcode to its toggled sibling
    """
    pairs: Mapping[OpCode, OpCode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for src, dst in self.pairs.items():
            back = self.pairs.get(dst, dst)
            if back is not src:
                raise ValueError(
                    f"Toggle table is not an involution: {src.value} -> {dst.value} -> {back.value}"
                )

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[OpCode, OpCode]]) -> "ToggleTable":
        """Build a symmetric table from unordered opcode pairs."""
        mapping: Dict[OpCode, OpCode] = {}
        for x, y in pairs:
            if x in mapping or y in mapping:
                raise ValueError(f"Opcode paired twice: {x.value}/{y.value}")
            mapping[x] = y
            mapping[y] = x
        return cls(mapping)

    def __getitem__(self, op: OpCode) -> OpCode:
        return self.pairs.get(op, op)


DEFAULT_TOGGLE_TABLE = ToggleTable.from_pairs([
    (OpCode.ADDR, OpCode.ADDI),
    (OpCode.MULR, OpCode.MULI),
    (OpCode.BANR, OpCode.BANI),
    (OpCode.BORR, OpCode.BORI),
    (OpCode.DIVR, OpCode.DIVI),
    (OpCode.SETR, OpCode.SETI),
    (OpCode.GTIR, OpCode.GTRI),
    (OpCode.EQIR, OpCode.EQRI),
    (OpCode.GTRR, OpCode.EQRR),
    (OpCode.TGL, OpCode.OUT),
])


def toggle(program: Program, target: Address, table: ToggleTable = DEFAULT_TOGGLE_TABLE) -> bool:
    """
    Toggle the opcode of the instruction at target.

    Operands are left untouched. A target outside the program is ignored.

    Returns:
        True if an instruction was rewritten
    """
    if not program.contains(target):
        return False
    ins = program[target]
    program[target] = ins.with_op(table[ins.op])
    return True
