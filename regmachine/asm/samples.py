"""
regmachine/asm/samples.py

Opcode discovery from observed samples.

A sample records the registers before and after one instruction whose opcode
is only known by number::

    Before: [3, 2, 1, 1]
    9 2 1 2
    After:  [3, 2, 2, 1]

Testing every base opcode against each sample narrows each number down to a
set of candidates; elimination then fixes a unique mapping.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

from regmachine.ir.ops import BASE_OPCODES, Instruction, OpCode, Program
from regmachine.vm.alu import apply
from regmachine.vm.memory import RegisterBank

BEFORE_RE = re.compile(r"^Before:\s*\[([-\d,\s]+)\]$")
AFTER_RE = re.compile(r"^After:\s*\[([-\d,\s]+)\]$")
ROW_RE = re.compile(r"^(-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)$")

Row = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Sample:
    """
    One observed instruction.

    Attributes:
        before: Registers before execution
        row: (opcode number, A, B, C)
        after: Registers after execution
    """
    before: Tuple[int, ...]
    row: Row
    after: Tuple[int, ...]

    @property
    def number(self) -> int:
        return self.row[0]


def _ints(group: str) -> Tuple[int, ...]:
    return tuple(int(x) for x in group.split(","))


def parse_samples(text: str) -> Tuple[List[Sample], List[Row]]:
    """
    Parse samples followed by a numeric program.

    Returns:
        (samples, program rows)
    """
    samples: List[Sample] = []
    rows: List[Row] = []
    lines = [line.strip() for line in text.splitlines()]
    i = 0
    while i < len(lines):
        line = lines[i]
        before = BEFORE_RE.match(line)
        if before:
            if i + 2 >= len(lines):
                raise ValueError(f"line {i + 1}: truncated sample")
            row = ROW_RE.match(lines[i + 1])
            after = AFTER_RE.match(lines[i + 2])
            if row is None or after is None:
                raise ValueError(f"line {i + 1}: malformed sample")
            samples.append(Sample(
                before=_ints(before.group(1)),
                row=tuple(int(x) for x in row.groups()),
                after=_ints(after.group(1)),
            ))
            i += 3
            continue
        row = ROW_RE.match(line)
        if row:
            rows.append(tuple(int(x) for x in row.groups()))
        elif line:
            raise ValueError(f"line {i + 1}: unexpected {line!r}")
        i += 1
    return samples, rows


def candidate_opcodes(sample: Sample) -> Set[OpCode]:
    """Base opcodes that turn sample.before into sample.after."""
    _, a, b, c = sample.row
    out = set()
    for op in BASE_OPCODES:
        registers = RegisterBank.from_values(sample.before)
        try:
            apply(registers, op, a, b, c)
        except (IndexError, OverflowError):
            continue
        if registers == list(sample.after):
            out.add(op)
    return out


def count_ambiguous(samples: Iterable[Sample], threshold: int = 3) -> int:
    """Number of samples consistent with at least threshold opcodes."""
    return sum(1 for s in samples if len(candidate_opcodes(s)) >= threshold)


def resolve_opcode_numbers(samples: Iterable[Sample]) -> Dict[int, OpCode]:
    """
    Fix the number -> opcode mapping by elimination.

    Raises:
        ValueError: If the samples contradict each other or leave ambiguity
    """
    possible: Dict[int, Set[OpCode]] = {}
    for sample in samples:
        ops = candidate_opcodes(sample)
        possible[sample.number] = possible.get(sample.number, set(BASE_OPCODES)) & ops

    mapping: Dict[int, OpCode] = {}
    while possible:
        solved = {n: next(iter(ops)) for n, ops in possible.items() if len(ops) == 1}
        if not solved:
            if any(not ops for ops in possible.values()):
                raise ValueError("Samples are inconsistent: an opcode number has no candidates")
            raise ValueError(f"Cannot resolve opcode numbers {sorted(possible)}")
        if len(set(solved.values())) < len(solved):
            raise ValueError("Samples are inconsistent: two numbers resolve to one opcode")
        for n, op in solved.items():
            mapping[n] = op
            del possible[n]
        for ops in possible.values():
            ops.difference_update(solved.values())
    return mapping


def decode_program(rows: Iterable[Row], mapping: Dict[int, OpCode]) -> Program:
    """Translate numeric rows into a Program."""
    instructions = []
    for number, a, b, c in rows:
        if number not in mapping:
            raise ValueError(f"Opcode number {number} not resolved")
        instructions.append(Instruction(mapping[number], a, b, c))
    return Program(instructions)
