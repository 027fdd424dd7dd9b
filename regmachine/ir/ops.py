"""
regmachine/ir/ops.py

Instruction set for the register machine.

Operations (rC = destination register, V(x) = register or literal per opcode):
- ADDR/ADDI, MULR/MULI, BANR/BANI, BORR/BORI, DIVR/DIVI: rC = V(A) op V(B)
- SETR/SETI: rC = V(A), B ignored
- GTIR/GTRI/GTRR: rC = 1 if V(A) > V(B) else 0
- EQIR/EQRI/EQRR: rC = 1 if V(A) == V(B) else 0
- TGL: rewrite the opcode of the instruction at pc + rA
- OUT: emit rA as an output event
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Tuple

from regmachine.ir.schema import CONTROL, I_, IR, R_, RI, RR, OperandKind, Signature

# Type aliases
RegID = int
Address = int


class OpCode(Enum):
    """Register machine operation codes, valued by mnemonic."""
    ADDR = "addr"
    ADDI = "addi"
    MULR = "mulr"
    MULI = "muli"
    BANR = "banr"
    BANI = "bani"
    BORR = "borr"
    BORI = "bori"
    SETR = "setr"
    SETI = "seti"
    GTIR = "gtir"
    GTRI = "gtri"
    GTRR = "gtrr"
    EQIR = "eqir"
    EQRI = "eqri"
    EQRR = "eqrr"
    # Bonus operations for hand-optimized listings
    DIVR = "divr"
    DIVI = "divi"
    # Control operations, executed by the VM rather than the ALU
    TGL = "tgl"
    OUT = "out"

    @property
    def signature(self) -> Signature:
        return SIGNATURES[self]

    @property
    def is_alu(self) -> bool:
        return self.signature.writes

    @classmethod
    def from_mnemonic(cls, mnemonic: str) -> "OpCode":
        try:
            return cls(mnemonic.lower())
        except ValueError:
            raise ValueError(f"Unknown opcode: {mnemonic!r}") from None


SIGNATURES: Dict[OpCode, Signature] = {
    OpCode.ADDR: RR, OpCode.ADDI: RI,
    OpCode.MULR: RR, OpCode.MULI: RI,
    OpCode.BANR: RR, OpCode.BANI: RI,
    OpCode.BORR: RR, OpCode.BORI: RI,
    OpCode.SETR: R_, OpCode.SETI: I_,
    OpCode.GTIR: IR, OpCode.GTRI: RI, OpCode.GTRR: RR,
    OpCode.EQIR: IR, OpCode.EQRI: RI, OpCode.EQRR: RR,
    OpCode.DIVR: RR, OpCode.DIVI: RI,
    OpCode.TGL: CONTROL,
    OpCode.OUT: CONTROL,
}

# The sixteen operations every listing may use
BASE_OPCODES: Tuple[OpCode, ...] = tuple(
    op for op in OpCode if op not in (OpCode.DIVR, OpCode.DIVI, OpCode.TGL, OpCode.OUT)
)


@dataclass(frozen=True)
class Instruction:
    """
    A single machine instruction.

    Attributes:
        op: Operation code
        a: First source operand
        b: Second source operand
        c: Destination register (unused by control operations)
    """
    op: OpCode
    a: int = 0
    b: int = 0
    c: int = 0

    def __str__(self) -> str:
        return self.encode()

    def encode(self) -> str:
        """Render as a listing line, e.g. ``addi 0 1 0``."""
        return f"{self.op.value} {self.a} {self.b} {self.c}"

    @classmethod
    def decode(cls, line: str) -> "Instruction":
        """
        Parse a listing line: a mnemonic followed by one to three integers.

        Missing operands default to 0.
        """
        tokens = line.split()
        if not tokens:
            raise ValueError("Empty instruction")
        if len(tokens) > 4:
            raise ValueError(f"Too many operands in {line.strip()!r}")
        op = OpCode.from_mnemonic(tokens[0])
        try:
            operands = [int(t) for t in tokens[1:]]
        except ValueError:
            raise ValueError(f"Non-integer operand in {line.strip()!r}") from None
        if op.signature.a is not OperandKind.UNUSED and not operands:
            raise ValueError(f"{op.value} requires an A operand")
        operands += [0] * (3 - len(operands))
        return cls(op, *operands)

    def as_tuple(self) -> Tuple[OpCode, int, int, int]:
        return (self.op, self.a, self.b, self.c)

    def with_op(self, op: OpCode) -> "Instruction":
        """Same operands, different opcode."""
        return replace(self, op=op)

    def writes_register(self, reg: RegID) -> bool:
        return self.op.is_alu and self.c == reg


@dataclass
class Program:
    """
    An ordered, address-indexed sequence of instructions.

    The length is fixed once built; only the instruction stored at an address
    may be replaced (by toggling).

    Attributes:
        instructions: Instructions in address order
    """
    instructions: List[Instruction] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.instructions = list(self.instructions)

    @classmethod
    def of(cls, instructions: Iterable[Instruction]) -> "Program":
        return cls(list(instructions))

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __getitem__(self, address: Address) -> Instruction:
        return self.instructions[address]

    def __setitem__(self, address: Address, ins: Instruction) -> None:
        if not self.contains(address):
            raise IndexError(f"Address {address} outside program of length {len(self)}")
        self.instructions[address] = ins

    def contains(self, address: Address) -> bool:
        """True if address names an instruction of this program."""
        return 0 <= address < len(self.instructions)

    def copy(self) -> "Program":
        return Program(list(self.instructions))

    def freeze(self) -> Tuple[Instruction, ...]:
        """Immutable, hashable view of the current instructions."""
        return tuple(self.instructions)

    def validate(self, register_count: int) -> None:
        """
        Check every register reference against the register file width.

        Raises:
            ValueError: If an instruction names a register outside
                ``[0, register_count)``
        """
        for addr, ins in enumerate(self.instructions):
            sig = ins.op.signature
            regs = list(sig.register_operands(ins.a, ins.b))
            if sig.writes:
                regs.append(ins.c)
            for reg in regs:
                if not 0 <= reg < register_count:
                    raise ValueError(
                        f"Instruction {addr} ({ins}) references register {reg}, "
                        f"register file has {register_count}"
                    )
