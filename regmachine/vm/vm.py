"""
regmachine/vm/vm.py

Virtual machine for executing register machine programs.

The instruction pointer is aliased to an ordinary register. Before each
instruction the pc is written into that register; afterwards the register is
read back and the next pc is its value plus one. Any ALU write to the bound
register therefore acts as a jump.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from regmachine.ir.ops import Address, Instruction, OpCode, Program, RegID
from regmachine.vm.alu import apply, operand_value
from regmachine.vm.memory import RegisterBank
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable, toggle

logger = logging.getLogger(__name__)

Registers = Union[RegisterBank, Iterable[int]]


@dataclass(frozen=True)
class MachineSnapshot:
    """
    Immutable capture of the full machine state.

    Two snapshots are equal iff program, registers and pc all match.

    Attributes:
        program: Instructions at capture time
        registers: Register values at capture time
        pc: Program counter at capture time
    """
    program: Tuple[Instruction, ...]
    registers: Tuple[int, ...]
    pc: Address


class VirtualMachine:
    """
    Register machine with an instruction pointer bound to one register.

    The VM maintains:
    - The program, which TGL may rewrite in place
    - The register file
    - The pc, synchronized with the bound register around every step
    - Output events emitted by OUT or by writes to a watched register
    """

    def __init__(
        self,
        program: Program,
        registers: Registers,
        *,
        ip_register: Optional[RegID] = None,
        toggle_table: ToggleTable = DEFAULT_TOGGLE_TABLE,
        output_register: Optional[RegID] = None,
        pc: Address = 0,
    ):
        if not isinstance(registers, RegisterBank):
            registers = RegisterBank.from_values(registers)
        if ip_register is not None and not 0 <= ip_register < len(registers):
            raise ValueError(
                f"Instruction pointer register {ip_register} outside {len(registers)}-register file"
            )
        program.validate(len(registers))
        self.program = program
        self.regs = registers
        self.ip_register = ip_register
        self.toggle_table = toggle_table
        self.output_register = output_register
        self.pc = pc
        self.steps = 0
        self.outputs: List[int] = []

    @property
    def halted(self) -> bool:
        """True once the pc has left the program."""
        return not self.program.contains(self.pc)

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(self.program.freeze(), self.regs.snapshot(), self.pc)

    def fetch(self) -> Instruction:
        """Publish the pc to the bound register and return the current instruction."""
        if self.ip_register is not None:
            self.regs[self.ip_register] = self.pc
        return self.program[self.pc]

    def execute(self, ins: Instruction) -> None:
        """Execute one instruction at the current pc without advancing."""
        if ins.op == OpCode.TGL:
            target = self.pc + operand_value(self.regs, ins.op.signature.a, ins.a)
            if toggle(self.program, target, self.toggle_table):
                logger.debug("pc=%d toggled %d to %s", self.pc, target, self.program[target])
            else:
                logger.debug("pc=%d toggle target %d outside program", self.pc, target)
        elif ins.op == OpCode.OUT:
            self._emit(operand_value(self.regs, ins.op.signature.a, ins.a))
        else:
            apply(self.regs, ins.op, ins.a, ins.b, ins.c)
            if ins.c == self.output_register:
                self._emit(self.regs[ins.c])

    def advance(self) -> None:
        """Read the bound register back and move to the next instruction."""
        if self.ip_register is not None:
            self.pc = self.regs[self.ip_register] + 1
        else:
            self.pc += 1
        self.steps += 1

    def step(self) -> Instruction:
        """Fetch, execute and advance; returns the executed instruction."""
        ins = self.fetch()
        self.execute(ins)
        self.advance()
        return ins

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Run until the pc leaves the program.

        Args:
            max_steps: Optional budget; the run stops early once reached

        Returns:
            Number of instructions executed by this call
        """
        start = self.steps
        while not self.halted:
            if max_steps is not None and self.steps - start >= max_steps:
                logger.info("Step budget of %d reached at pc=%d", max_steps, self.pc)
                break
            self.step()
        return self.steps - start

    def _emit(self, value: int) -> None:
        logger.debug("pc=%d output %d", self.pc, value)
        self.outputs.append(value)
