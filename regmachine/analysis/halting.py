"""
regmachine/analysis/halting.py

Halting-value extraction.

Programs of this family halt only when a gate instruction, an ``eqrr``
comparing some register against the gate register (register 0 by default),
succeeds. Instead of guessing seeds, the analyzer steps the machine itself:
just before a gate fires it records the compared value and forces the
comparison to fail, so execution walks through every value that would have
halted the program until the sequence repeats.

- The first value recorded halts the program after the fewest instructions.
- The last value before the first repeat halts it after the most.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from regmachine.ir.ops import Address, Instruction, OpCode, Program, RegID
from regmachine.vm.memory import RegisterBank
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable
from regmachine.vm.vm import VirtualMachine

logger = logging.getLogger(__name__)


@dataclass
class HaltingValues:
    """
    Values of the gate register that would halt the program.

    Attributes:
        values: Distinct compared values, in the order reached
        repeated: True if the sequence was cut by a repeated value
        steps: Instructions executed while collecting
    """
    values: List[int] = field(default_factory=list)
    repeated: bool = False
    steps: int = 0

    @property
    def first(self) -> Optional[int]:
        """Halting value reached after the fewest instructions."""
        return self.values[0] if self.values else None

    @property
    def last(self) -> Optional[int]:
        """Halting value reached after the most instructions."""
        return self.values[-1] if self.values else None


def gate_operand(ins: Instruction, gate_register: RegID = 0) -> Optional[RegID]:
    """
    Return the register compared against the gate register, if ins is a gate.
    """
    if ins.op != OpCode.EQRR:
        return None
    if ins.b == gate_register:
        return ins.a
    if ins.a == gate_register:
        return ins.b
    return None


def find_gates(program: Program, gate_register: RegID = 0) -> List[Address]:
    """Addresses of every gate instruction in a program."""
    return [addr for addr, ins in enumerate(program) if gate_operand(ins, gate_register) is not None]


def halting_values(
    ip_register: Optional[RegID],
    program: Program,
    registers: Iterable[int],
    *,
    gate_register: RegID = 0,
    first_only: bool = False,
    max_steps: Optional[int] = None,
    toggle_table: ToggleTable = DEFAULT_TOGGLE_TABLE,
) -> HaltingValues:
    """
    Collect gate values until one repeats.

    Args:
        ip_register: Register bound to the instruction pointer
        program: Program to analyze (cloned)
        registers: Initial register values (cloned)
        gate_register: Register the gate compares against
        first_only: Stop after the first gate value
        max_steps: Optional step budget
        toggle_table: Opcode pairing used by TGL

    Returns:
        HaltingValues with the collected sequence
    """
    bank = registers.copy() if isinstance(registers, RegisterBank) else RegisterBank.from_values(registers)
    vm = VirtualMachine(program.copy(), bank, ip_register=ip_register, toggle_table=toggle_table)
    result = HaltingValues()
    seen = set()

    while not vm.halted:
        if max_steps is not None and vm.steps >= max_steps:
            logger.info("Step budget of %d reached with %d values", max_steps, len(result.values))
            break
        ins = vm.fetch()
        compared = gate_operand(ins, gate_register)
        if compared is None:
            vm.execute(ins)
        else:
            value = vm.regs[compared]
            if value in seen:
                result.repeated = True
                break
            seen.add(value)
            result.values.append(value)
            logger.debug("Gate at pc=%d compared %d (step %d)", vm.pc, value, vm.steps)
            if first_only:
                break
            # Force the comparison to fail
            vm.execute(Instruction(OpCode.SETI, 0, 0, ins.c))
        vm.advance()

    result.steps = vm.steps
    logger.info("Collected %d halting values in %d steps", len(result.values), result.steps)
    return result
