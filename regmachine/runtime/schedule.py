"""
regmachine/runtime/schedule.py

Program execution entry points.
"""

from __future__ import annotations

from typing import MutableSequence, Optional, Union

from regmachine.ir.ops import Address, Program, RegID
from regmachine.vm.memory import RegisterBank
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable
from regmachine.vm.vm import VirtualMachine


def execute(
    ip_register: Optional[RegID],
    program: Program,
    registers: Union[RegisterBank, MutableSequence[int]],
    *,
    pc: Address = 0,
    toggle_table: ToggleTable = DEFAULT_TOGGLE_TABLE,
) -> None:
    """
    Run a program to natural halt.

    The register file is updated in place, and TGL instructions rewrite the
    program in place. Starting with pc outside the program does nothing.

    Args:
        ip_register: Register bound to the instruction pointer, or None
        program: Program to execute
        registers: RegisterBank or mutable list of register values
        pc: Starting address
        toggle_table: Opcode pairing used by TGL
    """
    if not program.contains(pc):
        return
    bank = registers if isinstance(registers, RegisterBank) else RegisterBank.from_values(registers)
    vm = VirtualMachine(program, bank, ip_register=ip_register, toggle_table=toggle_table, pc=pc)
    vm.run()
    if bank is not registers:
        registers[:] = bank.tolist()
