"""
regmachine: a small register-machine interpreter

A fixed instruction set running over a fixed-width register file, with the
instruction pointer bound to one of the registers, plus analyses built on
stepping the machine.

Key components:
- ir: Opcodes, instructions, and programs
- vm: Register file, ALU, toggling, and the execution loop
- runtime: Execution entry points
- analysis: Cycle detection, halting values, clock signals, control flow
- asm: Listing parser and opcode discovery from samples
- api: Helpers working directly on listing text
"""

__version__ = "1.0.0"
__author__ = "regmachine developers"

from regmachine.ir.ops import OpCode, Instruction, Program
from regmachine.vm.memory import RegisterBank
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable
from regmachine.vm.vm import MachineSnapshot, VirtualMachine
from regmachine.runtime.schedule import execute
from regmachine.analysis.cycles import CycleResult, RunOutcome, run_with_cycle_detection
from regmachine.analysis.halting import HaltingValues, halting_values
from regmachine.asm.listing import Listing, parse_listing, format_listing

__all__ = [
    # IR
    "OpCode",
    "Instruction",
    "Program",
    # VM
    "RegisterBank",
    "DEFAULT_TOGGLE_TABLE",
    "ToggleTable",
    "MachineSnapshot",
    "VirtualMachine",
    "execute",
    # Analysis
    "CycleResult",
    "RunOutcome",
    "run_with_cycle_detection",
    "HaltingValues",
    "halting_values",
    # Listings
    "Listing",
    "parse_listing",
    "format_listing",
]
