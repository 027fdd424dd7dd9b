"""
VM module: Register file, ALU, toggling, and the execution loop.
"""

from regmachine.vm.memory import RegisterBank
from regmachine.vm.alu import apply, apply_instruction, operand_value
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable, toggle
from regmachine.vm.vm import MachineSnapshot, VirtualMachine

__all__ = [
    "RegisterBank",
    "apply",
    "apply_instruction",
    "operand_value",
    "DEFAULT_TOGGLE_TABLE",
    "ToggleTable",
    "toggle",
    "MachineSnapshot",
    "VirtualMachine",
]
