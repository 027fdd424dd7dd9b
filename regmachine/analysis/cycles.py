"""
regmachine/analysis/cycles.py

State-cycle detection.

The machine is stepped while every full snapshot (program, registers, pc) is
recorded. Reaching a snapshot a second time proves the program loops forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from regmachine.ir.ops import Address, Program, RegID
from regmachine.vm.memory import RegisterBank
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable
from regmachine.vm.vm import MachineSnapshot, VirtualMachine

logger = logging.getLogger(__name__)

# Called with each output value; returning False stops the run
OutputCheck = Callable[[int], bool]


class RunOutcome(Enum):
    """How an analyzed run ended."""
    HALTED = 1      # pc left the program
    CYCLE = 2       # a machine snapshot repeated
    STEP_LIMIT = 3  # the step budget ran out first
    REJECTED = 4    # an output check refused a value


@dataclass
class CycleResult:
    """
    Result of a cycle-detecting run.

    Attributes:
        outcome: How the run ended
        steps: Instructions executed
        pc: Final program counter
        registers: Final register values
        outputs: Output values in emission order
        cycle_start: Step index of the first occurrence of the repeated snapshot
        cycle_length: Steps between the first occurrence and the repeat
        outputs_in_cycle: True if an output was emitted inside the cycle
        cycle_outputs: Output values emitted inside the cycle, in order
    """
    outcome: RunOutcome
    steps: int
    pc: Address
    registers: Tuple[int, ...]
    outputs: List[int] = field(default_factory=list)
    cycle_start: Optional[int] = None
    cycle_length: Optional[int] = None
    outputs_in_cycle: bool = False
    cycle_outputs: List[int] = field(default_factory=list)

    @property
    def halted(self) -> bool:
        return self.outcome is RunOutcome.HALTED

    @property
    def looped(self) -> bool:
        return self.outcome is RunOutcome.CYCLE

    @property
    def last_output(self) -> Optional[int]:
        """
        Last output of the run.

        For a run that looped this is the last output emitted inside the
        cycle, or None if the cycle is silent.
        """
        if self.outcome is RunOutcome.CYCLE:
            return self.cycle_outputs[-1] if self.cycle_outputs else None
        return self.outputs[-1] if self.outputs else None


def run_with_cycle_detection(
    ip_register: Optional[RegID],
    program: Program,
    registers: Iterable[int],
    *,
    toggle_table: ToggleTable = DEFAULT_TOGGLE_TABLE,
    output_register: Optional[RegID] = None,
    max_steps: Optional[int] = None,
    on_output: Optional[OutputCheck] = None,
    pc: Address = 0,
) -> CycleResult:
    """
    Run until natural halt or a repeated machine snapshot.

    The caller's program and registers are cloned and left untouched.

    Args:
        ip_register: Register bound to the instruction pointer, or None
        program: Program to analyze
        registers: Initial register values
        toggle_table: Opcode pairing used by TGL
        output_register: Optional register whose writes count as outputs
        max_steps: Optional step budget
        on_output: Optional check applied to each new output value
        pc: Starting address

    Returns:
        CycleResult describing how the run ended
    """
    bank = registers.copy() if isinstance(registers, RegisterBank) else RegisterBank.from_values(registers)
    vm = VirtualMachine(
        program.copy(),
        bank,
        ip_register=ip_register,
        toggle_table=toggle_table,
        output_register=output_register,
        pc=pc,
    )
    seen: Dict[MachineSnapshot, int] = {}
    output_steps: List[int] = []

    def finish(outcome: RunOutcome, **extra) -> CycleResult:
        result = CycleResult(
            outcome=outcome,
            steps=vm.steps,
            pc=vm.pc,
            registers=vm.regs.snapshot(),
            outputs=list(vm.outputs),
            **extra,
        )
        logger.info("Run ended: %s after %d steps", outcome.name, vm.steps)
        return result

    while not vm.halted:
        if max_steps is not None and vm.steps >= max_steps:
            return finish(RunOutcome.STEP_LIMIT)

        state = vm.snapshot()
        first = seen.setdefault(state, vm.steps)
        if first != vm.steps:
            in_cycle = [v for s, v in zip(output_steps, vm.outputs) if s >= first]
            return finish(
                RunOutcome.CYCLE,
                cycle_start=first,
                cycle_length=vm.steps - first,
                outputs_in_cycle=bool(in_cycle),
                cycle_outputs=in_cycle,
            )

        emitted = len(vm.outputs)
        step = vm.steps
        vm.step()
        for value in vm.outputs[emitted:]:
            output_steps.append(step)
            if on_output is not None and not on_output(value):
                logger.debug("Output %d rejected at step %d", value, step)
                return finish(RunOutcome.REJECTED)

    return finish(RunOutcome.HALTED)
