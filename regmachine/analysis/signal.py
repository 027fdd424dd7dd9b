"""
regmachine/analysis/signal.py

Clock-signal detection: does a program emit 0, 1, 0, 1, ... forever?
"""

from __future__ import annotations

import itertools
import logging
from typing import Iterable, Optional

from regmachine.analysis.cycles import RunOutcome, run_with_cycle_detection
from regmachine.ir.ops import Program, RegID
from regmachine.vm.memory import RegisterBank

logger = logging.getLogger(__name__)


class ClockCheck:
    """Output check accepting only the alternating sequence 0, 1, 0, 1, ..."""

    def __init__(self):
        self.expected = 0

    def __call__(self, value: int) -> bool:
        if value != self.expected:
            return False
        self.expected ^= 1
        return True


def is_clock_signal(
    ip_register: Optional[RegID],
    program: Program,
    registers: Iterable[int],
    **kwargs,
) -> bool:
    """
    True if the program emits an endless alternating clock signal.

    The outputs must alternate from the first one and the machine must enter
    a cycle. The cycle then repeats forever, so its lap must emit a non-empty,
    even number of outputs: an odd lap starts the next one on the value it
    ended with.

    Args:
        ip_register: Register bound to the instruction pointer
        program: Program to check (cloned)
        registers: Initial register values
        **kwargs: Passed to run_with_cycle_detection
    """
    result = run_with_cycle_detection(ip_register, program, registers, on_output=ClockCheck(), **kwargs)
    if result.outcome is not RunOutcome.CYCLE:
        return False
    lap = len(result.cycle_outputs)
    return lap > 0 and lap % 2 == 0


def find_clock_seed(
    ip_register: Optional[RegID],
    program: Program,
    register_count: int,
    *,
    seed_register: RegID = 0,
    start: int = 0,
    limit: Optional[int] = None,
    **kwargs,
) -> Optional[int]:
    """
    Find the lowest seed value that makes the program a clock signal.

    Each attempt runs on a fresh register file and program clone.

    Args:
        ip_register: Register bound to the instruction pointer
        program: Program to check
        register_count: Width of the register file
        seed_register: Register receiving the seed
        start: First seed to try
        limit: Seeds to try before giving up (None: unbounded)
        **kwargs: Passed to run_with_cycle_detection

    Returns:
        The seed, or None if the limit was exhausted
    """
    seeds = itertools.count(start) if limit is None else range(start, start + limit)
    for seed in seeds:
        registers = RegisterBank.seeded(register_count, seed_register, seed)
        if is_clock_signal(ip_register, program, registers, **kwargs):
            logger.info("Seed %d produces a clock signal", seed)
            return seed
    return None
