"""
regmachine/api/listing.py

Text-in, result-out helpers over listings and sample files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from regmachine.analysis.cycles import CycleResult, run_with_cycle_detection
from regmachine.analysis.halting import HaltingValues, halting_values
from regmachine.analysis.signal import find_clock_seed
from regmachine.asm.listing import parse_listing
from regmachine.asm.samples import count_ambiguous, decode_program, parse_samples, resolve_opcode_numbers
from regmachine.ir.ops import OpCode
from regmachine.runtime.schedule import execute

logger = logging.getLogger(__name__)

DEFAULT_REGISTER_COUNT = 6


def initial_registers(register_count: int, values: Optional[Sequence[int]] = None) -> List[int]:
    """
    Build an initial register file, padding the given leading values with zeros.

    Raises:
        ValueError: If more values than registers are given
    """
    values = list(values or ())
    if len(values) > register_count:
        raise ValueError(f"{len(values)} initial values for a {register_count}-register file")
    return values + [0] * (register_count - len(values))


def run_listing(
    text: str,
    registers: Optional[Sequence[int]] = None,
    *,
    register_count: int = DEFAULT_REGISTER_COUNT,
) -> List[int]:
    """Parse and run a listing to natural halt; returns the final registers."""
    listing = parse_listing(text)
    regs = initial_registers(register_count, registers)
    logger.info("Running %d instructions, ip bound to %s", len(listing.program), listing.ip_register)
    execute(listing.ip_register, listing.program, regs)
    return regs


def analyze_listing(
    text: str,
    registers: Optional[Sequence[int]] = None,
    *,
    register_count: int = DEFAULT_REGISTER_COUNT,
    **kwargs,
) -> CycleResult:
    """Parse a listing and run it with cycle detection."""
    listing = parse_listing(text)
    regs = initial_registers(register_count, registers)
    return run_with_cycle_detection(listing.ip_register, listing.program, regs, **kwargs)


def listing_halting_values(
    text: str,
    registers: Optional[Sequence[int]] = None,
    *,
    register_count: int = DEFAULT_REGISTER_COUNT,
    **kwargs,
) -> HaltingValues:
    """Parse a listing and collect its halting values."""
    listing = parse_listing(text)
    regs = initial_registers(register_count, registers)
    return halting_values(listing.ip_register, listing.program, regs, **kwargs)


def listing_clock_seed(
    text: str,
    *,
    register_count: int = DEFAULT_REGISTER_COUNT,
    **kwargs,
) -> Optional[int]:
    """Parse a listing and search for the lowest clock-signal seed."""
    listing = parse_listing(text)
    return find_clock_seed(listing.ip_register, listing.program, register_count, **kwargs)


@dataclass
class SampleReport:
    """
    Result of solving a sample file.

    Attributes:
        ambiguous: Samples matching three or more opcodes
        mapping: Opcode number -> opcode
        registers: Final registers after running the numeric program
    """
    ambiguous: int
    mapping: Dict[int, OpCode]
    registers: List[int]


def solve_samples(text: str, *, register_count: int = 4) -> SampleReport:
    """Resolve opcode numbers from samples, then run the trailing program."""
    samples, rows = parse_samples(text)
    ambiguous = count_ambiguous(samples)
    mapping = resolve_opcode_numbers(samples)
    regs = [0] * register_count
    if rows:
        execute(None, decode_program(rows, mapping), regs)
    return SampleReport(ambiguous=ambiguous, mapping=mapping, registers=regs)
