"""
regmachine/asm/listing.py

Textual program listings.

Format::

    #ip 0
    seti 5 0 1
    addi 0 1 0    ; comments run to end of line

The ``#ip N`` directive binds register N to the instruction pointer and may
appear at most once. Blank lines are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from regmachine.ir.ops import Instruction, Program, RegID

IP_RE = re.compile(r"^#ip\s+(\d+)$")


@dataclass
class Listing:
    """
    A parsed listing.

    Attributes:
        ip_register: Register bound to the instruction pointer, or None
        program: The instructions
    """
    ip_register: Optional[RegID]
    program: Program


def parse_listing(text: str) -> Listing:
    """
    Parse a listing.

    Raises:
        ValueError: On an unknown mnemonic, bad operand, or repeated directive
    """
    ip_register: Optional[RegID] = None
    instructions: List[Instruction] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split(";", 1)[0].strip()
        if not line:
            continue
        if line.startswith("#"):
            m = IP_RE.match(line)
            if m is None:
                raise ValueError(f"line {lineno}: bad directive {line!r}")
            if ip_register is not None:
                raise ValueError(f"line {lineno}: instruction pointer bound twice")
            ip_register = int(m.group(1))
            continue
        try:
            instructions.append(Instruction.decode(line))
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from None
    return Listing(ip_register=ip_register, program=Program(instructions))


def format_listing(listing: Listing) -> str:
    """Render a listing back to text; parse_listing inverts it."""
    lines = []
    if listing.ip_register is not None:
        lines.append(f"#ip {listing.ip_register}")
    lines.extend(ins.encode() for ins in listing.program)
    return "\n".join(lines) + "\n"
