"""
Assembler module: Listings and opcode discovery from samples.
"""

from regmachine.asm.listing import Listing, format_listing, parse_listing
from regmachine.asm.samples import (
    Sample,
    candidate_opcodes,
    count_ambiguous,
    decode_program,
    parse_samples,
    resolve_opcode_numbers,
)

__all__ = [
    "Listing",
    "format_listing",
    "parse_listing",
    "Sample",
    "candidate_opcodes",
    "count_ambiguous",
    "decode_program",
    "parse_samples",
    "resolve_opcode_numbers",
]
