"""
API module: Helpers working directly on listing text.
"""

from regmachine.api.listing import (
    SampleReport,
    analyze_listing,
    initial_registers,
    listing_clock_seed,
    listing_halting_values,
    run_listing,
    solve_samples,
)

__all__ = [
    "SampleReport",
    "analyze_listing",
    "initial_registers",
    "listing_clock_seed",
    "listing_halting_values",
    "run_listing",
    "solve_samples",
]
