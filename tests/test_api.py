"""
Tests for the listing-level helpers.
"""

import pytest

from regmachine.analysis.cycles import RunOutcome
from regmachine.api.listing import (
    analyze_listing,
    initial_registers,
    listing_clock_seed,
    listing_halting_values,
    run_listing,
    solve_samples,
)
from regmachine.ir.ops import OpCode

WORKED = """\
#ip 0
seti 5 0 1
seti 6 0 2
addi 0 1 0
addr 1 2 3
setr 1 0 0
seti 8 0 4
seti 9 0 5
"""

GATED = """\
#ip 5
seti 0 0 1
muli 1 5 1
addi 1 3 1
bani 1 15 1
eqrr 1 0 3
addr 3 5 5
seti 0 0 5
"""

CLOCK = """\
#ip 3
addi 0 -2 1
out 1 0 0
eqri 1 0 1
seti 0 0 3
"""


class TestInitialRegisters:
    def test_padding(self):
        assert initial_registers(4, [1]) == [1, 0, 0, 0]
        assert initial_registers(2) == [0, 0]

    def test_too_many(self):
        with pytest.raises(ValueError):
            initial_registers(2, [1, 2, 3])


class TestListingHelpers:
    def test_run_listing(self):
        assert run_listing(WORKED)[0] == 6

    def test_run_listing_with_seed(self):
        assert run_listing(GATED, [3])[1] == 3

    def test_analyze_listing(self):
        result = analyze_listing(GATED, [16])
        assert result.outcome is RunOutcome.CYCLE

    def test_analyze_listing_budget(self):
        result = analyze_listing(GATED, [16], max_steps=10)
        assert result.outcome is RunOutcome.STEP_LIMIT

    def test_halting_values(self):
        result = listing_halting_values(GATED)
        assert (result.first, result.last) == (3, 0)

    def test_clock_seed(self):
        assert listing_clock_seed(CLOCK, register_count=4, limit=10) == 2


class TestSolveSamples:
    def test_resolves_and_runs(self):
        text = """\
Before: [0, 0, 0, 0]
4 5 0 1
After:  [0, 5, 0, 0]

Before: [5, 0, 0, 0]
2 0 0 0
After:  [10, 0, 0, 0]

4 7 0 0
2 0 0 0
"""
        report = solve_samples(text)
        assert report.mapping == {4: OpCode.SETI, 2: OpCode.ADDR}
        assert report.ambiguous == 0
        assert report.registers == [14, 0, 0, 0]

    def test_samples_only(self):
        text = """\
Before: [0, 0, 0, 0]
4 5 0 1
After:  [0, 5, 0, 0]
"""
        report = solve_samples(text)
        assert report.registers == [0, 0, 0, 0]
