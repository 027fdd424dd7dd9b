"""
Tests for listing parsing and formatting.
"""

import pytest

from regmachine.asm.listing import Listing, format_listing, parse_listing
from regmachine.ir.ops import Instruction, OpCode, Program

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


class TestParse:
    def test_worked_example(self):
        listing = parse_listing(WORKED)
        assert listing.ip_register == 0
        assert len(listing.program) == 7
        assert listing.program[2] == Instruction(OpCode.ADDI, 0, 1, 0)

    def test_no_directive(self):
        listing = parse_listing("seti 1 0 0\n")
        assert listing.ip_register is None

    def test_comments_and_blank_lines(self):
        listing = parse_listing("""
; set up
#ip 2

seti 1 0 0   ; r0 = 1
out 0
""")
        assert listing.ip_register == 2
        assert [ins.op for ins in listing.program] == [OpCode.SETI, OpCode.OUT]

    def test_negative_operands(self):
        listing = parse_listing("addi 0 -2 1")
        assert listing.program[0].b == -2

    def test_unknown_opcode_reports_line(self):
        with pytest.raises(ValueError, match="line 3"):
            parse_listing("#ip 0\nseti 1 0 0\nfoo 1 2 3\n")

    def test_bad_directive(self):
        with pytest.raises(ValueError, match="bad directive"):
            parse_listing("#pc 0\n")

    def test_repeated_directive(self):
        with pytest.raises(ValueError, match="bound twice"):
            parse_listing("#ip 0\n#ip 1\n")


class TestFormat:
    def test_round_trip(self):
        listing = parse_listing(WORKED)
        assert format_listing(listing) == WORKED

    def test_without_ip(self):
        listing = Listing(ip_register=None, program=Program([Instruction(OpCode.OUT, 1)]))
        assert format_listing(listing) == "out 1 0 0\n"
        assert parse_listing(format_listing(listing)).program.freeze() == listing.program.freeze()
