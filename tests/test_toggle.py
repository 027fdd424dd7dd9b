"""
Tests for the toggle table.
"""

import pytest

from regmachine.ir.ops import Instruction, OpCode, Program
from regmachine.vm.toggle import DEFAULT_TOGGLE_TABLE, ToggleTable, toggle


@pytest.fixture
def program():
    return Program([
        Instruction(OpCode.ADDR, 1, 2, 3),
        Instruction(OpCode.SETI, 5, 0, 1),
        Instruction(OpCode.TGL, 2, 0, 0),
    ])


class TestDefaultTable:
    @pytest.mark.parametrize("op", list(OpCode))
    def test_involution(self, op):
        assert DEFAULT_TOGGLE_TABLE[DEFAULT_TOGGLE_TABLE[op]] is op

    def test_register_immediate_siblings(self):
        assert DEFAULT_TOGGLE_TABLE[OpCode.ADDR] is OpCode.ADDI
        assert DEFAULT_TOGGLE_TABLE[OpCode.SETI] is OpCode.SETR
        assert DEFAULT_TOGGLE_TABLE[OpCode.GTIR] is OpCode.GTRI

    def test_control_pair(self):
        assert DEFAULT_TOGGLE_TABLE[OpCode.TGL] is OpCode.OUT


class TestToggle:
    def test_rewrites_only_opcode(self, program):
        assert toggle(program, 0)
        assert program[0] == Instruction(OpCode.ADDI, 1, 2, 3)

    def test_twice_restores(self, program):
        before = program.freeze()
        for addr in range(len(program)):
            toggle(program, addr)
            toggle(program, addr)
        assert program.freeze() == before

    @pytest.mark.parametrize("target", [-1, 3, 100])
    def test_out_of_range_is_noop(self, program, target):
        before = program.freeze()
        assert not toggle(program, target)
        assert program.freeze() == before

    def test_length_never_changes(self, program):
        toggle(program, 2)
        assert len(program) == 3


class TestCustomTable:
    def test_from_pairs(self):
        table = ToggleTable.from_pairs([(OpCode.SETR, OpCode.ADDI)])
        assert table[OpCode.SETR] is OpCode.ADDI
        assert table[OpCode.ADDI] is OpCode.SETR
        assert table[OpCode.MULR] is OpCode.MULR

    def test_non_involution_rejected(self):
        with pytest.raises(ValueError, match="involution"):
            ToggleTable({OpCode.ADDR: OpCode.ADDI, OpCode.ADDI: OpCode.MULI})

    def test_one_way_mapping_rejected(self):
        with pytest.raises(ValueError):
            ToggleTable({OpCode.ADDR: OpCode.ADDI})

    def test_duplicate_pair_rejected(self):
        with pytest.raises(ValueError, match="paired twice"):
            ToggleTable.from_pairs([(OpCode.ADDR, OpCode.ADDI), (OpCode.ADDI, OpCode.MULI)])

    def test_used_by_toggle(self, program):
        table = ToggleTable.from_pairs([(OpCode.SETI, OpCode.MULI)])
        toggle(program, 1, table)
        assert program[1].op is OpCode.MULI
        toggle(program, 0, table)
        assert program[0].op is OpCode.ADDR
