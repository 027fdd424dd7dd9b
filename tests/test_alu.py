"""
Tests for the ALU.
"""

import pytest

from regmachine.ir.ops import Instruction, OpCode
from regmachine.vm.alu import KERNELS, apply, apply_instruction
from regmachine.vm.memory import RegisterBank


def run_op(op, a, b, c, values=(3, 2, 1, 1)):
    regs = RegisterBank.from_values(values)
    apply(regs, op, a, b, c)
    return regs.tolist()


class TestSemantics:
    def test_addi_example(self):
        assert run_op(OpCode.ADDI, 0, 1, 0, (3, 0, 0, 0)) == [4, 0, 0, 0]

    def test_add(self):
        assert run_op(OpCode.ADDR, 0, 1, 3) == [3, 2, 1, 5]
        assert run_op(OpCode.ADDI, 0, 7, 3) == [3, 2, 1, 10]

    def test_mul(self):
        assert run_op(OpCode.MULR, 0, 1, 3) == [3, 2, 1, 6]
        assert run_op(OpCode.MULI, 0, 7, 3) == [3, 2, 1, 21]

    def test_bitwise(self):
        assert run_op(OpCode.BANR, 0, 1, 3) == [3, 2, 1, 2]
        assert run_op(OpCode.BANI, 0, 5, 3) == [3, 2, 1, 1]
        assert run_op(OpCode.BORR, 0, 1, 3) == [3, 2, 1, 3]
        assert run_op(OpCode.BORI, 1, 4, 3) == [3, 2, 1, 6]

    def test_set(self):
        assert run_op(OpCode.SETR, 0, 99, 3) == [3, 2, 1, 3]
        assert run_op(OpCode.SETI, 42, 99, 3) == [3, 2, 1, 42]

    def test_greater_than(self):
        assert run_op(OpCode.GTIR, 3, 1, 3) == [3, 2, 1, 1]
        assert run_op(OpCode.GTRI, 0, 3, 3) == [3, 2, 1, 0]
        assert run_op(OpCode.GTRR, 0, 1, 3) == [3, 2, 1, 1]

    def test_equal(self):
        assert run_op(OpCode.EQIR, 2, 1, 3) == [3, 2, 1, 1]
        assert run_op(OpCode.EQRI, 0, 4, 3) == [3, 2, 1, 0]
        assert run_op(OpCode.EQRR, 2, 3, 0) == [1, 2, 1, 1]

    def test_div_truncates_toward_zero(self):
        assert run_op(OpCode.DIVR, 0, 1, 3) == [3, 2, 1, 1]
        assert run_op(OpCode.DIVI, 0, -2, 3) == [3, 2, 1, -1]

    def test_div_by_zero_is_fatal(self):
        with pytest.raises(ZeroDivisionError):
            run_op(OpCode.DIVI, 0, 0, 3)

    def test_negative_values(self):
        assert run_op(OpCode.ADDI, 0, -10, 1) == [3, -7, 1, 1]


class TestInvariants:
    @pytest.mark.parametrize("op", sorted(KERNELS, key=lambda op: op.value))
    def test_writes_only_destination(self, op):
        before = [7, 3, 5, 2, 9, 4]
        regs = RegisterBank.from_values(before)
        apply(regs, op, 1, 2, 4)
        after = regs.tolist()
        for i in range(len(before)):
            if i != 4:
                assert after[i] == before[i]

    def test_all_alu_opcodes_have_kernels(self):
        for op in OpCode:
            assert (op in KERNELS) == op.is_alu

    def test_control_opcode_rejected(self):
        with pytest.raises(ValueError, match="not an ALU operation"):
            run_op(OpCode.TGL, 0, 0, 0)

    def test_out_of_range_destination(self):
        with pytest.raises(IndexError):
            run_op(OpCode.SETI, 1, 0, 4)

    def test_out_of_range_source(self):
        with pytest.raises(IndexError):
            run_op(OpCode.ADDR, 0, 9, 1)

    def test_negative_register_index(self):
        with pytest.raises(IndexError):
            run_op(OpCode.SETR, -1, 0, 0)

    def test_ip_register_not_special(self):
        regs = RegisterBank.from_values([0, 0, 0])
        apply_instruction(regs, Instruction(OpCode.ADDI, 2, 5, 2))
        assert regs.tolist() == [0, 0, 5]
