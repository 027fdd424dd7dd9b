"""
Tests for the instruction model.
"""

import pytest

from regmachine.ir.ops import BASE_OPCODES, Instruction, OpCode, Program
from regmachine.ir.schema import OperandKind


class TestSignatures:
    def test_register_register(self):
        sig = OpCode.ADDR.signature
        assert sig.a is OperandKind.REGISTER
        assert sig.b is OperandKind.REGISTER
        assert sig.writes

    def test_register_immediate(self):
        sig = OpCode.ADDI.signature
        assert sig.a is OperandKind.REGISTER
        assert sig.b is OperandKind.IMMEDIATE

    def test_seti_ignores_b(self):
        sig = OpCode.SETI.signature
        assert sig.a is OperandKind.IMMEDIATE
        assert sig.b is OperandKind.UNUSED

    def test_comparison_typings(self):
        assert OpCode.GTIR.signature.a is OperandKind.IMMEDIATE
        assert OpCode.GTRI.signature.b is OperandKind.IMMEDIATE
        assert OpCode.EQRR.signature.register_operands(4, 5) == (4, 5)

    def test_control_opcodes_do_not_write(self):
        assert not OpCode.TGL.is_alu
        assert not OpCode.OUT.is_alu

    def test_every_opcode_has_signature(self):
        for op in OpCode:
            assert op.signature is not None

    def test_base_set(self):
        assert len(BASE_OPCODES) == 16
        assert OpCode.DIVR not in BASE_OPCODES
        assert OpCode.TGL not in BASE_OPCODES


class TestInstructionEncoding:
    @pytest.mark.parametrize("op", list(OpCode))
    def test_round_trip(self, op):
        ins = Instruction(op, 3, -7, 2)
        assert Instruction.decode(ins.encode()) == ins

    def test_encode(self):
        assert Instruction(OpCode.ADDI, 0, 1, 0).encode() == "addi 0 1 0"
        assert str(Instruction(OpCode.SETI, 5, 0, 1)) == "seti 5 0 1"

    def test_decode_pads_missing_operands(self):
        assert Instruction.decode("out 1") == Instruction(OpCode.OUT, 1, 0, 0)
        assert Instruction.decode("tgl 2") == Instruction(OpCode.TGL, 2, 0, 0)

    def test_decode_is_case_insensitive(self):
        assert Instruction.decode("EQRR 1 0 3").op is OpCode.EQRR

    def test_unknown_mnemonic(self):
        with pytest.raises(ValueError, match="Unknown opcode"):
            Instruction.decode("jmp 1 2 3")

    def test_too_many_operands(self):
        with pytest.raises(ValueError, match="Too many operands"):
            Instruction.decode("addi 1 2 3 4")

    def test_non_integer_operand(self):
        with pytest.raises(ValueError, match="Non-integer"):
            Instruction.decode("addi a 2 3")

    def test_missing_a_operand(self):
        with pytest.raises(ValueError):
            Instruction.decode("seti")

    def test_with_op_keeps_operands(self):
        ins = Instruction(OpCode.ADDR, 1, 2, 3)
        assert ins.with_op(OpCode.ADDI) == Instruction(OpCode.ADDI, 1, 2, 3)


class TestProgram:
    @pytest.fixture
    def program(self):
        return Program([
            Instruction(OpCode.SETI, 5, 0, 1),
            Instruction(OpCode.ADDR, 1, 2, 3),
        ])

    def test_contains(self, program):
        assert program.contains(0)
        assert program.contains(1)
        assert not program.contains(2)
        assert not program.contains(-1)

    def test_copy_is_independent(self, program):
        clone = program.copy()
        clone[0] = Instruction(OpCode.SETR, 5, 0, 1)
        assert program[0].op is OpCode.SETI

    def test_setitem_cannot_grow(self, program):
        with pytest.raises(IndexError):
            program[2] = Instruction(OpCode.SETI, 0, 0, 0)

    def test_freeze_is_hashable(self, program):
        assert hash(program.freeze()) == hash(program.copy().freeze())

    def test_validate_accepts(self, program):
        program.validate(4)

    def test_validate_rejects_destination(self, program):
        with pytest.raises(ValueError, match="register 3"):
            program.validate(3)

    def test_validate_ignores_immediates(self):
        Program([Instruction(OpCode.SETI, 100, 0, 0)]).validate(1)
