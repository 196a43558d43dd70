# tests/arch/avr/test_decode.py
"""
AVRデコードテーブルのテスト。
オペランドの抽出と、テーブルのパターンが互いに重ならないことを検証します。
"""
import pytest

from breadboard.core.errors import UnknownOpcode
from breadboard.arch.avr.instructions import decode_opcode
from breadboard.arch.avr.instructions.maps import DECODE_TABLE, EXECUTE_MAP

# @intent:test_suite デコードが純粋関数であり、各ビットパターンを正しく解釈することを検証します。

class TestDecodeTable:
    def test_patterns_are_disjoint(self):
        # 16bit全域で、一致するパターンが高々1つであること
        for opcode in range(0x10000):
            matches = [decoder.__name__ for mask, value, decoder in DECODE_TABLE if opcode & mask == value]
            assert len(matches) <= 1, f"{opcode:#06x} matches {matches}"

    def test_value_bits_are_inside_mask(self):
        for mask, value, decoder in DECODE_TABLE:
            assert value & ~mask == 0, decoder.__name__

    def test_every_executor_has_a_decoder(self):
        decoded = {decode_opcode(value).mnemonic for mask, value, _ in DECODE_TABLE}
        assert set(EXECUTE_MAP) <= decoded


class TestDecodeOperands:
    def test_zero_is_nop(self):
        op = decode_opcode(0x0000)
        assert op.mnemonic == "NOP"
        assert op.assembly == "NOP"

    def test_ldi(self):
        op = decode_opcode(0xEF1F)
        assert op.mnemonic == "LDI"
        assert op.dest == 17
        assert op.value == 0xFF
        assert op.assembly == "LDI R17, 0xFF"

    def test_ldi_targets_upper_registers(self):
        assert decode_opcode(0xE000).dest == 16
        assert decode_opcode(0xE0F0).dest == 31

    def test_add_register_fields(self):
        op = decode_opcode(0x0F01)
        assert (op.mnemonic, op.dest, op.src) == ("ADD", 16, 17)
        assert op.assembly == "ADD R16, R17"

    def test_add_high_source_bit(self):
        # r の最上位ビットは bit 9
        op = decode_opcode(0x0E0F)
        assert (op.dest, op.src) == (0, 31)

    def test_sub(self):
        op = decode_opcode(0x1B10)
        assert (op.mnemonic, op.dest, op.src) == ("SUB", 17, 16)

    @pytest.mark.parametrize("opcode, mnemonic, dest", [
        (0x9503, "INC", 16),
        (0x9403, "INC", 0),
        (0x95FA, "DEC", 31),
        (0x940A, "DEC", 0),
        (0x900F, "POP", 0),
        (0x91FF, "POP", 31),
    ])
    def test_single_register(self, opcode, mnemonic, dest):
        op = decode_opcode(opcode)
        assert op.mnemonic == mnemonic
        assert op.dest == dest

    def test_push_uses_source_field(self):
        op = decode_opcode(0x925F)
        assert op.mnemonic == "PUSH"
        assert op.src == 5
        assert op.assembly == "PUSH R5"

    @pytest.mark.parametrize("opcode, mnemonic", [
        (0x9408, "SEC"),
        (0x9488, "CLC"),
        (0x9508, "RET"),
        (0x9518, "RETI"),
        (0x9588, "SLEEP"),
        (0x9598, "BREAK"),
        (0x95A8, "WDR"),
    ])
    def test_no_operand_instructions(self, opcode, mnemonic):
        op = decode_opcode(opcode)
        assert op.mnemonic == mnemonic
        assert op.operands == []

    def test_rjmp_forward(self):
        op = decode_opcode(0xC002)
        assert op.mnemonic == "RJMP"
        assert op.offset == 2
        assert op.assembly == "RJMP .+4"

    def test_rcall_backward_is_sign_extended(self):
        op = decode_opcode(0xDFFD)
        assert op.mnemonic == "RCALL"
        assert op.offset == -3
        assert op.assembly == "RCALL .-6"

    def test_offset_extremes(self):
        assert decode_opcode(0xC7FF).offset == 2047
        assert decode_opcode(0xC800).offset == -2048
        assert decode_opcode(0xCFFF).offset == -1

    @pytest.mark.parametrize("opcode", [0x0001, 0xFFFF, 0x9400, 0x9409])
    def test_unknown_opcode(self, opcode):
        with pytest.raises(UnknownOpcode) as excinfo:
            decode_opcode(opcode)
        assert excinfo.value.opcode == opcode

    def test_decode_is_pure(self):
        assert decode_opcode(0x0F01) == decode_opcode(0x0F01)
