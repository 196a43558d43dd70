# tests/loader/test_loader.py
"""
ProgramLoaderとIntel HEXパーサーのテスト。
"""
import logging

import pytest

from breadboard.core.errors import (
    AddressOutOfRange,
    CapacityExceeded,
    MalformedRecord,
    UnsupportedRecordType,
)
from breadboard.arch.avr.cpu import AvrCpu
from breadboard.loader.loader import ProgramLoader, parse_hex_line, RECORD_DATA, RECORD_EOF
from breadboard.transport.memory import ROM, DataMemory

# @intent:test_suite フラットバイナリとHEXレコードのロード、および異常系の扱いを検証します。

def record(address: int, data: bytes, record_type: int = RECORD_DATA) -> str:
    raw = bytes([len(data), (address >> 8) & 0xFF, address & 0xFF, record_type]) + data
    checksum = (-sum(raw)) & 0xFF
    return ":" + (raw + bytes([checksum])).hex().upper()

EOF_LINE = ":00000001FF"

@pytest.fixture
def cpu():
    return AvrCpu(ROM(64), DataMemory(1024))

@pytest.fixture
def loader(cpu):
    return ProgramLoader(cpu)


class TestParseHexLine:
    def test_data_record(self):
        rec = parse_hex_line(record(0x0010, b"\x00\xE1\x13\xE0"))
        assert rec.byte_count == 4
        assert rec.address == 0x0010
        assert rec.record_type == RECORD_DATA
        assert rec.data == b"\x00\xE1\x13\xE0"

    def test_eof_record(self):
        rec = parse_hex_line(EOF_LINE)
        assert rec.record_type == RECORD_EOF
        assert rec.data == b""
        assert rec.checksum == 0xFF

    def test_checksum_is_not_validated(self):
        rec = parse_hex_line(":0100000000AA")
        assert rec.data == b"\x00"
        assert rec.checksum == 0xAA

    @pytest.mark.parametrize("line", [
        ":0100000000A",     # 奇数長
        ":01000000ZZ00",    # 16進数でない
        ":00000001",        # 5バイト未満
        ":0200000000FF",    # byte_countと長さが一致しない
    ])
    def test_malformed(self, line):
        with pytest.raises(MalformedRecord):
            parse_hex_line(line)

    # int(x, 16)が受け付けてしまう表記も、2桁の16進数字でなければ不正なレコードとして扱う
    @pytest.mark.parametrize("line", [
        ":01000000-1FF",
        ":01000000+1FF",
        ":01000000 1FF",
        ":0100000001 F",
        ":01000000１１FF",  # 全角数字
    ])
    def test_rejects_non_hex_digit_pairs(self, line):
        with pytest.raises(MalformedRecord):
            parse_hex_line(line)

    def test_unsupported_record_type(self):
        with pytest.raises(UnsupportedRecordType) as excinfo:
            parse_hex_line(record(0, b"\x00\x00", record_type=0x02))
        assert excinfo.value.record_type == 0x02


class TestFlatBinary:
    def test_copies_to_start(self, cpu, loader):
        loader.load_flat_binary(b"\x01\x02\x03")
        assert cpu.flash[:4] == b"\x01\x02\x03\x00"

    def test_leaves_rest_untouched(self, cpu, loader):
        cpu.program_memory.load_data(10, 0xAA)
        loader.load_flat_binary(b"\x01\x02")
        assert cpu.flash[10] == 0xAA

    def test_exact_capacity(self, cpu, loader):
        loader.load_flat_binary(bytes(range(64)))
        assert cpu.flash == bytes(range(64))

    def test_capacity_exceeded(self, cpu, loader):
        cpu.program_memory.load_data(0, 0x55)
        with pytest.raises(CapacityExceeded) as excinfo:
            loader.load_flat_binary(bytes(65))
        assert str(excinfo.value) == "Binary too large: 65 bytes (max: 64)"
        assert cpu.flash[0] == 0x55

    def test_vector_erases_first(self, cpu, loader):
        cpu.program_memory.load_data(10, 0xAA)
        cpu._state.pc = 8
        loader.load_from_vector(b"\x01\x02")
        assert cpu.flash[:2] == b"\x01\x02"
        assert cpu.flash[10] == 0
        assert cpu.pc == 0

    def test_vector_failure_leaves_memory_erased(self, cpu, loader):
        cpu.program_memory.load_data(10, 0xAA)
        with pytest.raises(CapacityExceeded):
            loader.load_from_vector(bytes(100))
        assert cpu.flash == bytes(64)


class TestHexRecords:
    def test_loads_data_records(self, cpu, loader):
        text = "\n".join([
            record(0x0000, b"\x00\xE1"),
            record(0x0004, b"\x01\x0F"),
            EOF_LINE,
        ])
        loader.load_hex_records(text)
        assert cpu.flash[:6] == b"\x00\xE1\x00\x00\x01\x0F"

    def test_stops_at_eof(self, cpu, loader):
        text = "\n".join([record(0, b"\x11"), EOF_LINE, record(1, b"\x22")])
        loader.load_hex_records(text)
        assert cpu.flash[:2] == b"\x11\x00"

    def test_blank_lines_are_ignored(self, cpu, loader):
        text = "\n\n" + record(0, b"\x11") + "\n   \n" + EOF_LINE + "\n"
        loader.load_hex_records(text)
        assert cpu.flash[0] == 0x11

    def test_skips_bad_lines_and_continues(self, cpu, loader, caplog):
        text = "\n".join([
            ":0100000000A",
            record(0, b"\x00\x00", record_type=0x04),
            record(2, b"\x33"),
            EOF_LINE,
        ])
        with caplog.at_level(logging.WARNING, logger="breadboard.loader.loader"):
            loader.load_hex_records(text)
        assert cpu.flash[2] == 0x33
        assert "line 1" in caplog.text
        assert "line 2" in caplog.text

    def test_signed_pair_is_skipped(self, cpu, loader, caplog):
        text = "\n".join([":01000000-1FF", record(2, b"\x33"), EOF_LINE])
        with caplog.at_level(logging.WARNING, logger="breadboard.loader.loader"):
            loader.load_hex_records(text)
        assert cpu.flash[:3] == b"\x00\x00\x33"
        assert "line 1" in caplog.text

    def test_out_of_range_aborts(self, cpu, loader):
        text = "\n".join([record(62, b"\x01\x02\x03\x04"), record(0, b"\x77"), EOF_LINE])
        with pytest.raises(AddressOutOfRange) as excinfo:
            loader.load_hex_records(text)
        assert excinfo.value.address == 64
        assert cpu.flash[0] == 0

    def test_loading_twice_is_idempotent(self, cpu, loader):
        text = "\n".join([record(0, b"\x00\xE1\x13\xE0"), EOF_LINE])
        loader.load_hex_records(text)
        first = cpu.flash
        loader.load_hex_records(text)
        assert cpu.flash == first

    def test_missing_eof_is_accepted(self, cpu, loader):
        loader.load_hex_records(record(0, b"\x12"))
        assert cpu.flash[0] == 0x12


class TestFiles:
    def test_binary_file(self, cpu, loader, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(b"\x1F\xEF")
        loader.load_binary_file(path)
        assert cpu.flash[:2] == b"\x1F\xEF"

    def test_hex_file(self, cpu, loader, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text(record(0, b"\x1F\xEF") + "\n" + EOF_LINE + "\n")
        loader.load_hex_file(str(path))
        assert cpu.get_instruction_mnemonic() == "LDI R17, 0xFF"

    def test_binary_data_as_hex_file(self, cpu, loader, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(MalformedRecord):
            loader.load_hex_file(path)
        assert cpu.flash[:2] == b"\x00\x00"

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load_binary_file(tmp_path / "missing.bin")
