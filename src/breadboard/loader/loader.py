# breadboard/loader/loader.py
"""
プログラムローダーモジュール。
フラットバイナリと Intel HEX（データ/EOFレコードのサブセット）形式のロードをサポートします。
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from breadboard.core.cpu import AbstractCpu
from breadboard.core.errors import (
    AddressOutOfRange,
    CapacityExceeded,
    MalformedRecord,
    UnsupportedRecordType,
)
from breadboard.transport.memory import ROM

logger = logging.getLogger(__name__)

RECORD_DATA = 0x00
RECORD_EOF = 0x01

_HEX_PAIR = re.compile(r"[0-9A-Fa-f]{2}")

# @intent:data_structure Intel HEXの1行分のレコード。チェックサムは読み取るだけで検証しません。
@dataclass(frozen=True)
class HexRecord:
    byte_count: int
    address: int
    record_type: int
    data: bytes
    checksum: int

# @intent:utility_function 2文字の16進文字列を1バイトに変換します。
def _hex_byte(pair: str) -> int:
    # int(x, 16)は符号や空白も受け付けるため、先に2桁の16進数字であることを確認する
    if not _HEX_PAIR.fullmatch(pair):
        raise MalformedRecord(f"Failed to convert hex {pair!r} to an integer")
    return int(pair, 16)

# @intent:responsibility Intel HEXの1行を解析し、HexRecordを返します。
# @intent:post-condition データレコードとEOFレコード以外は例外になります。
def parse_hex_line(line: str) -> HexRecord:
    """
    先頭のレコードマーク(':')を取り除き、残りを2文字ずつバイトに変換してレコードを組み立てます。
    構造が不正な場合は MalformedRecord、未対応のレコードタイプは UnsupportedRecordType を送出します。
    """
    hex_string = line.strip().lstrip(":")

    if len(hex_string) % 2 != 0:
        raise MalformedRecord("Cannot parse uneven hex lines.")

    raw = bytes(_hex_byte(hex_string[i:i + 2]) for i in range(0, len(hex_string), 2))

    if len(raw) < 5:
        raise MalformedRecord("HEX line too short.")

    byte_count = raw[0]
    expected_len = 5 + byte_count
    if len(raw) != expected_len:
        raise MalformedRecord(f"Length mismatch: expected {expected_len}, got {len(raw)}")

    record_type = raw[3]
    if record_type not in (RECORD_DATA, RECORD_EOF):
        raise UnsupportedRecordType(record_type)

    return HexRecord(
        byte_count=byte_count,
        address=(raw[1] << 8) | raw[2],
        record_type=record_type,
        data=raw[4:-1],
        checksum=raw[-1],
    )

# @intent:responsibility プログラムイメージをCPUのプログラムメモリへ配置します。
class ProgramLoader:
    """
    フラットバイナリ、およびIntel HEXテキストをプログラムメモリにロードするローダー。
    """
    def __init__(self, cpu: AbstractCpu):
        self._cpu = cpu

    @property
    def _flash(self) -> ROM:
        return self._cpu.program_memory

    # @intent:responsibility バイト列をプログラムメモリの先頭にコピーします。残りの領域には触れません。
    # @intent:pre-condition 事前の消去は行いません。クリーンな状態が必要なら呼び出し元がeraseします。
    def load_flat_binary(self, data: bytes) -> None:
        capacity = self._flash.get_size()
        if len(data) > capacity:
            raise CapacityExceeded(len(data), capacity)
        self._flash.load_block(0, bytes(data))
        logger.debug("Loaded %d bytes of flat binary", len(data))

    # @intent:responsibility プログラムメモリを消去（PCも0に戻す）してから、バイト列をロードします。
    # @intent:post-condition 容量超過で失敗した場合も、プログラムメモリは消去された状態になります。
    def load_from_vector(self, data: bytes) -> None:
        self._cpu.erase()
        self.load_flat_binary(data)

    # @intent:responsibility Intel HEXテキストを1行ずつ解析し、データレコードをプログラムメモリへ書き込みます。
    # @intent:rationale 解析できない行は警告を記録して読み飛ばし、ロード全体は継続します。
    #                  一方、書き込み先がメモリ外のデータレコードはロード全体を中断します。
    def load_hex_records(self, text: str) -> None:
        capacity = self._flash.get_size()
        loaded = 0

        for line_num, line in enumerate(text.splitlines(), 1):
            if not line.strip():
                continue

            try:
                record = parse_hex_line(line)
            except (MalformedRecord, UnsupportedRecordType) as e:
                logger.warning("Skipping HEX line %d: %s", line_num, e)
                continue

            if record.record_type == RECORD_EOF:
                break

            for offset, byte in enumerate(record.data):
                flash_addr = record.address + offset
                if flash_addr >= capacity:
                    raise AddressOutOfRange(flash_addr, capacity)
                self._flash.load_data(flash_addr, byte)
            loaded += record.byte_count

        logger.debug("Loaded %d bytes from HEX records", loaded)

    # @intent:responsibility ファイルからフラットバイナリを読み込みます。
    def load_binary_file(self, file_path: Union[str, Path]) -> None:
        self.load_flat_binary(Path(file_path).read_bytes())

    # @intent:responsibility ファイルからIntel HEXを読み込みます。
    # @intent:pre-condition Intel HEXはASCIIテキストです。それ以外のバイトを含むファイルは MalformedRecord になります。
    def load_hex_file(self, file_path: Union[str, Path]) -> None:
        try:
            text = Path(file_path).read_text(encoding="ascii")
        except UnicodeDecodeError as e:
            raise MalformedRecord(f"{file_path} is not an ASCII Intel HEX file: {e.reason}") from e
        self.load_hex_records(text)
