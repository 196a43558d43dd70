# src/breadboard/arch/avr/disassembler.py
"""
AVR Disassembler

プログラムメモリ上のバイナリデータを解析し、AVRのアセンブリ表記に変換します。
Instruction Layerのデコードロジックをそのまま再利用します（デコードは副作用を持たない）。
"""
from typing import List

from breadboard.common.types import DisassemblyRow
from breadboard.core.errors import UnknownOpcode
from breadboard.transport.memory import ROM
from breadboard.arch.avr.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(program_memory: ROM, start_addr: int, length: int) -> List[DisassemblyRow]:
    """
    指定された範囲のプログラムメモリを1ワードずつ逆アセンブルします。
    認識できないワードは ".dw" として表示します。

    Returns:
        DisassemblyRow (address, hex_bytes, mnemonic) のリスト。
    """
    result = []
    current_addr = start_addr & ~1  # ワード境界に揃える
    end_addr = min(start_addr + length, program_memory.get_size())

    while current_addr + 1 < end_addr:
        low = program_memory.read(current_addr)
        high = program_memory.read(current_addr + 1)
        opcode = (high << 8) | low

        # HEX表現はメモリ上の並び（下位バイトが先）
        hex_bytes = f"{low:02X} {high:02X}"

        try:
            mnemonic_str = decode_opcode(opcode).assembly
        except UnknownOpcode:
            mnemonic_str = f".dw 0x{opcode:04X}"

        result.append(DisassemblyRow(current_addr, hex_bytes, mnemonic_str))
        current_addr += 2

    return result
