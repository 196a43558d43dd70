# breadboard/core/state.py
"""
Core Layer (CPU状態)

全アーキテクチャに共通するPCとSPを保持します。
"""
from dataclasses import dataclass

@dataclass
class CpuState:
    pc: int = 0x0000  # プログラムメモリ上のバイトアドレス
    sp: int = 0x0000  # データメモリ上のアドレス

    # @intent:responsibility PCを指定バイト数進め、プログラムメモリ内に折り返します。
    def advance_pc(self, length: int, program_size: int) -> None:
        self.pc = (self.pc + length) % program_size

    # @intent:responsibility 分岐命令が設定したPCをプログラムメモリ内に折り返します。
    def wrap_pc(self, program_size: int) -> None:
        self.pc %= program_size
