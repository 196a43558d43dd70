# breadboard/transport/memory.py
"""
Transport Layer (メモリデバイス)

このモジュールは、プログラムメモリ（フラッシュ）とデータメモリ（SRAM）を
固定サイズのバイト配列として抽象化し、範囲チェック付きの読み書きを提供します。
AVRはハーバード型のため、2つのメモリは独立したアドレス空間を持ちます。
"""
import logging
from typing import Optional

from breadboard.config.models import StackLayout

logger = logging.getLogger(__name__)

# @intent:responsibility 固定サイズのバイト配列を持つメモリデバイスの共通部分（読み出し、消去、ダンプ）を提供します。
class Device:
    """
    CPUに接続されるメモリデバイスの基底クラス。
    書き込みの経路はデバイスごとに異なるため、ここでは定義しません。
    """
    # @intent:responsibility 指定されたサイズのメモリ領域を初期化します。
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出す責務を負います。
    # @intent:pre-condition アドレスはデバイスの有効範囲内である必要があります。
    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for memory of size {self._size}.")
        return self._memory[address]

    # @intent:responsibility メモリのサイズを返します。
    def get_size(self) -> int:
        return self._size

    # @intent:responsibility 全領域を0で埋めます。
    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    # @intent:responsibility 表示用に内容のコピーを返します。
    # @intent:rationale 内部のbytearrayを直接渡すと呼び出し元から書き換えられるため、不変のbytesで返す。
    def dump(self, start: int = 0, length: Optional[int] = None) -> bytes:
        if length is None:
            length = self._size - start
        start = max(0, start)
        end = min(self._size, start + max(0, length))
        return bytes(self._memory[start:end])

# @intent:responsibility 基本的なRAMデバイスの機能を提供します。
class RAM(Device):
    """
    読み書き可能なメモリデバイス。
    """
    # @intent:pre-condition アドレスはデバイスの有効範囲内であり、データは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for memory of size {self._size}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

# @intent:responsibility プログラムメモリ（フラッシュ）の機能を提供します。
class ROM(Device):
    """
    実行中は読み込み専用のメモリデバイス。
    命令からの書き込み経路は持たず、ローダー用の load_data / load_block と erase 経由でのみ変更できます。
    """
    # @intent:responsibility ROMの内容を初期化するためのバックドアメソッドです。
    def load_data(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for ROM of size {self._size}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility 連続したバイト列を指定アドレスから書き込みます。
    # @intent:pre-condition 書き込み範囲全体がROM内に収まっている必要があります（呼び出し元で検証）。
    def load_block(self, address: int, data: bytes) -> None:
        end = address + len(data)
        if address < 0 or end > self._size:
            raise IndexError(f"Block {address:#06x}-{end:#06x} out of bounds for ROM of size {self._size}.")
        self._memory[address:end] = data

    # @intent:responsibility ROM全体を消去します。
    def erase(self) -> None:
        self.clear()

# @intent:responsibility データメモリ（SRAM）と、その上に置かれるスタックの境界を管理します。
class DataMemory(RAM):
    """
    SRAMデバイス。スタックポインタはこの領域のアドレスを指します。
    SPが領域外に出る操作は、例外ではなく設定された境界値への補正で回復します。
    """
    def __init__(self, size: int, stack: Optional[StackLayout] = None):
        super().__init__(size)
        self._stack = stack if stack is not None else StackLayout()

    @property
    def stack(self) -> StackLayout:
        return self._stack

    # @intent:responsibility SPの移動結果を有効範囲 [0, size) に収めます。
    # @intent:post-condition 戻り値は常にSRAM内のアドレスです。
    def clamp_stack_pointer(self, sp: int) -> int:
        if sp < 0:
            logger.warning("Stack overflow! SP=%#06x, reset to %#06x", sp, self._stack.low_reset)
            return self._stack.low_reset
        if sp >= self._size:
            logger.warning("Stack underflow! SP=%#06x, reset to %#06x", sp, self._stack.high_reset)
            return self._stack.high_reset
        return sp
