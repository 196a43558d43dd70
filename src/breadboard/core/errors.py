# breadboard/core/errors.py
"""
シミュレータ全体で使用する例外階層。

ローダー、CPUコア、設定の各レイヤーは、ここで定義された例外だけを呼び出し元へ送出します。
UI層は BreadboardError を捕捉するだけで、全ての失敗をユーザーに提示できます。
"""


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラスです。
class BreadboardError(Exception):
    """Base error for simulator failures."""


# --- Loader ---

# @intent:responsibility プログラムイメージのロードに関する失敗を表します。
class LoaderError(BreadboardError):
    """Raised when a program image cannot be placed into program memory."""


class CapacityExceeded(LoaderError):
    """イメージがプログラムメモリより大きい場合に送出されます。"""

    def __init__(self, size: int, capacity: int):
        super().__init__(f"Binary too large: {size} bytes (max: {capacity})")
        self.size = size
        self.capacity = capacity


class MalformedRecord(LoaderError):
    """HEXレコードの構造（長さ、16進文字、バイト数）が不正な場合に送出されます。"""


class UnsupportedRecordType(LoaderError):
    """データ(0x00)とEOF(0x01)以外のレコードタイプに対して送出されます。"""

    def __init__(self, record_type: int):
        super().__init__(f"Unsupported record type: {record_type:02X}")
        self.record_type = record_type


class AddressOutOfRange(LoaderError):
    """データレコードの書き込み先がプログラムメモリの外にある場合に送出されます。"""

    def __init__(self, address: int, capacity: int):
        super().__init__(
            f"Hex out of bounds: address {address:#06X} (addressable to {capacity - 1:#06X})"
        )
        self.address = address
        self.capacity = capacity


# --- Execution ---

# @intent:responsibility 命令サイクル（デコード、実行）中の失敗を表します。
class ExecutionError(BreadboardError):
    """Raised when a step cannot be completed."""


class UnknownOpcode(ExecutionError):
    """どのビットパターンにも一致しないオペコード。"""

    def __init__(self, opcode: int):
        super().__init__(f"Unable to decode instruction {opcode:#06X}")
        self.opcode = opcode


class UnsupportedInstruction(ExecutionError):
    """デコードはできたが、実行処理が用意されていない命令。"""

    def __init__(self, mnemonic: str):
        super().__init__(f"Unable to execute instruction {mnemonic}")
        self.mnemonic = mnemonic


# --- Config ---

class ConfigError(BreadboardError, ValueError):
    """設定値が不正な場合に送出されます。"""
