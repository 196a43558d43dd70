# breadboard/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、デコード済み命令（Operation）と、1ステップ実行後のCPU状態を
記録した不変のデータ構造を定義します。
UIへの情報提供と、テスト時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from breadboard.core.state import CpuState


# @intent:responsibility デコードされた命令の詳細を記録します。
# @intent:rationale mnemonicを命令種別のタグとし、オペランドは型付きフィールドに保持します。
#                  どのフィールドが有効かは命令種別によって決まり、未使用のものはNoneのままです。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令（オペコード、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str  # 例: "9403"
    mnemonic: str  # 例: "INC"
    operands: List[str] = field(default_factory=list)  # 表示用 例: ["R16"]
    dest: Optional[int] = None  # 転送先レジスタ番号 (Rd)
    src: Optional[int] = None  # 転送元レジスタ番号 (Rr)
    value: Optional[int] = None  # 8bit即値 (K)
    offset: Optional[int] = None  # 符号付きワードオフセット (k)
    length: int = 2  # 命令のバイト長（全命令1ワード）

    # @intent:responsibility 表示用のアセンブリ表記を返します。
    @property
    def assembly(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、表示用の命令表記）を記録するデータクラス。
    """
    step_count: int
    symbol_info: Optional[str] = None  # 例: "RCALL .-3"


# @intent:responsibility ある一時点におけるCPUの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1ステップ実行直後のCPU状態と、実行された命令を記録した不変のデータ構造。
    stateは生成時点のコピーであり、その後のステップで変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
