"""
UIとコアの間で受け渡す表示用の型定義。
"""
from typing import List, NamedTuple

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義（例: "R16-R31", "Pointers/Status"）。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

# @intent:data_structure 逆アセンブル結果の1行。タプルとしても比較・展開できます。
class DisassemblyRow(NamedTuple):
    address: int  # フラッシュ上のバイトアドレス
    hex_bytes: str  # メモリ上の並び 例: "1F EF"
    mnemonic: str  # 例: "LDI R17, 0xFF"、認識できないワードは ".dw 0xFFFF"
