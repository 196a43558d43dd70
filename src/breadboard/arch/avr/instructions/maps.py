# src/breadboard/arch/avr/instructions/maps.py
"""
オペコードのビットパターンと命令実装のマッピング定義。
"""
from . import load
from . import alu
from . import control

# @intent:map (mask, value, デコード関数) のテーブル。opcode & mask == value で一致とみなします。
# @intent:rationale 各エントリのパターンは互いに素になるように選んでいるため、照合順序に意味はありません。
#                  新しいエントリを追加した場合は tests/arch/avr/test_decode.py の全域チェックで重複が無いことを確認すること。
DECODE_TABLE = [
    # Control
    (0xFFFF, 0x0000, control.decode_nop),
    (0xF000, 0xC000, control.decode_rjmp),
    (0xF000, 0xD000, control.decode_rcall),
    (0xFFFF, 0x9508, control.decode_ret),
    (0xFFFF, 0x9518, control.decode_reti),
    (0xFFFF, 0x9588, control.decode_sleep),
    (0xFFFF, 0x9598, control.decode_break),
    (0xFFFF, 0x95A8, control.decode_wdr),

    # ALU
    (0xFC00, 0x0C00, alu.decode_add),
    (0xFC00, 0x1800, alu.decode_sub),
    (0xFE0F, 0x9403, alu.decode_inc),
    (0xFE0F, 0x940A, alu.decode_dec),
    (0xFFFF, 0x9408, alu.decode_sec),
    (0xFFFF, 0x9488, alu.decode_clc),

    # Load/Stack
    (0xF000, 0xE000, load.decode_ldi),
    (0xFE0F, 0x920F, load.decode_push),
    (0xFE0F, 0x900F, load.decode_pop),
]

# @intent:map ニーモニック（命令種別のタグ）から実行関数へのマッピングテーブル。
# ここに無い命令はデコードできても実行できません（UnsupportedInstruction）。
EXECUTE_MAP = {
    # Control
    "NOP": control.execute_nop,
    "RJMP": control.execute_rjmp,
    "RCALL": control.execute_rcall,
    "RET": control.execute_ret,
    "RETI": control.execute_reti,

    # ALU
    "ADD": alu.execute_add,
    "SUB": alu.execute_sub,
    "INC": alu.execute_inc,
    "DEC": alu.execute_dec,
    "SEC": alu.execute_sec,
    "CLC": alu.execute_clc,

    # Load/Stack
    "LDI": load.execute_ldi,
    "PUSH": load.execute_push,
    "POP": load.execute_pop,
}
