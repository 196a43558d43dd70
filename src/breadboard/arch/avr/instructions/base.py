# src/breadboard/arch/avr/instructions/base.py
"""
AVR命令実装用の共通ユーティリティ。
オペランドフィールドの抽出と、スタック操作を提供します。
"""
from breadboard.transport.memory import DataMemory
from breadboard.arch.avr.state import AvrCpuState

# @intent:utility_function 8bit値の指定ビットを0/1で返します。
def bit(value: int, position: int) -> int:
    return (value >> position) & 1

# @intent:utility_function 5bitの転送先レジスタ番号 (ddddd, bit 4-8) を取り出します。
def reg_d5(opcode: int) -> int:
    return (opcode >> 4) & 0x1F

# @intent:utility_function 5bitの転送元レジスタ番号 (r: bit 9, rrrr: bit 0-3) を取り出します。
def reg_r5(opcode: int) -> int:
    return ((opcode >> 5) & 0x10) | (opcode & 0x0F)

# @intent:utility_function 上位半分のレジスタ番号 (R16-R31, dddd: bit 4-7) を取り出します。
def reg_d4_upper(opcode: int) -> int:
    return 0x10 | ((opcode >> 4) & 0x0F)

# @intent:utility_function 2つの4bitフィールド (KKKK: bit 8-11, KKKK: bit 0-3) から8bit即値を組み立てます。
def immediate8(opcode: int) -> int:
    return ((opcode >> 4) & 0xF0) | (opcode & 0x0F)

# @intent:utility_function 12bitの2の補数ワードオフセットを符号拡張します。
def offset12(opcode: int) -> int:
    k = opcode & 0x0FFF
    return k - 0x1000 if k & 0x0800 else k

# @intent:utility_function 相対分岐のオペランド表記（avr-objdump形式の ".+n" / ".-n"、単位はバイト）を返します。
def format_relative(offset: int) -> str:
    return f".{offset * 2:+d}"

# @intent:utility_function スタックに1バイトをプッシュします。SPは先に減算されます。
def push_byte(state: AvrCpuState, memory: DataMemory, value: int) -> None:
    state.sp = memory.clamp_stack_pointer(state.sp - 1)
    memory.write(state.sp, value & 0xFF)

# @intent:utility_function スタックから1バイトをポップします。読み出し後にSPを加算します。
def pop_byte(state: AvrCpuState, memory: DataMemory) -> int:
    value = memory.read(state.sp)
    state.sp = memory.clamp_stack_pointer(state.sp + 1)
    return value

# @intent:utility_function 戻りアドレス（バイトアドレス）をスタックにプッシュします。
# @intent:post-condition 下位バイトが高いアドレス、上位バイトが低いアドレスに置かれ、SPは上位バイトを指します。
def push_return_address(state: AvrCpuState, memory: DataMemory, address: int) -> None:
    push_byte(state, memory, address & 0xFF)
    push_byte(state, memory, (address >> 8) & 0xFF)

# @intent:utility_function push_return_addressと逆順にポップして戻りアドレスを復元します。
def pop_return_address(state: AvrCpuState, memory: DataMemory) -> int:
    high = pop_byte(state, memory)
    low = pop_byte(state, memory)
    return (high << 8) | low
