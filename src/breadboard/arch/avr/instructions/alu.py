# src/breadboard/arch/avr/instructions/alu.py
"""
算術演算命令とフラグ操作命令の実装。
"""
from breadboard.core.snapshot import Operation
from breadboard.transport.memory import DataMemory
from breadboard.arch.avr.state import AvrCpuState
from .base import bit, reg_d5, reg_r5

# @intent:utility_function 8ビット加算の前後のビットパターンからフラグ(H, S, V, N, Z, C)を更新します。
def update_flags_add8(state: AvrCpuState, rd: int, rr: int, r: int) -> None:
    rd3, rr3, r3 = bit(rd, 3), bit(rr, 3), bit(r, 3)
    rd7, rr7, r7 = bit(rd, 7), bit(rr, 7), bit(r, 7)

    half_carry = (rd3 & rr3) | (rr3 & ~r3) | (~r3 & rd3)
    overflow = (rd7 & rr7 & ~r7) | (~rd7 & ~rr7 & r7)
    carry = (rd7 & rr7) | (rr7 & ~r7) | (~r7 & rd7)
    negative = r7 == 1

    state.flag_h = (half_carry & 1) == 1
    state.flag_v = (overflow & 1) == 1
    state.flag_n = negative
    state.flag_s = negative != state.flag_v
    state.flag_z = r == 0
    state.flag_c = (carry & 1) == 1

# @intent:utility_function 8ビット減算の前後のビットパターンからフラグ(H, S, V, N, Z, C)を更新します。
def update_flags_sub8(state: AvrCpuState, rd: int, rr: int, r: int) -> None:
    rd3, rr3, r3 = bit(rd, 3), bit(rr, 3), bit(r, 3)
    rd7, rr7, r7 = bit(rd, 7), bit(rr, 7), bit(r, 7)

    half_borrow = (~rd3 & rr3) | (rr3 & r3) | (r3 & ~rd3)
    overflow = (rd7 & ~rr7 & ~r7) | (~rd7 & rr7 & r7)
    borrow = (~rd7 & rr7) | (rr7 & r7) | (r7 & ~rd7)
    negative = r7 == 1

    state.flag_h = (half_borrow & 1) == 1
    state.flag_v = (overflow & 1) == 1
    state.flag_n = negative
    state.flag_s = negative != state.flag_v
    state.flag_z = r == 0
    state.flag_c = (borrow & 1) == 1

# @intent:utility_function INC/DECの結果からフラグ(S, V, N, Z)を更新します。H, Cは変化しません。
# @intent:rationale 第2オペランドが無いため、オーバーフローは結果が番兵値(INC: 0x80, DEC: 0x7F)かどうかで判定します。
def update_flags_step8(state: AvrCpuState, r: int, overflow_sentinel: int) -> None:
    negative = bit(r, 7) == 1
    overflow = r == overflow_sentinel
    state.flag_v = overflow
    state.flag_n = negative
    state.flag_s = negative != overflow
    state.flag_z = r == 0

# --- ADD ---
# @intent:responsibility ADD Rd, Rr (0000 11rd dddd rrrr) をデコードします。
def decode_add(opcode: int) -> Operation:
    dest, src = reg_d5(opcode), reg_r5(opcode)
    return Operation(f"{opcode:04X}", "ADD", [f"R{dest}", f"R{src}"], dest=dest, src=src)

# @intent:responsibility ADD命令を実行し、Rd + Rr をRdに格納し、フラグを更新します。
def execute_add(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    rd = state.registers[op.dest]
    rr = state.registers[op.src]
    r = (rd + rr) & 0xFF
    state.registers[op.dest] = r
    update_flags_add8(state, rd, rr, r)

# --- SUB ---
# @intent:responsibility SUB Rd, Rr (0001 10rd dddd rrrr) をデコードします。
def decode_sub(opcode: int) -> Operation:
    dest, src = reg_d5(opcode), reg_r5(opcode)
    return Operation(f"{opcode:04X}", "SUB", [f"R{dest}", f"R{src}"], dest=dest, src=src)

# @intent:responsibility SUB命令を実行し、Rd - Rr をRdに格納し、フラグを更新します。
def execute_sub(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    rd = state.registers[op.dest]
    rr = state.registers[op.src]
    r = (rd - rr) & 0xFF
    state.registers[op.dest] = r
    update_flags_sub8(state, rd, rr, r)

# --- INC ---
# @intent:responsibility INC Rd (1001 010d dddd 0011) をデコードします。
def decode_inc(opcode: int) -> Operation:
    dest = reg_d5(opcode)
    return Operation(f"{opcode:04X}", "INC", [f"R{dest}"], dest=dest)

def execute_inc(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    r = (state.registers[op.dest] + 1) & 0xFF
    state.registers[op.dest] = r
    update_flags_step8(state, r, 0x80)

# --- DEC ---
# @intent:responsibility DEC Rd (1001 010d dddd 1010) をデコードします。
def decode_dec(opcode: int) -> Operation:
    dest = reg_d5(opcode)
    return Operation(f"{opcode:04X}", "DEC", [f"R{dest}"], dest=dest)

def execute_dec(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    r = (state.registers[op.dest] - 1) & 0xFF
    state.registers[op.dest] = r
    update_flags_step8(state, r, 0x7F)

# --- SEC / CLC ---
def decode_sec(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "SEC")

def execute_sec(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.flag_c = True

def decode_clc(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "CLC")

def execute_clc(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.flag_c = False
