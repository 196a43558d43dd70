# src/breadboard/arch/avr/instructions/control.py
"""
制御命令（相対分岐、サブルーチン、復帰、MCU制御）の実装。
"""
from breadboard.core.snapshot import Operation
from breadboard.transport.memory import DataMemory
from breadboard.arch.avr.state import AvrCpuState
from .base import offset12, format_relative, push_return_address, pop_return_address

# --- NOP ---
# @intent:responsibility NOP (No Operation) 命令をデコードします。
def decode_nop(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "NOP")

# @intent:responsibility NOP命令を実行します（PCの前進以外は何もしません）。
def execute_nop(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    # Intentional: NOP (No Operation)
    pass

# --- RJMP ---
# @intent:responsibility RJMP k (1100 kkkk kkkk kkkk) をデコードします。
def decode_rjmp(opcode: int) -> Operation:
    k = offset12(opcode)
    return Operation(f"{opcode:04X}", "RJMP", [format_relative(k)], offset=k)

# @intent:responsibility RJMP命令を実行し、次の命令を起点にワード単位で相対ジャンプします。
def execute_rjmp(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    # state.pcは既に次の命令 (PC + 1ワード) を指している
    state.pc = (state.pc // 2 + op.offset) * 2

# --- RCALL ---
# @intent:responsibility RCALL k (1101 kkkk kkkk kkkk) をデコードします。
def decode_rcall(opcode: int) -> Operation:
    k = offset12(opcode)
    return Operation(f"{opcode:04X}", "RCALL", [format_relative(k)], offset=k)

# @intent:responsibility RCALL命令を実行し、戻りアドレスをスタックにプッシュしてから相対ジャンプします。
def execute_rcall(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    return_addr = state.pc
    push_return_address(state, memory, return_addr)
    state.pc = (return_addr // 2 + op.offset) * 2

# --- RET ---
def decode_ret(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "RET")

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.pc = pop_return_address(state, memory)

# --- RETI ---
def decode_reti(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "RETI")

# @intent:responsibility RETI命令を実行します。RETと同じ復帰に加え、Iフラグをセットします。
def execute_reti(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.pc = pop_return_address(state, memory)
    state.flag_i = True

# --- MCU Control ---
# @intent:responsibility SLEEP/BREAK/WDRをデコードします。
# @intent:rationale 省電力、デバッガ、ウォッチドッグの各ハードウェアはエミュレートしないため、
#                  表示用に認識するだけで実行マップには登録しません。
def decode_sleep(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "SLEEP")

def decode_break(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "BREAK")

def decode_wdr(opcode: int) -> Operation:
    return Operation(f"{opcode:04X}", "WDR")
