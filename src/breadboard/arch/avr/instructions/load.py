# src/breadboard/arch/avr/instructions/load.py
"""
転送・スタック操作命令の実装。
"""
from breadboard.core.snapshot import Operation
from breadboard.transport.memory import DataMemory
from breadboard.arch.avr.state import AvrCpuState
from .base import reg_d5, reg_d4_upper, immediate8, push_byte, pop_byte

# --- LDI ---
# @intent:responsibility LDI Rd, K (1110 KKKK dddd KKKK) をデコードします。Rdは R16-R31 に限られます。
def decode_ldi(opcode: int) -> Operation:
    dest = reg_d4_upper(opcode)
    value = immediate8(opcode)
    return Operation(f"{opcode:04X}", "LDI", [f"R{dest}", f"0x{value:02X}"], dest=dest, value=value)

# @intent:responsibility LDI命令を実行します。フラグは変化しません。
def execute_ldi(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.registers[op.dest] = op.value

# --- PUSH/POP ---
# @intent:responsibility PUSH Rr (1001 001r rrrr 1111) をデコードします。
def decode_push(opcode: int) -> Operation:
    src = reg_d5(opcode)
    return Operation(f"{opcode:04X}", "PUSH", [f"R{src}"], src=src)

# @intent:responsibility PUSH命令を実行し、レジスタの内容をスタックにプッシュします。
def execute_push(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    push_byte(state, memory, state.registers[op.src])

# @intent:responsibility POP Rd (1001 000d dddd 1111) をデコードします。
def decode_pop(opcode: int) -> Operation:
    dest = reg_d5(opcode)
    return Operation(f"{opcode:04X}", "POP", [f"R{dest}"], dest=dest)

# @intent:responsibility POP命令を実行し、スタックからレジスタへポップします。
def execute_pop(state: AvrCpuState, memory: DataMemory, op: Operation) -> None:
    state.registers[op.dest] = pop_byte(state, memory)
