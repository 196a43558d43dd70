# src/breadboard/arch/avr/instructions/__init__.py
"""
AVR命令セット（サブセット）実装パッケージ。
"""
from breadboard.core.errors import UnknownOpcode, UnsupportedInstruction
from breadboard.core.snapshot import Operation
from breadboard.transport.memory import DataMemory
from breadboard.arch.avr.state import AvrCpuState
from .maps import DECODE_TABLE, EXECUTE_MAP

# @intent:responsibility 16bitオペコードをデコードします。副作用はありません。
def decode_opcode(opcode: int) -> Operation:
    """
    AVRのオペコードをビットパターンで照合し、Operationオブジェクトを返します。
    どのパターンにも一致しない場合は UnknownOpcode を送出します。
    """
    for mask, value, decoder in DECODE_TABLE:
        if opcode & mask == value:
            return decoder(opcode)
    raise UnknownOpcode(opcode)

# @intent:responsibility デコードされたAVR命令を実行します。
# @intent:pre-condition state.pcは実行する命令自身のアドレスを指している必要があります。
# @intent:post-condition 分岐しない命令ではPCが2進み、分岐命令では実行関数が設定したPCになります。
#                        いずれの場合もPCはプログラムメモリ内に折り返されます。
def execute_instruction(operation: Operation, state: AvrCpuState, memory: DataMemory, program_size: int) -> None:
    """
    デコードされた命令を実行し、CPUの状態を変更します。
    実行関数が無い命令は、状態を変更する前に UnsupportedInstruction を送出します。
    """
    executor = EXECUTE_MAP.get(operation.mnemonic)
    if executor is None:
        raise UnsupportedInstruction(operation.mnemonic)

    # 分岐命令は「次の命令」を起点にオフセットを計算するため、実行前にPCを進めておく
    state.advance_pc(operation.length, program_size)
    executor(state, memory, operation)
    state.wrap_pc(program_size)
