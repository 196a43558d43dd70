# src/breadboard/arch/avr/cpu.py
"""
AVR CPUエミュレーションの中心モジュール。
"""
import logging
from typing import Dict, List

from breadboard.core.errors import UnknownOpcode
from breadboard.core.snapshot import Operation
from breadboard.common.types import DisassemblyRow, RegisterLayoutInfo, RegisterInfo
from breadboard.core.cpu import AbstractCpu
from breadboard.arch.avr.state import AvrCpuState, REGISTER_COUNT
from breadboard.transport.memory import ROM, DataMemory
from breadboard.arch.avr.instructions import decode_opcode, execute_instruction
from breadboard.arch.avr import disassembler

logger = logging.getLogger(__name__)

# @intent:responsibility AVR CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class AvrCpu(AbstractCpu):
    """
    AVR 8bitマイコン（命令サブセット）をエミュレートするクラス。
    """
    # @intent:responsibility AvrCpuを初期化します。省略時は16KBフラッシュ、1KB SRAMの構成になります。
    def __init__(self, program_memory: ROM = None, data_memory: DataMemory = None):
        if program_memory is None:
            program_memory = ROM(16384)
        if data_memory is None:
            data_memory = DataMemory(1024)
        if program_memory.get_size() % 2 != 0:
            raise ValueError("Program memory size must be a whole number of 16-bit words.")
        super().__init__(program_memory, data_memory)

    # @intent:responsibility AVRの初期状態を生成します。SPはスタックの最上位から始まります。
    def _create_initial_state(self) -> AvrCpuState:
        return AvrCpuState(sp=self._data_memory.stack.top)

    # --- Memory ---

    @property
    def program_memory(self) -> ROM:
        """ローダーが書き込み先として使うフラッシュデバイス。"""
        return self._program_memory

    # --- Read accessors ---

    @property
    def registers(self) -> bytes:
        return bytes(self._state.registers)

    @property
    def sreg(self) -> int:
        return self._state.sreg

    @property
    def pc(self) -> int:
        return self._state.pc

    @property
    def sp(self) -> int:
        return self._state.sp

    @property
    def flash(self) -> bytes:
        return self._program_memory.dump()

    @property
    def sram(self) -> bytes:
        return self._data_memory.dump()

    # --- Instruction cycle ---

    # @intent:responsibility PCから2バイトを読み出し、リトルエンディアンで16bitオペコードを組み立てます。
    def _fetch(self) -> int:
        pc = self._state.pc
        low = self._program_memory.read(pc)
        high = self._program_memory.read(pc + 1)
        return (high << 8) | low

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._data_memory, self._program_memory.get_size())

    # @intent:responsibility 次に実行される命令の表記を返します。表示用のため失敗しません。
    def get_instruction_mnemonic(self) -> str:
        opcode = self._fetch()
        try:
            operation = self._decode(opcode)
        except UnknownOpcode:
            return "NOP"
        return operation.assembly

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        reg_map = {f"R{i}": value for i, value in enumerate(s.registers)}
        reg_map.update({"PC": s.pc, "SP": s.sp, "SREG": s.sreg})
        return reg_map

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        half = REGISTER_COUNT // 2
        return [
            RegisterLayoutInfo("R0-R15", [RegisterInfo(f"R{i}", 8) for i in range(half)]),
            RegisterLayoutInfo("R16-R31", [RegisterInfo(f"R{i}", 8) for i in range(half, REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers/Status", [
                RegisterInfo("PC", 16), RegisterInfo("SP", 16), RegisterInfo("SREG", 8)
            ]),
        ]

    # @intent:responsibility UI表示用に、現在のフラグ状態を上位ビットから順に提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "I": s.flag_i, "T": s.flag_t, "H": s.flag_h, "S": s.flag_s,
            "V": s.flag_v, "N": s.flag_n, "Z": s.flag_z, "C": s.flag_c,
        }

    # @intent:responsibility 指定範囲のプログラムメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyRow]:
        return disassembler.disassemble(self._program_memory, start_addr, length)
