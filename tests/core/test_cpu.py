# tests/core/test_cpu.py
"""
breadboard.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from breadboard.core.state import CpuState
from breadboard.core.cpu import AbstractCpu
from breadboard.core.errors import UnknownOpcode
from breadboard.core.snapshot import Snapshot, Operation
from breadboard.transport.memory import ROM, DataMemory
from breadboard.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite 抽象CPUの状態管理（reset/erase/reinitialize）と命令サイクルを検証します。

class FakeCpu(AbstractCpu):
    """オペコード0x00だけを知っている最小のCPU。実行のたびにデータメモリの先頭をインクリメントします。"""

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0, sp=0x0F)

    def _fetch(self) -> int:
        return self._program_memory.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        if opcode != 0x00:
            raise UnknownOpcode(opcode)
        return Operation(opcode_hex="00", mnemonic="NOP")

    def _execute(self, operation: Operation) -> None:
        self._data_memory.write(0, (self._data_memory.read(0) + 1) & 0xFF)
        self._state.pc += 2

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Pointers", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return []


@pytest.fixture
def cpu():
    return FakeCpu(ROM(32), DataMemory(16))


class TestAbstractCpu:
    def test_initial_state(self, cpu):
        state = cpu.get_state()
        assert state.pc == 0
        assert state.sp == 0x0F
        assert cpu.step_count == 0

    def test_step_returns_snapshot(self, cpu):
        snapshot = cpu.step()
        assert isinstance(snapshot, Snapshot)
        assert snapshot.operation.mnemonic == "NOP"
        assert snapshot.state.pc == 2
        assert snapshot.metadata.step_count == 1
        assert cpu.step_count == 1

    def test_snapshot_is_not_affected_by_later_steps(self, cpu):
        first = cpu.step()
        cpu.step()
        assert first.state.pc == 2
        assert cpu.get_state().pc == 4

    def test_get_state_returns_copy(self, cpu):
        state = cpu.get_state()
        state.pc = 0x10
        assert cpu.get_state().pc == 0

    def test_decode_error_leaves_state_untouched(self, cpu):
        cpu._program_memory.load_data(0, 0xFF)
        with pytest.raises(UnknownOpcode):
            cpu.step()
        assert cpu.get_state().pc == 0
        assert cpu._data_memory.read(0) == 0
        assert cpu.step_count == 0

    def test_reset_keeps_program_memory(self, cpu):
        cpu._program_memory.load_data(10, 0xAB)
        cpu.step()
        cpu.reset()
        assert cpu.get_state().pc == 0
        assert cpu.step_count == 0
        assert cpu._data_memory.read(0) == 0
        assert cpu._program_memory.read(10) == 0xAB

    def test_erase_clears_program_memory_and_pc_only(self, cpu):
        cpu._program_memory.load_data(10, 0xAB)
        cpu.step()
        cpu.erase()
        assert cpu._program_memory.read(10) == 0
        assert cpu.get_state().pc == 0
        # データメモリとステップ数は残る
        assert cpu._data_memory.read(0) == 1
        assert cpu.step_count == 1

    def test_reinitialize_clears_everything(self, cpu):
        cpu._program_memory.load_data(10, 0xAB)
        cpu.step()
        cpu.reinitialize()
        assert cpu._program_memory.read(10) == 0
        assert cpu._data_memory.read(0) == 0
        assert cpu.get_state().pc == 0
        assert cpu.step_count == 0
