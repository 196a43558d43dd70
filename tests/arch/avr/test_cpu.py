# tests/arch/avr/test_cpu.py
"""
AvrCpuの統合テスト。
ローダーでプログラムを配置し、stepを繰り返した結果を検証します。
"""
import pytest

from breadboard.core.errors import UnknownOpcode, UnsupportedInstruction
from breadboard.config.models import SystemConfig, MemoryLayout
from breadboard.config.builder import SystemBuilder
from breadboard.arch.avr import AvrCpu, AvrCpuState
from breadboard.loader.loader import ProgramLoader
from breadboard.transport.memory import ROM, DataMemory

# @intent:test_suite AvrCpuの命令サイクル、アクセサ、表示用APIを検証します。

@pytest.fixture
def cpu():
    return AvrCpu()

def load(cpu: AvrCpu, program: bytes) -> None:
    ProgramLoader(cpu).load_from_vector(program)


class TestAvrCpuLifecycle:
    def test_fresh_state(self, cpu):
        assert cpu.pc == 0
        assert cpu.sp == 0x3FF
        assert cpu.sreg == 0
        assert cpu.registers == bytes(32)
        assert cpu.flash == bytes(16384)
        assert cpu.sram == bytes(1024)
        assert isinstance(cpu.get_state(), AvrCpuState)

    def test_odd_flash_size_is_rejected(self):
        with pytest.raises(ValueError):
            AvrCpu(ROM(15), DataMemory(16))

    def test_built_from_config(self):
        config = SystemConfig(memory=MemoryLayout(flash_size=256, sram_size=1024))
        cpu = SystemBuilder().build_system(config)
        assert len(cpu.flash) == 256
        assert cpu.sp == config.stack.top

    def test_reset_keeps_program(self, cpu):
        load(cpu, bytes([0x00, 0xE1, 0x13, 0xE0]))
        cpu.step()
        cpu.step()
        cpu.reset()
        assert cpu.pc == 0
        assert cpu.registers == bytes(32)
        assert cpu.flash[:4] == bytes([0x00, 0xE1, 0x13, 0xE0])

    def test_erase_keeps_registers(self, cpu):
        load(cpu, bytes([0x00, 0xE1]))
        cpu.step()
        cpu.erase()
        assert cpu.pc == 0
        assert cpu.flash == bytes(16384)
        assert cpu.registers[16] == 0x10


class TestAvrCpuExecution:
    def test_ldi(self, cpu):
        load(cpu, bytes([0x1F, 0xEF]))
        snapshot = cpu.step()
        assert cpu.registers[17] == 0xFF
        assert cpu.pc == 2
        assert snapshot.operation.assembly == "LDI R17, 0xFF"

    def test_ldi_add(self, cpu):
        load(cpu, bytes([0x00, 0xE1, 0x13, 0xE0, 0x01, 0x0F]))
        for _ in range(3):
            cpu.step()
        assert cpu.registers[16] == 19
        assert cpu.registers[17] == 3
        assert cpu.pc == 6
        assert cpu.sreg == 0x00

    def test_subroutine_call_and_return(self, cpu):
        # 0: LDI R16, 0x12 / 2: RJMP .+4 / 4: INC R16 / 6: RET / 8: RCALL .-6
        load(cpu, bytes([0x02, 0xE1, 0x02, 0xC0, 0x03, 0x95, 0x08, 0x95, 0xFD, 0xDF]))
        cpu.step()  # LDI
        cpu.step()  # RJMP -> 8
        assert cpu.pc == 8
        cpu.step()  # RCALL -> 4
        assert cpu.pc == 4
        assert cpu.sp == 0x3FD
        assert cpu.sram[0x3FE] == 0x0A
        assert cpu.sram[0x3FD] == 0x00
        cpu.step()  # INC
        cpu.step()  # RET
        assert cpu.registers[16] == 0x13
        assert cpu.pc == 10
        assert cpu.sp == 0x3FF
        assert cpu.step_count == 5

    def test_unknown_opcode_propagates(self, cpu):
        load(cpu, bytes([0xFF, 0xFF]))
        with pytest.raises(UnknownOpcode):
            cpu.step()
        assert cpu.pc == 0
        assert cpu.step_count == 0

    def test_unsupported_instruction_propagates(self, cpu):
        load(cpu, bytes([0x88, 0x95]))  # SLEEP
        with pytest.raises(UnsupportedInstruction):
            cpu.step()
        assert cpu.pc == 0

    def test_snapshot_is_independent(self, cpu):
        load(cpu, bytes([0x00, 0xE1, 0x03, 0x95]))
        first = cpu.step()
        cpu.step()
        assert first.state.registers[16] == 0x10
        assert cpu.registers[16] == 0x11


class TestAvrCpuAccessors:
    def test_accessors_are_copies(self, cpu):
        registers = cpu.registers
        assert isinstance(registers, bytes)
        state = cpu.get_state()
        state.registers[0] = 0xFF
        assert cpu.registers[0] == 0

    def test_mnemonic_of_next_instruction(self, cpu):
        load(cpu, bytes([0x1F, 0xEF]))
        assert cpu.get_instruction_mnemonic() == "LDI R17, 0xFF"
        assert cpu.pc == 0

    def test_mnemonic_falls_back_to_nop(self, cpu):
        load(cpu, bytes([0xFF, 0xFF]))
        assert cpu.get_instruction_mnemonic() == "NOP"

    def test_register_map(self, cpu):
        reg_map = cpu.get_register_map()
        assert reg_map["R31"] == 0
        assert reg_map["SP"] == 0x3FF
        assert set(reg_map) >= {"PC", "SP", "SREG"}

    def test_register_layout(self, cpu):
        layout = cpu.get_register_layout()
        assert [group.group_name for group in layout] == ["R0-R15", "R16-R31", "Pointers/Status"]
        assert sum(len(group.registers) for group in layout) == 35

    def test_flag_state_order(self, cpu):
        load(cpu, bytes([0x08, 0x94]))  # SEC
        cpu.step()
        flags = cpu.get_flag_state()
        assert list(flags) == ["I", "T", "H", "S", "V", "N", "Z", "C"]
        assert flags["C"] is True
        assert flags["Z"] is False

    def test_disassemble(self, cpu):
        load(cpu, bytes([0x02, 0xE1, 0x02, 0xC0, 0xFF, 0xFF, 0xFD, 0xDF]))
        rows = cpu.disassemble(0, 8)
        assert rows == [
            (0, "02 E1", "LDI R16, 0x12"),
            (2, "02 C0", "RJMP .+4"),
            (4, "FF FF", ".dw 0xFFFF"),
            (6, "FD DF", "RCALL .-6"),
        ]

    def test_disassemble_aligns_and_clamps(self, cpu):
        rows = cpu.disassemble(16383, 10)
        assert rows == [(16382, "00 00", "NOP")]
