from breadboard.transport.memory import ROM, DataMemory
from breadboard.arch.avr.cpu import AvrCpu
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、フラッシュとSRAMのデバイスを生成し、CPUに接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> AvrCpu:
        program_memory = ROM(config.memory.flash_size)
        data_memory = DataMemory(config.memory.sram_size, config.stack)
        return AvrCpu(program_memory, data_memory)
