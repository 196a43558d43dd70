from dataclasses import dataclass, field

THEME_MODES = ("Dark", "Light")

@dataclass
class MemoryLayout:
    flash_size: int = 16384  # 16K Bytes In-System Programmable Flash
    sram_size: int = 1024  # 1K Byte Internal SRAM

# @intent:data_structure スタックポインタの初期値と、範囲外に出た時の補正値。
# @intent:rationale 補正値はデータメモリのサイズから導出せず、設定値として明示的に持つ。
@dataclass
class StackLayout:
    top: int = 0x3FF
    low_reset: int = 0x3FF  # SPが0を下回った時の値
    high_reset: int = 0x000  # SPがSRAMサイズ以上になった時の値

@dataclass
class DisplayConfig:
    memory_bytes_per_row: int = 8
    memory_bytes_per_column: int = 128

@dataclass
class ThemeConfig:
    mode: str = "Dark"  # "Dark", "Light"

@dataclass
class SystemConfig:
    memory: MemoryLayout = field(default_factory=MemoryLayout)
    stack: StackLayout = field(default_factory=StackLayout)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    theme: ThemeConfig = field(default_factory=ThemeConfig)
