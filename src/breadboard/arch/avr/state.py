# src/breadboard/arch/avr/state.py
"""
AVR CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from breadboard.core.state import CpuState

REGISTER_COUNT = 32

# AVR ステータスレジスタ (SREG) ビットマスク
# @intent:constant SREG内の各フラグビットの位置を定義します。
C_FLAG = 0b00000001  # Carry
Z_FLAG = 0b00000010  # Zero
N_FLAG = 0b00000100  # Negative
V_FLAG = 0b00001000  # Two's Complement Overflow
S_FLAG = 0b00010000  # Sign (N xor V)
H_FLAG = 0b00100000  # Half Carry
T_FLAG = 0b01000000  # Bit Copy Storage
I_FLAG = 0b10000000  # Global Interrupt Enable

# @intent:responsibility AVR CPUの汎用レジスタ(R0-R31)、SREG、PC、SPの状態を保持します。
@dataclass
class AvrCpuState(CpuState):
    """
    AVR CPUのレジスタ状態を保持するデータクラス。
    pcはフラッシュ上のバイトアドレス（常に偶数）、spはSRAM上のアドレスです。
    """
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    sreg: int = 0x00

    # @intent:accessor SREGの各フラグビットにアクセスするためのプロパティを提供します。
    # @intent:rationale フラグ操作の可読性を高め、SREGへのビット操作を隠蔽するためにプロパティを使用します。

    @property
    def flag_c(self) -> bool:
        return (self.sreg & C_FLAG) != 0

    @flag_c.setter
    def flag_c(self, value: bool) -> None:
        if value: self.sreg |= C_FLAG
        else: self.sreg &= ~C_FLAG

    @property
    def flag_z(self) -> bool:
        return (self.sreg & Z_FLAG) != 0

    @flag_z.setter
    def flag_z(self, value: bool) -> None:
        if value: self.sreg |= Z_FLAG
        else: self.sreg &= ~Z_FLAG

    @property
    def flag_n(self) -> bool:
        return (self.sreg & N_FLAG) != 0

    @flag_n.setter
    def flag_n(self, value: bool) -> None:
        if value: self.sreg |= N_FLAG
        else: self.sreg &= ~N_FLAG

    @property
    def flag_v(self) -> bool:
        return (self.sreg & V_FLAG) != 0

    @flag_v.setter
    def flag_v(self, value: bool) -> None:
        if value: self.sreg |= V_FLAG
        else: self.sreg &= ~V_FLAG

    @property
    def flag_s(self) -> bool:
        return (self.sreg & S_FLAG) != 0

    @flag_s.setter
    def flag_s(self, value: bool) -> None:
        if value: self.sreg |= S_FLAG
        else: self.sreg &= ~S_FLAG

    @property
    def flag_h(self) -> bool:
        return (self.sreg & H_FLAG) != 0

    @flag_h.setter
    def flag_h(self, value: bool) -> None:
        if value: self.sreg |= H_FLAG
        else: self.sreg &= ~H_FLAG

    @property
    def flag_t(self) -> bool:
        return (self.sreg & T_FLAG) != 0

    @flag_t.setter
    def flag_t(self, value: bool) -> None:
        if value: self.sreg |= T_FLAG
        else: self.sreg &= ~T_FLAG

    @property
    def flag_i(self) -> bool:
        return (self.sreg & I_FLAG) != 0

    @flag_i.setter
    def flag_i(self, value: bool) -> None:
        if value: self.sreg |= I_FLAG
        else: self.sreg &= ~I_FLAG
