# lc3_emu/arch/lc3/state.py
"""
LC-3 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from lc3_emu.core.state import CpuState

PC_START = 0x3000

# LC-3 コンディションフラグ
# @intent:constant COND レジスタは常にこのうち1つだけを保持します。
FL_POS = 1 << 0  # Positive
FL_ZRO = 1 << 1  # Zero
FL_NEG = 1 << 2  # Negative

REGISTER_COUNT = 8

# @intent:responsibility LC-3 CPUのレジスタ（R0〜R7, PC, COND）の状態を保持します。
@dataclass
class Lc3CpuState(CpuState):
    """
    LC-3 CPUのレジスタ状態を保持するデータクラス。
    strict_isa が有効な場合、NOT/LD/LDRもフラグを更新し、JSR/JSRRはR7に戻り先を保存します。
    """
    pc: int = PC_START
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    cond: int = FL_ZRO
    strict_isa: bool = False

    # @intent:responsibility 指定レジスタの値の符号に基づいてCONDを更新します。
    # @intent:post-condition FL_POS, FL_ZRO, FL_NEG のちょうど1つがセットされます。
    def update_flags(self, r: int) -> None:
        value = self.registers[r]
        if value == 0:
            self.cond = FL_ZRO
        elif value >> 15:  # a 1 in the left-most bit indicates negative
            self.cond = FL_NEG
        else:
            self.cond = FL_POS

    # @intent:accessor レジスタに16bitでマスクした値を書き込みます。
    def set_register(self, r: int, value: int) -> None:
        self.registers[r] = value & 0xFFFF

    @property
    def flag_p(self) -> bool:
        return self.cond == FL_POS

    @property
    def flag_z(self) -> bool:
        return self.cond == FL_ZRO

    @property
    def flag_n(self) -> bool:
        return self.cond == FL_NEG
