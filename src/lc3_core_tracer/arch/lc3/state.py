# src/lc3_core_tracer/arch/lc3/state.py
"""
LC-3 CPU固有の状態定義。
"""
from dataclasses import dataclass, field, replace
from typing import List

from lc3_core_tracer.core.state import CpuState
from lc3_core_tracer.common.types import WORD_MASK

# @intent:constant 条件コード(COND)レジスタの値。常にどれか1つだけがセットされます。
FL_POS = 1 << 0  # P
FL_ZRO = 1 << 1  # Z
FL_NEG = 1 << 2  # N

# @intent:constant 汎用レジスタ数と、リンクレジスタとして使われるR7。
REGISTER_COUNT = 8
R_R0 = 0
R_R7 = 7

# @intent:constant PCの初期値（ユーザープログラムの標準ロード位置）。
PC_START = 0x3000

COND_NAMES = {FL_NEG: "N", FL_ZRO: "Z", FL_POS: "P"}

# @intent:responsibility LC-3のレジスタファイル（R0-R7, PC, COND）と実行状態を保持します。
@dataclass
class Lc3CpuState(CpuState):
    """
    LC-3 CPUのレジスタ状態を保持するデータクラス。
    """
    pc: int = PC_START
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    cond: int = FL_ZRO
    running: bool = True

    # @intent:responsibility Snapshot用の複製。可変なのはレジスタのリストだけなので、それだけを複製します。
    def copy(self) -> "Lc3CpuState":
        return replace(self, registers=list(self.registers))

    # @intent:responsibility レジスタに16bitで折り返した値を設定します。
    def set_register(self, index: int, value: int) -> None:
        self.registers[index] = value & WORD_MASK

    # @intent:responsibility 指定レジスタの値を2の補数として評価し、CONDを上書きします。
    # @intent:post-condition N/Z/Pのうちちょうど1つだけがセットされます（OR合成はしません）。
    def update_flags(self, index: int) -> None:
        value = self.registers[index]
        if value == 0:
            self.cond = FL_ZRO
        elif value >> 15:
            # 最上位ビットが1なら負
            self.cond = FL_NEG
        else:
            self.cond = FL_POS

    @property
    def flag_n(self) -> bool:
        return self.cond == FL_NEG

    @property
    def flag_z(self) -> bool:
        return self.cond == FL_ZRO

    @property
    def flag_p(self) -> bool:
        return self.cond == FL_POS
