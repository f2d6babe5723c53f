# lc3_core_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（レジスタ群）を保持するデータ構造を定義します。
"""
import copy
from dataclasses import dataclass

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、特定のCPUアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter

    # @intent:responsibility Snapshot用に、実行を続けても変化しない複製を返します。
    # @intent:rationale サブクラスはリストなどの可変フィールドを持つため、深いコピーを行います。
    def copy(self) -> "CpuState":
        return copy.deepcopy(self)
