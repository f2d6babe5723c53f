# lc3_core_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、デコード済み命令と、1ステップ実行後のCPUとバスの状態を
記録した不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lc3_core_tracer.core.state import CpuState
from lc3_core_tracer.transport.bus import BusAccess


# @intent:responsibility デコードされた命令（オペコードのタグと型付きオペランド）を記録します。
# @intent:rationale ビットフィールドの切り出しはデコード時に一度だけ行い、実行関数はこのフィールドだけを参照します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコード済み命令。使用しないオペランドフィールドはNoneのままです。
    imm と offset は16bitに符号拡張済みの値を保持します。
    """
    word: int # 命令語そのもの 例: 0x1261
    opcode: int # 上位4bit
    mnemonic: str # 例: "ADD"
    operands: Tuple[str, ...] = () # 表示用 例: ("R1", "R1", "#1")
    dr: Optional[int] = None # 転送先レジスタ（ST系ではソースレジスタ）
    sr1: Optional[int] = None
    sr2: Optional[int] = None
    base: Optional[int] = None # JMP/JSRR/LDR/STRのベースレジスタ
    imm: Optional[int] = None # imm5
    offset: Optional[int] = None # PCoffset9/11, offset6
    cond: Optional[int] = None # BRのnzpマスク
    vector: Optional[int] = None # TRAPベクタ
    length: int = 1 # 命令のワード長（LC-3では常に1）

    @property
    def opcode_hex(self) -> str:
        return f"{self.word:04X}"

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、シンボル情報など）を記録するデータクラス。
    """
    step_count: int
    symbol_info: Optional[str] = None # 例: "main: LEA R0, x3003"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1ステップ実行後のCPU状態の複製、実行した命令、そのステップのバスアクセスを記録します。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
