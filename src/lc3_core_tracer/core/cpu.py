# lc3_core_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Tuple

from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.core.snapshot import Snapshot, Operation, Metadata
from lc3_core_tracer.core.state import CpuState
from lc3_core_tracer.common.errors import IllegalInstructionError
from lc3_core_tracer.common.types import SymbolMap, RegisterLayoutInfo

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._step_count: int = 0
        self._fault: Optional[IllegalInstructionError] = None
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility シンボルマップを設定します。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        self._symbol_map = dict(symbol_map)
        # 逆引きマップを作成して、アドレスからラベルを素早く引けるようにする
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。メモリ内容は保持されます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._step_count = 0
        self._fault = None

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 実行中（Running状態）かどうかを返します。
    @property
    @abstractmethod
    def is_running(self) -> bool:
        pass

    # @intent:responsibility CPUをHalted状態に遷移させます。
    @abstractmethod
    def halt(self) -> None:
        pass

    # @intent:responsibility 異常停止の原因となった例外を返します。正常停止・実行中はNone。
    @property
    def fault(self) -> Optional[IllegalInstructionError]:
        return self._fault

    @property
    def step_count(self) -> int:
        return self._step_count

    # @intent:responsibility メモリから次の命令語をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility フェッチした命令語を解析し、Operationオブジェクトに変換します。
    # @intent:post-condition 未定義オペコードの場合はIllegalInstructionErrorを送出します。
    @abstractmethod
    def _decode(self, word: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    #                  PCは実行前に進めるため、命令内のPC相対オフセットは次の命令のアドレスを基準とします。
    def step(self) -> Snapshot:
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. HALT判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        # 3. フェッチ
        word = self._fetch()

        # 4. デコード
        try:
            operation = self._decode(word)
        except IllegalInstructionError as exc:
            # 未定義命令は回復不能。以降の命令は一切実行しない。
            self._fault = exc
            self.halt()
            logger.error("%s", exc)
            raise

        # 5. PC更新 (Hook)
        self._update_pc(operation)

        # 6. 実行
        self._execute(operation)

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility Running状態の間、命令サイクルを繰り返します。
    # @intent:post-condition HALTで正常終了した場合は実行したステップ数を返します。
    #                       未定義命令はIllegalInstructionErrorとして呼び出し元に伝播します。
    def run(self, max_steps: Optional[int] = None) -> int:
        """
        CPUを停止するまで実行します。max_stepsを指定した場合はその回数で打ち切ります。
        """
        executed = 0
        while self.is_running:
            if max_steps is not None and executed >= max_steps:
                break
            self.step()
            executed += 1
        return executed

    # @intent:responsibility HALT状態の場合の処理を行います。
    # @intent:return HALT中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    # @intent:responsibility 命令実行前にPCを命令長分進めます。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._step_count += 1

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += f"{operation.mnemonic}"
        if operation.operands:
            symbol_info += " " + ", ".join(operation.operands)

        logger.debug("x%04X  %s  %s", initial_pc, operation.opcode_hex, symbol_info)

        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=symbol_info),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグの各ビットの状態を辞書形式で返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_word, mnemonic) のタプルリストを返す。
        """
        pass
