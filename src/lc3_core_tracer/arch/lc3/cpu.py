# src/lc3_core_tracer/arch/lc3/cpu.py
"""
LC-3 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Optional, Tuple

from lc3_core_tracer.core.snapshot import Operation, Metadata, Snapshot
from lc3_core_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from lc3_core_tracer.core.cpu import AbstractCpu
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.arch.lc3.state import Lc3CpuState, REGISTER_COUNT, COND_NAMES
from lc3_core_tracer.arch.lc3.traps import TrapTable
from lc3_core_tracer.arch.lc3.instructions import decode_instruction, execute_instruction
from lc3_core_tracer.arch.lc3.instructions.base import OP_TRAP
from lc3_core_tracer.arch.lc3 import disassembler

# @intent:constant Halted状態でstepを呼んだときに返すダミーの命令。
HALTED_OPERATION = Operation(word=0x0000, opcode=OP_TRAP, mnemonic="HALTED")

# @intent:responsibility LC-3 CPUの具体的なエミュレーションロジック（フェッチ、デコード、ディスパッチ）を提供します。
class Lc3Cpu(AbstractCpu):
    """
    LC-3 CPUをエミュレートするクラス。
    状態遷移は Running → Halted の一方向のみです。
    """
    def __init__(self, bus: Bus, trap_table: TrapTable):
        self._traps = trap_table
        super().__init__(bus)

    def _create_initial_state(self) -> Lc3CpuState:
        return Lc3CpuState()

    @property
    def trap_table(self) -> TrapTable:
        return self._traps

    @property
    def is_running(self) -> bool:
        return self._state.running

    def halt(self) -> None:
        self._state.running = False

    # @intent:responsibility Halted状態ではフェッチを行わず、PCも進めません。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if self._state.running:
            return None
        self._bus.get_and_clear_activity_log()
        return Snapshot(
            state=self._state.copy(),
            operation=HALTED_OPERATION,
            metadata=Metadata(step_count=self._step_count, symbol_info=HALTED_OPERATION.mnemonic),
            bus_activity=[]
        )

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, word: int) -> Operation:
        return decode_instruction(word, self._state.pc)

    # @intent:responsibility TRAPはTrapTableへ、それ以外は命令セットのハンドラへ振り分けます。
    def _execute(self, operation: Operation) -> None:
        if operation.opcode == OP_TRAP:
            self._traps.execute(self._state, self._bus, operation)
        else:
            execute_instruction(operation, self._state, self._bus)

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"R{i}": s.registers[i] for i in range(REGISTER_COUNT)}
        registers["PC"] = s.pc
        registers["COND"] = s.cond
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"R{i}", 16) for i in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Control", [RegisterInfo("PC", 16), RegisterInfo("COND", 3)]),
        ]

    def get_flag_state(self) -> Dict[str, bool]:
        return {name: self._state.cond == bit for bit, name in COND_NAMES.items()}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
