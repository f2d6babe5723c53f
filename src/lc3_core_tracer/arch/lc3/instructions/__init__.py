# src/lc3_core_tracer/arch/lc3/instructions/__init__.py
"""
LC-3命令セット実装パッケージ。
"""
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.core.snapshot import Operation
from lc3_core_tracer.arch.lc3.state import Lc3CpuState
from .base import opcode_of
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 命令語を一度だけデコードし、型付きフィールドを持つOperationを返します。
# @intent:post-condition RTI/RESの場合はIllegalInstructionErrorを送出します。
def decode_instruction(word: int, address: int) -> Operation:
    """
    addressは命令語をフェッチしたアドレスです（表示用の分岐先計算に使用）。
    """
    return DECODE_MAP[opcode_of(word)](word, address)

# @intent:responsibility デコードされたLC-3命令を実行します。
def execute_instruction(operation: Operation, state: Lc3CpuState, bus: Bus) -> None:
    executor = EXECUTE_MAP.get(operation.opcode)
    if executor is None:
        raise ValueError(f"No executor for opcode {operation.opcode:#x} ({operation.mnemonic}).")
    executor(state, bus, operation)
