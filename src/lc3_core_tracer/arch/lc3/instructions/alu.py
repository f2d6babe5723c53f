# src/lc3_core_tracer/arch/lc3/instructions/alu.py
"""
算術論理演算命令（ADD, AND, NOT）の実装。
"""
from lc3_core_tracer.core.snapshot import Operation
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.arch.lc3.state import Lc3CpuState
from .base import (
    OP_ADD, OP_AND, OP_NOT,
    bits_11_9, bits_8_6, bits_2_0, imm5, reg_name, format_immediate,
)

# @intent:utility_function ADD/ANDに共通のオペランド形式（レジスタモード/即値モード）をデコードします。
def _decode_binary(word: int, opcode: int, mnemonic: str) -> Operation:
    dr = bits_11_9(word)
    sr1 = bits_8_6(word)
    if (word >> 5) & 0x1:
        imm = imm5(word)
        return Operation(word, opcode, mnemonic, (reg_name(dr), reg_name(sr1), format_immediate(imm)),
                         dr=dr, sr1=sr1, imm=imm)
    sr2 = bits_2_0(word)
    return Operation(word, opcode, mnemonic, (reg_name(dr), reg_name(sr1), reg_name(sr2)),
                     dr=dr, sr1=sr1, sr2=sr2)

# @intent:utility_function 第2オペランド（符号拡張済み即値、またはSR2の値）を取り出します。
def _second_operand(state: Lc3CpuState, op: Operation) -> int:
    if op.imm is not None:
        return op.imm
    return state.registers[op.sr2]

# --- ADD ---
def decode_add(word: int, address: int) -> Operation:
    return _decode_binary(word, OP_ADD, "ADD")

# @intent:responsibility DR = SR1 + operand2 を16bitで折り返して格納し、フラグを更新します。
def execute_add(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, state.registers[op.sr1] + _second_operand(state, op))
    state.update_flags(op.dr)

# --- AND ---
def decode_and(word: int, address: int) -> Operation:
    return _decode_binary(word, OP_AND, "AND")

# @intent:responsibility DR = SR1 & operand2 を格納し、フラグを更新します。
def execute_and(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, state.registers[op.sr1] & _second_operand(state, op))
    state.update_flags(op.dr)

# --- NOT ---
def decode_not(word: int, address: int) -> Operation:
    dr = bits_11_9(word)
    sr = bits_8_6(word)
    return Operation(word, OP_NOT, "NOT", (reg_name(dr), reg_name(sr)), dr=dr, sr1=sr)

# @intent:responsibility DR = ~SR を格納し、フラグを更新します。
def execute_not(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, ~state.registers[op.sr1])
    state.update_flags(op.dr)
