# src/lc3_core_tracer/arch/lc3/instructions/load.py
"""
ロード/ストア命令（LD, LDI, LDR, LEA, ST, STI, STR）の実装。

PC相対アドレスは、フェッチ後に進められたPC（次の命令のアドレス）を基準に計算します。
"""
from lc3_core_tracer.core.snapshot import Operation
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.arch.lc3.state import Lc3CpuState
from .base import (
    OP_LD, OP_LDI, OP_LDR, OP_LEA, OP_ST, OP_STI, OP_STR,
    bits_11_9, bits_8_6, offset6, pc_offset9, relative_address,
    reg_name, format_address, format_immediate,
)

# @intent:utility_function DR(またはSR) + PCoffset9 形式の命令をデコードします。
def _decode_pc_relative(word: int, address: int, opcode: int, mnemonic: str) -> Operation:
    dr = bits_11_9(word)
    offset = pc_offset9(word)
    target = relative_address(address + 1, offset)
    return Operation(word, opcode, mnemonic, (reg_name(dr), format_address(target)), dr=dr, offset=offset)

# @intent:utility_function DR(またはSR), BaseR, offset6 形式の命令をデコードします。
def _decode_base_offset(word: int, opcode: int, mnemonic: str) -> Operation:
    dr = bits_11_9(word)
    base = bits_8_6(word)
    offset = offset6(word)
    return Operation(word, opcode, mnemonic, (reg_name(dr), reg_name(base), format_immediate(offset)),
                     dr=dr, base=base, offset=offset)

# --- LD ---
def decode_ld(word: int, address: int) -> Operation:
    return _decode_pc_relative(word, address, OP_LD, "LD")

def execute_ld(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, bus.read(relative_address(state.pc, op.offset)))
    state.update_flags(op.dr)

# --- LDI ---
def decode_ldi(word: int, address: int) -> Operation:
    return _decode_pc_relative(word, address, OP_LDI, "LDI")

# @intent:responsibility 二重間接: PC+offsetの語をアドレスとして、さらにその内容を読み込みます。
def execute_ldi(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    pointer = bus.read(relative_address(state.pc, op.offset))
    state.set_register(op.dr, bus.read(pointer))
    state.update_flags(op.dr)

# --- LDR ---
def decode_ldr(word: int, address: int) -> Operation:
    return _decode_base_offset(word, OP_LDR, "LDR")

def execute_ldr(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, bus.read(relative_address(state.registers[op.base], op.offset)))
    state.update_flags(op.dr)

# --- LEA ---
def decode_lea(word: int, address: int) -> Operation:
    return _decode_pc_relative(word, address, OP_LEA, "LEA")

# @intent:responsibility アドレスを計算するだけで、メモリにはアクセスしません。
def execute_lea(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.set_register(op.dr, relative_address(state.pc, op.offset))
    state.update_flags(op.dr)

# --- ST ---
def decode_st(word: int, address: int) -> Operation:
    return _decode_pc_relative(word, address, OP_ST, "ST")

def execute_st(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    bus.write(relative_address(state.pc, op.offset), state.registers[op.dr])

# --- STI ---
def decode_sti(word: int, address: int) -> Operation:
    return _decode_pc_relative(word, address, OP_STI, "STI")

def execute_sti(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    pointer = bus.read(relative_address(state.pc, op.offset))
    bus.write(pointer, state.registers[op.dr])

# --- STR ---
def decode_str(word: int, address: int) -> Operation:
    return _decode_base_offset(word, OP_STR, "STR")

def execute_str(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    bus.write(relative_address(state.registers[op.base], op.offset), state.registers[op.dr])
