# src/lc3_core_tracer/arch/lc3/instructions/control.py
"""
制御命令（分岐、ジャンプ、サブルーチン、トラップ）の実装。
"""
from lc3_core_tracer.core.snapshot import Operation
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.common.errors import IllegalInstructionError
from lc3_core_tracer.arch.lc3.state import Lc3CpuState, R_R7
from .base import (
    OP_BR, OP_JMP, OP_JSR, OP_TRAP,
    bits_11_9, bits_8_6, pc_offset9, pc_offset11, relative_address,
    reg_name, format_address,
)

# --- BR ---
# @intent:responsibility BR命令をデコードします。ニーモニックには条件(n/z/p)を付けます。
def decode_br(word: int, address: int) -> Operation:
    cond = bits_11_9(word)
    offset = pc_offset9(word)
    suffix = "".join(flag for flag, bit in (("n", 0b100), ("z", 0b010), ("p", 0b001)) if cond & bit)
    # nzp=000 は決して分岐しない
    mnemonic = f"BR{suffix}" if cond else "NOP"
    target = relative_address(address + 1, offset)
    operands = (format_address(target),) if cond else ()
    return Operation(word, OP_BR, mnemonic, operands, cond=cond, offset=offset)

# @intent:responsibility 条件マスクと現在のCONDの論理積が非0ならPC相対で分岐します。
def execute_br(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    if op.cond & state.cond:
        state.pc = relative_address(state.pc, op.offset)

# --- JMP / RET ---
def decode_jmp(word: int, address: int) -> Operation:
    base = bits_8_6(word)
    if base == R_R7:
        return Operation(word, OP_JMP, "RET", (), base=base)
    return Operation(word, OP_JMP, "JMP", (reg_name(base),), base=base)

# @intent:responsibility PCをベースレジスタの値に設定します。ベースがR7ならサブルーチンからの復帰です。
def execute_jmp(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.pc = state.registers[op.base]

# --- JSR / JSRR ---
def decode_jsr(word: int, address: int) -> Operation:
    if (word >> 11) & 0x1:
        offset = pc_offset11(word)
        target = relative_address(address + 1, offset)
        return Operation(word, OP_JSR, "JSR", (format_address(target),), offset=offset)
    base = bits_8_6(word)
    return Operation(word, OP_JSR, "JSRR", (reg_name(base),), base=base)

# @intent:responsibility 戻りアドレス（次の命令）をR7に保存してから制御を移します。
# @intent:rationale リンクを先に行うため、JSRR R7 は保存直後のR7（=次の命令）へ飛び、実質的に分岐しません。
def execute_jsr(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.registers[R_R7] = state.pc
    if op.offset is not None:
        state.pc = relative_address(state.pc, op.offset)
    else:
        state.pc = state.registers[op.base]

# --- TRAP ---
# @intent:responsibility TRAP命令をデコードします。実行はTrapTableが担当します。
def decode_trap(word: int, address: int) -> Operation:
    vector = word & 0xFF
    return Operation(word, OP_TRAP, "TRAP", (f"x{vector:02X}",), vector=vector)

# --- RTI / RES ---
# @intent:responsibility 未定義オペコードを検出します。
# @intent:post-condition 常にIllegalInstructionErrorを送出します。
def decode_illegal(word: int, address: int) -> Operation:
    raise IllegalInstructionError(address, word)
