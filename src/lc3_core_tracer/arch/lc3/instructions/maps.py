# src/lc3_core_tracer/arch/lc3/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from . import load
from . import alu
from . import control
from .base import (
    OP_BR, OP_ADD, OP_LD, OP_ST, OP_JSR, OP_AND, OP_LDR, OP_STR,
    OP_RTI, OP_NOT, OP_LDI, OP_STI, OP_JMP, OP_RES, OP_LEA, OP_TRAP,
)

# @intent:map オペコード（4bit）からデコード関数へのマッピングテーブル。16個全てを網羅します。
DECODE_MAP = {
    # ALU
    OP_ADD: alu.decode_add,
    OP_AND: alu.decode_and,
    OP_NOT: alu.decode_not,

    # Load/Store
    OP_LD: load.decode_ld,
    OP_LDI: load.decode_ldi,
    OP_LDR: load.decode_ldr,
    OP_LEA: load.decode_lea,
    OP_ST: load.decode_st,
    OP_STI: load.decode_sti,
    OP_STR: load.decode_str,

    # Control
    OP_BR: control.decode_br,
    OP_JMP: control.decode_jmp,
    OP_JSR: control.decode_jsr,
    OP_TRAP: control.decode_trap,
    OP_RTI: control.decode_illegal,
    OP_RES: control.decode_illegal,
}

# @intent:map オペコードから実行関数へのマッピングテーブル。
# TRAPはTrapTableへ、RTI/RESはデコード段階で弾かれるため含みません。
EXECUTE_MAP = {
    # ALU
    OP_ADD: alu.execute_add,
    OP_AND: alu.execute_and,
    OP_NOT: alu.execute_not,

    # Load/Store
    OP_LD: load.execute_ld,
    OP_LDI: load.execute_ldi,
    OP_LDR: load.execute_ldr,
    OP_LEA: load.execute_lea,
    OP_ST: load.execute_st,
    OP_STI: load.execute_sti,
    OP_STR: load.execute_str,

    # Control
    OP_BR: control.execute_br,
    OP_JMP: control.execute_jmp,
    OP_JSR: control.execute_jsr,
}
