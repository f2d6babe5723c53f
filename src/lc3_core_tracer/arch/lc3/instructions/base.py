# src/lc3_core_tracer/arch/lc3/instructions/base.py
"""
LC-3命令実装用の共通ユーティリティ。

命令語のビットフィールド切り出しと符号拡張をここに集約します。
"""
from lc3_core_tracer.common.types import WORD_MASK

# @intent:constant オペコード（命令語の上位4bit）。
OP_BR = 0b0000
OP_ADD = 0b0001
OP_LD = 0b0010
OP_ST = 0b0011
OP_JSR = 0b0100
OP_AND = 0b0101
OP_LDR = 0b0110
OP_STR = 0b0111
OP_RTI = 0b1000  # 未使用（不正命令）
OP_NOT = 0b1001
OP_LDI = 0b1010
OP_STI = 0b1011
OP_JMP = 0b1100
OP_RES = 0b1101  # 予約（不正命令）
OP_LEA = 0b1110
OP_TRAP = 0b1111

# @intent:utility_function widthビットのフィールドの符号ビットを16bitまで複製します。
def sign_extend(value: int, bit_count: int) -> int:
    value &= (1 << bit_count) - 1
    if (value >> (bit_count - 1)) & 1:
        value |= (WORD_MASK << bit_count) & WORD_MASK
    return value

# @intent:utility_function 16bit値を表示用の符号付き整数に変換します。
def to_signed(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value

def opcode_of(word: int) -> int:
    return (word >> 12) & 0xF

def bits_11_9(word: int) -> int:
    return (word >> 9) & 0x7

def bits_8_6(word: int) -> int:
    return (word >> 6) & 0x7

def bits_2_0(word: int) -> int:
    return word & 0x7

def imm5(word: int) -> int:
    return sign_extend(word & 0x1F, 5)

def offset6(word: int) -> int:
    return sign_extend(word & 0x3F, 6)

def pc_offset9(word: int) -> int:
    return sign_extend(word & 0x1FF, 9)

def pc_offset11(word: int) -> int:
    return sign_extend(word & 0x7FF, 11)

# @intent:utility_function PC相対アドレスを計算します。pcは既に次の命令を指している値です。
def relative_address(pc: int, offset: int) -> int:
    return (pc + offset) & WORD_MASK

def reg_name(index: int) -> str:
    return f"R{index}"

def format_address(address: int) -> str:
    return f"x{address:04X}"

def format_immediate(value: int) -> str:
    return f"#{to_signed(value)}"
