# src/lc3_core_tracer/arch/lc3/disassembler.py
"""
LC-3 Disassembler

メモリ上の命令語を解析し、LC-3のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、読み出しにはBus.peekを使用するため
バスアクセスログもキーボードの状態も変化しません。
"""
from typing import List, Tuple

from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.common.errors import IllegalInstructionError
from lc3_core_tracer.arch.lc3.instructions import decode_instruction

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲（ワード数）のメモリを逆アセンブルします。
    未定義オペコードは例外にせず .FILL として表示します。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    for current_addr in range(start_addr, start_addr + length):
        # メモリ境界チェック
        if current_addr > 0xFFFF:
            break

        word = bus.peek(current_addr)
        try:
            operation = decode_instruction(word, current_addr)
        except IllegalInstructionError:
            result.append((current_addr, f"{word:04X}", f".FILL x{word:04X}"))
            continue

        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)
        result.append((current_addr, operation.opcode_hex, mnemonic_str))

    return result
