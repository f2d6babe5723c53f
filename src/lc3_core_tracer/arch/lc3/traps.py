# src/lc3_core_tracer/arch/lc3/traps.py
"""
LC-3 トラップ（システムコール）の実装。

TRAP命令はR7に戻りアドレスを保存した後、命令語の下位8bitのベクタで
ハンドラを選択します。全てのハンドラはConsoleを介して入出力を行います。
"""
import logging
from typing import Callable, Dict

from lc3_core_tracer.core.snapshot import Operation
from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.terminal.console import Console
from lc3_core_tracer.common.types import MEMORY_SIZE, WORD_MASK
from lc3_core_tracer.arch.lc3.state import Lc3CpuState, R_R0, R_R7
from lc3_core_tracer.arch.lc3.instructions.base import sign_extend

logger = logging.getLogger(__name__)

# @intent:constant トラップベクタ。
TRAP_GETC = 0x20   # エコーなしで1文字入力
TRAP_OUT = 0x21    # 1文字出力
TRAP_PUTS = 0x22   # ワード文字列（1ワード1文字）を出力
TRAP_IN = 0x23     # プロンプト付き、エコーありで1文字入力
TRAP_PUTSP = 0x24  # バイト文字列（1ワード2文字）を出力
TRAP_HALT = 0x25   # 停止

DEFAULT_IN_PROMPT = "Enter a character: "
DEFAULT_HALT_MESSAGE = "HALT"

TrapHandler = Callable[[Lc3CpuState, Bus], None]

# @intent:responsibility トラップベクタとハンドラの対応を管理し、実行します。
class TrapTable:
    """
    6種類のトラップハンドラを保持するテーブル。
    未知のベクタは何もせずに無視します（致命的エラーにはしません）。
    """
    def __init__(self, console: Console, in_prompt: str = DEFAULT_IN_PROMPT,
                 halt_message: str = DEFAULT_HALT_MESSAGE):
        self._console = console
        self._in_prompt = in_prompt
        self._halt_message = halt_message
        self._handlers: Dict[int, TrapHandler] = {
            TRAP_GETC: self._getc,
            TRAP_OUT: self._out,
            TRAP_PUTS: self._puts,
            TRAP_IN: self._in,
            TRAP_PUTSP: self._putsp,
            TRAP_HALT: self._halt,
        }

    @property
    def console(self) -> Console:
        return self._console

    # @intent:responsibility R7にPCを保存し、ベクタに対応するハンドラを呼び出します。
    def execute(self, state: Lc3CpuState, bus: Bus, op: Operation) -> None:
        state.registers[R_R7] = state.pc
        handler = self._handlers.get(op.vector)
        if handler is None:
            logger.debug("Ignoring unknown trap vector x%02X", op.vector)
            return
        handler(state, bus)

    def _getc(self, state: Lc3CpuState, bus: Bus) -> None:
        state.set_register(R_R0, self._console.read_char_blocking())
        state.update_flags(R_R0)

    def _out(self, state: Lc3CpuState, bus: Bus) -> None:
        self._console.write_char(state.registers[R_R0])
        self._console.flush()

    # @intent:responsibility R0が指すアドレスから、0のワードまで1ワード1文字で出力します。
    # @intent:rationale 文字列の走査はpeekで行うため、キーボードのポーリングは発生しません。
    def _puts(self, state: Lc3CpuState, bus: Bus) -> None:
        address = state.registers[R_R0]
        for _ in range(MEMORY_SIZE):
            word = bus.peek(address)
            if word == 0:
                break
            self._console.write_char(word)
            address = (address + 1) & WORD_MASK
        self._console.flush()

    # @intent:post-condition 入力はcharとして扱われ、0x80以上のバイトは上位バイトが0xFFに符号拡張されます。
    def _in(self, state: Lc3CpuState, bus: Bus) -> None:
        self._console.write_text(self._in_prompt)
        self._console.flush()
        char = self._console.read_char_blocking()
        self._console.write_char(char)
        self._console.flush()
        state.set_register(R_R0, sign_extend(char, 8))
        state.update_flags(R_R0)

    # @intent:responsibility 1ワードに2文字（下位バイトが先）詰められた文字列を出力します。
    # @intent:post-condition 下位バイトは0でもそのまま出力し、上位バイトは0でなければ出力します。
    #                       下位バイトが0で上位バイトが非0のワードはNUL文字を出力します。
    def _putsp(self, state: Lc3CpuState, bus: Bus) -> None:
        address = state.registers[R_R0]
        for _ in range(MEMORY_SIZE):
            word = bus.peek(address)
            if word == 0:
                break
            self._console.write_char(word & 0xFF)
            high = word >> 8
            if high:
                self._console.write_char(high)
            address = (address + 1) & WORD_MASK
        self._console.flush()

    def _halt(self, state: Lc3CpuState, bus: Bus) -> None:
        self._console.write_text(self._halt_message + "\n")
        self._console.flush()
        state.running = False
