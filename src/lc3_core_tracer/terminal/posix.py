# lc3_core_tracer/terminal/posix.py
"""
POSIX端末用のコンソール実装。

termiosでカノニカルモードとエコーを無効化し、selectでキー入力を検出します。
"""
import os
import select
import sys
import termios
from typing import Optional, TextIO

from lc3_core_tracer.terminal.console import Console

# @intent:responsibility 標準入出力を使うPOSIX向けコンソール。
class PosixConsole(Console):
    """
    stdinが端末でない場合（パイプ、リダイレクト）はモードを切り替えずに動作します。
    """
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._fd = self._stdin.fileno()
        self._saved_attributes: Optional[list] = None

    def enable_raw_mode(self) -> None:
        if not os.isatty(self._fd):
            return
        self._saved_attributes = termios.tcgetattr(self._fd)
        attributes = termios.tcgetattr(self._fd)
        # lflag: 行バッファとエコーを無効化する。ISIGは残すのでCtrl-Cは割り込みとして届く。
        attributes[3] &= ~(termios.ICANON | termios.ECHO)
        termios.tcsetattr(self._fd, termios.TCSANOW, attributes)

    def restore(self) -> None:
        if self._saved_attributes is None:
            return
        termios.tcsetattr(self._fd, termios.TCSANOW, self._saved_attributes)
        self._saved_attributes = None

    # @intent:responsibility タイムアウト0のselectで入力の有無だけを調べます。
    def poll_input_ready(self) -> bool:
        readable, _, _ = select.select([self._fd], [], [], 0)
        return bool(readable)

    def read_char_blocking(self) -> int:
        self._stdout.flush()
        data = os.read(self._fd, 1)
        return data[0] if data else -1

    def write_char(self, char: int) -> None:
        self._stdout.buffer.write(bytes((char & 0xFF,)))

    def flush(self) -> None:
        self._stdout.flush()
