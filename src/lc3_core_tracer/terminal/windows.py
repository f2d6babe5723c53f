# lc3_core_tracer/terminal/windows.py
"""
Windowsコンソール用の実装。

msvcrtのgetwchはエコーも行バッファリングも行わないため、モード切り替えは不要です。
"""
import msvcrt
import sys
from typing import Optional, TextIO

from lc3_core_tracer.terminal.console import Console

class WindowsConsole(Console):
    def __init__(self, stdout: Optional[TextIO] = None):
        self._stdout = stdout if stdout is not None else sys.stdout

    def poll_input_ready(self) -> bool:
        return bool(msvcrt.kbhit())

    def read_char_blocking(self) -> int:
        self._stdout.flush()
        char = msvcrt.getwch()
        # Ctrl-C はgetwchでは割り込みにならないため、ここで変換する
        if char == "\x03":
            raise KeyboardInterrupt
        return ord(char) & 0xFF

    def write_char(self, char: int) -> None:
        self._stdout.buffer.write(bytes((char & 0xFF,)))

    def flush(self) -> None:
        self._stdout.flush()
