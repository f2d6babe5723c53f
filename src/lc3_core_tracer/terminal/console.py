# lc3_core_tracer/terminal/console.py
"""
コンソールI/O層

シミュレータのコアが必要とする端末入出力を抽象化します。
プラットフォーム固有の処理（rawモード切り替え、キー入力の検出）は
サブクラスに閉じ込め、起動時に一度だけ選択します。
"""
import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

# @intent:responsibility コアが使用するコンソールI/Oのインターフェースを定義します。
class Console(ABC):
    """
    コンソールI/Oの抽象基底クラス。
    with文で使用すると、ブロックの間だけ端末をrawモードに切り替えます。
    """
    # @intent:responsibility 入力が待機しているかを、ブロックせずに返します。
    @abstractmethod
    def poll_input_ready(self) -> bool:
        pass

    # @intent:responsibility 1文字を読み込みます。入力が届くまでブロックします。
    # @intent:post-condition 入力の終端では -1 を返します。
    @abstractmethod
    def read_char_blocking(self) -> int:
        pass

    # @intent:responsibility 1文字（下位8bit）を出力します。
    @abstractmethod
    def write_char(self, char: int) -> None:
        pass

    @abstractmethod
    def flush(self) -> None:
        pass

    # @intent:responsibility 文字列を1文字ずつ出力します。
    def write_text(self, text: str) -> None:
        for char in text.encode("latin-1", errors="replace"):
            self.write_char(char)

    # @intent:responsibility 端末をエコーなし・行バッファなしのモードに切り替えます。
    def enable_raw_mode(self) -> None:
        # Intentional: 端末を持たない実装では何もしない。
        pass

    # @intent:responsibility 端末を元のモードに戻します。何度呼んでも安全です。
    def restore(self) -> None:
        # Intentional: 端末を持たない実装では何もしない。
        pass

    def __enter__(self) -> "Console":
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            self.flush()
        finally:
            self.restore()

# @intent:responsibility 任意のバイナリストリームを入出力とするコンソールを提供します。
# @intent:rationale テストや、入力をファイルから流し込む用途で使用します。
class StreamConsole(Console):
    """
    入力ストリームから1バイトずつ読み、出力ストリームへ書き込むコンソール。
    未読のバイトが残っている間は入力ありとみなします。
    """
    def __init__(self, input_stream: BinaryIO, output_stream: BinaryIO):
        self._input = input_stream
        self._output = output_stream
        self._lookahead: Optional[int] = None

    def poll_input_ready(self) -> bool:
        if self._lookahead is None:
            data = self._input.read(1)
            if data:
                self._lookahead = data[0]
        return self._lookahead is not None

    def read_char_blocking(self) -> int:
        if self._lookahead is not None:
            char = self._lookahead
            self._lookahead = None
            return char
        data = self._input.read(1)
        return data[0] if data else -1

    def write_char(self, char: int) -> None:
        self._output.write(bytes((char & 0xFF,)))

    def flush(self) -> None:
        self._output.flush()

# @intent:responsibility 実行中のプラットフォームに合ったコンソールを生成します。
def create_console() -> Console:
    if sys.platform == "win32":
        from lc3_core_tracer.terminal.windows import WindowsConsole
        return WindowsConsole()
    from lc3_core_tracer.terminal.posix import PosixConsole
    return PosixConsole()
