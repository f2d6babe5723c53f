# tests/terminal/test_console.py
"""
コンソールI/O層の単体テスト。
"""
import io
import os
import sys
import pytest

from lc3_core_tracer.terminal.console import Console, StreamConsole, create_console

# @intent:test_suite ノンブロッキングの入力検出、ブロッキング読み込み、出力、モード切り替えを検証します。

class TestStreamConsole:
    def test_poll_does_not_consume(self):
        console = StreamConsole(io.BytesIO(b"ab"), io.BytesIO())
        assert console.poll_input_ready()
        assert console.poll_input_ready()
        assert console.read_char_blocking() == ord("a")
        assert console.read_char_blocking() == ord("b")
        assert not console.poll_input_ready()

    def test_read_at_end_of_input(self):
        console = StreamConsole(io.BytesIO(b""), io.BytesIO())
        assert not console.poll_input_ready()
        assert console.read_char_blocking() == -1

    def test_write_char_uses_low_byte(self):
        output = io.BytesIO()
        console = StreamConsole(io.BytesIO(), output)
        console.write_char(0x0141)
        console.write_char(0x0A)
        assert output.getvalue() == b"A\n"

    def test_write_text(self):
        output = io.BytesIO()
        StreamConsole(io.BytesIO(), output).write_text("HALT\n")
        assert output.getvalue() == b"HALT\n"

    def test_context_manager_flushes(self):
        class _Output(io.BytesIO):
            flushed = 0
            def flush(self):
                type(self).flushed += 1
                super().flush()

        output = _Output()
        with StreamConsole(io.BytesIO(), output) as console:
            assert isinstance(console, Console)
            console.write_char(ord("x"))
        assert _Output.flushed >= 1
        assert output.getvalue() == b"x"

    # @intent:test_case_restore 出力のflushが失敗しても、端末のモードは必ず元に戻されることを検証します。
    def test_context_manager_restores_when_flush_fails(self):
        class _BrokenPipeConsole(StreamConsole):
            def __init__(self):
                super().__init__(io.BytesIO(), io.BytesIO())
                self.calls = []

            def enable_raw_mode(self):
                self.calls.append("raw")

            def restore(self):
                self.calls.append("restore")

            def flush(self):
                raise BrokenPipeError

        console = _BrokenPipeConsole()
        with pytest.raises(BrokenPipeError):
            with console:
                pass
        assert console.calls == ["raw", "restore"]

@pytest.mark.skipif(sys.platform == "win32", reason="POSIX only")
class TestPosixConsole:
    @pytest.fixture
    def pipe_console(self):
        from lc3_core_tracer.terminal.posix import PosixConsole
        read_fd, write_fd = os.pipe()
        stdin = os.fdopen(read_fd, "r")
        stdout = io.TextIOWrapper(io.BytesIO())
        console = PosixConsole(stdin, stdout)
        yield console, write_fd, stdout
        stdin.close()
        os.close(write_fd)

    def test_poll_and_read(self, pipe_console):
        console, write_fd, _ = pipe_console
        assert not console.poll_input_ready()
        os.write(write_fd, b"q")
        assert console.poll_input_ready()
        assert console.read_char_blocking() == ord("q")
        assert not console.poll_input_ready()

    def test_raw_mode_is_noop_without_tty(self, pipe_console):
        console, _, _ = pipe_console
        with console:
            pass
        console.restore()

    def test_write_char(self, pipe_console):
        console, _, stdout = pipe_console
        console.write_char(ord("A"))
        console.flush()
        assert stdout.buffer.getvalue() == b"A"

    def test_create_console_selects_posix(self, monkeypatch):
        from lc3_core_tracer.terminal.posix import PosixConsole
        read_fd, write_fd = os.pipe()
        with os.fdopen(read_fd, "r") as stdin:
            monkeypatch.setattr(sys, "stdin", stdin)
            assert isinstance(create_console(), PosixConsole)
        os.close(write_fd)
