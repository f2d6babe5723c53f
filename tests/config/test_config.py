# tests/config/test_config.py
"""
YAMLシステム構成の読み込みと、SystemBuilderによるマシン構築の単体テスト。
"""
import io
import logging
import pytest

from lc3_core_tracer.common.errors import ConfigError
from lc3_core_tracer.config.loader import ConfigLoader
from lc3_core_tracer.config.builder import SystemBuilder
from lc3_core_tracer.config.models import SystemConfig
from lc3_core_tracer.terminal.console import StreamConsole
from lc3_core_tracer.arch.lc3.state import FL_NEG, FL_ZRO

# @intent:test_suite 構成ファイルの解析、既定値、エラー処理、構築結果を検証します。

def write_config(tmp_path, text):
    path = tmp_path / "system.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)

class TestConfigLoader:
    def test_empty_file_gives_defaults(self, tmp_path):
        config = ConfigLoader().load_from_file(write_config(tmp_path, ""))
        assert config == SystemConfig()
        assert config.initial_state.pc == 0x3000
        assert config.keyboard.status_address == 0xFE00
        assert config.keyboard.data_address == 0xFE02
        assert config.traps.halt_message == "HALT"

    def test_full_config(self, tmp_path):
        path = write_config(tmp_path, """
architecture: LC-3
initial_state:
  pc: x4000
  cond: n
  registers:
    R6: 0xFDFF
    r0: 12
keyboard:
  status_address: 0xFE10
  data_address: 0xFE12
traps:
  in_prompt: "> "
  halt_message: "--- halting the LC-3 ---"
symbols:
  main: 0x4000
  loop: x4005
""")
        config = ConfigLoader().load_from_file(path)
        assert config.initial_state.pc == 0x4000
        assert config.initial_state.cond == "N"
        assert config.initial_state.registers == {"r6": 0xFDFF, "r0": 12}
        assert config.keyboard.status_address == 0xFE10
        assert config.traps.in_prompt == "> "
        assert config.traps.halt_message == "--- halting the LC-3 ---"
        assert config.symbols == {"main": 0x4000, "loop": 0x4005}

    @pytest.mark.parametrize("text, message", [
        ("architecture: Z80\n", "Unsupported architecture"),
        ("initial_state:\n  cond: Q\n", "Invalid condition flag"),
        ("initial_state:\n  registers:\n    r8: 1\n", "Unknown register"),
        ("initial_state:\n  pc: 0x10000\n", "out of 16-bit range"),
        ("initial_state:\n  pc: true\n", "Invalid integer format"),
        ("initial_state:\n  pc: zzz\n", "Invalid integer format"),
        ("keyboard:\n  status_address: 0xFE02\n  data_address: 0xFE00\n", "data_address must be greater"),
        ("traps: [1, 2]\n", "must be a mapping"),
        ("symbols: [a, b]\n", "'symbols' must be a mapping"),
        ("initial_state:\n  registers: [1, 2]\n", "'initial_state.registers' must be a mapping"),
        ("- 1\n- 2\n", "root must be a mapping"),
    ])
    def test_invalid_config(self, tmp_path, text, message):
        with pytest.raises(ConfigError, match=message):
            ConfigLoader().load_from_file(write_config(tmp_path, text))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader().load_from_file(write_config(tmp_path, "initial_state: [unclosed\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            ConfigLoader().load_from_file(str(tmp_path / "nope.yaml"))

    def test_unknown_key_is_warned(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="lc3_core_tracer.config.loader"):
            ConfigLoader().load_from_file(write_config(tmp_path, "display: {}\n"))
        assert "Ignoring unknown config key 'display'" in caplog.text

class TestSystemBuilder:
    def test_build_default_system(self):
        console = StreamConsole(io.BytesIO(b"k"), io.BytesIO())
        cpu, bus = SystemBuilder().build_system(SystemConfig(), console)

        state = cpu.get_state()
        assert state.pc == 0x3000
        assert state.cond == FL_ZRO
        assert cpu.trap_table.console is console
        # キーボードがRAMより優先される
        assert bus.read(0xFE00) == 0x8000
        assert bus.read(0xFE02) == ord("k")
        bus.write(0x0000, 0x1234)
        assert bus.read(0x0000) == 0x1234

    def test_build_with_initial_state(self, tmp_path):
        path = write_config(tmp_path, """
initial_state:
  pc: 0x0200
  cond: N
  registers:
    r6: 0xFDFF
symbols:
  start: 0x0200
""")
        config = ConfigLoader().load_from_file(path)
        cpu, _ = SystemBuilder().build_system(config, StreamConsole(io.BytesIO(), io.BytesIO()))
        state = cpu.get_state()
        assert state.pc == 0x0200
        assert state.cond == FL_NEG
        assert state.registers[6] == 0xFDFF
        assert cpu.get_symbol_map() == {"start": 0x0200}

    def test_build_with_relocated_keyboard(self, tmp_path):
        path = write_config(tmp_path, "keyboard:\n  status_address: 0xFF00\n  data_address: 0xFF01\n")
        config = ConfigLoader().load_from_file(path)
        console = StreamConsole(io.BytesIO(b"x"), io.BytesIO())
        _, bus = SystemBuilder().build_system(config, console)
        # 既定位置は普通のRAM
        assert bus.read(0xFE00) == 0
        assert bus.read(0xFF00) == 0x8000
        assert bus.read(0xFF01) == ord("x")
