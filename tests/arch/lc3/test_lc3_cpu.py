# tests/arch/lc3/test_lc3_cpu.py
"""
Lc3Cpuの命令サイクル、停止状態、未定義命令の単体テスト。
"""
import io
import pytest

from lc3_core_tracer.transport.bus import Bus, RAM
from lc3_core_tracer.terminal.console import StreamConsole
from lc3_core_tracer.common.errors import IllegalInstructionError
from lc3_core_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_core_tracer.arch.lc3.traps import TrapTable
from lc3_core_tracer.arch.lc3.state import FL_ZRO, FL_POS

# @intent:test_suite Running → Halted の状態遷移と、Snapshotの内容を検証します。

@pytest.fixture
def machine():
    output = io.BytesIO()
    bus = Bus()
    bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
    cpu = Lc3Cpu(bus, TrapTable(StreamConsole(io.BytesIO(), output)))
    return cpu, bus, output

def load_program(bus, words, origin=0x3000):
    for i, word in enumerate(words):
        bus.load(origin + i, word)

class TestLc3Cpu:
    def test_initial_registers(self, machine):
        cpu, _, _ = machine
        registers = cpu.get_register_map()
        assert registers["PC"] == 0x3000
        assert registers["COND"] == FL_ZRO
        assert all(registers[f"R{i}"] == 0 for i in range(8))
        assert cpu.get_flag_state() == {"N": False, "Z": True, "P": False}

    def test_register_layout(self, machine):
        cpu, _, _ = machine
        layout = cpu.get_register_layout()
        assert [group.group_name for group in layout] == ["General", "Control"]
        assert [reg.name for reg in layout[1].registers] == ["PC", "COND"]

    def test_step_snapshot(self, machine):
        cpu, bus, _ = machine
        load_program(bus, [0x1261])  # ADD R1, R1, #1
        snapshot = cpu.step()
        assert snapshot.operation.mnemonic == "ADD"
        assert snapshot.metadata.symbol_info == "ADD R1, R1, #1"
        assert snapshot.state.registers[1] == 1
        assert snapshot.state.pc == 0x3001
        assert snapshot.state.cond == FL_POS
        assert cpu.get_flag_state()["P"] is True

    # @intent:test_case_halted HALT後はフェッチせず、PCも進まないことを検証します。
    def test_halt_stops_fetching(self, machine):
        cpu, bus, output = machine
        load_program(bus, [0xF025, 0x1261])
        assert cpu.run() == 1
        assert not cpu.is_running
        assert output.getvalue() == b"HALT\n"

        snapshot = cpu.step()
        assert snapshot.operation.mnemonic == "HALTED"
        assert snapshot.bus_activity == []
        assert cpu.get_state().pc == 0x3001
        assert cpu.get_state().registers[1] == 0
        assert cpu.step_count == 1

    def test_run_counts_steps(self, machine):
        cpu, bus, _ = machine
        load_program(bus, [0x5020, 0x1021, 0x1021, 0xF025])  # AND R0,R0,#0; ADD x2; HALT
        assert cpu.run() == 4
        assert cpu.get_state().registers[0] == 2

    @pytest.mark.parametrize("word", [0x8000, 0xD000, 0xDFFF])
    def test_illegal_opcode(self, machine, word):
        cpu, bus, output = machine
        load_program(bus, [0x1261, word, 0x1261])
        with pytest.raises(IllegalInstructionError) as excinfo:
            cpu.run()
        assert excinfo.value.address == 0x3001
        assert excinfo.value.word == word
        assert not cpu.is_running
        assert cpu.fault is excinfo.value
        # 2つ目のADDは実行されない
        assert cpu.get_state().registers[1] == 1
        assert output.getvalue() == b""

    def test_reset_restores_initial_state_and_keeps_memory(self, machine):
        cpu, bus, _ = machine
        load_program(bus, [0xF025])
        cpu.run()
        cpu.reset()
        assert cpu.is_running
        assert cpu.get_state().pc == 0x3000
        assert bus.peek(0x3000) == 0xF025

    def test_disassemble(self, machine):
        cpu, bus, _ = machine
        load_program(bus, [0xE002, 0xF022, 0xF025])
        lines = cpu.disassemble(0x3000, 3)
        assert lines == [
            (0x3000, "E002", "LEA R0, x3003"),
            (0x3001, "F022", "TRAP x22"),
            (0x3002, "F025", "TRAP x25"),
        ]
