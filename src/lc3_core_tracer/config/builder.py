from typing import Tuple

from lc3_core_tracer.transport.bus import Bus, RAM
from lc3_core_tracer.terminal.console import Console
from lc3_core_tracer.common.types import MEMORY_SIZE
from lc3_core_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_core_tracer.arch.lc3.devices import KeyboardDevice
from lc3_core_tracer.arch.lc3.state import FL_NEG, FL_ZRO, FL_POS
from lc3_core_tracer.arch.lc3.traps import TrapTable
from .models import SystemConfig, CpuInitialState

COND_VALUES = {"N": FL_NEG, "Z": FL_ZRO, "P": FL_POS}

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig, console: Console) -> Tuple[Lc3Cpu, Bus]:
        bus = Bus()

        # キーボードを先に登録し、RAMより優先してアドレスを横取りさせる
        keyboard = KeyboardDevice(
            console,
            status_address=config.keyboard.status_address,
            data_address=config.keyboard.data_address
        )
        bus.register_device(keyboard.start_address, keyboard.end_address, keyboard)
        bus.register_device(0x0000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        traps = TrapTable(
            console,
            in_prompt=config.traps.in_prompt,
            halt_message=config.traps.halt_message
        )
        cpu = Lc3Cpu(bus, traps)

        self.apply_initial_state(cpu, config.initial_state)
        cpu.set_symbol_map(config.symbols)

        return cpu, bus

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Lc3Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        """
        cpu.reset()
        state = cpu.get_state()
        state.pc = config_state.pc
        state.cond = COND_VALUES[config_state.cond]
        for reg_name, value in config_state.registers.items():
            state.set_register(int(reg_name[1:]), value)
