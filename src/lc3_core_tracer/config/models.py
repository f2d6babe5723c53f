from dataclasses import dataclass, field
from typing import Dict

from lc3_core_tracer.arch.lc3.devices import MR_KBSR, MR_KBDR
from lc3_core_tracer.arch.lc3.state import PC_START
from lc3_core_tracer.arch.lc3.traps import DEFAULT_IN_PROMPT, DEFAULT_HALT_MESSAGE

@dataclass
class KeyboardConfig:
    status_address: int = MR_KBSR
    data_address: int = MR_KBDR

@dataclass
class TrapConfig:
    in_prompt: str = DEFAULT_IN_PROMPT
    halt_message: str = DEFAULT_HALT_MESSAGE

@dataclass
class CpuInitialState:
    pc: int = PC_START
    cond: str = "Z"  # "N", "Z", "P"
    registers: Dict[str, int] = field(default_factory=dict)  # 例: {"r6": 0xFE00}

@dataclass
class SystemConfig:
    architecture: str = "LC3"
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    keyboard: KeyboardConfig = field(default_factory=KeyboardConfig)
    traps: TrapConfig = field(default_factory=TrapConfig)
    symbols: Dict[str, int] = field(default_factory=dict)
