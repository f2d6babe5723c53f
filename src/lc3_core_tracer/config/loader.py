import logging
import yaml
from typing import Dict, Any

from lc3_core_tracer.common.errors import ConfigError
from lc3_core_tracer.common.types import WORD_MASK
from .models import SystemConfig, CpuInitialState, KeyboardConfig, TrapConfig

logger = logging.getLogger(__name__)

KNOWN_KEYS = {"architecture", "initial_state", "keyboard", "traps", "symbols"}
REGISTER_NAMES = {f"r{i}" for i in range(8)}

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
        return self._parse_config(data)

    def _parse_config(self, data: Any) -> SystemConfig:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")

        for key in data:
            if key not in KNOWN_KEYS:
                logger.warning("Ignoring unknown config key '%s'", key)

        arch = str(data.get("architecture", "LC3"))
        if arch.upper().replace("-", "") != "LC3":
            raise ConfigError(f"Unsupported architecture: {arch}")

        # Parse Initial State
        initial_state_data = self._section(data, "initial_state")
        cond = str(initial_state_data.get("cond", "Z")).upper()
        if cond not in ("N", "Z", "P"):
            raise ConfigError(f"Invalid condition flag: {cond} (expected N, Z or P)")
        registers = {}
        for name, value in self._mapping(initial_state_data, "registers", "initial_state.registers").items():
            reg = str(name).lower()
            if reg not in REGISTER_NAMES:
                raise ConfigError(f"Unknown register: {name}")
            registers[reg] = self._parse_word(value)
        initial_state = CpuInitialState(
            pc=self._parse_word(initial_state_data.get("pc", CpuInitialState.pc)),
            cond=cond,
            registers=registers
        )

        # Parse Keyboard MMIO
        keyboard_data = self._section(data, "keyboard")
        keyboard = KeyboardConfig(
            status_address=self._parse_word(keyboard_data.get("status_address", KeyboardConfig.status_address)),
            data_address=self._parse_word(keyboard_data.get("data_address", KeyboardConfig.data_address)),
        )
        if keyboard.data_address <= keyboard.status_address:
            raise ConfigError("keyboard.data_address must be greater than keyboard.status_address")

        # Parse Trap messages
        traps_data = self._section(data, "traps")
        traps = TrapConfig(
            in_prompt=str(traps_data.get("in_prompt", TrapConfig.in_prompt)),
            halt_message=str(traps_data.get("halt_message", TrapConfig.halt_message)),
        )

        symbols = {str(name): self._parse_word(addr) for name, addr in self._mapping(data, "symbols", "symbols").items()}

        return SystemConfig(
            architecture="LC3",
            initial_state=initial_state,
            keyboard=keyboard,
            traps=traps,
            symbols=symbols
        )

    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        return self._mapping(data, name, name)

    def _mapping(self, data: Dict[str, Any], key: str, label: str) -> Dict[Any, Any]:
        value = data.get(key) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"Config section '{label}' must be a mapping.")
        return value

    def _parse_word(self, value: Any) -> int:
        parsed = self._parse_int(value)
        if not 0 <= parsed <= WORD_MASK:
            raise ConfigError(f"Value out of 16-bit range: {value}")
        return parsed

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.lower().startswith("0x"):
                    return int(text, 16)
                # LC-3アセンブラ表記 (x3000)
                if text[:1] in ("x", "X"):
                    return int(text[1:], 16)
                return int(text)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")
