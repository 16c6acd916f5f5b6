import yaml
from typing import Dict, Any, Optional
from .models import SystemConfig, CpuInitialState

SUPPORTED_ARCHITECTURES = ("LC3",)

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping.")

        arch = str(data.get("architecture", "LC3")).upper()
        if arch not in SUPPORTED_ARCHITECTURES:
            raise ValueError(f"Unsupported architecture: {arch}")

        images = data.get("images", [])
        if not isinstance(images, list):
            raise ValueError("'images' must be a list of file paths.")

        # Parse Initial State
        initial_state_data = data.get("initial_state", {}) or {}
        if not isinstance(initial_state_data, dict):
            raise ValueError("'initial_state' must be a mapping.")
        register_data = initial_state_data.get("registers", {}) or {}
        if not isinstance(register_data, dict):
            raise ValueError("'registers' must be a mapping of register names to values.")
        registers = {}
        for name, value in register_data.items():
            registers[str(name).lower()] = self._parse_word(value)
        initial_state = CpuInitialState(
            pc=self._parse_word(initial_state_data.get("pc", 0x3000)),
            registers=registers
        )

        return SystemConfig(
            architecture=arch,
            images=[str(path) for path in images],
            strict_isa=self._parse_bool("strict_isa", data.get("strict_isa", False)),
            max_steps=self._parse_optional_int(data.get("max_steps")),
            initial_state=initial_state
        )

    def _parse_bool(self, key: str, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"'{key}' must be true or false: {value}")
        return value

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        result = self._parse_int(value)
        if result < 0:
            raise ValueError(f"Invalid step limit: {value}")
        return result

    def _parse_word(self, value: Any) -> int:
        result = self._parse_int(value)
        if not 0 <= result <= 0xFFFF:
            raise ValueError(f"Value out of 16-bit range: {value}")
        return result

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            if value.lower().startswith("x"):
                return int(value[1:], 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
