# tests/config/test_config.py
"""
YAML設定の読み込みとシステム構築のテスト。
"""
import logging

import pytest

from lc3_emu.arch.lc3.cpu import Lc3Cpu
from lc3_emu.config.builder import SystemBuilder
from lc3_emu.config.loader import ConfigLoader
from lc3_emu.config.models import SystemConfig, CpuInitialState
from lc3_emu.devices.console import BufferConsole, CONSOLE_DATA_PORT
from lc3_emu.devices.keyboard import MR_KBSR

class TestConfigLoader:
    def test_load_full_config(self, tmp_path):
        path = tmp_path / "lc3.yaml"
        path.write_text(
            "architecture: lc3\n"
            "strict_isa: true\n"
            "max_steps: 1000\n"
            "images: [a.obj, b.obj]\n"
            "initial_state:\n"
            "  pc: 0x4000\n"
            "  registers:\n"
            "    R6: 0xFE00\n"
            "    r0: 7\n"
        )
        config = ConfigLoader().load_from_file(str(path))
        assert config.architecture == "LC3"
        assert config.strict_isa is True
        assert config.max_steps == 1000
        assert config.images == ["a.obj", "b.obj"]
        assert config.initial_state.pc == 0x4000
        assert config.initial_state.registers == {"r6": 0xFE00, "r0": 7}

    def test_empty_config_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = ConfigLoader().load_from_file(str(path))
        assert config == SystemConfig()
        assert config.initial_state.pc == 0x3000

    def test_hex_strings_are_accepted(self):
        config = ConfigLoader()._parse_config({"initial_state": {"pc": "x3100", "registers": {"r1": "0x10"}}})
        assert config.initial_state.pc == 0x3100
        assert config.initial_state.registers == {"r1": 0x10}

    @pytest.mark.parametrize("data, message", [
        ({"architecture": "Z80"}, "Unsupported architecture"),
        ({"images": "prog.obj"}, "'images' must be a list"),
        ({"initial_state": {"pc": 0x10000}}, "out of 16-bit range"),
        ({"initial_state": {"pc": 1.5}}, "Invalid integer format"),
        ({"max_steps": -1}, "Invalid step limit"),
        ({"initial_state": [1, 2]}, "'initial_state' must be a mapping"),
        ({"initial_state": {"registers": [1, 2]}}, "'registers' must be a mapping"),
        ({"strict_isa": "false"}, "'strict_isa' must be true or false"),
        ({"strict_isa": 1}, "'strict_isa' must be true or false"),
    ])
    def test_invalid_values(self, data, message):
        with pytest.raises(ValueError, match=message):
            ConfigLoader()._parse_config(data)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            ConfigLoader().load_from_file(str(path))

class TestSystemBuilder:
    def test_build_wires_devices_and_cpu(self):
        console = BufferConsole(b"x")
        cpu, bus = SystemBuilder().build_system(SystemConfig(), console)
        assert isinstance(cpu, Lc3Cpu)
        assert bus.read(MR_KBSR) == 0x8000
        bus.write_io(CONSOLE_DATA_PORT, ord("!"))
        assert console.output == b"!"
        bus.write(0x0000, 0x1234)
        assert bus.read(0x0000) == 0x1234

    def test_initial_state_applied(self):
        config = SystemConfig(
            strict_isa=True,
            initial_state=CpuInitialState(pc=0x0200, registers={"r6": 0xFE00, "r7": 0x1234}),
        )
        cpu, _ = SystemBuilder().build_system(config, BufferConsole())
        state = cpu.get_state()
        assert state.pc == 0x0200
        assert state.registers[6] == 0xFE00
        assert state.registers[7] == 0x1234
        assert state.strict_isa is True

    def test_unknown_register_is_ignored_with_warning(self, caplog):
        config = SystemConfig(initial_state=CpuInitialState(registers={"sp": 1, "r8": 2}))
        with caplog.at_level(logging.WARNING):
            cpu, _ = SystemBuilder().build_system(config, BufferConsole())
        assert cpu.get_state().registers == [0] * 8
        assert "Ignoring unknown register 'sp'" in caplog.text
        assert "Ignoring unknown register 'r8'" in caplog.text

    def test_unsupported_architecture(self):
        with pytest.raises(ValueError, match="Unsupported architecture"):
            SystemBuilder().build_system(SystemConfig(architecture="Z80"), BufferConsole())
