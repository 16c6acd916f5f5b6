import logging
from typing import Tuple
from lc3_emu.transport.bus import Bus, RAM
from lc3_emu.core.cpu import AbstractCpu
from lc3_emu.arch.lc3.cpu import Lc3Cpu
from lc3_emu.arch.lc3.state import REGISTER_COUNT
from lc3_emu.devices.console import Console, ConsolePort, CONSOLE_DATA_PORT, CONSOLE_CONTROL_PORT
from lc3_emu.devices.keyboard import KeyboardDevice
from .models import SystemConfig, CpuInitialState

logger = logging.getLogger(__name__)

MEMORY_WORDS = 0x10000

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig, console: Console) -> Tuple[AbstractCpu, Bus]:
        bus = Bus()

        # キーボードレジスタを全域RAMより先に登録し、アクセスを優先させる
        bus.register_device(KeyboardDevice.START, KeyboardDevice.END, KeyboardDevice(console))
        bus.register_device(0x0000, MEMORY_WORDS - 1, RAM(MEMORY_WORDS))
        bus.register_io_device(CONSOLE_DATA_PORT, CONSOLE_CONTROL_PORT, ConsolePort(console))

        if config.architecture == "LC3":
            cpu = Lc3Cpu(bus, strict_isa=config.strict_isa)
        else:
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        self.apply_initial_state(cpu, config.initial_state)

        return cpu, bus

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: AbstractCpu, config_state: CpuInitialState):
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        """
        cpu.reset()
        state = cpu.get_state()
        state.pc = config_state.pc
        for reg_name, value in config_state.registers.items():
            index = self._register_index(reg_name)
            if index is None:
                logger.warning("Ignoring unknown register '%s' in initial state", reg_name)
                continue
            state.set_register(index, value)

    def _register_index(self, reg_name: str):
        name = reg_name.lower()
        if len(name) == 2 and name[0] == "r" and name[1].isdigit():
            index = int(name[1])
            if index < REGISTER_COUNT:
                return index
        return None
