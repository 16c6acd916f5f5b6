# tests/conftest.py
"""
テスト共通のフィクスチャ。BufferConsoleを接続したLC-3システムを構築します。
"""
from typing import NamedTuple, Sequence

import pytest

from lc3_emu.arch.lc3.cpu import Lc3Cpu
from lc3_emu.config.builder import SystemBuilder
from lc3_emu.config.models import SystemConfig
from lc3_emu.devices.console import BufferConsole
from lc3_emu.transport.bus import Bus

class Machine(NamedTuple):
    cpu: Lc3Cpu
    bus: Bus
    console: BufferConsole

    @property
    def state(self):
        return self.cpu.get_state()

    # @intent:utility_function ワード列を指定アドレスから書き込みます。
    def load(self, words: Sequence[int], origin: int = 0x3000) -> None:
        for i, word in enumerate(words):
            self.bus.write(origin + i, word)

    # @intent:utility_function 文字列を1ワード1文字で書き込み、0ワードで終端します。
    def load_string(self, text: str, origin: int) -> None:
        self.load([ord(ch) for ch in text] + [0], origin)

@pytest.fixture
def make_machine():
    def _make(input_data: bytes = b"", strict_isa: bool = False) -> Machine:
        console = BufferConsole(input_data)
        cpu, bus = SystemBuilder().build_system(SystemConfig(strict_isa=strict_isa), console)
        return Machine(cpu, bus, console)
    return _make

@pytest.fixture
def machine(make_machine) -> Machine:
    return make_machine()
