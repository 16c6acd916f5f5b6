# tests/devices/test_console.py
"""
lc3_emu.devices.console モジュールの単体テスト。
"""
import pytest

from lc3_emu.devices.console import BufferConsole, ConsolePort, CONSOLE_DATA_PORT, CONSOLE_CONTROL_PORT
from lc3_emu.transport.bus import Bus

class TestBufferConsole:
    def test_reads_input_in_order_then_eof(self):
        console = BufferConsole(b"ab")
        assert console.key_ready()
        assert console.read_char() == ord("a")
        assert console.read_char() == ord("b")
        assert not console.key_ready()
        assert console.read_char() == -1

    def test_collects_output_and_counts_flushes(self):
        console = BufferConsole()
        console.write_char(ord("H"))
        console.write_char(0x149) # 下位8bitのみ出力される
        console.write_text("!")
        console.flush()
        assert console.output == b"HI!"
        assert console.flush_count == 1

class TestConsolePort:
    @pytest.fixture
    def port_bus(self):
        console = BufferConsole(b"z")
        bus = Bus()
        bus.register_io_device(CONSOLE_DATA_PORT, CONSOLE_CONTROL_PORT, ConsolePort(console))
        return console, bus

    def test_data_port_reads_and_writes(self, port_bus):
        console, bus = port_bus
        assert bus.read_io(CONSOLE_DATA_PORT) == ord("z")
        bus.write_io(CONSOLE_DATA_PORT, ord("y"))
        assert console.output == b"y"

    # @intent:test_case_eof 入力終端は0xFFFFとして読み出されることを検証します。
    def test_data_port_eof_reads_as_ffff(self, port_bus):
        _, bus = port_bus
        bus.read_io(CONSOLE_DATA_PORT)
        assert bus.read_io(CONSOLE_DATA_PORT) == 0xFFFF

    def test_control_port_flushes(self, port_bus):
        console, bus = port_bus
        bus.write_io(CONSOLE_CONTROL_PORT, 0)
        assert console.flush_count == 1
        assert console.output == b""

    def test_peek_does_not_consume_input(self, port_bus):
        console, bus = port_bus
        port = ConsolePort(console)
        assert port.peek(CONSOLE_DATA_PORT) == 0
        assert console.key_ready()
