# tests/devices/test_keyboard.py
"""
メモリマップドキーボード（KBSR/KBDR）の単体テスト。
"""
import unittest

from lc3_emu.devices.console import BufferConsole
from lc3_emu.devices.keyboard import KeyboardDevice, MR_KBSR, MR_KBDR
from lc3_emu.transport.bus import Bus, RAM

class TestKeyboardDevice(unittest.TestCase):
    def _make_bus(self, data: bytes):
        self.console = BufferConsole(data)
        self.bus = Bus()
        self.bus.register_device(KeyboardDevice.START, KeyboardDevice.END, KeyboardDevice(self.console))
        self.ram = RAM(0x10000)
        self.bus.register_device(0x0000, 0xFFFF, self.ram)

    def test_kbsr_read_with_key_ready(self):
        self._make_bus(b"k")
        self.assertEqual(self.bus.read(MR_KBSR), 0x8000)
        self.assertEqual(self.bus.read(MR_KBDR), ord("k"))

    def test_kbsr_read_without_key_clears_status(self):
        self._make_bus(b"")
        self.bus.write(MR_KBSR, 0x8000)
        self.assertEqual(self.bus.read(MR_KBSR), 0)

    # @intent:test_case KBDRの読み出しはポーリングを行わず、最後に取得した文字を返すことを検証します。
    def test_kbdr_read_does_not_poll(self):
        self._make_bus(b"ab")
        self.bus.read(MR_KBSR)
        self.assertEqual(self.bus.read(MR_KBDR), ord("a"))
        self.assertEqual(self.bus.read(MR_KBDR), ord("a"))
        self.assertTrue(self.console.key_ready())

    # @intent:test_case 状態が空になった後のポーリングでKBSRがクリアされ、KBDRは保持されることを検証します。
    def test_status_clears_after_input_is_consumed(self):
        self._make_bus(b"a")
        self.assertEqual(self.bus.read(MR_KBSR), 0x8000)
        self.assertEqual(self.bus.read(MR_KBSR), 0)
        self.assertEqual(self.bus.read(MR_KBDR), ord("a"))

    def test_writes_are_stored_and_shadow_ram(self):
        self._make_bus(b"")
        self.bus.write(MR_KBDR, 0x1234)
        self.assertEqual(self.bus.read(MR_KBDR), 0x1234)
        self.assertEqual(self.ram.read(MR_KBDR), 0)

    def test_peek_does_not_poll(self):
        self._make_bus(b"x")
        self.assertEqual(self.bus.peek(MR_KBSR), 0)
        self.assertTrue(self.console.key_ready())

if __name__ == '__main__':
    unittest.main()
