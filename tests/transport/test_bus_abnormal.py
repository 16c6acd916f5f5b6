import unittest
from lc3_emu.transport.bus import Bus, RAM

class TestBusAbnormal(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x0000, 0x0FFF, RAM(0x1000)) # 4K words

    def test_read_out_of_bounds(self):
        # Access unmapped memory (0x2000)
        with self.assertRaises(IndexError):
            self.bus.read(0x2000)

    def test_write_out_of_bounds(self):
        with self.assertRaises(IndexError):
            self.bus.write(0x2000, 0xFF)

    def test_write_word_too_large(self):
        with self.assertRaises(ValueError):
            self.bus.write(0x0000, 0x10000)

    def test_register_device_invalid_range(self):
        # Start > End
        with self.assertRaises(ValueError):
            self.bus.register_device(0x2000, 0x1000, RAM(0x100))

        # Negative address
        with self.assertRaises(ValueError):
            self.bus.register_device(-1, 0x100, RAM(0x100))

    def test_register_device_size_mismatch(self):
        # Range size 0x100, but RAM size 0x200
        with self.assertRaises(ValueError):
            self.bus.register_device(0x1000, 0x10FF, RAM(0x200))

    def test_unmapped_io_port(self):
        with self.assertRaises(IndexError):
            self.bus.read_io(0x00)

if __name__ == '__main__':
    unittest.main()
