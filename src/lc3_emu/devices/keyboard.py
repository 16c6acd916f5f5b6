# lc3_emu/devices/keyboard.py
"""
メモリマップドキーボードデバイス。

KBSR(0xFE00)の読み出しは、ブロックしないキー入力のポーリングを副作用として伴います。
"""
from array import array

from lc3_emu.transport.bus import Device, WORD_MASK
from lc3_emu.devices.console import Console

# @intent:constant キーボードレジスタのアドレス。
MR_KBSR = 0xFE00  # keyboard status
MR_KBDR = 0xFE02  # keyboard data

KBSR_READY = 1 << 15

# @intent:responsibility KBSR/KBDRのメモリマップドレジスタを提供します。
class KeyboardDevice(Device):
    """
    0xFE00〜0xFE02にマップされるキーボードデバイス。
    KBSRの読み出し時のみコンソールをポーリングし、それ以外は通常の記憶域として振る舞います。
    """
    START = MR_KBSR
    END = MR_KBDR

    def __init__(self, console: Console):
        self._console = console
        self._registers = array('H', [0]) * (self.END - self.START + 1)

    # @intent:responsibility KBSRの読み出し時にキー入力をポーリングし、KBSR/KBDRを更新します。
    # @intent:post-condition ポーリングは決してブロックしません。
    def read(self, address: int) -> int:
        if address == 0:
            if self._console.key_ready():
                self._registers[0] = KBSR_READY
                self._registers[MR_KBDR - MR_KBSR] = self._console.read_char() & WORD_MASK
            else:
                self._registers[0] = 0
        return self._registers[address]

    # @intent:rationale デバイスレジスタへの書き込みは特別扱いせず、そのまま格納します。
    def write(self, address: int, data: int) -> None:
        self._registers[address] = data & WORD_MASK

    def peek(self, address: int) -> int:
        return self._registers[address]
