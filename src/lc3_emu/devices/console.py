# lc3_emu/devices/console.py
"""
Device Layer (コンソール)

エミュレートされたキーボードと表示装置の背後にある、ホスト側の入出力の
抽象化を提供します。CPUコアはこのインターフェースのみを知り、端末モードの
制御などホスト固有の事情は実装クラスに閉じ込めます。
"""
from abc import ABC, abstractmethod

from lc3_emu.transport.bus import Device, WORD_MASK

# @intent:constant ConsolePortのI/Oポート番号。
CONSOLE_DATA_PORT = 0x00
CONSOLE_CONTROL_PORT = 0x01

# @intent:responsibility ホストの文字入出力の抽象インターフェースを定義します。
class Console(ABC):
    """
    1文字単位の入出力を提供する抽象クラス。
    key_readyは決してブロックしてはならず、read_charは入力終端で-1を返します。
    """
    @abstractmethod
    def key_ready(self) -> bool:
        pass

    @abstractmethod
    def read_char(self) -> int:
        pass

    @abstractmethod
    def write_char(self, char: int) -> None:
        pass

    @abstractmethod
    def flush(self) -> None:
        pass

    # @intent:utility_function 文字列をLatin-1の1バイト文字として出力します。
    def write_text(self, text: str) -> None:
        for ch in text.encode("latin-1", errors="replace"):
            self.write_char(ch)

# @intent:responsibility 事前に与えられた入力とメモリ上の出力バッファによる決定的なコンソール。
# @intent:rationale テストや--input指定時に、端末に依存せず同一入力から同一出力を得るために使用します。
class BufferConsole(Console):
    """
    バイト列を入力として消費し、出力をbytearrayに蓄積するコンソール。
    """
    def __init__(self, input_data: bytes = b""):
        self._input = bytes(input_data)
        self._position = 0
        self._output = bytearray()
        self.flush_count = 0

    def key_ready(self) -> bool:
        return self._position < len(self._input)

    def read_char(self) -> int:
        if self._position >= len(self._input):
            return -1
        char = self._input[self._position]
        self._position += 1
        return char

    def write_char(self, char: int) -> None:
        self._output.append(char & 0xFF)

    def flush(self) -> None:
        self.flush_count += 1

    # @intent:accessor これまでに出力されたバイト列を返します。
    @property
    def output(self) -> bytes:
        return bytes(self._output)

# @intent:responsibility バスのI/Oポート空間とコンソールを接続するデバイス。
class ConsolePort(Device):
    """
    オフセット0: データポート（読み出しで1文字入力、書き込みで下位8bitを出力）
    オフセット1: 制御ポート（書き込みでフラッシュ）
    """
    def __init__(self, console: Console):
        self._console = console

    def read(self, address: int) -> int:
        if address == CONSOLE_DATA_PORT:
            # 入力終端(-1)は0xFFFFとしてレジスタに格納される
            return self._console.read_char() & WORD_MASK
        return 0

    def write(self, address: int, data: int) -> None:
        if address == CONSOLE_DATA_PORT:
            self._console.write_char(data & 0xFF)
        elif address == CONSOLE_CONTROL_PORT:
            self._console.flush()

    # @intent:rationale 入力を消費しないよう、peekは常に0を返します。
    def peek(self, address: int) -> int:
        return 0
