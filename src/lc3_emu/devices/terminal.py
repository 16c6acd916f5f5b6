# lc3_emu/devices/terminal.py
"""
ホスト端末を用いたコンソール実装（POSIX）。

キー入力を1文字ずつ受け取れるよう、コンテキストマネージャとして端末の
カノニカルモードとエコーを無効化し、終了時（割り込みを含む）に元へ戻します。
"""
import os
import select
import sys
import termios
from typing import BinaryIO, Optional

from lc3_emu.devices.console import Console

# @intent:responsibility 標準入出力を使用するコンソール。
class TerminalConsole(Console):
    """
    stdinのファイル記述子から1バイトずつ読み込み、stdoutのバイナリバッファへ書き込みます。
    """
    def __init__(self, stdin_fd: Optional[int] = None, stdout: Optional[BinaryIO] = None):
        self._fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self._out = sys.stdout.buffer if stdout is None else stdout
        self._saved_attrs = None

    # @intent:responsibility 端末がTTYであれば、カノニカルモードとエコーを無効化します。
    def __enter__(self) -> "TerminalConsole":
        if os.isatty(self._fd):
            self._saved_attrs = termios.tcgetattr(self._fd)
            new_attrs = termios.tcgetattr(self._fd)
            new_attrs[3] &= ~(termios.ICANON | termios.ECHO)
            termios.tcsetattr(self._fd, termios.TCSANOW, new_attrs)
        return self

    # @intent:responsibility 保存しておいた端末設定を復元します。
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.flush()
        if self._saved_attrs is not None:
            termios.tcsetattr(self._fd, termios.TCSANOW, self._saved_attrs)
            self._saved_attrs = None

    # @intent:post-condition タイムアウト0のselectでポーリングするため、ブロックしません。
    def key_ready(self) -> bool:
        readable, _, _ = select.select([self._fd], [], [], 0)
        return bool(readable)

    def read_char(self) -> int:
        # 出力待ちのプロンプトを表示してから入力を待つ
        self._out.flush()
        data = os.read(self._fd, 1)
        if not data:
            return -1
        return data[0]

    def write_char(self, char: int) -> None:
        self._out.write(bytes((char & 0xFF,)))

    def flush(self) -> None:
        self._out.flush()
