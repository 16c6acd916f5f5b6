# lc3_emu/loader/loader.py
"""
コードローダーモジュール。
LC-3のオブジェクトイメージ形式（ビッグエンディアンの原点アドレス + ビッグエンディアンのワード列）の
ロードをサポートします。
"""
import logging
from dataclasses import dataclass
from typing import BinaryIO

from lc3_emu.transport.bus import Bus

logger = logging.getLogger(__name__)

MEMORY_WORDS = 0x10000

# @intent:responsibility ロードされたイメージの配置情報を記録します。
@dataclass(frozen=True)
class ImageInfo:
    origin: int
    word_count: int

class ImageLoader:
    """
    LC-3オブジェクトイメージを解析し、原点アドレスからバスへ書き込むローダー。
    複数のイメージを順にロードした場合、重なる領域は後のイメージで上書きされます。
    """
    # @intent:responsibility バイトストリームからイメージを読み込み、バスへ書き込みます。
    # @intent:post-condition メモリ末尾(0xFFFF)を超えるワードと、末尾の半端な1バイトは無視されます。
    def load_stream(self, stream: BinaryIO, bus: Bus) -> ImageInfo:
        header = stream.read(2)
        if len(header) < 2:
            raise ValueError("Image is too short to contain an origin address.")
        origin = int.from_bytes(header, "big")

        max_words = MEMORY_WORDS - origin
        payload = stream.read(max_words * 2)
        word_count = len(payload) // 2
        for i in range(word_count):
            word = (payload[i * 2] << 8) | payload[i * 2 + 1]
            bus.write(origin + i, word)
        return ImageInfo(origin=origin, word_count=word_count)

    # @intent:responsibility ファイルからイメージをロードし、成否を返します。
    # @intent:rationale ロード失敗はエンジンにとって致命的ではないため、例外ではなく真偽値で呼び出し元に伝えます。
    def load_image(self, file_path: str, bus: Bus) -> bool:
        try:
            with open(file_path, 'rb') as f:
                info = self.load_stream(f, bus)
        except OSError as e:
            logger.error("Cannot open image %s: %s", file_path, e)
            return False
        except ValueError as e:
            logger.error("Invalid image %s: %s", file_path, e)
            return False
        logger.info("Loaded %s: %d words at %#06x", file_path, info.word_count, info.origin)
        return True
