# lc3_core_tracer/loader/loader.py
"""
コードローダーモジュール。
LC-3 オブジェクトイメージ（.obj）形式のロードをサポートします。

形式: 先頭ワードがロード先アドレス（origin）、以降のワードがプログラム本体です。
全てのワードはビッグエンディアンで格納されています。
"""
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from lc3_core_tracer.transport.bus import Bus
from lc3_core_tracer.common.errors import ImageLoadError
from lc3_core_tracer.common.types import MEMORY_SIZE

logger = logging.getLogger(__name__)

# @intent:data_structure ロード結果（ロード先と、書き込んだワード数）。
@dataclass(frozen=True)
class LoadedImage:
    path: str
    origin: int
    size: int

class ObjectImageLoader:
    """
    LC-3 オブジェクトイメージを解析し、ワードをバスにロードするローダー。
    """
    # @intent:responsibility イメージファイルを読み込み、originから連続してバスに書き込みます。
    # @intent:post-condition 読み込めない場合は ImageLoadError を送出し、メモリは変更しません。
    def load_image(self, file_path: Union[str, Path], bus: Bus) -> LoadedImage:
        path = str(file_path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ImageLoadError(path, e.strerror or str(e)) from e

        return self.load_bytes(data, bus, path)

    # @intent:responsibility バイト列として与えられたイメージをロードします。
    def load_bytes(self, data: bytes, bus: Bus, path: str = "<bytes>") -> LoadedImage:
        if len(data) < 2:
            raise ImageLoadError(path, "missing origin word")

        (origin,) = struct.unpack_from(">H", data, 0)

        # アドレス空間の終端を越える分は捨てる。奇数長の末尾バイトも無視する。
        count = min((len(data) - 2) // 2, MEMORY_SIZE - origin)
        words = struct.unpack_from(f">{count}H", data, 2)
        for i, word in enumerate(words):
            bus.load(origin + i, word)

        logger.info("Loaded %d words from %s at x%04X", count, path, origin)
        return LoadedImage(path=path, origin=origin, size=count)
