# src/lc3_core_tracer/arch/lc3/devices.py
"""
LC-3 メモリマップドI/Oデバイス。
"""
from lc3_core_tracer.transport.bus import Device
from lc3_core_tracer.terminal.console import Console
from lc3_core_tracer.common.types import WORD_MASK

# @intent:constant キーボードのステータス/データレジスタのアドレス。
MR_KBSR = 0xFE00
MR_KBDR = 0xFE02

KBSR_READY = 1 << 15

# @intent:responsibility キーボードのステータス(KBSR)とデータ(KBDR)レジスタをバス上に提供します。
class KeyboardDevice(Device):
    """
    KBSRからKBDRまでのアドレス範囲を占有するデバイス。
    オフセットはKBSRを0とした相対値です。範囲内の他のアドレスは通常のワードとして振る舞います。

    KBSRを読むとコンソールをポーリングし、入力があれば最上位ビットを立てて
    1文字をKBDRへ取り込みます。KBDRを直接読んでもポーリングは行われず、
    最後に取り込まれた文字が返ります。
    """
    def __init__(self, console: Console, status_address: int = MR_KBSR, data_address: int = MR_KBDR):
        if not status_address < data_address:
            raise ValueError("Keyboard data register must be mapped above the status register.")
        self._console = console
        self._base = status_address
        self._data_offset = data_address - status_address
        self._registers = [0] * (self._data_offset + 1)

    @property
    def start_address(self) -> int:
        return self._base

    @property
    def end_address(self) -> int:
        return self._base + self._data_offset

    # @intent:responsibility 読み込み。KBSRの場合だけ、ブロックしないポーリングを行います。
    def read(self, address: int) -> int:
        if address == 0:
            if self._console.poll_input_ready():
                self._registers[0] = KBSR_READY
                self._registers[self._data_offset] = self._console.read_char_blocking() & WORD_MASK
            else:
                self._registers[0] = 0
        return self._registers[address]

    def peek(self, address: int) -> int:
        return self._registers[address]

    def write(self, address: int, data: int) -> None:
        self._registers[address] = data & WORD_MASK
