# lc3_core_tracer/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、16bitワード単位のアドレス空間を抽象化し、
読み書きアクセスを適切なデバイスに委譲する責務を負います。
"""
from abc import ABC, abstractmethod
from array import array
from typing import List, Tuple
from dataclasses import dataclass
from enum import Enum

from lc3_core_tracer.common.types import WORD_MASK

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 16bit value
    access_type: BusAccessType

# @intent:responsibility バスの抽象デバイスインターフェースを定義します。
class Device(ABC):
    """
    バスに接続されるデバイスの抽象基底クラス。
    全てのデバイスはreadとwriteのインターフェースを実装する必要があります。
    """
    # @intent:responsibility 指定されたオフセットから16bitのデータを読み出す責務を負います。
    # @intent:pre-condition オフセットはデバイスの有効範囲内である必要があります。
    @abstractmethod
    def read(self, address: int) -> int:
        """
        指定されたアドレスから16bitのデータを読み出します。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

    # @intent:responsibility 指定されたオフセットに16bitのデータを書き込みます。
    @abstractmethod
    def write(self, address: int, data: int) -> None:
        """
        指定されたアドレスに16bitのデータを書き込みます。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

    # @intent:responsibility 副作用なしでデータを読み出します。
    # @intent:rationale MMIOデバイスは読み込みで状態が変わるため、インスペクタ用の経路を分けます。
    def peek(self, address: int) -> int:
        return self.read(address)

# @intent:responsibility 16bitワード単位のRAMデバイスの機能を提供します。
class RAM(Device):
    """
    ワードアドレッシングのRAMデバイス。全ワードは0で初期化されます。
    """
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = array("H", [0]) * size
        self._size = size

    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address} out of bounds for RAM of size {self._size}.")
        if not 0 <= data <= WORD_MASK:
            raise ValueError(f"Data {data} is not a 16-bit value.")
        self._memory[address] = data

    def get_size(self) -> int:
        return self._size

# @intent:responsibility メモリアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
# @intent:rationale バスの全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Bus:
    """
    16bitアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
    アドレスとデータは常に16bitで折り返されます（0xFFFFの次は0x0000）。
    """
    def __init__(self):
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = []

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:pre-condition 0 <= start_address <= end_address <= 0xFFFF。
    # @intent:rationale 範囲が重なる場合は先に登録されたデバイスが優先されます。
    #                  MMIOデバイスをRAMより先に登録することで、特定アドレスだけを横取りできます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address <= WORD_MASK):
            raise ValueError("Invalid address range: start_address must be <= end_address and within 0x0000-0xFFFF.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} words) does not match "
                    f"the specified address range size ({expected_size} words)."
                )

        self._memory_map.append((start_address, end_address, device))

    # @intent:post-condition デバイスが見つからなかった場合、IndexErrorを発生させます。
    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    # @intent:responsibility 指定されたアドレスから16bitのデータを読み出し、ログに記録します。
    def read(self, address: int) -> int:
        address &= WORD_MASK
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログもデバイスの副作用もなしにデータを読み出します。
    def peek(self, address: int) -> int:
        """
        逆アセンブラや文字列出力トラップなど、インスペクタ用の読み出し。
        キーボードのポーリングは発生しません。
        """
        address &= WORD_MASK
        device, offset = self._find_device(address)
        return device.peek(offset)

    # @intent:responsibility 指定されたアドレスに16bitのデータを書き込みます。保護されたアドレスはありません。
    def write(self, address: int, data: int) -> None:
        address &= WORD_MASK
        data &= WORD_MASK
        device, offset = self._find_device(address)
        device.write(offset, data)
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility ローダー用の書き込み。アクティビティログには残しません。
    def load(self, address: int, data: int) -> None:
        address &= WORD_MASK
        device, offset = self._find_device(address)
        device.write(offset, data & WORD_MASK)
