# lc3_emu/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、LC-3の16bitワードアドレス空間を抽象化し、
読み書きアクセスを適切なデバイスに委譲する責務を負います。
メモリ空間とは独立したI/Oポート空間も管理し、トラップルーチンからの
ホストコンソールへのアクセスを同じ仕組みで記録します。
"""
from abc import ABC, abstractmethod
from array import array
from typing import List, Tuple
from dataclasses import dataclass
from enum import Enum

WORD_MASK = 0xFFFF

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"
    IO_READ = "IO_READ"
    IO_WRITE = "IO_WRITE"

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
    # @intent:responsibility 指定されたオフセットから16bitのワードを読み出す責務を負います。
    # @intent:pre-condition オフセットはデバイスの有効範囲内である必要があります。
    @abstractmethod
    def read(self, address: int) -> int:
        """
        指定されたアドレスから16bitのワードを読み出します。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

    # @intent:responsibility 指定されたオフセットに16bitのワードを書き込みます。
    @abstractmethod
    def write(self, address: int, data: int) -> None:
        """
        指定されたアドレスに16bitのワードを書き込みます。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

    # @intent:responsibility 副作用なしでワードを読み出します。
    # @intent:rationale 読み出しに副作用を持つデバイス（キーボードなど）はこれをオーバーライドします。
    def peek(self, address: int) -> int:
        return self.read(address)

# @intent:responsibility ワード単位のRAMデバイスの機能を提供します。
class RAM(Device):
    """
    16bitワードを格納するRAMデバイス。生成時に全ワードが0で初期化されます。
    """
    # @intent:responsibility 指定されたワード数のメモリ領域を初期化します。
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = array('H', [0]) * size
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

    # @intent:responsibility RAMのサイズ（ワード数）を返します。
    def get_size(self) -> int:
        return self._size

# @intent:responsibility メモリアドレス空間とI/Oポート空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
# @intent:rationale バスの全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Bus:
    """
    メモリアドレス空間とI/Oポート空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
    バス上で行われた全てのメモリ/IOアクセスを記録する機能を提供します。
    """
    def __init__(self):
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._io_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = []

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        """
        現在のバスアクティビティログを返し、内部ログをクリアします。
        """
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 登録対象の範囲とデバイスを検証します。
    def _validate_region(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} words) does not match "
                    f"the specified address range size ({expected_size} words)."
                )

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:rationale アドレス範囲の重複は許容し、先に登録されたデバイスを優先します。
    #                  メモリマップドI/Oレジスタを全域RAMの前に登録することで、RAMを分割せずに済みます。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        """
        指定されたアドレス範囲にデバイスを登録します。
        範囲が重複する場合は、先に登録されたデバイスがアクセスを受け取ります。
        """
        self._validate_region(start_address, end_address, device)
        self._memory_map.append((start_address, end_address, device))

    # @intent:responsibility 指定されたI/Oポート範囲にデバイスを登録します。
    def register_io_device(self, start_port: int, end_port: int, device: Device) -> None:
        self._validate_region(start_port, end_port, device)
        self._io_map.append((start_port, end_port, device))

    # @intent:post-condition デバイスが見つからなかった場合、IndexErrorを発生させます。
    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def _find_io_device(self, port: int) -> Tuple[Device, int]:
        for start, end, device in self._io_map:
            if start <= port <= end:
                return device, port - start
        raise IndexError(f"I/O port {port:#04x} not mapped to any device.")

    # @intent:responsibility 指定されたアドレスから16bitのワードを読み出します。
    def read(self, address: int) -> int:
        """
        指定されたアドレスから16bitのワードを読み出します。
        アクセスはログに記録されます。デバイスによっては読み出しに副作用があります。
        """
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログを記録せず、デバイスの副作用も起こさずにワードを読み出します。
    def peek(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.peek(offset)

    # @intent:responsibility 指定されたアドレスに16bitのワードを書き込みます。
    def write(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility 指定されたI/Oポートからデータを読み出します。
    def read_io(self, port: int) -> int:
        device, offset = self._find_io_device(port)
        data = device.read(offset)
        self._log_access(port, data, BusAccessType.IO_READ)
        return data

    # @intent:responsibility 指定されたI/Oポートにデータを書き込みます。
    def write_io(self, port: int, data: int) -> None:
        device, offset = self._find_io_device(port)
        device.write(offset, data)
        self._log_access(port, data, BusAccessType.IO_WRITE)
