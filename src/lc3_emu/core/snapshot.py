# lc3_emu/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクルの結果（CPU状態、実行した命令、バスアクティビティ）を
記録する不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from lc3_emu.core.state import CpuState
from lc3_emu.transport.bus import BusAccess

# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（オペコード、命令ワード、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode: int # 命令の上位4bit
    instruction: int # 命令ワード全体
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["R0", "R1", "#3"]
    length: int = 1 # 命令のワード長

    # @intent:accessor 表示用の命令文字列を返します。
    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    instruction_count: int # 累計実行命令数
    symbol_info: Optional[str] = None # 例: "0x3000: ADD R0, R0, #3"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1命令サイクル実行後の、CPUとバスの状態を記録した不変のデータ構造。
    stateは生成時点のコピーであり、その後のサイクルの影響を受けません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
