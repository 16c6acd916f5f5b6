# lc3_emu/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Optional

from lc3_emu.transport.bus import Bus
from lc3_emu.core.snapshot import Snapshot, Operation, Metadata
from lc3_emu.core.state import CpuState

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._instruction_count: int = 0
        self.trace: bool = False
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:rationale 各CPUアーキテクチャで初期状態が異なるため、抽象メソッドとして定義します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。メモリの内容は保持されます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._instruction_count = 0

    def get_state(self) -> CpuState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._state.halted

    @property
    def instruction_count(self) -> int:
        return self._instruction_count

    # @intent:responsibility メモリから次の命令ワードをフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCから命令ワードを読み出して返します。PCの更新は_update_pcが行います。
        """
        pass

    @abstractmethod
    def _decode(self, instruction: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility HALT状態の場合の処理を行います。
    # @intent:return HALT中であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    # @intent:responsibility フェッチ→デコード→PC更新→実行の1サイクルを行い、実行した命令を返します。
    def _cycle(self) -> Operation:
        initial_pc = self._state.pc
        instruction = self._fetch()
        operation = self._decode(instruction)
        self._update_pc(operation)
        if self.trace:
            logger.debug("%04X: %s", initial_pc, operation.text)
        self._execute(operation)
        self._instruction_count += 1
        return operation

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→HALT判定→サイクル→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        """
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        operation = self._cycle()
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility HALTするまで命令サイクルを繰り返します。
    # @intent:rationale 連続実行ではSnapshotを生成せず、状態のコピーのコストを避けます。
    def run(self, max_steps: Optional[int] = None) -> int:
        """
        HALTするか、max_stepsに達するまで命令を実行し、今回実行した命令数を返します。
        """
        executed = 0
        while not self._state.halted:
            if max_steps is not None and executed >= max_steps:
                logger.warning("Instruction limit of %d reached at PC %#06x", max_steps, self._state.pc)
                break
            self._bus.get_and_clear_activity_log()
            self._cycle()
            executed += 1
        return executed

    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(
                instruction_count=self._instruction_count,
                symbol_info=f"{initial_pc:#06x}: {operation.text}",
            ),
            bus_activity=bus_activity
        )
