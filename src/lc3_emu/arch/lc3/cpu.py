# lc3_emu/arch/lc3/cpu.py
"""
LC-3 CPUエミュレーションの中心モジュール。
"""
import copy
from typing import Optional

from lc3_emu.core.cpu import AbstractCpu
from lc3_emu.core.snapshot import Operation, Metadata, Snapshot
from lc3_emu.transport.bus import Bus
from lc3_emu.arch.lc3.state import Lc3CpuState
from lc3_emu.arch.lc3.instructions import decode_instruction, execute_instruction

# @intent:responsibility LC-3 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Lc3Cpu(AbstractCpu):
    """
    LC-3 CPUをエミュレートするクラス。
    状態はRUNNINGとHALTEDの2つで、HALTトラップによってのみHALTEDへ遷移します。
    """
    def __init__(self, bus: Bus, strict_isa: bool = False):
        self._strict_isa = strict_isa
        super().__init__(bus)

    def _create_initial_state(self) -> Lc3CpuState:
        return Lc3CpuState(strict_isa=self._strict_isa)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, instruction: int) -> Operation:
        return decode_instruction(instruction, self._state.pc)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus)

    # @intent:responsibility HALT後はバスアクセスを一切行わず、PCを維持したままのSnapshotを返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if not self._state.halted:
            return None
        operation = Operation(opcode=0xF, instruction=0, mnemonic="HALT (suspended)", length=0)
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(
                instruction_count=self._instruction_count,
                symbol_info=f"PC: {current_pc:#06x} -> HALT (suspended)",
            ),
            bus_activity=[],
        )
