# lc3_emu/arch/lc3/instructions/__init__.py
"""
LC-3命令セット実装パッケージ。
"""
from lc3_emu.transport.bus import Bus
from lc3_emu.core.snapshot import Operation
from lc3_emu.arch.lc3.state import Lc3CpuState
from .base import Opcode, opcode_of, sign_extend
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 命令ワードをデコードします。
# @intent:pre-condition pcはその命令自身のアドレスです（PC相対ターゲットの表示に使用）。
def decode_instruction(instr: int, pc: int) -> Operation:
    return DECODE_MAP[opcode_of(instr)](instr, pc)

# @intent:responsibility デコードされたLC-3命令を実行し、CPUの状態を変更します。
def execute_instruction(operation: Operation, state: Lc3CpuState, bus: Bus) -> None:
    EXECUTE_MAP[Opcode(operation.opcode)](state, bus, operation)
