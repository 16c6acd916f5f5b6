# lc3_emu/arch/lc3/instructions/alu.py
"""
算術論理演算命令（ADD, AND, NOT）の実装。
"""
from lc3_emu.core.snapshot import Operation
from lc3_emu.transport.bus import Bus
from lc3_emu.arch.lc3.state import Lc3CpuState
from .base import Opcode, dr, sr1, sr2, imm_mode, sign_extend, signed, reg_name

# @intent:utility_function ADD/ANDの第2オペランド（即値またはSR2）を求めます。
def _second_operand(state: Lc3CpuState, instr: int) -> int:
    if imm_mode(instr):
        return sign_extend(instr & 0x1F, 5)
    return state.registers[sr2(instr)]

def _decode_binary(opcode: Opcode, instr: int) -> Operation:
    if imm_mode(instr):
        source = f"#{signed(sign_extend(instr & 0x1F, 5))}"
    else:
        source = reg_name(sr2(instr))
    return Operation(opcode, instr, opcode.name, [reg_name(dr(instr)), reg_name(sr1(instr)), source])

# --- ADD ---
def decode_add(instr: int, pc: int) -> Operation:
    return _decode_binary(Opcode.ADD, instr)

# @intent:responsibility ADD命令を実行し、結果をDRに格納し、フラグを更新します。
def execute_add(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    instr = op.instruction
    r = dr(instr)
    state.set_register(r, state.registers[sr1(instr)] + _second_operand(state, instr))
    state.update_flags(r)

# --- AND ---
def decode_and(instr: int, pc: int) -> Operation:
    return _decode_binary(Opcode.AND, instr)

# @intent:responsibility AND命令を実行し、結果をDRに格納し、フラグを更新します。
def execute_and(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    instr = op.instruction
    r = dr(instr)
    state.set_register(r, state.registers[sr1(instr)] & _second_operand(state, instr))
    state.update_flags(r)

# --- NOT ---
def decode_not(instr: int, pc: int) -> Operation:
    return Operation(Opcode.NOT, instr, "NOT", [reg_name(dr(instr)), reg_name(sr1(instr))])

# @intent:responsibility NOT命令を実行し、SRのビット反転をDRに格納します。
# @intent:rationale 既定ではフラグを更新しません。strict_isa の場合のみ更新します。
def execute_not(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    instr = op.instruction
    r = dr(instr)
    state.set_register(r, ~state.registers[sr1(instr)])
    if state.strict_isa:
        state.update_flags(r)
