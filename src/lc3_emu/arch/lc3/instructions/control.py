# lc3_emu/arch/lc3/instructions/control.py
"""
制御命令（分岐、ジャンプ、サブルーチン）と未実装命令の実装。
"""
from lc3_emu.core.errors import IllegalOpcodeError
from lc3_emu.core.snapshot import Operation
from lc3_emu.transport.bus import Bus
from lc3_emu.arch.lc3.state import Lc3CpuState
from .base import Opcode, sr1, pc_offset9, sign_extend, pc_relative, instruction_address, reg_name

# --- BR ---
# @intent:responsibility BR命令をデコードします。nzpビットをニーモニックに含めます。
def decode_br(instr: int, pc: int) -> Operation:
    nzp = (instr >> 9) & 0x7
    if nzp == 0:
        return Operation(Opcode.BR, instr, "NOP")
    suffix = "".join(ch for ch, bit in (("n", 0b100), ("z", 0b010), ("p", 0b001)) if nzp & bit)
    target = (pc + 1 + pc_offset9(instr)) & 0xFFFF
    return Operation(Opcode.BR, instr, f"BR{suffix}", [f"x{target:04X}"])

# @intent:responsibility BR命令を実行し、現在のフラグとnzpの論理積が非0であれば分岐します。
def execute_br(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    cond_flag = (op.instruction >> 9) & 0x7
    if state.cond & cond_flag:
        state.pc = pc_relative(state, pc_offset9(op.instruction))

# --- JMP ---
def decode_jmp(instr: int, pc: int) -> Operation:
    base = sr1(instr)
    if base == 7:
        return Operation(Opcode.JMP, instr, "RET")
    return Operation(Opcode.JMP, instr, "JMP", [reg_name(base)])

def execute_jmp(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    state.pc = state.registers[sr1(op.instruction)]

# --- JSR / JSRR ---
def decode_jsr(instr: int, pc: int) -> Operation:
    if (instr >> 11) & 1:
        target = (pc + 1 + sign_extend(instr & 0x7FF, 11)) & 0xFFFF
        return Operation(Opcode.JSR, instr, "JSR", [f"x{target:04X}"])
    return Operation(Opcode.JSR, instr, "JSRR", [reg_name(sr1(instr))])

# @intent:responsibility JSR/JSRR命令を実行します。
# @intent:rationale 既定ではR7に戻り先を保存しません。strict_isa の場合のみ保存します。
def execute_jsr(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    instr = op.instruction
    return_address = state.pc
    if (instr >> 11) & 1:
        target = pc_relative(state, sign_extend(instr & 0x7FF, 11))
    else:
        target = state.registers[sr1(instr)]
    if state.strict_isa:
        state.set_register(7, return_address)
    state.pc = target

# --- RTI / RES ---
def decode_rti(instr: int, pc: int) -> Operation:
    return Operation(Opcode.RTI, instr, "RTI")

def decode_res(instr: int, pc: int) -> Operation:
    return Operation(Opcode.RES, instr, "RES")

# @intent:responsibility 未実装のオペコードは致命的なフォールトとして扱います。
def execute_illegal(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    raise IllegalOpcodeError(f"Illegal opcode {op.mnemonic}", instruction_address(state), op.instruction)
