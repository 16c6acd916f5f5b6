# lc3_emu/arch/lc3/instructions/load.py
"""
ロード・ストア命令（LD, LDI, LDR, LEA, ST, STI, STR）の実装。
"""
from lc3_emu.core.snapshot import Operation
from lc3_emu.transport.bus import Bus
from lc3_emu.arch.lc3.state import Lc3CpuState
from .base import Opcode, dr, sr1, pc_offset9, offset6, pc_relative, signed, reg_name

def _decode_pc_relative(opcode: Opcode, instr: int, pc: int) -> Operation:
    target = (pc + 1 + pc_offset9(instr)) & 0xFFFF
    return Operation(opcode, instr, opcode.name, [reg_name(dr(instr)), f"x{target:04X}"])

def _decode_base_offset(opcode: Opcode, instr: int, pc: int) -> Operation:
    return Operation(opcode, instr, opcode.name,
                     [reg_name(dr(instr)), reg_name(sr1(instr)), f"#{signed(offset6(instr))}"])

# @intent:utility_function BaseR + offset6 のアドレスを計算します。
def _base_address(state: Lc3CpuState, instr: int) -> int:
    return (state.registers[sr1(instr)] + offset6(instr)) & 0xFFFF

# --- LD ---
def decode_ld(instr: int, pc: int) -> Operation:
    return _decode_pc_relative(Opcode.LD, instr, pc)

# @intent:responsibility LD命令を実行し、PC相対アドレスの内容をDRに読み込みます。
def execute_ld(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    r = dr(op.instruction)
    state.set_register(r, bus.read(pc_relative(state, pc_offset9(op.instruction))))
    if state.strict_isa:
        state.update_flags(r)

# --- LDI ---
def decode_ldi(instr: int, pc: int) -> Operation:
    return _decode_pc_relative(Opcode.LDI, instr, pc)

# @intent:responsibility LDI命令を実行し、PC相対アドレスが指すポインタ先の内容をDRに読み込みます。
def execute_ldi(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    r = dr(op.instruction)
    pointer = bus.read(pc_relative(state, pc_offset9(op.instruction)))
    state.set_register(r, bus.read(pointer))
    state.update_flags(r)

# --- LDR ---
def decode_ldr(instr: int, pc: int) -> Operation:
    return _decode_base_offset(Opcode.LDR, instr, pc)

def execute_ldr(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    r = dr(op.instruction)
    state.set_register(r, bus.read(_base_address(state, op.instruction)))
    if state.strict_isa:
        state.update_flags(r)

# --- LEA ---
def decode_lea(instr: int, pc: int) -> Operation:
    return _decode_pc_relative(Opcode.LEA, instr, pc)

# @intent:responsibility LEA命令を実行し、PC相対アドレスそのものをDRに格納します。
def execute_lea(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    r = dr(op.instruction)
    state.set_register(r, pc_relative(state, pc_offset9(op.instruction)))
    state.update_flags(r)

# --- ST ---
def decode_st(instr: int, pc: int) -> Operation:
    return _decode_pc_relative(Opcode.ST, instr, pc)

def execute_st(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    source = dr(op.instruction)
    bus.write(pc_relative(state, pc_offset9(op.instruction)), state.registers[source])

# --- STI ---
def decode_sti(instr: int, pc: int) -> Operation:
    return _decode_pc_relative(Opcode.STI, instr, pc)

# @intent:responsibility STI命令を実行し、PC相対アドレスが指すポインタ先にSRを書き込みます。
def execute_sti(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    source = dr(op.instruction)
    pointer = bus.read(pc_relative(state, pc_offset9(op.instruction)))
    bus.write(pointer, state.registers[source])

# --- STR ---
def decode_str(instr: int, pc: int) -> Operation:
    return _decode_base_offset(Opcode.STR, instr, pc)

def execute_str(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    source = dr(op.instruction)
    bus.write(_base_address(state, op.instruction), state.registers[source])
