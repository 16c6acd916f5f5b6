# lc3_emu/arch/lc3/instructions/trap.py
"""
TRAP命令とトラップルーチン（システムコール）の実装。

トラップルーチンはバスのI/Oポート空間を介してホストコンソールと入出力を行います。
"""
from typing import Callable, Dict

from lc3_emu.core.errors import IllegalTrapError
from lc3_emu.core.snapshot import Operation
from lc3_emu.devices.console import CONSOLE_DATA_PORT, CONSOLE_CONTROL_PORT
from lc3_emu.transport.bus import Bus
from lc3_emu.arch.lc3.state import Lc3CpuState
from .base import Opcode, instruction_address

# @intent:constant トラップベクタ。
TRAP_GETC = 0x20   # get character from keyboard, not echoed
TRAP_OUT = 0x21    # output a character
TRAP_PUTS = 0x22   # output a word string
TRAP_IN = 0x23     # get character from keyboard, echoed onto the terminal
TRAP_PUTSP = 0x24  # output a byte string
TRAP_HALT = 0x25   # halt the program

IN_PROMPT = "Enter a character: "
HALT_MESSAGE = "HALT\n"

TrapRoutine = Callable[[Lc3CpuState, Bus], None]

# @intent:utility_function コンソールへ1文字出力します。
def _put_char(bus: Bus, char: int) -> None:
    bus.write_io(CONSOLE_DATA_PORT, char & 0xFF)

def _put_text(bus: Bus, text: str) -> None:
    for ch in text.encode("latin-1"):
        _put_char(bus, ch)

def _flush(bus: Bus) -> None:
    bus.write_io(CONSOLE_CONTROL_PORT, 0)

def trap_getc(state: Lc3CpuState, bus: Bus) -> None:
    state.set_register(0, bus.read_io(CONSOLE_DATA_PORT))

def trap_out(state: Lc3CpuState, bus: Bus) -> None:
    _put_char(bus, state.registers[0])

# @intent:responsibility R0が指すアドレスから0ワードまで、各ワードの下位バイトを出力します。
# @intent:post-condition 終端の0ワードより先は読みません。
def trap_puts(state: Lc3CpuState, bus: Bus) -> None:
    address = state.registers[0]
    word = bus.read(address)
    while word:
        _put_char(bus, word)
        address = (address + 1) & 0xFFFF
        word = bus.read(address)
    _flush(bus)

def trap_in(state: Lc3CpuState, bus: Bus) -> None:
    _put_text(bus, IN_PROMPT)
    _flush(bus)
    state.set_register(0, bus.read_io(CONSOLE_DATA_PORT))
    _put_char(bus, state.registers[0])
    _flush(bus)

# @intent:responsibility 1ワードに2文字（下位バイト、上位バイトの順）を詰めた文字列を出力します。
# @intent:rationale 上位バイトが0の場合はそれを出力せずに終了します（奇数長文字列の終端）。
def trap_putsp(state: Lc3CpuState, bus: Bus) -> None:
    address = state.registers[0]
    word = bus.read(address)
    while word:
        _put_char(bus, word & 0xFF)
        high = word >> 8
        if not high:
            break
        _put_char(bus, high)
        address = (address + 1) & 0xFFFF
        word = bus.read(address)
    _flush(bus)

def trap_halt(state: Lc3CpuState, bus: Bus) -> None:
    _put_text(bus, HALT_MESSAGE)
    _flush(bus)
    state.halted = True

# @intent:map トラップベクタからトラップルーチンへのマッピングテーブル。
TRAP_MAP: Dict[int, TrapRoutine] = {
    TRAP_GETC: trap_getc,
    TRAP_OUT: trap_out,
    TRAP_PUTS: trap_puts,
    TRAP_IN: trap_in,
    TRAP_PUTSP: trap_putsp,
    TRAP_HALT: trap_halt,
}

# --- TRAP ---
def decode_trap(instr: int, pc: int) -> Operation:
    vector = instr & 0xFF
    routine = TRAP_MAP.get(vector)
    if routine:
        return Operation(Opcode.TRAP, instr, routine.__name__[len("trap_"):].upper())
    return Operation(Opcode.TRAP, instr, "TRAP", [f"x{vector:02X}"])

# @intent:responsibility TRAP命令を実行し、ベクタに対応するトラップルーチンを呼び出します。
# @intent:rationale 未定義のベクタは黙って無視せず、フォールトとして実行を停止します。
def execute_trap(state: Lc3CpuState, bus: Bus, op: Operation) -> None:
    vector = op.instruction & 0xFF
    routine = TRAP_MAP.get(vector)
    if routine is None:
        raise IllegalTrapError(vector, instruction_address(state), op.instruction)
    routine(state, bus)
