# lc3_emu/arch/lc3/instructions/base.py
"""
LC-3命令実装用の共通ユーティリティ。
"""
from enum import IntEnum

from lc3_emu.arch.lc3.state import Lc3CpuState

# @intent:constant LC-3の16種類のオペコード（命令ワードの上位4bit）。
class Opcode(IntEnum):
    BR = 0   # branch
    ADD = 1
    LD = 2
    ST = 3
    JSR = 4  # jump register
    AND = 5
    LDR = 6
    STR = 7
    RTI = 8  # unused
    NOT = 9
    LDI = 10
    STI = 11
    JMP = 12
    RES = 13  # reserved (unused)
    LEA = 14
    TRAP = 15

# @intent:utility_function nビットの2の補数フィールドを16bitに符号拡張します。
def sign_extend(x: int, bit_count: int) -> int:
    """
    下位bit_countビットを取り出し、その最上位ビットが1であれば上位ビットを全て1で埋めます。
    bit_count=16 の場合は値をそのまま返します。
    """
    x &= (1 << bit_count) - 1
    if (x >> (bit_count - 1)) & 1:
        x |= (0xFFFF << bit_count) & 0xFFFF
    return x

# @intent:utility_function 命令ワードからオペコードを取り出します。
def opcode_of(instr: int) -> Opcode:
    return Opcode(instr >> 12)

# 各フィールドの抽出
def dr(instr: int) -> int:
    return (instr >> 9) & 0x7

def sr1(instr: int) -> int:
    return (instr >> 6) & 0x7

def sr2(instr: int) -> int:
    return instr & 0x7

def imm_mode(instr: int) -> bool:
    return bool((instr >> 5) & 0x1)

def pc_offset9(instr: int) -> int:
    return sign_extend(instr & 0x1FF, 9)

def offset6(instr: int) -> int:
    return sign_extend(instr & 0x3F, 6)

# @intent:utility_function 16bitの符号付き値として表示用に変換します。
def signed(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value

def reg_name(r: int) -> str:
    return f"R{r}"

# @intent:utility_function PC相対アドレスを計算します（PCは既にインクリメント済み）。
def pc_relative(state: Lc3CpuState, offset: int) -> int:
    return (state.pc + offset) & 0xFFFF

# @intent:utility_function 実行中の命令自身のアドレスを返します。
def instruction_address(state: Lc3CpuState) -> int:
    return (state.pc - 1) & 0xFFFF
