# tests/arch/lc3/test_instructions_control.py
"""
分岐、ジャンプ、サブルーチン呼び出し、未実装オペコードのテスト。
"""
import pytest

from lc3_emu.arch.lc3.state import FL_POS, FL_ZRO, FL_NEG
from lc3_emu.core.errors import CpuFault, IllegalOpcodeError

class TestBranch:
    def test_br_taken_when_flag_matches(self, machine):
        machine.state.cond = FL_NEG
        machine.load([0x0802])  # BRn +2
        snapshot = machine.cpu.step()
        assert machine.state.pc == 0x3003
        assert snapshot.operation.text == "BRn x3003"

    def test_br_not_taken_when_flag_differs(self, machine):
        machine.state.cond = FL_NEG
        machine.load([0x0602])  # BRzp +2
        machine.cpu.step()
        assert machine.state.pc == 0x3001

    @pytest.mark.parametrize("cond", [FL_POS, FL_ZRO, FL_NEG])
    def test_brnzp_always_taken(self, machine, cond):
        machine.state.cond = cond
        machine.load([0x0FFF])  # BRnzp -1
        machine.cpu.step()
        assert machine.state.pc == 0x3000

    def test_br_with_empty_condition_is_nop(self, machine):
        machine.load([0x0005])
        snapshot = machine.cpu.step()
        assert machine.state.pc == 0x3001
        assert snapshot.operation.mnemonic == "NOP"

    def test_br_does_not_change_flags(self, machine):
        machine.state.cond = FL_POS
        machine.load([0x0E03])  # BRnzp +3
        machine.cpu.step()
        assert machine.state.pc == 0x3004
        assert machine.state.cond == FL_POS

class TestJump:
    def test_jmp(self, machine):
        machine.state.registers[2] = 0x4000
        machine.load([0xC080])  # JMP R2
        snapshot = machine.cpu.step()
        assert machine.state.pc == 0x4000
        assert snapshot.operation.text == "JMP R2"

    def test_ret(self, machine):
        machine.state.registers[7] = 0x3100
        machine.load([0xC1C0])  # RET
        snapshot = machine.cpu.step()
        assert machine.state.pc == 0x3100
        assert snapshot.operation.mnemonic == "RET"

class TestSubroutine:
    # @intent:test_case 既定ではJSRがR7に戻り先を保存しないことを検証します。
    def test_jsr_offset_without_link(self, machine):
        machine.state.registers[7] = 0x1111
        machine.load([0x4810])  # JSR +16
        machine.cpu.step()
        assert machine.state.pc == 0x3011
        assert machine.state.registers[7] == 0x1111

    def test_jsrr_register(self, machine):
        machine.state.registers[3] = 0x5000
        machine.load([0x40C0])  # JSRR R3
        snapshot = machine.cpu.step()
        assert machine.state.pc == 0x5000
        assert snapshot.operation.text == "JSRR R3"

    def test_jsr_links_r7_in_strict_mode(self, make_machine):
        machine = make_machine(strict_isa=True)
        machine.load([0x4FFF])  # JSR -1
        machine.cpu.step()
        assert machine.state.pc == 0x3000
        assert machine.state.registers[7] == 0x3001

    def test_jsrr_links_r7_in_strict_mode(self, make_machine):
        machine = make_machine(strict_isa=True)
        machine.state.registers[7] = 0x6000
        machine.load([0x41C0])  # JSRR R7
        machine.cpu.step()
        # 飛び先はR7の更新前の値
        assert machine.state.pc == 0x6000
        assert machine.state.registers[7] == 0x3001

class TestIllegalOpcodes:
    @pytest.mark.parametrize("instr, mnemonic", [(0x8000, "RTI"), (0xD000, "RES")])
    def test_reserved_opcodes_fault(self, machine, instr, mnemonic):
        machine.load([instr])
        with pytest.raises(IllegalOpcodeError, match=mnemonic) as excinfo:
            machine.cpu.step()
        assert isinstance(excinfo.value, CpuFault)
        assert excinfo.value.address == 0x3000
        assert excinfo.value.instruction == instr
        assert not machine.cpu.halted
