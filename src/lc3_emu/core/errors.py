# lc3_emu/core/errors.py
"""
CPUの実行中に発生する致命的なフォールトの例外定義。
"""

# @intent:responsibility 命令サイクルを継続できないフォールトを表します。
class CpuFault(RuntimeError):
    """
    実行を継続できない命令に遭遇したことを示す例外の基底クラス。
    address はフォールトを起こした命令のアドレス、instruction はその命令ワードです。
    """
    def __init__(self, message: str, address: int, instruction: int):
        super().__init__(f"{message} at {address:#06x} (instruction {instruction:#06x})")
        self.address = address
        self.instruction = instruction

# @intent:responsibility 未実装または予約オペコード（RTI/RES）の実行を表します。
class IllegalOpcodeError(CpuFault):
    pass

# @intent:responsibility 未定義のトラップベクタの実行を表します。
class IllegalTrapError(CpuFault):
    def __init__(self, vector: int, address: int, instruction: int):
        super().__init__(f"Undefined trap vector {vector:#04x}", address, instruction)
        self.vector = vector
