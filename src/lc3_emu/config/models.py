from dataclasses import dataclass, field
from typing import Dict, List, Optional

@dataclass
class CpuInitialState:
    pc: int = 0x3000
    registers: Dict[str, int] = field(default_factory=dict)  # {"r0": 0, "r6": 0xFE00}

@dataclass
class SystemConfig:
    architecture: str = "LC3"
    images: List[str] = field(default_factory=list)
    strict_isa: bool = False  # NOT/LD/LDRのフラグ更新とJSRのR7保存を有効化
    max_steps: Optional[int] = None
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
