from dataclasses import dataclass
from typing import Optional, Tuple
from .exceptions import TranspileError

@dataclass(frozen=True)
class MnemonicEntry:
    mnemonic: str = ""
    suffix: str = ""

@dataclass(frozen=True)
class Instruction:
    mnemonic: str
    operands: Tuple[str, ...]
    original_line: str

@dataclass(frozen=True)
class TranslationResult:
    output: str = ""
    legacy: bool = False
    error: Optional[TranspileError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

@dataclass(frozen=True)
class TranslatedLine:
    line_number: int
    source: str
    result: TranslationResult
