"""AVX2 to SVE instruction translator package"""
from .transpiler import (
    translate, translate_or_raise, transpile_text, transpile_file, main, AssemblyTranspiler
)
from .data_structures import Instruction, MnemonicEntry, TranslationResult, TranslatedLine
from .exceptions import (
    TranspileError, UnsupportedInstruction, UnsupportedMnemonic, UnsupportedOperandShape,
    UnsupportedOperand, MalformedImmediate, MalformedRegister
)

__all__ = [
    'translate', 'translate_or_raise', 'transpile_text', 'transpile_file', 'main',
    'AssemblyTranspiler', 'Instruction', 'MnemonicEntry', 'TranslationResult', 'TranslatedLine',
    'TranspileError', 'UnsupportedInstruction', 'UnsupportedMnemonic', 'UnsupportedOperandShape',
    'UnsupportedOperand', 'MalformedImmediate', 'MalformedRegister'
]
