from types import MappingProxyType
from typing import Mapping
from .data_structures import MnemonicEntry

class SIMDTranslator:
    AVX2_TO_SVE: Mapping[str, MnemonicEntry] = MappingProxyType({
        'VPSRLQ': MnemonicEntry('lsr', 'd'),
        'VPAND': MnemonicEntry('and', 'd'),
        'VPSHUFB': MnemonicEntry('tbl', 'b'),
        'VPBROADCASTB': MnemonicEntry('dup', 'b'),
        'VPXOR': MnemonicEntry('eor', 'd'),
        'VMOVDQU': MnemonicEntry('', ''),  # ldr/str picked by direction
        'ADDQ': MnemonicEntry('add', ''),
        'SHRQ': MnemonicEntry('lsr', ''),
        'TESTQ': MnemonicEntry('tst', ''),
        'DECQ': MnemonicEntry('subs', ''),
        'JZ': MnemonicEntry('BEQ', ''),
        'JNZ': MnemonicEntry('BNE', ''),
    })

    EMPTY = MnemonicEntry()

    @staticmethod
    def lookup(mnemonic: str) -> MnemonicEntry:
        return SIMDTranslator.AVX2_TO_SVE.get(mnemonic, SIMDTranslator.EMPTY)
