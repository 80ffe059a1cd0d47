from typing import List
from .data_structures import Instruction
from .exceptions import UnsupportedMnemonic

class InstructionAnalyzer:
    @staticmethod
    def tokenize(line: str) -> List[str]:
        tokens = []
        for token in line.split():
            if token.endswith(','):
                token = token[:-1]
            if token:
                tokens.append(token)
        return tokens

    @staticmethod
    def parse_instruction(line: str) -> Instruction:
        """Split one instruction line into mnemonic and operand tokens"""
        tokens = InstructionAnalyzer.tokenize(line)
        if not tokens:
            raise UnsupportedMnemonic("", context=line)
        return Instruction(
            mnemonic=tokens[0],
            operands=tuple(tokens[1:]),
            original_line=line
        )

    @staticmethod
    def strip_comment(line: str) -> str:
        return line.split('//', 1)[0].strip()

    @staticmethod
    def is_label(line: str) -> bool:
        stripped = line.strip()
        return stripped.endswith(':') and len(stripped.split()) == 1

    @staticmethod
    def is_comment(line: str) -> bool:
        return line.strip().startswith('//')
