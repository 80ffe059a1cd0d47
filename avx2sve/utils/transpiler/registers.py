import re
from typing import Dict, Tuple
from .enums import VectorSize, AddressingMode
from .exceptions import MalformedImmediate, MalformedRegister, UnsupportedOperand

VECTOR_WIDTH = 32
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

class RegisterMapper:
    """Operand codecs between Go/Plan 9 AVX2 tokens and SVE operand text.

    Vector registers keep their ordinal (Y9 -> z9, X4 -> z4). Scalar
    registers map AX..DX, SI, DI, BP and Rn onto xN. Memory references are
    rendered either as SVE addressing modes (``[x1, #1, MUL VL]``) or in the
    legacy Plan 9 form (``32(x1)``).
    """
    X86_64_REGS: Dict[str, int] = {
        'AX': 0, 'BX': 1, 'CX': 2, 'DX': 3,
        'SI': 4, 'DI': 5, 'BP': 6,
    }
    IMMEDIATE_PREFIX = '$0x'
    SCALE_SUFFIX = '*8)'

    _DIGITS = re.compile(r'[0-9]+')
    _NUMBERED = re.compile(r'R([0-9]+)')
    _HEX = re.compile(r'[+-]?[0-9a-fA-F]+')
    _OFFSET = re.compile(r'[+-]?[0-9]+')

    @staticmethod
    def is_vector_register(token: str, size: VectorSize = VectorSize.YMM) -> bool:
        return token[:1] == size.value

    @staticmethod
    def is_immediate(token: str) -> bool:
        return token[:1] == '$'

    @staticmethod
    def is_memory_reference(token: str) -> bool:
        return '(' in token and ')' in token

    @staticmethod
    def is_scaled_index(token: str) -> bool:
        return RegisterMapper.SCALE_SUFFIX in token

    @staticmethod
    def vector_lengths(offset: int) -> int:
        """Byte offset as a count of 32-byte vectors, truncated toward zero.

        Callers only offset by whole vectors; a remainder is dropped.
        """
        count = abs(offset) // VECTOR_WIDTH
        return count if offset >= 0 else -count

    @staticmethod
    def decode_vector_register(token: str, size: VectorSize = VectorSize.YMM, suffix: str = "") -> str:
        if not RegisterMapper.is_vector_register(token, size):
            raise MalformedRegister(token)
        digits = token[1:]
        if not RegisterMapper._DIGITS.fullmatch(digits):
            raise MalformedRegister(token)
        if suffix:
            suffix = "." + suffix
        return f"z{int(digits)}{suffix}"

    @staticmethod
    def decode_immediate(token: str) -> int:
        prefix = RegisterMapper.IMMEDIATE_PREFIX
        if not token.startswith(prefix):
            raise MalformedImmediate(token)
        digits = token[len(prefix):]
        if not RegisterMapper._HEX.fullmatch(digits):
            raise MalformedImmediate(token)
        value = int(digits, 16)
        if not INT64_MIN <= value <= INT64_MAX:
            raise MalformedImmediate(token)
        return value

    @staticmethod
    def register_number(name: str) -> int:
        if name in RegisterMapper.X86_64_REGS:
            return RegisterMapper.X86_64_REGS[name]
        match = RegisterMapper._NUMBERED.fullmatch(name)
        if match:
            return int(match.group(1))
        raise MalformedRegister(name)

    @staticmethod
    def decode_scalar_register(token: str, mode: AddressingMode = AddressingMode.NATIVE) -> str:
        if RegisterMapper.is_memory_reference(token):
            return RegisterMapper._decode_memory(token, mode)
        return f"x{RegisterMapper.register_number(token)}"

    @staticmethod
    def decode_scaled_index(token: str) -> Tuple[str, str]:
        """Split ``(base)(index*8)`` into bare ``xN`` base and index names."""
        base_part, sep, index_part = token.partition(')(')
        if not sep or not index_part.endswith(RegisterMapper.SCALE_SUFFIX):
            raise UnsupportedOperand(token, "unsupported addressing mode")
        offset_text, _, base = base_part.partition('(')
        if RegisterMapper._parse_offset(token, offset_text):
            raise UnsupportedOperand(token, "offset not supported with scaled index")
        index = index_part[:-len(RegisterMapper.SCALE_SUFFIX)]
        return (f"x{RegisterMapper.register_number(base)}",
                f"x{RegisterMapper.register_number(index)}")

    @staticmethod
    def _parse_offset(token: str, text: str) -> int:
        if not text:
            return 0
        if not RegisterMapper._OFFSET.fullmatch(text):
            raise UnsupportedOperand(token, "malformed offset in")
        return int(text)

    @staticmethod
    def _decode_memory(token: str, mode: AddressingMode) -> str:
        offset_text, _, rest = token.partition('(')
        base = rest[:-1]
        if not rest.endswith(')') or '(' in base or ')' in base:
            raise UnsupportedOperand(token, "unsupported addressing mode")
        offset = RegisterMapper._parse_offset(token, offset_text)
        num = RegisterMapper.register_number(base)
        if mode == AddressingMode.NATIVE:
            suffix = f", #{RegisterMapper.vector_lengths(offset)}, MUL VL" if offset else ""
            return f"[x{num}{suffix}]"
        if offset:
            return f"{offset}(x{num})"
        return f"(x{num})"
