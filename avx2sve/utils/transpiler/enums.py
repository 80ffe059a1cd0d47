from enum import Enum, auto

class VectorSize(Enum):
    """Source vector register width, keyed by register prefix"""
    YMM = "Y"
    XMM = "X"

class AddressingMode(Enum):
    NATIVE = "native"
    LEGACY = "legacy"

class InstructionFamily(Enum):
    VECTOR_OP = auto()
    LOAD_STORE = auto()
    SCALAR_MOVE = auto()
    SCALAR_ARITH = auto()
    SCALAR_TEST = auto()
    SCALAR_DEC = auto()
    VECTOR_EPILOGUE = auto()
    BRANCH = auto()
    RETURN = auto()
