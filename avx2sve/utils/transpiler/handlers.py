from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple
from .data_structures import Instruction, MnemonicEntry
from .enums import InstructionFamily, VectorSize, AddressingMode
from .exceptions import UnsupportedMnemonic, UnsupportedOperandShape
from .registers import RegisterMapper
from .simd import SIMDTranslator

LabelPatch = Callable[[str], str]
Translation = Tuple[str, bool]
Handler = Callable[[Instruction, MnemonicEntry, Optional[LabelPatch]], Translation]

FRAME_POINTER = '(FP)'

def _shape_error(inst: Instruction) -> UnsupportedOperandShape:
    return UnsupportedOperandShape(inst.mnemonic, inst.operands)

def _scalar(inst: Instruction, token: str) -> str:
    """Bare general purpose register; memory operands are not accepted here."""
    if RegisterMapper.is_memory_reference(token) or RegisterMapper.is_immediate(token):
        raise _shape_error(inst)
    return RegisterMapper.decode_scalar_register(token)

def translate_vector_op(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    ops = inst.operands
    mnemonic, suffix = entry.mnemonic, entry.suffix
    if len(ops) == 3:
        if not (RegisterMapper.is_vector_register(ops[1]) and RegisterMapper.is_vector_register(ops[2])):
            raise _shape_error(inst)
        if RegisterMapper.is_immediate(ops[0]):
            third = f"#{RegisterMapper.decode_immediate(ops[0])}"
        elif RegisterMapper.is_vector_register(ops[0]):
            third = RegisterMapper.decode_vector_register(ops[0], suffix=suffix)
        else:
            raise _shape_error(inst)
        zd = RegisterMapper.decode_vector_register(ops[2], suffix=suffix)
        zn = RegisterMapper.decode_vector_register(ops[1], suffix=suffix)
        return f"{mnemonic} {zd}, {zn}, {third}", False
    if len(ops) == 2:
        if not RegisterMapper.is_vector_register(ops[1]):
            raise _shape_error(inst)
        if RegisterMapper.is_vector_register(ops[0]):
            zn = RegisterMapper.decode_vector_register(ops[0], suffix=suffix)
        elif RegisterMapper.is_vector_register(ops[0], VectorSize.XMM):
            zn = RegisterMapper.decode_vector_register(ops[0], VectorSize.XMM, suffix)
            if mnemonic == 'dup':
                zn += '[0]'
        else:
            raise _shape_error(inst)
        zd = RegisterMapper.decode_vector_register(ops[1], suffix=suffix)
        return f"{mnemonic} {zd}, {zn}", False
    raise _shape_error(inst)

def translate_load_store(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    ops = inst.operands
    if len(ops) != 2:
        raise _shape_error(inst)
    src, dst = ops
    if RegisterMapper.is_vector_register(dst) and RegisterMapper.is_memory_reference(src):
        if RegisterMapper.is_scaled_index(src):
            zt = RegisterMapper.decode_vector_register(dst, suffix='d')
            xn, xm = RegisterMapper.decode_scaled_index(src)
            return f"ld1d {{ {zt} }}, p0/z, [{xn}, {xm}, lsl #3]", False
        zt = RegisterMapper.decode_vector_register(dst, suffix=entry.suffix)
        return f"ldr {zt}, {RegisterMapper.decode_scalar_register(src)}", False
    if RegisterMapper.is_vector_register(src) and RegisterMapper.is_memory_reference(dst):
        if RegisterMapper.is_scaled_index(dst):
            zt = RegisterMapper.decode_vector_register(src, suffix='d')
            xn, xm = RegisterMapper.decode_scaled_index(dst)
            return f"st1d {{ {zt} }}, p0, [{xn}, {xm}, lsl #3]", False
        zt = RegisterMapper.decode_vector_register(src, suffix=entry.suffix)
        return f"str {zt}, {RegisterMapper.decode_scalar_register(dst)}", False
    raise _shape_error(inst)

def translate_scalar_move(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    """MOVQ: broadcast into a vector, constant load, or legacy MOVD.

    The MOVD form keeps Plan 9 register names (R0..) because the stack frame
    tooling downstream still reads them in that form.
    """
    ops = inst.operands
    if len(ops) != 2:
        raise _shape_error(inst)
    src, dst = ops
    if RegisterMapper.is_vector_register(dst, VectorSize.XMM):
        zd = RegisterMapper.decode_vector_register(dst, VectorSize.XMM, 'd')
        return f"mov {zd}, {_scalar(inst, src)}", False
    xd = _scalar(inst, dst)
    if RegisterMapper.is_immediate(src):
        return f"mov {xd}, #{RegisterMapper.decode_immediate(src)}", False
    if FRAME_POINTER not in src:
        # textual rename, any 'x' in the operand becomes 'R'
        src = RegisterMapper.decode_scalar_register(src, AddressingMode.LEGACY).replace('x', 'R')
    return f"MOVD {src}, {xd.replace('x', 'R')}", True

def translate_scalar_arith(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    ops = inst.operands
    if len(ops) != 2:
        raise _shape_error(inst)
    xd = _scalar(inst, ops[1])
    if RegisterMapper.is_immediate(ops[0]):
        return f"{entry.mnemonic} {xd}, {xd}, #{RegisterMapper.decode_immediate(ops[0])}", False
    return f"{entry.mnemonic} {xd}, {xd}, {_scalar(inst, ops[0])}", False

def translate_scalar_test(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    ops = inst.operands
    if len(ops) != 2:
        raise _shape_error(inst)
    return f"{entry.mnemonic} {_scalar(inst, ops[1])}, {_scalar(inst, ops[0])}", False

def translate_scalar_dec(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    if len(inst.operands) != 1:
        raise _shape_error(inst)
    xd = _scalar(inst, inst.operands[0])
    return f"{entry.mnemonic} {xd}, {xd}, #1", False

def translate_vector_epilogue(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    if inst.operands:
        raise _shape_error(inst)
    return "", True

def translate_branch(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    out = inst.original_line.replace(inst.mnemonic, entry.mnemonic)
    if patch_label is not None:
        out = patch_label(out)
    return out, True

def translate_return(inst: Instruction, entry: MnemonicEntry, patch_label: Optional[LabelPatch] = None) -> Translation:
    return inst.original_line, True

FAMILIES: Mapping[str, InstructionFamily] = MappingProxyType({
    'VPSRLQ': InstructionFamily.VECTOR_OP,
    'VPAND': InstructionFamily.VECTOR_OP,
    'VPSHUFB': InstructionFamily.VECTOR_OP,
    'VPXOR': InstructionFamily.VECTOR_OP,
    'VPBROADCASTB': InstructionFamily.VECTOR_OP,
    'VMOVDQU': InstructionFamily.LOAD_STORE,
    'MOVQ': InstructionFamily.SCALAR_MOVE,
    'ADDQ': InstructionFamily.SCALAR_ARITH,
    'SHRQ': InstructionFamily.SCALAR_ARITH,
    'TESTQ': InstructionFamily.SCALAR_TEST,
    'DECQ': InstructionFamily.SCALAR_DEC,
    'VZEROUPPER': InstructionFamily.VECTOR_EPILOGUE,
    'JZ': InstructionFamily.BRANCH,
    'JNZ': InstructionFamily.BRANCH,
    'RET': InstructionFamily.RETURN,
})

HANDLERS: Mapping[InstructionFamily, Handler] = MappingProxyType({
    InstructionFamily.VECTOR_OP: translate_vector_op,
    InstructionFamily.LOAD_STORE: translate_load_store,
    InstructionFamily.SCALAR_MOVE: translate_scalar_move,
    InstructionFamily.SCALAR_ARITH: translate_scalar_arith,
    InstructionFamily.SCALAR_TEST: translate_scalar_test,
    InstructionFamily.SCALAR_DEC: translate_scalar_dec,
    InstructionFamily.VECTOR_EPILOGUE: translate_vector_epilogue,
    InstructionFamily.BRANCH: translate_branch,
    InstructionFamily.RETURN: translate_return,
})

def dispatch(inst: Instruction, patch_label: Optional[LabelPatch] = None) -> Translation:
    family = FAMILIES.get(inst.mnemonic)
    if family is None:
        raise UnsupportedMnemonic(inst.mnemonic)
    return HANDLERS[family](inst, SIMDTranslator.lookup(inst.mnemonic), patch_label)
