from concurrent.futures import ThreadPoolExecutor

import pytest

from avx2sve import translate, translate_or_raise
from avx2sve.utils.transpiler.exceptions import (
    MalformedImmediate, MalformedRegister, TranspileError, UnsupportedInstruction,
    UnsupportedMnemonic, UnsupportedOperand, UnsupportedOperandShape
)


INSTRUCTIONS = [
    # vector ops
    ("VPSRLQ  $0x04, Y9, Y10", "lsr z10.d, z9.d, #4"),
    ("VPAND   Y4, Y9, Y9    ", "and z9.d, z9.d, z4.d"),
    ("VPSHUFB Y11, Y5, Y7   ", "tbl z7.b, z5.b, z11.b"),
    ("VPXOR   Y1, Y2, Y3", "eor z3.d, z2.d, z1.d"),
    ("VPBROADCASTB X4, Y4   ", "dup z4.b, z4.b[0]"),
    ("VPAND   Y1, Y2", "and z2.d, z1.d"),
    ("VPSHUFB X1, Y2", "tbl z2.b, z1.b"),
    ("VZEROUPPER            ", ""),
    # loading / storing
    ("VMOVDQU (BX), Y9      ", "ldr z9, [x1]"),
    ("VMOVDQU 32(BX), Y11   ", "ldr z11, [x1, #1, MUL VL]"),
    ("VMOVDQU (R3)(R4*8), Y2", "ld1d { z2.d }, p0/z, [x3, x4, lsl #3]"),
    ("VMOVDQU Y0, (R8)(R9*8)", "st1d { z0.d }, p0, [x8, x9, lsl #3]"),
    ("VMOVDQU Y3, (DI)", "str z3, [x5]"),
    ("VMOVDQU Y3, 64(DI)", "str z3, [x5, #2, MUL VL]"),
    ("MOVQ  (DX), BX        ", "MOVD (R3), R1"),
    ("MOVQ  24(DX), SI      ", "MOVD 24(R3), R4"),
    ("MOVQ  72(DX), DX      ", "MOVD 72(R3), R3"),
    ("MOVQ  BX, AX", "MOVD R1, R0"),
    ("MOVQ  $0x0000000f, R10", "mov x10, #15"),
    ("MOVQ  R10, X4         ", "mov z4.d, x10"),
    # arithmetic
    ("ADDQ   $0x40, BX     ", "add x1, x1, #64"),
    ("ADDQ   $0x100, R2    ", "add x2, x2, #256"),
    ("ADDQ   R10, R9       ", "add x9, x9, x10"),
    ("SHRQ  $0x06, AX      ", "lsr x0, x0, #6"),
    ("SHRQ  R1, R2", "lsr x2, x2, x1"),
    ("TESTQ AX, AX         ", "tst x0, x0"),
    ("TESTQ R1, R2", "tst x2, x1"),
    ("DECQ  AX             ", "subs x0, x0, #1"),
    # loading from stack keeps the legacy syntax
    ("MOVQ  n+80(FP), AX         ", "MOVD n+80(FP), R0"),
    ("MOVQ  matrix_base+0(FP), CX", "MOVD matrix_base+0(FP), R2"),
    # control flow
    ("JZ    done", "BEQ    done"),
    ("JNZ   loop", "BNE   loop"),
    ("RET", "RET"),
]


@pytest.mark.parametrize("avx2, sve", INSTRUCTIONS)
def test_instructions(avx2, sve):
    result = translate(avx2.strip())
    assert result.ok, result.error
    assert result.error is None
    assert result.output == sve


def test_trailing_commas_are_stripped():
    assert translate("VPSRLQ $0x04, Y9, Y10,").output == "lsr z10.d, z9.d, #4"
    assert translate("VPAND Y4 , Y9, Y9").output == "and z9.d, z9.d, z4.d"


@pytest.mark.parametrize("line, legacy", [
    ("JZ done", True),
    ("JNZ loop", True),
    ("RET", True),
    ("VZEROUPPER", True),
    ("MOVQ n+80(FP), AX", True),
    ("MOVQ (DX), BX", True),
    ("MOVQ BX, AX", True),
    ("MOVQ R10, X4", False),
    ("MOVQ $0x0000000f, R10", False),
    ("VPAND Y4, Y9, Y9", False),
    ("VPBROADCASTB X4, Y4", False),
    ("VMOVDQU (BX), Y9", False),
    ("VMOVDQU Y0, (R8)(R9*8)", False),
    ("ADDQ $0x40, BX", False),
    ("TESTQ AX, AX", False),
    ("DECQ AX", False),
])
def test_legacy_dialect_flag(line, legacy):
    result = translate(line)
    assert result.ok
    assert result.legacy is legacy


@pytest.mark.parametrize("n", range(16))
def test_vector_ordinals_are_preserved(n):
    assert translate(f"VPXOR Y{n}, Y{n}, Y{n}").output == f"eor z{n}.d, z{n}.d, z{n}.d"
    assert translate(f"VMOVDQU (AX), Y{n}").output == f"ldr z{n}, [x0]"
    assert translate(f"MOVQ AX, X{n}").output == f"mov z{n}.d, x0"


@pytest.mark.parametrize("k", range(1, 8))
def test_vector_offsets_become_vector_lengths(k):
    assert translate(f"VMOVDQU {32 * k}(SI), Y1").output == f"ldr z1, [x4, #{k}, MUL VL]"
    assert translate(f"VMOVDQU Y1, {32 * k}(SI)").output == f"str z1, [x4, #{k}, MUL VL]"


def test_zero_offset_is_omitted():
    assert translate("VMOVDQU 0(SI), Y1").output == "ldr z1, [x4]"
    assert translate("VMOVDQU Y1, 0(SI)").output == "str z1, [x4]"


@pytest.mark.parametrize("line, error_type", [
    ("VPADDQ Y1, Y2, Y3", UnsupportedMnemonic),
    ("vpand Y4, Y9, Y9", UnsupportedMnemonic),
    ("TEXT ·kernel(SB), 7, $0", UnsupportedMnemonic),
    ("", UnsupportedMnemonic),
    ("VPAND Y1", UnsupportedOperandShape),
    ("VPAND Y1, Y2, Y3, Y4", UnsupportedOperandShape),
    ("VPAND R1, Y2, Y3", UnsupportedOperandShape),
    ("VPAND $0x1, Y2", UnsupportedOperandShape),
    ("VMOVDQU Y1, Y2", UnsupportedOperandShape),
    ("VMOVDQU (BX), (CX)", UnsupportedOperandShape),
    ("VMOVDQU (BX)", UnsupportedOperandShape),
    ("MOVQ AX, (DX)", UnsupportedOperandShape),
    ("MOVQ (DX), X4", UnsupportedOperandShape),
    ("ADDQ 8(BX), AX", UnsupportedOperandShape),
    ("ADDQ $0x1", UnsupportedOperandShape),
    ("TESTQ AX", UnsupportedOperandShape),
    ("DECQ AX, BX", UnsupportedOperandShape),
    ("DECQ", UnsupportedOperandShape),
    ("VZEROUPPER Y1", UnsupportedOperandShape),
    ("VPSRLQ $4, Y9, Y10", MalformedImmediate),
    ("ADDQ $0xZZ, AX", MalformedImmediate),
    ("VPAND Y4, Y9, Z9", UnsupportedOperandShape),
    ("VPAND Y4, Y9, X9", UnsupportedOperandShape),
    ("VPAND Y4, X9, Y9", UnsupportedOperandShape),
    ("VPAND X4, X9", UnsupportedOperandShape),
    ("VPAND Y4, Y9, Y9q", MalformedRegister),
    ("VPAND Y4, Yx, Y9", MalformedRegister),
    ("ADDQ $0x1, SP", MalformedRegister),
    ("VMOVDQU 32(R3)(R4*8), Y2", UnsupportedOperand),
    ("VMOVDQU 8+x(BX), Y2", UnsupportedOperand),
])
def test_unsupported_input_fails_closed(line, error_type):
    result = translate(line)
    assert not result.ok
    assert isinstance(result.error, error_type)
    assert isinstance(result.error, TranspileError)
    assert result.output == ""
    assert result.legacy is False
    assert result.error.context == line


def test_error_families():
    assert issubclass(UnsupportedMnemonic, UnsupportedInstruction)
    assert issubclass(UnsupportedOperandShape, UnsupportedInstruction)
    assert issubclass(UnsupportedInstruction, TranspileError)


def test_unsupported_mnemonic_carries_details():
    error = translate("VPADDQ Y1, Y2, Y3").error
    assert error.mnemonic == "VPADDQ"
    assert "VPADDQ Y1, Y2, Y3" in str(error)


def test_operand_shape_carries_operands():
    error = translate("DECQ AX, BX").error
    assert error.mnemonic == "DECQ"
    assert error.operands == ("AX", "BX")


def test_translate_or_raise():
    assert translate_or_raise("VPAND Y4, Y9, Y9") == ("and z9.d, z9.d, z4.d", False)
    assert translate_or_raise("RET") == ("RET", True)
    with pytest.raises(MalformedRegister) as excinfo:
        translate_or_raise("VPAND Y4, Y9, Y9q")
    assert excinfo.value.token == "Y9q"
    assert excinfo.value.context == "VPAND Y4, Y9, Y9q"


def test_label_patch_called_once_after_substitution():
    calls = []

    def patch(line):
        calls.append(line)
        return line.replace("loop", "loop_sve")

    result = translate("JNZ loop", patch)
    assert calls == ["BNE loop"]
    assert result.output == "BNE loop_sve"
    assert result.legacy is True


def test_label_patch_return_value_used_verbatim():
    result = translate("JZ done", lambda line: "b.eq done")
    assert result.output == "b.eq done"


@pytest.mark.parametrize("line", [
    "RET", "VZEROUPPER", "VPAND Y4, Y9, Y9", "MOVQ n+80(FP), AX", "DECQ AX", "VPADDQ Y1, Y2, Y3",
])
def test_label_patch_only_for_branches(line):
    calls = []
    translate(line, calls.append)
    assert calls == []


def test_translate_is_thread_safe():
    lines = [avx2.strip() for avx2, _ in INSTRUCTIONS] * 20
    expected = [sve for _, sve in INSTRUCTIONS] * 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        outputs = [result.output for result in pool.map(translate, lines)]
    assert outputs == expected
