import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from .analyzer import InstructionAnalyzer
from .data_structures import TranslationResult, TranslatedLine
from .exceptions import TranspileError
from .handlers import LabelPatch, dispatch

__version__ = "1.0.0"

def translate_or_raise(line: str, patch_label: Optional[LabelPatch] = None) -> Tuple[str, bool]:
    """Translate one trimmed AVX2 line, raising the typed error on failure.

    Returns the SVE text and whether it is in the legacy Plan 9 dialect.
    """
    try:
        inst = InstructionAnalyzer.parse_instruction(line)
        return dispatch(inst, patch_label)
    except TranspileError as e:
        e.with_location(context=line)
        raise

def translate(line: str, patch_label: Optional[LabelPatch] = None) -> TranslationResult:
    """Translate one trimmed AVX2 line into a TranslationResult.

    Failures come back in ``result.error`` with empty output; nothing is
    logged or printed. ``patch_label`` is only called for JZ/JNZ, once, on
    the line after the mnemonic has been substituted.
    """
    try:
        output, legacy = translate_or_raise(line, patch_label)
    except TranspileError as e:
        return TranslationResult(error=e)
    return TranslationResult(output=output, legacy=legacy)

class AssemblyTranspiler:
    def __init__(
        self,
        fail_fast: bool = True,
        patch_label: Optional[LabelPatch] = None,
        keep_empty: bool = False,
        indent: str = "    "
    ):
        self.fail_fast = fail_fast
        self.patch_label = patch_label
        self.keep_empty = keep_empty
        self.indent = indent
        self.errors: List[TranspileError] = []
        self.line_count = 0
        self.logger = logging.getLogger(__name__)

    def translate_lines(self, lines: Iterable[str]) -> List[TranslatedLine]:
        self.errors = []
        translated = []
        for line_num, line in enumerate(lines, 1):
            stripped = line.strip()
            if not stripped:
                continue
            code = InstructionAnalyzer.strip_comment(stripped)
            if InstructionAnalyzer.is_comment(stripped):
                result = TranslationResult(output=stripped, legacy=True)
            elif InstructionAnalyzer.is_label(code):
                result = TranslationResult(output=code, legacy=True)
            else:
                result = translate(code, self.patch_label)
            if result.error is not None:
                result.error.with_location(line=line_num)
                self.logger.debug(f"Line {line_num} not translated: {result.error.message}")
                if self.fail_fast:
                    raise result.error
                self.errors.append(result.error)
            translated.append(TranslatedLine(line_num, stripped, result))
        self.line_count = len(translated)
        return translated

    def transpile(self, source: str) -> str:
        lines = source.splitlines()
        self.logger.info(f"Translating {len(lines)} lines to SVE")
        output = []
        for item in self.translate_lines(lines):
            result = item.result
            if not result.ok:
                continue
            if not result.output and not self.keep_empty:
                continue
            if InstructionAnalyzer.is_label(InstructionAnalyzer.strip_comment(item.source)) or not result.output:
                output.append(result.output)
            else:
                output.append(f"{self.indent}{result.output}")
        if self.errors:
            self.logger.warning(f"{len(self.errors)} lines could not be translated")
        self.logger.info("Translation complete")
        return '\n'.join(output) + '\n' if output else ''

def transpile_text(
    text: str,
    fail_fast: bool = True,
    patch_label: Optional[LabelPatch] = None,
    keep_empty: bool = False
) -> str:
    transpiler = AssemblyTranspiler(
        fail_fast=fail_fast,
        patch_label=patch_label,
        keep_empty=keep_empty
    )
    return transpiler.transpile(text)

def transpile_file(
    path: str,
    output: Optional[str] = None,
    transpiler: Optional[AssemblyTranspiler] = None
) -> str:
    input_path = Path(path)
    if not input_path.exists():
        raise TranspileError(f"File not found: {path}")
    if transpiler is None:
        transpiler = AssemblyTranspiler()
    result = transpiler.transpile(input_path.read_text(encoding='utf-8'))
    if output and not transpiler.errors:
        Path(output).write_text(result, encoding='utf-8')
        transpiler.logger.info(f"Output written to: {output}")
    return result

def main(argv=None):
    import argparse
    from ..term import print_error, print_info, print_success, print_summary, print_warning
    parser = argparse.ArgumentParser(
        prog='avx2sve',
        description='Translate Go AVX2 assembly into ARM SVE, one instruction per line',
    )
    parser.add_argument('input', help='Input assembly file')
    parser.add_argument('-o', '--output', help='Output file')
    parser.add_argument('-k', '--keep-going', action='store_true',
                        help='Report every untranslatable line instead of stopping at the first')
    parser.add_argument('--keep-empty', action='store_true',
                        help='Keep instructions that translate to nothing (VZEROUPPER) as blank lines')
    parser.add_argument('-v', '--verbose', action='store_true')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    transpiler = AssemblyTranspiler(fail_fast=not args.keep_going, keep_empty=args.keep_empty)
    try:
        result = transpile_file(args.input, output=args.output, transpiler=transpiler)
    except TranspileError as e:
        print_error(str(e))
        return 1
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2
    if transpiler.errors:
        print_summary(transpiler.errors, transpiler.line_count)
        if args.output:
            print_warning(f"Output not written to: {args.output}")
        return 1
    if args.verbose:
        print_info(f"Translated {transpiler.line_count} lines from {args.input}")
    if args.output:
        print_success(f"Output written to: {args.output}")
    else:
        print(result, end='')
    return 0

if __name__ == '__main__':
    raise SystemExit(main())
