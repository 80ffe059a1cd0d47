"""Translate Go AVX2 assembly into ARM SVE"""
from .utils.transpiler import translate, translate_or_raise, TranslationResult, TranspileError
from .utils.transpiler.transpiler import __version__

__all__ = ['translate', 'translate_or_raise', 'TranslationResult', 'TranspileError', '__version__']
