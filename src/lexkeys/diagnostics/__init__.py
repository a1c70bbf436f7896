"""Diagnostic system for lexkeys errors.

Provides structured error diagnostics with codes, spans and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import KeyFormatError, LexKeyError, PatternMatchError, PatternSyntaxError
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "KeyFormatError",
    "LexKeyError",
    "OutputFormat",
    "PatternMatchError",
    "PatternSyntaxError",
    "SourceSpan",
]
