"""Diagnostic codes, spans and the Diagnostic record.

Every error raised by the compiler, the matcher and the key parser carries
one Diagnostic pointing into the text that failed.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Numeric diagnostic codes.

    The thousands digit names the subsystem:
        1000-1999: Pattern template syntax errors
        2000-2999: Pattern matching errors
        3000-3999: Key text and culture errors
    """

    # Pattern syntax errors (1000-1999)
    PATTERN_UNEXPECTED_BRACKET = 1001
    PATTERN_UNTERMINATED_PART = 1002
    PATTERN_MISSING_IDENTIFIER = 1003
    PATTERN_UNKNOWN_ESCAPE = 1004
    PATTERN_TRAILING_ESCAPE = 1005
    PATTERN_UNTERMINATED_REGEX = 1006
    PATTERN_INVALID_REGEX = 1007
    PATTERN_DUPLICATE_IDENTIFIER = 1008

    # Matching errors (2000-2999)
    PATTERN_NO_MATCH = 2001

    # Key errors (3000-3999)
    KEY_MALFORMED = 3001
    KEY_INVALID_ESCAPE = 3002
    CULTURE_UNKNOWN = 3003


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Location of a substring inside a single-line source (template or key text).

    Attributes:
        start: Offset of the first character, from 0
        end: Offset one past the last character
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Reject negative or inverted spans.

        Raises:
            ValueError: If start is negative or end precedes start.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)

    @property
    def column(self) -> int:
        """1-indexed column of the span start."""
        return self.start + 1


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One problem found in a template, a file name or key text.

    Attributes:
        code: DiagnosticCode identifying the problem
        message: Text shown to the user
        span: Offending substring location (None when not tied to a source)
        source: The template or key text the span refers to
        hint: How to fix it, when known
        severity: "error" or "warning"
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    source: str | None = None
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """The message alone, without code or location."""
        return self.message

    @property
    def excerpt(self) -> str | None:
        """Offending substring of source, if both span and source are known."""
        if self.span is None or self.source is None:
            return None
        return self.source[self.span.start : self.span.end]

    def format_error(self) -> str:
        """Render with the default multi-line formatter.

        For example:
            error[PATTERN_UNKNOWN_ESCAPE]: Unknown escape '\\q' in pattern
              --> column 5
              = help: Escape only \\ * + ? | { } [ ] ( ) < > ^ $ . # and whitespace
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
