"""lexkeys exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Each concrete error is also a ValueError, since every one of them reports
a malformed input value (template, key text, culture code).

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class LexKeyError(Exception):
    """Base exception for all lexkeys errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LexKeyError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PatternSyntaxError(LexKeyError, ValueError):
    """Malformed name pattern template.

    Raised at compile time. Templates are trusted configuration, so this is
    fatal and never retried.
    """


class PatternMatchError(LexKeyError, ValueError):
    """Text did not match a pattern where a match was demanded.

    Raised by CompiledPattern.parse(). Plain matching never raises; it
    returns a MatchResult with success == False.
    """


class KeyFormatError(LexKeyError, ValueError):
    """Malformed key text or culture code."""
