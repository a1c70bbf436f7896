"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]

_ESCAPABLE_HINT = "Escape only \\ * + ? | { } [ ] ( ) < > ^ $ . # and whitespace"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Pattern errors carry the template as source and a span naming the
    offending substring.
    """

    @staticmethod
    def unexpected_bracket(pattern: str, pos: int, char: str) -> Diagnostic:
        """Bracket where none may appear (nesting, stray closer, mismatched closer).

        Args:
            pattern: Template being compiled
            pos: Offset of the bracket
            char: The bracket character

        Returns:
            Diagnostic for PATTERN_UNEXPECTED_BRACKET
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNEXPECTED_BRACKET,
            message=f"Unexpected '{char}' at offset {pos} in pattern '{pattern}'",
            span=SourceSpan(pos, pos + 1),
            source=pattern,
            hint="Parts cannot nest; escape literal brackets with '\\'",
        )

    @staticmethod
    def unterminated_part(pattern: str, start: int, closer: str) -> Diagnostic:
        """Part opened but never closed.

        Args:
            pattern: Template being compiled
            start: Offset of the opening bracket
            closer: Expected closing bracket

        Returns:
            Diagnostic for PATTERN_UNTERMINATED_PART
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNTERMINATED_PART,
            message=f"Unterminated part '{pattern[start:]}' in pattern '{pattern}'",
            span=SourceSpan(start, len(pattern)),
            source=pattern,
            hint=f"Close the part with '{closer}'",
        )

    @staticmethod
    def missing_identifier(pattern: str, start: int, end: int) -> Diagnostic:
        """Part without a parameter identifier.

        Args:
            pattern: Template being compiled
            start: Offset of the opening bracket
            end: Offset where an identifier was expected

        Returns:
            Diagnostic for PATTERN_MISSING_IDENTIFIER
        """
        excerpt = pattern[start : end + 1]
        return Diagnostic(
            code=DiagnosticCode.PATTERN_MISSING_IDENTIFIER,
            message=f"Part '{excerpt}' has no parameter identifier in pattern '{pattern}'",
            span=SourceSpan(start, min(end + 1, len(pattern))),
            source=pattern,
            hint="A part is written as {prefix Identifier<regex> postfix}",
        )

    @staticmethod
    def unknown_escape(pattern: str, pos: int) -> Diagnostic:
        """Escape character followed by a character that needs no escaping.

        Args:
            pattern: Template being compiled
            pos: Offset of the escape character

        Returns:
            Diagnostic for PATTERN_UNKNOWN_ESCAPE
        """
        excerpt = pattern[pos : pos + 2]
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNKNOWN_ESCAPE,
            message=f"Unknown escape '{excerpt}' in pattern '{pattern}'",
            span=SourceSpan(pos, pos + 2),
            source=pattern,
            hint=_ESCAPABLE_HINT,
        )

    @staticmethod
    def trailing_escape(pattern: str) -> Diagnostic:
        """Pattern ends with a lone escape character.

        Args:
            pattern: Template being compiled

        Returns:
            Diagnostic for PATTERN_TRAILING_ESCAPE
        """
        pos = len(pattern) - 1
        return Diagnostic(
            code=DiagnosticCode.PATTERN_TRAILING_ESCAPE,
            message=f"Pattern '{pattern}' ends with an escape character",
            span=SourceSpan(pos, pos + 1),
            source=pattern,
            hint=_ESCAPABLE_HINT,
        )

    @staticmethod
    def unterminated_regex(pattern: str, start: int) -> Diagnostic:
        """Inline regex opened with '<' but never closed.

        Args:
            pattern: Template being compiled
            start: Offset of '<'

        Returns:
            Diagnostic for PATTERN_UNTERMINATED_REGEX
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNTERMINATED_REGEX,
            message=f"Unterminated regex '{pattern[start:]}' in pattern '{pattern}'",
            span=SourceSpan(start, len(pattern)),
            source=pattern,
            hint="Close the regex with '>'; write a literal '>' as '\\>'",
        )

    @staticmethod
    def invalid_regex(pattern: str, start: int, end: int, reason: str) -> Diagnostic:
        """Inline regex that the regex engine rejects.

        Args:
            pattern: Template being compiled
            start: Offset of '<'
            end: Offset after '>'
            reason: Regex engine error message

        Returns:
            Diagnostic for PATTERN_INVALID_REGEX
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_INVALID_REGEX,
            message=f"Invalid regex '{pattern[start:end]}' in pattern '{pattern}': {reason}",
            span=SourceSpan(start, end),
            source=pattern,
            hint="Inline regexes use Python 're' syntax",
        )

    @staticmethod
    def duplicate_identifier(pattern: str, start: int, end: int, identifier: str) -> Diagnostic:
        """Two capture parts share one identifier.

        Args:
            pattern: Template being compiled
            start: Offset of the second part
            end: Offset after the second part
            identifier: The repeated identifier

        Returns:
            Diagnostic for PATTERN_DUPLICATE_IDENTIFIER
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_DUPLICATE_IDENTIFIER,
            message=f"Identifier '{identifier}' occurs more than once in pattern '{pattern}'",
            span=SourceSpan(start, end),
            source=pattern,
            hint=f"Pin repeated parts to occurrences with '{identifier}_0', '{identifier}_1', ...",
        )

    @staticmethod
    def no_match(text: str, pattern: str) -> Diagnostic:
        """Text did not satisfy the required parts of a pattern.

        Args:
            text: Text that was parsed
            pattern: Template it was parsed with

        Returns:
            Diagnostic for PATTERN_NO_MATCH
        """
        return Diagnostic(
            code=DiagnosticCode.PATTERN_NO_MATCH,
            message=f"'{text}' did not match the pattern '{pattern}'",
            source=text,
        )

    @staticmethod
    def malformed_key(text: str, pos: int) -> Diagnostic:
        """Key text that is not a sequence of name:value pairs.

        Args:
            text: Key text being parsed
            pos: Offset where parsing stopped

        Returns:
            Diagnostic for KEY_MALFORMED
        """
        return Diagnostic(
            code=DiagnosticCode.KEY_MALFORMED,
            message=f"Malformed key '{text}' at offset {pos}",
            span=SourceSpan(pos, len(text)),
            source=text,
            hint="Keys are written as name:value:name:value; escape ':' as '\\:'",
        )

    @staticmethod
    def invalid_key_escape(text: str, pos: int) -> Diagnostic:
        """Unrecognized escape sequence in key text.

        Args:
            text: Key text being parsed
            pos: Offset of the escape character

        Returns:
            Diagnostic for KEY_INVALID_ESCAPE
        """
        return Diagnostic(
            code=DiagnosticCode.KEY_INVALID_ESCAPE,
            message=f"Invalid escape '{text[pos : pos + 2]}' in key '{text}'",
            span=SourceSpan(pos, min(pos + 2, len(text))),
            source=text,
            hint="Valid escapes: \\\\ \\: \\0 \\a \\b \\t \\f \\n \\r \\xNN \\uNNNN \\UNNNNNNNN",
        )

    @staticmethod
    def unknown_culture(code: str, reason: str) -> Diagnostic:
        """Culture code Babel cannot parse.

        Args:
            code: The culture code
            reason: Babel error message

        Returns:
            Diagnostic for CULTURE_UNKNOWN
        """
        return Diagnostic(
            code=DiagnosticCode.CULTURE_UNKNOWN,
            message=f"Unknown culture '{code}': {reason}",
            source=code,
            hint="Use a BCP-47 code such as 'en' or 'en-US', or '' for the invariant culture",
        )
