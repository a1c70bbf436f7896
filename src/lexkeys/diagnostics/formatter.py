"""Rendering of pattern and key diagnostics.

Templates and key text are single-line, so a diagnostic prints its source
once with a caret line under the offending span.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Styles understood by DiagnosticFormatter."""

    RUST = "rust"  # Multi-line, caret under the span
    SIMPLE = "simple"  # CODE: message
    JSON = "json"  # One JSON object per diagnostic


# Control characters rendered as visible escapes (log injection prevention).
_CONTROL_ESCAPES = {i: f"\\x{i:02x}" for i in range(0x20)} | {0x7F: "\\x7f"}


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Formats Diagnostic objects as text.

    Attributes:
        output_format: rust, simple or json
        color: Wrap the severity in ANSI color codes

    Example:
        >>> from lexkeys.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.no_match("x.ini", "[Key].json")))
        PATTERN_NO_MATCH: 'x.ini' did not match the pattern '[Key].json'
    """

    output_format: OutputFormat = OutputFormat.RUST
    color: bool = False

    def format(self, diagnostic: Diagnostic) -> str:
        """Render one diagnostic in the configured style."""
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Join rendered diagnostics with an empty line between them."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Header line, column, source with carets, then the hint.

        For example:
            error[PATTERN_UNTERMINATED_PART]: Unterminated part '{Culture' in pattern
              --> column 1
                | {Culture
                | ^^^^^^^^
              = help: Close the part with '}'
        """
        severity = diagnostic.severity
        if self.color:
            code = "1;31" if severity == "error" else "1;33"
            severity_str = f"\033[{code}m{severity}\033[0m"
        else:
            severity_str = severity

        parts = [f"{severity_str}[{diagnostic.code.name}]: {_escape(diagnostic.message)}"]

        span = diagnostic.span
        if span is not None:
            parts.append(f"  --> column {span.column}")
            if diagnostic.source is not None:
                width = max(span.end - span.start, 1)
                parts.append(f"    | {_escape(diagnostic.source)}")
                parts.append(f"    | {' ' * span.start}{'^' * width}")

        if diagnostic.hint:
            parts.append(f"  = help: {_escape(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """CODE: message."""
        return f"{diagnostic.code.name}: {_escape(diagnostic.message)}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        import json  # noqa: PLC0415

        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
        }

        if diagnostic.span is not None:
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end

        if diagnostic.source is not None:
            data["source"] = diagnostic.source

        if diagnostic.hint:
            data["hint"] = diagnostic.hint

        return json.dumps(data, ensure_ascii=False)


def _escape(text: str) -> str:
    return text.translate(_CONTROL_ESCAPES)
