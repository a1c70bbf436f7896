"""Immutable cursor for the template compiler.

Python 3.13+. Zero external dependencies.

A cursor is a (source, offset) pair. advance() returns a fresh cursor and
leaves the old one where it was. End of input is queried with is_eof
rather than signalled by a sentinel. Templates are single-line, so no
line or column bookkeeping is kept.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, TypeVar

__all__ = ["Cursor", "ParseResult"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Cursor:
    """Read position within a template.

    Example:
        >>> cursor = Cursor("{Key}", 0)
        >>> cursor.current
        '{'
        >>> cursor.advance().current
        'K'
        >>> cursor.pos  # still 0
        0
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character under the cursor.

        Raises:
            EOFError: When the cursor is past the last character
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Look ahead by offset characters without moving.

        Returns:
            The character there, or None past the end
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> Cursor:
        """Return new cursor advanced by count positions."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos."""
        return self.source[self.pos : end_pos]

    def match(self, regex: re.Pattern[str]) -> re.Match[str] | None:
        """Match regex anchored at the current position."""
        return regex.match(self.source, self.pos)


@dataclass(frozen=True, slots=True)
class ParseResult(Generic[T]):
    """A parsed value paired with the cursor just after it.

    Example:
        >>> cursor = Cursor("Key}", 0)
        >>> result = ParseResult("Key", cursor.advance(3))
        >>> result.cursor.current
        '}'
    """

    value: T
    cursor: Cursor
