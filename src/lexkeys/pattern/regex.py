"""Regex synthesis for name patterns.

A pattern becomes one anchored regex with a named group per capture part:

    "{Culture.}[Key]"  ->  ^(?:(?P<Culture>[a-z]{2,5}(-[A-Za-z]{2,7})?)\\.)?(?:(?P<Key>.*?))$

Pre-filled values replace their capture group with the escaped value, which
narrows the search when part of a name is already known.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from lexkeys.enums import RegexFlags

if TYPE_CHECKING:
    from lexkeys.pattern.compiler import CompiledPattern, PatternPart

__all__ = ["build_regex", "build_regex_string", "part_at", "strip_anchors"]


def _escape(text: str, flags: RegexFlags, flag: RegexFlags) -> str:
    return re.escape(text) if flags & flag else text


def strip_anchors(regex_text: str) -> str:
    """Remove a leading '^' and an unescaped trailing '$'.

    Example:
        >>> strip_anchors("^[a-z]{2}$")
        '[a-z]{2}'
    """
    if regex_text.startswith("^"):
        regex_text = regex_text[1:]
    if regex_text.endswith("$") and not regex_text.endswith("\\$"):
        regex_text = regex_text[:-1]
    return regex_text


def build_regex_string(
    pattern: CompiledPattern,
    prefilled: Mapping[str, str | None] | None = None,
    flags: RegexFlags = RegexFlags.ALL,
) -> str:
    """Regex source for a pattern.

    Args:
        pattern: Compiled pattern
        prefilled: Known values by part identifier (None values are ignored)
        flags: Which kinds of text to regex-escape; anything short of ALL is
            meant for templates that are substituted further, not executed

    Returns:
        Regex source anchored with '^' and '$'
    """
    pieces = ["^"]
    pieces.extend(text for _, text in _part_pieces(pattern, prefilled, flags))
    pieces.append("$")
    return "".join(pieces)


def _part_pieces(
    pattern: CompiledPattern,
    prefilled: Mapping[str, str | None] | None,
    flags: RegexFlags,
) -> Iterator[tuple[PatternPart, str]]:
    """Regex source of each part, in source order."""
    for part in pattern.all_parts:
        if part.text is not None:
            yield part, _escape(part.text, flags, RegexFlags.ESCAPE_LITERAL)
            continue

        prefix = _escape(part.prefix_separator, flags, RegexFlags.ESCAPE_PREFIX)
        postfix = _escape(part.postfix_separator, flags, RegexFlags.ESCAPE_POSTFIX)
        identifier = part.identifier or ""
        value = prefilled.get(identifier) if prefilled else None
        if value is not None:
            yield part, prefix + _escape(value, flags, RegexFlags.ESCAPE_IDENTIFIER) + postfix
            continue

        part_regex = strip_anchors(part.regex.pattern) if part.regex is not None else ""
        group = f"(?P<{_escape(identifier, flags, RegexFlags.ESCAPE_IDENTIFIER)}>{part_regex})"
        optional = "" if part.required else "?"
        yield part, f"(?:{prefix}{group}{postfix}){optional}"


def build_regex(
    pattern: CompiledPattern,
    prefilled: Mapping[str, str | None] | None = None,
) -> re.Pattern[str]:
    """Compile build_regex_string() with full escaping."""
    return re.compile(build_regex_string(pattern, prefilled, RegexFlags.ALL))


def part_at(
    pattern: CompiledPattern,
    position: int,
    prefilled: Mapping[str, str | None] | None = None,
) -> PatternPart | None:
    """Part whose regex source covers position in build_regex_string().

    Maps a re.error position back to the template part that caused it.
    Returns None for the anchors or a position past the end.
    """
    offset = 1
    for part, text in _part_pieces(pattern, prefilled, RegexFlags.ALL):
        if offset <= position < offset + len(text):
            return part
        offset += len(text)
    return None
