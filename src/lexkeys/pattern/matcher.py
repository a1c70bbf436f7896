"""Matching names and keys against a compiled pattern.

Two sources of values:

    match_key   walks a key through a DecompositionProvider and picks, for
                each capture part, the occurrence it is bound to
    match_text  runs the pattern regex over a name

Both finish with fix_occurrences(), which lets a bare "last occurrence"
part share the value of the single numbered part of the same parameter.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Mapping
from typing import TYPE_CHECKING, TypeVar

from lexkeys.constants import ANYSECTION, SECTION_PARAMETERS
from lexkeys.keys.provider import DecompositionProvider, KeyChainProvider
from lexkeys.pattern.match import MatchResult
from lexkeys.pattern.regex import build_regex

if TYPE_CHECKING:
    from lexkeys.pattern.compiler import CompiledPattern

__all__ = ["fix_occurrences", "match_key", "match_text"]

logger = logging.getLogger(__name__)

_KEY_CHAIN_PROVIDER = KeyChainProvider()

K = TypeVar("K")


def _collect_occurrences(
    key: K, provider: DecompositionProvider[K]
) -> dict[str, list[str]]:
    """Segment values root→tail per lower-cased parameter name.

    Section-like parameters are also collected under "anysection".
    """
    segments = list(provider.segments(key))
    segments.reverse()
    occurrences: defaultdict[str, list[str]] = defaultdict(list)
    for segment in segments:
        if segment.value is None:
            continue
        name = segment.name.lower()
        occurrences[name].append(segment.value)
        if name in SECTION_PARAMETERS:
            occurrences[ANYSECTION].append(segment.value)
    return occurrences


def match_key(
    pattern: CompiledPattern,
    key: K,
    *,
    provider: DecompositionProvider[K] | None = None,
    prefilled: Mapping[str, str | None] | None = None,
) -> MatchResult:
    """Capture values for every part of pattern from a key.

    A pre-filled value (by identifier) wins. Otherwise the part takes, among
    the values of its parameter that satisfy the part regex, the one at its
    occurrence index, or the last one for a "last occurrence" part.

    Args:
        pattern: Compiled pattern
        key: Key to read
        provider: Decomposition provider for the key type (default: KeyChain)
        prefilled: Values to use instead of the key's, by identifier

    Returns:
        MatchResult
    """
    if provider is None:
        provider = _KEY_CHAIN_PROVIDER  # type: ignore[assignment]
    occurrences = _collect_occurrences(key, provider)

    result = MatchResult(pattern)
    for part in pattern.capture_parts:
        value = prefilled.get(part.identifier) if prefilled and part.identifier else None
        if value is None and part.parameter_name is not None:
            candidates = [v for v in occurrences.get(part.parameter_name, ()) if part.is_match(v)]
            if part.is_last_occurrence:
                value = candidates[-1] if candidates else None
            elif part.occurrence_index < len(candidates):
                value = candidates[part.occurrence_index]
        result._assign(part.capture_index, value)  # noqa: SLF001

    fix_occurrences(result)
    return result


def match_text(
    pattern: CompiledPattern,
    text: str,
    *,
    prefilled: Mapping[str, str | None] | None = None,
) -> MatchResult:
    """Capture values for every part of pattern from a name.

    Uses the pattern's cached regex unless values are pre-filled. A name
    that does not match leaves every value None, and so does a pre-filled
    regex the re module rejects. A part whose group captured empty text
    gets None, so a required part must capture at least one character.

    Args:
        pattern: Compiled pattern
        text: Name to match
        prefilled: Known values by identifier

    Returns:
        MatchResult
    """
    result = MatchResult(pattern)
    if prefilled and any(value is not None for value in prefilled.values()):
        try:
            regex = build_regex(pattern, prefilled)
        except re.error as e:
            # Removing groups renumbers them under a numeric back reference
            logger.debug("Pre-filled regex of %r rejected: %s", pattern.pattern, e)
            return result
    else:
        regex = pattern.regex

    match = regex.fullmatch(text)
    if match is None:
        return result

    groups = match.groupdict()
    for part in pattern.capture_parts:
        identifier = part.identifier or ""
        value = prefilled.get(identifier) if prefilled else None
        if value is None:
            value = groups.get(identifier)
            # A part that captured nothing was absent from the name
            if value == "":
                value = None
        result._assign(part.capture_index, value)  # noqa: SLF001

    fix_occurrences(result)
    return result


def fix_occurrences(result: MatchResult) -> None:
    """Give empty "last occurrence" parts the value of a lone numbered part.

    For each parameter: if its bare (last occurrence) parts have no value
    while exactly one numbered part of the same parameter has one, the bare
    parts receive that value. The copy is recorded so that the value is not
    turned into a second key segment.
    """
    for parts in result.pattern.parameter_map.values():
        empty_last = [
            part
            for part in parts
            if part.is_last_occurrence and result.value_at(part.capture_index) is None
        ]
        if not empty_last:
            continue
        numbered = [
            value
            for part in parts
            if not part.is_last_occurrence
            and (value := result.value_at(part.capture_index)) is not None
        ]
        if len(numbered) != 1:
            continue
        for part in empty_last:
            result._assign(part.capture_index, numbered[0], copied=True)  # noqa: SLF001
