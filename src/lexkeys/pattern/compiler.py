"""Name pattern compiler.

Compiles a template such as

    "Assets/{Assembly/}{Type/}{Section.}localization{-Culture}.ini"

into a CompiledPattern: an ordered list of literal parts and capture parts.

Template grammar:
    template   := (literal | part)*
    literal    := (char | escape)+            (anything but '{' '[' '}' ']')
    part       := '{' body '}'                (optional capture)
                | '[' body ']'                (required capture)
    body       := prefix identifier regex? postfix
    prefix     := (non-letter | escape)*
    identifier := name ('_' (digits | 'n'))?
    name       := [A-Za-z][A-Za-z0-9_]*
    regex      := '<' (char | '\\<' | '\\>' | '\\' char)* '>'
    postfix    := (char | escape)*
    escape     := '\\' (one of \\ * + ? | { } [ ] ( ) < > ^ $ . # or whitespace)

Occurrences:
    "{Section_1}" pins the part to the second "section" segment of a key.
    "{Section}" and "{Section_n}" bind to the last "section" segment. When the
    same parameter appears bare more than once ("{Location/}{Location/}"),
    the bare parts instead take the first free occurrence indices in order
    and are renamed "Location", "Location_1", ...

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import Counter, defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lexkeys.constants import (
    DEFAULT_PART_REGEX,
    ESCAPABLE_CHARACTERS,
    ESCAPE_CHAR,
    LAST_OCCURRENCE,
    UNASSIGNED_OCCURRENCE,
)
from lexkeys.diagnostics import ErrorTemplate, PatternMatchError, PatternSyntaxError
from lexkeys.enums import RegexFlags
from lexkeys.keys.parameters import DEFAULT_PARAMETER_INFOS, ParameterInfos
from lexkeys.pattern.builder import build_name
from lexkeys.pattern.cursor import Cursor, ParseResult
from lexkeys.pattern.matcher import match_key, match_text
from lexkeys.pattern.regex import build_regex, build_regex_string, part_at

if TYPE_CHECKING:
    from lexkeys.keys.chain import KeyChain
    from lexkeys.keys.provider import DecompositionProvider
    from lexkeys.pattern.match import MatchResult

__all__ = ["CompiledPattern", "PatternPart", "compile_pattern"]

logger = logging.getLogger(__name__)

_DEFAULT_REGEX: re.Pattern[str] = re.compile(DEFAULT_PART_REGEX)

_OPENERS: dict[str, str] = {"{": "}", "[": "]"}
_BRACKETS = frozenset("{}[]")
_REGEX_OPEN = "<"
_REGEX_CLOSE = ">"

# Lazy name so that "Section_1" splits into name "Section" and occurrence "1"
_IDENTIFIER = re.compile(
    r"(?P<name>[A-Za-z][A-Za-z0-9_]*?)(?:_(?P<occurrence>[0-9]+|n))?(?![A-Za-z0-9_])"
)


@dataclass(frozen=True, slots=True)
class PatternPart:
    """One part of a compiled pattern: a literal run or a capture part.

    Attributes:
        pattern_text: Raw source slice of this part
        text: Unescaped literal text (None for capture parts)
        identifier: Unique capture identifier, e.g. "Section_1" (None for literals)
        parameter_name: Lower-cased parameter name, e.g. "section"
        prefix_separator: Text emitted before the value
        postfix_separator: Text emitted after the value
        required: True for "[...]" parts
        occurrence_index: 0-based occurrence, or LAST_OCCURRENCE
        index: Position in all_parts
        capture_index: Position in capture_parts (-1 for literals)
        regex: Constraint on captured values (None for literals)
        regex_span: Template offsets of an inline "<regex>", None if the part has none
    """

    pattern_text: str
    text: str | None = None
    identifier: str | None = None
    parameter_name: str | None = None
    prefix_separator: str = ""
    postfix_separator: str = ""
    required: bool = False
    occurrence_index: int = UNASSIGNED_OCCURRENCE
    index: int = -1
    capture_index: int = -1
    regex: re.Pattern[str] | None = None
    regex_span: tuple[int, int] | None = None

    @property
    def is_literal(self) -> bool:
        return self.text is not None

    @property
    def is_last_occurrence(self) -> bool:
        return self.occurrence_index == LAST_OCCURRENCE

    def is_match(self, value: str) -> bool:
        """Test value against this part's regex (full match).

        Always true for the unconstrained default.
        """
        if self.regex is None or self.regex.pattern == DEFAULT_PART_REGEX:
            return True
        return self.regex.fullmatch(value) is not None

    def __str__(self) -> str:
        return self.pattern_text


# ============================================================================
# PARSER
# ============================================================================


def _is_escapable(char: str) -> bool:
    return char in ESCAPABLE_CHARACTERS or char.isspace()


def _parse_escape(cursor: Cursor) -> ParseResult[str]:
    """Parse '\\' + escapable character; cursor is at the escape character.

    Raises:
        PatternSyntaxError: On trailing or unknown escape
    """
    escaped = cursor.peek(1)
    if escaped is None:
        raise PatternSyntaxError(ErrorTemplate.trailing_escape(cursor.source))
    if not _is_escapable(escaped):
        raise PatternSyntaxError(ErrorTemplate.unknown_escape(cursor.source, cursor.pos))
    return ParseResult(escaped, cursor.advance(2))


def _parse_literal(cursor: Cursor) -> ParseResult[str]:
    """Parse literal text up to the next part opener or EOF."""
    chars: list[str] = []
    while not cursor.is_eof:
        char = cursor.current
        if char in _OPENERS:
            break
        if char in _BRACKETS:
            raise PatternSyntaxError(
                ErrorTemplate.unexpected_bracket(cursor.source, cursor.pos, char)
            )
        if char == ESCAPE_CHAR:
            escape = _parse_escape(cursor)
            chars.append(escape.value)
            cursor = escape.cursor
            continue
        chars.append(char)
        cursor = cursor.advance()
    return ParseResult("".join(chars), cursor)


def _parse_separator(cursor: Cursor, closer: str, *, stop_at_letter: bool) -> ParseResult[str]:
    """Parse prefix or postfix separator text inside a part.

    Stops at the closer, at EOF, or (for a prefix) at the first ASCII letter.
    """
    chars: list[str] = []
    while not cursor.is_eof:
        char = cursor.current
        if char == closer:
            break
        if stop_at_letter and char.isascii() and char.isalpha():
            break
        if char in _BRACKETS or char in (_REGEX_OPEN, _REGEX_CLOSE):
            raise PatternSyntaxError(
                ErrorTemplate.unexpected_bracket(cursor.source, cursor.pos, char)
            )
        if char == ESCAPE_CHAR:
            escape = _parse_escape(cursor)
            chars.append(escape.value)
            cursor = escape.cursor
            continue
        chars.append(char)
        cursor = cursor.advance()
    return ParseResult("".join(chars), cursor)


def _parse_inline_regex(cursor: Cursor) -> ParseResult[re.Pattern[str]]:
    """Parse and compile "<regex>"; cursor is at '<'.

    "\\<" and "\\>" stand for '<' and '>'; other escapes pass to the regex as is.

    Raises:
        PatternSyntaxError: If unterminated or rejected by the re module
    """
    start = cursor.pos
    cursor = cursor.advance()
    chars: list[str] = []
    while True:
        if cursor.is_eof:
            raise PatternSyntaxError(ErrorTemplate.unterminated_regex(cursor.source, start))
        char = cursor.current
        if char == _REGEX_CLOSE:
            cursor = cursor.advance()
            break
        if char == _REGEX_OPEN:
            raise PatternSyntaxError(
                ErrorTemplate.unexpected_bracket(cursor.source, cursor.pos, char)
            )
        if char == ESCAPE_CHAR:
            escaped = cursor.peek(1)
            if escaped is None:
                raise PatternSyntaxError(ErrorTemplate.unterminated_regex(cursor.source, start))
            chars.append(escaped if escaped in (_REGEX_OPEN, _REGEX_CLOSE) else char + escaped)
            cursor = cursor.advance(2)
            continue
        chars.append(char)
        cursor = cursor.advance()

    regex_text = "".join(chars)
    try:
        compiled = re.compile(regex_text)
    except re.error as e:
        raise PatternSyntaxError(
            ErrorTemplate.invalid_regex(cursor.source, start, cursor.pos, str(e))
        ) from e
    return ParseResult(compiled, cursor)


def _parse_part(cursor: Cursor, infos: ParameterInfos) -> ParseResult[PatternPart]:
    """Parse a "{...}" or "[...]" capture part; cursor is at the opener.

    The returned part has no index, capture index or final occurrence yet.
    """
    template = cursor.source
    start = cursor.pos
    opener = cursor.current
    closer = _OPENERS[opener]

    prefix = _parse_separator(cursor.advance(), closer, stop_at_letter=True)
    cursor = prefix.cursor
    if cursor.is_eof:
        raise PatternSyntaxError(ErrorTemplate.unterminated_part(template, start, closer))

    match = cursor.match(_IDENTIFIER)
    if match is None:
        raise PatternSyntaxError(ErrorTemplate.missing_identifier(template, start, cursor.pos))
    cursor = cursor.advance(match.end() - match.start())
    name = match.group("name")
    parameter_name = name.lower()

    occurrence = match.group("occurrence")
    if occurrence is None:
        occurrence_index = UNASSIGNED_OCCURRENCE
    elif occurrence == "n":
        occurrence_index = LAST_OCCURRENCE
    else:
        occurrence_index = int(occurrence)

    regex: re.Pattern[str] | None = None
    regex_span: tuple[int, int] | None = None
    if not cursor.is_eof and cursor.current == _REGEX_OPEN:
        inline = _parse_inline_regex(cursor)
        regex = inline.value
        regex_span = (cursor.pos, inline.cursor.pos)
        cursor = inline.cursor
    if regex is None:
        regex = infos.default_pattern(parameter_name) or _DEFAULT_REGEX

    postfix = _parse_separator(cursor, closer, stop_at_letter=False)
    cursor = postfix.cursor
    if cursor.is_eof:
        raise PatternSyntaxError(ErrorTemplate.unterminated_part(template, start, closer))
    cursor = cursor.advance()

    part = PatternPart(
        pattern_text=template[start : cursor.pos],
        identifier=match.group(0),
        parameter_name=parameter_name,
        prefix_separator=prefix.value,
        postfix_separator=postfix.value,
        required=opener == "[",
        occurrence_index=occurrence_index,
        regex=regex,
        regex_span=regex_span,
    )
    return ParseResult(part, cursor)


def _assign_occurrences(parts: list[PatternPart]) -> list[PatternPart]:
    """Resolve occurrence indices of bare identifiers.

    A parameter that appears bare once binds to its last occurrence. A
    parameter that appears bare several times takes the first free ordered
    occurrence indices, skipping indices pinned explicitly elsewhere.
    """
    bare_counts = Counter(
        part.parameter_name
        for part in parts
        if not part.is_literal and part.occurrence_index == UNASSIGNED_OCCURRENCE
    )
    reserved: defaultdict[str | None, set[int]] = defaultdict(set)
    for part in parts:
        if not part.is_literal and part.occurrence_index not in (
            UNASSIGNED_OCCURRENCE,
            LAST_OCCURRENCE,
        ):
            reserved[part.parameter_name].add(part.occurrence_index)

    result: list[PatternPart] = []
    for part in parts:
        if part.is_literal or part.occurrence_index != UNASSIGNED_OCCURRENCE:
            result.append(part)
            continue
        if bare_counts[part.parameter_name] == 1:
            result.append(replace(part, occurrence_index=LAST_OCCURRENCE))
            continue
        taken = reserved[part.parameter_name]
        occurrence_index = 0
        while occurrence_index in taken:
            occurrence_index += 1
        taken.add(occurrence_index)
        identifier = part.identifier
        if occurrence_index > 0:
            identifier = f"{identifier}_{occurrence_index}"
        result.append(replace(part, occurrence_index=occurrence_index, identifier=identifier))
    return result


def _check_identifiers(template: str, parts: list[PatternPart]) -> None:
    """Raise PatternSyntaxError if two capture parts share an identifier."""
    seen: set[str] = set()
    offset = 0
    for part in parts:
        end = offset + len(part.pattern_text)
        if part.identifier is not None:
            folded = part.identifier.lower()
            if folded in seen:
                raise PatternSyntaxError(
                    ErrorTemplate.duplicate_identifier(template, offset, end, part.identifier)
                )
            seen.add(folded)
        offset = end


def _part_span(pattern: CompiledPattern, part: PatternPart) -> tuple[int, int]:
    if part.regex_span is not None:
        return part.regex_span
    start = sum(len(p.pattern_text) for p in pattern.all_parts[: part.index])
    return start, start + len(part.pattern_text)


def _check_combined_regex(pattern: CompiledPattern) -> None:
    """Build the cached regex now, so that matching cannot fail later.

    An inline regex that compiles alone can still break the combined regex,
    e.g. "(?i)" in the middle of it or a back reference to an enclosing group.

    Raises:
        PatternSyntaxError: If the re module rejects the combined regex
    """
    try:
        pattern.regex  # noqa: B018
    except re.error as e:
        part = part_at(pattern, e.pos) if e.pos is not None else None
        start, end = _part_span(pattern, part) if part is not None else (0, len(pattern.pattern))
        raise PatternSyntaxError(
            ErrorTemplate.invalid_regex(pattern.pattern, start, end, str(e))
        ) from e


def compile_pattern(
    template: str,
    *,
    infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
) -> CompiledPattern:
    """Compile a name pattern template.

    Args:
        template: Template string, e.g. "{Culture.}{Type.}[Key]"
        infos: Registry supplying default part regexes

    Returns:
        CompiledPattern

    Raises:
        PatternSyntaxError: If the template is malformed

    Example:
        >>> pattern = compile_pattern("{Culture.}[Type]")
        >>> [part.identifier for part in pattern.capture_parts]
        ['Culture', 'Type']
    """
    cursor = Cursor(template, 0)
    parts: list[PatternPart] = []
    while not cursor.is_eof:
        if cursor.current in _OPENERS:
            parsed = _parse_part(cursor, infos)
            parts.append(parsed.value)
            cursor = parsed.cursor
            continue
        literal = _parse_literal(cursor)
        pattern_text = cursor.slice_to(literal.cursor.pos)
        parts.append(PatternPart(pattern_text=pattern_text, text=literal.value))
        cursor = literal.cursor

    parts = _assign_occurrences(parts)
    _check_identifiers(template, parts)

    indexed: list[PatternPart] = []
    capture_index = 0
    for index, part in enumerate(parts):
        if part.is_literal:
            indexed.append(replace(part, index=index))
        else:
            indexed.append(replace(part, index=index, capture_index=capture_index))
            capture_index += 1

    compiled = CompiledPattern(template, indexed, infos=infos)
    _check_combined_regex(compiled)
    logger.debug(
        "Compiled pattern %r: %d parts, %d capture parts",
        template,
        len(compiled.all_parts),
        len(compiled.capture_parts),
    )
    return compiled


# ============================================================================
# COMPILED PATTERN
# ============================================================================


class CompiledPattern:
    """Compiled name pattern.

    Immutable apart from the lazily built regex, which is created once under
    a lock and shared by all threads.

    Attributes:
        pattern: Template string
        all_parts: Literal and capture parts in source order
        capture_parts: Capture parts in source order
        part_map: Identifier → capture part
        parameter_map: Parameter name → capture parts sorted by occurrence
        parameter_names: Distinct parameter names in source order
        infos: Registry the pattern was compiled with

    Example:
        >>> from lexkeys import KeyChain
        >>> pattern = compile_pattern("{Culture.}[Type.]{Key}")
        >>> key = KeyChain.root().append("type", "App").append("key", "Ok")
        >>> pattern.build_name(key)
        'App.Ok'
        >>> pattern.match_text("en.App.Ok")["Culture"]
        'en'
    """

    __slots__ = (
        "_lock",
        "_regex",
        "all_parts",
        "capture_parts",
        "infos",
        "parameter_map",
        "parameter_names",
        "part_map",
        "pattern",
    )

    def __init__(
        self,
        pattern: str,
        parts: Sequence[PatternPart],
        *,
        infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
    ) -> None:
        self.pattern = pattern
        self.infos = infos
        self.all_parts: tuple[PatternPart, ...] = tuple(parts)
        self.capture_parts: tuple[PatternPart, ...] = tuple(
            part for part in self.all_parts if not part.is_literal
        )
        self.part_map: Mapping[str, PatternPart] = MappingProxyType(
            {part.identifier: part for part in self.capture_parts if part.identifier is not None}
        )
        names: dict[str, None] = {}
        grouped: defaultdict[str, list[PatternPart]] = defaultdict(list)
        for part in self.capture_parts:
            if part.parameter_name is None:
                continue
            names[part.parameter_name] = None
            grouped[part.parameter_name].append(part)
        self.parameter_names: tuple[str, ...] = tuple(names)
        self.parameter_map: Mapping[str, tuple[PatternPart, ...]] = MappingProxyType(
            {
                name: tuple(sorted(group, key=lambda part: part.occurrence_index))
                for name, group in grouped.items()
            }
        )
        self._regex: re.Pattern[str] | None = None
        self._lock = threading.Lock()

    @property
    def regex(self) -> re.Pattern[str]:
        """Regex matching names of this pattern, without pre-filled values (cached)."""
        regex = self._regex
        if regex is None:
            with self._lock:
                if self._regex is None:
                    self._regex = build_regex(self)
                    logger.debug(
                        "Cached regex for pattern %r: %s", self.pattern, self._regex.pattern
                    )
                regex = self._regex
        return regex

    def build_regex_string(
        self,
        prefilled: Mapping[str, str | None] | None = None,
        flags: RegexFlags = RegexFlags.ALL,
    ) -> str:
        """Regex source for this pattern; see lexkeys.pattern.regex."""
        return build_regex_string(self, prefilled, flags)

    def build_regex(self, prefilled: Mapping[str, str | None] | None = None) -> re.Pattern[str]:
        """Fresh compiled regex with pre-filled values baked in (not cached)."""
        return build_regex(self, prefilled)

    def match_key(
        self,
        key: Any,
        *,
        provider: DecompositionProvider[Any] | None = None,
        prefilled: Mapping[str, str | None] | None = None,
    ) -> MatchResult:
        """Capture parameter values from a key."""
        return match_key(self, key, provider=provider, prefilled=prefilled)

    def match_text(
        self,
        text: str,
        *,
        prefilled: Mapping[str, str | None] | None = None,
    ) -> MatchResult:
        """Capture parameter values from a name."""
        return match_text(self, text, prefilled=prefilled)

    def build(self, values: Sequence[str | None] | Mapping[str, str | None]) -> str | None:
        """Build a name from capture values; None if a required part is missing."""
        return build_name(self, values)

    def build_name(
        self,
        key: Any,
        *,
        provider: DecompositionProvider[Any] | None = None,
    ) -> str | None:
        """Build the name of a key; None if a required part has no value."""
        return build_name(self, match_key(self, key, provider=provider))

    def parse(
        self,
        text: str,
        *,
        root: KeyChain | None = None,
        infos: ParameterInfos | None = None,
    ) -> KeyChain:
        """Parse a name into a key chain.

        Args:
            text: Name to parse
            root: Chain to append the captured parameters to
            infos: Registry that classifies the parameters (default: the pattern's)

        Returns:
            Key with one segment per captured value, in source order

        Raises:
            PatternMatchError: If text does not match the required parts
        """
        result = match_text(self, text)
        if not result.success:
            logger.debug("Text %r did not match pattern %r", text, self.pattern)
            raise PatternMatchError(ErrorTemplate.no_match(text, self.pattern))
        return result.to_key(root=root, infos=infos if infos is not None else self.infos)

    def try_parse(
        self,
        text: str,
        *,
        root: KeyChain | None = None,
        infos: ParameterInfos | None = None,
    ) -> KeyChain | None:
        """Like parse(), but return None instead of raising."""
        try:
            return self.parse(text, root=root, infos=infos)
        except PatternMatchError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompiledPattern):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __str__(self) -> str:
        return self.pattern

    def __repr__(self) -> str:
        return f"CompiledPattern({self.pattern!r})"
