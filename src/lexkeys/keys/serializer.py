"""Text form of key chains.

A key is written as its parameters root→tail, each as "name:value", joined
with ':':

    culture:en:type:MyController:key:Error

Escaping (backslash):
    \\\\  backslash          \\:  colon
    \\0  NUL                \\a  bell
    \\b  backspace          \\t  tab
    \\f  form feed          \\n  line feed
    \\r  carriage return
    \\xNN, \\uNNNN, \\UNNNNNNNN  code point in hex

format_key() writes other control characters as \\xNN. parse_key() accepts
every form above.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging

from lexkeys.diagnostics import ErrorTemplate, KeyFormatError
from lexkeys.keys.chain import KeyChain
from lexkeys.keys.parameters import DEFAULT_PARAMETER_INFOS, ParameterInfos

__all__ = ["escape_value", "format_key", "parse_key", "unescape_value"]

logger = logging.getLogger(__name__)

_SEPARATOR = ":"
_ESCAPE = "\\"

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    ":": "\\:",
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\t": "\\t",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
}

_UNESCAPES: dict[str, str] = {escaped[1]: char for char, escaped in _ESCAPES.items()}

# Escape letter -> number of hex digits that follow
_HEX_ESCAPES: dict[str, int] = {"x": 2, "u": 4, "U": 8}


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or code == 0x7F


def escape_value(text: str) -> str:
    """Escape a parameter name or value for the key text form."""
    parts: list[str] = []
    for char in text:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif _is_control(char):
            parts.append(f"\\x{ord(char):02X}")
        else:
            parts.append(char)
    return "".join(parts)


def format_key(key: KeyChain) -> str:
    """Write key root→tail as name:value pairs.

    Root sentinels are skipped; a None value is written as empty text.

    Example:
        >>> format_key(KeyChain.root().append("type", "a:b"))
        'type:a\\\\:b'
    """
    return _SEPARATOR.join(
        f"{escape_value(segment.name)}{_SEPARATOR}{escape_value(segment.value or '')}"
        for segment in key.segments_from_root()
    )


def _split_tokens(text: str) -> list[tuple[int, str]]:
    """Split text on unescaped ':' and unescape each token.

    Returns:
        (start offset, unescaped token) per token

    Raises:
        KeyFormatError: On an invalid or truncated escape sequence
    """
    tokens: list[tuple[int, str]] = []
    buffer: list[str] = []
    token_start = 0
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == _SEPARATOR:
            tokens.append((token_start, "".join(buffer)))
            buffer.clear()
            pos += 1
            token_start = pos
            continue
        if char != _ESCAPE:
            buffer.append(char)
            pos += 1
            continue

        if pos + 1 >= length:
            raise KeyFormatError(ErrorTemplate.invalid_key_escape(text, pos))
        letter = text[pos + 1]
        simple = _UNESCAPES.get(letter)
        if simple is not None:
            buffer.append(simple)
            pos += 2
            continue
        width = _HEX_ESCAPES.get(letter)
        digits = text[pos + 2 : pos + 2 + width] if width is not None else ""
        if width is None or len(digits) != width:
            raise KeyFormatError(ErrorTemplate.invalid_key_escape(text, pos))
        try:
            buffer.append(chr(int(digits, 16)))
        except ValueError as e:
            # Non-hex digits, or a code point beyond U+10FFFF
            raise KeyFormatError(ErrorTemplate.invalid_key_escape(text, pos)) from e
        pos += 2 + width

    tokens.append((token_start, "".join(buffer)))
    return tokens


def unescape_value(text: str) -> str:
    """Unescape a single name or value (text must not contain bare ':').

    Raises:
        KeyFormatError: On invalid escapes or an unescaped ':'
    """
    tokens = _split_tokens(text)
    if len(tokens) != 1:
        raise KeyFormatError(ErrorTemplate.malformed_key(text, tokens[1][0] - 1))
    return tokens[0][1]


def parse_key(
    text: str,
    *,
    root: KeyChain | None = None,
    infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
) -> KeyChain:
    """Parse key text into a chain.

    Args:
        text: Key text, name:value pairs root→tail
        root: Chain to append the parsed parameters to (default: a new root)
        infos: Registry that classifies the parsed parameter names

    Returns:
        Head of the parsed chain; the root itself for empty text

    Raises:
        KeyFormatError: If text is not a sequence of name:value pairs

    Example:
        >>> parse_key("culture:en:key:Ok").parameters()
        (('culture', 'en'), ('key', 'Ok'))
    """
    key = root if root is not None else KeyChain.root()
    if text == "":
        return key

    tokens = _split_tokens(text)
    if len(tokens) % 2 != 0:
        logger.debug("Odd number of tokens in key text %r", text)
        raise KeyFormatError(ErrorTemplate.malformed_key(text, tokens[-1][0]))

    for i in range(0, len(tokens), 2):
        name_start, name = tokens[i]
        if name == "":
            raise KeyFormatError(ErrorTemplate.malformed_key(text, name_start))
        key = key.append(name, tokens[i + 1][1], infos=infos)
    return key
