"""Name building: render capture values through a pattern.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lexkeys.pattern.compiler import CompiledPattern

__all__ = ["build_name"]


def build_name(
    pattern: CompiledPattern,
    values: Sequence[str | None] | Mapping[str, str | None],
) -> str | None:
    """Build a name from capture values.

    Literal parts are emitted as is. A capture part with a value emits
    prefix + value + postfix. A capture part without a value (None or "")
    is skipped together with its separators when optional, and fails the
    whole build when required.

    Args:
        pattern: Compiled pattern
        values: Values by capture index, or by part identifier

    Returns:
        The name, or None if a required part has no value or the value
        sequence is shorter than the capture parts

    Example:
        >>> from lexkeys import compile_pattern
        >>> pattern = compile_pattern("[Type.]{Culture.}{Key}")
        >>> build_name(pattern, {"Type": "T", "Key": "K"})
        'T.K'
        >>> build_name(pattern, ["T", None, "K"])
        'T.K'
        >>> build_name(pattern, {"Key": "K"}) is None
        True
    """
    if not isinstance(values, Mapping) and len(values) < len(pattern.capture_parts):
        return None

    pieces: list[str] = []
    for part in pattern.all_parts:
        if part.text is not None:
            pieces.append(part.text)
            continue
        if isinstance(values, Mapping):
            value = values.get(part.identifier) if part.identifier is not None else None
        else:
            value = values[part.capture_index]
        if not value:
            if part.required:
                return None
            continue
        pieces.append(part.prefix_separator)
        pieces.append(value)
        pieces.append(part.postfix_separator)
    return "".join(pieces)
