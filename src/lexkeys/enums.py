"""Enumerations for lexkeys type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion and IntFlag for
combinable regex synthesis options.

Python 3.13+.
"""

from enum import IntFlag, StrEnum


class Classification(StrEnum):
    """How a key segment takes part in key equivalence.

    StrEnum provides automatic string conversion: str(Classification.CANONICAL) == "canonical"
    """

    CANONICAL = "canonical"
    """Position is significant: type, section, key"""

    NON_CANONICAL = "non_canonical"
    """Position is not significant: culture, assembly"""

    UNCLASSIFIED = "unclassified"
    """Not compared at all: root, formatting hints"""


class RegexFlags(IntFlag):
    """Escaping options for regex synthesis.

    A regex built with every flag set is meant for direct execution. Clearing
    flags produces a template regex meant for further textual substitution.
    """

    NONE = 0

    ESCAPE_LITERAL = 1
    """Escape literal text between parts"""

    ESCAPE_PREFIX = 2
    """Escape prefix separators"""

    ESCAPE_POSTFIX = 4
    """Escape postfix separators"""

    ESCAPE_IDENTIFIER = 8
    """Escape group identifiers and pre-filled values"""

    ALL = ESCAPE_LITERAL | ESCAPE_PREFIX | ESCAPE_POSTFIX | ESCAPE_IDENTIFIER


__all__ = [
    "Classification",
    "RegexFlags",
]
