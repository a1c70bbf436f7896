"""Culture code normalization.

Culture values in keys are BCP-47 codes ("en", "en-US"). Callers hand in
codes in any common spelling ("en_us", "EN-us"); Babel parses them and the
canonical hyphenated form is what ends up in the key, so that keys built from
different spellings compare equal.

The empty culture "" is the invariant culture and passes through unchanged.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from lexkeys.diagnostics import ErrorTemplate, KeyFormatError

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "normalize_culture",
    "to_posix",
]


def to_posix(culture: str) -> str:
    """Convert BCP-47 separators to the POSIX form Babel parses.

    Example:
        >>> to_posix("en-US")
        'en_US'
    """
    return culture.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(culture: str) -> Locale:
    """Get a Babel Locale object with caching.

    Args:
        culture: Culture code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(to_posix(culture))


def normalize_culture(culture: str) -> str:
    """Normalize a culture code to canonical BCP-47.

    Args:
        culture: Culture code in any common spelling, or "" for invariant

    Returns:
        Canonical code such as "en" or "en-US"

    Raises:
        KeyFormatError: If Babel does not recognize the code

    Example:
        >>> normalize_culture("en_us")
        'en-US'
        >>> normalize_culture("")
        ''
    """
    if culture == "":
        return culture

    from babel.core import UnknownLocaleError  # noqa: PLC0415

    try:
        locale = get_babel_locale(culture)
    except (UnknownLocaleError, ValueError) as e:
        raise KeyFormatError(ErrorTemplate.unknown_culture(culture, str(e))) from e

    subtags = (locale.language, locale.script, locale.territory, locale.variant)
    return "-".join(subtag for subtag in subtags if subtag)
