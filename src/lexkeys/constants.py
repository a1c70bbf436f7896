"""Shared constants for lexkeys.

This module provides centralized configuration constants used across the
keys and pattern packages. Placing constants here avoids circular imports
and provides a single source of truth.

Constants are grouped by domain:
- Hashing: FNV-1 parameters used by the key comparer
- Occurrences: Sentinel values for pattern part occurrence binding
- Parameters: Well-known parameter names with special matching rules
- Pattern syntax: Escape handling and default part regexes

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Hashing
    "FNV_HASH_BASIS",
    "FNV_HASH_PRIME",
    "HASH_MASK",
    # Occurrences
    "LAST_OCCURRENCE",
    "UNASSIGNED_OCCURRENCE",
    # Parameters
    "ANYSECTION",
    "SECTION_PARAMETERS",
    "CULTURE",
    # Pattern syntax
    "ESCAPE_CHAR",
    "ESCAPABLE_CHARACTERS",
    "DEFAULT_PART_REGEX",
    "CULTURE_PART_REGEX",
    "TYPE_PART_REGEX",
]

# ============================================================================
# HASHING
# ============================================================================

# FNV-1 32-bit offset basis and prime.
# The canonical pass multiplies by the prime after every segment, which makes
# it order-sensitive. The non-canonical pass only XORs, which is commutative.
FNV_HASH_BASIS: int = 0x811C9DC5
FNV_HASH_PRIME: int = 0x01000193

# Hash values are kept in unsigned 32-bit range.
HASH_MASK: int = 0xFFFFFFFF

# ============================================================================
# OCCURRENCES
# ============================================================================

# Occurrence index of a bare identifier ("{Section}") or "_n" suffix.
# Binds to the last occurrence of the parameter in a key chain.
LAST_OCCURRENCE: int = 2**31 - 1

# Occurrence index of a part before the compiler has assigned one.
UNASSIGNED_OCCURRENCE: int = -1

# ============================================================================
# PARAMETERS
# ============================================================================

# Virtual parameter name that captures any section-like parameter.
ANYSECTION: str = "anysection"

# Parameter names that "anysection" captures.
SECTION_PARAMETERS: frozenset[str] = frozenset(
    {"type", "section", "location", "resource", "assembly"}
)

CULTURE: str = "culture"

# ============================================================================
# PATTERN SYNTAX
# ============================================================================

ESCAPE_CHAR: str = "\\"

# Characters that may follow the escape character in a template.
# Whitespace is escapable as well (checked with str.isspace()).
ESCAPABLE_CHARACTERS: frozenset[str] = frozenset("\\*+?|{}[]()<>^$.#")

# Reluctant "match anything" regex used when neither the template nor the
# parameter metadata constrains a part.
DEFAULT_PART_REGEX: str = ".*?"

# Default regexes of well-known parameters.
CULTURE_PART_REGEX: str = r"^[a-z]{2,5}(-[A-Za-z]{2,7})?$"
TYPE_PART_REGEX: str = r"[^:0-9][^:]*"
