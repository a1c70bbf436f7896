"""Hypothesis strategies for lexkeys property-based testing.

Strategies are organized by domain:

- keys: Key chains, equivalent and independent chain pairs
- patterns: Keys that a fixed name pattern captures unambiguously

Usage:
    from tests.strategies import key_chains, equivalent_chain_pairs
    from tests.strategies.patterns import ROUND_TRIP_PATTERN, round_trip_keys
"""

from .keys import (
    CANONICAL_NAMES,
    NON_CANONICAL_NAMES,
    chain_pairs,
    equivalent_chain_pairs,
    key_chains,
    non_empty_values,
    parameter_pairs,
    parameter_values,
)
from .patterns import ROUND_TRIP_PATTERN, cultures, round_trip_keys, separator_free_values

__all__ = [
    "CANONICAL_NAMES",
    "NON_CANONICAL_NAMES",
    "ROUND_TRIP_PATTERN",
    "chain_pairs",
    "cultures",
    "equivalent_chain_pairs",
    "key_chains",
    "non_empty_values",
    "parameter_pairs",
    "parameter_values",
    "round_trip_keys",
    "separator_free_values",
]
