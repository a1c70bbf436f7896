"""Key equivalence: equality and hashing of key chains.

Two keys denote the same localized resource when both of these agree.
Parameter names compare case-insensitively; values are compared exactly.

Non-canonical pass (order-insensitive, whole chain):
    Segments classified NON_CANONICAL form a name→value map. Walking
    tail→root, the first occurrence of a name wins; root-ward duplicates of
    that name are skipped and collection continues. Names whose winning value
    is "" are dropped (an empty culture is the invariant culture). The maps
    must be equal.

Canonical pass (order-sensitive, positional):
    Segments classified CANONICAL are compared pairwise, tail→root. Both
    chains must run out of canonical segments together.

Hashing mirrors the split: non-canonical pairs are XORed into the FNV basis
(commutative, so order cannot matter), then each canonical pair is XORed in
and the accumulator multiplied by the FNV prime (order matters). Pair hashes
are FNV-1 over UTF-8 bytes, so hash values do not depend on PYTHONHASHSEED.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from lexkeys.constants import CULTURE, FNV_HASH_BASIS, FNV_HASH_PRIME, HASH_MASK
from lexkeys.enums import Classification
from lexkeys.keys.chain import KeySegment
from lexkeys.keys.provider import DecompositionProvider, KeyChainProvider

__all__ = ["ComparableKey", "KeyComparer"]

# Separates name and value bytes inside a pair hash; cannot occur in UTF-8.
_PAIR_SEPARATOR = 0xFF


def _fnv1(data: bytes, hash_value: int = FNV_HASH_BASIS) -> int:
    for byte in data:
        hash_value = ((hash_value * FNV_HASH_PRIME) & HASH_MASK) ^ byte
    return hash_value


def _pair_hash(name: str, value: str | None) -> int:
    hash_value = _fnv1(name.encode("utf-8"))
    hash_value = ((hash_value * FNV_HASH_PRIME) & HASH_MASK) ^ _PAIR_SEPARATOR
    if value is not None:
        hash_value = _fnv1(value.encode("utf-8"), hash_value)
    return hash_value


class KeyComparer:
    """Configurable key equality and hash.

    Attributes:
        provider: Decomposition provider for the compared key type
        ignored_parameters: Non-canonical parameter names left out of comparison

    Example:
        >>> from lexkeys import KeyChain
        >>> comparer = KeyComparer()
        >>> a = KeyChain.root().append("culture", "en").append("key", "Ok")
        >>> b = KeyChain.root().append("key", "Ok").append("culture", "en")
        >>> comparer.equals(a, b)
        True
        >>> comparer.hash(a) == comparer.hash(b)
        True
    """

    __slots__ = ("_ignored", "_provider")

    def __init__(
        self,
        provider: DecompositionProvider[Any] | None = None,
        *,
        ignore_parameters: Iterable[str] = (),
    ) -> None:
        """Create comparer.

        Args:
            provider: Decomposition provider (default: KeyChainProvider)
            ignore_parameters: Non-canonical parameter names to leave out
        """
        self._provider: DecompositionProvider[Any] = (
            provider if provider is not None else KeyChainProvider()
        )
        self._ignored = frozenset(name.lower() for name in ignore_parameters)

    @classmethod
    def ignoring_culture(cls, provider: DecompositionProvider[Any] | None = None) -> KeyComparer:
        """Comparer that is oblivious to the culture parameter."""
        return cls(provider, ignore_parameters=(CULTURE,))

    @property
    def provider(self) -> DecompositionProvider[Any]:
        return self._provider

    @property
    def ignored_parameters(self) -> frozenset[str]:
        return self._ignored

    def non_canonical_parameters(self, key: Any) -> dict[str, str]:
        """Significant non-canonical parameters of key.

        Returns:
            Lower-cased parameter name → tail-most value, empty values removed
        """
        result: dict[str, str] = {}
        for segment in self._provider.segments(key):
            if segment.classification is not Classification.NON_CANONICAL:
                continue
            name = segment.name.lower()
            if segment.value is None or name in self._ignored:
                continue
            # Tail-most occurrence stands; keep collecting other names
            if name in result:
                continue
            result[name] = segment.value
        return {name: value for name, value in result.items() if value != ""}

    def canonical_parameters(self, key: Any) -> tuple[tuple[str, str | None], ...]:
        """Canonical (lower-cased name, value) pairs of key, tail→root."""
        return tuple(
            (segment.name.lower(), segment.value)
            for segment in self._provider.segments(key)
            if segment.classification is Classification.CANONICAL
        )

    def equals(self, x: Any, y: Any) -> bool:
        """Key equivalence.

        Args:
            x: Key or None
            y: Key or None

        Returns:
            True if both are None, or both passes agree
        """
        if x is None and y is None:
            return True
        if x is None or y is None:
            return False
        if x is y:
            return True
        if self.non_canonical_parameters(x) != self.non_canonical_parameters(y):
            return False
        return self._canonical_equals(x, y)

    def _canonical_equals(self, x: Any, y: Any) -> bool:
        x_segments = self._canonical_segments(x)
        y_segments = self._canonical_segments(y)
        sentinel = None
        while True:
            x_segment = next(x_segments, sentinel)
            y_segment = next(y_segments, sentinel)
            if x_segment is None or y_segment is None:
                # Equal only if both ran out together
                return x_segment is y_segment
            if x_segment.value != y_segment.value:
                return False
            if x_segment.name.lower() != y_segment.name.lower():
                return False

    def _canonical_segments(self, key: Any) -> Iterator[KeySegment]:
        return (
            segment
            for segment in self._provider.segments(key)
            if segment.classification is Classification.CANONICAL
        )

    def hash(self, key: Any) -> int:
        """Hash consistent with equals(); 0 for None.

        Returns:
            Unsigned 32-bit hash
        """
        if key is None:
            return 0
        result = FNV_HASH_BASIS
        for name, value in self.non_canonical_parameters(key).items():
            result ^= _pair_hash(name, value)
        for segment in self._canonical_segments(key):
            result ^= _pair_hash(segment.name.lower(), segment.value)
            result = (result * FNV_HASH_PRIME) & HASH_MASK
        return result

    def wrap(self, key: Any) -> ComparableKey:
        """Wrap key so that ==, hash(), dict and set follow this comparer."""
        return ComparableKey(key, self)

    def __repr__(self) -> str:
        return f"KeyComparer({self._provider!r}, ignore_parameters={sorted(self._ignored)!r})"


class ComparableKey:
    """Key paired with the comparer that defines its equality.

    Example:
        >>> from lexkeys import KeyChain
        >>> comparer = KeyComparer.ignoring_culture()
        >>> english = KeyChain.root().append("culture", "en").append("key", "Hi")
        >>> table = {comparer.wrap(english): "Hello"}
        >>> table[comparer.wrap(KeyChain.root().append("key", "Hi"))]
        'Hello'
    """

    __slots__ = ("_hash", "comparer", "key")

    def __init__(self, key: Any, comparer: KeyComparer) -> None:
        self.key = key
        self.comparer = comparer
        self._hash = comparer.hash(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparableKey) or other.comparer is not self.comparer:
            return NotImplemented
        return self._hash == other._hash and self.comparer.equals(self.key, other.key)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"ComparableKey({self.key!r})"
