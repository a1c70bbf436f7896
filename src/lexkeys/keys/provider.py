"""Key decomposition providers.

Both the pattern matcher and the key comparer see keys only through a
DecompositionProvider, which turns an opaque key object into its parameter
segments. One provider exists per key representation; nothing is discovered
by reflection.

Contract:
    - segments(key) yields KeySegment tail→root and omits structural nodes
    - previous(key) returns the root-ward key, or None at the root
    - The classification of a segment is the same on every call

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol, TypeVar, runtime_checkable

from lexkeys.keys.chain import KeyChain, KeySegment
from lexkeys.keys.parameters import DEFAULT_PARAMETER_INFOS, ParameterInfos

K = TypeVar("K")

__all__ = [
    "DecompositionProvider",
    "KeyChainProvider",
    "SequenceKeyProvider",
]


@runtime_checkable
class DecompositionProvider(Protocol[K]):
    """Decomposes keys of type K into parameter segments."""

    def segments(self, key: K) -> Iterator[KeySegment]:
        """Yield the parameter segments of key, tail→root."""
        ...

    def previous(self, key: K) -> K | None:
        """Return the root-ward key of key, or None."""
        ...


class KeyChainProvider:
    """Provider for KeyChain keys."""

    __slots__ = ()

    def segments(self, key: KeyChain) -> Iterator[KeySegment]:
        return key.segments()

    def previous(self, key: KeyChain) -> KeyChain | None:
        return key.previous

    def __repr__(self) -> str:
        return "KeyChainProvider()"


class SequenceKeyProvider:
    """Provider for keys written as (name, value) pair sequences, root-most first.

    Classification comes from a ParameterInfos registry.

    Example:
        >>> provider = SequenceKeyProvider()
        >>> [s.name for s in provider.segments([("culture", "en"), ("key", "Ok")])]
        ['key', 'culture']
    """

    __slots__ = ("_infos",)

    def __init__(self, infos: ParameterInfos = DEFAULT_PARAMETER_INFOS) -> None:
        self._infos = infos

    def segments(self, key: Sequence[tuple[str, str | None]]) -> Iterator[KeySegment]:
        for name, value in reversed(key):
            yield KeySegment(name, value, self._infos.classify(name))

    def previous(
        self, key: Sequence[tuple[str, str | None]]
    ) -> Sequence[tuple[str, str | None]] | None:
        if not key:
            return None
        return key[:-1]

    def __repr__(self) -> str:
        return f"SequenceKeyProvider({self._infos!r})"
