"""Immutable key chain.

A key is a persistent singly-linked list of (parameter name, parameter value)
segments. Each node points at the previous (root-ward) node; appending creates
a new node and never touches existing ones, so any number of chains can share
a tail safely.

    root ── culture:en ── type:MyController ── key:Error
                                                  ^ head (what callers hold)

Design:
    - Frozen slotted dataclass: a node's previous link and classification
      are fixed at construction
    - Classification is a field, decided once when the node is created
    - A root sentinel (parameter_name None) terminates every chain
    - Equality is identity; use KeyComparer for key equivalence

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import NamedTuple

from lexkeys.enums import Classification
from lexkeys.keys.parameters import DEFAULT_PARAMETER_INFOS, ParameterInfos

__all__ = ["KeyChain", "KeySegment"]


class KeySegment(NamedTuple):
    """One decomposed parameter segment of a key."""

    name: str
    value: str | None
    classification: Classification


@dataclass(frozen=True, slots=True, eq=False)
class KeyChain:
    """Immutable key chain node.

    Attributes:
        parameter_name: Parameter name (None for the root sentinel)
        parameter_value: Parameter value
        previous: Root-ward node (None only for a root)
        classification: How this segment takes part in key equivalence

    Example:
        >>> key = KeyChain.root().append("culture", "en").append("key", "Error")
        >>> key.parameters()
        (('culture', 'en'), ('key', 'Error'))
        >>> key.classification
        <Classification.CANONICAL: 'canonical'>
        >>> str(key)
        'culture:en:key:Error'
    """

    parameter_name: str | None = None
    parameter_value: str | None = None
    previous: KeyChain | None = None
    classification: Classification = Classification.UNCLASSIFIED

    def __post_init__(self) -> None:
        """Validate node invariants.

        Raises:
            TypeError: If previous is not a KeyChain
            ValueError: If a root node is given a comparing classification
        """
        if self.previous is not None and not isinstance(self.previous, KeyChain):
            msg = f"previous must be a KeyChain or None, got {type(self.previous).__name__}"
            raise TypeError(msg)
        if self.parameter_name is None and self.classification is not Classification.UNCLASSIFIED:
            msg = "A node without parameter name must be UNCLASSIFIED"
            raise ValueError(msg)

    @classmethod
    def root(cls) -> KeyChain:
        """Create a new root sentinel."""
        return cls()

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, str | None]],
        *,
        root: KeyChain | None = None,
        infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
    ) -> KeyChain:
        """Build a chain from (name, value) pairs given in root→tail order.

        Args:
            pairs: Parameter pairs, root-most first
            root: Chain to append to (default: a new root)
            infos: Registry that classifies each parameter name

        Returns:
            Head of the new chain
        """
        key = root if root is not None else cls.root()
        for name, value in pairs:
            key = key.append(name, value, infos=infos)
        return key

    @property
    def is_root(self) -> bool:
        """True for a structural node without parameter name."""
        return self.parameter_name is None

    def append(
        self,
        name: str,
        value: str | None,
        classification: Classification | None = None,
        *,
        infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
    ) -> KeyChain:
        """Return a new head with one more segment.

        Args:
            name: Parameter name
            value: Parameter value
            classification: Explicit classification (default: looked up in infos)
            infos: Registry used when classification is not given

        Returns:
            New chain whose previous node is self
        """
        if classification is None:
            classification = infos.classify(name)
        return KeyChain(name, value, self, classification)

    def culture(self, code: str, *, infos: ParameterInfos = DEFAULT_PARAMETER_INFOS) -> KeyChain:
        """Append a culture segment, normalizing the code to BCP-47 with Babel.

        Raises:
            KeyFormatError: If Babel does not know the culture
        """
        from lexkeys.locale_utils import normalize_culture  # noqa: PLC0415 - babel is heavy

        return self.append("culture", normalize_culture(code), infos=infos)

    def nodes(self) -> Iterator[KeyChain]:
        """Iterate every node, root sentinels included, tail→root."""
        node: KeyChain | None = self
        while node is not None:
            yield node
            node = node.previous

    def segments(self) -> Iterator[KeySegment]:
        """Iterate parameter segments tail→root."""
        for node in self.nodes():
            if node.parameter_name is not None:
                yield KeySegment(node.parameter_name, node.parameter_value, node.classification)

    def segments_from_root(self) -> list[KeySegment]:
        """Parameter segments root→tail."""
        result = list(self.segments())
        result.reverse()
        return result

    def parameters(self) -> tuple[tuple[str, str | None], ...]:
        """(name, value) pairs root→tail."""
        return tuple((s.name, s.value) for s in self.segments_from_root())

    def get(self, name: str, default: str | None = None) -> str | None:
        """Value of the tail-most segment named name (case-insensitive)."""
        wanted = name.lower()
        for segment in self.segments():
            if segment.name.lower() == wanted:
                return segment.value
        return default

    def __len__(self) -> int:
        return sum(1 for _ in self.segments())

    def __bool__(self) -> bool:
        # A bare root has length 0 but is still a key
        return True

    def __str__(self) -> str:
        from lexkeys.keys.serializer import format_key  # noqa: PLC0415 - circular

        return format_key(self)

    def __repr__(self) -> str:
        return f"KeyChain({str(self)!r})"
