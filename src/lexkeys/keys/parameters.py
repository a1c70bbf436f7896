"""Metadata about well-known key parameters.

A single registry decides, for every parameter name, how segments with that
name take part in key equivalence (Classification), where the parameter sorts
when parameters are put back in order, and which regex constrains the
parameter when it is captured by a name pattern. The key comparer and the
pattern compiler consult the same registry, so the two engines agree on what
"culture" or "section" means.

Parameter names are case-insensitive; they are stored lower-cased.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from lexkeys.constants import CULTURE_PART_REGEX, TYPE_PART_REGEX
from lexkeys.enums import Classification

__all__ = [
    "DEFAULT_PARAMETER_INFOS",
    "ParameterInfo",
    "ParameterInfos",
]


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Information about one parameter name.

    Attributes:
        name: Parameter name (lower-cased on registration)
        classification: How segments of this parameter are compared
        order: Sorting weight; smaller sorts further left when a string is formulated
        pattern: Default capture regex for name patterns (None: match anything)
    """

    name: str
    classification: Classification
    order: int = 0
    pattern: re.Pattern[str] | None = None


class ParameterInfos(Mapping[str, ParameterInfo]):
    """Immutable, case-insensitive registry of ParameterInfo.

    Example:
        >>> infos = DEFAULT_PARAMETER_INFOS
        >>> infos.classify("Culture")
        <Classification.NON_CANONICAL: 'non_canonical'>
        >>> infos.classify("MyParameter")
        <Classification.CANONICAL: 'canonical'>
    """

    __slots__ = ("_default_classification", "_infos")

    def __init__(
        self,
        infos: Iterable[ParameterInfo] = (),
        *,
        default_classification: Classification = Classification.CANONICAL,
    ) -> None:
        """Create registry.

        Args:
            infos: Parameter infos; later entries replace earlier ones of the same name
            default_classification: Classification of names not in the registry
        """
        table = {info.name.lower(): info for info in infos}
        self._infos: Mapping[str, ParameterInfo] = MappingProxyType(table)
        self._default_classification = default_classification

    def __getitem__(self, name: str) -> ParameterInfo:
        return self._infos[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._infos)

    def __len__(self) -> int:
        return len(self._infos)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._infos

    def __repr__(self) -> str:
        return f"ParameterInfos({sorted(self._infos)!r})"

    @property
    def default_classification(self) -> Classification:
        """Classification given to parameter names not in the registry."""
        return self._default_classification

    def with_info(self, info: ParameterInfo) -> ParameterInfos:
        """Return a copy with info added (or replaced)."""
        return ParameterInfos(
            [*self._infos.values(), info],
            default_classification=self._default_classification,
        )

    def classify(self, name: str | None) -> Classification:
        """Classification of a parameter name.

        Structural nodes without a name are never compared.
        """
        if name is None:
            return Classification.UNCLASSIFIED
        info = self._infos.get(name.lower())
        return info.classification if info is not None else self._default_classification

    def default_pattern(self, name: str | None) -> re.Pattern[str] | None:
        """Default capture regex of a parameter, or None if unconstrained."""
        if not name:
            return None
        info = self._infos.get(name.lower())
        return info.pattern if info is not None else None

    def sort_order(self, name: str) -> int:
        """Sorting weight of a parameter name (0 for unknown names)."""
        info = self._infos.get(name.lower())
        return info.order if info is not None else 0


def _default_infos() -> ParameterInfos:
    canonical = Classification.CANONICAL
    non_canonical = Classification.NON_CANONICAL
    unclassified = Classification.UNCLASSIFIED
    infos = [
        ParameterInfo("culture", non_canonical, -6000, re.compile(CULTURE_PART_REGEX)),
        ParameterInfo("location", canonical, -4000),
        ParameterInfo("assembly", non_canonical, -2000),
        ParameterInfo("resource", canonical, 0),
        ParameterInfo("section", canonical, 2000),
        ParameterInfo("type", canonical, 2000, re.compile(TYPE_PART_REGEX)),
        ParameterInfo("key", canonical, 6000),
        ParameterInfo("n", non_canonical, 8000),
        # Formatting hints ride along in a key without being part of its identity
        ParameterInfo("root", unclassified, -300000),
        ParameterInfo("stringformat", unclassified, -200000),
        ParameterInfo("pluralrules", unclassified, -22000),
        ParameterInfo("stringformatfunctions", unclassified, -21000),
    ]
    # Plurality of format arguments N1..N19
    infos.extend(ParameterInfo(f"n{i}", non_canonical, 8000 + 100 * i) for i in range(1, 20))
    return ParameterInfos(infos)


# Immutable; pass a different ParameterInfos explicitly to change behavior.
DEFAULT_PARAMETER_INFOS: ParameterInfos = _default_infos()
