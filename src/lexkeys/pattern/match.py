"""Match result of a name pattern.

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from lexkeys.constants import ANYSECTION
from lexkeys.keys.chain import KeyChain
from lexkeys.keys.parameters import DEFAULT_PARAMETER_INFOS, ParameterInfos
from lexkeys.pattern.builder import build_name

if TYPE_CHECKING:
    from lexkeys.pattern.compiler import CompiledPattern

__all__ = ["MatchResult", "parameters_from_mapping"]

_SECTION = "section"

# "Section_2" -> name "Section", occurrence "2"; "Section_n" drops the suffix
_OCCURRENCE_SUFFIX = re.compile(r"(?P<name>.+?)(?:_(?P<occurrence>[0-9]+|n))?")


class MatchResult(Mapping[str, str | None]):
    """Values captured by a pattern, keyed by part identifier.

    Read-only for callers. The matcher fills values in before handing the
    result out, and records which values the occurrence fix pass copied.

    Attributes:
        pattern: Pattern that produced this result

    Example:
        >>> from lexkeys import compile_pattern
        >>> result = compile_pattern("{Culture.}[Key]").match_text("fi.Ok")
        >>> result.success, result["Culture"], result["Key"]
        (True, 'fi', 'Ok')
        >>> str(result)
        'fi.Ok'
    """

    __slots__ = ("_copied", "_values", "pattern")

    def __init__(self, pattern: CompiledPattern) -> None:
        self.pattern = pattern
        self._values: list[str | None] = [None] * len(pattern.capture_parts)
        self._copied: set[int] = set()

    def _assign(self, capture_index: int, value: str | None, *, copied: bool = False) -> None:
        self._values[capture_index] = value
        if copied:
            self._copied.add(capture_index)

    def __getitem__(self, identifier: str) -> str | None:
        part = self.pattern.part_map[identifier]
        return self._values[part.capture_index]

    def __iter__(self) -> Iterator[str]:
        for part in self.pattern.capture_parts:
            if part.identifier is not None:
                yield part.identifier

    def __len__(self) -> int:
        return len(self._values)

    @property
    def part_values(self) -> tuple[str | None, ...]:
        """Captured values by capture index."""
        return tuple(self._values)

    def value_at(self, capture_index: int) -> str | None:
        return self._values[capture_index]

    @property
    def success(self) -> bool:
        """True if every required capture part has a value."""
        return all(
            self._values[part.capture_index] is not None
            for part in self.pattern.capture_parts
            if part.required
        )

    def to_parameters(self) -> list[tuple[str, str]]:
        """Captured (parameter name, value) pairs in source order.

        "anysection" captures are reported as "section". Values copied by the
        occurrence fix pass are not reported a second time.
        """
        result: list[tuple[str, str]] = []
        for part in self.pattern.capture_parts:
            value = self._values[part.capture_index]
            if value is None or part.parameter_name is None:
                continue
            if part.capture_index in self._copied:
                continue
            name = _SECTION if part.parameter_name == ANYSECTION else part.parameter_name
            result.append((name, value))
        return result

    def to_key(
        self,
        root: KeyChain | None = None,
        *,
        infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
    ) -> KeyChain:
        """Key built from the captured parameters."""
        return KeyChain.from_pairs(self.to_parameters(), root=root, infos=infos)

    def __str__(self) -> str:
        return build_name(self.pattern, self._values) or ""

    def __repr__(self) -> str:
        values = ", ".join(f"{identifier}={value!r}" for identifier, value in self.items())
        return f"MatchResult({self.pattern.pattern!r}, {values})"


def parameters_from_mapping(
    values: Mapping[str, str | None],
    *,
    infos: ParameterInfos = DEFAULT_PARAMETER_INFOS,
) -> list[tuple[str, str]]:
    """Order identifier → value pairs as key parameters.

    For a mapping that did not come from a match, such as a dict of build
    values. The occurrence suffix is removed from each identifier, "anysection"
    becomes "section", and the pairs are sorted by the parameter's sort order
    plus its occurrence index. Pairs with equal weight keep mapping order.
    None and empty values are left out. A MatchResult is converted with
    MatchResult.to_parameters() instead.

    Args:
        values: Values by identifier, e.g. {"Key": "Ok", "Culture": "en"}
        infos: Registry supplying the sort order

    Returns:
        (parameter name, value) pairs in root→tail order

    Example:
        >>> parameters_from_mapping({"Key": "Ok", "Type": "App", "Culture": "en"})
        [('culture', 'en'), ('type', 'App'), ('key', 'Ok')]
    """
    if isinstance(values, MatchResult):
        return values.to_parameters()

    weighted: list[tuple[int, str, str]] = []
    for identifier, value in values.items():
        if not identifier or not value:
            continue
        match = _OCCURRENCE_SUFFIX.fullmatch(identifier)
        if match is None:
            continue
        name = match.group("name").lower()
        if name == ANYSECTION:
            name = _SECTION
        occurrence = match.group("occurrence")
        weight = infos.sort_order(name)
        if occurrence is not None and occurrence != "n":
            weight += int(occurrence)
        weighted.append((weight, name, value))

    weighted.sort(key=lambda item: item[0])
    return [(name, value) for _, name, value in weighted]
