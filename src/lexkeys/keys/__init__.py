"""Key chains, parameter metadata, decomposition and equivalence.

Python 3.13+.
"""

from .chain import KeyChain, KeySegment
from .comparer import ComparableKey, KeyComparer
from .parameters import DEFAULT_PARAMETER_INFOS, ParameterInfo, ParameterInfos
from .provider import DecompositionProvider, KeyChainProvider, SequenceKeyProvider
from .serializer import escape_value, format_key, parse_key, unescape_value

__all__ = [
    "DEFAULT_PARAMETER_INFOS",
    "ComparableKey",
    "DecompositionProvider",
    "KeyChain",
    "KeyChainProvider",
    "KeyComparer",
    "KeySegment",
    "ParameterInfo",
    "ParameterInfos",
    "SequenceKeyProvider",
    "escape_value",
    "format_key",
    "parse_key",
    "unescape_value",
]
