"""lexkeys - Localization key identity and name patterns.

A localized string is identified by a key: a chain of (parameter name,
parameter value) segments such as culture=en, type=MyController, key=Error.

Public API:
    KeyChain - Immutable key chain
    KeyComparer - Key equivalence (canonical / non-canonical parameters)
    compile_pattern - Compile a name pattern such as "{Culture.}{Type.}[Key]"
    CompiledPattern - Match keys and names, build names, parse names into keys
    format_key / parse_key - "name:value:name:value" text form of keys

Exceptions:
    LexKeyError - Base exception class
    PatternSyntaxError - Malformed pattern template
    PatternMatchError - Name did not match a pattern
    KeyFormatError - Malformed key text or culture code

Submodules:
    lexkeys.keys - Key chains, parameter metadata, providers, comparer
    lexkeys.pattern - Pattern compiler, matcher, builder, regex synthesis
    lexkeys.diagnostics - Diagnostics, error templates and formatter
    lexkeys.locale_utils - Babel-backed culture normalization
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import KeyFormatError, LexKeyError, PatternMatchError, PatternSyntaxError
from .enums import Classification, RegexFlags
from .keys import (
    DEFAULT_PARAMETER_INFOS,
    ComparableKey,
    DecompositionProvider,
    KeyChain,
    KeyChainProvider,
    KeyComparer,
    ParameterInfo,
    ParameterInfos,
    SequenceKeyProvider,
    format_key,
    parse_key,
)
from .pattern import CompiledPattern, MatchResult, PatternPart, compile_pattern

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("lexkeys")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DEFAULT_PARAMETER_INFOS",
    "Classification",
    "ComparableKey",
    "CompiledPattern",
    "DecompositionProvider",
    "KeyChain",
    "KeyChainProvider",
    "KeyComparer",
    "KeyFormatError",
    "LexKeyError",
    "MatchResult",
    "ParameterInfo",
    "ParameterInfos",
    "PatternMatchError",
    "PatternPart",
    "PatternSyntaxError",
    "RegexFlags",
    "SequenceKeyProvider",
    "__version__",
    "compile_pattern",
    "format_key",
    "parse_key",
]
