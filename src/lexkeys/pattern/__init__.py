"""Name patterns: compile templates, match keys and names, build names.

Python 3.13+.
"""

from .builder import build_name
from .compiler import CompiledPattern, PatternPart, compile_pattern
from .match import MatchResult, parameters_from_mapping
from .matcher import fix_occurrences, match_key, match_text
from .regex import build_regex, build_regex_string

__all__ = [
    "CompiledPattern",
    "MatchResult",
    "PatternPart",
    "build_name",
    "build_regex",
    "build_regex_string",
    "compile_pattern",
    "fix_occurrences",
    "match_key",
    "match_text",
    "parameters_from_mapping",
]
