"""Tests for pattern.matcher and pattern.match: key and text matching.

Validates occurrence binding, regex filtering, pre-filled values, the
occurrence fix pass, MatchResult mapping behavior, and parsing names into
key chains.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from lexkeys import (
    Classification,
    CompiledPattern,
    KeyChain,
    KeyComparer,
    PatternMatchError,
    SequenceKeyProvider,
    compile_pattern,
)
from lexkeys.pattern import fix_occurrences, match_key, match_text, parameters_from_mapping


def _key(*pairs: tuple[str, str]) -> KeyChain:
    return KeyChain.from_pairs(pairs)


# ============================================================================
# MATCH AGAINST KEY
# ============================================================================


class TestMatchKey:
    """Test capturing values from key chains."""

    def test_basic(self) -> None:
        """Each part takes the value of its parameter."""
        pattern = compile_pattern("{Culture.}{Type.}{Key}")
        key = _key(("culture", "en"), ("type", "App"), ("key", "Ok"))

        result = pattern.match_key(key)

        assert dict(result) == {"Culture": "en", "Type": "App", "Key": "Ok"}
        assert result.success

    def test_occurrence_binding(self) -> None:
        """Numbered parts bind in order; the bare part binds to the last one."""
        pattern = compile_pattern("{Section_0.}{Section_1.}{Section}")
        key = _key(("section", "A"), ("section", "B"))

        result = pattern.match_key(key)

        assert result["Section_0"] == "A"
        assert result["Section_1"] == "B"
        assert result["Section"] == "B"

    def test_occurrence_beyond_available(self) -> None:
        """A pinned occurrence the key does not have stays None."""
        pattern = compile_pattern("{Section_0.}{Section_1.}")

        result = pattern.match_key(_key(("section", "A")))

        assert result["Section_0"] == "A"
        assert result["Section_1"] is None

    def test_repeated_bare_parts(self) -> None:
        """Repeated bare parts take successive occurrences."""
        pattern = compile_pattern("{Location/}{Location/}[Key]")
        key = _key(("location", "a"), ("location", "b"), ("key", "K"))

        assert pattern.build_name(key) == "a/b/K"

    def test_missing_required_part(self) -> None:
        """A required part without value fails the match."""
        pattern = compile_pattern("{Culture.}[Type.]{Key}")

        result = pattern.match_key(_key(("key", "Ok")))

        assert result["Type"] is None
        assert not result.success

    def test_part_regex_filters_values(self) -> None:
        """Values rejected by the part regex are not captured."""
        pattern = compile_pattern("{Culture.}{Type.}{Key}")
        key = _key(("culture", ""), ("type", "1abc"), ("key", "Ok"))

        result = pattern.match_key(key)

        assert result["Culture"] is None
        assert result["Type"] is None
        assert result["Key"] == "Ok"

    def test_part_regex_filters_before_occurrence(self) -> None:
        """Occurrences count only values that satisfy the part regex."""
        pattern = compile_pattern(r"{N_0<\d+>.}{N_1<\d+>}")
        key = _key(("n", "x"), ("n", "1"), ("n", "2"))

        result = pattern.match_key(key)

        assert result.part_values == ("1", "2")

    def test_parameter_names_are_case_insensitive(self) -> None:
        """Segment names match parts regardless of case."""
        pattern = compile_pattern("{culture.}[KEY]")
        key = KeyChain.root().append("Culture", "fi").append("Key", "Ok")

        assert pattern.build_name(key) == "fi.Ok"

    def test_anysection(self) -> None:
        """anysection captures every section-like parameter."""
        pattern = compile_pattern("{anysection_0/}{anysection_1/}[Key]")
        key = _key(("assembly", "Asm"), ("type", "App"), ("key", "Ok"))

        result = pattern.match_key(key)

        assert result["anysection_0"] == "Asm"
        assert result["anysection_1"] == "App"

    def test_prefilled_wins(self) -> None:
        """Pre-filled values replace values from the key."""
        pattern = compile_pattern("{Culture.}[Key]")
        key = _key(("culture", "en"), ("key", "Ok"))

        result = pattern.match_key(key, prefilled={"Culture": "fi"})

        assert result["Culture"] == "fi"
        assert result["Key"] == "Ok"

    def test_none_values_are_skipped(self) -> None:
        """Segments without value are not occurrences."""
        pattern = compile_pattern("{Section_0.}[Key]")
        key = _key(("section", None), ("section", "S"), ("key", "K"))  # type: ignore[arg-type]

        assert pattern.match_key(key)["Section_0"] == "S"

    def test_sequence_provider(self) -> None:
        """Any key representation works through its provider."""
        pattern = compile_pattern("{Culture.}[Key]")
        key = [("culture", "en"), ("key", "Ok")]

        result = match_key(pattern, key, provider=SequenceKeyProvider())

        assert str(result) == "en.Ok"


# ============================================================================
# MATCH AGAINST TEXT
# ============================================================================


class TestMatchText:
    """Test capturing values from names."""

    def test_basic(self) -> None:
        """Named groups capture each part."""
        pattern = compile_pattern("{Culture.}{Type.}{Key}")

        result = pattern.match_text("en.App.Ok")

        assert dict(result) == {"Culture": "en", "Type": "App", "Key": "Ok"}

    def test_optional_part_absent(self) -> None:
        """Optional parts that do not appear are None."""
        pattern = compile_pattern("{Culture.}{Type.}{Key}")

        result = pattern.match_text("App.Ok")

        assert result["Culture"] is None
        assert result["Type"] == "App"
        assert result["Key"] == "Ok"

    def test_no_match_leaves_values_none(self) -> None:
        """A non-matching name captures nothing."""
        pattern = compile_pattern("[Key].json")

        result = pattern.match_text("x.ini")

        assert result.part_values == (None,)
        assert not result.success

    def test_literals_must_match(self) -> None:
        """Literal parts are matched verbatim, regex characters included."""
        pattern = compile_pattern("Assets/{Type/}[Key].(ini)")

        assert pattern.match_text("Assets/App/Ok.(ini)")["Key"] == "Ok"
        assert not pattern.match_text("Assets/App/Ok.ini").success

    def test_prefilled_narrows_match(self) -> None:
        """Pre-filled values must appear literally in the name."""
        pattern = compile_pattern("{Culture.}[Type.]{Key}")

        matched = pattern.match_text("en.App.Ok", prefilled={"Type": "App"})
        rejected = pattern.match_text("en.Other.Ok", prefilled={"Type": "App"})

        assert dict(matched) == {"Culture": "en", "Type": "App", "Key": "Ok"}
        assert rejected.part_values == (None, None, None)

    def test_prefilled_value_is_escaped(self) -> None:
        """Pre-filled values are matched literally."""
        pattern = compile_pattern("[Type/][Key]")

        assert pattern.match_text("a.b/Ok", prefilled={"Type": "a.b"}).success
        assert not pattern.match_text("axb/Ok", prefilled={"Type": "a.b"}).success

    def test_fix_pass_copies_single_numbered_value(self) -> None:
        """A bare part left empty takes the value of the lone numbered part."""
        pattern = compile_pattern("{Section_0.}{Section}")

        result = pattern.match_text("A.")

        assert result["Section_0"] == "A"
        assert result["Section"] == "A"
        assert result.to_parameters() == [("section", "A")]

    def test_fix_pass_ignores_several_numbered_values(self) -> None:
        """With two numbered values the bare part stays empty."""
        pattern = compile_pattern("{Section_0.}{Section_1.}{Section}")

        result = pattern.match_text("A.B.")

        assert result["Section"] is None

    def test_module_function(self) -> None:
        """match_text is available as a function."""
        pattern = compile_pattern("[Key]")

        assert match_text(pattern, "Ok")["Key"] == "Ok"

    def test_required_part_needs_text(self) -> None:
        """An empty capture leaves a required part without value."""
        pattern = compile_pattern("{Culture.}[Key]")

        result = pattern.match_text("")

        assert result["Key"] is None
        assert not result.success
        assert pattern.build(["en", ""]) is None

    def test_rejected_prefilled_regex_is_no_match(self) -> None:
        """A pre-filled regex the re module rejects yields a failed match."""
        pattern = compile_pattern("[A][B<(x)\\1>]")

        result = pattern.match_text("qxq", prefilled={"A": "q"})

        assert result.part_values == (None, None)
        assert not result.success


# ============================================================================
# FIX PASS
# ============================================================================


class TestFixOccurrences:
    """Test fix_occurrences directly."""

    def test_idempotent(self) -> None:
        """Running the fix pass again changes nothing."""
        pattern = compile_pattern("{Section_0.}{Section}")
        result = pattern.match_text("A.")

        fix_occurrences(result)

        assert result.part_values == ("A", "A")

    def test_filled_bare_part_untouched(self) -> None:
        """A bare part that has its own value keeps it."""
        pattern = compile_pattern("{Section_0.}{Section}")

        result = pattern.match_text("A.B")

        assert result.part_values == ("A", "B")
        assert result.to_parameters() == [("section", "A"), ("section", "B")]


# ============================================================================
# MATCH RESULT
# ============================================================================


class TestMatchResult:
    """Test MatchResult mapping and conversions."""

    def test_mapping_protocol(self) -> None:
        """MatchResult is a read-only mapping by identifier."""
        result = compile_pattern("{Culture.}[Key]").match_text("en.Ok")

        assert len(result) == 2
        assert list(result) == ["Culture", "Key"]
        assert result.value_at(1) == "Ok"
        with pytest.raises(KeyError):
            result["Missing"]

    def test_str_rebuilds_name(self) -> None:
        """str() renders the captured values through the pattern."""
        result = compile_pattern("{Culture.}[Type.]{Key}").match_key(
            _key(("type", "App"), ("key", "Ok"))
        )

        assert str(result) == "App.Ok"

    def test_str_of_failed_match_is_empty(self) -> None:
        """A failed match renders as empty text."""
        result = compile_pattern("[Type.]{Key}").match_key(_key(("key", "Ok")))

        assert str(result) == ""

    def test_to_parameters_renames_anysection(self) -> None:
        """anysection captures become section parameters."""
        result = compile_pattern("[anysection/][Key]").match_text("Foo/Bar")

        assert result.to_parameters() == [("section", "Foo"), ("key", "Bar")]

    def test_repr(self) -> None:
        """repr lists identifiers and values."""
        result = compile_pattern("[Key]").match_text("Ok")

        assert repr(result) == "MatchResult('[Key]', Key='Ok')"


# ============================================================================
# PARSE
# ============================================================================


class TestParse:
    """Test parsing names into key chains."""

    def test_parse(self) -> None:
        """parse() returns a classified key chain."""
        pattern = compile_pattern("{Culture.}[Type.]{Key}")

        key = pattern.parse("en.App.Ok")

        assert key.parameters() == (("culture", "en"), ("type", "App"), ("key", "Ok"))
        assert [s.classification for s in key.segments_from_root()] == [
            Classification.NON_CANONICAL,
            Classification.CANONICAL,
            Classification.CANONICAL,
        ]

    def test_parse_onto_root(self) -> None:
        """Parsed parameters extend the given chain."""
        root = KeyChain.root().append("assembly", "Asm")

        key = compile_pattern("[Key]").parse("Ok", root=root)

        assert key.parameters() == (("assembly", "Asm"), ("key", "Ok"))

    def test_parse_failure_raises(self) -> None:
        """A name that does not match raises PatternMatchError."""
        pattern = compile_pattern("[Key].json")

        with pytest.raises(PatternMatchError) as exc_info:
            pattern.parse("x.ini")

        assert "did not match the pattern '[Key].json'" in str(exc_info.value)

    def test_try_parse(self) -> None:
        """try_parse returns None instead of raising."""
        pattern = compile_pattern("[Key].json")

        assert pattern.try_parse("x.ini") is None
        assert pattern.try_parse("x.json") is not None

    def test_empty_name_is_rejected(self) -> None:
        """An empty name has no value for a required part."""
        pattern = compile_pattern("{Culture.}[Key]")

        with pytest.raises(PatternMatchError):
            pattern.parse("")
        assert pattern.try_parse("") is None

    def test_mixed_case_key_round_trip(self) -> None:
        """A key with capitalized names equals the key parsed from its name."""
        pattern = compile_pattern("{Culture.}[Type.][Key]")
        key = _key(("Culture", "en"), ("Type", "App"), ("Key", "Ok"))

        name = pattern.build_name(key)
        assert name == "en.App.Ok"
        parsed = pattern.parse(name)

        assert parsed.parameters() == (("culture", "en"), ("type", "App"), ("key", "Ok"))
        assert KeyComparer().equals(parsed, key)
        assert KeyComparer().hash(parsed) == KeyComparer().hash(key)


# ============================================================================
# REGEX CACHE
# ============================================================================


class TestRegexCache:
    """Test the cached regex shared by all callers."""

    def test_regex_is_cached(self) -> None:
        """The same regex object is returned every time."""
        pattern = compile_pattern("{Culture.}[Key]")

        assert pattern.regex is pattern.regex

    def test_prefilled_regex_is_not_cached(self) -> None:
        """Regexes with pre-filled values are built fresh."""
        pattern = compile_pattern("{Culture.}[Key]")

        assert pattern.build_regex({"Culture": "en"}) is not pattern.regex

    def test_concurrent_first_access(self) -> None:
        """Threads racing for the first access all get one regex."""
        compiled = compile_pattern("{Culture.}{Type.}{Section.}[Key]")
        pattern = CompiledPattern(compiled.pattern, compiled.all_parts)

        with ThreadPoolExecutor(max_workers=8) as executor:
            regexes = list(executor.map(lambda _: pattern.regex, range(32)))

        assert all(regex is regexes[0] for regex in regexes)


# ============================================================================
# PLAIN MAPPINGS
# ============================================================================


class TestParametersFromMapping:
    """Test ordering identifier → value mappings as key parameters."""

    def test_sorted_by_parameter_order(self) -> None:
        """Parameters come out in registry order, not mapping order."""
        values = {"Key": "Ok", "Type": "App", "Assembly": "Asm", "Culture": "en"}

        assert parameters_from_mapping(values) == [
            ("culture", "en"),
            ("assembly", "Asm"),
            ("type", "App"),
            ("key", "Ok"),
        ]

    def test_occurrence_suffix(self) -> None:
        """"_N" adds N to the sort weight and is dropped from the name."""
        values = {"Section_1": "B", "Key": "Ok", "Section": "A", "Section_n": "C"}

        assert parameters_from_mapping(values) == [
            ("section", "A"),
            ("section", "C"),
            ("section", "B"),
            ("key", "Ok"),
        ]

    def test_anysection_becomes_section(self) -> None:
        """anysection values are reported as section parameters."""
        assert parameters_from_mapping({"AnySection_1": "B", "anysection": "A"}) == [
            ("section", "A"),
            ("section", "B"),
        ]

    def test_missing_values_skipped(self) -> None:
        """None, empty values and empty identifiers are left out."""
        values = {"Culture": None, "Type": "", "": "x", "Key": "Ok"}

        assert parameters_from_mapping(values) == [("key", "Ok")]

    def test_unknown_names_sort_with_weight_zero(self) -> None:
        """Unregistered names weigh 0, between assembly and section."""
        values = {"Key": "Ok", "Custom": "X", "Assembly": "Asm"}

        assert parameters_from_mapping(values) == [
            ("assembly", "Asm"),
            ("custom", "X"),
            ("key", "Ok"),
        ]

    def test_match_result_uses_captures(self) -> None:
        """A MatchResult is converted in source order without copied values."""
        result = compile_pattern("{Section_0.}{Section}").match_text("A.")

        assert parameters_from_mapping(result) == [("section", "A")]

    def test_builds_key(self) -> None:
        """The pairs form a key equal to the one the values were taken from."""
        key = _key(("culture", "en"), ("type", "App"), ("key", "Ok"))
        values = dict(compile_pattern("[Key.]{Type.}{Culture}").match_key(key))

        assert KeyComparer().equals(KeyChain.from_pairs(parameters_from_mapping(values)), key)
