"""Tests for keys.chain and keys.provider: key chains and their decomposition.

Validates persistence (appending never mutates), classification at
construction, segment iteration order, and the decomposition providers.
"""

from __future__ import annotations

import pytest

from lexkeys import (
    DEFAULT_PARAMETER_INFOS,
    Classification,
    DecompositionProvider,
    KeyChain,
    KeyChainProvider,
    ParameterInfo,
    SequenceKeyProvider,
)

# ============================================================================
# CONSTRUCTION
# ============================================================================


class TestKeyChainConstruction:
    """Test building key chains."""

    def test_root(self) -> None:
        """A root has no parameter and no previous node."""
        root = KeyChain.root()

        assert root.is_root
        assert root.previous is None
        assert root.classification is Classification.UNCLASSIFIED
        assert len(root) == 0
        assert root

    def test_append_does_not_mutate(self) -> None:
        """Appending returns a new head and shares the tail."""
        base = KeyChain.root().append("type", "App")

        first = base.append("key", "A")
        second = base.append("key", "B")

        assert first.previous is base
        assert second.previous is base
        assert base.parameters() == (("type", "App"),)

    def test_classification_from_registry(self) -> None:
        """Segments are classified when they are created."""
        key = (
            KeyChain.root()
            .append("Culture", "en")
            .append("type", "App")
            .append("stringformat", "x")
            .append("custom", "c")
        )

        assert [s.classification for s in key.segments_from_root()] == [
            Classification.NON_CANONICAL,
            Classification.CANONICAL,
            Classification.UNCLASSIFIED,
            Classification.CANONICAL,
        ]

    def test_explicit_classification(self) -> None:
        """An explicit classification overrides the registry."""
        key = KeyChain.root().append("culture", "en", Classification.CANONICAL)

        assert key.classification is Classification.CANONICAL

    def test_custom_registry(self) -> None:
        """A different registry classifies differently."""
        infos = DEFAULT_PARAMETER_INFOS.with_info(
            ParameterInfo("tenant", Classification.NON_CANONICAL)
        )

        key = KeyChain.root().append("tenant", "t1", infos=infos)

        assert key.classification is Classification.NON_CANONICAL

    def test_from_pairs(self) -> None:
        """from_pairs appends root→tail."""
        root = KeyChain.root().append("assembly", "Asm")

        key = KeyChain.from_pairs([("type", "App"), ("key", "Ok")], root=root)

        assert key.parameters() == (("assembly", "Asm"), ("type", "App"), ("key", "Ok"))

    def test_root_with_classification_rejected(self) -> None:
        """A node without name cannot take part in comparison."""
        with pytest.raises(ValueError, match="UNCLASSIFIED"):
            KeyChain(None, None, None, Classification.CANONICAL)

    def test_previous_must_be_chain(self) -> None:
        """previous only accepts key chains."""
        with pytest.raises(TypeError, match="previous must be a KeyChain"):
            KeyChain("key", "Ok", "root")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        """Nodes are immutable."""
        key = KeyChain.root().append("key", "Ok")

        with pytest.raises(AttributeError):
            key.parameter_value = "Other"  # type: ignore[misc]


# ============================================================================
# ITERATION AND LOOKUP
# ============================================================================


class TestKeyChainIteration:
    """Test segment iteration and lookup."""

    def test_segments_tail_to_root(self) -> None:
        """segments() starts at the head."""
        key = KeyChain.root().append("type", "App").append("key", "Ok")

        assert [s.name for s in key.segments()] == ["key", "type"]
        assert [s.name for s in key.segments_from_root()] == ["type", "key"]

    def test_nodes_include_roots(self) -> None:
        """nodes() yields structural nodes; segments() skips them."""
        inner_root = KeyChain(None, None, KeyChain.root())
        key = inner_root.append("key", "Ok")

        assert len(list(key.nodes())) == 3
        assert len(list(key.segments())) == 1

    def test_get_tail_most(self) -> None:
        """get() returns the tail-most value, case-insensitively."""
        key = KeyChain.root().append("section", "A").append("Section", "B")

        assert key.get("SECTION") == "B"
        assert key.get("culture") is None
        assert key.get("culture", "") == ""

    def test_str_and_repr(self) -> None:
        """str() is the key text form."""
        key = KeyChain.root().append("culture", "en").append("key", "a:b")

        assert str(key) == "culture:en:key:a\\:b"
        assert repr(key) == "KeyChain('culture:en:key:a\\\\:b')"

    def test_identity_equality(self) -> None:
        """Chains compare by identity; equivalence belongs to KeyComparer."""
        a = KeyChain.root().append("key", "Ok")
        b = KeyChain.root().append("key", "Ok")

        assert a != b
        assert a == a  # noqa: PLR0124


# ============================================================================
# PROVIDERS
# ============================================================================


class TestProviders:
    """Test decomposition providers."""

    def test_key_chain_provider(self) -> None:
        """KeyChainProvider exposes chain segments."""
        provider = KeyChainProvider()
        key = KeyChain.root().append("type", "App").append("key", "Ok")

        assert isinstance(provider, DecompositionProvider)
        assert list(provider.segments(key)) == list(key.segments())
        assert provider.previous(key) is key.previous

    def test_sequence_provider(self) -> None:
        """SequenceKeyProvider classifies pairs through the registry."""
        provider = SequenceKeyProvider()
        key = [("culture", "en"), ("key", "Ok")]

        segments = list(provider.segments(key))

        assert [(s.name, s.classification) for s in segments] == [
            ("key", Classification.CANONICAL),
            ("culture", Classification.NON_CANONICAL),
        ]
        assert provider.previous(key) == [("culture", "en")]
        assert provider.previous([]) is None
