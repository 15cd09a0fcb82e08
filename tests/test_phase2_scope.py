"""
Tests for Phase 2: Rule Registry & Adhikara Scopes.

These tests verify:
1. Corpus integrity failures are fatal at load time
2. Rules are kept in numeric sutra order
3. Active adhikaras are returned broadest first, boundaries inclusive
4. Scope boundary crossings are classified correctly
"""

import pytest

from vyakarana.domain import (
    DuplicateRuleError,
    MalformedRuleError,
    Position,
    RuleDefinition,
    RuleKind,
    ScopeConfigurationError,
)
from vyakarana.rules.corpus import load_core_corpus
from vyakarana.rules.registry import RuleRegistry, load_rule_corpus
from vyakarana.rules.scope import ScopeBoundary, ScopeResolver, active_adhikaras


# =============================================================================
# TEST FIXTURES
# =============================================================================

def make_adhikara(position: str, start: str, end: str, name: str = "") -> dict:
    """Helper to create an adhikara record."""
    return {
        "position": position,
        "kind": "adhikara",
        "name": name,
        "governs": (start, end),
    }


@pytest.fixture(scope="module")
def core():
    return load_core_corpus()


def positions(rules) -> list[str]:
    return [str(r.position) for r in rules]


# =============================================================================
# REGISTRY TESTS
# =============================================================================

class TestRegistryLoading:
    """Test corpus loading and integrity."""

    def test_load_from_mappings(self):
        registry = load_rule_corpus([
            {"position": "1.3.84", "kind": "vidhi", "name": "ram after upa"},
            {"position": "1.3.80", "kind": "vidhi", "name": "kṣip"},
        ])

        assert len(registry) == 2
        assert "1.3.84" in registry
        assert registry.get("1.3.80").name == "kṣip"

    def test_numeric_order(self):
        registry = load_rule_corpus([
            {"position": "1.4.10", "kind": "samjna"},
            {"position": "1.4.9", "kind": "samjna"},
            {"position": "1.4.100", "kind": "samjna"},
        ])

        assert positions(registry) == ["1.4.9", "1.4.10", "1.4.100"]

    def test_identical_duplicate_collapsed(self):
        record = {"position": "1.3.84", "kind": "vidhi", "name": "ram after upa"}
        registry = load_rule_corpus([record, dict(record)])

        assert len(registry) == 1

    def test_distinct_duplicate_fails(self):
        with pytest.raises(DuplicateRuleError, match="two different rules"):
            load_rule_corpus([
                {"position": "1.3.84", "kind": "vidhi", "name": "ram after upa"},
                {"position": "1.3.84", "kind": "vidhi", "name": "something else"},
            ])

    def test_non_record_fails(self):
        with pytest.raises(MalformedRuleError, match="must be RuleDefinition or mapping"):
            load_rule_corpus([5])

    def test_malformed_record_fails(self):
        with pytest.raises(MalformedRuleError):
            load_rule_corpus([{"position": "1.x.3", "kind": "vidhi"}])

    def test_definitions_accepted(self):
        rule = RuleDefinition(Position(1, 1, 1), RuleKind.SAMJNA, name="vṛddhi")
        registry = load_rule_corpus([rule])

        assert rule in registry
        assert registry.require("1.1.1") is rule

    def test_require_unknown_raises(self, core):
        with pytest.raises(KeyError):
            core.require("7.1.1")

    def test_contains_tolerates_garbage(self, core):
        assert "not a position" not in core
        assert RuleDefinition(Position(7, 1, 1), RuleKind.VIDHI) not in core

    def test_same_position_different_rule_not_contained(self, core):
        impostor = RuleDefinition(Position(1, 1, 1), RuleKind.SAMJNA, name="impostor")
        assert impostor not in core


class TestCoreCorpus:
    """Test the in-package corpus."""

    def test_loads(self, core):
        assert len(core) > 40

    def test_every_adhikara_registered_in_scope(self, core):
        assert sorted(positions(core.adhikaras())) == sorted(
            positions(core.rules_of_kind(RuleKind.ADHIKARA))
        )

    def test_nisedha_targets_registered(self, core):
        for rule in core.rules_of_kind(RuleKind.NISEDHA):
            for target in rule.blocks:
                assert target in core

    def test_savarna_prohibition(self, core):
        assert core.get("1.1.10").blocks == (Position(1, 1, 9),)


# =============================================================================
# SCOPE TESTS
# =============================================================================

class TestActiveAdhikaras:
    """Test scope lookup against the core corpus."""

    @pytest.mark.parametrize("position, expected", [
        ("1.3.42", []),
        ("1.4.1", ["1.4.1"]),
        ("1.4.23", ["1.4.1", "1.4.23"]),
        ("1.4.24", ["1.4.1", "1.4.23"]),
        ("1.4.55", ["1.4.1", "1.4.23"]),
        ("1.4.56", ["1.4.1", "1.4.56"]),
        ("1.4.90", ["1.4.1", "1.4.56", "1.4.83"]),
        ("1.4.99", ["1.4.1"]),
        ("2.1.10", ["1.4.1", "2.1.3", "2.1.5"]),
        ("2.2.38", ["1.4.1", "2.1.3"]),
        ("3.2.1", ["3.1.1", "3.1.91"]),
        ("8.3.1", ["8.2.1"]),
    ])
    def test_active_adhikaras(self, core, position, expected):
        assert positions(active_adhikaras(position, core)) == expected

    def test_innermost(self, core):
        assert core.scope.innermost("1.4.90").position == Position(1, 4, 83)
        assert core.scope.innermost("1.3.1") is None

    def test_scope_chain(self, core):
        assert core.scope_chain("1.4.24") == (Position(1, 4, 1), Position(1, 4, 23))

    def test_governs(self, core):
        assert core.scope.governs("1.4.23", "1.4.55")
        assert not core.scope.governs("1.4.23", "1.4.56")
        assert not core.scope.governs("1.1.1", "1.1.2")

    def test_malformed_position_raises(self, core):
        with pytest.raises(ValueError):
            core.active_adhikaras("1.4")


class TestScopeConfiguration:
    """Test nesting validation."""

    def test_partial_overlap_fails_at_load(self):
        with pytest.raises(ScopeConfigurationError, match="partially overlaps"):
            load_rule_corpus([
                make_adhikara("1.1.1", "1.1.1", "1.1.20"),
                make_adhikara("1.1.10", "1.1.10", "1.1.30"),
            ])

    def test_nested_and_disjoint_accepted(self):
        registry = load_rule_corpus([
            make_adhikara("1.1.1", "1.1.1", "1.1.50"),
            make_adhikara("1.1.10", "1.1.10", "1.1.20"),
            make_adhikara("1.1.21", "1.1.21", "1.1.50"),
            make_adhikara("2.1.1", "2.1.1", "2.1.9"),
        ])

        assert positions(registry.active_adhikaras("1.1.30")) == ["1.1.1", "1.1.21"]
        assert positions(registry.active_adhikaras("2.1.5")) == ["2.1.1"]

    def test_shared_start_broadest_first(self):
        resolver = ScopeResolver(
            RuleDefinition.from_mapping(record) for record in (
                make_adhikara("1.1.2", "1.1.2", "1.1.5"),
                make_adhikara("1.1.1", "1.1.2", "1.1.40"),
            )
        )

        assert positions(resolver.active_adhikaras("1.1.3")) == ["1.1.1", "1.1.2"]

    def test_empty_registry_has_no_scopes(self):
        registry = RuleRegistry([])

        assert registry.active_adhikaras("1.1.1") == []
        assert registry.adhikaras() == ()


class TestBoundaryCrossing:
    """Test movement across scope boundaries."""

    def test_entry(self, core):
        assert core.scope.boundary_crossing("1.4.22", "1.4.24", "1.4.23") == ScopeBoundary.ENTRY

    def test_exit(self, core):
        assert core.scope.boundary_crossing("1.4.55", "1.4.56", "1.4.23") == ScopeBoundary.EXIT

    def test_inside(self, core):
        assert core.scope.boundary_crossing("1.4.24", "1.4.54", "1.4.23") == ScopeBoundary.NONE

    def test_unknown_adhikara(self, core):
        assert core.scope.boundary_crossing("1.1.1", "1.4.24", "1.1.1") == ScopeBoundary.NONE
