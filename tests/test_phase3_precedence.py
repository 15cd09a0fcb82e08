"""
Tests for Phase 3: Precedence Resolution.

These tests verify:
1. The positionally later rule wins (vipratisedha, 1.4.2)
2. A matched prohibition blocks its target regardless of position
3. Prohibitions only reach targets within their own scope
4. Optional (vibhasha) outcomes are non-exclusive
5. Two distinct rules at one position are a fatal tie
"""

import pytest

from vyakarana.config import settings
from vyakarana.domain import (
    Outcome,
    OutcomeKind,
    Position,
    PrecedenceTieError,
    RuleDefinition,
    RuleKind,
    ScopeRange,
)
from vyakarana.resolution.precedence import (
    Applied,
    Blocked,
    PrecedenceResolver,
    resolve_precedence,
)
from vyakarana.rules.corpus import load_core_corpus
from vyakarana.rules.registry import load_rule_corpus


# =============================================================================
# TEST FIXTURES
# =============================================================================

def make_rule(
    position: str,
    kind: RuleKind = RuleKind.VIDHI,
    name: str = "",
    optional: bool = False,
    blocks: tuple[str, ...] = (),
) -> RuleDefinition:
    """Helper to create a RuleDefinition for testing."""
    return RuleDefinition(
        position=Position.parse(position),
        kind=kind,
        name=name or f"rule {position}",
        outcome=Outcome(OutcomeKind.VOICE, "parasmaipada"),
        optional=optional,
        blocks=tuple(Position.parse(b) for b in blocks),
    )


def make_nisedha(position: str, *blocks: str) -> RuleDefinition:
    return make_rule(position, RuleKind.NISEDHA, blocks=blocks)


# =============================================================================
# VIPRATISEDHA TESTS
# =============================================================================

class TestLaterRuleWins:
    """Test positional precedence."""

    def test_no_candidates(self):
        assert resolve_precedence([]) is None

    def test_single_rule(self):
        rule = make_rule("1.3.80")
        result = resolve_precedence([rule])

        assert isinstance(result, Applied)
        assert result.rule is rule
        assert result.overridden == ()

    def test_later_rule_wins(self):
        result = resolve_precedence([make_rule("1.3.80"), make_rule("1.3.84")])

        assert isinstance(result, Applied)
        assert result.position == Position(1, 3, 84)
        assert result.exclusive
        assert [str(r.position) for r in result.overridden] == ["1.3.80"]

    def test_input_order_irrelevant(self):
        result = resolve_precedence([make_rule("1.3.84"), make_rule("1.3.80")])
        assert result.position == Position(1, 3, 84)

    def test_numeric_not_lexical(self):
        result = resolve_precedence([make_rule("1.4.100"), make_rule("1.4.99")])
        assert result.position == Position(1, 4, 100)

    def test_verdict_names_vipratisedha(self):
        verdict = resolve_precedence([make_rule("1.3.80"), make_rule("1.3.84")]).to_verdict()

        assert verdict.holds
        assert verdict.principle == "1.4.2"
        assert "1.3.80" in verdict.reason

    def test_meta_rules_dropped(self):
        adhikara = RuleDefinition(
            Position(1, 4, 1), RuleKind.ADHIKARA, governs=ScopeRange.parse("1.4.1", "2.2.38")
        )
        paribhasha = RuleDefinition(Position(1, 4, 2), RuleKind.PARIBHASHA)

        assert resolve_precedence([adhikara, paribhasha]) is None


# =============================================================================
# NISEDHA TESTS
# =============================================================================

class TestNisedha:
    """Test prohibition short-circuiting."""

    def test_prohibition_blocks_target(self):
        target = make_rule("1.3.57")
        prohibition = make_nisedha("1.3.58", "1.3.57")

        result = resolve_precedence([target, prohibition])

        assert isinstance(result, Blocked)
        assert result.prohibiting_rule is prohibition
        assert result.blocked == (target,)
        assert result.outcome is None

    def test_earlier_prohibition_still_blocks(self):
        """Position does not matter for a prohibition."""
        target = make_rule("1.3.60")
        prohibition = make_nisedha("1.3.50", "1.3.60")

        result = resolve_precedence([prohibition, target])

        assert isinstance(result, Blocked)
        assert result.blocked == (target,)

    def test_untargeted_prohibition_blocks_everything(self):
        result = resolve_precedence([make_nisedha("1.3.50"), make_rule("1.3.57")])

        assert isinstance(result, Blocked)
        assert [str(r.position) for r in result.blocked] == ["1.3.57"]

    def test_prohibition_of_other_rule_does_not_block(self):
        result = resolve_precedence([make_nisedha("1.3.58", "1.3.57"), make_rule("1.3.60")])

        assert isinstance(result, Applied)
        assert result.position == Position(1, 3, 60)

    def test_lone_prohibition(self):
        prohibition = make_nisedha("1.1.10", "1.1.9")
        result = resolve_precedence([prohibition])

        assert isinstance(result, Blocked)
        assert result.blocked == ()
        assert not result.to_verdict()

    def test_latest_prohibition_considered_first(self):
        early = make_nisedha("1.3.50", "1.3.57")
        late = make_nisedha("1.3.58", "1.3.57")

        result = resolve_precedence([early, late, make_rule("1.3.57")])
        assert result.prohibiting_rule is late


class TestScopedNisedha:
    """Test that a prohibition only reaches rules within its own scope."""

    @pytest.fixture
    def registry(self):
        return load_rule_corpus([
            {"position": "1.4.1", "kind": "adhikara", "governs": ("1.4.1", "2.2.38")},
            {"position": "1.4.23", "kind": "adhikara", "governs": ("1.4.23", "1.4.55")},
        ])

    def test_narrower_prohibition_cannot_reach_broader_rule(self, registry):
        result = resolve_precedence(
            [make_nisedha("1.4.30"), make_rule("1.4.60")],
            registry,
        )

        assert isinstance(result, Applied)
        assert result.position == Position(1, 4, 60)

    def test_broader_prohibition_reaches_nested_rule(self, registry):
        result = resolve_precedence(
            [make_nisedha("1.4.60"), make_rule("1.4.30")],
            registry,
        )

        assert isinstance(result, Blocked)
        assert result.position == Position(1, 4, 60)

    def test_same_scope(self, registry):
        resolver = PrecedenceResolver(registry.scope)
        result = resolver.resolve([make_nisedha("1.4.31", "1.4.30"), make_rule("1.4.30")])

        assert isinstance(result, Blocked)


# =============================================================================
# VIBHASHA TESTS
# =============================================================================

class TestOptionalRules:
    """Test optional outcomes."""

    def test_mandatory_beats_later_optional(self):
        result = resolve_precedence([
            make_rule("1.3.12"),
            make_rule("1.3.43", optional=True),
        ])

        assert result.position == Position(1, 3, 12)
        assert result.exclusive

    def test_only_optional_is_non_exclusive(self):
        first = make_rule("1.3.43", optional=True)
        second = make_rule("1.3.44", optional=True)

        result = resolve_precedence([second, first])

        assert isinstance(result, Applied)
        assert not result.exclusive
        assert result.rule is second
        assert result.alternatives == (first, second)
        assert result.confidence == settings.OPTIONAL_OUTCOME_CONFIDENCE

    def test_optional_verdict_is_marked(self):
        verdict = resolve_precedence([make_rule("1.3.43", optional=True)]).to_verdict()

        assert verdict.holds
        assert "optional" in verdict.reason


# =============================================================================
# INTEGRITY TESTS
# =============================================================================

class TestPrecedenceTie:
    """Test that ties are fatal."""

    def test_distinct_rules_same_position(self):
        with pytest.raises(PrecedenceTieError, match="share position"):
            resolve_precedence([
                make_rule("1.3.80", name="first"),
                make_rule("1.3.80", name="second"),
            ])

    def test_same_rule_twice_collapsed(self):
        rule = make_rule("1.3.80")
        result = resolve_precedence([rule, rule])

        assert result.rule is rule
        assert result.overridden == ()


# =============================================================================
# CORE CORPUS TESTS
# =============================================================================

class TestCorePrecedence:
    """Test precedence over the in-package rules."""

    @pytest.fixture(scope="class")
    def core(self):
        return load_core_corpus()

    def test_ram_after_upa_beats_ksip(self, core):
        result = resolve_precedence([core.require("1.3.80"), core.require("1.3.84")], core)
        assert result.rule.name == "ram after upa"

    def test_anu_jna_blocks_desiderative(self, core):
        result = resolve_precedence([core.require("1.3.57"), core.require("1.3.58")], core)

        assert isinstance(result, Blocked)
        assert result.blocked == (core.require("1.3.57"),)

    def test_yan_and_dirgha(self, core):
        result = resolve_precedence([core.require("6.1.77"), core.require("6.1.101")], core)
        assert result.position == Position(6, 1, 101)
