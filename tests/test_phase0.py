"""
Tests for Phase 0: Verdict Ledger, Domain Objects, Input Gating.

These tests verify:
1. Verdict invariants are enforced at construction
2. Positions compare numerically and reject malformed addresses
3. Rule records are validated when loaded
4. Evaluation contexts are immutable
5. Bad units come back as Rejections, never as exceptions
"""

import pytest

from vyakarana.verdict import (
    BASE_CONFIDENCE,
    Verdict,
    VerdictSource,
    VerdictValidationError,
    create_derivation,
    create_lookup,
    create_rule_verdict,
    not_satisfied,
)
from vyakarana.domain import (
    CorpusIntegrityError,
    ErrorCode,
    EvaluationContext,
    InvalidInputError,
    MalformedRuleError,
    Outcome,
    OutcomeKind,
    Position,
    Rejection,
    RuleDefinition,
    RuleKind,
    ScopeConfigurationError,
    ScopeRange,
    SubstitutionRecord,
    Unit,
    UnitKind,
    UnknownPhonemeError,
)
from vyakarana.validation import gate_unit, normalize_text, validate_text, validate_unit


# =============================================================================
# VERDICT INVARIANT TESTS
# =============================================================================

class TestVerdictInvariants:
    """Test that Verdict invariants are enforced."""

    def test_confidence_out_of_range_fails(self):
        """Confidence above 1.0 should fail."""
        with pytest.raises(VerdictValidationError, match="confidence must be in"):
            Verdict(
                holds=True,
                confidence=1.5,
                reason="a is short",
                source=VerdictSource.TABLE,
            )

    def test_negative_confidence_fails(self):
        with pytest.raises(VerdictValidationError, match="confidence must be in"):
            Verdict(
                holds=True,
                confidence=-0.1,
                reason="a is short",
                source=VerdictSource.TABLE,
            )

    def test_missing_reason_fails(self):
        """A verdict without a reason cannot be audited."""
        with pytest.raises(VerdictValidationError, match="reason is required"):
            Verdict(holds=True, confidence=1.0, reason="", source=VerdictSource.TABLE)

    def test_derived_verdict_requires_principle(self):
        """Derived verdicts must name the sutra that licenses them."""
        with pytest.raises(VerdictValidationError, match="requires a principle"):
            Verdict(holds=True, confidence=1.0, reason="i and ī", source=VerdictSource.DERIVED)

    def test_rule_verdict_requires_principle(self):
        with pytest.raises(VerdictValidationError, match="requires a principle"):
            Verdict(holds=False, confidence=1.0, reason="no match", source=VerdictSource.RULE)

    def test_lookup_needs_no_principle(self):
        verdict = create_lookup(True, "'a' is a")

        assert verdict.principle is None
        assert verdict.confidence == BASE_CONFIDENCE[VerdictSource.TABLE]

    def test_verdict_truthiness_follows_holds(self):
        assert create_derivation(True, "same place", "1.1.9")
        assert not create_derivation(False, "place differs", "1.1.9")

    def test_not_satisfied_has_zero_confidence(self):
        verdict = not_satisfied("'x' is not a registered phoneme", ("x",))

        assert verdict.holds is False
        assert verdict.confidence == 0.0
        assert verdict.subject == ("x",)

    def test_describe_names_principle(self):
        verdict = create_rule_verdict(True, "1.3.84 applies", "1.3.84")

        line = verdict.describe()
        assert line.startswith("+")
        assert "[1.3.84]" in line
        assert "100%" in line


# =============================================================================
# POSITION & SCOPE RANGE TESTS
# =============================================================================

class TestPosition:
    """Test sutra addressing."""

    def test_parse_and_render(self):
        position = Position.parse("1.4.24")

        assert position == Position(1, 4, 24)
        assert str(position) == "1.4.24"

    def test_numeric_ordering(self):
        """1.4.9 precedes 1.4.10 although "1.4.10" < "1.4.9" as strings."""
        assert Position.parse("1.4.9") < Position.parse("1.4.10")
        assert Position.parse("1.4.100") > Position.parse("1.4.99")
        assert Position.parse("2.1.1") > Position.parse("1.4.110")

    def test_parse_passes_positions_through(self):
        position = Position(3, 1, 1)
        assert Position.parse(position) is position

    @pytest.mark.parametrize("value", ["1.4", "1.4.x", "", "one.two.three", "1..4"])
    def test_malformed_position_fails(self, value):
        with pytest.raises(ValueError):
            Position.parse(value)

    def test_adhyaya_out_of_range_fails(self):
        with pytest.raises(ValueError, match="adhyaya"):
            Position.parse("9.1.1")

    def test_pada_out_of_range_fails(self):
        with pytest.raises(ValueError, match="pada"):
            Position.parse("1.5.1")


class TestScopeRange:
    """Test adhikara ranges."""

    def test_boundaries_are_inclusive(self):
        scope = ScopeRange.parse("1.4.23", "1.4.55")

        assert scope.contains("1.4.23")
        assert scope.contains("1.4.55")
        assert scope.contains("1.4.30")
        assert not scope.contains("1.4.22")
        assert not scope.contains("1.4.56")

    def test_end_before_start_fails(self):
        with pytest.raises(ValueError, match="before it starts"):
            ScopeRange.parse("1.4.55", "1.4.23")

    def test_nesting_is_not_partial_overlap(self):
        outer = ScopeRange.parse("1.4.1", "2.2.38")
        inner = ScopeRange.parse("1.4.23", "1.4.55")

        assert outer.encloses(inner)
        assert not outer.overlaps_partially(inner)

    def test_partial_overlap_detected(self):
        first = ScopeRange.parse("1.1.1", "1.1.20")
        second = ScopeRange.parse("1.1.10", "1.1.30")

        assert first.overlaps_partially(second)
        assert second.overlaps_partially(first)

    def test_disjoint_ranges_do_not_overlap(self):
        first = ScopeRange.parse("1.4.23", "1.4.55")
        second = ScopeRange.parse("1.4.56", "1.4.97")

        assert not first.overlaps_partially(second)


# =============================================================================
# RULE DEFINITION TESTS
# =============================================================================

class TestRuleDefinition:
    """Test that rule records are validated."""

    def test_from_mapping(self):
        rule = RuleDefinition.from_mapping({
            "position": "1.3.84",
            "kind": "vidhi",
            "name": "ram after upa",
            "outcome": ("voice", "parasmaipada"),
        })

        assert rule.position == Position(1, 3, 84)
        assert rule.kind == RuleKind.VIDHI
        assert rule.outcome == Outcome(OutcomeKind.VOICE, "parasmaipada")
        assert rule.label == "1.3.84 ram after upa"

    def test_outcome_and_governs_as_mappings(self):
        rule = RuleDefinition.from_mapping({
            "position": "1.4.23",
            "kind": "adhikara",
            "governs": {"start": "1.4.23", "end": "1.4.55"},
        })

        assert rule.governs == ScopeRange.parse("1.4.23", "1.4.55")

    def test_computed_outcome_named_by_function(self):
        def drop_final(unit, context):
            return unit.text[:-1]

        assert str(Outcome(OutcomeKind.SUBSTITUTION, drop_final)) == "substitution: drop_final"
        assert str(Outcome(OutcomeKind.VOICE, "parasmaipada")) == "voice: parasmaipada"

    def test_missing_kind_fails(self):
        with pytest.raises(MalformedRuleError, match="missing field"):
            RuleDefinition.from_mapping({"position": "1.3.84"})

    def test_unknown_kind_fails(self):
        with pytest.raises(MalformedRuleError):
            RuleDefinition.from_mapping({"position": "1.3.84", "kind": "sutra"})

    def test_non_iterable_governs_fails(self):
        with pytest.raises(MalformedRuleError) as exc_info:
            RuleDefinition.from_mapping({"position": "1.4.1", "kind": "adhikara", "governs": 5})

        assert exc_info.value.code == ErrorCode.MALFORMED_RULE

    def test_non_iterable_outcome_fails(self):
        with pytest.raises(MalformedRuleError):
            RuleDefinition.from_mapping({"position": "1.3.84", "kind": "vidhi", "outcome": 7})

    def test_malformed_position_fails(self):
        with pytest.raises(MalformedRuleError) as exc_info:
            RuleDefinition.from_mapping({"position": "1.x.3", "kind": "vidhi"})

        assert exc_info.value.code == ErrorCode.MALFORMED_RULE

    def test_adhikara_without_range_fails(self):
        with pytest.raises(MalformedRuleError, match="must declare the range"):
            RuleDefinition(position=Position(1, 4, 1), kind=RuleKind.ADHIKARA)

    def test_range_starting_before_rule_fails(self):
        with pytest.raises(MalformedRuleError, match="starts before"):
            RuleDefinition(
                position=Position(1, 4, 23),
                kind=RuleKind.ADHIKARA,
                governs=ScopeRange.parse("1.4.1", "1.4.55"),
            )

    def test_blocks_only_on_nisedha(self):
        with pytest.raises(MalformedRuleError, match="only nisedha"):
            RuleDefinition(
                position=Position(1, 3, 57),
                kind=RuleKind.VIDHI,
                blocks=(Position(1, 3, 56),),
            )

    def test_meta_rules_are_not_operative(self):
        assert not RuleKind.ADHIKARA.is_operative
        assert not RuleKind.PARIBHASHA.is_operative
        assert RuleKind.NISEDHA.is_operative
        assert RuleKind.VIDHI.is_operative

    def test_condition_is_ignored_for_equality(self):
        first = RuleDefinition(Position(1, 1, 1), RuleKind.SAMJNA, condition=lambda u, c: True)
        second = RuleDefinition(Position(1, 1, 1), RuleKind.SAMJNA, condition=lambda u, c: False)

        assert first == second


# =============================================================================
# ERROR & REJECTION TESTS
# =============================================================================

class TestErrors:
    """Test the error taxonomy."""

    def test_message_carries_code(self):
        error = InvalidInputError("unit text is empty", "''")

        assert str(error) == "[invalid_input] unit text is empty"
        assert error.subject == "''"

    def test_corpus_errors_share_a_base(self):
        error = ScopeConfigurationError("overlap", "1.1.10")

        assert isinstance(error, CorpusIntegrityError)
        assert error.code == ErrorCode.SCOPE_CONFIGURATION

    def test_rejection_from_error(self):
        rejection = Rejection.from_error(UnknownPhonemeError("'x' is not registered", "x"))

        assert rejection.code == ErrorCode.UNKNOWN_PHONEME
        assert rejection.subject == "x"
        assert rejection.confidence == 0.0


# =============================================================================
# EVALUATION CONTEXT TESTS
# =============================================================================

class TestEvaluationContext:
    """Test the per-query input."""

    def test_annotations_are_read_only(self):
        context = EvaluationContext.for_text("kṛ", annotations={"root": "kṛ"})

        with pytest.raises(TypeError):
            context.annotations["root"] = "bhū"

    def test_caller_mapping_is_copied(self):
        annotations = {"root": "kṛ"}
        context = EvaluationContext.for_text("kṛ", annotations=annotations)

        annotations["root"] = "bhū"

        assert context.annotation("root") == "kṛ"

    def test_annotation_default(self):
        context = EvaluationContext.for_text("kṛ")
        assert context.annotation("prefix", "none") == "none"

    def test_with_cursor_returns_new_context(self):
        context = EvaluationContext.for_text("kṛ")
        moved = context.with_cursor("1.3.79")

        assert context.cursor is None
        assert moved.cursor == Position(1, 3, 79)

    def test_with_unit_keeps_kind(self):
        context = EvaluationContext.for_text("i", kind=UnitKind.PHONEME)
        replaced = context.with_unit("y")

        assert replaced.unit == Unit("y", UnitKind.PHONEME)

    def test_required_scopes_are_parsed(self):
        context = EvaluationContext.for_text("grāma", required_scopes=("1.4.23",))
        assert context.required_scopes == (Position(1, 4, 23),)

    def test_substitution_record_of(self):
        record = SubstitutionRecord.of("i", "y", "6.1.77")

        assert record.original == Unit("i", UnitKind.PHONEME)
        assert record.substitute == Unit("y", UnitKind.PHONEME)
        assert record.produced_by == Position(6, 1, 77)


# =============================================================================
# GATING TESTS
# =============================================================================

class TestGating:
    """Test input gating."""

    def test_valid_word_accepted(self):
        result = gate_unit(Unit("rāma"))

        assert result.accepted
        assert result.rejection is None

    def test_empty_unit_rejected(self):
        result = gate_unit(Unit(""))

        assert not result.accepted
        assert result.rejection.code == ErrorCode.INVALID_INPUT

    def test_whitespace_unit_rejected(self):
        result = gate_unit(Unit("   "))
        assert result.rejection.code == ErrorCode.INVALID_INPUT

    def test_non_unit_rejected(self):
        result = gate_unit("rāma")

        assert not result.accepted
        assert result.rejection.code == ErrorCode.INVALID_INPUT

    def test_unknown_phoneme_rejected(self):
        result = gate_unit(Unit("x", UnitKind.PHONEME))
        assert result.rejection.code == ErrorCode.UNKNOWN_PHONEME

    def test_devanagari_phoneme_accepted(self):
        assert gate_unit(Unit("इ", UnitKind.PHONEME)).accepted

    def test_compound_needs_two_members(self):
        compound = Unit("rājapuruṣa", UnitKind.COMPOUND, members=(Unit("rāja"),))

        result = gate_unit(compound)
        assert result.rejection.code == ErrorCode.INVALID_INPUT

    def test_compound_with_empty_member_rejected(self):
        compound = Unit("rājapuruṣa", UnitKind.COMPOUND, members=(Unit("rāja"), Unit("")))
        assert not gate_unit(compound).accepted

    def test_compound_accepted(self):
        compound = Unit("rājapuruṣa", UnitKind.COMPOUND, members=(Unit("rāja"), Unit("puruṣa")))
        assert gate_unit(compound).accepted

    def test_validate_unit_raises(self):
        with pytest.raises(InvalidInputError):
            validate_unit(Unit(""))

    def test_validate_text_normalizes(self):
        # "a" followed by a combining macron composes to "ā"
        assert validate_text(" ā ") == "ā"
        assert normalize_text("  rāma ") == "rāma"

    def test_validate_text_rejects_non_string(self):
        with pytest.raises(InvalidInputError, match="must be a string"):
            validate_text(42)
