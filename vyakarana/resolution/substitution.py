"""
Substitution propagation (sthanivadbhava).

1.1.56 sthanivad adeso 'nalvidhau:
    A substitute is treated as its original, except for rules whose
    condition depends on the literal letter (al-vidhi).

        no pending substitution   -> unit unchanged
        next rule is al-vidhi     -> the substitute
        next rule is an-al-vidhi  -> the original

1.1.59 dvirvacane 'ci (narrower, reduplication contexts only):
    The original stands in only when ALL of the following hold:
        1. the original is a vowel
        2. the context is flagged as reduplication
        3. a vowel immediately follows
    Otherwise the substitute's own surface form is used.

A SubstitutionRecord is only ever consulted by the evaluation it was
handed to. Nothing here stores one.
"""

from __future__ import annotations

from typing import Optional, Union

from ..domain import EvaluationContext, RuleDefinition, SubstitutionRecord, Unit
from ..phonology.table import PHONEME_TABLE
from ..verdict import Verdict, create_derivation


OriginalLike = Union[SubstitutionRecord, Unit, str]


# =============================================================================
# DVIRVACANA NARROWING (1.1.59)
# =============================================================================

def _original_text(original: OriginalLike) -> str:
    if isinstance(original, SubstitutionRecord):
        return original.original.text
    if isinstance(original, Unit):
        return original.text
    return original if isinstance(original, str) else ""


def _is_single_vowel(text: str) -> bool:
    segmentation = PHONEME_TABLE.segment(text)
    return (
        segmentation.complete
        and len(segmentation.phonemes) == 1
        and segmentation.phonemes[0].is_vowel
    )


def _begins_with_vowel(text: Optional[str]) -> bool:
    if not text:
        return False
    segmentation = PHONEME_TABLE.segment(text)
    return segmentation.complete and segmentation.phonemes[0].is_vowel


def sthanivadbhava_for_dvirvacana_verdict(
    original: OriginalLike,
    reduplication: bool,
    following: Optional[str],
) -> Verdict:
    """Audit form of :func:`sthanivadbhava_for_dvirvacana`."""
    text = _original_text(original)
    subject = (text, str(following or ""))

    if not _is_single_vowel(text):
        return create_derivation(False, f"original '{text}' is not a vowel", "1.1.59", subject)
    if not reduplication:
        return create_derivation(False, "not a reduplication context", "1.1.59", subject)
    if not _begins_with_vowel(following):
        return create_derivation(
            False, f"following element '{following or ''}' does not begin with a vowel", "1.1.59", subject
        )
    return create_derivation(
        True,
        f"vowel original '{text}' before a vowel in reduplication",
        "1.1.59",
        subject,
    )


def sthanivadbhava_for_dvirvacana(
    original: OriginalLike,
    reduplication: bool,
    following: Optional[str],
) -> bool:
    """
    True only when the original is a vowel, the context is reduplication,
    and the following element begins with a vowel.

    ``original`` may be a SubstitutionRecord, a Unit, or plain text.
    """
    return sthanivadbhava_for_dvirvacana_verdict(original, reduplication, following).holds


# =============================================================================
# PROPAGATOR
# =============================================================================

class SubstitutionPropagator:
    """Decides which unit a rule's condition is evaluated against."""

    def effective_unit(
        self,
        next_rule_is_al_vidhi: bool,
        record: Optional[SubstitutionRecord],
        unit: Unit,
    ) -> Unit:
        """General sthanivadbhava (1.1.56)."""
        if record is None:
            return unit
        return record.substitute if next_rule_is_al_vidhi else record.original

    def for_context(
        self,
        context: EvaluationContext,
        next_rule_is_al_vidhi: bool,
    ) -> Unit:
        """
        Effective unit for the rule about to be evaluated.

        Inside a reduplication context the dvirvacana rule decides on
        its own; elsewhere the general rule applies.
        """
        record = context.substitution
        if record is None:
            return context.unit

        if context.reduplication:
            if sthanivadbhava_for_dvirvacana(record, True, context.following):
                return record.original
            return record.substitute

        return self.effective_unit(next_rule_is_al_vidhi, record, context.unit)

    def for_rule(self, context: EvaluationContext, rule: RuleDefinition) -> Unit:
        return self.for_context(context, rule.al_vidhi)


_PROPAGATOR = SubstitutionPropagator()


def effective_unit(context: EvaluationContext, next_rule_is_al_vidhi: bool = False) -> Unit:
    """Module-level entry point over an EvaluationContext."""
    return _PROPAGATOR.for_context(context, next_rule_is_al_vidhi)
