"""
Verdict Ledger — The canonical audit contract for the rule engine.

SYSTEM INVARIANT:
    No predicate outcome, scope decision, or rule match may leave the
    engine without an attached Verdict. A Verdict states whether something
    holds, how confident the engine is, why, and which principle decided.

Verdict Sources:
    TABLE   (Lookup)     — Read directly from the static phoneme table
    DERIVED (Derivation) — Computed from table features under a named sutra
    RULE    (Rule)       — Produced while evaluating a rule definition
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import settings


class VerdictSource(Enum):
    """Where a verdict comes from."""
    TABLE = "table"       # Static table lookup
    DERIVED = "derived"   # Derived from table features by a sutra
    RULE = "rule"         # Produced by rule evaluation


# Base confidence values per verdict source
BASE_CONFIDENCE = {
    VerdictSource.TABLE: settings.TABLE_CONFIDENCE,
    VerdictSource.DERIVED: settings.DERIVED_CONFIDENCE,
    VerdictSource.RULE: 1.0,
}


class VerdictValidationError(Exception):
    """Raised when a verdict fails validation checks."""
    pass


@dataclass(frozen=True)
class Verdict:
    """
    A single auditable decision.

    Invariants enforced:
    1. confidence must be in [0.0, 1.0]
    2. reason must be present
    3. DERIVED and RULE verdicts must name the principle (sutra) used

    A Verdict is truthy exactly when ``holds`` is True, so callers can
    write ``if is_savarna_verdict(a, b): ...``.
    """
    holds: bool
    confidence: float
    reason: str
    source: VerdictSource
    principle: Optional[str] = None
    subject: tuple[str, ...] = ()

    def __post_init__(self):
        """Enforce invariants at construction time."""
        if not isinstance(self.source, VerdictSource):
            raise VerdictValidationError(
                f"source must be VerdictSource, got {type(self.source)}"
            )
        if not (0.0 <= self.confidence <= 1.0):
            raise VerdictValidationError(
                f"confidence must be in [0.0, 1.0], got {self.confidence}"
            )
        if not self.reason:
            raise VerdictValidationError("reason is required")
        if self.source != VerdictSource.TABLE and not self.principle:
            raise VerdictValidationError(
                f"{self.source.value} verdict requires a principle"
            )

    def __bool__(self) -> bool:
        return self.holds

    def describe(self) -> str:
        """One-line rendering for audit trails."""
        mark = "+" if self.holds else "-"
        principle = f" [{self.principle}]" if self.principle else ""
        return f"{mark}{principle} {self.reason} ({self.confidence:.0%})"


def create_lookup(
    holds: bool,
    reason: str,
    subject: tuple[str, ...] = (),
    confidence: Optional[float] = None,
) -> Verdict:
    """Factory for a verdict read straight from the phoneme table."""
    if confidence is None:
        confidence = BASE_CONFIDENCE[VerdictSource.TABLE]

    return Verdict(
        holds=holds,
        confidence=confidence,
        reason=reason,
        source=VerdictSource.TABLE,
        subject=subject,
    )


def create_derivation(
    holds: bool,
    reason: str,
    principle: str,
    subject: tuple[str, ...] = (),
    confidence: Optional[float] = None,
) -> Verdict:
    """
    Factory for a verdict derived from phoneme features.

    ``principle`` is the sutra that licenses the derivation, e.g. "1.1.9".
    """
    if confidence is None:
        confidence = BASE_CONFIDENCE[VerdictSource.DERIVED]

    return Verdict(
        holds=holds,
        confidence=confidence,
        reason=reason,
        source=VerdictSource.DERIVED,
        principle=principle,
        subject=subject,
    )


def create_rule_verdict(
    holds: bool,
    reason: str,
    principle: str,
    subject: tuple[str, ...] = (),
    confidence: Optional[float] = None,
) -> Verdict:
    """Factory for a verdict produced while evaluating a rule."""
    if confidence is None:
        confidence = BASE_CONFIDENCE[VerdictSource.RULE]

    return Verdict(
        holds=holds,
        confidence=confidence,
        reason=reason,
        source=VerdictSource.RULE,
        principle=principle,
        subject=subject,
    )


def not_satisfied(reason: str, subject: tuple[str, ...] = ()) -> Verdict:
    """
    A zero-confidence negative verdict.

    Used when the input could not be classified at all (unknown or
    malformed phonemes): the predicate is simply not satisfied.
    """
    return Verdict(
        holds=False,
        confidence=0.0,
        reason=reason,
        source=VerdictSource.TABLE,
        subject=subject,
    )
