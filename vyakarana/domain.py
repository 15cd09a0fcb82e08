"""
Core Domain Objects for the Vyakarana rule engine.

Domain Objects:
    Position            — A dotted sutra address (adhyaya.pada.sutra)
    ScopeRange          — The contiguous range an adhikara governs
    RuleDefinition      — One loaded sutra with its scope metadata
    Unit                — The linguistic input (phoneme, word, compound...)
    SubstitutionRecord  — A substitute/original pair awaiting the next rule
    EvaluationContext   — The immutable per-query input to the engine

All objects are frozen. Nothing is shared or mutated between queries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union


# =============================================================================
# ERROR SYSTEM
# =============================================================================

class ErrorCode(Enum):
    """
    Error taxonomy.

    Per-query (returned as Rejection, never raised to batch callers):
        INVALID_INPUT, UNKNOWN_PHONEME
    Corpus integrity (fatal, raised):
        SCOPE_CONFIGURATION, PRECEDENCE_TIE, DUPLICATE_RULE, MALFORMED_RULE
    """
    INVALID_INPUT = "invalid_input"
    UNKNOWN_PHONEME = "unknown_phoneme"
    SCOPE_CONFIGURATION = "scope_configuration"
    PRECEDENCE_TIE = "precedence_tie"
    DUPLICATE_RULE = "duplicate_rule"
    MALFORMED_RULE = "malformed_rule"


class VyakaranaError(Exception):
    """Base error. Carries an ErrorCode and the offending subject."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, reason: str, subject: Optional[str] = None):
        self.reason = reason
        self.subject = subject
        super().__init__(f"[{self.code.value}] {reason}")


class InvalidInputError(VyakaranaError):
    """Empty or malformed unit."""
    code = ErrorCode.INVALID_INPUT


class UnknownPhonemeError(VyakaranaError):
    """Character absent from the phoneme table."""
    code = ErrorCode.UNKNOWN_PHONEME


class CorpusIntegrityError(VyakaranaError):
    """A rule corpus violates a structural invariant. Always fatal."""
    code = ErrorCode.MALFORMED_RULE


class ScopeConfigurationError(CorpusIntegrityError):
    """Adhikara ranges overlap without nesting."""
    code = ErrorCode.SCOPE_CONFIGURATION


class PrecedenceTieError(CorpusIntegrityError):
    """Two distinct matched rules share one position."""
    code = ErrorCode.PRECEDENCE_TIE


class DuplicateRuleError(CorpusIntegrityError):
    """Two distinct rules were loaded at the same position."""
    code = ErrorCode.DUPLICATE_RULE


class MalformedRuleError(CorpusIntegrityError):
    """A rule record cannot be turned into a RuleDefinition."""
    code = ErrorCode.MALFORMED_RULE


@dataclass(frozen=True)
class Rejection:
    """
    A recoverable per-query failure, returned as part of a result.

    Batch evaluation collects these instead of aborting.
    """
    code: ErrorCode
    reason: str
    subject: str
    confidence: float = 0.0

    @classmethod
    def from_error(cls, error: VyakaranaError) -> Rejection:
        """Create a Rejection from a raised VyakaranaError."""
        return cls(
            code=error.code,
            reason=error.reason,
            subject=error.subject if error.subject is not None else "",
        )


# =============================================================================
# POSITION & SCOPE RANGE
# =============================================================================

_POSITION_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)\.(\d+)\s*$")


@dataclass(frozen=True, order=True)
class Position:
    """
    A sutra address: adhyaya (1-8), pada (1-4), sutra number.

    Ordering compares the three components as integers, so
    1.4.9 < 1.4.10 (a string comparison would get this wrong).
    """
    adhyaya: int
    pada: int
    sutra: int

    def __post_init__(self):
        if not 1 <= self.adhyaya <= 8:
            raise ValueError(f"adhyaya must be in 1..8, got {self.adhyaya}")
        if not 1 <= self.pada <= 4:
            raise ValueError(f"pada must be in 1..4, got {self.pada}")
        if self.sutra < 1:
            raise ValueError(f"sutra must be positive, got {self.sutra}")

    @classmethod
    def parse(cls, value: Union[str, Position]) -> Position:
        """Parse "1.3.42" into a Position. Positions pass through."""
        if isinstance(value, Position):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Cannot parse position from {type(value).__name__}")

        match = _POSITION_PATTERN.match(value)
        if not match:
            raise ValueError(f"Malformed sutra position: {value!r}")
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.adhyaya}.{self.pada}.{self.sutra}"


@dataclass(frozen=True)
class ScopeRange:
    """Inclusive range of positions governed by an adhikara."""
    start: Position
    end: Position

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Scope ends ({self.end}) before it starts ({self.start})")

    @classmethod
    def parse(cls, start: Union[str, Position], end: Union[str, Position]) -> ScopeRange:
        return cls(Position.parse(start), Position.parse(end))

    def contains(self, position: Union[str, Position]) -> bool:
        """Boundaries are included: start <= position <= end."""
        position = Position.parse(position)
        return self.start <= position <= self.end

    def encloses(self, other: ScopeRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps_partially(self, other: ScopeRange) -> bool:
        """True when the ranges intersect but neither encloses the other."""
        intersects = self.start <= other.end and other.start <= self.end
        return intersects and not (self.encloses(other) or other.encloses(self))

    def __str__(self) -> str:
        return f"{self.start}–{self.end}"


# =============================================================================
# RULE DEFINITION
# =============================================================================

class RuleKind(Enum):
    """
    Tagged variant for what a sutra does.

    ADHIKARA and PARIBHASHA rules are scope metadata: they govern how
    other rules are read and never apply to an input themselves.
    """
    VIDHI = "vidhi"               # Operation
    SAMJNA = "samjna"             # Technical designation
    ATIDESHA = "atidesha"         # Extension / transfer
    ADHIKARA = "adhikara"         # Governing heading
    PARIBHASHA = "paribhasha"     # Interpretive meta-rule
    NISEDHA = "nisedha"           # Prohibition

    @property
    def is_operative(self) -> bool:
        return self not in (RuleKind.ADHIKARA, RuleKind.PARIBHASHA)


class OutcomeKind(Enum):
    """What a rule governs when it applies."""
    DESIGNATION = "designation"   # samjna name, e.g. "vrddhi"
    VOICE = "voice"               # parasmaipada / atmanepada
    CASE = "case"                 # karaka role
    TRANSFER = "transfer"         # boolean atidesha
    SUBSTITUTION = "substitution" # adesha replacing the current unit


@dataclass(frozen=True)
class Outcome:
    """
    A rule's effect. A substitution value is a fixed substitute, a
    mapping from original to substitute, or a callable (unit, context)
    that computes the substitute.
    """
    kind: OutcomeKind
    value: Any = None

    def __str__(self) -> str:
        value = self.value.__name__ if callable(self.value) else self.value
        return f"{self.kind.value}: {value}"


Condition = Callable[["Unit", "EvaluationContext"], Any]


@dataclass(frozen=True)
class RuleDefinition:
    """
    One sutra, as loaded from the corpus.

    The condition is an external predicate ``(unit, context) -> bool | Verdict``.
    Rules without a condition are treated as already matched by the
    caller's own predicate modules.
    """
    position: Position
    kind: RuleKind
    name: str = ""
    text: str = ""
    outcome: Optional[Outcome] = None
    optional: bool = False
    al_vidhi: bool = False
    governs: Optional[ScopeRange] = None
    blocks: tuple[Position, ...] = ()
    condition: Optional[Condition] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        """Validate structural requirements of the rule record."""
        if not isinstance(self.position, Position):
            raise MalformedRuleError("position must be a Position", str(self.position))
        if not isinstance(self.kind, RuleKind):
            raise MalformedRuleError(
                f"kind must be RuleKind, got {type(self.kind).__name__}",
                str(self.position),
            )

        if self.kind == RuleKind.ADHIKARA and self.governs is None:
            raise MalformedRuleError(
                "adhikara rule must declare the range it governs",
                str(self.position),
            )
        if self.governs is not None and self.governs.start < self.position:
            raise MalformedRuleError(
                f"governed range {self.governs} starts before the rule itself",
                str(self.position),
            )
        if self.blocks and self.kind != RuleKind.NISEDHA:
            raise MalformedRuleError(
                "only nisedha rules may declare blocked targets",
                str(self.position),
            )

    @property
    def label(self) -> str:
        """Position plus name, for audit output."""
        return f"{self.position} {self.name}".strip()

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> RuleDefinition:
        """
        Build a RuleDefinition from an already-validated corpus record.

        Expected keys: position, kind; optional name, text, outcome
        ((kind, value) pair or mapping), optional, al_vidhi, governs
        ((start, end) pair or mapping), blocks, condition.

        Raises:
            MalformedRuleError: If a field cannot be converted
        """
        subject = str(record.get("position", "?"))
        try:
            position = Position.parse(record["position"])
            kind = RuleKind(record["kind"])
            governs = _parse_governs(record.get("governs"))
            outcome = _parse_outcome(record.get("outcome"))
            blocks = tuple(Position.parse(p) for p in record.get("blocks", ()))
        except KeyError as e:
            raise MalformedRuleError(f"rule record missing field {e}", subject) from e
        except (ValueError, TypeError) as e:
            raise MalformedRuleError(str(e), subject) from e

        return cls(
            position=position,
            kind=kind,
            name=record.get("name", ""),
            text=record.get("text", ""),
            outcome=outcome,
            optional=bool(record.get("optional", False)),
            al_vidhi=bool(record.get("al_vidhi", False)),
            governs=governs,
            blocks=blocks,
            condition=record.get("condition"),
        )


def _parse_governs(value: Any) -> Optional[ScopeRange]:
    if value is None:
        return None
    if isinstance(value, ScopeRange):
        return value
    if isinstance(value, Mapping):
        return ScopeRange.parse(value["start"], value["end"])
    start, end = value
    return ScopeRange.parse(start, end)


def _parse_outcome(value: Any) -> Optional[Outcome]:
    if value is None:
        return None
    if isinstance(value, Outcome):
        return value
    if isinstance(value, Mapping):
        return Outcome(OutcomeKind(value["kind"]), value.get("value"))
    kind, payload = value
    return Outcome(OutcomeKind(kind), payload)


# =============================================================================
# EVALUATION INPUT
# =============================================================================

class UnitKind(Enum):
    PHONEME = "phoneme"
    MORPHEME = "morpheme"
    WORD = "word"
    COMPOUND = "compound"


@dataclass(frozen=True)
class Unit:
    """A linguistic unit. Compounds carry their members."""
    text: str
    kind: UnitKind = UnitKind.WORD
    members: tuple[Unit, ...] = ()

    @classmethod
    def of(cls, value: Union[str, Unit], kind: UnitKind = UnitKind.WORD) -> Unit:
        if isinstance(value, Unit):
            return value
        return cls(text=value, kind=kind)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SubstitutionRecord:
    """
    A substitute (adesha) standing in for an original (sthanin).

    Lives only as long as the evaluation immediately following the
    rule that produced it.
    """
    substitute: Unit
    original: Unit
    produced_by: Optional[Position] = None

    @classmethod
    def of(
        cls,
        original: Union[str, Unit],
        substitute: Union[str, Unit],
        produced_by: Optional[Union[str, Position]] = None,
    ) -> SubstitutionRecord:
        return cls(
            substitute=Unit.of(substitute, UnitKind.PHONEME),
            original=Unit.of(original, UnitKind.PHONEME),
            produced_by=Position.parse(produced_by) if produced_by else None,
        )


@dataclass(frozen=True)
class EvaluationContext:
    """
    The immutable input of a single evaluation call.

    Fields:
        unit            — What is being evaluated
        annotations     — Caller-supplied facts (transitivity, prefix, role...)
        cursor          — The rule currently being asked, if any
        substitution    — A pending substitution, only if the caller supplies one
        reduplication   — True inside a dvirvacana (reduplication) context
        following       — The element immediately after the unit
        required_scopes — Adhikaras every candidate must fall under
    """
    unit: Unit
    annotations: Mapping[str, Any] = field(default_factory=dict)
    cursor: Optional[Position] = None
    substitution: Optional[SubstitutionRecord] = None
    reduplication: bool = False
    following: Optional[str] = None
    required_scopes: tuple[Position, ...] = ()

    def __post_init__(self):
        # Freeze the caller's mapping so no evaluation can mutate it
        object.__setattr__(
            self, "annotations", MappingProxyType(dict(self.annotations))
        )
        object.__setattr__(
            self,
            "required_scopes",
            tuple(Position.parse(p) for p in self.required_scopes),
        )

    @classmethod
    def for_text(cls, text: str, kind: UnitKind = UnitKind.WORD, **kwargs: Any) -> EvaluationContext:
        return cls(unit=Unit(text=text, kind=kind), **kwargs)

    def annotation(self, key: str, default: Any = None) -> Any:
        return self.annotations.get(key, default)

    def with_cursor(self, position: Union[str, Position]) -> EvaluationContext:
        return replace(self, cursor=Position.parse(position))

    def with_substitution(self, record: Optional[SubstitutionRecord]) -> EvaluationContext:
        return replace(self, substitution=record)

    def with_unit(self, unit: Union[str, Unit]) -> EvaluationContext:
        return replace(self, unit=Unit.of(unit, self.unit.kind))
