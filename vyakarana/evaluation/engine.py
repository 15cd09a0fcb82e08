"""
Rule Evaluation Engine.

One evaluation:
    1. Gate the unit (a bad unit is returned as a Rejection, never raised)
    2. Keep candidates that are registered, operative, and inside every
       adhikara the context requires
    3. Per candidate: compute the effective unit (sthanivadbhava), then
       run its condition
    4. Resolve precedence among the matches
    5. Attach the winner's scope chain and, for a substitution outcome,
       the SubstitutionRecord it produces

Every step leaves a Verdict in the audit trail. If a result cannot be
explained line by line from its audit, it is a bug.

A substitution record produced here is handed back to the caller. It is
never stored, so it cannot leak into an unrelated evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence, Union

import structlog

from ..domain import (
    EvaluationContext,
    InvalidInputError,
    OutcomeKind,
    Position,
    Rejection,
    RuleDefinition,
    SubstitutionRecord,
    Unit,
    UnitKind,
)
from ..resolution.precedence import Applied, Blocked, PrecedenceResolver, Resolution
from ..resolution.substitution import SubstitutionPropagator
from ..rules.registry import RuleRegistry
from ..validation import gate_unit
from ..verdict import Verdict, create_rule_verdict

logger = structlog.get_logger()

CandidateLike = Union[str, Position, RuleDefinition]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class RuleMatch:
    """One candidate's condition outcome."""
    rule: RuleDefinition
    unit: Unit
    verdict: Verdict

    @property
    def matched(self) -> bool:
        return self.verdict.holds


@dataclass
class EvaluationResult:
    """
    Result of evaluating one context.

    Exposes:
    - The resolution (Applied, Blocked or None)
    - Every candidate's match outcome
    - The full audit trail
    - A rejection, if the input never reached the rules
    """
    context: Optional[EvaluationContext]
    resolution: Optional[Resolution] = None
    matches: list[RuleMatch] = field(default_factory=list)
    audit: list[Verdict] = field(default_factory=list)
    rejection: Optional[Rejection] = None
    scope_chain: tuple[Position, ...] = ()
    substitution: Optional[SubstitutionRecord] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @property
    def matched(self) -> list[RuleDefinition]:
        return [m.rule for m in self.matches if m.matched]

    @property
    def applied_rule(self) -> Optional[RuleDefinition]:
        return self.resolution.rule if isinstance(self.resolution, Applied) else None

    @property
    def blocked(self) -> bool:
        return isinstance(self.resolution, Blocked)

    @property
    def outcome(self):
        return self.resolution.outcome if self.resolution is not None else None

    def explain(self) -> str:
        """
        Plain-text account of the evaluation.

        This is a VIEW over the audit trail, not additional truth.
        """
        if self.rejection is not None:
            return f"Rejected [{self.rejection.code.value}]: {self.rejection.reason}"

        lines = [f"Unit: {self.context.unit.text} ({self.context.unit.kind.value})"]
        lines.extend(f"  {verdict.describe()}" for verdict in self.audit)

        if isinstance(self.resolution, Applied):
            lines.append(f"Outcome: {self.resolution.outcome} by {self.resolution.rule.label}")
            if self.scope_chain:
                chain = " > ".join(str(p) for p in self.scope_chain)
                lines.append(f"Scope: {chain}")
            if self.substitution is not None:
                lines.append(
                    f"Substitution: {self.substitution.original.text} -> {self.substitution.substitute.text}"
                )
        elif isinstance(self.resolution, Blocked):
            lines.append(f"Blocked by {self.resolution.prohibiting_rule.label}")
        else:
            lines.append("No rule applies")
        return "\n".join(lines)


@dataclass
class BatchEvaluationResult:
    """Result of evaluating multiple contexts."""
    total: int
    results: list[EvaluationResult]
    rejected: list[Rejection]

    @property
    def evaluation_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return len(self.results) / self.total

    @property
    def applied(self) -> list[EvaluationResult]:
        return [r for r in self.results if r.applied_rule is not None]


# =============================================================================
# ENGINE
# =============================================================================

class RuleEvaluationEngine:
    """
    Evaluates candidate rules of a registry against linguistic units.

    The engine holds only the immutable registry; every call is pure.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        propagator: Optional[SubstitutionPropagator] = None,
    ):
        self.registry = registry
        self.propagator = propagator or SubstitutionPropagator()
        self.resolver = PrecedenceResolver(registry.scope)

    # -------------------------------------------------------------------------
    # Candidate selection
    # -------------------------------------------------------------------------

    def in_scope(self, rule: RuleDefinition, context: EvaluationContext) -> Verdict:
        """Whether a rule may be considered for this context at all."""
        principle = str(rule.position)
        subject = (principle,)

        if rule not in self.registry:
            return create_rule_verdict(False, f"{rule.label} is not registered", principle, subject)
        if not rule.kind.is_operative:
            return create_rule_verdict(
                False, f"{rule.label} is a {rule.kind.value} rule and never applies", principle, subject
            )
        for adhikara in context.required_scopes:
            if not self.registry.scope.governs(adhikara, rule.position):
                return create_rule_verdict(
                    False, f"{rule.label} is outside adhikara {adhikara}", principle, subject
                )
        return create_rule_verdict(True, f"{rule.label} is in scope", principle, subject)

    def _resolve_candidates(
        self,
        candidates: Optional[Iterable[CandidateLike]],
        audit: list[Verdict],
    ) -> list[RuleDefinition]:
        if candidates is None:
            return [r for r in self.registry if r.kind.is_operative]

        rules = []
        for candidate in candidates:
            if isinstance(candidate, RuleDefinition):
                rules.append(candidate)
                continue
            try:
                rule = self.registry.get(candidate)
            except ValueError:
                rule = None
            if rule is None:
                audit.append(create_rule_verdict(
                    False, f"no rule registered at {candidate}", "registry", (str(candidate),)
                ))
                continue
            rules.append(rule)
        return rules

    # -------------------------------------------------------------------------
    # Condition checking
    # -------------------------------------------------------------------------

    def check(self, rule: RuleDefinition, context: EvaluationContext) -> RuleMatch:
        """Run one rule's condition against the effective unit."""
        rule_context = context.with_cursor(rule.position)
        unit = self.propagator.for_rule(rule_context, rule)
        principle = str(rule.position)
        subject = (principle, unit.text)

        if rule.condition is None:
            verdict = create_rule_verdict(True, f"{rule.label} matched externally", principle, subject)
            return RuleMatch(rule, unit, verdict)

        try:
            result = rule.condition(unit, rule_context)
        except Exception as e:
            logger.warning(
                "condition_failed",
                rule=principle,
                unit=unit.text,
                error=f"{type(e).__name__}: {e}",
            )
            verdict = create_rule_verdict(
                False, f"condition of {rule.label} failed: {type(e).__name__}", principle, subject, 0.0
            )
            return RuleMatch(rule, unit, verdict)

        if isinstance(result, Verdict):
            return RuleMatch(rule, unit, result)

        matched = bool(result)
        state = "satisfied" if matched else "not satisfied"
        verdict = create_rule_verdict(matched, f"{rule.label} condition {state}", principle, subject)
        return RuleMatch(rule, unit, verdict)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def evaluate(
        self,
        context: EvaluationContext,
        candidates: Optional[Iterable[CandidateLike]] = None,
    ) -> EvaluationResult:
        """
        Evaluate candidates against one context.

        Args:
            context: The per-query input
            candidates: Positions or definitions to consider; defaults
                to every operative rule in the registry

        Returns:
            EvaluationResult. Invalid input comes back as a rejection.

        Raises:
            PrecedenceTieError: If the candidates violate corpus integrity
        """
        if not isinstance(context, EvaluationContext):
            error = InvalidInputError(
                f"expected EvaluationContext, got {type(context).__name__}", repr(context)
            )
            return EvaluationResult(context=None, rejection=Rejection.from_error(error))

        gate = gate_unit(context.unit)
        if not gate.accepted:
            logger.info(
                "evaluation_rejected",
                code=gate.rejection.code.value,
                reason=gate.rejection.reason,
            )
            return EvaluationResult(context=context, rejection=gate.rejection)

        audit: list[Verdict] = []
        matches: list[RuleMatch] = []

        for rule in self._resolve_candidates(candidates, audit):
            scope_verdict = self.in_scope(rule, context)
            if not scope_verdict:
                audit.append(scope_verdict)
                continue
            match = self.check(rule, context)
            audit.append(match.verdict)
            matches.append(match)

        resolution = self.resolver.resolve(m.rule for m in matches if m.matched)

        result = EvaluationResult(
            context=context,
            resolution=resolution,
            matches=matches,
            audit=audit,
        )
        if resolution is not None:
            audit.append(resolution.to_verdict())
            result.scope_chain = self.registry.scope_chain(resolution.position)
        if isinstance(resolution, Applied):
            result.substitution = self._substitution_for(resolution, matches, context)

        logger.debug(
            "evaluation_completed",
            unit=context.unit.text,
            candidates=len(matches),
            matched=[str(r.position) for r in result.matched],
            outcome=str(result.outcome) if result.outcome else None,
        )
        return result

    def _substitution_for(
        self,
        applied: Applied,
        matches: list[RuleMatch],
        context: EvaluationContext,
    ) -> Optional[SubstitutionRecord]:
        outcome = applied.outcome
        if outcome is None or outcome.kind != OutcomeKind.SUBSTITUTION:
            return None

        seen = next(m.unit for m in matches if m.rule.position == applied.position)
        kind = UnitKind.PHONEME
        if callable(outcome.value):
            substitute = outcome.value(seen, context)
            kind = seen.kind
        elif isinstance(outcome.value, Mapping):
            substitute = outcome.value.get(seen.text)
        else:
            substitute = outcome.value
        if not substitute:
            logger.warning(
                "substitute_undefined",
                rule=str(applied.position),
                unit=seen.text,
            )
            return None

        return SubstitutionRecord(
            substitute=Unit(text=substitute, kind=kind),
            original=seen,
            produced_by=applied.position,
        )

    def evaluate_batch(
        self,
        contexts: Iterable[EvaluationContext],
        candidates: Optional[Sequence[CandidateLike]] = None,
    ) -> BatchEvaluationResult:
        """
        Evaluate many contexts independently.

        A rejected context is collected and never aborts the batch.
        """
        results: list[EvaluationResult] = []
        rejected: list[Rejection] = []
        total = 0

        for context in contexts:
            total += 1
            result = self.evaluate(context, candidates)
            if result.ok:
                results.append(result)
            else:
                rejected.append(result.rejection)

        logger.info(
            "batch_completed",
            total=total,
            evaluated=len(results),
            rejected=len(rejected),
        )
        return BatchEvaluationResult(total=total, results=results, rejected=rejected)

    def evaluate_chain(
        self,
        context: EvaluationContext,
        stages: Sequence[Iterable[CandidateLike]],
    ) -> list[EvaluationResult]:
        """
        Evaluate stages in sequence.

        A substitution produced by one stage is handed to the next stage
        only, whose unit becomes the substitute. The stage after that
        starts with no pending substitution unless its predecessor
        produced a new one. A rejected stage ends the chain.
        """
        results: list[EvaluationResult] = []
        current = context

        for index, stage in enumerate(stages):
            result = self.evaluate(current, stage)
            results.append(result)
            if not result.ok:
                break

            record = result.substitution
            unit = record.substitute if record is not None else current.unit
            current = current.with_unit(unit).with_substitution(record)

            logger.debug(
                "chain_stage_completed",
                stage=index,
                substitution=record.substitute.text if record else None,
            )
        return results
