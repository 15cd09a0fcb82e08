"""
Precedence resolution (vipratisedha).

Narrows every rule that matched one input to a single outcome:

    1. Meta rules (adhikara, paribhasha) are dropped; they never apply.
    2. Two distinct rules at one position: PrecedenceTieError (fatal).
       The same definition supplied twice is collapsed.
    3. A matched prohibition (nisedha) that targets a co-matched rule,
       and whose scope is the same as or broader than the target's,
       short-circuits to Blocked. Latest prohibition first.
       A prohibition that matched alone is Blocked as well.
    4. Otherwise the latest mandatory rule wins (1.4.2).
    5. Only optional (vibhasha) rules matched: the latest is returned
       as a non-exclusive Applied; every matched optional rule is
       listed as an alternative.

"Later" is literal positional comparison, never topical priority.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Union

import structlog

from ..config import settings
from ..domain import (
    Outcome,
    Position,
    PrecedenceTieError,
    RuleDefinition,
    RuleKind,
)
from ..rules.scope import ScopeResolver
from ..verdict import Verdict, create_rule_verdict

if TYPE_CHECKING:
    from ..rules.registry import RuleRegistry

logger = structlog.get_logger()

VIPRATISEDHA = "1.4.2"


# =============================================================================
# RESOLUTION OUTCOMES
# =============================================================================

@dataclass(frozen=True)
class Applied:
    """
    The winning rule.

    ``exclusive`` is False for a vibhasha outcome: the caller may take
    the outcome or its absence.
    """
    rule: RuleDefinition
    exclusive: bool = True
    alternatives: tuple[RuleDefinition, ...] = ()
    overridden: tuple[RuleDefinition, ...] = ()

    @property
    def position(self) -> Position:
        return self.rule.position

    @property
    def outcome(self) -> Optional[Outcome]:
        return self.rule.outcome

    @property
    def confidence(self) -> float:
        return 1.0 if self.exclusive else settings.OPTIONAL_OUTCOME_CONFIDENCE

    def to_verdict(self) -> Verdict:
        if self.overridden:
            losers = ", ".join(str(r.position) for r in self.overridden)
            reason = f"{self.rule.label} prevails over {losers}"
            principle = VIPRATISEDHA
        else:
            reason = f"{self.rule.label} applies"
            principle = str(self.rule.position)
        if not self.exclusive:
            reason += " (optional)"
        return create_rule_verdict(
            True, reason, principle, (str(self.rule.position),), self.confidence
        )


@dataclass(frozen=True)
class Blocked:
    """A prohibition matched and blocks the listed rules (possibly none)."""
    prohibiting_rule: RuleDefinition
    blocked: tuple[RuleDefinition, ...] = ()

    @property
    def position(self) -> Position:
        return self.prohibiting_rule.position

    @property
    def outcome(self) -> None:
        return None

    def to_verdict(self) -> Verdict:
        if self.blocked:
            targets = ", ".join(str(r.position) for r in self.blocked)
            reason = f"{self.prohibiting_rule.label} blocks {targets}"
        else:
            reason = f"{self.prohibiting_rule.label} prohibits"
        return create_rule_verdict(
            False, reason, str(self.prohibiting_rule.position), (str(self.prohibiting_rule.position),)
        )


Resolution = Union[Applied, Blocked]


# =============================================================================
# RESOLVER
# =============================================================================

class PrecedenceResolver:
    """
    Resolves co-matching rules.

    With a ScopeResolver, a prohibition only blocks targets whose
    adhikara chain starts with the prohibition's own chain. Without
    one, every rule is treated as sharing the same (empty) scope.
    """

    def __init__(self, scope: Optional[ScopeResolver] = None):
        self.scope = scope

    def _dedupe(self, candidates: Iterable[RuleDefinition]) -> list[RuleDefinition]:
        """
        Raises:
            PrecedenceTieError: If two distinct rules share a position
        """
        by_position: dict[Position, RuleDefinition] = {}
        for rule in candidates:
            if not rule.kind.is_operative:
                continue
            existing = by_position.get(rule.position)
            if existing is None:
                by_position[rule.position] = rule
            elif existing != rule:
                logger.error(
                    "precedence_tie",
                    position=str(rule.position),
                    rules=[existing.label, rule.label],
                )
                raise PrecedenceTieError(
                    f"distinct rules '{existing.label}' and '{rule.label}' share position {rule.position}",
                    str(rule.position),
                )
        return [by_position[p] for p in sorted(by_position)]

    def _scope_covers(self, prohibition: RuleDefinition, target: RuleDefinition) -> bool:
        """The prohibition's scope is the same as or broader than the target's."""
        if self.scope is None:
            return True
        outer = self.scope.scope_chain(prohibition.position)
        inner = self.scope.scope_chain(target.position)
        return inner[:len(outer)] == outer

    def _blocked_by(
        self,
        prohibition: RuleDefinition,
        others: list[RuleDefinition],
    ) -> tuple[RuleDefinition, ...]:
        return tuple(
            target for target in others
            if (not prohibition.blocks or target.position in prohibition.blocks)
            and self._scope_covers(prohibition, target)
        )

    def resolve(self, candidates: Iterable[RuleDefinition]) -> Optional[Resolution]:
        """
        Resolve matched rules to Applied, Blocked or None.

        Raises:
            PrecedenceTieError: If two distinct rules share a position
        """
        rules = self._dedupe(candidates)
        if not rules:
            return None

        prohibitions = [r for r in rules if r.kind == RuleKind.NISEDHA]
        others = [r for r in rules if r.kind != RuleKind.NISEDHA]

        # Niṣedha short-circuit, latest prohibition first
        for prohibition in reversed(prohibitions):
            blocked = self._blocked_by(prohibition, others)
            if blocked:
                return Blocked(prohibiting_rule=prohibition, blocked=blocked)

        if not others:
            return Blocked(prohibiting_rule=prohibitions[-1])

        mandatory = [r for r in others if not r.optional]
        if mandatory:
            winner = mandatory[-1]
            return Applied(
                rule=winner,
                overridden=tuple(r for r in others if r is not winner),
            )

        return Applied(
            rule=others[-1],
            exclusive=False,
            alternatives=tuple(others),
            overridden=tuple(others[:-1]),
        )


def resolve_precedence(
    candidates: Iterable[RuleDefinition],
    registry: Optional[RuleRegistry] = None,
) -> Optional[Resolution]:
    """Resolve matched rules, using the registry's scopes when given."""
    scope = registry.scope if registry is not None else None
    return PrecedenceResolver(scope).resolve(candidates)
