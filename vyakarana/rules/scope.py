"""
Adhikara scope resolution.

An adhikara (governing heading) extends over a contiguous range of
later sutras. Ranges must be well nested or disjoint; a partial
overlap is a corpus integrity error and fails at construction.

    1.4.1 ─────────────────────────────── 2.2.38
        1.4.23 ──── 1.4.55   1.4.56 ──── 1.4.97
                                 1.4.83 ── 1.4.97

Containment is inclusive at both boundaries. Active scopes are
returned broadest (earliest-starting) first.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Union

from ..domain import Position, RuleDefinition, ScopeConfigurationError

if TYPE_CHECKING:
    from .registry import RuleRegistry


PositionLike = Union[str, Position]


class ScopeBoundary(Enum):
    """How moving from one sutra to another relates to an adhikara."""
    ENTRY = "entry"   # from outside the range into it
    EXIT = "exit"     # from inside the range out of it
    NONE = "none"     # both inside or both outside


class ScopeResolver:
    """
    Answers which adhikaras govern a position.

    Built once from the adhikara rules of a registry and immutable
    afterwards.
    """

    def __init__(self, adhikaras: Iterable[RuleDefinition]):
        rules = [r for r in adhikaras if r.governs is not None]
        # Earliest start first; among equal starts, the broadest first
        rules.sort(key=lambda r: (r.governs.end, r.position), reverse=True)
        rules.sort(key=lambda r: r.governs.start)

        self._validate_nesting(rules)
        self._adhikaras = tuple(rules)
        self._by_position = {r.position: r for r in rules}

    @staticmethod
    def _validate_nesting(rules: list[RuleDefinition]) -> None:
        """
        Raises:
            ScopeConfigurationError: If two ranges overlap without nesting
        """
        open_scopes: list[RuleDefinition] = []
        for rule in rules:
            while open_scopes and open_scopes[-1].governs.end < rule.governs.start:
                open_scopes.pop()
            if open_scopes and not open_scopes[-1].governs.encloses(rule.governs):
                outer = open_scopes[-1]
                raise ScopeConfigurationError(
                    f"adhikara {outer.position} ({outer.governs}) partially overlaps "
                    f"{rule.position} ({rule.governs})",
                    str(rule.position),
                )
            open_scopes.append(rule)

    @property
    def adhikaras(self) -> tuple[RuleDefinition, ...]:
        return self._adhikaras

    def active_adhikaras(self, position: PositionLike) -> list[RuleDefinition]:
        """Every adhikara whose range contains the position, broadest first."""
        position = Position.parse(position)
        return [r for r in self._adhikaras if r.governs.contains(position)]

    def innermost(self, position: PositionLike) -> Optional[RuleDefinition]:
        """The narrowest adhikara governing the position, if any."""
        active = self.active_adhikaras(position)
        return active[-1] if active else None

    def scope_chain(self, position: PositionLike) -> tuple[Position, ...]:
        """Positions of the governing adhikaras, broadest first."""
        return tuple(r.position for r in self.active_adhikaras(position))

    def get(self, adhikara: Union[PositionLike, RuleDefinition]) -> Optional[RuleDefinition]:
        if isinstance(adhikara, RuleDefinition):
            adhikara = adhikara.position
        return self._by_position.get(Position.parse(adhikara))

    def governs(self, adhikara: Union[PositionLike, RuleDefinition], position: PositionLike) -> bool:
        """True if the given adhikara is registered and its range contains the position."""
        rule = self.get(adhikara)
        return rule is not None and rule.governs.contains(position)

    def boundary_crossing(
        self,
        current: PositionLike,
        target: PositionLike,
        adhikara: Union[PositionLike, RuleDefinition],
    ) -> ScopeBoundary:
        """
        Classify the step from ``current`` to ``target`` against one adhikara.

        An unknown adhikara governs nothing, so no boundary is crossed.
        """
        current_in = self.governs(adhikara, current)
        target_in = self.governs(adhikara, target)
        if current_in == target_in:
            return ScopeBoundary.NONE
        return ScopeBoundary.EXIT if current_in else ScopeBoundary.ENTRY


def active_adhikaras(position: PositionLike, registry: RuleRegistry) -> list[RuleDefinition]:
    """Adhikaras governing a position in the given registry, broadest first."""
    return registry.scope.active_adhikaras(position)
