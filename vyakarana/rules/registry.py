"""
Rule Registry — the loaded, immutable rule corpus.

Loading is the only place corpus integrity is checked structurally:
    - every record becomes a valid RuleDefinition (MALFORMED_RULE)
    - no two distinct rules share a position (DUPLICATE_RULE)
    - adhikara ranges nest (SCOPE_CONFIGURATION)

All three are fatal. A registry that exists is consistent.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional, Union

import structlog

from ..domain import (
    DuplicateRuleError,
    MalformedRuleError,
    Position,
    RuleDefinition,
    RuleKind,
)
from .scope import ScopeResolver

logger = structlog.get_logger()

RuleSource = Iterable[Union[RuleDefinition, Mapping[str, Any]]]


class RuleRegistry:
    """
    Rules indexed by position, in sutra order.

    The same definition supplied twice is collapsed; two different
    definitions at one position raise DuplicateRuleError.
    """

    def __init__(self, rules: Iterable[RuleDefinition]):
        by_position: dict[Position, RuleDefinition] = {}
        for rule in rules:
            existing = by_position.get(rule.position)
            if existing is not None and existing != rule:
                raise DuplicateRuleError(
                    f"two different rules at {rule.position}: "
                    f"'{existing.name}' and '{rule.name}'",
                    str(rule.position),
                )
            by_position[rule.position] = rule

        self._rules = dict(sorted(by_position.items()))
        self._scope = ScopeResolver(r for r in self._rules.values() if r.kind == RuleKind.ADHIKARA)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(self._rules.values())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, RuleDefinition):
            return self._rules.get(item.position) == item
        try:
            return Position.parse(item) in self._rules
        except ValueError:
            return False

    @property
    def scope(self) -> ScopeResolver:
        return self._scope

    def get(self, position: Union[str, Position]) -> Optional[RuleDefinition]:
        return self._rules.get(Position.parse(position))

    def require(self, position: Union[str, Position]) -> RuleDefinition:
        """
        Raises:
            KeyError: If no rule is registered at the position
        """
        rule = self.get(position)
        if rule is None:
            raise KeyError(f"no rule registered at {position}")
        return rule

    def rules_of_kind(self, kind: RuleKind) -> list[RuleDefinition]:
        return [r for r in self if r.kind == kind]

    def adhikaras(self) -> tuple[RuleDefinition, ...]:
        return self._scope.adhikaras

    def active_adhikaras(self, position: Union[str, Position]) -> list[RuleDefinition]:
        return self._scope.active_adhikaras(position)

    def scope_chain(self, position: Union[str, Position]) -> tuple[Position, ...]:
        return self._scope.scope_chain(position)


def _to_definition(record: Any) -> RuleDefinition:
    if isinstance(record, RuleDefinition):
        return record
    if isinstance(record, Mapping):
        return RuleDefinition.from_mapping(record)
    raise MalformedRuleError(
        f"rule record must be RuleDefinition or mapping, got {type(record).__name__}",
        repr(record),
    )


def load_rule_corpus(source: RuleSource) -> RuleRegistry:
    """
    Build a registry from RuleDefinitions or already-validated mappings.

    Raises:
        MalformedRuleError: If a record cannot be converted
        DuplicateRuleError: If two distinct rules share a position
        ScopeConfigurationError: If adhikara ranges overlap without nesting
    """
    definitions = [_to_definition(record) for record in source]
    registry = RuleRegistry(definitions)

    for rule in registry.rules_of_kind(RuleKind.NISEDHA):
        for target in rule.blocks:
            if target not in registry:
                logger.warning(
                    "nisedha_target_unregistered",
                    rule=str(rule.position),
                    target=str(target),
                )

    logger.info(
        "corpus_loaded",
        rules=len(registry),
        adhikaras=len(registry.adhikaras()),
    )
    return registry
