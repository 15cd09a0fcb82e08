# Vyakarana Rule Engine
# Phoneme feature model, rule scope & precedence

"""
Core invariant: No predicate outcome, scope decision, or rule match may
leave the engine without an attached Verdict.

This package implements the shared substrate for evaluating the sutras
of the Astadhyayi: phoneme features, adhikara scopes, vipratisedha,
nisedha, vibhasha and sthanivadbhava.
"""

from .evaluation.engine import RuleEvaluationEngine
from .phonology.classifier import (
    classify_phoneme,
    is_anunasika,
    is_guna,
    is_savarna,
    is_vrddhi,
    prosodic_weight,
    syllable_weights,
)
from .phonology.pratyahara import expand_pratyahara
from .resolution.precedence import resolve_precedence
from .resolution.substitution import effective_unit, sthanivadbhava_for_dvirvacana
from .rules.corpus import load_core_corpus
from .rules.registry import load_rule_corpus
from .rules.scope import active_adhikaras

__all__ = [
    "RuleEvaluationEngine",
    "active_adhikaras",
    "classify_phoneme",
    "effective_unit",
    "expand_pratyahara",
    "is_anunasika",
    "is_guna",
    "is_savarna",
    "is_vrddhi",
    "load_core_corpus",
    "load_rule_corpus",
    "prosodic_weight",
    "resolve_precedence",
    "sthanivadbhava_for_dvirvacana",
    "syllable_weights",
]
