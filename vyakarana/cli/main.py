"""
Vyakarana CLI — Read-Only Inspection of the Rule Engine.

Commands:
    vyakarana classify <phoneme>...        — Show phoneme features
    vyakarana savarna <a> <b>              — Check homogeneity
    vyakarana weight <word>                — Laghu/guru of every vowel
    vyakarana scope <position>             — Governing adhikaras
    vyakarana pratyahara <name>            — Expand a pratyahara
    vyakarana resolve <unit>               — Evaluate the core corpus

This CLI is READ-ONLY. It evaluates the in-package core corpus and
cannot modify rules, scopes or precedence.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional

from ..domain import EvaluationContext, Position, UnitKind, VyakaranaError
from ..logging_config import configure_logging
from ..evaluation.engine import RuleEvaluationEngine
from ..phonology.classifier import (
    FeatureSet,
    classify_phoneme,
    is_savarna_verdict,
    syllable_weights,
)
from ..phonology.pratyahara import expand_pratyahara
from ..rules.corpus import load_core_corpus
from ..rules.scope import ScopeBoundary


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_features(features: FeatureSet) -> str:
    """Format a classified phoneme for display."""
    phoneme = features.phoneme
    flags = [
        name for name, present in (
            ("nasal", phoneme.nasal),
            ("vrddhi", phoneme.vrddhi),
            ("guna", phoneme.guna),
            ("voiced", phoneme.voiced),
            ("aspirated", phoneme.aspirated),
        ) if present
    ]
    manner = phoneme.manner.value if phoneme.manner else "-"
    return (
        f"{phoneme.iast} ({phoneme.devanagari}) | {phoneme.category.value} | "
        f"place: {phoneme.place.value} | manner: {manner} | "
        f"length: {phoneme.length.value} | {', '.join(flags) or 'no flags'}"
    )


def parse_annotation(item: str) -> tuple[str, Any]:
    """
    Parse KEY=VALUE.

    "true"/"false" become booleans; comma-separated values become tuples.
    """
    if "=" not in item:
        raise argparse.ArgumentTypeError(f"annotation must be KEY=VALUE, got '{item}'")
    key, value = item.split("=", 1)
    lowered = value.lower()
    if lowered in ("true", "false"):
        return key, lowered == "true"
    if "," in value:
        return key, tuple(v.strip() for v in value.split(",") if v.strip())
    return key, value


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_classify(args: argparse.Namespace) -> int:
    """Show features for each phoneme."""
    status = 0
    for symbol in args.phonemes:
        result = classify_phoneme(symbol)
        if result.ok:
            print(format_features(result))
        else:
            print(f"{symbol!r}: [{result.rejection.code.value}] {result.rejection.reason}")
            status = 1
    return status


def cmd_savarna(args: argparse.Namespace) -> int:
    """Check whether two phonemes are savarna."""
    verdict = is_savarna_verdict(args.first, args.second)
    answer = "savarna" if verdict else "not savarna"
    print(f"{args.first} / {args.second}: {answer}")
    print(f"  {verdict.describe()}")
    return 0


def cmd_weight(args: argparse.Namespace) -> int:
    """Show laghu/guru for each vowel of a word."""
    weights = syllable_weights(args.word)
    if not weights:
        print(f"Could not segment '{args.word}' into registered phonemes.")
        return 1
    print(f"{args.word}: {' '.join(w.value for w in weights)}")
    return 0


def cmd_scope(args: argparse.Namespace) -> int:
    """Show the adhikaras governing a position."""
    registry = load_core_corpus()
    try:
        active = registry.active_adhikaras(args.position)
        if args.target:
            Position.parse(args.target)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Adhikaras governing {args.position}:")
    if not active:
        print("  (none)")
    for depth, rule in enumerate(active):
        print(f"  {'  ' * depth}{rule.position} {rule.name} [{rule.governs}]")

    if args.target:
        print()
        for rule in registry.adhikaras():
            crossing = registry.scope.boundary_crossing(args.position, args.target, rule)
            if crossing != ScopeBoundary.NONE:
                print(f"  {args.position} -> {args.target}: {crossing.value} of {rule.position} {rule.name}")
    return 0


def cmd_pratyahara(args: argparse.Namespace) -> int:
    """Expand a pratyahara name."""
    members = expand_pratyahara(args.name, long_form=args.long, include_savarna=args.savarna)
    if not members:
        print(f"Unknown pratyahara: {args.name}")
        return 1
    print(f"{args.name}: {' '.join(members)}")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Evaluate the core corpus against a unit."""
    engine = RuleEvaluationEngine(load_core_corpus())
    try:
        context = EvaluationContext.for_text(
            args.unit,
            kind=UnitKind(args.kind),
            annotations=dict(args.annotate or []),
            following=args.following,
            reduplication=args.reduplication,
            required_scopes=tuple(args.scope or ()),
        )
        result = engine.evaluate(context, args.candidates or None)
    except (VyakaranaError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    print(result.explain())
    return 0 if result.ok else 1


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="vyakarana",
        description="Vyakarana — Explainable Paninian Rule Engine",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Classify command
    classify_parser = subparsers.add_parser(
        "classify",
        help="Show phoneme features",
    )
    classify_parser.add_argument("phonemes", nargs="+", help="IAST or Devanagari phonemes")
    classify_parser.set_defaults(func=cmd_classify)

    # Savarna command
    savarna_parser = subparsers.add_parser(
        "savarna",
        help="Check whether two phonemes are savarna",
    )
    savarna_parser.add_argument("first")
    savarna_parser.add_argument("second")
    savarna_parser.set_defaults(func=cmd_savarna)

    # Weight command
    weight_parser = subparsers.add_parser(
        "weight",
        help="Show laghu/guru weight of every vowel in a word",
    )
    weight_parser.add_argument("word")
    weight_parser.set_defaults(func=cmd_weight)

    # Scope command
    scope_parser = subparsers.add_parser(
        "scope",
        help="Show adhikaras governing a sutra position",
    )
    scope_parser.add_argument("position", help="Sutra position, e.g. 1.4.24")
    scope_parser.add_argument("--target", help="Report scope boundaries crossed on the way to this position")
    scope_parser.set_defaults(func=cmd_scope)

    # Pratyahara command
    pratyahara_parser = subparsers.add_parser(
        "pratyahara",
        help="Expand a pratyahara",
    )
    pratyahara_parser.add_argument("name", help="e.g. ac, hal, ik, yaṇ")
    pratyahara_parser.add_argument("--long", action="store_true", help="Close at the later occurrence of ṇ")
    pratyahara_parser.add_argument("--savarna", action="store_true", help="Include savarna vowel variants")
    pratyahara_parser.set_defaults(func=cmd_pratyahara)

    # Resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Evaluate core corpus rules against a unit",
    )
    resolve_parser.add_argument("unit")
    resolve_parser.add_argument(
        "--kind",
        choices=[k.value for k in UnitKind],
        default=UnitKind.WORD.value,
    )
    resolve_parser.add_argument(
        "--rule",
        dest="candidates",
        action="append",
        help="Candidate rule position (repeatable); defaults to every rule",
    )
    resolve_parser.add_argument(
        "--annotate",
        action="append",
        type=parse_annotation,
        metavar="KEY=VALUE",
        help="Context annotation (repeatable)",
    )
    resolve_parser.add_argument("--following", help="Element immediately after the unit")
    resolve_parser.add_argument("--reduplication", action="store_true")
    resolve_parser.add_argument(
        "--scope",
        action="append",
        help="Required adhikara position (repeatable)",
    )
    resolve_parser.set_defaults(func=cmd_resolve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    configure_logging()
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
