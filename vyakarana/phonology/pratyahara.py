"""
Pratyahara expansion from the fourteen Siva-sutras.

1.1.71 adir antyena saheta: a first sound taken together with a later
it-marker names every sound from the first up to (not including) the
marker. The markers themselves are never members.

    ac   -> a i u ṛ ḷ e o ai au
    ik   -> i u ṛ ḷ
    yaṇ  -> y v r l
    hal  -> every consonant
"""

from __future__ import annotations

import unicodedata
from typing import Optional

from ..verdict import Verdict, create_derivation, not_satisfied
from .classifier import is_savarna
from .table import PHONEME_TABLE, Category


# Each sutra: (sounds, it-marker)
SHIVA_SUTRAS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("a", "i", "u"), "ṇ"),
    (("ṛ", "ḷ"), "k"),
    (("e", "o"), "ṅ"),
    (("ai", "au"), "c"),
    (("h", "y", "v", "r"), "ṭ"),
    (("l",), "ṇ"),
    (("ñ", "m", "ṅ", "ṇ", "n"), "m"),
    (("jh", "bh"), "ñ"),
    (("gh", "ḍh", "dh"), "ṣ"),
    (("j", "b", "g", "ḍ", "d"), "ś"),
    (("kh", "ph", "ch", "ṭh", "th", "c", "ṭ", "t"), "v"),
    (("k", "p"), "y"),
    (("ś", "ṣ", "s"), "r"),
    (("h",), "l"),
)


def _flatten() -> tuple[tuple[str, bool], ...]:
    """Sequence of (sound, is_marker) in recitation order."""
    sequence = []
    for sounds, marker in SHIVA_SUTRAS:
        sequence.extend((sound, False) for sound in sounds)
        sequence.append((marker, True))
    return tuple(sequence)


SEQUENCE = _flatten()
IT_MARKERS = frozenset(marker for _, marker in SHIVA_SUTRAS)


def parse_name(name: str) -> Optional[tuple[str, str]]:
    """
    Split a pratyahara name into (first sound, marker).

    Consonant-initial names are pronounced with an inserted "a"
    (yaṇ, hal, jhal), which is dropped. Accepts IAST or Devanagari.
    """
    if not isinstance(name, str):
        return None
    text = unicodedata.normalize("NFC", name).strip().lower()
    segmentation = PHONEME_TABLE.segment(text)
    if not segmentation.complete:
        return None

    parts = [p.iast for p in segmentation.phonemes]
    if len(parts) == 3 and parts[1] == "a" and segmentation.phonemes[0].is_consonant:
        parts = [parts[0], parts[2]]
    if len(parts) != 2:
        return None

    first, marker = parts
    if marker not in IT_MARKERS:
        return None
    return first, marker


def expand_pratyahara(
    name: str,
    long_form: bool = False,
    include_savarna: bool = False,
) -> tuple[str, ...]:
    """
    Expand a pratyahara name into its member sounds (IAST).

    Args:
        name: e.g. "ac", "ik", "yaṇ", "hal", "अच्"
        long_form: For a marker that occurs twice (ṇ), close at the
            later occurrence instead of the first one after the start
        include_savarna: Add the savarna variants of each vowel
            (ik -> i ī u ū ṛ ṝ ḷ ḹ)

    Returns:
        Member sounds in recitation order, without duplicates.
        Unknown or malformed names give an empty tuple.
    """
    parsed = parse_name(name)
    if parsed is None:
        return ()
    first, marker = parsed

    start = next(
        (i for i, (sound, is_marker) in enumerate(SEQUENCE) if sound == first and not is_marker),
        None,
    )
    if start is None:
        return ()

    closings = [
        i for i, (sound, is_marker) in enumerate(SEQUENCE)
        if is_marker and sound == marker and i > start
    ]
    if not closings:
        return ()
    end = closings[-1] if long_form else closings[0]

    members: list[str] = []
    for sound, is_marker in SEQUENCE[start:end]:
        if not is_marker and sound not in members:
            members.append(sound)

    if include_savarna:
        members = _with_savarna(members)
    return tuple(members)


def _with_savarna(members: list[str]) -> list[str]:
    vowels = PHONEME_TABLE.of_category(Category.VOWEL)
    expanded: list[str] = []
    for sound in members:
        variants = [sound]
        if PHONEME_TABLE.get(sound).is_vowel:
            variants += [v.iast for v in vowels if v.iast != sound and is_savarna(sound, v)]
        for variant in variants:
            if variant not in expanded:
                expanded.append(variant)
    return expanded


def in_pratyahara_verdict(phoneme: str, name: str, include_savarna: bool = True) -> Verdict:
    """Membership of a phoneme in a pratyahara, as an audit verdict."""
    subject = (str(phoneme), str(name))
    resolved = PHONEME_TABLE.lookup(phoneme)
    if resolved is None:
        return not_satisfied(f"'{phoneme}' is not a registered phoneme", subject)

    members = expand_pratyahara(name, include_savarna=include_savarna)
    if not members:
        return not_satisfied(f"'{name}' is not a known pratyahara", subject)

    holds = resolved.iast in members
    member = "is" if holds else "is not"
    return create_derivation(holds, f"{resolved.iast} {member} in {name}", "1.1.71", subject)


def in_pratyahara(phoneme: str, name: str, include_savarna: bool = True) -> bool:
    return in_pratyahara_verdict(phoneme, name, include_savarna).holds
