"""
Phoneme Classifier — derived phonological predicates.

Every predicate comes in two forms:
    is_savarna(a, b)          -> bool
    is_savarna_verdict(a, b)  -> Verdict (holds, confidence, reason, sutra)

The bool form is what rule conditions call; the verdict form is what
the audit trail records. Unregistered input never raises here: the
predicate is simply not satisfied (confidence 0).

Principles:
    1.1.1   vrddhir adaic           — a, ai, au are vrddhi
    1.1.2   ad en gunah             — a, e, o are guna
    1.1.8   mukhanasikavacano 'nunasikah
    1.1.9   tulyasyaprayatnam savarnam
    1.1.10  najjhalau               — vowel and consonant never savarna
    1.1.64  aco 'ntyadi ti          — last vowel onward
    1.1.65  alo 'ntyat purva upadha — penultimate phoneme
    1.4.10  hrasvam laghu
    1.4.11  samyoge guru
    1.4.12  dirgham ca
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..domain import ErrorCode, Rejection
from ..verdict import (
    BASE_CONFIDENCE,
    Verdict,
    VerdictSource,
    create_derivation,
    not_satisfied,
)
from .table import (
    ANUSVARA,
    PHONEME_TABLE,
    Category,
    Length,
    Manner,
    Phoneme,
    Place,
)


PhonemeLike = Union[str, Phoneme]


# =============================================================================
# CLASSIFICATION
# =============================================================================

@dataclass(frozen=True)
class FeatureSet:
    """Features of a successfully classified phoneme."""
    phoneme: Phoneme
    confidence: float = 1.0

    ok = True

    @property
    def iast(self) -> str:
        return self.phoneme.iast

    @property
    def devanagari(self) -> str:
        return self.phoneme.devanagari

    @property
    def category(self) -> Category:
        return self.phoneme.category

    @property
    def place(self) -> Place:
        return self.phoneme.place

    @property
    def manner(self) -> Optional[Manner]:
        return self.phoneme.manner

    @property
    def length(self) -> Length:
        return self.phoneme.length


@dataclass(frozen=True)
class NotAPhoneme:
    """Input that could not be classified. Always confidence 0."""
    symbol: str
    rejection: Rejection
    confidence: float = 0.0

    ok = False


def classify_phoneme(symbol: object) -> Union[FeatureSet, NotAPhoneme]:
    """
    Classify a single phoneme in IAST or Devanagari.

    Never raises: empty or non-string input yields INVALID_INPUT,
    unregistered input yields UNKNOWN_PHONEME.
    """
    if not isinstance(symbol, str) or not symbol.strip():
        subject = symbol if isinstance(symbol, str) else repr(symbol)
        return NotAPhoneme(
            symbol=subject,
            rejection=Rejection(ErrorCode.INVALID_INPUT, "empty or non-string phoneme", subject),
        )

    phoneme = PHONEME_TABLE.lookup(symbol)
    if phoneme is None:
        return NotAPhoneme(
            symbol=symbol,
            rejection=Rejection(
                ErrorCode.UNKNOWN_PHONEME,
                f"'{symbol}' is not a registered phoneme",
                symbol,
            ),
        )

    return FeatureSet(phoneme=phoneme, confidence=BASE_CONFIDENCE[VerdictSource.TABLE])


def _resolve(value: object) -> Optional[Phoneme]:
    if isinstance(value, Phoneme):
        return value
    return PHONEME_TABLE.lookup(value)


def _label(value: object) -> str:
    return value.iast if isinstance(value, Phoneme) else str(value)


# =============================================================================
# SAVARNA (1.1.9, 1.1.10)
# =============================================================================

def is_savarna_verdict(a: PhonemeLike, b: PhonemeLike) -> Verdict:
    subject = (_label(a), _label(b))
    first, second = _resolve(a), _resolve(b)
    if first is None or second is None:
        missing = subject[0] if first is None else subject[1]
        return not_satisfied(f"'{missing}' is not a registered phoneme", subject)

    if first.category != second.category:
        return create_derivation(
            False,
            f"{first.category.value} and {second.category.value} are never savarna",
            "1.1.10",
            subject,
        )

    if first.is_mark:
        return create_derivation(
            first == second,
            "marks are savarna only with themselves",
            "1.1.9",
            subject,
        )

    same_place = first.place == second.place
    same_manner = first.manner == second.manner
    if same_place and same_manner:
        reason = f"same place ({first.place.value}) and manner ({first.manner.value})"
    elif not same_place:
        reason = f"place differs: {first.place.value} vs {second.place.value}"
    else:
        reason = f"manner differs: {first.manner.value} vs {second.manner.value}"

    return create_derivation(same_place and same_manner, reason, "1.1.9", subject)


def is_savarna(a: PhonemeLike, b: PhonemeLike) -> bool:
    """Homogeneity: same category, same place and same manner."""
    return is_savarna_verdict(a, b).holds


# =============================================================================
# ANUNASIKA / VRDDHI / GUNA
# =============================================================================

def is_anunasika_verdict(p: PhonemeLike) -> Verdict:
    phoneme = _resolve(p)
    subject = (_label(p),)
    if phoneme is None:
        return not_satisfied(f"'{subject[0]}' is not a registered phoneme", subject)

    if phoneme.iast == ANUSVARA:
        return create_derivation(False, "anusvara is a mark, not a nasal sound", "1.1.8", subject)
    if phoneme.nasal:
        return create_derivation(True, f"{phoneme.iast} is pronounced through mouth and nose", "1.1.8", subject)
    return create_derivation(False, f"{phoneme.iast} is not nasal", "1.1.8", subject)


def is_anunasika(p: PhonemeLike) -> bool:
    return is_anunasika_verdict(p).holds


def is_vrddhi_verdict(p: PhonemeLike) -> Verdict:
    phoneme = _resolve(p)
    subject = (_label(p),)
    if phoneme is None:
        return not_satisfied(f"'{subject[0]}' is not a registered phoneme", subject)

    member = "is" if phoneme.vrddhi else "is not"
    return create_derivation(phoneme.vrddhi, f"{phoneme.iast} {member} one of ā, ai, au", "1.1.1", subject)


def is_vrddhi(p: PhonemeLike) -> bool:
    return is_vrddhi_verdict(p).holds


def is_guna_verdict(p: PhonemeLike) -> Verdict:
    phoneme = _resolve(p)
    subject = (_label(p),)
    if phoneme is None:
        return not_satisfied(f"'{subject[0]}' is not a registered phoneme", subject)

    member = "is" if phoneme.guna else "is not"
    return create_derivation(phoneme.guna, f"{phoneme.iast} {member} one of a, e, o", "1.1.2", subject)


def is_guna(p: PhonemeLike) -> bool:
    return is_guna_verdict(p).holds


# =============================================================================
# PROSODIC WEIGHT (1.4.10 - 1.4.12)
# =============================================================================

class Weight(Enum):
    LAGHU = "laghu"   # light
    GURU = "guru"     # heavy


def _weigh(vowel: PhonemeLike, followed_by_cluster: bool) -> tuple[Optional[Weight], Verdict]:
    phoneme = _resolve(vowel)
    label = _label(vowel)
    if phoneme is None:
        return None, not_satisfied(f"'{label}' is not a registered phoneme", (label,))
    if not phoneme.is_vowel:
        return None, not_satisfied(f"{phoneme.iast} is not a vowel", (label,))

    # A long vowel is heavy regardless of what follows
    if phoneme.length in (Length.LONG, Length.DIPHTHONG):
        return Weight.GURU, create_derivation(
            True, f"{phoneme.iast} is long", "1.4.12", (label, Weight.GURU.value)
        )
    if followed_by_cluster:
        return Weight.GURU, create_derivation(
            True, f"{phoneme.iast} precedes a consonant cluster", "1.4.11", (label, Weight.GURU.value)
        )
    return Weight.LAGHU, create_derivation(
        True, f"{phoneme.iast} is short", "1.4.10", (label, Weight.LAGHU.value)
    )


def prosodic_weight(vowel: PhonemeLike, followed_by_cluster: bool = False) -> Optional[Weight]:
    """
    Laghu/guru weight of a vowel.

    Returns None for consonants, marks and unknown input.
    """
    return _weigh(vowel, followed_by_cluster)[0]


def prosodic_weight_verdict(vowel: PhonemeLike, followed_by_cluster: bool = False) -> Verdict:
    """Holds when a weight was assigned; the deciding sutra is the principle."""
    return _weigh(vowel, followed_by_cluster)[1]


def syllable_weights(word: str) -> tuple[Weight, ...]:
    """
    Weight of every vowel in a word, left to right.

    A cluster is two or more consonants before the next vowel inside
    the word. Marks (anusvara, visarga) are not consonants and do not
    count. Returns an empty tuple if the word does not segment cleanly.
    """
    segmentation = PHONEME_TABLE.segment(word)
    if not segmentation.complete:
        return ()

    phonemes = segmentation.phonemes
    weights = []
    for index, phoneme in enumerate(phonemes):
        if not phoneme.is_vowel:
            continue
        cluster = _consonants_before_vowel(phonemes[index + 1:]) >= 2
        weights.append(prosodic_weight(phoneme, followed_by_cluster=cluster))
    return tuple(weights)


def _consonants_before_vowel(phonemes: tuple[Phoneme, ...]) -> int:
    consonants = 0
    for phoneme in phonemes:
        if phoneme.is_vowel:
            break
        if phoneme.is_consonant:
            consonants += 1
    return consonants


def begins_with_cluster(text: Optional[str]) -> bool:
    """
    True when two or more consonants open the text (samyoga, 1.1.7).

    Used to weigh a vowel from what follows it. Unsegmentable or empty
    text is never a cluster.
    """
    segmentation = PHONEME_TABLE.segment(text or "")
    if not segmentation.complete:
        return False
    return _consonants_before_vowel(segmentation.phonemes) >= 2


# =============================================================================
# POSITIONAL SEGMENTS (1.1.64, 1.1.65)
# =============================================================================

def _segment_or_none(word: str) -> Optional[tuple[Phoneme, ...]]:
    segmentation = PHONEME_TABLE.segment(word or "")
    if not segmentation.complete or not segmentation.phonemes:
        return None
    return segmentation.phonemes


def ti_segment(word: str) -> str:
    """
    The ti of a word: everything from its last vowel to the end.

    Returned in IAST. Empty when the word has no vowel or does not
    segment cleanly.
    """
    phonemes = _segment_or_none(word)
    if phonemes is None:
        return ""
    for index in range(len(phonemes) - 1, -1, -1):
        if phonemes[index].is_vowel:
            return "".join(p.iast for p in phonemes[index:])
    return ""


def upadha(word: str) -> Optional[Phoneme]:
    """The penultimate phoneme of a word, or None for shorter input."""
    phonemes = _segment_or_none(word)
    if phonemes is None or len(phonemes) < 2:
        return None
    return phonemes[-2]
