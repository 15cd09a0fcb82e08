"""
Phoneme Table — static articulatory features for every Sanskrit phoneme.

The table is the single source of truth for phonology. Higher-level
predicates (savarna, anunasika, vrddhi, guna, laghu/guru) live in the
classifier and are derived from these features only.

INVARIANTS:
    1. Exactly one canonical entry per phoneme
    2. Canonical IAST and Devanagari forms map 1:1; the table refuses
       to build otherwise
    3. Built once at import, never mutated
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from ..domain import UnknownPhonemeError


# =============================================================================
# FEATURE ENUMS
# =============================================================================

class Category(Enum):
    VOWEL = "vowel"
    CONSONANT = "consonant"
    MARK = "mark"           # ayogavaha: anusvara, visarga, candrabindu


class Place(Enum):
    VELAR = "velar"
    PALATAL = "palatal"
    RETROFLEX = "retroflex"
    DENTAL = "dental"
    LABIAL = "labial"
    GLOTTAL = "glottal"
    PALATO_VELAR = "palato_velar"   # e, ai
    LABIO_VELAR = "labio_velar"     # o, au
    NASAL = "nasal"                 # anusvara, candrabindu


class Manner(Enum):
    STOP = "stop"
    NASAL = "nasal"
    SEMIVOWEL = "semivowel"
    FRICATIVE = "fricative"
    VOWEL = "vowel"


class Length(Enum):
    SHORT = "short"
    LONG = "long"
    DIPHTHONG = "diphthong"
    NONE = "none"


# =============================================================================
# PHONEME
# =============================================================================

@dataclass(frozen=True)
class Phoneme:
    """One canonical phoneme with its features."""
    iast: str
    devanagari: str
    category: Category
    place: Place
    manner: Optional[Manner]
    length: Length = Length.NONE
    nasal: bool = False
    vrddhi: bool = False
    guna: bool = False
    voiced: bool = False
    aspirated: bool = False
    matra: Optional[str] = None

    @property
    def is_vowel(self) -> bool:
        return self.category == Category.VOWEL

    @property
    def is_consonant(self) -> bool:
        return self.category == Category.CONSONANT

    @property
    def is_mark(self) -> bool:
        return self.category == Category.MARK

    def __str__(self) -> str:
        return self.iast


def _vowel(iast, deva, matra, place, length, vrddhi=False, guna=False) -> Phoneme:
    return Phoneme(
        iast=iast,
        devanagari=deva,
        category=Category.VOWEL,
        place=place,
        manner=Manner.VOWEL,
        length=length,
        vrddhi=vrddhi,
        guna=guna,
        voiced=True,
        matra=matra,
    )


def _consonant(iast, deva, place, manner, voiced=False, aspirated=False) -> Phoneme:
    return Phoneme(
        iast=iast,
        devanagari=deva,
        category=Category.CONSONANT,
        place=place,
        manner=manner,
        nasal=manner == Manner.NASAL,
        voiced=voiced,
        aspirated=aspirated,
    )


def _varga(place: Place, iast: tuple[str, ...], deva: str) -> list[Phoneme]:
    """Five stops of one place: voiceless, aspirate, voiced, voiced aspirate, nasal."""
    voicing = [(False, False), (False, True), (True, False), (True, True)]
    stops = [
        _consonant(i, d, place, Manner.STOP, voiced=v, aspirated=a)
        for i, d, (v, a) in zip(iast[:4], deva[:4], voicing)
    ]
    nasal = _consonant(iast[4], deva[4], place, Manner.NASAL, voiced=True)
    return stops + [nasal]


# =============================================================================
# CANONICAL DATA
# =============================================================================

VOWELS = [
    _vowel("a", "अ", None, Place.VELAR, Length.SHORT, guna=True),
    _vowel("ā", "आ", "ा", Place.VELAR, Length.LONG, vrddhi=True),
    _vowel("i", "इ", "ि", Place.PALATAL, Length.SHORT),
    _vowel("ī", "ई", "ी", Place.PALATAL, Length.LONG),
    _vowel("u", "उ", "ु", Place.LABIAL, Length.SHORT),
    _vowel("ū", "ऊ", "ू", Place.LABIAL, Length.LONG),
    _vowel("ṛ", "ऋ", "ृ", Place.RETROFLEX, Length.SHORT),
    _vowel("ṝ", "ॠ", "ॄ", Place.RETROFLEX, Length.LONG),
    _vowel("ḷ", "ऌ", "ॢ", Place.DENTAL, Length.SHORT),
    _vowel("ḹ", "ॡ", "ॣ", Place.DENTAL, Length.LONG),
    _vowel("e", "ए", "े", Place.PALATO_VELAR, Length.DIPHTHONG, guna=True),
    _vowel("ai", "ऐ", "ै", Place.PALATO_VELAR, Length.DIPHTHONG, vrddhi=True),
    _vowel("o", "ओ", "ो", Place.LABIO_VELAR, Length.DIPHTHONG, guna=True),
    _vowel("au", "औ", "ौ", Place.LABIO_VELAR, Length.DIPHTHONG, vrddhi=True),
]

CONSONANTS = (
    _varga(Place.VELAR, ("k", "kh", "g", "gh", "ṅ"), "कखगघङ")
    + _varga(Place.PALATAL, ("c", "ch", "j", "jh", "ñ"), "चछजझञ")
    + _varga(Place.RETROFLEX, ("ṭ", "ṭh", "ḍ", "ḍh", "ṇ"), "टठडढण")
    + _varga(Place.DENTAL, ("t", "th", "d", "dh", "n"), "तथदधन")
    + _varga(Place.LABIAL, ("p", "ph", "b", "bh", "m"), "पफबभम")
    + [
        _consonant("y", "य", Place.PALATAL, Manner.SEMIVOWEL, voiced=True),
        _consonant("r", "र", Place.RETROFLEX, Manner.SEMIVOWEL, voiced=True),
        _consonant("l", "ल", Place.DENTAL, Manner.SEMIVOWEL, voiced=True),
        _consonant("v", "व", Place.LABIAL, Manner.SEMIVOWEL, voiced=True),
        _consonant("ś", "श", Place.PALATAL, Manner.FRICATIVE),
        _consonant("ṣ", "ष", Place.RETROFLEX, Manner.FRICATIVE),
        _consonant("s", "स", Place.DENTAL, Manner.FRICATIVE),
        _consonant("h", "ह", Place.GLOTTAL, Manner.FRICATIVE, voiced=True),
    ]
)

MARKS = [
    Phoneme("ṃ", "ं", Category.MARK, Place.NASAL, None, nasal=True),
    Phoneme("ḥ", "ः", Category.MARK, Place.GLOTTAL, None),
    Phoneme("m̐", "ँ", Category.MARK, Place.NASAL, None, nasal=True),
]

ANUSVARA = "ṃ"

# Accepted non-canonical IAST spellings
IAST_VARIANTS = {
    "ṁ": "ṃ",
    "r̥": "ṛ",
    "r̥̄": "ṝ",
    "l̥": "ḷ",
    "l̥̄": "ḹ",
}

VIRAMA = "्"
DEVANAGARI_BLOCK = range(0x0900, 0x0980)


def _nfc(text: str) -> str:
    return unicodedata.normalize("NFC", text)


# =============================================================================
# TABLE
# =============================================================================

class PhonemeTable:
    """
    Immutable lookup over the canonical phonemes.

    Lookup accepts canonical IAST, IAST variants, Devanagari independent
    vowels, Devanagari vowel signs and consonants with or without virama.
    """

    def __init__(self, phonemes: Iterable[Phoneme], variants: Optional[Mapping[str, str]] = None):
        by_iast: dict[str, Phoneme] = {}
        by_devanagari: dict[str, Phoneme] = {}
        by_matra: dict[str, Phoneme] = {}

        for phoneme in phonemes:
            iast = _nfc(phoneme.iast)
            deva = _nfc(phoneme.devanagari)
            if iast in by_iast:
                raise ValueError(f"Duplicate IAST entry: {iast}")
            if deva in by_devanagari:
                raise ValueError(
                    f"Devanagari {deva} maps to both {by_devanagari[deva].iast} and {iast}"
                )
            by_iast[iast] = phoneme
            by_devanagari[deva] = phoneme
            if phoneme.matra:
                by_matra[_nfc(phoneme.matra)] = phoneme

        aliases: dict[str, Phoneme] = {}
        for variant, canonical in (variants or {}).items():
            target = by_iast.get(_nfc(canonical))
            if target is None:
                raise ValueError(f"Variant {variant!r} points at unknown phoneme {canonical!r}")
            aliases[_nfc(variant)] = target

        self._by_iast = MappingProxyType(by_iast)
        self._by_devanagari = MappingProxyType(by_devanagari)
        self._by_matra = MappingProxyType(by_matra)
        self._aliases = MappingProxyType(aliases)

        # Every IAST spelling the segmenter may match, longest first
        spellings = set(by_iast) | set(aliases)
        self._iast_spellings = tuple(sorted(spellings, key=len, reverse=True))

    def __len__(self) -> int:
        return len(self._by_iast)

    def __iter__(self) -> Iterator[Phoneme]:
        return iter(self._by_iast.values())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.lookup(symbol) is not None

    def lookup(self, symbol: str) -> Optional[Phoneme]:
        """Return the phoneme for a single symbol, or None."""
        if not isinstance(symbol, str):
            return None
        key = _nfc(symbol).strip()
        if not key:
            return None

        found = (
            self._by_iast.get(key)
            or self._by_iast.get(key.lower())
            or self._aliases.get(key.lower())
            or self._by_devanagari.get(key)
            or self._by_matra.get(key)
        )
        if found is not None:
            return found

        # Consonant written with an explicit virama
        if len(key) == 2 and key.endswith(VIRAMA):
            candidate = self._by_devanagari.get(key[0])
            if candidate is not None and candidate.is_consonant:
                return candidate
        return None

    def get(self, symbol: str) -> Phoneme:
        """
        Strict lookup.

        Raises:
            UnknownPhonemeError: If the symbol is not registered
        """
        phoneme = self.lookup(symbol)
        if phoneme is None:
            raise UnknownPhonemeError(f"'{symbol}' is not a registered phoneme", str(symbol))
        return phoneme

    def to_devanagari(self, iast: str) -> Optional[str]:
        phoneme = self.lookup(iast)
        return phoneme.devanagari if phoneme else None

    def to_iast(self, devanagari: str) -> Optional[str]:
        phoneme = self.lookup(devanagari)
        return phoneme.iast if phoneme else None

    def of_category(self, category: Category) -> tuple[Phoneme, ...]:
        return tuple(p for p in self if p.category == category)

    # -------------------------------------------------------------------------
    # Segmentation
    # -------------------------------------------------------------------------

    def segment(self, word: str) -> Segmentation:
        """
        Split a word into registered phonemes.

        IAST is matched longest-first, so "kh" and "ai" are single
        phonemes. Devanagari consonants carry an inherent "a" unless
        followed by a virama or a vowel sign. Anything unmatched is
        collected in ``unrecognized``.
        """
        text = _nfc(word).strip() if isinstance(word, str) else ""
        phonemes: list[Phoneme] = []
        unrecognized: list[str] = []
        inherent_a = self._by_iast["a"]

        i = 0
        while i < len(text):
            char = text[i]

            if ord(char) in DEVANAGARI_BLOCK:
                phoneme = self._by_devanagari.get(char) or self._by_matra.get(char)
                if phoneme is None:
                    unrecognized.append(char)
                    i += 1
                    continue

                phonemes.append(phoneme)
                i += 1
                if phoneme.is_consonant:
                    following = text[i] if i < len(text) else ""
                    if following == VIRAMA:
                        i += 1
                    elif following in self._by_matra:
                        phonemes.append(self._by_matra[following])
                        i += 1
                    else:
                        phonemes.append(inherent_a)
                continue

            lowered = text[i:].lower()
            for spelling in self._iast_spellings:
                if lowered.startswith(spelling):
                    phonemes.append(self._by_iast.get(spelling) or self._aliases[spelling])
                    i += len(spelling)
                    break
            else:
                unrecognized.append(char)
                i += 1

        return Segmentation(tuple(phonemes), tuple(unrecognized))


@dataclass(frozen=True)
class Segmentation:
    """Result of segmenting a word."""
    phonemes: tuple[Phoneme, ...]
    unrecognized: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return bool(self.phonemes) and not self.unrecognized

    @property
    def iast(self) -> str:
        return "".join(p.iast for p in self.phonemes)


PHONEME_TABLE = PhonemeTable(VOWELS + CONSONANTS + MARKS, IAST_VARIANTS)


def lookup(symbol: str) -> Optional[Phoneme]:
    """Module-level lookup against the canonical table."""
    return PHONEME_TABLE.lookup(symbol)


def segment(word: str) -> Segmentation:
    """Module-level segmentation against the canonical table."""
    return PHONEME_TABLE.segment(word)
