"""
Core corpus: the sutras the engine itself leans on.

Each entry is an already-validated record in the shape accepted by
RuleDefinition.from_mapping. Conditions are thin predicates over the
unit and the caller's annotations; the heavy lifting lives in the
phonology package.

Annotations read by these conditions:
    other       — second phoneme of a pair (1.1.9, 1.1.10)
    dual        — the form is a dual ending (1.1.11)
    word        — the whole word a portion is taken from (1.1.64, 1.1.65)
    cluster     — overrides the cluster read from `following` (1.4.11)
    upadesha    — the form is cited as taught (1.3.3)
    pratyaya    — the form is an affix (1.3.8)
    taddhita    — the affix is a taddhita (1.3.8)
    is_root     — the unit is a verbal root (1.3.1)
    root        — verbal root in IAST, e.g. "kṛ"
    prefix      — preverb in IAST, e.g. "anu"
    markers     — it-markers of a root or affix, e.g. ("ṅ",)
    anudatta    — the root carries an anudatta marker
    svarita     — the root carries a svarita marker
    fruit       — "agent" when the result of the action accrues to the agent
    prayoga     — "kartari" (active, the default) or "karmani"
    desiderative
    ending      — "sup" or "tiṅ"
    roles       — semantic roles of a nominal: source, recipient,
                  instrument, locus, object, agent
    asattva     — the particle does not denote a substance (default True)
    with_verb   — the particle is construed with a verb
"""

from __future__ import annotations

from typing import Any

from ..domain import EvaluationContext, Unit
from ..phonology.classifier import (
    begins_with_cluster,
    is_anunasika_verdict,
    is_guna_verdict,
    is_savarna,
    is_savarna_verdict,
    is_vrddhi_verdict,
    ti_segment,
    upadha,
)
from ..phonology.pratyahara import in_pratyahara
from ..phonology.table import PHONEME_TABLE, Category, Length
from ..resolution.substitution import sthanivadbhava_for_dvirvacana_verdict
from ..verdict import Verdict, create_rule_verdict
from .registry import RuleRegistry, load_rule_corpus


# =============================================================================
# CONDITION HELPERS
# =============================================================================

def _annotation_set(context: EvaluationContext, key: str) -> frozenset:
    value = context.annotation(key, ())
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(value or ())


def _root_is(context: EvaluationContext, *roots: str) -> bool:
    return context.annotation("root") in roots


def _prefix_in(context: EvaluationContext, *prefixes: str) -> bool:
    return context.annotation("prefix") in prefixes


def _kartari(context: EvaluationContext) -> bool:
    return context.annotation("prayoga", "kartari") == "kartari"


def _first_phoneme(text: str):
    segmentation = PHONEME_TABLE.segment(text or "")
    return segmentation.phonemes[0] if segmentation.complete else None


def _last_phoneme(text: str):
    segmentation = PHONEME_TABLE.segment(text or "")
    return segmentation.phonemes[-1] if segmentation.complete else None


def _is_vowel_consonant_pair(first, second) -> bool:
    return {first.category, second.category} == {Category.VOWEL, Category.CONSONANT}


# =============================================================================
# SAMJNA CONDITIONS (1.1, 1.4)
# =============================================================================

def _vrddhi(unit: Unit, context: EvaluationContext) -> Verdict:
    return is_vrddhi_verdict(unit.text)


def _guna(unit: Unit, context: EvaluationContext) -> Verdict:
    return is_guna_verdict(unit.text)


def _anunasika(unit: Unit, context: EvaluationContext) -> Verdict:
    return is_anunasika_verdict(unit.text)


def _same_place_and_effort(unit: Unit, context: EvaluationContext) -> Verdict:
    """
    tulyasyaprayatnam: same place and, within one category, same effort.

    A vowel and a consonant sharing a place still match here; 1.1.10
    is what keeps them apart.
    """
    other = str(context.annotation("other", ""))
    subject = (unit.text, other)
    first = PHONEME_TABLE.lookup(unit.text)
    second = PHONEME_TABLE.lookup(other)
    if first is None or second is None:
        return create_rule_verdict(False, "unknown phoneme in the pair", "1.1.9", subject)

    if first.category == second.category:
        return is_savarna_verdict(first, second)

    if not _is_vowel_consonant_pair(first, second):
        reason = f"{first.category.value} and {second.category.value} share no effort"
        return create_rule_verdict(False, reason, "1.1.9", subject)

    holds = first.place == second.place
    if holds:
        reason = f"vowel and consonant share the {first.place.value} place"
    else:
        reason = f"place differs: {first.place.value} vs {second.place.value}"
    return create_rule_verdict(holds, reason, "1.1.9", subject)


def _vowel_and_consonant(unit: Unit, context: EvaluationContext) -> bool:
    first = PHONEME_TABLE.lookup(unit.text)
    second = PHONEME_TABLE.lookup(context.annotation("other", ""))
    if first is None or second is None:
        return False
    return _is_vowel_consonant_pair(first, second)


PRAGRHYA_FINALS = ("ī", "ū", "e")


def _dual_in_i_u_e(unit: Unit, context: EvaluationContext) -> bool:
    last = _last_phoneme(unit.text)
    return bool(context.annotation("dual")) and last is not None and last.iast in PRAGRHYA_FINALS


def _ti(unit: Unit, context: EvaluationContext) -> Verdict:
    """The unit is the portion of `word` from its last vowel onward."""
    word = str(context.annotation("word", ""))
    subject = (unit.text, word)
    if not word:
        return create_rule_verdict(False, "no word annotated", "1.1.64", subject)

    ti = ti_segment(word)
    holds = bool(ti) and PHONEME_TABLE.segment(unit.text).iast == ti
    return create_rule_verdict(holds, f"ti of {word} is '{ti}'", "1.1.64", subject)


def _upadha(unit: Unit, context: EvaluationContext) -> Verdict:
    """The unit is the phoneme just before the last one of `word`."""
    word = str(context.annotation("word", ""))
    subject = (unit.text, word)
    penultimate = upadha(word) if word else None
    if penultimate is None:
        return create_rule_verdict(False, "word has no penultimate phoneme", "1.1.65", subject)

    holds = PHONEME_TABLE.lookup(unit.text) == penultimate
    return create_rule_verdict(holds, f"upadha of {word} is {penultimate.iast}", "1.1.65", subject)


def _short_vowel(unit: Unit, context: EvaluationContext) -> bool:
    phoneme = PHONEME_TABLE.lookup(unit.text)
    return phoneme is not None and phoneme.is_vowel and phoneme.length == Length.SHORT


def _short_before_cluster(unit: Unit, context: EvaluationContext) -> bool:
    """An explicit `cluster` annotation overrides what `following` shows."""
    if not _short_vowel(unit, context):
        return False
    cluster = context.annotation("cluster")
    if cluster is None:
        return begins_with_cluster(context.following)
    return bool(cluster)


def _long_vowel(unit: Unit, context: EvaluationContext) -> bool:
    phoneme = PHONEME_TABLE.lookup(unit.text)
    return phoneme is not None and phoneme.length in (Length.LONG, Length.DIPHTHONG)


def _root(unit: Unit, context: EvaluationContext) -> bool:
    return bool(context.annotation("is_root"))


def _pada(unit: Unit, context: EvaluationContext) -> bool:
    return context.annotation("ending") in ("sup", "tiṅ")


def _role(role: str):
    def condition(unit: Unit, context: EvaluationContext) -> bool:
        return role in _annotation_set(context, "roles")
    condition.__name__ = f"_role_{role}"
    return condition


CA_ADI = ("ca", "vā", "ha", "aha", "eva", "evam", "nūnam", "śaśvat", "yugapat", "bhūyas", "sūpat")
PRA_ADI = (
    "pra", "parā", "apa", "sam", "anu", "ava", "nis", "nir", "dus", "dur", "vi",
    "āṅ", "ā", "ni", "adhi", "api", "ati", "su", "ud", "abhi", "prati", "pari", "upa",
)

TIN_PARASMAIPADA = ("tip", "tas", "jhi", "sip", "thas", "tha", "mip", "vas", "mas")
TIN_ATMANEPADA = ("ta", "ātām", "jha", "thās", "āthām", "dhvam", "iṭ", "vahi", "mahiṅ")


def _ca_adi(unit: Unit, context: EvaluationContext) -> bool:
    return unit.text in CA_ADI and bool(context.annotation("asattva", True))


def _pra_adi(unit: Unit, context: EvaluationContext) -> bool:
    return unit.text in PRA_ADI and bool(context.annotation("asattva", True))


def _upasarga(unit: Unit, context: EvaluationContext) -> bool:
    return unit.text in PRA_ADI and bool(context.annotation("with_verb"))


def _tin(unit: Unit, context: EvaluationContext) -> bool:
    return unit.text in TIN_PARASMAIPADA + TIN_ATMANEPADA


def _tan_or_ana(unit: Unit, context: EvaluationContext) -> bool:
    return unit.text in TIN_ATMANEPADA or unit.text in ("śānac", "kānac")


# =============================================================================
# IT-MARKER CONDITIONS (1.3.3 - 1.3.9)
# =============================================================================

LASAKU = ("l", "ś", "k", "kh", "g", "gh", "ṅ")


def _final_consonant_in_upadesha(unit: Unit, context: EvaluationContext) -> bool:
    last = _last_phoneme(unit.text)
    return bool(context.annotation("upadesha")) and last is not None and last.is_consonant


def _initial_lasaku_of_affix(unit: Unit, context: EvaluationContext) -> bool:
    if not context.annotation("pratyaya") or context.annotation("taddhita"):
        return False
    first = _first_phoneme(unit.text)
    return first is not None and first.iast in LASAKU


def elide_it_markers(unit: Unit, context: EvaluationContext) -> str:
    """
    The form with its annotated it-markers dropped from either edge.

    A marker is removed only where it stands at the start or the end
    of the form, and never when it is the whole form. Text that does
    not segment cleanly comes back unchanged.
    """
    segmentation = PHONEME_TABLE.segment(unit.text)
    if not segmentation.complete:
        return unit.text

    phonemes = list(segmentation.phonemes)
    for marker in sorted(_annotation_set(context, "markers")):
        marker_phonemes = list(PHONEME_TABLE.segment(marker).phonemes)
        size = len(marker_phonemes)
        if not size or size >= len(phonemes):
            continue
        if phonemes[:size] == marker_phonemes:
            del phonemes[:size]
        elif phonemes[-size:] == marker_phonemes:
            del phonemes[-size:]
    return "".join(p.iast for p in phonemes)


def _carries_it_markers(unit: Unit, context: EvaluationContext) -> bool:
    segmentation = PHONEME_TABLE.segment(unit.text)
    return segmentation.complete and elide_it_markers(unit, context) != segmentation.iast


# =============================================================================
# ATIDESHA CONDITIONS (1.1.56 - 1.1.59)
# =============================================================================

def _pending_substitution(unit: Unit, context: EvaluationContext) -> bool:
    return context.substitution is not None


def _vowel_substitution(unit: Unit, context: EvaluationContext) -> bool:
    record = context.substitution
    if record is None:
        return False
    original = PHONEME_TABLE.lookup(record.original.text)
    return original is not None and original.is_vowel


def _dvirvacana(unit: Unit, context: EvaluationContext) -> Verdict:
    record = context.substitution
    original = record if record is not None else unit
    return sthanivadbhava_for_dvirvacana_verdict(original, context.reduplication, context.following)


# =============================================================================
# VOICE CONDITIONS (1.3)
# =============================================================================

def _anudatta_or_nit(unit: Unit, context: EvaluationContext) -> bool:
    return bool(context.annotation("anudatta")) or "ṅ" in _annotation_set(context, "markers")


def _svarita_or_nit_for_agent(unit: Unit, context: EvaluationContext) -> bool:
    marked = bool(context.annotation("svarita")) or "ñ" in _annotation_set(context, "markers")
    return marked and context.annotation("fruit") == "agent"


def _kram_without_prefix(unit: Unit, context: EvaluationContext) -> bool:
    return _root_is(context, "kram") and not context.annotation("prefix")


def _desiderative_of_cognition(unit: Unit, context: EvaluationContext) -> bool:
    return bool(context.annotation("desiderative")) and _root_is(context, "jñā", "śru", "smṛ", "dṛś")


def _anu_jna_desiderative(unit: Unit, context: EvaluationContext) -> bool:
    return bool(context.annotation("desiderative")) and _root_is(context, "jñā") and _prefix_in(context, "anu")


def _remainder_active(unit: Unit, context: EvaluationContext) -> bool:
    """sesat: active voice for roots not claimed by an atmanepada rule."""
    if not context.annotation("root") or not _kartari(context):
        return False
    claimed_by_desiderative = (
        _desiderative_of_cognition(unit, context)
        and not _anu_jna_desiderative(unit, context)
    )
    return not (
        _anudatta_or_nit(unit, context)
        or _svarita_or_nit_for_agent(unit, context)
        or claimed_by_desiderative
    )


def _anu_para_kr(unit: Unit, context: EvaluationContext) -> bool:
    return _root_is(context, "kṛ") and _prefix_in(context, "anu", "parā")


def _abhi_prati_ati_ksip(unit: Unit, context: EvaluationContext) -> bool:
    return _root_is(context, "kṣip") and _prefix_in(context, "abhi", "prati", "ati")


def _upa_ram(unit: Unit, context: EvaluationContext) -> bool:
    return _root_is(context, "ram") and _prefix_in(context, "upa")


# =============================================================================
# SANDHI CONDITIONS (6.1)
# =============================================================================

YAN_SUBSTITUTES = {"i": "y", "ī": "y", "u": "v", "ū": "v", "ṛ": "r", "ṝ": "r", "ḷ": "l", "ḹ": "l"}
DIRGHA_SUBSTITUTES = {
    "a": "ā", "ā": "ā", "i": "ī", "ī": "ī", "u": "ū", "ū": "ū",
    "ṛ": "ṝ", "ṝ": "ṝ", "ḷ": "ḹ", "ḹ": "ḹ",
}


def _ik_before_vowel(unit: Unit, context: EvaluationContext) -> bool:
    following = _first_phoneme(context.following)
    return in_pratyahara(unit.text, "ik") and following is not None and following.is_vowel


def _ak_before_savarna(unit: Unit, context: EvaluationContext) -> bool:
    following = _first_phoneme(context.following)
    if following is None or not in_pratyahara(unit.text, "ak"):
        return False
    return is_savarna(unit.text, following)


# =============================================================================
# CORE SUTRAS
# =============================================================================

CORE_SUTRAS: tuple[dict[str, Any], ...] = (
    # --- 1.1: designations and interpretive rules ---
    {"position": "1.1.1", "kind": "samjna", "name": "vṛddhi", "text": "vṛddhir ādaic",
     "outcome": ("designation", "vṛddhi"), "al_vidhi": True, "condition": _vrddhi},
    {"position": "1.1.2", "kind": "samjna", "name": "guṇa", "text": "adeṅ guṇaḥ",
     "outcome": ("designation", "guṇa"), "al_vidhi": True, "condition": _guna},
    {"position": "1.1.3", "kind": "paribhasha", "name": "ik-substituend", "text": "iko guṇavṛddhī"},
    {"position": "1.1.8", "kind": "samjna", "name": "anunāsika", "text": "mukhanāsikāvacano 'nunāsikaḥ",
     "outcome": ("designation", "anunāsika"), "al_vidhi": True, "condition": _anunasika},
    {"position": "1.1.9", "kind": "samjna", "name": "savarṇa", "text": "tulyāsyaprayatnaṃ savarṇam",
     "outcome": ("designation", "savarṇa"), "al_vidhi": True, "condition": _same_place_and_effort},
    {"position": "1.1.10", "kind": "nisedha", "name": "no vowel-consonant savarṇa", "text": "nājjhalau",
     "blocks": ("1.1.9",), "al_vidhi": True, "condition": _vowel_and_consonant},
    {"position": "1.1.11", "kind": "samjna", "name": "pragṛhya", "text": "īdūded dvivacanaṃ pragṛhyam",
     "outcome": ("designation", "pragṛhya"), "condition": _dual_in_i_u_e},
    {"position": "1.1.56", "kind": "atidesha", "name": "sthānivadbhāva", "text": "sthānivad ādeśo 'nalvidhau",
     "outcome": ("transfer", True), "condition": _pending_substitution},
    {"position": "1.1.57", "kind": "atidesha", "name": "vowel substitute as original",
     "text": "acaḥ parasmin pūrvavidhau", "outcome": ("transfer", True), "condition": _vowel_substitution},
    {"position": "1.1.59", "kind": "atidesha", "name": "sthānivadbhāva in reduplication",
     "text": "dvirvacane 'ci", "outcome": ("transfer", True), "condition": _dvirvacana},
    {"position": "1.1.64", "kind": "samjna", "name": "ṭi", "text": "aco 'ntyādi ṭi",
     "outcome": ("designation", "ṭi"), "condition": _ti},
    {"position": "1.1.65", "kind": "samjna", "name": "upadhā", "text": "alo 'ntyāt pūrva upadhā",
     "outcome": ("designation", "upadhā"), "al_vidhi": True, "condition": _upadha},
    {"position": "1.1.71", "kind": "paribhasha", "name": "pratyāhāra", "text": "ādir antyena sahetā"},

    # --- 1.3: roots and voice ---
    {"position": "1.3.1", "kind": "samjna", "name": "dhātu", "text": "bhūvādayo dhātavaḥ",
     "outcome": ("designation", "dhātu"), "condition": _root},
    {"position": "1.3.3", "kind": "samjna", "name": "final consonant is it", "text": "halantyam",
     "outcome": ("designation", "it"), "al_vidhi": True, "condition": _final_consonant_in_upadesha},
    {"position": "1.3.8", "kind": "samjna", "name": "initial l, ś, ku of an affix is it", "text": "laśakv ataddhite",
     "outcome": ("designation", "it"), "al_vidhi": True, "condition": _initial_lasaku_of_affix},
    {"position": "1.3.9", "kind": "vidhi", "name": "elision of it", "text": "tasya lopaḥ",
     "outcome": ("substitution", elide_it_markers), "condition": _carries_it_markers},
    {"position": "1.3.12", "kind": "vidhi", "name": "ātmanepada for anudātta/ṅit", "text": "anudāttaṅita ātmanepadam",
     "outcome": ("voice", "ātmanepada"), "condition": _anudatta_or_nit},
    {"position": "1.3.43", "kind": "vidhi", "name": "kram optionally ātmanepada", "text": "anupasargād vā",
     "outcome": ("voice", "ātmanepada"), "optional": True, "condition": _kram_without_prefix},
    {"position": "1.3.57", "kind": "vidhi", "name": "desiderative of jñā etc.", "text": "jñāśrusmṛdṛśāṃ sanaḥ",
     "outcome": ("voice", "ātmanepada"), "condition": _desiderative_of_cognition},
    {"position": "1.3.58", "kind": "nisedha", "name": "not jñā after anu", "text": "nānor jñaḥ",
     "blocks": ("1.3.57",), "condition": _anu_jna_desiderative},
    {"position": "1.3.72", "kind": "vidhi", "name": "ātmanepada for svarita/ñit", "text": "svaritañitaḥ kartrabhiprāye kriyāphale",
     "outcome": ("voice", "ātmanepada"), "condition": _svarita_or_nit_for_agent},
    {"position": "1.3.78", "kind": "vidhi", "name": "default parasmaipada", "text": "śeṣāt kartari parasmaipadam",
     "outcome": ("voice", "parasmaipada"), "condition": _remainder_active},
    {"position": "1.3.79", "kind": "vidhi", "name": "kṛ after anu/parā", "text": "anuparābhyāṃ kṛñaḥ",
     "outcome": ("voice", "parasmaipada"), "condition": _anu_para_kr},
    {"position": "1.3.80", "kind": "vidhi", "name": "kṣip after abhi/prati/ati", "text": "abhipratyatibhyaḥ kṣipaḥ",
     "outcome": ("voice", "parasmaipada"), "condition": _abhi_prati_ati_ksip},
    {"position": "1.3.84", "kind": "vidhi", "name": "ram after upa", "text": "uparamāt",
     "outcome": ("voice", "parasmaipada"), "condition": _upa_ram},

    # --- 1.4: governing headings, weight, kāraka, particles, endings ---
    {"position": "1.4.1", "kind": "adhikara", "name": "one designation", "text": "ā kaḍārād ekā saṃjñā",
     "governs": ("1.4.1", "2.2.38")},
    {"position": "1.4.2", "kind": "paribhasha", "name": "vipratiṣedha", "text": "vipratiṣedhe paraṃ kāryam"},
    {"position": "1.4.10", "kind": "samjna", "name": "laghu", "text": "hrasvaṃ laghu",
     "outcome": ("designation", "laghu"), "al_vidhi": True, "condition": _short_vowel},
    {"position": "1.4.11", "kind": "samjna", "name": "guru before cluster", "text": "saṃyoge guru",
     "outcome": ("designation", "guru"), "al_vidhi": True, "condition": _short_before_cluster},
    {"position": "1.4.12", "kind": "samjna", "name": "guru when long", "text": "dīrghaṃ ca",
     "outcome": ("designation", "guru"), "al_vidhi": True, "condition": _long_vowel},
    {"position": "1.4.14", "kind": "samjna", "name": "pada", "text": "suptiṅantaṃ padam",
     "outcome": ("designation", "pada"), "condition": _pada},
    {"position": "1.4.23", "kind": "adhikara", "name": "kāraka", "text": "kārake",
     "governs": ("1.4.23", "1.4.55")},
    {"position": "1.4.24", "kind": "samjna", "name": "apādāna", "text": "dhruvam apāye 'pādānam",
     "outcome": ("case", "apādāna"), "condition": _role("source")},
    {"position": "1.4.32", "kind": "samjna", "name": "sampradāna", "text": "karmaṇā yam abhipraiti sa sampradānam",
     "outcome": ("case", "sampradāna"), "condition": _role("recipient")},
    {"position": "1.4.42", "kind": "samjna", "name": "karaṇa", "text": "sādhakatamaṃ karaṇam",
     "outcome": ("case", "karaṇa"), "condition": _role("instrument")},
    {"position": "1.4.45", "kind": "samjna", "name": "adhikaraṇa", "text": "ādhāro 'dhikaraṇam",
     "outcome": ("case", "adhikaraṇa"), "condition": _role("locus")},
    {"position": "1.4.49", "kind": "samjna", "name": "karman", "text": "kartur īpsitatamaṃ karma",
     "outcome": ("case", "karman"), "condition": _role("object")},
    {"position": "1.4.54", "kind": "samjna", "name": "kartṛ", "text": "svatantraḥ kartā",
     "outcome": ("case", "kartṛ"), "condition": _role("agent")},
    {"position": "1.4.56", "kind": "adhikara", "name": "nipāta", "text": "prāg rīśvarān nipātāḥ",
     "governs": ("1.4.56", "1.4.97")},
    {"position": "1.4.57", "kind": "samjna", "name": "ca etc. as nipāta", "text": "cādayo 'sattve",
     "outcome": ("designation", "nipāta"), "condition": _ca_adi},
    {"position": "1.4.58", "kind": "samjna", "name": "pra etc. as nipāta", "text": "prādayaḥ",
     "outcome": ("designation", "nipāta"), "condition": _pra_adi},
    {"position": "1.4.59", "kind": "samjna", "name": "upasarga", "text": "upasargāḥ kriyāyoge",
     "outcome": ("designation", "upasarga"), "condition": _upasarga},
    {"position": "1.4.83", "kind": "adhikara", "name": "karmapravacanīya", "text": "karmapravacanīyāḥ",
     "governs": ("1.4.83", "1.4.97")},
    {"position": "1.4.99", "kind": "samjna", "name": "parasmaipada", "text": "laḥ parasmaipadam",
     "outcome": ("designation", "parasmaipada"), "condition": _tin},
    {"position": "1.4.100", "kind": "samjna", "name": "ātmanepada", "text": "taṅānāv ātmanepadam",
     "outcome": ("designation", "ātmanepada"), "condition": _tan_or_ana},

    # --- 2-8: major governing headings ---
    {"position": "2.1.3", "kind": "adhikara", "name": "samāsa", "text": "prāk kaḍārāt samāsaḥ",
     "governs": ("2.1.3", "2.2.38")},
    {"position": "2.1.5", "kind": "adhikara", "name": "avyayībhāva", "text": "avyayībhāvaḥ",
     "governs": ("2.1.5", "2.1.21")},
    {"position": "2.1.22", "kind": "adhikara", "name": "tatpuruṣa", "text": "tatpuruṣaḥ",
     "governs": ("2.1.22", "2.2.22")},
    {"position": "3.1.1", "kind": "adhikara", "name": "pratyaya", "text": "pratyayaḥ",
     "governs": ("3.1.1", "5.4.160")},
    {"position": "3.1.91", "kind": "adhikara", "name": "dhātoḥ", "text": "dhātoḥ",
     "governs": ("3.1.91", "3.4.117")},
    {"position": "6.1.1", "kind": "adhikara", "name": "reduplication", "text": "ekāco dve prathamasya",
     "governs": ("6.1.1", "6.1.12")},
    {"position": "6.1.72", "kind": "adhikara", "name": "saṃhitā", "text": "saṃhitāyām",
     "governs": ("6.1.72", "6.1.157")},
    {"position": "6.1.77", "kind": "vidhi", "name": "yaṇ substitution", "text": "iko yaṇ aci",
     "outcome": ("substitution", YAN_SUBSTITUTES), "al_vidhi": True, "condition": _ik_before_vowel},
    {"position": "6.1.101", "kind": "vidhi", "name": "long savarṇa", "text": "akaḥ savarṇe dīrghaḥ",
     "outcome": ("substitution", DIRGHA_SUBSTITUTES), "al_vidhi": True, "condition": _ak_before_savarna},
    {"position": "6.4.1", "kind": "adhikara", "name": "aṅga", "text": "aṅgasya",
     "governs": ("6.4.1", "7.4.97")},
    {"position": "8.2.1", "kind": "adhikara", "name": "asiddha", "text": "pūrvatrāsiddham",
     "governs": ("8.2.1", "8.4.68")},
)



def load_core_corpus() -> RuleRegistry:
    """Registry over the in-package core sutras."""
    return load_rule_corpus(CORE_SUTRAS)
