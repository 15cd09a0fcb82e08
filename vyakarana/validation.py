"""
Input Gating for the Vyakarana rule engine.

Every unit entering the engine passes a binary accept/reject gate.
A rejected unit never reaches rule evaluation; it comes back as a
Rejection instead of an exception so batches keep running.

Minimum acceptance requirements (ALL must be true):
1. The unit text is a non-empty string after stripping whitespace
2. A compound carries at least two members, each of which passes (1)
3. A phoneme-kind unit is registered in the phoneme table
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Optional

from .domain import (
    InvalidInputError,
    Rejection,
    Unit,
    UnitKind,
    UnknownPhonemeError,
    VyakaranaError,
)
from .phonology.table import PHONEME_TABLE


# =============================================================================
# UNIT VALIDATION
# =============================================================================

def normalize_text(text: str) -> str:
    """NFC-normalise and strip surrounding whitespace."""
    return unicodedata.normalize("NFC", text).strip()


def validate_text(text: object, subject: Optional[str] = None) -> str:
    """
    Validate raw unit text.

    Raises:
        InvalidInputError: If text is not a string or is empty
    """
    if not isinstance(text, str):
        raise InvalidInputError(
            f"unit text must be a string, got {type(text).__name__}",
            subject,
        )
    normalized = normalize_text(text)
    if not normalized:
        raise InvalidInputError("unit text is empty", subject or repr(text))
    return normalized


def validate_unit(unit: Unit) -> Unit:
    """
    Validate a unit before evaluation.

    Raises:
        InvalidInputError: If the unit or a compound member is malformed
        UnknownPhonemeError: If a phoneme unit is not in the table
    """
    if not isinstance(unit, Unit):
        raise InvalidInputError(
            f"expected Unit, got {type(unit).__name__}",
            repr(unit),
        )

    validate_text(unit.text, str(unit.text))

    if unit.kind == UnitKind.COMPOUND:
        if len(unit.members) < 2:
            raise InvalidInputError(
                f"compound needs at least two members, got {len(unit.members)}",
                unit.text,
            )
        for member in unit.members:
            validate_unit(member)

    if unit.kind == UnitKind.PHONEME and PHONEME_TABLE.lookup(unit.text) is None:
        raise UnknownPhonemeError(
            f"'{unit.text}' is not a registered phoneme",
            unit.text,
        )

    return unit


# =============================================================================
# GATING
# =============================================================================

@dataclass
class GatingResult:
    """Result of the gating check."""
    accepted: bool
    unit: Optional[Unit] = None
    rejection: Optional[Rejection] = None


def gate_unit(unit: Unit) -> GatingResult:
    """
    Apply the input gate to a unit.

    Returns:
        GatingResult with either accepted=True and the Unit, or
        accepted=False and a Rejection
    """
    try:
        return GatingResult(accepted=True, unit=validate_unit(unit))
    except VyakaranaError as e:
        return GatingResult(accepted=False, rejection=Rejection.from_error(e))
