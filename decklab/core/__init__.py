"""
DeckLab Core Module
===================

Data models for DeckLab. The orchestrating engine lives in
:mod:`decklab.core.engine`.
"""

from decklab.core.models import (
    ALPHABET,
    DECK_SIZE,
    CipherConfig,
    CipherMapping,
    CipherStep,
    CiphertextProfile,
    EncipherResult,
    Isomorph,
    IsomorphReport,
    RotationMode,
    Transformation,
)

__all__ = [
    "ALPHABET",
    "DECK_SIZE",
    "CipherConfig",
    "CipherMapping",
    "CipherStep",
    "CiphertextProfile",
    "EncipherResult",
    "Isomorph",
    "IsomorphReport",
    "RotationMode",
    "Transformation",
]
