"""
DeckLab Core Data Models
========================

Pydantic models for the deck cipher and the isomorph analyzer: the
generator configuration, transformations and the per-letter cipher
mapping, encipherment trace records, and isomorph analysis results.

Transformations, cipher steps and isomorphs are frozen; the deck state
itself is a plain ``list[str]`` that is copied, never mutated in place,
by every operation that advances it.

References:
    - Kahn, D. (1996). The Codebreakers. Scribner. (isomorphs, ch. 9)
    - Schneier, B. (1999). The Solitaire Encryption Algorithm.
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
"""

from __future__ import annotations

import enum
import string
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ALPHABET: str = string.ascii_uppercase
DECK_SIZE: int = len(ALPHABET)

Swap = tuple[int, int]
DeckState = list[str]


# ===================================================================== #
#  Generator configuration
# ===================================================================== #


class RotationMode(str, enum.Enum):
    """How the generator picks the rotation of each transformation."""

    NONE = "none"      # rotation is always 0; position 0 is forced into a swap
    FIXED = "fixed"    # rotation is always ``rotation_max``
    RANDOM = "random"  # rotation drawn uniformly from [1, rotation_max]


class CipherConfig(BaseModel):
    """Parameters for seeded cipher-mapping generation.

    Attributes:
        swap_count: Swaps per transformation (1-13).
        rotation_max: Maximum rotation (0-25); 0 disables rotation.
        rotation_constant: Use ``rotation_max`` for every transformation
            instead of drawing a random rotation in ``[1, rotation_max]``.
    """

    model_config = ConfigDict(frozen=True)

    swap_count: int = Field(default=4, ge=1, le=13)
    rotation_max: int = Field(default=0, ge=0, le=DECK_SIZE - 1)
    rotation_constant: bool = False

    @property
    def rotation_mode(self) -> RotationMode:
        if self.rotation_max == 0:
            return RotationMode.NONE
        if self.rotation_constant:
            return RotationMode.FIXED
        return RotationMode.RANDOM

    @property
    def is_feasible(self) -> bool:
        """Whether 26 distinct transformations can exist under this config.

        A single swap without rotation always pairs position 0 with one of
        the other 25 positions, so only 25 transformations are possible.
        """
        return not (self.swap_count == 1 and self.rotation_max == 0)


# ===================================================================== #
#  Transformations
# ===================================================================== #


class Transformation(BaseModel):
    """One deck mutation: rotate left by ``rotation``, then apply ``swaps`` in order.

    Every position referenced by the swaps is distinct. Without rotation,
    position 0 must take part in a swap so that the top card always changes.
    """

    model_config = ConfigDict(frozen=True)

    swaps: tuple[Swap, ...] = Field(..., min_length=1)
    rotation: int = Field(default=0, ge=0, le=DECK_SIZE - 1)

    @model_validator(mode="after")
    def _check_positions(self) -> Transformation:
        positions = self.positions
        for pos in positions:
            if not 0 <= pos < DECK_SIZE:
                raise ValueError(f"swap position {pos} outside deck range 0..{DECK_SIZE - 1}")
        if len(set(positions)) != len(positions):
            raise ValueError(f"swap positions must be pairwise distinct, got {positions}")
        if self.rotation == 0 and 0 not in positions:
            raise ValueError("a transformation without rotation must swap position 0")
        return self

    @property
    def positions(self) -> list[int]:
        """All positions referenced by the swaps, in swap order."""
        return [pos for swap in self.swaps for pos in swap]

    @property
    def swap_count(self) -> int:
        return len(self.swaps)

    @property
    def key(self) -> str:
        """Normalized key; see :func:`transformation_key`."""
        return transformation_key(self)

    def describe(self) -> str:
        """Compact human-readable form, e.g. ``r3 0-7 2-11``."""
        swaps = " ".join(f"{a}-{b}" for a, b in self.swaps)
        return f"r{self.rotation} {swaps}"


def transformation_key(t: Transformation) -> str:
    """Normalize and serialize a transformation for equality comparison.

    Each swap is ordered low-index first and the swap list is sorted, so
    transformations differing only in swap order or orientation share a
    key. The rotation is part of the key, so identical swap sets with
    different rotations stay distinct.
    """
    normalized = sorted((min(a, b), max(a, b)) for a, b in t.swaps)
    return f"r{t.rotation};" + ";".join(f"{a},{b}" for a, b in normalized)


class CipherMapping(BaseModel):
    """Assignment of one distinct transformation to every letter A-Z."""

    model_config = ConfigDict(frozen=True)

    transformations: dict[str, Transformation]

    @model_validator(mode="after")
    def _check_complete_and_distinct(self) -> CipherMapping:
        letters = set(self.transformations)
        if letters != set(ALPHABET):
            missing = sorted(set(ALPHABET) - letters)
            extra = sorted(letters - set(ALPHABET))
            raise ValueError(
                f"mapping must cover exactly A-Z (missing={missing}, unexpected={extra})"
            )
        keys = {transformation_key(t) for t in self.transformations.values()}
        if len(keys) != DECK_SIZE:
            raise ValueError("mapping transformations must be pairwise distinct")
        return self

    def __getitem__(self, letter: str) -> Transformation:
        return self.transformations[letter.upper()]

    def __contains__(self, letter: object) -> bool:
        return isinstance(letter, str) and letter.upper() in self.transformations

    def __len__(self) -> int:
        return len(self.transformations)

    def letters(self) -> Iterator[str]:
        """Letters in alphabet order."""
        return iter(ALPHABET)

    def items(self) -> Iterator[tuple[str, Transformation]]:
        """``(letter, transformation)`` pairs in alphabet order."""
        return ((letter, self.transformations[letter]) for letter in ALPHABET)


# ===================================================================== #
#  Encipherment
# ===================================================================== #


class CipherStep(BaseModel):
    """Trace record for one enciphered letter.

    Attributes:
        plaintext_char: Uppercased input letter.
        ciphertext_char: Output letter (the new top card).
        deck: Deck state after the transformation.
        transformation: The transformation that was applied.
    """

    model_config = ConfigDict(frozen=True)

    plaintext_char: str
    ciphertext_char: str
    deck: DeckState
    transformation: Transformation


class EncipherResult(BaseModel):
    """Final deck, ciphertext and full step trace of an encipherment."""

    deck: DeckState
    ciphertext: str = ""
    last_transformation: Optional[Transformation] = None
    steps: list[CipherStep] = Field(default_factory=list)


# ===================================================================== #
#  Isomorph analysis
# ===================================================================== #


class Isomorph(BaseModel):
    """Two non-overlapping ciphertext windows sharing a repetition pattern.

    Attributes:
        pattern: Isomorph pattern of both windows (e.g. ``a..ba.ab``).
        start_a: Offset of the first window.
        start_b: Offset of the second window, at least ``len(pattern)``
            past ``start_a``.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., min_length=1)
    start_a: int = Field(..., ge=0)
    start_b: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_non_overlapping(self) -> Isomorph:
        if self.start_b < self.start_a + len(self.pattern):
            raise ValueError(
                f"windows at {self.start_a} and {self.start_b} overlap "
                f"for pattern length {len(self.pattern)}"
            )
        return self

    @property
    def length(self) -> int:
        return len(self.pattern)


class CiphertextProfile(BaseModel):
    """Letter statistics of a ciphertext.

    Attributes:
        length: Number of letters counted.
        letter_counts: Count per letter A-Z.
        index_of_coincidence: Friedman IC, 0.0 for fewer than two letters.
        most_common: Up to five ``(letter, count)`` pairs, most frequent first.
    """

    length: int = 0
    letter_counts: dict[str, int] = Field(default_factory=dict)
    index_of_coincidence: float = 0.0
    most_common: list[tuple[str, int]] = Field(default_factory=list)


class IsomorphReport(BaseModel):
    """Ranked isomorphs of a ciphertext plus supporting statistics."""

    ciphertext: str
    isomorphs: list[Isomorph] = Field(default_factory=list)
    pattern_counts: dict[str, int] = Field(default_factory=dict)
    profile: CiphertextProfile = Field(default_factory=CiphertextProfile)

    @property
    def total(self) -> int:
        return len(self.isomorphs)
