"""
Transformation Generator
========================

Builds cipher mappings: one transformation (rotation plus disjoint
swaps) per plaintext letter, all 26 pairwise distinct.

Two generators are provided:

1. :class:`TransformationGenerator` -- seeded rejection sampling. For
   each letter A..Z in turn, a rotation is chosen per the configured
   :class:`RotationMode`, a candidate transformation is drawn, and the
   candidate is accepted only if its normalized key has not been used
   by an earlier letter of the same mapping.
2. :func:`generate_sliding_window_mapping` -- a deterministic layout
   that needs no random source and is distinct by construction.

Feasibility: with one swap and no rotation, position 0 must be paired
with one of the 25 other positions, so only 25 transformations exist.
That configuration is rejected up front instead of sampling forever.

References:
    - Knuth, D. E. (1997). The Art of Computer Programming, Vol. 2,
      3rd ed., Section 3.4.2 (random sampling).
    - Schneier, B. (1999). The Solitaire Encryption Algorithm.
"""

from __future__ import annotations

from typing import Callable, Optional

from decklab.analyzers.prng import create_rng
from decklab.core.models import (
    ALPHABET,
    DECK_SIZE,
    CipherConfig,
    CipherMapping,
    RotationMode,
    Swap,
    Transformation,
    transformation_key,
)

Rng = Callable[[], float]

# Consecutive non-zero positions used per letter by the sliding-window layout
_WINDOW_SIZE = 7

# Draws for a single letter above which the generator reports slow progress
SLOW_LETTER_THRESHOLD = 1000

__all__ = [
    "InfeasibleConfigError",
    "MappingExhaustedError",
    "TransformationGenerator",
    "choose_rotation",
    "generate_cipher_mapping",
    "generate_sliding_window_mapping",
    "generate_transformation",
    "transformation_key",
]


class InfeasibleConfigError(ValueError):
    """The configuration cannot yield 26 distinct transformations."""


class MappingExhaustedError(RuntimeError):
    """Rejection sampling for one letter exceeded the attempt limit."""

    def __init__(self, letter: str, attempts: int) -> None:
        super().__init__(
            f"no unused transformation found for {letter!r} after {attempts} attempts"
        )
        self.letter = letter
        self.attempts = attempts


# ===================================================================== #
#  Sampling primitives
# ===================================================================== #


def _sample_unique(rng: Rng, low: int, high: int, count: int) -> list[int]:
    """Draw *count* distinct integers from ``[low, high)`` in draw order."""
    span = high - low
    if count > span:
        raise ValueError(f"cannot draw {count} distinct values from a range of {span}")
    result: list[int] = []
    used: set[int] = set()
    while len(result) < count:
        value = low + int(rng() * span)
        if value not in used:
            used.add(value)
            result.append(value)
    return result


def choose_rotation(rng: Rng, config: CipherConfig) -> int:
    """Pick the rotation for the next candidate transformation.

    ``NONE`` and ``FIXED`` consume nothing from the stream; ``RANDOM``
    consumes one draw.
    """
    mode = config.rotation_mode
    if mode is RotationMode.NONE:
        return 0
    if mode is RotationMode.FIXED:
        return config.rotation_max
    return 1 + int(rng() * config.rotation_max)


def generate_transformation(rng: Rng, swap_count: int, rotation: int) -> Transformation:
    """Draw one transformation with *swap_count* disjoint swaps.

    Without rotation, position 0 is placed first and the remaining
    ``2 * swap_count - 1`` positions come from 1..25, so the top card is
    always swapped. With rotation, all ``2 * swap_count`` positions are
    drawn freely from 0..25. Positions are paired consecutively.
    """
    if not 1 <= swap_count <= DECK_SIZE // 2:
        raise ValueError(f"swap_count must be in 1..{DECK_SIZE // 2}, got {swap_count}")

    if rotation == 0:
        positions = [0] + _sample_unique(rng, 1, DECK_SIZE, swap_count * 2 - 1)
    else:
        positions = _sample_unique(rng, 0, DECK_SIZE, swap_count * 2)

    swaps: list[Swap] = [
        (positions[i], positions[i + 1]) for i in range(0, len(positions), 2)
    ]
    return Transformation(swaps=tuple(swaps), rotation=rotation)


# ===================================================================== #
#  Seeded generator
# ===================================================================== #


class TransformationGenerator:
    """Seeded cipher-mapping generator using global rejection sampling.

    Collisions are checked against every transformation already assigned
    in the mapping, not only within one letter. After :meth:`generate`
    returns, :attr:`rejections` holds the number of discarded candidates
    per letter.

    Usage::

        generator = TransformationGenerator()
        mapping = generator.generate(42, CipherConfig(swap_count=4))
        print(mapping["A"].describe())

    Args:
        max_attempts: Upper bound on candidates drawn for a single letter.
            ``None`` (the default) leaves sampling unbounded.
    """

    def __init__(self, max_attempts: Optional[int] = None) -> None:
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be positive or None")
        self.max_attempts = max_attempts
        self.rejections: dict[str, int] = {}

    def generate(self, seed: int, config: CipherConfig) -> CipherMapping:
        """Build a reproducible mapping for *seed* under *config*.

        Raises:
            InfeasibleConfigError: ``swap_count == 1`` with ``rotation_max == 0``.
            MappingExhaustedError: ``max_attempts`` was set and exceeded.
        """
        if not config.is_feasible:
            raise InfeasibleConfigError(
                "swap_count=1 with rotation_max=0 can only produce 25 distinct "
                "transformations, but 26 are required; increase swap_count to "
                "at least 2 or set rotation_max above 0"
            )

        rng = create_rng(seed)
        used_keys: set[str] = set()
        transformations: dict[str, Transformation] = {}
        self.rejections = {}

        for letter in ALPHABET:
            attempts = 0
            while True:
                attempts += 1
                if self.max_attempts is not None and attempts > self.max_attempts:
                    raise MappingExhaustedError(letter, self.max_attempts)
                rotation = choose_rotation(rng, config)
                candidate = generate_transformation(rng, config.swap_count, rotation)
                key = transformation_key(candidate)
                if key not in used_keys:
                    used_keys.add(key)
                    transformations[letter] = candidate
                    break
            self.rejections[letter] = attempts - 1

        return CipherMapping(transformations=transformations)

    @property
    def total_rejections(self) -> int:
        return sum(self.rejections.values())

    @property
    def slow_letters(self) -> list[str]:
        """Letters whose last generation needed more than the slow threshold."""
        return [
            letter
            for letter, count in self.rejections.items()
            if count + 1 > SLOW_LETTER_THRESHOLD
        ]


def generate_cipher_mapping(
    seed: int,
    config: CipherConfig,
    max_attempts: Optional[int] = None,
) -> CipherMapping:
    """Module-level convenience wrapper around :class:`TransformationGenerator`."""
    return TransformationGenerator(max_attempts=max_attempts).generate(seed, config)


# ===================================================================== #
#  Sliding-window layout
# ===================================================================== #


def _wrap_position(value: int) -> int:
    """Wrap *value* into the non-zero deck positions 1..25."""
    return (value - 1) % (DECK_SIZE - 1) + 1


def generate_sliding_window_mapping() -> CipherMapping:
    """Deterministic mapping with four swaps and rotation 1 per letter.

    Letter ``i`` takes the seven positions starting at ``i + 1`` (wrapped
    into 1..25). Position 0 is paired with window slot ``i % 7`` and the
    remaining six positions are paired in order. Letters 0 and 25 share
    a window but put position 0 in different slots, which keeps every
    transformation distinct.
    """
    transformations: dict[str, Transformation] = {}
    for i, letter in enumerate(ALPHABET):
        window = [_wrap_position(i + 1 + k) for k in range(_WINDOW_SIZE)]
        partner = window.pop(i % _WINDOW_SIZE)
        swaps: list[Swap] = [(0, partner)]
        swaps.extend((window[j], window[j + 1]) for j in range(0, len(window), 2))
        transformations[letter] = Transformation(swaps=tuple(swaps), rotation=1)
    return CipherMapping(transformations=transformations)
