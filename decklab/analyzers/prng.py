"""
Deterministic Sequence Source
=============================

Seeded pseudo-random stream of floats in [0, 1) used by the mapping
generator. The generator is Mulberry32 (Tommy Ettinger, 2017): a 32-bit
Weyl-sequence state passed through a xorshift-multiply output mix. All
arithmetic is masked to unsigned 32 bits, so the stream is bit-for-bit
reproducible on every platform.

Each :class:`SequenceSource` owns its state; there is no module-level
generator, so independent mapping generations never interfere.

References:
    - Ettinger, T. (2017). Mulberry32.
      https://gist.github.com/tommyettinger/46a874533244883189143505d203312c
    - Steele, G., Lea, D., & Flood, C. (2014). Fast Splittable
      Pseudorandom Number Generators. OOPSLA.
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_WEYL_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


class SequenceSource:
    """Reproducible float stream keyed by an integer seed.

    Usage::

        rng = SequenceSource(42)
        value = rng()          # float in [0, 1)
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._state = seed & _MASK32

    def __call__(self) -> float:
        return self.next_float()

    @property
    def seed(self) -> int:
        return self._seed

    def next_uint32(self) -> int:
        """Advance the state and return the next 32-bit output word."""
        self._state = (self._state + _WEYL_INCREMENT) & _MASK32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        t = (((t + (((t ^ (t >> 7)) * (t | 61)) & _MASK32)) & _MASK32) ^ t)
        return (t ^ (t >> 14)) & _MASK32

    def next_float(self) -> float:
        """Next value in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32


def create_rng(seed: int) -> SequenceSource:
    """Create an independent sequence source for *seed*."""
    return SequenceSource(seed)
