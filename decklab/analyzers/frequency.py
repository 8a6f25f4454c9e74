"""
Ciphertext Frequency Profile
============================

Letter-frequency statistics reported next to the isomorph ranking:
A-Z counts and Friedman's Index of Coincidence,

    IC = sum_{i=A}^{Z} f_i * (f_i - 1) / (N * (N - 1))

For random letters IC is close to 1/26 (~0.0385); English plaintext and
monoalphabetic substitutions sit near 0.0667. A deck cipher that leaks
plaintext structure tends to push IC upward.

References:
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
    - Sinkov, A. (1966). Elementary Cryptanalysis: A Mathematical
      Approach. Mathematical Association of America.
"""

from __future__ import annotations

import numpy as np

from decklab.core.models import ALPHABET, DECK_SIZE, CiphertextProfile


class FrequencyAnalyzer:
    """Computes letter counts and the Index of Coincidence of a text.

    Characters outside A-Z (after uppercasing) are ignored.
    """

    IC_ENGLISH: float = 0.0667
    IC_RANDOM_26: float = 1.0 / 26.0

    def __init__(self, top: int = 5) -> None:
        self.top = top

    def letter_counts(self, text: str) -> np.ndarray:
        """Length-26 integer array of A-Z counts."""
        codes = np.fromiter(text.upper().encode("ascii", "ignore"), dtype=np.uint8)
        codes = codes[(codes >= ord("A")) & (codes <= ord("Z"))].astype(np.int64) - ord("A")
        return np.bincount(codes, minlength=DECK_SIZE)

    @staticmethod
    def index_of_coincidence(counts: np.ndarray) -> float:
        n = int(counts.sum())
        if n < 2:
            return 0.0
        return float((counts * (counts - 1)).sum()) / (n * (n - 1))

    def profile(self, text: str) -> CiphertextProfile:
        counts = self.letter_counts(text)
        # Stable sort keeps alphabetical order among equal counts
        order = np.argsort(-counts, kind="stable")
        most_common = [
            (ALPHABET[i], int(counts[i])) for i in order[: self.top] if counts[i] > 0
        ]
        return CiphertextProfile(
            length=int(counts.sum()),
            letter_counts={ALPHABET[i]: int(c) for i, c in enumerate(counts)},
            index_of_coincidence=self.index_of_coincidence(counts),
            most_common=most_common,
        )
