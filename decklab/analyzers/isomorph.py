"""
Isomorph Analyzer
=================

Finds and ranks isomorphs: pairs of equal-length, non-overlapping
ciphertext windows that share the same repetition structure. Repeated
structure surviving encipherment is a classic sign that the same
plaintext was enciphered under related key states.

Pattern notation: each character that occurs once in the window is
written ``.``; each repeated character gets a label ``a``, ``b``, ...
in order of first occurrence. ``ahwoanao`` and ``uvonuyun`` both map to
``a..ba.ab`` and are therefore isomorphic.

Search pipeline (:func:`find_isomorphs`):

1. For every window length ``n`` from 3 to ``len // 2``, compute the
   pattern of every window.
2. Keep only patterns that start and end on a repeat label; a singleton
   at either boundary adds no constraint. This also removes all-``.``
   windows.
3. Group offsets by pattern and emit every non-overlapping pair
   (``start_b >= start_a + n``).

Cost: O(L^2) windows of O(L) each plus the pairwise emission per group,
cubic in the ciphertext length in the worst case. This is the most
expensive operation in DeckLab.

References:
    - Kahn, D. (1996). The Codebreakers. Scribner.
    - Friedman, W. F. (1923). Elements of Cryptanalysis. Signal Corps.
    - American Cryptogram Association. Isomorphs in the Cryptanalysis
      of Periodic Ciphers.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping, Optional

from decklab.analyzers.frequency import FrequencyAnalyzer
from decklab.core.models import Isomorph, IsomorphReport

MIN_WINDOW: int = 3
SINGLETON: str = "."


def isomorph_pattern(s: str) -> str:
    """Repetition pattern of *s* (``.`` for singletons, labels for repeats)."""
    counts = Counter(s)
    labels: dict[str, str] = {}
    out: list[str] = []
    for char in s:
        if counts[char] == 1:
            out.append(SINGLETON)
            continue
        if char not in labels:
            labels[char] = chr(ord("a") + len(labels))
        out.append(labels[char])
    return "".join(out)


def _is_informative(pattern: str) -> bool:
    """Pattern has a repeat and both boundary characters are repeats."""
    if all(c == SINGLETON for c in pattern):
        return False
    return pattern[0] != SINGLETON and pattern[-1] != SINGLETON


def find_isomorphs(ciphertext: str) -> list[Isomorph]:
    """All non-overlapping isomorphic window pairs of *ciphertext*.

    Results are ordered by window length, then by pattern first
    occurrence, then by ``(start_a, start_b)``.
    """
    result: list[Isomorph] = []
    length = len(ciphertext)
    max_len = length // 2

    for n in range(MIN_WINDOW, max_len + 1):
        groups: dict[str, list[int]] = {}
        for i in range(length - n + 1):
            pattern = isomorph_pattern(ciphertext[i : i + n])
            if _is_informative(pattern):
                groups.setdefault(pattern, []).append(i)

        for pattern, positions in groups.items():
            for idx, start_a in enumerate(positions):
                for start_b in positions[idx + 1 :]:
                    if start_b >= start_a + n:
                        result.append(
                            Isomorph(pattern=pattern, start_a=start_a, start_b=start_b)
                        )

    return result


def isomorph_interestingness(pattern: str) -> float:
    """Fraction of *pattern* covered by repeat labels, in [0, 1]."""
    if not pattern:
        return 0.0
    repeats = sum(1 for c in pattern if c != SINGLETON)
    return repeats / len(pattern)


def count_pattern_occurrences(isomorphs: Iterable[Isomorph]) -> dict[str, int]:
    """Number of isomorph entries per distinct pattern."""
    return dict(Counter(iso.pattern for iso in isomorphs))


def sort_by_interestingness(
    isomorphs: Iterable[Isomorph],
    pattern_counts: Optional[Mapping[str, int]] = None,
) -> list[Isomorph]:
    """New list ranked by interestingness, then length, then ``start_a``.

    When *pattern_counts* is given, descending count is inserted as the
    second key. The input is never modified.
    """
    if pattern_counts is None:
        def key(iso: Isomorph) -> tuple:
            return (-isomorph_interestingness(iso.pattern), -len(iso.pattern), iso.start_a)
    else:
        def key(iso: Isomorph) -> tuple:
            return (
                -isomorph_interestingness(iso.pattern),
                -pattern_counts.get(iso.pattern, 0),
                -len(iso.pattern),
                iso.start_a,
            )

    return sorted(isomorphs, key=key)


class IsomorphAnalyzer:
    """Runs the full isomorph pipeline on a ciphertext.

    Usage::

        analyzer = IsomorphAnalyzer(rank_by_count=True)
        report = analyzer.analyze("QWEQRTQWEQ")
        for iso in report.isomorphs[:10]:
            print(iso.pattern, iso.start_a, iso.start_b)

    Args:
        rank_by_count: Use pattern occurrence counts as the secondary
            ranking key.
    """

    def __init__(self, rank_by_count: bool = False) -> None:
        self.rank_by_count = rank_by_count
        self._frequency = FrequencyAnalyzer()

    def analyze(self, ciphertext: str) -> IsomorphReport:
        """Find, count and rank isomorphs, and profile the ciphertext."""
        isomorphs = find_isomorphs(ciphertext)
        counts = count_pattern_occurrences(isomorphs)
        ranked = sort_by_interestingness(
            isomorphs, counts if self.rank_by_count else None
        )
        return IsomorphReport(
            ciphertext=ciphertext,
            isomorphs=ranked,
            pattern_counts=counts,
            profile=self._frequency.profile(ciphertext),
        )
