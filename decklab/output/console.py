"""
DeckLab Console Output
======================

Rich-based renderers for DeckLab: the deck as a row of cards, the
per-letter cipher mapping, the encipherment step trace, ranked
isomorphs, and the ciphertext letter profile.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import DeckLabConsole
from decklab.analyzers.isomorph import SINGLETON, isomorph_interestingness
from decklab.core.models import (
    CipherMapping,
    CiphertextProfile,
    EncipherResult,
    IsomorphReport,
)

_LABEL_COLOURS: tuple[str, ...] = (
    "bold bright_red",
    "bold bright_green",
    "bold bright_yellow",
    "bold bright_blue",
    "bold bright_magenta",
    "bold bright_cyan",
)


def _pattern_text(pattern: str) -> Text:
    """Colour each repeat label of *pattern*; singletons are dimmed."""
    text = Text()
    for char in pattern:
        if char == SINGLETON:
            text.append(char, style="dim")
        else:
            text.append(char, style=_LABEL_COLOURS[(ord(char) - ord("a")) % len(_LABEL_COLOURS)])
    return text


def _window_text(window: str, pattern: str) -> Text:
    """Ciphertext window coloured by its pattern labels."""
    text = Text()
    for char, label in zip(window, pattern):
        if label == SINGLETON:
            text.append(char, style="dim")
        else:
            text.append(char, style=_LABEL_COLOURS[(ord(label) - ord("a")) % len(_LABEL_COLOURS)])
    return text


def _score_bar(score: float, width: int = 10) -> Text:
    filled = round(score * width)
    text = Text("█" * filled, style="bright_green")
    text.append("░" * (width - filled), style="dim")
    text.append(f" {score:.2f}")
    return text


class DeckConsoleOutput:
    """Console output formatters for DeckLab results.

    Usage::

        output = DeckConsoleOutput(DeckLabConsole())
        output.display_mapping(mapping)
        output.display_encipherment(result, trace=True)
        output.display_isomorphs(report, top=20)
    """

    def __init__(self, console: Optional[DeckLabConsole] = None) -> None:
        self.console = console or DeckLabConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Deck
    # ------------------------------------------------------------------ #

    @staticmethod
    def deck_text(deck: Sequence[str]) -> Text:
        """Deck as a card row; the top card is highlighted."""
        text = Text()
        for idx, card in enumerate(deck):
            style = "bold black on bright_yellow" if idx == 0 else "bold white on grey23"
            text.append(f" {card} ", style=style)
            text.append(" ")
        return text

    def display_deck(self, deck: Sequence[str], title: str = "Deck") -> None:
        self._rich.print(Panel(self.deck_text(deck), title=title, border_style="cyan"))

    # ------------------------------------------------------------------ #
    #  Mapping
    # ------------------------------------------------------------------ #

    def display_mapping(self, mapping: CipherMapping) -> None:
        """Table of every letter with its rotation and swaps."""
        self.console.section("Cipher Mapping")
        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Letter", style="bold", justify="center")
        tbl.add_column("Rotation", justify="right")
        tbl.add_column("Swaps")
        for letter, t in mapping.items():
            swaps = "  ".join(f"{a}↔{b}" for a, b in t.swaps)
            tbl.add_row(letter, str(t.rotation), swaps)
        self._rich.print(tbl)

    # ------------------------------------------------------------------ #
    #  Encipherment
    # ------------------------------------------------------------------ #

    def display_encipherment(self, result: EncipherResult, trace: bool = False) -> None:
        """Ciphertext, final deck and (optionally) the full step trace."""
        self.console.section("Encipherment")

        summary = Text()
        summary.append("Letters: ", style="bold")
        summary.append(f"{len(result.steps)}\n")
        summary.append("Ciphertext: ", style="bold")
        summary.append(result.ciphertext or "(empty)", style="bold bright_green")
        if result.last_transformation is not None:
            summary.append("\nLast transformation: ", style="bold")
            summary.append(result.last_transformation.describe())
        self._rich.print(Panel(summary, title="Overview", border_style="cyan"))

        self.display_deck(result.deck, title="Final Deck")

        if trace and result.steps:
            tbl = Table(
                title="Step Trace",
                border_style="bright_cyan",
                header_style="bold bright_magenta",
            )
            tbl.add_column("#", style="dim", justify="right")
            tbl.add_column("PT", justify="center")
            tbl.add_column("CT", justify="center", style="bold bright_green")
            tbl.add_column("Transformation")
            tbl.add_column("Deck")
            for idx, step in enumerate(result.steps, start=1):
                tbl.add_row(
                    str(idx),
                    step.plaintext_char,
                    step.ciphertext_char,
                    step.transformation.describe(),
                    "".join(step.deck),
                )
            self._rich.print(tbl)

    # ------------------------------------------------------------------ #
    #  Isomorphs
    # ------------------------------------------------------------------ #

    def display_isomorphs(
        self,
        report: IsomorphReport,
        top: int = 20,
        min_interestingness: float = 0.0,
    ) -> None:
        """Ranked isomorph table, truncated to *top* rows."""
        self.console.section("Isomorphs")

        shown = [
            iso for iso in report.isomorphs
            if isomorph_interestingness(iso.pattern) >= min_interestingness
        ][:top]
        if not shown:
            self.console.info("No isomorphs to display.")
            return

        tbl = Table(
            caption=f"Showing {len(shown)} of {report.total}",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
        )
        tbl.add_column("Rank", style="dim", justify="right")
        tbl.add_column("Pattern")
        tbl.add_column("Offsets", justify="right")
        tbl.add_column("Window A")
        tbl.add_column("Window B")
        tbl.add_column("Interest")
        tbl.add_column("Count", justify="right")

        ct = report.ciphertext
        for rank, iso in enumerate(shown, start=1):
            n = iso.length
            tbl.add_row(
                str(rank),
                _pattern_text(iso.pattern),
                f"{iso.start_a} / {iso.start_b}",
                _window_text(ct[iso.start_a : iso.start_a + n], iso.pattern),
                _window_text(ct[iso.start_b : iso.start_b + n], iso.pattern),
                _score_bar(isomorph_interestingness(iso.pattern)),
                str(report.pattern_counts.get(iso.pattern, 0)),
            )
        self._rich.print(tbl)

    def display_profile(self, profile: CiphertextProfile) -> None:
        """Letter counts and Index of Coincidence."""
        text = Text()
        text.append("Letters: ", style="bold")
        text.append(f"{profile.length}\n")
        text.append("Index of Coincidence: ", style="bold")
        text.append(f"{profile.index_of_coincidence:.4f}\n")
        text.append("Most common: ", style="bold")
        text.append(
            ", ".join(f"{letter}={count}" for letter, count in profile.most_common) or "-"
        )
        self._rich.print(Panel(text, title="Ciphertext Profile", border_style="cyan"))
