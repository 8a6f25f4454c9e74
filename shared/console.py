"""
DeckLab Console Interface
=========================

Thin wrapper around a themed :class:`rich.console.Console` used by every
DeckLab renderer: the banner, section rules, status messages and the
findings table. Tool-specific tables live in :mod:`decklab.output.console`
and print through :attr:`DeckLabConsole.rich`.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from shared.models import Finding, Severity

_THEME = Theme(
    {
        "decklab.section": "bold bright_magenta",
        "decklab.success": "bold green",
        "decklab.info": "bold bright_blue",
        "decklab.tagline": "bold bright_white",
        "decklab.dim": "dim white",
    }
)

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold white on red",
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold bright_cyan",
    Severity.INFO: "bold bright_blue",
}

_BANNER_ART = r"""
  ____            _    _           _
 |  _ \  ___  ___| | _| |    __ _| |__
 | | | |/ _ \/ __| |/ / |   / _` | '_ \
 | |_| |  __/ (__|   <| |__| (_| | |_) |
 |____/ \___|\___|_|\_\_____\__,_|_.__/
"""

_TAGLINE = "Card-deck permutation cipher and isomorph workbench"


class DeckLabConsole:
    """Themed console for DeckLab output.

    Args:
        quiet: Discard everything printed (``--quiet`` and library use).
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self._console = Console(theme=_THEME, quiet=quiet, highlight=False)

    @property
    def rich(self) -> Console:
        """The underlying Rich console."""
        return self._console

    def banner(self, version: str) -> None:
        body = Text(_BANNER_ART, style="bright_cyan")
        body.append(f"\n{_TAGLINE}\n", style="decklab.tagline")
        body.append(f"Version {version}", style="decklab.dim")
        self._console.print(
            Panel(Align.center(body), border_style="bright_cyan", padding=(0, 2))
        )

    def section(self, title: str) -> None:
        self._console.rule(f" {title} ", style="decklab.section")

    def success(self, message: str) -> None:
        self._console.print(Text.assemble(("[✔] ", "decklab.success"), message))

    def info(self, message: str) -> None:
        self._console.print(Text.assemble(("[ℹ] ", "decklab.info"), message))

    def findings_table(self, findings: Sequence[Finding]) -> None:
        """One row per finding, severity coloured; nothing for an empty list."""
        if not findings:
            return
        tbl = Table(
            title="Findings",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Severity")
        tbl.add_column("Title", style="bold")
        tbl.add_column("Description", ratio=2)
        for idx, finding in enumerate(findings, start=1):
            tbl.add_row(
                str(idx),
                Text(finding.severity.value, style=_SEVERITY_STYLES[finding.severity]),
                Text(finding.title),
                Text(finding.description),
            )
        self._console.print(tbl)
