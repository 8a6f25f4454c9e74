"""
DeckLab Output Module
=====================

Console display and report generation for DeckLab results.
"""

from decklab.output.console import DeckConsoleOutput
from decklab.output.report import DeckLabReportGenerator

__all__ = [
    "DeckConsoleOutput",
    "DeckLabReportGenerator",
]
