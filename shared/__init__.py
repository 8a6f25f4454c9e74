"""
DeckLab Shared Module
=====================

Configuration, structured logging, console presentation, and result
models shared by the DeckLab tool package.
"""

from shared.config import DeckLabConfig

__all__ = ["DeckLabConfig"]
