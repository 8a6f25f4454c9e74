"""
DeckLab Module Entry Point
==========================

Allows running the DeckLab CLI via: python -m decklab
"""

from decklab.cli import main

if __name__ == "__main__":
    main()
