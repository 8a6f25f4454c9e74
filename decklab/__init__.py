"""
DeckLab -- Card-Deck Permutation Cipher Workbench
=================================================

A hand-cipher style engine that enciphers letters by permuting a
26-card deck, together with an isomorph finder for spotting repeated
structure in the resulting ciphertext.

Modules:
    - decklab.analyzers: Sequence source, generator, deck engine, isomorphs
    - decklab.core.models: Pydantic data models
    - decklab.core.engine: Central orchestrator
    - decklab.output: Console and report output
    - decklab.cli: Click-based command-line interface

This is a teaching cipher; it makes no claim of cryptographic security.
"""

__version__ = "1.0.0"
__tool_name__ = "decklab"
