"""
Deck Engine
===========

Applies transformations to a 26-card deck and drives encipherment.

A transformation is applied in two phases on a copy of the deck:

1. Rotate left by ``rotation`` (the card at index ``rotation`` becomes
   the new top card).
2. Apply each swap in order; swap indices refer to post-rotation
   positions.

Enciphering a letter applies that letter's transformation and emits the
new top card. Non-letters are dropped: they neither advance the deck nor
appear in the ciphertext.
"""

from __future__ import annotations

from typing import Sequence

from decklab.core.models import (
    ALPHABET,
    CipherMapping,
    CipherStep,
    DeckState,
    EncipherResult,
    Transformation,
)


def create_initial_deck() -> DeckState:
    """Identity deck: A at position 0 through Z at position 25."""
    return list(ALPHABET)


def apply_transformation(deck: Sequence[str], transformation: Transformation) -> DeckState:
    """Return a new deck with *transformation* applied; *deck* is untouched."""
    r = transformation.rotation
    new_deck = list(deck[r:]) + list(deck[:r])
    for a, b in transformation.swaps:
        new_deck[a], new_deck[b] = new_deck[b], new_deck[a]
    return new_deck


def encipher_step(
    deck: Sequence[str],
    plaintext_char: str,
    mapping: CipherMapping,
) -> tuple[DeckState, str]:
    """Advance *deck* by the transformation of *plaintext_char*.

    Returns:
        ``(new_deck, ciphertext_char)`` where the ciphertext character is
        the new top card.

    Raises:
        KeyError: *plaintext_char* is not a letter A-Z.
    """
    new_deck = apply_transformation(deck, mapping[plaintext_char.upper()])
    return new_deck, new_deck[0]


def encipher(plaintext: str, mapping: CipherMapping) -> EncipherResult:
    """Encipher *plaintext* from the identity deck, recording every step."""
    deck = create_initial_deck()
    output: list[str] = []
    steps: list[CipherStep] = []
    last: Transformation | None = None

    for char in plaintext:
        letter = char.upper()
        if len(letter) != 1 or letter not in ALPHABET:
            continue
        transformation = mapping[letter]
        deck, cipher_char = encipher_step(deck, letter, mapping)
        output.append(cipher_char)
        steps.append(
            CipherStep(
                plaintext_char=letter,
                ciphertext_char=cipher_char,
                deck=list(deck),
                transformation=transformation,
            )
        )
        last = transformation

    return EncipherResult(
        deck=deck,
        ciphertext="".join(output),
        last_transformation=last,
        steps=steps,
    )
