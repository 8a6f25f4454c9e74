from decklab.analyzers.deck import (
    apply_transformation,
    create_initial_deck,
    encipher,
    encipher_step,
)
from decklab.analyzers.generator import generate_sliding_window_mapping
from decklab.core.models import ALPHABET, Transformation


def test_initial_deck_is_identity():
    assert create_initial_deck() == list(ALPHABET)


def test_apply_does_not_mutate_input():
    deck = create_initial_deck()
    apply_transformation(deck, Transformation(swaps=((0, 25),)))
    assert deck == list(ALPHABET)


def test_swaps_only():
    deck = apply_transformation(create_initial_deck(), Transformation(swaps=((0, 3), (5, 1))))
    assert deck[0] == "D"
    assert deck[3] == "A"
    assert deck[1] == "F"
    assert deck[5] == "B"
    assert sorted(deck) == list(ALPHABET)


def test_rotation_happens_before_swaps():
    deck = apply_transformation(create_initial_deck(), Transformation(swaps=((0, 1),), rotation=3))
    # after rotating by 3 the deck reads D E F ... C; the swap then exchanges D and E
    assert deck[0] == "E"
    assert deck[1] == "D"
    assert deck[-1] == "C"


def test_swaps_apply_in_order():
    deck = apply_transformation(create_initial_deck(), Transformation(swaps=((0, 2), (1, 3))))
    assert deck[:4] == ["C", "D", "A", "B"]


def test_encipher_step_emits_new_top_card():
    mapping = generate_sliding_window_mapping()
    deck, char = encipher_step(create_initial_deck(), "a", mapping)
    assert char == deck[0] == "C"
    assert deck[:8] == list("CBEDGFIH")
    assert deck[-1] == "A"


def test_encipher_skips_non_letters(mapping):
    plain = encipher("attackatdawn", mapping)
    spaced = encipher("Attack at dawn!", mapping)
    assert spaced.ciphertext == plain.ciphertext
    assert spaced.deck == plain.deck
    assert len(spaced.steps) == 12


def test_encipher_is_deterministic(mapping):
    assert encipher("HELLOWORLD", mapping) == encipher("HELLOWORLD", mapping)


def test_ciphertext_is_top_card_after_each_step(mapping):
    result = encipher("THEQUICKBROWNFOX", mapping)
    assert len(result.ciphertext) == 16
    for step, char in zip(result.steps, result.ciphertext):
        assert step.deck[0] == char == step.ciphertext_char
    assert result.deck == result.steps[-1].deck
    assert result.last_transformation == mapping["X"]


def test_deck_stays_a_permutation(mapping):
    result = encipher("PACKMYBOXWITHFIVEDOZENLIQUORJUGS", mapping)
    for step in result.steps:
        assert sorted(step.deck) == list(ALPHABET)


def test_steps_record_plaintext_and_transformation(mapping):
    result = encipher("ab", mapping)
    assert [s.plaintext_char for s in result.steps] == ["A", "B"]
    assert result.steps[0].transformation == mapping["A"]
    assert result.steps[1].transformation == mapping["B"]


def test_empty_plaintext():
    result = encipher("123 ...", generate_sliding_window_mapping())
    assert result.ciphertext == ""
    assert result.steps == []
    assert result.last_transformation is None
    assert result.deck == list(ALPHABET)


def test_non_ascii_letters_are_skipped(mapping):
    assert encipher("éaß", mapping).ciphertext == encipher("a", mapping).ciphertext
