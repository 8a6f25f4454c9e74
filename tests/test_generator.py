import pytest
from pydantic import ValidationError

from decklab.analyzers.generator import (
    InfeasibleConfigError,
    MappingExhaustedError,
    TransformationGenerator,
    choose_rotation,
    generate_cipher_mapping,
    generate_sliding_window_mapping,
    generate_transformation,
    transformation_key,
)
from decklab.analyzers.prng import create_rng
from decklab.core.models import (
    ALPHABET,
    CipherConfig,
    CipherMapping,
    RotationMode,
    Transformation,
)


# ── Models ──


def test_cipher_config_ranges_are_validated():
    with pytest.raises(ValidationError):
        CipherConfig(swap_count=0)
    with pytest.raises(ValidationError):
        CipherConfig(swap_count=14)
    with pytest.raises(ValidationError):
        CipherConfig(rotation_max=26)


def test_rotation_mode_cases():
    assert CipherConfig(rotation_max=0).rotation_mode is RotationMode.NONE
    assert CipherConfig(rotation_max=0, rotation_constant=True).rotation_mode is RotationMode.NONE
    assert CipherConfig(rotation_max=5, rotation_constant=True).rotation_mode is RotationMode.FIXED
    assert CipherConfig(rotation_max=5).rotation_mode is RotationMode.RANDOM


def test_transformation_rejects_repeated_positions():
    with pytest.raises(ValidationError):
        Transformation(swaps=((0, 1), (1, 2)))


def test_transformation_rejects_out_of_range_positions():
    with pytest.raises(ValidationError):
        Transformation(swaps=((0, 26),))


def test_transformation_without_rotation_must_swap_top_card():
    with pytest.raises(ValidationError):
        Transformation(swaps=((1, 2),), rotation=0)
    assert Transformation(swaps=((1, 2),), rotation=3).rotation == 3


def test_mapping_must_cover_alphabet():
    full = generate_sliding_window_mapping().transformations
    partial = {k: v for k, v in full.items() if k != "Z"}
    with pytest.raises(ValidationError):
        CipherMapping(transformations=partial)


def test_mapping_rejects_duplicate_transformations():
    full = dict(generate_sliding_window_mapping().transformations)
    full["B"] = full["A"]
    with pytest.raises(ValidationError):
        CipherMapping(transformations=full)


# ── Normalized key ──


def test_key_ignores_swap_order_and_orientation():
    a = Transformation(swaps=((3, 0), (5, 2)))
    b = Transformation(swaps=((2, 5), (0, 3)))
    assert a != b
    assert transformation_key(a) == transformation_key(b)


def test_key_distinguishes_rotation():
    a = Transformation(swaps=((0, 3), (2, 5)), rotation=1)
    b = Transformation(swaps=((0, 3), (2, 5)), rotation=2)
    assert transformation_key(a) != transformation_key(b)


# ── Single transformations ──


def test_transformation_without_rotation_starts_with_zero():
    rng = create_rng(5)
    for _ in range(50):
        t = generate_transformation(rng, 4, 0)
        assert t.swaps[0][0] == 0
        assert t.rotation == 0
        assert len(set(t.positions)) == 8


def test_transformation_with_rotation_uses_full_range():
    rng = create_rng(5)
    for _ in range(50):
        t = generate_transformation(rng, 13, 7)
        assert t.rotation == 7
        assert sorted(t.positions) == list(range(26))


def test_transformation_rejects_impossible_swap_count():
    with pytest.raises(ValueError):
        generate_transformation(create_rng(1), 14, 0)


def test_choose_rotation_policies():
    rng = create_rng(11)
    assert choose_rotation(rng, CipherConfig(rotation_max=0)) == 0
    assert choose_rotation(rng, CipherConfig(rotation_max=9, rotation_constant=True)) == 9
    for _ in range(100):
        assert 1 <= choose_rotation(rng, CipherConfig(rotation_max=4)) <= 4


# ── Seeded mapping ──


def test_mapping_has_every_letter(mapping):
    assert len(mapping) == 26
    for letter in ALPHABET:
        assert letter in mapping
        assert mapping[letter].swap_count == 4


def test_each_transformation_uses_distinct_positions(mapping):
    for _, t in mapping.items():
        assert len(t.positions) == 8
        assert len(set(t.positions)) == 8


def test_top_card_always_swapped_without_rotation():
    for seed in range(30):
        m = generate_cipher_mapping(seed, CipherConfig())
        for _, t in m.items():
            assert t.rotation == 0
            assert t.swaps[0][0] == 0


def test_transformations_pairwise_distinct():
    configs = [
        CipherConfig(),
        CipherConfig(swap_count=2),
        CipherConfig(swap_count=1, rotation_max=1),
        CipherConfig(swap_count=3, rotation_max=5),
        CipherConfig(swap_count=13, rotation_max=0),
    ]
    for config in configs:
        for seed in range(10):
            m = generate_cipher_mapping(seed, config)
            keys = {transformation_key(t) for _, t in m.items()}
            assert len(keys) == 26


def test_same_seed_same_mapping():
    assert generate_cipher_mapping(99, CipherConfig()) == generate_cipher_mapping(99, CipherConfig())


def test_different_seeds_different_mappings():
    assert generate_cipher_mapping(1, CipherConfig()) != generate_cipher_mapping(2, CipherConfig())


def test_single_swap_without_rotation_is_infeasible():
    with pytest.raises(InfeasibleConfigError):
        generate_cipher_mapping(1, CipherConfig(swap_count=1, rotation_max=0))


def test_single_swap_with_rotation_is_feasible():
    m = generate_cipher_mapping(1, CipherConfig(swap_count=1, rotation_max=1))
    assert len(m) == 26
    assert all(t.rotation == 1 for _, t in m.items())


def test_fixed_rotation_is_used_for_every_letter():
    m = generate_cipher_mapping(3, CipherConfig(swap_count=2, rotation_max=6, rotation_constant=True))
    assert {t.rotation for _, t in m.items()} == {6}


def test_random_rotation_stays_in_range():
    m = generate_cipher_mapping(3, CipherConfig(swap_count=2, rotation_max=6))
    assert all(1 <= t.rotation <= 6 for _, t in m.items())


def test_generator_records_rejections():
    generator = TransformationGenerator()
    generator.generate(8, CipherConfig(swap_count=1, rotation_max=1))
    assert set(generator.rejections) == set(ALPHABET)
    assert generator.total_rejections == sum(generator.rejections.values())
    assert generator.slow_letters == []


def test_attempt_limit_raises_when_exceeded():
    # One swap with a fixed rotation leaves only 325 candidates, so a
    # single-attempt budget collides for most seeds.
    config = CipherConfig(swap_count=1, rotation_max=1, rotation_constant=True)
    failures = 0
    for seed in range(50):
        try:
            generate_cipher_mapping(seed, config, max_attempts=1)
        except MappingExhaustedError as exc:
            assert exc.attempts == 1
            assert exc.letter in ALPHABET
            failures += 1
    assert failures > 0


def test_attempt_limit_must_be_positive():
    with pytest.raises(ValueError):
        TransformationGenerator(max_attempts=0)


# ── Sliding window ──


def test_sliding_window_is_complete_and_distinct():
    m = generate_sliding_window_mapping()
    keys = {transformation_key(t) for _, t in m.items()}
    assert len(keys) == 26
    for _, t in m.items():
        assert t.rotation == 1
        assert t.swap_count == 4
        assert t.swaps[0][0] == 0


def test_sliding_window_is_deterministic():
    assert generate_sliding_window_mapping() == generate_sliding_window_mapping()


def test_sliding_window_layout():
    m = generate_sliding_window_mapping()
    assert m["A"].swaps == ((0, 1), (2, 3), (4, 5), (6, 7))
    # Z shares A's window but pairs position 0 with slot 25 % 7 == 4
    assert m["Z"].swaps == ((0, 5), (1, 2), (3, 4), (6, 7))
    # T: window 20..25 then wraps to 1; slot 19 % 7 == 5 holds 25
    assert m["T"].swaps == ((0, 25), (20, 21), (22, 23), (24, 1))


def test_key_property_matches_function(mapping):
    assert mapping["Q"].key == transformation_key(mapping["Q"])
