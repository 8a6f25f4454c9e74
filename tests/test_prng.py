from decklab.analyzers.prng import SequenceSource, create_rng


def test_same_seed_same_sequence():
    a = create_rng(42)
    b = create_rng(42)
    assert [a() for _ in range(100)] == [b() for _ in range(100)]


def test_different_seeds_different_sequences():
    a = create_rng(1)
    b = create_rng(2)
    assert [a() for _ in range(10)] != [b() for _ in range(10)]


def test_values_in_unit_interval():
    rng = create_rng(123)
    for _ in range(1000):
        value = rng()
        assert 0.0 <= value < 1.0


def test_sources_do_not_share_state():
    a = SequenceSource(7)
    b = SequenceSource(7)
    first_a = a()
    for _ in range(50):
        b()
    c = SequenceSource(7)
    assert c() == first_a
    assert a.seed == 7


def test_large_and_negative_seeds_are_reduced_to_32_bits():
    a = SequenceSource(2**32 + 5)
    b = SequenceSource(5)
    assert [a() for _ in range(5)] == [b() for _ in range(5)]
    neg = SequenceSource(-1)
    assert 0.0 <= neg() < 1.0


def test_uint32_output_range():
    rng = SequenceSource(99)
    for _ in range(200):
        assert 0 <= rng.next_uint32() <= 0xFFFFFFFF
