"""
DeckLab Analyzers
=================

The deck cipher and its cryptanalysis: seeded sequence source,
transformation generator, deck engine, isomorph analyzer, and the
ciphertext frequency profile.
"""

from decklab.analyzers.deck import (
    apply_transformation,
    create_initial_deck,
    encipher,
    encipher_step,
)
from decklab.analyzers.frequency import FrequencyAnalyzer
from decklab.analyzers.generator import (
    InfeasibleConfigError,
    MappingExhaustedError,
    TransformationGenerator,
    generate_cipher_mapping,
    generate_sliding_window_mapping,
    generate_transformation,
    transformation_key,
)
from decklab.analyzers.isomorph import (
    IsomorphAnalyzer,
    count_pattern_occurrences,
    find_isomorphs,
    isomorph_interestingness,
    isomorph_pattern,
    sort_by_interestingness,
)
from decklab.analyzers.prng import SequenceSource, create_rng

__all__ = [
    "FrequencyAnalyzer",
    "InfeasibleConfigError",
    "IsomorphAnalyzer",
    "MappingExhaustedError",
    "SequenceSource",
    "TransformationGenerator",
    "apply_transformation",
    "count_pattern_occurrences",
    "create_initial_deck",
    "create_rng",
    "encipher",
    "encipher_step",
    "find_isomorphs",
    "generate_cipher_mapping",
    "generate_sliding_window_mapping",
    "generate_transformation",
    "isomorph_interestingness",
    "isomorph_pattern",
    "sort_by_interestingness",
    "transformation_key",
]
