"""Tunable thresholds and probabilities for the rewrite engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Numeric knobs shared by every rewrite stage.

    Callers override individual values with ``dataclasses.replace``.
    """

    # Style rule enforcement
    max_sentence_words: int = 22
    enforcement_passes: int = 3

    # Structural adjustment
    sentence_length_tolerance: float = 40.0
    min_lexical_change_ratio: float = 0.22
    aggressive_directness: float = 0.9
    structure_merge_rounds: int = 3

    # Lexical rewriting
    take_preferred_probability: float = 0.55
    transition_probability: float = 0.18
    fast_pacing: float = 0.7
    slow_pacing: float = 0.3
    long_sentence_chars: int = 120
    short_sentence_chars: int = 40
    trailing_clause_probability: float = 0.35

    # Humanization
    short_sentence_words: int = 6
    short_merge_probability: float = 0.3
    fragment_max_chars: int = 15

    # Verification and refinement
    min_avg_sentence_length: float = 40.0
    max_avg_sentence_length: float = 260.0
    min_sentence_length_std: float = 15.0
    min_unique_token_ratio: float = 0.35
    max_repeated_starter_ratio: float = 0.5
    adjust_merge_probability: float = 0.6
    starter_swap_probability: float = 0.55
    default_max_passes: int = 2

    # Contractions are dropped for profiles at or above this formality
    formal_threshold: float = 0.8

    # Lexicon notes appended by rewrite()
    max_lexicon_notes: int = 5


DEFAULT_SETTINGS = Settings()
