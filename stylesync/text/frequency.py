"""Word frequency index used to bias synonym choice toward a writer's vocabulary."""

import re
from collections import Counter
from typing import Dict, Optional, Sequence

_SPLIT_PATTERN = re.compile(r"[^a-z']+")


def build_frequency_map(sample: str) -> Dict[str, int]:
    """Count lowercase word tokens in a writing sample.

    Tokens are separated by any run of characters other than letters and
    apostrophes. Blank input yields an empty mapping.

    Args:
        sample: Writing sample text

    Returns:
        Mapping of token to occurrence count
    """
    if not sample or not sample.strip():
        return {}
    tokens = [t for t in _SPLIT_PATTERN.split(sample.lower()) if re.search(r"[a-z]", t)]
    return dict(Counter(tokens))




def build_sample_frequency_map(samples: Sequence[str]) -> Dict[str, float]:
    """Combine per-sample token frequencies with equal weight per sample.

    Each non-blank sample is counted on its own and its counts are divided
    by its token total, so a short sample pulls as hard as a long one. The
    relative frequencies are then summed across samples.

    Args:
        samples: Writing samples

    Returns:
        Mapping of token to summed relative frequency
    """
    combined: Dict[str, float] = {}
    for sample in samples:
        counts = build_frequency_map(sample)
        total = sum(counts.values())
        if not total:
            continue
        for token, count in counts.items():
            combined[token] = combined.get(token, 0.0) + count / total
    return combined


def pick_preferred(candidates: Sequence[str], freq_map: Dict[str, float]) -> Optional[str]:
    """Return the candidate the writer uses most often.

    Args:
        candidates: Synonym candidates in priority order
        freq_map: Output of ``build_frequency_map`` or
            ``build_sample_frequency_map``

    Returns:
        The highest-scoring candidate, the first one on ties, or None when no
        candidate appears in the map
    """
    best = None
    best_score = 0.0
    for candidate in candidates:
        score = freq_map.get(candidate.lower(), 0)
        if score > best_score:
            best = candidate
            best_score = score
    return best
