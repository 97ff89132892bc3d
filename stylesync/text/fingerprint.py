"""Style fingerprint extraction from writing samples.

A fingerprint (``SampleStyle``) is a statistical description of how someone
writes: sentence length, contraction habits, favourite transitions and
vocabulary, punctuation and clause construction. It is always computed from
scratch over the current set of samples.

When several samples are supplied each one is analysed on its own and the
results are averaged, so a short sample counts exactly as much as a long one.
"""

import logging
import re
from collections import Counter
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Sequence

from stylesync.text.analyzer import (
    TextAnalyzer,
    count_syllables,
    mean,
    split_words,
    std_dev,
    tokenize,
)
from stylesync.text.pov import detect_pov

logger = logging.getLogger(__name__)

TRANSITION_CANDIDATES = (
    "However",
    "Moreover",
    "Additionally",
    "Furthermore",
    "Meanwhile",
    "Instead",
    "Still",
    "Thus",
    "Therefore",
)

MAX_PREFERRED_TRANSITIONS = 3
MAX_HIGH_FREQUENCY_WORDS = 30
MAX_ADVERBS = 5
MAX_STARTERS = 5

CONTRACTION_PATTERN = re.compile(
    r"\b[A-Za-z]+(?:n't|'re|'ve|'ll|'m|'d)\b"
    r"|\b(?:it|that|there|here|what|who|he|she|let|where|how)'s\b",
    re.IGNORECASE,
)

STOP_WORDS = frozenset(
    """
    a about above after again against all also am an and any are as at be because
    been before being below between both but by can could did do does doing down
    during each even ever every few for from further had has have having he her here
    hers herself him himself his how i if in into is it its itself just let like
    many may me might more most much must my myself no nor not now of off often on
    once only or other our ours ourselves out over own really same shall she should
    since so some such than that the their theirs them themselves then there these
    they this those through thus to too under until up upon us very was we were
    what when where which while who whom whose why will with within without would
    yet you your yours yourself yourselves
    """.split()
)

SUBORDINATORS = ("because", "since", "although", "while", "if", "unless", "when", "where", "that", "which")
SUBORDINATE_PATTERN = re.compile(r"\b(?:%s)\b" % "|".join(SUBORDINATORS), re.IGNORECASE)
COORDINATE_PATTERN = re.compile(r",\s+(?:and|but|or|so|yet|nor)\b", re.IGNORECASE)
PARENTHETICAL_PATTERN = re.compile(r"\([^)]*\)|,\s+(?:of course|for example|for instance|in fact|however),")
APPOSITIVE_PATTERN = re.compile(r",\s+(?:a|an|the|my|our|his|her|their)\s+[^,]{2,40},", re.IGNORECASE)
FRONT_LOADED_PATTERN = re.compile(
    r"^(?:because|since|although|though|while|if|unless|when|whenever|after|before|once|as)\b",
    re.IGNORECASE,
)
PARALLEL_PATTERN = re.compile(r"\b\w+,\s+\w+(?:\s+\w+)?,?\s+(?:and|or)\s+\w+", re.IGNORECASE)
CONJUNCTIONS = frozenset(["and", "but", "or", "yet", "nor", "so"])

NOT_ADVERBS = frozenset(
    """
    only family early likely reply apply supply july italy holy ugly friendly lonely
    lovely daily weekly monthly yearly belly jelly silly rally bully fly ally
    """.split()
)
ADJECTIVE_SUFFIXES = ("ful", "ous", "ive", "able", "ible", "less", "ish", "ical", "ant", "ent")
COMMON_ADJECTIVES = frozenset(
    """
    good bad new old great small large big long short high low little own other
    right wrong best better worse worst young early late hard easy clear simple
    strong weak real true false happy sad quick slow bright dark warm cold quiet
    """.split()
)

POSITIVE_WORDS = frozenset(
    """
    good great happy love like enjoy excellent wonderful pleased glad hope best
    better success win joy fun helpful kind benefit improve easy bright calm proud
    """.split()
)
NEGATIVE_WORDS = frozenset(
    """
    bad poor sad hate angry fail failure worse worst problem wrong hard difficult
    loss lose pain hurt fear worry risk broken dark tired afraid awful terrible
    """.split()
)

COMPLEX_VOCABULARY = frozenset(
    """
    therefore however moreover furthermore consequently nevertheless additionally
    specifically particularly significantly comprehensive implementation
    optimization substantial appropriate demonstrate establish maintain facilitate
    """.split()
)
INFORMAL_WORDS = frozenset(
    """
    yeah yep nope gonna wanna gotta kinda sorta lots tons stuff things ok okay
    cool nice pretty really very just actually basically
    """.split()
)
FORMAL_STARTER_PATTERN = re.compile(
    r"^(?:Moreover|Furthermore|Additionally|Consequently|Nevertheless|However|"
    r"Therefore|Thus|Hence|Subsequently|Accordingly)\b",
    re.IGNORECASE,
)
PASSIVE_PATTERN = re.compile(
    r"\b(?:is|are|was|were|be|been|being)\s+(?:\w+ed|shown|given|made|done|taken|written|found)\b",
    re.IGNORECASE,
)
PERSONAL_PRONOUN_PATTERN = re.compile(r"\b(?:i|me|my|mine|we|us|our|ours|you|your|yours)\b", re.IGNORECASE)


@dataclass
class ConstructionPatterns:
    """Share of sentences built with each clause construction."""

    subordinate_clause_ratio: float = 0.0
    coordinate_clause_ratio: float = 0.0
    parenthetical_ratio: float = 0.0
    appositive_ratio: float = 0.0
    front_loaded_dependent_ratio: float = 0.0


@dataclass
class PunctuationPatterns:
    """Share of sentences using dashes, colons, ellipses and quotes."""

    dash_usage: float = 0.0
    colon_usage: float = 0.0
    ellipsis_usage: float = 0.0
    quote_usage: float = 0.0


@dataclass
class ModifierPatterns:
    """Where -ly adverbs sit in the sentence."""

    front_adverb_ratio: float = 0.0
    mid_adverb_ratio: float = 0.0
    end_adverb_ratio: float = 0.0


@dataclass
class SampleStyle:
    """Statistical fingerprint of a writer's samples.

    Sentence lengths are measured in characters. Ratio fields lie in [0, 1].
    """

    avg_sentence_length: float = 0.0
    sentence_length_std: float = 0.0
    uses_contractions: bool = True
    preferred_transitions: List[str] = field(default_factory=list)
    transition_start_ratio: float = 0.0
    high_frequency_words: List[str] = field(default_factory=list)
    comma_per_sentence: float = 0.0
    semicolon_ratio: float = 0.0
    top_adverbs: List[str] = field(default_factory=list)
    avg_word_length: float = 0.0
    vocabulary_complexity: float = 0.0
    question_ratio: float = 0.0
    exclamatory_ratio: float = 0.0
    common_starters: List[str] = field(default_factory=list)
    conjunction_density: float = 0.0
    adjective_density: float = 0.0
    tone_balance: Dict[str, float] = field(
        default_factory=lambda: {"positive": 0.0, "neutral": 0.0, "negative": 0.0}
    )
    tone: str = "neutral"
    personal_voice: str = "third-person"
    construction_patterns: ConstructionPatterns = field(default_factory=ConstructionPatterns)
    punctuation_patterns: PunctuationPatterns = field(default_factory=PunctuationPatterns)
    avg_clauses_per_sentence: float = 0.0
    parallel_structure_ratio: float = 0.0
    modifier_patterns: ModifierPatterns = field(default_factory=ModifierPatterns)
    formality_score: float = 0.5
    lexical_density: float = 0.0
    sentence_length_variety: float = 0.0
    paragraph_length_variety: float = 0.0
    sample_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert the fingerprint to a JSON-friendly dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SampleStyle":
        """Rebuild a fingerprint from ``to_dict`` output, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        nested = (
            ("construction_patterns", ConstructionPatterns),
            ("punctuation_patterns", PunctuationPatterns),
            ("modifier_patterns", ModifierPatterns),
        )
        for name, nested_cls in nested:
            if isinstance(values.get(name), dict):
                values[name] = nested_cls(**values[name])
        return cls(**values)


def _ratio(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total


def _ranked(counter: Counter, limit: int) -> List[str]:
    # most_common keeps first-seen order for equal counts
    return [word for word, _ in counter.most_common(limit)]


def _preferred_transitions(sentences: Sequence[str]) -> List[str]:
    counts = {t: 0 for t in TRANSITION_CANDIDATES}
    for sentence in sentences:
        for transition in TRANSITION_CANDIDATES:
            if re.match(r"%s\b" % transition, sentence, re.IGNORECASE):
                counts[transition] += 1
                break
    ranked = sorted(
        (t for t in TRANSITION_CANDIDATES if counts[t] > 0),
        key=lambda t: (-counts[t], TRANSITION_CANDIDATES.index(t)),
    )
    return ranked[:MAX_PREFERRED_TRANSITIONS]


def starts_with_transition(sentence: str) -> bool:
    """True if the sentence opens with one of the known transition words."""
    return any(re.match(r"%s\b" % t, sentence.strip(), re.IGNORECASE) for t in TRANSITION_CANDIDATES)


def _is_adverb(token: str) -> bool:
    return len(token) > 4 and token.endswith("ly") and token not in NOT_ADVERBS


def _is_adjective(token: str) -> bool:
    if token in COMMON_ADJECTIVES:
        return True
    return len(token) > 5 and token.endswith(ADJECTIVE_SUFFIXES) and not token.endswith("ment")


def _tone_balance(sentences: Sequence[str]) -> Dict[str, float]:
    positive = negative = neutral = 0
    for sentence in sentences:
        tokens = tokenize(sentence)
        pos = sum(1 for t in tokens if t in POSITIVE_WORDS)
        neg = sum(1 for t in tokens if t in NEGATIVE_WORDS)
        if pos > neg:
            positive += 1
        elif neg > pos:
            negative += 1
        else:
            neutral += 1
    total = len(sentences)
    return {
        "positive": _ratio(positive, total),
        "neutral": _ratio(neutral, total),
        "negative": _ratio(negative, total),
    }


def _dominant_tone(balance: Dict[str, float]) -> str:
    # Neutral wins ties
    best = "neutral"
    for label in ("positive", "negative"):
        if balance.get(label, 0.0) > balance.get(best, 0.0):
            best = label
    return best


def _personal_voice(text: str) -> str:
    pov = detect_pov(text).pov
    if pov == "first":
        return "first-person"
    if pov == "second":
        return "second-person"
    return "third-person"


def _modifier_patterns(sentences: Sequence[str]) -> ModifierPatterns:
    front = mid = end = 0
    for sentence in sentences:
        words = [w.lower() for w in split_words(sentence)]
        for index, word in enumerate(words):
            if not _is_adverb(word):
                continue
            if index == 0:
                front += 1
            elif index == len(words) - 1:
                end += 1
            else:
                mid += 1
    total = front + mid + end
    return ModifierPatterns(
        front_adverb_ratio=_ratio(front, total),
        mid_adverb_ratio=_ratio(mid, total),
        end_adverb_ratio=_ratio(end, total),
    )


def calculate_formality(text: str) -> float:
    """Heuristic formality score between 0 (casual) and 1 (formal).

    Starts at 0.5 and moves with contraction use, long or academic vocabulary,
    passive constructions, personal pronouns, formal sentence openers and
    colloquial words.
    """
    words = text.lower().split()
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    if not words or not sentences:
        return 0.5

    score = 0.5

    contraction_ratio = len(CONTRACTION_PATTERN.findall(text)) / len(sentences)
    if contraction_ratio > 0.3:
        score -= 0.25
    elif contraction_ratio > 0.1:
        score -= 0.15
    elif contraction_ratio == 0:
        score += 0.2

    stripped = [w.strip(".,!?;:\"'()") for w in words]
    complex_ratio = sum(1 for w in stripped if len(w) > 8 or w in COMPLEX_VOCABULARY) / len(words)
    if complex_ratio > 0.15:
        score += 0.15
    elif complex_ratio < 0.05:
        score -= 0.1

    if len(PASSIVE_PATTERN.findall(text)) / len(sentences) > 0.3:
        score += 0.1

    pronoun_ratio = len(PERSONAL_PRONOUN_PATTERN.findall(text)) / len(words)
    if pronoun_ratio > 0.05:
        score -= 0.15
    elif pronoun_ratio < 0.01:
        score += 0.1

    formal_starters = sum(1 for s in sentences if FORMAL_STARTER_PATTERN.match(s.strip()))
    if formal_starters / len(sentences) > 0.2:
        score += 0.15

    if sum(1 for w in stripped if w in INFORMAL_WORDS) / len(words) > 0.03:
        score -= 0.2

    return max(0.0, min(1.0, score))


def analyze_sample(sample: str) -> SampleStyle:
    """Compute the fingerprint of a single writing sample.

    Args:
        sample: Raw sample text

    Returns:
        SampleStyle for the sample; the default style for blank input
    """
    if not sample or not sample.strip():
        return SampleStyle()

    analyzer = TextAnalyzer(sample)
    sentences = analyzer.sentences
    n = len(sentences)
    tokens = analyzer.tokens
    words = analyzer.words

    content_tokens = [t for t in tokens if len(t) >= 4 and t not in STOP_WORDS]
    adverbs = [t for t in tokens if _is_adverb(t)]
    starters = [split_words(s)[0].lower() for s in sentences if split_words(s)]

    words_per_sentence = [len(split_words(s)) for s in sentences]
    paragraphs = [p for p in re.split(r"\n\s*\n", sample) if p.strip()]

    clause_counts = [
        1 + len(SUBORDINATE_PATTERN.findall(s)) + len(COORDINATE_PATTERN.findall(s))
        for s in sentences
    ]

    balance = _tone_balance(sentences)

    return SampleStyle(
        avg_sentence_length=analyzer.avg_sentence_length,
        sentence_length_std=analyzer.sentence_length_std,
        uses_contractions=bool(CONTRACTION_PATTERN.search(sample)),
        preferred_transitions=_preferred_transitions(sentences),
        transition_start_ratio=_ratio(sum(1 for s in sentences if starts_with_transition(s)), n),
        high_frequency_words=_ranked(Counter(content_tokens), MAX_HIGH_FREQUENCY_WORDS),
        comma_per_sentence=_ratio(sample.count(","), n),
        semicolon_ratio=_ratio(sum(1 for s in sentences if ";" in s), n),
        top_adverbs=_ranked(Counter(adverbs), MAX_ADVERBS),
        avg_word_length=analyzer.avg_word_length,
        vocabulary_complexity=_ratio(sum(1 for w in words if count_syllables(w) >= 3), len(words)),
        question_ratio=_ratio(sum(1 for s in sentences if s.endswith("?")), n),
        exclamatory_ratio=_ratio(sum(1 for s in sentences if s.endswith("!")), n),
        common_starters=_ranked(Counter(starters), MAX_STARTERS),
        conjunction_density=_ratio(sum(1 for t in tokens if t in CONJUNCTIONS), len(tokens)),
        adjective_density=_ratio(sum(1 for t in tokens if _is_adjective(t)), len(tokens)),
        tone_balance=balance,
        tone=_dominant_tone(balance),
        personal_voice=_personal_voice(sample),
        construction_patterns=ConstructionPatterns(
            subordinate_clause_ratio=_ratio(sum(1 for s in sentences if SUBORDINATE_PATTERN.search(s)), n),
            coordinate_clause_ratio=_ratio(sum(1 for s in sentences if COORDINATE_PATTERN.search(s)), n),
            parenthetical_ratio=_ratio(sum(1 for s in sentences if PARENTHETICAL_PATTERN.search(s)), n),
            appositive_ratio=_ratio(sum(1 for s in sentences if APPOSITIVE_PATTERN.search(s)), n),
            front_loaded_dependent_ratio=_ratio(
                sum(1 for s in sentences if FRONT_LOADED_PATTERN.match(s)), n
            ),
        ),
        punctuation_patterns=PunctuationPatterns(
            dash_usage=_ratio(sum(1 for s in sentences if re.search(r"—|–|\s-\s", s)), n),
            colon_usage=_ratio(sum(1 for s in sentences if ":" in s), n),
            ellipsis_usage=_ratio(sum(1 for s in sentences if "..." in s or "…" in s), n),
            quote_usage=_ratio(sum(1 for s in sentences if re.search(r"[\"“”]", s)), n),
        ),
        avg_clauses_per_sentence=mean(clause_counts),
        parallel_structure_ratio=_ratio(sum(1 for s in sentences if PARALLEL_PATTERN.search(s)), n),
        modifier_patterns=_modifier_patterns(sentences),
        formality_score=calculate_formality(sample),
        lexical_density=_ratio(sum(1 for t in tokens if t not in STOP_WORDS), len(tokens)),
        sentence_length_variety=std_dev(words_per_sentence),
        paragraph_length_variety=std_dev([len(split_words(p)) for p in paragraphs]),
        sample_count=1,
    )


def _merge_ranked(lists: Sequence[List[str]], limit: int) -> List[str]:
    """Combine ranked lists so every sample's ranking counts equally."""
    scores: Dict[str, float] = {}
    for ranked in lists:
        size = len(ranked)
        for rank, item in enumerate(ranked):
            scores[item] = scores.get(item, 0.0) + (size - rank) / size
    # dict preserves first-seen order for ties
    return sorted(scores, key=lambda item: -scores[item])[:limit]


def _majority(labels: Sequence[str], default: str) -> str:
    if not labels:
        return default
    return Counter(labels).most_common(1)[0][0]


def _average_dataclass(cls, items: Sequence[Any]) -> Any:
    return cls(**{f.name: mean([getattr(i, f.name) for i in items]) for f in fields(cls)})


_AVERAGED_FIELDS = (
    "avg_sentence_length",
    "sentence_length_std",
    "transition_start_ratio",
    "comma_per_sentence",
    "semicolon_ratio",
    "avg_word_length",
    "vocabulary_complexity",
    "question_ratio",
    "exclamatory_ratio",
    "conjunction_density",
    "adjective_density",
    "avg_clauses_per_sentence",
    "parallel_structure_ratio",
    "formality_score",
    "lexical_density",
    "sentence_length_variety",
    "paragraph_length_variety",
)


def extract_style(samples: Sequence[str]) -> SampleStyle:
    """Build a fingerprint from one or more writing samples.

    Each non-blank sample is analysed separately and the per-sample results
    are combined with equal weight: numeric statistics are plain means,
    contraction use and the tone and voice labels are majority votes, and
    ranked word lists are merged by rank.

    Args:
        samples: Writing samples

    Returns:
        Aggregated SampleStyle; the default style when no sample has text
    """
    styles = analyze_samples_individually(samples)
    if not styles:
        return SampleStyle()
    if len(styles) == 1:
        return styles[0]

    logger.debug("Aggregating fingerprint over %d samples", len(styles))

    aggregated = SampleStyle(
        **{name: mean([getattr(s, name) for s in styles]) for name in _AVERAGED_FIELDS}
    )
    aggregated.uses_contractions = sum(1 for s in styles if s.uses_contractions) > len(styles) / 2
    aggregated.preferred_transitions = _merge_ranked(
        [s.preferred_transitions for s in styles], MAX_PREFERRED_TRANSITIONS
    )
    aggregated.high_frequency_words = _merge_ranked(
        [s.high_frequency_words for s in styles], MAX_HIGH_FREQUENCY_WORDS
    )
    aggregated.top_adverbs = _merge_ranked([s.top_adverbs for s in styles], MAX_ADVERBS)
    aggregated.common_starters = _merge_ranked([s.common_starters for s in styles], MAX_STARTERS)
    aggregated.tone_balance = {
        key: mean([s.tone_balance.get(key, 0.0) for s in styles])
        for key in ("positive", "neutral", "negative")
    }
    aggregated.tone = _majority([s.tone for s in styles], "neutral")
    aggregated.personal_voice = _majority([s.personal_voice for s in styles], "third-person")
    aggregated.construction_patterns = _average_dataclass(
        ConstructionPatterns, [s.construction_patterns for s in styles]
    )
    aggregated.punctuation_patterns = _average_dataclass(
        PunctuationPatterns, [s.punctuation_patterns for s in styles]
    )
    aggregated.modifier_patterns = _average_dataclass(
        ModifierPatterns, [s.modifier_patterns for s in styles]
    )
    aggregated.sample_count = len(styles)
    return aggregated


def analyze_samples_individually(samples: Sequence[str]) -> List[SampleStyle]:
    """Per-sample fingerprints, in input order, blank samples skipped."""
    return [analyze_sample(s) for s in samples if s and s.strip()]
