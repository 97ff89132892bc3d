import math
import re
from typing import List, Optional, Sequence

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
TOKEN_PATTERN = re.compile(r"[a-z']+")
WORD_STRIP = ".,!?;:()[]{}'\"-—–_"


def split_sentences(text: str) -> List[str]:
    """Split text into sentences on ``.``, ``!`` or ``?`` followed by whitespace.

    Args:
        text: The text to split

    Returns:
        List of trimmed sentence strings, blank entries removed
    """
    normalized = re.sub(r"\s+", " ", text).strip()
    if not normalized:
        return []
    return [s.strip() for s in SENTENCE_BOUNDARY.split(normalized) if s.strip()]


def split_words(text: str) -> List[str]:
    """Split text on whitespace and strip surrounding punctuation from each word.

    Args:
        text: The text to split

    Returns:
        List of words; numbers count as words
    """
    result = []
    for word in re.split(r"\s+", text):
        cleaned = word.strip(WORD_STRIP)
        if cleaned:
            result.append(cleaned)
    return result


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens, keeping internal apostrophes."""
    return [
        token.strip("'")
        for token in TOKEN_PATTERN.findall(text.lower())
        if re.search(r"[a-z]", token)
    ]


def count_syllables(word: str) -> int:
    """Count syllables in a single word using vowel-group heuristics.

    Args:
        word: The word to count syllables for

    Returns:
        Number of syllables (minimum 1)
    """
    cleaned = re.sub(r"[^a-zA-Z]", "", word.lower())
    if not cleaned:
        return 1

    syllable_count = len(re.findall(r"[aeiouy]+", cleaned))

    # Silent trailing 'e'
    if cleaned.endswith("e") and syllable_count > 1:
        syllable_count -= 1

    return max(1, syllable_count)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation using the two-pass formula.

    Returns 0.0 for an empty sequence.
    """
    if not values:
        return 0.0
    avg = mean(values)
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def lexical_change_ratio(original: str, rewritten: str) -> float:
    """Fraction of word positions that differ between two texts.

    Words are compared position by position, case-insensitively. Positions
    beyond the shorter text count as changed.

    Args:
        original: Text before rewriting
        rewritten: Text after rewriting

    Returns:
        Ratio between 0 and 1, 0.0 when both texts are empty
    """
    before = [w.lower() for w in split_words(original)]
    after = [w.lower() for w in split_words(rewritten)]
    longest = max(len(before), len(after))
    if longest == 0:
        return 0.0
    same = sum(1 for a, b in zip(before, after) if a == b)
    return (longest - same) / longest


class TextAnalyzer:
    """Lazily computed sentence and word statistics for a text."""

    def __init__(self, text: str):
        """Initialize with text to analyze.

        Args:
            text: The text string to analyze
        """
        self.text = text
        self._sentences: Optional[List[str]] = None
        self._words: Optional[List[str]] = None
        self._tokens: Optional[List[str]] = None

    @property
    def sentences(self) -> List[str]:
        """List of sentences extracted from the text."""
        if self._sentences is None:
            self._sentences = split_sentences(self.text)
        return self._sentences

    @property
    def sentence_count(self) -> int:
        """Number of sentences in the text."""
        return len(self.sentences)

    @property
    def words(self) -> List[str]:
        """Words with surrounding punctuation stripped."""
        if self._words is None:
            self._words = split_words(self.text)
        return self._words

    @property
    def word_count(self) -> int:
        """Total number of words in the text."""
        return len(self.words)

    @property
    def tokens(self) -> List[str]:
        """Lowercase alphabetic tokens."""
        if self._tokens is None:
            self._tokens = tokenize(self.text)
        return self._tokens

    @property
    def sentence_lengths(self) -> List[int]:
        """Character length of each sentence."""
        return [len(s) for s in self.sentences]

    @property
    def avg_sentence_length(self) -> float:
        """Mean sentence length in characters (0.0 without sentences)."""
        return mean(self.sentence_lengths)

    @property
    def sentence_length_std(self) -> float:
        """Standard deviation of sentence length in characters."""
        return std_dev(self.sentence_lengths)

    @property
    def avg_word_length(self) -> float:
        """Mean word length in characters."""
        return mean([len(w) for w in self.words])
