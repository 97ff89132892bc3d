"""Lexical rewriting biased toward a writer's vocabulary and target formality.

Words found in a fixed synonym table are swapped for a candidate chosen by,
in order of preference: the writer's own high-frequency vocabulary, the
word the writer's samples use most, or a formality-biased position in the
candidate list. A random draw keeps repeated rewrites from being identical.
Pacing and transition habits are applied at sentence level.
"""

import logging
import random
import re
from typing import Dict, List, Optional, Sequence, Tuple

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.profile import StyleProfile
from stylesync.rewrite.rules import StyleRuleAction
from stylesync.rewrite.sentences import prepend_transition, split_at_middle_comma
from stylesync.text.analyzer import split_sentences
from stylesync.text.fingerprint import SampleStyle, starts_with_transition
from stylesync.text.frequency import build_sample_frequency_map, pick_preferred

logger = logging.getLogger(__name__)

# Candidates are ordered from plain to formal; the original word is prepended.
SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "big": ("large", "substantial"),
    "small": ("little", "modest"),
    "quick": ("fast", "rapid"),
    "quickly": ("fast", "rapidly"),
    "begin": ("start", "commence"),
    "begins": ("starts", "commences"),
    "buy": ("purchase", "acquire"),
    "happy": ("glad", "pleased"),
    "sad": ("unhappy", "sorrowful"),
    "smart": ("clever", "intelligent"),
    "easy": ("simple", "straightforward"),
    "difficult": ("hard", "challenging"),
    "important": ("key", "significant"),
    "clear": ("plain", "evident"),
    "often": ("frequently", "regularly"),
    "whole": ("entire", "complete"),
    "main": ("chief", "primary"),
    "mostly": ("largely", "predominantly"),
    "strange": ("odd", "peculiar"),
    "tired": ("weary", "fatigued"),
    "choose": ("pick", "select"),
    "explain": ("describe", "clarify"),
    "rich": ("wealthy", "affluent"),
    "build": ("make", "construct"),
    "fix": ("repair", "remedy"),
    "keep": ("retain", "preserve"),
    "enormous": ("huge", "immense"),
    "maybe": ("perhaps", "possibly"),
    "idea": ("notion", "concept"),
    "problem": ("issue", "difficulty"),
    "problems": ("issues", "difficulties"),
}

TRAILING_CLAUSES = (
    ", as it happens",
    ", at least for now",
    ", in practice",
    ", more or less",
    ", as a rule",
)

WORD_PATTERN = re.compile(r"\b[A-Za-z]+\b(?!')")


def find_parentheses_ranges(text: str) -> List[Tuple[int, int]]:
    """Find all ranges of text inside parentheses.

    Args:
        text: The text to search

    Returns:
        List of (start, end) tuples for text inside parentheses
    """
    ranges = []
    stack = []
    for i, char in enumerate(text):
        if char == "(":
            stack.append(i)
        elif char == ")" and stack:
            ranges.append((stack.pop(), i + 1))
    return ranges


def is_inside_parentheses(pos: int, ranges: Sequence[Tuple[int, int]]) -> bool:
    """Check if a position falls inside any parentheses range."""
    return any(start <= pos < end for start, end in ranges)


def is_likely_proper_noun(word: str, sentence: str, word_start: int) -> bool:
    """Heuristic check if a word is likely a proper noun.

    A word capitalized anywhere except the start of a sentence is treated as
    a name.

    Args:
        word: The word to check
        sentence: The sentence containing the word
        word_start: Character position where word starts in sentence

    Returns:
        True if word is likely a proper noun, False otherwise
    """
    if not word[0].isupper():
        return False
    before = sentence[:word_start].strip()
    if not before or before.endswith((".", "!", "?", ":", ";", "\"", "(")):
        return False
    return True


def would_create_awkward_grammar(original: str, replacement: str, sentence: str, word_start: int) -> bool:
    """Check if a replacement would repeat a neighbouring word ("the the").

    Args:
        original: The original word
        replacement: The proposed replacement
        sentence: The sentence containing the word
        word_start: Character position where word starts

    Returns:
        True if the replacement would double up with a neighbour
    """
    before = sentence[:word_start].split()
    after = sentence[word_start + len(original):].split()
    target = replacement.lower()
    if before and before[-1].strip(".,!?;:\"'()").lower() == target:
        return True
    if after and after[0].strip(".,!?;:\"'()").lower() == target:
        return True
    return False


def preserve_case(source: str, replacement: str) -> str:
    """Give replacement the ALL-CAPS, Capitalized or lowercase form of source."""
    if len(source) > 1 and source.isupper():
        return replacement.upper()
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement.lower()


def preferred_candidate(
    pool: Sequence[str],
    profile: Optional[StyleProfile],
    style: Optional[SampleStyle],
    frequency_map: Optional[Dict[str, float]],
) -> str:
    """Pick the candidate the writer is most likely to use.

    Args:
        pool: Original word followed by its synonyms, plain to formal
        profile: Target profile, used for the formality slider
        style: Fingerprint holding the writer's high-frequency words
        frequency_map: Weighted token frequencies from the writer's samples

    Returns:
        The preferred candidate
    """
    if style is not None and style.high_frequency_words:
        favoured = set(style.high_frequency_words)
        for candidate in pool:
            if candidate in favoured:
                return candidate

    if frequency_map:
        picked = pick_preferred(pool, frequency_map)
        if picked is not None:
            return picked

    if profile is None:
        return pool[0]
    index = min(int(profile.formality * len(pool)), len(pool) - 1)
    return pool[index]


def _swap_words(
    sentence: str,
    profile: Optional[StyleProfile],
    style: Optional[SampleStyle],
    frequency_map: Optional[Dict[str, float]],
    rng: random.Random,
    actions: List[StyleRuleAction],
    settings: Settings,
) -> str:
    lexicon = {term.lower() for term in profile.custom_lexicon} if profile else set()
    parentheses = find_parentheses_ranges(sentence)

    def substitute(match):
        word = match.group(0)
        lower = word.lower()
        if lower not in SYNONYMS or lower in lexicon:
            return word
        if is_inside_parentheses(match.start(), parentheses):
            return word
        # Part of a hyphenated compound
        if "-" in (sentence[match.start() - 1:match.start()], sentence[match.end():match.end() + 1]):
            return word
        if is_likely_proper_noun(word, sentence, match.start()):
            return word

        pool = (lower,) + SYNONYMS[lower]
        preferred = preferred_candidate(pool, profile, style, frequency_map)
        if rng.random() < settings.take_preferred_probability:
            choice = preferred
        else:
            choice = rng.choice(pool)

        if choice == lower:
            return word
        replacement = preserve_case(word, choice)
        if would_create_awkward_grammar(word, replacement, sentence, match.start()):
            return word
        actions.append(StyleRuleAction("swap_word", {"from": lower, "to": choice}))
        return replacement

    return WORD_PATTERN.sub(substitute, sentence)


def _add_trailing_clause(sentence: str, rng: random.Random) -> str:
    clause = rng.choice(TRAILING_CLAUSES)
    return sentence[:-1].rstrip() + clause + sentence[-1]


def _rewrite_paragraph(
    paragraph: str,
    profile: Optional[StyleProfile],
    style: Optional[SampleStyle],
    frequency_map: Optional[Dict[str, float]],
    rng: random.Random,
    actions: List[StyleRuleAction],
    settings: Settings,
) -> str:
    result = []
    for index, sentence in enumerate(split_sentences(paragraph)):
        sentence = _swap_words(sentence, profile, style, frequency_map, rng, actions, settings)

        pieces = [sentence]
        if profile is not None and profile.pacing > settings.fast_pacing and len(sentence) > settings.long_sentence_chars:
            split = split_at_middle_comma(sentence)
            if split:
                pieces = list(split)
                actions.append(StyleRuleAction("pacing_split", {"length": len(sentence)}))
        elif (
            profile is not None
            and profile.pacing < settings.slow_pacing
            and len(sentence) < settings.short_sentence_chars
            and sentence.endswith(".")
            and rng.random() < settings.trailing_clause_probability
        ):
            pieces = [_add_trailing_clause(sentence, rng)]
            actions.append(StyleRuleAction("pacing_clause"))

        if (
            index > 0
            and style is not None
            and style.preferred_transitions
            and not starts_with_transition(pieces[0])
            and rng.random() < settings.transition_probability
        ):
            transition = rng.choice(style.preferred_transitions)
            pieces[0] = prepend_transition(pieces[0], transition)
            actions.append(StyleRuleAction("add_transition", transition))

        result.extend(pieces)
    return " ".join(result)


def rewrite_lexically(
    text: str,
    profile: Optional[StyleProfile] = None,
    style: Optional[SampleStyle] = None,
    frequency_map: Optional[Dict[str, float]] = None,
    rng: Optional[random.Random] = None,
    actions: Optional[List[StyleRuleAction]] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Rewrite text sentence by sentence toward a style profile.

    Args:
        text: Input text
        profile: Optional target profile
        style: Fingerprint to follow; defaults to the profile's fingerprint
        frequency_map: Writer's weighted token frequencies; built from the profile's
            samples when omitted
        rng: Random source for candidate draws
        actions: Optional action log to append to
        settings: Thresholds to apply

    Returns:
        Rewritten text with paragraph breaks preserved
    """
    if not text or not text.strip():
        return ""
    if rng is None:
        rng = random.Random()
    if actions is None:
        actions = []
    if style is None and profile is not None:
        style = profile.fingerprint
    if frequency_map is None and profile is not None and profile.samples:
        frequency_map = build_sample_frequency_map(profile.samples)

    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]
    rewritten = [
        _rewrite_paragraph(p, profile, style, frequency_map, rng, actions, settings)
        for p in paragraphs
    ]
    logger.debug("Lexical pass logged %d actions", len(actions))
    return "\n\n".join(rewritten)
