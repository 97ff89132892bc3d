"""Humanization cleanup for rewritten drafts.

Removes the mechanical artifacts generated or rule-based rewriting tends to
leave: canned openings, stuttered words and phrases, inconsistent
contractions, choppy runs of very short sentences and dangling fragments.
"""

import logging
import random
import re
from typing import List, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.rewrite.rules import StyleRuleAction
from stylesync.rewrite.sentences import merge_sentences
from stylesync.text.analyzer import split_sentences

logger = logging.getLogger(__name__)

MECHANICAL_OPENERS = (
    re.compile(r"^here(?:'s| is) (?:a|an|the|your) [^:\n]{0,80}:\s*", re.IGNORECASE),
    re.compile(r"^(?:certainly|sure|of course|absolutely)[!,.]\s*", re.IGNORECASE),
    re.compile(r"^this is (?:a|an|the) (?:rewritten|paraphrased|revised|reworded) [^:\n]{0,60}:\s*", re.IGNORECASE),
    re.compile(r"^(?:paraphrased|rewritten|revised) (?:version|text)\s*[:\-]\s*", re.IGNORECASE),
)

REPEATED_WORD = re.compile(r"\b(\w+)(?:\s+\1\b){2,}", re.IGNORECASE)
REPEATED_PHRASE = re.compile(r"(\b\w[^\n]{8,28}[\w.!?])(?:\s+\1)+(?!\w)", re.IGNORECASE)

# (expanded pattern, contraction); "let us" and the ambiguous "has" forms stay expanded
CONTRACTIONS = (
    (r"I am", "I'm"),
    (r"I will", "I'll"),
    (r"I have", "I've"),
    (r"I would", "I'd"),
    (r"you are", "you're"),
    (r"you will", "you'll"),
    (r"you have", "you've"),
    (r"we are", "we're"),
    (r"we will", "we'll"),
    (r"we have", "we've"),
    (r"they are", "they're"),
    (r"they will", "they'll"),
    (r"they have", "they've"),
    (r"he is", "he's"),
    (r"he will", "he'll"),
    (r"she is", "she's"),
    (r"she will", "she'll"),
    (r"it is", "it's"),
    (r"it will", "it'll"),
    (r"that is", "that's"),
    (r"there is", "there's"),
    (r"what is", "what's"),
    (r"who is", "who's"),
    (r"where is", "where's"),
    (r"do not", "don't"),
    (r"does not", "doesn't"),
    (r"did not", "didn't"),
    (r"will not", "won't"),
    (r"would not", "wouldn't"),
    (r"could not", "couldn't"),
    (r"should not", "shouldn't"),
    (r"cannot", "can't"),
    (r"can not", "can't"),
    (r"is not", "isn't"),
    (r"are not", "aren't"),
    (r"was not", "wasn't"),
    (r"were not", "weren't"),
    (r"has not", "hasn't"),
    (r"have not", "haven't"),
    (r"had not", "hadn't"),
)

CONTRACTION_RULES = tuple(
    (re.compile(r"\b%s\b(?!')" % expanded, 0 if expanded.startswith("I ") else re.IGNORECASE), contracted)
    for expanded, contracted in CONTRACTIONS
)

IRREGULAR_EXPANSIONS = {
    "won't": "will not",
    "can't": "cannot",
    "shan't": "shall not",
    "ain't": "is not",
    "let's": "let us",
}

# Generic suffix expansions, applied after the irregular forms
SUFFIX_EXPANSIONS = (
    (re.compile(r"\b([A-Za-z]+)n't\b"), r"\1 not"),
    (re.compile(r"\b([A-Za-z]+)'re\b"), r"\1 are"),
    (re.compile(r"\b([A-Za-z]+)'ve\b"), r"\1 have"),
    (re.compile(r"\b([A-Za-z]+)'ll\b"), r"\1 will"),
    (re.compile(r"\b([A-Za-z]+)'m\b"), r"\1 am"),
    (re.compile(r"\b([A-Za-z]+)'d\b"), r"\1 would"),
    (re.compile(r"\b(it|that|there|here|what|who|he|she|where|how)'s\b", re.IGNORECASE), r"\1 is"),
)


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def apply_contractions(text: str) -> str:
    """Contract common expanded forms ("do not" becomes "don't")."""
    for pattern, contracted in CONTRACTION_RULES:
        text = pattern.sub(lambda m, c=contracted: _match_case(m.group(0), c), text)
    return text


def expand_contractions(text: str) -> str:
    """Expand every contraction ("don't" becomes "do not")."""
    for contraction, expanded in IRREGULAR_EXPANSIONS.items():
        text = re.sub(
            r"\b%s\b" % re.escape(contraction),
            lambda m, e=expanded: _match_case(m.group(0), e),
            text,
            flags=re.IGNORECASE,
        )
    for pattern, replacement in SUFFIX_EXPANSIONS:
        text = pattern.sub(replacement, text)
    return text


def strip_mechanical_openers(text: str, actions: List[StyleRuleAction]) -> str:
    """Remove canned openings such as "Here's a rewritten version:" or "Certainly,"."""
    for pattern in MECHANICAL_OPENERS:
        stripped = pattern.sub("", text, count=1)
        if stripped != text:
            actions.append(StyleRuleAction("remove_opener", pattern.pattern))
            text = stripped.lstrip()
    return text


def merge_short_sentences(
    text: str,
    rng: random.Random,
    actions: List[StyleRuleAction],
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Probabilistically join pairs of very short adjacent sentences.

    Two neighbouring sentences of at most ``settings.short_sentence_words``
    words each are joined with ", and" with probability
    ``settings.short_merge_probability``.
    """
    sentences = split_sentences(text)
    if len(sentences) < 2:
        return text

    result = []
    i = 0
    while i < len(sentences):
        current = sentences[i]
        if (
            i + 1 < len(sentences)
            and current.endswith(".")
            and len(current.split()) <= settings.short_sentence_words
            and len(sentences[i + 1].split()) <= settings.short_sentence_words
            and rng.random() < settings.short_merge_probability
        ):
            result.append(merge_sentences(current, sentences[i + 1]))
            actions.append(StyleRuleAction("merge_short_sentences"))
            i += 2
            continue
        result.append(current)
        i += 1
    return " ".join(result)


def drop_trailing_fragment(
    text: str, actions: List[StyleRuleAction], settings: Settings = DEFAULT_SETTINGS
) -> str:
    """Remove a short unterminated fragment dangling at the end of the text."""
    sentences = split_sentences(text)
    if len(sentences) < 2:
        return text
    last = sentences[-1]
    if not re.search(r"[.!?][\"')\]]*$", last) and len(last) < settings.fragment_max_chars:
        actions.append(StyleRuleAction("drop_fragment", last))
        stripped = text.rstrip()
        index = stripped.rfind(last)
        if index > 0:
            return stripped[:index].rstrip()
        return " ".join(sentences[:-1])
    return text


def humanize_text(
    text: str,
    allow_contractions: bool = True,
    rng: Optional[random.Random] = None,
    actions: Optional[List[StyleRuleAction]] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Run the humanization cleanup over a draft.

    Args:
        text: Draft text
        allow_contractions: Contract common forms when True, expand all
            contractions when False
        rng: Random source for the short-sentence merge
        actions: Optional action log to append to
        settings: Thresholds to apply

    Returns:
        Cleaned text
    """
    if rng is None:
        rng = random.Random()
    if actions is None:
        actions = []
    if not text or not text.strip():
        return ""

    text = text.replace("’", "'").replace("‘", "'")
    text = re.sub(r"[ \t]+", " ", text).strip()
    text = re.sub(r"\s+'s\b", "'s", text)

    text = strip_mechanical_openers(text, actions)

    collapsed = REPEATED_WORD.sub(r"\1", text)
    if collapsed != text:
        actions.append(StyleRuleAction("collapse_repeated_word"))
        text = collapsed

    collapsed = REPEATED_PHRASE.sub(r"\1", text)
    if collapsed != text:
        actions.append(StyleRuleAction("collapse_repeated_phrase"))
        text = collapsed

    adjusted = apply_contractions(text) if allow_contractions else expand_contractions(text)
    if adjusted != text:
        actions.append(StyleRuleAction("contract" if allow_contractions else "expand_contractions"))
        text = adjusted

    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]
    paragraphs = [merge_short_sentences(p, rng, actions, settings) for p in paragraphs]
    text = "\n\n".join(paragraphs)

    text = drop_trailing_fragment(text, actions, settings)
    logger.debug("Humanization produced %d characters", len(text))
    return text.strip()
