"""Style rule enforcement: banned wording, sentence caps and punctuation cleanup.

The enforcer is the last stage of every rewrite. It replaces overused
"robotic" phrases with plain wording (or deletes them when they are pure
filler), turns em dashes, spaced en dashes and semicolons into sentence
breaks, strips list markers, splits sentences longer than the word cap and
repairs the punctuation artifacts earlier stages leave behind. Unspaced en
dashes between numbers or words mark ranges and are left alone. Every change is
logged as a ``StyleRuleAction``.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.text.analyzer import SENTENCE_BOUNDARY

logger = logging.getLogger(__name__)


@dataclass
class StyleRuleAction:
    """One enforcement or cleanup step taken during a rewrite call."""

    code: str
    meta: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the action to a dictionary."""
        return {"code": self.code, "meta": self.meta}


# (pattern, replacement); an empty replacement deletes pure filler.
# Longer phrases come before the single words they contain.
BANNED_PHRASES: Tuple[Tuple[str, str], ...] = (
    (r"it(?: is|'s) important to note that\b\s*", ""),
    (r"it(?: is|'s) worth noting that\b\s*", ""),
    (r"in today's (?:fast-paced |digital |modern |ever-changing )?world\b,?\s*", ""),
    (r"in conclusion\b,?\s*", ""),
    (r"in summary\b,?\s*", ""),
    (r"in a world where\b", "where"),
    (r"plays an? (?:crucial|pivotal|key|vital|significant) role in\b", "matters for"),
    (r"play an? (?:crucial|pivotal|key|vital|significant) role in\b", "matter for"),
    (r"remains to be seen\b", "is unclear"),
    (r"delves into\b", "looks into"),
    (r"delved into\b", "looked into"),
    (r"delving into\b", "looking into"),
    (r"delve into\b", "look into"),
    (r"delves\b", "digs"),
    (r"delved\b", "dug"),
    (r"delving\b", "digging"),
    (r"delve\b", "dig"),
    (r"dive deep into\b", "look closely at"),
    (r"deep dive into\b", "close look at"),
    (r"embarks on\b", "starts"),
    (r"embarked on\b", "started"),
    (r"embarking on\b", "starting"),
    (r"embark on\b", "start"),
    (r"sheds light on\b", "explains"),
    (r"shedding light on\b", "explaining"),
    (r"shed light on\b", "explain"),
    (r"game[- ]changers\b", "major shifts"),
    (r"game[- ]changer\b", "major shift"),
    (r"utili[sz]ation\b", "use"),
    (r"utili[sz]es\b", "uses"),
    (r"utili[sz]ed\b", "used"),
    (r"utili[sz]ing\b", "using"),
    (r"utili[sz]e\b", "use"),
    (r"leverages\b", "uses"),
    (r"leveraged\b", "used"),
    (r"leveraging\b", "using"),
    (r"leverage\b", "use"),
    (r"harnesses\b", "uses"),
    (r"harnessed\b", "used"),
    (r"harnessing\b", "using"),
    (r"harness\b", "use"),
    (r"revolutionizes\b", "transforms"),
    (r"revolutionized\b", "transformed"),
    (r"revolutionizing\b", "transforming"),
    (r"revolutionize\b", "transform"),
    (r"elucidates\b", "explains"),
    (r"elucidate\b", "explain"),
    (r"unveils\b", "reveals"),
    (r"unveiled\b", "revealed"),
    (r"unveiling\b", "revealing"),
    (r"unveil\b", "reveal"),
    (r"tapestries\b", "mixes"),
    (r"tapestry\b", "mix"),
    (r"testament to\b", "sign of"),
    (r"ever-evolving\b", "changing"),
    (r"cutting-edge\b", "advanced"),
    (r"groundbreaking\b", "new"),
    (r"pivotal\b", "key"),
    (r"crucial\b", "key"),
    (r"intricate\b", "complex"),
    (r"seamlessly\b", "smoothly"),
    (r"seamless\b", "smooth"),
    (r"realms\b", "fields"),
    (r"realm\b", "field"),
    (r"very\b\s*", ""),
    (r"really\b\s*", ""),
    (r"literally\b\s*", ""),
    (r"actually\b\s*", ""),
    (r"basically\b\s*", ""),
)

BANNED_RULES = tuple(
    (re.compile(r"(?P<article>\b(?:an?)\s+)?\b(?P<phrase>%s)" % pattern, re.IGNORECASE), replacement)
    for pattern, replacement in BANNED_PHRASES
)

BULLET_PATTERN = re.compile(r"^[ \t]*(?:[#>*\-+•]+|\d+[.)])[ \t]+", re.MULTILINE)
DASH_PATTERN = re.compile(r"\s*—\s*|\s+(?:–|--)\s+")
SEMICOLON_PATTERN = re.compile(r"\s*;\s*")
TERMINAL_PATTERN = re.compile(r"[.!?][\"')\]]*$")

# Vowel-initial words read with a consonant sound, and the reverse
A_BEFORE_VOWEL = re.compile(r"(?:uni|use|usu|uti|ure|eu|one\b|once)", re.IGNORECASE)
AN_BEFORE_CONSONANT = re.compile(r"(?:hour|honest|honou?r|heir)", re.IGNORECASE)


def _match_case(source: str, replacement: str) -> str:
    """Carry the capitalization of source over to replacement."""
    if not replacement or not source:
        return replacement
    if len(source) > 1 and source.isupper():
        return replacement.upper()
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def _article_for(article: str, following: str) -> str:
    """Pick "a" or "an" for the following word, keeping the article's case."""
    if not following:
        return article
    if following[0].lower() in "aeiou":
        word = "a" if A_BEFORE_VOWEL.match(following) else "an"
    else:
        word = "an" if AN_BEFORE_CONSONANT.match(following) else "a"
    spacing = article[len(article.rstrip()):]
    return _match_case(article.strip(), word) + spacing


def find_banned_phrases(text: str) -> List[str]:
    """List every banned phrase found in text, lowercased, in rule order.

    Args:
        text: Text to scan

    Returns:
        Matched phrases; empty when the text is clean
    """
    hits = []
    for pattern, _ in BANNED_RULES:
        for match in pattern.finditer(text):
            hits.append(match.group("phrase").strip(" ,").lower())
    return hits


def strip_banned_phrases(text: str, actions: Optional[List[StyleRuleAction]] = None) -> str:
    """Replace or delete every banned phrase in a single sweep.

    Args:
        text: Text to clean
        actions: Optional action log to append to

    Returns:
        Text without banned phrases
    """
    if actions is None:
        actions = []

    for pattern, replacement in BANNED_RULES:

        def substitute(match, replacement=replacement):
            phrase = match.group("phrase")
            article = match.group("article") or ""
            new_phrase = _match_case(phrase, replacement)
            if replacement:
                actions.append(StyleRuleAction("replace_banned", {"from": phrase.strip().lower(), "to": replacement}))
                if article:
                    article = _article_for(article, new_phrase)
            else:
                actions.append(StyleRuleAction("remove_banned", phrase.strip(" ,").lower()))
                if article:
                    article = _article_for(article, match.string[match.end():].lstrip())
            return article + new_phrase

        text = pattern.sub(substitute, text)

    return text


def strip_list_markers(text: str, actions: Optional[List[StyleRuleAction]] = None) -> str:
    """Turn list items into plain sentences, one per line.

    Later stages join single-newline lines into running prose, so markers
    have to go while each item still starts its own line. An item without
    terminal punctuation gets a period.

    Args:
        text: Draft text
        actions: Optional action log to append to

    Returns:
        Text without list markers
    """
    if not BULLET_PATTERN.search(text):
        return text

    lines = []
    for line in text.split("\n"):
        item = BULLET_PATTERN.sub("", line)
        if item != line:
            item = item.rstrip()
            if item and not TERMINAL_PATTERN.search(item):
                item = item.rstrip(",;:") + "."
        lines.append(item)
    if actions is not None:
        actions.append(StyleRuleAction("strip_bullets"))
    return "\n".join(lines)


def _split_long_sentence(sentence: str, max_words: int) -> List[str]:
    """Split a sentence at its midpoint word boundary until no piece exceeds max_words."""
    words = sentence.split()
    if len(words) <= max_words:
        return [sentence]

    cut = math.ceil(len(words) / 2)
    first = " ".join(words[:cut]).rstrip(",;:")
    if not re.search(r"[.!?]$", first):
        first += "."
    second = " ".join(words[cut:])
    second = second[0].upper() + second[1:]

    return _split_long_sentence(first, max_words) + _split_long_sentence(second, max_words)


def _cap_sentence_length(paragraph: str, max_words: int, actions: List[StyleRuleAction]) -> str:
    pieces = []
    for sentence in SENTENCE_BOUNDARY.split(paragraph):
        if not sentence.strip():
            continue
        count = len(sentence.split())
        if count > max_words:
            actions.append(StyleRuleAction("split_long_sentence", {"length": count}))
        pieces.extend(_split_long_sentence(sentence.strip(), max_words))
    return " ".join(pieces)


def _paragraphs(text: str) -> List[str]:
    return [p for p in re.split(r"\n\s*\n", text) if p.strip()]


def _collapse_spaces(paragraph: str) -> str:
    return re.sub(r"\s+", " ", paragraph).strip()


def clean_artifacts(text: str) -> str:
    """Fix punctuation and spacing artifacts left by earlier edits.

    Args:
        text: A single paragraph

    Returns:
        Cleaned paragraph
    """
    text = re.sub(r"\s+([.!?,;:])", r"\1", text)
    text = re.sub(r",\s*,", ",", text)
    text = re.sub(r",\s*\.", ".", text)
    text = re.sub(r"\.\s*,", ".", text)
    text = re.sub(r"\s+'s\b", "'s", text)
    text = re.sub(r"\b(of)\s+of\b", r"\1", text, flags=re.IGNORECASE)
    text = re.sub(r"([.!?])([A-Z][a-z])", r"\1 \2", text)
    text = re.sub(r"^[\s,;:.!?\-*•]+", "", text)
    return _collapse_spaces(text)


def capitalize_sentences(text: str) -> str:
    """Uppercase the first letter of the text and of every sentence."""
    text = re.sub(r"([.!?][\"')\]]*\s+)([a-z])", lambda m: m.group(1) + m.group(2).upper(), text)
    if text and text[0].islower():
        text = text[0].upper() + text[1:]
    return text


def _finish_paragraph(paragraph: str, actions: List[StyleRuleAction]) -> str:
    collapsed = re.sub(r"\.{2,}", ".", paragraph)
    collapsed = re.sub(r",{2,}", ",", collapsed)
    if collapsed != paragraph:
        actions.append(StyleRuleAction("collapse_punctuation"))

    cleaned = capitalize_sentences(clean_artifacts(collapsed))
    if cleaned and not TERMINAL_PATTERN.search(cleaned):
        cleaned = cleaned.rstrip(",;:- ") + "."
        actions.append(StyleRuleAction("add_terminal_punctuation"))
    return cleaned


def _enforce_pass(text: str, settings: Settings, actions: List[StyleRuleAction]) -> str:
    text = strip_list_markers(text, actions)

    if DASH_PATTERN.search(text):
        text = DASH_PATTERN.sub(". ", text)
        actions.append(StyleRuleAction("replace_em_dash"))
    if ";" in text:
        text = SEMICOLON_PATTERN.sub(". ", text)
        actions.append(StyleRuleAction("replace_semicolon"))

    text = strip_banned_phrases(text, actions)

    paragraphs = [
        _cap_sentence_length(clean_artifacts(_collapse_spaces(p)), settings.max_sentence_words, actions)
        for p in _paragraphs(text)
    ]
    return "\n\n".join(capitalize_sentences(p) for p in paragraphs if p)


def enforce_style_rules(
    text: str, settings: Settings = DEFAULT_SETTINGS
) -> Tuple[str, List[StyleRuleAction]]:
    """Apply the style rules until the text stops changing.

    Runs at most ``settings.enforcement_passes`` passes; each pass strips list
    markers, turns dashes and semicolons into sentence breaks, rewrites
    banned phrases and splits sentences over the word cap. The result is then
    given a final punctuation cleanup.

    Args:
        text: Draft text
        settings: Thresholds to apply

    Returns:
        Tuple of (enforced text, actions taken)
    """
    actions: List[StyleRuleAction] = []
    if not text or not text.strip():
        return "", actions

    current = text.strip()
    for pass_number in range(settings.enforcement_passes):
        updated = _enforce_pass(current, settings, actions)
        if updated == current:
            break
        logger.debug("Enforcement pass %d changed the text", pass_number + 1)
        current = updated

    finished = "\n\n".join(_finish_paragraph(p, actions) for p in _paragraphs(current))
    return finished.strip(), actions
