"""Structural adjustment: sentence length, transitions and directness.

Runs after lexical rewriting in the main pipeline and again on every
refinement pass.
"""

import logging
import math
import re
from typing import List, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.profile import StyleProfile
from stylesync.rewrite.rules import StyleRuleAction
from stylesync.rewrite.sentences import (
    merge_sentences,
    prepend_transition,
    split_at_middle_comma,
)
from stylesync.text.analyzer import lexical_change_ratio, mean, split_sentences
from stylesync.text.fingerprint import SampleStyle, starts_with_transition

logger = logging.getLogger(__name__)

ORNATE_PHRASES = (
    (r"a myriad of", "many"),
    (r"a plethora of", "many"),
    (r"a multitude of", "many"),
    (r"in order to", "to"),
    (r"due to the fact that", "because"),
    (r"at this point in time", "now"),
    (r"at the end of the day", "in the end"),
    (r"each and every", "every"),
    (r"first and foremost", "first"),
    (r"for all intents and purposes", "in effect"),
    (r"in the event that", "if"),
    (r"with regard to", "about"),
    (r"in light of the fact that", "because"),
    (r"the lion's share of", "most of"),
    (r"the tip of the iceberg", "a small part"),
    (r"paint a picture of", "describe"),
    (r"paints a picture of", "describes"),
)

ORNAMENTAL_ADJECTIVES = (
    "beautiful", "stunning", "vibrant", "breathtaking", "magnificent", "gorgeous",
    "majestic", "exquisite", "lush", "dazzling", "captivating", "enchanting",
)

DOUBLED_ORNAMENT = re.compile(
    r"\b(%s)(?:,\s*|\s+and\s+|\s+)(?:%s)\b" % ("|".join(ORNAMENTAL_ADJECTIVES), "|".join(ORNAMENTAL_ADJECTIVES)),
    re.IGNORECASE,
)

FLORID_TO_PLAIN = (
    ("commence", "start"),
    ("commences", "starts"),
    ("numerous", "many"),
    ("assist", "help"),
    ("obtain", "get"),
    ("demonstrate", "show"),
    ("demonstrates", "shows"),
    ("sufficient", "enough"),
    ("approximately", "about"),
    ("subsequently", "later"),
    ("individuals", "people"),
    ("facilitate", "help"),
    ("regarding", "about"),
    ("prior to", "before"),
    ("terminate", "end"),
    ("inquire", "ask"),
    ("require", "need"),
    ("requires", "needs"),
    ("possess", "have"),
    ("possesses", "has"),
    ("predominantly", "mostly"),
    ("significant", "big"),
)


def _replace_with_case(pattern: str, replacement: str, text: str) -> str:
    def substitute(match):
        found = match.group(0)
        if found[0].isupper():
            return replacement[0].upper() + replacement[1:]
        return replacement

    return re.sub(r"\b%s\b" % pattern, substitute, text, flags=re.IGNORECASE)


def _merge_toward(sentences: List[str], target: float) -> List[str]:
    """Merge each adjacent pair that both sit below the target length."""
    result = []
    i = 0
    while i < len(sentences):
        current = sentences[i]
        if (
            i + 1 < len(sentences)
            and len(current) < target
            and len(sentences[i + 1]) < target
            and current.endswith(".")
        ):
            result.append(merge_sentences(current, sentences[i + 1]))
            i += 2
            continue
        result.append(current)
        i += 1
    return result


def _split_toward(sentences: List[str], target: float) -> List[str]:
    result = []
    for sentence in sentences:
        if len(sentence) > target:
            split = split_at_middle_comma(sentence)
            if split:
                result.extend(split)
                continue
        result.append(sentence)
    return result


def adjust_sentence_length(
    sentences: List[str],
    target: float,
    actions: List[StyleRuleAction],
    settings: Settings = DEFAULT_SETTINGS,
) -> List[str]:
    """Merge or split sentences until the mean length is within tolerance of target.

    Args:
        sentences: Sentences of one paragraph
        target: Target mean sentence length in characters
        actions: Action log to append to
        settings: Supplies the tolerance and the round limit

    Returns:
        Adjusted sentences
    """
    for _ in range(settings.structure_merge_rounds):
        current = mean([len(s) for s in sentences])
        if current < target - settings.sentence_length_tolerance and len(sentences) > 1:
            updated = _merge_toward(sentences, target)
            code = "merge_toward_target"
        elif current > target + settings.sentence_length_tolerance:
            updated = _split_toward(sentences, target)
            code = "split_toward_target"
        else:
            break
        if updated == sentences:
            break
        actions.append(StyleRuleAction(code, {"from": round(current, 1), "target": round(target, 1)}))
        sentences = updated
    return sentences


def inject_transitions(
    sentences: List[str], style: SampleStyle, actions: List[StyleRuleAction]
) -> List[str]:
    """Open sentences with preferred transitions up to the writer's observed rate."""
    if not style.preferred_transitions or style.transition_start_ratio <= 0 or len(sentences) < 2:
        return sentences

    target = math.ceil(len(sentences) * style.transition_start_ratio)
    present = sum(1 for s in sentences if starts_with_transition(s))
    result = list(sentences)
    for i in range(1, len(result)):
        if present >= target:
            break
        if starts_with_transition(result[i]):
            continue
        transition = style.preferred_transitions[present % len(style.preferred_transitions)]
        result[i] = prepend_transition(result[i], transition)
        actions.append(StyleRuleAction("inject_transition", transition))
        present += 1
    return result


def simplify_ornate(text: str, actions: List[StyleRuleAction]) -> str:
    """Replace ornate fixed phrases and collapse doubled ornamental adjectives."""
    for pattern, replacement in ORNATE_PHRASES:
        updated = _replace_with_case(pattern, replacement, text)
        if updated != text:
            actions.append(StyleRuleAction("simplify_phrase", pattern))
            text = updated

    updated = DOUBLED_ORNAMENT.sub(r"\1", text)
    if updated != text:
        actions.append(StyleRuleAction("strip_ornamental_adjective"))
        text = updated
    return text


def force_plain_words(text: str, actions: List[StyleRuleAction]) -> str:
    """Swap every florid word in the fixed bank for its plain equivalent."""
    for florid, plain in FLORID_TO_PLAIN:
        updated = _replace_with_case(florid, plain, text)
        if updated != text:
            actions.append(StyleRuleAction("force_plain_word", {"from": florid, "to": plain}))
            text = updated
    return text


def adjust_structure(
    text: str,
    original: str,
    profile: Optional[StyleProfile] = None,
    style: Optional[SampleStyle] = None,
    actions: Optional[List[StyleRuleAction]] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Apply the structural adjustment pass.

    Sentence length is nudged toward the fingerprint's average, transitions
    are added up to the fingerprint's transition rate and, for very direct
    profiles, ornate wording is simplified. At that directness the result must
    also differ from ``original`` in at least ``min_lexical_change_ratio`` of
    word positions, which is enforced with a fixed florid-to-plain word bank.

    Args:
        text: Text from the lexical stage
        original: Text as it entered the pipeline
        profile: Optional target profile
        style: Fingerprint; defaults to the profile's fingerprint
        actions: Optional action log to append to
        settings: Thresholds to apply

    Returns:
        Adjusted text with paragraph breaks preserved
    """
    if actions is None:
        actions = []
    if not text or not text.strip():
        return ""
    if style is None and profile is not None:
        style = profile.fingerprint

    if style is not None and style.avg_sentence_length > 0:
        paragraphs = []
        for paragraph in re.split(r"\n\s*\n", text):
            if not paragraph.strip():
                continue
            sentences = split_sentences(paragraph)
            sentences = adjust_sentence_length(sentences, style.avg_sentence_length, actions, settings)
            sentences = inject_transitions(sentences, style, actions)
            paragraphs.append(" ".join(sentences))
        text = "\n\n".join(paragraphs)

    if profile is not None and profile.directness > settings.aggressive_directness:
        text = simplify_ornate(text, actions)
        ratio = lexical_change_ratio(original, text)
        if ratio < settings.min_lexical_change_ratio:
            logger.debug("Change ratio %.2f below minimum, forcing plain words", ratio)
            text = force_plain_words(text, actions)

    return text
