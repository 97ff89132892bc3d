"""Verification and refinement loop.

A bounded state machine: the draft is finalized, measured, and either
accepted or adjusted and finalized again until the pass budget runs out.
"""

import enum
import logging
import random
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.profile import RewriteOptions, StyleProfile
from stylesync.rewrite.pipeline import finalize, lexicon_notes
from stylesync.rewrite.rules import StyleRuleAction, strip_banned_phrases
from stylesync.rewrite.sentences import merge_sentences, prepend_transition
from stylesync.text.analyzer import split_sentences
from stylesync.text.diagnosis import HumanizationMetrics, contains_term, measure, sentence_starter
from stylesync.text.frequency import build_sample_frequency_map

logger = logging.getLogger(__name__)

FALLBACK_TRANSITIONS = ("Then", "Still", "Also")


class RefineState(enum.Enum):
    DRAFT = "draft"
    MEASURING = "measuring"
    ACCEPT = "accept"
    ADJUST = "adjust"
    DONE = "done"


@dataclass
class RefinementResult:
    """Final output, its metrics and every action taken across passes."""

    output: str
    metrics: HumanizationMetrics
    actions: List[StyleRuleAction] = field(default_factory=list)


def _paragraph_sentences(text: str) -> List[List[str]]:
    return [split_sentences(p) for p in re.split(r"\n\s*\n", text) if p.strip()]


def _join_paragraphs(paragraphs: List[List[str]]) -> str:
    return "\n\n".join(" ".join(sentences) for sentences in paragraphs if sentences)


def merge_shortest_pair(paragraphs: List[List[str]], actions: List[StyleRuleAction]) -> List[List[str]]:
    """Merge the adjacent sentence pair with the smallest combined length."""
    best = None
    for p_index, sentences in enumerate(paragraphs):
        for s_index in range(len(sentences) - 1):
            if not sentences[s_index].endswith("."):
                continue
            size = len(sentences[s_index]) + len(sentences[s_index + 1])
            if best is None or size < best[0]:
                best = (size, p_index, s_index)
    if best is None:
        return paragraphs

    _, p_index, s_index = best
    sentences = list(paragraphs[p_index])
    sentences[s_index:s_index + 2] = [merge_sentences(sentences[s_index], sentences[s_index + 1])]
    paragraphs = list(paragraphs)
    paragraphs[p_index] = sentences
    actions.append(StyleRuleAction("refine_merge_shortest"))
    return paragraphs


def inject_lexicon_term(
    paragraphs: List[List[str]], lexicon: List[str], actions: List[StyleRuleAction]
) -> List[List[str]]:
    """Add the first missing lexicon term as a parenthetical to the first sentence."""
    if not paragraphs or not paragraphs[0]:
        return paragraphs
    text = _join_paragraphs(paragraphs)
    missing = [term for term in lexicon if not contains_term(text, term)]
    if not missing:
        return paragraphs

    term = missing[0]
    first = paragraphs[0][0]
    match = re.search(r"[.!?][\"')\]]*$", first)
    if match:
        first = first[:match.start()].rstrip() + " (%s)" % term + first[match.start():]
    else:
        first = first.rstrip() + " (%s)." % term
    paragraphs = [list(sentences) for sentences in paragraphs]
    paragraphs[0][0] = first
    actions.append(StyleRuleAction("inject_lexicon", term))
    return paragraphs


def vary_repeated_starter(
    paragraphs: List[List[str]],
    transitions: List[str],
    rng: random.Random,
    actions: List[StyleRuleAction],
) -> List[List[str]]:
    """Open the second use of the most common starter with a transition."""
    positions = [(p, s) for p, sentences in enumerate(paragraphs) for s in range(len(sentences))]
    starters = [sentence_starter(paragraphs[p][s]) for p, s in positions]
    counts = Counter(starter for starter in starters if starter)
    if not counts:
        return paragraphs
    starter, count = counts.most_common(1)[0]
    if count < 2:
        return paragraphs

    seen = 0
    for (p, s), current in zip(positions, starters):
        if current != starter:
            continue
        seen += 1
        if seen == 2:
            transition = rng.choice(transitions or FALLBACK_TRANSITIONS)
            paragraphs = [list(sentences) for sentences in paragraphs]
            paragraphs[p][s] = prepend_transition(paragraphs[p][s], transition)
            actions.append(StyleRuleAction("vary_starter", {"starter": starter, "transition": transition}))
            break
    return paragraphs


def adjust_draft(
    text: str,
    profile: Optional[StyleProfile],
    rng: random.Random,
    actions: List[StyleRuleAction],
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Apply one round of targeted fixes to a draft that failed measurement."""
    paragraphs = _paragraph_sentences(text)
    if rng.random() < settings.adjust_merge_probability:
        paragraphs = merge_shortest_pair(paragraphs, actions)

    text = strip_banned_phrases(_join_paragraphs(paragraphs), actions)
    paragraphs = _paragraph_sentences(text)

    if profile is not None and profile.custom_lexicon:
        paragraphs = inject_lexicon_term(paragraphs, profile.custom_lexicon, actions)

    if rng.random() < settings.starter_swap_probability:
        transitions = []
        if profile is not None and profile.fingerprint is not None:
            transitions = profile.fingerprint.preferred_transitions
        paragraphs = vary_repeated_starter(paragraphs, transitions, rng, actions)

    return _join_paragraphs(paragraphs)


def verify_and_refine(
    draft: str,
    profile: Optional[StyleProfile] = None,
    max_passes: int = DEFAULT_SETTINGS.default_max_passes,
    options: Optional[RewriteOptions] = None,
    rng: Optional[random.Random] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> RefinementResult:
    """Finalize a draft and refine it until it measures as human or passes run out.

    ``finalize`` runs at most ``max_passes + 1`` times.

    Args:
        draft: Draft text, usually the input or a generated paraphrase
        profile: Optional target profile
        max_passes: Adjustment pass budget
        options: Set ``include_lexicon_notes`` to list missing lexicon terms
        rng: Random source shared by every pass
        settings: Thresholds to apply

    Returns:
        RefinementResult with the final text, its metrics and all actions
    """
    options = options or RewriteOptions()
    if rng is None:
        rng = random.Random()
    lexicon = profile.custom_lexicon if profile is not None else []
    frequency_map = None
    if profile is not None and profile.samples:
        frequency_map = build_sample_frequency_map(profile.samples)

    actions: List[StyleRuleAction] = []
    passes = 0
    current = ""
    metrics = HumanizationMetrics()
    state = RefineState.DRAFT

    while state is not RefineState.DONE:
        if state is RefineState.DRAFT:
            result = finalize(draft, profile, options, rng, frequency_map, settings)
            current = result.text
            actions.extend(result.actions)
            state = RefineState.MEASURING
        elif state is RefineState.MEASURING:
            metrics = measure(current, lexicon, passes, settings)
            if metrics.is_humanized:
                state = RefineState.ACCEPT
            elif passes < max_passes:
                state = RefineState.ADJUST
            else:
                state = RefineState.DONE
        elif state is RefineState.ACCEPT:
            logger.debug("Draft accepted after %d passes", passes)
            state = RefineState.DONE
        elif state is RefineState.ADJUST:
            adjusted = adjust_draft(current, profile, rng, actions, settings)
            result = finalize(adjusted, profile, options, rng, frequency_map, settings)
            current = result.text
            actions.extend(result.actions)
            passes += 1
            logger.debug("Refinement pass %d finished", passes)
            state = RefineState.MEASURING

    if current and options.include_lexicon_notes:
        current += lexicon_notes(current, profile, settings)
    return RefinementResult(output=current, metrics=metrics, actions=actions)
