"""Finalize pipeline: lexical, structural, humanization and rule enforcement stages."""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.profile import RewriteOptions, StyleProfile, allows_contractions
from stylesync.rewrite.humanizer import humanize_text
from stylesync.rewrite.lexical import rewrite_lexically
from stylesync.rewrite.rules import StyleRuleAction, enforce_style_rules, strip_list_markers
from stylesync.rewrite.structure import adjust_structure
from stylesync.text.diagnosis import contains_term

logger = logging.getLogger(__name__)


@dataclass
class FinalizeResult:
    """Finalized text with the actions taken to produce it."""

    text: str
    actions: List[StyleRuleAction] = field(default_factory=list)


def finalize(
    draft: str,
    profile: Optional[StyleProfile] = None,
    options: Optional[RewriteOptions] = None,
    rng: Optional[random.Random] = None,
    frequency_map: Optional[Dict[str, float]] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> FinalizeResult:
    """Run a draft through every rewrite stage once.

    List markers are removed first, while every item still starts a line.
    The stages then run in order: lexical rewrite, structural adjustment,
    humanization, style rule enforcement. Without a profile the
    profile-dependent steps are skipped.

    Args:
        draft: Text to finalize
        profile: Optional target profile
        options: Per-call options (unused by the stages themselves)
        rng: Random source; a process-seeded one is created when omitted
        frequency_map: Writer's weighted token frequencies, built from samples when omitted
        settings: Thresholds to apply

    Returns:
        FinalizeResult with the text and the ordered action log
    """
    if not draft or not draft.strip():
        return FinalizeResult(text="")
    if rng is None:
        rng = random.Random()

    actions: List[StyleRuleAction] = []
    original = strip_list_markers(draft.strip(), actions)

    text = rewrite_lexically(original, profile, frequency_map=frequency_map, rng=rng, actions=actions, settings=settings)
    text = adjust_structure(text, original, profile, actions=actions, settings=settings)
    text = humanize_text(text, allows_contractions(profile, settings), rng, actions, settings)
    text, enforcement_actions = enforce_style_rules(text, settings)
    actions.extend(enforcement_actions)

    logger.debug("Finalize applied %d actions", len(actions))
    return FinalizeResult(text=text, actions=actions)


def lexicon_notes(text: str, profile: Optional[StyleProfile], settings: Settings = DEFAULT_SETTINGS) -> str:
    """Suffix listing lexicon terms the text does not contain, or an empty string."""
    if profile is None or not profile.custom_lexicon:
        return ""
    missing = [term for term in profile.custom_lexicon if not contains_term(text, term)]
    if not missing:
        return ""
    return "\n\nLexicon notes: " + ", ".join(missing[: settings.max_lexicon_notes])


def rewrite(
    text: str,
    profile: Optional[StyleProfile] = None,
    options: Optional[RewriteOptions] = None,
    rng: Optional[random.Random] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    """Rewrite text toward a profile without the refinement loop.

    Args:
        text: Input text
        profile: Optional target profile
        options: Set ``include_lexicon_notes`` to list missing lexicon terms
        rng: Random source
        settings: Thresholds to apply

    Returns:
        Rewritten text; empty input gives an empty string
    """
    options = options or RewriteOptions()
    result = finalize(text, profile, options, rng, settings=settings).text
    if result and options.include_lexicon_notes:
        result += lexicon_notes(result, profile, settings)
    return result
