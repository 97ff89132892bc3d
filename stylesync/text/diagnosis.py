"""Humanization metrics, style-match and context-preservation reports for rewritten text."""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.rewrite.rules import find_banned_phrases
from stylesync.text.analyzer import TextAnalyzer, split_words
from stylesync.text.fingerprint import analyze_sample


@dataclass
class HumanizationMetrics:
    """Measurements of one draft, recomputed on every refinement iteration."""

    sentence_count: int = 0
    avg_sentence_length: float = 0.0
    sentence_length_std: float = 0.0
    unique_token_ratio: float = 0.0
    ai_phrase_hits: List[str] = field(default_factory=list)
    lexicon_hits: int = 0
    repeated_starter_ratio: float = 0.0
    is_humanized: bool = False
    passes: int = 0

    def to_dict(self) -> Dict[str, object]:
        """Convert metrics to dictionary."""
        return {
            "sentence_count": self.sentence_count,
            "avg_sentence_length": self.avg_sentence_length,
            "sentence_length_std": self.sentence_length_std,
            "unique_token_ratio": self.unique_token_ratio,
            "ai_phrase_hits": list(self.ai_phrase_hits),
            "lexicon_hits": self.lexicon_hits,
            "repeated_starter_ratio": self.repeated_starter_ratio,
            "is_humanized": self.is_humanized,
            "passes": self.passes,
        }


def contains_term(text: str, term: str) -> bool:
    """Case-insensitive whole-word search for a lexicon term."""
    return re.search(r"(?<!\w)%s(?!\w)" % re.escape(term), text, re.IGNORECASE) is not None


def sentence_starter(sentence: str) -> str:
    """Lowercase first word of a sentence, punctuation stripped."""
    words = split_words(sentence)
    return words[0].lower() if words else ""


def repeated_starter_ratio(sentences: List[str]) -> float:
    """Share of sentences opening with the most common first word."""
    starters = [sentence_starter(s) for s in sentences]
    starters = [s for s in starters if s]
    if not starters:
        return 0.0
    return Counter(starters).most_common(1)[0][1] / len(sentences)


def measure(
    text: str,
    lexicon: Optional[List[str]] = None,
    passes: int = 0,
    settings: Settings = DEFAULT_SETTINGS,
) -> HumanizationMetrics:
    """Compute humanization metrics and the acceptance verdict for a draft.

    Text is accepted when every check holds: mean sentence length inside the
    configured character band, enough spread in sentence length, a
    unique-token ratio above the minimum, no banned phrases, no dominant
    sentence opener and, with a non-empty lexicon, at least one lexicon term.

    Args:
        text: Draft to measure
        lexicon: Custom lexicon terms the draft should surface
        passes: Adjustment passes applied so far
        settings: Thresholds to apply

    Returns:
        HumanizationMetrics for the draft
    """
    analyzer = TextAnalyzer(text)
    tokens = analyzer.tokens
    lexicon = lexicon or []

    metrics = HumanizationMetrics(
        sentence_count=analyzer.sentence_count,
        avg_sentence_length=analyzer.avg_sentence_length,
        sentence_length_std=analyzer.sentence_length_std,
        unique_token_ratio=len(set(tokens)) / len(tokens) if tokens else 0.0,
        ai_phrase_hits=find_banned_phrases(text),
        lexicon_hits=sum(1 for term in lexicon if contains_term(text, term)),
        repeated_starter_ratio=repeated_starter_ratio(analyzer.sentences),
        passes=passes,
    )
    metrics.is_humanized = (
        settings.min_avg_sentence_length <= metrics.avg_sentence_length <= settings.max_avg_sentence_length
        and metrics.sentence_length_std >= settings.min_sentence_length_std
        and metrics.unique_token_ratio > settings.min_unique_token_ratio
        and not metrics.ai_phrase_hits
        and metrics.repeated_starter_ratio < settings.max_repeated_starter_ratio
        and (not lexicon or metrics.lexicon_hits > 0)
    )
    return metrics


@dataclass
class StyleMatchReport:
    """How closely an output follows the fingerprint of a profile."""

    overall_match: int
    contraction_match: bool
    sentence_length_match: bool
    transition_match: bool
    details: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        """Convert report to dictionary."""
        return {
            "overall_match": self.overall_match,
            "contraction_match": self.contraction_match,
            "sentence_length_match": self.sentence_length_match,
            "transition_match": self.transition_match,
            "details": list(self.details),
        }


def verify_style_match(output: str, profile=None, tolerance: float = 0.3) -> StyleMatchReport:
    """Compare an output against a profile's fingerprint.

    Checks contraction habit, mean sentence length (within ``tolerance`` of
    the writer's mean) and use of the writer's preferred transitions.

    Args:
        output: Rewritten text
        profile: StyleProfile with a fingerprint
        tolerance: Allowed relative deviation in mean sentence length

    Returns:
        StyleMatchReport with a 0-100 overall score
    """
    if profile is None or profile.fingerprint is None:
        return StyleMatchReport(100, True, True, True, ["No style profile to match against"])

    target = profile.fingerprint
    observed = analyze_sample(output)
    details = []

    contraction_match = target.uses_contractions == observed.uses_contractions
    if contraction_match:
        details.append(
            "Contraction style matches (%s)"
            % ("uses contractions" if target.uses_contractions else "formal language")
        )
    else:
        details.append(
            "Contraction mismatch: writer %s contractions" % ("uses" if target.uses_contractions else "avoids")
        )

    difference = abs(observed.avg_sentence_length - target.avg_sentence_length)
    sentence_length_match = difference <= target.avg_sentence_length * tolerance
    if sentence_length_match:
        details.append("Sentence length matches (~%d characters)" % round(target.avg_sentence_length))
    else:
        details.append(
            "Sentence length differs: writer avg %d, output %d"
            % (round(target.avg_sentence_length), round(observed.avg_sentence_length))
        )

    transition_match = not target.preferred_transitions or any(
        contains_term(output, t) for t in target.preferred_transitions
    )
    if transition_match:
        details.append("Transition words match the writer's style")
    else:
        details.append("Missing preferred transitions: %s" % ", ".join(target.preferred_transitions))

    score = sum([contraction_match, sentence_length_match, transition_match])
    return StyleMatchReport(
        overall_match=round(score / 3 * 100),
        contraction_match=contraction_match,
        sentence_length_match=sentence_length_match,
        transition_match=transition_match,
        details=details,
    )


NUMBER_PATTERN = re.compile(
    r"\b\d+(?:\.\d+)?%?|\b(?:one|two|three|four|five|six|seven|eight|nine|ten|hundred|thousand|million|billion)\b",
    re.IGNORECASE,
)
PROPER_NOUN_PATTERN = re.compile(r"^[A-Z][a-z]{2,}$")
ISSUE_PENALTIES = {"missing_info": 15, "added_info": 10}


@dataclass
class ContextIssue:
    """A fact that went missing or appeared during a rewrite."""

    kind: str
    description: str

    def to_dict(self) -> Dict[str, object]:
        return {"kind": self.kind, "description": self.description}


@dataclass
class ContextCheckResult:
    """Whether a rewrite kept the facts of its input."""

    is_context_preserved: bool
    meaning_score: int
    issues: List[ContextIssue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        """Convert result to dictionary."""
        return {
            "is_context_preserved": self.is_context_preserved,
            "meaning_score": self.meaning_score,
            "issues": [issue.to_dict() for issue in self.issues],
        }


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_numbers(text: str) -> List[str]:
    """Numbers, percentages and number words, lowercased, in order of appearance."""
    return _unique([m.group(0).lower() for m in NUMBER_PATTERN.finditer(text)])


def extract_proper_nouns(text: str) -> List[str]:
    """Capitalized words that do not open a sentence."""
    nouns = []
    for sentence in re.split(r"[.!?]+", text):
        for word in split_words(sentence)[1:]:
            if PROPER_NOUN_PATTERN.match(word):
                nouns.append(word)
    return _unique(nouns)


def check_context(original: str, rewritten: str) -> ContextCheckResult:
    """Check that a rewrite keeps the numbers, names and bulk of its input.

    Each number or proper noun of the original missing from the rewrite costs
    15 points of the 100-point meaning score, and each number the rewrite
    adds costs 10. A length ratio below 0.5 or above 2 is an issue as well,
    and a ratio between 0.8 and 1.2 earns 5 points back.

    Args:
        original: Input text
        rewritten: Rewritten text

    Returns:
        ContextCheckResult; context is preserved when there are no issues and
        the score is at least 80
    """
    if not original or not original.strip():
        return ContextCheckResult(is_context_preserved=True, meaning_score=100)

    issues = []
    before = extract_numbers(original)
    after = extract_numbers(rewritten)
    for number in before:
        if number not in after:
            issues.append(ContextIssue("missing_info", f'Number "{number}" from the original is missing'))
    for number in after:
        if number not in before:
            issues.append(ContextIssue("added_info", f'Number "{number}" was added'))

    for noun in extract_proper_nouns(original):
        if not contains_term(rewritten, noun):
            issues.append(ContextIssue("missing_info", f'Proper noun "{noun}" from the original is missing'))

    ratio = len(rewritten) / len(original)
    if ratio < 0.5:
        issues.append(ContextIssue("missing_info", "Rewrite is much shorter and may be missing content"))
    elif ratio > 2:
        issues.append(ContextIssue("added_info", "Rewrite is much longer and may have added content"))

    score = 100 - sum(ISSUE_PENALTIES[issue.kind] for issue in issues)
    if 0.8 <= ratio <= 1.2:
        score += 5
    score = max(0, min(100, score))

    return ContextCheckResult(
        is_context_preserved=not issues and score >= 80,
        meaning_score=score,
        issues=issues,
    )
