"""Heuristic AI-likeness scoring.

Four signals feed the score: overused "AI" vocabulary, stock phrases, how
uniform the sentence lengths are, and the absence of everyday markers such
as contractions, first-person pronouns, casual words and questions. Texts
shorter than ``MIN_DETECTION_CHARS`` get a neutral result with zero
confidence.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List

from stylesync.text.analyzer import TextAnalyzer, std_dev

MIN_DETECTION_CHARS = 50
MAX_SIGNALS = 8

AI_VOCABULARY = (
    "delve", "utilize", "leverage", "facilitate", "paramount", "multifaceted",
    "comprehensive", "robust", "seamless", "cutting-edge", "innovative",
    "streamline", "synergy", "optimize", "holistic", "dynamic",
    "pivotal", "crucial", "essential", "significant", "substantial",
    "endeavor", "embark", "foster", "enhance", "bolster",
    "meticulous", "intricate", "nuanced", "profound", "compelling",
)

AI_PHRASES = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\bit(?:'s| is) (?:important|worth|essential|crucial) to (?:note|mention|understand|recognize)",
        r"\bin today(?:'s| 's) (?:world|age|era|society|landscape)",
        r"\b(?:let(?:'s| us)|allow me to) (?:delve|dive|explore|examine)",
        r"\bwhen it comes to\b",
        r"\bat the end of the day\b",
        r"\bin (?:conclusion|summary|essence)\b",
        r"\bplays a (?:crucial|vital|key|important|significant|pivotal) role\b",
        r"\b(?:game-?changer|paradigm shift)\b",
        r"\btake .{1,30} to the next level\b",
        r"\b(?:navigat(?:e|ing)|embark(?:ing)? on) (?:this|the|a) journey\b",
        r"\bunlock(?:ing)? (?:the|your|its) (?:full )?potential\b",
        r"\b(?:first and foremost|last but not least)\b",
        r"\bit(?:'s| is) no secret that\b",
        r"\bin (?:light|view) of (?:this|the|these)\b",
        r"\bas (?:we|I) (?:delve|dive|explore)\b",
        r"\b(?:moreover|furthermore|additionally|consequently)\b",
        r"\b(?:nevertheless|nonetheless|hence|thus)\b",
    )
)

AI_TRANSITION_STARTERS = (
    "Moreover", "Furthermore", "Additionally", "Consequently",
    "Nevertheless", "Nonetheless", "Hence", "Thus", "Therefore",
    "Subsequently", "Accordingly", "In conclusion", "To summarize",
    "In essence", "Ultimately", "Notably", "Significantly",
)

CONTRACTIONS = re.compile(
    r"\b(?:don't|won't|can't|isn't|aren't|wasn't|weren't|haven't|hasn't|hadn't|I'm|you're|he's|she's"
    r"|it's|we're|they're|I've|you've|we've|they've|I'll|you'll|we'll|they'll|I'd|you'd|he'd|she'd"
    r"|we'd|they'd|couldn't|wouldn't|shouldn't|didn't|doesn't|ain't|let's|that's|there's|here's"
    r"|what's|who's|how's|where's|when's|why's)\b",
    re.IGNORECASE,
)
FIRST_PERSON = re.compile(r"\b(?:I|me|my|mine|myself|we|us|our|ours|ourselves)\b")
INFORMAL_WORDS = re.compile(
    r"\b(?:yeah|yep|nope|gonna|wanna|gotta|kinda|sorta|lots|tons|stuff|things|ok|okay|cool|nice"
    r"|pretty|really|very|just|actually|basically|literally|honestly|seriously|totally|super"
    r"|awesome|great|amazing|terrible|horrible|crazy|weird|funny|silly|dumb|smart)\b",
    re.IGNORECASE,
)

# Ordered (minimum human score, verdict)
VERDICTS = (
    (0.75, "human"),
    (0.6, "likely-human"),
    (0.4, "mixed"),
    (0.25, "likely-ai"),
)


@dataclass
class AISignal:
    """One piece of evidence pointing toward AI or human authorship."""

    kind: str
    category: str
    description: str
    weight: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind,
            "category": self.category,
            "description": self.description,
            "weight": self.weight,
        }


@dataclass
class AIDetectionResult:
    """AI-likeness of a text.

    ``ai_score`` and ``human_score`` sum to one. The breakdown holds the
    per-signal scores, each in [0, 1] with higher meaning more AI-like.
    """

    ai_score: float = 0.5
    human_score: float = 0.5
    confidence: float = 0.0
    verdict: str = "mixed"
    signals: List[AISignal] = field(default_factory=list)
    breakdown: Dict[str, float] = field(
        default_factory=lambda: {"vocabulary": 0.5, "structure": 0.5, "patterns": 0.5, "naturalness": 0.5}
    )

    def to_dict(self) -> Dict[str, object]:
        """Convert result to dictionary."""
        return {
            "ai_score": round(self.ai_score, 3),
            "human_score": round(self.human_score, 3),
            "confidence": round(self.confidence, 3),
            "verdict": self.verdict,
            "signals": [s.to_dict() for s in self.signals],
            "breakdown": {k: round(v, 3) for k, v in self.breakdown.items()},
        }


@dataclass
class DetectionComparison:
    """AI-likeness before and after a rewrite."""

    original: AIDetectionResult
    rewritten: AIDetectionResult
    improvement: float
    summary: str

    def to_dict(self) -> Dict[str, object]:
        """Convert comparison to dictionary."""
        return {
            "original": self.original.to_dict(),
            "rewritten": self.rewritten.to_dict(),
            "improvement": round(self.improvement, 3),
            "summary": self.summary,
        }


def _verdict(human_score: float) -> str:
    for minimum, verdict in VERDICTS:
        if human_score >= minimum:
            return verdict
    return "ai"


def _vocabulary_score(text: str, word_count: int, signals: List[AISignal]) -> float:
    hits = 0
    for word in AI_VOCABULARY:
        count = len(re.findall(r"\b%s\b" % re.escape(word), text, re.IGNORECASE))
        hits += count
        if count >= 2:
            signals.append(AISignal("ai", "Vocabulary", f'Uses "{word}" {count} times (common AI word)', 0.15))
    return min(1.0, hits / (word_count * 0.02))


def _pattern_score(text: str, sentence_count: int, signals: List[AISignal]) -> float:
    hits = 0
    for pattern in AI_PHRASES:
        matches = [m.group(0) for m in pattern.finditer(text)]
        if matches:
            hits += len(matches)
            signals.append(AISignal("ai", "Phrases", f'Contains AI-typical phrase: "{matches[0]}"', 0.2))
    return min(1.0, hits / (sentence_count * 0.15))


def _structure_score(sentence_words: List[int], signals: List[AISignal]) -> float:
    if len(sentence_words) < 3:
        return 0.0
    spread = std_dev(sentence_words)
    if spread < 3:
        signals.append(
            AISignal("ai", "Structure", f"Very uniform sentence lengths (std dev: {spread:.1f})", 0.25)
        )
        return 0.8
    if spread < 5:
        return 0.5
    if spread > 8:
        signals.append(
            AISignal("human", "Structure", f"Varied sentence lengths (std dev: {spread:.1f})", 0.15)
        )
        return 0.2
    return 0.0


def _naturalness(text: str, word_count: int, sentence_count: int, signals: List[AISignal]) -> float:
    """Sum of everyday-writing markers, higher meaning more human."""
    natural = 0.0

    contractions = len(CONTRACTIONS.findall(text))
    if contractions / word_count > 0.02:
        natural += 0.3
        signals.append(
            AISignal("human", "Natural Speech", f"Uses contractions naturally ({contractions} found)", 0.2)
        )
    elif contractions == 0 and word_count > 100:
        signals.append(
            AISignal("ai", "Formality", "No contractions used (uncommon in casual human writing)", 0.15)
        )

    if len(FIRST_PERSON.findall(text)) / word_count > 0.03:
        natural += 0.2
        signals.append(AISignal("human", "Personal Voice", "Strong personal voice with first-person pronouns", 0.15))

    if len(INFORMAL_WORDS.findall(text)) > word_count * 0.01:
        natural += 0.2
        signals.append(AISignal("human", "Informal Language", "Uses informal/casual words naturally", 0.1))

    questions = text.count("?")
    exclamations = text.count("!")
    if questions / sentence_count > 0.1:
        natural += 0.15
    if exclamations and exclamations / sentence_count < 0.3:
        natural += 0.1
    return natural


def detect_ai_content(text: str) -> AIDetectionResult:
    """Score how machine-written a text looks.

    Args:
        text: Text to score

    Returns:
        AIDetectionResult; a neutral, zero-confidence result for short text
    """
    if not text or len(text.strip()) < MIN_DETECTION_CHARS:
        return AIDetectionResult()

    analyzer = TextAnalyzer(text)
    word_count = max(1, analyzer.word_count)
    sentences = [s.strip() for s in re.split(r"[.!?]+", text) if s.strip()]
    sentence_count = max(1, len(sentences))
    signals: List[AISignal] = []

    vocabulary = _vocabulary_score(text, word_count, signals)
    patterns = _pattern_score(text, sentence_count, signals)
    structure = _structure_score([len(s.split()) for s in sentences], signals)

    transitions = sum(
        len(re.findall(r"(?:^|[.!?]\s*)%s\b" % re.escape(t), text, re.IGNORECASE))
        for t in AI_TRANSITION_STARTERS
    )
    if transitions / sentence_count > 0.25:
        signals.append(
            AISignal(
                "ai",
                "Transitions",
                f"Heavy use of formal transitions ({round(transitions / sentence_count * 100)}% of sentences)",
                0.2,
            )
        )

    natural = _naturalness(text, word_count, sentence_count, signals)

    ai_score = min(1.0, max(0.0, vocabulary * 0.25 + structure * 0.2 + patterns * 0.3 + (1 - natural) * 0.25))
    human_score = 1 - ai_score

    strength = sum(s.weight for s in signals)
    confidence = min(0.95, min(1.0, word_count / 200) * 0.5 + min(strength, 1.0) * 0.5)

    return AIDetectionResult(
        ai_score=ai_score,
        human_score=human_score,
        confidence=confidence,
        verdict=_verdict(human_score),
        signals=signals[:MAX_SIGNALS],
        breakdown={
            "vocabulary": vocabulary,
            "structure": structure,
            "patterns": patterns,
            "naturalness": 1 - min(1.0, natural),
        },
    )


def compare_ai_detection(original: str, rewritten: str) -> DetectionComparison:
    """Score a text before and after rewriting.

    Args:
        original: Input text
        rewritten: Rewritten text

    Returns:
        DetectionComparison; a positive improvement means the rewrite reads
        more human
    """
    before = detect_ai_content(original)
    after = detect_ai_content(rewritten)
    improvement = after.human_score - before.human_score
    percent = round(improvement * 100)

    if improvement > 0.2:
        summary = f"Great improvement! The rewrite is significantly more human-like (+{percent}%)"
    elif improvement > 0.1:
        summary = f"Good improvement. The text is noticeably more natural (+{percent}%)"
    elif improvement > 0:
        summary = f"Slight improvement in human-likeness (+{percent}%)"
    elif improvement > -0.1:
        summary = "Similar AI detection scores. Consider adding more personal voice."
    else:
        summary = "The rewrite may still contain AI patterns. Try adjusting your style profile."

    return DetectionComparison(original=before, rewritten=after, improvement=improvement, summary=summary)
