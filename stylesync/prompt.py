"""System prompt builder and output sanitizer for an optional text generator.

The core pipeline never needs a model. When a generator is supplied to
``paraphrase`` it receives the prompt built here, and whatever it returns is
sanitized before refinement.
"""

import re
from typing import Optional

from stylesync.profile import StyleProfile

STYLE_RULES = (
    "Rewrite the user's text in plain, natural prose.\n"
    "- No bullet points, headings or lists.\n"
    "- No em dashes and no semicolons.\n"
    "- Keep sentences under 22 words.\n"
    "- Avoid stock phrases such as \"delve into\", \"it is important to note\" or \"in conclusion\".\n"
    "- Preserve the meaning and every fact. Do not invent details."
)

OUTPUT_RULES = (
    "Output only the rewritten text. Do not add notes, labels, explanations "
    "or a list of the words you used."
)

MODEL_PREAMBLES = (
    re.compile(r"^\s*here(?:'s| is)[^\n]*?:\s*", re.IGNORECASE),
    re.compile(r"^\s*(?:paraphrased|rewritten|revised) (?:version|text)\s*[:\-]?\s*", re.IGNORECASE),
    re.compile(r"^\s*(?:the|a) rewritten (?:version|text)[^\n:]*:\s*", re.IGNORECASE),
    re.compile(r"^\s*i(?:'ve| have) [^\n]*?:\s*", re.IGNORECASE),
    re.compile(r"^\s*(?:system|assistant|user):\s*", re.IGNORECASE),
    re.compile(r"^\s*(?:paraphrase|rewrite)[^\n]*?:\s*", re.IGNORECASE),
)

TRAILING_NOTES = re.compile(
    r"\n+\s*(?:lexicon notes?|custom lexicon|preferred (?:vocabulary|words?)|words? used|vocabulary applied|note)\s*:.*$",
    re.IGNORECASE | re.DOTALL,
)


def _formality_band(formality: float) -> str:
    if formality >= 0.8:
        return "Write formally and avoid contractions."
    if formality >= 0.6:
        return "Keep the register professional."
    if formality <= 0.4:
        return "Write casually, the way people talk."
    return "Use a neutral, everyday register."


def build_style_prompt(profile: Optional[StyleProfile] = None) -> str:
    """Build the system prompt a generator should follow for a profile.

    Args:
        profile: Target profile; None gives the bare style rules

    Returns:
        Prompt text
    """
    if profile is None:
        return STYLE_RULES + "\n\n" + OUTPUT_RULES

    lines = [
        STYLE_RULES,
        "",
        "Profile cues: tone=%s; formality=%.2f; pacing=%.2f; descriptiveness=%.2f; directness=%.2f"
        % (profile.tone, profile.formality, profile.pacing, profile.descriptiveness, profile.directness),
        _formality_band(profile.formality),
    ]
    if profile.custom_lexicon:
        lines.append("Where it reads naturally, use these words: %s" % ", ".join(profile.custom_lexicon))

    style = profile.fingerprint
    if style is not None:
        lines.append("")
        lines.append("Writing patterns to follow:")
        lines.append(
            "- Sentence length: about %d characters (+/- %d)"
            % (round(style.avg_sentence_length), round(style.sentence_length_std))
        )
        if style.uses_contractions:
            lines.append("- Uses contractions (don't, it's)")
        else:
            lines.append("- Avoids contractions")
        if style.preferred_transitions:
            lines.append("- Preferred transitions: %s" % ", ".join(style.preferred_transitions[:3]))
        if style.question_ratio > 0.1:
            lines.append("- Asks questions often (%.0f%% of sentences)" % (style.question_ratio * 100))
        if style.common_starters:
            lines.append("- Common sentence starters: %s" % ", ".join(style.common_starters[:3]))
        lines.append("- Personal voice: %s" % style.personal_voice)
        lines.append("- Tone: %s" % style.tone)
        if style.adjective_density > 0.1:
            lines.append("- Descriptive, with frequent adjectives")
        else:
            lines.append("- Concise, with little descriptive language")

    lines.append("")
    lines.append(OUTPUT_RULES)
    return "\n".join(lines)


def sanitize_model_output(text: str) -> str:
    """Strip preambles, markdown, wrapping quotes and trailing notes from generator output."""
    if not text:
        return ""
    text = text.strip()
    for pattern in MODEL_PREAMBLES:
        text = pattern.sub("", text, count=1)

    text = TRAILING_NOTES.sub("", text)
    text = re.sub(r"\*\*(.+?)\*\*|__(.+?)__", lambda m: m.group(1) or m.group(2), text)
    text = re.sub(r"(?<!\w)\*(\S[^*\n]*?)\*(?!\w)", r"\1", text)
    text = re.sub(r"`([^`\n]+)`", r"\1", text)
    text = re.sub(r"^[ \t]*#{1,6}[ \t]+", "", text, flags=re.MULTILINE)

    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        text = text[1:-1].strip()
    elif len(text) >= 2 and text[0] == "“" and text[-1] == "”":
        text = text[1:-1].strip()
    return text
