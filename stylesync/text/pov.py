"""Pronoun-based point-of-view detection."""

import math
import re
from dataclasses import dataclass, field
from typing import Dict

FIRST_PERSON = re.compile(r"\b(?:i|me|my|mine|we|us|our|ours)\b")
SECOND_PERSON = re.compile(r"\b(?:you|your|yours)\b")
THIRD_PERSON = re.compile(r"\b(?:he|him|his|she|her|hers|they|them|their|theirs)\b")

POV_LABELS = {
    "first": "first-person",
    "second": "second-person",
    "third": "third-person",
    "mixed": "mixed-person",
    "unknown": "original",
}


@dataclass
class POVResult:
    """Dominant point of view with the pronoun counts behind it."""

    pov: str
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return POV_LABELS[self.pov]

    def to_dict(self) -> Dict[str, object]:
        return {"pov": self.pov, "label": self.label, "counts": dict(self.counts)}


def detect_pov(text: str) -> POVResult:
    """Classify text as first, second or third person.

    A person wins when it strictly outnumbers the other two and reaches
    ``max(2, ceil(0.4 * total))`` pronouns. Text with pronouns but no clear
    winner is "mixed"; text with none is "unknown".

    Args:
        text: Text to inspect

    Returns:
        POVResult with the label and per-person counts
    """
    lower = text.lower()
    first = len(FIRST_PERSON.findall(lower))
    second = len(SECOND_PERSON.findall(lower))
    third = len(THIRD_PERSON.findall(lower))

    total = first + second + third
    threshold = max(2, math.ceil(total * 0.4))

    if second >= threshold and second > first and second > third:
        pov = "second"
    elif first >= threshold and first > second and first > third:
        pov = "first"
    elif third >= threshold and third > first and third > second:
        pov = "third"
    elif total > 0:
        pov = "mixed"
    else:
        pov = "unknown"

    return POVResult(pov=pov, counts={"first": first, "second": second, "third": third})
