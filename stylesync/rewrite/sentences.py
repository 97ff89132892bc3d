"""Sentence-level helpers shared by the rewrite stages."""

import re
from typing import List, Optional, Tuple

COMMON_OPENERS = {
    "The", "A", "An", "This", "That", "These", "Those", "Some", "All", "Each",
    "Every", "It", "We", "They", "You", "He", "She", "There", "Our", "Many",
    "Most", "My", "Its", "Their", "His", "Her", "Your", "One", "No",
}


def count_words(sentence: str) -> int:
    """Count words in a sentence, stripping punctuation.

    Args:
        sentence: The sentence to count words in

    Returns:
        Number of words in the sentence
    """
    count = 0
    for word in re.split(r"\s+", sentence.strip()):
        if word.strip(".,!?;:()[]{}'\"-—_"):
            count += 1
    return count


def is_number_or_acronym_comma(text: str, pos: int) -> bool:
    """Check if a comma at pos belongs to a number (50,000) or an acronym list (HFT, DLT).

    Args:
        text: The text to check
        pos: Position of the comma

    Returns:
        True if the comma should not be treated as a clause boundary
    """
    if pos < 0 or pos >= len(text) or text[pos] != ",":
        return False

    before = text[max(0, pos - 10):pos]
    after = text[pos + 1:min(len(text), pos + 11)]
    if re.search(r"\d$", before) and re.search(r"^\d", after):
        return True

    if re.search(r"\b[A-Z]{2,}$", before) and re.search(r"^\s*[A-Z]{2,}\b", after):
        return True

    if re.search(r"\b(?:e\.g\.|i\.e\.|etc\.|vs\.|cf\.)$", before, re.IGNORECASE):
        return True

    return False


def comma_split_points(sentence: str) -> List[int]:
    """Positions just after clause-separating commas outside parentheses."""
    points = []
    depth = 0
    for i, char in enumerate(sentence):
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0 and i > 5 and sentence[i + 1:i + 2] == " ":
            if not is_number_or_acronym_comma(sentence, i):
                points.append(i + 1)
    return points


def capitalize_fragment(fragment: str) -> str:
    """Trim a fragment and uppercase its first letter."""
    fragment = fragment.strip()
    if fragment and fragment[0].islower():
        fragment = fragment[0].upper() + fragment[1:]
    return fragment


def split_at_middle_comma(sentence: str) -> Optional[Tuple[str, str]]:
    """Split a sentence in two at the comma closest to its middle.

    A leading "and" or "but" on the second half is dropped. Returns None when
    the sentence has no usable comma or either half would be under three words.

    Args:
        sentence: The sentence to split

    Returns:
        (first, second) sentences, each terminated, or None
    """
    points = comma_split_points(sentence)
    if not points:
        return None

    middle = len(sentence) / 2
    split_pos = min(points, key=lambda p: abs(p - middle))

    first = sentence[:split_pos].strip().rstrip(",") + "."
    second = sentence[split_pos:].strip()
    second = re.sub(r"^(?:and|but)\s+", "", second, flags=re.IGNORECASE)
    if not re.search(r"[.!?][\"')\]]*$", second):
        second = second.rstrip(",;: ") + "."

    if count_words(first) < 3 or count_words(second) < 3:
        return None
    return capitalize_fragment(first), capitalize_fragment(second)


def lower_opening(sentence: str) -> str:
    """Lowercase the first word when it is a common opener rather than a name."""
    words = sentence.split(maxsplit=1)
    if words and words[0].strip(",;:") in COMMON_OPENERS:
        return sentence[0].lower() + sentence[1:]
    return sentence


def merge_sentences(s1: str, s2: str, connector: str = ", and") -> str:
    """Merge two sentences with a connector.

    Args:
        s1: First sentence
        s2: Second sentence
        connector: Connector placed between them (default: ", and")

    Returns:
        Merged sentence ending with the second sentence's punctuation
    """
    head = s1.rstrip(".,!?;:").rstrip()
    tail = lower_opening(s2.lstrip(".,!?;:").lstrip())
    if not connector.startswith(","):
        connector = " " + connector.strip()
    return f"{head}{connector} {tail}"


def prepend_transition(sentence: str, transition: str) -> str:
    """Open a sentence with a transition word ("Still, the plan ...")."""
    return f"{transition}, {lower_opening(sentence.strip())}"
