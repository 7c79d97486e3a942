"""Choice Matching — deterministic answer check against a question's acceptable choices.

Invariants:
    - Pure: no IO, never raises
    - Text match wins over positional labels
    - Labels are 0-indexed letters (a = first) or 1-indexed digits (1 = first)
    - Empty choice list never matches

Design Decisions:
    - Runs before the grader: a deterministic hit never costs an LLM call
"""

import string

from daily_trivia.core.normalize import normalize_answer_text


_LABEL_STRIP_CHARS = "()." + string.whitespace


def matches_choice(raw_input: str, choices: list[str]) -> bool:
    """True if the input names one of the choices or points at one by label."""
    if not choices:
        return False

    normalized = normalize_answer_text(raw_input)
    if normalized and any(
        normalized == normalize_answer_text(choice) for choice in choices
    ):
        return True

    label = raw_input.strip().lower().strip(_LABEL_STRIP_CHARS)
    index = label_index(label)
    return index is not None and 0 <= index < len(choices)


def label_index(label: str) -> int | None:
    """Map "a".."z" to 0.. and "1".."9" to 0..; anything else is not a label."""
    if len(label) != 1:
        return None
    if "a" <= label <= "z":
        return ord(label) - ord("a")
    if "1" <= label <= "9":
        return ord(label) - ord("1")
    return None
