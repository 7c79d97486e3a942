"""Text Normalization — canonical forms and fingerprints for questions and choices.

Invariants:
    - Every function is total and deterministic (never raises on str input)
    - normalize_question_text is idempotent
    - normalize_answer_text output contains only letters and decimal digits
    - An empty choice set has an empty signature ("" = no signature)

Design Decisions:
    - Question text keeps word boundaries (spaces); answers drop them so that
      "Eiffel Tower" and "eiffeltower" collide
    - Punctuation in question text becomes a space, not nothing: "What's" → "what s"
    - "|" joins the signature input: normalization can never produce it
"""

import hashlib
import re


_NON_ALNUM_SPACE = re.compile(r"[^a-z0-9 ]+")
_MULTI_SPACE = re.compile(r"\s+")

LEADING_ARTICLES: tuple[str, ...] = ("the ", "an ", "a ")
SIGNATURE_DELIMITER = "|"


def normalize_question_text(text: str) -> str:
    """Lowercase, punctuation to spaces, collapse whitespace, trim."""
    text = text.lower().strip()
    text = _NON_ALNUM_SPACE.sub(" ", text)
    text = _MULTI_SPACE.sub(" ", text)
    return text.strip()


def normalize_answer_text(text: str) -> str:
    """Canonical answer form: no leading article, letters and decimal digits only."""
    if not text:
        return ""
    text = text.strip().lower()
    for article in LEADING_ARTICLES:
        if text.startswith(article):
            text = text[len(article):]
            break
    return "".join(ch for ch in text if ch.isalpha() or ch.isdecimal())


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def content_fingerprint(text: str) -> str:
    """Duplicate key for question body text."""
    return sha256_hex(normalize_question_text(text))


def normalized_choice_set(choices: list[str]) -> list[str]:
    """Sorted, de-duplicated, non-empty normalized choices."""
    return sorted({
        norm for norm in (normalize_answer_text(c) for c in choices) if norm
    })


def choice_signature(choices: list[str]) -> str:
    """Hash of the normalized choice set; "" when nothing survives normalization."""
    normalized = normalized_choice_set(choices)
    if not normalized:
        return ""
    return sha256_hex(SIGNATURE_DELIMITER.join(normalized))
