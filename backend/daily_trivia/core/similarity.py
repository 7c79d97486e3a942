"""Vector Similarity — cosine similarity for embedding comparisons.

Invariants:
    - cosine_similarity returns a value in [-1, 1]
    - Zero-length or zero-norm vectors compare as 0.0 (never divide by zero)
    - max_similarity of an empty collection is 0.0
"""

import math
from collections.abc import Iterable

from daily_trivia.core.domain_types import Embedding


def cosine_similarity(a: Embedding, b: Embedding) -> float:
    """1 - cosine distance. Mismatched dimensions compare as unrelated."""
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))


def max_similarity(query: Embedding, candidates: Iterable[Embedding]) -> float:
    """Highest cosine similarity between query and any candidate."""
    best: float | None = None
    for vector in candidates:
        sim = cosine_similarity(query, vector)
        if best is None or sim > best:
            best = sim
    return best if best is not None else 0.0
