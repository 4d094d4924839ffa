"""Vector similarity for the semantic ranking path."""

from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity over the overlapping prefix of two vectors.

    Vectors of different lengths (e.g. from two different providers) are
    compared on their first ``min(len(a), len(b))`` components. Returns 0.0
    when either vector is empty or has zero magnitude on that prefix, so the
    result is never NaN.
    """
    length = min(len(a), len(b))
    if length == 0:
        return 0.0

    vec_a = np.asarray(a[:length], dtype=np.float64)
    vec_b = np.asarray(b[:length], dtype=np.float64)

    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    # Overflowing norms (inf / inf) are the only remaining NaN source.
    return similarity if np.isfinite(similarity) else 0.0
