"""Statistical helpers for TF-IDF style scoring.

The functions here stay independent of the index structures so they can be
unit tested on plain numbers.
"""

from __future__ import annotations

import math


def calculate_idf(doc_freq: int, total_docs: int, *, floor: float = 1e-6) -> float:
    """Return inverse document frequency with small-sample smoothing.

    The BM25 ratio is floored and shifted by one, so a term present in every
    document of a tiny site still contributes a small positive weight.
    """

    if total_docs <= 0:
        return 0.0
    df = max(0, min(doc_freq, total_docs))
    numerator = total_docs - df + 0.5
    denominator = df + 0.5
    ratio = max(numerator / denominator, floor)
    raw_idf = math.log(ratio + floor) + 1.0
    return max(raw_idf, floor)


def term_weight(tf: int, doc_length: int, avg_doc_length: float, *, k1: float = 1.2, b: float = 0.0) -> float:
    """Compute the saturating BM25 term weight without IDF.

    With ``b == 0`` the weight depends on ``tf`` alone and grows strictly
    with it. Larger ``b`` penalises long fields; the length ratio is capped
    at 4x the average.
    """

    if tf <= 0:
        return 0.0
    max_length_ratio = 4.0
    raw_ratio = doc_length / max(avg_doc_length, 1e-9)
    normalized_length = min(raw_ratio, max_length_ratio)
    denominator = tf + k1 * (1 - b + b * normalized_length)
    return (tf * (k1 + 1)) / denominator
