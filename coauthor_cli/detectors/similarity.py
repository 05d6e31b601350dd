import math

import numpy as np


def cosine_similarity(a, b) -> float:
    """
    Cosine similarity between two vectors of possibly different length.

    The shorter vector is zero-padded. A zero vector is similar to nothing (0.0).
    """
    v1 = np.asarray(a, dtype=np.float64).ravel()
    v2 = np.asarray(b, dtype=np.float64).ravel()

    length = max(v1.size, v2.size)
    if length == 0:
        return 0.0
    if v1.size < length:
        v1 = np.pad(v1, (0, length - v1.size))
    if v2.size < length:
        v2 = np.pad(v2, (0, length - v2.size))

    scale1 = float(np.max(np.abs(v1)))
    scale2 = float(np.max(np.abs(v2)))
    if scale1 == 0 or scale2 == 0 or not (math.isfinite(scale1) and math.isfinite(scale2)):
        return 0.0

    # Rescaled to a max magnitude of 1 so the squared norms neither overflow nor underflow
    v1 = v1 / scale1
    v2 = v2 / scale2
    sq1 = np.dot(v1, v1)
    sq2 = np.dot(v2, v2)

    # sqrt of the product keeps self-similarity at exactly 1.0; clip guards rounding
    score = float(np.dot(v1, v2) / np.sqrt(sq1 * sq2))
    if not math.isfinite(score):
        return 0.0
    return max(-1.0, min(1.0, score))
