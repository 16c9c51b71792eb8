"""Face descriptor matching.

Descriptors are the 128-float vectors produced by the client-side face
recognizer. Matching is a plain L2 distance against a threshold.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from ..core.constants import DEFAULT_FACE_MATCH_THRESHOLD

NO_MATCH_DISTANCE = math.inf


def descriptor_distance(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """Euclidean distance between two descriptors.

    Fails closed: absent, empty or mismatched-length descriptors give
    ``NO_MATCH_DISTANCE`` instead of raising.
    """
    if a is None or b is None or len(a) == 0 or len(a) != len(b):
        return NO_MATCH_DISTANCE
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.linalg.norm(diff))


def is_match(distance: float, threshold: float = DEFAULT_FACE_MATCH_THRESHOLD) -> bool:
    return distance < threshold
