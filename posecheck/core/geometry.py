from __future__ import annotations

import math

import numpy as np

from posecheck.core.constants import ANGLE_ROUND_DIGITS
from posecheck.core.errors import DegenerateVectorError


def as_vector(value) -> np.ndarray:
    vec = np.asarray(value, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {vec.shape}")
    return vec


def subtract(a, b) -> np.ndarray:
    return as_vector(a) - as_vector(b)


def dot(a, b) -> float:
    return float(np.dot(as_vector(a), as_vector(b)))


def cross(a, b) -> np.ndarray:
    return np.cross(as_vector(a), as_vector(b))


def length(v) -> float:
    return float(np.linalg.norm(as_vector(v)))


def normalize(v) -> np.ndarray:
    vec = as_vector(v)
    norm = float(np.linalg.norm(vec))
    if norm == 0.0 or not np.isfinite(norm):
        raise DegenerateVectorError(f"cannot normalize vector {vec.tolist()} of length {norm}")
    return vec / norm


def angle_between(a, b, digits: int = ANGLE_ROUND_DIGITS) -> float:
    """Unsigned angle between two vectors in degrees, rounded to ``digits``.

    Uses atan2(|a x b|, a . b) rather than acos of the dot product so the
    result stays accurate near 0 and 180 degrees.
    """
    sin_part = length(cross(a, b))
    cos_part = dot(a, b)
    angle = math.degrees(math.atan2(sin_part, cos_part))
    return round(angle, digits)
