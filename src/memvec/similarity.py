from __future__ import annotations

from math import fsum, hypot, isfinite
from typing import Optional, Sequence

from memvec.domain.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    NullInputError,
    ZeroNormError,
)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise DimensionMismatchError("Vectors lengths must be equal")
    return fsum(x * y for x, y in zip(a, b))


def norm(v: Sequence[float]) -> float:
    # hypot scales internally, so large components do not overflow when squared
    return hypot(*v)


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine of the angle between a and b, in [-1, 1].

    Raises NullInputError for a missing vector, DimensionMismatchError for unequal
    lengths, ZeroNormError when either vector has zero norm (cosine undefined) and
    InvalidArgumentError when a vector holds inf or nan.
    """
    if a is None or b is None:
        raise NullInputError("Vectors must not be null")
    if len(a) != len(b):
        raise DimensionMismatchError("Vectors lengths must be equal")

    norm_a = norm(a)
    norm_b = norm(b)
    if not (isfinite(norm_a) and isfinite(norm_b)):
        raise InvalidArgumentError("Vectors must contain only finite values")
    if norm_a == 0.0 or norm_b == 0.0:
        raise ZeroNormError("Vectors cannot have zero norm")

    # Divide by the largest component first so the dot product cannot overflow either
    scale_a = max(abs(x) for x in a)
    scale_b = max(abs(y) for y in b)
    scaled_dot = fsum((x / scale_a) * (y / scale_b) for x, y in zip(a, b))
    return scaled_dot / ((norm_a / scale_a) * (norm_b / scale_b))
