"""Shannon diversity of community samples.

All functions accept any logarithm base > 1. Zero abundances contribute
nothing to the index (the limit of p*log(p) as p -> 0 is 0).

    entropy(p, base)            H' of a probability vector, no normalization
    relative_abundance(x)       counts -> fractions summing to 1
    shannon_index(x, base)      H' of a count (or fraction) vector
    max_shannon_index(S, base)  log_base(S), the H' of S equally common species
"""

from __future__ import annotations

import math

import numpy as np

from ecoltest.base import InvalidArgumentError


def check_base(base: float) -> float:
    """Validate a logarithm base, returning it as a float."""
    base = float(base)
    if not np.isfinite(base) or base <= 1.0:
        raise InvalidArgumentError(
            f"shannon_base must be a finite number > 1, got {base}"
        )
    return base


def entropy(proportions: np.ndarray, base: float = math.e) -> float:
    """Shannon entropy of a probability vector in the given base.

    The vector is used as-is; callers are responsible for it summing to 1.
    """
    p = np.asarray(proportions, dtype=np.float64)
    positive = p[p > 0.0]
    return float(-np.sum(positive * np.log(positive)) / math.log(base))


def relative_abundance(abundances) -> np.ndarray:
    """Convert an abundance vector to relative abundances summing to 1.

    Args:
        abundances: Sequence of non-negative counts or weights.

    Returns:
        Float array of the same length.

    Raises:
        InvalidArgumentError: If the vector is empty, contains negative or
            non-finite values, or sums to zero.
    """
    x = np.asarray(abundances, dtype=np.float64)
    if x.ndim != 1 or x.size == 0:
        raise InvalidArgumentError("abundances must be a non-empty 1-D sequence")
    if not np.all(np.isfinite(x)):
        raise InvalidArgumentError("abundances must be finite")
    if np.any(x < 0.0):
        raise InvalidArgumentError("abundances must be non-negative")
    total = x.sum()
    if total <= 0.0:
        raise InvalidArgumentError("abundances must have a positive total")
    return x / total


def shannon_index(abundances, base: float = math.e) -> float:
    """Shannon diversity index H' of a community sample.

    Example:
        >>> round(shannon_index([10, 10, 10, 10]), 6) == round(math.log(4), 6)
        True
    """
    return entropy(relative_abundance(abundances), check_base(base))


def max_shannon_index(species_count: int, base: float = math.e) -> float:
    """Largest H' attainable with ``species_count`` species."""
    if species_count < 1:
        raise InvalidArgumentError(
            f"species_count must be at least 1, got {species_count}"
        )
    return math.log(species_count) / math.log(check_base(base))
