"""Base types for the ecoltest package.

Defines the error raised for invalid arguments and the two result types
returned by the community synthesizer.

A synthesis call always returns one of:
    CommunitySample
        The search converged. Carries the integer abundance vector, the
        number of iterations used, and the real-valued proportions whose
        Shannon index matched the target.

    ConvergenceFailure
        The iteration budget ran out. Carries nothing; ``community`` and
        ``iterations`` are both None.

Convergence failure is an ordinary outcome, not an exception. Callers
check ``result.converged`` (or ``isinstance``) before using the community.

Example:
    result = synthesize_community(2.0, species_count=20, total_individuals=200)
    if result.converged:
        print(result.community, result.iterations)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np


class InvalidArgumentError(ValueError):
    """Raised when an argument is outside its valid domain.

    Raised before any random number is drawn, so a failed call never
    advances the caller's generator.
    """


@dataclass(frozen=True, eq=False)
class CommunitySample:
    """A synthesized community whose Shannon index is within tolerance.

    Attributes:
        community: Integer abundance per species, ``rint(proportions * total)``.
            Rounding is not sum-preserving, so ``community.sum()`` may differ
            from the requested total by a few individuals.
        iterations: Number of search iterations used.
        proportions: Final relative abundances (sum to 1.0).
    """

    community: np.ndarray
    iterations: int
    proportions: np.ndarray

    converged = True

    @property
    def species_count(self) -> int:
        return int(self.community.shape[0])


@dataclass(frozen=True)
class ConvergenceFailure:
    """The search exhausted its iteration budget without converging."""

    community = None
    iterations = None
    proportions = None
    converged = False


SynthesisResult = Union[CommunitySample, ConvergenceFailure]
