"""Shared test fixtures for the ecoltest test suite.

Provides:

    rng: A seeded numpy Generator.

    sample_x, sample_y: Two polychaete-style abundance vectors of different
        length and evenness. sample_x is the more even of the two, so
        H'(x) > H'(y).

    synthesizer: A CommunitySynthesizer with a generous iteration budget
        and a loose tolerance, for tests that need convergence but do not
        care about the exact tolerance.
"""

import numpy as np
import pytest

from ecoltest.community import CommunitySynthesizer
from ecoltest.config import SynthesisConfig


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_x():
    """Fairly even community of 8 species."""
    return np.array([23, 18, 15, 14, 12, 9, 6, 3], dtype=float)


@pytest.fixture
def sample_y():
    """Dominated community of 6 species."""
    return np.array([72, 11, 7, 4, 2, 1], dtype=float)


@pytest.fixture
def synthesizer():
    """Synthesizer that converges reliably (tolerance 1e-3, 5000 iterations)."""
    return CommunitySynthesizer(
        SynthesisConfig(tolerance=1e-3, max_iterations=5000, quiet=True)
    )
