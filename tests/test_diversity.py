"""Tests for Shannon diversity helpers (ecoltest.diversity)."""

import math

import numpy as np
import pytest

from ecoltest.base import InvalidArgumentError
from ecoltest.diversity import (
    check_base,
    entropy,
    max_shannon_index,
    relative_abundance,
    shannon_index,
)


class TestEntropy:
    """Tests for entropy of probability vectors."""

    def test_uniform_is_log_n(self):
        p = np.full(8, 1 / 8)
        assert entropy(p) == pytest.approx(math.log(8))

    def test_degenerate_is_zero(self):
        """A single species holding all mass has H' = 0."""
        assert entropy(np.array([1.0, 0.0, 0.0])) == 0.0

    def test_zeros_ignored(self):
        with_zeros = entropy(np.array([0.5, 0.0, 0.5, 0.0]))
        assert with_zeros == pytest.approx(math.log(2))

    def test_base_change(self):
        p = np.array([0.5, 0.25, 0.25])
        assert entropy(p, base=2) == pytest.approx(1.5)
        assert entropy(p, base=10) == pytest.approx(entropy(p) / math.log(10))


class TestRelativeAbundance:
    """Tests for count-to-fraction conversion."""

    def test_sums_to_one(self, sample_x):
        p = relative_abundance(sample_x)
        assert p.sum() == pytest.approx(1.0)
        assert p.shape == sample_x.shape

    def test_accepts_lists(self):
        np.testing.assert_array_almost_equal(
            relative_abundance([1, 3]), np.array([0.25, 0.75])
        )

    @pytest.mark.parametrize("bad", [[], [0, 0], [1, -1], [1, np.nan], [1, np.inf]])
    def test_rejects_invalid(self, bad):
        with pytest.raises(InvalidArgumentError):
            relative_abundance(bad)


class TestShannonIndex:
    """Tests for shannon_index on count vectors."""

    def test_even_counts(self):
        assert shannon_index([10, 10, 10, 10]) == pytest.approx(math.log(4))

    def test_scale_invariant(self, sample_x):
        assert shannon_index(sample_x) == pytest.approx(shannon_index(sample_x * 7))

    def test_uneven_less_than_even(self, sample_x, sample_y):
        assert shannon_index(sample_y) < shannon_index(sample_x)

    def test_known_value(self):
        """H'([1, 1, 2]) = -(2 * 0.25 ln 0.25 + 0.5 ln 0.5)."""
        expected = -(2 * 0.25 * math.log(0.25) + 0.5 * math.log(0.5))
        assert shannon_index([1, 1, 2]) == pytest.approx(expected)


class TestMaxShannonIndex:
    """Tests for the maximum attainable H'."""

    def test_natural_log(self):
        assert max_shannon_index(20) == pytest.approx(math.log(20))

    def test_base_two(self):
        assert max_shannon_index(8, base=2) == pytest.approx(3.0)

    def test_rejects_zero_species(self):
        with pytest.raises(InvalidArgumentError):
            max_shannon_index(0)


class TestCheckBase:
    """Tests for logarithm base validation."""

    @pytest.mark.parametrize("base", [0, 1, -2, 0.5, np.nan, np.inf])
    def test_rejects(self, base):
        with pytest.raises(InvalidArgumentError, match="shannon_base"):
            check_base(base)

    def test_accepts(self):
        assert check_base(10) == 10.0
