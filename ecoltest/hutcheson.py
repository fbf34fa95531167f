"""Hutcheson's t-test for the difference between two Shannon indices.

Compares the Shannon diversity H' of two community samples x and y using
Hutcheson's (1970) approximation of the variance of H':

    H = (N log N - sum(n_i log n_i)) / N
    S = (sum(n_i (log n_i)^2) - (sum(n_i log n_i))^2 / N) / N^2

    t  = (H_x - H_y - difference) / sqrt(S_x + S_y)
    df = (S_x + S_y)^2 / (S_x^2 / N_x + S_y^2 / N_y)

with p-values from Student's t distribution. Species absent from a sample
(zero counts) contribute nothing to the sums. When the samples have a
different number of species the shorter one is padded with zeros.

References:
    Hutcheson, K. (1970). "A test for comparing diversities based on the
    Shannon formula." Journal of Theoretical Biology, 29(1), 151-154.

    Zar, J.H. (2010). Biostatistical Analysis, 5th ed. Pearson, pp. 174-176.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field

import numpy as np
from scipy.stats import t as student_t

from ecoltest.base import InvalidArgumentError
from ecoltest.diversity import check_base

ALTERNATIVES = ("two_sided", "less", "greater", "auto")

METHOD = "Hutcheson t-test for two communities"


@dataclass(frozen=True)
class HutchesonResult:
    """Outcome of a Hutcheson t-test.

    Attributes:
        statistic: Hutcheson t-statistic.
        degrees_of_freedom: Welch-style degrees of freedom of the statistic.
        p_value: p-value under the resolved alternative.
        estimate: Shannon indices of the two samples, {"x": H_x, "y": H_y}.
        null_value: Hypothesized difference H_x - H_y.
        alternative: "two_sided", "less" or "greater" ("auto" is resolved).
        method: Name of the test.
        data_name: Label of the compared samples.
    """

    statistic: float
    degrees_of_freedom: float
    p_value: float
    estimate: dict[str, float] = field(default_factory=dict)
    null_value: float = 0.0
    alternative: str = "two_sided"
    method: str = METHOD
    data_name: str = "x and y"

    @property
    def estimate_difference(self) -> float:
        return self.estimate["x"] - self.estimate["y"]

    def to_dict(self) -> dict:
        return {
            "statistic": self.statistic,
            "degrees_of_freedom": self.degrees_of_freedom,
            "p_value": self.p_value,
            "estimate": dict(self.estimate),
            "null_value": self.null_value,
            "alternative": self.alternative,
            "method": self.method,
            "data_name": self.data_name,
        }


def match_alternative(alternative: str) -> str:
    """Resolve a (possibly abbreviated) alternative hypothesis name.

    Accepts any unambiguous prefix of "two_sided", "less", "greater" or
    "auto"; "two.sided" and "two-sided" are accepted as spellings of
    "two_sided".
    """
    if not isinstance(alternative, str):
        raise InvalidArgumentError(
            f"alternative must be a string, got {type(alternative).__name__}"
        )
    key = alternative.strip().lower().replace(".", "_").replace("-", "_")
    matches = [name for name in ALTERNATIVES if key and name.startswith(key)]
    if len(matches) != 1:
        raise InvalidArgumentError(
            'alternative must be "two_sided", "less", "greater" or "auto", '
            f"got {alternative!r}"
        )
    return matches[0]


def _as_sample(name: str, values) -> np.ndarray:
    raw = np.asarray(values)
    # object arrays come from sequences holding None (missing values)
    if raw.dtype.kind == "O":
        if any(isinstance(v, (str, bytes, bool, np.bool_)) for v in raw.ravel()):
            raise InvalidArgumentError("x and y must be numeric")
    elif raw.dtype.kind not in "iuf":
        raise InvalidArgumentError("x and y must be numeric")
    try:
        arr = raw.astype(np.float64)
    except (TypeError, ValueError):
        raise InvalidArgumentError("x and y must be numeric") from None
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise InvalidArgumentError(f"{name} must be one-dimensional")
    return arr


def _shannon_moments(counts: np.ndarray, base: float) -> tuple[float, float, float]:
    """Return (N, H, var(H)) of one padded, zero-filled sample."""
    n_total = float(counts.sum())
    positive = counts[counts > 0.0]
    log_counts = np.log(positive) / math.log(base)
    sum_nlogn = float(np.sum(positive * log_counts))
    sum_nlog2n = float(np.sum(positive * log_counts ** 2))

    h = (n_total * math.log(n_total) / math.log(base) - sum_nlogn) / n_total
    s = (sum_nlog2n - sum_nlogn ** 2 / n_total) / n_total ** 2
    return n_total, h, s


def hutcheson_t_test(
    x,
    y,
    shannon_base: float = math.e,
    alternative: str = "two_sided",
    difference: float = 0.0,
    data_name: str = "x and y",
) -> HutchesonResult:
    """Test whether two community samples differ in Shannon diversity.

    Args:
        x: Abundance of each species in sample x.
        y: Abundance of each species in sample y.
        shannon_base: Logarithm base of the Shannon indices.
        alternative: "two_sided" (default), "less", "greater" or "auto".
            "auto" picks "less" when H_x < H_y and "greater" otherwise.
        difference: Hypothesized value of H_x - H_y.
        data_name: Label for the compared samples, kept on the result.

    Returns:
        HutchesonResult.

    Raises:
        InvalidArgumentError: If x or y is non-numeric, negative, has fewer
            than two elements, or totals fewer than three individuals.

    Missing values (None or NaN) are replaced with zeros and a UserWarning
    is emitted.
    """
    x = _as_sample("x", x)
    y = _as_sample("y", y)
    base = check_base(shannon_base)

    if np.any(x[~np.isnan(x)] < 0.0) or np.any(y[~np.isnan(y)] < 0.0):
        raise InvalidArgumentError("x and y must be non-negative")
    if x.size < 2 or y.size < 2:
        raise InvalidArgumentError("x and y must contain at least two elements")
    if np.nansum(x) < 3 or np.nansum(y) < 3:
        raise InvalidArgumentError("x and y total abundance must be at least 3")
    if not (np.all(np.isfinite(x[~np.isnan(x)])) and np.all(np.isfinite(y[~np.isnan(y)]))):
        raise InvalidArgumentError("x and y must be finite")

    if np.isnan(x).any() or np.isnan(y).any():
        x = np.nan_to_num(x, nan=0.0)
        y = np.nan_to_num(y, nan=0.0)
        warnings.warn(
            "missing values in x and y replaced with zeroes",
            UserWarning,
            stacklevel=2,
        )

    alternative = match_alternative(alternative)

    length = max(x.size, y.size)
    x = np.pad(x, (0, length - x.size))
    y = np.pad(y, (0, length - y.size))

    n_x, h_x, s_x = _shannon_moments(x, base)
    n_y, h_y, s_y = _shannon_moments(y, base)

    estimate_difference = h_x - h_y
    with np.errstate(divide="ignore", invalid="ignore"):
        s_sum = np.float64(s_x + s_y)
        statistic = float((estimate_difference - difference) / np.sqrt(s_sum))
        df = float(s_sum ** 2 / (s_x ** 2 / n_x + s_y ** 2 / n_y))

    if alternative == "auto":
        alternative = "less" if estimate_difference < 0 else "greater"

    if alternative == "less":
        p_value = float(student_t.cdf(statistic, df))
    elif alternative == "greater":
        p_value = float(student_t.sf(statistic, df))
    else:
        p_value = float(2.0 * student_t.cdf(-abs(statistic), df))

    return HutchesonResult(
        statistic=statistic,
        degrees_of_freedom=df,
        p_value=p_value,
        estimate={"x": h_x, "y": h_y},
        null_value=float(difference),
        alternative=alternative,
        data_name=str(data_name),
    )
