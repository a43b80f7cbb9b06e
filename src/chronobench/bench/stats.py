"""Statistical functions for benchmark comparison.

Provides population summary statistics and a pooled-variance
(equal-variance) two-sample Student's t-test, two-tailed at
alpha = 0.05, in pure Python.

The significance decision compares the t statistic against a table of
critical values for 1 to 200 degrees of freedom; beyond 200 the df=200
value is used (the critical value tends to 1.96 as df grows, so the
error is negligible). A p-value is reported alongside for display,
computed from the regularized incomplete beta function.

References:
    Student (1908). "The probable error of a mean." Biometrika 6(1): 1-25.
    Press et al. "Numerical Recipes", 3rd ed., section 6.4 (incomplete beta).
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence

ALPHA = 0.05

# Two-tailed critical values of Student's t at alpha = 0.05, for
# df = 1..200 (index 0 is df = 1).
T_CRITICAL_05: tuple[float, ...] = (
    12.706, 4.303, 3.182, 2.776, 2.571, 2.447, 2.365, 2.306,
    2.262, 2.228, 2.201, 2.179, 2.160, 2.145, 2.131, 2.120,
    2.110, 2.101, 2.093, 2.086, 2.080, 2.074, 2.069, 2.064,
    2.060, 2.056, 2.052, 2.048, 2.045, 2.042, 2.040, 2.037,
    2.035, 2.032, 2.030, 2.028, 2.026, 2.024, 2.023, 2.021,
    2.020, 2.018, 2.017, 2.015, 2.014, 2.013, 2.012, 2.011,
    2.010, 2.009, 2.008, 2.007, 2.006, 2.005, 2.004, 2.003,
    2.002, 2.002, 2.001, 2.000, 2.000, 1.999, 1.998, 1.998,
    1.997, 1.997, 1.996, 1.995, 1.995, 1.994, 1.994, 1.993,
    1.993, 1.993, 1.992, 1.992, 1.991, 1.991, 1.990, 1.990,
    1.990, 1.989, 1.989, 1.989, 1.988, 1.988, 1.988, 1.987,
    1.987, 1.987, 1.986, 1.986, 1.986, 1.986, 1.985, 1.985,
    1.985, 1.984, 1.984, 1.984, 1.984, 1.983, 1.983, 1.983,
    1.983, 1.983, 1.982, 1.982, 1.982, 1.982, 1.982, 1.981,
    1.981, 1.981, 1.981, 1.981, 1.980, 1.980, 1.980, 1.980,
    1.980, 1.980, 1.979, 1.979, 1.979, 1.979, 1.979, 1.979,
    1.979, 1.978, 1.978, 1.978, 1.978, 1.978, 1.978, 1.978,
    1.977, 1.977, 1.977, 1.977, 1.977, 1.977, 1.977, 1.977,
    1.976, 1.976, 1.976, 1.976, 1.976, 1.976, 1.976, 1.976,
    1.976, 1.975, 1.975, 1.975, 1.975, 1.975, 1.975, 1.975,
    1.975, 1.975, 1.975, 1.975, 1.974, 1.974, 1.974, 1.974,
    1.974, 1.974, 1.974, 1.974, 1.974, 1.974, 1.974, 1.974,
    1.973, 1.973, 1.973, 1.973, 1.973, 1.973, 1.973, 1.973,
    1.973, 1.973, 1.973, 1.973, 1.973, 1.973, 1.972, 1.972,
    1.972, 1.972, 1.972, 1.972, 1.972, 1.972, 1.972, 1.972,
)
MAX_TABLE_DF = len(T_CRITICAL_05)


# ---------------------------------------------------------------------------
# Population statistics
# ---------------------------------------------------------------------------


def mean(samples: Sequence[float]) -> float:
    """Arithmetic mean. Raises ValueError on an empty sequence.

    Exact to the last bit: a constant population [c, c, ...] has mean c.
    """
    if not samples:
        raise ValueError("mean requires at least one sample")
    return statistics.mean(samples)


def population_variance(samples: Sequence[float]) -> float:
    """Variance with divisor N (not N - 1); exactly 0.0 for a constant population."""
    if not samples:
        raise ValueError("variance requires at least one sample")
    return statistics.pvariance(samples)


def population_stdev(samples: Sequence[float]) -> float:
    """Square root of the population variance."""
    return math.sqrt(population_variance(samples))


@dataclass
class DescriptiveStats:
    """Summary statistics for a sample population."""

    n: int
    mean: float
    median: float
    stdev: float  # population standard deviation
    min: float
    max: float
    cv: float  # coefficient of variation (stdev/mean)

    def to_dict(self) -> dict[str, float | int]:
        """Serialize to a dict. Values are not rounded: samples can be nanoseconds."""
        return {
            "n": self.n,
            "mean": self.mean,
            "median": self.median,
            "stdev": self.stdev,
            "min": self.min,
            "max": self.max,
            "cv": self.cv,
        }


def describe(samples: Sequence[float]) -> DescriptiveStats:
    """Compute descriptive statistics for a non-empty sample population.

    The coefficient of variation is 0.0 for a constant population and
    inf when the mean is zero but the spread is not.
    """
    m = mean(samples)
    sd = population_stdev(samples)
    if sd == 0:
        cv = 0.0
    else:
        cv = sd / m if m != 0 else float("inf")
    return DescriptiveStats(
        n=len(samples),
        mean=m,
        median=statistics.median(samples),
        stdev=sd,
        min=min(samples),
        max=max(samples),
        cv=cv,
    )


# ---------------------------------------------------------------------------
# Student's t-test (pooled variance)
# ---------------------------------------------------------------------------


def t_critical(df: int) -> float:
    """Two-tailed critical t value at alpha = 0.05 for *df* degrees of freedom.

    Values above the table are clamped to df = 200.
    """
    if df < 1:
        raise ValueError(f"degrees of freedom must be >= 1 (got {df})")
    return T_CRITICAL_05[min(df, MAX_TABLE_DF) - 1]


@dataclass
class TTestResult:
    """Result of a pooled two-sample t-test."""

    t_statistic: float  # |mean_a - mean_b| / standard error, >= 0
    degrees_of_freedom: int
    critical_value: float
    p_value: float
    significant: bool

    @property
    def testable(self) -> bool:
        """False when there were too few samples to run the test."""
        return self.degrees_of_freedom >= 1


def pooled_ttest(
    sample_a: Sequence[float],
    sample_b: Sequence[float],
) -> TTestResult:
    """Perform a two-sample t-test assuming equal variances.

    Uses population variances of each sample weighted by (n - 1), as
    in ``pooled = sqrt(((na-1)*var_a + (nb-1)*var_b) / (na+nb-2))``.
    The test is symmetric in its two arguments.

    Edge cases:
        - Equal means are never significant, whatever the variance.
        - Zero pooled variance with different means gives t = inf.
        - Fewer than one degree of freedom (two single-sample
          populations) is untestable: not significant, p = NaN.
    """
    na, nb = len(sample_a), len(sample_b)
    mean_a = mean(sample_a)
    mean_b = mean(sample_b)
    df = na + nb - 2

    if df < 1:
        return TTestResult(float("nan"), df, float("nan"), float("nan"), False)

    critical = t_critical(df)

    if mean_a == mean_b:
        return TTestResult(0.0, df, critical, 1.0, False)

    var_a = population_variance(sample_a)
    var_b = population_variance(sample_b)
    pooled_std = math.sqrt(((na - 1) * var_a + (nb - 1) * var_b) / df)
    standard_error = pooled_std * math.sqrt(1.0 / na + 1.0 / nb)

    if standard_error == 0:
        return TTestResult(float("inf"), df, critical, 0.0, True)

    t = abs(mean_a - mean_b) / standard_error
    return TTestResult(
        t_statistic=t,
        degrees_of_freedom=df,
        critical_value=critical,
        p_value=_t_two_tailed_p(t, df),
        significant=t >= critical,
    )


def is_different(sample_a: Sequence[float], sample_b: Sequence[float]) -> bool:
    """True if the two populations' means differ at alpha = 0.05."""
    return pooled_ttest(sample_a, sample_b).significant


def _t_two_tailed_p(t: float, df: float) -> float:
    """Two-tailed p-value P(|T| > t) for Student's t with *df* degrees of freedom.

    P(|T| > t) = I_x(df/2, 1/2) with x = df / (df + t^2).
    """
    if math.isinf(t):
        return 0.0
    if math.isnan(t) or math.isnan(df) or df <= 0:
        return float("nan")
    x = df / (df + t * t)
    p = _regularized_incomplete_beta(x, df / 2.0, 0.5)
    return min(max(p, 0.0), 1.0)


def _regularized_incomplete_beta(x: float, a: float, b: float) -> float:
    """Compute the regularized incomplete beta function I_x(a, b).

    Continued fraction expansion evaluated with Lentz's method.
    """
    if x < 0 or x > 1:
        return float("nan")
    if x == 0:
        return 0.0
    if x == 1:
        return 1.0

    # Symmetry relation converges faster on this side.
    if x > (a + 1) / (a + b + 2):
        return 1.0 - _regularized_incomplete_beta(1 - x, b, a)

    lbeta = math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)
    prefactor = math.exp(a * math.log(x) + b * math.log(1 - x) - lbeta - math.log(a))

    max_iter = 300
    epsilon = 1e-14
    tiny = 1e-30

    c = 1.0
    d = 1.0 - (a + b) * x / (a + 1)
    if abs(d) < tiny:
        d = tiny
    d = 1.0 / d
    f = d

    for m in range(1, max_iter + 1):
        # Even step.
        num = m * (b - m) * x / ((a + 2 * m - 1) * (a + 2 * m))
        d = 1.0 + num * d
        if abs(d) < tiny:
            d = tiny
        c = 1.0 + num / c
        if abs(c) < tiny:
            c = tiny
        d = 1.0 / d
        f *= c * d

        # Odd step.
        num = -((a + m) * (a + b + m) * x / ((a + 2 * m) * (a + 2 * m + 1)))
        d = 1.0 + num * d
        if abs(d) < tiny:
            d = tiny
        c = 1.0 + num / c
        if abs(c) < tiny:
            c = tiny
        d = 1.0 / d
        delta = c * d
        f *= delta

        if abs(delta - 1.0) < epsilon:
            break

    return prefactor * f
