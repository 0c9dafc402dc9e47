"""Statistical models testing k-mer abundance between controls and cases."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence

from .log_factorial import LogFactorialTable


class Significance(enum.Enum):
    """Which group a k-mer is over-represented in."""

    NO = 0
    CONTROL = 1
    CASE = 2


def chisquare_sf(x: float) -> float:
    """Upper tail probability of a chi-square law with one degree of freedom."""
    if x < 0:
        raise ValueError(f"chi-square statistic must be non-negative, got {x}")
    return math.erfc(math.sqrt(x / 2.0))


def compute_mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN for an empty sequence."""
    if not values:
        return math.nan
    return sum(values, 0.0) / len(values)


def compute_mean_e(values: Sequence[int]) -> tuple[float, int]:
    """Mean and number of positive entries."""
    total = sum(values)
    positive = sum(1 for v in values if v > 0)
    mean = total / len(values) if values else math.nan
    return mean, positive


def compute_sum_e(values: Sequence[float]) -> tuple[float, int]:
    """Sum and number of positive entries."""
    total = 0.0
    positive = 0
    for v in values:
        if v > 0:
            positive += 1
        total += v
    return total, positive


def compute_mean_sd(values: Sequence[float]) -> tuple[float, float]:
    """Mean and population standard deviation."""
    mean = compute_mean(values)
    if not values:
        return mean, math.nan
    variance = sum(v * v for v in values) / len(values) - mean * mean
    sd = math.sqrt(variance) if variance >= 0 else math.nan
    return mean, sd


class PoissonLikelihood:
    """Likelihood ratio test of k-mer counts under a Poisson model."""

    def __init__(
        self,
        nb_controls: int,
        nb_cases: int,
        total_controls: Sequence[int],
        total_cases: Sequence[int],
        preload: int,
    ) -> None:
        self.nb_controls = nb_controls
        self.nb_cases = nb_cases
        self.total_controls = list(total_controls)
        self.total_cases = list(total_cases)
        self.sum_controls = sum(self.total_controls)
        self.sum_cases = sum(self.total_cases)
        self.config = ""
        self._lf_table = LogFactorialTable(preload)

    def configure(self, config: str) -> None:
        """Record the model configuration string."""
        self.config = config

    def _poisson_prob(self, k: float, lam: float) -> float:
        if lam <= 0:
            return 0.0
        k = max(int(k), 0)
        return -lam + (k * math.log(lam) - self._lf_table[k])

    def process(
        self, controls: Sequence[int], cases: Sequence[int]
    ) -> tuple[float, Significance, float, float]:
        """Return (p-value, significance, scaled control count, case count)."""
        sum_control, _ = compute_sum_e(controls)
        sum_case, _ = compute_sum_e(cases)

        mean = (sum_control + sum_case) / float(self.sum_controls + self.sum_cases)

        alt_hypothesis = 0.0
        alt_hypothesis += self._poisson_prob(sum_control, sum_control)
        alt_hypothesis += self._poisson_prob(sum_case, sum_case)

        null_hypothesis = 0.0
        null_hypothesis += self._poisson_prob(sum_control, mean * self.sum_controls)
        null_hypothesis += self._poisson_prob(sum_case, mean * self.sum_cases)

        likelihood_ratio = max(alt_hypothesis - null_hypothesis, 0.0)
        p_value = chisquare_sf(2 * likelihood_ratio)

        scaled_control = sum_control * self.sum_cases / self.sum_controls

        if scaled_control < sum_case:
            sign = Significance.CASE
        elif scaled_control > sum_case:
            sign = Significance.CONTROL
        else:
            sign = Significance.NO

        return p_value, sign, scaled_control, sum_case