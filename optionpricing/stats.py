"""Descriptive statistics over float sequences and a seedable random source."""

from __future__ import annotations

import math
import random

_T_TABLE = (
    (12.706, 4.303, 3.182, 2.776, 2.571),
    (4.303, 3.182, 2.920, 2.571, 2.447),
    (3.182, 2.776, 2.353, 2.132, 2.015),
)


def mean(data):
    """Arithmetic mean; 0.0 for an empty sequence."""
    data = list(data)
    if not data:
        return 0.0
    return sum(data) / len(data)


def variance(data, sample=True):
    """Sample (n - 1) or population (n) variance; 0.0 for fewer than two values."""
    data = list(data)
    if len(data) <= 1:
        return 0.0
    mu = mean(data)
    sum_sq = sum((value - mu) ** 2 for value in data)
    return sum_sq / (len(data) - 1 if sample else len(data))


def standard_deviation(data, sample=True):
    """Square root of the variance."""
    return math.sqrt(variance(data, sample))


def _standardized_moment(data, power):
    mu = mean(data)
    sigma = standard_deviation(data, sample=False)
    if sigma == 0.0:
        return None
    return sum(((value - mu) / sigma) ** power for value in data) / len(data)


def skewness(data):
    """Third standardized moment; 0.0 for fewer than three values or no spread."""
    data = list(data)
    if len(data) < 3:
        return 0.0
    moment = _standardized_moment(data, 3)
    return 0.0 if moment is None else moment


def kurtosis(data, excess=True):
    """Fourth standardized moment, less 3 when ``excess``; 0.0 for fewer than four values."""
    data = list(data)
    if len(data) < 4:
        return 0.0
    moment = _standardized_moment(data, 4)
    if moment is None:
        return 0.0
    return moment - 3.0 if excess else moment


def percentile(data, p):
    """Linearly interpolated percentile for ``p`` in [0, 1]; 0.0 for empty data."""
    data = list(data)
    if not data:
        return 0.0
    if p <= 0.0:
        return min(data)
    if p >= 1.0:
        return max(data)

    data.sort()
    index = p * (len(data) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return data[lower]
    weight = index - lower
    return data[lower] * (1.0 - weight) + data[upper] * weight


def median(data):
    """The 50th percentile."""
    return percentile(data, 0.5)


def _normal_critical_value(probability):
    if probability >= 0.975:
        return 1.96
    if probability >= 0.95:
        return 1.645
    if probability >= 0.90:
        return 1.282
    return 1.0


def _t_critical_value(degrees_freedom, probability):
    if degrees_freedom >= 30:
        return _normal_critical_value(probability)
    if probability >= 0.95 and 1 <= degrees_freedom <= 3:
        return _T_TABLE[degrees_freedom - 1][0]
    return _normal_critical_value(probability)


def confidence_interval(data, confidence_level=0.95):
    """Two-sided interval for the mean as a ``(lower, upper)`` pair."""
    data = list(data)
    if not data:
        return (0.0, 0.0)

    alpha = (1.0 - confidence_level) / 2.0
    mu = mean(data)
    sigma = standard_deviation(data)
    critical = _t_critical_value(len(data) - 1, 1.0 - alpha)
    margin = critical * sigma / math.sqrt(len(data))
    return (mu - margin, mu + margin)


def correlation(x, y):
    """Pearson correlation; 0.0 for mismatched lengths, fewer than two points or no spread."""
    x = list(x)
    y = list(y)
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    mean_x = mean(x)
    mean_y = mean(y)
    numerator = 0.0
    sum_sq_x = 0.0
    sum_sq_y = 0.0
    for xi, yi in zip(x, y):
        dx = xi - mean_x
        dy = yi - mean_y
        numerator += dx * dy
        sum_sq_x += dx * dx
        sum_sq_y += dy * dy

    denominator = math.sqrt(sum_sq_x * sum_sq_y)
    return numerator / denominator if denominator != 0.0 else 0.0


class RandomNumberGenerator:
    """Seedable source of standard normal and uniform [0, 1) variates."""

    def __init__(self, seed=None):
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self._random = random.Random(seed)

    def normal(self):
        """One draw from the standard normal distribution."""
        return self._random.gauss(0.0, 1.0)

    def uniform(self):
        """One draw from the uniform distribution on [0, 1)."""
        return self._random.random()

    def seed(self, new_seed):
        """Restart the stream from ``new_seed``."""
        self._random.seed(new_seed)

    def normals(self, count):
        """A list of ``count`` standard normal draws."""
        return [self.normal() for _ in range(count)]