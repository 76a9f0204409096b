"""Standard normal distribution helpers and the Black-Scholes d1/d2 terms."""

from __future__ import annotations

import math

SQRT_2_PI = 2.506628274631000502
INV_SQRT_2_PI = 0.3989422804014326779
SQRT_2 = 1.4142135623730950488
INV_SQRT_2 = 0.7071067811865475244

_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)
_ERF_P = 0.3275911

_A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
_B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)


def _horner(coefficients, x):
    value = 0.0
    for coefficient in coefficients:
        value = value * x + coefficient
    return value


def _erf_approx(x):
    """Abramowitz-Stegun 7.1.26 approximation of the error function."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    t = 1.0 / (1.0 + _ERF_P * x)
    a1, a2, a3, a4, a5 = _ERF_A
    poly = ((((a5 * t + a4) * t) + a3) * t + a2) * t + a1
    return sign * (1.0 - poly * t * math.exp(-x * x))


def _rational_approximation(p):
    if p < 0.02425:
        q = math.sqrt(-2.0 * math.log(p))
        return _horner(_C, q) / (_horner(_D, q) * q + 1.0)
    if p > 0.97575:
        return -_rational_approximation(1.0 - p)
    q = p - 0.5
    r = q * q
    return _horner(_A, r) * q / (_horner(_B, r) * r + 1.0)


def pdf(x):
    """Standard normal density."""
    return INV_SQRT_2_PI * math.exp(-0.5 * x * x)


def cdf(x):
    """Standard normal cumulative distribution."""
    if x >= 0.0:
        return 0.5 + 0.5 * _erf_approx(x * INV_SQRT_2)
    return 0.5 - 0.5 * _erf_approx(-x * INV_SQRT_2)


def inverse_cdf(p):
    """Rational approximation of the quantile, scaled by sqrt(2); infinite outside (0, 1)."""
    if p <= 0.0:
        return -math.inf
    if p >= 1.0:
        return math.inf
    return _rational_approximation(p) * SQRT_2


def d1(spot, strike, expiry, rate, vol, dividend=0.0):
    """Black-Scholes d1 term."""
    vol_sqrt_t = vol * math.sqrt(expiry)
    return (math.log(spot / strike) + (rate - dividend + 0.5 * vol * vol) * expiry) / vol_sqrt_t


def d2(spot, strike, expiry, rate, vol, dividend=0.0):
    """Black-Scholes d2 term: d1 less vol * sqrt(expiry)."""
    return d1(spot, strike, expiry, rate, vol, dividend) - vol * math.sqrt(expiry)