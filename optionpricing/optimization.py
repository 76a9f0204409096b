"""One-dimensional root finders and finite-difference derivatives."""

from __future__ import annotations

import sys
from dataclasses import dataclass

_EPSILON = sys.float_info.epsilon
DEFAULT_H = 1e-8


@dataclass
class OptimizationResult:
    """Outcome of a root search."""

    value: float = 0.0
    function_value: float = 0.0
    iterations: int = 0
    converged: bool = False
    tolerance_achieved: float = sys.float_info.max


@dataclass
class NewtonParameters:
    """Settings for Newton-Raphson iteration."""

    tolerance: float = 1e-8
    max_iterations: int = 100
    step_size: float = 1.0
    use_adaptive_step: bool = True


@dataclass
class BrentParameters:
    """Settings for Brent's method."""

    tolerance: float = 1e-12
    max_iterations: int = 100


@dataclass
class BisectionParameters:
    """Settings for bisection."""

    tolerance: float = 1e-10
    max_iterations: int = 100


def _adaptive_step(f, x, proposed_step, current_fx):
    """Halve the step (at most ten times) until it reduces |f|."""
    step = proposed_step
    for _ in range(10):
        if abs(f(x - step)) < abs(current_fx):
            break
        step *= 0.5
    return step


def solve_newton_raphson(f, df, initial_guess, params=None):
    """Find a root of ``f`` from ``initial_guess`` using its derivative ``df``."""
    params = params if params is not None else NewtonParameters()
    result = OptimizationResult(value=initial_guess)

    for iteration in range(params.max_iterations):
        result.iterations = iteration
        fx = f(result.value)
        dfx = df(result.value)
        result.function_value = fx
        result.tolerance_achieved = abs(fx)

        if result.tolerance_achieved < params.tolerance:
            result.converged = True
            break
        if abs(dfx) < _EPSILON:
            break

        step = params.step_size * fx / dfx
        if params.use_adaptive_step:
            step = _adaptive_step(f, result.value, step, fx)
        result.value -= step
    else:
        result.iterations = params.max_iterations

    return result


def solve_brent(f, lower_bound, upper_bound, params=None):
    """Brent's method on a bracket; an unconverged empty result if it does not bracket a root."""
    params = params if params is not None else BrentParameters()
    result = OptimizationResult()

    a, b = lower_bound, upper_bound
    fa, fb = f(a), f(b)
    if fa * fb >= 0.0:
        return result

    if abs(fa) < abs(fb):
        a, b, fa, fb = b, a, fb, fa

    c, fc = a, fa
    mflag = True
    d = 0.0

    for iteration in range(params.max_iterations):
        result.iterations = iteration
        if abs(b - a) < params.tolerance:
            result.converged = True
            break

        if fa != fc and fb != fc:
            s = (
                a * fb * fc / ((fa - fb) * (fa - fc))
                + b * fa * fc / ((fb - fa) * (fb - fc))
                + c * fa * fb / ((fc - fa) * (fc - fb))
            )
        else:
            s = b - fb * (b - a) / (fb - fa)

        quarter = (3.0 * a + b) / 4.0
        outside = (s < quarter and s < b) or (s > quarter and s > b)
        if mflag:
            use_bisection = (
                outside
                or abs(s - b) >= abs(b - c) / 2.0
                or abs(b - c) < params.tolerance
            )
        else:
            use_bisection = (
                outside
                or abs(s - b) >= abs(c - d) / 2.0
                or abs(c - d) < params.tolerance
            )

        if use_bisection:
            s = (a + b) / 2.0
            mflag = True
        else:
            mflag = False

        fs = f(s)
        d = c
        c, fc = b, fb

        if fa * fs < 0.0:
            b, fb = s, fs
        else:
            a, fa = s, fs

        if abs(fa) < abs(fb):
            a, b, fa, fb = b, a, fb, fa
    else:
        result.iterations = params.max_iterations

    result.value = b
    result.function_value = fb
    result.tolerance_achieved = abs(fb)
    return result


def solve_bisection(f, lower_bound, upper_bound, params=None):
    """Bisection on a bracket; an unconverged empty result if it does not bracket a root."""
    params = params if params is not None else BisectionParameters()
    result = OptimizationResult()

    a, b = lower_bound, upper_bound
    fa, fb = f(a), f(b)
    if fa * fb >= 0.0:
        return result

    for iteration in range(params.max_iterations):
        result.iterations = iteration
        c = (a + b) / 2.0
        fc = f(c)
        result.value = c
        result.function_value = fc
        result.tolerance_achieved = abs(fc)

        if result.tolerance_achieved < params.tolerance or (b - a) / 2.0 < params.tolerance:
            result.converged = True
            break

        if fa * fc < 0.0:
            b, fb = c, fc
        else:
            a, fa = c, fc
    else:
        result.iterations = params.max_iterations

    return result


def forward_difference(f, x, h=DEFAULT_H):
    """First derivative by forward difference."""
    return (f(x + h) - f(x)) / h


def backward_difference(f, x, h=DEFAULT_H):
    """First derivative by backward difference."""
    return (f(x) - f(x - h)) / h


def central_difference(f, x, h=DEFAULT_H):
    """First derivative by central difference."""
    return (f(x + h) - f(x - h)) / (2.0 * h)


def second_derivative(f, x, h=DEFAULT_H):
    """Second derivative by central difference."""
    return (f(x + h) - 2.0 * f(x) + f(x - h)) / (h * h)


def fourth_order_derivative(f, x, h=DEFAULT_H):
    """First derivative by the fourth-order accurate five-point stencil."""
    return (-f(x + 2.0 * h) + 8.0 * f(x + h) - 8.0 * f(x - h) + f(x - 2.0 * h)) / (12.0 * h)