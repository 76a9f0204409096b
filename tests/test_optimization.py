import math
import sys

import pytest

from optionpricing.optimization import (
    BisectionParameters,
    BrentParameters,
    NewtonParameters,
    OptimizationResult,
    backward_difference,
    central_difference,
    forward_difference,
    fourth_order_derivative,
    second_derivative,
    solve_bisection,
    solve_brent,
    solve_newton_raphson,
)


def square_minus_two(x):
    return x * x - 2.0


def test_result_defaults():
    result = OptimizationResult()
    assert result.converged is False
    assert result.iterations == 0
    assert result.tolerance_achieved == sys.float_info.max


def test_newton_finds_square_root():
    result = solve_newton_raphson(square_minus_two, lambda x: 2.0 * x, 1.0)
    assert result.converged
    assert result.value == pytest.approx(math.sqrt(2.0), abs=1e-8)
    assert result.tolerance_achieved < NewtonParameters().tolerance


def test_newton_without_adaptive_step():
    params = NewtonParameters(use_adaptive_step=False)
    result = solve_newton_raphson(square_minus_two, lambda x: 2.0 * x, 3.0, params)
    assert result.converged
    assert result.value == pytest.approx(math.sqrt(2.0), abs=1e-8)


def test_newton_stops_on_flat_derivative():
    result = solve_newton_raphson(lambda x: x * x + 1.0, lambda x: 2.0 * x, 0.0)
    assert not result.converged
    assert result.iterations == 0
    assert result.value == 0.0
    assert result.function_value == 1.0


def test_newton_runs_out_of_iterations():
    params = NewtonParameters(max_iterations=3, use_adaptive_step=False)
    result = solve_newton_raphson(lambda x: x * x + 1.0, lambda x: 2.0 * x, 5.0, params)
    assert not result.converged
    assert result.iterations == 3


def test_brent_finds_cosine_fixed_point():
    f = lambda x: math.cos(x) - x  # noqa: E731
    result = solve_brent(f, 0.0, 1.0)
    assert result.converged
    assert abs(f(result.value)) < 1e-10
    assert result.tolerance_achieved == abs(result.function_value)


def test_brent_square_root():
    result = solve_brent(square_minus_two, 0.0, 2.0)
    assert result.value == pytest.approx(math.sqrt(2.0), abs=1e-10)


def test_brent_requires_bracket():
    result = solve_brent(square_minus_two, 2.0, 3.0)
    assert not result.converged
    assert result.iterations == 0
    assert result.tolerance_achieved == sys.float_info.max


def test_brent_respects_iteration_limit():
    result = solve_brent(square_minus_two, 0.0, 2.0, BrentParameters(max_iterations=1))
    assert result.iterations <= 1
    assert 0.0 <= result.value <= 2.0


def test_bisection_square_root():
    result = solve_bisection(square_minus_two, 0.0, 2.0)
    assert result.converged
    assert result.value == pytest.approx(math.sqrt(2.0), abs=1e-9)


def test_bisection_requires_bracket():
    result = solve_bisection(square_minus_two, -1.0, 1.0)
    assert not result.converged
    assert result.value == 0.0


def test_bisection_first_midpoint_when_limited():
    params = BisectionParameters(max_iterations=1)
    result = solve_bisection(square_minus_two, 0.0, 4.0, params)
    assert result.value == 2.0
    assert result.function_value == square_minus_two(2.0)
    assert result.iterations == 1
    assert not result.converged


@pytest.mark.parametrize(
    "method", [forward_difference, backward_difference, central_difference, fourth_order_derivative]
)
def test_first_derivatives_of_sine(method):
    assert method(math.sin, 0.7, 1e-5) == pytest.approx(math.cos(0.7), abs=1e-4)


def test_central_difference_default_step():
    assert central_difference(math.exp, 0.3) == pytest.approx(math.exp(0.3), abs=1e-6)


def test_second_derivative_of_sine():
    assert second_derivative(math.sin, 0.7, 1e-4) == pytest.approx(-math.sin(0.7), abs=1e-5)


def test_fourth_order_more_accurate_than_forward():
    h = 1e-2
    exact = math.cos(1.1)
    assert abs(fourth_order_derivative(math.sin, 1.1, h) - exact) < abs(
        forward_difference(math.sin, 1.1, h) - exact
    )