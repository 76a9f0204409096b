"""Lattice pricers for options with early exercise."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, replace

from optionpricing.models import BinomialResult, ExerciseStyle, OptionType


def _payoff(option_type, spot, strike):
    if option_type is OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


@dataclass
class TreeParameters:
    """Settings for the binomial tree."""

    time_steps: int = 1000
    use_caching: bool = True
    optimize_memory: bool = True
    convergence_tolerance: float = 1e-6


class BinomialTreePricer:
    """Cox-Ross-Rubinstein binomial tree with early exercise at every node."""

    def __init__(self, params=None):
        self.params = params if params is not None else TreeParameters()

    def price_american_option(self, option, market):
        """Price with early exercise; invalid inputs give an empty result."""
        start = time.perf_counter_ns()

        spot = market.spot_price
        expiry = option.time_to_expiry
        vol = market.volatility
        rate = market.risk_free_rate

        if expiry <= 0.0 or vol <= 0.0 or spot <= 0.0:
            return BinomialResult()

        steps = self.params.time_steps
        dt = expiry / steps
        up = math.exp(vol * math.sqrt(dt))
        down = 1.0 / up
        prob = (math.exp((rate - market.dividend_yield) * dt) - down) / (up - down)
        discount = math.exp(-rate * dt)

        if self.params.optimize_memory:
            def node_index(step, i):
                return step * steps + i
        else:
            def node_index(step, i):
                return step * (step + 1) // 2 + i

        result = self._backward_induction(
            spot, option.strike, up, down, prob, discount, option.option_type, node_index
        )
        result.computation_time = time.perf_counter_ns() - start
        result.tree_depth = steps
        return result

    def price_american_option_adaptive(self, option, market, target_accuracy=1e-4):
        """Grow the tree by half again until successive prices agree."""
        min_steps = 100
        max_steps = 5000
        current_steps = 500

        previous_price = 0.0
        result = BinomialResult()
        while current_steps <= max_steps:
            pricer = BinomialTreePricer(replace(self.params, time_steps=current_steps))
            result = pricer.price_american_option(option, market)
            if current_steps > min_steps:
                if abs(result.option_price - previous_price) < target_accuracy:
                    break
            previous_price = result.option_price
            current_steps = int(current_steps * 1.5)
        return result

    def calculate_early_exercise_premium(self, option, market):
        """Difference between the tree price and that of the European-style contract."""
        american = self.price_american_option(option, market)
        european = self.price_american_option(
            replace(option, exercise_style=ExerciseStyle.EUROPEAN), market
        )
        return american.option_price - european.option_price

    def calculate_early_exercise_boundary(self, option, market, boundary_points=100):
        """Critical spot prices at evenly spaced times from 0 to expiry."""
        expiry = option.time_to_expiry
        return [
            self._boundary_at_time(option, market, i / (boundary_points - 1) * expiry)
            for i in range(boundary_points)
        ]

    def _backward_induction(self, spot, strike, up, down, prob, discount, option_type, node_index):
        steps = self.params.time_steps
        values = [
            _payoff(option_type, spot * up**i * down ** (steps - i), strike)
            for i in range(steps + 1)
        ]

        best_node = 0
        best_exercise = 0.0
        for step in range(steps - 1, -1, -1):
            next_values = []
            for i in range(step + 1):
                node_spot = spot * up**i * down ** (step - i)
                continuation = discount * (prob * values[i + 1] + (1.0 - prob) * values[i])
                exercise = _payoff(option_type, node_spot, strike)
                next_values.append(max(continuation, exercise))
                if exercise > continuation and exercise > best_exercise:
                    best_exercise = exercise
                    best_node = node_index(step, i)
            values = next_values

        return BinomialResult(
            option_price=values[0],
            early_exercise_premium=best_exercise,
            optimal_exercise_node=best_node,
        )

    def _boundary_at_time(self, option, market, time_to_exercise):
        if time_to_exercise <= 0.0:
            return option.strike

        tolerance = 1e-6
        is_call = option.option_type is OptionType.CALL
        low = option.strike * 0.5
        high = option.strike * 2.0
        option_at_time = replace(option, time_to_expiry=time_to_exercise)

        for _ in range(100):
            mid = (low + high) / 2.0
            result = self.price_american_option(option_at_time, replace(market, spot_price=mid))
            diff = result.option_price - _payoff(option.option_type, mid, option.strike)
            if abs(diff) < tolerance:
                return mid
            if (diff > 0) == is_call:
                low = mid
            else:
                high = mid

        return (low + high) / 2.0


@dataclass
class TrinomialParameters:
    """Settings for the trinomial tree; ``lambda_`` scales the log-price spacing."""

    time_steps: int = 500
    lambda_: float = 1.5
    adaptive_spacing: bool = True


class TrinomialTreePricer:
    """Trinomial tree in log-price with early exercise at every node."""

    def __init__(self, params=None):
        self.params = params if params is not None else TrinomialParameters()

    def price_american_option(self, option, market):
        """Price with early exercise on a recombining trinomial lattice."""
        start = time.perf_counter_ns()

        spot = market.spot_price
        strike = option.strike
        rate = market.risk_free_rate
        vol = market.volatility
        steps = self.params.time_steps

        dt = option.time_to_expiry / steps
        dx = vol * math.sqrt(self.params.lambda_ * dt)
        nu = rate - market.dividend_yield - 0.5 * vol * vol
        spread = (vol * vol * dt + nu * nu * dt * dt) / (dx * dx)
        drift = nu * dt / dx
        p_up = 0.5 * (spread + drift)
        p_down = 0.5 * (spread - drift)
        p_mid = 1.0 - p_up - p_down
        discount = math.exp(-rate * dt)

        values = [
            _payoff(option.option_type, spot * math.exp((i - steps) * dx), strike)
            for i in range(2 * steps + 1)
        ]

        for step in range(steps - 1, -1, -1):
            next_values = []
            for i in range(2 * step + 1):
                node_spot = spot * math.exp((i - step) * dx)
                continuation = discount * (
                    p_up * values[i + 2] + p_mid * values[i + 1] + p_down * values[i]
                )
                exercise = _payoff(option.option_type, node_spot, strike)
                next_values.append(max(continuation, exercise))
            values = next_values

        return BinomialResult(
            option_price=values[0],
            tree_depth=steps,
            computation_time=time.perf_counter_ns() - start,
        )