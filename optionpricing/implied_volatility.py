"""Implied volatility solvers built on the Black-Scholes pricer."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, replace

from optionpricing.black_scholes import price_european_option
from optionpricing.models import OptionType
from optionpricing.optimization import (
    BisectionParameters,
    BrentParameters,
    solve_bisection,
    solve_brent,
)

_EPSILON = sys.float_info.epsilon


def _clamp(value, low, high):
    # NaN passes through unchanged.
    if value < low:
        return low
    if value > high:
        return high
    return value


def _safe_log(x):
    if x > 0.0:
        return math.log(x)
    return -math.inf if x == 0.0 else math.nan


def _safe_sqrt(x):
    return math.sqrt(x) if x >= 0.0 else math.nan


@dataclass
class SolverConfiguration:
    """Settings shared by the implied volatility solvers."""

    tolerance: float = 1e-8
    max_iterations: int = 100
    min_volatility: float = 1e-6
    max_volatility: float = 5.0
    initial_guess: float = 0.2
    use_vega_scaling: bool = True
    use_numerical_stability: bool = True


class ImpliedVolatilitySolver:
    """Finds the volatility at which Black-Scholes reproduces a market price."""

    def __init__(self, config=None):
        self.config = config if config is not None else SolverConfiguration()

    def _price_at(self, option, market, vol):
        return price_european_option(option, replace(market, volatility=vol))

    def _objective(self, option, market, market_price):
        def objective(vol):
            return self._price_at(option, market, vol).option_price - market_price

        return objective

    def solve_newton_raphson(self, option, market, market_price):
        """Damped Newton iteration on vega; 0.0 for invalid input."""
        cfg = self.config
        if market_price <= 0.0 or option.time_to_expiry <= 0.0:
            return 0.0

        if market_price <= self._intrinsic_value(option, market) + 1e-10:
            return cfg.min_volatility

        vol_guess = self._initial_guess(option, market)

        for iteration in range(cfg.max_iterations):
            result = self._price_at(option, market, vol_guess)
            price_diff = result.option_price - market_price
            vega = result.greeks.vega * 100.0

            if abs(price_diff) < cfg.tolerance:
                return vol_guess
            if abs(vega) < _EPSILON:
                break

            step = price_diff / vega
            if cfg.use_numerical_stability:
                step = self._stabilize(vol_guess, step, iteration)

            clamped = _clamp(vol_guess - step, cfg.min_volatility, cfg.max_volatility)
            if abs(clamped - vol_guess) < cfg.tolerance:
                return clamped
            vol_guess = clamped

        return vol_guess

    def solve_brent_method(self, option, market, market_price):
        """Brent's method over the volatility bounds, falling back to Newton."""
        cfg = self.config
        if market_price <= 0.0 or option.time_to_expiry <= 0.0:
            return 0.0

        objective = self._objective(option, market, market_price)
        if objective(cfg.min_volatility) * objective(cfg.max_volatility) >= 0.0:
            return self.solve_newton_raphson(option, market, market_price)

        params = BrentParameters(tolerance=cfg.tolerance, max_iterations=cfg.max_iterations)
        result = solve_brent(objective, cfg.min_volatility, cfg.max_volatility, params)
        if result.converged:
            return result.value
        return self.solve_newton_raphson(option, market, market_price)

    def solve_bisection_method(self, option, market, market_price):
        """Bisection over the volatility bounds; the initial guess when it fails."""
        cfg = self.config
        if market_price <= 0.0 or option.time_to_expiry <= 0.0:
            return 0.0

        objective = self._objective(option, market, market_price)
        if objective(cfg.min_volatility) * objective(cfg.max_volatility) >= 0.0:
            return cfg.initial_guess

        params = BisectionParameters(tolerance=cfg.tolerance, max_iterations=cfg.max_iterations)
        result = solve_bisection(objective, cfg.min_volatility, cfg.max_volatility, params)
        return result.value if result.converged else cfg.initial_guess

    def solve_rational_approximation(self, option, market, market_price):
        """Closed-form starting estimate refined by a few Newton steps."""
        cfg = self.config
        if market_price <= 0.0 or option.time_to_expiry <= 0.0:
            return 0.0

        strike = option.strike
        expiry = option.time_to_expiry
        rate = market.risk_free_rate

        forward = market.spot_price * math.exp((rate - market.dividend_yield) * expiry)
        discount = math.exp(-rate * expiry)

        if option.option_type is OptionType.CALL:
            normalized_price = market_price / discount
        else:
            normalized_price = (market_price + forward - strike) / discount

        x = math.log(forward / strike)
        alpha = 2.0 * normalized_price / (forward + strike)
        if alpha <= 0.0 or alpha >= 1.0:
            return self.solve_newton_raphson(option, market, market_price)

        if abs(x) < 0.1:
            vol_approx = math.sqrt(2.0 * math.log(1.0 / alpha)) / math.sqrt(expiry)
        else:
            eta = alpha - 0.5
            zeta = (1.0 / math.sqrt(expiry)) * _safe_sqrt(
                2.0 * _safe_log((forward + strike) / (2.0 * forward * alpha))
            )
            vol_approx = zeta + eta * zeta**3 / 6.0

        vol_approx = _clamp(vol_approx, cfg.min_volatility, cfg.max_volatility)
        return self._refine(option, market, market_price, vol_approx)

    def solve_adaptive_method(self, option, market, market_price):
        """Pick a solver from moneyness and time to expiry."""
        cfg = self.config
        time_value = market_price - self._intrinsic_value(option, market)
        if time_value <= cfg.tolerance:
            return cfg.min_volatility

        expiry = option.time_to_expiry
        if expiry > 0.5 and abs(math.log(market.spot_price / option.strike)) < 0.1:
            return self.solve_rational_approximation(option, market, market_price)
        if expiry < 0.05:
            return self.solve_bisection_method(option, market, market_price)
        return self.solve_newton_raphson(option, market, market_price)

    def solve_volatility_surface(self, options, market_data, market_prices):
        """Implied volatility for each (option, market, price) triple."""
        options = list(options)
        market_data = list(market_data)
        market_prices = list(market_prices)
        if len(options) != len(market_data) or len(options) != len(market_prices):
            raise ValueError("Input sequences must have the same length")

        return [
            self.solve_adaptive_method(option, market, price)
            for option, market, price in zip(options, market_data, market_prices)
        ]

    def calculate_vega_weighted_volatility(self, options, market_data, market_prices):
        """Average implied volatility weighted by each option's vega; 0.0 with no vega."""
        options = list(options)
        market_data = list(market_data)
        implied_vols = self.solve_volatility_surface(options, market_data, market_prices)

        total_vega = 0.0
        weighted_vol = 0.0
        for option, market, vol in zip(options, market_data, implied_vols):
            vega = self._price_at(option, market, vol).greeks.vega * 100.0
            total_vega += vega
            weighted_vol += vega * vol

        return weighted_vol / total_vega if total_vega > 0.0 else 0.0

    @staticmethod
    def _intrinsic_value(option, market):
        if option.option_type is OptionType.CALL:
            return max(market.spot_price - option.strike, 0.0)
        return max(option.strike - market.spot_price, 0.0)

    def _initial_guess(self, option, market):
        cfg = self.config
        if cfg.initial_guess > 0.0:
            return cfg.initial_guess

        expiry = option.time_to_expiry
        moneyness = market.spot_price / option.strike
        log_forward_moneyness = abs(math.log(moneyness * math.exp(market.risk_free_rate * expiry)))

        base_vol = 0.2
        if log_forward_moneyness > 0.1:
            base_vol += 0.1 * log_forward_moneyness
        if expiry < 0.1:
            base_vol *= 1.5
        return _clamp(base_vol, cfg.min_volatility, cfg.max_volatility)

    def _stabilize(self, current_vol, step, iteration):
        max_step = 0.5
        adjusted = step / (1.0 + iteration * 0.1)
        if abs(adjusted) > max_step:
            adjusted = math.copysign(max_step, adjusted)

        new_vol = current_vol - adjusted
        if new_vol <= self.config.min_volatility or new_vol >= self.config.max_volatility:
            adjusted *= 0.5
        return adjusted

    def _refine(self, option, market, market_price, initial_vol):
        refined = replace(self.config, max_iterations=10, initial_guess=initial_vol)
        return ImpliedVolatilitySolver(refined).solve_newton_raphson(option, market, market_price)