"""Monte Carlo pricing of European, Asian and barrier options."""

from __future__ import annotations

import math
import os
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from enum import Enum
from statistics import NormalDist

from optionpricing import stats
from optionpricing.black_scholes import price_european_option as _black_scholes_price
from optionpricing.models import BarrierType, MonteCarloResult, OptionType

_UP_BARRIERS = (BarrierType.UP_AND_OUT, BarrierType.UP_AND_IN)
_DOWN_BARRIERS = (BarrierType.DOWN_AND_OUT, BarrierType.DOWN_AND_IN)
_KNOCK_OUT = (BarrierType.UP_AND_OUT, BarrierType.DOWN_AND_OUT)
_KNOCK_IN = (BarrierType.UP_AND_IN, BarrierType.DOWN_AND_IN)


class VarianceReductionTechnique(Enum):
    """Variance reduction applied to the simulation."""

    NONE = "none"
    ANTITHETIC_VARIATES = "antithetic_variates"
    CONTROL_VARIATES = "control_variates"
    STRATIFIED_SAMPLING = "stratified_sampling"
    IMPORTANCE_SAMPLING = "importance_sampling"


def _random_seed():
    return random.SystemRandom().getrandbits(64)


def _default_threads():
    return os.cpu_count() or 1


@dataclass
class MonteCarloConfiguration:
    """Settings for the Monte Carlo engine."""

    num_paths: int = 1_000_000
    num_threads: int = field(default_factory=_default_threads)
    variance_reduction: VarianceReductionTechnique = VarianceReductionTechnique.ANTITHETIC_VARIATES
    enable_vectorization: bool = True
    random_seed: int = field(default_factory=_random_seed)
    confidence_level: float = 0.95


def _payoff(option_type, spot, strike):
    if option_type is OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


class MonteCarloEngine:
    """Simulates geometric Brownian motion paths and averages discounted payoffs."""

    def __init__(self, config=None):
        self.config = replace(config) if config is not None else MonteCarloConfiguration()

    def price_european_option(self, option, market):
        """Price a European option from terminal prices."""
        start = time.perf_counter_ns()

        vol = market.volatility
        expiry = option.time_to_expiry
        rate = market.risk_free_rate
        drift = (rate - market.dividend_yield - 0.5 * vol * vol) * expiry
        vol_sqrt_t = vol * math.sqrt(expiry)
        discount = math.exp(-rate * expiry)

        payoffs = self._simulate_terminal(
            market.spot_price, option.strike, drift, vol_sqrt_t, option.option_type
        )

        if self.config.variance_reduction is VarianceReductionTechnique.CONTROL_VARIATES:
            payoffs = self._apply_control_variates(payoffs, option, market)

        return self._summarize(payoffs, discount, start)

    def price_asian_option(self, option, market, monitoring_points=252):
        """Price an arithmetic-average-price Asian option."""
        if monitoring_points <= 0:
            raise ValueError("monitoring_points must be positive")
        start = time.perf_counter_ns()

        step_drift, vol_sqrt_dt, discount = self._step_terms(option, market, monitoring_points)
        rng = stats.RandomNumberGenerator(self.config.random_seed)
        spot0 = market.spot_price

        payoffs = []
        for _ in range(self.config.num_paths):
            spot = spot0
            total = 0.0
            for _ in range(monitoring_points):
                spot *= math.exp(step_drift + vol_sqrt_dt * rng.normal())
                total += spot
            payoffs.append(_payoff(option.option_type, total / monitoring_points, option.strike))

        return self._summarize(payoffs, discount, start)

    def price_barrier_option(self, option, market, monitoring_points=252):
        """Price a single-barrier option monitored at discrete dates."""
        if monitoring_points <= 0:
            raise ValueError("monitoring_points must be positive")
        start = time.perf_counter_ns()

        step_drift, vol_sqrt_dt, discount = self._step_terms(option, market, monitoring_points)
        rng = stats.RandomNumberGenerator(self.config.random_seed)
        barrier = option.barrier_level
        barrier_type = option.barrier_type

        payoffs = []
        for _ in range(self.config.num_paths):
            spot = market.spot_price
            hit = False
            for _ in range(monitoring_points):
                spot *= math.exp(step_drift + vol_sqrt_dt * rng.normal())
                if barrier_type in _UP_BARRIERS and spot >= barrier:
                    hit = True
                elif barrier_type in _DOWN_BARRIERS and spot <= barrier:
                    hit = True

            payoff = _payoff(option.option_type, spot, option.strike)
            if (barrier_type in _KNOCK_OUT and hit) or (barrier_type in _KNOCK_IN and not hit):
                payoff = 0.0
            payoffs.append(payoff)

        return self._summarize(payoffs, discount, start)

    def set_random_seed(self, seed):
        """Use ``seed`` for subsequent simulations."""
        self.config.random_seed = seed

    @staticmethod
    def _step_terms(option, market, monitoring_points):
        vol = market.volatility
        rate = market.risk_free_rate
        dt = option.time_to_expiry / monitoring_points
        step_drift = (rate - market.dividend_yield - 0.5 * vol * vol) * dt
        return step_drift, vol * math.sqrt(dt), math.exp(-rate * option.time_to_expiry)

    def _simulate_terminal(self, spot0, strike, drift, vol_sqrt_t, option_type):
        cfg = self.config
        if cfg.num_threads > 1:
            return self._simulate_parallel(spot0, strike, drift, vol_sqrt_t, option_type)

        rng = stats.RandomNumberGenerator(cfg.random_seed)
        antithetic = cfg.variance_reduction is VarianceReductionTechnique.ANTITHETIC_VARIATES
        count = cfg.num_paths // 2 if antithetic else cfg.num_paths

        payoffs = []
        for _ in range(count):
            z = rng.normal()
            payoffs.append(_payoff(option_type, spot0 * math.exp(drift + vol_sqrt_t * z), strike))
            if antithetic:
                payoffs.append(
                    _payoff(option_type, spot0 * math.exp(drift - vol_sqrt_t * z), strike)
                )
        return payoffs

    def _simulate_parallel(self, spot0, strike, drift, vol_sqrt_t, option_type):
        cfg = self.config
        threads = cfg.num_threads
        per_thread = cfg.num_paths // threads

        def chunk(index):
            end = cfg.num_paths if index == threads - 1 else (index + 1) * per_thread
            count = end - index * per_thread
            rng = stats.RandomNumberGenerator(cfg.random_seed + index)
            return [
                _payoff(option_type, spot0 * math.exp(drift + vol_sqrt_t * rng.normal()), strike)
                for _ in range(count)
            ]

        with ThreadPoolExecutor(max_workers=threads) as pool:
            return [payoff for part in pool.map(chunk, range(threads)) for payoff in part]

    @staticmethod
    def _apply_control_variates(payoffs, option, market):
        analytical = _black_scholes_price(option, market).option_price
        adjustment = analytical - stats.mean(payoffs)
        return [payoff + adjustment for payoff in payoffs]

    def _summarize(self, payoffs, discount, start):
        count = len(payoffs)
        price = discount * stats.mean(payoffs)
        if count:
            standard_error = stats.standard_deviation(payoffs) / math.sqrt(count)
        else:
            standard_error = math.nan
        standard_error *= discount

        z = NormalDist().inv_cdf(0.5 + self.config.confidence_level / 2.0)
        margin = z * standard_error
        return MonteCarloResult(
            option_price=price,
            standard_error=standard_error,
            confidence_interval_lower=price - margin,
            confidence_interval_upper=price + margin,
            paths_used=count,
            computation_time=time.perf_counter_ns() - start,
        )