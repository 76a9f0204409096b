"""Front door for pricing: dispatch by contract style, caching and timing statistics."""

from __future__ import annotations

import math
import os
import threading
import time
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace

from optionpricing import black_scholes
from optionpricing.american import BinomialTreePricer, TreeParameters
from optionpricing.greeks import calculate_analytical_greeks, calculate_numerical_greeks
from optionpricing.models import (
    BarrierType,
    ExerciseStyle,
    PerformanceMetrics,
    PricingResult,
)

_AMERICAN_TIME_STEPS = 1000
_PARALLEL_THRESHOLD = 100


def _default_pool_size():
    return os.cpu_count() or 1


@dataclass
class EngineConfiguration:
    """Settings for the pricing engine."""

    enable_caching: bool = True
    enable_vectorization: bool = True
    enable_multithreading: bool = True
    thread_pool_size: int = field(default_factory=_default_pool_size)
    cache_size: int = 10000
    cache_tolerance: float = 1e-6


class PricingEngine:
    """Prices single options and portfolios, caching converged results."""

    def __init__(self, config=None):
        self.config = replace(config) if config is not None else EngineConfiguration()
        self._cache = OrderedDict()
        self._cache_lock = threading.Lock()
        self._metrics = PerformanceMetrics()
        self._metrics_lock = threading.Lock()

    def price_option(self, option, market):
        """Price one option, returning a cached result when one matches."""
        caching = self.config.enable_caching
        key = self._cache_key(option, market) if caching else None

        if caching:
            with self._cache_lock:
                cached = self._cache.get(key)
            if cached is not None:
                return replace(cached, greeks=replace(cached.greeks))

        if option.exercise_style is ExerciseStyle.EUROPEAN:
            if option.barrier_type is BarrierType.NONE:
                result = black_scholes.price_european_option(option, market)
            else:
                result = black_scholes.price_barrier_option(option, market)
        else:
            # Bermudan contracts are treated as American.
            result = self._price_american(option, market)

        if caching and result.converged:
            self._store(key, result)

        with self._metrics_lock:
            self._metrics.update(result.computation_time)

        return result

    def price_portfolio(self, options, market_data):
        """Price each option against the market data at the same position."""
        options = list(options)
        market_data = list(market_data)
        if len(options) != len(market_data):
            raise ValueError("Options and market data must have the same length")

        if self.config.enable_multithreading and len(options) > _PARALLEL_THRESHOLD:
            workers = max(1, min(self.config.thread_pool_size, len(options)))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(self.price_option, options, market_data))

        return [self.price_option(option, market) for option, market in zip(options, market_data)]

    def calculate_implied_volatility(self, option, market, market_price, tolerance=1e-6):
        """Black-Scholes implied volatility of a market price."""
        return black_scholes.calculate_implied_volatility(
            option, market, market_price, tolerance
        )

    def calculate_greeks(self, option, market):
        """Analytical Greeks for vanilla European options, bump-and-reprice otherwise."""
        if (
            option.exercise_style is ExerciseStyle.EUROPEAN
            and option.barrier_type is BarrierType.NONE
        ):
            return calculate_analytical_greeks(option, market)

        def pricing_function(opt, mkt):
            return self.price_option(opt, mkt).option_price

        return calculate_numerical_greeks(option, market, pricing_function)

    @property
    def performance_metrics(self):
        """A snapshot of the timing statistics."""
        with self._metrics_lock:
            return replace(self._metrics)

    def reset_performance_metrics(self):
        """Clear the timing statistics."""
        with self._metrics_lock:
            self._metrics.reset()

    @property
    def cache_size(self):
        """Number of cached results."""
        with self._cache_lock:
            return len(self._cache)

    def clear_cache(self):
        """Drop every cached result."""
        if self.config.enable_caching:
            with self._cache_lock:
                self._cache.clear()

    def _quantize(self, value):
        tolerance = self.config.cache_tolerance
        if tolerance > 0.0 and math.isfinite(value):
            return round(value / tolerance)
        return value

    def _cache_key(self, option, market):
        return (
            self._quantize(option.strike),
            self._quantize(option.time_to_expiry),
            self._quantize(market.spot_price),
            self._quantize(market.volatility),
            self._quantize(market.risk_free_rate),
            option.option_type,
            option.exercise_style,
        )

    def _store(self, key, result):
        with self._cache_lock:
            if key not in self._cache and len(self._cache) >= self.config.cache_size:
                if self._cache:
                    self._cache.popitem(last=False)
            if self.config.cache_size > 0:
                self._cache[key] = replace(result, greeks=replace(result.greeks))

    @staticmethod
    def _price_american(option, market):
        start = time.perf_counter_ns()
        pricer = BinomialTreePricer(TreeParameters(time_steps=_AMERICAN_TIME_STEPS))
        tree = pricer.price_american_option(option, replace(market, dividend_yield=0.0))
        return PricingResult(
            option_price=tree.option_price,
            converged=True,
            iterations_used=_AMERICAN_TIME_STEPS,
            computation_time=time.perf_counter_ns() - start,
        )