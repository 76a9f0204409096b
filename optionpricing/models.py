"""Value types shared by the pricers: contracts, market snapshots and results."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum

_NS_MAX = 2**63 - 1


class OptionType(Enum):
    """Right granted by the option."""

    CALL = "call"
    PUT = "put"


class ExerciseStyle(Enum):
    """When the holder may exercise."""

    EUROPEAN = "european"
    AMERICAN = "american"
    BERMUDAN = "bermudan"


class BarrierType(Enum):
    """Knock-in / knock-out barrier feature, if any."""

    NONE = "none"
    UP_AND_OUT = "up_and_out"
    UP_AND_IN = "up_and_in"
    DOWN_AND_OUT = "down_and_out"
    DOWN_AND_IN = "down_and_in"


@dataclass(frozen=True)
class OptionSpec:
    """Terms of an option contract. Use ``dataclasses.replace`` to vary them."""

    option_type: OptionType
    exercise_style: ExerciseStyle
    strike: float
    time_to_expiry: float
    underlying_symbol: str = ""
    barrier_type: BarrierType = BarrierType.NONE
    barrier_level: float = 0.0


@dataclass
class OptionContract:
    """An option specification with an identifier and a creation timestamp."""

    spec: OptionSpec
    contract_id: int
    creation_time: int = field(default_factory=time.perf_counter_ns)


@dataclass
class MarketData:
    """Snapshot of the market inputs needed to price an option."""

    spot_price: float
    volatility: float
    risk_free_rate: float
    dividend_yield: float = 0.0
    timestamp: int = field(default_factory=time.perf_counter_ns, compare=False)
    sequence_number: int = field(default=0, compare=False)

    def update(self, spot_price, volatility, risk_free_rate, dividend_yield=0.0):
        """Replace the inputs, refresh the timestamp and bump the sequence number."""
        self.spot_price = spot_price
        self.volatility = volatility
        self.risk_free_rate = risk_free_rate
        self.dividend_yield = dividend_yield
        self.timestamp = time.perf_counter_ns()
        self.sequence_number += 1

    def is_valid(self):
        """True when spot and volatility are positive and the rate is non-negative."""
        return self.spot_price > 0.0 and self.volatility > 0.0 and self.risk_free_rate >= 0.0


@dataclass
class RealTimeMarketData:
    """The latest market snapshot alongside the one before it."""

    current: MarketData
    previous: MarketData | None = None
    price_change: float = 0.0
    vol_change: float = 0.0
    update_latency: int = 0

    def __post_init__(self):
        if self.previous is None:
            self.previous = self.current

    def update_market(self, new_data):
        """Shift the current snapshot to previous and record the changes."""
        self.previous = self.current
        self.current = new_data
        self.price_change = self.current.spot_price - self.previous.spot_price
        self.vol_change = self.current.volatility - self.previous.volatility
        self.update_latency = self.current.timestamp - self.previous.timestamp


@dataclass
class Greeks:
    """First-order sensitivities of an option price."""

    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0
    epsilon: float = 0.0


@dataclass
class PricingResult:
    """Outcome of a single pricing call; times are in nanoseconds."""

    option_price: float = 0.0
    greeks: Greeks = field(default_factory=Greeks)
    implied_volatility: float = 0.0
    computation_time: int = 0
    iterations_used: int = 0
    converged: bool = False
    numerical_error: float = 0.0


@dataclass
class MonteCarloResult:
    """Outcome of a Monte Carlo simulation; times are in nanoseconds."""

    option_price: float = 0.0
    standard_error: float = 0.0
    confidence_interval_lower: float = 0.0
    confidence_interval_upper: float = 0.0
    paths_used: int = 0
    computation_time: int = 0
    convergence_rate: float = 0.0


@dataclass
class BinomialResult:
    """Outcome of a lattice pricing; times are in nanoseconds."""

    option_price: float = 0.0
    early_exercise_premium: float = 0.0
    optimal_exercise_node: int = 0
    tree_depth: int = 0
    computation_time: int = 0


@dataclass
class PerformanceMetrics:
    """Running timing statistics over priced options, in nanoseconds."""

    total_time: int = 0
    avg_pricing_time: int = 0
    min_pricing_time: int = _NS_MAX
    max_pricing_time: int = 0
    total_options_priced: int = 0
    throughput_per_second: float = 0.0

    def update(self, pricing_time):
        """Fold one pricing duration into the statistics."""
        self.total_time += pricing_time
        self.total_options_priced += 1
        self.min_pricing_time = min(self.min_pricing_time, pricing_time)
        self.max_pricing_time = max(self.max_pricing_time, pricing_time)
        self.avg_pricing_time = self.total_time // self.total_options_priced
        self.throughput_per_second = (
            1e9 / self.avg_pricing_time if self.avg_pricing_time else math.inf
        )

    def reset(self):
        """Return every statistic to its initial value."""
        self.total_time = 0
        self.avg_pricing_time = 0
        self.min_pricing_time = _NS_MAX
        self.max_pricing_time = 0
        self.total_options_priced = 0
        self.throughput_per_second = 0.0