# optionpricing

A pure-Python library for pricing equity options and computing their risk
measures. It needs nothing beyond the standard library.

## What it covers

- **Contracts and market data** (`optionpricing.models`): `OptionSpec`
  (an immutable dataclass; vary it with `dataclasses.replace`), `MarketData`,
  `RealTimeMarketData`, and the result types `PricingResult`, `Greeks`,
  `MonteCarloResult`, `BinomialResult` and `PerformanceMetrics`. All times are
  integer nanoseconds.
- **European options** (`optionpricing.black_scholes`):
  `price_european_option` gives the closed-form Black-Scholes price with a
  continuous dividend yield. It also gives delta, gamma, theta (per day),
  vega (per 1% vol), rho (per 1% rate) and epsilon. Invalid inputs (a
  non-positive expiry, volatility or spot) give an empty, unconverged result.
  `calculate_implied_volatility` runs a plain Newton iteration.
- **Barrier options**: `price_barrier_option` gives closed-form up/down,
  knock-in/knock-out prices. It returns no Greeks.
- **American options** (`optionpricing.american`): `BinomialTreePricer`
  (Cox-Ross-Rubinstein) and `TrinomialTreePricer`. The binomial pricer also
  has these methods:
  - `price_american_option_adaptive` refines the number of steps
  - `calculate_early_exercise_premium`
  - `calculate_early_exercise_boundary`
- **Monte Carlo** (`optionpricing.monte_carlo`): `MonteCarloEngine` prices
  European, arithmetic-average Asian and discretely monitored barrier options.
  - Antithetic variates apply on the single-threaded European path.
  - Control variates apply to European options.
  - With `num_threads > 1` (the default is the CPU count), European paths are
    drawn in parallel, with one seed per thread.
- **Greeks** (`optionpricing.greeks`): these are computed several ways:
  - analytically
  - by bump-and-reprice with any pricing function
  - with forward-mode `DualNumber`s
  - higher-order Greeks (`HigherOrderGreeks`: speed, color, volga, vanna,
    charm)
  - effective delta and gamma-scalping P&L
- **Implied volatility** (`optionpricing.implied_volatility`):
  `ImpliedVolatilitySolver` offers these solvers:
  - Newton-Raphson
  - Brent
  - bisection
  - rational approximation
  - an adaptive choice between them

  It also solves a list of quotes in one call (`solve_volatility_surface`)
  and computes a vega-weighted volatility.
- **Pricing engine** (`optionpricing.engine`): `PricingEngine` sends each
  option to the right model.
  - Vanilla or barrier European options go to the closed forms.
  - American and Bermudan options go to a 1000-step binomial tree. This tree
    ignores the dividend yield.
  - Converged results are cached, keyed on inputs rounded to
    `cache_tolerance`.
  - Portfolios of more than 100 options are priced on a thread pool.
  - `performance_metrics` and `cache_size` are properties.
- **Helpers**:
  - `optionpricing.normal`: the normal pdf, cdf, inverse cdf, and d1/d2
  - `optionpricing.optimization`: Newton, Brent and bisection root finders,
    and finite differences
  - `optionpricing.stats`: descriptive statistics and a seedable
    `RandomNumberGenerator`

## Installation

```
pip install .
```

## Quick start

```python
from optionpricing.models import OptionSpec, OptionType, ExerciseStyle, MarketData
from optionpricing.black_scholes import price_european_option
from optionpricing.implied_volatility import ImpliedVolatilitySolver

call = OptionSpec(OptionType.CALL, ExerciseStyle.EUROPEAN, 100.0, 0.25, "AAPL")
market = MarketData(105.0, 0.20, 0.05, 0.02)

result = price_european_option(call, market)
print(result.option_price, result.greeks.delta, result.greeks.vega)

solver = ImpliedVolatilitySolver()
iv = solver.solve_newton_raphson(call, market, result.option_price * 1.05)
print(f"implied vol: {iv:.4%}")
```

### American options

```python
from optionpricing.american import BinomialTreePricer, TreeParameters

put = OptionSpec(OptionType.PUT, ExerciseStyle.AMERICAN, 100.0, 1.0)
pricer = BinomialTreePricer(TreeParameters(time_steps=500))
print(pricer.price_american_option(put, MarketData(100.0, 0.2, 0.05)).option_price)
```

### Monte Carlo

```python
from optionpricing.monte_carlo import MonteCarloConfiguration, MonteCarloEngine

mc = MonteCarloEngine(MonteCarloConfiguration(num_paths=20_000, num_threads=1, random_seed=7))
print(mc.price_european_option(call, market).option_price)
```

### The pricing engine

```python
from optionpricing.engine import PricingEngine

engine = PricingEngine()
results = engine.price_portfolio([call, put], [market, market])
print(engine.performance_metrics.total_options_priced, engine.cache_size)
```

## Command line

The package installs an `optionpricing` command. It prices a European call and
put with Black-Scholes and prints their Greeks. It then checks put-call parity,
solves for the implied volatility of a price 5% above the model price, and
prints a short sensitivity analysis and timings.

```
optionpricing
optionpricing --spot 100 --strike 95 --expiry 0.5 --vol 0.3 --rate 0.04 --dividend 0.0 --symbol XYZ
```

With no options it uses these defaults: spot 105, strike 100, expiry 0.25
years, volatility 20%, rate 5%, dividend yield 2%, symbol AAPL.

## What it does not do

- It does not fetch live market data.
- It does not store results anywhere beyond the engine's in-memory cache.
- Portfolio pricing is a loop or a thread pool; it has no batch or vectorised
  path.
- The command line covers only the European demonstration above. The tree,
  Monte Carlo and engine features are available from Python only.

## Running the tests

```
pip install .[test]
pytest
```