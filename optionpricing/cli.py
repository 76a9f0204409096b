"""Command that prices a European call and put and reports Greeks and timings."""

from __future__ import annotations

import argparse
import math
import time

from optionpricing.black_scholes import price_european_option
from optionpricing.implied_volatility import ImpliedVolatilitySolver
from optionpricing.models import ExerciseStyle, MarketData, OptionSpec, OptionType


def _build_parser():
    parser = argparse.ArgumentParser(
        prog="optionpricing",
        description="Price a European call and put with Black-Scholes.",
    )
    parser.add_argument("--spot", type=float, default=105.0, help="spot price")
    parser.add_argument("--strike", type=float, default=100.0, help="strike price")
    parser.add_argument("--expiry", type=float, default=0.25, help="time to expiry in years")
    parser.add_argument("--vol", type=float, default=0.20, help="volatility")
    parser.add_argument("--rate", type=float, default=0.05, help="risk-free rate")
    parser.add_argument("--dividend", type=float, default=0.02, help="dividend yield")
    parser.add_argument("--symbol", default="AAPL", help="underlying symbol")
    return parser


def _timed(func, *args):
    start = time.perf_counter_ns()
    value = func(*args)
    return value, time.perf_counter_ns() - start


def _print_greeks(label, result, elapsed):
    greeks = result.greeks
    print(f"{label} Option Price: ${result.option_price:.6f}")
    print("Greeks:")
    print(f"  Delta: {greeks.delta:.6f}")
    print(f"  Gamma: {greeks.gamma:.6f}")
    print(f"  Theta: {greeks.theta:.6f} (per day)")
    print(f"  Vega:  {greeks.vega:.6f} (per 1% vol)")
    print(f"  Rho:   {greeks.rho:.6f} (per 1% rate)")
    print(f"Computation Time: {elapsed} nanoseconds\n")


def main(argv=None):
    """Run the pricing report; returns the exit status."""
    args = _build_parser().parse_args(argv)

    call_option = OptionSpec(
        OptionType.CALL, ExerciseStyle.EUROPEAN, args.strike, args.expiry, args.symbol
    )
    put_option = OptionSpec(
        OptionType.PUT, ExerciseStyle.EUROPEAN, args.strike, args.expiry, args.symbol
    )
    market = MarketData(args.spot, args.vol, args.rate, args.dividend)

    print("=== Basic Options Pricing Example ===\n")
    print("Market Data:")
    print(f"  Spot Price: ${market.spot_price:g}")
    print(f"  Volatility: {market.volatility * 100:g}%")
    print(f"  Risk-free Rate: {market.risk_free_rate * 100:g}%")
    print(f"  Dividend Yield: {market.dividend_yield * 100:g}%")
    print(f"  Strike Price: ${call_option.strike:g}")
    print(f"  Time to Expiry: {call_option.time_to_expiry:g} years\n")

    print("=== Call Option Pricing ===")
    call_result, call_time = _timed(price_european_option, call_option, market)
    _print_greeks("Call", call_result, call_time)

    print("=== Put Option Pricing ===")
    put_result, put_time = _timed(price_european_option, put_option, market)
    _print_greeks("Put", put_result, put_time)

    expiry = call_option.time_to_expiry
    forward = market.spot_price * math.exp(-market.dividend_yield * expiry)
    pv_strike = call_option.strike * math.exp(-market.risk_free_rate * expiry)
    parity = call_result.option_price - put_result.option_price - (forward - pv_strike)

    print("=== Put-Call Parity Verification ===")
    print(f"C - P - (F - PV(K)) = {parity:.6f}")
    print(f"Error: {abs(parity):.6f}")
    print("✓ PASSED" if abs(parity) < 1e-10 else "✗ FAILED")
    print()

    print("=== Implied Volatility Calculation ===")
    market_price = call_result.option_price * 1.05
    solver = ImpliedVolatilitySolver()
    implied_vol, iv_time = _timed(solver.solve_newton_raphson, call_option, market, market_price)
    print(f"Market Price: ${market_price:.6f}")
    print(f"Theoretical Price: ${call_result.option_price:.6f}")
    print(f"Market Volatility: {market.volatility * 100:.6f}%")
    print(f"Implied Volatility: {implied_vol * 100:.6f}%")
    print(f"Volatility Difference: {(implied_vol - market.volatility) * 100:.6f} bps")
    print(f"IV Computation Time: {iv_time} nanoseconds\n")

    greeks = call_result.greeks
    print("=== Sensitivity Analysis ===")
    print(f"Price sensitivity to 1% spot move: ${greeks.delta * market.spot_price * 0.01:.6f}")
    print(f"Price sensitivity to 1% vol move: ${greeks.vega:.6f}")
    print(f"Price decay per day: ${greeks.theta:.6f}")
    gamma_pnl = 0.5 * greeks.gamma * (market.spot_price * 0.01) ** 2
    print(f"Gamma P&L for 1% spot move: ${gamma_pnl:.6f}\n")

    print("=== Performance Summary ===")
    print(f"Call pricing: {call_time} ns ({call_time / 1000.0:.6f} μs)")
    print(f"Put pricing: {put_time} ns ({put_time / 1000.0:.6f} μs)")
    print(f"IV calculation: {iv_time} ns ({iv_time / 1000.0:.6f} μs)")
    print(f"Total execution: {call_time + put_time + iv_time} ns")

    pricing_time = call_time + put_time
    throughput = 2.0 * 1e9 / pricing_time if pricing_time else math.inf
    print(f"Pricing throughput: {throughput:.0f} options/second")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())