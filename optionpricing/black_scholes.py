"""Closed-form Black-Scholes pricing of European vanilla and barrier options."""

from __future__ import annotations

import math
import time

from optionpricing import normal
from optionpricing.models import (
    BarrierType,
    ExerciseStyle,
    Greeks,
    MarketData,
    OptionSpec,
    OptionType,
    PricingResult,
)


def price_european_option(option, market):
    """Price and Greeks of a European option; invalid inputs give an empty result.

    Theta is per day, vega per 1% volatility, rho and epsilon per 1% rate.
    """
    start = time.perf_counter_ns()

    spot = market.spot_price
    strike = option.strike
    expiry = option.time_to_expiry
    rate = market.risk_free_rate
    vol = market.volatility
    dividend = market.dividend_yield

    if expiry <= 0.0 or vol <= 0.0 or spot <= 0.0:
        return PricingResult()

    d1 = normal.d1(spot, strike, expiry, rate, vol, dividend)
    d2 = normal.d2(spot, strike, expiry, rate, vol, dividend)
    n_d1 = normal.cdf(d1)
    n_d2 = normal.cdf(d2)
    n_minus_d1 = normal.cdf(-d1)
    n_minus_d2 = normal.cdf(-d2)

    discount = math.exp(-rate * expiry)
    dividend_discount = math.exp(-dividend * expiry)
    sqrt_t = math.sqrt(expiry)
    vol_sqrt_t = vol * sqrt_t
    pdf_d1 = normal.pdf(d1)
    theta_common = -spot * dividend_discount * pdf_d1 * vol / (2.0 * sqrt_t)
    is_call = option.option_type is OptionType.CALL

    if is_call:
        price = spot * dividend_discount * n_d1 - strike * discount * n_d2
        delta = dividend_discount * n_d1
        theta = (
            theta_common - rate * strike * discount * n_d2
            + dividend * spot * dividend_discount * n_d1
        ) / 365.0
        rho = strike * expiry * discount * n_d2
    else:
        price = strike * discount * n_minus_d2 - spot * dividend_discount * n_minus_d1
        delta = -dividend_discount * n_minus_d1
        theta = (
            theta_common + rate * strike * discount * n_minus_d2
            - dividend * spot * dividend_discount * n_minus_d1
        ) / 365.0
        rho = -strike * expiry * discount * n_minus_d2

    greeks = Greeks(
        delta=delta,
        gamma=dividend_discount * pdf_d1 / (spot * vol_sqrt_t),
        theta=theta,
        vega=spot * dividend_discount * pdf_d1 * sqrt_t / 100.0,
        rho=rho / 100.0,
        epsilon=-spot * expiry * dividend_discount * (n_d1 if is_call else -n_minus_d1) / 100.0,
    )

    return PricingResult(
        option_price=price,
        greeks=greeks,
        computation_time=time.perf_counter_ns() - start,
        converged=True,
        numerical_error=0.0,
    )


def calculate_implied_volatility(option, market, market_price, tolerance=1e-6, max_iterations=100):
    """Newton iteration on volatility, clamped to [1e-6, 5]; 0.0 for invalid input."""
    if market_price <= 0.0 or option.time_to_expiry <= 0.0:
        return 0.0

    vol_guess = 0.2
    vol_min = 1e-6
    vol_max = 5.0

    for _ in range(max_iterations):
        market_at_guess = MarketData(
            market.spot_price, vol_guess, market.risk_free_rate, market.dividend_yield
        )
        result = price_european_option(option, market_at_guess)
        price_diff = result.option_price - market_price
        if abs(price_diff) < tolerance:
            return vol_guess

        vega = result.greeks.vega * 100.0
        if abs(vega) < 1e-10:
            break

        new_vol = max(vol_min, min(vol_max, vol_guess - price_diff / vega))
        if abs(new_vol - vol_guess) < tolerance:
            return new_vol
        vol_guess = new_vol

    return vol_guess


def price_barrier_option(option, market):
    """Closed-form price of a single-barrier European option (no Greeks)."""
    if option.barrier_type is BarrierType.NONE:
        return price_european_option(option, market)

    args = (
        market.spot_price,
        option.strike,
        option.barrier_level,
        option.time_to_expiry,
        market.risk_free_rate,
        market.volatility,
        market.dividend_yield,
        option.option_type,
    )
    vol = market.volatility
    mu = (market.risk_free_rate - market.dividend_yield - 0.5 * vol * vol) / (vol * vol)

    pricers = {
        BarrierType.DOWN_AND_OUT: _down_and_out,
        BarrierType.UP_AND_OUT: _up_and_out,
        BarrierType.DOWN_AND_IN: _down_and_in,
        BarrierType.UP_AND_IN: _up_and_in,
    }
    price = pricers[option.barrier_type](*args, mu)
    return PricingResult(option_price=price, converged=True)


def _down_and_out(spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu):
    if spot <= barrier:
        return 0.0

    cdf = normal.cdf
    vol_sqrt_t = vol * math.sqrt(expiry)
    d1 = normal.d1(spot, strike, expiry, rate, vol, dividend)
    d2 = d1 - vol_sqrt_t
    d3 = normal.d1(spot, barrier, expiry, rate, vol, dividend)
    d4 = d3 - vol_sqrt_t
    y1 = (
        math.log(barrier * barrier / (spot * strike)) + (rate - dividend + 0.5 * vol * vol) * expiry
    ) / vol_sqrt_t
    y2 = y1 - vol_sqrt_t
    power = (barrier / spot) ** (2.0 * mu)
    spot_disc = spot * math.exp(-dividend * expiry)
    strike_disc = strike * math.exp(-rate * expiry)

    if option_type is OptionType.CALL:
        if strike >= barrier:
            return (
                spot_disc * cdf(d1) - strike_disc * cdf(d2)
                - spot_disc * power * cdf(y1) + strike_disc * power * cdf(y2)
            )
        return (
            spot_disc * (cdf(d3) - power * cdf(y1))
            - strike_disc * (cdf(d4) - power * cdf(y2))
        )
    if strike >= barrier:
        return -spot_disc * power * cdf(-y1) + strike_disc * power * cdf(-y2)
    return (
        strike_disc * cdf(-d2) - spot_disc * cdf(-d1)
        + spot_disc * power * cdf(-y1) - strike_disc * power * cdf(-y2)
    )


def _up_and_out(spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu):
    if spot >= barrier:
        return 0.0

    cdf = normal.cdf
    vol_sqrt_t = vol * math.sqrt(expiry)
    d1 = normal.d1(spot, strike, expiry, rate, vol, dividend)
    d2 = d1 - vol_sqrt_t
    f1 = normal.d1(spot, barrier, expiry, rate, vol, dividend)
    f2 = f1 - vol_sqrt_t
    e1 = (
        math.log(barrier * barrier / (spot * strike)) + (rate - dividend + 0.5 * vol * vol) * expiry
    ) / vol_sqrt_t
    e2 = e1 - vol_sqrt_t
    power = (barrier / spot) ** (2.0 * mu)
    spot_disc = spot * math.exp(-dividend * expiry)
    strike_disc = strike * math.exp(-rate * expiry)

    if option_type is OptionType.CALL:
        if strike <= barrier:
            return (
                spot_disc * (cdf(f1) - power * cdf(e1))
                - strike_disc * (cdf(f2) - power * cdf(e2))
            )
        return (
            spot_disc * cdf(d1) - strike_disc * cdf(d2)
            - spot_disc * (cdf(f1) - power * cdf(e1))
            + strike_disc * (cdf(f2) - power * cdf(e2))
        )
    if strike <= barrier:
        return (
            strike_disc * cdf(-d2) - spot_disc * cdf(-d1)
            + spot_disc * (cdf(-f1) - power * cdf(-e1))
            - strike_disc * (cdf(-f2) - power * cdf(-e2))
        )
    return -spot_disc * power * cdf(-e1) + strike_disc * power * cdf(-e2)


def _vanilla_price(spot, strike, expiry, rate, vol, dividend, option_type):
    return price_european_option(
        OptionSpec(option_type, ExerciseStyle.EUROPEAN, strike, expiry),
        MarketData(spot, vol, rate, dividend),
    ).option_price


def _down_and_in(spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu):
    vanilla = _vanilla_price(spot, strike, expiry, rate, vol, dividend, option_type)
    return vanilla - _down_and_out(
        spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu
    )


def _up_and_in(spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu):
    vanilla = _vanilla_price(spot, strike, expiry, rate, vol, dividend, option_type)
    return vanilla - _up_and_out(
        spot, strike, barrier, expiry, rate, vol, dividend, option_type, mu
    )