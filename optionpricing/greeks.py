"""Option sensitivities: analytical, bump-and-reprice, higher order and dual-number."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import NamedTuple

from optionpricing import normal
from optionpricing.black_scholes import price_european_option
from optionpricing.models import Greeks, OptionType
from optionpricing.optimization import central_difference


@dataclass(frozen=True)
class DualNumber:
    """A value paired with its derivative, for forward-mode differentiation."""

    value: float = 0.0
    derivative: float = 0.0

    @staticmethod
    def _coerce(other):
        if isinstance(other, DualNumber):
            return other
        return DualNumber(float(other), 0.0)

    def __add__(self, other):
        other = self._coerce(other)
        return DualNumber(self.value + other.value, self.derivative + other.derivative)

    def __radd__(self, other):
        return self._coerce(other) + self

    def __sub__(self, other):
        other = self._coerce(other)
        return DualNumber(self.value - other.value, self.derivative - other.derivative)

    def __rsub__(self, other):
        return self._coerce(other) - self

    def __mul__(self, other):
        other = self._coerce(other)
        return DualNumber(
            self.value * other.value,
            self.derivative * other.value + self.value * other.derivative,
        )

    def __rmul__(self, other):
        return self._coerce(other) * self

    def __truediv__(self, other):
        other = self._coerce(other)
        return DualNumber(
            self.value / other.value,
            (self.derivative * other.value - self.value * other.derivative)
            / (other.value * other.value),
        )

    def __rtruediv__(self, other):
        return self._coerce(other) / self


def dual_exp(x):
    """Exponential of a dual number."""
    value = math.exp(x.value)
    return DualNumber(value, x.derivative * value)


def dual_log(x):
    """Natural logarithm of a dual number."""
    return DualNumber(math.log(x.value), x.derivative / x.value)


def dual_sqrt(x):
    """Square root of a dual number."""
    value = math.sqrt(x.value)
    return DualNumber(value, x.derivative / (2.0 * value))


def dual_pow(base, exponent):
    """A dual number raised to a constant real exponent."""
    return DualNumber(
        base.value**exponent,
        exponent * base.value ** (exponent - 1.0) * base.derivative,
    )


class HigherOrderGreeks(NamedTuple):
    """Second- and third-order sensitivities."""

    speed: float = 0.0
    color: float = 0.0
    volga: float = 0.0
    vanna: float = 0.0
    charm: float = 0.0


def calculate_analytical_greeks(option, market):
    """Closed-form Black-Scholes Greeks; all zero for invalid inputs."""
    return price_european_option(option, market).greeks


def calculate_numerical_greeks(option, market, pricing_function, bump_size=1e-4):
    """Greeks by bumping inputs and repricing with ``pricing_function(option, market)``.

    Theta is the change over one day and is left at zero when less than a day remains.
    """
    base = pricing_function(option, market)

    def repriced(**changes):
        return pricing_function(option, replace(market, **changes))

    greeks = Greeks()
    greeks.delta = (repriced(spot_price=market.spot_price + bump_size) - base) / bump_size

    up = repriced(spot_price=market.spot_price + bump_size)
    down = repriced(spot_price=market.spot_price - bump_size)
    greeks.gamma = (up - 2.0 * base + down) / (bump_size * bump_size)

    shorter = replace(option, time_to_expiry=option.time_to_expiry - 1.0 / 365.0)
    if shorter.time_to_expiry > 0.0:
        greeks.theta = pricing_function(shorter, market) - base

    greeks.vega = (repriced(volatility=market.volatility + bump_size) - base) / bump_size
    greeks.rho = (repriced(risk_free_rate=market.risk_free_rate + bump_size) - base) / bump_size
    greeks.epsilon = (
        repriced(dividend_yield=market.dividend_yield + bump_size) - base
    ) / bump_size
    return greeks


def calculate_higher_order_greeks(option, market):
    """Speed, color, volga, vanna and charm; all zero for invalid inputs."""
    spot = market.spot_price
    strike = option.strike
    expiry = option.time_to_expiry
    rate = market.risk_free_rate
    vol = market.volatility
    dividend = market.dividend_yield

    if expiry <= 0.0 or vol <= 0.0 or spot <= 0.0:
        return HigherOrderGreeks()

    d1 = normal.d1(spot, strike, expiry, rate, vol, dividend)
    d2 = normal.d2(spot, strike, expiry, rate, vol, dividend)
    sqrt_t = math.sqrt(expiry)
    vol_sqrt_t = vol * sqrt_t
    dividend_discount = math.exp(-dividend * expiry)
    pdf_d1 = normal.pdf(d1)
    carry_term = 2.0 * (rate - dividend) * expiry - d1 * vol_sqrt_t

    speed = -dividend_discount * pdf_d1 * (d1 / vol_sqrt_t + 1.0) / (spot * spot * vol_sqrt_t)
    color = (
        -dividend_discount * pdf_d1 / (2.0 * spot * expiry * vol_sqrt_t)
        * (2.0 * dividend * expiry + 1.0 + carry_term / vol_sqrt_t * d1)
    )
    volga = spot * dividend_discount * pdf_d1 * sqrt_t * d1 * d2 / vol
    vanna = -dividend_discount * pdf_d1 * d2 / vol
    charm = dividend_discount * pdf_d1 * carry_term / (2.0 * expiry * vol_sqrt_t)

    return HigherOrderGreeks(speed, color, volga, vanna, charm)


def _dual_price(option, spot, vol, expiry, rate, dividend):
    strike = DualNumber(option.strike)
    vol_sqrt_t = vol * dual_sqrt(expiry)
    drift = rate - dividend + vol * vol * DualNumber(0.5)
    d1 = (dual_log(spot / strike) + drift * expiry) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t

    pdf_d1 = normal.pdf(d1.value)
    n_d1 = DualNumber(normal.cdf(d1.value), pdf_d1 * d1.derivative)
    n_d2 = DualNumber(normal.cdf(d2.value), pdf_d1 * d2.derivative)

    discount = dual_exp(DualNumber() - rate * expiry)
    dividend_discount = dual_exp(DualNumber() - dividend * expiry)

    if option.option_type is OptionType.CALL:
        return spot * dividend_discount * n_d1 - strike * discount * n_d2
    one = DualNumber(1.0)
    return strike * discount * (one - n_d2) - spot * dividend_discount * (one - n_d1)


def _dual_derivative(option, market, wrt):
    inputs = {
        "spot": market.spot_price,
        "vol": market.volatility,
        "expiry": option.time_to_expiry,
        "rate": market.risk_free_rate,
        "dividend": market.dividend_yield,
    }
    duals = {
        name: DualNumber(value, 1.0 if name == wrt else 0.0) for name, value in inputs.items()
    }
    return _dual_price(option, **duals).derivative


def calculate_autodiff_greeks(option, market):
    """Delta, vega, theta and rho by dual numbers; gamma by differencing analytical delta."""

    def delta_at(spot):
        return calculate_analytical_greeks(option, replace(market, spot_price=spot)).delta

    return Greeks(
        delta=_dual_derivative(option, market, "spot"),
        gamma=central_difference(delta_at, market.spot_price, 1e-8),
        theta=-_dual_derivative(option, market, "expiry") / 365.0,
        vega=_dual_derivative(option, market, "vol") / 100.0,
        rho=_dual_derivative(option, market, "rate") / 100.0,
    )


def calculate_effective_delta(option, market, portfolio_delta_target=0.0):
    """Delta still needed to bring the position to the target."""
    return portfolio_delta_target - calculate_analytical_greeks(option, market).delta


def calculate_gamma_scalping_pnl(option, current_market, previous_market, position_size=1.0):
    """Gamma P&L from the spot move between two snapshots."""
    gamma = calculate_analytical_greeks(option, previous_market).gamma
    move = current_market.spot_price - previous_market.spot_price
    return 0.5 * gamma * position_size * move * move