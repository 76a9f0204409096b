import pytest

from optionpricing.black_scholes import price_european_option
from optionpricing.implied_volatility import ImpliedVolatilitySolver, SolverConfiguration
from optionpricing.models import ExerciseStyle, MarketData, OptionSpec, OptionType


def make_option(option_type=OptionType.CALL, strike=105.0, expiry=0.5):
    return OptionSpec(option_type, ExerciseStyle.EUROPEAN, strike, expiry)


def make_market(spot=100.0, vol=0.3, rate=0.05, dividend=0.01):
    return MarketData(spot, vol, rate, dividend)


def model_price(option, market):
    return price_european_option(option, market).option_price


@pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
def test_newton_recovers_volatility(option_type):
    option = make_option(option_type)
    market = make_market(vol=0.3)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver()
    assert solver.solve_newton_raphson(option, market, price) == pytest.approx(0.3, abs=1e-6)


def test_newton_with_heuristic_initial_guess():
    option = make_option(strike=90.0, expiry=0.05)
    market = make_market(vol=0.35)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver(SolverConfiguration(initial_guess=0.0))
    assert solver.solve_newton_raphson(option, market, price) == pytest.approx(0.35, abs=1e-5)


def test_newton_invalid_inputs_return_zero():
    solver = ImpliedVolatilitySolver()
    market = make_market()
    assert solver.solve_newton_raphson(make_option(), market, 0.0) == 0.0
    assert solver.solve_newton_raphson(make_option(expiry=0.0), market, 5.0) == 0.0


def test_newton_price_at_intrinsic_returns_min_volatility():
    config = SolverConfiguration()
    solver = ImpliedVolatilitySolver(config)
    option = make_option(strike=100.0)
    market = make_market(spot=120.0)
    assert solver.solve_newton_raphson(option, market, 20.0) == config.min_volatility


def test_brent_recovers_volatility():
    option = make_option(OptionType.PUT, strike=95.0, expiry=1.0)
    market = make_market(vol=0.22)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver()
    assert solver.solve_brent_method(option, market, price) == pytest.approx(0.22, abs=1e-6)


def test_brent_without_bracket_falls_back_to_newton():
    option = make_option(strike=100.0, expiry=0.25)
    market = make_market()
    solver = ImpliedVolatilitySolver()
    price = 99.0
    assert solver.solve_brent_method(option, market, price) == solver.solve_newton_raphson(
        option, market, price
    )


def test_bisection_recovers_volatility():
    option = make_option(strike=100.0, expiry=0.75)
    market = make_market(vol=0.4)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver()
    assert solver.solve_bisection_method(option, market, price) == pytest.approx(0.4, abs=1e-6)


def test_bisection_without_bracket_returns_initial_guess():
    config = SolverConfiguration()
    solver = ImpliedVolatilitySolver(config)
    option = make_option(strike=100.0, expiry=0.25)
    assert solver.solve_bisection_method(option, make_market(), 99.0) == config.initial_guess


def test_bisection_invalid_inputs_return_zero():
    solver = ImpliedVolatilitySolver()
    assert solver.solve_bisection_method(make_option(), make_market(), -1.0) == 0.0


def test_rational_invalid_inputs_return_zero():
    solver = ImpliedVolatilitySolver()
    assert solver.solve_rational_approximation(make_option(), make_market(), 0.0) == 0.0


def test_rational_out_of_range_alpha_falls_back_to_newton():
    option = make_option(strike=100.0, expiry=1.0)
    market = make_market(spot=100.0)
    solver = ImpliedVolatilitySolver()
    price = 120.0
    assert solver.solve_rational_approximation(
        option, market, price
    ) == solver.solve_newton_raphson(option, market, price)


def test_rational_result_within_bounds():
    config = SolverConfiguration()
    solver = ImpliedVolatilitySolver(config)
    option = make_option(strike=100.0, expiry=1.0)
    market = make_market(spot=100.0, vol=0.25)
    vol = solver.solve_rational_approximation(option, market, model_price(option, market))
    assert config.min_volatility <= vol <= config.max_volatility


def test_adaptive_short_dated_uses_bisection_and_recovers():
    option = make_option(strike=100.0, expiry=0.02)
    market = make_market(vol=0.3)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver()
    assert solver.solve_adaptive_method(option, market, price) == pytest.approx(0.3, abs=1e-5)
    assert solver.solve_adaptive_method(option, market, price) == solver.solve_bisection_method(
        option, market, price
    )


def test_adaptive_mid_dated_matches_newton():
    option = make_option(strike=110.0, expiry=0.25)
    market = make_market(vol=0.28)
    price = model_price(option, market)
    solver = ImpliedVolatilitySolver()
    assert solver.solve_adaptive_method(option, market, price) == solver.solve_newton_raphson(
        option, market, price
    )


def test_adaptive_no_time_value_returns_min_volatility():
    config = SolverConfiguration()
    solver = ImpliedVolatilitySolver(config)
    option = make_option(OptionType.PUT, strike=130.0)
    assert solver.solve_adaptive_method(option, make_market(spot=100.0), 30.0) == (
        config.min_volatility
    )


def test_surface_mismatched_lengths_raise():
    solver = ImpliedVolatilitySolver()
    with pytest.raises(ValueError):
        solver.solve_volatility_surface([make_option()], [make_market(), make_market()], [1.0])


def test_surface_recovers_each_volatility():
    options = [make_option(strike=k, expiry=0.3) for k in (90.0, 100.0, 110.0)]
    vols = [0.35, 0.3, 0.27]
    markets = [make_market(vol=v) for v in vols]
    prices = [model_price(o, m) for o, m in zip(options, markets)]
    solver = ImpliedVolatilitySolver()
    result = solver.solve_volatility_surface(options, markets, prices)
    assert result == pytest.approx(vols, abs=1e-5)


def test_vega_weighted_volatility_of_flat_surface():
    options = [make_option(strike=k, expiry=0.3) for k in (95.0, 100.0, 105.0)]
    markets = [make_market(vol=0.3) for _ in options]
    prices = [model_price(o, m) for o, m in zip(options, markets)]
    solver = ImpliedVolatilitySolver()
    weighted = solver.calculate_vega_weighted_volatility(options, markets, prices)
    assert weighted == pytest.approx(0.3, abs=1e-5)


def test_vega_weighted_volatility_lies_between_extremes():
    options = [make_option(strike=k, expiry=0.3) for k in (95.0, 105.0)]
    vols = [0.2, 0.4]
    markets = [make_market(vol=v) for v in vols]
    prices = [model_price(o, m) for o, m in zip(options, markets)]
    solver = ImpliedVolatilitySolver()
    weighted = solver.calculate_vega_weighted_volatility(options, markets, prices)
    assert min(vols) < weighted < max(vols)