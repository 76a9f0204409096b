import pytest

from optionpricing.american import (
    BinomialTreePricer,
    TreeParameters,
    TrinomialParameters,
    TrinomialTreePricer,
)
from optionpricing.models import BinomialResult, ExerciseStyle, MarketData, OptionSpec, OptionType


def american(option_type, strike, expiry=1.0):
    return OptionSpec(option_type, ExerciseStyle.AMERICAN, strike, expiry)


@pytest.fixture
def market():
    return MarketData(100.0, 0.2, 0.05)


@pytest.fixture
def pricer():
    return BinomialTreePricer(TreeParameters(time_steps=200))


def test_default_parameters():
    assert BinomialTreePricer().params.time_steps == 1000
    assert TrinomialTreePricer().params.time_steps == 500
    assert TrinomialTreePricer().params.lambda_ == 1.5


@pytest.mark.parametrize(
    "spot, vol, expiry",
    [(0.0, 0.2, 1.0), (100.0, 0.0, 1.0), (100.0, 0.2, 0.0)],
)
def test_invalid_inputs_give_empty_result(pricer, spot, vol, expiry):
    result = pricer.price_american_option(
        american(OptionType.PUT, 100.0, expiry), MarketData(spot, vol, 0.05)
    )
    assert result == BinomialResult()


def test_result_records_depth_and_time(pricer, market):
    result = pricer.price_american_option(american(OptionType.PUT, 100.0), market)
    assert result.tree_depth == 200
    assert result.computation_time >= 0
    assert result.option_price > 0.0


def test_full_tree_matches_memory_optimized(market):
    option = american(OptionType.PUT, 110.0)
    compact = BinomialTreePricer(TreeParameters(time_steps=60, optimize_memory=True))
    full = BinomialTreePricer(TreeParameters(time_steps=60, optimize_memory=False))
    a = compact.price_american_option(option, market)
    b = full.price_american_option(option, market)
    assert a.option_price == pytest.approx(b.option_price, rel=1e-12)
    assert a.early_exercise_premium == pytest.approx(b.early_exercise_premium, rel=1e-12)


def test_deep_in_the_money_put_is_exercised(pricer):
    option = american(OptionType.PUT, 100.0)
    result = pricer.price_american_option(option, MarketData(60.0, 0.2, 0.05))
    assert result.option_price >= 100.0 - 60.0
    assert result.early_exercise_premium > 0.0


def test_call_without_dividend_is_never_exercised_early(pricer, market):
    result = pricer.price_american_option(american(OptionType.CALL, 100.0), market)
    assert result.early_exercise_premium == 0.0
    assert result.optimal_exercise_node == 0
    assert result.option_price > 0.0


@pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
def test_price_at_least_intrinsic(pricer, option_type):
    for spot in (70.0, 100.0, 130.0):
        result = pricer.price_american_option(
            american(option_type, 100.0), MarketData(spot, 0.25, 0.03, 0.02)
        )
        intrinsic = max(spot - 100.0, 0.0) if option_type is OptionType.CALL else max(100.0 - spot, 0.0)
        assert result.option_price >= intrinsic - 1e-12


def test_put_price_increases_with_strike(pricer, market):
    prices = [
        pricer.price_american_option(american(OptionType.PUT, k), market).option_price
        for k in (90.0, 100.0, 110.0)
    ]
    assert prices == sorted(prices)
    assert prices[0] < prices[-1]


def test_binomial_converges_with_more_steps(market):
    option = american(OptionType.PUT, 100.0)
    coarse = BinomialTreePricer(TreeParameters(time_steps=200)).price_american_option(option, market)
    fine = BinomialTreePricer(TreeParameters(time_steps=400)).price_american_option(option, market)
    assert coarse.option_price == pytest.approx(fine.option_price, abs=0.02)


def test_adaptive_stops_once_prices_agree(market):
    option = american(OptionType.PUT, 100.0)
    result = BinomialTreePricer().price_american_option_adaptive(option, market, 1.0)
    assert result.tree_depth == 750
    direct = BinomialTreePricer(TreeParameters(time_steps=750)).price_american_option(option, market)
    assert result.option_price == pytest.approx(direct.option_price, rel=1e-12)


def test_early_exercise_premium_ignores_exercise_style(pricer, market):
    option = american(OptionType.PUT, 110.0)
    assert pricer.calculate_early_exercise_premium(option, market) == 0.0


def test_early_exercise_boundary(market):
    pricer = BinomialTreePricer(TreeParameters(time_steps=20))
    option = american(OptionType.PUT, 100.0)
    boundary = pricer.calculate_early_exercise_boundary(option, market, 3)
    assert len(boundary) == 3
    assert boundary[0] == option.strike
    assert all(option.strike * 0.5 <= b <= option.strike * 2.0 for b in boundary)


def test_trinomial_agrees_with_binomial(market):
    option = american(OptionType.PUT, 100.0)
    tri = TrinomialTreePricer(TrinomialParameters(time_steps=200)).price_american_option(option, market)
    bi = BinomialTreePricer(TreeParameters(time_steps=200)).price_american_option(option, market)
    assert tri.option_price == pytest.approx(bi.option_price, abs=0.05)
    assert tri.tree_depth == 200


def test_trinomial_price_at_least_intrinsic():
    pricer = TrinomialTreePricer(TrinomialParameters(time_steps=100))
    result = pricer.price_american_option(
        american(OptionType.PUT, 100.0), MarketData(70.0, 0.2, 0.05)
    )
    assert result.option_price >= 100.0 - 70.0 - 1e-12