"""Tests for financial rescaling and ranking."""

import pytest
from datetime import date

from spread_screener.models.option_leg import OptionLeg
from spread_screener.models.strategy import UNBOUNDED, StrategyKind
from spread_screener.scoring.ranker import RankingConfig, rank_strategies, to_financial
from spread_screener.strategies.box import evaluate_box
from spread_screener.strategies.butterfly import evaluate_butterfly
from spread_screener.strategies.ratio import evaluate_ratio_call, evaluate_ratio_put
from spread_screener.strategies.verticals import evaluate_bear_call, evaluate_bull_call
from spread_screener.strategies.volatility import evaluate_long_straddle, evaluate_short_straddle
from spread_screener.utils.error_handling import ConfigurationError

EXP = date(2024, 8, 16)


def make_leg(kind, strike, premium, symbol=None):
    return OptionLeg(
        underlying="PETR4", symbol=symbol or f"{kind[0]}{strike}", expiration=EXP,
        business_days=20, kind=kind, strike=strike, premium=premium, implied_vol=0.35,
    )


@pytest.fixture
def bull_call():
    """Debit 0.90 on a 2.00 wide spread: profit 1.10, loss 0.90 per unit."""
    return evaluate_bull_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)


@pytest.fixture
def bear_call():
    """Credit 0.90 on a 2.00 wide spread: profit 0.90, loss 1.10 per unit."""
    return evaluate_bear_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)


@pytest.fixture
def long_straddle():
    return evaluate_long_straddle((make_leg("CALL", 110.0, 1.50), make_leg("PUT", 110.0, 2.50)), 105.0)


class TestRankingConfig:
    """Test suite for RankingConfig validation."""

    def test_defaults(self):
        config = RankingConfig()
        assert config.lot_size == 100
        assert config.fee_per_leg == 0.0
        assert config.max_risk_reward is None
        assert config.sort_by == "risk_reward"

    @pytest.mark.parametrize("kwargs", [
        {'lot_size': 0},
        {'fee_per_leg': -1.0},
        {'max_risk_reward': 0.0},
        {'naked_margin_rate': 0.0},
        {'sort_by': 'delta'},
        {'top_n': 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            RankingConfig(**kwargs)

    def test_from_dict(self):
        config = RankingConfig.from_dict({'lot_size': 1000, 'sort_by': 'return', 'top_n': 5})
        assert config.lot_size == 1000
        assert config.sort_by == "return"
        assert config.top_n == 5
        assert config.fee_per_leg == 0.0


class TestToFinancial:
    """Test suite for to_financial."""

    def test_lot_scaling(self, bull_call):
        m = to_financial(bull_call, RankingConfig(lot_size=100))

        assert m.profit_financial == pytest.approx(110.0)
        assert m.loss_financial == pytest.approx(90.0)
        assert m.risk_reward == pytest.approx(90.0 / 110.0)
        assert m.return_on_risk == pytest.approx(110.0 / 90.0)
        assert m.lot_size == 100
        assert not m.loss_is_estimate
        assert m.is_ranked

    def test_fees_reduce_profit_and_add_to_loss(self, bull_call):
        m = to_financial(bull_call, RankingConfig(lot_size=100, fee_per_leg=5.0))

        assert m.fees_total == pytest.approx(10.0)
        assert m.profit_financial == pytest.approx(100.0)
        assert m.loss_financial == pytest.approx(100.0)

    def test_round_trip_fees(self, bull_call):
        m = to_financial(bull_call, RankingConfig(fee_per_leg=5.0, round_trip_fees=True))
        assert m.fees_total == pytest.approx(20.0)

    def test_butterfly_fees_count_legs(self):
        fly = evaluate_butterfly(
            (make_leg("CALL", 26.0, 2.95), make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)),
            28.5,
        )
        m = to_financial(fly, RankingConfig(fee_per_leg=1.0))
        assert m.fees_total == pytest.approx(3.0)

    def test_profit_eaten_by_fees_dropped(self, bull_call):
        assert to_financial(bull_call, RankingConfig(lot_size=1, fee_per_leg=1.0)) is None

    def test_position_greeks_scaled(self, bull_call):
        m = to_financial(bull_call, RankingConfig(lot_size=100))
        assert m.position_greeks.delta == pytest.approx(bull_call.greeks.delta * 100)

    def test_unbounded_profit(self, long_straddle):
        m = to_financial(long_straddle, RankingConfig())

        assert m.profit_financial == UNBOUNDED
        assert m.loss_financial == pytest.approx(400.0)
        assert m.risk_reward is None
        assert m.return_on_risk is None

    def test_unbounded_loss_uses_margin_proxy(self):
        short = evaluate_short_straddle((make_leg("CALL", 100.0, 1.50), make_leg("PUT", 100.0, 2.50)), 100.0)
        m = to_financial(short, RankingConfig())

        assert m.loss_is_estimate
        assert m.loss_financial == pytest.approx(1100.0)
        assert m.profit_financial == pytest.approx(400.0)
        assert m.risk_reward == pytest.approx(1100.0 / 400.0)

    def test_box_uses_debit_as_loss(self):
        quad = (make_leg("CALL", 26.0, 2.95), make_leg("CALL", 30.0, 0.60),
                make_leg("PUT", 26.0, 0.50), make_leg("PUT", 30.0, 1.55))
        m = to_financial(evaluate_box(quad, 28.0), RankingConfig(fee_per_leg=1.0))

        assert m.loss_is_estimate
        assert m.loss_financial == pytest.approx(340.0 + 4.0)
        assert m.profit_financial == pytest.approx(60.0 - 4.0)
        assert m.return_on_risk == pytest.approx(56.0 / 344.0)

    def test_ratio_spreads(self):
        ratio_call = evaluate_ratio_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.60)), 28.5)
        ratio_put = evaluate_ratio_put((make_leg("PUT", 26.0, 0.50), make_leg("PUT", 28.0, 0.92)), 28.5)

        call_m = to_financial(ratio_call, RankingConfig())
        put_m = to_financial(ratio_put, RankingConfig())

        assert call_m.loss_is_estimate
        assert call_m.loss_financial == pytest.approx(457.5)
        assert call_m.profit_financial == pytest.approx(170.0)
        assert not put_m.loss_is_estimate
        assert put_m.loss_financial == pytest.approx(2392.0)

    def test_input_record_unchanged(self, bull_call):
        to_financial(bull_call, RankingConfig())
        assert bull_call.profit_financial is None


class TestRankStrategies:
    """Test suite for rank_strategies."""

    def test_sorted_by_risk_reward(self, bull_call, bear_call):
        ranked = rank_strategies([bear_call, bull_call])
        assert [m.kind for m in ranked] == [StrategyKind.BULL_CALL_SPREAD, StrategyKind.BEAR_CALL_SPREAD]

    def test_sorted_by_return(self, bull_call, bear_call):
        ranked = rank_strategies([bear_call, bull_call], RankingConfig(sort_by="return"))
        assert ranked[0].kind is StrategyKind.BULL_CALL_SPREAD
        assert ranked[0].return_on_risk >= ranked[1].return_on_risk

    def test_unbounded_profit_sorts_last(self, bull_call, long_straddle):
        ranked = rank_strategies([long_straddle, bull_call])
        assert ranked[-1].kind is StrategyKind.LONG_STRADDLE

    def test_max_risk_reward_filter(self, bull_call, bear_call, long_straddle):
        """Bear call (1.22) is filtered out at 1.0; unbounded profit is kept."""
        ranked = rank_strategies([bull_call, bear_call, long_straddle], RankingConfig(max_risk_reward=1.0))
        kinds = {m.kind for m in ranked}
        assert kinds == {StrategyKind.BULL_CALL_SPREAD, StrategyKind.LONG_STRADDLE}
        assert all(m.risk_reward is None or m.risk_reward <= 1.0 for m in ranked)

    def test_best_per_name(self, bull_call):
        worse = evaluate_bull_call((make_leg("CALL", 28.0, 1.50), make_leg("CALL", 30.0, 0.20)), 28.5)
        ranked = rank_strategies([worse, bull_call])

        assert len(ranked) == 1
        assert ranked[0].net_premium == pytest.approx(bull_call.net_premium)

    def test_ties_keep_discovery_order(self):
        first = evaluate_bull_call(
            (make_leg("CALL", 28.0, 1.50, "A28"), make_leg("CALL", 30.0, 0.60, "A30")), 28.5
        )
        second = evaluate_bull_call(
            (make_leg("CALL", 28.0, 1.50, "B28"), make_leg("CALL", 30.0, 0.60, "B30")), 28.5
        )
        ranked = rank_strategies([first, second])
        assert ranked[0].legs[0].leg.symbol == "A28"

    def test_top_n(self, bull_call, bear_call, long_straddle):
        ranked = rank_strategies([bull_call, bear_call, long_straddle], RankingConfig(top_n=2))
        assert len(ranked) == 2

    def test_empty(self):
        assert rank_strategies([]) == []

    def test_invariants(self, bull_call, bear_call, long_straddle):
        for m in rank_strategies([bull_call, bear_call, long_straddle]):
            assert m.lot_size == 100
            if m.profit_financial != UNBOUNDED:
                assert m.profit_financial > 0
            assert m.loss_financial > 0
