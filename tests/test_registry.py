import pytest

from dca_system.core.money import Money
from dca_system.core.trading_strategy import TradingStrategy
from dca_system.strategies import STRATEGY_REGISTRY, create_strategy, list_strategies, register
from dca_system.strategies.dca_strategy import DCAStrategy


def test_dca_is_registered():
    assert "dca" in list_strategies()
    assert STRATEGY_REGISTRY["dca"] is DCAStrategy


def test_create_strategy_passes_params_and_kwargs():
    s = create_strategy("dca", params={"target_value": 300}, clock=lambda: None)
    assert isinstance(s, DCAStrategy)
    assert s.target_value == Money(30_000)


def test_unknown_strategy():
    with pytest.raises(ValueError, match="dca"):
        create_strategy("martingale")


def test_register_decorator():
    @register("noop")
    class NoopStrategy(TradingStrategy):
        def __init__(self, params=None):
            super().__init__(name="noop", params=params or {})

        def process(self, quote):
            return None

        def buy(self, quote):
            return None

        def sell(self, quote):
            return None

    try:
        assert create_strategy("noop").name == "noop"
        assert list_strategies() == sorted(["dca", "noop"])
    finally:
        STRATEGY_REGISTRY.pop("noop", None)
