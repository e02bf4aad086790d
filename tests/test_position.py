import pytest

from conftest import FIXED_NOW, quote
from dca_system.core.errors import CurrencyMismatchError
from dca_system.core.money import Money
from dca_system.core.quote import QuoteSnapshot
from dca_system.core.trading_strategy import Transaction
from dca_system.data.position import Position


def test_record_buy_then_sell():
    p = Position(cash=Money(200_000))
    q1 = quote("10", day=0)
    buy = Transaction(amount=10.0, value=Money(10_000), time=FIXED_NOW)
    p.record_transaction(buy, q1)

    assert p.asset_amount == 10.0
    assert p.cash == Money(190_000)
    assert p.bought_value == Money(10_000)
    assert p.last_acted_quote == QuoteSnapshot.of(q1)
    assert p.last_acted_quote_time == q1.time
    assert p.last_transaction_time == FIXED_NOW

    q2 = quote("20", day=5)
    sell = Transaction(amount=-2.5, value=Money(-5_000), time=FIXED_NOW)
    p.record_transaction(sell, q2)

    assert p.asset_amount == pytest.approx(7.5)
    assert p.cash == Money(195_000)
    assert p.bought_value == Money(5_000)
    assert p.buy_count == 1 and p.sell_count == 1
    assert p.transaction_count == 2
    assert p.sell_amount == pytest.approx(2.5)
    assert p.sell_value == Money(5_000)
    assert p.buy_value == Money(10_000)
    assert p.last_transaction is sell


def test_record_rejects_foreign_currency_without_partial_update():
    p = Position(currency="USD", cash=Money(200_000))
    before = p.get_summary()
    tx = Transaction(amount=1.0, value=Money(1_000, "EUR"), time=FIXED_NOW)

    with pytest.raises(CurrencyMismatchError):
        p.record_transaction(tx, quote("10"))

    assert p.get_summary() == before
    assert p.last_transaction is None
    assert p.last_acted_quote is None


def test_fee_defaults_to_zero_in_value_currency():
    tx = Transaction(amount=1.0, value=Money(500, "EUR"), time=FIXED_NOW)
    assert tx.fee == Money(0, "EUR")


def test_valuation():
    p = Position(asset_amount=2.5, cash=Money(1_000))
    price = Money(1_234)
    assert p.asset_value(price) == Money(3_085)
    assert p.total_value(price) == Money(4_085)

    summary = p.get_summary(price)
    assert summary["asset_value"] == pytest.approx(30.85)
    assert summary["total_value"] == pytest.approx(40.85)

    with pytest.raises(CurrencyMismatchError):
        p.asset_value(Money(1_234, "EUR"))


def test_snapshot_is_a_value_copy():
    q = quote("10")
    p = Position(cash=Money(200_000))
    p.record_transaction(Transaction(amount=1.0, value=Money(1_000), time=FIXED_NOW), q)
    assert p.last_acted_quote is not q
    assert p.last_acted_quote == q
