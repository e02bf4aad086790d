from datetime import datetime, timedelta, timezone

import pytest

from dca_system.core.errors import BinanceDataFormatError, ErrorKind
from dca_system.core.money import Money
from dca_system.core.quote import Quote
from dca_system.data.kline import Kline

# 2021-01-01 일봉
ROW = [
    1609459200000, "20.5", "22.0", "19.9", "21.25", "148976.11427815",
    1609545599999, "2434.19055334", 308, "1756.87402397", "28.46694368", "0",
]


def test_from_binance_parses_prices_and_times():
    k = Kline.from_binance("SOLUSDT", ROW)

    assert isinstance(k, Quote)
    assert k.symbol == "SOLUSDT"
    assert k.open == Money(2050)
    assert k.high == Money(2200)
    assert k.low == Money(1990)
    assert k.close == Money(2125)
    assert k.open_time == datetime(2021, 1, 1, tzinfo=timezone.utc)
    assert k.close_time == datetime(2021, 1, 1, 23, 59, 59, tzinfo=timezone.utc)


def test_price_is_open_close_average_rounded_up():
    k = Kline.from_binance("SOLUSDT", ROW)
    # (2050 + 2125) / 2 = 2087.5 → 첫 조각이 나머지를 가져가 2088
    assert k.price == Money(2088)


def test_time_is_interval_midpoint():
    k = Kline.from_binance("SOLUSDT", ROW)
    assert k.time == k.open_time + timedelta(seconds=86399 / 2)


def test_sub_cent_prices_truncate():
    row = list(ROW)
    row[1] = "0.01634790"
    k = Kline.from_binance("XUSDT", row)
    assert k.open == Money(1)


@pytest.mark.parametrize("bad", [ROW[:11], ROW + [0], "not a list"])
def test_wrong_shape(bad):
    with pytest.raises(BinanceDataFormatError) as exc:
        Kline.from_binance("SOLUSDT", bad)
    assert exc.value.kind == ErrorKind.STREAM


def test_unparseable_values():
    row = list(ROW)
    row[4] = "oops"
    with pytest.raises(BinanceDataFormatError):
        Kline.from_binance("SOLUSDT", row)

    row = list(ROW)
    row[0] = "1609459200000"
    with pytest.raises(BinanceDataFormatError):
        Kline.from_binance("SOLUSDT", row)


def test_currency_follows_argument():
    k = Kline.from_binance("SOLKRW", ROW, currency="KRW")
    assert k.open == Money(20, "KRW")
    assert k.price == Money(21, "KRW")
