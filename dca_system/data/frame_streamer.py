"""
OHLCV DataFrame 스트리머.

[ 역할 ]
    core/streamer.py::Streamer 구현체.
    pandas DataFrame(columns: date, open, high, low, close[, volume])의 각 행을
    [date, date + interval) 구간의 Kline으로 바꿔 날짜순으로 전달.

[ 데이터 출처 ]
    - CSV 파일           → DataFrameStreamer.from_csv()
    - 샘플 데이터 생성    → generate_sample_data() (run_dca.py --source sample)

[ 호출하는 곳 ]
    - run_dca.py에서 data.source가 "csv" 또는 "sample"일 때 생성
"""

from datetime import date, timezone
from pathlib import Path

import numpy as np
import pandas as pd

from dca_system.core.errors import StreamError
from dca_system.core.money import Money
from dca_system.core.streamer import QuoteHandler, Streamer
from dca_system.data.kline import Kline

REQUIRED_COLUMNS = ("date", "open", "high", "low", "close")


class DataFrameStreamer(Streamer):
    """DataFrame 기반 시세 스트림.

    사용 예:
        df = pd.read_csv("SOLUSD.csv")
        streamer = DataFrameStreamer("SOLUSD", df, interval="1D")
    """

    def __init__(
        self,
        market: str,
        df: pd.DataFrame,
        currency: str = "USD",
        interval: str = "1D",
    ):
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise StreamError("OHLCV DataFrame에 필요한 컬럼이 없습니다", market=market, missing=missing)

        self.market = market
        self.currency = currency
        self.interval = pd.Timedelta(interval).to_pytimedelta()

        df = df.copy()
        df["date"] = pd.to_datetime(df["date"], utc=True)
        self._df = df.sort_values("date", kind="stable").reset_index(drop=True)

    @classmethod
    def from_csv(
        cls,
        market: str,
        path: str | Path,
        currency: str = "USD",
        interval: str = "1D",
    ) -> "DataFrameStreamer":
        return cls(market, pd.read_csv(path), currency=currency, interval=interval)

    def __len__(self) -> int:
        return len(self._df)

    def stream(self, handler: QuoteHandler) -> None:
        for row in self._df.itertuples(index=False):
            open_time = row.date.to_pydatetime().astimezone(timezone.utc)
            try:
                kline = Kline(
                    market=self.market,
                    open=Money.from_major(row.open, self.currency),
                    high=Money.from_major(row.high, self.currency),
                    low=Money.from_major(row.low, self.currency),
                    close=Money.from_major(row.close, self.currency),
                    open_time=open_time,
                    close_time=open_time + self.interval,
                )
            except ValueError as e:
                raise StreamError(
                    f"OHLCV 행을 시세로 변환할 수 없습니다: {e}",
                    market=self.market,
                    date=open_time,
                ) from e
            handler(kline)


def generate_sample_data(
    market: str,
    start_date: date,
    end_date: date,
    initial_price: float = 100.0,
    volatility: float = 0.04,
) -> pd.DataFrame:
    """테스트용 일봉 샘플 데이터 생성 (랜덤 워크, market별 시드 고정)."""
    rng = np.random.default_rng(sum(market.encode()))

    dates = pd.date_range(start=start_date, end=end_date, freq="D")
    n = len(dates)

    returns = rng.normal(0.0005, volatility, n)
    closes = initial_price * np.cumprod(1 + returns)
    opens = np.concatenate(([initial_price], closes[:-1]))
    highs = np.maximum(opens, closes) * (1 + np.abs(rng.normal(0, 0.01, n)))
    lows = np.minimum(opens, closes) * (1 - np.abs(rng.normal(0, 0.01, n)))
    volumes = rng.lognormal(12, 1, n).astype(int)

    return pd.DataFrame({
        "date": dates.date,
        "open": np.round(opens, 2),
        "high": np.round(highs, 2),
        "low": np.round(lows, 2),
        "close": np.round(closes, 2),
        "volume": volumes,
    })
