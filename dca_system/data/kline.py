"""
캔들(Kline) 시세 모듈.

[ 역할 ]
    OHLC 캔들 1개를 core/quote.py::Quote 인터페이스로 노출.
    엔진에는 symbol / price / time만 보이고 OHLC 필드는 이 클래스 안에 머문다.

[ 가격/시각 규칙 ]
    price = (시가 + 종가) / 2  → Money.allocate(50, 50)의 첫 조각 (홀수면 올림)
    time  = 시작 시각 + (종료 시각 - 시작 시각) / 2

[ Binance kline 형식 (REST /api/v3/klines 응답 1건) ]
    [
        1499040000000,       # 0: 시작 시각 (ms)
        "0.01634790",        # 1: 시가
        "0.80000000",        # 2: 고가
        "0.01575800",        # 3: 저가
        "0.01577100",        # 4: 종가
        "148976.11427815",   # 5: 거래량
        1499644799999,       # 6: 종료 시각 (ms)
        "2434.19055334",     # 7: 거래대금
        308,                 # 8: 체결 건수
        "1756.87402397",     # 9: taker 매수 거래량
        "28.46694368",       # 10: taker 매수 거래대금
        "17928899.62484339"  # 11: 무시
    ]

[ 호출하는 곳 ]
    - data/binance_file.py::BinanceFileStreamer (JSON 파일 → Kline)
    - data/frame_streamer.py::DataFrameStreamer (DataFrame 행 → Kline)
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from dca_system.core.errors import BinanceDataFormatError
from dca_system.core.money import Money

BINANCE_KLINE_FIELDS = 12


@dataclass(frozen=True)
class Kline:
    """OHLC 캔들. Quote 인터페이스(symbol, price, time)를 만족한다."""
    market: str          # 예: "SOLUSDT"
    open: Money
    high: Money
    low: Money
    close: Money
    open_time: datetime
    close_time: datetime

    @property
    def symbol(self) -> str:
        return self.market

    @property
    def price(self) -> Money:
        """구간 평균 가격 (시가/종가 평균)."""
        return (self.open + self.close).allocate(50, 50)[0]

    @property
    def time(self) -> datetime:
        """구간 중간 시각."""
        return self.open_time + (self.close_time - self.open_time) / 2

    def describe(self) -> str:
        return (
            f"{self.market} - open: {self.open.display()} (@{self.open_time}), "
            f"close: {self.close.display()} (@{self.close_time})"
        )

    @classmethod
    def from_binance(cls, market: str, data: list[Any], currency: str = "USD") -> "Kline":
        """Binance kline 배열 1건에서 생성.

        가격 문자열은 통화 최소 단위로 정확히 변환(버림), 시각은 초 단위로 버림.

        Raises:
            BinanceDataFormatError: 필드 수가 12가 아니거나 값을 변환할 수 없음
        """
        if not isinstance(data, list) or len(data) != BINANCE_KLINE_FIELDS:
            raise BinanceDataFormatError(
                "Binance kline 형식이 올바르지 않습니다",
                market=market,
                fields=len(data) if isinstance(data, list) else type(data).__name__,
            )
        try:
            return cls(
                market=market,
                open=Money.from_major(data[1], currency),
                high=Money.from_major(data[2], currency),
                low=Money.from_major(data[3], currency),
                close=Money.from_major(data[4], currency),
                open_time=_from_epoch_ms(data[0]),
                close_time=_from_epoch_ms(data[6]),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise BinanceDataFormatError(
                f"Binance kline 값을 변환할 수 없습니다: {e}",
                market=market,
                open_time=data[0],
            ) from e


def _from_epoch_ms(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"epoch ms 값이 숫자가 아닙니다: {value!r}")
    return datetime.fromtimestamp(int(value // 1000), tz=timezone.utc)
