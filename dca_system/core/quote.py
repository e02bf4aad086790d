"""
시세(Quote) 인터페이스 정의.

[ 역할 ]
    전략 엔진이 소비하는 시세의 최소 인터페이스.
    symbol / price / time 세 가지만 노출하고, OHLC 같은 원본 형식 필드는 숨긴다.

[ 구현체 ]
    - data/kline.py::Kline        (OHLC 캔들, Binance 파일/DataFrame에서 생성)
    - QuoteSnapshot (이 파일)      (포지션이 보관하는 마지막 체결 시세의 값 복사본)

[ 규칙 ]
    - price: 구간의 대표 가격 (캔들이면 시가/종가 평균)
    - time:  구간의 중간 시각 (시작 시각 아님)
    - 한번 만들어지면 변경 불가
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from dca_system.core.money import Money


@runtime_checkable
class Quote(Protocol):
    """전략 엔진에 전달되는 시세. 아래 세 속성만 있으면 어떤 데이터 소스든 사용 가능."""

    @property
    def symbol(self) -> str: ...

    @property
    def price(self) -> Money: ...

    @property
    def time(self) -> datetime: ...


@dataclass(frozen=True)
class QuoteSnapshot:
    """Quote의 값 복사본. Position.last_acted_quote로 보관된다."""
    symbol: str
    price: Money
    time: datetime

    @classmethod
    def of(cls, quote: Quote) -> "QuoteSnapshot":
        return cls(symbol=quote.symbol, price=quote.price, time=quote.time)
