"""
포지션 관리 모듈.

[ 역할 ]
    전략 엔진의 상태(보유 수량, 현금, 누적 매수금액, 매수/매도 통계,
    마지막 체결 시세/거래)를 관리.
    record_transaction()만이 상태를 바꾸는 유일한 경로.

[ 주요 클래스 ]
    Position - DCAStrategy가 하나를 소유하며 시세마다 갱신

[ 호출하는 곳 ]
    - strategies/dca_strategy.py::DCAStrategy.process()에서 record_transaction() 호출
    - backtest/report.py에서 리포트 행 구성 시 평가금액/통계 조회
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from dca_system.core.errors import CurrencyMismatchError
from dca_system.core.money import Money
from dca_system.core.quote import Quote, QuoteSnapshot
from dca_system.core.trading_strategy import Transaction


@dataclass
class Position:
    """DCA 전략의 포지션 상태.

    cash는 생성 시 총 매수 한도로 시작한다 (DCAStrategy가 지정).
    bought_value는 매수는 더하고 매도는 빼는 순매수 금액이다.
    """
    currency: str = "USD"
    asset_amount: float = 0.0                         # 보유 수량
    bought_value: Optional[Money] = None              # 누적 순매수 금액
    cash: Optional[Money] = None                      # 현금 (총 자산 아님)
    last_acted_quote: Optional[QuoteSnapshot] = None  # 마지막으로 거래한 시세
    last_transaction: Optional[Transaction] = None
    buy_count: int = 0
    sell_count: int = 0
    buy_amount: float = 0.0
    sell_amount: float = 0.0
    buy_value: Optional[Money] = None
    sell_value: Optional[Money] = None

    def __post_init__(self):
        zero = Money.zero(self.currency)
        self.currency = zero.currency
        if self.bought_value is None:
            self.bought_value = zero
        if self.cash is None:
            self.cash = zero
        if self.buy_value is None:
            self.buy_value = zero
        if self.sell_value is None:
            self.sell_value = zero

    @property
    def last_acted_quote_time(self) -> Optional[datetime]:
        if self.last_acted_quote is None:
            return None
        return self.last_acted_quote.time

    @property
    def last_transaction_time(self) -> Optional[datetime]:
        if self.last_transaction is None:
            return None
        return self.last_transaction.time

    @property
    def transaction_count(self) -> int:
        return self.buy_count + self.sell_count

    # ─── 평가 ────────────────────────────────────────────────────────────

    def asset_value(self, price: Money) -> Money:
        """보유 자산 평가금액 = 가격 × 보유 수량."""
        if price.currency != self.currency:
            raise CurrencyMismatchError(
                "시세 통화가 포지션 통화와 다릅니다",
                position=self.currency,
                price=price.currency,
            )
        return price.multiply(self.asset_amount)

    def total_value(self, price: Money) -> Money:
        """총 가치 = 자산 평가금액 + 현금."""
        return self.asset_value(price) + self.cash

    # ─── 갱신 ────────────────────────────────────────────────────────────

    def record_transaction(self, transaction: Transaction, quote: Quote) -> None:
        """거래를 포지션에 반영.

        금액 계산을 모두 먼저 끝낸 뒤 한꺼번에 대입한다.
        통화 불일치로 계산이 실패하면 포지션은 전혀 바뀌지 않는다.
        """
        value = transaction.value
        bought_value = self.bought_value + value
        cash = self.cash - value
        is_sell = value.is_negative()
        if is_sell:
            sell_value = self.sell_value - value
        else:
            buy_value = self.buy_value + value

        self.asset_amount += transaction.amount
        self.bought_value = bought_value
        self.cash = cash
        self.last_acted_quote = QuoteSnapshot.of(quote)
        self.last_transaction = transaction

        if is_sell:
            self.sell_count += 1
            self.sell_amount -= transaction.amount
            self.sell_value = sell_value
        else:
            self.buy_count += 1
            self.buy_amount += transaction.amount
            self.buy_value = buy_value

    def get_summary(self, price: Optional[Money] = None) -> dict[str, Any]:
        """포지션 요약. price가 주어지면 평가금액도 포함."""
        summary: dict[str, Any] = {
            "asset_amount": self.asset_amount,
            "bought_value": self.bought_value.as_major(),
            "cash": self.cash.as_major(),
            "buy_count": self.buy_count,
            "buy_amount": self.buy_amount,
            "buy_value": self.buy_value.as_major(),
            "sell_count": self.sell_count,
            "sell_amount": self.sell_amount,
            "sell_value": self.sell_value.as_major(),
        }
        if price is not None:
            summary["asset_value"] = self.asset_value(price).as_major()
            summary["total_value"] = self.total_value(price).as_major()
        return summary
