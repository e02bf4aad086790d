"""
목표금액 추종 적립식(DCA) 전략 구현.

[ 역할 ]
    core/trading_strategy.py::TradingStrategy의 구현체.
    "보유 자산 평가금액이 목표금액보다 작으면 사고, 충분히 크면 판다" 전략.

[ 전략 흐름 ]
    시세마다 process() 호출됨 (← backtest/runner.py에서)
        ├── 마지막 거래 시세 이후 min_transaction_span 미경과 → None
        ├── 평가금액 == 목표금액 → None
        ├── 평가금액 <  목표금액 → buy()
        │     ├── 누적 매수금액 >= 총 매수 한도 → InsufficientBudgetError
        │     ├── 매수금액 = min(목표 - 평가금액, 1회 매수 한도)
        │     ├── 평가금액 + 매수금액 > 총 매수 한도면 한도까지만
        │     └── 누적 매수금액 + 매수금액도 총 매수 한도를 넘지 않게
        └── 평가금액 >  목표금액 → sell()
              ├── 초과분 < 최소 수익 → None
              └── 매도금액 = min(초과분, 1회 매도 한도)
        거래가 생기면 Position.record_transaction()으로 반영 후 반환

[ 파라미터 (config.yaml의 strategy 섹션에서 로드) ]
    symbol:                 종목/마켓 이름 (표시용)
    currency:               기준 통화
    target_value:           목표 평가금액 (주 단위, 예: 1000 달러)
    single_buy_limit_perc:  1회 매수 한도 (목표금액 대비 %)
    single_sell_limit_perc: 1회 매도 한도 (목표금액 대비 %)
    total_buy_limit_perc:   총 매수 한도 = 예산 (목표금액 대비 %, 100 초과 가능)
    min_profit_perc:        매도 최소 수익 (목표금액 대비 %)
    min_transaction_span:   거래 간 최소 간격 ("4 days", "12h", 초 단위 숫자)

    % 값은 0.10(비율)과 10(퍼센트) 두 형식 모두 허용 → core/money.py::normalize_percent
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pandas as pd

from dca_system.core.errors import InsufficientBudgetError, InvalidQuoteError
from dca_system.core.money import Money, allocate_percent
from dca_system.core.quote import Quote
from dca_system.core.trading_strategy import Transaction, TradingStrategy
from dca_system.data.position import Position
from dca_system.strategies import register

logger = logging.getLogger("dca_system.strategy")


def to_timedelta(value: Any) -> timedelta:
    """거래 간격 파라미터를 timedelta로 변환. 숫자는 초 단위."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    return pd.Timedelta(value).to_pytimedelta()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@register("dca")
class DCAStrategy(TradingStrategy):
    """목표금액 추종 적립식 전략 구현체. Position을 하나 소유한다."""

    # config.yaml에서 오버라이드 가능한 기본값
    DEFAULT_PARAMS = {
        "symbol": "SOL",
        "currency": "USD",
        "target_value": 1_000,              # 목표 평가금액
        "single_buy_limit_perc": 0.10,      # 1회 매수 한도 (10%)
        "single_sell_limit_perc": 0.10,     # 1회 매도 한도 (10%)
        "total_buy_limit_perc": 200,        # 총 매수 한도 (200%)
        "min_profit_perc": 0.10,            # 최소 수익 (10%)
        "min_transaction_span": "4 days",   # 거래 간 최소 간격
    }

    def __init__(
        self,
        params: dict[str, Any] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        merged = {**self.DEFAULT_PARAMS, **(params or {})}
        super().__init__(name="dca", params=merged)
        self._clock = clock or _utc_now
        # 잘못된 간격 값은 첫 시세가 아니라 생성 시점에 드러나도록 미리 변환
        self._min_transaction_span = to_timedelta(merged["min_transaction_span"])
        self.position = Position(currency=self.currency, cash=self.total_buy_limit)

    # ─── 파라미터 ────────────────────────────────────────────────────────

    @property
    def symbol(self) -> str:
        return str(self.params["symbol"])

    @property
    def currency(self) -> str:
        return str(self.params["currency"]).upper()

    @property
    def target_value(self) -> Money:
        target = self.params["target_value"]
        if isinstance(target, Money):
            return target
        return Money.from_major(target, self.currency)

    @property
    def min_transaction_span(self) -> timedelta:
        return self._min_transaction_span

    # ─── 한도 (매번 파라미터에서 다시 계산) ─────────────────────────────────

    @property
    def min_profit(self) -> Money:
        return allocate_percent(self.target_value, float(self.params["min_profit_perc"]))

    @property
    def min_sell_value(self) -> Money:
        return self.target_value + self.min_profit

    @property
    def total_buy_limit(self) -> Money:
        return allocate_percent(self.target_value, float(self.params["total_buy_limit_perc"]))

    @property
    def budget(self) -> Money:
        return self.total_buy_limit

    @property
    def single_buy_limit(self) -> Money:
        return allocate_percent(self.target_value, float(self.params["single_buy_limit_perc"]))

    @property
    def single_sell_limit(self) -> Money:
        return allocate_percent(self.target_value, float(self.params["single_sell_limit_perc"]))

    # ─── 수익률 ──────────────────────────────────────────────────────────

    def roi(self, price: Money) -> Money:
        """ROI = 총 가치 - 예산(총 매수 한도). 실제 투입금이 아니라 예산 기준."""
        return self.position.total_value(price) - self.budget

    def roi_perc(self, price: Money) -> float:
        """ROI / 예산 (비율, 표시할 때 ×100)."""
        budget = self.budget.as_major()
        if budget == 0:
            return 0.0
        return self.roi(price).as_major() / budget

    # ─── 판단 ────────────────────────────────────────────────────────────

    def process(self, quote: Quote) -> Optional[Transaction]:
        """시세 1건 처리. 간격 → 균형 → 매수/매도 순서로 판단."""
        last_time = self.position.last_acted_quote_time
        if last_time is not None:
            span = quote.time - last_time
            if span < self.min_transaction_span:
                logger.debug(
                    f"[{quote.time}] {quote.symbol} 대기 - 최소 거래 간격 미달 "
                    f"({span} < {self.min_transaction_span})"
                )
                return None

        asset_value = self.position.asset_value(quote.price)
        logger.debug(
            f"[{quote.time}] {quote.symbol} @ {quote.price} "
            f"평가금액 {asset_value} / 목표 {self.target_value}"
        )

        if asset_value == self.target_value:
            logger.debug(f"[{quote.time}] {quote.symbol} 대기 - 평가금액이 목표금액과 같음")
            return None

        if asset_value < self.target_value:
            transaction = self.buy(quote)
        else:
            transaction = self.sell(quote)

        if transaction is not None:
            self.position.record_transaction(transaction, quote)
        return transaction

    def buy(self, quote: Quote) -> Optional[Transaction]:
        """매수 거래 생성. 포지션은 바꾸지 않는다 (process()가 반영)."""
        total_buy_limit = self.total_buy_limit
        if not self.position.bought_value < total_buy_limit:
            logger.warning(
                f"[{quote.time}] {quote.symbol} 매수 거부 - 누적 매수금액이 총 매수 한도 이상 "
                f"({self.position.bought_value} >= {total_buy_limit})"
            )
            raise InsufficientBudgetError(
                "누적 매수금액이 총 매수 한도 이상이라 매수할 수 없습니다",
                bought_value=self.position.bought_value.display(),
                total_buy_limit=total_buy_limit.display(),
            )

        asset_value = self.position.asset_value(quote.price)
        value = self.target_value - asset_value
        single_buy_limit = self.single_buy_limit
        if value > single_buy_limit:
            value = single_buy_limit

        # 1회 한도 안이더라도 총 한도를 넘겨 사지 않는다
        if asset_value + value > total_buy_limit:
            value = total_buy_limit - asset_value
        # 가격이 내려 평가금액이 작아도 누적 매수금액은 총 한도를 넘지 않는다
        if self.position.bought_value + value > total_buy_limit:
            value = total_buy_limit - self.position.bought_value

        if not value.is_positive():
            logger.debug(f"[{quote.time}] {quote.symbol} 대기 - 매수 가능 금액 없음 ({value})")
            return None

        amount = self._amount_for(value, quote)
        logger.debug(f"[{quote.time}] 매수: {self.symbol} {amount:.6f} @ {quote.price} ({value})")
        return Transaction(amount=amount, value=value, time=self._clock())

    def sell(self, quote: Quote) -> Optional[Transaction]:
        """매도 거래 생성. 초과분이 최소 수익에 못 미치면 None."""
        excess = self.position.asset_value(quote.price) - self.target_value
        if excess < self.min_profit:
            logger.debug(
                f"[{quote.time}] {quote.symbol} 대기 - 초과분이 최소 수익 미달 "
                f"({excess} < {self.min_profit})"
            )
            return None

        value = excess
        single_sell_limit = self.single_sell_limit
        if value > single_sell_limit:
            value = single_sell_limit

        amount = self._amount_for(value, quote)
        logger.debug(f"[{quote.time}] 매도: {self.symbol} {amount:.6f} @ {quote.price} ({value})")
        return Transaction(amount=-amount, value=-value, time=self._clock())

    def _amount_for(self, value: Money, quote: Quote) -> float:
        """금액 → 수량 (주 단위 나눗셈)."""
        price = quote.price.as_major()
        if price <= 0:
            raise InvalidQuoteError(
                "가격이 0 이하인 시세로는 수량을 계산할 수 없습니다",
                symbol=quote.symbol,
                price=quote.price.display(),
                time=quote.time,
            )
        return value.as_major() / price

    # ─── 표시 ────────────────────────────────────────────────────────────

    def describe(self, price: Optional[Money] = None) -> str:
        """전략 설정 + 포지션 요약 문자열.

        price가 없으면 마지막 거래 시세 가격으로 평가한다 (거래가 없었으면 평가 생략).
        """
        position = self.position
        if price is None and position.last_acted_quote is not None:
            price = position.last_acted_quote.price

        lines = [
            "=" * 50,
            f"DCA 전략 ({self.symbol})",
            "=" * 50,
            f"목표금액:         {self.target_value.display():>16}",
            f"최소 수익:        {self.min_profit.display():>16}",
            f"최소 매도 금액:   {self.min_sell_value.display():>16}",
            f"총 매수 한도:     {self.total_buy_limit.display():>16}",
            f"1회 매수 한도:    {self.single_buy_limit.display():>16}",
            f"1회 매도 한도:    {self.single_sell_limit.display():>16}",
            f"최소 거래 간격:   {str(self.min_transaction_span):>16}",
            f"누적 매수금액:    {position.bought_value.display():>16}",
            "-" * 50,
            f"보유 수량:        {position.asset_amount:>16.6f}",
        ]
        if price is not None:
            lines += [
                f"평가금액:         {position.asset_value(price).display():>16}",
                f"현금:             {position.cash.display():>16}",
                f"총 가치:          {position.total_value(price).display():>16}",
                f"ROI:              {self.roi(price).display():>16}",
                f"ROI %:            {self.roi_perc(price) * 100:>15.2f}%",
            ]
        lines += [
            "-" * 50,
            f"거래 횟수:        {position.transaction_count:>16d}",
            f"매수 횟수:        {position.buy_count:>16d}",
            f"매수 수량:        {position.buy_amount:>16.6f}",
            f"매수 금액:        {position.buy_value.display():>16}",
            f"매도 횟수:        {position.sell_count:>16d}",
            f"매도 수량:        {position.sell_amount:>16.6f}",
            f"매도 금액:        {position.sell_value.display():>16}",
            "=" * 50,
        ]
        return "\n".join(lines)
