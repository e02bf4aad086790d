"""
매매 전략 추상 클래스 정의.

[ 역할 ]
    매매 로직의 인터페이스를 정의.
    시세 1건을 받아 매수/매도 거래(Transaction)를 만들거나 아무것도 하지 않는다(None).

[ 구현체 ]
    - strategies/dca_strategy.py::DCAStrategy (목표금액 추종 적립식 전략)

[ 호출하는 곳 ]
    - backtest/runner.py::DCARunner.watch()에서
      시세마다 process()를 호출하고 반환된 Transaction으로 리포트 행 생성

[ 데이터 흐름 ]
    Quote → process() → Transaction | None
    Transaction이 있으면 전략이 소유한 Position에 이미 반영된 상태로 반환됨
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from dca_system.core.money import Money
from dca_system.core.quote import Quote


@dataclass(frozen=True)
class Transaction:
    """process()의 반환값. 한번 생성되면 변경 불가.

    amount/value 부호: 매수는 양수(현금 유출), 매도는 음수(현금 유입).
    """
    amount: float               # 자산 수량 (부호 포함)
    value: Money                # 거래 금액 (부호 포함)
    time: datetime              # 실행 시각 (wall clock)
    fee: Optional[Money] = None  # 수수료 (현재 항상 0, 향후 사용)

    def __post_init__(self):
        if self.fee is None:
            object.__setattr__(self, "fee", Money.zero(self.value.currency))

    @property
    def side(self) -> str:
        return "sell" if self.value.is_negative() else "buy"


class TradingStrategy(ABC):
    """매매 전략 추상 클래스.

    새 전략을 만들려면 이 클래스를 상속받아 3개 메서드를 구현하면 된다:
    - process(): 시세 1건에 대한 판단 진입점 (buy/sell 내부 호출)
    - buy(): 매수 거래 생성
    - sell(): 매도 거래 생성
    """

    def __init__(self, name: str, params: dict[str, Any] | None = None):
        self.name = name
        self.params = params or {}  # config.yaml에서 로드된 전략 파라미터

    @abstractmethod
    def process(self, quote: Quote) -> Optional[Transaction]:
        """시세 1건 처리.

        Returns:
            Transaction: 매수/매도를 실행한 경우
            None: 이번 시세에서는 아무것도 하지 않음 (정상, 에러 아님)

        Raises:
            DCAError: 매수 한도 초과, 통화 불일치 등
        """
        ...

    @abstractmethod
    def buy(self, quote: Quote) -> Optional[Transaction]:
        """매수 거래 생성."""
        ...

    @abstractmethod
    def sell(self, quote: Quote) -> Optional[Transaction]:
        """매도 거래 생성."""
        ...
