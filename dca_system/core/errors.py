"""
에러 정의 모듈.

[ 역할 ]
    시스템 전체에서 사용하는 예외 계층을 정의.
    모든 예외는 DCAError를 상속받고, kind(ErrorKind)로 종류를 구분한다.

[ 에러 종류 ]
    INSUFFICIENT_BUDGET → 누적 매수금액이 총 매수 한도에 도달 (치명적이지 않음)
    CURRENCY_MISMATCH   → 서로 다른 통화끼리 연산 (설정/프로그래밍 오류)
    INVALID_QUOTE       → 0 이하 가격 등 계산 불가능한 시세
    STREAM              → 시세 데이터 파싱/형식 오류 (실행 중단)

[ 호출하는 곳 ]
    - core/money.py에서 CurrencyMismatchError
    - strategies/dca_strategy.py에서 InsufficientBudgetError, InvalidQuoteError
    - data/kline.py, data/binance_file.py에서 StreamError 계열
    - backtest/runner.py에서 kind를 보고 계속 진행할지 결정
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """DCAError 종류."""
    INSUFFICIENT_BUDGET = "insufficient_budget"
    CURRENCY_MISMATCH = "currency_mismatch"
    INVALID_QUOTE = "invalid_quote"
    STREAM = "stream"


class DCAError(Exception):
    """모든 시스템 예외의 부모. context에 디버깅용 구조화 정보를 담는다."""

    kind: ErrorKind

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class InsufficientBudgetError(DCAError):
    """누적 매수금액이 총 매수 한도 이상이라 매수를 거부."""
    kind = ErrorKind.INSUFFICIENT_BUDGET


class CurrencyMismatchError(DCAError):
    kind = ErrorKind.CURRENCY_MISMATCH


class InvalidQuoteError(DCAError):
    kind = ErrorKind.INVALID_QUOTE


class StreamError(DCAError):
    """시세 스트림 오류. 발생 시 실행 전체를 중단한다."""
    kind = ErrorKind.STREAM


class KlineParseError(StreamError):
    """kline 파일 구조가 기대와 다름 (최상위가 배열이 아님 등)."""


class BinanceDataFormatError(StreamError):
    """Binance kline 한 건의 필드 수/값 형식이 잘못됨."""
