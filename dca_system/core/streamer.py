"""
시세 스트림 추상 클래스 정의.

[ 역할 ]
    시간순으로 정렬된 Quote를 하나씩 handler에 전달하는 인터페이스.
    데이터 소스(Binance JSON 파일, CSV, DataFrame 등)에 독립적으로 엔진에 시세 공급.

[ 구현체 ]
    - data/binance_file.py::BinanceFileStreamer  (Binance kline JSON 파일)
    - data/frame_streamer.py::DataFrameStreamer  (OHLCV DataFrame / CSV / 샘플 데이터)

[ 계약 ]
    - 시간 오름차순으로 전달 (엔진은 재정렬하지 않음)
    - handler가 예외를 던지면 즉시 중단하고 그 예외를 그대로 전파
    - 정상 종료 = 스트림 끝 (에러 아님)

[ 호출하는 곳 ]
    - backtest/runner.py::DCARunner.watch()
"""

from abc import ABC, abstractmethod
from typing import Callable

from dca_system.core.quote import Quote

QuoteHandler = Callable[[Quote], None]


class Streamer(ABC):
    """시세 스트림 추상 클래스."""

    @abstractmethod
    def stream(self, handler: QuoteHandler) -> None:
        """모든 시세를 시간순으로 handler에 전달.

        Args:
            handler: 시세 1건마다 호출되는 콜백. 예외 발생 시 스트림 중단.
        """
        ...
