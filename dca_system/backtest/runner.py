"""
DCA 실행기 모듈.

[ 역할 ]
    Streamer가 주는 시세를 한 건씩 전략의 process()에 넘기고,
    거래가 생길 때마다 리포트 행을 기록하는 실행 루프.
    시세는 전달 순서 그대로, 한 번에 하나씩 처리 (병렬/재정렬 없음).

[ 실행 흐름 ]
    watch(streamer) 호출 시:
        1. streamer.stream(handler)
        2. handler(quote):
           → strategy.process(quote)
           → Transaction이면 ReportRow 생성, rows에 추가, row_sink 호출
           → InsufficientBudgetError는 경고 후 계속 (설정 시 중단)
           → 그 외 예외는 전파되어 스트림 전체 중단
        3. 스트림 정상 종료 후 성과 지표 계산

[ 의존성 ]
    - strategies/dca_strategy.py::DCAStrategy
    - backtest/report.py::ReportRow
    - backtest/metrics.py::calculate_metrics()

[ 호출하는 곳 ]
    - run_dca.py (진입점)에서 생성 및 실행
"""

import logging
from typing import Callable, Optional

from dca_system.backtest.metrics import DCAMetrics, calculate_metrics
from dca_system.backtest.report import ReportRow
from dca_system.core.errors import InsufficientBudgetError
from dca_system.core.quote import Quote
from dca_system.core.streamer import Streamer
from dca_system.strategies.dca_strategy import DCAStrategy

logger = logging.getLogger("dca_system.runner")

RowSink = Callable[[ReportRow], None]


class DCARunner:
    """DCA 실행기. watch()로 스트림 끝까지 실행."""

    def __init__(
        self,
        strategy: DCAStrategy,
        stop_on_insufficient_budget: bool = False,
        row_sink: Optional[RowSink] = None,
    ):
        self.strategy = strategy
        self.stop_on_insufficient_budget = stop_on_insufficient_budget
        self.row_sink = row_sink

        # 실행 중/후 채워지는 결과
        self.rows: list[ReportRow] = []
        self.quote_count: int = 0
        self.refused_buys: int = 0
        self.last_quote: Optional[Quote] = None
        self.metrics: Optional[DCAMetrics] = None

    def handle(self, quote: Quote) -> Optional[ReportRow]:
        """시세 1건 처리. 거래가 있었으면 그 리포트 행을 반환."""
        self.quote_count += 1
        self.last_quote = quote
        try:
            transaction = self.strategy.process(quote)
        except InsufficientBudgetError as e:
            self.refused_buys += 1
            if self.stop_on_insufficient_budget:
                raise
            logger.info(f"[{quote.time}] 매수 건너뜀: {e}")
            return None

        if transaction is None:
            return None

        row = ReportRow.build(self.strategy, quote, transaction)
        self.rows.append(row)
        if self.row_sink is not None:
            self.row_sink(row)
        return row

    def watch(self, streamer: Streamer) -> DCAMetrics:
        """스트림 끝까지 실행하고 성과 지표 반환. 예외는 그대로 전파."""
        self.rows = []
        self.quote_count = 0
        self.refused_buys = 0
        self.last_quote = None

        logger.info(f"실행 시작: {self.strategy.symbol} (목표 {self.strategy.target_value})")
        streamer.stream(self.handle)

        self.metrics = calculate_metrics(self.rows, self.strategy, self.last_quote)
        logger.info(
            f"실행 완료: 시세 {self.quote_count}건, 거래 {len(self.rows)}건, "
            f"ROI {self.metrics.roi_perc * 100:.2f}%"
        )
        return self.metrics
