"""
DCA 실행 성과 지표 계산 모듈.

[ 역할 ]
    실행 결과(리포트 행 + 최종 포지션)를 받아 성과 지표를 계산.
    calculate_metrics() 함수가 핵심.

[ 계산하는 지표 ]
    - 최종 총 가치 / ROI / ROI % (마지막 시세 가격 기준, 예산 대비)
    - 최대 낙폭 MDD (거래 시점 총 가치 기준)
    - 매수/매도 횟수와 금액, 평균 매수 단가

[ 호출하는 곳 ]
    - backtest/runner.py::DCARunner.watch() 완료 시 호출
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional

import numpy as np

from dca_system.backtest.report import ReportRow
from dca_system.core.quote import Quote
from dca_system.strategies.dca_strategy import DCAStrategy


@dataclass
class DCAMetrics:
    """DCA 성과 지표. summary()로 포맷된 리포트 출력 가능."""
    budget: float = 0.0               # 예산 (총 매수 한도)
    final_price: float = 0.0          # 마지막 시세 가격
    final_asset_value: float = 0.0    # 최종 평가금액
    final_cash: float = 0.0           # 최종 현금
    final_total_value: float = 0.0    # 최종 총 가치
    roi: float = 0.0                  # 총 가치 - 예산
    roi_perc: float = 0.0             # ROI / 예산 (비율)
    max_drawdown: float = 0.0         # 최대 낙폭 MDD (%)
    total_trades: int = 0
    buy_count: int = 0
    sell_count: int = 0
    buy_value: float = 0.0
    sell_value: float = 0.0
    avg_buy_price: float = 0.0        # 매수 금액 / 매수 수량

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        """성과 요약 문자열."""
        lines = [
            "=" * 50,
            "DCA 성과 리포트",
            "=" * 50,
            f"예산:            {self.budget:>14,.2f}",
            f"마지막 가격:     {self.final_price:>14,.2f}",
            f"최종 평가금액:   {self.final_asset_value:>14,.2f}",
            f"최종 현금:       {self.final_cash:>14,.2f}",
            f"최종 총 가치:    {self.final_total_value:>14,.2f}",
            f"ROI:             {self.roi:>14,.2f}",
            f"ROI %:           {self.roi_perc * 100:>13.2f}%",
            f"최대 낙폭(MDD):  {self.max_drawdown:>13.2f}%",
            "-" * 50,
            f"총 거래 횟수:    {self.total_trades:>14d}",
            f"매수:            {self.buy_count:>14d}",
            f"매도:            {self.sell_count:>14d}",
            f"매수 금액:       {self.buy_value:>14,.2f}",
            f"매도 금액:       {self.sell_value:>14,.2f}",
            f"평균 매수 단가:  {self.avg_buy_price:>14,.4f}",
            "=" * 50,
        ]
        return "\n".join(lines)


def max_drawdown(values: list[float]) -> float:
    """고점 대비 최대 하락폭 (%). 값이 없거나 고점이 0 이하면 0."""
    if not values:
        return 0.0
    arr = np.asarray(values, dtype=float)
    peaks = np.maximum.accumulate(arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        drawdowns = np.where(peaks > 0, (peaks - arr) / peaks * 100, 0.0)
    return float(drawdowns.max())


def calculate_metrics(
    rows: list[ReportRow],
    strategy: DCAStrategy,
    last_quote: Optional[Quote] = None,
) -> DCAMetrics:
    """성과 지표 계산. runner.py에서 실행 완료 후 호출됨.

    Args:
        rows: 거래마다 기록된 리포트 행
        strategy: 실행이 끝난 전략 (최종 포지션 보유)
        last_quote: 마지막으로 받은 시세 (없으면 평가금액 0으로 계산)
    """
    position = strategy.position
    metrics = DCAMetrics(
        budget=strategy.budget.as_major(),
        final_cash=position.cash.as_major(),
        total_trades=len(rows),
        buy_count=position.buy_count,
        sell_count=position.sell_count,
        buy_value=position.buy_value.as_major(),
        sell_value=position.sell_value.as_major(),
    )

    if position.buy_amount > 0:
        metrics.avg_buy_price = metrics.buy_value / position.buy_amount

    if last_quote is not None:
        price = last_quote.price
        metrics.final_price = price.as_major()
        metrics.final_asset_value = position.asset_value(price).as_major()
        metrics.final_total_value = position.total_value(price).as_major()
        metrics.roi = strategy.roi(price).as_major()
        metrics.roi_perc = strategy.roi_perc(price)
    else:
        metrics.final_total_value = metrics.final_cash
        metrics.roi = metrics.final_cash - metrics.budget
        if metrics.budget:
            metrics.roi_perc = metrics.roi / metrics.budget

    values = [r.total_value for r in rows]
    if last_quote is not None:
        values.append(metrics.final_total_value)
    metrics.max_drawdown = max_drawdown(values)

    return metrics
