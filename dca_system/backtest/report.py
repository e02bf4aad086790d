"""
거래 리포트 모듈.

[ 역할 ]
    거래가 발생할 때마다 그 시점의 포지션 상태를 한 행(ReportRow)으로 기록.
    CSV 한 줄 출력과 pandas DataFrame 변환을 제공.

[ 컬럼 ]
    date, price, 거래 수량/금액, 보유 수량/평가금액, 현금, 총 가치, ROI, ROI %,
    매수 횟수/수량/금액, 매도 횟수/수량/금액

[ 호출하는 곳 ]
    - backtest/runner.py::DCARunner.watch()에서 거래마다 ReportRow.build()
    - backtest/metrics.py에서 rows로 성과 지표 계산
    - run_dca.py에서 format_csv_row()로 실시간 출력
"""

from dataclasses import asdict, dataclass, fields
from datetime import datetime

import pandas as pd

from dca_system.core.quote import Quote
from dca_system.core.trading_strategy import Transaction
from dca_system.strategies.dca_strategy import DCAStrategy


@dataclass(frozen=True)
class ReportRow:
    """거래 1건 직후의 상태. 금액은 주 단위 float."""
    date: datetime
    price: float
    transaction_amount: float
    transaction_value: float
    asset_amount: float
    asset_value: float
    cash: float
    total_value: float
    roi: float
    roi_perc: float          # 비율 (0.05 = 5%)
    buy_count: int
    buy_amount: float
    buy_value: float
    sell_count: int
    sell_amount: float
    sell_value: float

    @classmethod
    def build(cls, strategy: DCAStrategy, quote: Quote, transaction: Transaction) -> "ReportRow":
        position = strategy.position
        price = quote.price
        return cls(
            date=quote.time,
            price=price.as_major(),
            transaction_amount=transaction.amount,
            transaction_value=transaction.value.as_major(),
            asset_amount=position.asset_amount,
            asset_value=position.asset_value(price).as_major(),
            cash=position.cash.as_major(),
            total_value=position.total_value(price).as_major(),
            roi=strategy.roi(price).as_major(),
            roi_perc=strategy.roi_perc(price),
            buy_count=position.buy_count,
            buy_amount=position.buy_amount,
            buy_value=position.buy_value.as_major(),
            sell_count=position.sell_count,
            sell_amount=position.sell_amount,
            sell_value=position.sell_value.as_major(),
        )


REPORT_COLUMNS: list[str] = [f.name for f in fields(ReportRow)]


def csv_header() -> str:
    return ", ".join(REPORT_COLUMNS)


def format_csv_row(row: ReportRow) -> str:
    """CSV 한 줄. 횟수는 정수, 나머지 숫자는 소수 6자리."""
    values = []
    for name, value in asdict(row).items():
        if name == "date":
            values.append(str(value))
        elif isinstance(value, int):
            values.append(str(value))
        else:
            values.append(f"{value:f}")
    return ", ".join(values)


def rows_to_frame(rows: list[ReportRow]) -> pd.DataFrame:
    """리포트 행 목록 → DataFrame (빈 목록이면 컬럼만 있는 빈 DataFrame)."""
    if not rows:
        return pd.DataFrame(columns=REPORT_COLUMNS)
    return pd.DataFrame([asdict(r) for r in rows], columns=REPORT_COLUMNS)
