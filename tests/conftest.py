import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가해 테스트에서 최상위 패키지명으로 바로 임포트
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from dca_system.core.money import Money  # noqa: E402
from dca_system.core.quote import QuoteSnapshot  # noqa: E402
from dca_system.core.streamer import Streamer  # noqa: E402
from dca_system.strategies.dca_strategy import DCAStrategy  # noqa: E402

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
FIXED_NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)


def quote(price: str | float, day: float = 0, currency: str = "USD", symbol: str = "SOLUSD") -> QuoteSnapshot:
    """T0 + day일 시점의 테스트용 시세."""
    return QuoteSnapshot(
        symbol=symbol,
        price=Money.from_major(price, currency),
        time=T0 + timedelta(days=day),
    )


class ListStreamer(Streamer):
    """리스트의 시세를 순서대로 전달하는 테스트용 스트림."""

    def __init__(self, quotes):
        self.quotes = list(quotes)

    def stream(self, handler):
        for q in self.quotes:
            handler(q)


@pytest.fixture
def make_strategy():
    def _make(**params):
        base = {"min_transaction_span": 0}
        base.update(params)
        return DCAStrategy(params=base, clock=lambda: FIXED_NOW)
    return _make
