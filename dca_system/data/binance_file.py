"""
Binance kline JSON 파일 스트리머.

[ 역할 ]
    core/streamer.py::Streamer 구현체.
    {data_dir}/{market}.json (Binance /api/v3/klines 응답을 그대로 저장한 파일)을 읽어
    캔들마다 Kline을 만들어 handler에 전달.

[ 파일 형식 ]
    [[1499040000000, "0.0163", "0.8", "0.0157", "0.0157", "148976.1", 1499644799999, ...], ...]
    최상위가 배열이 아니면 KlineParseError,
    각 캔들 형식 오류는 BinanceDataFormatError (data/kline.py)

[ 호출하는 곳 ]
    - run_dca.py에서 data.source == "binance_file"일 때 생성
"""

import json
import logging
from pathlib import Path

from dca_system.core.errors import KlineParseError
from dca_system.core.streamer import QuoteHandler, Streamer
from dca_system.data.kline import Kline

logger = logging.getLogger("dca_system.data")


class BinanceFileStreamer(Streamer):
    """Binance kline JSON 파일 기반 시세 스트림.

    사용 예:
        streamer = BinanceFileStreamer("SOLUSDT", data_dir="data")
        streamer.stream(lambda quote: print(quote.price))
    """

    def __init__(self, market: str, data_dir: str | Path = ".", currency: str = "USD"):
        self.market = market
        self.data_dir = Path(data_dir)
        self.currency = currency

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.market}.json"

    def _load_klines(self) -> list[list]:
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise KlineParseError(
                    f"kline 파일을 JSON으로 읽을 수 없습니다: {e}",
                    path=str(self.path),
                ) from e

        if not isinstance(data, list):
            raise KlineParseError(
                "kline 파일의 최상위는 배열이어야 합니다",
                path=str(self.path),
                got=type(data).__name__,
            )
        return data

    def stream(self, handler: QuoteHandler) -> None:
        """파일 순서대로 Kline 전달. 파싱/handler 예외는 즉시 전파."""
        klines = self._load_klines()
        logger.info(f"{self.path}: {len(klines)}개 캔들 로드")

        for row in klines:
            handler(Kline.from_binance(self.market, row, self.currency))
