"""
DCA 실행 스크립트 (시스템 진입점).

[ 사용법 ]
    # 기본 실행 (config.yaml 탐색, 없으면 기본값 + 샘플 데이터)
    python run_dca.py

    # Binance kline JSON 파일 (data/SOLUSDT.json)
    python run_dca.py --source binance_file --symbol SOLUSDT --data-dir data

    # CSV 파일 (date, open, high, low, close 컬럼)
    python run_dca.py --source csv --csv prices/SOLUSD.csv

    # 파라미터 오버라이드
    python run_dca.py -p target_value=2000 -p min_transaction_span="2 days"

    # 환경별 설정 파일 (config.prod.yaml)
    python run_dca.py --env prod

    # 등록된 전략 목록 확인
    python run_dca.py --list
"""

import argparse
import sys
from datetime import date
from pathlib import Path

from dca_system.backtest.report import ReportRow, csv_header, format_csv_row
from dca_system.backtest.runner import DCARunner
from dca_system.core.errors import DCAError
from dca_system.core.streamer import Streamer
from dca_system.data.binance_file import BinanceFileStreamer
from dca_system.data.frame_streamer import DataFrameStreamer, generate_sample_data
from dca_system.strategies import create_strategy, list_strategies
from dca_system.utils.config import Config, ConfigChangeRegistry, resolve_config_path
from dca_system.utils.logger import set_level, setup_logger


def parse_param(param_str: str) -> tuple[str, object]:
    """'key=value' 문자열을 (key, value)로. 숫자/불리언은 자동 변환."""
    key, _, value = param_str.partition("=")
    key = key.strip()
    value = value.strip().strip('"').strip("'")

    try:
        if "." in value:
            return key, float(value)
        return key, int(value)
    except ValueError:
        if value.lower() in ("true", "yes"):
            return key, True
        if value.lower() in ("false", "no"):
            return key, False
        return key, value


def build_streamer(config: Config) -> Streamer:
    """config.data.source에 맞는 시세 스트림 생성."""
    data = config.data

    if data.source == "binance_file":
        return BinanceFileStreamer(data.symbol, data_dir=data.data_dir, currency=data.currency)

    if data.source == "csv":
        csv_path = Path(data.csv_path) if data.csv_path else Path(data.data_dir) / f"{data.symbol}.csv"
        return DataFrameStreamer.from_csv(data.symbol, csv_path, currency=data.currency, interval=data.interval)

    if data.source == "sample":
        df = generate_sample_data(
            market=data.symbol,
            start_date=date.fromisoformat(str(data.start_date)),
            end_date=date.fromisoformat(str(data.end_date)),
            initial_price=data.initial_price,
            volatility=data.volatility,
        )
        return DataFrameStreamer(data.symbol, df, currency=data.currency, interval=data.interval)

    raise ValueError(f"알 수 없는 데이터 소스: {data.source}")


def load_config(args: argparse.Namespace) -> Config:
    if args.config:
        config = Config.from_file(args.config)
    else:
        config_path = resolve_config_path(env=args.env)
        config = Config.from_file(config_path) if config_path else Config()

    config.apply_env()

    if args.strategy:
        config.strategy.name = args.strategy
    if args.source:
        config.data.source = args.source
    if args.symbol:
        config.data.symbol = args.symbol
    if args.data_dir:
        config.data.data_dir = args.data_dir
    if args.csv:
        config.data.source = "csv"
        config.data.csv_path = args.csv
    if args.no_csv:
        config.run.print_csv = False
    for p in args.param:
        key, value = parse_param(p)
        config.strategy.params[key] = value
    return config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="DCA 전략 시뮬레이션 실행")
    parser.add_argument("--config", type=str, default=None, help="설정 파일 경로 (없으면 자동 탐색)")
    parser.add_argument("--env", type=str, default=None, help="환경 이름 (config.{env}.yaml)")
    parser.add_argument("--strategy", type=str, default=None, help="전략 이름")
    parser.add_argument("-p", "--param", action="append", default=[], help="파라미터 오버라이드 (예: -p target_value=2000)")
    parser.add_argument("--source", type=str, default=None, choices=["binance_file", "csv", "sample"], help="시세 소스")
    parser.add_argument("--symbol", type=str, default=None, help="마켓 이름 (예: SOLUSDT)")
    parser.add_argument("--data-dir", type=str, default=None, help="시세 파일 디렉토리")
    parser.add_argument("--csv", type=str, default=None, help="OHLCV CSV 파일 경로")
    parser.add_argument("--no-csv", action="store_true", help="거래별 CSV 행 출력 안 함")
    parser.add_argument("--list", action="store_true", help="등록된 전략 목록 출력")
    args = parser.parse_args(argv)

    if args.list:
        print("등록된 전략:")
        for name in list_strategies():
            print(f"  - {name}")
        return 0

    config = load_config(args)

    logger = setup_logger(level=config.log_level, log_dir=config.log_dir)
    registry = ConfigChangeRegistry()
    registry.on_change("log", lambda cfg: set_level("dca_system", cfg.log_level))
    registry.notify(config)

    strategy = create_strategy(config.strategy.name, params=config.strategy.params)

    def print_row(row: ReportRow) -> None:
        print(format_csv_row(row), flush=True)

    runner = DCARunner(
        strategy,
        stop_on_insufficient_budget=config.run.stop_on_insufficient_budget,
        row_sink=print_row if config.run.print_csv else None,
    )

    if config.run.print_csv:
        print(csv_header())
    try:
        metrics = runner.watch(build_streamer(config))
    except (DCAError, OSError) as e:
        logger.error(f"실행 중단: {e}")
        return 1

    print(strategy.describe())
    print(metrics.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
