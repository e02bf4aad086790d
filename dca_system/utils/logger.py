"""
로깅 모듈.

[ 역할 ]
    파일 + 콘솔 로거를 설정. 거래 판단 내역, 매수 거부, 에러 등을 기록.

[ 로그 파일 위치 ]
    {log_dir}/{name}_{YYYYMMDD}.log (예: logs/dca_system_20240601.log)

[ 로거 이름 ]
    dca_system.strategy  - 판단/매수/매도 (대기 사유는 DEBUG, 매수 거부는 WARNING)
    dca_system.runner    - 실행 시작/종료
    dca_system.data      - 시세 파일 로드
    dca_system.config    - 설정 탐색/변경

[ 호출하는 곳 ]
    - run_dca.py에서 setup_logger() 호출, 설정 변경 시 set_level()
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if isinstance(value, int):
        return value
    logging.getLogger("dca_system").warning(f"알 수 없는 로그 레벨 '{level}', INFO 사용")
    return logging.INFO


def setup_logger(
    name: str = "dca_system",
    level: str = "INFO",
    log_dir: str | None = "logs",
    console: bool = True,
) -> logging.Logger:
    """로거 설정. 파일 핸들러(일별) + 콘솔 핸들러 등록.

    log_dir이 None이면 파일 핸들러 없이 콘솔만 사용.
    이미 핸들러가 있으면 레벨만 갱신한다.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_parse_level(level))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime("%Y%m%d")
        file_handler = logging.FileHandler(log_path / f"{name}_{today}.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        # stdout은 CSV 리포트용이라 로그는 stderr로
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def set_level(name: str, level: str) -> None:
    """실행 중 로그 레벨 변경 (설정 변경 핸들러용)."""
    logging.getLogger(name).setLevel(_parse_level(level))
