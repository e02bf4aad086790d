"""
설정 관리 모듈.

[ 역할 ]
    config.yaml (또는 .json) 파일을 파싱하여 Config 객체로 변환.
    전략 파라미터, 시세 데이터 소스, 실행 옵션, 로깅 설정을 통합 관리.

[ 설정 파일 구조 (config.yaml) ]
    strategy:         → StrategyConfig (전략 이름 + 파라미터)
    data:             → DataConfig (시세 소스: binance_file / csv / sample)
    run:              → RunConfig (실행 옵션)
    log_level:        → "INFO" / "DEBUG"
    log_dir:          → 로그 디렉토리 경로

[ 설정 파일 찾기 ]
    resolve_config_path(): config.{env}.yaml을 ./, ~/.dca/, /etc/dca/ 순서로 탐색
    env는 DCA_ENV → ENV 환경변수 순서로 결정 (없으면 config.yaml)

[ 환경변수 오버라이드 ]
    Config.apply_env(): DCA_LOG_LEVEL, DCA_LOG_DIR, DCA_SYMBOL, DCA_SOURCE, DCA_DATA_DIR

[ 변경 알림 ]
    ConfigChangeRegistry: 설정이 (다시) 로드되면 등록된 핸들러를 모두 호출.
    전역 변수가 아니라 진입점에서 만든 객체를 직접 넘겨 사용한다.

[ 호출하는 곳 ]
    - run_dca.py에서 Config.from_yaml()로 로드
    - 전략 생성 시 config.strategy.params를 그대로 전달
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import yaml

logger = logging.getLogger("dca_system.config")

DEFAULT_SEARCH_DIRS = (Path("."), Path.home() / ".dca", Path("/etc/dca"))


@dataclass
class StrategyConfig:
    """전략 설정. config.yaml의 strategy 섹션에 대응.

    params는 DCAStrategy.DEFAULT_PARAMS를 덮어쓸 값만 넣으면 된다.
    """
    name: str = "dca"
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class DataConfig:
    """시세 데이터 설정. config.yaml의 data 섹션에 대응."""
    source: str = "sample"        # binance_file / csv / sample
    symbol: str = "SOLUSDT"
    currency: str = "USD"
    data_dir: str = "data"        # binance_file: {data_dir}/{symbol}.json
    csv_path: str = ""            # csv: 비어 있으면 {data_dir}/{symbol}.csv
    interval: str = "1D"          # csv / sample 캔들 간격
    start_date: str = "2024-01-01"  # sample 전용
    end_date: str = "2024-12-31"
    initial_price: float = 100.0
    volatility: float = 0.04


@dataclass
class RunConfig:
    """실행 옵션. config.yaml의 run 섹션에 대응."""
    stop_on_insufficient_budget: bool = False  # True면 매수 한도 초과 시 실행 중단
    print_csv: bool = True                     # 거래마다 CSV 행 출력


def _pick(cls, data: Mapping[str, Any] | None):
    """dataclass에 정의된 키만 골라 생성 (모르는 키는 무시)."""
    data = data or {}
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class Config:
    """전체 설정. from_yaml() 또는 from_json()으로 파일에서 로드."""
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    data: DataConfig = field(default_factory=DataConfig)
    run: RunConfig = field(default_factory=RunConfig)
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        with open(Path(path), "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls._from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "Config":
        with open(Path(path), "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """확장자로 형식 판단 (.json이면 JSON, 나머지는 YAML)."""
        if Path(path).suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        strategy_data = data.get("strategy") or {}

        # params가 명시되어 있으면 그것을, 없으면 name 외 나머지 키를 params로
        if "params" in strategy_data:
            strategy_params = dict(strategy_data["params"] or {})
        else:
            strategy_params = {k: v for k, v in strategy_data.items() if k != "name"}

        return cls(
            strategy=StrategyConfig(
                name=strategy_data.get("name", "dca"),
                params=strategy_params,
            ),
            data=_pick(DataConfig, data.get("data")),
            run=_pick(RunConfig, data.get("run")),
            log_level=data.get("log_level", "INFO"),
            log_dir=data.get("log_dir", "logs"),
        )

    def apply_env(self, prefix: str = "DCA", environ: Mapping[str, str] | None = None) -> "Config":
        """환경변수로 일부 값을 덮어쓴다. 변경된 자기 자신을 반환."""
        environ = os.environ if environ is None else environ
        overrides = {
            "log-level": ("log_level", self),
            "log-dir": ("log_dir", self),
            "symbol": ("symbol", self.data),
            "source": ("source", self.data),
            "data-dir": ("data_dir", self.data),
        }
        for key, (attr, target) in overrides.items():
            env_name = f"{prefix}_{key}".upper().replace("-", "_")
            if env_name in environ:
                setattr(target, attr, environ[env_name])
                logger.debug(f"환경변수 적용: {env_name} → {attr}")
        return self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save_yaml(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, allow_unicode=True, default_flow_style=False)


def config_file_name(name: str = "config", env: str | None = None, ext: str = "yaml") -> str:
    """빈 구성요소를 빼고 '.'으로 연결 (config + prod → config.prod.yaml)."""
    parts = [p for p in (name, env, ext) if p]
    return ".".join(parts)


def resolve_config_path(
    name: str = "config",
    env: str | None = None,
    search_dirs: tuple[Path, ...] | list[Path] = DEFAULT_SEARCH_DIRS,
    environ: Mapping[str, str] | None = None,
    prefix: str = "DCA",
) -> Optional[Path]:
    """설정 파일 경로 탐색. 찾지 못하면 None."""
    environ = os.environ if environ is None else environ
    if env is None:
        env = environ.get(f"{prefix}_ENV") or environ.get("ENV") or None

    filename = config_file_name(name, env)
    for directory in search_dirs:
        candidate = Path(directory).expanduser() / filename
        if candidate.is_file():
            return candidate
    logger.warning(f"설정 파일 없음: {filename} (탐색: {', '.join(str(d) for d in search_dirs)})")
    return None


ChangeHandler = Callable[[Config], None]


class ConfigChangeRegistry:
    """설정 변경 핸들러 모음.

    사용 예:
        registry = ConfigChangeRegistry()
        registry.on_change("log", lambda cfg: set_level("dca_system", cfg.log_level))
        registry.notify(config)
    """

    def __init__(self):
        self._handlers: dict[str, ChangeHandler] = {}

    def on_change(self, name: str, handler: ChangeHandler) -> None:
        if name in self._handlers:
            logger.warning(f"설정 변경 핸들러 재등록: {name}")
        self._handlers[name] = handler

    def names(self) -> list[str]:
        return list(self._handlers)

    def notify(self, config: Config) -> list[str]:
        """모든 핸들러 호출. 실패한 핸들러는 기록만 하고 나머지를 계속 실행.

        Returns:
            실패한 핸들러 이름 목록
        """
        failed = []
        for name, handler in self._handlers.items():
            try:
                handler(config)
            except Exception:
                logger.exception(f"설정 변경 핸들러 실패: {name}")
                failed.append(name)
        return failed
