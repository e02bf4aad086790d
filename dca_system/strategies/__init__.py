"""
전략 모듈.

[ 전략 등록 ]
    클래스에 @register("이름")을 붙이면 STRATEGY_REGISTRY에 올라간다.
    run_dca.py / config.yaml은 strategy.name 문자열만으로 전략을 생성한다.

[ 등록된 전략 ]
    dca → strategies/dca_strategy.py::DCAStrategy

[ 새 전략 추가 ]
    TradingStrategy 상속 클래스를 이 디렉토리에 만들고 @register만 붙이면
    모듈 로드 시 자동 탐색으로 등록된다.
"""

from importlib import import_module
from pathlib import Path
from typing import Any

from dca_system.core.trading_strategy import TradingStrategy

# 전략 이름 → 전략 클래스
STRATEGY_REGISTRY: dict[str, type[TradingStrategy]] = {}


def register(name: str):
    """전략 클래스를 이름으로 등록하는 데코레이터."""
    def decorator(cls: type[TradingStrategy]):
        STRATEGY_REGISTRY[name] = cls
        return cls
    return decorator


def create_strategy(
    name: str,
    params: dict[str, Any] | None = None,
    **kwargs: Any,
) -> TradingStrategy:
    """등록된 이름으로 전략 인스턴스 생성.

    Args:
        name: 전략 이름 (예: "dca")
        params: DEFAULT_PARAMS를 덮어쓸 파라미터
        **kwargs: 전략 생성자에 그대로 전달 (예: clock)

    Raises:
        ValueError: 등록되지 않은 전략 이름
    """
    strategy_cls = STRATEGY_REGISTRY.get(name)
    if strategy_cls is None:
        available = ", ".join(list_strategies())
        raise ValueError(f"알 수 없는 전략: '{name}'. 사용 가능: {available}")
    return strategy_cls(params=params, **kwargs)


def list_strategies() -> list[str]:
    return sorted(STRATEGY_REGISTRY)


def _auto_discover():
    """같은 디렉토리의 전략 모듈을 모두 임포트해 @register를 실행시킨다."""
    for py_file in sorted(Path(__file__).parent.glob("*.py")):
        if py_file.name.startswith("_"):
            continue
        import_module(f"{__name__}.{py_file.stem}")


_auto_discover()
