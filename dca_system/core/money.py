"""
금액(Money) 모듈.

[ 역할 ]
    통화의 최소 단위(예: 센트) 정수로 금액을 표현.
    float 오차 없이 더하기/빼기/비교/비율 배분을 수행한다.

[ 핵심 규칙 ]
    - 서로 다른 통화끼리 연산/비교하면 CurrencyMismatchError
    - allocate()로 나눈 조각들의 합은 항상 원래 금액과 정확히 같다
      (나머지 최소 단위는 첫 번째 조각부터 1씩 배정)
    - 비율에 음수가 섞여도 된다 (예: 200% / -100% → 레버리지 누적 한도)

[ 호출하는 곳 ]
    - strategies/dca_strategy.py에서 목표금액 대비 한도 계산 (allocate_percent)
    - data/position.py에서 현금/누적 매수금액 장부 관리
    - data/kline.py에서 시세 가격 표현
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from dca_system.core.errors import CurrencyMismatchError


@dataclass(frozen=True)
class Currency:
    """통화 정보. fraction은 소수점 이하 자릿수 (USD=2, KRW=0)."""
    code: str
    fraction: int
    grapheme: str


CURRENCIES: dict[str, Currency] = {
    "USD": Currency("USD", 2, "$"),
    "EUR": Currency("EUR", 2, "€"),
    "GBP": Currency("GBP", 2, "£"),
    "CHF": Currency("CHF", 2, "CHF "),
    "CAD": Currency("CAD", 2, "CA$"),
    "AUD": Currency("AUD", 2, "A$"),
    "CNY": Currency("CNY", 2, "¥"),
    "JPY": Currency("JPY", 0, "¥"),
    "KRW": Currency("KRW", 0, "₩"),
}


def get_currency(code: str) -> Currency:
    """통화 코드로 Currency 조회.

    Raises:
        ValueError: 등록되지 않은 통화 코드
    """
    currency = CURRENCIES.get(code.upper())
    if currency is None:
        available = ", ".join(sorted(CURRENCIES))
        raise ValueError(f"알 수 없는 통화: '{code}'. 사용 가능: {available}")
    return currency


def _trunc_div(a: int, b: int) -> int:
    # 0 방향 버림 (음수에서도 -7 / 2 = -3)
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True)
class Money:
    """금액. amount는 최소 단위 정수, currency는 통화 코드."""
    amount: int
    currency: str = "USD"

    def __post_init__(self):
        object.__setattr__(self, "currency", get_currency(self.currency).code)

    # ─── 생성 ────────────────────────────────────────────────────────────

    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        return cls(0, currency)

    @classmethod
    def from_major(cls, value: str | int | float | Decimal, currency: str = "USD") -> "Money":
        """주 단위 값(예: "12.345" 달러)에서 생성. 최소 단위 미만은 버린다.

        float는 repr 문자열을 거쳐 변환하므로 0.1 같은 값도 정확히 10센트가 된다.
        """
        try:
            major = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"금액으로 변환할 수 없는 값: {value!r}") from e
        if not major.is_finite():
            raise ValueError(f"금액으로 변환할 수 없는 값: {value!r}")
        fraction = get_currency(currency).fraction
        minor = major.scaleb(fraction).to_integral_value(rounding=ROUND_DOWN)
        return cls(int(minor), currency)

    # ─── 변환 ────────────────────────────────────────────────────────────

    @property
    def fraction(self) -> int:
        return get_currency(self.currency).fraction

    def as_decimal(self) -> Decimal:
        return Decimal(self.amount).scaleb(-self.fraction)

    def as_major(self) -> float:
        """주 단위 float (예: 1234센트 → 12.34). 수량 계산용."""
        return self.amount / 10 ** self.fraction

    def display(self) -> str:
        """표시용 문자열 (예: $1,234.50, -₩3,000)."""
        currency = get_currency(self.currency)
        sign = "-" if self.amount < 0 else ""
        major = abs(self.as_decimal())
        return f"{sign}{currency.grapheme}{major:,.{currency.fraction}f}"

    def __str__(self) -> str:
        return self.display()

    # ─── 상태 ────────────────────────────────────────────────────────────

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_positive(self) -> bool:
        return self.amount > 0

    # ─── 연산 ────────────────────────────────────────────────────────────

    def _check_same_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Money와 연산할 수 없는 타입: {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                "서로 다른 통화끼리 연산할 수 없습니다",
                left=self.currency,
                right=other.currency,
            )

    def add(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def negate(self) -> "Money":
        return Money(-self.amount, self.currency)

    def multiply(self, factor: float | Decimal) -> "Money":
        """금액 × 배수. 최소 단위 미만은 0 방향으로 버림 (가격 × 보유수량 평가용)."""
        product = Decimal(self.amount) * Decimal(str(factor))
        return Money(int(product.to_integral_value(rounding=ROUND_DOWN)), self.currency)

    __add__ = add
    __sub__ = subtract
    __neg__ = negate

    def __lt__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.amount >= other.amount

    def allocate(self, *ratios: int) -> list["Money"]:
        """비율대로 금액을 나눈다. 조각 합계 == 원래 금액 (최소 단위까지 정확).

        각 조각 = amount * ratio / sum(ratios) (0 방향 버림),
        남은 최소 단위는 첫 번째 조각부터 1씩 배정.

        Raises:
            ValueError: 비율이 없거나 비율 합이 0
        """
        if not ratios:
            raise ValueError("배분 비율이 최소 1개 필요합니다")
        total = sum(ratios)
        if total == 0:
            raise ValueError(f"배분 비율의 합이 0입니다: {ratios}")

        parts = [_trunc_div(self.amount * r, total) for r in ratios]

        leftover = self.amount - sum(parts)
        step = 1 if leftover > 0 else -1
        i = 0
        while leftover != 0:
            parts[i % len(parts)] += step
            leftover -= step
            i += 1

        return [Money(p, self.currency) for p in parts]


def normalize_percent(p: float) -> int:
    """퍼센트 값을 정수 %로 정규화.

    1보다 크면 이미 % 단위 (200 → 200%), 1 이하면 비율로 보고 ×100 (0.10 → 10%).
    """
    if p > 1:
        return int(p)
    # 0.29 * 100 = 28.999... 같은 float 오차 흡수
    return int(round(p * 100))


def split_percent(total: Money, p: float) -> tuple[Money, Money]:
    """total을 (p% 몫, 나머지 몫)으로 나눈다. 두 몫의 합은 항상 total."""
    perc = normalize_percent(p)
    share, remainder = total.allocate(perc, 100 - perc)
    return share, remainder


def allocate_percent(total: Money, p: float) -> Money:
    """total의 p%. 나머지 몫과 합치면 정확히 total이 되도록 배분한 결과."""
    return split_percent(total, p)[0]
