"""Typed portfolio models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

MIN_ETFS = 2
MAX_ETFS = 8


class Market(str, Enum):
    DOMESTIC = "한국"
    FOREIGN = "미국"
    COMBINED = "한국 + 미국"

    @property
    def currency(self) -> str:
        return "USD" if self is Market.FOREIGN else "KRW"

    @property
    def default_amount(self) -> int:
        return {
            Market.DOMESTIC: 10_000_000,
            Market.FOREIGN: 10_000,
            Market.COMBINED: 20_000_000,
        }[self]


class InvestmentStyle(str, Enum):
    STABLE = "안정 성장형"
    HIGH_DIVIDEND = "고배당 추구형"
    BALANCED = "균형 투자형"


class DividendFrequency(str, Enum):
    MONTHLY = "월배당"
    QUARTERLY = "분기배당"
    SEMI_ANNUAL = "반기배당"
    ANNUAL = "연배당"
    IRREGULAR = "비정기"

    @classmethod
    def parse(cls, value: object) -> "DividendFrequency":
        """Resolve a wire label or an English cadence name; raises ValueError otherwise."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Dividend frequency must be a string, received {type(value).__name__}.")
        text = value.strip()
        try:
            return cls(text)
        except ValueError:
            pass
        alias = _FREQUENCY_ALIASES.get(text.lower().replace("_", "-"))
        if alias is None:
            raise ValueError(f"Unknown dividend frequency: {value!r}")
        return alias


_FREQUENCY_ALIASES = {
    "monthly": DividendFrequency.MONTHLY,
    "quarterly": DividendFrequency.QUARTERLY,
    "semi-annual": DividendFrequency.SEMI_ANNUAL,
    "semiannual": DividendFrequency.SEMI_ANNUAL,
    "annual": DividendFrequency.ANNUAL,
    "irregular": DividendFrequency.IRREGULAR,
}

ALL_DIVIDEND_FREQUENCIES: tuple[DividendFrequency, ...] = tuple(DividendFrequency)


def _parse_enum(enum_type: type[Enum], value: object, label: str) -> Any:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        text = value.strip()
        key = text.upper().replace("_", "").replace("-", "").replace(" ", "")
        for member in enum_type:
            if text == member.value or key == member.name.replace("_", ""):
                return member
    raise ValueError(f"{label} must be one of {[member.value for member in enum_type]}.")


@dataclass(frozen=True)
class PortfolioOptions:
    investment_amount: float
    investment_style: InvestmentStyle = InvestmentStyle.BALANCED
    number_of_etfs: int = 4
    market: Market = Market.DOMESTIC
    dividend_frequencies: frozenset[DividendFrequency] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        amount = self.investment_amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
            raise ValueError("investment_amount must be a positive number.")
        count = self.number_of_etfs
        if isinstance(count, bool) or not isinstance(count, int) or not MIN_ETFS <= count <= MAX_ETFS:
            raise ValueError(f"number_of_etfs must be an integer between {MIN_ETFS} and {MAX_ETFS}.")
        object.__setattr__(self, "investment_style", _parse_enum(InvestmentStyle, self.investment_style, "investment_style"))
        object.__setattr__(self, "market", _parse_enum(Market, self.market, "market"))
        object.__setattr__(
            self,
            "dividend_frequencies",
            frozenset(DividendFrequency.parse(item) for item in self.dividend_frequencies),
        )

    @classmethod
    def defaults_for(cls, market: Market | str = Market.DOMESTIC) -> "PortfolioOptions":
        resolved = _parse_enum(Market, market, "market")
        return cls(investment_amount=resolved.default_amount, market=resolved)

    @classmethod
    def from_arguments(
        cls,
        investment_amount: float | str | None = None,
        market: str = Market.DOMESTIC.value,
        investment_style: str = InvestmentStyle.BALANCED.value,
        number_of_etfs: int | str = 4,
        dividend_frequencies: str | list[str] | None = None,
    ) -> "PortfolioOptions":
        """Build options from loosely typed tool or prompt arguments."""
        resolved_market = _parse_enum(Market, market, "market")
        if investment_amount is None or investment_amount == "":
            amount: float = resolved_market.default_amount
        else:
            try:
                amount = float(str(investment_amount).replace(",", ""))
            except ValueError as error:
                raise ValueError("investment_amount must be a positive number.") from error
            if amount.is_integer():
                amount = int(amount)
        try:
            count = int(str(number_of_etfs).strip())
        except ValueError as error:
            raise ValueError(f"number_of_etfs must be an integer between {MIN_ETFS} and {MAX_ETFS}.") from error
        if isinstance(dividend_frequencies, str):
            raw_frequencies = [item for item in dividend_frequencies.split(",") if item.strip()]
        else:
            raw_frequencies = list(dividend_frequencies or [])
        return cls(
            investment_amount=amount,
            investment_style=investment_style,
            number_of_etfs=count,
            market=resolved_market,
            dividend_frequencies=frozenset(DividendFrequency.parse(item) for item in raw_frequencies),
        )

    def sorted_frequencies(self) -> list[DividendFrequency]:
        """Selected cadences in canonical enumeration order."""
        return [item for item in ALL_DIVIDEND_FREQUENCIES if item in self.dividend_frequencies]

    def to_dict(self) -> dict[str, Any]:
        return {
            "investment_amount": self.investment_amount,
            "investment_style": self.investment_style.value,
            "number_of_etfs": self.number_of_etfs,
            "market": self.market.value,
            "dividend_frequencies": [item.value for item in self.sorted_frequencies()],
        }


@dataclass(frozen=True)
class EtfEntry:
    name: str
    ticker_symbol: str
    allocation_percentage: float
    reasoning: str
    expected_dividend_yield: float
    dividend_frequency: DividendFrequency

    def with_allocation(self, allocation_percentage: float) -> "EtfEntry":
        return replace(self, allocation_percentage=allocation_percentage)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the same field names the model is asked to return."""
        return {
            "etfName": self.name,
            "tickerSymbol": self.ticker_symbol,
            "allocationPercentage": self.allocation_percentage,
            "reasoning": self.reasoning,
            "expectedDividendYield": self.expected_dividend_yield,
            "dividendFrequency": self.dividend_frequency.value,
        }


Portfolio = tuple[EtfEntry, ...]
