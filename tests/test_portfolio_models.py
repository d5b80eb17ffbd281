import dataclasses

import pytest

from etf_portfolio_server.portfolio.models import (
    DividendFrequency,
    InvestmentStyle,
    Market,
    PortfolioOptions,
)


def test_options_coerce_enum_labels_and_names() -> None:
    options = PortfolioOptions(
        investment_amount=5_000,
        investment_style="HighDividend",
        number_of_etfs=3,
        market="미국",
        dividend_frequencies=frozenset({"monthly", "분기배당"}),
    )
    assert options.investment_style is InvestmentStyle.HIGH_DIVIDEND
    assert options.market is Market.FOREIGN
    assert options.sorted_frequencies() == [DividendFrequency.MONTHLY, DividendFrequency.QUARTERLY]


@pytest.mark.parametrize("amount", [0, -1, float("inf"), True, "1000"])
def test_options_reject_invalid_amount(amount: object) -> None:
    with pytest.raises(ValueError, match="investment_amount"):
        PortfolioOptions(investment_amount=amount)  # type: ignore[arg-type]


@pytest.mark.parametrize("count", [1, 9, 4.0])
def test_options_reject_invalid_etf_count(count: object) -> None:
    with pytest.raises(ValueError, match="number_of_etfs"):
        PortfolioOptions(investment_amount=1_000, number_of_etfs=count)  # type: ignore[arg-type]


def test_options_reject_unknown_market_and_cadence() -> None:
    with pytest.raises(ValueError, match="market"):
        PortfolioOptions(investment_amount=1_000, market="Japan")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="dividend frequency"):
        PortfolioOptions(investment_amount=1_000, dividend_frequencies=frozenset({"weekly"}))  # type: ignore[arg-type]


def test_options_are_immutable() -> None:
    options = PortfolioOptions(investment_amount=1_000)
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.number_of_etfs = 5  # type: ignore[misc]


def test_defaults_follow_market() -> None:
    assert PortfolioOptions.defaults_for("domestic").investment_amount == 10_000_000
    assert PortfolioOptions.defaults_for(Market.FOREIGN).investment_amount == 10_000
    combined = PortfolioOptions.defaults_for("한국 + 미국")
    assert combined.investment_amount == 20_000_000
    assert combined.number_of_etfs == 4
    assert combined.investment_style is InvestmentStyle.BALANCED


def test_from_arguments_parses_loose_values() -> None:
    options = PortfolioOptions.from_arguments(
        investment_amount="12,000",
        market="foreign",
        investment_style="stable",
        number_of_etfs="5",
        dividend_frequencies="연배당, monthly",
    )
    assert options.investment_amount == 12_000
    assert options.market is Market.FOREIGN
    assert options.investment_style is InvestmentStyle.STABLE
    assert options.number_of_etfs == 5
    assert options.to_dict()["dividend_frequencies"] == ["월배당", "연배당"]


def test_from_arguments_uses_market_default_amount() -> None:
    options = PortfolioOptions.from_arguments(market="combined")
    assert options.investment_amount == 20_000_000


def test_from_arguments_rejects_garbage_amount() -> None:
    with pytest.raises(ValueError, match="investment_amount"):
        PortfolioOptions.from_arguments(investment_amount="lots")


def test_market_currency() -> None:
    assert Market.FOREIGN.currency == "USD"
    assert Market.DOMESTIC.currency == "KRW"
    assert Market.COMBINED.currency == "KRW"
