"""Response formatting helpers."""

from __future__ import annotations

from collections.abc import Sequence

from etf_portfolio_server.portfolio.models import EtfEntry, Market

FINANCIAL_DISCLAIMER = "Informational use only. This is not financial advice."


def format_amount(value: float, market: Market) -> str:
    """Whole-unit amount: dollars for the foreign market, won otherwise."""
    rounded = int(round(value))
    if market is Market.FOREIGN:
        return f"${rounded:,}"
    return f"{rounded:,}원"


def format_investment_amount(value: float, market: Market) -> str:
    prefix = "$" if market.currency == "USD" else ""
    # Up to three fraction digits, trailing zeros dropped.
    number = f"{value:,.3f}".rstrip("0").rstrip(".")
    return f"{prefix}{number} {market.currency}"


def _fmt_percent(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:g}%"


def format_etf_card(entry: EtfEntry, amount: float, market: Market) -> list[str]:
    return [
        f"{entry.name} ({entry.ticker_symbol})",
        f"  Allocation: {_fmt_percent(entry.allocation_percentage)}",
        f"  Amount: {format_amount(amount, market)}",
        f"  Expected dividend yield: {_fmt_percent(entry.expected_dividend_yield)}",
        f"  Dividend frequency: {entry.dividend_frequency.value}",
        f"  Reasoning: {entry.reasoning}",
    ]


def format_portfolio(
    portfolio: Sequence[EtfEntry],
    total_amount: float,
    market: Market,
    include_disclaimer: bool = True,
) -> str:
    chunks: list[str] = [f"Dividend ETF portfolio ({format_investment_amount(total_amount, market)})"]
    if not portfolio:
        chunks.append("No ETFs were returned.")
    for entry in portfolio:
        chunks.extend(format_etf_card(entry, total_amount * entry.allocation_percentage / 100.0, market))
    if include_disclaimer:
        chunks.extend(["---", FINANCIAL_DISCLAIMER])
    return "\n".join(chunks)
