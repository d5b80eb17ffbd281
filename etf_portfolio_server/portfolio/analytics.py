"""Allocation breakdown for a processed portfolio."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pandas as pd

from etf_portfolio_server.lib.formatters import format_amount
from etf_portfolio_server.portfolio.models import EtfEntry, Market


def portfolio_frame(portfolio: Sequence[EtfEntry], total_amount: float) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "Ticker": entry.ticker_symbol,
                "Name": entry.name,
                "Allocation_Percent": entry.allocation_percentage,
                "Dividend_Yield": entry.expected_dividend_yield,
                "Dividend_Frequency": entry.dividend_frequency.value,
            }
            for entry in portfolio
        ],
        columns=["Ticker", "Name", "Allocation_Percent", "Dividend_Yield", "Dividend_Frequency"],
    )
    frame["Amount"] = float(total_amount) * frame["Allocation_Percent"].astype(float) / 100.0
    frame["Annual_Dividend"] = frame["Amount"] * frame["Dividend_Yield"].astype(float) / 100.0
    return frame


def calculate_weighted_yield(frame: pd.DataFrame) -> float:
    total = float(frame["Allocation_Percent"].sum())
    if total <= 0:
        return 0.0
    return float((frame["Allocation_Percent"] * frame["Dividend_Yield"]).sum() / total)


def calculate_frequency_distribution(frame: pd.DataFrame) -> dict[str, float]:
    totals = frame.groupby("Dividend_Frequency")["Allocation_Percent"].sum()
    return {label: round(float(value), 2) for label, value in totals.to_dict().items()}


def build_allocation_breakdown(
    portfolio: Sequence[EtfEntry],
    total_amount: float,
    market: Market,
) -> dict[str, Any]:
    """Per-ETF invested amount and expected dividend income, in portfolio order."""
    frame = portfolio_frame(portfolio, total_amount)
    holdings = [
        {
            "ticker_symbol": row.Ticker,
            "name": row.Name,
            "allocation_percentage": float(row.Allocation_Percent),
            "amount": round(float(row.Amount), 2),
            "formatted_amount": format_amount(float(row.Amount), market),
            "expected_annual_dividend": round(float(row.Annual_Dividend), 2),
        }
        for row in frame.itertuples(index=False)
    ]
    annual_dividend = float(frame["Annual_Dividend"].sum())
    return {
        "currency": market.currency,
        "total_amount": float(total_amount),
        "formatted_total_amount": format_amount(float(total_amount), market),
        "total_allocation_percentage": round(float(frame["Allocation_Percent"].sum()), 2),
        "weighted_dividend_yield": round(calculate_weighted_yield(frame), 2),
        "expected_annual_dividend": round(annual_dividend, 2),
        "formatted_annual_dividend": format_amount(annual_dividend, market),
        "frequency_distribution": calculate_frequency_distribution(frame),
        "holdings": holdings,
    }
